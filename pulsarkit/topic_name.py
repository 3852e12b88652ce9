"""Parsing of topic names into their name, namespace and partition."""

from __future__ import annotations

import re
from dataclasses import dataclass

PUBLIC_TENANT = "public"
DEFAULT_NAMESPACE = "default"
PARTITIONED_TOPIC_SUFFIX = "-partition-"

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class TopicName:
    """A fully qualified topic name with its namespace and partition (-1 if none)."""

    name: str = ""
    namespace: str = ""
    partition: int = -1


def parse_topic_name(topic: str) -> TopicName:
    """Parse a short or fully qualified topic name; raise ValueError if invalid."""
    if "://" not in topic:
        parts = topic.split("/")
        if len(parts) in (3, 4):
            topic = "persistent://" + topic
        elif len(parts) == 1:
            topic = f"persistent://{PUBLIC_TENANT}/{DEFAULT_NAMESPACE}/{parts[0]}"
        else:
            raise ValueError(
                f"Invalid short topic name '{topic}', it should be in the format "
                "of <tenant>/<namespace>/<topic> or <topic>"
            )

    domain, rest = topic.split("://", 1)
    if domain not in ("persistent", "non-persistent"):
        raise ValueError(f"Invalid topic domain: {domain}")

    parts = rest.split("/", 3)
    if len(parts) == 3:
        namespace = f"{parts[0]}/{parts[1]}"
    elif len(parts) == 4:
        namespace = f"{parts[0]}/{parts[1]}/{parts[2]}"
    else:
        raise ValueError(f"Invalid topic name: {topic}")

    return TopicName(name=topic, namespace=namespace, partition=_partition_index(topic))


def topic_name_without_partition_part(tn: TopicName) -> str:
    """Return the topic name with any ``-partition-N`` suffix removed."""
    if tn.partition < 0:
        return tn.name
    idx = tn.name.rfind(PARTITIONED_TOPIC_SUFFIX)
    if idx > 0:
        return tn.name[:idx]
    return tn.name


def _partition_index(topic: str) -> int:
    if PARTITIONED_TOPIC_SUFFIX not in topic:
        return -1
    suffix = topic[topic.rfind("-") + 1:]
    if not _INTEGER.fullmatch(suffix):
        raise ValueError(f"Invalid partition index '{suffix}' in topic: {topic}")
    return int(suffix)