import pytest

from pulsarkit.topic_name import (
    TopicName,
    parse_topic_name,
    topic_name_without_partition_part,
)


@pytest.mark.parametrize(
    "raw,name,namespace,partition",
    [
        (
            "persistent://my-tenant/my-ns/my-topic",
            "persistent://my-tenant/my-ns/my-topic",
            "my-tenant/my-ns",
            -1,
        ),
        ("my-topic", "persistent://public/default/my-topic", "public/default", -1),
        (
            "my-tenant/my-namespace/my-topic",
            "persistent://my-tenant/my-namespace/my-topic",
            "my-tenant/my-namespace",
            -1,
        ),
        (
            "non-persistent://my-tenant/my-namespace/my-topic",
            "non-persistent://my-tenant/my-namespace/my-topic",
            "my-tenant/my-namespace",
            -1,
        ),
        (
            "my-topic-partition-5",
            "persistent://public/default/my-topic-partition-5",
            "public/default",
            5,
        ),
        (
            "persistent://my-tenant/my-cluster/my-ns/my-topic",
            "persistent://my-tenant/my-cluster/my-ns/my-topic",
            "my-tenant/my-cluster/my-ns",
            -1,
        ),
        (
            "my-tenant/my-cluster/my-ns/my-topic",
            "persistent://my-tenant/my-cluster/my-ns/my-topic",
            "my-tenant/my-cluster/my-ns",
            -1,
        ),
    ],
)
def test_parse_topic_name(raw, name, namespace, partition):
    topic = parse_topic_name(raw)
    assert topic.name == name
    assert topic.namespace == namespace
    assert topic.partition == partition


@pytest.mark.parametrize(
    "raw",
    [
        "invalid://my-tenant/my-ns/my-topic",
        "invalid://my-tenant/my-ns/my-topic-partition-xyz",
        "my-tenant/my-ns/my-topic-partition-xyz/invalid",
        "persistent://my-tenant",
        "persistent://my-tenant/my-namespace",
        "persistent://my-tenant/my-cluster/my-ns/my-topic-partition-xyz/invalid",
        "a/b",
    ],
)
def test_parse_topic_name_errors(raw):
    with pytest.raises(ValueError):
        parse_topic_name(raw)


@pytest.mark.parametrize(
    "tn,expected",
    [
        (
            TopicName(name="persistent://public/default/my-topic", partition=-1),
            "persistent://public/default/my-topic",
        ),
        (
            TopicName(name="persistent://public/default/my-topic-partition-0", partition=0),
            "persistent://public/default/my-topic",
        ),
    ],
)
def test_topic_name_without_partition_part(tn, expected):
    assert topic_name_without_partition_part(tn) == expected


def test_without_partition_round_trip():
    topic = parse_topic_name("my-topic-partition-12")
    assert topic.partition == 12
    assert topic_name_without_partition_part(topic) == "persistent://public/default/my-topic"