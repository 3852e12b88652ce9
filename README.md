# pulsarkit

Building blocks for talking to a Pulsar-style message broker. It holds the
parts of a client that do not need an open network connection:

- `pulsarkit.buffer`: a growable byte `Buffer` with separate reader and writer
  indexes and big-endian integer helpers. `wrap(data)` turns existing bytes
  into a readable buffer.
- `pulsarkit.checksum`: `crc32c(data)` and an incremental `CheckSum`.
- `pulsarkit.hashing`: `java_string_hash(s)` and `murmur3_32_hash(s)`. These
  give the same values as the Java client, so keys land on the same
  partitions.
- `pulsarkit.utils`: `timestamp_millis(t)` and a thread-safe
  `SequenceGenerator`.
- `pulsarkit.backoff`: a doubling reconnect `Backoff` between 100 ms and 60 s.
  `next_delay()` returns the delay in seconds.
- `pulsarkit.blocking_queue`: a bounded, thread-safe `BlockingQueue` whose
  `put` blocks when the queue is full and `take` blocks when it is empty.
- `pulsarkit.compression`: `NoopProvider`, `ZLibProvider`, `Lz4Provider` (raw
  LZ4 blocks) and `ZStdProvider`. `decompress` raises `ValueError` on bad
  input.
- `pulsarkit.topic_name`: `parse_topic_name(topic)` and
  `topic_name_without_partition_part(tn)`.
- `pulsarkit.default_router`: `new_default_router(clock, hash_func, max_batching_delay_ns)`.
  Messages with a key go to the partition given by the key's hash. Messages
  without a key are routed round-robin, and the partition changes once per
  batching window.
- `pulsarkit.auth`: the `DisabledAuth`, `TLSAuth` and `TokenAuth` providers,
  with factory functions such as `new_authentication_token(token)` and
  `new_authentication_token_from_file(path)`. `new_provider(name, params)`
  picks a provider by name. It does not parse `params`, so asking it for
  `"token"` raises `ValueError` for the missing configuration.
- `pulsarkit.client_handlers`: `ClientHandlers`, a registry of `Closable`
  resources that are all closed together.
- `pulsarkit.negative_acks`: `MessageId` and `NegativeAcksTracker`. The tracker
  calls `redeliver(ids)` on your consumer object once the delay has passed for
  the negatively acknowledged batch entries.
- `pulsarkit.commands`: `MessageMetadata`, `SingleMessageMetadata` and
  `KeyValue` with their protobuf encoding, `MessageReader` for parsing
  received frames, and `add_single_message_to_batch` and `serialize_batch` for
  writing them.
- `pulsarkit.lookup_service`: `LookupService`. It follows broker redirects, up
  to 20 of them, to find the broker that serves a topic.

## What it does not do

pulsarkit opens no sockets. It has no broker connection, no producer and no
consumer, and no command-line tool. `LookupService` sends its requests through
an RPC client object that you supply. That object needs `new_request_id`,
`request_to_any_broker` and `request` methods.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Topic names:

```python
from pulsarkit.topic_name import parse_topic_name

tn = parse_topic_name("my-topic-partition-5")
print(tn.name)       # persistent://public/default/my-topic-partition-5
print(tn.namespace)  # public/default
print(tn.partition)  # 5
```

Compression:

```python
from pulsarkit.compression import ZStdProvider

provider = ZStdProvider()
packed = provider.compress(b"hello")
assert provider.decompress(packed, 5) == b"hello"
```

Routing:

```python
from pulsarkit.default_router import new_default_router, system_clock
from pulsarkit.hashing import java_string_hash

route = new_default_router(system_clock(), java_string_hash, 10_000_000)
partition = route("my-key", 8)
```

Reading a message:

```python
from pulsarkit.commands import MessageReader

reader = MessageReader.from_bytes(raw_frame)
metadata = reader.read_message_metadata()
for single_metadata, payload in reader:
    ...
```

Here `raw_frame` is the headers and payload of one received message.
`read_message` raises `EndOfMessages` when the frame holds no more messages.