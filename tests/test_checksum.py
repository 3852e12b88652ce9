from pulsarkit.checksum import CheckSum, crc32c

# Single message in the older, non-batched wire format.
RAW_COMPAT_SINGLE_MESSAGE = bytes.fromhex(
    "0e010836b4660000"
    "00310a0f7374616e"
    "64616c6f6e652d37"
    "342d30100018acef"
    "e8a0e22d22060a01"
    "6112013122060a01"
    "6212013248056005"
    "82010068656c6c6f"
)

# Batch holding one message.
RAW_BATCH_MESSAGE_1 = bytes.fromhex(
    "0e011f8009680000"
    "001f0a0f7374616e"
    "64616c6f6e652d37"
    "342d31100018db80"
    "f4a0e22d58018201"
    "00000000160a060a"
    "01611201310a060a"
    "0162120132180528"
    "05400068656c6c6f"
)


def test_frame_checksum():
    data = bytes([1, 2, 3, 4, 5])
    f = CheckSum()
    assert f.compute() is None

    assert f.write(data) == 5
    assert f.compute() == crc32c(data).to_bytes(4, "big")


def test_standard_check_value():
    assert crc32c(b"123456789") == 0xE3069283


def test_empty_input():
    assert crc32c(b"") == 0
    f = CheckSum()
    f.write(b"")
    assert f.compute() == b"\x00\x00\x00\x00"


def test_incremental_matches_one_shot():
    data = b"the quick brown fox jumps over the lazy dog"
    f = CheckSum()
    f.write(data[:10])
    f.write(data[10:])
    assert f.compute() == crc32c(data).to_bytes(4, "big")


def test_checksum_of_wire_messages():
    for raw in (RAW_COMPAT_SINGLE_MESSAGE, RAW_BATCH_MESSAGE_1):
        stored = int.from_bytes(raw[2:6], "big")
        assert crc32c(raw[6:]) == stored