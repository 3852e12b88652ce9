"""Building blocks for a message-broker client: buffers, framing, compression, routing, lookup and auth."""

__version__ = "0.1.0"

__all__ = [
    "auth",
    "backoff",
    "blocking_queue",
    "buffer",
    "checksum",
    "client_handlers",
    "commands",
    "compression",
    "default_router",
    "hashing",
    "lookup_service",
    "negative_acks",
    "topic_name",
    "utils",
]