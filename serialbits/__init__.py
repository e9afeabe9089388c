"""Compact binary serialization: stream adapters, length prefixes,
bit-packed value ranges and extensions."""

__version__ = "0.1.0"

__all__ = ["adapter_common", "stream", "value_range", "extensions"]