"""Utility helpers for the try-on studio."""

from .image_codec import encode, encode_bytes, strip_payload, decode

__all__ = [
    "encode",
    "encode_bytes",
    "strip_payload",
    "decode",
]
