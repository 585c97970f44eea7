"""Secret metadata: the header that describes a hidden payload.

The binary layout is a sequence of big-endian 32-bit unsigned integers,
with the secret name stored as raw UTF-8 bytes after its length:

    header size | format | encoding method | name length | name |
    secret size in bits | method-specific fields

For the LSB method the method-specific part is the number of bits used
per channel.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum

_UINT32_MAX = 0xFFFFFFFF


class SecretFormat(IntEnum):
    """Kind of payload carried by an image."""

    FILE = 0
    IMAGE = 1
    STRING = 2


class EncodingMethod(IntEnum):
    """Steganographic method used to embed the payload."""

    LSB = 0


@dataclass
class LSBHeader:
    """Parameters of least-significant-bit embedding."""

    bits_used_per_channel: int = 1


@dataclass
class SecretHeader:
    """Metadata describing a secret hidden in an image."""

    format: SecretFormat
    name: str
    secret_size_bits: int
    encoding_method: EncodingMethod = EncodingMethod.LSB
    encoding_header: LSBHeader = field(default_factory=LSBHeader)
    header_size_bytes: int = 0

    def __post_init__(self) -> None:
        try:
            self.format = SecretFormat(self.format)
        except ValueError:
            raise ValueError(f"invalid secret format: {self.format!r}") from None
        try:
            self.encoding_method = EncodingMethod(self.encoding_method)
        except ValueError:
            raise ValueError(
                f"invalid encoding method: {self.encoding_method!r}"
            ) from None


def _uint32(value: int) -> bytes:
    if not 0 <= value <= _UINT32_MAX:
        raise ValueError(f"value does not fit in 32 bits: {value}")
    return value.to_bytes(4, "big")


class _Reader:
    """Sequential reader of big-endian fields from a byte buffer."""

    def __init__(self, buffer: bytes) -> None:
        self._buffer = bytes(buffer)
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self._buffer):
            raise ValueError("secret header truncated: buffer overrun")
        chunk = self._buffer[self.offset:end]
        self.offset = end
        return chunk

    def uint32(self) -> int:
        return int.from_bytes(self.take(4), "big")


def encode_secret_header(header: SecretHeader) -> bytes:
    """Encode a header into its binary form; the leading size field is filled in."""
    if header.encoding_method is not EncodingMethod.LSB:
        raise ValueError(f"invalid encoding method: {header.encoding_method!r}")

    name_bytes = header.name.encode("utf-8")
    body = b"".join(
        (
            _uint32(int(header.format)),
            _uint32(int(header.encoding_method)),
            _uint32(len(name_bytes)),
            name_bytes,
            _uint32(header.secret_size_bits),
            _uint32(header.encoding_header.bits_used_per_channel),
        )
    )
    return _uint32(len(body) + 4) + body


def decode_secret_header(buffer: bytes) -> SecretHeader:
    """Decode a header from the start of ``buffer``; trailing bytes are ignored."""
    reader = _Reader(buffer)
    header_size = reader.uint32()

    format_value = reader.uint32()
    if format_value > max(SecretFormat):
        raise ValueError(f"invalid secret format: {format_value}")

    method_value = reader.uint32()
    try:
        method = EncodingMethod(method_value)
    except ValueError:
        raise ValueError(f"invalid encoding method: {method_value}") from None

    name_size = reader.uint32()
    try:
        name_bytes = reader.take(name_size)
    except ValueError:
        raise ValueError("secret header name exceeds buffer") from None
    name = name_bytes.decode("utf-8")

    secret_size = reader.uint32()
    encoding_header = LSBHeader(bits_used_per_channel=reader.uint32())

    return SecretHeader(
        format=SecretFormat(format_value),
        name=name,
        secret_size_bits=secret_size,
        encoding_method=method,
        encoding_header=encoding_header,
        header_size_bytes=header_size,
    )


def serialize_secret_header(header: SecretHeader) -> str:
    """Serialize a header to a compact JSON document."""
    document: dict = {
        "headerSizeBytes": header.header_size_bytes,
        "format": int(header.format),
        "encodingMethod": int(header.encoding_method),
        "name": header.name,
        "secretSizeBits": header.secret_size_bits,
    }
    if header.encoding_method is EncodingMethod.LSB:
        document["encodingHeader"] = {
            "bitsUsedPerChannel": header.encoding_header.bits_used_per_channel
        }
    return json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def deserialize_secret_header(json_str: str) -> SecretHeader:
    """Build a header from the JSON produced by :func:`serialize_secret_header`."""
    document = json.loads(json_str)
    try:
        method = EncodingMethod(int(document["encodingMethod"]))
        encoding_header = LSBHeader()
        if method is EncodingMethod.LSB:
            encoding_header = LSBHeader(
                bits_used_per_channel=int(
                    document["encodingHeader"]["bitsUsedPerChannel"]
                )
            )
        return SecretHeader(
            format=SecretFormat(int(document["format"])),
            name=str(document["name"]),
            secret_size_bits=int(document["secretSizeBits"]),
            encoding_method=method,
            encoding_header=encoding_header,
            header_size_bytes=int(document["headerSizeBytes"]),
        )
    except KeyError as exc:
        raise ValueError(f"secret header JSON lacks field {exc}") from None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid secret header JSON: {exc}") from None