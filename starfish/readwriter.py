"""Framing of RPC messages on the wire.

A frame is a 16-byte header (magic, version, full length, head length,
message type, codec, compressor, request id), an optional head map and a body.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any

from .codec import message_decoder, message_encoder
from .constants import (
    MAGIC_CODE_BYTES,
    MAX_FRAME_LENGTH,
    MSG_TYPE_HEARTBEAT_REQUEST,
    MSG_TYPE_HEARTBEAT_RESPONSE,
    PROTOCOL_VERSION,
    V1_HEAD_LENGTH,
)
from .protocol import HEARTBEAT_PING, HEARTBEAT_PONG, RpcMessage

logger = logging.getLogger(__name__)

_HEADER = struct.Struct(">BBBIHBBBi")
_LENGTH = struct.Struct(">H")
_LENGTH_LIMIT = 0xFFFF


class PackageError(Exception):
    """A frame could not be read or written."""


class NotEnoughStream(PackageError):
    """Not enough bytes have arrived to read a frame header."""


class PackageTooLarge(PackageError):
    """A frame is longer than the protocol allows."""


class InvalidPackage(PackageError):
    """A frame or what is to be framed is malformed."""


class IllegalMagic(PackageError):
    """A frame does not start with the magic code."""


@dataclass
class PackageHeader:
    """The fixed header of a frame and the head map that follows it."""

    magic0: int = MAGIC_CODE_BYTES[0]
    magic1: int = MAGIC_CODE_BYTES[1]
    version: int = PROTOCOL_VERSION
    total_length: int = 0
    head_length: int = 0
    message_type: int = 0
    codec_type: int = 0
    compress_type: int = 0
    id: int = 0
    meta: dict[str, str] = field(default_factory=dict)
    body_length: int = 0

    @classmethod
    def unmarshal(cls, data: bytes) -> PackageHeader:
        """Read the header at the start of data.

        Raises NotEnoughStream if the header is not complete yet, IllegalMagic
        for a wrong magic code and InvalidPackage for inconsistent lengths.
        """
        data = bytes(data)
        if len(data) < V1_HEAD_LENGTH:
            raise NotEnoughStream("packet stream is not enough")
        (
            magic0,
            magic1,
            version,
            total_length,
            head_length,
            message_type,
            codec_type,
            compress_type,
            message_id,
        ) = _HEADER.unpack_from(data)
        if bytes((magic0, magic1)) != MAGIC_CODE_BYTES:
            raise IllegalMagic("package magic is not right")
        if head_length < V1_HEAD_LENGTH or total_length < head_length:
            raise InvalidPackage(
                f"invalid lengths: total {total_length}, head {head_length}"
            )
        if len(data) < head_length:
            raise NotEnoughStream("packet stream is not enough")
        meta = decode_head_map(data[V1_HEAD_LENGTH:head_length])
        return cls(
            magic0=magic0,
            magic1=magic1,
            version=version,
            total_length=total_length,
            head_length=head_length,
            message_type=message_type,
            codec_type=codec_type,
            compress_type=compress_type,
            id=message_id,
            meta=meta,
            body_length=total_length - head_length,
        )


class RpcPackageHandler:
    """Turns bytes into RpcMessages and back."""

    def read(self, data: bytes) -> tuple[RpcMessage | None, int]:
        """Read one frame from the start of data.

        Returns the message and the frame length. Returns (None, 0) while the
        header is incomplete and (None, frame length) while the body is.
        """
        data = bytes(data)
        try:
            header = PackageHeader.unmarshal(data)
        except NotEnoughStream:
            return None, 0
        if header.total_length > MAX_FRAME_LENGTH:
            raise PackageTooLarge(
                f"package length {header.total_length} exceeds {MAX_FRAME_LENGTH}"
            )
        if len(data) < header.total_length:
            return None, header.total_length

        message = RpcMessage(
            id=header.id,
            message_type=header.message_type,
            codec=header.codec_type,
            compressor=header.compress_type,
            head_map=dict(header.meta),
        )
        if header.message_type == MSG_TYPE_HEARTBEAT_REQUEST:
            message.body = HEARTBEAT_PING
        elif header.message_type == MSG_TYPE_HEARTBEAT_RESPONSE:
            message.body = HEARTBEAT_PONG
        elif header.body_length > 0:
            body = data[header.head_length:header.total_length]
            try:
                message.body, _ = message_decoder(header.codec_type, body)
            except ValueError as exc:
                logger.error("cannot decode body of message %d: %s", header.id, exc)
        return message, header.total_length

    def write(self, message: Any) -> bytes:
        """Frame message; raises InvalidPackage if it is not an RpcMessage."""
        if not isinstance(message, RpcMessage):
            raise InvalidPackage("invalid rpc package")
        head_map = encode_head_map(message.head_map) if message.head_map else b""
        body = b""
        if message.message_type not in (
            MSG_TYPE_HEARTBEAT_REQUEST,
            MSG_TYPE_HEARTBEAT_RESPONSE,
        ):
            body = message_encoder(message.codec, message.body)
        head_length = V1_HEAD_LENGTH + len(head_map)
        full_length = head_length + len(body)
        if head_length > _LENGTH_LIMIT:
            raise InvalidPackage(f"head map too long: {len(head_map)} bytes")
        header = _HEADER.pack(
            MAGIC_CODE_BYTES[0],
            MAGIC_CODE_BYTES[1],
            PROTOCOL_VERSION,
            full_length,
            head_length,
            message.message_type,
            message.codec,
            message.compressor,
            message.id,
        )
        return header + head_map + body


def encode_head_map(head_map: dict[str, str]) -> bytes:
    """Encode a head map as length-prefixed key and value strings."""
    parts = []
    for key, value in head_map.items():
        for text in (key, value):
            raw = text.encode("utf-8")
            if len(raw) > _LENGTH_LIMIT:
                raise ValueError(f"head map entry too long: {len(raw)} bytes")
            parts.append(_LENGTH.pack(len(raw)))
            parts.append(raw)
    return b"".join(parts)


def decode_head_map(data: bytes) -> dict[str, str]:
    """Decode a head map; raises InvalidPackage if it is truncated."""
    data = bytes(data)
    result: dict[str, str] = {}
    offset = 0

    def read_text() -> str:
        nonlocal offset
        if offset + _LENGTH.size > len(data):
            raise InvalidPackage("head map is truncated")
        (size,) = _LENGTH.unpack_from(data, offset)
        offset += _LENGTH.size
        if offset + size > len(data):
            raise InvalidPackage("head map is truncated")
        text = data[offset:offset + size].decode("utf-8")
        offset += size
        return text

    while offset < len(data):
        key = read_text()
        result[key] = read_text()
    return result