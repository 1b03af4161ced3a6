"""Message body codec, with support for merged batches of messages."""

from __future__ import annotations

import struct
from typing import Any

from . import decoding
from .encoder import encode
from .protocol import CodecType, MergedWarpMessage, MergeResultMessage, MessageType

_TYPE_CODE = struct.Struct(">H")
_MERGED_PREFIX_LENGTH = 4 + 2


def _read_type_code(data: bytes, offset: int) -> int:
    if offset + _TYPE_CODE.size > len(data):
        raise ValueError(f"message is truncated: no type code at offset {offset}")
    (type_code,) = _TYPE_CODE.unpack_from(data, offset)
    return type_code


def _decode_merged(data: bytes, message_class: type) -> tuple[Any, int]:
    if len(data) < _MERGED_PREFIX_LENGTH:
        raise ValueError("merged message is truncated: missing length and count")
    # The leading 32-bit body length is not needed to walk the messages.
    (count,) = struct.unpack_from(">H", data, 4)
    offset = _MERGED_PREFIX_LENGTH
    messages = []
    for _ in range(count):
        type_code = _read_type_code(data, offset)
        offset += _TYPE_CODE.size
        message, size = decode_body(type_code, data[offset:])
        offset += size
        messages.append(message)
    return message_class(msgs=messages), offset


def decode_merged_warp_message(data: bytes) -> tuple[MergedWarpMessage, int]:
    """Decode a merged request batch; return it and the bytes it took up."""
    return _decode_merged(bytes(data), MergedWarpMessage)


def decode_merge_result_message(data: bytes) -> tuple[MergeResultMessage, int]:
    """Decode a merged reply batch; return it and the bytes it took up."""
    return _decode_merged(bytes(data), MergeResultMessage)


def decode_body(type_code: int, data: bytes) -> tuple[Any, int]:
    """Decode a body of any supported type code from the start of data.

    Returns the message and the number of bytes it took up. Raises ValueError
    for an unsupported type code or truncated data.
    """
    if type_code == MessageType.STARFISH_MERGE:
        return decode_merged_warp_message(data)
    if type_code == MessageType.STARFISH_MERGE_RESULT:
        return decode_merge_result_message(data)
    return decoding.decode_body(type_code, data)


def decode(data: bytes) -> tuple[Any, int]:
    """Decode a type code and the body that follows it.

    Returns the message and the number of bytes consumed, type code included.
    """
    data = bytes(data)
    type_code = _read_type_code(data, 0)
    message, size = decode_body(type_code, data[_TYPE_CODE.size:])
    return message, size + _TYPE_CODE.size


def _check_codec(codec_type: int) -> None:
    if codec_type != CodecType.SEATA:
        raise ValueError(f"unsupported codec type: {codec_type}")


def message_encoder(codec_type: int, message: Any) -> bytes:
    """Encode message with the given codec; only the SEATA codec is supported."""
    _check_codec(codec_type)
    return encode(message)


def message_decoder(codec_type: int, data: bytes) -> tuple[Any, int]:
    """Decode data with the given codec; only the SEATA codec is supported."""
    _check_codec(codec_type)
    return decode(data)