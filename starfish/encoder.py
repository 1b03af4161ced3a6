"""Binary encoding of protocol message bodies."""

from __future__ import annotations

import logging
import struct
from typing import Any, Callable

from .protocol import (
    AbstractBranchEndRequest,
    AbstractBranchEndResponse,
    AbstractGlobalEndRequest,
    AbstractGlobalEndResponse,
    AbstractIdentifyRequest,
    AbstractIdentifyResponse,
    AbstractResultMessage,
    AbstractTransactionResponse,
    BranchCommitRequest,
    BranchCommitResponse,
    BranchRegisterRequest,
    BranchRegisterResponse,
    BranchReportRequest,
    BranchReportResponse,
    BranchRollbackRequest,
    BranchRollbackResponse,
    GlobalBeginRequest,
    GlobalBeginResponse,
    GlobalCommitRequest,
    GlobalCommitResponse,
    GlobalLockQueryRequest,
    GlobalLockQueryResponse,
    GlobalReportRequest,
    GlobalReportResponse,
    GlobalRollbackRequest,
    GlobalRollbackResponse,
    GlobalStatusRequest,
    GlobalStatusResponse,
    MergedWarpMessage,
    MergeResultMessage,
    RegisterRMRequest,
    RegisterRMResponse,
    RegisterTMRequest,
    RegisterTMResponse,
    ResultCode,
    UndoLogDeleteRequest,
)

logger = logging.getLogger(__name__)

# Failure messages longer than this are cut before they are sent.
MAX_RESULT_MESSAGE_LENGTH = 128

_SHORT_LIMIT = 0xFFFF
_LONG_LIMIT = 0xFFFFFFFF


def _short_bytes(data: bytes | None, name: str) -> bytes:
    data = data or b""
    if len(data) > _SHORT_LIMIT:
        raise ValueError(f"{name} is too long: {len(data)} bytes")
    return struct.pack(">H", len(data)) + data


def _long_bytes(data: bytes | None, name: str) -> bytes:
    data = data or b""
    if len(data) > _LONG_LIMIT:
        raise ValueError(f"{name} is too long: {len(data)} bytes")
    return struct.pack(">I", len(data)) + data


def _short_str(value: str, name: str) -> bytes:
    return _short_bytes(value.encode("utf-8"), name)


def _long_str(value: str, name: str) -> bytes:
    return _long_bytes(value.encode("utf-8"), name)


def _byte(value: int) -> bytes:
    return bytes([int(value) & 0xFF])


def _result_message(message: AbstractResultMessage) -> bytes:
    out = _byte(message.result_code)
    if message.result_code == ResultCode.FAILED:
        text = message.msg.encode("utf-8")[:MAX_RESULT_MESSAGE_LENGTH]
        out += _short_bytes(text, "msg")
    return out


def _identify_request(message: AbstractIdentifyRequest) -> bytes:
    return b"".join(
        (
            _short_str(message.version, "version"),
            _short_str(message.application_id, "application_id"),
            _short_str(message.transaction_service_group, "transaction_service_group"),
            _short_bytes(message.extra_data, "extra_data"),
        )
    )


def _identify_response(message: AbstractIdentifyResponse) -> bytes:
    return _byte(1 if message.identified else 0) + _short_str(message.version, "version")


def _register_rm_request(message: RegisterRMRequest) -> bytes:
    return _identify_request(message) + _long_str(message.resource_ids, "resource_ids")


def _transaction_response(message: AbstractTransactionResponse) -> bytes:
    return _result_message(message) + _byte(message.transaction_exception_code)


def _branch_end_request(message: AbstractBranchEndRequest) -> bytes:
    return b"".join(
        (
            _short_str(message.xid, "xid"),
            struct.pack(">q", message.branch_id),
            _byte(message.branch_type),
            _short_str(message.resource_id, "resource_id"),
            _long_bytes(message.application_data, "application_data"),
        )
    )


def _branch_end_response(message: AbstractBranchEndResponse) -> bytes:
    return b"".join(
        (
            _transaction_response(message),
            _short_str(message.xid, "xid"),
            struct.pack(">q", message.branch_id),
            _byte(message.branch_status),
        )
    )


def _global_end_request(message: AbstractGlobalEndRequest) -> bytes:
    return _short_str(message.xid, "xid") + _short_bytes(message.extra_data, "extra_data")


def _global_end_response(message: AbstractGlobalEndResponse) -> bytes:
    return _transaction_response(message) + _byte(message.global_status)


def _branch_register_request(message: BranchRegisterRequest) -> bytes:
    return b"".join(
        (
            _short_str(message.xid, "xid"),
            _byte(message.branch_type),
            _short_str(message.resource_id, "resource_id"),
            _long_str(message.lock_key, "lock_key"),
            _long_bytes(message.application_data, "application_data"),
        )
    )


def _branch_register_response(message: BranchRegisterResponse) -> bytes:
    return _transaction_response(message) + struct.pack(">q", message.branch_id)


def _branch_report_request(message: BranchReportRequest) -> bytes:
    return b"".join(
        (
            _short_str(message.xid, "xid"),
            struct.pack(">q", message.branch_id),
            _byte(message.status),
            _short_str(message.resource_id, "resource_id"),
            _long_bytes(message.application_data, "application_data"),
            _byte(message.branch_type),
        )
    )


def _global_begin_request(message: GlobalBeginRequest) -> bytes:
    return struct.pack(">i", message.timeout) + _short_str(
        message.transaction_name, "transaction_name"
    )


def _global_begin_response(message: GlobalBeginResponse) -> bytes:
    return b"".join(
        (
            _transaction_response(message),
            _short_str(message.xid, "xid"),
            _short_bytes(message.extra_data, "extra_data"),
        )
    )


def _global_lock_query_response(message: GlobalLockQueryResponse) -> bytes:
    return _transaction_response(message) + struct.pack(">H", 1 if message.lockable else 0)


def _global_report_request(message: GlobalReportRequest) -> bytes:
    return _global_end_request(message) + _byte(message.global_status)


def _undo_log_delete_request(message: UndoLogDeleteRequest) -> bytes:
    return b"".join(
        (
            _byte(message.branch_type),
            _short_str(message.resource_id, "resource_id"),
            struct.pack(">h", message.save_days),
        )
    )


def _merged(message: MergedWarpMessage | MergeResultMessage) -> bytes:
    if len(message.msgs) > _SHORT_LIMIT:
        raise ValueError(f"too many merged messages: {len(message.msgs)}")
    body = struct.pack(">H", len(message.msgs)) + b"".join(
        encode(item) for item in message.msgs
    )
    if len(message.msgs) > 20:
        logger.debug("msg in one packet: %d, buffer size: %d", len(message.msgs), len(body))
    return struct.pack(">I", len(body)) + body


_ENCODERS: dict[type, Callable[[Any], bytes]] = {
    MergedWarpMessage: _merged,
    MergeResultMessage: _merged,
    RegisterTMRequest: _identify_request,
    RegisterTMResponse: _identify_response,
    RegisterRMRequest: _register_rm_request,
    RegisterRMResponse: _identify_response,
    BranchCommitRequest: _branch_end_request,
    BranchCommitResponse: _branch_end_response,
    BranchRollbackRequest: _branch_end_request,
    BranchRollbackResponse: _branch_end_response,
    BranchRegisterRequest: _branch_register_request,
    BranchRegisterResponse: _branch_register_response,
    BranchReportRequest: _branch_report_request,
    BranchReportResponse: _transaction_response,
    GlobalBeginRequest: _global_begin_request,
    GlobalBeginResponse: _global_begin_response,
    GlobalCommitRequest: _global_end_request,
    GlobalCommitResponse: _global_end_response,
    GlobalRollbackRequest: _global_end_request,
    GlobalRollbackResponse: _global_end_response,
    GlobalStatusRequest: _global_end_request,
    GlobalStatusResponse: _global_end_response,
    GlobalLockQueryRequest: _branch_register_request,
    GlobalLockQueryResponse: _global_lock_query_response,
    GlobalReportRequest: _global_report_request,
    GlobalReportResponse: _global_end_response,
    UndoLogDeleteRequest: _undo_log_delete_request,
}


def encode_body(message: Any) -> bytes:
    """Encode the body of message, without its type code.

    Raises ValueError for a message kind that has no encoding or a field too
    long for its length prefix.
    """
    encoder = _ENCODERS.get(type(message))
    if encoder is None:
        raise ValueError(f"unsupported message type: {type(message).__name__}")
    return encoder(message)


def encode(message: Any) -> bytes:
    """Encode message as its two-byte type code followed by its body."""
    body = encode_body(message)
    return struct.pack(">H", int(message.type_code)) + body