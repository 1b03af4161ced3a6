"""Binary decoding of protocol message bodies that hold no nested messages."""

from __future__ import annotations

import struct
from typing import Any, Callable

from .meta import BranchStatus, BranchType, GlobalStatus, TransactionExceptionCode
from .protocol import (
    AbstractBranchEndRequest,
    AbstractBranchEndResponse,
    AbstractGlobalEndRequest,
    AbstractGlobalEndResponse,
    AbstractIdentifyRequest,
    AbstractIdentifyResponse,
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
    MessageType,
    RegisterRMRequest,
    RegisterRMResponse,
    RegisterTMRequest,
    RegisterTMResponse,
    ResultCode,
    UndoLogDeleteRequest,
)


class _Reader:
    """Big-endian reader over a byte string that tracks how much it consumed."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self.pos = 0

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self._data):
            raise ValueError(
                f"message body is truncated: need {size} bytes at offset {self.pos}, "
                f"have {len(self._data) - self.pos}"
            )
        chunk = self._data[self.pos:end]
        self.pos = end
        return chunk

    def unpack(self, fmt: str) -> int:
        (value,) = struct.unpack(fmt, self.take(struct.calcsize(fmt)))
        return value

    def byte(self) -> int:
        return self.unpack(">B")

    def short_bytes(self) -> bytes | None:
        size = self.unpack(">H")
        return self.take(size) if size else None

    def long_bytes(self) -> bytes | None:
        size = self.unpack(">I")
        return self.take(size) if size else None

    def short_str(self) -> str:
        return (self.short_bytes() or b"").decode("utf-8")

    def long_str(self) -> str:
        return (self.long_bytes() or b"").decode("utf-8")


def _result_fields(reader: _Reader) -> dict[str, Any]:
    result_code = ResultCode(reader.byte())
    fields: dict[str, Any] = {"result_code": result_code}
    if result_code == ResultCode.FAILED:
        fields["msg"] = reader.short_str()
    return fields


def _transaction_fields(reader: _Reader) -> dict[str, Any]:
    fields = _result_fields(reader)
    fields["transaction_exception_code"] = TransactionExceptionCode(reader.byte())
    return fields


def _identify_request_fields(reader: _Reader) -> dict[str, Any]:
    return {
        "version": reader.short_str(),
        "application_id": reader.short_str(),
        "transaction_service_group": reader.short_str(),
        "extra_data": reader.short_bytes(),
    }


def _identify_response_fields(reader: _Reader) -> dict[str, Any]:
    identified = reader.byte() == 1
    return {"identified": identified, "version": reader.short_str()}


def _branch_end_request_fields(reader: _Reader) -> dict[str, Any]:
    return {
        "xid": reader.short_str(),
        "branch_id": reader.unpack(">q"),
        "branch_type": BranchType(reader.byte()),
        "resource_id": reader.short_str(),
        "application_data": reader.long_bytes(),
    }


def _branch_end_response_fields(reader: _Reader) -> dict[str, Any]:
    fields = _transaction_fields(reader)
    fields["xid"] = reader.short_str()
    fields["branch_id"] = reader.unpack(">q")
    fields["branch_status"] = BranchStatus(reader.byte())
    return fields


def _global_end_request_fields(reader: _Reader) -> dict[str, Any]:
    return {"xid": reader.short_str(), "extra_data": reader.short_bytes()}


def _global_end_response_fields(reader: _Reader) -> dict[str, Any]:
    fields = _transaction_fields(reader)
    fields["global_status"] = GlobalStatus(reader.byte())
    return fields


def _branch_register_request_fields(reader: _Reader) -> dict[str, Any]:
    return {
        "xid": reader.short_str(),
        "branch_type": BranchType(reader.byte()),
        "resource_id": reader.short_str(),
        "lock_key": reader.long_str(),
        "application_data": reader.long_bytes(),
    }


def _branch_register_response_fields(reader: _Reader) -> dict[str, Any]:
    fields = _transaction_fields(reader)
    fields["branch_id"] = reader.unpack(">q")
    return fields


def _branch_report_request_fields(reader: _Reader) -> dict[str, Any]:
    return {
        "xid": reader.short_str(),
        "branch_id": reader.unpack(">q"),
        "status": BranchStatus(reader.byte()),
        "resource_id": reader.short_str(),
        "application_data": reader.long_bytes(),
        "branch_type": BranchType(reader.byte()),
    }


def _global_begin_request_fields(reader: _Reader) -> dict[str, Any]:
    return {"timeout": reader.unpack(">i"), "transaction_name": reader.short_str()}


def _global_begin_response_fields(reader: _Reader) -> dict[str, Any]:
    fields = _transaction_fields(reader)
    fields["xid"] = reader.short_str()
    fields["extra_data"] = reader.short_bytes()
    return fields


def _global_lock_query_response_fields(reader: _Reader) -> dict[str, Any]:
    fields = _transaction_fields(reader)
    fields["lockable"] = reader.unpack(">H") == 1
    return fields


def _global_report_request_fields(reader: _Reader) -> dict[str, Any]:
    fields = _global_end_request_fields(reader)
    fields["global_status"] = GlobalStatus(reader.byte())
    return fields


def _undo_log_delete_request_fields(reader: _Reader) -> dict[str, Any]:
    return {
        "branch_type": BranchType(reader.byte()),
        "resource_id": reader.short_str(),
        "save_days": reader.unpack(">h"),
    }


def _register_rm_request_fields(reader: _Reader) -> dict[str, Any]:
    fields = _identify_request_fields(reader)
    fields["resource_ids"] = reader.long_str()
    return fields


_DECODERS: dict[MessageType, tuple[type, Callable[[_Reader], dict[str, Any]]]] = {
    MessageType.REG_CLT: (RegisterTMRequest, _identify_request_fields),
    MessageType.REG_CLT_RESULT: (RegisterTMResponse, _identify_response_fields),
    MessageType.REG_RM: (RegisterRMRequest, _register_rm_request_fields),
    MessageType.REG_RM_RESULT: (RegisterRMResponse, _identify_response_fields),
    MessageType.BRANCH_COMMIT: (BranchCommitRequest, _branch_end_request_fields),
    MessageType.BRANCH_COMMIT_RESULT: (BranchCommitResponse, _branch_end_response_fields),
    MessageType.BRANCH_ROLLBACK: (BranchRollbackRequest, _branch_end_request_fields),
    MessageType.BRANCH_ROLLBACK_RESULT: (
        BranchRollbackResponse,
        _branch_end_response_fields,
    ),
    MessageType.BRANCH_REGISTER: (BranchRegisterRequest, _branch_register_request_fields),
    MessageType.BRANCH_REGISTER_RESULT: (
        BranchRegisterResponse,
        _branch_register_response_fields,
    ),
    MessageType.BRANCH_STATUS_REPORT: (BranchReportRequest, _branch_report_request_fields),
    MessageType.BRANCH_STATUS_REPORT_RESULT: (BranchReportResponse, _transaction_fields),
    MessageType.GLOBAL_BEGIN: (GlobalBeginRequest, _global_begin_request_fields),
    MessageType.GLOBAL_BEGIN_RESULT: (GlobalBeginResponse, _global_begin_response_fields),
    MessageType.GLOBAL_COMMIT: (GlobalCommitRequest, _global_end_request_fields),
    MessageType.GLOBAL_COMMIT_RESULT: (GlobalCommitResponse, _global_end_response_fields),
    MessageType.GLOBAL_ROLLBACK: (GlobalRollbackRequest, _global_end_request_fields),
    MessageType.GLOBAL_ROLLBACK_RESULT: (
        GlobalRollbackResponse,
        _global_end_response_fields,
    ),
    MessageType.GLOBAL_STATUS: (GlobalStatusRequest, _global_end_request_fields),
    MessageType.GLOBAL_STATUS_RESULT: (GlobalStatusResponse, _global_end_response_fields),
    MessageType.GLOBAL_LOCK_QUERY: (
        GlobalLockQueryRequest,
        _branch_register_request_fields,
    ),
    MessageType.GLOBAL_LOCK_QUERY_RESULT: (
        GlobalLockQueryResponse,
        _global_lock_query_response_fields,
    ),
    MessageType.GLOBAL_REPORT: (GlobalReportRequest, _global_report_request_fields),
    MessageType.GLOBAL_REPORT_RESULT: (GlobalReportResponse, _global_end_response_fields),
    MessageType.RM_DELETE_UNDOLOG: (UndoLogDeleteRequest, _undo_log_delete_request_fields),
}


def decode_body(type_code: int, data: bytes) -> tuple[Any, int]:
    """Decode a message body of the given type code from the start of data.

    Returns the message and the number of bytes it took up. Raises ValueError
    for a type code without a flat body decoding (merged messages included),
    for truncated data and for out-of-range enumerated fields.
    """
    try:
        entry = _DECODERS.get(MessageType(type_code))
    except ValueError:
        entry = None
    if entry is None:
        raise ValueError(f"unsupported type code: {type_code}")
    message_class, read_fields = entry
    reader = _Reader(data)
    message = message_class(**read_fields(reader))
    return message, reader.pos