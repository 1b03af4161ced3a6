"""Protocol message model: message types, RPC envelopes and transaction messages."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from .meta import (
    BranchStatus,
    BranchType,
    GlobalStatus,
    TransactionException,
    TransactionExceptionCode,
)


class MessageType(IntEnum):
    """Type code that identifies a message body on the wire."""

    GLOBAL_BEGIN = 1
    GLOBAL_BEGIN_RESULT = 2
    BRANCH_COMMIT = 3
    BRANCH_COMMIT_RESULT = 4
    BRANCH_ROLLBACK = 5
    BRANCH_ROLLBACK_RESULT = 6
    GLOBAL_COMMIT = 7
    GLOBAL_COMMIT_RESULT = 8
    GLOBAL_ROLLBACK = 9
    GLOBAL_ROLLBACK_RESULT = 10
    BRANCH_REGISTER = 11
    BRANCH_REGISTER_RESULT = 12
    BRANCH_STATUS_REPORT = 13
    BRANCH_STATUS_REPORT_RESULT = 14
    GLOBAL_STATUS = 15
    GLOBAL_STATUS_RESULT = 16
    GLOBAL_REPORT = 17
    GLOBAL_REPORT_RESULT = 18
    GLOBAL_LOCK_QUERY = 21
    GLOBAL_LOCK_QUERY_RESULT = 22
    STARFISH_MERGE = 59
    STARFISH_MERGE_RESULT = 60
    REG_CLT = 101
    REG_CLT_RESULT = 102
    REG_RM = 103
    REG_RM_RESULT = 104
    RM_DELETE_UNDOLOG = 111


class CodecType(IntEnum):
    """Serializer used for a message body."""

    SEATA = 0x1
    PROTOBUF = 0x2
    KRYO = 0x4
    FST = 0x8


class ResultCode(IntEnum):
    """Outcome carried by a result message."""

    FAILED = 0
    SUCCESS = 1


@dataclass(frozen=True)
class HeartBeatMessage:
    """Heartbeat body: a ping from the client or a pong from the server."""

    ping: bool

    def __str__(self) -> str:
        return "services ping" if self.ping else "services pong"


HEARTBEAT_PING = HeartBeatMessage(True)
HEARTBEAT_PONG = HeartBeatMessage(False)


@dataclass(kw_only=True)
class RpcMessage:
    """An RPC frame: header fields, optional head map and a body."""

    id: int = 0
    message_type: int = 0
    codec: int = 0
    compressor: int = 0
    head_map: dict[str, str] = field(default_factory=dict)
    body: Any = None


class MessageFuture:
    """Pending reply to a request, completed by a response or an error."""

    def __init__(self, id: int) -> None:
        self.id = id
        self.response: Any = None
        self.error: BaseException | None = None
        self._done = threading.Event()

    @classmethod
    def for_message(cls, message: RpcMessage) -> MessageFuture:
        """Create a future waiting for the reply to message."""
        return cls(message.id)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def set_response(self, response: Any) -> None:
        self.response = response
        self._done.set()

    def set_error(self, err: BaseException) -> None:
        self.error = err
        self._done.set()

    def wait(self, timeout: float | None = None) -> Any:
        """Block until completed; return the response or raise the error.

        Raises TimeoutError if nothing arrives within timeout seconds.
        """
        if not self._done.wait(timeout):
            raise TimeoutError(f"no response for message {self.id}")
        if self.error is not None:
            raise self.error
        return self.response


@dataclass(kw_only=True)
class AbstractResultMessage:
    result_code: ResultCode = ResultCode.FAILED
    msg: str = ""


@dataclass(kw_only=True)
class AbstractIdentifyRequest:
    version: str = ""
    application_id: str = ""
    transaction_service_group: str = ""
    extra_data: bytes | None = None


@dataclass(kw_only=True)
class AbstractIdentifyResponse(AbstractResultMessage):
    version: str = ""
    extra_data: bytes | None = None
    identified: bool = False


@dataclass(kw_only=True)
class RegisterTMRequest(AbstractIdentifyRequest):
    type_code: ClassVar[MessageType] = MessageType.REG_CLT


@dataclass(kw_only=True)
class RegisterTMResponse(AbstractIdentifyResponse):
    type_code: ClassVar[MessageType] = MessageType.REG_CLT_RESULT


@dataclass(kw_only=True)
class RegisterRMRequest(AbstractIdentifyRequest):
    type_code: ClassVar[MessageType] = MessageType.REG_RM

    resource_ids: str = ""


@dataclass(kw_only=True)
class RegisterRMResponse(AbstractIdentifyResponse):
    type_code: ClassVar[MessageType] = MessageType.REG_RM_RESULT


@dataclass(kw_only=True)
class MergedWarpMessage:
    """Several requests sent together in one frame."""

    type_code: ClassVar[MessageType] = MessageType.STARFISH_MERGE

    msgs: list[Any] = field(default_factory=list)
    msg_ids: list[int] = field(default_factory=list)


@dataclass(kw_only=True)
class MergeResultMessage:
    """Replies to a MergedWarpMessage, in the same order."""

    type_code: ClassVar[MessageType] = MessageType.STARFISH_MERGE_RESULT

    msgs: list[Any] = field(default_factory=list)


@dataclass(kw_only=True)
class AbstractTransactionResponse(AbstractResultMessage):
    transaction_exception_code: TransactionExceptionCode = TransactionExceptionCode.UNKNOWN

    def error(self) -> TransactionException:
        """Return the exception this response describes."""
        return TransactionException(
            message=self.msg, code=self.transaction_exception_code
        )


@dataclass(kw_only=True)
class AbstractBranchEndRequest:
    xid: str = ""
    branch_id: int = 0
    branch_type: BranchType = BranchType.AT
    resource_id: str = ""
    application_data: bytes | None = None


@dataclass(kw_only=True)
class AbstractBranchEndResponse(AbstractTransactionResponse):
    xid: str = ""
    branch_id: int = 0
    branch_status: BranchStatus = BranchStatus.UNKNOWN


@dataclass(kw_only=True)
class AbstractGlobalEndRequest:
    xid: str = ""
    extra_data: bytes | None = None


@dataclass(kw_only=True)
class AbstractGlobalEndResponse(AbstractTransactionResponse):
    global_status: GlobalStatus = GlobalStatus.UNKNOWN


@dataclass(kw_only=True)
class BranchRegisterRequest:
    type_code: ClassVar[MessageType] = MessageType.BRANCH_REGISTER

    xid: str = ""
    branch_type: BranchType = BranchType.AT
    resource_id: str = ""
    lock_key: str = ""
    application_data: bytes | None = None


@dataclass(kw_only=True)
class BranchRegisterResponse(AbstractTransactionResponse):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_REGISTER_RESULT

    branch_id: int = 0


@dataclass(kw_only=True)
class BranchReportRequest:
    type_code: ClassVar[MessageType] = MessageType.BRANCH_STATUS_REPORT

    xid: str = ""
    branch_id: int = 0
    resource_id: str = ""
    status: BranchStatus = BranchStatus.UNKNOWN
    application_data: bytes | None = None
    branch_type: BranchType = BranchType.AT


@dataclass(kw_only=True)
class BranchReportResponse(AbstractTransactionResponse):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_STATUS_REPORT_RESULT


@dataclass(kw_only=True)
class BranchCommitRequest(AbstractBranchEndRequest):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_COMMIT


@dataclass(kw_only=True)
class BranchCommitResponse(AbstractBranchEndResponse):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_COMMIT_RESULT


@dataclass(kw_only=True)
class BranchRollbackRequest(AbstractBranchEndRequest):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_ROLLBACK


@dataclass(kw_only=True)
class BranchRollbackResponse(AbstractBranchEndResponse):
    type_code: ClassVar[MessageType] = MessageType.BRANCH_ROLLBACK_RESULT


@dataclass(kw_only=True)
class GlobalBeginRequest:
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_BEGIN

    timeout: int = 0
    transaction_name: str = ""


@dataclass(kw_only=True)
class GlobalBeginResponse(AbstractTransactionResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_BEGIN_RESULT

    xid: str = ""
    extra_data: bytes | None = None


@dataclass(kw_only=True)
class GlobalStatusRequest(AbstractGlobalEndRequest):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_STATUS


@dataclass(kw_only=True)
class GlobalStatusResponse(AbstractGlobalEndResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_STATUS_RESULT


@dataclass(kw_only=True)
class GlobalLockQueryRequest(BranchRegisterRequest):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_LOCK_QUERY


@dataclass(kw_only=True)
class GlobalLockQueryResponse(AbstractTransactionResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_LOCK_QUERY_RESULT

    lockable: bool = False


@dataclass(kw_only=True)
class GlobalReportRequest(AbstractGlobalEndRequest):
    # Reports travel under the global-status type codes.
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_STATUS

    global_status: GlobalStatus = GlobalStatus.UNKNOWN


@dataclass(kw_only=True)
class GlobalReportResponse(AbstractGlobalEndResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_STATUS_RESULT


@dataclass(kw_only=True)
class GlobalCommitRequest(AbstractGlobalEndRequest):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_COMMIT


@dataclass(kw_only=True)
class GlobalCommitResponse(AbstractGlobalEndResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_COMMIT_RESULT


@dataclass(kw_only=True)
class GlobalRollbackRequest(AbstractGlobalEndRequest):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_ROLLBACK


@dataclass(kw_only=True)
class GlobalRollbackResponse(AbstractGlobalEndResponse):
    type_code: ClassVar[MessageType] = MessageType.GLOBAL_ROLLBACK_RESULT


@dataclass(kw_only=True)
class UndoLogDeleteRequest:
    type_code: ClassVar[MessageType] = MessageType.RM_DELETE_UNDOLOG

    resource_id: str = ""
    save_days: int = 0
    branch_type: BranchType = BranchType.AT