"""Transaction metadata: statuses, branch types, roles and the transaction exception."""

from __future__ import annotations

from enum import IntEnum


class BranchStatus(IntEnum):
    """Lifecycle status of a branch transaction."""

    UNKNOWN = 0
    REGISTERED = 1
    PHASE_ONE_DONE = 2
    PHASE_ONE_FAILED = 3
    PHASE_ONE_TIMEOUT = 4
    PHASE_TWO_COMMITTED = 5
    PHASE_TWO_COMMIT_FAILED_RETRYABLE = 6
    PHASE_TWO_COMMIT_FAILED_CAN_NOT_RETRY = 7
    PHASE_TWO_ROLLED_BACK = 8
    PHASE_TWO_ROLLBACK_FAILED_RETRYABLE = 9
    PHASE_TWO_ROLLBACK_FAILED_CAN_NOT_RETRY = 10

    def __str__(self) -> str:
        return _BRANCH_STATUS_NAMES[self]


_BRANCH_STATUS_NAMES = {
    BranchStatus.UNKNOWN: "Unknown",
    BranchStatus.REGISTERED: "Registered",
    BranchStatus.PHASE_ONE_DONE: "PhaseOneDone",
    BranchStatus.PHASE_ONE_FAILED: "PhaseOneFailed",
    BranchStatus.PHASE_ONE_TIMEOUT: "PhaseOneTimeout",
    BranchStatus.PHASE_TWO_COMMITTED: "PhaseTwoCommitted",
    BranchStatus.PHASE_TWO_COMMIT_FAILED_RETRYABLE: "PhaseTwoCommitFailedRetryable",
    BranchStatus.PHASE_TWO_COMMIT_FAILED_CAN_NOT_RETRY: "CommitFailedCanNotRetry",
    BranchStatus.PHASE_TWO_ROLLED_BACK: "PhaseTwoRolledBack",
    BranchStatus.PHASE_TWO_ROLLBACK_FAILED_RETRYABLE: "RollbackFailedRetryable",
    BranchStatus.PHASE_TWO_ROLLBACK_FAILED_CAN_NOT_RETRY: "RollbackFailedCanNotRetry",
}


class BranchType(IntEnum):
    """Kind of branch transaction."""

    AT = 0
    TCC = 1
    SAGA = 2

    def __str__(self) -> str:
        return self.name


def branch_type_of(name: str) -> BranchType:
    """Return the branch type with the given name, AT for an unknown name."""
    try:
        return BranchType[name]
    except KeyError:
        return BranchType.AT


class GlobalStatus(IntEnum):
    """Lifecycle status of a global transaction."""

    UNKNOWN = 0
    BEGIN = 1
    COMMITTING = 2
    COMMIT_RETRYING = 3
    ROLLING_BACK = 4
    ROLLBACK_RETRYING = 5
    TIMEOUT_ROLLING_BACK = 6
    TIMEOUT_ROLLBACK_RETRYING = 7
    ASYNC_COMMITTING = 8
    COMMITTED = 9
    COMMIT_FAILED = 10
    ROLLED_BACK = 11
    ROLLBACK_FAILED = 12
    TIMEOUT_ROLLED_BACK = 13
    TIMEOUT_ROLLBACK_FAILED = 14
    FINISHED = 15

    def __str__(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class TransactionExceptionCode(IntEnum):
    """Reason carried by a TransactionException."""

    UNKNOWN = 0
    BEGIN_FAILED = 1
    LOCK_KEY_CONFLICT = 2
    IO = 3
    BRANCH_ROLLBACK_FAILED_RETRIABLE = 4
    BRANCH_ROLLBACK_FAILED_UNRETRIABLE = 5
    BRANCH_REGISTER_FAILED = 6
    BRANCH_REPORT_FAILED = 7
    LOCKABLE_CHECK_FAILED = 8
    BRANCH_TRANSACTION_NOT_EXIST = 9
    GLOBAL_TRANSACTION_NOT_EXIST = 10
    GLOBAL_TRANSACTION_NOT_ACTIVE = 11
    GLOBAL_TRANSACTION_STATUS_INVALID = 12
    FAILED_TO_SEND_BRANCH_COMMIT_REQUEST = 13
    FAILED_TO_SEND_BRANCH_ROLLBACK_REQUEST = 14
    FAILED_TO_ADD_BRANCH = 15
    FAILED_LOCK_GLOBAL_TRANSACTION = 16
    FAILED_WRITE_SESSION = 17
    FAILED_STORE = 18


class TransactionException(Exception):
    """Error raised for a failed transaction operation."""

    def __init__(
        self,
        message: str = "",
        code: TransactionExceptionCode = TransactionExceptionCode.UNKNOWN,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = TransactionExceptionCode(code)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return "TransactionException: " + self.message


def new_transaction_exception(
    err: BaseException,
    code: TransactionExceptionCode | None = None,
    message: str | None = None,
) -> TransactionException:
    """Wrap err in a TransactionException, or return it if it already is one."""
    found: BaseException | None = err
    seen: set[int] = set()
    while found is not None and id(found) not in seen:
        if isinstance(found, TransactionException):
            return found
        seen.add(id(found))
        found = found.__cause__
    return TransactionException(
        message=str(err) if message is None else message,
        code=TransactionExceptionCode.UNKNOWN if code is None else code,
        cause=err,
    )


class TransactionRole(IntEnum):
    """Role of a participant in the transaction protocol."""

    TM_ROLE = 0
    RM_ROLE = 1
    SERVER_ROLE = 2

    def __str__(self) -> str:
        return {
            TransactionRole.TM_ROLE: "TMRole",
            TransactionRole.RM_ROLE: "RMRole",
            TransactionRole.SERVER_ROLE: "ServerRole",
        }[self]