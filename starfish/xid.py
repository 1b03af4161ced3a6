"""Global transaction id (XID) generation and parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


@dataclass
class _ServerAddress:
    ip_address: str = ""
    port: int = 0


_address = _ServerAddress()


def init_address(ip_address: str, port: int) -> None:
    """Set the address this server puts into the XIDs it generates."""
    _address.ip_address = ip_address
    _address.port = port


def generate_xid(tran_id: int) -> str:
    """Build an XID of the form ip:port:transaction-id."""
    return f"{_address.ip_address}:{_address.port}:{tran_id}"


def get_transaction_id(xid: str) -> int:
    """Return the transaction id at the end of xid, -1 if it has none.

    A tail that is not a number yields 0; one beyond the 64-bit range is clamped.
    """
    if not xid:
        return -1
    tail = xid[xid.rfind(":") + 1:]
    if not tail:
        return -1
    if not _DECIMAL.fullmatch(tail):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(tail)))