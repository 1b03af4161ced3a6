"""Service registry interface and the records it exchanges with listeners."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    """Network address of a server to register."""

    ip: str = ""
    port: int = 0


@dataclass
class Service:
    """Service instance reported by a subscription.

    event_type is 0 for a put and 1 for a delete.
    """

    event_type: int = 0
    ip: str = ""
    port: int = 0
    name: str = ""


@dataclass
class ServiceEvent:
    """A create, update or delete of a service."""

    action: int = 0
    key: str = ""
    updated: bool = False


class EventListener(ABC):
    """Receives the services a subscription reports."""

    @abstractmethod
    def on_event(self, services: list[Service]) -> None:
        """Handle a change in the listed services; raise on failure."""


class Registry(ABC):
    """A place where servers register and clients look them up."""

    @abstractmethod
    def register(self, addr: Address) -> None:
        """Register a server address."""

    @abstractmethod
    def unregister(self, addr: Address) -> None:
        """Remove a registered server address."""

    @abstractmethod
    def lookup(self) -> list[str]:
        """Return the addresses of the registered servers."""

    @abstractmethod
    def subscribe(self, listener: EventListener) -> None:
        """Report changes in registered services to listener."""

    @abstractmethod
    def unsubscribe(self, listener: EventListener) -> None:
        """Stop reporting changes to listener."""

    @abstractmethod
    def stop(self) -> None:
        """Release the registry's resources."""