"""Dynamic configuration sources and their change listeners."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .config import ConfigCenterConfig


@dataclass
class ConfigChangeEvent:
    """A changed configuration entry."""

    key: str = ""
    value: Any = None


class ConfigurationListener(ABC):
    """Notified whenever the configuration changes."""

    @abstractmethod
    def process(self, event: ConfigChangeEvent) -> None:
        """Handle one change of the configuration."""


class DynamicConfigurationFactory(ABC):
    """A remote source of configuration."""

    @abstractmethod
    def get_config(self, conf: ConfigCenterConfig) -> str:
        """Return the current configuration text."""

    @abstractmethod
    def add_listener(self, conf: ConfigCenterConfig, listener: ConfigurationListener) -> None:
        """Have listener notified of configuration changes."""

    @abstractmethod
    def stop(self) -> None:
        """Release the source's resources."""


def add_listener(
    factory: DynamicConfigurationFactory,
    conf: ConfigCenterConfig,
    listener: ConfigurationListener,
) -> None:
    """Attach listener to factory, unless no config center mode is set."""
    if not conf.mode:
        return
    factory.add_listener(conf, listener)


def load_config_center_config(
    factory: DynamicConfigurationFactory,
    conf: ConfigCenterConfig,
    listener: ConfigurationListener,
) -> str:
    """Fetch the remote configuration and listen for later changes to it."""
    remote_config = factory.get_config(conf)
    add_listener(factory, conf, listener)
    return remote_config