"""Named extension points for config centers and registries."""

from __future__ import annotations

import threading
from typing import Callable

from .config import ConfigCenterConfig
from .config_center import DynamicConfigurationFactory
from .registry import Registry

ConfigCenterFactory = Callable[[ConfigCenterConfig], DynamicConfigurationFactory]
RegistryFactory = Callable[[], Registry]

_config_centers: dict[str, ConfigCenterFactory] = {}
_config_centers_lock = threading.RLock()

_registries: dict[str, RegistryFactory] = {}
_registries_lock = threading.RLock()


def set_config_center(name: str, factory: ConfigCenterFactory) -> None:
    """Register a config center factory under name.

    Raises ValueError if factory is None or name is already taken.
    """
    with _config_centers_lock:
        if factory is None:
            raise ValueError("config center factory is None")
        if name in _config_centers:
            raise ValueError(f"config center registered twice: {name}")
        _config_centers[name] = factory


def get_config_center(name: str, conf: ConfigCenterConfig) -> DynamicConfigurationFactory:
    """Create the config center registered under name.

    Raises LookupError if nothing is registered under name.
    """
    with _config_centers_lock:
        factory = _config_centers.get(name)
    if factory is None:
        raise LookupError(
            f"config center for {name} is not existing, make sure it is registered"
        )
    return factory(conf)


def set_registry(name: str, factory: RegistryFactory) -> None:
    """Register a registry factory under name.

    Raises ValueError if factory is None or name is already taken.
    """
    with _registries_lock:
        if factory is None:
            raise ValueError("registry factory is None")
        if name in _registries:
            raise ValueError(f"registry registered twice: {name}")
        _registries[name] = factory


def get_registry(name: str) -> Registry:
    """Create the registry registered under name.

    Raises LookupError if nothing is registered under name.
    """
    with _registries_lock:
        factory = _registries.get(name)
    if factory is None:
        raise LookupError(f"registry for {name} is not existing, make sure it is registered")
    return factory()