import uuid

import pytest

from starfish.config import ConfigCenterConfig
from starfish.config_center import DynamicConfigurationFactory
from starfish.extension import (
    get_config_center,
    get_registry,
    set_config_center,
    set_registry,
)
from starfish.registry import Registry


def unique(prefix):
    return f"{prefix}-{uuid.uuid4().hex}"


class FakeConfigCenter(DynamicConfigurationFactory):
    def __init__(self, conf):
        self.conf = conf

    def get_config(self, conf):
        return ""

    def add_listener(self, conf, listener):
        pass

    def stop(self):
        pass


class FakeRegistry(Registry):
    def __init__(self):
        self.addresses = []

    def register(self, addr):
        self.addresses.append(addr)

    def unregister(self, addr):
        self.addresses.remove(addr)

    def lookup(self):
        return ["127.0.0.1:8091"]

    def subscribe(self, listener):
        pass

    def unsubscribe(self, listener):
        pass

    def stop(self):
        pass


def test_config_center_created_with_conf():
    name = unique("cc")
    set_config_center(name, FakeConfigCenter)
    conf = ConfigCenterConfig(mode=name)
    center = get_config_center(name, conf)
    assert isinstance(center, FakeConfigCenter)
    assert center.conf is conf


def test_config_center_duplicate_rejected():
    name = unique("cc")
    set_config_center(name, FakeConfigCenter)
    with pytest.raises(ValueError):
        set_config_center(name, FakeConfigCenter)


def test_config_center_none_rejected():
    with pytest.raises(ValueError):
        set_config_center(unique("cc"), None)


def test_config_center_missing():
    with pytest.raises(LookupError):
        get_config_center(unique("missing"), ConfigCenterConfig())


def test_registry_created():
    name = unique("reg")
    set_registry(name, FakeRegistry)
    registry = get_registry(name)
    assert registry.lookup() == ["127.0.0.1:8091"]


def test_registry_each_call_makes_new_instance():
    name = unique("reg")
    set_registry(name, FakeRegistry)
    first = get_registry(name)
    second = get_registry(name)
    first.register("10.0.0.1:8091")
    assert first.addresses == ["10.0.0.1:8091"]
    assert second.addresses == []


def test_registry_duplicate_rejected():
    name = unique("reg")
    set_registry(name, FakeRegistry)
    with pytest.raises(ValueError):
        set_registry(name, FakeRegistry)


def test_registry_none_rejected():
    with pytest.raises(ValueError):
        set_registry(unique("reg"), None)


def test_registry_missing():
    with pytest.raises(LookupError):
        get_registry(unique("missing"))