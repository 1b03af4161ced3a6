from starfish.config import ConfigCenterConfig
from starfish.config_center import (
    ConfigChangeEvent,
    ConfigurationListener,
    DynamicConfigurationFactory,
    add_listener,
    load_config_center_config,
)


class RecordingListener(ConfigurationListener):
    def __init__(self):
        self.events = []

    def process(self, event):
        self.events.append(event)


class FakeFactory(DynamicConfigurationFactory):
    def __init__(self, text):
        self.text = text
        self.listeners = []
        self.stopped = False

    def get_config(self, conf):
        return self.text

    def add_listener(self, conf, listener):
        self.listeners.append((conf, listener))

    def stop(self):
        self.stopped = True


def test_add_listener_skipped_without_mode():
    factory = FakeFactory("x")
    add_listener(factory, ConfigCenterConfig(), RecordingListener())
    assert factory.listeners == []


def test_add_listener_with_mode():
    factory = FakeFactory("x")
    conf = ConfigCenterConfig(mode="nacos")
    listener = RecordingListener()
    add_listener(factory, conf, listener)
    assert factory.listeners == [(conf, listener)]


def test_load_returns_remote_config_and_listens():
    factory = FakeFactory("remote text")
    conf = ConfigCenterConfig(mode="etcdv3")
    listener = RecordingListener()
    assert load_config_center_config(factory, conf, listener) == "remote text"
    assert factory.listeners == [(conf, listener)]


def test_load_without_mode_does_not_listen():
    factory = FakeFactory("remote text")
    result = load_config_center_config(factory, ConfigCenterConfig(), RecordingListener())
    assert result == "remote text"
    assert factory.listeners == []


def test_listener_receives_event():
    listener = RecordingListener()
    listener.process(ConfigChangeEvent(key="starfish", value="data"))
    assert listener.events == [ConfigChangeEvent(key="starfish", value="data")]