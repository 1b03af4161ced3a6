from datetime import timedelta

import pytest

from starfish import config as c


@pytest.fixture
def reset_registry():
    previous = c.get_registry_config()
    yield
    c.init_registry_config(previous)


def test_getty_session_defaults():
    param = c.GettySessionParam()
    assert param.compress_encoding is False
    assert param.tcp_no_delay is True
    assert param.tcp_keep_alive is True
    assert param.keep_alive_period == timedelta(seconds=180)
    assert param.tcp_r_buf_size == 262144
    assert param.tcp_w_buf_size == 65536
    assert param.tcp_read_timeout == timedelta(seconds=1)
    assert param.tcp_write_timeout == timedelta(seconds=5)
    assert param.wait_timeout == timedelta(seconds=7)
    assert param.max_msg_len == 4096
    assert param.session_name == "rpc"


def test_config_center_defaults():
    conf = c.ConfigCenterConfig()
    assert conf.mode == ""
    assert conf.nacos_config.group == "SEATA_GROUP"
    assert conf.nacos_config.data_id == "starfish"
    assert conf.etcd_config.name == "starfish-config-center"
    assert conf.etcd_config.config_key == "config-starfish"


def test_registry_defaults():
    conf = c.RegistryConfig()
    assert conf.nacos_config.group == "SEATA_GROUP"
    assert conf.etcd_config.cluster_name == "starfish-etcdv3"
    assert conf.etcd_config.heartbeats == 0


def test_nested_defaults_are_independent():
    first = c.RegistryConfig()
    first.nacos_config.application = "app"
    assert c.RegistryConfig().nacos_config.application == ""


def test_registry_config_round_trip(reset_registry):
    conf = c.RegistryConfig(mode="nacos", nacos_config=c.NacosConfig(application="tc"))
    c.init_registry_config(conf)
    assert c.get_registry_config() is conf
    assert c.get_registry_config().nacos_config.application == "tc"


def test_registry_config_cleared(reset_registry):
    c.init_registry_config(c.RegistryConfig())
    c.init_registry_config(None)
    assert c.get_registry_config() is None


def test_fields_are_keyword_only():
    with pytest.raises(TypeError):
        c.EtcdConfig("cluster")