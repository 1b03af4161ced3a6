"""Configuration for the config center, the registry and network sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .constants import NACOS_DEFAULT_DATA_ID, NACOS_DEFAULT_GROUP


@dataclass(kw_only=True)
class NacosConfigCenter:
    server_addr: str = ""
    group: str = NACOS_DEFAULT_GROUP
    namespace: str = ""
    cluster: str = ""
    username: str = ""
    password: str = ""
    data_id: str = NACOS_DEFAULT_DATA_ID


@dataclass(kw_only=True)
class EtcdConfigCenter:
    name: str = "starfish-config-center"
    config_key: str = "config-starfish"
    endpoints: str = ""
    heartbeats: int = 0
    timeout: timedelta = timedelta(0)


@dataclass(kw_only=True)
class ConfigCenterConfig:
    """Which config center to use, and its settings."""

    mode: str = ""
    nacos_config: NacosConfigCenter = field(default_factory=NacosConfigCenter)
    etcd_config: EtcdConfigCenter = field(default_factory=EtcdConfigCenter)


@dataclass(kw_only=True)
class GettySessionParam:
    """Socket and session settings for network connections."""

    compress_encoding: bool = False
    tcp_no_delay: bool = True
    tcp_keep_alive: bool = True
    keep_alive_period: timedelta = timedelta(seconds=180)
    tcp_r_buf_size: int = 262144
    tcp_w_buf_size: int = 65536
    tcp_read_timeout: timedelta = timedelta(seconds=1)
    tcp_write_timeout: timedelta = timedelta(seconds=5)
    wait_timeout: timedelta = timedelta(seconds=7)
    max_msg_len: int = 4096
    session_name: str = "rpc"


@dataclass(kw_only=True)
class NacosConfig:
    application: str = ""
    server_addr: str = ""
    group: str = NACOS_DEFAULT_GROUP
    namespace: str = ""
    cluster: str = ""
    username: str = ""
    password: str = ""


@dataclass(kw_only=True)
class EtcdConfig:
    cluster_name: str = "starfish-etcdv3"
    endpoints: str = ""
    heartbeats: int = 0
    timeout: timedelta = timedelta(0)


@dataclass(kw_only=True)
class RegistryConfig:
    """Which registry to use, and its settings."""

    mode: str = ""
    nacos_config: NacosConfig = field(default_factory=NacosConfig)
    etcd_config: EtcdConfig = field(default_factory=EtcdConfig)


_installed: dict[str, RegistryConfig | None] = {"registry": None}


def init_registry_config(registry_config: RegistryConfig | None) -> None:
    """Install the process-wide registry configuration."""
    _installed["registry"] = registry_config


def get_registry_config() -> RegistryConfig | None:
    """Return the installed registry configuration, or None if none is."""
    return _installed["registry"]