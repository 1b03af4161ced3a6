"""Shared constants: configuration keys, registry settings and wire protocol limits."""

# Environment variable naming the client configuration file.
CLIENT_CONFIG_FILE_PATH = "ConfClientFilePath"

NACOS_DEFAULT_GROUP = "SEATA_GROUP"
NACOS_DEFAULT_DATA_ID = "starfish"
NACOS_KEY = "nacos"
FILE_KEY = "file"

ETCDV3_KEY = "etcdv3"
ETCDV3_REGISTRY_PREFIX = "etcdv3-starfish-"
ETCDV3_LEASE_RENEW_INTERVAL = 5
ETCDV3_LEASE_TTL = 10
ETCDV3_LEASE_TTL_CRITICAL = 6

MAGIC_CODE_BYTES = b"\xda\xda"

PROTOCOL_VERSION = 1
MAX_FRAME_LENGTH = 8 * 1024 * 1024
V1_HEAD_LENGTH = 16

MSG_TYPE_REQUEST = 0
MSG_TYPE_RESPONSE = 1
MSG_TYPE_REQUEST_ONEWAY = 2
MSG_TYPE_HEARTBEAT_REQUEST = 3
MSG_TYPE_HEARTBEAT_RESPONSE = 4