# starfish

The building blocks of a distributed transaction coordinator: transaction
metadata, the binary wire protocol spoken between transaction managers,
resource managers and the coordinator, and the extension points through which
service registries and configuration centres are plugged in.

## What is inside

| Module | Contents |
| --- | --- |
| `starfish.meta` | `BranchStatus`, `BranchType`, `GlobalStatus`, `TransactionRole`, `TransactionExceptionCode`, `TransactionException`, `branch_type_of`, `new_transaction_exception` |
| `starfish.xid` | `init_address`, `generate_xid`, `get_transaction_id` |
| `starfish.protocol` | `MessageType`, `CodecType`, `ResultCode`, the message classes (`GlobalBeginRequest`, `BranchRegisterRequest`, `MergedWarpMessage`, …), `RpcMessage`, `HeartBeatMessage`, `MessageFuture` |
| `starfish.encoder` | `encode`, `encode_body` |
| `starfish.decoding` | `decode_body` for every message that holds no nested messages |
| `starfish.codec` | `decode`, `decode_body`, `decode_merged_warp_message`, `decode_merge_result_message`, `message_encoder`, `message_decoder` |
| `starfish.readwriter` | `RpcPackageHandler`, `PackageHeader`, `encode_head_map`, `decode_head_map` and the frame errors (`PackageError`, `NotEnoughStream`, `PackageTooLarge`, `InvalidPackage`, `IllegalMagic`) |
| `starfish.config` | configuration records for registries, configuration centres and sessions; `init_registry_config`, `get_registry_config` |
| `starfish.registry` | the `Registry` and `EventListener` interfaces, `Address`, `Service`, `ServiceEvent` |
| `starfish.config_center` | the `DynamicConfigurationFactory` and `ConfigurationListener` interfaces, `ConfigChangeEvent`, `add_listener`, `load_config_center_config` |
| `starfish.extension` | `set_registry`, `get_registry`, `set_config_center`, `get_config_center` |
| `starfish.constants` | configuration keys, registry settings and protocol limits |
| `starfish.version` | `version_info` |

## Installing

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```

## Transaction identifiers

A global transaction is identified by an XID of the form
`<ip>:<port>:<transaction id>`. Set the coordinator's address once, then
generate and parse identifiers:

```python
from starfish.xid import init_address, generate_xid, get_transaction_id

init_address("10.0.0.5", 8091)
xid = generate_xid(2000042)          # "10.0.0.5:8091:2000042"
get_transaction_id(xid)              # 2000042
get_transaction_id("")               # -1
```

A trailing part that is not a number gives `0`; an XID ending in `:` gives `-1`.

## Statuses and branch types

```python
from starfish.meta import BranchStatus, GlobalStatus, branch_type_of

str(GlobalStatus.COMMITTING)         # "Committing"
str(BranchStatus.PHASE_ONE_DONE)     # "PhaseOneDone"
branch_type_of("TCC")                # BranchType.TCC
```

Names that are not known map to the first branch type, `AT`.

`new_transaction_exception(err)` returns `err` itself, or a
`TransactionException` found among its causes, and otherwise wraps it in a
new `TransactionException` with code `UNKNOWN` and the error's text as message.

## Encoding messages

`starfish.encoder.encode` turns a protocol message into its body bytes,
prefixed by the message's two-byte type code; `starfish.codec.decode` reads
them back and returns the message with the number of bytes it took up. Merged
batches (`MergedWarpMessage`, `MergeResultMessage`) are encoded and decoded
with the messages they hold. A message kind without an encoding, an unknown
type code and truncated data all raise `ValueError`.

```python
from starfish.codec import decode
from starfish.encoder import encode
from starfish.protocol import GlobalBeginRequest

data = encode(GlobalBeginRequest(timeout=60000, transaction_name="order"))
message, size = decode(data)         # message == the request, size == len(data)
```

`message_encoder` and `message_decoder` do the same for a given serializer;
only `CodecType.SEATA` is supported, any other raises `ValueError`.

## Frames

`starfish.readwriter.RpcPackageHandler` wraps an `RpcMessage` in the 16-byte
frame header (magic `0xdada`, version, full length, head length, message type,
serializer, compressor and request id), an optional head map and the encoded
body; heartbeat frames carry no body. `read` parses one frame from the start of
a byte string and returns the message with the frame length. While the header
is incomplete it returns `(None, 0)`, and while the body is incomplete
`(None, frame length)`, so a reader can wait for more bytes. A frame with the
wrong magic raises `IllegalMagic`, one longer than 8 MiB raises
`PackageTooLarge`, and writing anything but an `RpcMessage` raises
`InvalidPackage`.

`MessageFuture` holds the pending reply to a request: `wait` returns the
response given to `set_response`, raises the error given to `set_error`, or
raises `TimeoutError` when nothing arrives in time.

## Registries and configuration centres

Implementations of `starfish.registry.Registry` and
`starfish.config_center.DynamicConfigurationFactory` are registered by name
with `starfish.extension.set_registry` and
`starfish.extension.set_config_center`, and created with `get_registry` and
`get_config_center`. Registering the same name twice, or registering `None`,
raises `ValueError`; looking up a name that was never registered raises
`LookupError`.

`load_config_center_config` fetches the configuration text from a factory and,
when the configuration's `mode` is set, attaches a listener for later changes.

## What the package does not do

It holds no coordinator: there is no server, no command to start one, no
network session handling and no storage of transactions or locks. It also
ships no concrete registry or configuration centre; those are supplied by
implementing the interfaces above and registering them with
`starfish.extension`.