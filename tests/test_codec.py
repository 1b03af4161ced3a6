import pytest

from starfish.codec import (
    decode,
    decode_body,
    decode_merge_result_message,
    decode_merged_warp_message,
    message_decoder,
    message_encoder,
)
from starfish.encoder import encode, encode_body
from starfish.meta import BranchStatus, BranchType, GlobalStatus
from starfish.protocol import (
    BranchCommitResponse,
    BranchRegisterRequest,
    CodecType,
    GlobalBeginRequest,
    GlobalCommitResponse,
    GlobalLockQueryResponse,
    MergedWarpMessage,
    MergeResultMessage,
    ResultCode,
)


def _requests():
    return [
        GlobalBeginRequest(timeout=60000, transaction_name="order"),
        BranchRegisterRequest(
            xid="127.0.0.1:8091:42",
            branch_type=BranchType.TCC,
            resource_id="db",
            lock_key="t:1",
            application_data=b"data",
        ),
    ]


def _responses():
    return [
        BranchCommitResponse(
            result_code=ResultCode.SUCCESS,
            xid="127.0.0.1:8091:42",
            branch_id=7,
            branch_status=BranchStatus.PHASE_TWO_COMMITTED,
        ),
        GlobalCommitResponse(
            result_code=ResultCode.FAILED,
            msg="boom",
            global_status=GlobalStatus.COMMIT_FAILED,
        ),
        GlobalLockQueryResponse(result_code=ResultCode.SUCCESS, lockable=True),
    ]


def test_empty_merged_message_wire_bytes():
    assert message_encoder(CodecType.SEATA, MergedWarpMessage()) == (
        b"\x00\x3b" + b"\x00\x00\x00\x02" + b"\x00\x00"
    )


def test_merged_warp_message_round_trip():
    original = MergedWarpMessage(msgs=_requests())
    data = encode(original)
    decoded, size = decode(data)
    assert decoded == original
    assert size == len(data)


def test_decode_merged_warp_message_consumes_body():
    body = encode_body(MergedWarpMessage(msgs=_requests()))
    decoded, size = decode_merged_warp_message(body)
    assert decoded.msgs == _requests()
    assert size == len(body)


def test_merge_result_message_round_trip():
    body = encode_body(MergeResultMessage(msgs=_responses()))
    decoded, size = decode_merge_result_message(body)
    assert decoded == MergeResultMessage(msgs=_responses())
    assert size == len(body)


def test_decode_body_dispatches_merge_type():
    body = encode_body(MergeResultMessage(msgs=_responses()))
    decoded, _ = decode_body(int(MergeResultMessage.type_code), body)
    assert decoded.msgs == _responses()


def test_decode_body_flat_message():
    message = GlobalBeginRequest(timeout=3000, transaction_name="tx")
    body = encode_body(message)
    decoded, size = decode_body(int(GlobalBeginRequest.type_code), body)
    assert decoded == message
    assert size == len(body)


def test_nested_merged_message_round_trip():
    inner = MergedWarpMessage(msgs=_requests())
    outer = MergedWarpMessage(msgs=[inner, GlobalBeginRequest(timeout=1)])
    decoded, size = decode(encode(outer))
    assert decoded == outer
    assert size == len(encode(outer))


def test_decode_ignores_trailing_bytes():
    data = encode(GlobalBeginRequest(timeout=5, transaction_name="a"))
    decoded, size = decode(data + b"\xff\xff")
    assert decoded == GlobalBeginRequest(timeout=5, transaction_name="a")
    assert size == len(data)


def test_message_codec_round_trip():
    message = MergedWarpMessage(msgs=_requests())
    data = message_encoder(CodecType.SEATA, message)
    decoded, size = message_decoder(CodecType.SEATA, data)
    assert decoded == message
    assert size == len(data)


@pytest.mark.parametrize("codec_type", [CodecType.PROTOBUF, CodecType.KRYO, CodecType.FST])
def test_message_encoder_rejects_unsupported_codec(codec_type):
    with pytest.raises(ValueError):
        message_encoder(codec_type, GlobalBeginRequest())


@pytest.mark.parametrize("codec_type", [CodecType.PROTOBUF, CodecType.KRYO, CodecType.FST])
def test_message_decoder_rejects_unsupported_codec(codec_type):
    data = encode(GlobalBeginRequest())
    with pytest.raises(ValueError):
        message_decoder(codec_type, data)


def test_decode_unknown_type_code_raises():
    with pytest.raises(ValueError):
        decode(b"\x03\xe7\x00\x00")


def test_decode_without_type_code_raises():
    with pytest.raises(ValueError):
        decode(b"\x00")


def test_decode_truncated_merged_message_raises():
    data = encode(MergedWarpMessage(msgs=_requests()))
    with pytest.raises(ValueError):
        decode(data[:-3])


def test_merged_message_with_unknown_inner_type_raises():
    body = b"\x00\x00\x00\x04" + b"\x00\x01" + b"\x03\xe7"
    with pytest.raises(ValueError):
        decode_merged_warp_message(body)


def test_merged_message_missing_prefix_raises():
    with pytest.raises(ValueError):
        decode_merge_result_message(b"\x00\x00\x00")