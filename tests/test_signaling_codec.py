from __future__ import annotations

import json

import pytest

from signaling.codec import (
    AnswerMessage,
    HangupMessage,
    IceMessage,
    LogMessage,
    OfferMessage,
    decode,
    encode,
    log_envelope,
)
from signaling.errors import SignalDecodeError, UnknownSignalTypeError

SDP = {"type": "offer", "sdp": "v=0\r\no=- 46117 2 IN IP4 127.0.0.1\r\n"}


@pytest.mark.parametrize(
    "message",
    [
        LogMessage(data={"kind": "call_event", "detail": {"event": "ringing"}}),
        OfferMessage(sdp=SDP),
        AnswerMessage(sdp={"type": "answer", "sdp": "v=0\r\n"}),
        IceMessage(candidate={"candidate": "candidate:1 1 UDP 2122252543 10.0.0.2 50000 typ host"}),
        HangupMessage(),
    ],
)
def test_decode_inverts_encode(message) -> None:
    assert decode(encode(message)) == message


def test_encode_keeps_type_and_fields_verbatim() -> None:
    assert json.loads(encode(OfferMessage(sdp=SDP))) == {"type": "offer", "sdp": SDP}
    assert json.loads(encode(HangupMessage())) == {"type": "hangup"}


def test_decode_accepts_bytes() -> None:
    assert decode(b'{"type": "answer", "sdp": "raw"}') == AnswerMessage(sdp="raw")


def test_decode_does_not_validate_variant_fields() -> None:
    assert decode('{"type": "offer", "sdp": 42}') == OfferMessage(sdp=42)
    assert decode('{"type": "ice"}') == IceMessage(candidate=None)


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"offer"', '{"sdp": {}}', '{"type": 7}'])
def test_decode_rejects_malformed_frames(raw: str) -> None:
    with pytest.raises(SignalDecodeError):
        decode(raw)


def test_decode_flags_unknown_type() -> None:
    with pytest.raises(UnknownSignalTypeError) as excinfo:
        decode('{"type": "renegotiate"}')
    assert excinfo.value.message_type == "renegotiate"


def test_log_envelope_shape() -> None:
    message = log_envelope("call_command_failed", {"error": "boom"})
    assert message.data == {"kind": "call_command_failed", "detail": {"error": "boom"}}
