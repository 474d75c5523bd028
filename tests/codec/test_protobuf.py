"""
Legacy SendRequest encoding tests.
"""

import pytest

from icp_client.codec.protobuf import SendRequest, decode_send_request, encode_send_request
from icp_client.runtime.errors import DecodingError, EncodingError

TO_HEX = "58b26ace22a36a0011608a130e84c7cf34ba469c38d24ccf606152ce7de91f4e"
TIMESTAMP = 1_691_709_940_000_000_000


class TestSendRequestEncoding:

    def test_wire_layout(self):
        """Test field-by-field layout of a typical transfer."""
        request = SendRequest(
            memo=0,
            amount_e8s=100_000_000,
            to=bytes.fromhex(TO_HEX),
            max_fee_e8s=10_000,
            created_at_time_nanos=TIMESTAMP,
        )
        expected = (
            "0a00"                        # memo: empty message for zero
            "12070a050880c2d72f"          # payment.receiver_gets.e8s
            "1a0308904e"                  # max_fee.e8s
            "2a220a20" + TO_HEX +         # to.hash
            "3a0a088090caa5a3a78abd17"    # created_at_time.timestamp_nanos
        )
        assert encode_send_request(request).hex() == expected

    def test_optional_fields(self):
        request = SendRequest(
            memo=7,
            amount_e8s=1,
            to=bytes.fromhex(TO_HEX),
            from_subaccount=bytes(31) + b"\x01",
            created_at=42,
        )
        encoded = encode_send_request(request).hex()
        assert encoded.startswith("0a020807")
        assert "22220a20" + "00" * 31 + "01" in encoded
        assert encoded.endswith("3202082a")

    @pytest.mark.parametrize("overrides", [
        {"memo": 1 << 64},
        {"amount_e8s": -1},
        {"created_at_time_nanos": 1 << 64},
        {"memo": "7"},
    ])
    def test_rejects_invalid_values(self, overrides):
        fields = dict(memo=1, amount_e8s=1, to=b"\x01")
        fields.update(overrides)
        with pytest.raises(EncodingError):
            encode_send_request(SendRequest(**fields))


class TestSendRequestDecoding:

    @pytest.mark.parametrize("request_value", [
        SendRequest(memo=0, amount_e8s=1, to=bytes.fromhex(TO_HEX), created_at_time_nanos=TIMESTAMP),
        SendRequest(
            memo=123456789,
            amount_e8s=100_000_000,
            to=bytes.fromhex(TO_HEX),
            max_fee_e8s=10_000,
            from_subaccount=bytes(range(32)),
            created_at=9,
            created_at_time_nanos=TIMESTAMP,
        ),
    ])
    def test_decode_inverts_encode(self, request_value):
        assert decode_send_request(encode_send_request(request_value)) == request_value

    def test_truncated_input(self):
        encoded = encode_send_request(SendRequest(memo=1, amount_e8s=1, to=bytes.fromhex(TO_HEX)))
        with pytest.raises(DecodingError):
            decode_send_request(encoded[:-3])

    @pytest.mark.parametrize("data", [
        bytes.fromhex("0a05"),          # length runs past the end
        bytes.fromhex("0a0108"),        # inner key without a value
        bytes.fromhex("12020a05"),      # nested length past its parent
    ])
    def test_malformed_input(self, data):
        with pytest.raises(DecodingError):
            decode_send_request(data)

    def test_repeated_sub_messages_are_merged(self):
        base = encode_send_request(SendRequest(
            memo=1, amount_e8s=1, to=bytes.fromhex(TO_HEX), created_at_time_nanos=TIMESTAMP,
        ))
        decoded = decode_send_request(base + bytes.fromhex("3a020805") + bytes.fromhex("3a00"))
        assert decoded.created_at_time_nanos == 5
        assert decoded.memo == 1

    def test_empty_input_has_defaults(self):
        decoded = decode_send_request(b"")
        assert decoded == SendRequest(memo=0, amount_e8s=0, to=b"")

    def test_empty_sub_messages_are_kept(self):
        encoded = encode_send_request(SendRequest(memo=0, amount_e8s=0, to=b"", max_fee_e8s=0))
        assert encoded.hex() == "0a00" "12020a00" "1a00" "2a00"
        assert decode_send_request(encoded).max_fee_e8s == 0
