"""Error model tests."""

import pytest

from icp_client.runtime.errors import (
    AddressChecksumError,
    ErrorCode,
    IcpError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidArgumentsError,
    InvalidChecksumError,
    InvalidToAddressError,
    MalformedSignatureError,
    SigningError,
)


class TestErrorModel:

    def test_class_codes(self):
        assert InvalidAmountError("zero").code == ErrorCode.INVALID_AMOUNT
        assert InvalidToAddressError("bad").code == ErrorCode.INVALID_TO_ADDRESS
        assert MalformedSignatureError("long").code == ErrorCode.MALFORMED_SIGNATURE

    def test_hierarchy(self):
        """Test that specific errors can be caught by their families."""
        assert issubclass(InvalidAmountError, InvalidArgumentsError)
        assert issubclass(InvalidToAddressError, InvalidArgumentsError)
        assert issubclass(InvalidChecksumError, InvalidAddressError)
        assert issubclass(MalformedSignatureError, SigningError)
        assert issubclass(SigningError, IcpError)

    def test_str_includes_details_and_cause(self):
        cause = ValueError("boom")
        error = IcpError("failed", code=ErrorCode.INTERNAL, details={"step": 1}, cause=cause)
        text = str(error)
        assert text.startswith("[INTERNAL] failed")
        assert "Details: {'step': 1}" in text
        assert "Caused by: boom" in text

    def test_to_dict(self):
        error = AddressChecksumError("mismatch", expected="aabbccdd", found="00000000")
        assert error.to_dict() == {
            "code": ErrorCode.INVALID_ADDRESS.value,
            "message": "mismatch",
            "details": {"expected": "aabbccdd", "found": "00000000"},
        }
        assert error.expected == "aabbccdd"

    def test_raise_and_catch(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            raise InvalidAmountError("Amount must be at least 1")
        assert exc_info.value.message == "Amount must be at least 1"
