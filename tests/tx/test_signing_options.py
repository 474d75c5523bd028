"""
Signing option validation tests.
"""

import pytest
from pydantic import ValidationError

from icp_client.tx.options import (
    DEFAULT_MAX_FEE_E8S,
    NANOS_PER_SECOND,
    IngressExpiry,
    SigningOptions,
)


class TestIngressExpiry:

    def test_default_window(self):
        expiry = IngressExpiry()
        assert expiry.window_nanos == 240 * NANOS_PER_SECOND
        assert expiry.expiry_for(1_691_709_940_000_000_000) == 1_691_710_180_000_000_000

    def test_custom_window(self):
        expiry = IngressExpiry(max_ingress_ttl_seconds=60, permitted_drift_seconds=0)
        assert expiry.expiry_for(0) == 60 * NANOS_PER_SECOND

    @pytest.mark.parametrize("ttl,drift", [
        (0, 0),
        (60, 60),
        (60, 120),
        (300, -1),
    ])
    def test_invalid_window(self, ttl, drift):
        with pytest.raises(ValidationError):
            IngressExpiry(max_ingress_ttl_seconds=ttl, permitted_drift_seconds=drift)

    def test_frozen(self):
        expiry = IngressExpiry()
        with pytest.raises(ValidationError):
            expiry.max_ingress_ttl_seconds = 10


class TestSigningOptions:

    def test_defaults(self):
        options = SigningOptions()
        assert options.ingress_expiry == IngressExpiry()
        assert options.default_max_fee_e8s == DEFAULT_MAX_FEE_E8S == 10_000
        assert options.nonce is None

    def test_empty_nonce(self):
        with pytest.raises(ValidationError):
            SigningOptions(nonce=b"")

    def test_negative_fee(self):
        with pytest.raises(ValidationError):
            SigningOptions(default_max_fee_e8s=-1)
