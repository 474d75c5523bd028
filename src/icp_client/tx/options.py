"""
Signing options.

Ingress expiry is computed from the caller-supplied creation timestamp, never
from the system clock, so that signing stays deterministic.
"""

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

NANOS_PER_SECOND = 1_000_000_000

# Network acceptance window for ingress messages
DEFAULT_MAX_INGRESS_TTL_SECONDS = 5 * 60
DEFAULT_PERMITTED_DRIFT_SECONDS = 60

# Minimum ledger transfer fee in e8s (0.0001 ICP)
DEFAULT_MAX_FEE_E8S = 10_000


class IngressExpiry(BaseModel):
    """
    Validity window of a signed request.

    The expiry is ``created_at + (max_ingress_ttl - permitted_drift)``, which
    leaves room for clock drift between the signer and the network.
    """

    model_config = {"frozen": True}

    max_ingress_ttl_seconds: int = Field(
        default=DEFAULT_MAX_INGRESS_TTL_SECONDS,
        gt=0,
        description="Maximum time a request is accepted after its creation"
    )
    permitted_drift_seconds: int = Field(
        default=DEFAULT_PERMITTED_DRIFT_SECONDS,
        ge=0,
        description="Clock drift margin subtracted from the TTL"
    )

    @model_validator(mode="after")
    def validate_window(self) -> IngressExpiry:
        if self.permitted_drift_seconds >= self.max_ingress_ttl_seconds:
            raise ValueError("permitted_drift_seconds must be smaller than max_ingress_ttl_seconds")
        return self

    @property
    def window_nanos(self) -> int:
        return (self.max_ingress_ttl_seconds - self.permitted_drift_seconds) * NANOS_PER_SECOND

    def expiry_for(self, timestamp_nanos: int) -> int:
        """
        Compute the ingress expiry of a request.

        Args:
            timestamp_nanos: Creation time in nanoseconds since the epoch

        Returns:
            Expiry in nanoseconds since the epoch
        """
        return timestamp_nanos + self.window_nanos


class SigningOptions(BaseModel):
    """Options applied to every transaction signed with them."""

    model_config = {"frozen": True}

    ingress_expiry: IngressExpiry = Field(
        default_factory=IngressExpiry,
        description="Ingress validity window"
    )
    default_max_fee_e8s: int = Field(
        default=DEFAULT_MAX_FEE_E8S,
        ge=0,
        description="Max fee used for legacy transfers that do not set one"
    )
    nonce: Optional[bytes] = Field(
        default=None,
        description="Optional nonce added to call contents"
    )

    @field_validator("nonce")
    @classmethod
    def validate_nonce(cls, v: Optional[bytes]) -> Optional[bytes]:
        if v is not None and len(v) == 0:
            raise ValueError("nonce must not be empty")
        return v


__all__ = [
    "IngressExpiry",
    "SigningOptions",
    "DEFAULT_MAX_FEE_E8S",
    "DEFAULT_MAX_INGRESS_TTL_SECONDS",
    "DEFAULT_PERMITTED_DRIFT_SECONDS",
    "NANOS_PER_SECOND",
]
