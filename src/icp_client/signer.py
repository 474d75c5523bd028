"""
Signing entry point.

``Signer`` turns a ``SigningInput`` into a ``SigningOutput`` holding the CBOR
encoded signed transaction. Failures are reported in the output as an error
code and message instead of being raised.

Example usage:
    ```python
    signer = Signer(ChainkeyBitcoinContext())
    output = signer.sign(SigningInput(
        private_key=key_bytes,
        transaction=Icrc1Transfer(
            to_icrc_account="k2t6j-...-6ae",
            amount=100_000_000,
            created_at_time_nanos=1_691_709_940_000_000_000,
        ),
    ))
    if output.error == ErrorCode.OK:
        submit(output.signed_transaction)
    ```
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from pydantic import BaseModel, Field

from .context import LedgerContext
from .crypto.secp256k1 import Secp256k1PrivateKey
from .runtime.errors import ErrorCode, IcpError, InvalidArgumentsError
from .tx.options import SigningOptions
from .tx.transfer import Icrc1Transfer, Transfer, sign_transaction

logger = logging.getLogger(__name__)


class SigningInput(BaseModel):
    """Private key and transaction to sign."""

    model_config = {"frozen": True}

    private_key: bytes = Field(..., description="32-byte secp256k1 private key")
    transaction: Optional[Union[Transfer, Icrc1Transfer]] = Field(
        default=None,
        description="Transfer to sign"
    )

    def __repr__(self) -> str:
        return f"SigningInput(transaction={self.transaction!r})"

    __str__ = __repr__


class SigningOutput(BaseModel):
    """Result of a signing attempt."""

    signed_transaction: bytes = Field(default=b"", description="CBOR signed transaction")
    error: ErrorCode = Field(default=ErrorCode.OK, description="Error code, OK on success")
    error_message: str = Field(default="", description="Error description")

    @property
    def is_ok(self) -> bool:
        return self.error == ErrorCode.OK

    def signed_transaction_hex(self) -> str:
        return self.signed_transaction.hex()


class Signer:
    """Signs transfers against one ledger context."""

    def __init__(self, context: LedgerContext, options: Optional[SigningOptions] = None):
        """
        Initialize signer.

        Args:
            context: Ledger receiving the signed calls
            options: Signing options, defaults when omitted
        """
        self.context = context
        self.options = options or SigningOptions()

    def sign(self, signing_input: SigningInput) -> SigningOutput:
        """
        Sign a transaction.

        Args:
            signing_input: Key and transaction

        Returns:
            SigningOutput with either the signed transaction or an error
        """
        try:
            return SigningOutput(signed_transaction=self.sign_or_raise(signing_input))
        except IcpError as e:
            logger.debug(f"Signing for {self.context.name} failed: {e}")
            return SigningOutput(error=e.code, error_message=e.message)

    def sign_or_raise(self, signing_input: SigningInput) -> bytes:
        """
        Sign a transaction, raising on failure.

        Returns:
            CBOR encoded signed transaction

        Raises:
            IcpError: If any step of signing fails
        """
        private_key = Secp256k1PrivateKey(signing_input.private_key)
        if signing_input.transaction is None:
            raise InvalidArgumentsError("No transaction to sign")

        signed = sign_transaction(
            private_key,
            self.context.canister_id,
            signing_input.transaction,
            self.options,
        )
        return signed.to_cbor()


def sign(
    signing_input: SigningInput,
    context: LedgerContext,
    options: Optional[SigningOptions] = None,
) -> SigningOutput:
    """Sign with a one-off Signer."""
    return Signer(context, options).sign(signing_input)


__all__ = [
    "SigningInput",
    "SigningOutput",
    "Signer",
    "sign",
]
