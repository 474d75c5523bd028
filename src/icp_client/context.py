"""
Ledger contexts.

A context names the ledger canister that receives signed calls and the
address scheme its accounts use. Contexts are plain values passed to the
signer; any canister can be targeted by creating one.
"""

from __future__ import annotations
from enum import Enum

from pydantic import BaseModel, Field

from .address.account_identifier import AccountIdentifier
from .address.icrc import IcrcAccount
from .runtime.errors import InvalidAddressError
from .runtime.principal import Principal

ICP_LEDGER_CANISTER_ID = "ryjl3-tyaaa-aaaaa-aaaba-cai"
CKBTC_LEDGER_CANISTER_ID = "mxzaz-hqaaa-aaaar-qaada-cai"


class AddressScheme(str, Enum):
    """Textual account format accepted by a ledger."""
    ACCOUNT_IDENTIFIER = "account_identifier"
    ICRC_ACCOUNT = "icrc_account"


class LedgerContext(BaseModel):
    """Target ledger of a signing call."""

    model_config = {"frozen": True}

    canister_id: Principal = Field(..., description="Ledger canister receiving the calls")
    address_scheme: AddressScheme = Field(
        default=AddressScheme.ICRC_ACCOUNT,
        description="Account format of the ledger"
    )
    name: str = Field(default="custom", description="Human readable ledger name")

    def derive_address(self, public_key: bytes) -> str:
        """
        Default account address of a SEC1 secp256k1 public key.

        Args:
            public_key: 33-byte compressed or 65-byte uncompressed point

        Returns:
            Account identifier hex, or ICRC-1 account text
        """
        owner = Principal.from_public_key(public_key)
        if self.address_scheme is AddressScheme.ACCOUNT_IDENTIFIER:
            return AccountIdentifier.new(owner).to_hex()
        return IcrcAccount(owner).to_text()

    def is_valid_address(self, text: str) -> bool:
        """True if the text is an account of this ledger's scheme."""
        try:
            if self.address_scheme is AddressScheme.ACCOUNT_IDENTIFIER:
                AccountIdentifier.from_hex(text)
            else:
                IcrcAccount.from_text(text)
        except InvalidAddressError:
            return False
        return True


class InternetComputerContext(LedgerContext):
    """The ICP ledger."""

    canister_id: Principal = Field(
        default_factory=lambda: Principal.from_text(ICP_LEDGER_CANISTER_ID),
        description="ICP ledger canister"
    )
    address_scheme: AddressScheme = AddressScheme.ACCOUNT_IDENTIFIER
    name: str = "internet_computer"


class ChainkeyBitcoinContext(LedgerContext):
    """The ckBTC ICRC-1 ledger."""

    canister_id: Principal = Field(
        default_factory=lambda: Principal.from_text(CKBTC_LEDGER_CANISTER_ID),
        description="ckBTC ledger canister"
    )
    address_scheme: AddressScheme = AddressScheme.ICRC_ACCOUNT
    name: str = "chainkey_bitcoin"


__all__ = [
    "AddressScheme",
    "LedgerContext",
    "InternetComputerContext",
    "ChainkeyBitcoinContext",
    "ICP_LEDGER_CANISTER_ID",
    "CKBTC_LEDGER_CANISTER_ID",
]
