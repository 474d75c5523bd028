"""
Signer entry point and ledger context tests.
"""

import pytest

from icp_client import (
    ChainkeyBitcoinContext,
    ErrorCode,
    Icrc1Transfer,
    InternetComputerContext,
    LedgerContext,
    Principal,
    Signer,
    SigningInput,
    SigningOutput,
    SignedTransaction,
    Transfer,
    sign,
)
from icp_client.context import AddressScheme
from icp_client.runtime.errors import InvalidAmountError
from icp_client.tx.options import IngressExpiry, SigningOptions

from conftest import (
    GOLDEN_AMOUNT,
    GOLDEN_CREATED_AT_NANOS,
    GOLDEN_MEMO,
    GOLDEN_PRIVATE_KEY_HEX,
    GOLDEN_SIGNED_TRANSACTION_HEX,
    GOLDEN_TO_ACCOUNT,
)

OTHER_COMPRESSED_PUBLIC_KEY = "028542e6fb4b17d6dfcac3948fe412c00d626728815ee7cc70509603f1bc92128a"
OTHER_PRINCIPAL = "iqlzk-yhdp6-7cb7b-zjtsb-anxbf-lv4uo-53aqu-r7xzl-cjizi-phwm4-3qe"
OTHER_ACCOUNT_IDENTIFIER = "2f25874478d06cf68b9833524a6390d0ba69c566b02f46626979a3d6a4153211"
TO_ACCOUNT_IDENTIFIER = "2b8fbde99de881f695f279d2a892b1137bfe81a42d7694e064b1be58701e1138"


def golden_input(**overrides):
    transaction = Icrc1Transfer(
        to_icrc_account=GOLDEN_TO_ACCOUNT,
        amount=GOLDEN_AMOUNT,
        memo=GOLDEN_MEMO,
        created_at_time_nanos=GOLDEN_CREATED_AT_NANOS,
    )
    fields = dict(private_key=bytes.fromhex(GOLDEN_PRIVATE_KEY_HEX), transaction=transaction)
    fields.update(overrides)
    return SigningInput(**fields)


class TestSigner:
    """Test signing through a ledger context."""

    def test_golden_ckbtc_transfer(self):
        output = Signer(ChainkeyBitcoinContext()).sign(golden_input())
        assert output.is_ok
        assert output.error == ErrorCode.OK
        assert output.error_message == ""
        assert output.signed_transaction_hex() == GOLDEN_SIGNED_TRANSACTION_HEX

    def test_module_level_sign(self):
        output = sign(golden_input(), ChainkeyBitcoinContext())
        assert output.signed_transaction == bytes.fromhex(GOLDEN_SIGNED_TRANSACTION_HEX)

    def test_sign_or_raise(self):
        signer = Signer(ChainkeyBitcoinContext())
        assert signer.sign_or_raise(golden_input()).hex() == GOLDEN_SIGNED_TRANSACTION_HEX
        with pytest.raises(InvalidAmountError):
            signer.sign_or_raise(golden_input(transaction=Icrc1Transfer(
                to_icrc_account=GOLDEN_TO_ACCOUNT,
                amount=0,
                created_at_time_nanos=GOLDEN_CREATED_AT_NANOS,
            )))

    def test_legacy_transfer_to_icp_ledger(self):
        transaction = Transfer(
            to_account_identifier=TO_ACCOUNT_IDENTIFIER,
            amount=1,
            current_timestamp_nanos=GOLDEN_CREATED_AT_NANOS,
        )
        context = InternetComputerContext()
        output = Signer(context).sign(golden_input(transaction=transaction))
        assert output.is_ok
        signed = SignedTransaction.from_cbor(output.signed_transaction)
        content = signed.requests[0][1][0].update.content
        assert content.canister_id == context.canister_id
        assert content.method_name == "send_pb"

    def test_custom_canister(self):
        canister = Principal.from_text("mxzaz-hqaaa-aaaar-qaada-cai")
        context = LedgerContext(canister_id=canister)
        output = Signer(context).sign(golden_input())
        assert output.signed_transaction_hex() == GOLDEN_SIGNED_TRANSACTION_HEX

    def test_options_are_applied(self):
        options = SigningOptions(ingress_expiry=IngressExpiry(max_ingress_ttl_seconds=600))
        output = Signer(ChainkeyBitcoinContext(), options).sign(golden_input())
        signed = SignedTransaction.from_cbor(output.signed_transaction)
        expected = GOLDEN_CREATED_AT_NANOS + 540 * 1_000_000_000
        assert signed.requests[0][1][0].update.content.ingress_expiry == expected


class TestSignerErrors:
    """Test that failures are reported in the output."""

    @pytest.mark.parametrize("private_key", [bytes(32), b"\x01" * 31, b""])
    def test_invalid_private_key(self, private_key):
        output = Signer(ChainkeyBitcoinContext()).sign(golden_input(private_key=private_key))
        assert not output.is_ok
        assert output.error == ErrorCode.INVALID_PRIVATE_KEY
        assert output.signed_transaction == b""
        assert output.error_message

    def test_invalid_amount(self):
        transaction = Icrc1Transfer(
            to_icrc_account=GOLDEN_TO_ACCOUNT,
            amount=0,
            created_at_time_nanos=GOLDEN_CREATED_AT_NANOS,
        )
        output = Signer(ChainkeyBitcoinContext()).sign(golden_input(transaction=transaction))
        assert output.error == ErrorCode.INVALID_AMOUNT

    def test_invalid_destination(self):
        transaction = Icrc1Transfer(
            to_icrc_account=GOLDEN_TO_ACCOUNT[:-1],
            amount=1,
            created_at_time_nanos=GOLDEN_CREATED_AT_NANOS,
        )
        output = Signer(ChainkeyBitcoinContext()).sign(golden_input(transaction=transaction))
        assert output.error == ErrorCode.INVALID_TO_ADDRESS

    def test_missing_transaction(self):
        output = Signer(ChainkeyBitcoinContext()).sign(golden_input(transaction=None))
        assert output.error == ErrorCode.INVALID_ARGUMENTS

    def test_missing_timestamp(self):
        transaction = Transfer(to_account_identifier=TO_ACCOUNT_IDENTIFIER, amount=1)
        output = Signer(InternetComputerContext()).sign(golden_input(transaction=transaction))
        assert output.error == ErrorCode.INVALID_ARGUMENTS

    def test_input_repr_hides_key(self):
        signing_input = golden_input()
        assert GOLDEN_PRIVATE_KEY_HEX not in repr(signing_input)
        assert "private_key" not in str(signing_input)

    def test_default_output(self):
        output = SigningOutput()
        assert output.is_ok
        assert output.signed_transaction_hex() == ""


class TestLedgerContext:
    """Test ledger contexts and address derivation."""

    def test_builtin_canisters(self):
        assert InternetComputerContext().canister_id.to_hex() == "00000000000000020101"
        assert ChainkeyBitcoinContext().canister_id.to_hex() == "00000000023000060101"
        assert InternetComputerContext().address_scheme is AddressScheme.ACCOUNT_IDENTIFIER
        assert ChainkeyBitcoinContext().address_scheme is AddressScheme.ICRC_ACCOUNT

    def test_derive_icrc_address(self):
        public_key = bytes.fromhex(OTHER_COMPRESSED_PUBLIC_KEY)
        assert ChainkeyBitcoinContext().derive_address(public_key) == OTHER_PRINCIPAL

    def test_derive_account_identifier(self):
        public_key = bytes.fromhex(OTHER_COMPRESSED_PUBLIC_KEY)
        assert InternetComputerContext().derive_address(public_key) == OTHER_ACCOUNT_IDENTIFIER

    def test_is_valid_address(self):
        assert ChainkeyBitcoinContext().is_valid_address(GOLDEN_TO_ACCOUNT)
        assert not ChainkeyBitcoinContext().is_valid_address(GOLDEN_TO_ACCOUNT[:-1])
        assert InternetComputerContext().is_valid_address(TO_ACCOUNT_IDENTIFIER)
        assert not InternetComputerContext().is_valid_address(GOLDEN_TO_ACCOUNT)

    def test_canister_from_text(self):
        context = LedgerContext(canister_id="ryjl3-tyaaa-aaaaa-aaaba-cai", name="icp")
        assert context.canister_id == InternetComputerContext().canister_id
