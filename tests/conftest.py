"""
Shared fixtures.

The golden transfer is an ICRC-1 transfer of 1 ckBTC signed with a fixed
key; its signed transaction is reproduced byte-for-byte by the signer.
"""

import pytest

from icp_client.crypto.secp256k1 import Secp256k1PrivateKey
from icp_client.runtime.principal import Principal
from icp_client.signers.identity import Identity

GOLDEN_PRIVATE_KEY_HEX = "227102911bb99ce7285a55f952800912b7d22ebeeeee59d77fc33a5d7c7080be"
GOLDEN_TO_ACCOUNT = "k2t6j-2nvnp-4zjm3-25dtz-6xhaa-c7boj-5gayf-oj3xs-i43lp-teztq-6ae-6cc627i.1"
GOLDEN_AMOUNT = 100_000_000
GOLDEN_MEMO = bytes.fromhex("a0")
GOLDEN_CREATED_AT_NANOS = 1_691_709_940_000_000_000
GOLDEN_INGRESS_EXPIRY = 1_691_710_180_000_000_000
GOLDEN_SENDER_HEX = "971cd2ddeecd1cf1b28be914d7a5c43441f6296f1f9966a7c8aff68d02"
GOLDEN_CALL_REQUEST_ID = "4dfea0adbdda4c3b5145e162a91811930db13d8949fe36acb9759a934df147a9"
CKBTC_CANISTER_HEX = "00000000023000060101"

GOLDEN_ARG_HEX = (
    "4449444c066c06fbca0101c6fcb60204ba89e5c20402a2de94eb060282f3f3910c05d8a38ca80d7d"
    "6c02b3b0dac30368ad86ca8305026e036d7b6e7d6e780100011db56bf994b37ae8e79f5ce000be17"
    "27a6060ae4eef24736b7cc999c3c0201200000000000000000000000000000000000000000000000"
    "000000000000000001000101a000010088b2343a297a1780c2d72f"
)

GOLDEN_SIGNED_TRANSACTION_HEX = (
    "81826b5452414e53414354494f4e81a266757064617465a367636f6e74656e74a66c726571756573"
    "745f747970656463616c6c6e696e67726573735f6578706972791b177a297215cfe8006673656e64"
    "6572581d971cd2ddeecd1cf1b28be914d7a5c43441f6296f1f9966a7c8aff68d026b63616e697374"
    "65725f69644a000000000230000601016b6d6574686f645f6e616d656e69637263315f7472616e73"
    "6665726361726758934449444c066c06fbca0101c6fcb60204ba89e5c20402a2de94eb060282f3f3"
    "910c05d8a38ca80d7d6c02b3b0dac30368ad86ca8305026e036d7b6e7d6e780100011db56bf994b3"
    "7ae8e79f5ce000be1727a6060ae4eef24736b7cc999c3c0201200000000000000000000000000000"
    "000000000000000000000000000000000001000101a000010088b2343a297a1780c2d72f6d73656e"
    "6465725f7075626b65799858183018561830100607182a1886184818ce183d02010605182b188104"
    "000a0318420004183d18ab183a182118a81838184d184c187e1852188a187e18dc18d8184418ea18"
    "cd18c5189518ac188518b518bc181d188515186318bc18e618ab18d2184318d3187c184f18cd18f0"
    "18de189b18b5181918dd18ef1889187218e71518c40418d4189718881843187218c611182e18cc18"
    "e6186b182118630218356a73656e6465725f736967984018f4187d18bc18d818aa1883182618aa18"
    "2c184f18a8185a18b50511187b18eb18fb185f0c18741218331836183a18dd18cf189b18ed18f418"
    "220e184d1842189b1898121857185d188718c418df18c3188b18b418c0185818201843182f18f418"
    "2e185a18f618bf16182a1845183c18fd184e0618fe18586a726561645f7374617465a367636f6e74"
    "656e74a46c726571756573745f747970656a726561645f73746174656e696e67726573735f657870"
    "6972791b177a297215cfe8006673656e646572581d971cd2ddeecd1cf1b28be914d7a5c43441f629"
    "6f1f9966a7c8aff68d0265706174687381824e726571756573745f73746174757358204dfea0adbd"
    "da4c3b5145e162a91811930db13d8949fe36acb9759a934df147a96d73656e6465725f7075626b65"
    "799858183018561830100607182a1886184818ce183d02010605182b188104000a0318420004183d"
    "18ab183a182118a81838184d184c187e1852188a187e18dc18d8184418ea18cd18c5189518ac1885"
    "18b518bc181d188515186318bc18e618ab18d2184318d3187c184f18cd18f018de189b18b5181918"
    "dd18ef1889187218e71518c40418d4189718881843187218c611182e18cc18e6186b182118630218"
    "356a73656e6465725f736967984018cb1851186a18e7186518d3188e1846185a0b1838185a18bd18"
    "2918cd187b18a418a718e618a018b6183a18c118cd18de18ae185004189f18cd189618dc183e18da"
    "1821011820188b181a18f9189c189318741881185b18fa18e9187a18dc18db1518e10d18d1187118"
    "ef18360d182418fb181c1889185c188a"
)


@pytest.fixture
def golden_private_key():
    """Key of the golden transfer."""
    return Secp256k1PrivateKey.from_hex(GOLDEN_PRIVATE_KEY_HEX)


@pytest.fixture
def golden_identity(golden_private_key):
    return Identity(golden_private_key)


@pytest.fixture
def ckbtc_canister():
    """ckBTC ledger canister (mxzaz-hqaaa-aaaar-qaada-cai)."""
    return Principal.from_hex(CKBTC_CANISTER_HEX)


@pytest.fixture
def icp_ledger_canister():
    return Principal.from_text("ryjl3-tyaaa-aaaaa-aaaba-cai")
