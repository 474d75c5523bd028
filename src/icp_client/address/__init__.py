"""Account address codecs: legacy account identifiers and ICRC-1 accounts."""

from .account_identifier import AccountIdentifier, DEFAULT_SUBACCOUNT
from .icrc import IcrcAccount

__all__ = [
    "AccountIdentifier",
    "IcrcAccount",
    "DEFAULT_SUBACCOUNT",
]
