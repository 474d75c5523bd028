"""Request signing identities."""

from .identity import Identity, Signature

__all__ = [
    "Identity",
    "Signature",
]
