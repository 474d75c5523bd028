"""Runtime helpers for the ICP client"""

from .errors import IcpError, ErrorCode
from .principal import Principal

__all__ = [
    "IcpError",
    "ErrorCode",
    "Principal",
]
