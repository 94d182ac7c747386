"""
XO domain client

Typed operations on top of any Caller implementation.
"""

from .client import Client
from .user import User

__all__ = ["Client", "User"]
