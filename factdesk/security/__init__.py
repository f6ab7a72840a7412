"""
Security module for handling authentication tokens.
"""
from .jwt import create_access_token, decode_token

__all__ = [
    "create_access_token",
    "decode_token"
]
