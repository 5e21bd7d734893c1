"""Credentials."""

from gcstorage.auth.abstract import AbstractTokenSource, Token
from gcstorage.auth.service_account import ServiceAccount
from gcstorage.auth.sources import (
    MetadataTokenSource,
    ServiceAccountTokenSource,
    StaticTokenSource,
    resolve_token_source,
)
from gcstorage.auth.tokens import TokenProvider

__all__ = [
    "AbstractTokenSource",
    "MetadataTokenSource",
    "ServiceAccount",
    "ServiceAccountTokenSource",
    "StaticTokenSource",
    "Token",
    "TokenProvider",
    "resolve_token_source",
]
