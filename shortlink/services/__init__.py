"""Services externes : fournisseur d'identité et API de raccourcissement."""

from .identity import (
    AuthResult,
    IdentityProvider,
    IdentityProviderError,
    SupabaseIdentityProvider,
    Subscription,
)
from .shortener_client import ShortenerClient, ShortenerServiceError

__all__ = [
    "AuthResult",
    "IdentityProvider",
    "IdentityProviderError",
    "ShortenerClient",
    "ShortenerServiceError",
    "Subscription",
    "SupabaseIdentityProvider",
]
