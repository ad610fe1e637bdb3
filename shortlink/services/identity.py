"""Encapsulation des appels au fournisseur d'identité (Supabase Auth)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

import httpx
from supabase import AsyncClient, AuthError, acreate_client

from shortlink.state import Session, UserIdentity

SessionCallback = Callable[[Session | None], None]
UNREACHABLE_MESSAGE = "Fournisseur d'identité injoignable."


class IdentityProviderError(RuntimeError):
    """Erreur renvoyée par le fournisseur d'identité (message d'origine conservé)."""


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Résultat d'une connexion ou d'une inscription."""

    user: UserIdentity | None
    session: Session | None = None


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class IdentityProvider(Protocol):
    """Contrat consommé par le ``SessionController``."""

    async def get_current_session(self) -> Session | None: ...

    def subscribe(self, callback: SessionCallback) -> Subscription: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str) -> AuthResult: ...

    async def sign_out(self) -> None: ...


def _provider_error(exc: Exception) -> IdentityProviderError:
    if isinstance(exc, httpx.HTTPError):
        return IdentityProviderError(UNREACHABLE_MESSAGE)
    return IdentityProviderError(str(exc))


def _to_user(raw: Any) -> UserIdentity | None:
    if raw is None:
        return None
    return UserIdentity(id=str(raw.id), email=getattr(raw, "email", None))


def _to_session(raw: Any) -> Session | None:
    if raw is None or raw.user is None:
        return None
    return Session(user=_to_user(raw.user), access_token=raw.access_token)


class SupabaseIdentityProvider:
    """Adaptateur entre le client ``supabase`` asynchrone et ``IdentityProvider``."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    @classmethod
    async def create(cls, url: str, key: str) -> SupabaseIdentityProvider:
        client = await acreate_client(url, key)
        return cls(client)

    async def get_current_session(self) -> Session | None:
        try:
            raw = await self._client.auth.get_session()
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc
        return _to_session(raw)

    def subscribe(self, callback: SessionCallback) -> Subscription:
        """Relaie les changements de session en ignorant le type d'événement."""

        def _on_change(_event: Any, raw_session: Any) -> None:
            callback(_to_session(raw_session))

        return self._client.auth.on_auth_state_change(_on_change)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc
        return AuthResult(user=_to_user(response.user), session=_to_session(response.session))

    async def sign_up(self, email: str, password: str) -> AuthResult:
        try:
            response = await self._client.auth.sign_up({"email": email, "password": password})
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc
        return AuthResult(user=_to_user(response.user), session=_to_session(response.session))

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as exc:
            raise _provider_error(exc) from exc
