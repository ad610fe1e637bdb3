"""Structures de données partagées entre la couche UI et les services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

FailureReason = Literal["unauthorized", "invalid_input", "request_failure"]


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Identité renvoyée par le fournisseur d'authentification."""

    id: str
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.email or self.id


@dataclass(frozen=True, slots=True)
class Session:
    """Session authentifiée : identité et jeton porteur associé."""

    user: UserIdentity
    # Absent lorsqu'une inscription est acceptée sans ouvrir de session.
    access_token: str | None = None


class AuthStatus(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True, slots=True)
class AuthViewState:
    """État d'authentification affiché par l'interface.

    Seul le ``SessionController`` construit et assigne cet état.
    """

    status: AuthStatus
    session: Session | None = None

    @classmethod
    def unauthenticated(cls) -> AuthViewState:
        return cls(AuthStatus.UNAUTHENTICATED)

    @classmethod
    def authenticating(cls) -> AuthViewState:
        return cls(AuthStatus.AUTHENTICATING)

    @classmethod
    def authenticated(cls, session: Session) -> AuthViewState:
        return cls(AuthStatus.AUTHENTICATED, session)

    @property
    def is_authenticated(self) -> bool:
        """Retourne True si une session est en cours."""
        return self.status is AuthStatus.AUTHENTICATED

    @property
    def user(self) -> UserIdentity | None:
        return self.session.user if self.session is not None else None


class ShortenStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class ShortenRequest:
    """Tentative de raccourcissement, en cours ou terminée."""

    input_url: str = ""
    status: ShortenStatus = ShortenStatus.IDLE
    short_url: str | None = None
    error: str | None = None
    reason: FailureReason | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is ShortenStatus.PENDING

    def start(self, input_url: str) -> None:
        """Passe en attente en effaçant le résultat précédent."""
        self.input_url = input_url
        self.status = ShortenStatus.PENDING
        self.short_url = None
        self.error = None
        self.reason = None

    def succeed(self, short_url: str) -> None:
        self.status = ShortenStatus.SUCCEEDED
        self.short_url = short_url
        self.error = None
        self.reason = None

    def fail(self, message: str, reason: FailureReason) -> None:
        self.status = ShortenStatus.FAILED
        self.short_url = None
        self.error = message
        self.reason = reason

    def reset(self) -> None:
        """Réinitialise la tentative."""
        self.input_url = ""
        self.status = ShortenStatus.IDLE
        self.short_url = None
        self.error = None
        self.reason = None


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    """Tout ce dont l'interface a besoin pour se redessiner."""

    auth: AuthViewState
    error: str | None
    shorten_status: ShortenStatus
    short_url: str | None
    busy: bool
