"""Miroir local de la session du fournisseur d'identité."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from shortlink.services.identity import (
    AuthResult,
    IdentityProvider,
    IdentityProviderError,
    Subscription,
)
from shortlink.state import AuthStatus, AuthViewState, Session

logger = logging.getLogger(__name__)

UNEXPECTED_AUTH_MESSAGE = "Réponse inattendue du fournisseur d'identité."

Listener = Callable[[], None]
AuthCall = Callable[[str, str], Awaitable[AuthResult]]


class SessionController:
    """Seul propriétaire de l'``AuthViewState``.

    L'état est remplacé en réaction aux notifications du fournisseur et aux
    résultats des actions explicites (connexion, inscription, déconnexion).
    Les hooks d'invalidation sont appelés chaque fois que l'identité
    connectée change, déconnexion comprise.
    """

    def __init__(self, provider: IdentityProvider) -> None:
        self._provider = provider
        self._state = AuthViewState.unauthenticated()
        self._error: str | None = None
        self._subscription: Subscription | None = None
        self._initialized = False
        self._torn_down = False
        self._event_received = False
        self._listeners: list[Listener] = []
        self._invalidation_hooks: list[Listener] = []

    # ----------------------------------------------------------- Lecture -
    @property
    def state(self) -> AuthViewState:
        return self._state

    @property
    def current_session(self) -> Session | None:
        return self._state.session if self._state.is_authenticated else None

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_busy(self) -> bool:
        return self._state.status is AuthStatus.AUTHENTICATING

    # --------------------------------------------------------- Observateurs -
    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Enregistre un callback appelé à chaque changement d'état ou d'erreur."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def add_invalidation_hook(self, hook: Listener) -> Callable[[], None]:
        """Enregistre un callback appelé quand l'identité connectée change."""
        self._invalidation_hooks.append(hook)
        return lambda: self._invalidation_hooks.remove(hook)

    # ------------------------------------------------------------ Cycle de vie -
    async def initialize(self) -> None:
        """Récupère la session courante puis écoute le fournisseur."""
        if self._initialized:
            return
        self._initialized = True
        self._subscription = self._provider.subscribe(self.on_provider_event)

        try:
            session = await self._provider.get_current_session()
        except IdentityProviderError as exc:
            logger.error("Impossible de récupérer la session initiale : %s", exc)
            session = None
        except Exception:  # noqa: BLE001
            logger.exception("Échec inattendu lors de la récupération de la session initiale")
            session = None

        # Une notification reçue pendant la récupération est plus récente.
        if self._event_received or self._torn_down:
            return
        self._apply(self._state_for(session), self._error)

    def teardown(self) -> None:
        """Se désabonne du fournisseur ; les notifications suivantes sont ignorées."""
        if self._torn_down:
            logger.warning("teardown() appelé plusieurs fois, ignoré.")
            return
        self._torn_down = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def on_provider_event(self, session: Session | None) -> None:
        if self._torn_down:
            return
        self._event_received = True
        self._apply(self._state_for(session), self._error)

    # ---------------------------------------------------------------- Actions -
    async def sign_in(self, email: str, password: str) -> str | None:
        """Connecte l'utilisateur ; retourne le message d'erreur éventuel."""
        return await self._authenticate(self._provider.sign_in_with_password, email, password)

    async def sign_up(self, email: str, password: str) -> str | None:
        """Inscrit l'utilisateur ; un succès le considère immédiatement connecté."""
        return await self._authenticate(self._provider.sign_up, email, password)

    async def sign_out(self) -> None:
        try:
            await self._provider.sign_out()
        except IdentityProviderError as exc:
            logger.warning("Erreur du fournisseur lors de la déconnexion : %s", exc)
        except Exception:  # noqa: BLE001
            logger.exception("Échec inattendu lors de la déconnexion")

        # La déconnexion locale aboutit toujours.
        if not self._apply(AuthViewState.unauthenticated(), None):
            self._run_invalidation_hooks()

    async def _authenticate(self, call: AuthCall, email: str, password: str) -> str | None:
        self._apply(AuthViewState.authenticating(), None)
        try:
            result = await call(email, password)
        except IdentityProviderError as exc:
            return self._fail(str(exc))
        except Exception:  # noqa: BLE001
            logger.exception("Échec inattendu de l'appel au fournisseur")
            return self._fail(UNEXPECTED_AUTH_MESSAGE)

        session = result.session
        if session is None and result.user is not None:
            # Inscription acceptée sans session : pas de jeton disponible.
            session = Session(user=result.user)
        if session is None:
            return self._fail(UNEXPECTED_AUTH_MESSAGE)

        self._apply(AuthViewState.authenticated(session), None)
        return None

    def _fail(self, message: str) -> str:
        logger.info("Authentification refusée : %s", message)
        self._apply(AuthViewState.unauthenticated(), message)
        return message

    # ---------------------------------------------------------------- Interne -
    @staticmethod
    def _state_for(session: Session | None) -> AuthViewState:
        if session is None:
            return AuthViewState.unauthenticated()
        return AuthViewState.authenticated(session)

    def _apply(self, state: AuthViewState, error: str | None) -> bool:
        """Applique l'état ; retourne True si les hooks d'invalidation ont été appelés."""
        if state == self._state and error == self._error:
            return False
        previous_user = self._state.user
        self._state = state
        self._error = error
        invalidated = previous_user != state.user
        if invalidated:
            self._run_invalidation_hooks()
        for listener in list(self._listeners):
            listener()
        return invalidated

    def _run_invalidation_hooks(self) -> None:
        for hook in list(self._invalidation_hooks):
            hook()
