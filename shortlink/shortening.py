"""Cycle de vie d'une demande de raccourcissement authentifiée."""

from __future__ import annotations

import logging
from typing import Callable

from shortlink.services.shortener_client import ShortenerClient, ShortenerServiceError
from shortlink.state import Session, ShortenRequest

logger = logging.getLogger(__name__)

SHORTEN_FAILED_MESSAGE = "Impossible de raccourcir l'URL."
UNAUTHORIZED_MESSAGE = "Connectez-vous avant de raccourcir une URL."
EMPTY_URL_MESSAGE = "Veuillez saisir une URL à raccourcir."

Listener = Callable[[], None]


class UnauthorizedError(RuntimeError):
    """Opération authentifiée tentée sans session utilisable."""


def _require_token(session: Session | None) -> str:
    if session is None or not session.access_token:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)
    return session.access_token


class ShortenRequestWorkflow:
    """Transforme une URL en URL courte via l'API, en exposant l'état de la demande.

    Chaque ``reset()`` incrémente une génération : une réponse arrivée pour
    une génération antérieure est ignorée au lieu d'être appliquée.
    """

    def __init__(self, client: ShortenerClient) -> None:
        self._client = client
        self._request = ShortenRequest()
        self._generation = 0
        self._listeners: list[Listener] = []

    @property
    def request(self) -> ShortenRequest:
        return self._request

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def submit(self, url: str, session: Session | None) -> ShortenRequest:
        """Lance une demande avec le jeton de ``session`` lu à cet instant."""
        if self._request.is_pending:
            logger.warning("Demande déjà en cours, nouvelle soumission ignorée.")
            return self._request

        try:
            access_token = _require_token(session)
        except UnauthorizedError as exc:
            logger.warning("Soumission refusée : aucune session active.")
            self._request.fail(str(exc), "unauthorized")
            self._notify()
            return self._request

        url = url.strip()
        if not url:
            self._request.fail(EMPTY_URL_MESSAGE, "invalid_input")
            self._notify()
            return self._request

        self._request.start(url)
        generation = self._generation
        self._notify()

        try:
            short_url = await self._client.shorten(url, access_token)
        except ShortenerServiceError as exc:
            if self._is_stale(generation):
                return self._request
            logger.error("Échec du raccourcissement de %s : %s", url, exc)
            self._request.fail(SHORTEN_FAILED_MESSAGE, "request_failure")
        except Exception:  # noqa: BLE001
            if self._is_stale(generation):
                return self._request
            logger.exception("Échec inattendu du raccourcissement de %s", url)
            self._request.fail(SHORTEN_FAILED_MESSAGE, "request_failure")
        else:
            if self._is_stale(generation):
                return self._request
            self._request.succeed(short_url)

        self._notify()
        return self._request

    def reset(self) -> None:
        """Revient à l'état initial ; toute réponse en vol sera ignorée."""
        self._generation += 1
        self._request.reset()
        self._notify()

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info("Réponse obsolète ignorée (session invalidée entre-temps).")
            return True
        return False

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
