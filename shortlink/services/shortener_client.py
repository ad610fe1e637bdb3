"""Client HTTP de l'API de raccourcissement d'URL."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from shortlink.config import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

SHORTEN_PATH = "/url/shorten"


class ShortenerServiceError(RuntimeError):
    """Erreur générique levée lors d'un appel à l'API de raccourcissement."""


class ShortenerClient:
    """Service responsable de l'appel authentifié ``POST /url/shorten``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}{SHORTEN_PATH}"
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def shorten(self, url: str, access_token: str) -> str:
        """Retourne l'URL courte renvoyée par l'API pour ``url``."""
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.post(self._endpoint, json={"url": url}, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ShortenerServiceError(f"Requête impossible : {exc!r}") from exc

        if not response.is_success:
            raise ShortenerServiceError(
                f"Réponse HTTP {response.status_code} : {response.text[:200]}"
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ShortenerServiceError("Réponse non JSON.") from exc

        short_url = payload.get("short_url") if isinstance(payload, dict) else None
        if not isinstance(short_url, str) or not short_url:
            raise ShortenerServiceError("Champ short_url absent de la réponse.")
        logger.debug("URL raccourcie via %s", self._endpoint)
        return short_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
