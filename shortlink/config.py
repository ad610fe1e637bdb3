"""Gestion centralisée de la configuration du client de raccourcissement."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_TIMEOUT = 10.0
_PLACEHOLDER_PREFIX = "VOTRE_"


class ConfigError(RuntimeError):
    """Erreur levée lorsque la configuration est invalide."""


@dataclass(frozen=True, slots=True)
class ShortenerConfig:
    """Paramètres nécessaires pour joindre le fournisseur d'identité et l'API."""

    base_url: str
    supabase_url: str
    supabase_key: str
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    def provider_is_configured(self) -> bool:
        """Indique si les identifiants du fournisseur ont été renseignés."""
        return all(
            value and not value.startswith(_PLACEHOLDER_PREFIX)
            for value in (self.supabase_url, self.supabase_key)
        )


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigError(f"SHORTENER_TIMEOUT invalide : {raw!r}") from exc
    if timeout <= 0:
        raise ConfigError("SHORTENER_TIMEOUT doit être strictement positif.")
    return timeout


def load_config() -> ShortenerConfig:
    """Charge la configuration depuis l'environnement (et un éventuel .env)."""
    load_dotenv()

    # L'URL de l'API est lue une seule fois : une valeur absente produit
    # simplement des échecs de requête.
    base_url = os.getenv("SHORTENER_BASE_URL", "")
    supabase_url = os.getenv("SUPABASE_URL", "VOTRE_SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_ANON_KEY", "VOTRE_SUPABASE_ANON_KEY")
    timeout = _parse_timeout(os.getenv("SHORTENER_TIMEOUT", str(DEFAULT_TIMEOUT)))
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    return ShortenerConfig(
        base_url=base_url,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        timeout=timeout,
        log_level=log_level,
    )
