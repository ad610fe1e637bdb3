"""Point d'entrée du client de raccourcissement d'URL."""

from __future__ import annotations

import asyncio

from shortlink.config import ConfigError, ShortenerConfig, load_config
from shortlink.observability import setup_logging
from shortlink.presenter import ShortenerPresenter
from shortlink.services import ShortenerClient, SupabaseIdentityProvider
from shortlink.session import SessionController
from shortlink.shortening import ShortenRequestWorkflow
from shortlink.ui.app import MainWindow


async def _serve(config: ShortenerConfig) -> None:
    provider = await SupabaseIdentityProvider.create(config.supabase_url, config.supabase_key)
    client = ShortenerClient(config.base_url, timeout=config.timeout)
    presenter = ShortenerPresenter(SessionController(provider), ShortenRequestWorkflow(client))
    app = MainWindow(presenter)
    try:
        await app.run()
    finally:
        await client.aclose()


def main() -> None:
    """Initialise les dépendances puis lance l'interface Tkinter."""
    config = load_config()
    setup_logging(config.log_level)
    if not config.provider_is_configured():
        raise ConfigError(
            "Le fournisseur d'identité n'est pas configuré. "
            "Définissez SUPABASE_URL et SUPABASE_ANON_KEY."
        )
    asyncio.run(_serve(config))


if __name__ == "__main__":
    main()
