"""Surface exposée à l'interface : état à afficher et intentions utilisateur."""

from __future__ import annotations

from typing import Callable

from shortlink.session import SessionController
from shortlink.shortening import ShortenRequestWorkflow
from shortlink.state import ShortenRequest, ViewSnapshot

Listener = Callable[[], None]


class ShortenerPresenter:
    """Relie le ``SessionController`` au ``ShortenRequestWorkflow``.

    Toute invalidation de session réinitialise la demande de raccourcissement.
    """

    def __init__(self, controller: SessionController, workflow: ShortenRequestWorkflow) -> None:
        self._controller = controller
        self._workflow = workflow
        self._listeners: list[Listener] = []
        self._unregister = [
            controller.add_invalidation_hook(workflow.reset),
            controller.add_listener(self._notify),
            workflow.add_listener(self._notify),
        ]

    @property
    def controller(self) -> SessionController:
        return self._controller

    @property
    def workflow(self) -> ShortenRequestWorkflow:
        return self._workflow

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def snapshot(self) -> ViewSnapshot:
        auth = self._controller.state
        request = self._workflow.request
        error = request.error if auth.is_authenticated else self._controller.error
        return ViewSnapshot(
            auth=auth,
            error=error,
            shorten_status=request.status,
            short_url=request.short_url,
            busy=self._controller.is_busy or request.is_pending,
        )

    # ------------------------------------------------------------ Cycle de vie -
    async def start(self) -> None:
        await self._controller.initialize()

    def stop(self) -> None:
        self._controller.teardown()
        for unregister in self._unregister:
            unregister()
        self._unregister = []

    # -------------------------------------------------------------- Intentions -
    async def login(self, email: str, password: str) -> str | None:
        return await self._controller.sign_in(email, password)

    async def signup(self, email: str, password: str) -> str | None:
        return await self._controller.sign_up(email, password)

    async def logout(self) -> None:
        await self._controller.sign_out()

    async def submit_url(self, url: str) -> ShortenRequest:
        return await self._workflow.submit(url, self._controller.current_session)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
