from unittest.mock import AsyncMock, MagicMock

import pytest

from helpers import ALICE
from shortlink.services.identity import AuthResult


class FakeProvider:
    """Fournisseur d'identité piloté par les tests."""

    def __init__(self) -> None:
        self.get_current_session = AsyncMock(return_value=None)
        self.sign_in_with_password = AsyncMock(return_value=AuthResult(ALICE.user, ALICE))
        self.sign_up = AsyncMock(return_value=AuthResult(ALICE.user, ALICE))
        self.sign_out = AsyncMock(return_value=None)
        self.subscription = MagicMock()
        self.callbacks = []

    def subscribe(self, callback):
        self.callbacks.append(callback)
        return self.subscription

    def emit(self, session) -> None:
        for callback in list(self.callbacks):
            callback(session)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
