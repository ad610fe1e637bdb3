import asyncio

import httpx
import pytest

from helpers import ALICE
from shortlink.presenter import ShortenerPresenter
from shortlink.services.identity import IdentityProviderError
from shortlink.services.shortener_client import ShortenerClient
from shortlink.session import SessionController
from shortlink.shortening import SHORTEN_FAILED_MESSAGE, UNAUTHORIZED_MESSAGE, ShortenRequestWorkflow
from shortlink.state import AuthStatus, ShortenStatus


def _presenter(provider, handler) -> ShortenerPresenter:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = ShortenerClient("https://api.example", http_client=http_client)
    return ShortenerPresenter(SessionController(provider), ShortenRequestWorkflow(client))


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"short_url": "https://s.example/abc"})


@pytest.mark.asyncio
async def test_login_then_shorten(provider) -> None:
    presenter = _presenter(provider, _ok)
    await presenter.start()

    await presenter.login("alice@example.com", "secret")
    await presenter.submit_url("https://very/long/url")

    snapshot = presenter.snapshot()
    assert snapshot.auth.is_authenticated
    assert snapshot.shorten_status is ShortenStatus.SUCCEEDED
    assert snapshot.short_url == "https://s.example/abc"
    assert snapshot.error is None
    assert snapshot.busy is False


@pytest.mark.asyncio
async def test_submit_while_signed_out_never_hits_network(provider) -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return _ok(request)

    presenter = _presenter(provider, handler)
    await presenter.start()

    request = await presenter.submit_url("https://very/long/url")

    assert request.reason == "unauthorized"
    assert request.error == UNAUTHORIZED_MESSAGE
    assert requests == []


@pytest.mark.asyncio
async def test_logout_clears_everything_even_if_provider_fails(provider) -> None:
    provider.get_current_session.return_value = ALICE
    provider.sign_out.side_effect = IdentityProviderError("network down")
    presenter = _presenter(provider, _ok)
    await presenter.start()
    await presenter.submit_url("https://very/long/url")
    assert presenter.snapshot().shorten_status is ShortenStatus.SUCCEEDED

    await presenter.logout()

    snapshot = presenter.snapshot()
    request = presenter.workflow.request
    assert snapshot.auth.status is AuthStatus.UNAUTHENTICATED
    assert snapshot.shorten_status is ShortenStatus.IDLE
    assert (request.input_url, request.short_url, request.error) == ("", None, None)
    assert snapshot.error is None


@pytest.mark.asyncio
async def test_response_arriving_after_logout_is_discarded(provider) -> None:
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return _ok(request)

    provider.get_current_session.return_value = ALICE
    presenter = _presenter(provider, handler)
    await presenter.start()

    pending = asyncio.create_task(presenter.submit_url("https://very/long/url"))
    await asyncio.sleep(0)
    assert presenter.snapshot().shorten_status is ShortenStatus.PENDING
    assert presenter.snapshot().busy is True

    await presenter.logout()
    release.set()
    await pending

    assert presenter.snapshot().shorten_status is ShortenStatus.IDLE
    assert presenter.snapshot().short_url is None


@pytest.mark.asyncio
async def test_provider_signout_event_resets_workflow(provider) -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    provider.get_current_session.return_value = ALICE
    presenter = _presenter(provider, failing)
    await presenter.start()
    await presenter.submit_url("https://very/long/url")
    assert presenter.snapshot().error == SHORTEN_FAILED_MESSAGE

    provider.emit(None)

    assert presenter.snapshot().shorten_status is ShortenStatus.IDLE
    assert presenter.snapshot().error is None


@pytest.mark.asyncio
async def test_auth_error_is_shown_while_signed_out(provider) -> None:
    provider.sign_in_with_password.side_effect = IdentityProviderError("Invalid login credentials")
    presenter = _presenter(provider, _ok)
    await presenter.start()
    notified = []
    presenter.subscribe(lambda: notified.append(presenter.snapshot().auth.status))

    await presenter.login("alice@example.com", "wrong")

    assert presenter.snapshot().error == "Invalid login credentials"
    assert notified == [AuthStatus.AUTHENTICATING, AuthStatus.UNAUTHENTICATED]


@pytest.mark.asyncio
async def test_signup_is_immediately_authenticated(provider) -> None:
    presenter = _presenter(provider, _ok)
    await presenter.start()

    assert await presenter.signup("alice@example.com", "secret") is None
    assert presenter.snapshot().auth.user == ALICE.user


@pytest.mark.asyncio
async def test_stop_tears_down_subscription(provider) -> None:
    presenter = _presenter(provider, _ok)
    await presenter.start()
    notified = []
    presenter.subscribe(lambda: notified.append(True))

    presenter.stop()
    provider.emit(ALICE)

    provider.subscription.unsubscribe.assert_called_once_with()
    assert notified == []
