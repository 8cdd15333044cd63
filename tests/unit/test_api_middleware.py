"""Unit tests for the authentication and shutdown middleware."""

from __future__ import annotations

import falcon.asgi
import falcon.testing
import pytest

from prscribe.api.middleware import (
    AuthenticationMiddleware,
    ShutdownMiddleware,
    _bearer_credential,
)
from prscribe.errors import AuthenticationError
from tests.helpers.fakes import ALICE, FakeIdentityProvider
from tests.helpers.femtologging_capture import capture_femto_logs


class TestBearerCredential:
    """Tests for Authorization header parsing."""

    @pytest.mark.parametrize(
        "header",
        ["Bearer token-alice", "bearer token-alice", "  Bearer   token-alice  "],
    )
    def test_accepts_bearer_scheme(self, header: str) -> None:
        """The scheme is case-insensitive; surrounding spaces are ignored."""
        assert _bearer_credential(header) == "token-alice"

    @pytest.mark.parametrize(
        "header", [None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz", "token"]
    )
    def test_rejects_missing_or_foreign_credentials(self, header: str | None) -> None:
        """Anything but a non-empty bearer credential is missing credentials."""
        with pytest.raises(AuthenticationError, match="not provided"):
            _bearer_credential(header)


class TestAuthenticationMiddleware:
    """Tests for AuthenticationMiddleware.process_request."""

    @pytest.fixture
    def middleware(self) -> AuthenticationMiddleware:
        """Provide middleware that knows Alice only."""
        return AuthenticationMiddleware(FakeIdentityProvider([ALICE]))

    @pytest.mark.asyncio
    async def test_attaches_identity(
        self, middleware: AuthenticationMiddleware
    ) -> None:
        """A known token sets req.context.identity."""
        req = falcon.testing.create_asgi_req(
            path="/articles", headers={"Authorization": "Bearer token-alice"}
        )

        await middleware.process_request(req, falcon.asgi.Response())

        assert req.context.identity == ALICE

    @pytest.mark.asyncio
    async def test_unknown_token_is_rejected(
        self, middleware: AuthenticationMiddleware
    ) -> None:
        """Tokens the provider rejects raise invalid credentials."""
        req = falcon.testing.create_asgi_req(
            path="/articles", headers={"Authorization": "Bearer stolen"}
        )

        with pytest.raises(AuthenticationError, match="invalid or expired"):
            await middleware.process_request(req, falcon.asgi.Response())

    @pytest.mark.asyncio
    async def test_exempt_paths_skip_authentication(
        self, middleware: AuthenticationMiddleware
    ) -> None:
        """Probe paths pass through without a credential."""
        req = falcon.testing.create_asgi_req(path="/health")

        await middleware.process_request(req, falcon.asgi.Response())

        assert getattr(req.context, "identity", None) is None


class TestShutdownMiddleware:
    """Tests for ShutdownMiddleware.process_shutdown."""

    @pytest.mark.asyncio
    async def test_runs_hooks_in_order(self) -> None:
        """Hooks are awaited in registration order."""
        calls: list[str] = []

        async def first() -> None:
            calls.append("first")

        async def second() -> None:
            calls.append("second")

        await ShutdownMiddleware([first, second]).process_shutdown({}, {})

        assert calls == ["first", "second"]

    @pytest.mark.asyncio
    async def test_failing_hook_is_logged_and_later_hooks_run(self) -> None:
        """A failure does not stop the remaining hooks."""
        calls: list[str] = []
        error = RuntimeError("pool already closed")

        async def failing() -> None:
            raise error

        async def closing() -> None:
            calls.append("closed")

        with capture_femto_logs("prscribe.api.middleware") as capture:
            await ShutdownMiddleware([failing, closing]).process_shutdown({}, {})
            capture.wait_for_count(1)

        assert calls == ["closed"]
        record = capture.records[0]
        assert record.level == "ERROR"
        assert record.message == "Shutdown hook failed"


@pytest.mark.asyncio
async def test_exempt_paths_are_configurable() -> None:
    """A custom exempt set replaces the probe defaults."""
    middleware = AuthenticationMiddleware(
        FakeIdentityProvider([]), exempt_paths=frozenset({"/metrics"})
    )

    await middleware.process_request(
        falcon.testing.create_asgi_req(path="/metrics"), falcon.asgi.Response()
    )
    with pytest.raises(AuthenticationError):
        await middleware.process_request(
            falcon.testing.create_asgi_req(path="/health"), falcon.asgi.Response()
        )
