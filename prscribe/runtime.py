"""prscribe runtime entrypoint.

``prscribe.runtime:create_app`` is the Granian factory entrypoint. When
``PRSCRIBE_WRITER_BACKEND`` is set it builds every domain service from the
environment; otherwise the app serves only the health probes.

Configuration is driven by environment variables:

- ``PRSCRIBE_HOST``: Bind address (default ``0.0.0.0``)
- ``PRSCRIBE_PORT``: Listen port (default ``8080``)
- ``PRSCRIBE_LOG_LEVEL``: Log level (default ``INFO``)
- ``PRSCRIBE_WRITER_BACKEND``: ``mock`` or ``openai`` (optional; enables
  domain endpoints when set)

Run the service with the ``prscribe`` console script or
``python -m prscribe.runtime``.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from prscribe.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["ServiceConfig", "create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535
_DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
_DEFAULT_PORT = "8080"


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid PRSCRIBE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


@dc.dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Server bind address and logging configuration."""

    host: str = _DEFAULT_HOST
    port: int = int(_DEFAULT_PORT)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServiceConfig:
        """Read ``PRSCRIBE_HOST``, ``PRSCRIBE_PORT``, and ``PRSCRIBE_LOG_LEVEL``.

        Raises
        ------
        SystemExit
            If ``PRSCRIBE_PORT`` is not a valid port number.

        """
        return cls(
            host=os.environ.get("PRSCRIBE_HOST", _DEFAULT_HOST),
            port=_parse_port(os.environ.get("PRSCRIBE_PORT", _DEFAULT_PORT)),
            log_level=os.environ.get("PRSCRIBE_LOG_LEVEL", "INFO"),
        )


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        The full app when ``PRSCRIBE_WRITER_BACKEND`` is set, otherwise a
        health-only app.

    """
    from prscribe.api.app import create_app as _create_api_app

    if os.environ.get("PRSCRIBE_WRITER_BACKEND") is None:
        log_info(logger, "PRSCRIBE_WRITER_BACKEND unset; serving health probes only")
        return _create_api_app()

    from prscribe.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies())


def main() -> None:
    """Start the prscribe server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    config = ServiceConfig.from_env()

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid PRSCRIBE_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    log_info(
        logger,
        "Starting prscribe on %s:%d (log_level=%s)",
        config.host,
        config.port,
        normalized_level,
    )

    server = Granian(
        "prscribe.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
