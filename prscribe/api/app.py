"""Application factory for the prscribe Falcon ASGI application.

``create_app()`` always mounts the health probes. When every domain
service is supplied it also installs bearer authentication and the
repository, pull request, and article routes.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with domain endpoints::

    from prscribe.api.factory import build_app_dependencies

    app = create_app(build_app_dependencies())

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import falcon.asgi

from prscribe.api.errors import register_error_handlers
from prscribe.api.health.resources import HealthResource, ReadyResource
from prscribe.api.middleware import AuthenticationMiddleware, ShutdownMiddleware

if typ.TYPE_CHECKING:
    from prscribe.articles.queries import ArticleQueryService
    from prscribe.articles.service import ArticleGenerationService
    from prscribe.identity import IdentityProvider
    from prscribe.pulls.service import PullRequestListingService
    from prscribe.registry.service import RepositoryRegistryService

__all__ = ["AppDependencies", "create_app"]

ShutdownHook = cabc.Callable[[], cabc.Awaitable[None]]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Domain routes are registered only when every service is present.

    Attributes
    ----------
    identity_provider
        Resolves bearer credentials into identities.
    registry
        Repository registration and lookup.
    listing
        Merged pull request listing.
    generation
        Article generation.
    queries
        Article listing and retrieval.
    shutdown_hooks
        Coroutines awaited on ASGI lifespan shutdown.

    """

    identity_provider: IdentityProvider | None = None
    registry: RepositoryRegistryService | None = None
    listing: PullRequestListingService | None = None
    generation: ArticleGenerationService | None = None
    queries: ArticleQueryService | None = None
    shutdown_hooks: tuple[ShutdownHook, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class _DomainServices:
    identity_provider: IdentityProvider
    registry: RepositoryRegistryService
    listing: PullRequestListingService
    generation: ArticleGenerationService
    queries: ArticleQueryService


def _domain_services(deps: AppDependencies | None) -> _DomainServices | None:
    """Return the domain services when all of them are configured."""
    if deps is None:
        return None
    if (
        deps.identity_provider is None
        or deps.registry is None
        or deps.listing is None
        or deps.generation is None
        or deps.queries is None
    ):
        return None
    return _DomainServices(
        identity_provider=deps.identity_provider,
        registry=deps.registry,
        listing=deps.listing,
        generation=deps.generation,
        queries=deps.queries,
    )


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or incomplete,
        only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    services = _domain_services(dependencies)
    middleware: list[object] = []
    if services is not None:
        middleware.append(AuthenticationMiddleware(services.identity_provider))
    if dependencies is not None and dependencies.shutdown_hooks:
        middleware.append(ShutdownMiddleware(dependencies.shutdown_hooks))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(domain_enabled=services is not None))

    if services is not None:
        from prscribe.api.resources.articles import (
            ArticleCollectionResource,
            ArticleResource,
        )
        from prscribe.api.resources.repositories import (
            PullRequestCollectionResource,
            RepositoryCollectionResource,
        )

        app.add_route("/repositories", RepositoryCollectionResource(services.registry))
        app.add_route(
            "/repositories/{repository_id}/pulls",
            PullRequestCollectionResource(services.listing),
        )
        app.add_route(
            "/articles",
            ArticleCollectionResource(services.generation, services.queries),
        )
        app.add_route("/articles/{article_id}", ArticleResource(services.queries))

    register_error_handlers(app)
    return app
