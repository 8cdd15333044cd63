"""Repository registration."""

from __future__ import annotations

from .service import RepositoryRegistryService, require_owned_repository

__all__ = ["RepositoryRegistryService", "require_owned_repository"]
