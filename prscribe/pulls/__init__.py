"""Merged pull request listing."""

from __future__ import annotations

from .service import PullRequestListingService

__all__ = ["PullRequestListingService"]
