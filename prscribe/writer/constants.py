"""Shared constants for article writer configuration and prompts."""

from __future__ import annotations

# OpenAI API sampling range
MIN_TEMPERATURE: float = 0.0
MAX_TEMPERATURE: float = 2.0

# Prompt excerpt lengths, in characters
PR_BODY_EXCERPT_CHARS: int = 300
TITLE_CONTENT_EXCERPT_CHARS: int = 500
MAX_TITLE_CHARS: int = 30
