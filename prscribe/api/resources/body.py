"""Request body and context helpers shared by the domain resources."""

from __future__ import annotations

import typing as typ

from prscribe.errors import AuthenticationError, InvalidInputError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request

    from prscribe.identity import Identity


def request_identity(req: Request) -> Identity:
    """Return the identity the authentication middleware attached.

    Raises
    ------
    AuthenticationError
        If the request bypassed authentication.

    """
    identity = getattr(req.context, "identity", None)
    if identity is None:
        raise AuthenticationError.missing_credentials()
    return identity


async def read_json_object(req: Request) -> dict[str, typ.Any]:
    """Return the request body as a JSON object.

    Raises
    ------
    InvalidInputError
        If the body is empty or not a JSON object.

    """
    media = await req.get_media(default_when_empty=None)
    if not isinstance(media, dict):
        raise InvalidInputError("request body must be a JSON object")
    return media


def optional_string(body: dict[str, typ.Any], field: str) -> str | None:
    """Return ``body[field]`` stripped, ``None`` when absent or blank.

    Raises
    ------
    InvalidInputError
        If the value is present but not a string.

    """
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError("must be a string", field=field)
    return value.strip() or None


def required_string(body: dict[str, typ.Any], field: str) -> str:
    """Return ``body[field]`` stripped.

    Raises
    ------
    InvalidInputError
        If the value is absent, blank, or not a string.

    """
    value = optional_string(body, field)
    if value is None:
        raise InvalidInputError("is required", field=field)
    return value
