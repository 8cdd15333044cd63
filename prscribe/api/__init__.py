"""prscribe HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the prscribe runtime.

Usage
-----
Create the application::

    from prscribe.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with domain endpoints

"""

from prscribe.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
