"""Health probe resources.

Usage
-----
Import health resources for route registration::

    from prscribe.api.health.resources import HealthResource, ReadyResource
"""
