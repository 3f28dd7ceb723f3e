"""Versioned API (v1).

The app mounts `app.api.v1.routers.build_v1_router()` under `API_V1_STR`.
Import the router from the `routers` subpackage rather than re-exporting it
here, so `routers` is never shadowed by an attribute of the same name.
"""

__all__ = []
