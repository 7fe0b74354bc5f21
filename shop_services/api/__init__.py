"""
API package containing versioned routes.

A version subpackage exposes ``build_router(service)``, which returns
the router of one service only; a deployed service never serves the
routes of another.
"""
