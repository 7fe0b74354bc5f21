"""
Endpoint subpackage for API v1.

Each module defines the ``APIRouter`` of one service.
"""
