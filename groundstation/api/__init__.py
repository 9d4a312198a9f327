"""HTTP status API package"""

from groundstation.api.app import create_app

__all__ = ["create_app"]
