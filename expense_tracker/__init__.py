"""Personal expense tracking API with spending analytics."""
from .app import create_app

__all__ = ["create_app"]
