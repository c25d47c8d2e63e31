"""HTTP API for translation resolution."""

from undha.api.main import create_app

__all__ = ["create_app"]
