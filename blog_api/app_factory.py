"""Entry point for the FastAPI app factory."""
from blog_api.app import create_app

__all__ = ["create_app"]
