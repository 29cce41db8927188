"""Flask job API for the survey crawler."""
from .app import app

__all__ = ["app"]
