"""HTTP API and browser front-end."""
from visionscript.api.app import create_app

__all__ = ["create_app"]
