"""HTTP API for segment extraction and merge."""

from segmerge.api.app import create_app

__all__ = ["create_app"]
