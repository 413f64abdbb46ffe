"""FastAPI route modules.

Exports all route modules for inclusion in the main application.
"""

from vicsedi.api.routes import convert, documents

__all__ = [
    "convert",
    "documents",
]
