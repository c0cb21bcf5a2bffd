"""
Publication query service.

Caches extracted publications and answers filtered, sorted, paginated queries.
"""

from .cache import PublicationCache
from .service import PublicationService

__all__ = ["PublicationCache", "PublicationService"]
