"""
Client-side catalog search: paginated fetch, word/prefix index,
layered search with ranking, result cache and a debounced query controller.
"""
from .session import CatalogSession

__version__ = "0.1.0"

__all__ = ["CatalogSession", "__version__"]
