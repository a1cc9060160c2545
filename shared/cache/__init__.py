from .store import CacheAsideStore

__all__ = ["CacheAsideStore"]
