"""In-memory raw payload cache for Tickcast.

Key/value store of provider responses with per-entry TTL and lazy eviction.
"""

from tickcast.cache.memory_store import CacheEntry, CacheStore, MemoryCache

__all__ = ["CacheEntry", "CacheStore", "MemoryCache"]
