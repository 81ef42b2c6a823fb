"""
Persistence layer for item records.

Components:
- ItemStore: Abstract record store
- RedisItemStore: redis.asyncio implementation
- InMemoryItemStore: In-process implementation
- LifecycleStore: Status transitions over any ItemStore
- RedisClient: Async connection pool owner
"""

from sentiment_pipeline.persistence.base import ItemStore
from sentiment_pipeline.persistence.exceptions import StoreError
from sentiment_pipeline.persistence.lifecycle import LifecycleStore
from sentiment_pipeline.persistence.memory_store import InMemoryItemStore
from sentiment_pipeline.persistence.redis_client import RedisClient
from sentiment_pipeline.persistence.redis_store import RedisItemStore

__all__ = [
    "ItemStore",
    "InMemoryItemStore",
    "LifecycleStore",
    "RedisClient",
    "RedisItemStore",
    "StoreError",
]
