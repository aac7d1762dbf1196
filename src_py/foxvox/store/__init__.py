"""
목적:
- 세그먼트 저장소 계층의 공개 진입점과 백엔드 팩토리를 제공한다.

설명:
- 설정의 backend 값에 따라 Redis 또는 메모리 저장소를 생성한다.

디자인 패턴:
- 팩토리 메서드(Factory Method).

참조:
- src_py/foxvox/store/redis_store.py
- src_py/foxvox/store/in_memory.py
"""

from __future__ import annotations

from foxvox.config.models import StoreConfig
from foxvox.exceptions import ConfigurationError

from .base import (
    SCHEMA_VERSION,
    SegmentStore,
    StoreKey,
    document_identity,
    load_generated,
    load_segments,
)
from .in_memory import InMemorySegmentStore
from .redis_store import RedisSegmentStore


def create_segment_store(config: StoreConfig) -> InMemorySegmentStore | RedisSegmentStore:
    if config.backend == "redis":
        if config.redis is None:
            raise ConfigurationError("redis 백엔드에는 redis 설정이 필요합니다")
        return RedisSegmentStore(config.redis)
    return InMemorySegmentStore()


__all__ = [
    "SCHEMA_VERSION",
    "SegmentStore",
    "StoreKey",
    "document_identity",
    "load_segments",
    "load_generated",
    "InMemorySegmentStore",
    "RedisSegmentStore",
    "create_segment_store",
]
