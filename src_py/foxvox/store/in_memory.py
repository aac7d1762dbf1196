"""
목적:
- 프로세스 메모리 기반 세그먼트 저장소를 제공한다.

설명:
- Redis 저장소와 같은 의미(가산 스키마, 원자적 교체, epoch 가드)를 asyncio 락으로 보장한다.
- 단일 사용자 로컬 실행과 테스트에서 외부 의존성 없이 사용한다.

디자인 패턴:
- 저장소 패턴(Repository Pattern).

참조:
- src_py/foxvox/store/base.py
- src_py/foxvox/store/redis_store.py
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from pydantic import BaseModel

from foxvox.config.models import ORIGINAL_STORE
from foxvox.store.base import SCHEMA_VERSION, StoreKey

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _IdentitySpace:
    schema_version: int = SCHEMA_VERSION
    stores: dict[str, list[str]] = field(default_factory=dict)


class InMemorySegmentStore:
    """문서 식별자 단위 메모리 세그먼트 저장소."""

    def __init__(self) -> None:
        self._spaces: dict[str, _IdentitySpace] = {}
        # epoch는 destroy 이후에도 유지되어야 늦은 교체를 막을 수 있다.
        self._epochs: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def ensure_schema(self, identity: str, store_names: Iterable[str]) -> None:
        async with self._lock:
            space = self._spaces.get(identity)
            if space is not None and space.schema_version > SCHEMA_VERSION:
                logger.warning(
                    "저장소 스키마 버전이 호환되지 않아 재생성합니다: identity=%s, recorded=%d",
                    identity,
                    space.schema_version,
                )
                self._drop(identity)
                space = None

            if space is None:
                space = self._spaces.setdefault(identity, _IdentitySpace())
            for name in (ORIGINAL_STORE, *store_names):
                space.stores.setdefault(name, [])

    async def replace_all(
        self,
        key: StoreKey,
        items: Sequence[BaseModel],
        *,
        epoch: int | None = None,
    ) -> bool:
        payload = [item.model_dump_json() for item in items]
        async with self._lock:
            current = self._epochs.get(key.identity, 0)
            if epoch is not None and current != epoch:
                logger.warning(
                    "저장소가 그 사이 비워져 교체를 건너뜁니다: key=%s, expected=%d, current=%d",
                    key,
                    epoch,
                    current,
                )
                return False

            space = self._spaces.setdefault(key.identity, _IdentitySpace())
            space.stores.setdefault(ORIGINAL_STORE, [])
            space.stores[key.store_name] = payload
        return True

    async def fetch_all(self, key: StoreKey) -> list[dict[str, Any]]:
        async with self._lock:
            space = self._spaces.get(key.identity)
            raw_items = list(space.stores.get(key.store_name, [])) if space else []
        return [json.loads(raw) for raw in raw_items]

    async def clear_all(self, identity: str) -> None:
        async with self._lock:
            space = self._spaces.get(identity)
            if space is not None:
                for name in space.stores:
                    space.stores[name] = []
            self._bump(identity)

    async def destroy(self, identity: str) -> None:
        async with self._lock:
            self._drop(identity)

    async def store_names(self, identity: str) -> set[str]:
        async with self._lock:
            space = self._spaces.get(identity)
            return set(space.stores) if space else set()

    async def epoch(self, identity: str) -> int:
        async with self._lock:
            return self._epochs.get(identity, 0)

    async def aclose(self) -> None:
        return None

    def _drop(self, identity: str) -> None:
        self._spaces.pop(identity, None)
        self._bump(identity)

    def _bump(self, identity: str) -> None:
        self._epochs[identity] = self._epochs.get(identity, 0) + 1
