"""
목적:
- Redis 기반 세그먼트 캐시 저장소를 관리한다.

설명:
- 문서 식별자별로 스키마 해시, 저장소 이름 집합, 저장소별 JSON 리스트, epoch 카운터를 둔다.
- `replace_all`은 MULTI/EXEC 트랜잭션으로 삭제와 적재를 한 번에 반영한다.
- epoch가 지정되면 WATCH로 감시해, 그 사이 비우기/삭제가 있었다면 교체를 포기한다.
- 기록된 스키마 버전이 코드보다 높거나 읽을 수 없으면 식별자를 삭제 후 재생성한다.

디자인 패턴:
- 저장소 패턴(Repository Pattern).

참조:
- src_py/foxvox/store/base.py
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Sequence

from pydantic import BaseModel
from redis import asyncio as redis_asyncio
from redis.exceptions import WatchError

from foxvox.config.models import ORIGINAL_STORE, RedisStoreConfig
from foxvox.exceptions import StorageError
from foxvox.store.base import SCHEMA_VERSION, StoreKey

logger = logging.getLogger(__name__)


class RedisSegmentStore:
    """문서 식별자 단위 Redis 세그먼트 저장소."""

    def __init__(self, config: RedisStoreConfig, client: redis_asyncio.Redis | None = None) -> None:
        self._config = config
        self._redis = client if client is not None else self._create_client(config)

    @staticmethod
    def _create_client(config: RedisStoreConfig) -> redis_asyncio.Redis:
        return redis_asyncio.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            username=config.username,
            password=config.password,
            ssl=config.use_ssl,
            decode_responses=True,
        )

    @property
    def config(self) -> RedisStoreConfig:
        """저장소 설정 객체를 반환한다."""
        return self._config

    async def ensure_schema(self, identity: str, store_names: Iterable[str]) -> None:
        """`original`과 주어진 저장소가 존재하도록 스키마를 가산적으로 맞춘다."""
        names = [ORIGINAL_STORE, *store_names]
        try:
            recorded = await self._redis.hget(self._meta_key(identity), "schema_version")
            if recorded is not None and not _is_compatible(recorded):
                logger.warning(
                    "저장소 스키마 버전이 호환되지 않아 재생성합니다: identity=%s, recorded=%s, current=%d",
                    identity,
                    recorded,
                    SCHEMA_VERSION,
                )
                await self.destroy(identity)

            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.hset(self._meta_key(identity), mapping={"schema_version": str(SCHEMA_VERSION)})
                pipe.sadd(self._stores_key(identity), *names)
                await pipe.execute()
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(f"저장소 스키마 초기화 실패: identity={identity}, error={exc}") from exc

    async def replace_all(
        self,
        key: StoreKey,
        items: Sequence[BaseModel],
        *,
        epoch: int | None = None,
    ) -> bool:
        """저장소 내용을 items로 원자적으로 교체한다. epoch 불일치면 False."""
        payload = [item.model_dump_json() for item in items]
        epoch_key = self._epoch_key(key.identity)

        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                if epoch is not None:
                    await pipe.watch(epoch_key)
                    current = int(await pipe.get(epoch_key) or 0)
                    if current != epoch:
                        await pipe.unwatch()
                        logger.warning(
                            "저장소가 그 사이 비워져 교체를 건너뜁니다: key=%s, expected=%d, current=%d",
                            key,
                            epoch,
                            current,
                        )
                        return False
                    pipe.multi()

                self._queue_replace(pipe, key, payload)
                await pipe.execute()
        except WatchError:
            logger.warning("교체 중 epoch가 변경되어 건너뜁니다: key=%s", key)
            return False
        except Exception as exc:
            raise StorageError(f"저장소 교체 실패: key={key}, error={exc}") from exc

        return True

    async def fetch_all(self, key: StoreKey) -> list[dict[str, Any]]:
        """저장소의 전체 레코드를 반환한다."""
        try:
            raw_items = await self._redis.lrange(self._list_key(key.identity, key.store_name), 0, -1)
        except Exception as exc:
            raise StorageError(f"저장소 조회 실패: key={key}, error={exc}") from exc

        records: list[dict[str, Any]] = []
        for raw in raw_items:
            try:
                records.append(json.loads(raw))
            except json.JSONDecodeError as exc:
                logger.warning("손상된 레코드를 건너뜁니다: key=%s, error=%s", key, exc)
        return records

    async def clear_all(self, identity: str) -> None:
        """식별자 아래 모든 저장소를 비우고 스키마는 유지한다."""
        try:
            names = await self._redis.smembers(self._stores_key(identity))
            async with self._redis.pipeline(transaction=True) as pipe:
                for name in {ORIGINAL_STORE, *names}:
                    pipe.delete(self._list_key(identity, name))
                pipe.incr(self._epoch_key(identity))
                await pipe.execute()
        except Exception as exc:
            raise StorageError(f"저장소 비우기 실패: identity={identity}, error={exc}") from exc

    async def destroy(self, identity: str) -> None:
        """식별자의 저장 공간 전체를 삭제한다."""
        try:
            names = await self._redis.smembers(self._stores_key(identity))
            async with self._redis.pipeline(transaction=True) as pipe:
                for name in {ORIGINAL_STORE, *names}:
                    pipe.delete(self._list_key(identity, name))
                pipe.delete(self._stores_key(identity), self._meta_key(identity))
                pipe.incr(self._epoch_key(identity))
                await pipe.execute()
        except Exception as exc:
            raise StorageError(f"저장소 삭제 실패: identity={identity}, error={exc}") from exc

    async def store_names(self, identity: str) -> set[str]:
        """스키마에 등록된 저장소 이름 집합을 반환한다."""
        try:
            names = await self._redis.smembers(self._stores_key(identity))
        except Exception as exc:
            raise StorageError(f"저장소 목록 조회 실패: identity={identity}, error={exc}") from exc
        return {str(name) for name in names}

    async def epoch(self, identity: str) -> int:
        """식별자의 현재 epoch를 반환한다."""
        try:
            value = await self._redis.get(self._epoch_key(identity))
        except Exception as exc:
            raise StorageError(f"epoch 조회 실패: identity={identity}, error={exc}") from exc
        return int(value or 0)

    async def aclose(self) -> None:
        await self._redis.aclose()

    def _queue_replace(self, pipe, key: StoreKey, payload: list[str]) -> None:
        list_key = self._list_key(key.identity, key.store_name)
        pipe.delete(list_key)
        if payload:
            pipe.rpush(list_key, *payload)
        pipe.sadd(self._stores_key(key.identity), key.store_name)
        pipe.hsetnx(self._meta_key(key.identity), "schema_version", str(SCHEMA_VERSION))

    def _meta_key(self, identity: str) -> str:
        return f"{self._config.key_prefix}:{identity}:meta"

    def _stores_key(self, identity: str) -> str:
        return f"{self._config.key_prefix}:{identity}:stores"

    def _epoch_key(self, identity: str) -> str:
        return f"{self._config.key_prefix}:{identity}:epoch"

    def _list_key(self, identity: str, store_name: str) -> str:
        return f"{self._config.key_prefix}:{identity}:store:{store_name}"


def _is_compatible(recorded: str) -> bool:
    try:
        return int(recorded) <= SCHEMA_VERSION
    except (TypeError, ValueError):
        return False

