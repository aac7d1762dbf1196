"""
목적:
- 세그먼트 저장소 인터페이스와 문서 식별자/저장소 키 규칙을 정의한다.

설명:
- 문서 식별자(hostname + pathname)마다 `original`과 변형별 저장소가 묶인다.
- 모든 변경은 통째 교체(`replace_all`)/전체 비우기(`clear_all`)/삭제(`destroy`)로만 일어난다.
- 식별자별 epoch는 비우기/삭제 때마다 증가하며, 늦게 도착한 교체 요청을 무효화하는 데 쓴다.

디자인 패턴:
- 저장소 패턴(Repository Pattern).

참조:
- src_py/foxvox/store/redis_store.py
- src_py/foxvox/store/in_memory.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence
from urllib.parse import urlparse

from pydantic import BaseModel

from foxvox.config.models import ORIGINAL_STORE
from foxvox.contracts.segment_models import GeneratedSegment, Segment
from foxvox.exceptions import ConfigurationError

SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class StoreKey:
    """(문서 식별자, 저장소 이름) 키."""

    identity: str
    store_name: str

    @classmethod
    def original(cls, identity: str) -> StoreKey:
        return cls(identity=identity, store_name=ORIGINAL_STORE)


class SegmentStore(Protocol):
    """문서 식별자 단위 세그먼트 캐시 인터페이스."""

    async def ensure_schema(self, identity: str, store_names: Iterable[str]) -> None: ...

    async def replace_all(
        self,
        key: StoreKey,
        items: Sequence[BaseModel],
        *,
        epoch: int | None = None,
    ) -> bool: ...

    async def fetch_all(self, key: StoreKey) -> list[dict[str, Any]]: ...

    async def clear_all(self, identity: str) -> None: ...

    async def destroy(self, identity: str) -> None: ...

    async def store_names(self, identity: str) -> set[str]: ...

    async def epoch(self, identity: str) -> int: ...


def document_identity(url: str) -> str:
    """URL에서 `hostname + pathname` 식별자를 만든다.

    스킴이 없는 입력(`example.com/docs`)은 이미 식별자로 간주한다.
    """
    raw = url.strip()
    if not raw:
        raise ConfigurationError("문서 URL이 비어 있습니다")

    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw
    if not parsed.hostname:
        raise ConfigurationError(f"URL에서 hostname을 찾을 수 없습니다: {url}")
    return parsed.hostname + (parsed.path or "/")


def load_segments(records: Iterable[dict[str, Any]]) -> list[Segment]:
    return [Segment.model_validate(record) for record in records]


def load_generated(records: Iterable[dict[str, Any]]) -> list[GeneratedSegment]:
    return [GeneratedSegment.model_validate(record) for record in records]
