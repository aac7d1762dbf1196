"""
목적:
- 오케스트레이터가 소유하는 명시적 세션 컨텍스트를 정의한다.

설명:
- 현재 문서 식별자, 선택된 변형, 상태, 진행 중인 생성 태스크를 한곳에 둔다.
- 프로세스 전역 싱글톤을 두지 않고 오케스트레이터 인스턴스가 세션을 소유한다.

디자인 패턴:
- 상태 객체(State Object).

참조:
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Literal

from foxvox.config.models import Variant

SessionState = Literal["IDLE", "COLLECTED", "VARIANT_SELECTED", "GENERATING"]

GENERATABLE_STATES: frozenset[str] = frozenset({"COLLECTED", "VARIANT_SELECTED"})


@dataclass(slots=True)
class RewriteSession:
    """문서 하나에 대한 재작성 세션 상태."""

    identity: str | None = None
    url: str | None = None
    variant_names: list[str] = field(default_factory=list)
    selected: Variant | None = None
    state: SessionState = "IDLE"
    generation: asyncio.Task | None = None

    def remember_variants(self, names: list[str]) -> None:
        for name in names:
            if name not in self.variant_names:
                self.variant_names.append(name)

    @property
    def is_generating(self) -> bool:
        return self.generation is not None and not self.generation.done()
