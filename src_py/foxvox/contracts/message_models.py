"""
목적:
- 확장 호스트 메시지 버스의 요청/알림 모델을 정의한다.

설명:
- 요청 action과 알림 action을 문자열 상수로 통일한다.
- 호스트 UI는 `Notifier` 콜백으로 상태 알림을 구독한다.

디자인 패턴:
- 상태 객체(State DTO).

참조:
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

from typing import Awaitable, Callable, Literal

from pydantic import BaseModel, Field

from foxvox.config.models import Variant

HostAction = Literal[
    "setup",
    "set_template",
    "generate",
    "clear-cache",
    "navigation_completed",
]

NotificationAction = Literal[
    "generation_initialized",
    "generation_completed",
    "template_cached",
    "cache_deleted",
    "close_popup",
]


class HostMessage(BaseModel):
    """호스트에서 들어오는 태그 메시지 모델."""

    action: HostAction
    url: str = Field(min_length=1)
    template: Variant | None = Field(default=None)
    templates: dict[str, Variant] | None = Field(default=None)
    key: str | None = Field(default=None)
    openai: str | None = Field(default=None)


class HostNotification(BaseModel):
    """호스트 UI로 나가는 상태 알림 모델."""

    action: NotificationAction
    template_name: str | None = Field(default=None)


Notifier = Callable[[HostNotification], Awaitable[None]]
