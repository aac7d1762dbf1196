"""
목적:
- 재작성 LLM 입력/출력 모델과 모델 계열 프로파일을 정의한다.

설명:
- 생성 서비스는 자유 텍스트가 아니라 `html` 필드 하나를 가진 구조화 출력으로 응답해야 한다.
- 일부 모델 계열(o1/o3/o4)은 토큰 예산 파라미터 이름이 다르고, 단일 턴으로만 호출한다.
- 채팅 모델 생성은 팩토리 주입으로 위임하며 라이브러리는 공급자를 직접 만들지 않는다.

디자인 패턴:
- DTO(Data Transfer Object).

참조:
- src_py/foxvox/llm/langchain_rewrite.py
- src_py/foxvox/credentials/resolver.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel, Field

_SINGLE_TURN_PREFIXES = ("o1", "o3", "o4")

# (api_key, model, model_kwargs) -> 채팅 모델
ChatModelFactory = Callable[[str, str, dict[str, Any]], BaseChatModel]


class RewrittenMarkup(BaseModel):
    """Output your rewritten input here."""

    html: str = Field(default="", description="Rewritten HTML markup of the input")


@dataclass(frozen=True, slots=True)
class ModelProfile:
    """모델 계열별 호출 방식."""

    model: str
    single_turn: bool
    token_budget_field: str

    @classmethod
    def for_model(cls, model: str) -> ModelProfile:
        single_turn = model.strip().lower().startswith(_SINGLE_TURN_PREFIXES)
        return cls(
            model=model,
            single_turn=single_turn,
            token_budget_field="max_completion_tokens" if single_turn else "max_tokens",
        )

    def model_kwargs(self, max_tokens: int) -> dict[str, Any]:
        return {self.token_budget_field: max_tokens}
