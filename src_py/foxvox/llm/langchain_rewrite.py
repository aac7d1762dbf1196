"""
목적:
- LangChain `ainvoke` 기반 세그먼트 재작성 어댑터를 제공한다.

설명:
- 턴 1: 시스템(변형 지시 + 사용자 지시 접미사) / 사용자(원본 마크업) → 초안.
- 턴 2: 턴 1과 초안을 재생하고 자기 검토를 요청 → 최종 결과.
- 단일 턴 모델 계열은 내부 추론 지시를 덧붙인 한 번의 호출로 끝낸다.
- 두 턴 모두 `with_structured_output`으로 `html` 필드만 받는다.
- 어느 턴이든 구조화 결과가 없거나 비어 있으면 예외 대신 `None`을 반환한다.

디자인 패턴:
- 어댑터(Adapter).

참조:
- src_py/foxvox/llm/contracts.py
- src_py/foxvox/llm/prompts.py
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.prompts import ChatPromptTemplate

from foxvox.config.models import RewriteConfig, Variant
from foxvox.exceptions import RewriteError
from foxvox.llm.contracts import ChatModelFactory, ModelProfile, RewrittenMarkup
from foxvox.llm.prompts import REVIEW_PROMPT, SINGLE_TURN_PROMPT

logger = logging.getLogger(__name__)


class LangChainRewriter:
    """LangChain 채팅 모델을 세그먼트 재작성기로 감싸는 어댑터."""

    def __init__(self, config: RewriteConfig, chat_model_factory: ChatModelFactory) -> None:
        self._config = config
        self._factory = chat_model_factory
        self._profile = ModelProfile.for_model(config.model)
        self._draft_prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{instructions}"),
                ("human", "{original}"),
            ]
        )
        self._review_prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{instructions}"),
                ("human", "{original}"),
                ("ai", "{draft}"),
                ("human", REVIEW_PROMPT),
            ]
        )

    @property
    def profile(self) -> ModelProfile:
        return self._profile

    def build_instructions(self, variant: Variant) -> str:
        """시스템 지시문을 조립한다."""
        parts = [variant.instructions.strip()]
        if self._config.custom_prompt.strip():
            parts.append(self._config.custom_prompt.strip())
        if self._profile.single_turn:
            parts.append(SINGLE_TURN_PROMPT)
        return "\n\n".join(parts)

    async def rewrite(self, credential: str, variant: Variant, original: str) -> str | None:
        """원본 마크업을 변형 스타일로 재작성한다. 실패 시 None."""
        try:
            chat_model = self._factory(
                credential,
                self._config.model,
                self._profile.model_kwargs(self._config.max_tokens),
            )
            structured = chat_model.with_structured_output(RewrittenMarkup)
            variables = {
                "instructions": self.build_instructions(variant),
                "original": original,
            }

            result = await self._invoke(structured, self._draft_prompt, variables)
            if not self._profile.single_turn:
                result = await self._invoke(
                    structured,
                    self._review_prompt,
                    {**variables, "draft": result.model_dump_json()},
                )
        except Exception as exc:  # noqa: BLE001
            logger.warning("세그먼트 재작성 실패: variant=%s, error=%s", variant.name, exc)
            return None

        return result.html

    async def _invoke(self, structured, prompt: ChatPromptTemplate, variables: dict[str, Any]) -> RewrittenMarkup:
        prompt_value = prompt.invoke(variables)
        response = await structured.ainvoke(prompt_value)
        return _read_structured(response)


def _read_structured(response: object) -> RewrittenMarkup:
    if isinstance(response, RewrittenMarkup):
        result = response
    elif isinstance(response, dict):
        result = RewrittenMarkup.model_validate(response)
    else:
        raise RewriteError(f"구조화 출력이 없습니다: type={type(response).__name__}")

    if not result.html.strip():
        raise RewriteError("구조화 출력 html이 비어 있습니다")
    return result
