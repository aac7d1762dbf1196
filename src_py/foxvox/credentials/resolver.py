"""
목적:
- 재작성 세션에 사용할 API 자격 증명을 폴백 체인으로 결정한다.

설명:
- 사용자 키가 있으면 최소 호출 1회로 검증하고, 통과하면 그대로 사용한다.
- 검증 실패(또는 사용자 키 없음)면 원격 공유 키를 받아 base64 복호화해 사용한다.
- 원격 조회도 실패하면 호출자가 준 기본 키로 끝난다.
- 체인은 예외를 던지지 않으며, 잘못된 키의 실패는 실제 생성 호출에서 드러난다.

디자인 패턴:
- 전략(Strategy) + 책임 연쇄(Chain of Responsibility).

참조:
- src_py/foxvox/llm/contracts.py
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Protocol

import httpx
from langchain_core.messages import SystemMessage

from foxvox.config.models import CredentialConfig
from foxvox.llm.contracts import ChatModelFactory
from foxvox.llm.prompts import PING_PROMPT

logger = logging.getLogger(__name__)


class CredentialResolver(Protocol):
    """자격 증명 결정 전략 인터페이스."""

    async def resolve(self, user_key: str | None, fallback_key: str) -> str: ...


class StaticCredentialResolver:
    """항상 같은 규칙으로 키를 고르는 결정적 전략."""

    def __init__(self, key: str | None = None) -> None:
        self._key = key

    async def resolve(self, user_key: str | None, fallback_key: str) -> str:
        return self._key or user_key or fallback_key


class ChainedCredentialResolver:
    """사용자 키 → 원격 공유 키 → 기본 키 순서의 폴백 체인."""

    def __init__(
        self,
        config: CredentialConfig,
        chat_model_factory: ChatModelFactory,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._factory = chat_model_factory
        self._http_client = http_client

    async def resolve(self, user_key: str | None, fallback_key: str) -> str:
        candidate = (user_key or "").strip()
        if candidate:
            if await self._validate(candidate):
                return candidate
            logger.warning("사용자 API 키 검증에 실패해 공유 키로 폴백합니다")

        return await self._fetch_shared_key(fallback_key)

    async def _validate(self, key: str) -> bool:
        try:
            chat_model = self._factory(key, self._config.validation_model, {})
            await asyncio.wait_for(
                chat_model.ainvoke([SystemMessage(content=PING_PROMPT)]),
                timeout=self._config.timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.info("API 키 검증 호출 시간 초과: timeout_ms=%d", self._config.timeout_ms)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.info("API 키 검증 호출 실패: %s", exc)
            return False
        return True

    async def _fetch_shared_key(self, fallback_key: str) -> str:
        url = self._config.shared_key_url
        if not url:
            return fallback_key

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout_ms / 1000.0) as client:
                    response = await client.get(url)
            response.raise_for_status()
            decoded = decode_shared_key(response.text)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("공유 키 조회 실패, 기본 키를 사용합니다: %s", exc)
            return fallback_key

        if not decoded:
            logger.warning("공유 키가 비어 있어 기본 키를 사용합니다")
            return fallback_key
        return decoded


def decode_shared_key(text: str) -> str:
    """base64로 인코딩된 UTF-8 키를 복호화한다."""
    try:
        return base64.b64decode(text.strip(), validate=True).decode("utf-8").strip()
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"공유 키 복호화 실패: {exc}") from exc
