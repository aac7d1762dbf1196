"""
목적:
- FoxVox 라이브러리의 설정 인터페이스를 정의한다.

설명:
- 분할/재작성/자격 증명/저장소 제어 값을 단일 모델로 관리한다.
- 채팅 모델은 설정 파일이 아닌 Python 팩토리 주입으로 전달한다.
- 변형(Variant) 카탈로그는 확장 프로그램의 `config.json` 형식을 그대로 읽는다.

디자인 패턴:
- 값 객체(Value Object).

참조:
- scripts/run-rewrite.py
- src_py/foxvox/orchestration/orchestrator.py
- src_py/foxvox/store/redis_store.py
"""

from __future__ import annotations

import base64
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ORIGINAL_STORE = "original"

DEFAULT_NON_CONTENT_TAGS = frozenset({"script", "style", "noscript", "template"})


class Variant(BaseModel):
    """이름 있는 재작성 스타일(템플릿) 모델."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    instructions: str = Field(
        min_length=1,
        validation_alias=AliasChoices("instructions", "generation"),
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if value == ORIGINAL_STORE:
            raise ValueError(f"변형 이름으로 '{ORIGINAL_STORE}'는 사용할 수 없습니다")
        return value


class VariantCatalog(BaseModel):
    """변형 목록과 기본(번들) API 키를 담는 카탈로그 모델."""

    variants: dict[str, Variant] = Field(default_factory=dict)
    encoded_default_key: str = Field(default="")

    @classmethod
    def from_config_json(cls, data: dict[str, Any]) -> VariantCatalog:
        """확장 프로그램 `config.json` 사전에서 카탈로그를 생성한다."""
        templates = data.get("templates") or {}
        if not isinstance(templates, dict):
            raise ValueError("templates는 객체여야 합니다")

        api = data.get("api") or {}
        return cls(
            variants={key: Variant.model_validate(value) for key, value in templates.items()},
            encoded_default_key=str(api.get("key", "")),
        )

    def names(self) -> list[str]:
        return [variant.name for variant in self.variants.values()]

    def find(self, name: str) -> Variant | None:
        for variant in self.variants.values():
            if variant.name == name:
                return variant
        return None

    def default_key(self) -> str:
        """번들 키(base64)를 복호화해 반환한다. 없으면 빈 문자열."""
        if not self.encoded_default_key:
            return ""
        return base64.b64decode(self.encoded_default_key).decode("utf-8").strip()


class SegmentationConfig(BaseModel):
    """문서 분할(가중치 기반 트리 분해) 설정 모델."""

    text_boundary_min: int = Field(default=20, ge=1)
    min_visible_chars: int = Field(default=40, ge=0)
    html_scale: float = Field(default=500.0, gt=0)
    sigmoid_steepness: float = Field(default=10.0, gt=0)
    sigmoid_midpoint: float = Field(default=0.5)
    non_content_tags: frozenset[str] = Field(default=DEFAULT_NON_CONTENT_TAGS)

    @field_validator("non_content_tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: object) -> frozenset[str]:
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(str(tag).strip().lower() for tag in value if str(tag).strip())


class RewriteConfig(BaseModel):
    """생성 서비스 호출(재작성) 설정 모델."""

    model: str = Field(default="gpt-4o", min_length=1)
    max_tokens: int = Field(default=4_000, ge=100, le=10_000)
    custom_prompt: str = Field(default="")
    max_concurrency: int | None = Field(default=None, ge=1)
    timeout_sec: float = Field(default=120.0, gt=0)


class CredentialConfig(BaseModel):
    """자격 증명 폴백 체인 설정 모델."""

    shared_key_url: str | None = Field(default=None)
    timeout_ms: int = Field(default=5_000, ge=1)
    validation_model: str = Field(default="gpt-4o", min_length=1)


class RedisStoreConfig(BaseModel):
    """Redis 세그먼트 저장소 연결 설정 모델."""

    host: str = Field(min_length=1)
    port: int = Field(default=6379, ge=1, le=65535)
    db: int = Field(default=0, ge=0)
    username: str | None = Field(default=None)
    password: str | None = Field(default=None)
    use_ssl: bool = Field(default=False)
    key_prefix: str = Field(default="foxvox", min_length=1)


class StoreConfig(BaseModel):
    """세그먼트 저장소 백엔드 선택 모델."""

    backend: Literal["redis", "memory"] = Field(default="memory")
    redis: RedisStoreConfig | None = Field(default=None, validate_default=True)

    @field_validator("redis")
    @classmethod
    def validate_redis(cls, value: RedisStoreConfig | None, info) -> RedisStoreConfig | None:
        backend = info.data.get("backend", "memory")
        if backend == "redis" and value is None:
            raise ValueError("backend가 redis이면 redis 설정이 필요합니다")
        return value


class PipelineConfig(BaseModel):
    """재작성 파이프라인 전체 설정 모델."""

    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    credentials: CredentialConfig = Field(default_factory=CredentialConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
