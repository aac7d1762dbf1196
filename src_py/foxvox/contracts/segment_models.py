"""
목적:
- 세그먼트 캐시 레코드 인터페이스 모델을 정의한다.

설명:
- `original` 저장소에는 `Segment`, 변형 저장소에는 `GeneratedSegment`가 저장된다.
- 두 레코드는 직렬화된 구조 경로(`path`)로 서로 대응된다.
- `html`은 노드의 내부 마크업이며, 되쓰기도 내부 마크업 단위로 수행한다.

디자인 패턴:
- DTO(Data Transfer Object).

참조:
- src_py/foxvox/document/collector.py
- src_py/foxvox/store/base.py
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SegmentLayout(BaseModel):
    """세그먼트 노드의 렌더링 위치 모델."""

    left: float = Field(default=0)
    top: float = Field(default=0)


class Segment(BaseModel):
    """원본 문서에서 선택된 콘텐츠 세그먼트 모델."""

    path: str = Field(min_length=1)
    layout: SegmentLayout = Field(default_factory=SegmentLayout)
    html: str = Field(default="")
    text: str = Field(default="")


class GeneratedSegment(BaseModel):
    """변형 하나로 재작성된 세그먼트 모델."""

    path: str = Field(min_length=1)
    html: str = Field(min_length=1)
