"""
목적:
- 살아 있는 문서에서 `original` 저장소에 넣을 세그먼트 목록을 만든다.

설명:
- 스냅샷 생성 → 분할기 선택 → 구조 경로/레이아웃/마크업 추출 순서로 진행한다.
- 분할 결과 중 화면상 의미가 약한 노드(짧은 본문, 빈 마크업)는 한 번 더 걸러낸다.
- 루트는 `<body>`가 있으면 body, 없으면 문서 전체다.

디자인 패턴:
- 파이프라인(Pipeline).

참조:
- src_py/foxvox/document/snapshot.py
- src_py/foxvox/document/segmenter.py
- src_py/foxvox/document/addressing.py
"""

from __future__ import annotations

import logging
from typing import Callable

from bs4 import BeautifulSoup, Tag

from foxvox.config.models import SegmentationConfig
from foxvox.contracts.segment_models import Segment, SegmentLayout
from foxvox.document.addressing import address_of
from foxvox.document.segmenter import Segmenter
from foxvox.document.snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)

LayoutFn = Callable[[Tag], SegmentLayout]


class SegmentCollector:
    """문서 트리에서 세그먼트 레코드를 수집하는 수집기."""

    def __init__(
        self,
        config: SegmentationConfig | None = None,
        segmenter: Segmenter | None = None,
    ) -> None:
        self._config = config or SegmentationConfig()
        self._segmenter = segmenter or Segmenter(self._config)

    def collect(self, document: Tag, layout_of: LayoutFn | None = None) -> list[Segment]:
        """문서 순서대로 세그먼트 목록을 반환한다."""
        root = _content_root(document)
        snapshot = DocumentSnapshot.from_root(root)
        selected = self._segmenter.segment(snapshot)

        segments: list[Segment] = []
        for index in selected:
            tag = snapshot.element(index)
            path = address_of(tag)
            if not path.steps:
                logger.debug("문서 루트는 세그먼트로 사용하지 않습니다")
                continue

            html = tag.decode_contents()
            text = tag.get_text()
            if not self._is_visible(html, text):
                logger.debug("가시 본문이 부족해 제외: %s", path)
                continue

            segments.append(
                Segment(
                    path=str(path),
                    layout=layout_of(tag) if layout_of is not None else SegmentLayout(),
                    html=html,
                    text=text,
                )
            )

        logger.info("세그먼트 수집 완료: selected=%d, kept=%d", len(selected), len(segments))
        return segments

    def _is_visible(self, html: str, text: str) -> bool:
        return bool(html.strip()) and len(text.strip()) > self._config.min_visible_chars


def _content_root(document: Tag) -> Tag:
    if isinstance(document, BeautifulSoup) and document.body is not None:
        return document.body
    return document
