"""
목적:
- 렌더링 표면(살아 있는 문서)에 대한 인터페이스와 BeautifulSoup 구현을 제공한다.

설명:
- 코어는 표면에서 트리를 수집하고, 구조 경로로 찾은 노드의 내부 마크업만 교체한다.
- 경로 해석 실패는 로그 후 `False`로 보고하며 예외를 던지지 않는다.
- BeautifulSoup 구현은 레이아웃 엔진이 없으므로 원문 위치(sourceline/sourcepos)를 좌표로 쓴다.

디자인 패턴:
- 어댑터(Adapter).

참조:
- src_py/foxvox/document/addressing.py
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import logging
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from foxvox.contracts.segment_models import SegmentLayout
from foxvox.document.addressing import resolve_text

logger = logging.getLogger(__name__)


class DocumentSurface(Protocol):
    """오케스트레이터가 소비하는 렌더링 표면 인터페이스."""

    async def collect_tree(self) -> BeautifulSoup: ...

    async def replace_subtree_markup(self, path: str, html: str) -> bool: ...

    def layout_of(self, tag: Tag) -> SegmentLayout: ...


class SoupDocumentSurface:
    """BeautifulSoup 트리를 살아 있는 문서로 취급하는 표면 구현."""

    def __init__(self, markup: str, parser: str = "html.parser") -> None:
        self._parser = parser
        self._soup = BeautifulSoup(markup, parser)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    async def collect_tree(self) -> BeautifulSoup:
        return self._soup

    async def replace_subtree_markup(self, path: str, html: str) -> bool:
        """경로의 노드 내부 마크업을 통째로 교체한다."""
        target = resolve_text(path, self._soup)
        if target is None:
            logger.warning("되쓰기 대상 노드를 찾지 못해 건너뜁니다: %s", path)
            return False

        fragment = BeautifulSoup(html, self._parser)
        target.clear()
        for child in list(fragment.contents):
            target.append(child.extract())
        return True

    def layout_of(self, tag: Tag) -> SegmentLayout:
        return SegmentLayout(left=tag.sourcepos or 0, top=tag.sourceline or 0)

    def render(self) -> str:
        """현재 문서 전체 마크업을 반환한다."""
        return str(self._soup)
