"""
목적:
- 파이프라인 1회 실행 동안 사용할 문서 트리 스냅샷(아레나)을 만든다.

설명:
- 살아 있는 BeautifulSoup 트리를 인덱스 기반 노드 배열로 한 번만 펼친다.
- 노드는 부모/자식 인덱스와 마크업 길이를 보관하고, 원본 요소 참조를 유지한다.
- 요소의 마크업 길이는 자식을 뺀 자기 여닫는 태그만 직렬화해 구하므로 하위 트리를 다시 직렬화하지 않는다.
- 가중치 메모이제이션은 구조적 동일성이 아니라 이 인덱스를 키로 사용한다.

디자인 패턴:
- 아레나(Arena) + 스냅샷(Snapshot).

참조:
- src_py/foxvox/document/weights.py
- src_py/foxvox/document/segmenter.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, PageElement, Tag
from bs4.element import CData, ProcessingInstruction

NodeKind = Literal["text", "comment", "element"]

_MARKUP_ONLY_STRINGS = (Comment, CData, ProcessingInstruction, Declaration, Doctype)


@dataclass(slots=True)
class SnapshotNode:
    """스냅샷 아레나의 단일 노드."""

    index: int
    kind: NodeKind
    source: PageElement
    parent: int | None
    tag: str | None = None
    raw_length: int = 0
    own_markup_length: int = 0
    children: list[int] = field(default_factory=list)
    element_children: list[int] = field(default_factory=list)


class DocumentSnapshot:
    """문서 트리를 인덱스 배열로 보관하는 스냅샷."""

    def __init__(self, nodes: list[SnapshotNode]) -> None:
        if not nodes:
            raise ValueError("스냅샷 노드가 비어 있습니다")
        self._nodes = nodes

    @classmethod
    def from_root(cls, root: Tag) -> DocumentSnapshot:
        """루트 요소부터 깊이 우선으로 스냅샷을 생성한다."""
        nodes: list[SnapshotNode] = []
        stack: list[tuple[PageElement, int | None]] = [(root, None)]

        while stack:
            element, parent = stack.pop()
            node = _to_node(len(nodes), element, parent)
            nodes.append(node)

            if parent is not None:
                parent_node = nodes[parent]
                parent_node.children.append(node.index)
                if node.kind == "element":
                    parent_node.element_children.append(node.index)

            if isinstance(element, Tag):
                for child in reversed(element.contents):
                    stack.append((child, node.index))

        return cls(nodes)

    @property
    def root(self) -> int:
        return 0

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> SnapshotNode:
        return self._nodes[index]

    def element(self, index: int) -> Tag:
        """요소 노드의 원본 bs4 태그를 반환한다."""
        node = self._nodes[index]
        if node.kind != "element" or not isinstance(node.source, Tag):
            raise TypeError(f"요소 노드가 아닙니다: index={index}, kind={node.kind}")
        return node.source


def _to_node(index: int, element: PageElement, parent: int | None) -> SnapshotNode:
    if isinstance(element, Tag):
        return SnapshotNode(
            index=index,
            kind="element",
            source=element,
            parent=parent,
            tag=(element.name or "").lower(),
            own_markup_length=_own_markup_length(element),
        )

    if isinstance(element, _MARKUP_ONLY_STRINGS):
        return SnapshotNode(
            index=index,
            kind="comment",
            source=element,
            parent=parent,
            raw_length=len(str(element)),
        )

    text = str(element) if isinstance(element, NavigableString) else ""
    return SnapshotNode(
        index=index,
        kind="text",
        source=element,
        parent=parent,
        raw_length=len(text),
    )


def _own_markup_length(tag: Tag) -> int:
    """자식을 제외한 태그 자신의 여닫는 마크업 길이 (`len(outer) - len(inner)`)."""
    if isinstance(tag, BeautifulSoup):
        return 0
    try:
        shell = Tag(
            name=tag.name,
            attrs=dict(tag.attrs),
            prefix=tag.prefix,
            is_xml=tag.is_xml,
            can_be_empty_element=tag.can_be_empty_element,
        )
        return len(shell.decode())
    except (AttributeError, TypeError):
        # 여닫는 태그만 분리할 수 없으면 전체 마크업 길이를 쓴다.
        return len(tag.decode())
