"""
목적:
- 노드별 마크업 가중치와 콘텐츠 가중치를 계산한다.

설명:
- 텍스트 노드는 글자 수만큼 콘텐츠 가중치를 가진다.
- 주석/선언 노드는 원문 길이만큼 마크업 가중치를 가진다.
- 요소 노드는 자식 가중치 합에 자기 여닫는 태그 길이(스냅샷이 한 번 계산해 둔 값)를 더한다.
- 결과는 스냅샷 인덱스를 키로 메모이제이션되며, 계산기 수명과 함께 폐기된다.

디자인 패턴:
- 메모이제이션(Memoization).

참조:
- src_py/foxvox/document/snapshot.py
- src_py/foxvox/document/segmenter.py
"""

from __future__ import annotations

from dataclasses import dataclass

from foxvox.document.snapshot import DocumentSnapshot, SnapshotNode


@dataclass(frozen=True, slots=True)
class NodeWeight:
    """노드 가중치 값 객체."""

    html_weight: int = 0
    content_weight: int = 0

    def __add__(self, other: NodeWeight) -> NodeWeight:
        return NodeWeight(
            html_weight=self.html_weight + other.html_weight,
            content_weight=self.content_weight + other.content_weight,
        )


class WeightCalculator:
    """스냅샷 1개에 묶인 가중치 계산기."""

    def __init__(self, snapshot: DocumentSnapshot) -> None:
        self._snapshot = snapshot
        self._memo: dict[int, NodeWeight] = {}

    def weight(self, index: int) -> NodeWeight:
        """노드 가중치를 반환한다. 하위 노드는 후위 순회로 먼저 채운다."""
        cached = self._memo.get(index)
        if cached is not None:
            return cached

        stack: list[tuple[int, bool]] = [(index, False)]
        while stack:
            current, expanded = stack.pop()
            if current in self._memo:
                continue

            node = self._snapshot.node(current)
            if node.kind != "element" or expanded:
                self._memo[current] = self._own_weight(node)
                continue

            stack.append((current, True))
            stack.extend((child, False) for child in node.children if child not in self._memo)

        return self._memo[index]

    def _own_weight(self, node: SnapshotNode) -> NodeWeight:
        if node.kind == "text":
            return NodeWeight(html_weight=0, content_weight=node.raw_length)
        if node.kind == "comment":
            return NodeWeight(html_weight=node.raw_length, content_weight=0)

        total = NodeWeight()
        for child in node.children:
            total = total + self._memo[child]

        return total + NodeWeight(html_weight=node.own_markup_length, content_weight=0)
