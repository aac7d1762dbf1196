"""
목적:
- 가중치 기반 트리 분해로 재작성 대상 콘텐츠 노드를 선택한다.

설명:
- 전위 순회로 각 요소 노드에서 "자식으로 내려갈지/현재 노드를 통째로 선택할지" 결정한다.
- 마크업 절감량(reduction)이 고아가 되는 콘텐츠 손실량(loss)보다 크면 자식으로 분해한다.
- 한 번 선택된 노드는 더 내려가지 않으므로 선택 결과끼리 조상/자손 관계가 없다.
- 콘텐츠 길이 하한(text_boundary_min)과 비콘텐츠 태그 제외 규칙을 함께 적용한다.

디자인 패턴:
- 전략 분기(분해/선택) + 명시적 스택 순회.

참조:
- src_py/foxvox/document/weights.py
- src_py/foxvox/document/collector.py
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from foxvox.config.models import SegmentationConfig
from foxvox.document.snapshot import DocumentSnapshot, SnapshotNode
from foxvox.document.weights import NodeWeight, WeightCalculator

logger = logging.getLogger(__name__)


def sigmoid(x: float, midpoint: float = 0.5, steepness: float = 1.0) -> float:
    """`1 / (1 + e^(-steepness * (x - midpoint)))`."""
    exponent = -steepness * (x - midpoint)
    if exponent > 700:
        return 0.0
    return 1.0 / (1.0 + math.exp(exponent))


def should_decompose(
    parent: NodeWeight,
    children: Sequence[NodeWeight],
    config: SegmentationConfig,
) -> bool:
    """부모 대신 자식 단위로 내려가는 편이 나은지 판정한다."""
    total_child_html = sum(child.html_weight for child in children)
    total_child_content = sum(child.content_weight for child in children)

    html_factor = sigmoid(
        parent.html_weight / config.html_scale,
        config.sigmoid_midpoint,
        config.sigmoid_steepness,
    )
    if parent.content_weight > 0:
        content_ratio = total_child_content / parent.content_weight
    else:
        content_ratio = 0.0
    content_factor = sigmoid(content_ratio, config.sigmoid_midpoint, config.sigmoid_steepness)

    reduction = (parent.html_weight - total_child_html) * html_factor
    loss = (parent.content_weight - total_child_content) * (1 - content_factor)

    return total_child_content >= config.text_boundary_min and reduction > loss


class Segmenter:
    """스냅샷에서 콘텐츠 세그먼트 노드 인덱스를 고르는 분할기."""

    def __init__(self, config: SegmentationConfig | None = None) -> None:
        self._config = config or SegmentationConfig()

    @property
    def config(self) -> SegmentationConfig:
        return self._config

    def segment(self, snapshot: DocumentSnapshot, root: int | None = None) -> list[int]:
        """선택된 노드 인덱스를 문서 순서대로 반환한다."""
        calculator = WeightCalculator(snapshot)
        selected: list[int] = []
        stack = [snapshot.root if root is None else root]

        while stack:
            index = stack.pop()
            node = snapshot.node(index)
            if node.kind != "element":
                continue

            weight = calculator.weight(index)
            children = node.element_children

            if not children:
                if self._is_selectable(node, weight):
                    selected.append(index)
                continue

            child_weights = [calculator.weight(child) for child in children]
            if should_decompose(weight, child_weights, self._config):
                logger.debug(
                    "분해: tag=%s, html=%d, content=%d", node.tag, weight.html_weight, weight.content_weight
                )
                stack.extend(reversed(children))
            elif self._is_selectable(node, weight):
                selected.append(index)

        return selected

    def _is_selectable(self, node: SnapshotNode, weight: NodeWeight) -> bool:
        return (
            weight.content_weight >= self._config.text_boundary_min
            and node.tag not in self._config.non_content_tags
        )
