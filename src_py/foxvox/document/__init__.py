"""
목적:
- 문서 분할/주소 지정 계층의 공개 진입점을 제공한다.

설명:
- 스냅샷, 가중치 계산기, 분할기, 구조 경로, 렌더링 표면, 수집기를 노출한다.

디자인 패턴:
- 모듈 퍼사드(Module Facade).

참조:
- src_py/foxvox/document/segmenter.py
- src_py/foxvox/document/addressing.py
- src_py/foxvox/document/collector.py
"""

from .addressing import PathStep, StructuralPath, address_of, resolve, resolve_text
from .collector import SegmentCollector
from .segmenter import Segmenter, should_decompose, sigmoid
from .snapshot import DocumentSnapshot, SnapshotNode
from .surface import DocumentSurface, SoupDocumentSurface
from .weights import NodeWeight, WeightCalculator

__all__ = [
    "DocumentSnapshot",
    "SnapshotNode",
    "NodeWeight",
    "WeightCalculator",
    "Segmenter",
    "should_decompose",
    "sigmoid",
    "PathStep",
    "StructuralPath",
    "address_of",
    "resolve",
    "resolve_text",
    "DocumentSurface",
    "SoupDocumentSurface",
    "SegmentCollector",
]
