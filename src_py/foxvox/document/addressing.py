"""
목적:
- 노드의 안정적인 구조 경로를 계산하고, 경로로 노드를 다시 찾는다.

설명:
- 경로는 루트부터 노드까지 `태그[같은 태그 형제 중 1-기반 순번]` 단계의 나열이다.
- 순번이 1이면 생략한다 (`/html/body/div[2]/p`).
- 경로 해석 실패는 치명적 오류가 아니며, 호출자는 로그 후 건너뛴다.

디자인 패턴:
- 값 객체(Value Object).

참조:
- src_py/foxvox/document/collector.py
- src_py/foxvox/document/surface.py
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from foxvox.exceptions import InvalidPathError

logger = logging.getLogger(__name__)

_STEP_PATTERN = re.compile(r"^(?P<tag>[A-Za-z_][\w.:-]*)(?:\[(?P<index>[1-9]\d*)\])?$")


@dataclass(frozen=True, slots=True)
class PathStep:
    """구조 경로의 단일 단계."""

    tag: str
    index: int = 1

    def __str__(self) -> str:
        if self.index == 1:
            return self.tag
        return f"{self.tag}[{self.index}]"


@dataclass(frozen=True, slots=True)
class StructuralPath:
    """루트부터 노드까지의 구조 경로."""

    steps: tuple[PathStep, ...] = ()

    def __str__(self) -> str:
        if not self.steps:
            return ""
        return "/" + "/".join(str(step) for step in self.steps)

    @classmethod
    def parse(cls, text: str) -> StructuralPath:
        """직렬화된 경로 문자열을 해석한다."""
        raw = text.strip()
        if not raw:
            return cls()
        if not raw.startswith("/"):
            raise InvalidPathError(f"구조 경로는 '/'로 시작해야 합니다: {text!r}")

        steps: list[PathStep] = []
        for token in raw[1:].split("/"):
            matched = _STEP_PATTERN.match(token)
            if matched is None:
                raise InvalidPathError(f"구조 경로 단계 형식이 잘못되었습니다: {token!r} in {text!r}")
            index = matched.group("index")
            steps.append(PathStep(tag=matched.group("tag").lower(), index=int(index) if index else 1))
        return cls(tuple(steps))

    def is_prefix_of(self, other: StructuralPath) -> bool:
        """자신이 other의 진(proper) 조상 경로인지 반환한다."""
        size = len(self.steps)
        return size < len(other.steps) and other.steps[:size] == self.steps


def address_of(tag: Tag) -> StructuralPath:
    """요소의 구조 경로를 계산한다. 문서 객체 자체는 빈 경로가 된다."""
    steps: list[PathStep] = []
    current = tag

    while isinstance(current, Tag) and not isinstance(current, BeautifulSoup):
        index = 1
        for sibling in current.previous_siblings:
            if isinstance(sibling, Tag) and sibling.name == current.name:
                index += 1
        steps.append(PathStep(tag=(current.name or "").lower(), index=index))
        current = current.parent

    steps.reverse()
    return StructuralPath(tuple(steps))


def resolve(path: StructuralPath, root: Tag) -> Tag | None:
    """문서에서 경로에 해당하는 첫 번째 요소를 찾는다. 없으면 None."""
    if not path.steps:
        return None

    current: Tag = _document_of(root)
    steps = path.steps
    if not isinstance(current, BeautifulSoup):
        # 분리된 트리: 최상위 요소가 첫 단계에 해당한다.
        if steps[0] != PathStep(tag=(current.name or "").lower()):
            return None
        steps = steps[1:]

    for step in steps:
        current_match: Tag | None = None
        seen = 0
        for child in current.children:
            if isinstance(child, Tag) and (child.name or "").lower() == step.tag:
                seen += 1
                if seen == step.index:
                    current_match = child
                    break
        if current_match is None:
            return None
        current = current_match

    return current


def resolve_text(text: str, root: Tag) -> Tag | None:
    """직렬화된 경로를 해석한다. 형식 오류와 미스는 모두 None으로 수렴한다."""
    try:
        path = StructuralPath.parse(text)
    except InvalidPathError as exc:
        logger.warning("구조 경로 해석 실패: %s", exc)
        return None

    found = resolve(path, root)
    if found is None:
        logger.info("경로에 해당하는 요소가 없습니다: %s", text)
    return found


def _document_of(node: Tag) -> Tag:
    current = node
    while current.parent is not None:
        current = current.parent
    return current
