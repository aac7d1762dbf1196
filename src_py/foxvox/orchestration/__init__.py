"""
목적:
- 재작성 오케스트레이션 계층의 공개 진입점을 제공한다.

설명:
- 상태 머신 클래스와 세션 컨텍스트를 노출한다.
- 호스트 메시지 버스 연결 책임은 소비자 애플리케이션이 가진다.

디자인 패턴:
- 모듈 퍼사드(Module Facade).

참조:
- src_py/foxvox/orchestration/orchestrator.py
- src_py/foxvox/orchestration/session.py
"""

from .orchestrator import RewriteOrchestrator, SegmentRewriter
from .session import RewriteSession, SessionState

__all__ = [
    "RewriteOrchestrator",
    "SegmentRewriter",
    "RewriteSession",
    "SessionState",
]
