"""
목적:
- FoxVox Python 계층의 예외 타입을 표준화한다.

설명:
- 저장소/경로/상태/설정 오류를 명시적으로 구분해
  호출자가 "건너뛰기"와 "단일 실패 보고"를 선택할 수 있게 한다.
- 세그먼트 단위 재작성 실패는 예외로 전파하지 않고 `None`으로 수렴한다.

디자인 패턴:
- 계층형 예외(Hierarchical Exception).

참조:
- src_py/foxvox/store/redis_store.py
- src_py/foxvox/orchestration/orchestrator.py
"""


class FoxvoxError(Exception):
    """FoxVox 공통 베이스 예외."""


class ConfigurationError(FoxvoxError):
    """설정값이 유효하지 않을 때 발생한다."""


class StorageError(FoxvoxError):
    """세그먼트 저장소 열기/초기화/갱신에 실패했을 때 발생한다."""


class InvalidPathError(FoxvoxError):
    """구조 경로 문자열 형식이 잘못되었을 때 발생한다."""


class InvalidStateError(FoxvoxError):
    """현재 세션 상태에서 허용되지 않는 요청일 때 발생한다."""


class RewriteError(FoxvoxError):
    """단일 세그먼트 재작성 응답이 계약을 위반할 때 사용한다."""
