"""
목적:
- 자격 증명 결정 계층의 공개 진입점을 제공한다.

설명:
- 폴백 체인 구현과 테스트/고정 키용 결정적 구현을 함께 노출한다.

디자인 패턴:
- 모듈 퍼사드(Module Facade).

참조:
- src_py/foxvox/credentials/resolver.py
"""

from .resolver import (
    ChainedCredentialResolver,
    CredentialResolver,
    StaticCredentialResolver,
    decode_shared_key,
)

__all__ = [
    "CredentialResolver",
    "ChainedCredentialResolver",
    "StaticCredentialResolver",
    "decode_shared_key",
]
