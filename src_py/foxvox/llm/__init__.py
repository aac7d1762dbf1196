"""
목적:
- LLM 주입 계층의 공개 진입점을 제공한다.

설명:
- 재작성 DTO, 모델 프로파일, LangChain 어댑터를 외부에 노출한다.

디자인 패턴:
- 모듈 퍼사드(Module Facade).

참조:
- src_py/foxvox/llm/contracts.py
- src_py/foxvox/llm/langchain_rewrite.py
"""

from .contracts import ChatModelFactory, ModelProfile, RewrittenMarkup
from .langchain_rewrite import LangChainRewriter

__all__ = [
    "ChatModelFactory",
    "ModelProfile",
    "RewrittenMarkup",
    "LangChainRewriter",
]
