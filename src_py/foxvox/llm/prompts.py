"""
목적:
- 재작성 프로토콜에서 쓰는 고정 프롬프트 상수를 제공한다.

설명:
- REVIEW_PROMPT: 2턴 프로토콜의 두 번째 턴(자기 검토 후 수정) 지시문.
- SINGLE_TURN_PROMPT: 단일 턴 모델 계열에서 시스템 지시에 덧붙이는 내부 추론 지시문.
- PING_PROMPT: 자격 증명 검증용 최소 호출 본문.

디자인 패턴:
- 상수 템플릿(Constant Template).

참조:
- src_py/foxvox/llm/langchain_rewrite.py
- src_py/foxvox/credentials/resolver.py
"""

REVIEW_PROMPT = (
    "Carefully go over your result one last time. Make sure that it adheres to all given "
    "requirements, edit minor details or rewrite bad parts of the text. Do it carefully, step by "
    "step, outlining your thought process, possibly doing different versions of the text. When "
    "you think that the quality of it is good enough and doesn't need anymore edits, output it "
    "using the structured output."
)

SINGLE_TURN_PROMPT = (
    "Before answering, reason internally: draft the rewrite, check it against every requirement "
    "above, fix weak or non-compliant parts and keep the HTML structure intact. Only then return "
    "the final version using the structured output."
)

PING_PROMPT = "ping"
