"""
목적:
- Python 계약 모델 계층의 공개 심볼을 제공한다.

설명:
- 세그먼트 레코드/호스트 메시지 모델을 하나의 네임스페이스에서 재노출한다.

디자인 패턴:
- 모듈 퍼사드(Module Facade).

참조:
- src_py/foxvox/contracts/segment_models.py
- src_py/foxvox/contracts/message_models.py
"""

from .message_models import HostAction, HostMessage, HostNotification, NotificationAction, Notifier
from .segment_models import GeneratedSegment, Segment, SegmentLayout

__all__ = [
    "Segment",
    "SegmentLayout",
    "GeneratedSegment",
    "HostAction",
    "HostMessage",
    "HostNotification",
    "NotificationAction",
    "Notifier",
]
