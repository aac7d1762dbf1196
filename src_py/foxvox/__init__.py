"""
목적:
- FoxVox Python 패키지의 공개 진입점을 제공한다.

설명:
- 라이브러리 핵심 클래스는 `RewriteOrchestrator` 하나다.
- 문서 분할/주소 지정, 세그먼트 저장소, 자격 증명, LLM 어댑터, 설정/예외를 함께 노출한다.

디자인 패턴:
- 퍼사드(Facade).

참조:
- src_py/foxvox/orchestration/orchestrator.py
- src_py/foxvox/document/collector.py
"""

from .config.models import (
    CredentialConfig,
    PipelineConfig,
    RedisStoreConfig,
    RewriteConfig,
    SegmentationConfig,
    StoreConfig,
    Variant,
    VariantCatalog,
)
from .contracts import (
    GeneratedSegment,
    HostMessage,
    HostNotification,
    Segment,
    SegmentLayout,
)
from .credentials import (
    ChainedCredentialResolver,
    CredentialResolver,
    StaticCredentialResolver,
)
from .document import (
    SegmentCollector,
    Segmenter,
    SoupDocumentSurface,
    StructuralPath,
    address_of,
    resolve,
)
from .exceptions import (
    ConfigurationError,
    FoxvoxError,
    InvalidPathError,
    InvalidStateError,
    RewriteError,
    StorageError,
)
from .llm import LangChainRewriter, ModelProfile, RewrittenMarkup
from .orchestration import RewriteOrchestrator
from .store import (
    InMemorySegmentStore,
    RedisSegmentStore,
    StoreKey,
    create_segment_store,
    document_identity,
)
from .version import __version__

__all__ = [
    "__version__",
    "RewriteOrchestrator",
    "PipelineConfig",
    "SegmentationConfig",
    "RewriteConfig",
    "CredentialConfig",
    "StoreConfig",
    "RedisStoreConfig",
    "Variant",
    "VariantCatalog",
    "Segment",
    "SegmentLayout",
    "GeneratedSegment",
    "HostMessage",
    "HostNotification",
    "Segmenter",
    "SegmentCollector",
    "SoupDocumentSurface",
    "StructuralPath",
    "address_of",
    "resolve",
    "StoreKey",
    "InMemorySegmentStore",
    "RedisSegmentStore",
    "create_segment_store",
    "document_identity",
    "CredentialResolver",
    "ChainedCredentialResolver",
    "StaticCredentialResolver",
    "LangChainRewriter",
    "ModelProfile",
    "RewrittenMarkup",
    "FoxvoxError",
    "ConfigurationError",
    "StorageError",
    "InvalidPathError",
    "InvalidStateError",
    "RewriteError",
]
