"""
목적:
- 수집 → 변형 선택 → 생성 → 캐시 교체 흐름을 구동하는 상태 머신을 제공한다.

설명:
- 호스트 메시지(setup/set_template/generate/clear-cache/navigation_completed)를 하나의 핸들러로 받는다.
- 생성은 세그먼트마다 태스크 하나를 띄우고(fan-out), 완료 결과를 큐로 받아 직렬 되쓰기 루프가 즉시 반영한다.
- 모든 태스크가 정리된 뒤(fan-in) 변형 저장소를 통째로 교체한다.
- 세그먼트 단위 실패는 건너뛰고, 저장소 실패만 호출자에게 단일 예외로 보고한다.
- 같은 문서의 setup 재요청, 내비게이션, 캐시 삭제는 진행 중인 생성을 취소하고, 저장소 epoch 가드가 늦은 교체를 막는다.

디자인 패턴:
- 상태 머신(State Machine) + 생산자/소비자(Producer/Consumer).

참조:
- src_py/foxvox/orchestration/session.py
- src_py/foxvox/document/collector.py
- src_py/foxvox/store/base.py
- src_py/foxvox/llm/langchain_rewrite.py
- src_py/foxvox/credentials/resolver.py
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Protocol

from foxvox.config.models import ORIGINAL_STORE, PipelineConfig, Variant
from foxvox.contracts.message_models import HostMessage, HostNotification, NotificationAction, Notifier
from foxvox.contracts.segment_models import GeneratedSegment, Segment
from foxvox.credentials.resolver import CredentialResolver
from foxvox.document.collector import SegmentCollector
from foxvox.document.surface import DocumentSurface
from foxvox.exceptions import ConfigurationError, InvalidStateError
from foxvox.orchestration.session import GENERATABLE_STATES, RewriteSession
from foxvox.store.base import SegmentStore, StoreKey, document_identity, load_generated, load_segments

logger = logging.getLogger(__name__)


class SegmentRewriter(Protocol):
    """세그먼트 하나를 재작성하는 구성 요소 인터페이스."""

    async def rewrite(self, credential: str, variant: Variant, original: str) -> str | None: ...


class RewriteOrchestrator:
    """문서 재작성 파이프라인 상태 머신."""

    def __init__(
        self,
        surface: DocumentSurface,
        store: SegmentStore,
        rewriter: SegmentRewriter,
        credential_resolver: CredentialResolver,
        config: PipelineConfig | None = None,
        notify: Notifier | None = None,
        collector: SegmentCollector | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._surface = surface
        self._store = store
        self._rewriter = rewriter
        self._credentials = credential_resolver
        self._notify_fn = notify
        self._collector = collector or SegmentCollector(self._config.segmentation)
        self._session = RewriteSession()

    @property
    def session(self) -> RewriteSession:
        return self._session

    async def handle(self, message: HostMessage | dict[str, Any]) -> None:
        """호스트 메시지 한 건을 상태 머신 전이로 변환한다."""
        if not isinstance(message, HostMessage):
            message = HostMessage.model_validate(message)

        if message.action == "setup":
            await self.setup(message.url, list((message.templates or {}).values()))
        elif message.action == "set_template":
            if message.template is None:
                raise ConfigurationError("set_template 메시지에는 template이 필요합니다")
            await self.select_variant(message.template, url=message.url)
        elif message.action == "generate":
            self._require_session(message.url)
            await self.generate(user_key=message.openai, fallback_key=message.key or "")
        elif message.action == "clear-cache":
            await self.clear_cache(message.url)
        elif message.action == "navigation_completed":
            await self.navigation_completed(message.url)

    async def setup(self, url: str, variants: Iterable[Variant | str]) -> list[Segment]:
        """스키마를 맞추고 살아 있는 문서에서 `original` 세그먼트를 수집한다."""
        identity = document_identity(url)
        names = [variant.name if isinstance(variant, Variant) else str(variant) for variant in variants]

        if self._session.identity != identity:
            await self._cancel_generation()
            self._session = RewriteSession(identity=identity, url=url)
        elif self._session.is_generating:
            # 같은 문서의 재수집은 진행 중인 생성을 취소하고 원본 마크업으로 되돌린 뒤 진행한다.
            logger.info("setup 재요청으로 진행 중인 생성을 취소합니다: identity=%s", identity)
            await self._cancel_generation()
            await self._restore_original(identity)
        self._session.remember_variants(names)

        await self._store.ensure_schema(identity, self._session.variant_names)
        document = await self._surface.collect_tree()
        segments = self._collector.collect(document, layout_of=self._surface.layout_of)
        await self._store.replace_all(StoreKey.original(identity), segments)

        self._session.state = "COLLECTED"
        logger.info("setup 완료: identity=%s, segments=%d", identity, len(segments))
        return segments

    async def select_variant(self, variant: Variant, url: str | None = None) -> int:
        """변형을 선택하고 캐시된 결과(없으면 원본)를 문서에 재생한다."""
        session = self._require_session(url)
        if session.state == "GENERATING":
            raise InvalidStateError("생성 중에는 변형을 바꿀 수 없습니다")

        identity = session.identity
        if variant.name not in session.variant_names:
            await self._store.ensure_schema(identity, [variant.name])
            session.remember_variants([variant.name])
        session.selected = variant

        original = load_segments(await self._store.fetch_all(StoreKey.original(identity)))
        generated = load_generated(await self._store.fetch_all(StoreKey(identity, variant.name)))

        # 원본으로 되돌린 뒤 변형 결과를 덮어쓴다. 경로마다 한 번만 쓴다.
        markup = {segment.path: segment.html for segment in original}
        markup.update({segment.path: segment.html for segment in generated})

        written = 0
        for path, html in markup.items():
            if await self._write_back(path, html):
                written += 1

        session.state = "VARIANT_SELECTED"
        logger.info(
            "변형 선택: identity=%s, variant=%s, cached=%d, written=%d",
            identity,
            variant.name,
            len(generated),
            written,
        )
        return written

    async def generate(self, user_key: str | None = None, fallback_key: str = "") -> list[GeneratedSegment]:
        """선택된 변형으로 모든 세그먼트를 재작성하고 변형 저장소를 교체한다."""
        session = self._session
        if session.identity is None or session.state not in GENERATABLE_STATES:
            raise InvalidStateError(f"생성을 시작할 수 없는 상태입니다: state={session.state}")
        if session.selected is None:
            raise InvalidStateError("선택된 변형이 없습니다")

        prior_state = session.state
        session.state = "GENERATING"
        task = asyncio.create_task(self._run_generation(session, session.selected, user_key, fallback_key))
        session.generation = task

        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            session.generation = None
            if session.state == "GENERATING":
                session.state = prior_state

        if task.cancelled():
            logger.info("생성이 취소되었습니다: identity=%s", session.identity)
            return []
        return task.result()

    async def clear_cache(self, url: str) -> None:
        """식별자의 저장 공간 전체를 삭제한다."""
        identity = document_identity(url)
        if self._session.identity == identity:
            await self._cancel_generation()

        names = await self._store.store_names(identity)
        await self._store.destroy(identity)

        if self._session.identity == identity:
            self._session.state = "IDLE"
        for name in sorted((names | set(self._session.variant_names)) - {ORIGINAL_STORE}):
            await self._notify("cache_deleted", template_name=name)
        logger.info("캐시 삭제: identity=%s", identity)

    async def navigation_completed(self, url: str) -> None:
        """내비게이션 완료 시 이전/현재 식별자의 저장소를 비운다."""
        identities = {document_identity(url)}
        if self._session.identity is not None:
            identities.add(self._session.identity)

        await self._cancel_generation()
        for identity in sorted(identities):
            await self._store.clear_all(identity)

        self._session = RewriteSession()
        await self._notify("close_popup")
        logger.info("내비게이션 완료로 저장소를 비웠습니다: %s", ", ".join(sorted(identities)))

    async def _run_generation(
        self,
        session: RewriteSession,
        variant: Variant,
        user_key: str | None,
        fallback_key: str,
    ) -> list[GeneratedSegment]:
        identity = session.identity
        epoch = await self._store.epoch(identity)
        await self._notify("generation_initialized")

        segments = load_segments(await self._store.fetch_all(StoreKey.original(identity)))
        credential = await self._credentials.resolve(user_key, fallback_key)
        generated = await self._rewrite_all(credential, variant, segments)

        stored = await self._store.replace_all(StoreKey(identity, variant.name), generated, epoch=epoch)
        if stored:
            await self._notify("template_cached", template_name=variant.name)
        await self._notify("generation_completed")

        logger.info(
            "생성 완료: identity=%s, variant=%s, segments=%d, generated=%d, stored=%s",
            identity,
            variant.name,
            len(segments),
            len(generated),
            stored,
        )
        return generated

    async def _rewrite_all(
        self,
        credential: str,
        variant: Variant,
        segments: list[Segment],
    ) -> list[GeneratedSegment]:
        completions: asyncio.Queue[tuple[Segment, str | None]] = asyncio.Queue()
        max_concurrency = self._config.rewrite.max_concurrency
        semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

        async def worker(segment: Segment) -> None:
            html: str | None = None
            try:
                if semaphore is None:
                    html = await self._rewrite_one(credential, variant, segment)
                else:
                    async with semaphore:
                        html = await self._rewrite_one(credential, variant, segment)
            finally:
                completions.put_nowait((segment, html))

        tasks = [asyncio.create_task(worker(segment)) for segment in segments]
        generated: list[GeneratedSegment] = []
        try:
            for _ in range(len(tasks)):
                segment, html = await completions.get()
                if html is None or not html.strip() or html == segment.html:
                    logger.info("재작성 결과가 없어 원본을 유지합니다: %s", segment.path)
                    continue
                await self._write_back(segment.path, html)
                generated.append(GeneratedSegment(path=segment.path, html=html))
            await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        return generated

    async def _rewrite_one(self, credential: str, variant: Variant, segment: Segment) -> str | None:
        try:
            return await asyncio.wait_for(
                self._rewriter.rewrite(credential, variant, segment.html),
                timeout=self._config.rewrite.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning("재작성 시간 초과: %s", segment.path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("재작성 호출 실패: path=%s, error=%s", segment.path, exc)
        return None

    async def _restore_original(self, identity: str) -> None:
        for segment in load_segments(await self._store.fetch_all(StoreKey.original(identity))):
            await self._write_back(segment.path, segment.html)

    async def _write_back(self, path: str, html: str) -> bool:
        try:
            return await self._surface.replace_subtree_markup(path, html)
        except Exception as exc:  # noqa: BLE001
            logger.warning("문서 되쓰기 실패: path=%s, error=%s", path, exc)
            return False

    async def _cancel_generation(self) -> None:
        task = self._session.generation
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait({task})
        self._session.state = "IDLE"

    def _require_session(self, url: str | None) -> RewriteSession:
        session = self._session
        if session.identity is None:
            raise InvalidStateError("setup이 먼저 실행되어야 합니다")
        if url is not None and document_identity(url) != session.identity:
            raise InvalidStateError(
                f"현재 세션과 다른 문서입니다: session={session.identity}, request={document_identity(url)}"
            )
        return session

    async def _notify(self, action: NotificationAction, template_name: str | None = None) -> None:
        if self._notify_fn is None:
            return
        await self._notify_fn(HostNotification(action=action, template_name=template_name))
