"""
목적:
- 루트 `.env`를 읽어 HTML 파일 하나를 재작성하는 드라이버 스크립트를 제공한다.

설명:
- 라이브러리 본체는 환경 파일을 직접 읽지 않는다.
- 이 스크립트는 setup → set_template → generate 메시지를 순서대로 오케스트레이터에 전달한다.
- 채팅 모델은 `--llm-factory module:function` 팩토리로 주입한다.
  팩토리 시그니처는 `(api_key, model, model_kwargs) -> BaseChatModel`이다.

디자인 패턴:
- 드라이버(Driver Script).

참조:
- src_py/foxvox/config/models.py
- src_py/foxvox/orchestration/orchestrator.py
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import json
import logging
import os
import sys
from pathlib import Path

from foxvox import (
    ChainedCredentialResolver,
    CredentialConfig,
    HostNotification,
    LangChainRewriter,
    PipelineConfig,
    RedisStoreConfig,
    RewriteConfig,
    RewriteOrchestrator,
    SegmentationConfig,
    SoupDocumentSurface,
    StoreConfig,
    VariantCatalog,
    create_segment_store,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="FoxVox 재작성 드라이버")
    parser.add_argument("--url", required=True, help="문서 URL (문서 식별자 계산용)")
    parser.add_argument("--html", type=Path, required=True, help="재작성할 HTML 파일 경로")
    parser.add_argument("--catalog", type=Path, required=True, help="변형 카탈로그 config.json 경로")
    parser.add_argument("--variant", required=True, help="적용할 변형 이름")
    parser.add_argument("--output", type=Path, required=True, help="결과 HTML 파일 경로")
    parser.add_argument(
        "--llm-factory",
        required=True,
        help="LangChain 채팅 모델 팩토리 경로 (예: app.llm_factories:create_rewrite_llm)",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="루트 기준 환경 파일 경로 (기본: .env)",
    )
    parser.add_argument("--log-level", default="INFO", help="로그 레벨 (기본: INFO)")
    return parser.parse_args()


def load_env_file(path: Path) -> None:
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


def build_config() -> PipelineConfig:
    backend = os.environ.get("FOXVOX_STORE_BACKEND", "memory").strip().lower()
    redis = None
    if backend == "redis":
        redis = RedisStoreConfig(
            host=os.environ["REDIS_HOST"],
            port=int(os.environ.get("REDIS_PORT", "6379")),
            db=int(os.environ.get("REDIS_DB", "0")),
            username=os.environ.get("REDIS_USERNAME") or None,
            password=os.environ.get("REDIS_PASSWORD") or None,
            use_ssl=parse_bool_env("REDIS_USE_SSL", "false"),
            key_prefix=os.environ.get("FOXVOX_KEY_PREFIX", "foxvox"),
        )

    max_concurrency = os.environ.get("FOXVOX_MAX_CONCURRENCY", "").strip()
    return PipelineConfig(
        segmentation=SegmentationConfig(
            text_boundary_min=int(os.environ.get("FOXVOX_TEXT_BOUNDARY_MIN", "20")),
            min_visible_chars=int(os.environ.get("FOXVOX_MIN_VISIBLE_CHARS", "40")),
        ),
        rewrite=RewriteConfig(
            model=os.environ.get("FOXVOX_MODEL", "gpt-4o"),
            max_tokens=int(os.environ.get("FOXVOX_MAX_TOKENS", "4000")),
            custom_prompt=os.environ.get("FOXVOX_CUSTOM_PROMPT", ""),
            max_concurrency=int(max_concurrency) if max_concurrency else None,
            timeout_sec=float(os.environ.get("FOXVOX_REWRITE_TIMEOUT_SEC", "120")),
        ),
        credentials=CredentialConfig(
            shared_key_url=os.environ.get("FOXVOX_SHARED_KEY_URL") or None,
            timeout_ms=int(os.environ.get("FOXVOX_SHARED_KEY_TIMEOUT_MS", "5000")),
            validation_model=os.environ.get("FOXVOX_MODEL", "gpt-4o"),
        ),
        store=StoreConfig(backend=backend, redis=redis),
    )


def parse_bool_env(key: str, default: str) -> bool:
    raw = os.environ.get(key, default).strip().lower()
    if raw in {"1", "true", "yes", "y"}:
        return True
    if raw in {"0", "false", "no", "n"}:
        return False
    raise RuntimeError(f"불리언 환경 변수 형식이 잘못되었습니다: {key}={raw}")


def load_factory(spec: str):
    if ":" not in spec:
        raise RuntimeError("--llm-factory 형식은 module:function 이어야 합니다")
    module_name, function_name = spec.split(":", 1)
    module = importlib.import_module(module_name)
    return getattr(module, function_name)


async def print_notification(notification: HostNotification) -> None:
    print("[notify]", notification.model_dump_json(exclude_none=True))


async def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    repo_root = Path(__file__).resolve().parents[1]
    load_env_file(repo_root / args.env_file)

    config = build_config()
    catalog = VariantCatalog.from_config_json(json.loads(args.catalog.read_text(encoding="utf-8")))
    variant = catalog.find(args.variant)
    if variant is None:
        raise RuntimeError(f"카탈로그에 없는 변형입니다: {args.variant} (사용 가능: {', '.join(catalog.names())})")

    factory = load_factory(args.llm_factory)
    surface = SoupDocumentSurface(args.html.read_text(encoding="utf-8"))
    store = create_segment_store(config.store)

    orchestrator = RewriteOrchestrator(
        surface=surface,
        store=store,
        rewriter=LangChainRewriter(config.rewrite, factory),
        credential_resolver=ChainedCredentialResolver(config.credentials, factory),
        config=config,
        notify=print_notification,
    )

    try:
        await orchestrator.handle(
            {"action": "setup", "url": args.url, "templates": catalog.variants}
        )
        await orchestrator.handle({"action": "set_template", "url": args.url, "template": variant})
        await orchestrator.handle(
            {
                "action": "generate",
                "url": args.url,
                "key": catalog.default_key(),
                "openai": os.environ.get("OPENAI_API_KEY") or None,
            }
        )
    finally:
        await store.aclose()

    args.output.write_text(surface.render(), encoding="utf-8")
    print(f"[output] {args.output}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except Exception as exc:  # noqa: BLE001
        print(f"[error] {exc}", file=sys.stderr)
        raise SystemExit(1)
