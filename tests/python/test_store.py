import fakeredis
import fakeredis.aioredis
import pytest
from redis import asyncio as redis_asyncio

from foxvox.config import RedisStoreConfig, StoreConfig
from foxvox.contracts import GeneratedSegment, Segment, SegmentLayout
from foxvox.exceptions import ConfigurationError
from foxvox.store import (
    SCHEMA_VERSION,
    InMemorySegmentStore,
    RedisSegmentStore,
    StoreKey,
    create_segment_store,
    document_identity,
    load_generated,
    load_segments,
)

IDENTITY = "example.com/articles/1"


def _segment(path: str, text: str) -> Segment:
    return Segment(path=path, layout=SegmentLayout(left=1, top=2), html=f"<b>{text}</b>", text=text)


def _redis_store() -> RedisSegmentStore:
    client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    return RedisSegmentStore(RedisStoreConfig(host="localhost", key_prefix="test"), client=client)


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return InMemorySegmentStore()
    return _redis_store()


def test_document_identity_uses_host_and_path() -> None:
    assert document_identity("https://example.com/articles/1?page=2#top") == "example.com/articles/1"
    assert document_identity("http://Example.com") == "example.com/"
    assert document_identity("example.com/docs") == "example.com/docs"


def test_document_identity_rejects_empty_url() -> None:
    with pytest.raises(ConfigurationError):
        document_identity("   ")


def test_create_segment_store_selects_backend() -> None:
    assert isinstance(create_segment_store(StoreConfig()), InMemorySegmentStore)
    redis_store = create_segment_store(
        StoreConfig(backend="redis", redis=RedisStoreConfig(host="localhost"))
    )
    assert isinstance(redis_store, RedisSegmentStore)


def test_redis_store_builds_async_client_or_uses_injected_one() -> None:
    built = RedisSegmentStore(RedisStoreConfig(host="localhost", port=6380, db=2))
    assert isinstance(built._redis, redis_asyncio.Redis)
    assert built._redis.connection_pool.connection_kwargs["port"] == 6380
    assert built._redis.connection_pool.connection_kwargs["db"] == 2

    client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    assert RedisSegmentStore(RedisStoreConfig(host="localhost"), client=client)._redis is client


def test_store_config_requires_redis_section() -> None:
    with pytest.raises(ValueError, match="redis"):
        StoreConfig(backend="redis")


@pytest.mark.asyncio
async def test_ensure_schema_is_additive(store) -> None:
    await store.ensure_schema(IDENTITY, ["A"])
    await store.ensure_schema(IDENTITY, ["B"])
    await store.ensure_schema(IDENTITY, ["A"])

    assert await store.store_names(IDENTITY) == {"original", "A", "B"}


@pytest.mark.asyncio
async def test_replace_all_overwrites_prior_contents(store) -> None:
    key = StoreKey.original(IDENTITY)
    await store.ensure_schema(IDENTITY, [])
    await store.replace_all(key, [_segment("/html/body/p", "old"), _segment("/html/body/div", "older")])

    items = [_segment("/html/body/p[2]", "new")]
    assert await store.replace_all(key, items) is True

    assert load_segments(await store.fetch_all(key)) == items


@pytest.mark.asyncio
async def test_replace_all_with_empty_items_empties_store(store) -> None:
    key = StoreKey(IDENTITY, "A")
    await store.ensure_schema(IDENTITY, ["A"])
    await store.replace_all(key, [GeneratedSegment(path="/html/body/p", html="x")])

    await store.replace_all(key, [])

    assert await store.fetch_all(key) == []
    assert "A" in await store.store_names(IDENTITY)


@pytest.mark.asyncio
async def test_stores_are_isolated_per_name_and_identity(store) -> None:
    await store.ensure_schema(IDENTITY, ["A"])
    await store.replace_all(StoreKey(IDENTITY, "A"), [GeneratedSegment(path="/html/body/p", html="a")])

    assert await store.fetch_all(StoreKey.original(IDENTITY)) == []
    assert await store.fetch_all(StoreKey("other.com/", "A")) == []
    assert load_generated(await store.fetch_all(StoreKey(IDENTITY, "A")))[0].html == "a"


@pytest.mark.asyncio
async def test_clear_all_keeps_schema(store) -> None:
    await store.ensure_schema(IDENTITY, ["A"])
    await store.replace_all(StoreKey.original(IDENTITY), [_segment("/html/body/p", "t")])
    await store.replace_all(StoreKey(IDENTITY, "A"), [GeneratedSegment(path="/html/body/p", html="a")])

    await store.clear_all(IDENTITY)

    assert await store.fetch_all(StoreKey.original(IDENTITY)) == []
    assert await store.fetch_all(StoreKey(IDENTITY, "A")) == []
    assert await store.store_names(IDENTITY) == {"original", "A"}


@pytest.mark.asyncio
async def test_destroy_removes_identity(store) -> None:
    await store.ensure_schema(IDENTITY, ["A", "B"])
    await store.replace_all(StoreKey.original(IDENTITY), [_segment("/html/body/p", "t")])

    await store.destroy(IDENTITY)

    assert await store.store_names(IDENTITY) == set()
    assert await store.fetch_all(StoreKey.original(IDENTITY)) == []


@pytest.mark.asyncio
async def test_epoch_guard_rejects_replace_after_clear(store) -> None:
    key = StoreKey(IDENTITY, "A")
    await store.ensure_schema(IDENTITY, ["A"])
    epoch = await store.epoch(IDENTITY)

    await store.clear_all(IDENTITY)
    stored = await store.replace_all(key, [GeneratedSegment(path="/html/body/p", html="late")], epoch=epoch)

    assert stored is False
    assert await store.fetch_all(key) == []


@pytest.mark.asyncio
async def test_epoch_survives_destroy(store) -> None:
    epoch = await store.epoch(IDENTITY)

    await store.destroy(IDENTITY)
    await store.ensure_schema(IDENTITY, ["A"])

    assert await store.epoch(IDENTITY) == epoch + 1
    assert await store.replace_all(StoreKey(IDENTITY, "A"), [], epoch=epoch) is False


@pytest.mark.asyncio
async def test_epoch_guard_accepts_matching_epoch(store) -> None:
    key = StoreKey(IDENTITY, "A")
    await store.ensure_schema(IDENTITY, ["A"])
    epoch = await store.epoch(IDENTITY)

    stored = await store.replace_all(key, [GeneratedSegment(path="/html/body/p", html="fresh")], epoch=epoch)

    assert stored is True
    assert load_generated(await store.fetch_all(key))[0].html == "fresh"


@pytest.mark.asyncio
@pytest.mark.parametrize("recorded", [str(SCHEMA_VERSION + 1), "not-a-version"])
async def test_redis_store_recreates_on_incompatible_schema(recorded: str) -> None:
    store = _redis_store()
    await store.ensure_schema(IDENTITY, ["A"])
    await store.replace_all(StoreKey.original(IDENTITY), [_segment("/html/body/p", "stale")])
    await store._redis.hset(f"test:{IDENTITY}:meta", "schema_version", recorded)

    await store.ensure_schema(IDENTITY, ["B"])

    assert await store.store_names(IDENTITY) == {"original", "B"}
    assert await store.fetch_all(StoreKey.original(IDENTITY)) == []
    assert await store._redis.hget(f"test:{IDENTITY}:meta", "schema_version") == str(SCHEMA_VERSION)


@pytest.mark.asyncio
async def test_redis_store_skips_corrupt_records() -> None:
    store = _redis_store()
    key = StoreKey.original(IDENTITY)
    await store.replace_all(key, [_segment("/html/body/p", "ok")])
    await store._redis.rpush(f"test:{IDENTITY}:store:original", "{not json")

    records = await store.fetch_all(key)

    assert len(records) == 1
    assert records[0]["path"] == "/html/body/p"


@pytest.mark.asyncio
async def test_memory_store_recreates_on_newer_schema() -> None:
    store = InMemorySegmentStore()
    await store.ensure_schema(IDENTITY, ["A"])
    await store.replace_all(StoreKey.original(IDENTITY), [_segment("/html/body/p", "stale")])
    store._spaces[IDENTITY].schema_version = SCHEMA_VERSION + 1

    await store.ensure_schema(IDENTITY, ["B"])

    assert await store.store_names(IDENTITY) == {"original", "B"}
    assert await store.fetch_all(StoreKey.original(IDENTITY)) == []
