"""Unit tests for the recommendation engine facade and pair table cache."""

from unittest.mock import AsyncMock

import pytest

from app.ai.basket import FrequencyTable
from app.ai.recommendations import PairTableCache, RecommendationEngine
from app.repositories.base import RepositoryError
from fakes import (
    BASE_TIME,
    FakeOrderRepository,
    FakeProductRepository,
    FakeUserRepository,
    make_cashback_user,
    make_item,
    make_order,
    make_product,
)


def _store():
    """Two shoppers. u1 bought P1 and P5; other baskets pair them with P2..P4, P6."""
    orders = [
        make_order("h1", [make_item("P1", price=4000.0, category="Anillos")], user_id="u1"),
        make_order("h2", [make_item("P5", price=4000.0, category="Anillos")], user_id="u1"),
        make_order("h3", ["P9"], user_id="u1", status="cancelled"),
        make_order("o1", ["P1", "P2", "P3"], user_id="u2"),
        make_order("o2", ["P1", "P4"], user_id="u2"),
        make_order("o3", ["P5", "P6", "P1"], user_id="u2", status="pending"),
    ]
    products = [
        make_product("P1", category="Anillos", price=4000.0),
        make_product("P2", category="Anillos", price=4200.0, rating=4.8, featured=True),
        make_product("P3", category="Collares", price=9000.0, rating=5.0),
        make_product("P4", category="Aretes", price=3800.0, rating=4.2),
        make_product("P5", category="Anillos", price=4000.0),
        make_product("P6", category="Pulseras", price=100.0, rating=3.0),
    ]
    return FakeOrderRepository(orders), FakeProductRepository(products)


def _engine(orders, products, users=None, **kwargs):
    return RecommendationEngine(
        orders=orders,
        products=products,
        users=users or FakeUserRepository(),
        **kwargs,
    )


# ── Recommendations ────────────────────────────────

@pytest.mark.asyncio
async def test_anchor_mode_ranked_and_excludes_purchased():
    orders, products = _store()
    engine = _engine(orders, products)

    recs = await engine.get_product_recommendations("u1", anchor_product_id="P1")

    ids = [r.id for r in recs]
    assert "P5" not in ids  # bought by u1
    assert "P1" not in ids
    assert ids[0] == "P2"
    # 2 Anillos purchased (+20), price close (+20), rating 4.8 (+24), featured (+15)
    assert recs[0].recommendation_score == pytest.approx(79.0)
    assert set(ids) == {"P2", "P3", "P4", "P6"}


@pytest.mark.asyncio
async def test_history_mode_never_returns_purchased():
    orders, products = _store()
    engine = _engine(orders, products)

    recs = await engine.get_product_recommendations("u1")

    ids = {r.id for r in recs}
    assert ids
    assert ids.isdisjoint({"P1", "P5"})
    assert len(recs) <= 6


@pytest.mark.asyncio
async def test_cancelled_orders_do_not_count_as_history():
    orders, products = _store()
    engine = _engine(orders, products)
    recs = await engine.get_product_recommendations("u1", anchor_product_id="P9")
    # P9 only appears in a single-item cancelled order: no pairs, no history entry
    assert recs == []


@pytest.mark.asyncio
async def test_results_capped_at_six():
    orders = FakeOrderRepository([make_order("o1", ["A"] + [f"R{i}" for i in range(12)], user_id="u2")])
    products = FakeProductRepository([make_product(f"R{i}") for i in range(12)])
    recs = await _engine(orders, products).get_product_recommendations("u1", anchor_product_id="A")
    assert len(recs) == 6


@pytest.mark.asyncio
async def test_order_store_failure_returns_empty():
    engine = _engine(FakeOrderRepository(fail=True), FakeProductRepository())
    assert await engine.get_product_recommendations("u1") == []
    assert await engine.get_product_recommendations("u1", anchor_product_id="P1") == []


@pytest.mark.asyncio
async def test_catalog_failure_returns_empty():
    orders, _ = _store()
    engine = _engine(orders, FakeProductRepository(fail=True))
    assert await engine.get_product_recommendations("u1", anchor_product_id="P1") == []


# ── Cashback ───────────────────────────────────────

@pytest.mark.asyncio
async def test_check_unused_cashback():
    users = FakeUserRepository([make_cashback_user("a", 45), make_cashback_user("b", 10)])
    orders, products = _store()
    reminders = await _engine(orders, products, users).check_unused_cashback(now=BASE_TIME)
    assert [(r.user_id, r.priority) for r in reminders] == [("a", "medium")]


@pytest.mark.asyncio
async def test_check_unused_cashback_store_failure_returns_empty():
    orders, products = _store()
    engine = _engine(orders, products, FakeUserRepository(fail=True))
    assert await engine.check_unused_cashback() == []


# ── Pair table cache ───────────────────────────────

@pytest.mark.asyncio
async def test_without_cache_every_request_rescans():
    orders, products = _store()
    engine = _engine(orders, products)
    await engine.get_product_recommendations("u1", anchor_product_id="P1")
    await engine.get_product_recommendations("u1", anchor_product_id="P1")
    assert orders.find_all_calls == 2


@pytest.mark.asyncio
async def test_cache_reuses_table_until_expiry():
    now = [1000.0]
    cache = PairTableCache(ttl_seconds=60, clock=lambda: now[0])
    orders, products = _store()
    engine = _engine(orders, products, pair_cache=cache)

    await engine.get_product_recommendations("u1", anchor_product_id="P1")
    await engine.get_product_recommendations("u1")
    assert orders.find_all_calls == 1

    now[0] += 61
    await engine.get_product_recommendations("u1")
    assert orders.find_all_calls == 2


@pytest.mark.asyncio
async def test_rebuild_invalidates_cache():
    cache = PairTableCache(ttl_seconds=600)
    orders, products = _store()
    engine = _engine(orders, products, pair_cache=cache)

    await engine.frequency_table()
    table = await engine.rebuild_frequency_table()

    assert orders.find_all_calls == 2
    assert cache.table is table
    assert table.orders_scanned == 6


@pytest.mark.asyncio
async def test_failed_rebuild_keeps_previous_table():
    cache = PairTableCache(ttl_seconds=600)
    previous = FrequencyTable.empty()
    await cache.get(AsyncMock(return_value=previous))

    cache.invalidate()
    with pytest.raises(RepositoryError):
        await cache.get(AsyncMock(side_effect=RepositoryError("down")))

    assert cache.table is previous
    assert not cache.is_fresh()
