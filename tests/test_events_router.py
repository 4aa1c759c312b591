from __future__ import annotations

from fastapi.testclient import TestClient

from lp_watcher.api.deps import (
    get_event_dispatcher,
    get_pool_registry,
    get_settings_dep,
    load_pool_registry,
)
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.infrastructure.pools.pool_config_loader import PoolRegistry
from lp_watcher.main import app
from lp_watcher.shared.config import get_settings


class FakeDispatcher:
    def __init__(self):
        self.submitted = []

    def submit(self, event, pool):
        self.submitted.append((event, pool))


def _registry() -> PoolRegistry:
    return PoolRegistry(
        [
            PoolConfig(
                name="USD Pool",
                production_address="0xProd",
                local_address="0xLocal",
                tokens=("USDC", "USDT"),
                decimals=(6, 6),
                price_ids=("usd-coin", "tether"),
            )
        ],
        is_production=False,
    )


def _client(dispatcher: FakeDispatcher) -> TestClient:
    app.dependency_overrides[get_pool_registry] = _registry
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    return TestClient(app)


def test_swap_event_is_accepted_and_submitted():
    dispatcher = FakeDispatcher()
    client = _client(dispatcher)

    response = client.post(
        "/v1/events",
        json={
            "kind": "Swap",
            "pool": "USD Pool",
            "actor": "0xbuyer",
            "transaction_hash": "0xtx",
            "timestamp": "2026-01-01T00:00:00Z",
            "tokens_sold": "340282366920938463463374607431768211455",
            "tokens_bought": 990000,
            "sold_id": 0,
            "bought_id": 1,
        },
    )

    assert response.status_code == 202
    assert response.json() == {
        "accepted": True,
        "pool": "USD Pool",
        "kind": "Swap",
        "transaction_hash": "0xtx",
    }
    event, pool = dispatcher.submitted[0]
    assert event.tokens_sold == 2**128 - 1
    assert pool.name == "USD Pool"

    app.dependency_overrides.clear()


def test_liquidity_event_can_address_pool_by_contract_address():
    dispatcher = FakeDispatcher()
    client = _client(dispatcher)

    response = client.post(
        "/v1/events",
        json={
            "kind": "RemoveLiquidityImbalance",
            "pool": "0xlocal",
            "actor": "0xlp",
            "transaction_hash": "0xtx",
            "token_amounts": [1, 2],
            "fees": [0, 0],
        },
    )

    assert response.status_code == 202
    event, _ = dispatcher.submitted[0]
    assert event.token_amounts == (1, 2)
    assert event.timestamp.tzinfo is not None

    app.dependency_overrides.clear()


def test_unknown_pool_returns_404():
    client = _client(FakeDispatcher())

    response = client.post(
        "/v1/events",
        json={
            "kind": "RemoveLiquidityOne",
            "pool": "Missing Pool",
            "actor": "0xlp",
            "transaction_hash": "0xtx",
            "lp_token_amount": 1,
            "bought_id": 0,
            "tokens_bought": 1,
        },
    )

    assert response.status_code == 404
    app.dependency_overrides.clear()


def test_token_index_out_of_range_returns_400():
    dispatcher = FakeDispatcher()
    client = _client(dispatcher)

    response = client.post(
        "/v1/events",
        json={
            "kind": "Swap",
            "pool": "USD Pool",
            "actor": "0xbuyer",
            "transaction_hash": "0xtx",
            "tokens_sold": 1,
            "tokens_bought": 1,
            "sold_id": 0,
            "bought_id": 5,
        },
    )

    assert response.status_code == 400
    assert "bought_id=5" in response.json()["detail"]
    assert dispatcher.submitted == []
    app.dependency_overrides.clear()


def test_amount_count_mismatch_returns_400():
    client = _client(FakeDispatcher())

    response = client.post(
        "/v1/events",
        json={
            "kind": "AddLiquidity",
            "pool": "USD Pool",
            "actor": "0xlp",
            "transaction_hash": "0xtx",
            "token_amounts": [1, 2, 3],
        },
    )

    assert response.status_code == 400
    app.dependency_overrides.clear()


def test_unknown_kind_is_rejected():
    client = _client(FakeDispatcher())

    response = client.post(
        "/v1/events",
        json={"kind": "Flash", "pool": "USD Pool", "actor": "0x", "transaction_hash": "0x"},
    )

    assert response.status_code == 422
    assert response.json()["detail"][0]["type"] == "union_tag_invalid"
    app.dependency_overrides.clear()


def test_health_reports_pool_count(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    app.dependency_overrides[get_pool_registry] = _registry
    app.dependency_overrides[get_settings_dep] = get_settings

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "pools": 1, "production": True}
    app.dependency_overrides.clear()


def test_validation_errors_name_only_the_selected_kind():
    client = _client(FakeDispatcher())

    response = client.post(
        "/v1/events",
        json={
            "kind": "AddLiquidity",
            "pool": "USD Pool",
            "actor": "0xlp",
            "transaction_hash": "0xtx",
        },
    )

    assert response.status_code == 422
    assert [error["loc"] for error in response.json()["detail"]] == [
        ["body", "AddLiquidity", "token_amounts"]
    ]
    app.dependency_overrides.clear()


def test_unreadable_pool_config_returns_500_on_requests(monkeypatch, tmp_path):
    monkeypatch.setenv("POOLS_CONFIG_PATH", str(tmp_path / "missing.json"))
    get_settings_dep.cache_clear()
    load_pool_registry.cache_clear()

    try:
        response = TestClient(app).get("/health")
    finally:
        get_settings_dep.cache_clear()
        load_pool_registry.cache_clear()

    assert response.status_code == 500
    assert "missing.json" in response.json()["detail"]
