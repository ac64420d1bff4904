from __future__ import annotations

import base64
from decimal import Decimal

from fastapi.testclient import TestClient

from single_sided_lp.api.auth import require_api_token
from single_sided_lp.api.deps import (
    get_confirm_swap_use_case,
    get_create_position_use_case,
    get_quote_swap_and_join_use_case,
    get_swap_and_join_use_case,
    get_tick_cache,
)
from single_sided_lp.application.use_cases.confirm_swap import ConfirmSwapUseCase
from single_sided_lp.application.use_cases.create_position import CreatePositionUseCase
from single_sided_lp.application.use_cases.quote_swap_and_join import QuoteSwapAndJoinUseCase
from single_sided_lp.application.use_cases.swap_and_join import SwapAndJoinUseCase
from single_sided_lp.application.use_cases.swap_planning import SwapPlanningSettings
from single_sided_lp.domain.entities.pending_swap import PendingSwapState
from single_sided_lp.domain.entities.pool import PoolSnapshot
from single_sided_lp.domain.exceptions import PoolRegistryError
from single_sided_lp.domain.services.tick_math import InMemoryTickExpCache
from single_sided_lp.main import app


class FakePoolPort:
    def __init__(self, pool: PoolSnapshot):
        self._pool = pool

    def get_pool(self, *, pool_id: int) -> PoolSnapshot | None:
        return self._pool if self._pool.pool_id == pool_id else None


class FakePendingSwapStore:
    def __init__(self):
        self.states: dict[int, PendingSwapState] = {}
        self._next_id = 0

    def next_correlation_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def save(self, *, state: PendingSwapState) -> None:
        self.states[state.correlation_id] = state

    def get(self, *, correlation_id: int) -> PendingSwapState | None:
        return self.states.get(correlation_id)

    def take(self, *, correlation_id: int) -> PendingSwapState | None:
        return self.states.pop(correlation_id, None)


class FailingPoolPort:
    def get_pool(self, *, pool_id: int) -> PoolSnapshot | None:
        raise PoolRegistryError(f"Pool registry request failed after retries: pool {pool_id}")


def _pool() -> PoolSnapshot:
    return PoolSnapshot(
        pool_id=1,
        denom0="uatom",
        denom1="uosmo",
        current_tick=3000000,
        current_sqrt_price=Decimal("2"),
        current_tick_liquidity=Decimal("1000000000"),
        spread_factor=Decimal("0"),
    )


def _install(store: FakePendingSwapStore, pool_port=None) -> TestClient:
    pool_port = pool_port or FakePoolPort(_pool())
    settings = SwapPlanningSettings(max_slippage=Decimal("0"))
    app.dependency_overrides[require_api_token] = lambda: "token"
    app.dependency_overrides[get_swap_and_join_use_case] = lambda: SwapAndJoinUseCase(
        pool_port=pool_port,
        pending_swap_port=store,
        correlation_id_port=store,
        executor_address="osmo1executor",
        settings=settings,
        tick_cache=InMemoryTickExpCache(),
    )
    app.dependency_overrides[get_quote_swap_and_join_use_case] = lambda: QuoteSwapAndJoinUseCase(
        pool_port=pool_port,
        settings=settings,
        tick_cache=InMemoryTickExpCache(),
    )
    app.dependency_overrides[get_confirm_swap_use_case] = lambda: ConfirmSwapUseCase(
        pending_swap_port=store,
        executor_address="osmo1executor",
    )
    app.dependency_overrides[get_create_position_use_case] = lambda: CreatePositionUseCase(
        pool_port=pool_port,
        executor_address="osmo1executor",
    )
    app.dependency_overrides[get_tick_cache] = lambda: InMemoryTickExpCache()
    return TestClient(app)


def _request(**overrides) -> dict:
    payload = {
        "sender": "osmo1sender",
        "pool_id": 1,
        "lower_tick": 0,
        "upper_tick": 9600000,
        "token_provided": {"denom": "uatom", "amount": 1000},
        "token_min_amount0": 0,
        "token_min_amount1": 0,
    }
    payload.update(overrides)
    return payload


def test_swap_and_join_then_confirm_returns_position_message():
    store = FakePendingSwapStore()
    client = _install(store)

    response = client.post("/v1/swap-and-join", json=_request())

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "awaiting_confirmation"
    assert payload["correlation_id"] == 1
    assert payload["plan"]["swap_amount"] == "799"
    assert payload["execution"]["type_url"] == "/cosmos.authz.v1beta1.MsgExec"
    swap = payload["execution"]["msgs"][0]
    assert swap["type_url"] == "/osmosis.poolmanager.v1beta1.MsgSwapExactAmountIn"
    assert swap["value"]["token_in"] == {"denom": "uatom", "amount": "799"}
    assert swap["value"]["routes"] == [{"pool_id": "1", "token_out_denom": "uosmo"}]
    assert swap["value"]["token_out_min_amount"] == "3195"

    confirm = client.post(
        "/v1/swap-and-join/confirm",
        json={
            "correlation_id": 1,
            "success": True,
            "data": base64.b64encode(b"\n\x043195").decode(),
        },
    )

    assert confirm.status_code == 200
    body = confirm.json()
    assert body["status"] == "position_opened"
    assert body["tokens_provided"] == [
        {"denom": "uatom", "amount": "201"},
        {"denom": "uosmo", "amount": "3195"},
    ]
    position = body["execution"]["msgs"][0]
    assert position["type_url"] == "/osmosis.concentratedliquidity.v1beta1.MsgCreatePosition"
    assert position["value"]["lower_tick"] == "0"
    assert position["value"]["upper_tick"] == "9600000"
    assert store.states == {}

    app.dependency_overrides.clear()


def test_quote_does_not_persist_state():
    store = FakePendingSwapStore()
    client = _install(store)

    response = client.post("/v1/swap-and-join/quote", json=_request())

    assert response.status_code == 200
    payload = response.json()
    assert payload["current_tick"] == 3000000
    assert payload["plan"]["remaining_amount"] == "201"
    assert payload["plan"]["ratio0"].startswith("0.200")
    assert store.states == {}

    app.dependency_overrides.clear()


def test_swap_and_join_maps_domain_errors():
    client = _install(FakePendingSwapStore())

    assert client.post("/v1/swap-and-join", json=_request(pool_id=2)).status_code == 404
    bad_denom = client.post(
        "/v1/swap-and-join",
        json=_request(token_provided={"denom": "uusdc", "amount": 1000}),
    )
    assert bad_denom.status_code == 400
    assert bad_denom.json()["detail"] == "Denom uusdc does not exist in pool 1."
    assert client.post("/v1/swap-and-join", json=_request(upper_tick=342000001)).status_code == 400
    assert client.post("/v1/swap-and-join", json=_request(lower_tick=10, upper_tick=5)).status_code == 400

    app.dependency_overrides.clear()


def test_swap_and_join_maps_registry_failure_to_bad_gateway():
    client = _install(FakePendingSwapStore(), pool_port=FailingPoolPort())

    assert client.post("/v1/swap-and-join", json=_request()).status_code == 502

    app.dependency_overrides.clear()


def test_confirm_maps_errors():
    store = FakePendingSwapStore()
    client = _install(store)

    missing = client.post("/v1/swap-and-join/confirm", json={"correlation_id": 42, "success": True, "data": "MQ=="})
    assert missing.status_code == 404

    client.post("/v1/swap-and-join", json=_request())
    invalid = client.post("/v1/swap-and-join/confirm", json={"correlation_id": 1, "success": True, "data": "!!"})
    assert invalid.status_code == 400
    assert 1 in store.states

    no_digits = client.post(
        "/v1/swap-and-join/confirm",
        json={"correlation_id": 1, "success": True, "data": base64.b64encode(b"\n\x05").decode()},
    )
    assert no_digits.status_code == 400
    assert 1 in store.states

    failed = client.post(
        "/v1/swap-and-join/confirm",
        json={"correlation_id": 1, "success": False, "error": "slippage exceeded"},
    )
    assert failed.status_code == 409
    assert failed.json()["detail"] == "Swap failed: slippage exceeded"

    app.dependency_overrides.clear()


def test_create_position_returns_sorted_position_message():
    client = _install(FakePendingSwapStore())

    response = client.post(
        "/v1/positions",
        json={
            "sender": "osmo1sender",
            "pool_id": 1,
            "lower_tick": -100,
            "upper_tick": 100,
            "tokens_provided": [{"denom": "uosmo", "amount": 200}, {"denom": "uatom", "amount": 100}],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "position_opened"
    assert body["tokens_provided"] == [
        {"denom": "uatom", "amount": "100"},
        {"denom": "uosmo", "amount": "200"},
    ]
    position = body["execution"]["msgs"][0]
    assert position["type_url"] == "/osmosis.concentratedliquidity.v1beta1.MsgCreatePosition"
    assert position["value"]["token_min_amount0"] == "0"

    bad_denom = client.post(
        "/v1/positions",
        json={
            "sender": "osmo1sender",
            "pool_id": 1,
            "lower_tick": -100,
            "upper_tick": 100,
            "tokens_provided": [{"denom": "uusdc", "amount": 1}],
        },
    )
    assert bad_denom.status_code == 400

    app.dependency_overrides.clear()


def test_requires_bearer_token():
    app.dependency_overrides.clear()
    client = TestClient(app)

    response = client.post("/v1/swap-and-join", json=_request(), headers={"Authorization": "Token abc"})

    assert response.status_code == 401
