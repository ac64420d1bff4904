from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from threading import Lock
import time
from typing import Any

import httpx

from single_sided_lp.application.ports.pool_registry_port import PoolRegistryPort
from single_sided_lp.domain.entities.pool import PoolSnapshot
from single_sided_lp.domain.exceptions import (
    CheckedArithmeticError,
    MalformedDecimalError,
    PoolRegistryError,
    ValidationError,
)
from single_sided_lp.domain.services.fixed_point import parse_decimal


logger = logging.getLogger(__name__)


CL_POOL_TYPE = "/osmosis.concentratedliquidity.v1beta1.Pool"


@dataclass(frozen=True)
class PoolRegistryClientSettings:
    lcd_base: str
    timeout_seconds: float
    max_retries: int
    min_interval_ms: int


def map_payload_to_pool_snapshot(payload: Mapping[str, Any]) -> PoolSnapshot:
    pool = payload.get("pool") or {}
    pool_type = pool.get("@type")
    if pool_type != CL_POOL_TYPE:
        raise ValidationError(f"Pool-id {pool.get('id')} is not a concentrated liquidity pool ({pool_type}).")
    try:
        return PoolSnapshot(
            pool_id=int(pool["id"]),
            denom0=str(pool["token0"]),
            denom1=str(pool["token1"]),
            current_tick=int(pool["current_tick"]),
            current_sqrt_price=parse_decimal(pool["current_sqrt_price"], field_name="current_sqrt_price"),
            current_tick_liquidity=parse_decimal(
                pool["current_tick_liquidity"],
                field_name="current_tick_liquidity",
            ),
            spread_factor=parse_decimal(pool.get("spread_factor") or "0", field_name="spread_factor"),
        )
    except (KeyError, TypeError) as exc:
        raise PoolRegistryError(f"Malformed pool payload: missing {exc}.") from exc
    except (MalformedDecimalError, CheckedArithmeticError, ValueError) as exc:
        # Valor invalido do registro conta como falha do upstream.
        raise PoolRegistryError(f"Malformed pool payload: {exc}") from exc


class PoolRegistryClient(PoolRegistryPort):
    def __init__(
        self,
        settings: PoolRegistryClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport
        self._lock = Lock()
        self._last_request_at = 0.0

    def get_pool(self, *, pool_id: int) -> PoolSnapshot | None:
        url = f"{self._settings.lcd_base.rstrip('/')}/osmosis/poolmanager/v1beta1/pools/{pool_id}"
        payload = self._get_json(url=url)
        if payload is None:
            logger.info("pool_registry_client: pool_not_found pool=%s", pool_id)
            return None

        snapshot = map_payload_to_pool_snapshot(payload)
        logger.info(
            "pool_registry_client: fetched_pool pool=%s denom0=%s denom1=%s tick=%s liquidity=%s",
            snapshot.pool_id,
            snapshot.denom0,
            snapshot.denom1,
            snapshot.current_tick,
            snapshot.current_tick_liquidity,
        )
        return snapshot

    def _get_json(self, *, url: str) -> dict | None:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
                    response = client.get(url)
                    if _is_not_found(response):
                        return None
                    response.raise_for_status()
                    return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "pool_registry_client: request_retry attempt=%s/%s error=%s",
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise PoolRegistryError(f"Pool registry request failed after retries: {last_exc}") from last_exc

    def _respect_rate_limit(self) -> None:
        min_interval = max(0, self._settings.min_interval_ms) / 1000.0
        if min_interval <= 0:
            return

        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_at
            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)
            self._last_request_at = time.monotonic()


def _is_not_found(response: httpx.Response) -> bool:
    if response.status_code == 404:
        return True
    if response.status_code < 400:
        return False
    # O gateway responde 500 com a mensagem do modulo quando a pool nao existe.
    try:
        message = str(response.json().get("message", ""))
    except ValueError:
        return False
    return "not found" in message.lower()
