from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from single_sided_lp.application.ports.pending_swap_state_port import CorrelationIdPort
from single_sided_lp.application.use_cases.confirm_swap import ConfirmSwapUseCase
from single_sided_lp.application.use_cases.create_position import CreatePositionUseCase
from single_sided_lp.application.use_cases.quote_swap_and_join import QuoteSwapAndJoinUseCase
from single_sided_lp.application.use_cases.swap_and_join import SwapAndJoinUseCase
from single_sided_lp.application.use_cases.swap_planning import SwapPlanningSettings
from single_sided_lp.domain.services.tick_math import TickExpCachePort, default_tick_exp_cache
from single_sided_lp.infrastructure.clients.pool_registry_client import (
    PoolRegistryClient,
    PoolRegistryClientSettings,
)
from single_sided_lp.infrastructure.correlation import FixedCorrelationIdAllocator
from single_sided_lp.infrastructure.db.engine import get_engine
from single_sided_lp.infrastructure.db.repositories.pending_swap_state_repository import (
    SqlPendingSwapStateRepository,
)
from single_sided_lp.infrastructure.db.repositories.tick_exp_cache_repository import (
    SqlTickExpCacheRepository,
)
from single_sided_lp.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.database_dsn:
        raise HTTPException(status_code=500, detail="DATABASE_DSN is required.")
    return get_engine(settings.database_dsn)


def _get_executor_address() -> str:
    settings = get_settings()
    if not settings.executor_address:
        raise HTTPException(status_code=500, detail="EXECUTOR_ADDRESS is required.")
    return settings.executor_address


@lru_cache(maxsize=1)
def _get_pool_registry_client() -> PoolRegistryClient:
    settings = get_settings()
    return PoolRegistryClient(
        PoolRegistryClientSettings(
            lcd_base=settings.pool_registry_lcd_base,
            timeout_seconds=settings.pool_registry_timeout_seconds,
            max_retries=settings.pool_registry_max_retries,
            min_interval_ms=settings.pool_registry_min_interval_ms,
        )
    )


def _get_planning_settings() -> SwapPlanningSettings:
    settings = get_settings()
    return SwapPlanningSettings(
        include_spread_factor=settings.swap_include_spread_factor,
        max_passes=settings.swap_refinement_passes,
        convergence_threshold=settings.swap_convergence_threshold,
        max_slippage=settings.swap_max_slippage,
    )


def _get_tick_cache() -> TickExpCachePort:
    settings = get_settings()
    if settings.tick_cache_backend == "sql":
        return SqlTickExpCacheRepository(_get_db_engine())
    return default_tick_exp_cache()


def _get_correlation_id_port(repository: SqlPendingSwapStateRepository) -> CorrelationIdPort:
    settings = get_settings()
    if settings.correlation_id_strategy == "fixed":
        return FixedCorrelationIdAllocator()
    return repository


def get_swap_and_join_use_case() -> SwapAndJoinUseCase:
    repository = SqlPendingSwapStateRepository(_get_db_engine())
    return SwapAndJoinUseCase(
        pool_port=_get_pool_registry_client(),
        pending_swap_port=repository,
        correlation_id_port=_get_correlation_id_port(repository),
        executor_address=_get_executor_address(),
        settings=_get_planning_settings(),
        tick_cache=_get_tick_cache(),
    )


def get_quote_swap_and_join_use_case() -> QuoteSwapAndJoinUseCase:
    return QuoteSwapAndJoinUseCase(
        pool_port=_get_pool_registry_client(),
        settings=_get_planning_settings(),
        tick_cache=_get_tick_cache(),
    )


def get_confirm_swap_use_case() -> ConfirmSwapUseCase:
    return ConfirmSwapUseCase(
        pending_swap_port=SqlPendingSwapStateRepository(_get_db_engine()),
        executor_address=_get_executor_address(),
    )


def get_create_position_use_case() -> CreatePositionUseCase:
    return CreatePositionUseCase(
        pool_port=_get_pool_registry_client(),
        executor_address=_get_executor_address(),
    )


def get_tick_cache() -> TickExpCachePort:
    return _get_tick_cache()
