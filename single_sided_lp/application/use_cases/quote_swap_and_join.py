from __future__ import annotations

from single_sided_lp.application.dto.swap_and_join import QuoteSwapAndJoinOutput, SwapAndJoinInput
from single_sided_lp.application.ports.pool_registry_port import PoolRegistryPort
from single_sided_lp.application.use_cases.swap_planning import (
    SwapPlanningSettings,
    plan_swap_and_join,
)
from single_sided_lp.domain.services.tick_math import TickExpCachePort


class QuoteSwapAndJoinUseCase:
    def __init__(
        self,
        *,
        pool_port: PoolRegistryPort,
        settings: SwapPlanningSettings | None = None,
        tick_cache: TickExpCachePort | None = None,
    ):
        self._pool_port = pool_port
        self._settings = settings or SwapPlanningSettings()
        self._tick_cache = tick_cache

    def execute(self, command: SwapAndJoinInput) -> QuoteSwapAndJoinOutput:
        pool, plan = plan_swap_and_join(
            command=command,
            pool_port=self._pool_port,
            settings=self._settings,
            tick_cache=self._tick_cache,
        )
        return QuoteSwapAndJoinOutput(pool_id=pool.pool_id, current_tick=pool.current_tick, plan=plan)
