from __future__ import annotations

import logging

from single_sided_lp.application.dto.swap_and_join import (
    STATUS_AWAITING_CONFIRMATION,
    STATUS_POSITION_OPENED,
    SwapAndJoinInput,
    SwapAndJoinOutput,
)
from single_sided_lp.application.ports.pending_swap_state_port import (
    CorrelationIdPort,
    PendingSwapStatePort,
)
from single_sided_lp.application.ports.pool_registry_port import PoolRegistryPort
from single_sided_lp.application.use_cases.swap_planning import (
    SwapPlanningSettings,
    plan_swap_and_join,
)
from single_sided_lp.domain.entities.coin import Coin
from single_sided_lp.domain.entities.instructions import (
    CreatePositionInstruction,
    DelegatedExecution,
    SwapAmountInRoute,
    SwapInstruction,
)
from single_sided_lp.domain.entities.pending_swap import PendingSwapState
from single_sided_lp.domain.services.swap_confirmation import sorted_coins
from single_sided_lp.domain.services.tick_math import TickExpCachePort


logger = logging.getLogger(__name__)


class SwapAndJoinUseCase:
    """Primeira fase: emite o swap e guarda o estado ate a confirmacao chegar."""

    def __init__(
        self,
        *,
        pool_port: PoolRegistryPort,
        pending_swap_port: PendingSwapStatePort,
        correlation_id_port: CorrelationIdPort,
        executor_address: str,
        settings: SwapPlanningSettings | None = None,
        tick_cache: TickExpCachePort | None = None,
    ):
        self._pool_port = pool_port
        self._pending_swap_port = pending_swap_port
        self._correlation_id_port = correlation_id_port
        self._executor_address = executor_address
        self._settings = settings or SwapPlanningSettings()
        self._tick_cache = tick_cache

    def execute(self, command: SwapAndJoinInput) -> SwapAndJoinOutput:
        pool, plan = plan_swap_and_join(
            command=command,
            pool_port=self._pool_port,
            settings=self._settings,
            tick_cache=self._tick_cache,
        )
        remaining = Coin(denom=plan.token_in_denom, amount=plan.remaining_amount)

        if plan.swap_amount == 0:
            # Faixa toda no ativo fornecido: nada a confirmar.
            create_position = CreatePositionInstruction(
                pool_id=pool.pool_id,
                sender=command.sender,
                lower_tick=command.lower_tick,
                upper_tick=command.upper_tick,
                tokens_provided=sorted_coins([remaining]),
                token_min_amount0=command.token_min_amount0,
                token_min_amount1=command.token_min_amount1,
            )
            logger.info(
                "swap_and_join: no_swap_needed pool=%s sender=%s denom=%s amount=%s",
                pool.pool_id,
                command.sender,
                remaining.denom,
                remaining.amount,
            )
            return SwapAndJoinOutput(
                status=STATUS_POSITION_OPENED,
                correlation_id=None,
                plan=plan,
                execution=DelegatedExecution(grantee=self._executor_address, msgs=(create_position,)),
            )

        correlation_id = self._correlation_id_port.next_correlation_id()
        self._pending_swap_port.save(
            state=PendingSwapState(
                correlation_id=correlation_id,
                pool_id=pool.pool_id,
                original_sender=command.sender,
                lower_tick=command.lower_tick,
                upper_tick=command.upper_tick,
                token_min_amount0=command.token_min_amount0,
                token_min_amount1=command.token_min_amount1,
                token_provided_remaining=remaining,
                token_out_denom=plan.token_out_denom,
            )
        )

        swap = SwapInstruction(
            sender=command.sender,
            routes=(SwapAmountInRoute(pool_id=pool.pool_id, token_out_denom=plan.token_out_denom),),
            token_in=Coin(denom=plan.token_in_denom, amount=plan.swap_amount),
            token_out_min_amount=plan.token_out_min_amount,
        )
        logger.info(
            "swap_and_join: swap_issued correlation_id=%s pool=%s sender=%s token_in=%s swap_amount=%s remaining=%s token_out=%s min_out=%s",
            correlation_id,
            pool.pool_id,
            command.sender,
            plan.token_in_denom,
            plan.swap_amount,
            plan.remaining_amount,
            plan.token_out_denom,
            plan.token_out_min_amount,
        )
        return SwapAndJoinOutput(
            status=STATUS_AWAITING_CONFIRMATION,
            correlation_id=correlation_id,
            plan=plan,
            execution=DelegatedExecution(grantee=self._executor_address, msgs=(swap,)),
        )
