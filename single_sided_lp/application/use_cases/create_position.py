from __future__ import annotations

import logging

from single_sided_lp.application.dto.swap_and_join import (
    STATUS_POSITION_OPENED,
    CreatePositionInput,
    CreatePositionOutput,
)
from single_sided_lp.application.ports.pool_registry_port import PoolRegistryPort
from single_sided_lp.application.use_cases.swap_planning import validate_tick_range
from single_sided_lp.domain.entities.instructions import CreatePositionInstruction, DelegatedExecution
from single_sided_lp.domain.exceptions import DenomNotInPoolError, PoolNotFoundError, ValidationError
from single_sided_lp.domain.services.swap_confirmation import sorted_coins


logger = logging.getLogger(__name__)


class CreatePositionUseCase:
    """Abre posicao com os dois ativos ja em maos, sem swap."""

    def __init__(self, *, pool_port: PoolRegistryPort, executor_address: str):
        self._pool_port = pool_port
        self._executor_address = executor_address

    def execute(self, command: CreatePositionInput) -> CreatePositionOutput:
        validate_tick_range(command.lower_tick, command.upper_tick)
        denoms = [coin.denom for coin in command.tokens_provided]
        if len(set(denoms)) != len(denoms):
            raise ValidationError("tokens_provided must not repeat a denom.")

        tokens_provided = sorted_coins(list(command.tokens_provided))
        if not tokens_provided:
            raise ValidationError("tokens_provided must carry a positive amount.")

        pool = self._pool_port.get_pool(pool_id=command.pool_id)
        if pool is None:
            raise PoolNotFoundError(f"Pool-id {command.pool_id} not found.")
        for coin in tokens_provided:
            if not pool.has_denom(coin.denom):
                raise DenomNotInPoolError(coin.denom, pool.pool_id)

        create_position = CreatePositionInstruction(
            pool_id=pool.pool_id,
            sender=command.sender,
            lower_tick=command.lower_tick,
            upper_tick=command.upper_tick,
            tokens_provided=tokens_provided,
            token_min_amount0=command.token_min_amount0,
            token_min_amount1=command.token_min_amount1,
        )
        logger.info(
            "create_position: position_issued pool=%s sender=%s lower=%s upper=%s tokens=%s",
            pool.pool_id,
            command.sender,
            command.lower_tick,
            command.upper_tick,
            ",".join(f"{coin.amount}{coin.denom}" for coin in tokens_provided),
        )
        return CreatePositionOutput(
            status=STATUS_POSITION_OPENED,
            create_position=create_position,
            execution=DelegatedExecution(grantee=self._executor_address, msgs=(create_position,)),
        )
