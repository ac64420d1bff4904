from __future__ import annotations

import logging

from single_sided_lp.application.dto.swap_and_join import (
    STATUS_POSITION_OPENED,
    ConfirmSwapInput,
    ConfirmSwapOutput,
)
from single_sided_lp.application.ports.pending_swap_state_port import PendingSwapStatePort
from single_sided_lp.domain.entities.instructions import DelegatedExecution, SwapConfirmation
from single_sided_lp.domain.exceptions import PendingSwapStateNotFoundError, SwapFailedError
from single_sided_lp.domain.services.swap_confirmation import (
    parse_swap_output_amount,
    resolve_swap_confirmation,
)


logger = logging.getLogger(__name__)


class ConfirmSwapUseCase:
    """Segunda fase: consome o estado pendente e emite a abertura da posicao.

    Payload invalido de um swap bem-sucedido e rejeitado antes de tocar no
    estado, que continua disponivel para uma confirmacao corrigida. Falha
    reportada pelo host consome o estado.
    """

    def __init__(self, *, pending_swap_port: PendingSwapStatePort, executor_address: str):
        self._pending_swap_port = pending_swap_port
        self._executor_address = executor_address

    def execute(self, command: ConfirmSwapInput) -> ConfirmSwapOutput:
        confirmation = SwapConfirmation(
            correlation_id=command.correlation_id,
            success=command.success,
            payload=command.payload,
            error=command.error,
        )
        if confirmation.success:
            parse_swap_output_amount(confirmation.payload or b"")

        state = self._pending_swap_port.take(correlation_id=command.correlation_id)
        if state is None:
            logger.warning(
                "confirm_swap: pending_state_not_found correlation_id=%s",
                command.correlation_id,
            )
            raise PendingSwapStateNotFoundError(command.correlation_id)

        try:
            create_position = resolve_swap_confirmation(state, confirmation)
        except SwapFailedError as exc:
            logger.warning(
                "confirm_swap: swap_failed correlation_id=%s pool=%s sender=%s reason=%s",
                command.correlation_id,
                state.pool_id,
                state.original_sender,
                exc.reason,
            )
            raise

        logger.info(
            "confirm_swap: position_issued correlation_id=%s pool=%s sender=%s tokens=%s",
            command.correlation_id,
            state.pool_id,
            state.original_sender,
            ",".join(f"{coin.amount}{coin.denom}" for coin in create_position.tokens_provided),
        )
        return ConfirmSwapOutput(
            status=STATUS_POSITION_OPENED,
            correlation_id=command.correlation_id,
            create_position=create_position,
            execution=DelegatedExecution(grantee=self._executor_address, msgs=(create_position,)),
        )
