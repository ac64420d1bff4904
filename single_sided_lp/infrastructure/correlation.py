from __future__ import annotations

from single_sided_lp.application.ports.pending_swap_state_port import CorrelationIdPort


LEGACY_SWAP_REPLY_ID = 1


class FixedCorrelationIdAllocator(CorrelationIdPort):
    """Reusa sempre o mesmo id: so um swap-and-join pendente por vez.

    Um segundo pedido antes da confirmacao do primeiro sobrescreve o estado
    pendente dele.
    """

    def __init__(self, correlation_id: int = LEGACY_SWAP_REPLY_ID):
        self._correlation_id = correlation_id

    def next_correlation_id(self) -> int:
        return self._correlation_id
