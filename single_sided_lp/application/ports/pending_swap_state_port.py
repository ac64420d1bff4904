from __future__ import annotations

from typing import Protocol

from single_sided_lp.domain.entities.pending_swap import PendingSwapState


class PendingSwapStatePort(Protocol):
    def save(self, *, state: PendingSwapState) -> None:
        ...

    def get(self, *, correlation_id: int) -> PendingSwapState | None:
        ...

    def take(self, *, correlation_id: int) -> PendingSwapState | None:
        """Le e remove o estado numa unica operacao; so um chamador recebe o registro."""
        ...


class CorrelationIdPort(Protocol):
    def next_correlation_id(self) -> int:
        ...
