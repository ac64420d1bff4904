from __future__ import annotations

from typing import Protocol

from single_sided_lp.domain.entities.pool import PoolSnapshot


class PoolRegistryPort(Protocol):
    def get_pool(self, *, pool_id: int) -> PoolSnapshot | None:
        ...
