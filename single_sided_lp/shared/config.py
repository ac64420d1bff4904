from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str = "false") -> bool:
    return str(_env(name, default)).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_dsn: str
    pool_registry_lcd_base: str
    pool_registry_timeout_seconds: float
    pool_registry_max_retries: int
    pool_registry_min_interval_ms: int
    executor_address: str
    api_token: str
    swap_include_spread_factor: bool
    swap_refinement_passes: int
    swap_convergence_threshold: Decimal
    swap_max_slippage: Decimal
    correlation_id_strategy: str
    tick_cache_backend: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        database_dsn=_env("DATABASE_DSN", ""),
        pool_registry_lcd_base=_env("POOL_REGISTRY_LCD_BASE", "https://lcd.osmosis.zone"),
        pool_registry_timeout_seconds=float(_env("POOL_REGISTRY_TIMEOUT_SECONDS", "10")),
        pool_registry_max_retries=int(_env("POOL_REGISTRY_MAX_RETRIES", "3")),
        pool_registry_min_interval_ms=int(_env("POOL_REGISTRY_MIN_INTERVAL_MS", "0")),
        executor_address=_env("EXECUTOR_ADDRESS", ""),
        api_token=_env("API_TOKEN", ""),
        swap_include_spread_factor=_bool("SWAP_INCLUDE_SPREAD_FACTOR"),
        swap_refinement_passes=int(_env("SWAP_REFINEMENT_PASSES", "1")),
        swap_convergence_threshold=Decimal(_env("SWAP_CONVERGENCE_THRESHOLD", "0.000001")),
        swap_max_slippage=Decimal(_env("SWAP_MAX_SLIPPAGE", "0.01")),
        correlation_id_strategy=_env("CORRELATION_ID_STRATEGY", "sequence").strip().lower(),
        tick_cache_backend=_env("TICK_CACHE_BACKEND", "memory").strip().lower(),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
