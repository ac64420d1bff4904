from __future__ import annotations

from decimal import Decimal
import unittest

from single_sided_lp.domain.entities.pool import PoolSnapshot
from single_sided_lp.domain.exceptions import DenomNotInPoolError, DivideByZeroError
from single_sided_lp.domain.services.swap_amount import (
    amount0_delta,
    amount1_delta,
    calc_swap_amount,
    minimum_amount_out,
    next_sqrt_price_from_amount0_in,
    next_sqrt_price_from_amount1_in,
)
from single_sided_lp.domain.services.tick_math import InMemoryTickExpCache


def _pool(**overrides) -> PoolSnapshot:
    # tick 3000000 vale preco 4, sqrt 2.
    payload = {
        "pool_id": 1,
        "denom0": "uatom",
        "denom1": "uosmo",
        "current_tick": 3000000,
        "current_sqrt_price": Decimal("2"),
        "current_tick_liquidity": Decimal("1000000000"),
        "spread_factor": Decimal("0"),
    }
    payload.update(overrides)
    return PoolSnapshot(**payload)


class LiquidityDeltaTests(unittest.TestCase):
    def test_amount0_delta_rounds_per_flag_and_ignores_order(self):
        self.assertEqual(amount0_delta(Decimal(3), Decimal(2), Decimal(1), True), 2)
        self.assertEqual(amount0_delta(Decimal(3), Decimal(2), Decimal(1), False), 1)
        self.assertEqual(amount0_delta(Decimal(3), Decimal(1), Decimal(2), True), 2)

    def test_amount1_delta_rounds_per_flag(self):
        self.assertEqual(amount1_delta(Decimal(3), Decimal(1), Decimal("1.5"), True), 2)
        self.assertEqual(amount1_delta(Decimal(3), Decimal("1.5"), Decimal(1), False), 1)

    def test_amount0_delta_rejects_zero_sqrt_price(self):
        with self.assertRaises(DivideByZeroError):
            amount0_delta(Decimal(3), Decimal(0), Decimal(1), True)


class NextSqrtPriceTests(unittest.TestCase):
    def test_token0_in_lowers_price_rounding_up(self):
        self.assertEqual(
            next_sqrt_price_from_amount0_in(liquidity=Decimal(10), sqrt_price=Decimal(2), amount_in=5),
            Decimal(1),
        )
        self.assertEqual(
            next_sqrt_price_from_amount0_in(liquidity=Decimal(1), sqrt_price=Decimal(1), amount_in=2),
            Decimal("0.333333333333333334"),
        )

    def test_token1_in_raises_price_rounding_down(self):
        self.assertEqual(
            next_sqrt_price_from_amount1_in(liquidity=Decimal(10), sqrt_price=Decimal(2), amount_in=5),
            Decimal("2.5"),
        )
        self.assertEqual(
            next_sqrt_price_from_amount1_in(liquidity=Decimal(3), sqrt_price=Decimal(1), amount_in=1),
            Decimal("1.333333333333333333"),
        )

    def test_zero_liquidity_is_rejected(self):
        with self.assertRaises(DivideByZeroError):
            next_sqrt_price_from_amount0_in(liquidity=Decimal(0), sqrt_price=Decimal(2), amount_in=5)
        with self.assertRaises(DivideByZeroError):
            next_sqrt_price_from_amount1_in(liquidity=Decimal(0), sqrt_price=Decimal(2), amount_in=5)


class MinimumAmountOutTests(unittest.TestCase):
    def test_applies_spread_and_slippage(self):
        self.assertEqual(
            minimum_amount_out(
                estimated_amount_out=1000,
                spread_factor=Decimal("0.002"),
                max_slippage=Decimal("0.01"),
            ),
            988,
        )

    def test_never_zero_when_something_comes_out(self):
        self.assertEqual(
            minimum_amount_out(estimated_amount_out=1, spread_factor=Decimal("0.002"), max_slippage=Decimal("0.01")),
            1,
        )
        self.assertEqual(
            minimum_amount_out(estimated_amount_out=0, spread_factor=Decimal(0), max_slippage=Decimal(0)),
            0,
        )


class CalcSwapAmountTests(unittest.TestCase):
    def _calc(self, pool: PoolSnapshot, denom: str, amount: int, **kwargs):
        return calc_swap_amount(
            pool=pool,
            token_in_denom=denom,
            amount_in=amount,
            lower_tick=kwargs.pop("lower_tick", 0),
            upper_tick=kwargs.pop("upper_tick", 9600000),
            tick_cache=InMemoryTickExpCache(),
            **kwargs,
        )

    def test_without_refinement_uses_pre_swap_ratio(self):
        plan = self._calc(_pool(), "uatom", 1000, max_passes=0)

        self.assertEqual(plan.swap_amount, 800)
        self.assertEqual(plan.remaining_amount, 200)
        self.assertEqual(plan.passes, 0)
        self.assertEqual(plan.tick_after, 3000000)

    def test_refinement_corrects_for_price_impact_of_token0_swap(self):
        plan = self._calc(_pool(), "uatom", 1000)

        self.assertEqual(plan.passes, 1)
        self.assertEqual(plan.tick_after, 2999987)
        self.assertEqual(plan.swap_amount, 799)
        self.assertEqual(plan.remaining_amount, 201)
        self.assertEqual(plan.token_out_denom, "uosmo")
        self.assertEqual(plan.estimated_amount_out, 3195)
        self.assertEqual(plan.token_out_min_amount, 3195)

    def test_token1_in_swaps_toward_token0(self):
        plan = self._calc(_pool(), "uosmo", 1000, max_slippage=Decimal("0.01"))

        self.assertEqual(plan.swap_amount, 200)
        self.assertEqual(plan.remaining_amount, 800)
        self.assertEqual(plan.token_out_denom, "uatom")
        self.assertEqual(plan.tick_after, 3000000)
        self.assertGreater(plan.estimated_amount_out, 0)
        self.assertLessEqual(plan.token_out_min_amount, plan.estimated_amount_out)

    def test_swap_never_exceeds_provided(self):
        for amount in (1, 7, 1000, 123456789):
            for denom in ("uatom", "uosmo"):
                with self.subTest(amount=amount, denom=denom):
                    plan = self._calc(_pool(), denom, amount)
                    self.assertLessEqual(plan.swap_amount, amount)
                    self.assertEqual(plan.swap_amount + plan.remaining_amount, amount)

    def test_range_above_price_keeps_token0(self):
        plan = self._calc(_pool(), "uatom", 1000, lower_tick=9600000, upper_tick=12000000)

        self.assertEqual(plan.swap_amount, 0)
        self.assertEqual(plan.remaining_amount, 1000)
        self.assertEqual(plan.passes, 0)
        self.assertEqual(plan.estimated_amount_out, 0)

    def test_range_above_price_swaps_all_token1(self):
        plan = self._calc(_pool(), "uosmo", 1000, lower_tick=9600000, upper_tick=12000000)

        self.assertEqual(plan.swap_amount, 1000)
        self.assertEqual(plan.remaining_amount, 0)

    def test_spread_factor_margin_is_optional(self):
        pool = _pool(spread_factor=Decimal("0.002"))

        plain = self._calc(pool, "uosmo", 1000)
        with_margin = self._calc(pool, "uosmo", 1000, include_spread_factor=True)

        self.assertEqual(plain.swap_amount, 200)
        self.assertEqual(with_margin.swap_amount, 202)

    def test_spread_factor_margin_is_capped(self):
        pool = _pool(spread_factor=Decimal("0.002"))
        plan = self._calc(
            pool,
            "uosmo",
            1000,
            lower_tick=9600000,
            upper_tick=12000000,
            include_spread_factor=True,
        )
        self.assertEqual(plan.swap_amount, 1000)
        self.assertEqual(plan.remaining_amount, 0)

    def test_rejects_denom_outside_pool(self):
        with self.assertRaises(DenomNotInPoolError):
            self._calc(_pool(), "uusdc", 1000)

    def test_zero_liquidity_aborts(self):
        with self.assertRaises(DivideByZeroError):
            self._calc(_pool(current_tick_liquidity=Decimal(0)), "uatom", 1000)


if __name__ == "__main__":
    unittest.main()
