from __future__ import annotations

from single_sided_lp.domain.entities.coin import Coin
from single_sided_lp.domain.entities.instructions import (
    CreatePositionInstruction,
    SwapConfirmation,
)
from single_sided_lp.domain.entities.pending_swap import PendingSwapState
from single_sided_lp.domain.exceptions import ConfirmationPayloadError, SwapFailedError
from single_sided_lp.domain.services.fixed_point import checked_uint128


def parse_swap_output_amount(payload: bytes) -> int:
    """Extrai o valor de saida do swap do resultado bruto.

    O host entrega o resultado com bytes de enquadramento intercalados aos
    digitos decimais do valor, entao tudo que nao for digito ASCII e descartado
    antes do parse. Nao serve como parser generico.
    """
    # TODO: trocar por decode do MsgSwapExactAmountInResponse quando o host expuser o campo tipado.
    digits = "".join(chr(byte) for byte in payload if 0x30 <= byte <= 0x39)
    if not digits:
        raise ConfirmationPayloadError("Swap result payload carries no output amount.")
    return checked_uint128(int(digits))


def sorted_coins(coins: list[Coin]) -> tuple[Coin, ...]:
    return tuple(sorted((coin for coin in coins if coin.amount > 0), key=lambda coin: coin.denom))


def resolve_swap_confirmation(
    state: PendingSwapState,
    confirmation: SwapConfirmation,
) -> CreatePositionInstruction:
    if not confirmation.success:
        raise SwapFailedError(confirmation.error or "unknown error")

    amount_out = parse_swap_output_amount(confirmation.payload or b"")
    tokens_provided = sorted_coins(
        [
            Coin(denom=state.token_out_denom, amount=amount_out),
            state.token_provided_remaining,
        ]
    )
    return CreatePositionInstruction(
        pool_id=state.pool_id,
        sender=state.original_sender,
        lower_tick=state.lower_tick,
        upper_tick=state.upper_tick,
        tokens_provided=tokens_provided,
        token_min_amount0=state.token_min_amount0,
        token_min_amount1=state.token_min_amount1,
    )
