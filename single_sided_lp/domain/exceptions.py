from __future__ import annotations

from decimal import Decimal


class DomainError(Exception):
    """Base para erros de dominio."""


class PoolNotFoundError(DomainError):
    """Pool solicitada nao existe."""


class ValidationError(DomainError):
    """Entrada invalida: denom, tick, preco ou payload fora do esperado."""


class TickIndexMinError(ValidationError):
    """Tick abaixo do minimo suportado."""


class TickIndexMaxError(ValidationError):
    """Tick acima do maximo suportado."""


class PriceBoundError(ValidationError):
    """Preco fora de [1e-12, 1e38]."""

    def __init__(self, price: Decimal):
        self.price = price
        super().__init__(
            "Price must be between 0.000000000001 and "
            f"100000000000000000000000000000000000000. Got {price}"
        )


class InvalidTickRangeError(ValidationError):
    """Faixa de ticks invalida."""


class DenomNotInPoolError(ValidationError):
    """Denom fornecido nao pertence a pool."""

    def __init__(self, provided_denom: str, pool_id: int | None = None):
        self.provided_denom = provided_denom
        self.pool_id = pool_id
        suffix = f" {pool_id}" if pool_id is not None else ""
        super().__init__(f"Denom {provided_denom} does not exist in pool{suffix}.")


class MalformedDecimalError(ValidationError):
    """Valor decimal mal formado."""


class ConfirmationPayloadError(ValidationError):
    """Payload de confirmacao do swap sem valor numerico."""


class CheckedArithmeticError(DomainError, ArithmeticError):
    """Falha de aritmetica de ponto fixo verificada."""


class DivideByZeroError(CheckedArithmeticError):
    """Divisao por zero."""


class FixedPointOverflowError(CheckedArithmeticError):
    """Resultado excede o intervalo representavel."""


class FixedPointUnderflowError(CheckedArithmeticError):
    """Resultado ficaria negativo."""


class InsufficientFundsForSwapError(FixedPointUnderflowError):
    """Valor de swap maior que o saldo fornecido."""

    def __init__(self, balance: int, needed: int):
        self.balance = balance
        self.needed = needed
        super().__init__(f"Insufficient funds for swap. Have: {balance}, Need: {needed}")


class ConversionOverflowError(CheckedArithmeticError):
    """Valor nao cabe na largura inteira de destino."""


class StateError(DomainError):
    """Estado persistido ausente ou inconsistente."""


class PendingSwapStateNotFoundError(StateError):
    """Nao ha swap pendente para o correlation id."""

    def __init__(self, correlation_id: int):
        self.correlation_id = correlation_id
        super().__init__(f"Pending swap state not found for correlation id {correlation_id}.")


class ExternalFailureError(DomainError):
    """Colaborador externo rejeitou ou falhou."""


class SwapFailedError(ExternalFailureError):
    """Host reportou falha no swap."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Swap failed: {reason}")


class PoolRegistryError(ExternalFailureError):
    """Consulta ao registro de pools falhou."""
