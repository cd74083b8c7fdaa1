"""
MoneyLedger — денежные инварианты заказа

Единственный допустимый способ вычисления производных денежных полей заказа:
- remaining_amount = total_amount - advance_amount
- payment_status = f(remaining_amount, advance_amount)

Все суммы — decimal.Decimal с двумя знаками после запятой.
ЗАПРЕЩЕНО использовать float для денежной арифметики: float вносит дрейф округления.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Final

from src.core.errors import ValidationError


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество знаков после запятой для денежных сумм (NUMERIC(12, 2))
MONEY_PLACES: Final[int] = 2

# Квант округления
MONEY_QUANT: Final[Decimal] = Decimal("0.01")

# Денежный ноль
ZERO_MONEY: Final[Decimal] = Decimal("0.00")

# Максимальное количество цифр в сумме
MONEY_MAX_DIGITS: Final[int] = 12

# Допустимые входные типы денежных значений
MoneyInput = Decimal | int | float | str | None


# =============================================================================
# ENUMS
# =============================================================================


class PaymentStatus(str, Enum):
    """Статус оплаты заказа (производный)"""

    PENDING = "PENDING"
    ADVANCE_PAID = "ADVANCE_PAID"
    FULLY_PAID = "FULLY_PAID"


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def to_money(value: MoneyInput, field: str = "amount") -> Decimal:
    """
    Приведение значения к денежному Decimal с двумя знаками.

    float конвертируется через str(), чтобы 0.1 стал Decimal("0.1"),
    а не двоичным приближением.

    Args:
        value: Исходное значение (None трактуется как 0)
        field: Имя поля для сообщения об ошибке

    Returns:
        Decimal, квантованный до MONEY_QUANT

    Raises:
        ValidationError: Если значение не число, NaN/Inf или точнее 0.01
    """
    if value is None:
        return ZERO_MONEY

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got bool")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} is not a valid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")

    quantized = amount.quantize(MONEY_QUANT)
    if quantized != amount:
        raise ValidationError(
            f"{field} {amount} has more than {MONEY_PLACES} decimal places"
        )

    return quantized


def validate_non_negative_money(value: MoneyInput, field: str = "amount") -> Decimal:
    """
    Нормализация + проверка неотрицательности.

    Raises:
        ValidationError: Если сумма отрицательная или некорректная
    """
    amount = to_money(value, field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative: {amount}")
    return amount


# =============================================================================
# ПРОИЗВОДНЫЕ ПОЛЯ
# =============================================================================


def compute_remaining_amount(total_amount: Decimal | None, advance_amount: Decimal | None) -> Decimal:
    """
    Остаток к оплате.

    remaining = total - advance (None трактуется как 0).
    Отрицательный остаток НЕ обрезается: переплата остаётся видимой.

    Args:
        total_amount: Полная сумма заказа
        advance_amount: Внесённый аванс

    Returns:
        Остаток (может быть <= 0)
    """
    total = total_amount if total_amount is not None else ZERO_MONEY
    advance = advance_amount if advance_amount is not None else ZERO_MONEY
    return total - advance


def derive_payment_status(remaining_amount: Decimal | None, advance_amount: Decimal | None) -> PaymentStatus:
    """
    Классификация статуса оплаты.

    - remaining <= 0 (или None) → FULLY_PAID
    - иначе advance > 0 → ADVANCE_PAID
    - иначе → PENDING

    Args:
        remaining_amount: Остаток к оплате
        advance_amount: Внесённый аванс

    Returns:
        PaymentStatus
    """
    if remaining_amount is None or remaining_amount <= 0:
        return PaymentStatus.FULLY_PAID
    if advance_amount is not None and advance_amount > 0:
        return PaymentStatus.ADVANCE_PAID
    return PaymentStatus.PENDING


def multiply_money(unit_amount: Decimal, quantity: int) -> Decimal:
    """
    Стоимость партии: unit_amount * quantity.

    Произведение Decimal(2 знака) на int сохраняет 2 знака — округление не требуется.
    """
    return unit_amount * quantity
