"""
Inventory — позиция склада со StockLedger

Поддерживает посуду, столы для выкладки, бутыли воды, продукты и оборудование.

Инварианты:
1. current_stock >= 0 всегда
2. total_value == current_stock * unit_cost после любого изменения остатка или цены
3. Отказ в списании НЕ меняет состояние и НЕ проходит молча
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from src.core.domain.money import (
    ZERO_MONEY,
    MoneyInput,
    multiply_money,
    to_money,
    validate_non_negative_money,
)
from src.core.errors import InsufficientStock, ValidationError


# =============================================================================
# ENUMS
# =============================================================================


class ItemCategory(str, Enum):
    """Категория позиции склада"""

    UTENSILS = "UTENSILS"
    DISPLAY_TABLES = "DISPLAY_TABLES"
    WATER_CANS = "WATER_CANS"
    VEGETABLES = "VEGETABLES"
    GROCERY = "GROCERY"
    EQUIPMENT = "EQUIPMENT"


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class StockMovementResult:
    """Результат движения остатка (tagged success/failure)."""

    item_code: str
    applied: bool
    reason: str  # "applied" | "insufficient_stock"

    requested_delta: int
    stock_before: int
    stock_after: int
    total_value_after: Decimal

    details: str


# =============================================================================
# INVENTORY MODEL
# =============================================================================


def _require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be int, got {value!r}")
    return value


class Inventory(BaseModel):
    """
    Позиция склада.

    Изменения остатка — только через update_stock / use_stock / set_current_stock.
    """

    item_code: str = Field(..., min_length=1, max_length=30, frozen=True, description="Уникальный код позиции")
    item_name: str = Field(..., min_length=1, max_length=100, description="Наименование")
    category: ItemCategory | None = Field(None)
    description: str | None = Field(None)
    unit: str | None = Field(None, max_length=20, description="Единица измерения (шт, кг, л)")

    current_stock: int = Field(0, ge=0, description="Текущий остаток")
    minimum_stock: int = Field(0, ge=0, description="Порог low stock")
    unit_cost: Decimal = Field(ZERO_MONEY, ge=0, max_digits=8, decimal_places=2)
    total_value: Decimal = Field(ZERO_MONEY, max_digits=12, decimal_places=2, description="Производное")

    supplier: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=100)
    active: bool = Field(True)

    created_at: datetime | None = Field(None)
    updated_at: datetime | None = Field(None)

    @field_validator("unit_cost", "total_value", mode="before")
    @classmethod
    def normalize_money(cls, v: MoneyInput, info: ValidationInfo) -> Decimal:
        return to_money(v, info.field_name)

    @model_validator(mode="after")
    def derive_total_value(self) -> "Inventory":
        self._recompute_total_value()
        return self

    def _recompute_total_value(self) -> None:
        self.total_value = multiply_money(self.unit_cost, self.current_stock)

    def _result(self, applied: bool, reason: str, delta: int, before: int, details: str) -> StockMovementResult:
        return StockMovementResult(
            item_code=self.item_code,
            applied=applied,
            reason=reason,
            requested_delta=delta,
            stock_before=before,
            stock_after=self.current_stock,
            total_value_after=self.total_value,
            details=details,
        )

    # -------------------------------------------------------------------------
    # StockLedger
    # -------------------------------------------------------------------------

    def update_stock(self, delta: int) -> StockMovementResult:
        """
        Приход/корректировка остатка: current_stock += delta.

        Положительный delta — поступление. Отрицательный — корректировка,
        допустима, пока остаток не уходит ниже нуля.

        Raises:
            ValidationError: Если delta не int или остаток стал бы отрицательным
        """
        _require_int(delta, "delta")
        before = self.current_stock
        if before + delta < 0:
            raise ValidationError(
                f"update_stock({delta}) would make stock of {self.item_code} negative (current={before})"
            )
        self.current_stock = before + delta
        self._recompute_total_value()
        return self._result(True, "applied", delta, before, f"{before} → {self.current_stock}")

    def try_use_stock(self, quantity: int) -> StockMovementResult:
        """
        Попытка списания без исключения при нехватке.

        Returns:
            StockMovementResult с applied=False и reason="insufficient_stock",
            если current_stock < quantity; состояние при этом не меняется.

        Raises:
            ValidationError: Если quantity отрицательное или не int
        """
        _require_int(quantity, "quantity")
        if quantity < 0:
            raise ValidationError(f"quantity cannot be negative: {quantity}")

        before = self.current_stock
        if before < quantity:
            return self._result(
                False,
                "insufficient_stock",
                -quantity,
                before,
                f"requested={quantity}, available={before}",
            )

        self.current_stock = before - quantity
        self._recompute_total_value()
        return self._result(True, "applied", -quantity, before, f"{before} → {self.current_stock}")

    def use_stock(self, quantity: int) -> StockMovementResult:
        """
        Списание остатка.

        Raises:
            InsufficientStock: Если current_stock < quantity (состояние не изменено)
            ValidationError: Если quantity некорректное
        """
        result = self.try_use_stock(quantity)
        if not result.applied:
            raise InsufficientStock(self.item_code, quantity, result.stock_before)
        return result

    def set_current_stock(self, stock: int) -> None:
        """Прямая установка остатка (инвентаризация)."""
        _require_int(stock, "current_stock")
        if stock < 0:
            raise ValidationError(f"current_stock cannot be negative: {stock}")
        self.current_stock = stock
        self._recompute_total_value()

    def set_unit_cost(self, unit_cost: MoneyInput) -> None:
        """Изменение цены за единицу с пересчётом total_value."""
        self.unit_cost = validate_non_negative_money(unit_cost, "unit_cost")
        self._recompute_total_value()

    def set_minimum_stock(self, minimum: int) -> None:
        _require_int(minimum, "minimum_stock")
        if minimum < 0:
            raise ValidationError(f"minimum_stock cannot be negative: {minimum}")
        self.minimum_stock = minimum

    def is_low_stock(self) -> bool:
        """Low stock: current_stock <= minimum_stock."""
        return self.current_stock <= self.minimum_stock

    def is_out_of_stock(self) -> bool:
        return self.current_stock == 0
