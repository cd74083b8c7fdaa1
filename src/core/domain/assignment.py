"""
Assignment records — связи заказа с ресурсами

EmployeeAssignment: Order ↔ Employee (роль, оплата, статус оплаты)
InventoryUsage: Order ↔ Inventory (количество, цена за единицу, стоимость)

Записи принадлежат заказу. Сотрудник и позиция склада ссылаются
по идентификатору (employee_code / item_code), без обратных указателей.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from src.core.domain.money import (
    MONEY_MAX_DIGITS,
    ZERO_MONEY,
    MoneyInput,
    multiply_money,
    to_money,
    validate_non_negative_money,
)
from src.core.errors import ValidationError


# =============================================================================
# ENUMS
# =============================================================================


class AssignmentPaymentStatus(str, Enum):
    """Статус выплаты сотруднику по заказу"""

    PENDING = "PENDING"
    PAID = "PAID"


def _new_record_id() -> str:
    return uuid4().hex


# =============================================================================
# EMPLOYEE ASSIGNMENT
# =============================================================================


class EmployeeAssignment(BaseModel):
    """
    Назначение сотрудника на заказ.

    Не влияет на счётчики Employee: они обновляются только
    явной операцией finalize (см. AssignmentBook).
    """

    assignment_id: str = Field(default_factory=_new_record_id, frozen=True)
    order_number: str | None = Field(None, description="Номер заказа-владельца (None после открепления)")
    employee_code: str = Field(..., min_length=1, max_length=20, description="Код сотрудника")
    role_in_order: str | None = Field(None, max_length=50, description="Роль в заказе")
    payment_amount: Decimal = Field(
        ZERO_MONEY, ge=0, max_digits=10, decimal_places=2, description="Выплата сотруднику"
    )
    payment_status: AssignmentPaymentStatus = Field(AssignmentPaymentStatus.PENDING)
    assigned_at: datetime | None = Field(None, description="Время назначения")

    @field_validator("payment_amount", mode="before")
    @classmethod
    def normalize_payment_amount(cls, v: MoneyInput) -> Decimal:
        return to_money(v, "payment_amount")

    def is_paid(self) -> bool:
        return self.payment_status == AssignmentPaymentStatus.PAID

    def mark_paid(self) -> None:
        """
        Перевод выплаты в PAID.

        Raises:
            ValidationError: Если выплата уже отмечена (защита от двойного учёта)
        """
        if self.is_paid():
            raise ValidationError(
                f"Assignment of {self.employee_code} on order {self.order_number} is already paid"
            )
        self.payment_status = AssignmentPaymentStatus.PAID

    def set_payment_amount(self, amount: MoneyInput) -> None:
        """Изменение суммы выплаты (только пока выплата не проведена)."""
        value = validate_non_negative_money(amount, "payment_amount")
        if self.is_paid():
            raise ValidationError("Cannot change payment_amount of a paid assignment")
        self.payment_amount = value


# =============================================================================
# INVENTORY USAGE
# =============================================================================


class InventoryUsage(BaseModel):
    """
    Использование позиции склада в заказе.

    Инвариант: total_cost == quantity_used * unit_cost после любого сеттера.
    unit_cost — снимок цены на момент использования.
    """

    usage_id: str = Field(default_factory=_new_record_id, frozen=True)
    order_number: str | None = Field(None, description="Номер заказа-владельца")
    item_code: str = Field(..., min_length=1, max_length=30, description="Код позиции склада")
    quantity_used: int = Field(..., ge=0, description="Использованное количество")
    unit_cost: Decimal = Field(
        ZERO_MONEY, ge=0, max_digits=8, decimal_places=2, description="Цена за единицу (снимок)"
    )
    total_cost: Decimal = Field(
        ZERO_MONEY, max_digits=MONEY_MAX_DIGITS, decimal_places=2, description="Производное: quantity * unit_cost"
    )
    stock_deducted: bool = Field(False, description="Остаток на складе уже списан")
    assigned_at: datetime | None = Field(None)

    @field_validator("unit_cost", "total_cost", mode="before")
    @classmethod
    def normalize_money(cls, v: MoneyInput, info: ValidationInfo) -> Decimal:
        return to_money(v, info.field_name)

    @model_validator(mode="after")
    def derive_total_cost(self) -> "InventoryUsage":
        """Производное поле всегда пересчитывается, переданное значение игнорируется."""
        self.total_cost = multiply_money(self.unit_cost, self.quantity_used)
        return self

    def set_quantity_used(self, quantity: int) -> None:
        """
        Изменение количества с пересчётом total_cost.

        Raises:
            ValidationError: Если количество отрицательное или не int
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(f"quantity_used must be int, got {quantity!r}")
        if quantity < 0:
            raise ValidationError(f"quantity_used cannot be negative: {quantity}")
        self.quantity_used = quantity
        self.total_cost = multiply_money(self.unit_cost, self.quantity_used)

    def set_unit_cost(self, unit_cost: MoneyInput) -> None:
        """Изменение цены за единицу с пересчётом total_cost."""
        value = validate_non_negative_money(unit_cost, "unit_cost")
        self.unit_cost = value
        self.total_cost = multiply_money(self.unit_cost, self.quantity_used)
