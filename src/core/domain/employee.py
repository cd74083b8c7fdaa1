"""
Employee — сотрудник кейтеринга

Типы: повар, бай, официант, водитель, сборщик столов, сервис.

Счётчики total_orders_served / total_earnings НЕ выводятся из назначений
автоматически: они меняются только через record_served_order(),
который вызывается при финализации назначения.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.core.domain.money import ZERO_MONEY, MoneyInput, to_money, validate_non_negative_money


class EmployeeType(str, Enum):
    """Тип сотрудника"""

    COOK = "COOK"
    BAI = "BAI"
    WAITER = "WAITER"
    DRIVER = "DRIVER"
    DISPLAY_TABLE_BOY = "DISPLAY_TABLE_BOY"
    SERVICE_BOY = "SERVICE_BOY"


class Employee(BaseModel):
    """Сотрудник (независимый агрегат, адресуется по employee_code)."""

    employee_code: str = Field(..., min_length=1, max_length=20, frozen=True, description="Уникальный код")
    name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=20)
    email: str | None = Field(None, max_length=100)
    address: str | None = Field(None)
    employee_type: EmployeeType = Field(..., description="Тип сотрудника")
    hire_date: date | None = Field(None)

    salary_per_order: Decimal = Field(ZERO_MONEY, ge=0, max_digits=8, decimal_places=2)
    base_salary: Decimal = Field(ZERO_MONEY, ge=0, max_digits=10, decimal_places=2)

    total_orders_served: int = Field(0, ge=0)
    total_earnings: Decimal = Field(ZERO_MONEY, ge=0, max_digits=12, decimal_places=2)

    active: bool = Field(True)
    created_at: datetime | None = Field(None)
    updated_at: datetime | None = Field(None)

    @field_validator("salary_per_order", "base_salary", "total_earnings", mode="before")
    @classmethod
    def normalize_money(cls, v: MoneyInput, info: ValidationInfo) -> Decimal:
        return to_money(v, info.field_name)

    def record_served_order(self, payment_amount: MoneyInput) -> None:
        """
        Учёт обслуженного заказа: +1 заказ, +payment_amount к заработку.

        Args:
            payment_amount: Выплата по финализированному назначению
        """
        amount = validate_non_negative_money(payment_amount, "payment_amount")
        self.total_orders_served += 1
        self.total_earnings = self.total_earnings + amount

    def deactivate(self) -> None:
        self.active = False

    def activate(self) -> None:
        self.active = True
