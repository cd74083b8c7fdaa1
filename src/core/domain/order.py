"""
Order — агрегат заказа кейтеринга

Граница консистентности верхнего уровня:
- владеет состоянием MoneyLedger (total / advance / remaining / payment_status)
- владеет дочерними записями EmployeeAssignment, InventoryUsage, Task
- ссылается на Employee и Inventory только по идентификатору

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. remaining_amount == total_amount - advance_amount после любого мутатора
2. payment_status == derive_payment_status(remaining_amount, advance_amount)
   (кроме legacy-режима, см. set_total_amount)
3. order_number неизменяем после присвоения
4. Заказ физически не удаляется: отмена — переход в CANCELLED
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Final

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from src.core.domain.assignment import EmployeeAssignment, InventoryUsage
from src.core.domain.money import (
    MONEY_MAX_DIGITS,
    ZERO_MONEY,
    MoneyInput,
    PaymentStatus,
    compute_remaining_amount,
    derive_payment_status,
    to_money,
    validate_non_negative_money,
)
from src.core.domain.task import Task
from src.core.errors import NotFound, ValidationError


# =============================================================================
# ENUMS
# =============================================================================


class OrderType(str, Enum):
    """Тип заказа"""

    FULL_CATERING = "FULL_CATERING"
    HALF_CATERING = "HALF_CATERING"


class OrderStatus(str, Enum):
    """Статус заказа"""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# COMPLETED и CANCELLED — терминальные
ORDER_STATUS_TRANSITIONS: Final[dict[OrderStatus, frozenset[OrderStatus]]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.IN_PROGRESS: frozenset({OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


# =============================================================================
# ORDER MODEL
# =============================================================================


class Order(BaseModel):
    """
    Заказ (Full / Half Catering).

    Все изменения денежного состояния — только через set_total_amount,
    set_advance_amount и record_payment. Прямое присваивание полей
    в обход мутаторов нарушает инварианты.
    """

    # Идентификация
    order_number: str = Field(..., min_length=1, max_length=30, frozen=True, description="Уникальный номер заказа")
    order_type: OrderType = Field(OrderType.FULL_CATERING)
    customer_id: str | None = Field(None, description="Ссылка на клиента (внешний агрегат)")

    # Событие
    event_name: str | None = Field(None, max_length=200)
    event_date: date = Field(..., description="Дата мероприятия")
    event_time: time | None = Field(None)
    venue_address: str | None = Field(None)
    guest_count: int | None = Field(None, ge=0)
    menu_details: str | None = Field(None)
    special_requirements: str | None = Field(None)
    notes: str | None = Field(None)

    # Статус
    order_status: OrderStatus = Field(OrderStatus.PENDING)

    # MoneyLedger
    total_amount: Decimal = Field(ZERO_MONEY, ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=2)
    advance_amount: Decimal = Field(ZERO_MONEY, ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=2)
    remaining_amount: Decimal = Field(ZERO_MONEY, max_digits=MONEY_MAX_DIGITS, decimal_places=2, description="Производное")
    payment_status: PaymentStatus = Field(PaymentStatus.PENDING, description="Производное")

    # Дочерние записи
    employee_assignments: list[EmployeeAssignment] = Field(default_factory=list)
    inventory_usage: list[InventoryUsage] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)

    # Время
    created_at: datetime | None = Field(None)
    updated_at: datetime | None = Field(None)

    @field_validator("total_amount", "advance_amount", "remaining_amount", mode="before")
    @classmethod
    def normalize_money(cls, v: MoneyInput, info: ValidationInfo) -> Decimal:
        return to_money(v, info.field_name)

    @model_validator(mode="after")
    def derive_money_state(self) -> "Order":
        """Производные поля пересчитываются при создании, переданные значения игнорируются."""
        self._recompute(rederive_status=True)
        for child in (*self.employee_assignments, *self.inventory_usage, *self.tasks):
            if child.order_number is None:
                child.order_number = self.order_number
            elif child.order_number != self.order_number:
                raise ValueError(
                    f"child record belongs to order {child.order_number}, not {self.order_number}"
                )
        return self

    # -------------------------------------------------------------------------
    # MoneyLedger
    # -------------------------------------------------------------------------

    def _recompute(self, rederive_status: bool = True) -> None:
        self.remaining_amount = compute_remaining_amount(self.total_amount, self.advance_amount)
        if rederive_status:
            self.payment_status = derive_payment_status(self.remaining_amount, self.advance_amount)

    def set_total_amount(self, total: MoneyInput, *, rederive_status: bool = True) -> None:
        """
        Установка полной суммы заказа.

        Args:
            total: Новая сумма (>= 0, два знака)
            rederive_status: False воспроизводит legacy-поведение,
                при котором payment_status пересчитывается только сеттером аванса

        Raises:
            ValidationError: Если сумма отрицательная или некорректная
        """
        self.total_amount = validate_non_negative_money(total, "total_amount")
        self._recompute(rederive_status=rederive_status)

    def set_advance_amount(self, advance: MoneyInput) -> None:
        """
        Установка аванса. Всегда пересчитывает remaining и payment_status.

        Аванс больше суммы заказа допустим: remaining <= 0 → FULLY_PAID.

        Raises:
            ValidationError: Если аванс отрицательный или некорректный
        """
        self.advance_amount = validate_non_negative_money(advance, "advance_amount")
        self._recompute(rederive_status=True)

    def record_payment(self, amount: MoneyInput) -> None:
        """
        Накопительный платёж: advance_amount += amount.

        Raises:
            ValidationError: Если amount <= 0
        """
        value = validate_non_negative_money(amount, "payment")
        if value == 0:
            raise ValidationError("payment must be positive")
        self.set_advance_amount(self.advance_amount + value)

    def is_fully_paid(self) -> bool:
        return self.payment_status == PaymentStatus.FULLY_PAID

    def has_outstanding_balance(self) -> bool:
        return self.remaining_amount > 0

    # -------------------------------------------------------------------------
    # Статус заказа
    # -------------------------------------------------------------------------

    def can_transition_to(self, status: OrderStatus) -> bool:
        return status == self.order_status or status in ORDER_STATUS_TRANSITIONS[self.order_status]

    def set_order_status(self, status: OrderStatus) -> None:
        """
        Переход статуса заказа.

        Raises:
            ValidationError: Если переход недопустим (например, из CANCELLED)
        """
        status = OrderStatus(status)
        if not self.can_transition_to(status):
            raise ValidationError(
                f"Order {self.order_number}: transition {self.order_status.value} → {status.value} is not allowed"
            )
        self.order_status = status

    def start(self) -> None:
        self.set_order_status(OrderStatus.IN_PROGRESS)

    def complete(self) -> None:
        self.set_order_status(OrderStatus.COMPLETED)

    def cancel(self) -> None:
        self.set_order_status(OrderStatus.CANCELLED)

    def is_closed(self) -> bool:
        return self.order_status in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    def touch(self, now: datetime) -> None:
        self.updated_at = now

    # -------------------------------------------------------------------------
    # Дочерние записи
    # -------------------------------------------------------------------------

    def find_employee_assignment(self, employee_code: str) -> EmployeeAssignment | None:
        for assignment in self.employee_assignments:
            if assignment.employee_code == employee_code:
                return assignment
        return None

    def add_employee_assignment(self, assignment: EmployeeAssignment) -> None:
        """
        Прикрепление назначения к заказу.

        Raises:
            ValidationError: Если сотрудник уже назначен на этот заказ
        """
        if self.find_employee_assignment(assignment.employee_code) is not None:
            raise ValidationError(
                f"Employee {assignment.employee_code} is already assigned to order {self.order_number}"
            )
        assignment.order_number = self.order_number
        self.employee_assignments.append(assignment)

    def remove_employee_assignment(self, employee_code: str) -> EmployeeAssignment:
        """
        Открепление назначения; ссылка на заказ сбрасывается.

        Raises:
            NotFound: Если назначения нет
        """
        assignment = self.find_employee_assignment(employee_code)
        if assignment is None:
            raise NotFound("EmployeeAssignment", f"{self.order_number}/{employee_code}")
        self.employee_assignments.remove(assignment)
        assignment.order_number = None
        return assignment

    def find_inventory_usage(self, usage_id: str) -> InventoryUsage | None:
        for usage in self.inventory_usage:
            if usage.usage_id == usage_id:
                return usage
        return None

    def add_inventory_usage(self, usage: InventoryUsage) -> None:
        usage.order_number = self.order_number
        self.inventory_usage.append(usage)

    def remove_inventory_usage(self, usage_id: str) -> InventoryUsage:
        """
        Raises:
            NotFound: Если записи использования нет
        """
        usage = self.find_inventory_usage(usage_id)
        if usage is None:
            raise NotFound("InventoryUsage", f"{self.order_number}/{usage_id}")
        self.inventory_usage.remove(usage)
        usage.order_number = None
        return usage

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    def add_task(self, task: Task) -> None:
        task.order_number = self.order_number
        self.tasks.append(task)

    def remove_task(self, task_id: str) -> Task:
        """
        Raises:
            NotFound: Если задачи нет
        """
        task = self.find_task(task_id)
        if task is None:
            raise NotFound("Task", f"{self.order_number}/{task_id}")
        self.tasks.remove(task)
        task.order_number = None
        return task

    def assigned_employee_codes(self) -> set[str]:
        return {a.employee_code for a in self.employee_assignments}

    # -------------------------------------------------------------------------
    # Агрегаты
    # -------------------------------------------------------------------------

    def total_labor_cost(self) -> Decimal:
        """Сумма выплат сотрудникам по заказу."""
        return sum((a.payment_amount for a in self.employee_assignments), ZERO_MONEY)

    def total_inventory_cost(self) -> Decimal:
        """Сумма стоимости использованного инвентаря."""
        return sum((u.total_cost for u in self.inventory_usage), ZERO_MONEY)

    def gross_margin(self) -> Decimal:
        """total_amount минус прямые затраты (труд + инвентарь)."""
        return self.total_amount - self.total_labor_cost() - self.total_inventory_cost()
