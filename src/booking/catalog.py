"""Catalog — регистрация сотрудников и позиций склада, приход товара.

Employee и Inventory — независимые агрегаты. Уникальность employee_code
и item_code проверяется через persistence boundary до создания.
"""

import logging
from typing import Optional

from src.core.clock import Clock, SystemClock
from src.core.domain.employee import Employee
from src.core.domain.inventory import Inventory, StockMovementResult
from src.core.domain.money import MoneyInput
from src.core.errors import DuplicateIdentity, ValidationError
from src.persistence.repositories import UnitOfWork

logger = logging.getLogger(__name__)


class Catalog:
    """Справочник сотрудников и склада."""

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    # -------------------------------------------------------------------------
    # Employees
    # -------------------------------------------------------------------------

    def register_employee(self, employee: Employee) -> Employee:
        """Raises DuplicateIdentity если employee_code занят."""
        with self.uow:
            if self.uow.employees.exists(employee.employee_code):
                raise DuplicateIdentity("Employee", employee.employee_code)
            now = self.clock.now()
            employee.created_at = employee.created_at or now
            employee.updated_at = now
            if employee.hire_date is None:
                employee.hire_date = self.clock.today()
            self.uow.employees.add(employee)
        logger.info("Employee %s registered as %s", employee.employee_code, employee.employee_type.value)
        return employee

    def set_employee_active(self, employee_code: str, active: bool) -> Employee:
        with self.uow:
            employee = self.uow.employees.get(employee_code)
            if active:
                employee.activate()
            else:
                employee.deactivate()
            employee.updated_at = self.clock.now()
        return employee

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def register_item(self, item: Inventory) -> Inventory:
        """Raises DuplicateIdentity если item_code занят."""
        with self.uow:
            if self.uow.inventory.exists(item.item_code):
                raise DuplicateIdentity("Inventory", item.item_code)
            now = self.clock.now()
            item.created_at = item.created_at or now
            item.updated_at = now
            self.uow.inventory.add(item)
        logger.info(
            "Inventory item %s registered: stock=%d, total_value=%s",
            item.item_code, item.current_stock, item.total_value,
        )
        return item

    def receive_stock(self, item_code: str, quantity: int) -> StockMovementResult:
        """Поступление товара (положительная корректировка остатка).

        Raises:
            ValidationError: если quantity <= 0
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(f"received quantity must be a positive int, got {quantity!r}")
        with self.uow:
            item = self.uow.inventory.get(item_code)
            result = item.update_stock(quantity)
            item.updated_at = self.clock.now()
        logger.info("Stock received for %s: %s", item_code, result.details)
        return result

    def adjust_stock(self, item_code: str, delta: int) -> StockMovementResult:
        """Корректировка остатка (±), остаток не может уйти ниже нуля."""
        with self.uow:
            item = self.uow.inventory.get(item_code)
            result = item.update_stock(delta)
            item.updated_at = self.clock.now()
        logger.info("Stock adjusted for %s: %s", item_code, result.details)
        return result

    def set_unit_cost(self, item_code: str, unit_cost: MoneyInput) -> Inventory:
        with self.uow:
            item = self.uow.inventory.get(item_code)
            item.set_unit_cost(unit_cost)
            item.updated_at = self.clock.now()
        return item

    def set_item_active(self, item_code: str, active: bool) -> Inventory:
        with self.uow:
            item = self.uow.inventory.get(item_code)
            item.active = active
            item.updated_at = self.clock.now()
        return item
