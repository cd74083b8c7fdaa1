"""AssignmentBook — связи заказа с сотрудниками, складом и задачами.

Операции:
- назначение / снятие сотрудника, финализация выплаты
  (финализация = PAID + обновление счётчиков Employee в одной единице работы)
- использование позиции склада в заказе с поддержкой total_cost;
  при couple_usage_with_stock списание остатка выполняется атомарно
  с созданием записи, иначе — отдельным вызовом deduct_usage_stock
- задачи заказа и их переходы через TaskStateMachine

Все проверки выполняются до мутации; при ошибке единица работы откатывается.
"""

import logging
from datetime import date
from typing import Optional

from src.booking.task_state_machine import TaskStateMachine, TaskTransitionResult
from src.core.clock import Clock, SystemClock
from src.core.config import LedgerConfig
from src.core.domain.assignment import EmployeeAssignment, InventoryUsage
from src.core.domain.inventory import StockMovementResult
from src.core.domain.money import MoneyInput, validate_non_negative_money
from src.core.domain.order import Order
from src.core.domain.task import Task, TaskPriority, TaskStatus
from src.core.errors import InsufficientStock, NotFound, ValidationError
from src.persistence.repositories import UnitOfWork

logger = logging.getLogger(__name__)


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"quantity must be int, got {quantity!r}")
    if quantity < 0:
        raise ValidationError(f"quantity cannot be negative: {quantity}")
    return quantity


class AssignmentBook:
    """Книга назначений: Order ↔ Employee / Inventory / Task."""

    def __init__(
        self,
        uow: UnitOfWork,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.config = config or LedgerConfig()
        self.clock = clock or SystemClock()
        self.task_state_machine = TaskStateMachine(self.clock)

    def _open_order(self, order_number: str) -> Order:
        order = self.uow.orders.get(order_number)
        if order.is_closed():
            raise ValidationError(
                f"Order {order_number} is {order.order_status.value}; assignments are frozen"
            )
        return order

    # -------------------------------------------------------------------------
    # Employee assignments
    # -------------------------------------------------------------------------

    def add_employee_assignment(
        self,
        order_number: str,
        employee_code: str,
        role: Optional[str] = None,
        payment_amount: MoneyInput = None,
    ) -> EmployeeAssignment:
        """Назначение сотрудника на заказ.

        payment_amount по умолчанию — salary_per_order сотрудника.
        Счётчики сотрудника НЕ меняются (см. finalize_employee_assignment).

        Raises:
            NotFound: заказ или сотрудник не найден
            ValidationError: заказ закрыт, сотрудник неактивен или уже назначен,
                некорректная сумма
        """
        with self.uow:
            order = self._open_order(order_number)
            employee = self.uow.employees.get(employee_code)
            if not employee.active:
                raise ValidationError(f"Employee {employee_code} is inactive")

            amount = (
                employee.salary_per_order
                if payment_amount is None
                else validate_non_negative_money(payment_amount, "payment_amount")
            )
            assignment = EmployeeAssignment(
                employee_code=employee_code,
                role_in_order=role,
                payment_amount=amount,
                assigned_at=self.clock.now(),
            )
            order.add_employee_assignment(assignment)
            order.touch(self.clock.now())

        logger.info(
            "Employee %s assigned to order %s as %s (payment=%s)",
            employee_code, order_number, role, assignment.payment_amount,
        )
        return assignment

    def remove_employee_assignment(self, order_number: str, employee_code: str) -> EmployeeAssignment:
        """Снятие сотрудника с заказа.

        Raises:
            NotFound: заказ или назначение не найдено
            ValidationError: выплата уже финализирована (счётчики учтены)
        """
        with self.uow:
            order = self.uow.orders.get(order_number)
            assignment = order.find_employee_assignment(employee_code)
            if assignment is None:
                raise NotFound("EmployeeAssignment", f"{order_number}/{employee_code}")
            if assignment.is_paid():
                raise ValidationError(
                    f"Assignment {order_number}/{employee_code} is already paid and cannot be removed"
                )
            order.remove_employee_assignment(employee_code)
            order.touch(self.clock.now())
        logger.info("Employee %s removed from order %s", employee_code, order_number)
        return assignment

    def finalize_employee_assignment(self, order_number: str, employee_code: str) -> EmployeeAssignment:
        """Финализация назначения: PAID + total_orders_served += 1, total_earnings += payment.

        Raises:
            NotFound: заказ, назначение или сотрудник не найден
            ValidationError: назначение уже финализировано
        """
        with self.uow:
            order = self.uow.orders.get(order_number)
            assignment = order.find_employee_assignment(employee_code)
            if assignment is None:
                raise NotFound("EmployeeAssignment", f"{order_number}/{employee_code}")
            employee = self.uow.employees.get(employee_code)

            assignment.mark_paid()
            employee.record_served_order(assignment.payment_amount)
            now = self.clock.now()
            employee.updated_at = now
            order.touch(now)

        logger.info(
            "Assignment %s/%s finalized: employee orders_served=%d, earnings=%s",
            order_number, employee_code, employee.total_orders_served, employee.total_earnings,
        )
        return assignment

    # -------------------------------------------------------------------------
    # Inventory usage
    # -------------------------------------------------------------------------

    def add_inventory_usage(
        self,
        order_number: str,
        item_code: str,
        quantity: int,
        unit_cost: MoneyInput = None,
    ) -> InventoryUsage:
        """Использование позиции склада в заказе.

        unit_cost по умолчанию — текущая цена позиции (снимок).
        При couple_usage_with_stock остаток списывается в той же единице работы.

        Raises:
            NotFound: заказ или позиция не найдены
            ValidationError: некорректное количество/цена, заказ закрыт, позиция неактивна
            InsufficientStock: (coupled) остатка не хватает — запись не создаётся
        """
        quantity = _validate_quantity(quantity)
        cost = None if unit_cost is None else validate_non_negative_money(unit_cost, "unit_cost")

        with self.uow:
            order = self._open_order(order_number)
            item = self.uow.inventory.get(item_code)
            if not item.active:
                raise ValidationError(f"Inventory item {item_code} is inactive")

            usage = InventoryUsage(
                item_code=item_code,
                quantity_used=quantity,
                unit_cost=item.unit_cost if cost is None else cost,
                assigned_at=self.clock.now(),
            )

            if self.config.couple_usage_with_stock:
                try:
                    item.use_stock(quantity)
                except InsufficientStock:
                    logger.warning(
                        "Usage of %s x%d on order %s rejected: stock=%d",
                        item_code, quantity, order_number, item.current_stock,
                    )
                    raise
                usage.stock_deducted = True
                item.updated_at = self.clock.now()

            order.add_inventory_usage(usage)
            order.touch(self.clock.now())

        logger.info(
            "Inventory %s x%d used on order %s: total_cost=%s, stock_deducted=%s",
            item_code, quantity, order_number, usage.total_cost, usage.stock_deducted,
        )
        return usage

    def deduct_usage_stock(self, order_number: str, usage_id: str) -> StockMovementResult:
        """Явное списание остатка по записи использования (decoupled режим).

        Raises:
            NotFound: заказ, запись или позиция не найдены
            ValidationError: остаток по записи уже списан
            InsufficientStock: остатка не хватает
        """
        with self.uow:
            order = self.uow.orders.get(order_number)
            usage = order.find_inventory_usage(usage_id)
            if usage is None:
                raise NotFound("InventoryUsage", f"{order_number}/{usage_id}")
            if usage.stock_deducted:
                raise ValidationError(f"Stock for usage {usage_id} is already deducted")
            item = self.uow.inventory.get(usage.item_code)
            result = item.use_stock(usage.quantity_used)
            usage.stock_deducted = True
            item.updated_at = self.clock.now()
        logger.info("Stock deducted for usage %s on order %s: %s", usage_id, order_number, result.details)
        return result

    def change_usage_quantity(self, order_number: str, usage_id: str, quantity: int) -> InventoryUsage:
        """Изменение количества с пересчётом total_cost.

        Если остаток по записи уже списан, разница довзыскивается/возвращается на склад.

        Raises:
            InsufficientStock: увеличение не покрывается остатком (ничего не меняется)
        """
        quantity = _validate_quantity(quantity)
        with self.uow:
            order = self._open_order(order_number)
            usage = order.find_inventory_usage(usage_id)
            if usage is None:
                raise NotFound("InventoryUsage", f"{order_number}/{usage_id}")

            if usage.stock_deducted:
                item = self.uow.inventory.get(usage.item_code)
                delta = quantity - usage.quantity_used
                if delta > 0:
                    item.use_stock(delta)
                elif delta < 0:
                    item.update_stock(-delta)
                item.updated_at = self.clock.now()

            usage.set_quantity_used(quantity)
            order.touch(self.clock.now())
        return usage

    def change_usage_unit_cost(self, order_number: str, usage_id: str, unit_cost: MoneyInput) -> InventoryUsage:
        with self.uow:
            order = self._open_order(order_number)
            usage = order.find_inventory_usage(usage_id)
            if usage is None:
                raise NotFound("InventoryUsage", f"{order_number}/{usage_id}")
            usage.set_unit_cost(unit_cost)
            order.touch(self.clock.now())
        return usage

    def remove_inventory_usage(self, order_number: str, usage_id: str, restock: bool = True) -> InventoryUsage:
        """Удаление записи использования.

        Args:
            restock: вернуть списанный остаток на склад
        """
        with self.uow:
            order = self.uow.orders.get(order_number)
            usage = order.find_inventory_usage(usage_id)
            if usage is None:
                raise NotFound("InventoryUsage", f"{order_number}/{usage_id}")
            if restock and usage.stock_deducted:
                item = self.uow.inventory.get(usage.item_code)
                item.update_stock(usage.quantity_used)
                item.updated_at = self.clock.now()
                usage.stock_deducted = False
            order.remove_inventory_usage(usage_id)
            order.touch(self.clock.now())
        logger.info("Usage %s removed from order %s (restock=%s)", usage_id, order_number, restock)
        return usage

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def add_task(
        self,
        order_number: str,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[str] = None,
        due_date: Optional[date] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        """Raises NotFound если заказ или исполнитель не найден."""
        with self.uow:
            order = self.uow.orders.get(order_number)
            if assigned_to is not None:
                self.uow.employees.get(assigned_to)
            now = self.clock.now()
            task = Task(
                title=title,
                description=description,
                assigned_to=assigned_to,
                due_date=due_date,
                priority=priority,
                created_at=now,
                updated_at=now,
            )
            order.add_task(task)
            order.touch(now)
        return task

    def assign_task(self, order_number: str, task_id: str, employee_code: Optional[str]) -> Task:
        with self.uow:
            order = self.uow.orders.get(order_number)
            task = order.find_task(task_id)
            if task is None:
                raise NotFound("Task", f"{order_number}/{task_id}")
            if employee_code is not None:
                self.uow.employees.get(employee_code)
            task.assigned_to = employee_code
            task.updated_at = self.clock.now()
        return task

    def transition_task(self, order_number: str, task_id: str, status: TaskStatus) -> TaskTransitionResult:
        with self.uow:
            order = self.uow.orders.get(order_number)
            task = order.find_task(task_id)
            if task is None:
                raise NotFound("Task", f"{order_number}/{task_id}")
            result = self.task_state_machine.transition(task, status)
        return result

    def remove_task(self, order_number: str, task_id: str) -> Task:
        with self.uow:
            order = self.uow.orders.get(order_number)
            task = order.remove_task(task_id)
            order.touch(self.clock.now())
        return task
