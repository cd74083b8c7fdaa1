"""Reporting — read-only проекции над хранилищем.

Выручка и задолженность по заказам, low stock и стоимость склада,
сроки и счётчики задач, рейтинг сотрудников.
Все запросы без побочных эффектов.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from src.core.clock import Clock, SystemClock
from src.core.config import ReportingConfig
from src.core.domain.employee import Employee
from src.core.domain.inventory import Inventory, ItemCategory
from src.core.domain.money import ZERO_MONEY
from src.core.domain.order import Order, OrderStatus
from src.core.domain.task import Task, TaskPriority, TaskStatus
from src.persistence.repositories import UnitOfWork


class Reporting:
    """Отчётные запросы."""

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
        config: Optional[ReportingConfig] = None,
    ):
        self.uow = uow
        self.clock = clock or SystemClock()
        self.config = config or ReportingConfig()

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def total_revenue(self) -> Decimal:
        """Сумма total_amount по COMPLETED заказам."""
        return sum(
            (o.total_amount for o in self.uow.orders.list() if o.order_status == OrderStatus.COMPLETED),
            ZERO_MONEY,
        )

    def total_outstanding_amount(self) -> Decimal:
        """Сумма положительных остатков к оплате."""
        return sum((o.remaining_amount for o in self.orders_with_outstanding_payments()), ZERO_MONEY)

    def orders_with_outstanding_payments(self) -> list[Order]:
        return sorted(
            (o for o in self.uow.orders.list() if o.remaining_amount > 0),
            key=lambda o: o.order_number,
        )

    def upcoming_orders(self) -> list[Order]:
        """Заказы с event_date >= сегодня, по возрастанию даты."""
        today = self.clock.today()
        return sorted(
            (o for o in self.uow.orders.list() if o.event_date >= today),
            key=lambda o: (o.event_date, o.order_number),
        )

    def todays_orders(self) -> list[Order]:
        today = self.clock.today()
        return sorted(
            (o for o in self.uow.orders.list() if o.event_date == today),
            key=lambda o: o.order_number,
        )

    def orders_between(self, start: date, end: date) -> list[Order]:
        return sorted(
            (o for o in self.uow.orders.list() if start <= o.event_date <= end),
            key=lambda o: (o.event_date, o.order_number),
        )

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def low_stock_items(self) -> list[Inventory]:
        """Активные позиции с current_stock <= minimum_stock, по категории и имени."""
        return sorted(
            (i for i in self.uow.inventory.list() if i.active and i.is_low_stock()),
            key=lambda i: (i.category.value if i.category else "", i.item_name),
        )

    def out_of_stock_items(self) -> list[Inventory]:
        return sorted(
            (i for i in self.uow.inventory.list() if i.active and i.is_out_of_stock()),
            key=lambda i: i.item_code,
        )

    def total_inventory_value(self, category: Optional[ItemCategory] = None) -> Decimal:
        """Стоимость активного склада (опционально — по категории)."""
        return sum(
            (
                i.total_value
                for i in self.uow.inventory.list()
                if i.active and (category is None or i.category == category)
            ),
            ZERO_MONEY,
        )

    def most_valuable_items(self) -> list[Inventory]:
        return sorted(
            (i for i in self.uow.inventory.list() if i.active),
            key=lambda i: (-i.total_value, i.item_code),
        )

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def _tasks(self) -> Iterable[Task]:
        """Задачи заказов и общие задачи без заказа."""
        for order in self.uow.orders.list():
            yield from order.tasks
        yield from self.uow.tasks.list()

    def overdue_tasks(self) -> list[Task]:
        today = self.clock.today()
        return [t for t in self._tasks() if t.is_overdue(today)]

    def tasks_due_today(self) -> list[Task]:
        today = self.clock.today()
        return [t for t in self._tasks() if t.is_due_today(today)]

    def tasks_due_within(self, days: Optional[int] = None) -> list[Task]:
        """Незавершённые задачи со сроком в [сегодня, сегодня + days]."""
        days = self.config.due_soon_days if days is None else days
        today = self.clock.today()
        end = today + timedelta(days=days)
        return [
            t
            for t in self._tasks()
            if t.due_date is not None
            and today <= t.due_date <= end
            and t.status not in (TaskStatus.DONE, TaskStatus.DELETED)
        ]

    def pending_tasks(self) -> list[Task]:
        return [t for t in self._tasks() if t.is_pending()]

    def high_priority_tasks(self) -> list[Task]:
        return [t for t in self.pending_tasks() if t.priority == TaskPriority.HIGH]

    def unassigned_tasks(self) -> list[Task]:
        return [t for t in self.pending_tasks() if t.assigned_to is None]

    def count_pending_tasks(self, employee_code: str) -> int:
        return sum(1 for t in self.pending_tasks() if t.assigned_to == employee_code)

    def count_completed_tasks(self, employee_code: str) -> int:
        return sum(
            1 for t in self._tasks() if t.assigned_to == employee_code and t.status == TaskStatus.DONE
        )

    # -------------------------------------------------------------------------
    # Employees
    # -------------------------------------------------------------------------

    def top_employees(self, limit: Optional[int] = None) -> list[Employee]:
        """Сотрудники по убыванию total_orders_served."""
        limit = self.config.top_employees_limit if limit is None else limit
        ranked = sorted(
            self.uow.employees.list(),
            key=lambda e: (-e.total_orders_served, e.employee_code),
        )
        return ranked[:limit]
