"""Тесты Reporting.

Coverage:
- Выручка по COMPLETED заказам, задолженность
- Ближайшие и сегодняшние заказы
- Low stock / out of stock / стоимость склада
- Сроки задач (DELETED и DONE исключены), счётчики по сотрудникам
- Рейтинг сотрудников
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.booking.assignment_book import AssignmentBook
from src.booking.catalog import Catalog
from src.booking.order_service import OrderService
from src.booking.reporting import Reporting
from src.core.config import ReportingConfig
from src.core.domain.inventory import Inventory, ItemCategory
from src.core.domain.order import OrderStatus
from src.core.domain.task import TaskPriority, TaskStatus


@pytest.fixture
def env(uow, clock, cook, waiter, plates):
    today = clock.today()
    catalog = Catalog(uow, clock)
    catalog.register_employee(cook)
    catalog.register_employee(waiter)
    catalog.register_item(plates)
    catalog.register_item(
        Inventory(
            item_code="INV002",
            item_name="Water can",
            category=ItemCategory.WATER_CANS,
            current_stock=0,
            minimum_stock=5,
            unit_cost="30.00",
        )
    )
    catalog.register_item(
        Inventory(
            item_code="INV003",
            item_name="Onions",
            category=ItemCategory.VEGETABLES,
            current_stock=1,
            minimum_stock=3,
            unit_cost="2.00",
        )
    )

    orders = OrderService(uow, clock=clock)
    orders.create_order("ORD-001", today - timedelta(days=2), total_amount="1000.00", advance_amount="1000.00")
    orders.create_order("ORD-002", today, total_amount="2000.00", advance_amount="500.00")
    orders.create_order("ORD-003", today + timedelta(days=5), total_amount="800.00")
    orders.change_status("ORD-001", OrderStatus.COMPLETED)

    book = AssignmentBook(uow, clock=clock)
    return Reporting(uow, clock), book, orders


class TestOrderReports:
    def test_revenue_counts_completed_only(self, env):
        reporting, _, orders = env
        assert reporting.total_revenue() == Decimal("1000.00")

        orders.change_status("ORD-002", OrderStatus.COMPLETED)
        assert reporting.total_revenue() == Decimal("3000.00")

    def test_outstanding(self, env):
        reporting, _, _ = env
        assert [o.order_number for o in reporting.orders_with_outstanding_payments()] == ["ORD-002", "ORD-003"]
        assert reporting.total_outstanding_amount() == Decimal("2300.00")

    def test_upcoming_and_today(self, env, clock):
        reporting, _, _ = env
        assert [o.order_number for o in reporting.upcoming_orders()] == ["ORD-002", "ORD-003"]
        assert [o.order_number for o in reporting.todays_orders()] == ["ORD-002"]

        today = clock.today()
        window = reporting.orders_between(today - timedelta(days=3), today)
        assert [o.order_number for o in window] == ["ORD-001", "ORD-002"]


class TestInventoryReports:
    def test_low_stock_sorted_by_category_then_name(self, env):
        reporting, _, _ = env
        assert [i.item_code for i in reporting.low_stock_items()] == ["INV003", "INV002"]

    def test_inactive_items_excluded(self, env, uow, clock):
        reporting, _, _ = env
        Catalog(uow, clock).set_item_active("INV003", False)
        assert [i.item_code for i in reporting.low_stock_items()] == ["INV002"]
        assert reporting.total_inventory_value() == Decimal("50.00")

    def test_out_of_stock(self, env):
        reporting, _, _ = env
        assert [i.item_code for i in reporting.out_of_stock_items()] == ["INV002"]

    def test_inventory_value(self, env):
        reporting, book, _ = env
        assert reporting.total_inventory_value() == Decimal("52.00")
        assert reporting.total_inventory_value(ItemCategory.UTENSILS) == Decimal("50.00")

        book.add_inventory_usage("ORD-002", "INV001", 4)
        assert reporting.total_inventory_value(ItemCategory.UTENSILS) == Decimal("30.00")
        assert reporting.most_valuable_items()[0].item_code == "INV001"


class TestTaskReports:
    @pytest.fixture
    def tasks(self, env, clock):
        reporting, book, _ = env
        today = clock.today()
        overdue = book.add_task("ORD-002", "Confirm menu", assigned_to="EMP001", due_date=today - timedelta(days=1))
        due_today = book.add_task("ORD-002", "Load van", due_date=today, priority=TaskPriority.HIGH)
        soon = book.add_task("ORD-003", "Order vegetables", assigned_to="EMP001", due_date=today + timedelta(days=2))
        done = book.add_task("ORD-003", "Book hall", assigned_to="EMP001", due_date=today - timedelta(days=3))
        deleted = book.add_task("ORD-003", "Old task", due_date=today - timedelta(days=3))
        book.transition_task("ORD-003", done.task_id, TaskStatus.DONE)
        book.transition_task("ORD-003", deleted.task_id, TaskStatus.DELETED)
        return reporting, overdue, due_today, soon

    def test_overdue_and_due_today(self, tasks):
        reporting, overdue, due_today, _ = tasks
        assert [t.task_id for t in reporting.overdue_tasks()] == [overdue.task_id]
        assert [t.task_id for t in reporting.tasks_due_today()] == [due_today.task_id]

    def test_due_within(self, tasks):
        reporting, _, due_today, soon = tasks
        assert {t.task_id for t in reporting.tasks_due_within()} == {due_today.task_id, soon.task_id}
        assert [t.task_id for t in reporting.tasks_due_within(0)] == [due_today.task_id]

    def test_pending_excludes_done_and_deleted(self, tasks):
        reporting, overdue, due_today, soon = tasks
        assert {t.task_id for t in reporting.pending_tasks()} == {overdue.task_id, due_today.task_id, soon.task_id}
        assert [t.task_id for t in reporting.unassigned_tasks()] == [due_today.task_id]
        assert [t.task_id for t in reporting.high_priority_tasks()] == [due_today.task_id]

    def test_counts_per_employee(self, tasks):
        reporting, _, _, _ = tasks
        assert reporting.count_pending_tasks("EMP001") == 2
        assert reporting.count_completed_tasks("EMP001") == 1
        assert reporting.count_pending_tasks("EMP002") == 0


class TestEmployeeReports:
    def test_top_employees(self, env, uow, clock):
        _, book, _ = env
        book.add_employee_assignment("ORD-002", "EMP002")
        book.finalize_employee_assignment("ORD-002", "EMP002")

        reporting = Reporting(uow, clock, ReportingConfig(top_employees_limit=1))
        assert [e.employee_code for e in reporting.top_employees()] == ["EMP002"]
        assert [e.employee_code for e in reporting.top_employees(limit=5)] == ["EMP002", "EMP001"]
