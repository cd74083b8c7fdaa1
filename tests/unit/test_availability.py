"""Тесты AvailabilityIndex.

Coverage:
- IN_PROGRESS заказ на дату D блокирует сотрудника, COMPLETED — нет
- CANCELLED не блокирует, другие даты не блокируют
- Фильтр по типу, неактивные сотрудники исключены
"""

from datetime import date, timedelta

import pytest

from src.booking.assignment_book import AssignmentBook
from src.booking.availability import AvailabilityIndex
from src.booking.catalog import Catalog
from src.booking.order_service import OrderService
from src.core.config import AvailabilityConfig
from src.core.domain.employee import Employee, EmployeeType
from src.core.domain.order import OrderStatus
from src.core.errors import NotFound


EVENT = date(2024, 6, 15)


@pytest.fixture
def env(uow, clock, cook, waiter):
    catalog = Catalog(uow, clock)
    catalog.register_employee(cook)
    catalog.register_employee(waiter)
    catalog.register_employee(
        Employee(employee_code="EMP003", name="Suresh", employee_type=EmployeeType.COOK)
    )
    orders = OrderService(uow, clock=clock)
    orders.create_order("ORD-001", EVENT)
    book = AssignmentBook(uow, clock=clock)
    book.add_employee_assignment("ORD-001", "EMP001")
    index = AvailabilityIndex(uow.orders, uow.employees)
    return orders, index


def codes(employees):
    return [e.employee_code for e in employees]


class TestAvailabilityIndex:
    def test_in_progress_blocks_then_completed_releases(self, env):
        orders, index = env
        orders.change_status("ORD-001", OrderStatus.IN_PROGRESS)
        assert codes(index.find_available_employees(EVENT, EmployeeType.COOK)) == ["EMP003"]

        orders.change_status("ORD-001", OrderStatus.COMPLETED)
        assert codes(index.find_available_employees(EVENT, EmployeeType.COOK)) == ["EMP001", "EMP003"]

    def test_pending_blocks(self, env):
        _, index = env
        assert not index.is_employee_available("EMP001", EVENT)
        assert index.committed_employee_codes(EVENT) == {"EMP001"}

    def test_cancelled_does_not_block(self, env):
        orders, index = env
        orders.cancel_order("ORD-001")
        assert index.is_employee_available("EMP001", EVENT)
        assert index.find_blocking_orders(EVENT) == []

    def test_other_dates_unaffected(self, env):
        _, index = env
        assert "EMP001" in codes(index.find_available_employees(EVENT + timedelta(days=1)))

    def test_all_types_when_unspecified(self, env):
        _, index = env
        assert codes(index.find_available_employees(EVENT)) == ["EMP002", "EMP003"]

    def test_inactive_excluded(self, env, uow, clock):
        _, index = env
        Catalog(uow, clock).set_employee_active("EMP003", False)
        assert index.find_available_employees(EVENT, EmployeeType.COOK) == []

    def test_blocking_orders_for_employee(self, env):
        _, index = env
        assert [o.order_number for o in index.find_blocking_orders(EVENT, "EMP001")] == ["ORD-001"]
        assert index.find_blocking_orders(EVENT, "EMP002") == []

    def test_custom_blocking_statuses(self, env, uow):
        index = AvailabilityIndex(
            uow.orders, uow.employees, AvailabilityConfig(blocking_statuses=frozenset({OrderStatus.IN_PROGRESS}))
        )
        assert index.is_employee_available("EMP001", EVENT)

    def test_unknown_employee(self, env):
        _, index = env
        with pytest.raises(NotFound):
            index.is_employee_available("EMP404", EVENT)
