"""Общие fixtures: фиксированное время и in-memory единица работы."""

from datetime import date, datetime, timezone

import pytest

from src.core.clock import FixedClock
from src.core.domain.employee import Employee, EmployeeType
from src.core.domain.inventory import Inventory, ItemCategory
from src.persistence import InMemoryUnitOfWork


NOW = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
TODAY = date(2024, 6, 10)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def cook():
    return Employee(
        employee_code="EMP001",
        name="Ravi",
        employee_type=EmployeeType.COOK,
        salary_per_order="500.00",
    )


@pytest.fixture
def waiter():
    return Employee(
        employee_code="EMP002",
        name="Anil",
        employee_type=EmployeeType.WAITER,
        salary_per_order="300.00",
    )


@pytest.fixture
def plates():
    return Inventory(
        item_code="INV001",
        item_name="Steel plates",
        category=ItemCategory.UTENSILS,
        current_stock=10,
        minimum_stock=2,
        unit_cost="5.00",
    )
