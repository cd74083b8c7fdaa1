"""AvailabilityIndex — свободные сотрудники на дату.

Read-only запрос над зафиксированными назначениями:

    available(D, T) = {активные сотрудники типа T} − {сотрудники, назначенные
                       на заказ с event_date == D и блокирующим статусом}

Блокирующие статусы по умолчанию: PENDING, IN_PROGRESS.
COMPLETED и CANCELLED доступность не блокируют.
"""

from datetime import date
from typing import Optional

from src.core.config import AvailabilityConfig
from src.core.domain.employee import Employee, EmployeeType
from src.core.domain.order import Order
from src.persistence.repositories import EmployeeRepository, OrderRepository


class AvailabilityIndex:
    """Индекс доступности сотрудников. Побочных эффектов нет."""

    def __init__(
        self,
        orders: OrderRepository,
        employees: EmployeeRepository,
        config: Optional[AvailabilityConfig] = None,
    ):
        self.orders = orders
        self.employees = employees
        self.config = config or AvailabilityConfig()

    def find_blocking_orders(self, event_date: date, employee_code: Optional[str] = None) -> list[Order]:
        """Заказы на дату с блокирующим статусом (опционально — только с данным сотрудником)."""
        blocking = [
            order
            for order in self.orders.list()
            if order.event_date == event_date
            and order.order_status in self.config.blocking_statuses
        ]
        if employee_code is not None:
            blocking = [o for o in blocking if o.find_employee_assignment(employee_code) is not None]
        return sorted(blocking, key=lambda o: o.order_number)

    def committed_employee_codes(self, event_date: date) -> set[str]:
        """Коды сотрудников, занятых на дату."""
        committed: set[str] = set()
        for order in self.find_blocking_orders(event_date):
            committed |= order.assigned_employee_codes()
        return committed

    def find_available_employees(
        self,
        event_date: date,
        employee_type: Optional[EmployeeType] = None,
    ) -> list[Employee]:
        """Активные сотрудники типа employee_type (или всех типов), не занятые на event_date.

        Returns:
            Список сотрудников, отсортированный по employee_code
        """
        committed = self.committed_employee_codes(event_date)
        available = [
            employee
            for employee in self.employees.list()
            if employee.active
            and (employee_type is None or employee.employee_type == employee_type)
            and employee.employee_code not in committed
        ]
        return sorted(available, key=lambda e: e.employee_code)

    def is_employee_available(self, employee_code: str, event_date: date) -> bool:
        """Raises NotFound если сотрудника нет."""
        employee = self.employees.get(employee_code)
        return employee.active and employee_code not in self.committed_employee_codes(event_date)
