"""Тесты persistence boundary (in-memory).

Coverage:
- Commit / rollback единицы работы
- Вложенные savepoint'ы
- Откат восстанавливает состояние в те же экземпляры
- Уникальность идентификаторов (DuplicateIdentity) и NotFound
- OrderService поверх UnitOfWork
"""

from datetime import date
from decimal import Decimal

import pytest

from src.booking.assignment_book import AssignmentBook
from src.booking.catalog import Catalog
from src.booking.order_service import OrderService
from src.core.config import LedgerConfig
from src.core.domain.money import PaymentStatus
from src.core.domain.order import Order, OrderStatus
from src.core.domain.task import Task
from src.core.errors import DuplicateIdentity, InsufficientStock, NotFound, ValidationError


EVENT = date(2024, 6, 15)


class TestInMemoryUnitOfWork:
    def test_commit_keeps_changes(self, uow):
        with uow:
            uow.orders.add(Order(order_number="ORD-001", event_date=EVENT))
        assert uow.orders.exists("ORD-001")
        assert not uow.in_transaction

    def test_exception_rolls_back(self, uow):
        with pytest.raises(RuntimeError):
            with uow:
                uow.orders.add(Order(order_number="ORD-001", event_date=EVENT))
                raise RuntimeError("boom")
        assert not uow.orders.exists("ORD-001")
        assert not uow.in_transaction

    def test_rollback_restores_mutated_aggregate(self, uow):
        with uow:
            uow.orders.add(Order(order_number="ORD-001", event_date=EVENT, total_amount="100.00"))

        with pytest.raises(ValidationError):
            with uow:
                order = uow.orders.get("ORD-001")
                order.set_advance_amount("40.00")
                order.set_total_amount("-1.00")

        reloaded = uow.orders.get("ORD-001")
        assert reloaded is order
        assert reloaded.advance_amount == Decimal("0.00")
        assert reloaded.payment_status == PaymentStatus.PENDING

    def test_nested_savepoint(self, uow):
        with uow:
            uow.orders.add(Order(order_number="ORD-001", event_date=EVENT))
            with pytest.raises(RuntimeError):
                with uow:
                    uow.orders.add(Order(order_number="ORD-002", event_date=EVENT))
                    raise RuntimeError("inner")
        assert uow.orders.exists("ORD-001")
        assert not uow.orders.exists("ORD-002")

    def test_repository_identity_checks(self, uow):
        uow.orders.add(Order(order_number="ORD-001", event_date=EVENT))
        with pytest.raises(DuplicateIdentity):
            uow.orders.add(Order(order_number="ORD-001", event_date=EVENT))
        with pytest.raises(NotFound):
            uow.orders.get("ORD-404")
        assert uow.orders.find("ORD-404") is None


class TestOrderService:
    @pytest.fixture
    def service(self, uow, clock):
        return OrderService(uow, clock=clock)

    def test_create_and_pay(self, service, clock):
        order = service.create_order("ORD-001", EVENT, total_amount="1000.00")
        assert order.created_at == clock.now()
        assert order.payment_status == PaymentStatus.PENDING

        service.set_advance_amount("ORD-001", "300.00")
        order = service.record_payment("ORD-001", "700.00")
        assert order.remaining_amount == Decimal("0.00")
        assert order.payment_status == PaymentStatus.FULLY_PAID

    def test_duplicate_order_number(self, service, uow):
        service.create_order("ORD-001", EVENT, total_amount="10.00")
        with pytest.raises(DuplicateIdentity):
            service.create_order("ORD-001", EVENT, total_amount="99.00")
        assert uow.orders.get("ORD-001").total_amount == Decimal("10.00")
        assert len(uow.orders.list()) == 1

    def test_unknown_order(self, service):
        with pytest.raises(NotFound):
            service.set_total_amount("ORD-404", "1.00")

    def test_total_change_rederives_status(self, service):
        service.create_order("ORD-001", EVENT, total_amount="100.00", advance_amount="100.00")
        order = service.set_total_amount("ORD-001", "150.00")
        assert order.payment_status == PaymentStatus.ADVANCE_PAID

    def test_legacy_total_change(self, uow, clock):
        service = OrderService(uow, LedgerConfig(legacy_total_amount_status=True), clock)
        service.create_order("ORD-001", EVENT, total_amount="100.00", advance_amount="100.00")
        order = service.set_total_amount("ORD-001", "150.00")
        assert order.remaining_amount == Decimal("50.00")
        assert order.payment_status == PaymentStatus.FULLY_PAID

    def test_cancel_is_terminal(self, service):
        service.create_order("ORD-001", EVENT)
        service.cancel_order("ORD-001")
        with pytest.raises(ValidationError):
            service.change_status("ORD-001", OrderStatus.IN_PROGRESS)
        assert service.get_order("ORD-001").order_status == OrderStatus.CANCELLED

    def test_update_details(self, service):
        service.create_order("ORD-001", EVENT)
        order = service.update_details("ORD-001", guest_count=120, event_name="Wedding")
        assert order.guest_count == 120
        assert order.event_name == "Wedding"

    def test_update_details_rejects_money_fields(self, service):
        service.create_order("ORD-001", EVENT)
        with pytest.raises(ValidationError):
            service.update_details("ORD-001", total_amount="5.00")


class TestCatalog:
    def test_register_defaults_and_duplicates(self, uow, clock, cook, plates):
        catalog = Catalog(uow, clock)
        employee = catalog.register_employee(cook)
        assert employee.hire_date == clock.today()

        catalog.register_item(plates)
        with pytest.raises(DuplicateIdentity):
            catalog.register_item(plates.model_copy())

    def test_receive_stock(self, uow, clock, plates):
        catalog = Catalog(uow, clock)
        catalog.register_item(plates)

        result = catalog.receive_stock("INV001", 5)
        assert result.stock_after == 15
        assert uow.inventory.get("INV001").total_value == Decimal("75.00")

        with pytest.raises(ValidationError):
            catalog.receive_stock("INV001", 0)


class TestRollbackKeepsReferences:
    """Откат восстанавливает состояние в те же экземпляры."""

    def test_unrelated_failure_keeps_order_reference(self, uow, clock, plates):
        service = OrderService(uow, clock=clock)
        catalog = Catalog(uow, clock)
        catalog.register_item(plates)
        order = service.create_order("ORD-001", EVENT, total_amount="1000.00")

        with pytest.raises(ValidationError):
            catalog.adjust_stock("INV001", -999)

        service.set_advance_amount("ORD-001", "300.00")
        assert uow.orders.get("ORD-001") is order
        assert order.remaining_amount == Decimal("700.00")
        assert uow.inventory.get("INV001") is plates

    def test_failed_usage_keeps_item_reference(self, uow, clock, plates):
        Catalog(uow, clock).register_item(plates)
        OrderService(uow, clock=clock).create_order("ORD-001", EVENT)
        book = AssignmentBook(uow, clock=clock)

        with pytest.raises(InsufficientStock):
            book.add_inventory_usage("ORD-001", "INV001", 100)
        book.add_inventory_usage("ORD-001", "INV001", 4)

        assert plates.current_stock == 6
        assert plates.total_value == Decimal("30.00")
        assert uow.inventory.get("INV001") is plates

    def test_mutated_aggregate_restored_in_place(self, uow, clock, cook):
        Catalog(uow, clock).register_employee(cook)

        with pytest.raises(RuntimeError):
            with uow:
                employee = uow.employees.get("EMP001")
                employee.record_served_order("500.00")
                raise RuntimeError("abort")

        assert uow.employees.get("EMP001") is cook
        assert cook.total_orders_served == 0
        assert cook.total_earnings == Decimal("0.00")

    def test_removed_aggregate_comes_back(self, uow):
        task = Task(title="Clean store room")
        with uow:
            uow.tasks.add(task)

        with pytest.raises(RuntimeError):
            with uow:
                uow.tasks.remove(task.task_id)
                raise RuntimeError("abort")

        assert uow.tasks.get(task.task_id) is task

    def test_outer_rollback_undoes_committed_inner_block(self, uow):
        with uow:
            uow.orders.add(Order(order_number="ORD-001", event_date=EVENT, total_amount="100.00"))
        order = uow.orders.get("ORD-001")

        with pytest.raises(RuntimeError):
            with uow:
                with uow:
                    uow.orders.get("ORD-001").set_advance_amount("60.00")
                raise RuntimeError("outer")

        assert uow.orders.get("ORD-001") is order
        assert order.advance_amount == Decimal("0.00")
