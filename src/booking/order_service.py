"""OrderService — жизненный цикл агрегата Order.

Создание заказа с проверкой уникальности order_number, денежные мутации
(через MoneyLedger) и переходы статуса. Каждая операция выполняется
в отдельной единице работы.
"""

import logging
from datetime import date, time
from typing import Optional

from src.core.clock import Clock, SystemClock
from src.core.config import LedgerConfig
from src.core.domain.money import MoneyInput
from src.core.domain.order import Order, OrderStatus, OrderType
from src.core.errors import DuplicateIdentity, ValidationError
from src.persistence.repositories import UnitOfWork

logger = logging.getLogger(__name__)


class OrderService:
    """Операции над заказом как над границей консистентности."""

    def __init__(
        self,
        uow: UnitOfWork,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.config = config or LedgerConfig()
        self.clock = clock or SystemClock()

    def create_order(
        self,
        order_number: str,
        event_date: date,
        order_type: OrderType = OrderType.FULL_CATERING,
        total_amount: MoneyInput = None,
        advance_amount: MoneyInput = None,
        customer_id: Optional[str] = None,
        event_name: Optional[str] = None,
        event_time: Optional[time] = None,
        guest_count: Optional[int] = None,
        venue_address: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Создание заказа.

        Raises:
            DuplicateIdentity: если order_number уже занят (ничего не создаётся)
            pydantic.ValidationError: если поля не проходят ограничения модели
        """
        with self.uow:
            if self.uow.orders.exists(order_number):
                logger.warning("Order number collision: %s", order_number)
                raise DuplicateIdentity("Order", order_number)

            now = self.clock.now()
            order = Order(
                order_number=order_number,
                event_date=event_date,
                order_type=order_type,
                total_amount=total_amount,
                advance_amount=advance_amount,
                customer_id=customer_id,
                event_name=event_name,
                event_time=event_time,
                guest_count=guest_count,
                venue_address=venue_address,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
            self.uow.orders.add(order)

        logger.info(
            "Order %s created for %s: total=%s, payment_status=%s",
            order.order_number, order.event_date, order.total_amount, order.payment_status.value,
        )
        return order

    def get_order(self, order_number: str) -> Order:
        """Raises NotFound."""
        return self.uow.orders.get(order_number)

    def set_total_amount(self, order_number: str, total: MoneyInput) -> Order:
        with self.uow:
            order = self.uow.orders.get(order_number)
            order.set_total_amount(
                total, rederive_status=not self.config.legacy_total_amount_status
            )
            order.touch(self.clock.now())
        logger.info(
            "Order %s total set to %s: remaining=%s, payment_status=%s",
            order_number, order.total_amount, order.remaining_amount, order.payment_status.value,
        )
        return order

    def set_advance_amount(self, order_number: str, advance: MoneyInput) -> Order:
        with self.uow:
            order = self.uow.orders.get(order_number)
            order.set_advance_amount(advance)
            order.touch(self.clock.now())
        logger.info(
            "Order %s advance set to %s: remaining=%s, payment_status=%s",
            order_number, order.advance_amount, order.remaining_amount, order.payment_status.value,
        )
        return order

    def record_payment(self, order_number: str, amount: MoneyInput) -> Order:
        with self.uow:
            order = self.uow.orders.get(order_number)
            order.record_payment(amount)
            order.touch(self.clock.now())
        logger.info(
            "Order %s payment %s recorded: remaining=%s, payment_status=%s",
            order_number, amount, order.remaining_amount, order.payment_status.value,
        )
        return order

    def change_status(self, order_number: str, status: OrderStatus) -> Order:
        """Raises ValidationError при недопустимом переходе."""
        with self.uow:
            order = self.uow.orders.get(order_number)
            previous = order.order_status
            order.set_order_status(status)
            order.touch(self.clock.now())
        logger.info("Order %s status %s → %s", order_number, previous.value, order.order_status.value)
        return order

    def cancel_order(self, order_number: str) -> Order:
        """Отмена вместо физического удаления."""
        return self.change_status(order_number, OrderStatus.CANCELLED)

    def update_details(self, order_number: str, **fields) -> Order:
        """Обновление описательных полей (не денежных и не статусных).

        Raises:
            ValidationError: если передано поле, которое нельзя менять напрямую
        """
        editable = {
            "order_type", "event_name", "event_date", "event_time", "venue_address",
            "guest_count", "menu_details", "special_requirements", "notes", "customer_id",
        }
        unknown = set(fields) - editable
        if unknown:
            raise ValidationError(f"Fields cannot be updated directly: {sorted(unknown)}")

        with self.uow:
            order = self.uow.orders.get(order_number)
            # валидация ограничений полей на копии, агрегат не трогается до успеха
            validated = Order.model_validate({**order.model_dump(), **fields})
            for name in fields:
                setattr(order, name, getattr(validated, name))
            order.touch(self.clock.now())
        return order

