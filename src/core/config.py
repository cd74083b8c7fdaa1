"""
Конфигурация ядра.

Политики, которые в исходной системе были неявными, вынесены в явные флаги.
"""

from dataclasses import dataclass, field

from src.core.domain.order import OrderStatus


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация денежного и складского учёта.

    - legacy_total_amount_status: воспроизвести старое поведение, при котором
      изменение total_amount НЕ пересчитывает payment_status
      (пересчёт только при изменении advance_amount)
    - couple_usage_with_stock: списывать остаток на складе атомарно
      с добавлением InventoryUsage
    """
    legacy_total_amount_status: bool = False
    couple_usage_with_stock: bool = True


@dataclass(frozen=True)
class AvailabilityConfig:
    """Конфигурация AvailabilityIndex.

    blocking_statuses — статусы заказа, которые занимают сотрудника на дату.
    COMPLETED и CANCELLED доступность не блокируют.
    """
    blocking_statuses: frozenset[OrderStatus] = field(
        default_factory=lambda: frozenset({OrderStatus.PENDING, OrderStatus.IN_PROGRESS})
    )


@dataclass(frozen=True)
class ReportingConfig:
    """Конфигурация отчётных запросов."""
    due_soon_days: int = 3
    top_employees_limit: int = 10
