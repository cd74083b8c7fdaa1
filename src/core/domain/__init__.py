"""
Domain models and value objects.

Contains the catering entities: Order, EmployeeAssignment, InventoryUsage,
Task, Employee, Inventory, and the MoneyLedger primitives.
"""

from src.core.domain.assignment import (
    AssignmentPaymentStatus,
    EmployeeAssignment,
    InventoryUsage,
)
from src.core.domain.employee import Employee, EmployeeType
from src.core.domain.inventory import Inventory, ItemCategory, StockMovementResult
from src.core.domain.money import (
    MONEY_PLACES,
    MONEY_QUANT,
    MoneyInput,
    ZERO_MONEY,
    PaymentStatus,
    compute_remaining_amount,
    derive_payment_status,
    multiply_money,
    to_money,
    validate_non_negative_money,
)
from src.core.domain.order import ORDER_STATUS_TRANSITIONS, Order, OrderStatus, OrderType
from src.core.domain.task import PENDING_TASK_STATUSES, Task, TaskPriority, TaskStatus

__all__ = [
    # Money module
    "MONEY_PLACES",
    "MONEY_QUANT",
    "MoneyInput",
    "ZERO_MONEY",
    "PaymentStatus",
    "compute_remaining_amount",
    "derive_payment_status",
    "multiply_money",
    "to_money",
    "validate_non_negative_money",
    # Order aggregate
    "Order",
    "OrderStatus",
    "OrderType",
    "ORDER_STATUS_TRANSITIONS",
    # Assignments
    "AssignmentPaymentStatus",
    "EmployeeAssignment",
    "InventoryUsage",
    # Employee
    "Employee",
    "EmployeeType",
    # Inventory
    "Inventory",
    "ItemCategory",
    "StockMovementResult",
    # Task
    "Task",
    "TaskPriority",
    "TaskStatus",
    "PENDING_TASK_STATUSES",
]
