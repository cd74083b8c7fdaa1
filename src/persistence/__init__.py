"""Persistence boundary — протоколы хранилища и in-memory реализация."""

from .memory import (
    InMemoryEmployeeRepository,
    InMemoryInventoryRepository,
    InMemoryOrderRepository,
    InMemoryRepository,
    InMemoryTaskRepository,
    InMemoryUnitOfWork,
)
from .repositories import (
    EmployeeRepository,
    InventoryRepository,
    OrderRepository,
    TaskRepository,
    UnitOfWork,
)

__all__ = [
    "EmployeeRepository",
    "InventoryRepository",
    "OrderRepository",
    "TaskRepository",
    "UnitOfWork",
    "InMemoryRepository",
    "InMemoryOrderRepository",
    "InMemoryEmployeeRepository",
    "InMemoryInventoryRepository",
    "InMemoryTaskRepository",
    "InMemoryUnitOfWork",
]
