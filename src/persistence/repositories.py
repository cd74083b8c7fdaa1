"""
Persistence boundary — интерфейсы хранилища

Ядро обращается к хранилищу только через эти протоколы:
- загрузка/сохранение агрегатов по идентификатору
- проверка уникальности идентификаторов (exists)
- атомарная фиксация всех изменений одной единицы работы (UnitOfWork)

Реализация для БД — ответственность внешнего слоя.
"""

from typing import Protocol

from src.core.domain.employee import Employee
from src.core.domain.inventory import Inventory
from src.core.domain.order import Order
from src.core.domain.task import Task


class OrderRepository(Protocol):
    """Хранилище заказов (ключ — order_number)."""

    def get(self, order_number: str) -> Order:
        """Raises NotFound."""
        ...

    def find(self, order_number: str) -> Order | None: ...

    def add(self, order: Order) -> None:
        """Raises DuplicateIdentity."""
        ...

    def exists(self, order_number: str) -> bool: ...

    def list(self) -> list[Order]: ...


class EmployeeRepository(Protocol):
    """Хранилище сотрудников (ключ — employee_code)."""

    def get(self, employee_code: str) -> Employee: ...

    def find(self, employee_code: str) -> Employee | None: ...

    def add(self, employee: Employee) -> None: ...

    def exists(self, employee_code: str) -> bool: ...

    def list(self) -> list[Employee]: ...


class InventoryRepository(Protocol):
    """Хранилище позиций склада (ключ — item_code)."""

    def get(self, item_code: str) -> Inventory: ...

    def find(self, item_code: str) -> Inventory | None: ...

    def add(self, item: Inventory) -> None: ...

    def exists(self, item_code: str) -> bool: ...

    def list(self) -> list[Inventory]: ...


class TaskRepository(Protocol):
    """Хранилище задач без заказа (ключ — task_id).

    Задачи заказа живут внутри агрегата Order.
    """

    def get(self, task_id: str) -> Task: ...

    def find(self, task_id: str) -> Task | None: ...

    def add(self, task: Task) -> None: ...

    def remove(self, task_id: str) -> Task:
        """Raises NotFound."""
        ...

    def exists(self, task_id: str) -> bool: ...

    def list(self) -> list[Task]: ...


class UnitOfWork(Protocol):
    """
    Единица работы: все мутации внутри `with uow:` фиксируются атомарно.

    Исключение внутри блока откатывает все изменения.
    """

    orders: OrderRepository
    employees: EmployeeRepository
    inventory: InventoryRepository
    tasks: TaskRepository

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
