"""
In-memory реализация persistence boundary.

Используется в тестах и при встраивании ядра без БД.

Атомарность UnitOfWork обеспечивается журналом savepoint'ов: при первом
обращении к агрегату внутри транзакции запоминается его снапшот. При откате
состояние восстанавливается в тот же экземпляр, поэтому ссылки, выданные
вызывающему коду, остаются актуальными. Агрегаты, которые транзакция
не трогала, не копируются.
"""

import logging
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from src.core.domain.employee import Employee
from src.core.domain.inventory import Inventory
from src.core.domain.order import Order
from src.core.domain.task import Task
from src.core.errors import DuplicateIdentity, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# identity → (живой экземпляр или None, если агрегата не было; снапшот)
Savepoint = dict[str, tuple[Optional[BaseModel], Optional[BaseModel]]]


def restore_in_place(live: BaseModel, snapshot: BaseModel) -> None:
    """Перенос состояния снапшота в живой экземпляр (включая frozen-поля)."""
    live.__dict__.update(snapshot.__dict__)
    object.__setattr__(live, "__pydantic_fields_set__", set(snapshot.model_fields_set))


class InMemoryRepository(Generic[T]):
    """Хранилище агрегатов в dict с ключом-идентификатором."""

    def __init__(self, entity: str, key: Callable[[T], str]):
        self._entity = entity
        self._key = key
        self._items: dict[str, T] = {}
        self._savepoints: list[Savepoint] = []

    # -------------------------------------------------------------------------
    # Журнал изменений
    # -------------------------------------------------------------------------

    def _track(self, identity: str) -> None:
        if not self._savepoints or identity in self._savepoints[-1]:
            return
        live = self._items.get(identity)
        snapshot = None if live is None else live.model_copy(deep=True)
        self._savepoints[-1][identity] = (live, snapshot)

    def begin(self) -> None:
        self._savepoints.append({})

    def commit(self) -> None:
        """Фиксация savepoint'а; во внешнем savepoint сохраняется более ранний снапшот."""
        if not self._savepoints:
            return
        committed = self._savepoints.pop()
        if self._savepoints:
            outer = self._savepoints[-1]
            for identity, entry in committed.items():
                outer.setdefault(identity, entry)

    def rollback(self) -> None:
        if not self._savepoints:
            return
        for identity, (live, snapshot) in self._savepoints.pop().items():
            if live is None:
                self._items.pop(identity, None)
            else:
                restore_in_place(live, snapshot)
                self._items[identity] = live

    # -------------------------------------------------------------------------
    # Доступ к агрегатам
    # -------------------------------------------------------------------------

    def get(self, identity: str) -> T:
        item = self.find(identity)
        if item is None:
            raise NotFound(self._entity, identity)
        return item

    def find(self, identity: str) -> T | None:
        self._track(identity)
        return self._items.get(identity)

    def add(self, item: T) -> None:
        identity = self._key(item)
        if identity in self._items:
            raise DuplicateIdentity(self._entity, identity)
        self._track(identity)
        self._items[identity] = item

    def remove(self, identity: str) -> T:
        item = self.get(identity)
        del self._items[identity]
        return item

    def exists(self, identity: str) -> bool:
        return identity in self._items

    def list(self) -> list[T]:
        for identity in self._items:
            self._track(identity)
        return list(self._items.values())


class InMemoryOrderRepository(InMemoryRepository[Order]):
    def __init__(self):
        super().__init__("Order", lambda o: o.order_number)


class InMemoryEmployeeRepository(InMemoryRepository[Employee]):
    def __init__(self):
        super().__init__("Employee", lambda e: e.employee_code)


class InMemoryInventoryRepository(InMemoryRepository[Inventory]):
    def __init__(self):
        super().__init__("Inventory", lambda i: i.item_code)


class InMemoryTaskRepository(InMemoryRepository[Task]):
    def __init__(self):
        super().__init__("Task", lambda t: t.task_id)


class InMemoryUnitOfWork:
    """
    Единица работы поверх in-memory хранилищ.

    - __enter__: новый savepoint во всех хранилищах
    - нормальный выход: commit
    - исключение: rollback к savepoint, исключение пробрасывается дальше

    Вложенные `with uow:` работают как savepoint'ы: откат внутреннего блока
    не затрагивает изменения внешнего, сделанные до него.
    """

    def __init__(self):
        self.orders = InMemoryOrderRepository()
        self.employees = InMemoryEmployeeRepository()
        self.inventory = InMemoryInventoryRepository()
        self.tasks = InMemoryTaskRepository()
        self._depth = 0

    def _repositories(self) -> tuple[InMemoryRepository, ...]:
        return (self.orders, self.employees, self.inventory, self.tasks)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def __enter__(self) -> "InMemoryUnitOfWork":
        for repository in self._repositories():
            repository.begin()
        self._depth += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            logger.warning("Unit of work rolled back: %s", exc)
            self.rollback()

    def commit(self) -> None:
        if not self._depth:
            return
        for repository in self._repositories():
            repository.commit()
        self._depth -= 1

    def rollback(self) -> None:
        if not self._depth:
            return
        for repository in self._repositories():
            repository.rollback()
        self._depth -= 1
