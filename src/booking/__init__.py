"""Booking — сервисный слой ядра кейтеринга.

- OrderService: жизненный цикл заказа и денежные мутации
- Catalog: сотрудники и склад
- AssignmentBook: назначения сотрудников, использование склада, задачи
- AvailabilityIndex: свободные сотрудники на дату
- Reporting: read-only отчёты
- TaskBoard: задачи без заказа
- TaskStateMachine: переходы статусов задач
"""

from .assignment_book import AssignmentBook
from .availability import AvailabilityIndex
from .catalog import Catalog
from .order_service import OrderService
from .reporting import Reporting
from .task_board import TaskBoard
from .task_state_machine import TASK_TRANSITIONS, TaskStateMachine, TaskTransitionResult

__all__ = [
    "AssignmentBook",
    "AvailabilityIndex",
    "Catalog",
    "OrderService",
    "Reporting",
    "TaskBoard",
    "TaskStateMachine",
    "TaskTransitionResult",
    "TASK_TRANSITIONS",
]
