"""
Task — задача по заказу

Задача опционально принадлежит заказу (order_number) и/или назначена
сотруднику (assigned_to). completed_at выставляется ровно при входе в DONE
и сбрасывается при выходе из него.

Допустимые переходы проверяет TaskStateMachine (src.booking.task_state_machine).
"""

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class TaskStatus(str, Enum):
    """Статус задачи"""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    DELETED = "DELETED"


class TaskPriority(str, Enum):
    """Приоритет задачи"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Статусы, которые считаются "в работе"
PENDING_TASK_STATUSES = frozenset({TaskStatus.TODO, TaskStatus.IN_PROGRESS})


# =============================================================================
# TASK MODEL
# =============================================================================


class Task(BaseModel):
    """Задача, связанная с заказом и/или сотрудником."""

    task_id: str = Field(default_factory=lambda: uuid4().hex, frozen=True)
    order_number: str | None = Field(None, description="Номер заказа (если задача по заказу)")
    title: str = Field(..., min_length=1, max_length=200, description="Заголовок")
    description: str | None = Field(None)
    status: TaskStatus = Field(TaskStatus.TODO)
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    assigned_to: str | None = Field(None, description="Код сотрудника-исполнителя")
    due_date: date | None = Field(None)
    completed_at: datetime | None = Field(None)
    created_at: datetime | None = Field(None)
    updated_at: datetime | None = Field(None)

    def apply_status(self, status: TaskStatus, now: datetime) -> None:
        """
        Установка статуса с поддержкой completed_at.

        Проверка допустимости перехода здесь НЕ выполняется.

        Args:
            status: Новый статус
            now: Текущее время (из Clock)
        """
        self.status = status
        if status == TaskStatus.DONE:
            if self.completed_at is None:
                self.completed_at = now
        else:
            self.completed_at = None
        self.updated_at = now

    def is_active(self) -> bool:
        return self.status != TaskStatus.DELETED

    def is_pending(self) -> bool:
        return self.status in PENDING_TASK_STATUSES

    def is_overdue(self, today: date) -> bool:
        """
        Срок прошёл, а задача не выполнена.

        DELETED задачи не считаются просроченными.
        """
        return (
            self.due_date is not None
            and self.due_date < today
            and self.status not in (TaskStatus.DONE, TaskStatus.DELETED)
        )

    def is_due_today(self, today: date) -> bool:
        """Срок сегодня, а задача не выполнена (DELETED исключены)."""
        return (
            self.due_date is not None
            and self.due_date == today
            and self.status not in (TaskStatus.DONE, TaskStatus.DELETED)
        )
