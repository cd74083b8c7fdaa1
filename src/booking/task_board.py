"""TaskBoard — задачи без заказа.

Общие задачи (закупки, уборка склада, обслуживание транспорта) живут
в собственном хранилище UnitOfWork.tasks. Задачи заказа ведёт AssignmentBook.
Переходы статусов идут через тот же TaskStateMachine.
"""

import logging
from datetime import date
from typing import Optional

from src.booking.task_state_machine import TaskStateMachine, TaskTransitionResult
from src.core.clock import Clock, SystemClock
from src.core.domain.task import Task, TaskPriority, TaskStatus
from src.core.errors import ValidationError
from src.persistence.repositories import UnitOfWork

logger = logging.getLogger(__name__)


class TaskBoard:
    """Доска общих задач."""

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()
        self.task_state_machine = TaskStateMachine(self.clock)

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        assigned_to: Optional[str] = None,
        due_date: Optional[date] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        """Raises NotFound если исполнитель не найден."""
        with self.uow:
            if assigned_to is not None:
                self.uow.employees.get(assigned_to)
            now = self.clock.now()
            task = Task(
                title=title,
                description=description,
                assigned_to=assigned_to,
                due_date=due_date,
                priority=priority,
                created_at=now,
                updated_at=now,
            )
            self.uow.tasks.add(task)
        logger.info("Task %s created: %r, assigned_to=%s", task.task_id, title, assigned_to)
        return task

    def get_task(self, task_id: str) -> Task:
        """Raises NotFound."""
        return self.uow.tasks.get(task_id)

    def assign_task(self, task_id: str, employee_code: Optional[str]) -> Task:
        """Назначение (или снятие при None) исполнителя.

        Raises:
            NotFound: задача или сотрудник не найдены
            ValidationError: задача удалена
        """
        with self.uow:
            task = self.uow.tasks.get(task_id)
            if not task.is_active():
                raise ValidationError(f"Task {task_id} is deleted")
            if employee_code is not None:
                self.uow.employees.get(employee_code)
            task.assigned_to = employee_code
            task.updated_at = self.clock.now()
        return task

    def transition_task(self, task_id: str, status: TaskStatus) -> TaskTransitionResult:
        with self.uow:
            task = self.uow.tasks.get(task_id)
            result = self.task_state_machine.transition(task, status)
        if result.transition_occurred:
            logger.info("Task %s: %s", task_id, result.details)
        return result

    def remove_task(self, task_id: str) -> Task:
        """Физическое удаление; для мягкого удаления — transition_task(DELETED)."""
        with self.uow:
            task = self.uow.tasks.remove(task_id)
        logger.info("Task %s removed", task_id)
        return task
