"""Task State Machine — управление статусами задач.

Переходы:
- TODO → IN_PROGRESS → DONE (основной путь)
- TODO → DONE (отметка выполненной сразу)
- IN_PROGRESS → TODO, DONE → IN_PROGRESS / TODO (возврат в работу)
- любое состояние → DELETED; DELETED терминальное

Вход в DONE выставляет completed_at (если ещё не выставлен),
выход из DONE сбрасывает его.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Final, Optional

from src.core.clock import Clock, SystemClock
from src.core.domain.task import Task, TaskStatus
from src.core.errors import ValidationError


TASK_TRANSITIONS: Final[dict[TaskStatus, frozenset[TaskStatus]]] = {
    TaskStatus.TODO: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.DONE, TaskStatus.DELETED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.TODO, TaskStatus.DONE, TaskStatus.DELETED}),
    TaskStatus.DONE: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.TODO, TaskStatus.DELETED}),
    TaskStatus.DELETED: frozenset(),
}


@dataclass(frozen=True)
class TaskTransitionResult:
    """Результат перехода статуса задачи."""

    task_id: str
    new_status: TaskStatus
    previous_status: TaskStatus
    completed_at: Optional[datetime]

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    details: str


class TaskStateMachine:
    """State machine задач.

    Stateless относительно задач: всё состояние хранится в Task.
    Время берётся из Clock, чтобы completed_at был детерминирован.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    @staticmethod
    def can_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
        return to_status in TASK_TRANSITIONS[from_status]

    def transition(self, task: Task, target_status: TaskStatus) -> TaskTransitionResult:
        """Перевод задачи в target_status.

        Args:
            task: задача (мутируется на месте)
            target_status: целевой статус

        Returns:
            TaskTransitionResult

        Raises:
            ValidationError: если переход недопустим (например, из DELETED)
        """
        target_status = TaskStatus(target_status)
        previous = task.status

        if previous == target_status:
            return TaskTransitionResult(
                task_id=task.task_id,
                new_status=previous,
                previous_status=previous,
                completed_at=task.completed_at,
                transition_occurred=False,
                transition_reason="no_transition",
                details=f"Task already in {previous.value}",
            )

        if not self.can_transition(previous, target_status):
            raise ValidationError(
                f"Task {task.task_id}: transition {previous.value} → {target_status.value} is not allowed"
            )

        task.apply_status(target_status, self.clock.now())

        return TaskTransitionResult(
            task_id=task.task_id,
            new_status=target_status,
            previous_status=previous,
            completed_at=task.completed_at,
            transition_occurred=True,
            transition_reason=f"{previous.value}_to_{target_status.value}",
            details=f"Task transition: {previous.value} → {target_status.value}",
        )

    def start(self, task: Task) -> TaskTransitionResult:
        return self.transition(task, TaskStatus.IN_PROGRESS)

    def complete(self, task: Task) -> TaskTransitionResult:
        return self.transition(task, TaskStatus.DONE)

    def reopen(self, task: Task) -> TaskTransitionResult:
        return self.transition(task, TaskStatus.TODO)

    def delete(self, task: Task) -> TaskTransitionResult:
        return self.transition(task, TaskStatus.DELETED)
