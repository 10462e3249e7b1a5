import logging
from typing import Any, List, Optional

from task_recurrence.domain.rule import normalize_rule
from task_recurrence.domain.task import Task
from task_recurrence.expander import ExpansionOptions
from task_recurrence.preview import DEFAULT_PREVIEW_LIMIT, RecurrencePreview, build_preview
from task_recurrence.storages.protocol import TaskRepository

logger = logging.getLogger(__name__)


class TaskManager:
    """
    Task CRUD on top of an injected repository, plus occurrence previews.

    Recurrence rules are normalized before anything is written, so an InvalidRule
    surfaces to the caller and nothing is stored.
    """

    def __init__(self, storage: TaskRepository, options: Optional[ExpansionOptions] = None,
                 preview_limit: int = DEFAULT_PREVIEW_LIMIT):
        self.storage: TaskRepository = storage
        self.options: ExpansionOptions = options or ExpansionOptions()
        self.preview_limit: int = preview_limit

    def _normalized(self, task: Task) -> Task:
        return task.model_copy(update={"recurrence": normalize_rule(task.recurrence)})

    async def create_task(self, title: str, recurrence: Any = None, **fields: Any) -> Task:
        """
        Create and store a task.

        Raises:
            InvalidRule: If ``recurrence`` cannot be normalized.
        """
        rule = normalize_rule(recurrence)
        task = Task(title=title, recurrence=rule, **fields)
        await self.storage.create_task(task)
        logger.info(f"Created task {task.id} '{task.title}'")
        return task

    async def add_task(self, task: Task) -> str:
        return await self.storage.create_task(self._normalized(task))

    async def get_task(self, task_id: str) -> Optional[Task]:
        return await self.storage.get_task(task_id)

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[Task]:
        return await self.storage.list_tasks(limit, offset)

    async def update_task(self, task_id: str, **changes: Any) -> Optional[Task]:
        """
        Apply field changes to a stored task.

        Returns:
            Optional[Task]: The updated task, or None if no task has this ID.

        Raises:
            InvalidRule: If ``changes`` carries a recurrence that cannot be normalized.
        """
        if "recurrence" in changes:
            changes["recurrence"] = normalize_rule(changes["recurrence"])
        task = await self.get_task(task_id)
        if task is None:
            return None
        updated = Task.model_validate({**task.model_dump(), **changes, "id": task.id})
        updated.touch()
        if not await self.storage.update_task(updated):
            return None
        return updated

    async def delete_task(self, task_id: str) -> bool:
        return await self.storage.delete_task(task_id)

    async def toggle_task(self, task_id: str) -> Optional[Task]:
        return await self.storage.toggle_task(task_id)

    def preview_rule(self, recurrence: Any, limit: Optional[int] = None) -> RecurrencePreview:
        return build_preview(recurrence, self.preview_limit if limit is None else limit, self.options)

    async def preview_task(self, task_id: str, limit: Optional[int] = None) -> Optional[RecurrencePreview]:
        task = await self.get_task(task_id)
        if task is None:
            return None
        return self.preview_rule(task.recurrence, limit)
