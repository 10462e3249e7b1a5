from typing import List, Optional, Protocol
from task_recurrence.domain.task import Task

class TaskRepository(Protocol):
    async def create_task(self, task: Task) -> str:
        """Create a new task and return its ID."""
        ...

    async def get_task(self, task_id: str) -> Optional[Task]:
        """Retrieve a task by its ID."""
        ...

    async def update_task(self, task: Task) -> bool:
        """Update an existing task. Return True if successful, False otherwise."""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task by its ID. Return True if successful, False otherwise."""
        ...

    async def toggle_task(self, task_id: str) -> Optional[Task]:
        """Flip the completion state of a task and return the updated task, or None if it does not exist."""
        ...

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[Task]:
        """List tasks with pagination, newest first."""
        ...
