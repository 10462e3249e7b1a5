import asyncio
import logging

from task_recurrence.config import Settings
from task_recurrence.manager import TaskManager
from task_recurrence.storages.sqlalchemy import InMemoryStorage

logging.basicConfig(level=logging.INFO)

settings = Settings()
storage = InMemoryStorage()
manager = TaskManager(storage, options=settings.expansion_options(), preview_limit=settings.preview_limit)

async def main():
    await storage.create_tables()

    task = await manager.create_task(
        "Team sync",
        description="Monday and Wednesday check-in",
        recurrence={
            "isRecurring": True,
            "frequency": "WEEKLY",
            "interval": 2,
            "weekDays": [3, 1],
            "startDate": "2024-01-01",
        },
    )
    print(task.readable_string)

    preview = await manager.preview_task(task.id)
    print(f"Next {len(preview.occurrences)} occurrences:")
    for day in preview.occurrences:
        print(f"  {day.isoformat()}")

    await manager.toggle_task(task.id)
    for stored in await manager.list_tasks():
        print(f"{stored.title}: completed={stored.completed}")

    await storage.dispose()

if __name__ == "__main__":
    asyncio.run(main())
