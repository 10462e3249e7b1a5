import logging
from typing import List, Optional
from sqlalchemy import Column, String, DateTime, Date, Boolean, JSON
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.future import select
from sqlalchemy.pool import StaticPool
from task_recurrence.domain.rule import normalize_rule
from task_recurrence.domain.task import Task
from task_recurrence.storages.protocol import TaskRepository

logger = logging.getLogger(__name__)

Base = declarative_base()

class TaskModel(Base):
    __tablename__ = 'tasks'

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String)
    completed = Column(Boolean, default=False, nullable=False)
    due_date = Column(Date)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurrence = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

class SqlAlchemyStorage(TaskRepository):
    def __init__(self, db_url: str, **engine_kwargs):
        self.engine = create_async_engine(db_url, **engine_kwargs)
        self.async_session = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()

    async def create_task(self, task: Task) -> str:
        async with self.async_session() as session:
            db_task = TaskModel(id=task.id, created_at=task.created_at)
            self._apply(db_task, task)
            session.add(db_task)
            await session.commit()
            logger.debug(f"Created task {task.id}")
            return task.id

    async def get_task(self, task_id: str) -> Optional[Task]:
        async with self.async_session() as session:
            result = await session.execute(select(TaskModel).filter_by(id=task_id))
            db_task = result.scalar_one_or_none()
            if db_task:
                return self._db_to_task(db_task)
            return None

    async def update_task(self, task: Task) -> bool:
        async with self.async_session() as session:
            result = await session.execute(select(TaskModel).filter_by(id=task.id))
            db_task = result.scalar_one_or_none()
            if db_task:
                self._apply(db_task, task)
                await session.commit()
                logger.debug(f"Updated task {task.id}")
                return True
            return False

    async def delete_task(self, task_id: str) -> bool:
        async with self.async_session() as session:
            result = await session.execute(select(TaskModel).filter_by(id=task_id))
            db_task = result.scalar_one_or_none()
            if db_task:
                await session.delete(db_task)
                await session.commit()
                logger.debug(f"Deleted task {task_id}")
                return True
            return False

    async def toggle_task(self, task_id: str) -> Optional[Task]:
        async with self.async_session() as session:
            result = await session.execute(select(TaskModel).filter_by(id=task_id))
            db_task = result.scalar_one_or_none()
            if not db_task:
                return None
            task = self._db_to_task(db_task)
            task.toggle_completion()
            db_task.completed = task.completed
            db_task.updated_at = task.updated_at
            await session.commit()
            logger.debug(f"Toggled task {task_id} to completed={task.completed}")
            return task

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[Task]:
        async with self.async_session() as session:
            result = await session.execute(select(TaskModel).order_by(TaskModel.created_at.desc()).offset(offset).limit(limit))
            return [self._db_to_task(db_task) for db_task in result.scalars()]

    def _apply(self, db_task: TaskModel, task: Task) -> None:
        db_task.title = task.title
        db_task.description = task.description
        db_task.completed = task.completed
        db_task.due_date = task.due_date
        db_task.is_recurring = task.is_recurring
        db_task.recurrence = task.recurrence.model_dump(mode="json", by_alias=True)
        db_task.updated_at = task.updated_at

    def _db_to_task(self, db_task: TaskModel) -> Task:
        return Task(
            id=db_task.id,
            title=db_task.title,
            description=db_task.description,
            completed=db_task.completed,
            due_date=db_task.due_date,
            recurrence=normalize_rule(db_task.recurrence),
            created_at=db_task.created_at,
            updated_at=db_task.updated_at
        )


class InMemoryStorage(SqlAlchemyStorage):
    def __init__(self):
        super().__init__("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
