from .protocol import TaskRepository

__all__ = ["TaskRepository"]
