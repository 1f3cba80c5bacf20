"""
Adapters layer - External integrations (hosted database REST API).
"""

from .mock_task_store import MockTaskStore
from .rest_task_store import RestTaskStore

__all__ = ["MockTaskStore", "RestTaskStore"]
