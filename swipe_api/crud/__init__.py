# swipe_api/crud/__init__.py
from .store import AnswerStore, compute_deltas
from .sql_store import SqlAnswerStore
from .memory_store import InMemoryAnswerStore

__all__ = ["AnswerStore", "compute_deltas", "SqlAnswerStore", "InMemoryAnswerStore"]
