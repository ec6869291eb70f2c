from .base import PersistenceBackend
from .file import JsonFileBackend
from .memory import MemoryBackend
from .sql import SqlBackend

__all__ = ["PersistenceBackend", "JsonFileBackend", "MemoryBackend", "SqlBackend"]
