"""Key-value stores used to cache access tokens

Store - protocol every cache implements
MemoryStore - process local dict store
FileStore - JSON file store shared between processes
"""

from .base import Store
from .file import FileStore
from .memory import MemoryStore

__all__ = ["FileStore", "MemoryStore", "Store"]
