from .base import StorageAdapter
from .local_adapter import LocalStorageAdapter
from .remote_adapter import RemoteStorageAdapter

__all__ = ["StorageAdapter", "LocalStorageAdapter", "RemoteStorageAdapter"]
