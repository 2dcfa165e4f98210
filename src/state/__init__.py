from .runtime import RuntimeDeps
from .settings import AppSettings
from .connection import ConnectionState

__all__ = ["AppSettings", "ConnectionState", "RuntimeDeps"]
