"""User record stores."""

from auth_service.repositories.base import UserStore
from auth_service.repositories.memory import InMemoryUserStore
from auth_service.repositories.sql import SqlUserStore

__all__ = [
    "UserStore",
    "InMemoryUserStore",
    "SqlUserStore",
]
