"""User authentication backend: registration, login, bearer sessions and profiles."""

__version__ = "0.1.0"
