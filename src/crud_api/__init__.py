"""Users CRUD API.

A FastAPI service exposing users (persisted through SQLModel) and placeholder
product endpoints, guarded by a pre-shared API key.
"""

__version__ = "0.1.0"
