"""
# Database Package

The persistence layer of the Blog Backend, built on **Motor** (async MongoDB driver).

- **`manager`**: `DatabaseManager`, owning the client, indexes, health checks and
  transactions.

Unlike a module-level singleton, the manager is constructed by the application
factory from the process `Settings` and shared by every store through the service
container.
"""

from blog_backend.database.manager import DatabaseManager

__all__ = ["DatabaseManager"]
