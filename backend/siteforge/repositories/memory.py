"""In-memory key-value storage and the project repository built on it.

Entries live for the lifetime of the process only. Anything implementing
``KeyValueStore`` can replace the in-memory store without touching callers.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from siteforge.models import BusinessFacts, Project

logger = logging.getLogger(__name__)

# Assigned by the repository, never taken from caller data
_RESERVED_KEYS = {"id", "name", "businessInfo", "business_info", "savedAt", "saved_at"}


class KeyValueStore(Protocol):
    """Minimal storage interface behind the repositories."""

    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> bool: ...

    def values(self) -> list[Any]: ...


class InMemoryKeyValueStore:
    """Dict-backed ``KeyValueStore`` safe to share between threads."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def values(self) -> list[Any]:
        with self._lock:
            return list(self._data.values())


class ProjectRepository:
    """Saved projects keyed by an opaque random id."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def save(
        self,
        name: str,
        business_info: BusinessFacts,
        data: dict[str, Any] | None = None,
    ) -> Project:
        """Store a new project under a fresh id. Never updates an existing entry."""
        project = Project(
            id=uuid4().hex,
            name=name,
            business_info=business_info,
            saved_at=datetime.now(timezone.utc),
            **{key: value for key, value in (data or {}).items() if key not in _RESERVED_KEYS},
        )
        self.store.put(project.id, project)
        logger.info(f"Saved project {project.id}: {name}")
        return project

    async def get(self, project_id: str) -> Project | None:
        """Get a project by ID."""
        return self.store.get(project_id)

    async def list(self) -> list[Project]:
        """All projects, newest first."""
        return sorted(self.store.values(), key=lambda p: p.saved_at, reverse=True)

    async def delete(self, project_id: str) -> bool:
        """Delete a project by ID, reporting whether it existed."""
        existed = self.store.delete(project_id)
        if existed:
            logger.info(f"Deleted project {project_id}")
        return existed
