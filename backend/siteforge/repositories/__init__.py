"""Repository implementations for data access."""

from siteforge.repositories.hosted_sites import HostedSiteRepository
from siteforge.repositories.memory import (
    InMemoryKeyValueStore,
    KeyValueStore,
    ProjectRepository,
)

__all__ = [
    "HostedSiteRepository",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "ProjectRepository",
]
