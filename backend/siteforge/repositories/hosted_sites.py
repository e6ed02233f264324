"""Filesystem-backed publishing of generated websites.

Each site lives in ``<root>/<site_id>/`` as ``index.html`` plus
``meta.json``. View counting is a read-modify-write of ``meta.json``
serialized per site, so concurrent viewers never lose an update.
"""

import asyncio
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from siteforge.errors import InvalidInputError
from siteforge.models import HostedSite, HostedSiteMeta
from siteforge.validation import is_valid_identifier

logger = logging.getLogger(__name__)

HTML_FILENAME = "index.html"
META_FILENAME = "meta.json"


class HostedSiteRepository:
    """Publishes, serves and lists hosted sites."""

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, site_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(site_id, threading.Lock())

    def site_url(self, site_id: str) -> str:
        return f"{self.base_url}/hosted/{site_id}"

    def _write_meta(self, site_dir: Path, meta: HostedSiteMeta) -> None:
        # Atomic replace
        tmp_path = site_dir / f"{META_FILENAME}.tmp"
        tmp_path.write_text(meta.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        os.replace(tmp_path, site_dir / META_FILENAME)

    def _read_meta(self, site_dir: Path) -> HostedSiteMeta:
        return HostedSiteMeta.model_validate_json(
            (site_dir / META_FILENAME).read_text(encoding="utf-8")
        )

    def _publish_sync(self, html: str, business_name: str) -> HostedSite:
        site_id = uuid4().hex
        site_dir = self.root / site_id
        site_dir.mkdir(parents=True, exist_ok=True)

        (site_dir / HTML_FILENAME).write_text(html, encoding="utf-8")
        now = datetime.now(timezone.utc)
        meta = HostedSiteMeta(
            site_id=site_id,
            business_name=business_name,
            created_at=now,
            last_accessed=now,
            view_count=0,
        )
        self._write_meta(site_dir, meta)

        logger.info(f"Website hosted at {self.site_url(site_id)}")
        return HostedSite(site_id=site_id, url=self.site_url(site_id), metadata=meta)

    async def publish(self, html: str, business_name: str) -> HostedSite:
        """Store ``html`` under a new site id with zeroed view metadata."""
        return await asyncio.to_thread(self._publish_sync, html, business_name)

    def _view_sync(self, site_id: str) -> str | None:
        site_dir = self.root / site_id
        html_path = site_dir / HTML_FILENAME
        if not html_path.is_file():
            return None

        with self._lock_for(site_id):
            try:
                meta = self._read_meta(site_dir)
            except (OSError, ValueError) as e:
                logger.warning(f"Unreadable metadata for hosted site {site_id}: {e}")
            else:
                meta = meta.model_copy(
                    update={
                        "view_count": meta.view_count + 1,
                        "last_accessed": datetime.now(timezone.utc),
                    }
                )
                self._write_meta(site_dir, meta)

        return html_path.read_text(encoding="utf-8")

    async def view(self, site_id: str) -> str | None:
        """Stored document for ``site_id``, counting the view; None if not published.

        Raises:
            InvalidInputError: if ``site_id`` is not alphanumeric
        """
        if not is_valid_identifier(site_id):
            raise InvalidInputError("Invalid site ID format", "siteId")
        return await asyncio.to_thread(self._view_sync, site_id)

    async def get_meta(self, site_id: str) -> HostedSiteMeta | None:
        if not is_valid_identifier(site_id):
            raise InvalidInputError("Invalid site ID format", "siteId")
        try:
            return await asyncio.to_thread(self._read_meta, self.root / site_id)
        except (OSError, ValueError):
            return None

    def _list_sync(self) -> list[HostedSite]:
        if not self.root.is_dir():
            return []

        sites = []
        for site_dir in self.root.iterdir():
            if not site_dir.is_dir():
                continue
            try:
                meta = self._read_meta(site_dir)
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping hosted site {site_dir.name}: {e}")
                continue
            sites.append(HostedSite(site_id=meta.site_id, url=self.site_url(meta.site_id), metadata=meta))

        sites.sort(key=lambda site: site.metadata.created_at, reverse=True)
        return sites

    async def list(self) -> list[HostedSite]:
        """All readable hosted sites, newest first."""
        return await asyncio.to_thread(self._list_sync)
