"""Filesystem archive for fetched tournament pages.

Every fetched page can be saved gzip-compressed, one file per fetch, so a
silent change in the site's markup can be diagnosed after the fact::

    base_dir/
      roster/
        2026-10-19T101500123456Z.html.gz
      schedule/
        2026-10-19T101502654321Z.html.gz

The archive is never read back to answer a sync: each sync fetches anew.
"""

import gzip
from datetime import datetime, timezone
from pathlib import Path


class HtmlArchive:
    """Gzipped HTML snapshots, grouped by page type.

    Usage::

        archive = HtmlArchive("data/raw")
        path = archive.save(html, page_type="roster")
        html = archive.load(path)
    """

    PAGE_TYPES = ("roster", "schedule")

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def save(self, html: str, page_type: str) -> Path:
        """Write a timestamped snapshot and return its path.

        Raises:
            ValueError: If page_type is not one of PAGE_TYPES.
        """
        page_dir = self._page_dir(page_type)
        page_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H%M%S%fZ")
        file_path = page_dir / f"{stamp}.html.gz"
        n = 0
        while file_path.exists():
            # Same clock tick; "_" sorts after "." so order is kept
            n += 1
            file_path = page_dir / f"{stamp}_{n}.html.gz"
        file_path.write_bytes(gzip.compress(html.encode("utf-8")))
        return file_path

    def load(self, file_path: str | Path) -> str:
        """Return the decompressed HTML of a snapshot."""
        return gzip.decompress(Path(file_path).read_bytes()).decode("utf-8")

    def list_snapshots(self, page_type: str) -> list[Path]:
        """Return snapshots of a page type, oldest first."""
        page_dir = self._page_dir(page_type)
        if not page_dir.exists():
            return []
        return sorted(page_dir.glob("*.html.gz"))

    def latest(self, page_type: str) -> Path | None:
        snapshots = self.list_snapshots(page_type)
        return snapshots[-1] if snapshots else None

    def _page_dir(self, page_type: str) -> Path:
        if page_type not in self.PAGE_TYPES:
            raise ValueError(
                f"Unknown page_type {page_type!r}. "
                f"Valid types: {list(self.PAGE_TYPES)}"
            )
        return self.base_dir / page_type
