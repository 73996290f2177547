"""
Photo file storage.

Tasks keep only filenames; the files live under a single directory. The
planner talks to storage through `PhotoStorage` so an app shell can plug in
its own media store.
"""
import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


class PhotoStorage(Protocol):
    async def save(self, uri: str, task_id: str) -> str: ...

    async def delete(self, filename: str) -> None: ...

    def resolve_uri(self, filename: str) -> str: ...


class LocalPhotoStorage:
    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    async def save(self, uri: str, task_id: str) -> str:
        """Copy the picked/captured file in and return its stored filename."""
        filename = f"{task_id}_{int(time.time() * 1000)}.jpg"
        await asyncio.to_thread(self._copy, Path(uri), self.base_dir / filename)
        logger.debug("photo saved %s -> %s", uri, filename)
        return filename

    async def delete(self, filename: str) -> None:
        path = self.base_dir / filename
        await asyncio.to_thread(path.unlink, missing_ok=True)

    def resolve_uri(self, filename: str) -> str:
        return str(self.base_dir / filename)

    def _copy(self, source: Path, dest: Path) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)


async def cleanup_task_photos(storage: PhotoStorage, filenames: Iterable[str]) -> list[str]:
    """Delete every file, returning the filenames whose delete failed."""
    failures: list[str] = []
    for filename in filenames:
        try:
            await storage.delete(filename)
        except Exception as exc:
            logger.warning("cleanup_task_photos: could not delete %s: %s", filename, exc)
            failures.append(filename)
    return failures
