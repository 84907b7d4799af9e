"""Local-disk document store."""

from __future__ import annotations

import asyncio
import logging
import os
import pathlib
import tempfile
import time
from collections import defaultdict
from collections.abc import Callable

from app.errors import StoreUnavailable
from app.store.base import Snapshot

logger = logging.getLogger(__name__)


class LocalFileStore:
    """One pretty-printed JSON file per document under ``root``.

    Files carry no revision tag, so writes are unconditional (last writer
    wins). Writes to the same document are serialized in-process, and a
    write that misses its deadline is abandoned before the file is replaced.
    """

    def __init__(
        self,
        root: pathlib.Path | str,
        *,
        timeout: float = 15.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root = pathlib.Path(root)
        self.timeout = timeout
        self.clock = clock
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def path_for(self, name: str) -> pathlib.Path:
        return self.root / f"{name}.json"

    async def read(self, name: str) -> Snapshot:
        content = await self._run(self._read_bytes, self.path_for(name))
        if content is None:
            logger.info("Document %s not found at %s", name, self.path_for(name))
        return Snapshot(content=content, revision=None)

    async def write(self, name: str, content: bytes, expected_revision: str | None) -> str | None:
        loop = asyncio.get_running_loop()
        async with self._locks[name]:
            deadline = self.clock() + self.timeout
            worker = loop.run_in_executor(None, self._replace, self.path_for(name), content, deadline)
            try:
                await asyncio.shield(worker)
            except asyncio.CancelledError:
                # The thread cannot be stopped; keep the lock until it is done.
                await asyncio.gather(worker, return_exceptions=True)
                raise
            except TimeoutError as exc:
                raise StoreUnavailable(f"Local store timed out after {self.timeout}s writing {name}") from exc
            except OSError as exc:
                raise StoreUnavailable(str(exc)) from exc
        logger.info("Wrote %s (%d bytes)", name, len(content))
        return None

    async def close(self) -> None:
        return None

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, func, *args), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise StoreUnavailable(f"Local store timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise StoreUnavailable(str(exc)) from exc

    @staticmethod
    def _read_bytes(path: pathlib.Path) -> bytes | None:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def _replace(self, path: pathlib.Path, content: bytes, deadline: float) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
            if self.clock() > deadline:
                raise TimeoutError(f"Deadline passed before replacing {path.name}")
            os.replace(tmp_name, path)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise
