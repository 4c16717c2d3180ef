"""Module to define the CursorStore interface and its implementations."""

import asyncio
import os
from pathlib import Path
from typing import Protocol

from .errors import CursorStoreError


class CursorStore(Protocol):
    """
    CursorStore is an interface describing where the relay keeps its offset between
    iterations, and optionally between process restarts.
    """

    async def load(self) -> int | None:
        """Return the saved offset, or None if nothing has been saved yet."""
        ...

    async def save(self, offset: int) -> None:
        """
        Save the offset.

        :param offset: the identifier of the next update to request
        """
        ...


class MemoryCursorStore(CursorStore):
    """Keep the offset for the lifetime of the process only."""

    def __init__(self) -> None:
        self._offset: int | None = None

    async def load(self) -> int | None:
        return self._offset

    async def save(self, offset: int) -> None:
        self._offset = offset


class FileCursorStore(CursorStore):
    """Persist the offset as decimal text in a file, replaced atomically on every save."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def load(self) -> int | None:
        return await asyncio.to_thread(self._read)

    async def save(self, offset: int) -> None:
        await asyncio.to_thread(self._write, offset)

    def _read(self) -> int | None:
        try:
            text = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as error:
            msg = f"cannot read cursor file {self.path}: {error}"
            raise CursorStoreError(msg) from error
        if not text:
            return None
        try:
            return int(text)
        except ValueError as error:
            msg = f"cursor file {self.path} does not contain an integer"
            raise CursorStoreError(msg) from error

    def _write(self, offset: int) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(f"{offset}\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as error:
            msg = f"cannot write cursor file {self.path}: {error}"
            raise CursorStoreError(msg) from error
