import asyncio
import logging
import os
from pathlib import Path as FsPath
from typing import BinaryIO

from photo_export.application.exceptions import BlobNotFoundError, BlobReadError, StorageSessionError
from photo_export.domain.value_objects import Path

logger = logging.getLogger(__name__)


class LocalBlobReader:
    def __init__(self, key: Path, file: BinaryIO, size: int | None = None):
        self._key = key
        self._file = file
        self.size = size

    @property
    def closed(self) -> bool:
        return self._file.closed

    async def readinto(self, buffer: bytearray) -> int:
        # the worker thread never touches the caller's buffer, it may outlive a cancelled await
        try:
            chunk = await asyncio.to_thread(self._file.read, len(buffer))
        except OSError as e:
            raise BlobReadError(key=str(self._key), reason=str(e)) from e
        buffer[:len(chunk)] = chunk
        return len(chunk)

    async def close(self) -> None:
        if not self._file.closed:
            # close waits for an in-flight read, keep it off the event loop
            await asyncio.to_thread(self._file.close)


class LocalBlobSession:
    def __init__(self, root: FsPath):
        self._root = root
        self._readers: list[LocalBlobReader] = []

    async def open(self, key: Path) -> LocalBlobReader:
        full_path = self._root.joinpath(*key.parts)
        try:
            file = await asyncio.to_thread(open, full_path, "rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise BlobNotFoundError(key=str(key)) from e
        except OSError as e:
            raise BlobReadError(key=str(key), reason=str(e)) from e

        reader = LocalBlobReader(key=key, file=file, size=self._size(file))
        self._readers = [r for r in self._readers if not r.closed]
        self._readers.append(reader)
        return reader

    async def close(self) -> None:
        readers, self._readers = self._readers, []
        for reader in readers:
            await reader.close()

    @staticmethod
    def _size(file: BinaryIO) -> int | None:
        try:
            return os.fstat(file.fileno()).st_size
        except OSError:
            return None


class LocalBlobSource:
    def __init__(self, root: str | FsPath):
        self._root = FsPath(root)

    async def new_session(self) -> LocalBlobSession:
        if not self._root.is_dir():
            logger.error("storage root %s is not a directory", self._root)
            raise StorageSessionError(reason=f"{self._root} is not a directory")
        return LocalBlobSession(root=self._root)
