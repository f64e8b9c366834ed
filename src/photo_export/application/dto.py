from dataclasses import dataclass
from typing import AsyncIterator, BinaryIO

from photo_export.domain.models import SkipRecord

ARCHIVE_CONTENT_TYPE = "application/zip"


def content_disposition(filename: str) -> str:
    return f'attachment; filename="{filename}"'


@dataclass(frozen=True)
class ArchiveFile:
    file: BinaryIO
    size: int

    def read(self) -> bytes:
        self.file.seek(0)
        return self.file.read()

    async def iter_chunks(self, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
        self.file.seek(0)
        try:
            while True:
                chunk = self.file.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.file.close()

    def close(self) -> None:
        self.file.close()


@dataclass(frozen=True)
class ExportResult:
    company_id: str
    archive: ArchiveFile
    entries_written: int
    skips: tuple[SkipRecord, ...] = ()

    @property
    def skipped(self) -> int:
        return len(self.skips)
