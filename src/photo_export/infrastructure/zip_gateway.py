import logging
import tempfile
import zipfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from photo_export.application.dto import ArchiveFile
from photo_export.application.exceptions import ArchiveFinalizeError
from photo_export.config import ExportConfig
from photo_export.domain.value_objects import Path

logger = logging.getLogger(__name__)

COMPRESSION = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
}

# fixed so identical inputs give identical archives
ENTRY_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class ZipArchiveWriter:
    def __init__(self, file: BinaryIO, compression: int):
        self._file = file
        self._zip = zipfile.ZipFile(file, "w", compression)
        self._finalized = False

    @contextmanager
    def open_entry(self, name: Path, size: int | None = None) -> Iterator[BinaryIO]:
        info = zipfile.ZipInfo(filename=str(name), date_time=ENTRY_TIMESTAMP)
        if size is not None:
            info.file_size = size
        info.compress_type = self._zip.compression
        info.external_attr = 0o644 << 16
        # zip64 headers must be chosen before the first byte is written
        with self._zip.open(info, "w", force_zip64=size is None) as entry:
            yield entry

    def finalize(self) -> ArchiveFile:
        if self._finalized:
            raise ArchiveFinalizeError("archive already finalized")
        self._finalized = True
        try:
            self._zip.close()
            size = self._file.tell()
            self._file.seek(0)
        except (OSError, ValueError) as e:
            logger.error(e)
            self._file.close()
            raise ArchiveFinalizeError(str(e)) from e
        return ArchiveFile(file=self._file, size=size)

    def discard(self) -> None:
        self._finalized = True
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            logger.debug("archive discarded with error: %s", e)
        finally:
            self._file.close()


class ZipGateway:
    def __init__(self, config: ExportConfig):
        self._compression = COMPRESSION[config.compression]
        self._spool_max_size = config.spool_max_size

    def create(self) -> ZipArchiveWriter:
        spool = tempfile.SpooledTemporaryFile(max_size=self._spool_max_size, mode="w+b")
        return ZipArchiveWriter(file=spool, compression=self._compression)
