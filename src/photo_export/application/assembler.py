import logging
from typing import BinaryIO, Sequence

from photo_export.domain.models import PhotoReference, SkipReason
from photo_export.domain.value_objects import Path

from .buffer_pool import BufferPool
from .dto import ExportResult
from .exceptions import BlobNotFoundError, BlobReadError
from .interfaces import ArchiveGateway, ArchiveWriter, BlobReader, BlobSession, BlobSource
from .ledger import SkipLedger

logger = logging.getLogger(__name__)


class ArchiveAssembler:
    def __init__(self, blob_source: BlobSource, archive_gateway: ArchiveGateway, buffer_pool: BufferPool):
        self.blob_source = blob_source
        self.archive_gateway = archive_gateway
        self.buffer_pool = buffer_pool

    async def assemble(self, company_id: str, references: Sequence[PhotoReference],
                       ledger: SkipLedger) -> ExportResult:
        session = await self.blob_source.new_session()
        try:
            writer = self.archive_gateway.create()
            try:
                entries_written = 0
                used_names: set[Path] = set()
                for reference in references:
                    if await self._add_entry(session, writer, reference, used_names, ledger):
                        entries_written += 1
            except BaseException:
                writer.discard()
                raise

            archive = writer.finalize()
        finally:
            await session.close()

        return ExportResult(
            company_id=company_id,
            archive=archive,
            entries_written=entries_written,
            skips=ledger.records(),
        )

    async def _add_entry(self, session: BlobSession, writer: ArchiveWriter, reference: PhotoReference,
                         used_names: set[Path], ledger: SkipLedger) -> bool:
        try:
            reader = await session.open(key=reference.blob_key)
        except (BlobNotFoundError, BlobReadError) as e:
            ledger.add(entry_name=str(reference.entry_name), reason=SkipReason.OPEN_FAILED, detail=e.message)
            return False

        entry_name = self._unique_name(reference.entry_name, used_names)
        try:
            with writer.open_entry(entry_name, size=reader.size) as entry:
                copied = await self._copy(reader, entry)
        except (BlobReadError, OSError, ValueError) as e:
            ledger.add(entry_name=str(entry_name), reason=SkipReason.COPY_FAILED, detail=str(e))
            return False
        finally:
            await reader.close()

        logger.debug("entry %s written, %d bytes", entry_name, copied)
        return True

    async def _copy(self, reader: BlobReader, entry: BinaryIO) -> int:
        copied = 0
        with self.buffer_pool.borrow() as buffer, memoryview(buffer) as view:
            while True:
                count = await reader.readinto(buffer)
                if not count:
                    break
                entry.write(view[:count])
                copied += count
        return copied

    @staticmethod
    def _unique_name(name: Path, used_names: set[Path]) -> Path:
        candidate = name
        index = 0
        while candidate in used_names:
            index += 1
            candidate = name.with_suffix_index(index)
        used_names.add(candidate)
        return candidate
