import logging

from .assembler import ArchiveAssembler
from .buffer_pool import BufferPool
from .dto import ExportResult
from .exceptions import ArchiveFinalizeError, ExportError, ProductQueryError, StorageSessionError
from .interfaces import ArchiveGateway, BlobSource, ProductGateway
from .ledger import SkipLedger
from .locator import ProductPhotoLocator
from photo_export.config import StorageConfig

logger = logging.getLogger(__name__)


class ExportCompanyPhotosInteractor:
    def __init__(self, product_gateway: ProductGateway, blob_source: BlobSource, archive_gateway: ArchiveGateway,
                 buffer_pool: BufferPool, storage_config: StorageConfig):
        self.locator = ProductPhotoLocator(product_gateway=product_gateway, collection=storage_config.collection)
        self.assembler = ArchiveAssembler(blob_source=blob_source, archive_gateway=archive_gateway,
                                          buffer_pool=buffer_pool)

    async def __call__(self, company_id: str) -> ExportResult:
        ledger = SkipLedger(company_id=company_id)

        try:
            references = await self.locator.locate(company_id=company_id, ledger=ledger)
        except ProductQueryError as e:
            logger.error("company=%s product query failed: %s", company_id, e.message)
            raise ExportError(company_id=company_id, reason=e.message) from e

        try:
            result = await self.assembler.assemble(company_id=company_id, references=references, ledger=ledger)
        except (StorageSessionError, ArchiveFinalizeError) as e:
            logger.error("company=%s export failed: %s", company_id, e.message)
            raise ExportError(company_id=company_id, reason=e.message) from e

        logger.info("company=%s exported %d photos, %d skipped, %d bytes",
                    company_id, result.entries_written, result.skipped, result.archive.size)
        return result
