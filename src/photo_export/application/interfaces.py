from typing import BinaryIO, ContextManager, Protocol
from photo_export.domain.models import Product
from photo_export.domain.value_objects import Path
from .dto import ArchiveFile



class ProductGateway(Protocol):
    async def list_by_company(self, company_id: str) -> list[Product]:
        pass


class BlobReader(Protocol):
    size: int | None

    async def readinto(self, buffer: bytearray) -> int:
        pass

    async def close(self) -> None:
        pass


class BlobSession(Protocol):
    async def open(self, key: Path) -> BlobReader:
        pass

    async def close(self) -> None:
        pass


class BlobSource(Protocol):
    async def new_session(self) -> BlobSession:
        pass


class ArchiveWriter(Protocol):
    def open_entry(self, name: Path, size: int | None = None) -> ContextManager[BinaryIO]:
        pass

    def finalize(self) -> ArchiveFile:
        pass

    def discard(self) -> None:
        pass


class ArchiveGateway(Protocol):
    def create(self) -> ArchiveWriter:
        pass
