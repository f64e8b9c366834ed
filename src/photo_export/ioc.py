from typing import AsyncIterable

import aioboto3
from dishka import Provider, Scope, from_context, provide
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from photo_export.application.buffer_pool import BufferPool
from photo_export.application.interactors import ExportCompanyPhotosInteractor
from photo_export.application.interfaces import ArchiveGateway, BlobSource, ProductGateway
from photo_export.config import Config, StorageConfig
from photo_export.infrastructure.database.gateways import PgProductGateway
from photo_export.infrastructure.database.session import pg_session_maker
from photo_export.infrastructure.local_gateway import LocalBlobSource
from photo_export.infrastructure.minio_gateway import MinioBlobSource
from photo_export.infrastructure.zip_gateway import ZipGateway


class AppProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_storage_config(self, config: Config) -> StorageConfig:
        return config.storage

    @provide(scope=Scope.APP)
    def get_buffer_pool(self, config: Config) -> BufferPool:
        return BufferPool(buffer_size=config.export.buffer_size, max_retained=config.export.pool_size)

    @provide(scope=Scope.APP)
    def get_blob_source(self, config: Config) -> BlobSource:
        if config.storage.backend == "minio":
            if config.minio is None:
                raise ValueError("MinIO settings are required for the minio storage backend")
            minio_session = aioboto3.Session(
                aws_access_key_id=config.minio.access_key, aws_secret_access_key=config.minio.secret_key
            )
            return MinioBlobSource(session=minio_session, config=config.minio)
        return LocalBlobSource(root=config.storage.local_root)

    @provide(scope=Scope.APP)
    def get_archive_gateway(self, config: Config) -> ArchiveGateway:
        return ZipGateway(config=config.export)

    @provide(scope=Scope.APP)
    def get_session_maker(self, config: Config) -> async_sessionmaker[AsyncSession]:
        return pg_session_maker(pg_config=config.postgres)

    @provide(scope=Scope.REQUEST)
    async def get_session(self, session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterable[AsyncSession]:
        async with session_maker() as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_product_gateway(self, session: AsyncSession) -> ProductGateway:
        return PgProductGateway(db_session=session)

    export_photos = provide(ExportCompanyPhotosInteractor, scope=Scope.REQUEST)
