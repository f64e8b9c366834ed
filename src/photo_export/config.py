from os import environ
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


class PostgresConfig(BaseModel):
    user: str = Field(validation_alias="POSTGRES_USER")
    password: str = Field(validation_alias="POSTGRES_PASSWORD")
    db: str = Field(validation_alias="POSTGRES_DB")
    host: str = Field(validation_alias="POSTGRES_HOST")
    port: str = Field(validation_alias="POSTGRES_PORT")

    @property
    def pg_async_url(self):
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


class MinioConfig(BaseModel):
    host: str = Field(validation_alias="MINIO_HOST")
    port: int = Field(validation_alias="MINIO_PORT")
    bucket: str = Field(validation_alias="MINIO_BUCKET")
    access_key: str = Field(validation_alias="MINIO_LOGIN")
    secret_key: str = Field(validation_alias="MINIO_PASSWORD")

    @property
    def endpoint(self):
        return f"http://{self.host}:{self.port}"


class StorageConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    backend: Literal["local", "minio"] = Field(default="local", validation_alias="STORAGE_BACKEND")
    local_root: str = Field(default="pb_data/storage", validation_alias="STORAGE_LOCAL_ROOT")
    collection: str = Field(default="products", validation_alias="STORAGE_COLLECTION")


class ExportConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    buffer_size: int = Field(default=32 * 1024, gt=0, validation_alias="EXPORT_BUFFER_SIZE")
    pool_size: int = Field(default=16, ge=0, validation_alias="EXPORT_POOL_SIZE")
    spool_max_size: int = Field(default=8 * 1024 * 1024, ge=0, validation_alias="EXPORT_SPOOL_MAX_SIZE")
    compression: Literal["stored", "deflated"] = Field(default="stored", validation_alias="EXPORT_COMPRESSION")
    filename: str = Field(default="export.zip", validation_alias="EXPORT_FILENAME")


class Config(BaseModel):
    postgres: PostgresConfig
    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    minio: MinioConfig | None = None

    @classmethod
    def from_env(cls, env_path=".env"):
        load_dotenv(env_path, override=True)
        storage = StorageConfig(**environ)
        minio = MinioConfig(**environ) if storage.backend == "minio" else None
        return cls(postgres=PostgresConfig(**environ), storage=storage, export=ExportConfig(**environ), minio=minio)
