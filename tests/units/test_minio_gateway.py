import io

import aiohttp
import pytest
from botocore.exceptions import ClientError

from photo_export.application.assembler import ArchiveAssembler
from photo_export.application.exceptions import BlobNotFoundError, BlobReadError, StorageSessionError
from photo_export.application.ledger import SkipLedger
from photo_export.config import MinioConfig
from photo_export.domain.models import PhotoReference, SkipReason
from photo_export.domain.value_objects import Path
from photo_export.infrastructure.minio_gateway import MinioBlobSource
from photo_export.infrastructure.zip_gateway import ZipGateway

from fakes import CountingBufferPool, read_zip


class FakeBody:
    def __init__(self, content: bytes, fail_after: int | None = None):
        self._stream = io.BytesIO(content)
        self._fail_after = fail_after
        self.closed = False

    async def read(self, amt: int | None = None) -> bytes:
        if self._fail_after is not None and self._stream.tell() >= self._fail_after:
            raise aiohttp.ClientPayloadError("Response payload is not completed")
        return self._stream.read(amt)

    def close(self) -> None:
        self.closed = True


class FakeS3Client:
    def __init__(self, bucket: str, objects: dict[str, bytes], denied: set[str] | None = None,
                 truncated: dict[str, int] | None = None):
        self.bucket = bucket
        self.objects = objects
        self.denied = denied or set()
        self.truncated = truncated or {}
        self.bodies: list[FakeBody] = []
        self.exited = False

    async def head_bucket(self, Bucket: str):
        if Bucket != self.bucket:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        return {}

    async def get_object(self, Bucket: str, Key: str):
        if Key in self.denied:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "GetObject")
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "No such key"}}, "GetObject")
        body = FakeBody(self.objects[Key], fail_after=self.truncated.get(Key))
        self.bodies.append(body)
        return {"Body": body, "ContentLength": len(self.objects[Key])}


class FakeClientContext:
    def __init__(self, client: FakeS3Client):
        self._client = client

    async def __aenter__(self) -> FakeS3Client:
        return self._client

    async def __aexit__(self, *args) -> None:
        self._client.exited = True


class FakeAioSession:
    def __init__(self, client: FakeS3Client):
        self.s3 = client

    def client(self, service_name: str, endpoint_url: str) -> FakeClientContext:
        return FakeClientContext(self.s3)


@pytest.fixture
def minio_config() -> MinioConfig:
    return MinioConfig(MINIO_HOST="localhost", MINIO_PORT=9000, MINIO_BUCKET="photos",
                       MINIO_LOGIN="minio", MINIO_PASSWORD="minio123")


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client(bucket="photos", objects={"products/p1/a.jpg": b"0123456789"},
                        denied={"products/p1/secret.jpg"})


@pytest.fixture
def blob_source(s3_client: FakeS3Client, minio_config: MinioConfig) -> MinioBlobSource:
    return MinioBlobSource(session=FakeAioSession(s3_client), config=minio_config)


class TestMinioBlobSource:
    def test_endpoint(self, minio_config: MinioConfig):
        assert minio_config.endpoint == "http://localhost:9000"

    @pytest.mark.asyncio
    async def test_streams_object(self, blob_source: MinioBlobSource):
        session = await blob_source.new_session()
        reader = await session.open(key=Path("products/p1/a.jpg"))
        buffer = bytearray(4)
        content = b""

        while True:
            count = await reader.readinto(buffer)
            if not count:
                break
            content += bytes(buffer[:count])
        await reader.close()
        await session.close()

        assert content == b"0123456789"
        assert reader.size == 10

    @pytest.mark.asyncio
    async def test_missing_key(self, blob_source: MinioBlobSource):
        session = await blob_source.new_session()

        with pytest.raises(BlobNotFoundError):
            await session.open(key=Path("products/p1/missing.jpg"))
        await session.close()

    @pytest.mark.asyncio
    async def test_access_denied(self, blob_source: MinioBlobSource):
        session = await blob_source.new_session()

        with pytest.raises(BlobReadError):
            await session.open(key=Path("products/p1/secret.jpg"))
        await session.close()

    @pytest.mark.asyncio
    async def test_missing_bucket(self, minio_config: MinioConfig):
        client = FakeS3Client(bucket="other", objects={})
        blob_source = MinioBlobSource(session=FakeAioSession(client), config=minio_config)

        with pytest.raises(StorageSessionError):
            await blob_source.new_session()

        assert client.exited

    @pytest.mark.asyncio
    async def test_session_close_releases_readers_and_client(self, blob_source: MinioBlobSource,
                                                             s3_client: FakeS3Client):
        session = await blob_source.new_session()
        reader = await session.open(key=Path("products/p1/a.jpg"))

        await session.close()
        await reader.close()

        assert s3_client.bodies[0].closed
        assert s3_client.exited

    @pytest.mark.asyncio
    async def test_payload_error_is_read_error(self, minio_config: MinioConfig):
        client = FakeS3Client(bucket="photos", objects={"products/p1/a.jpg": b"0123456789"},
                              truncated={"products/p1/a.jpg": 4})
        session = await MinioBlobSource(session=FakeAioSession(client), config=minio_config).new_session()
        reader = await session.open(key=Path("products/p1/a.jpg"))
        buffer = bytearray(4)

        assert await reader.readinto(buffer) == 4
        with pytest.raises(BlobReadError):
            await reader.readinto(buffer)
        await session.close()

    @pytest.mark.asyncio
    async def test_truncated_body_is_skipped_by_assembler(self, minio_config: MinioConfig,
                                                          buffer_pool: CountingBufferPool, zip_gateway: ZipGateway):
        client = FakeS3Client(bucket="photos",
                              objects={"products/p1/a.jpg": b"0123456789", "products/p2/b.jpg": b"healthy"},
                              truncated={"products/p1/a.jpg": 4})
        assembler = ArchiveAssembler(blob_source=MinioBlobSource(session=FakeAioSession(client), config=minio_config),
                                     archive_gateway=zip_gateway, buffer_pool=buffer_pool)
        references = [
            PhotoReference(entry_name=Path("p1/a.jpg"), blob_key=Path("products/p1/a.jpg"), product_id="p1"),
            PhotoReference(entry_name=Path("p2/b.jpg"), blob_key=Path("products/p2/b.jpg"), product_id="p2"),
        ]

        result = await assembler.assemble(company_id="c1", references=references, ledger=SkipLedger(company_id="c1"))

        assert result.entries_written == 1
        assert [(skip.entry_name, skip.reason) for skip in result.skips] == [("p1/a.jpg", SkipReason.COPY_FAILED)]
        assert read_zip(result.archive.read())["p2/b.jpg"] == b"healthy"
        assert all(body.closed for body in client.bodies)
        assert buffer_pool.outstanding == 0
        assert client.exited
