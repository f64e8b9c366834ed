import logging
from contextlib import AsyncExitStack

import aioboto3
import aiohttp
from aiobotocore.client import AioBaseClient
from botocore.exceptions import BotoCoreError, ClientError

from photo_export.application.exceptions import BlobNotFoundError, BlobReadError, StorageSessionError
from photo_export.config import MinioConfig
from photo_export.domain.value_objects import Path

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class MinioBlobReader:
    def __init__(self, key: Path, body, size: int | None = None):
        self._key = key
        self._body = body
        self.size = size
        self.closed = False

    async def readinto(self, buffer: bytearray) -> int:
        try:
            chunk = await self._body.read(len(buffer))
        except (BotoCoreError, ClientError, aiohttp.ClientError, OSError) as e:
            raise BlobReadError(key=str(self._key), reason=str(e)) from e
        buffer[:len(chunk)] = chunk
        return len(chunk)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._body.close()


class MinioBlobSession:
    def __init__(self, client: AioBaseClient, bucket: str, exit_stack: AsyncExitStack):
        self._client = client
        self._bucket = bucket
        self._exit_stack = exit_stack
        self._readers: list[MinioBlobReader] = []

    async def open(self, key: Path) -> MinioBlobReader:
        try:
            resp = await self._client.get_object(Bucket=self._bucket, Key=str(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                raise BlobNotFoundError(key=str(key)) from e
            raise BlobReadError(key=str(key), reason=str(e)) from e
        except BotoCoreError as e:
            raise BlobReadError(key=str(key), reason=str(e)) from e

        reader = MinioBlobReader(key=key, body=resp["Body"], size=resp.get("ContentLength"))
        self._readers = [r for r in self._readers if not r.closed]
        self._readers.append(reader)
        return reader

    async def close(self) -> None:
        readers, self._readers = self._readers, []
        try:
            for reader in readers:
                await reader.close()
        finally:
            await self._exit_stack.aclose()


class MinioBlobSource:
    def __init__(self, session: aioboto3.Session, config: MinioConfig):
        self._session = session
        self._bucket = config.bucket
        self._endpoint = config.endpoint

    async def new_session(self) -> MinioBlobSession:
        exit_stack = AsyncExitStack()
        try:
            client = await exit_stack.enter_async_context(
                self._session.client(service_name="s3", endpoint_url=self._endpoint)
            )
            await client.head_bucket(Bucket=self._bucket)
        except (BotoCoreError, ClientError, OSError) as e:
            logger.error(e)
            await exit_stack.aclose()
            raise StorageSessionError(reason=str(e)) from e
        return MinioBlobSession(client=client, bucket=self._bucket, exit_stack=exit_stack)
