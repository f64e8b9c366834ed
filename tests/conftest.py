import pytest

from photo_export.config import ExportConfig
from photo_export.infrastructure.zip_gateway import ZipGateway

from fakes import CountingBufferPool


@pytest.fixture
def buffer_pool() -> CountingBufferPool:
    return CountingBufferPool(buffer_size=4)


@pytest.fixture
def zip_gateway() -> ZipGateway:
    return ZipGateway(config=ExportConfig())
