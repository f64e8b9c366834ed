from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from .value_objects import Path
from .exceptions import DomainError


@dataclass
class Product:
    id: str
    company: str
    photos: list[str] = field(default_factory=list)
    created: datetime | None = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not self.id:
            raise DomainError("Product must have id")

    @property
    def has_photos(self) -> bool:
        return bool(self.photos)


@dataclass(frozen=True)
class PhotoReference:
    entry_name: Path
    blob_key: Path
    product_id: str

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.entry_name.is_directory:
            raise DomainError("Archive entry must be a file")

        if self.blob_key.is_directory:
            raise DomainError("Blob key must point to a file")


class SkipReason(Enum):
    OPEN_FAILED = "open-failed"
    COPY_FAILED = "copy-failed"
    EMPTY_KEY = "empty-key"
    INVALID_KEY = "invalid-key"


@dataclass(frozen=True)
class SkipRecord:
    entry_name: str
    reason: SkipReason
    detail: str = ""
