from dataclasses import dataclass
from .exceptions import DomainError

FORBIDDEN_SEQUENCES = ('\0', '\n', '\r', '\t', "//", "\\")


@dataclass(frozen=True)
class Path:
    value: str

    def __post_init__(self):
        if self.value.startswith('/'):
            raise DomainError("Path must not start with /")
        for sequence in FORBIDDEN_SEQUENCES:
            if sequence in self.value:
                raise DomainError(f"Path {self.value!r} cannot contain {sequence!r}")
        if ".." in self.parts:
            raise DomainError(f"Path {self.value!r} cannot contain a .. segment")

    @property
    def is_root(self) -> bool:
        return not self.value

    @property
    def is_directory(self) -> bool:
        return self.is_root or self.value.endswith('/')

    @property
    def parts(self) -> list[str]:
        return [part for part in self.value.split('/') if part]

    @property
    def name(self) -> str:
        parts = self.parts
        return parts[-1] if parts else ''

    @property
    def parent(self) -> 'Path':
        parts = self.parts
        if len(parts) <= 1:
            return Path('')
        return Path('/'.join(parts[:-1]) + '/')

    def join(self, other: 'Path | str') -> 'Path':
        if not self.is_directory:
            raise DomainError("Cannot join to file.")
        if isinstance(other, str):
            other = Path(other)
        return Path(self.value + other.value)

    def with_suffix_index(self, index: int) -> 'Path':
        if self.is_directory:
            raise DomainError("Cannot index a directory.")
        stem, dot, extension = self.name.rpartition('.')
        if not stem:
            return self.parent.join(f"{self.name}-{index}")
        return self.parent.join(f"{stem}-{index}{dot}{extension}")

    def __str__(self) -> str:
        return self.value
