import logging

from photo_export.domain.models import SkipReason, SkipRecord

logger = logging.getLogger(__name__)


class SkipLedger:
    def __init__(self, company_id: str):
        self.company_id = company_id
        self._records: list[SkipRecord] = []

    def add(self, entry_name: str, reason: SkipReason, detail: str = "") -> SkipRecord:
        record = SkipRecord(entry_name=entry_name, reason=reason, detail=detail)
        self._records.append(record)
        logger.warning(
            "company=%s entry=%s skipped: %s %s", self.company_id, entry_name, reason.value, detail
        )
        return record

    def records(self) -> tuple[SkipRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)
