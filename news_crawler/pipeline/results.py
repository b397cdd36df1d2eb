from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class SourceStatus(Enum):
    """Outcome of crawling one source"""
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ItemMetrics:
    """Per-item counts within one source"""
    ok: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0

    def classify(self) -> SourceStatus:
        if self.failed:
            return SourceStatus.FAILED
        if not self.ok:
            return SourceStatus.SKIPPED
        return SourceStatus.OK


@dataclass
class SourceOutcome:
    source_id: str
    status: SourceStatus
    metrics: ItemMetrics = field(default_factory=ItemMetrics)
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def error_count_delta(self) -> int:
        if self.error is not None:
            return 1
        return self.metrics.failed


@dataclass
class BatchResult:
    """Source counts for one batch run"""
    ok: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[SourceOutcome]) -> "BatchResult":
        result = cls()
        for outcome in outcomes:
            result.total += 1
            if outcome.status == SourceStatus.OK:
                result.ok += 1
            elif outcome.status == SourceStatus.SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1
        return result

    def to_dict(self) -> dict:
        return {"ok": self.ok, "skipped": self.skipped, "failed": self.failed, "total": self.total}
