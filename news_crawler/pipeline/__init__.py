from .orchestrator import CrawlOrchestrator
from .results import BatchResult, ItemMetrics, SourceOutcome, SourceStatus
from .scheduler import LoopScheduler

__all__ = [
    "CrawlOrchestrator",
    "LoopScheduler",
    "BatchResult",
    "ItemMetrics",
    "SourceOutcome",
    "SourceStatus"
]
