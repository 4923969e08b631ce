"""Expose the reconciliation engine, matching heuristics and outcome types."""

from .domain.models import (
    UNASSIGNED,
    LocalTrackInfo,
    ManualMatchRequest,
    MatchAssignment,
    ReconcileOutcome,
    ReconcileStatus,
)
from .usecases.background import BackgroundResult, BackgroundRunner
from .usecases.engine import ReconciliationEngine
from .usecases.matching import extract_track_number, match_album, rank_hits
from .usecases.ports import (
    ArtworkStorePort,
    ChangeListener,
    ManualMatchHandler,
    RemoteCatalogPort,
    TagStorePort,
)

__all__ = [
    "UNASSIGNED",
    "ArtworkStorePort",
    "BackgroundResult",
    "BackgroundRunner",
    "ChangeListener",
    "LocalTrackInfo",
    "ManualMatchHandler",
    "ManualMatchRequest",
    "MatchAssignment",
    "ReconcileOutcome",
    "ReconcileStatus",
    "ReconciliationEngine",
    "RemoteCatalogPort",
    "TagStorePort",
    "extract_track_number",
    "match_album",
    "rank_hits",
]
