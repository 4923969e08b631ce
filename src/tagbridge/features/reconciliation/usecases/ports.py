"""Where: src/tagbridge/features/reconciliation/usecases/ports.py
What: Ports defining reconciliation dependencies and collaborators.
Why: Decouple the engine from mutagen, HTTP and any UI so tests can use fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from tagbridge.shared.cancellation import CancelCheck
from tagbridge.shared.remote import RemoteHit, RemoteRelease
from tagbridge.shared.tag_record import ArtworkBlob, TagRecord

from ..domain.models import ManualMatchRequest


@runtime_checkable
class RemoteCatalogPort(Protocol):
    """Port for catalog queries and cover downloads."""

    def search_recording(
        self,
        artist: str,
        title: str,
        album: str | None = None,
        cancel: CancelCheck | None = None,
    ) -> list[RemoteHit]:
        """Search recordings; empty on failure or cancellation."""
        ...

    def get_release_details(
        self, release_id: str, cancel: CancelCheck | None = None
    ) -> RemoteRelease:
        """Resolve a release; only the id is set on failure."""
        ...

    def best_release_for_recording(
        self, recording_id: str, cancel: CancelCheck | None = None
    ) -> str:
        """First release id for a recording, or ``""``."""
        ...

    def fetch_cover(
        self,
        entity_id: str,
        size_hint: int = 0,
        is_release_group: bool = False,
        cancel: CancelCheck | None = None,
    ) -> ArtworkBlob | None:
        """Front cover image, or ``None``."""
        ...


@runtime_checkable
class TagStorePort(Protocol):
    """Port for reading and writing canonical tags."""

    def read_tags(self, path: Path) -> TagRecord:
        ...

    def write_tags(self, path: Path, record: TagRecord) -> bool:
        ...


@runtime_checkable
class ArtworkStorePort(Protocol):
    """Port for replacing embedded covers."""

    def write_cover(
        self, path: Path, blob: ArtworkBlob | None, mime_hint: str | None = None
    ) -> bool:
        ...


@runtime_checkable
class ChangeListener(Protocol):
    """Receives one notification per file whose metadata was rewritten."""

    def metadata_changed(self, path: Path, record: TagRecord) -> None:
        ...


@runtime_checkable
class ManualMatchHandler(Protocol):
    """Adjudicates assignments the engine was not confident about."""

    def request_manual_match(self, request: ManualMatchRequest) -> None:
        """Receive the hand-off payload; confirm later via ``apply_confirmed_mapping``."""
        ...


__all__ = [
    "ArtworkStorePort",
    "ChangeListener",
    "ManualMatchHandler",
    "RemoteCatalogPort",
    "TagStorePort",
]
