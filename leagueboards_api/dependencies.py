from __future__ import annotations

from leagueboards.pipeline.boards import BoardAssembler
from leagueboards.snapshot.writer import SnapshotStore


def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore()


def get_assembler() -> BoardAssembler:
    return BoardAssembler.from_settings()
