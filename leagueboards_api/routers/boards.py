from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends

from leagueboards.config.settings import settings
from leagueboards.core.errors import MissingCredentialError
from leagueboards.pipeline.boards import BoardAssembler
from leagueboards.snapshot.writer import SnapshotNotFoundError, SnapshotStore, build_snapshot

from ..errors import AppError
from ..dependencies import get_assembler, get_snapshot_store

logger = logging.getLogger("leagueboards_api.boards")

router = APIRouter(prefix="/api", tags=["boards"])


def _require_credential(assembler: BoardAssembler) -> None:
    if not assembler.provider.has_credential:
        raise MissingCredentialError()


def _store_unavailable(action: str, exc: Exception) -> AppError:
    return AppError(
        message=f"Failed to {action} the boards snapshot.",
        code="SNAPSHOT_UNAVAILABLE",
        status=502,
        details={"error": str(exc)[:200]},
    )


@router.get("/leagueboards")
def get_leagueboards(store: SnapshotStore = Depends(get_snapshot_store)) -> dict[str, Any]:
    try:
        payload = store.read()
    except SnapshotNotFoundError as exc:
        raise AppError(message=str(exc), code="SNAPSHOT_NOT_FOUND", status=404) from exc
    except (BotoCoreError, ClientError, ValueError) as exc:
        raise _store_unavailable("read", exc) from exc

    return {
        "ok": True,
        "updatedAt": payload.get("updatedAt"),
        "leagues": payload.get("boards") or [],
    }


@router.get("/leagueboards/live")
def get_live_leagueboards(assembler: BoardAssembler = Depends(get_assembler)) -> dict[str, Any]:
    _require_credential(assembler)
    payload = build_snapshot(settings.LEAGUES, assembler=assembler)
    return {"ok": True, "updatedAt": payload["updatedAt"], "leagues": payload["boards"]}


@router.get("/cron/refresh")
def refresh_snapshot(
    assembler: BoardAssembler = Depends(get_assembler),
    store: SnapshotStore = Depends(get_snapshot_store),
) -> dict[str, Any]:
    _require_credential(assembler)
    payload = build_snapshot(settings.LEAGUES, assembler=assembler)
    try:
        key = store.write(payload)
    except (BotoCoreError, ClientError) as exc:
        raise _store_unavailable("write", exc) from exc

    errors = sum(1 for board in payload["boards"] if board.get("error"))
    logger.info("snapshot refreshed key=%s leagues=%s errors=%s", key, len(payload["boards"]), errors)
    return {
        "ok": True,
        "updatedAt": payload["updatedAt"],
        "key": key,
        "leagues": len(payload["boards"]),
        "errors": errors,
    }


@router.get("/blob-debug")
def blob_debug(store: SnapshotStore = Depends(get_snapshot_store)) -> dict[str, Any]:
    try:
        blobs = store.list(prefix="data/")
    except (BotoCoreError, ClientError) as exc:
        raise _store_unavailable("list", exc) from exc
    return {"ok": True, "count": len(blobs), "blobs": blobs}
