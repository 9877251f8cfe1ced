from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Any, Iterable, Mapping

import boto3
from botocore.exceptions import ClientError

from leagueboards.config.leagues import LeagueConfig
from leagueboards.config.settings import settings
from leagueboards.pipeline.boards import BoardAssembler, get_league_boards

logger = logging.getLogger(__name__)

MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class SnapshotNotFoundError(RuntimeError):
    pass


def build_snapshot(
    configs: Iterable[LeagueConfig | Mapping[str, Any]] | None = None,
    *,
    assembler: BoardAssembler | None = None,
) -> dict[str, Any]:
    boards = get_league_boards(configs, assembler=assembler)
    return {
        "updatedAt": datetime.now(timezone.utc).isoformat(),
        "boards": boards,
    }


def _s3_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.S3_ACCESS_KEY,
        aws_secret_access_key=settings.S3_SECRET_KEY,
    )


class SnapshotStore:
    """Stores the latest boards payload as a single JSON object in S3/MinIO."""

    def __init__(self, *, bucket: str | None = None, key: str | None = None, client: Any | None = None) -> None:
        self.bucket = bucket or settings.SNAPSHOT_BUCKET
        self.key = key or settings.SNAPSHOT_KEY
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = _s3_client()
        return self._client

    def write(self, payload: dict[str, Any]) -> str:
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        self.client.put_object(
            Bucket=self.bucket,
            Key=self.key,
            Body=body,
            ContentType="application/json",
            CacheControl="no-store",
        )
        logger.info(
            "snapshot written bucket=%s key=%s bytes=%s leagues=%s",
            self.bucket,
            self.key,
            len(body),
            len(payload.get("boards") or []),
        )
        return self.key

    def read(self) -> dict[str, Any]:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as exc:
            code = str((exc.response.get("Error") or {}).get("Code") or "")
            if code in MISSING_KEY_CODES:
                raise SnapshotNotFoundError(f"Snapshot not found: s3://{self.bucket}/{self.key}") from exc
            raise
        payload = json.loads(response["Body"].read().decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Snapshot s3://{self.bucket}/{self.key} is not a JSON object")
        return payload

    def list(self, prefix: str = "data/") -> list[dict[str, Any]]:
        response = self.client.list_objects_v2(Bucket=self.bucket, Prefix=prefix)
        blobs = []
        for item in response.get("Contents") or []:
            last_modified = item.get("LastModified")
            blobs.append(
                {
                    "pathname": item.get("Key"),
                    "size": item.get("Size"),
                    "uploadedAt": last_modified.isoformat() if hasattr(last_modified, "isoformat") else last_modified,
                }
            )
        return blobs
