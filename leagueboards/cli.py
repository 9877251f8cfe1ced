from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from leagueboards.config.leagues import parse_league
from leagueboards.config.settings import settings
from leagueboards.snapshot.writer import SnapshotStore, build_snapshot


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leagueboards",
        description="Build the last-7-matches board for each tracked league.",
    )
    parser.add_argument(
        "--league",
        action="append",
        default=None,
        metavar="ID:NAME",
        help="League to build (repeatable). Defaults to LEAGUEBOARDS_LEAGUES.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--output", type=Path, help="Write the snapshot JSON to this file.")
    target.add_argument("--snapshot", action="store_true", help="Persist the snapshot to the object store.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation for stdout/file output.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    _configure_logging()
    logger = logging.getLogger("leagueboards.cli")

    try:
        leagues = [parse_league(raw) for raw in args.league] if args.league else None
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    payload = build_snapshot(leagues)
    failed = [board["leagueId"] for board in payload["boards"] if board.get("error")]
    if failed:
        logger.warning("leagues with errors: %s", failed)

    if args.snapshot:
        key = SnapshotStore().write(payload)
        print(json.dumps({"ok": True, "updatedAt": payload["updatedAt"], "key": key}))
        return 0

    rendered = json.dumps(payload, ensure_ascii=False, indent=args.indent)
    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("snapshot written to %s", args.output)
        return 0

    print(rendered)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
