from __future__ import annotations

import json

from leagueboards.cli import main


def test_cli_writes_output_file_even_when_leagues_fail(tmp_path):
    target = tmp_path / "boards.json"

    exit_code = main(["--league", "39:Premier League", "--league", "78:Bundesliga", "--output", str(target)])

    assert exit_code == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert [board["leagueId"] for board in payload["boards"]] == [39, 78]
    assert all("APISPORTS_KEY" in board["error"] for board in payload["boards"])


def test_cli_prints_snapshot_to_stdout(capsys):
    assert main(["--league", "262:Liga MX", "--indent", "0"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["boards"][0]["leagueName"] == "Liga MX"


def test_cli_rejects_bad_league():
    assert main(["--league", "premier"]) == 2
