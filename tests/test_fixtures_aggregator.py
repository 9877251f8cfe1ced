from __future__ import annotations

from leagueboards.core.errors import NetworkError
from leagueboards.pipeline.fixtures import FixtureAggregator, newest_first, parse_finished
from leagueboards.pipeline.models import Fixture, Team

from fakes import FakeProvider, fixture_row


def test_parse_finished_keeps_only_finished_statuses():
    rows = [
        fixture_row(1, 100, (1, "A"), (2, "B"), status="FT"),
        fixture_row(2, 200, (1, "A"), (3, "C"), status="AET"),
        fixture_row(3, 300, (1, "A"), (4, "D"), status="PEN"),
        fixture_row(4, 400, (1, "A"), (5, "E"), status="NS"),
        fixture_row(5, 500, (1, "A"), (6, "F"), status="PST"),
    ]

    assert [fixture.fixture_id for fixture in parse_finished(rows)] == [1, 2, 3]


def test_newest_first_dedupes_by_fixture_id():
    rows = [
        fixture_row(1, 100, (1, "A"), (2, "B")),
        fixture_row(2, 300, (1, "A"), (3, "C")),
        fixture_row(1, 100, (1, "A"), (2, "B")),
    ]

    ordered = newest_first(parse_finished(rows))

    assert [fixture.fixture_id for fixture in ordered] == [2, 1]


def test_last_n_finished_limits_and_orders():
    team = Team(1, "Alpha")
    fixtures = newest_first(
        Fixture.from_api(fixture_row(index, index * 10, (1, "Alpha"), (100 + index, f"Team {index}")))
        for index in range(1, 11)
    )

    picks = FixtureAggregator(FakeProvider()).last_n_finished(team, fixtures)

    assert [fixture.fixture_id for fixture in picks] == [10, 9, 8, 7, 6, 5, 4]


def test_collect_merges_previous_season():
    provider = FakeProvider(
        fixtures={
            (39, 2025): [fixture_row(10, 1000, (1, "A"), (2, "B"))],
            (39, 2024): [fixture_row(5, 500, (2, "B"), (1, "A"), season=2024)],
        }
    )

    collection = FixtureAggregator(provider).collect(39, 2025, 2024)

    assert [fixture.fixture_id for fixture in collection.fixtures] == [10, 5]
    assert collection.seasons == (2025, 2024)
    assert collection.error is None


def test_collect_skips_previous_season_when_disabled():
    provider = FakeProvider(fixtures={(39, 2025): [fixture_row(10, 1000, (1, "A"), (2, "B"))]})

    collection = FixtureAggregator(provider, include_previous_season=False).collect(39, 2025, 2024)

    assert collection.seasons == (2025,)
    assert provider.calls[("fixtures", 39, 2024)] == 0


def test_collect_uses_previous_season_when_current_is_empty():
    provider = FakeProvider(fixtures={(39, 2024): [fixture_row(5, 500, (2, "B"), (1, "A"), season=2024)]})

    collection = FixtureAggregator(provider, include_previous_season=False).collect(39, 2025, 2024)

    assert [fixture.fixture_id for fixture in collection.fixtures] == [5]
    assert collection.seasons == (2024,)


def test_collect_reports_bulk_failure():
    provider = FakeProvider(
        fixtures={
            (39, 2025): NetworkError("network down", attempts=3),
            (39, 2024): [fixture_row(5, 500, (2, "B"), (1, "A"), season=2024)],
        }
    )

    collection = FixtureAggregator(provider).collect(39, 2025, 2024)

    assert "network down" in collection.error
    assert "season 2024" in collection.error
    assert len(collection.fixtures) == 1


def test_partition_uses_fallback_for_missing_teams():
    provider = FakeProvider(
        team_fixtures={
            3: [
                fixture_row(70, 700, (3, "Gamma"), (99, "Cup Opponent")),
                fixture_row(71, 710, (98, "Friendly Opponent"), (3, "Gamma"), status="NS"),
            ]
        }
    )
    roster = [Team(1, "Alpha"), Team(2, "Beta"), Team(3, "Gamma")]
    fixtures = newest_first(parse_finished([fixture_row(10, 1000, (1, "Alpha"), (2, "Beta"))]))

    per_team = FixtureAggregator(provider).partition(roster, fixtures)

    assert [fixture.fixture_id for fixture in per_team[1]] == [10]
    assert [fixture.fixture_id for fixture in per_team[2]] == [10]
    assert [fixture.fixture_id for fixture in per_team[3]] == [70]
    assert provider.count("team_fixtures") == 1


def test_partition_fallback_failure_leaves_team_empty():
    provider = FakeProvider(team_fixtures={3: NetworkError("down", attempts=3)})
    roster = [Team(3, "Gamma")]

    per_team = FixtureAggregator(provider).partition(roster, [])

    assert per_team == {3: []}


def test_team_side_name_match_does_not_steal_roster_ids():
    aggregator = FixtureAggregator(FakeProvider())
    united = Team(33, "Manchester United")
    derby = Fixture.from_api(fixture_row(1, 100, (50, "Manchester United Women"), (40, "Liverpool")))

    assert aggregator.team_side(united, derby) == "home"
    assert aggregator.team_side(united, derby, foreign_ids=frozenset({50})) is None
