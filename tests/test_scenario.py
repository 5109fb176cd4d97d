import pandas as pd
import pytest

from Bullpen.config import DEFAULT_ITERATIONS
from Bullpen.scenario import (
    PITCHER_COLUMNS,
    ScenarioValidationError,
    PitcherNotFoundError,
    load_pitchers,
    resolve_pitchers,
    validate_iterations,
    validate_pitcher_ids,
    validate_scenario,
)


@pytest.fixture
def roster():
    return load_pitchers()


def test_load_default_roster(roster):
    assert len(roster) == 30
    assert list(roster.columns[: len(PITCHER_COLUMNS)]) == PITCHER_COLUMNS
    assert roster["pitcher_id"].is_unique
    assert roster["era"].is_monotonic_increasing
    assert roster.iloc[0]["name"] == "Félix Bautista"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pitchers(tmp_path / "nope.csv")


def test_load_missing_columns(tmp_path):
    path = tmp_path / "roster.csv"
    pd.DataFrame({"pitcher_id": ["X1"], "name": ["Someone"], "era": [3.0]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing columns"):
        load_pitchers(path)


def test_load_duplicate_ids(tmp_path):
    row = {"pitcher_id": "X1", "name": "Twin", "team": "AAA", "throws": "R",
           "era": 3.0, "fip": 3.0, "k9": 9.0, "bb9": 3.0, "hr9": 1.0}
    path = tmp_path / "roster.csv"
    pd.DataFrame([row, row]).to_csv(path, index=False)
    with pytest.raises(ValueError, match="Duplicate"):
        load_pitchers(path)


def test_load_rejects_blank_stats(tmp_path):
    path = tmp_path / "roster.csv"
    path.write_text(
        "pitcher_id,name,team,throws,era,fip,k9,bb9,hr9\n"
        "X1,Full Line,AAA,R,3.0,3.1,9.0,3.0,1.0\n"
        "X2,Blank K,AAA,L,3.5,3.6,,3.0,1.0\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="X2"):
        load_pitchers(path)


def test_resolve_keeps_request_order(roster):
    pitchers = resolve_pitchers(["P028", "P001", "P014"], roster)
    assert [p.pitcher_id for p in pitchers] == ["P028", "P001", "P014"]
    assert pitchers[1].name == "Josh Hader"
    assert pitchers[1].throws == "L"
    assert pitchers[2].era == pytest.approx(1.14)


def test_resolve_unknown_ids(roster):
    with pytest.raises(PitcherNotFoundError) as exc_info:
        resolve_pitchers(["P001", "P999", "ZZZ"], roster)
    assert exc_info.value.missing == ["P999", "ZZZ"]
    assert "P999" in str(exc_info.value)


def test_validate_iterations():
    assert validate_iterations(None) == DEFAULT_ITERATIONS
    assert validate_iterations(100) == 100
    assert validate_iterations(10000) == 10000
    for bad in (99, 10001, 0, -5):
        with pytest.raises(ScenarioValidationError):
            validate_iterations(bad)


def test_validate_pitcher_ids():
    assert validate_pitcher_ids(["P001", "P002"]) == ["P001", "P002"]
    with pytest.raises(ScenarioValidationError):
        validate_pitcher_ids(["P001"])
    with pytest.raises(ScenarioValidationError):
        validate_pitcher_ids([f"P00{i}" for i in range(1, 8)])
    with pytest.raises(ScenarioValidationError, match="Duplicate"):
        validate_pitcher_ids(["P001", "P001"])


def test_validate_scenario_builds_situation():
    situation = validate_scenario(
        inning=8, outs=2, home_score=4, away_score=4,
        home_pitching=False, runners=["third", "first"],
    )
    assert situation.inning == 8
    assert situation.outs == 2
    assert not situation.home_pitching
    assert situation.runners == ("first", "third")
    assert situation.base_state == 0b101


@pytest.mark.parametrize("kwargs", [
    dict(inning=0),
    dict(inning=16),
    dict(outs=3),
    dict(outs=-1),
    dict(home_score=-1),
    dict(runners=["home"]),
])
def test_validate_scenario_rejects(kwargs):
    params = dict(inning=9, outs=0, home_score=0, away_score=0, home_pitching=True, runners=())
    params.update(kwargs)
    with pytest.raises(ScenarioValidationError):
        validate_scenario(**params)


def test_validate_scenario_reports_all_errors():
    with pytest.raises(ScenarioValidationError) as exc_info:
        validate_scenario(inning=20, outs=5, home_score=0, away_score=0, home_pitching=True)
    message = str(exc_info.value)
    assert "inning" in message
    assert "outs" in message


def test_validation_errors_are_value_errors():
    assert issubclass(ScenarioValidationError, ValueError)
