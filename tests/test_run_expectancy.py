import numpy as np
import pytest

from Bullpen.config import (
    WALK, HIT_BY_PITCH, SINGLE, DOUBLE, TRIPLE, HOME_RUN, STRIKEOUT, OUT_IN_PLAY,
)
from Bullpen.run_expectancy import (
    RUN_EXPECTANCY_MATRIX,
    get_run_expectancy,
    run_expectancy_frame,
    encode_base_state,
    runners_to_base_state,
    base_state_to_runners,
    advance_runners,
)


def test_spot_values():
    assert advance_runners(0, HOME_RUN) == (0, 1)
    assert advance_runners(7, WALK) == (7, 1)
    assert advance_runners(1, SINGLE) == (3, 0)


def test_home_run_clears_bases():
    for base_state in range(8):
        runners = bin(base_state).count("1")
        assert advance_runners(base_state, HOME_RUN) == (0, runners + 1)


def test_triple_scores_everyone():
    for base_state in range(8):
        runners = bin(base_state).count("1")
        assert advance_runners(base_state, TRIPLE) == (4, runners)


def test_double_runner_from_first_stops_at_third():
    expected = {0: (2, 0), 1: (6, 0), 2: (2, 1), 3: (6, 1),
                4: (2, 1), 5: (6, 1), 6: (2, 2), 7: (6, 2)}
    for base_state, result in expected.items():
        assert advance_runners(base_state, DOUBLE) == result


def test_single():
    expected = {0: (1, 0), 1: (3, 0), 2: (1, 1), 3: (3, 1),
                4: (1, 1), 5: (3, 1), 6: (1, 2), 7: (3, 2)}
    for base_state, result in expected.items():
        assert advance_runners(base_state, SINGLE) == result


@pytest.mark.parametrize("outcome", [WALK, HIT_BY_PITCH])
def test_walk_force_chain(outcome):
    expected = {0: (1, 0), 1: (3, 0), 2: (3, 0), 3: (7, 0),
                4: (5, 0), 5: (7, 0), 6: (7, 0), 7: (7, 1)}
    for base_state, result in expected.items():
        assert advance_runners(base_state, outcome) == result


@pytest.mark.parametrize("outcome", [WALK, SINGLE, DOUBLE, TRIPLE, HOME_RUN])
def test_runners_are_conserved(outcome):
    # every runner plus the batter either scores or is still on base
    for base_state in range(8):
        new_state, runs = advance_runners(base_state, outcome)
        assert 0 <= new_state <= 7
        assert bin(base_state).count("1") + 1 == bin(new_state).count("1") + runs


@pytest.mark.parametrize("outcome", [STRIKEOUT, OUT_IN_PLAY, "balk"])
def test_non_advancing_outcome_rejected(outcome):
    with pytest.raises(ValueError):
        advance_runners(0, outcome)


def test_invalid_base_state_rejected():
    with pytest.raises(ValueError):
        advance_runners(8, SINGLE)


def test_run_expectancy_values():
    assert get_run_expectancy(0, 0) == pytest.approx(0.481)
    assert get_run_expectancy(2, 7) == pytest.approx(0.736)
    assert get_run_expectancy(1, 5) == pytest.approx(1.140)
    assert get_run_expectancy(3, 7) == 0.0


def test_run_expectancy_bounds():
    with pytest.raises(ValueError):
        get_run_expectancy(4, 0)
    with pytest.raises(ValueError):
        get_run_expectancy(0, 9)


def test_run_expectancy_table_is_read_only():
    with pytest.raises(ValueError):
        RUN_EXPECTANCY_MATRIX[0, 0] = 1.0
    assert RUN_EXPECTANCY_MATRIX[0, 0] == pytest.approx(0.481)


def test_run_expectancy_increases_with_runners_and_falls_with_outs():
    assert np.all(RUN_EXPECTANCY_MATRIX[0] > RUN_EXPECTANCY_MATRIX[1])
    assert np.all(RUN_EXPECTANCY_MATRIX[1] > RUN_EXPECTANCY_MATRIX[2])
    assert np.all(RUN_EXPECTANCY_MATRIX[:, 7] == RUN_EXPECTANCY_MATRIX.max(axis=1))


def test_run_expectancy_frame():
    df = run_expectancy_frame()
    assert df.shape == (3, 8)
    assert df.loc[2, "loaded"] == pytest.approx(0.736)
    assert df.loc[0, "empty"] == pytest.approx(0.481)


def test_base_state_encoding():
    assert encode_base_state(False, False, False) == 0
    assert encode_base_state(True, False, True) == 5
    assert runners_to_base_state(["first", "third"]) == 5
    assert runners_to_base_state(["third", "second", "first"]) == 7
    assert runners_to_base_state([]) == 0
    for base_state in range(8):
        assert runners_to_base_state(base_state_to_runners(base_state)) == base_state
    assert base_state_to_runners(6) == ["second", "third"]


def test_unknown_base_name_rejected():
    with pytest.raises(ValueError):
        runners_to_base_state(["home"])
