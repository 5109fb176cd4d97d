import matplotlib

matplotlib.use("Agg")

import pytest

from Bullpen.pitcher_model import PitcherProfile
from Bullpen.win_probability import GameSituation


class FixedRng:
    """Stand-in for np.random.Generator that replays fixed uniform draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def elite_pitcher():
    return PitcherProfile(
        pitcher_id="E1", name="Elite Closer", era=1.50, fip=1.90,
        k9=15.0, bb9=2.0, hr9=0.3, throws="R",
    )


@pytest.fixture
def poor_pitcher():
    return PitcherProfile(
        pitcher_id="P1", name="Mop Up", era=5.80, fip=5.40,
        k9=6.0, bb9=5.0, hr9=1.8, throws="L",
    )


@pytest.fixture
def save_situation():
    # Bottom 9, home team up one, one out, runner on first
    return GameSituation(
        inning=9, outs=1, home_score=3, away_score=2,
        home_pitching=True, runners=("first",),
    )


@pytest.fixture
def fixed_rng():
    return FixedRng
