"""Tests for the imbalance rule table."""

import pytest

from core.climatiseur.models import Alert, ClimateSnapshot
from core.climatiseur.rules import (
    COLD_OUTSIDE,
    COOLER_OUTSIDE,
    HOT_OUTSIDE,
    WARMER_OUTSIDE,
    evaluate,
    evaluate_snapshot,
)

CLOSED = {"Front Door", "Kitchen Window"}


class TestHeating:
    def test_warmer_outside_with_everything_closed(self):
        alert = evaluate("heat", 68, 72, set(), CLOSED, threshold=2)

        assert alert.subject == WARMER_OUTSIDE
        assert alert.subject.startswith("It's warmer outside")
        assert alert.body == "You might open one of these:\nFront Door\nKitchen Window"

    def test_warmer_outside_with_a_portal_open_is_fine(self):
        assert evaluate("heat", 68, 72, {"Front Door"}, {"Kitchen Window"}, threshold=2) is None

    def test_colder_outside_with_portal_open(self):
        alert = evaluate("heat", 70, 60, {"Garage Door"}, CLOSED, threshold=2)

        assert alert == Alert(COLD_OUTSIDE, "Why would you have the Garage Door open?")

    def test_colder_outside_with_everything_closed_is_fine(self):
        assert evaluate("heat", 70, 60, set(), CLOSED, threshold=2) is None


class TestCooling:
    def test_hotter_outside_with_portals_open(self):
        alert = evaluate("cool", 72, 90, {"Garage Door", "Front Door"}, set(), threshold=2)

        assert alert.subject == HOT_OUTSIDE
        assert alert.body == "Why would you have the Front Door & Garage Door open?"

    def test_cooler_outside_with_everything_closed(self):
        alert = evaluate("cool", 72, 68, set(), CLOSED, threshold=2)

        assert alert.subject == COOLER_OUTSIDE
        assert "cooler outside" in alert.subject

    def test_cooler_outside_with_a_portal_open_is_fine(self):
        assert evaluate("cool", 72, 60, {"Front Door"}, set(), threshold=2) is None


@pytest.mark.parametrize("open_portals", [set(), {"Front Door"}])
@pytest.mark.parametrize("mode,indoor,outdoor", [("cool", 72, 71), ("heat", 70, 72), ("heat", 70, 68)])
def test_within_threshold_never_alerts(mode, indoor, outdoor, open_portals):
    assert evaluate(mode, indoor, outdoor, open_portals, CLOSED, threshold=2) is None


@pytest.mark.parametrize("mode", ["eco", "off", "heat-cool", ""])
def test_other_modes_never_alert(mode):
    assert evaluate(mode, 60, 90, set(), CLOSED, threshold=0) is None
    assert evaluate(mode, 90, 60, {"Front Door"}, CLOSED, threshold=0) is None


def test_zero_threshold_alerts_on_any_difference():
    assert evaluate("heat", 70, 70.5, set(), CLOSED, threshold=0).subject == WARMER_OUTSIDE
    assert evaluate("heat", 70, 70, set(), CLOSED, threshold=0) is None


def test_default_threshold_is_used():
    # 1 degree is inside the default threshold
    assert evaluate("heat", 70, 71, set(), CLOSED) is None
    assert evaluate("heat", 70, 73, set(), CLOSED).subject == WARMER_OUTSIDE


def test_same_inputs_give_same_output():
    args = ("heat", 70, 60, {"Garage Door", "Front Door"}, CLOSED)

    assert evaluate(*args, threshold=2) == evaluate(*args, threshold=2)


def test_evaluate_snapshot():
    snapshot = ClimateSnapshot(
        thermostat="cool",
        indoor_temp=72,
        outdoor_temp=68,
        open_portals=frozenset(),
        closed_portals=frozenset({"Front Door"}),
    )

    alert = evaluate_snapshot(snapshot, threshold=2)

    assert alert == Alert(COOLER_OUTSIDE, "You might open one of these:\nFront Door")
