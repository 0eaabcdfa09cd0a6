"""What-if panel and Dashboard controller tests."""

import pytest

from src.controls import Dashboard
from src.filter_state import COMPARISON, IMPORTANCE, MAP, TREND
from src.whatif import SLIDERS, Scenario, format_labels, seed_values


@pytest.fixture
def record(dataset):
    return dataset.institutions.iloc[2]  # Alpha State, 2021


class TestScenario:
    def test_seeded_from_record(self, record):
        values = seed_values(record)
        assert values == {
            "pell-slider": 35.0,
            "admission-slider": 0.65,
            "retention-slider": 0.8,
            "ratio-slider": 15.0,
            "spend-slider": 12000.0,
        }

    def test_labels_formatted(self, record):
        assert format_labels(seed_values(record)) == {
            "pell-slider": "35.0%",
            "admission-slider": "65.0%",
            "retention-slider": "80.0%",
            "ratio-slider": "15.0",
            "spend-slider": "$12000",
        }

    def test_seed_clamped_into_range(self, record):
        extreme = record.copy()
        extreme["spending_per_student"] = 45000.0
        extreme["student_faculty_ratio"] = 2.0
        values = seed_values(extreme)
        assert values["spend-slider"] == 30000.0
        assert values["ratio-slider"] == 5.0

    def test_adjust_and_reset(self, record):
        scenario = Scenario(record)
        assert scenario.adjust("pell-slider", 50.0) == "50.0%"
        assert scenario.adjust("admission-slider", 0.3) == "30.0%"
        assert scenario.labels["pell-slider"] == "50.0%"

        restored = scenario.reset()
        assert restored == seed_values(record)
        assert scenario.labels["pell-slider"] == "35.0%"

    def test_unknown_slider_key(self, record):
        scenario = Scenario(record)
        with pytest.raises(KeyError):
            scenario.adjust("tuition-slider", 1.0)
        assert scenario.values == seed_values(record)

    def test_every_slider_has_a_field(self, record):
        assert all(s.field in record.index for s in SLIDERS)


class TestDashboard:
    def test_all_views_dirty_at_start(self, dataset):
        dash = Dashboard(dataset)
        assert {MAP, IMPORTANCE, COMPARISON, TREND} <= dash.dirty

    def test_unselected_profile_views_are_empty(self, dataset):
        dash = Dashboard(dataset)
        assert dash.figure(COMPARISON) is None
        assert dash.figure(TREND) is None

    def test_map_cached_across_model_change(self, dataset):
        dash = Dashboard(dataset)
        map_fig = dash.figure(MAP)
        importance_fig = dash.figure(IMPORTANCE)

        dash.on_model("linear")
        assert dash.figure(MAP) is map_fig
        assert dash.figure(IMPORTANCE) is not importance_fig

    def test_filter_change_rebuilds_map(self, dataset):
        dash = Dashboard(dataset)
        map_fig = dash.figure(MAP)
        dash.on_state("CA")
        assert dash.figure(MAP) is not map_fig
        assert len(dash.state.filtered) == 2

    def test_select_builds_profile_views(self, dataset):
        dash = Dashboard(dataset)
        dash.on_select(1001, 2021)
        assert dash.scenario is not None
        assert len(dash.figure(TREND).axes[0].collections[0].get_offsets()) == 3
        heights = [p.get_height() for p in dash.figure(COMPARISON).axes[0].patches]
        assert heights == [61.0, 63.0]

    def test_slider_redraws_comparison_from_record(self, dataset):
        dash = Dashboard(dataset)
        dash.on_select(1001, 2021)
        before = dash.figure(COMPARISON)

        assert dash.on_slider("retention-slider", 0.95) == "95.0%"
        assert COMPARISON in dash.dirty
        after = dash.figure(COMPARISON)
        assert after is not before
        assert [p.get_height() for p in after.axes[0].patches] == [61.0, 63.0]

    def test_reset_restores_values(self, dataset):
        dash = Dashboard(dataset)
        dash.on_select(1001, 2021)
        dash.on_slider("spend-slider", 20000.0)
        values = dash.on_reset()
        assert values["spend-slider"] == 12000.0
        assert COMPARISON in dash.dirty

    def test_model_switch_keeps_actual_bar(self, dataset):
        dash = Dashboard(dataset)
        dash.on_select(1001, 2021)
        dash.on_model("linear")
        heights = [p.get_height() for p in dash.figure(COMPARISON).axes[0].patches]
        assert heights == [61.0, 58.0]
