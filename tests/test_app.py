"""End-to-end runs of app/streamlit_app.py with Streamlit's AppTest harness."""

import logging

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from conftest import ROOT, SAMPLE_IMPORTANCE, SAMPLE_RECORDS, write_inputs


APP = str(ROOT / "app" / "streamlit_app.py")


@pytest.fixture(autouse=True)
def fresh_cache():
    # get_config / get_dataset are cached per process; each run must re-read data/.
    st.cache_resource.clear()
    yield
    st.cache_resource.clear()


def run_app():
    at = AppTest.from_file(APP, default_timeout=60)
    return at.run()


def institution_count(at) -> str:
    return next(h.value for h in at.subheader if h.value.startswith("Institutions"))


class TestLoadFailure:
    def test_stops_before_any_control_or_chart(self, tmp_path, monkeypatch, caplog):
        monkeypatch.chdir(tmp_path)  # no data/ directory here

        with caplog.at_level(logging.ERROR):
            at = run_app()

        assert not at.exception
        assert len(at.error) == 1
        assert "make_synthetic_data" in at.error[0].value
        assert len(at.sidebar.selectbox) == 0
        assert len(at.sidebar.checkbox) == 0
        assert len(at.get("plotly_chart")) == 0
        assert len(at.subheader) == 0
        assert "Error loading data" in caplog.text
        assert "Traceback" in caplog.text


class TestControls:
    @pytest.fixture
    def at(self, tmp_path, monkeypatch):
        write_inputs(tmp_path / "data", SAMPLE_RECORDS, SAMPLE_IMPORTANCE)
        monkeypatch.chdir(tmp_path)
        at = run_app()
        assert not at.exception
        return at

    def test_initial_render(self, at):
        assert len(at.error) == 0
        assert at.selectbox(key="year-select").value == 2021
        assert at.selectbox(key="model-select").value == "RandomForest"
        assert institution_count(at) == "Institutions (5)"
        assert len(at.get("plotly_chart")) == 1

    def test_state_select_refilters(self, at):
        at.selectbox(key="state-select").set_value("CA").run()
        assert institution_count(at) == "Institutions (2)"
        assert at.session_state["dashboard"].state.selected_state == "CA"

    def test_year_select_refilters(self, at):
        at.selectbox(key="year-select").set_value(2019).run()
        assert institution_count(at) == "Institutions (2)"

    def test_sector_checkbox_refilters(self, at):
        at.checkbox(key="sector-Public").uncheck().run()
        assert institution_count(at) == "Institutions (3)"
        assert at.session_state["dashboard"].state.sectors == ["Private nonprofit", "For-profit"]

    def test_size_checkbox_refilters(self, at):
        at.checkbox(key="size-Small").uncheck().run()
        assert institution_count(at) == "Institutions (3)"

    def test_model_select_updates_importance_title(self, at):
        at.selectbox(key="model-select").set_value("linear").run()
        assert at.session_state["dashboard"].state.selected_model == "linear"
        assert any(h.value == "Feature Importance: linear, 2021" for h in at.subheader)

    def test_outcome_toggle(self, at):
        at.radio(key="outcome-toggle").set_value("risk").run()
        assert at.session_state["dashboard"].state.selected_outcome == "risk"
        assert institution_count(at) == "Institutions (5)"
