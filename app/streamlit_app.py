"""
app/streamlit_app.py

Purpose
-------
A Streamlit dashboard that:
  - loads institution records + feature importances once per session
  - filters institutions by year, state, sector and size
  - maps predicted graduation rate / risk category per institution
  - shows feature importance for the selected year and model
  - drills into one institution (profile, actual vs predicted, trend)
  - offers a what-if slider panel for the selected institution

All state transitions and figures live in src/; this file only wires
widgets to the Dashboard controller.

Run
---
python -m src.make_synthetic_data     # demo data, once
streamlit run app/streamlit_app.py
"""

import logging

import streamlit as st

from src.charts import selected_key
from src.config import load_config
from src.controls import Dashboard
from src.data_dictionary import describe
from src.data_loader import SECTORS, SIZES, load_dataset
from src.filter_state import COMPARISON, GRAD_RATE, IMPORTANCE, MAP, RISK, TREND
from src.profile import profile_fields
from src.whatif import SLIDERS


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("app")


# ---------------------------------------------------------------------
# Streamlit page configuration
# ---------------------------------------------------------------------
st.set_page_config(
    page_title="Graduation Outlook Dashboard",
    layout="wide",
)
st.title("🎓 Graduation Outlook Dashboard")


# ---------------------------------------------------------------------
# Caching helpers
# ---------------------------------------------------------------------
# Streamlit reruns the script top-to-bottom on every interaction.
# The inputs are read once per server process, not once per rerun.

@st.cache_resource
def get_config():
    return load_config()

@st.cache_resource
def get_dataset():
    """Read institutions.json, then feature_importance.json."""
    return load_dataset(get_config())


# ---------------------------------------------------------------------
# Load data (nothing else renders if this fails)
# ---------------------------------------------------------------------
try:
    config = get_config()
    dataset = get_dataset()
except Exception as e:
    logger.exception("Error loading data")
    st.error("Could not load dashboard data. Generate demo data: `python -m src.make_synthetic_data`.")
    st.code(str(e))
    st.stop()

if "dashboard" not in st.session_state:
    st.session_state.dashboard = Dashboard(dataset, config)
dash: Dashboard = st.session_state.dashboard
state = dash.state


# ---------------------------------------------------------------------
# Control bindings
# ---------------------------------------------------------------------
# Each callback runs before the rerun, so every chart below reads the
# state as just mutated.

def _checked(prefix, options):
    return [o for o in options if st.session_state.get(f"{prefix}-{o}", True)]

def _on_sectors():
    dash.on_sectors(_checked("sector", SECTORS))

def _on_sizes():
    dash.on_sizes(_checked("size", SIZES))

def _seed_sliders():
    for key, value in dash.scenario.values.items():
        st.session_state[key] = value

def _on_reset():
    dash.on_reset()
    _seed_sliders()


st.sidebar.header("Filters")

st.sidebar.selectbox(
    "Year",
    dataset.years,
    index=dataset.years.index(state.selected_year),
    key="year-select",
    on_change=lambda: dash.on_year(st.session_state["year-select"]),
)

models = list(dataset.models)
st.sidebar.selectbox(
    "Model",
    models,
    index=models.index(state.selected_model),
    key="model-select",
    on_change=lambda: dash.on_model(st.session_state["model-select"]),
)

st.sidebar.radio(
    "Outcome",
    [GRAD_RATE, RISK],
    index=[GRAD_RATE, RISK].index(state.selected_outcome),
    format_func=lambda o: "Graduation rate" if o == GRAD_RATE else "Risk category",
    key="outcome-toggle",
    on_change=lambda: dash.on_outcome(st.session_state["outcome-toggle"]),
)

state_options = [""] + dataset.states
st.sidebar.selectbox(
    "State",
    state_options,
    index=state_options.index(state.selected_state),
    format_func=lambda s: s or "All States",
    key="state-select",
    help=describe("state"),
    on_change=lambda: dash.on_state(st.session_state["state-select"]),
)

st.sidebar.caption("Sector")
for sector in SECTORS:
    st.sidebar.checkbox(sector, value=sector in state.sectors, key=f"sector-{sector}", on_change=_on_sectors)

st.sidebar.caption("Size")
for size in SIZES:
    st.sidebar.checkbox(size, value=size in state.sizes, key=f"size-{size}", on_change=_on_sizes)


# ---------------------------------------------------------------------
# Map + feature importance
# ---------------------------------------------------------------------
col1, col2 = st.columns([3, 2])

with col1:
    st.subheader(f"Institutions ({len(state.filtered)})")
    event = st.plotly_chart(
        dash.figure(MAP),
        use_container_width=True,
        key=MAP,
        on_select="rerun",
        selection_mode="points",
    )
    points = event["selection"]["points"] if event else []
    clicked = selected_key(points, state.filtered)
    current = state.selected_institution
    if clicked and (current is None or (current["unitid"], int(current["year"])) != clicked):
        dash.on_select(*clicked)
        _seed_sliders()

with col2:
    st.subheader(f"Feature Importance: {state.selected_model}, {state.selected_year}")
    st.pyplot(dash.figure(IMPORTANCE))


# ---------------------------------------------------------------------
# Profile (only after an institution is clicked)
# ---------------------------------------------------------------------
record = state.selected_institution
if record is None:
    st.info("Click an institution on the map to see its profile.")
    st.stop()

fields = profile_fields(record)
st.subheader(fields.pop("Name"))
st.markdown(
    " · ".join(f"**{k}:** {v}" for k, v in fields.items())
)

pcol1, pcol2 = st.columns(2)
with pcol1:
    st.caption("Actual vs Predicted")
    st.pyplot(dash.figure(COMPARISON))
with pcol2:
    st.caption("Graduation rate trend")
    st.pyplot(dash.figure(TREND))


# ---------------------------------------------------------------------
# What-if scenario
# ---------------------------------------------------------------------
st.subheader("What-if scenario")
st.caption("Adjust inputs to explore a scenario. Predictions shown above are not re-scored.")

labels = dash.scenario.labels
wcols = st.columns(len(SLIDERS))
for wcol, spec in zip(wcols, SLIDERS):
    with wcol:
        st.markdown(f"**{spec.label}:** {labels[spec.key]}")
        st.slider(
            spec.label,
            min_value=spec.min_value,
            max_value=spec.max_value,
            step=spec.step,
            key=spec.key,
            help=describe(spec.field),
            label_visibility="collapsed",
            on_change=lambda k=spec.key: dash.on_slider(k, st.session_state[k]),
        )

st.button("Reset Scenario", key="reset-button", on_click=_on_reset)
