"""carvalue - Used-car price model builder.

Pick a transform per column, tune the regressor, train, inspect the
metrics and the prediction chart, then price a single listing.

Usage:
    streamlit run app/streamlit_app.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st

from carvalue.analysis import RegressionLineFitter, RegressionPlotter, ReportFormatter
from carvalue.config import DEFAULT_DATA_PATH, DEFAULT_MODEL_PATH, DEFAULT_SEED, PLOTS_DIR
from carvalue.data import LISTING_SCHEMA, NUMERIC_ENGINE_SCHEMA, ColumnKind
from carvalue.errors import CarValueError
from carvalue.features import DEFAULT_COLUMNS, NUMBER_TRANSFORMS, TEXT_TRANSFORMS, ColumnSpec, TransformKind
from carvalue.models import save_model
from carvalue.pipeline import BackgroundTrainer, TrainerConfig, TrainingSession

# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------

CHART_PATH = PLOTS_DIR / "app_distribution.png"
DEFAULT_TRANSFORMS = {c.name: c.transform for c in DEFAULT_COLUMNS}

st.set_page_config(
    page_title="carvalue",
    page_icon="🚗",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_background_trainer() -> BackgroundTrainer:
    """One training worker shared by every browser session."""
    return BackgroundTrainer()


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

st.sidebar.title("🚗 carvalue")
st.sidebar.caption("Used-car price model builder")

page = st.sidebar.radio("Navigate", ["🛠️ Build & Train", "💰 Predict"], index=0)

st.sidebar.divider()
data_path = st.sidebar.text_input("Listing CSV", value=str(DEFAULT_DATA_PATH))
numeric_engine = st.sidebar.checkbox("Engine capacity is numeric", value=False)
seed = st.sidebar.number_input("Seed", min_value=0, value=DEFAULT_SEED, step=1)

schema = NUMERIC_ENGINE_SCHEMA if numeric_engine else LISTING_SCHEMA


# -----------------------------------------------------------------------------
# Build & Train Page
# -----------------------------------------------------------------------------

def transform_options(kind: ColumnKind):
    allowed = TEXT_TRANSFORMS if kind is ColumnKind.TEXT else NUMBER_TRANSFORMS
    return [t for t in TransformKind if t in allowed]


def render_column_picker():
    """One row per feature column: include checkbox + transform selectbox."""
    st.subheader("Columns")
    columns = []
    for name in schema.feature_names:
        kind = schema.kind_of(name)
        options = transform_options(kind)
        default = DEFAULT_TRANSFORMS.get(name, TransformKind.NONE)
        if default not in options:
            default = TransformKind.NONE

        col1, col2 = st.columns([1, 3])
        include = col1.checkbox(name, value=True, key=f"use_{name}")
        transform = col2.selectbox(
            f"{name} transform",
            options,
            index=options.index(default),
            format_func=lambda t: t.value,
            key=f"transform_{name}_{kind.value}",
            label_visibility="collapsed",
        )
        if include:
            columns.append(ColumnSpec(name, transform))
    return columns


def render_trainer_options() -> TrainerConfig:
    st.subheader("Regressor")
    defaults = TrainerConfig()
    col1, col2, col3 = st.columns(3)
    return TrainerConfig(
        number_of_iterations=col1.number_input("Iterations", min_value=1, value=defaults.number_of_iterations),
        learning_rate=col2.number_input("Learning rate", min_value=0.0001, value=defaults.learning_rate, format="%.5f"),
        number_of_leaves=col3.number_input("Leaves", min_value=2, value=defaults.number_of_leaves),
        minimum_example_count_per_leaf=col1.number_input(
            "Min examples per leaf", min_value=0, value=defaults.minimum_example_count_per_leaf
        ),
        use_categorical_split=col2.checkbox("Categorical split", value=defaults.use_categorical_split),
        handle_missing_value=col3.checkbox("Handle missing values", value=defaults.handle_missing_value),
        minimum_example_count_per_group=col1.number_input(
            "Min examples per group", min_value=0, value=defaults.minimum_example_count_per_group
        ),
        maximum_categorical_split_point_count=col2.number_input(
            "Max categorical split points", min_value=0, value=defaults.maximum_categorical_split_point_count
        ),
        categorical_smoothing=col3.number_input(
            "Categorical smoothing", min_value=0.0, value=float(defaults.categorical_smoothing)
        ),
        l2_categorical_regularization=col1.number_input(
            "Categorical L2", min_value=0.0, value=defaults.l2_categorical_regularization
        ),
        l1_regularization=col2.number_input("L1 regularization", min_value=0.0, value=defaults.l1_regularization),
        l2_regularization=col3.number_input("L2 regularization", min_value=0.0, value=defaults.l2_regularization),
    )


def render_build_page():
    st.header("🛠️ Build & Train")

    columns = render_column_picker()
    st.divider()
    try:
        config = render_trainer_options()
    except CarValueError as e:
        st.error(str(e))
        return

    st.divider()
    if not st.button("Train", type="primary"):
        return

    session = TrainingSession(data_path=data_path, seed=int(seed), schema=schema)
    trainer = get_background_trainer()
    try:
        with st.spinner("Training..."):
            result = trainer.submit(session, columns, config).result()
    except CarValueError as e:
        st.error(f"Training failed: {e}")
        return

    st.session_state["model"] = result.model
    save_model(result.model, schema, DEFAULT_MODEL_PATH)

    if not result.succeeded:
        st.warning(f"Model trained, but evaluation failed: {result.metrics_error}")
        return

    st.subheader("Metrics")
    st.code(ReportFormatter().format_metrics(result.metrics, name="LightGbm"))

    actual, predicted = result.actual_vs_predicted()
    try:
        line = RegressionLineFitter().fit(zip(actual, predicted))
        RegressionPlotter().render(actual, predicted, line, CHART_PATH)
    except CarValueError as e:
        st.warning(f"No chart: {e}")
        return
    st.image(str(CHART_PATH))


# -----------------------------------------------------------------------------
# Predict Page
# -----------------------------------------------------------------------------

def render_predict_page():
    st.header("💰 Predict")

    model = st.session_state.get("model")
    if model is None:
        st.info("Train a model on the Build & Train page first.")
        return

    with st.form("listing"):
        col1, col2 = st.columns(2)
        listing = {
            "make": col1.text_input("Make", value="Audi"),
            "model": col2.text_input("Model", value="A4"),
            "year": col1.number_input("Year", min_value=1980, max_value=2017, value=2012),
            "mileage": col2.number_input("Mileage", min_value=10000, max_value=599999, value=150000),
            "engine": col1.text_input("Engine", value="1968"),
            "fuel": col2.text_input("Fuel", value="Diesel"),
        }
        submitted = st.form_submit_button("Predict")

    if submitted:
        try:
            price = model.predict_listing(listing)
        except CarValueError as e:
            st.error(str(e))
            return
        st.success(f"### {price:.0f} PLN")


# -----------------------------------------------------------------------------
# Routing
# -----------------------------------------------------------------------------

if page == "🛠️ Build & Train":
    render_build_page()
else:
    render_predict_page()
