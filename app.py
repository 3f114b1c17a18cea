"""
EcoMetrics Tracker - Streamlit entry point.

Run with:  streamlit run app.py

The data service is created once per browser session by ``initialize_app`` and
kept in ``st.session_state``; every widget below goes through it.
"""

from datetime import date

import streamlit as st

from eco_core.api import APIConfig, AuthClient
from eco_core.auth import StreamlitSessionGateway
from eco_core.config import load_settings
from eco_core.data import records_to_dataframe
from eco_core.errors import ConfigurationError, ErrorContext, safe_execute
from eco_core.logging import setup_logging
from eco_core.offline import check_storage, force_reinit
from eco_core.startup import initialize_app

st.set_page_config(page_title="EcoMetrics Tracker", page_icon="🌱", layout="wide")

gateway = StreamlitSessionGateway()


def _uploaded_file():
    return st.session_state.get("import_upload")


def get_context():
    if "app_context" not in st.session_state:
        try:
            settings = load_settings()
        except ConfigurationError as e:
            settings = None
            st.session_state["config_error"] = e.message
        if settings is not None:
            setup_logging(settings.log_level, log_to_file=settings.log_to_file)
        st.session_state["app_context"] = initialize_app(
            settings, gateway, file_picker=_uploaded_file
        )
    return st.session_state["app_context"]


ctx = get_context()
service = ctx.data_service
st.session_state["debug_mode"] = ctx.settings.debug

st.title("🌱 EcoMetrics Tracker")
if ctx.startup_notice:
    st.warning(ctx.startup_notice)

# ==================== LOGIN (remote mode) ====================

if service.mode == "remote" and not gateway.get_session().authenticated:
    auth = AuthClient(
        APIConfig("EcoMetrics API", ctx.settings.api_base_url, ctx.settings.request_timeout),
        gateway,
    )
    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Log in"):
            with ErrorContext("Login"):
                auth.login(username, password)
                st.rerun()
    st.stop()

# ==================== DATA ====================

records = safe_execute(service.get_data, default=[], error_message="Failed to load records")
st.metric("Electricity price (KZT/kWh)", service.get_electricity_price())
st.dataframe(records_to_dataframe(records), use_container_width=True, hide_index=True)

with st.form("entry"):
    st.subheader("Add or update an entry")
    entry_date = st.date_input("Date", value=date.today())
    power = st.number_input("Power consumption (kWh)", min_value=0.0)
    drinking = st.number_input("Drinking water (L)", min_value=0.0)
    irrigation = st.number_input("Irrigation water (L)", min_value=0.0)
    price = st.number_input("Electricity price (KZT/kWh)", min_value=0.01,
                            value=float(service.get_electricity_price()))
    if st.form_submit_button("Save"):
        with ErrorContext("Saving entry", show_success=True, success_message="Entry saved"):
            service.save_entry({
                "date": entry_date.isoformat(),
                "powerConsumption": power,
                "drinkingWater": drinking,
                "irrigationWater": irrigation,
                "electricityPrice": price,
            })

# ==================== IMPORT / EXPORT ====================

col_export, col_import = st.columns(2)

with col_export:
    export_format = st.selectbox("Export format", ["json", "csv"])
    payload = safe_execute(service.export_data, export_format, error_message="Export failed")
    if payload is not None:
        st.download_button("Download", payload.data, payload.filename, payload.mime_type)

with col_import:
    st.file_uploader("Import JSON", type=["json"], key="import_upload")
    if st.button("Import") and service.mode == "local":
        with ErrorContext("Importing file"):
            if service.import_from_file():
                st.rerun()

# ==================== MAINTENANCE ====================

with st.expander("Danger zone"):
    confirmed = st.checkbox("I understand this deletes every record")
    if st.button("Clear all data", disabled=not confirmed):
        with ErrorContext("Clearing data"):
            service.clear_all_data(confirm=True)
            st.rerun()

if service.mode == "remote" and gateway.get_session().is_admin:
    with st.expander("Operation logs"):
        st.json(safe_execute(service.get_logs, default=[], error_message="Failed to load logs"))

if ctx.settings.debug and service.mode == "local":
    with st.expander("Local cache diagnostics"):
        st.json(check_storage(service.store))
        if st.button("Force re-initialization"):
            force_reinit(service)
            st.rerun()
