"""Session state shared by the dashboard pages."""

from typing import Dict, List, Optional

import streamlit as st

from config import AppConfig, get_config
from models import EventSettings, SavedEvaluation
from services.evaluation import EvaluationWorkflow
from services.settings import SettingsManager
from store import LocalStore, load_evaluations, load_settings, load_weights


def get_store(cfg: Optional[AppConfig] = None) -> LocalStore:
    cfg = cfg or get_config()
    return LocalStore(cfg.DATA_DIR)


def init_session_state(store: LocalStore) -> None:
    """Load shared configuration and evaluations once per browser session."""
    if "event_settings" not in st.session_state:
        st.session_state["event_settings"] = load_settings(store)
    if "criteria_weights" not in st.session_state:
        st.session_state["criteria_weights"] = load_weights(store)
    if "evaluations" not in st.session_state:
        st.session_state["evaluations"] = load_evaluations(store)
    if "workflow" not in st.session_state:
        st.session_state["workflow"] = EvaluationWorkflow()


def sync_evaluations(store: LocalStore) -> List[SavedEvaluation]:
    """Replace the cached evaluation list with what is in storage (last write wins)."""
    evaluations = load_evaluations(store)
    st.session_state["evaluations"] = evaluations
    return evaluations


def get_evaluations() -> List[SavedEvaluation]:
    return st.session_state.get("evaluations", [])


def get_event_settings() -> EventSettings:
    return st.session_state["event_settings"]


def get_weights() -> Dict[str, int]:
    return st.session_state["criteria_weights"]


def get_workflow() -> EvaluationWorkflow:
    return st.session_state["workflow"]


def apply_settings(manager: SettingsManager) -> None:
    """Propagate an accepted settings draft to the shared configuration."""
    st.session_state["event_settings"] = manager.settings.model_copy(deep=True)
    st.session_state["criteria_weights"] = dict(manager.weights)
