# pages/3_⚙️_Settings.py
import streamlit as st
from config import get_config, configure_logging
from models import CRITERIA, CRITERIA_LABELS, MAX_WEIGHT, MIN_WEIGHT
from services.settings import SettingsManager, REQUIRED_TOTAL, weight_total_message
from state import get_store, init_session_state, get_event_settings, get_weights, apply_settings

st.set_page_config(page_title="⚙️ Settings — Game Jam Judge", page_icon="⚙️", layout="wide")
st.title("⚙️ Settings")

cfg = get_config()
configure_logging(cfg)
store = get_store(cfg)
init_session_state(store)

if "settings_draft" not in st.session_state:
    st.session_state["settings_draft"] = SettingsManager(get_event_settings(), get_weights())
draft: SettingsManager = st.session_state["settings_draft"]

st.subheader("Event")
draft.set_event_name(st.text_input("Event Name", value=draft.settings.event_name))
draft.set_theme_description(st.text_area("Theme Description", value=draft.settings.theme_description, height=100))

st.subheader("Rules")
for i, rule in enumerate(draft.settings.rules):
    r1, r2 = st.columns([6, 1])
    with r1:
        st.markdown(f"{i + 1}. {rule}")
    with r2:
        if st.button("Remove", key=f"remove_rule_{i}"):
            draft.remove_rule(i)
            st.rerun()

with st.form("add_rule_form", clear_on_submit=True):
    new_rule = st.text_input("New rule", placeholder="e.g., Game must include a title screen")
    if st.form_submit_button("Add Rule"):
        if draft.add_rule(new_rule):
            st.rerun()

st.subheader("Criteria Weights")
cols = st.columns(3)
for i, c in enumerate(CRITERIA):
    with cols[i % 3]:
        value = st.number_input(
            f"{CRITERIA_LABELS[c]} (%)",
            min_value=MIN_WEIGHT,
            max_value=MAX_WEIGHT,
            value=draft.weights[c],
            step=1,
            key=f"weight_{c}",
        )
        draft.set_weight(c, value)

total = draft.total_weight
if total == REQUIRED_TOTAL:
    st.success(weight_total_message(total))
else:
    st.warning(weight_total_message(total))

if st.button("💾 Save Settings", type="primary"):
    outcome = draft.save(store)
    if outcome.accepted:
        apply_settings(draft)
        st.success(outcome.message)
    else:
        st.error(f"Warning: {outcome.message}")
