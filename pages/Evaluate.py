# pages/1_✨_Evaluate.py
import streamlit as st
import pandas as pd
from config import get_config, configure_logging
from models import CRITERIA, CRITERIA_LABELS, MAX_SCORE, MIN_SCORE
from services.agent_client import build_client
from services.errors import NothingToSaveError
from state import get_store, init_session_state, get_workflow, get_weights, get_event_settings

st.set_page_config(page_title="✨ Evaluate — Game Jam Judge", page_icon="✨", layout="wide")
st.title("✨ Evaluate Game")

cfg = get_config()
configure_logging(cfg)
store = get_store(cfg)
init_session_state(store)

wf = get_workflow()
weights = get_weights()
settings = get_event_settings()

# Widget keys are versioned so Reset yields fresh, empty widgets
ver = st.session_state.setdefault("eval_form_version", 0)

with st.expander("Submission", expanded=True):
    c1, c2 = st.columns([1, 1])
    with c1:
        wf.form.game_name = st.text_input("Game Name", value=wf.form.game_name, key=f"game_name_{ver}")
    with c2:
        wf.form.team_name = st.text_input("Team Name", value=wf.form.team_name, key=f"team_name_{ver}")
    wf.form.description = st.text_area(
        "Description",
        value=wf.form.description,
        height=120,
        placeholder="What is the game about? Which AI tools were used?",
        key=f"description_{ver}",
    )

st.markdown("#### Criteria Scores (0 = not scored)")
cols = st.columns(3)
for i, c in enumerate(CRITERIA):
    with cols[i % 3]:
        value = st.slider(
            f"{CRITERIA_LABELS[c]} ({weights.get(c, 0)}%)",
            min_value=MIN_SCORE,
            max_value=MAX_SCORE,
            value=wf.form.scores[c],
            key=f"score_{c}_{ver}",
        )
        wf.set_score(c, value)

wf.form.compliance_notes = st.text_area(
    "Rule Compliance Notes",
    value=wf.form.compliance_notes,
    height=100,
    placeholder="Notes on how the game follows the event rules and theme",
    key=f"compliance_notes_{ver}",
)

with st.expander("Event Rules"):
    for rule in settings.rules:
        st.markdown(f"- {rule}")

def _start_evaluation():
    st.session_state["evaluation_in_flight"] = True

# Set by the click callback, so the run that calls the agent already draws the button disabled
in_flight = st.session_state.get("evaluation_in_flight", False)

b1, b2, b3 = st.columns([2, 1, 1])
with b1:
    st.button(
        "🔍 Generate Evaluation",
        type="primary",
        use_container_width=True,
        disabled=in_flight or wf.loading,
        on_click=_start_evaluation,
    )
with b2:
    save = st.button("💾 Save", use_container_width=True, disabled=not wf.can_save)
with b3:
    reset = st.button("New Evaluation", use_container_width=True)

if in_flight:
    try:
        with st.spinner("Evaluating submission..."):
            wf.submit(build_client(cfg), weights, settings)
    finally:
        st.session_state["evaluation_in_flight"] = False
    st.rerun()

if save:
    try:
        record = wf.save(store)
        st.success(f"Evaluation saved successfully! ({record.id})")
    except NothingToSaveError as e:
        st.error(str(e))

if reset:
    wf.reset()
    st.session_state["eval_form_version"] = ver + 1
    st.rerun()

if wf.error:
    st.error(wf.error)

res = wf.result
if res is not None:
    st.markdown("---")
    m1, m2, m3 = st.columns([1, 1, 1])
    with m1:
        st.metric("Percentage Score", f"{res.percentage_score:.1f}%")
    with m2:
        st.metric("Weighted Score", f"{res.weighted_score:.2f} / {res.max_possible_score:.2f}")
    with m3:
        st.metric("Rule Compliance", "Compliant" if res.rule_compliance.compliant else "Non-compliant")

    st.subheader("Score Breakdown")
    if res.score_breakdown:
        df = pd.DataFrame([item.model_dump() for item in res.score_breakdown])
        df["criterion"] = df["criterion"].map(lambda c: CRITERIA_LABELS.get(c, c))
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No per-criterion breakdown returned.")

    st.subheader("Rule Compliance")
    st.write(res.rule_compliance.assessment)
    st.caption(res.rule_compliance.theme_alignment)

    st.subheader("Feedback")
    f1, f2 = st.columns(2)
    sections = [
        ("💪 Strengths", res.feedback.strengths),
        ("🌱 Areas for Growth", res.feedback.areas_for_growth),
        ("💡 Creative Insights", res.feedback.creative_insights),
        ("📚 Learning Opportunities", res.feedback.learning_opportunities),
    ]
    for i, (title, items) in enumerate(sections):
        with (f1 if i % 2 == 0 else f2):
            st.markdown(f"**{title}**")
            for item in items:
                st.markdown(f"- {item}")

    st.subheader("Recommendation")
    st.write(res.rank_recommendation)
    st.subheader("Summary")
    st.write(res.summary)
    if wf.metadata:
        st.caption(f"{wf.metadata.agent_name} · v{wf.metadata.evaluation_version} · {wf.metadata.timestamp}")
