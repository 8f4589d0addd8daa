# pages/2_🏆_Leaderboard.py
import streamlit as st
from config import get_config, configure_logging
from models import CRITERIA, CRITERIA_LABELS
from services.leaderboard import SORT_TOTAL, SORT_KEYS, rank, to_csv, to_dataframe, export_filename
from state import get_store, init_session_state, sync_evaluations

st.set_page_config(page_title="🏆 Leaderboard — Game Jam Judge", page_icon="🏆", layout="wide")
st.title("🏆 Leaderboard")

cfg = get_config()
configure_logging(cfg)
store = get_store(cfg)
init_session_state(store)

SORT_LABELS = {SORT_TOTAL: "Total Score", **{c: CRITERIA_LABELS[c] for c in CRITERIA}}
FILTERS = {"All": None, "Compliant only": True, "Non-compliant only": False}

with st.expander("Filters", expanded=True):
    c1, c2 = st.columns([1, 1])
    with c1:
        sort_by = st.selectbox("Sort by", SORT_KEYS, format_func=lambda k: SORT_LABELS[k])
    with c2:
        compliant = FILTERS[st.radio("Compliance", list(FILTERS), horizontal=True)]


@st.fragment(run_every=cfg.POLL_INTERVAL_SECONDS)
def leaderboard():
    ranked = rank(sync_evaluations(store), sort_by, compliant)
    if not ranked:
        st.info("No evaluations match. Save an evaluation to see it ranked here.")
        return

    st.download_button(
        "⬇️ Export CSV",
        data=to_csv(ranked),
        file_name=export_filename(),
        mime="text/csv",
    )
    st.dataframe(to_dataframe(ranked), use_container_width=True, hide_index=True, height=420)

    st.subheader("Details")
    for r in ranked:
        res = r.evaluation.result
        with st.expander(f"#{r.rank} · {res.game_name} — {res.team_name} ({res.percentage_score:.1f}%)"):
            st.write(res.summary)
            st.markdown(f"**Compliance:** {res.rule_compliance.assessment}")
            st.markdown(f"**Theme alignment:** {res.rule_compliance.theme_alignment}")
            if res.feedback.strengths:
                st.markdown("**Strengths**")
                for item in res.feedback.strengths:
                    st.markdown(f"- {item}")
            if res.feedback.areas_for_growth:
                st.markdown("**Areas for growth**")
                for item in res.feedback.areas_for_growth:
                    st.markdown(f"- {item}")
            st.caption(f"Saved {r.evaluation.saved_at} · {r.evaluation.metadata.agent_name}")


leaderboard()
