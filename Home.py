# Home.py
import streamlit as st
from config import get_config, configure_logging
from services.leaderboard import summarize
from state import get_store, init_session_state, sync_evaluations, get_event_settings

st.set_page_config(page_title="Game Jam Judge", page_icon="🎮", layout="wide")

cfg = get_config()
configure_logging(cfg)
store = get_store(cfg)
init_session_state(store)

settings = get_event_settings()
st.title(f"🎮 {settings.event_name or 'Game Jam Judge'}")
st.caption(settings.theme_description)

if not (cfg.agent_api_configured or cfg.openai_configured):
    st.warning("No evaluation agent configured. Set AGENT_API_URL or OPENAI_API_KEY to generate evaluations.")

c1, c2 = st.columns([1, 1])
with c1:
    st.page_link("pages/Evaluate.py", label="New Evaluation", icon="✨")
with c2:
    st.page_link("pages/Leaderboard.py", label="View Leaderboard", icon="🏆")


@st.fragment(run_every=cfg.POLL_INTERVAL_SECONDS)
def dashboard():
    evaluations = sync_evaluations(store)
    s = summarize(evaluations)

    m1, m2, m3, m4 = st.columns(4)
    with m1:
        st.metric("Total Submissions", s.total_submissions)
    with m2:
        st.metric("Average Score", f"{s.average_percentage:.1f}%")
    with m3:
        st.metric("Top Rated", s.top_rated.result.game_name if s.top_rated else "N/A")
    with m4:
        st.metric("Rule Compliance", f"{s.compliance_rate:.0f}%")

    st.subheader("Recent Evaluations")
    if not s.recent:
        st.info("No evaluations yet. Start by evaluating your first game.")
        return
    for e in s.recent:
        res = e.result
        with st.container(border=True):
            a, b = st.columns([3, 1])
            with a:
                st.markdown(f"**{res.game_name}** · {res.team_name}")
                st.caption(res.rank_recommendation)
            with b:
                st.metric("Score", f"{res.percentage_score:.1f}%")
                st.markdown("✅ Compliant" if res.rule_compliance.compliant else "❌ Non-compliant")


dashboard()
