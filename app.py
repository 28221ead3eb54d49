"""
DeepWitness - Streamlit Application
Witness interview simulation: setup, live interview and final evaluation
"""

import html
import logging

import streamlit as st

from agents import ConfigurationError, OracleError
from config import Settings, load_settings
from game_engine import InterviewSession, SessionError, SessionStatus, SessionView, is_end_command
from log_config import setup_logging
from schemas import DIFFICULTY_DESCRIPTIONS, Difficulty, FinalReport, score_band

logger = logging.getLogger("deepwitness.app")

# ─── PAGE CONFIG ─────────────────────────────────────────────
st.set_page_config(
    page_title="DeepWitness - Witness Interview Simulator",
    page_icon="🕵️",
    layout="wide",
)

# ─── CUSTOM CSS ──────────────────────────────────────────────
st.markdown("""
<style>
    .phase-banner {
        background: linear-gradient(135deg, #0f172a 0%, #1e1b4b 100%);
        color: #c7d2fe;
        padding: 10px 20px;
        border-radius: 8px;
        font-weight: bold;
        border-left: 5px solid #6366f1;
    }
    .phase-label {
        font-size: 0.7em;
        text-transform: uppercase;
        letter-spacing: 0.1em;
        color: #94a3b8;
    }
    .difficulty-badge {
        display: inline-block;
        padding: 2px 8px;
        border-radius: 4px;
        border: 1px solid #4338ca;
        color: #a5b4fc;
        font-size: 0.75em;
        font-weight: bold;
        text-transform: uppercase;
    }
    .exposure-High { color: #f87171; font-weight: bold; }
    .exposure-Medium { color: #facc15; font-weight: bold; }
    .exposure-Low { color: #4ade80; font-weight: bold; }
    .score-card {
        background: #0f172a;
        border: 1px solid #1e293b;
        border-radius: 12px;
        padding: 16px;
    }
    .score-label {
        font-size: 0.7em;
        font-weight: bold;
        text-transform: uppercase;
        color: #64748b;
    }
    .score-value {
        font-size: 2em;
        font-weight: bold;
        color: #f8fafc;
    }
    .score-track {
        width: 100%;
        height: 6px;
        background: #1e293b;
        border-radius: 3px;
        overflow: hidden;
        margin-top: 8px;
    }
    .score-bar-strong { background: #22c55e; height: 100%; }
    .score-bar-fair { background: #eab308; height: 100%; }
    .score-bar-weak { background: #ef4444; height: 100%; }
    .questioning-path {
        color: #c7d2fe;
        font-style: italic;
    }
    .document-summary {
        color: #94a3b8;
        font-style: italic;
    }
    .hint {
        text-align: center;
        font-size: 0.7em;
        text-transform: uppercase;
        letter-spacing: 0.2em;
        color: #475569;
    }
</style>
""", unsafe_allow_html=True)


# ─── SESSION STATE ───────────────────────────────────────────
def init_session_state():
    """Initialize session state variables."""
    defaults = {
        "session": None,
        "last_error": None,
        "show_hidden_state": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def get_session(settings: Settings):
    """Return the interview session, building the model clients on first use."""
    if st.session_state.session is None:
        try:
            st.session_state.session = InterviewSession.from_settings(settings)
        except ConfigurationError as e:
            logger.error("Cannot create session: %s", e)
            st.session_state.last_error = str(e)
            return None
    return st.session_state.session


def render_quote(text: str, css_class: str):
    """Show model-written text verbatim in quotes; markdown and HTML in it are not interpreted."""
    body = html.escape(text).replace("\n", "<br>")
    st.markdown(f'<p class="{css_class}">"{body}"</p>', unsafe_allow_html=True)


def render_last_error():
    if st.session_state.last_error:
        st.error(st.session_state.last_error)
        st.session_state.last_error = None


# ─── ACTIONS ─────────────────────────────────────────────────
def start_simulation(difficulty: Difficulty, settings: Settings):
    session = get_session(settings)
    if session is None:
        st.rerun()

    with st.spinner(f"Building a {difficulty.value} scenario..."):
        try:
            session.start_session(difficulty)
        except OracleError as e:
            logger.error("Error starting simulation: %s", e)
            st.session_state.last_error = "Failed to initialize simulation. Please check your connection and try again."
        except SessionError as e:
            st.session_state.last_error = str(e)
    st.rerun()


def submit_question(question: str):
    session: InterviewSession = st.session_state.session

    # Show the question right away; the witness reply follows after the round trip
    if question.strip() and not is_end_command(question):
        with st.chat_message("user"):
            st.markdown(question)

    with st.spinner("The witness is considering the question..."):
        try:
            session.submit_user_turn(question)
        except OracleError as e:
            logger.error("Error generating report: %s", e)
            st.session_state.last_error = "Failed to generate the evaluation report. Please try again."
        except SessionError as e:
            st.session_state.last_error = str(e)
    st.rerun()


def end_interview():
    session: InterviewSession = st.session_state.session
    with st.spinner("Generating evaluation report..."):
        try:
            session.conclude_session()
        except OracleError as e:
            logger.error("Error generating report: %s", e)
            st.session_state.last_error = "Failed to generate the evaluation report. Please try again."
        except SessionError as e:
            st.session_state.last_error = str(e)
    st.rerun()


def reset_session():
    session: InterviewSession = st.session_state.session
    try:
        session.reset()
    except SessionError as e:
        st.session_state.last_error = str(e)
    st.rerun()


# ─── SETUP SCREEN ────────────────────────────────────────────
def render_setup(settings: Settings):
    """Difficulty selection."""
    st.title("DeepWitness")
    st.caption("Full-System Witness Interview Simulation Engine")

    render_last_error()

    cols = st.columns(2)
    for i, difficulty in enumerate(Difficulty):
        with cols[i % 2]:
            with st.container(border=True):
                if st.button(difficulty.value, key=f"difficulty_{difficulty.name}"):
                    start_simulation(difficulty, settings)
                st.caption(DIFFICULTY_DESCRIPTIONS[difficulty])


# ─── LIVE INTERVIEW ──────────────────────────────────────────
def render_briefing_sidebar(view: SessionView):
    briefing = view.briefing
    with st.sidebar:
        st.markdown("🟣 **LIVE SIMULATION**")
        st.subheader("DeepWitness")
        st.markdown("**Investigation**")
        st.write(briefing["investigation_type"])
        st.markdown(
            f'<span class="difficulty-badge">{html.escape(view.difficulty.value)}</span>',
            unsafe_allow_html=True,
        )

        st.divider()

        st.markdown("**Background**")
        st.write(briefing["company_background"])
        st.markdown("**Jurisdiction**")
        st.write(briefing["jurisdiction"])
        st.markdown("**Exposure Level**")
        exposure = briefing["regulatory_exposure"]
        st.markdown(
            f'<span class="exposure-{html.escape(exposure)}">{html.escape(exposure)}</span>',
            unsafe_allow_html=True,
        )
        st.markdown("**Witness Role**")
        st.write(briefing["witness_role"])
        st.markdown("**Document Summary**")
        render_quote(briefing["document_universe"], "document-summary")

        st.divider()
        st.toggle("Show hidden witness state (instructor view)", key="show_hidden_state")
        if st.session_state.show_hidden_state:
            render_hidden_state(view)


def render_hidden_state(view: SessionView):
    state = view.latest_state
    if state is None:
        st.caption("No state reported yet. The witness starts from the baseline.")
        return
    for name, value in state.model_dump().items():
        label = name.replace("_", " ").title()
        st.progress(min(max(value / 100, 0.0), 1.0), text=f"{label}: {value:g}")


def render_transcript(view: SessionView):
    for message in view.transcript:
        if message.role.value == "user":
            with st.chat_message("user"):
                st.markdown(message.text)
        else:
            with st.chat_message("assistant"):
                st.caption("Witness Response")
                st.markdown(message.text)


def render_interview(view: SessionView):
    render_briefing_sidebar(view)

    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown(
            f'<div class="phase-banner"><div class="phase-label">Current Phase</div>'
            f'{html.escape(view.phase.value)}</div>',
            unsafe_allow_html=True,
        )
    with col2:
        if st.button("End Interview", type="primary", disabled=view.busy):
            end_interview()

    render_last_error()
    render_transcript(view)

    question = st.chat_input("Ask a question...", disabled=view.busy)
    st.markdown('<p class="hint">Type "End Interview" to terminate and generate final report</p>', unsafe_allow_html=True)
    if question:
        submit_question(question)


# ─── FINAL REPORT ────────────────────────────────────────────
def render_score_card(label: str, score: int):
    band = score_band(score)
    st.markdown(
        f'<div class="score-card">'
        f'<div class="score-label">{html.escape(label)}</div>'
        f'<div class="score-value">{score}<span style="font-size:0.4em;color:#475569"> /100</span></div>'
        f'<div class="score-track"><div class="score-bar-{band}" style="width:{score}%"></div></div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def render_report(report: FinalReport):
    col1, col2 = st.columns([4, 1])
    with col1:
        st.title("DeepWitness Analysis")
        st.caption("EVALUATION REPORT // CONFIDENTIAL")
    with col2:
        if st.button("Start New Session"):
            reset_session()

    cols = st.columns(4)
    for col, (label, score) in zip(cols, report.scores()):
        with col:
            render_score_card(label, score)

    st.divider()

    col1, col2 = st.columns(2)
    with col1:
        with st.container(border=True):
            st.subheader("Behavioral Analysis of Witness")
            st.write(report.behavioral_analysis)
    with col2:
        with st.container(border=True):
            st.subheader("Legal Exposure Analysis")
            st.write(report.legal_exposure_analysis)

    with st.container(border=True):
        st.subheader("Missed Risk Flags / Follow-Ups")
        if report.missed_follow_ups:
            for item in report.missed_follow_ups:
                st.markdown(f"- {item}")
        else:
            st.caption("None identified.")

    with st.container(border=True):
        st.subheader("Recommended Questioning Paths")
        for item in report.improved_questioning_paths:
            render_quote(item, "questioning-path")


# ─── MAIN ────────────────────────────────────────────────────
def main():
    """Main application entry point."""
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    init_session_state()

    session = st.session_state.session
    view = session.view() if session is not None else None

    if view is None or view.status == SessionStatus.UNINITIALIZED:
        render_setup(settings)
    elif view.status == SessionStatus.CONCLUDED:
        render_report(view.final_report)
    else:
        render_interview(view)


if __name__ == "__main__":
    main()
