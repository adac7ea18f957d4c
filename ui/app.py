"""
Relationship Risk Assessment UI

A Streamlit application that asks the questionnaire, estimates divorce
risk from the answers and explains which answers mattered most.

Design: Premium psychology/relationship clinic aesthetic
- Soft neutral palette (off-white, charcoal, subtle teal accent)
- Large hero percentage display
- Critical questions marked with an accent border

Run with: streamlit run ui/app.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st

from relationship_risk.configs import load_config
from relationship_risk.context import AssessmentContext, ContextState
from relationship_risk.errors import InvalidResponseError
from relationship_risk.inference import interpret_risk, response_label
from relationship_risk.questionnaire import RESPONSE_LABELS

# =============================================================================
# CONSTANTS
# =============================================================================

CONFIG_PATH = project_root / "configs" / "config.yaml"
ANSWER_KEY = "answer_{}"

# =============================================================================
# DESIGN SYSTEM - Colors & Styles
# =============================================================================

COLORS = {
    "background": "#FAFAFA",
    "card_bg": "#FFFFFF",
    "text_primary": "#2D3748",
    "text_secondary": "#718096",
    "accent": "#319795",  # Subtle teal
    "accent_light": "#E6FFFA",
    "border": "#E2E8F0",
    "critical": "#ED8936",
    "error": "#F56565",
}

# =============================================================================
# CUSTOM CSS
# =============================================================================

def inject_custom_css():
    """Inject custom CSS for clinic-grade aesthetic."""
    st.markdown(f"""
    <style>
        .stApp {{
            background-color: {COLORS['background']};
        }}

        h1, h2, h3 {{
            color: {COLORS['text_primary']} !important;
            font-weight: 600 !important;
        }}

        .card-header {{
            color: {COLORS['text_primary']};
            font-size: 1.1rem;
            font-weight: 600;
            margin: 1.5rem 0 0.5rem;
            padding-bottom: 0.5rem;
            border-bottom: 1px solid {COLORS['border']};
        }}

        .question-text {{
            color: {COLORS['text_primary']};
            font-size: 0.95rem;
            margin: 0.75rem 0 0.25rem;
        }}

        .question-critical {{
            border-left: 3px solid {COLORS['critical']};
            padding-left: 0.75rem;
        }}

        .hero-score-container {{
            text-align: center;
            padding: 2.5rem 1rem;
            background: {COLORS['card_bg']};
            border: 1px solid {COLORS['border']};
            border-radius: 16px;
            margin: 1.5rem 0;
        }}

        .hero-score {{
            font-size: 4.5rem;
            font-weight: 700;
            line-height: 1;
            margin-bottom: 0.5rem;
        }}

        .hero-score-label {{
            font-size: 1rem;
            color: {COLORS['text_secondary']};
            text-transform: uppercase;
            letter-spacing: 0.1em;
            margin-bottom: 1rem;
        }}

        .impact-row {{
            margin: 0.5rem 0;
        }}

        .impact-bar {{
            height: 6px;
            background: {COLORS['border']};
            border-radius: 3px;
            overflow: hidden;
        }}

        .impact-fill {{
            height: 100%;
            background: {COLORS['accent']};
        }}

        .impact-fill-critical {{
            background: {COLORS['critical']};
        }}

        .section-divider {{
            height: 1px;
            background: {COLORS['border']};
            margin: 2rem 0;
        }}
    </style>
    """, unsafe_allow_html=True)


# =============================================================================
# COMPONENT FUNCTIONS
# =============================================================================

@st.cache_resource
def load_context() -> AssessmentContext:
    """Create, initialize and cache the assessment context."""
    config = load_config(str(CONFIG_PATH)) if CONFIG_PATH.exists() else None
    context = AssessmentContext(config)
    with st.spinner("Preparing the analysis model..."):
        context.initialize()
    return context


def render_header():
    """Render the page header with title and description."""
    st.markdown("""
    <div style="text-align: center; margin-bottom: 2rem;">
        <h1 style="font-size: 2.2rem; margin-bottom: 0.5rem;">Relationship Health Assessment</h1>
        <p style="font-size: 1.1rem; color: #718096; max-width: 600px; margin: 0 auto;">
            Answer each statement about your relationship from Never to Always
        </p>
    </div>
    """, unsafe_allow_html=True)

    st.caption(
        "This tool provides an estimate from a model trained on synthetic data. "
        "Results are for informational purposes only."
    )


def render_initialization_status(context: AssessmentContext) -> bool:
    """Show initialization status; returns True when the quiz can be used."""
    if context.state is ContextState.FAILED:
        st.error(f"Initialization failed: {context.last_error}")
        if st.button("Retry"):
            with st.spinner("Preparing the analysis model..."):
                context.initialize()
            st.rerun()
        return False

    for message in context.notifications[-1:]:
        st.info(message)
    return context.is_ready


def render_questions(context: AssessmentContext) -> list:
    """Render the questionnaire grouped by category."""
    question_set = context.question_set
    critical_weight = context.ranker.policy.critical_weight
    answers = [None] * len(question_set)

    for category in question_set.categories:
        st.markdown(f'<div class="card-header">{category.title}</div>', unsafe_allow_html=True)
        if category.description:
            st.caption(category.description)

        for question in question_set.questions_in(category.key):
            css = "question-text question-critical" if question.weight > critical_weight else "question-text"
            st.markdown(
                f'<p class="{css}">{question.index + 1}. {question.text}</p>',
                unsafe_allow_html=True
            )
            answers[question.index] = st.radio(
                label=question.text,
                options=list(RESPONSE_LABELS),
                index=None,
                format_func=response_label,
                horizontal=True,
                key=ANSWER_KEY.format(question.index),
                label_visibility="collapsed",
            )

    return answers


def reset_answers(n_questions: int):
    for i in range(n_questions):
        st.session_state.pop(ANSWER_KEY.format(i), None)


def render_results(result):
    """Render the risk percentage, interpretation and important factors."""
    interpretation = interpret_risk(result.percentage)

    st.markdown(f"""
    <div class="hero-score-container">
        <div class="hero-score-label">Divorce Risk Estimate</div>
        <div class="hero-score" style="color: {interpretation.color};">{result.percentage}%</div>
        <div style="color: {COLORS['text_primary']}; font-weight: 600;">{interpretation.label}</div>
    </div>
    """, unsafe_allow_html=True)

    st.markdown(f"""
    <div style="background: {COLORS['accent_light']}; border-left: 3px solid {interpretation.color};
                padding: 1rem 1.25rem; border-radius: 0 8px 8px 0;">
        <p style="color: {COLORS['text_primary']}; margin: 0 0 0.5rem; font-weight: 600;">{interpretation.headline}</p>
        <p style="color: {COLORS['text_primary']}; margin: 0; font-size: 0.95rem;">{interpretation.advice}</p>
    </div>
    """, unsafe_allow_html=True)

    st.markdown('<div class="card-header">Most Influential Answers</div>', unsafe_allow_html=True)
    max_impact = max((e.impact for e in result.feature_importance), default=0.0) or 1.0
    for entry in result.feature_importance:
        width = int(100 * entry.impact / max_impact)
        fill_class = "impact-fill impact-fill-critical" if entry.is_critical else "impact-fill"
        flag = " (critical)" if entry.is_critical else ""
        st.markdown(f"""
        <div class="impact-row">
            <p class="question-text">{entry.question}{flag}</p>
            <p style="font-size: 0.85rem; margin: 0;">Your answer: {entry.response_text}</p>
            <div class="impact-bar"><div class="{fill_class}" style="width: {width}%"></div></div>
        </div>
        """, unsafe_allow_html=True)

    with st.expander("View technical details"):
        st.markdown(f"""
        - Analysis method: {"Neural network" if result.mode == "network" else "Weighted formula"}
        - Probability: {result.probability:.4f}
        - Average answer: {result.average_response:.2f}
        """)


def render_dataset_statistics(context: AssessmentContext):
    """Training data overview."""
    statistics = context.statistics
    with st.expander("About the training data"):
        overview = statistics.overview()
        for column, (label, value) in zip(st.columns(len(overview)), overview.items()):
            column.metric(label, value)
        st.markdown("**Strongest correlations with outcome**")
        st.dataframe(
            statistics.to_dataframe().sort_values("correlation", key=abs, ascending=False).head(10),
            use_container_width=True,
        )


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="Relationship Health Assessment",
        page_icon="",
        layout="centered",
        initial_sidebar_state="collapsed",
    )

    inject_custom_css()
    render_header()

    context = load_context()
    if not render_initialization_status(context):
        st.stop()

    answers = render_questions(context)

    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        analyze_clicked = st.button("Analyze", type="primary", use_container_width=True)
    with col2:
        if st.button("Start over", use_container_width=True):
            reset_answers(len(answers))
            st.rerun()

    if analyze_clicked:
        try:
            result = context.assess(answers)
        except InvalidResponseError as e:
            st.warning(str(e))
            st.stop()

        st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
        render_results(result)

    render_dataset_statistics(context)


if __name__ == "__main__":
    main()
