import streamlit as st
import pandas as pd
import plotly.express as px
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.constants import RAG_COLORS
from core.aggregation import status_history
from core.project_filters import find_project
from core.rag_status import display_rag_status, normalize_rag_status, status_rank
from models.project import Project, ProjectStatus
from services.dashboard_client import DashboardApiError
from services.data_service import data_manager, load_projects, load_weekly_reports, load_technical_reviews
from services.formatting_service import formatter
from utils.date_utils import parse_date_any
from utils.text_utils import split_into_points
from components.user_selector import user_selector
from components.feedback import show_error_with_retry, show_no_data

# Page configuration
st.set_page_config(
    page_title="Project Details",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()


def render_points(label: str, text):
    points = split_into_points(text)
    if not points:
        return
    st.markdown(f"**{label}**")
    st.markdown("\n".join(f"- {point}" for point in points))


def render_status(status: ProjectStatus):
    render_points("Key Weekly Updates", status.key_weekly_updates)
    render_points("Weekly Update", status.weekly_update_column)
    render_points("Plan for Next Week", status.plan_for_next_week)
    render_points("Issues & Challenges", status.issues_challenges)
    render_points("Plan for Green", status.plan_for_green)
    render_points("SQA Remarks", status.sqa_remarks)
    if status.client_escalation:
        st.error(f"⚠️ Client escalation: {formatter.maybe(status.client_escalation_details, 'no details')}")
    if status.llm_ai_status or status.llm_ai_assessment_description:
        st.info(f"🤖 AI assessment ({formatter.rag_badge(status.llm_ai_status)}): "
                f"{formatter.maybe(status.llm_ai_assessment_description)}")


def history_chart(project: Project):
    rows = []
    for status in project.project_statuses:
        reported = parse_date_any(status.reporting_date)
        bucket = normalize_rag_status(status.rag_status)
        if reported is None or bucket not in ('green', 'amber', 'red'):
            continue
        rows.append({'Reporting Date': reported, 'Status': display_rag_status(bucket),
                     'Level': status_rank(bucket) + 1})
    if not rows:
        return None

    df = pd.DataFrame(rows).sort_values('Reporting Date')
    fig = px.scatter(
        df, x='Reporting Date', y='Level', color='Status',
        color_discrete_map={'Green': RAG_COLORS['green'], 'Amber': RAG_COLORS['amber'], 'Red': RAG_COLORS['red']},
    )
    fig.add_scatter(x=df['Reporting Date'], y=df['Level'], mode='lines',
                    line=dict(color='#9ca3af', dash='dot'), showlegend=False, hoverinfo='skip')
    fig.update_traces(marker=dict(size=14), selector=dict(mode='markers'))
    fig.update_layout(
        height=300,
        margin=dict(l=20, r=20, t=20, b=20),
        yaxis=dict(tickvals=[1, 2, 3], ticktext=['Red', 'Amber', 'Green'], range=[0.5, 3.5], title=None),
    )
    return fig


try:
    projects = load_projects()
except DashboardApiError as e:
    show_error_with_retry(f"Failed to load projects: {e}", key="details_projects")
    st.stop()

if not projects:
    show_no_data("No projects found.")
    st.stop()

# Project picker, preselected from the projects grid
ids = [str(p.project_id) for p in projects]
selected_id = st.session_state.get('selected_project_id')
index = ids.index(str(selected_id)) if selected_id is not None and str(selected_id) in ids else 0
choice = st.selectbox(
    "Project",
    options=range(len(projects)),
    format_func=lambda i: f"{projects[i].project_name} (#{projects[i].project_id})",
    index=index,
)
project = find_project(projects, ids[choice])
data_manager.select_project(project.project_id)

history = status_history(project)
latest = history[0] if history else None

st.title(f"🔍 {project.project_name}")
st.caption(f"Project ID: {project.project_id} | {project.project_code_id or 'No Code ID'}")

col1, col2, col3, col4 = st.columns(4)
col1.metric("Current Status", formatter.rag_badge(latest.rag_status if latest else None))
col2.metric("Importance", formatter.maybe(project.importance))
col3.metric("FTE", formatter.maybe(project.fte))
col4.metric("Status Reports", len(history))

with st.expander("📄 Project Overview", expanded=True):
    overview_left, overview_right = st.columns(2)
    with overview_left:
        st.markdown(f"**Project Manager:** {formatter.maybe(project.project_manager_name)}")
        st.markdown(f"**Account:** {formatter.maybe(project.account)}")
        st.markdown(f"**Tower:** {formatter.maybe(project.tower)}")
    with overview_right:
        st.markdown(f"**Billing Model:** {formatter.maybe(project.billing_model)}")
        st.markdown(f"**WSR Publish:** {formatter.maybe(project.wsr_publish)}")
        st.markdown(f"**Active:** {'Yes' if project.is_active else 'No'}")

status_tab, review_tab, local_tab = st.tabs(["📈 Status History", "🛠️ Technical Review", "🗓️ Dashboard Reports"])

with status_tab:
    if not history:
        show_no_data("No status reports for this project yet.")
    else:
        fig = history_chart(project)
        if fig is not None:
            st.plotly_chart(fig, width='stretch')
        for i, status in enumerate(history):
            title = (f"{formatter.rag_badge(status.rag_status)} · "
                     f"{formatter.format_long_date(status.reporting_date)}"
                     f"{' · Report #' + status.status_id if status.status_id else ''}")
            with st.expander(title, expanded=(i == 0)):
                render_status(status)

with review_tab:
    reviews = sorted(
        (r for r in project.project_reviews if parse_date_any(r.review_date) is not None),
        key=lambda r: parse_date_any(r.review_date),
        reverse=True,
    )
    if not reviews:
        show_no_data("No technical reviews recorded for this project.")
    else:
        review = reviews[0]
        st.markdown(f"#### {formatter.maybe(review.review_type, 'Technical Review')} "
                    f"(cycle {formatter.maybe(review.review_cycle_number, '1')})")
        st.caption(f"Reviewed {formatter.format_long_date(review.review_date)}")
        render_points("Executive Summary", review.executive_summary)
        for label, text in review.review_sections().items():
            render_points(label, text)
        if review.reviewer_sign_off:
            st.markdown(f"**Reviewer Sign-off:** {review.reviewer_sign_off}")
        if review.sqa_validation:
            st.markdown(f"**SQA Validation:** {review.sqa_validation}")

with local_tab:
    try:
        reports = load_weekly_reports(int(project.project_id))
        local_reviews = load_technical_reviews(int(project.project_id))
    except (TypeError, ValueError):
        reports, local_reviews = [], []
    except DashboardApiError as e:
        show_error_with_retry(f"Failed to load dashboard reports: {e}", key="details_reports")
        reports, local_reviews = None, None

    if reports is not None:
        st.markdown("#### Weekly Reports")
        if reports:
            st.dataframe(formatter.reports_to_frame(reports), width='stretch', hide_index=True)
        else:
            show_no_data("No weekly reports submitted from the dashboard for this project.")

        st.markdown("#### Technical Reviews")
        if local_reviews:
            for item in local_reviews:
                conductor = (item.get('conductor') or {}).get('name') or '—'
                with st.expander(f"{item.get('reviewType')} · {formatter.format_long_date(item.get('reviewDate'))}"
                                 f" · by {conductor}"):
                    render_points("Executive Summary", item.get('executiveSummary'))
                    render_points("Action Items & Recommendations", item.get('actionItemsRecommendations'))
        else:
            show_no_data("No technical reviews submitted from the dashboard for this project.")
