import streamlit as st
import sys
import os
from datetime import date, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from config.constants import RAG_STATUSES, IMPORTANCE_LEVELS, DELIVERY_MODELS, SDLC_PHASES
from services.dashboard_client import dashboard_client, DashboardApiError
from services.data_service import data_manager, load_projects, load_weekly_reports
from services.formatting_service import formatter
from shared.schemas import WeeklyReportCreate, validation_errors
from components.user_selector import user_selector
from components.feedback import show_error_with_retry, show_no_data

# Page configuration
st.set_page_config(
    page_title="Weekly Reports",
    page_icon="🗓️",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()

st.title("🗓️ Weekly Status Reports")


def show_field_errors(errors):
    for error in errors:
        path = ".".join(str(part) for part in error.get('path', [])) or "body"
        st.markdown(f"- `{path}`: {error.get('message')}")


try:
    projects = load_projects()
except DashboardApiError as e:
    show_error_with_retry(f"Failed to load projects: {e}", key="wsr_projects")
    st.stop()

submit_tab, list_tab = st.tabs(["📝 Submit Report", "📋 Submitted Reports"])

with submit_tab:
    if not projects:
        show_no_data("No projects available to report on.")
    else:
        with st.form("weekly_report_form", clear_on_submit=False):
            project_index = st.selectbox(
                "Project",
                options=range(len(projects)),
                format_func=lambda i: f"{projects[i].project_name} (#{projects[i].project_id})",
            )
            col1, col2, col3 = st.columns(3)
            with col1:
                today = date.today()
                reporting_date = st.date_input("Reporting Date", value=today - timedelta(days=today.weekday()))
                rag_status = st.selectbox("RAG Status", RAG_STATUSES)
            with col2:
                importance = st.selectbox("Project Importance", IMPORTANCE_LEVELS, index=1)
                delivery_model = st.selectbox("Delivery Model", DELIVERY_MODELS)
            with col3:
                sdlc_phase = st.selectbox("Current SDLC Phase", [''] + SDLC_PHASES)
                client_escalation = st.checkbox("Client Escalation")

            escalation_details = st.text_area("Client Escalation Details", height=80)
            key_updates = st.text_area("Key Weekly Updates *", height=120)
            weekly_update = st.text_area("Weekly Update", height=80)
            plan_next_week = st.text_area("Plan for Next Week", height=80)
            issues = st.text_area("Issues & Challenges", height=80)
            plan_for_green = st.text_area("Plan for Green", height=80,
                                          help="Steps to bring an Amber or Red project back to Green")
            sqa_remarks = st.text_area("SQA Remarks", height=80)

            submitted = st.form_submit_button("Submit Report", type="primary")

        if submitted:
            try:
                report = WeeklyReportCreate(
                    project_id=projects[project_index].project_id,
                    reporting_date=reporting_date.isoformat(),
                    project_importance=importance,
                    delivery_model=delivery_model,
                    rag_status=rag_status,
                    client_escalation=client_escalation,
                    client_escalation_details=escalation_details or None,
                    key_weekly_updates=key_updates,
                    weekly_update_column=weekly_update or None,
                    plan_for_next_week=plan_next_week or None,
                    issues_challenges=issues or None,
                    plan_for_green=plan_for_green or None,
                    current_sdlc_phase=sdlc_phase or None,
                    sqa_remarks=sqa_remarks or None,
                )
            except ValidationError as e:
                st.error("Please fix the following:")
                show_field_errors(validation_errors(e))
            else:
                try:
                    created = dashboard_client.create_weekly_report(report.to_api())
                except DashboardApiError as e:
                    st.error(f"Failed to submit report: {e}")
                    show_field_errors(e.errors)
                else:
                    st.success(f"✅ Weekly report #{created.get('id')} submitted")
                    data_manager.refresh()

with list_tab:
    filter_options = [None] + [p.project_id for p in projects]
    names = {p.project_id: p.project_name for p in projects}
    project_filter = st.selectbox(
        "Project",
        filter_options,
        format_func=lambda pid: "All projects" if pid is None else f"{names[pid]} (#{pid})",
        key="wsr_filter",
    )
    try:
        reports = load_weekly_reports(project_filter)
    except DashboardApiError as e:
        show_error_with_retry(f"Failed to fetch weekly reports: {e}", key="wsr_list")
        st.stop()

    if not reports:
        show_no_data("No weekly reports submitted yet.")
    else:
        st.dataframe(formatter.reports_to_frame(reports), width='stretch', hide_index=True)
