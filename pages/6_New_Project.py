import streamlit as st
import sys
import os
from datetime import date, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from config.constants import (
    RAG_STATUSES, IMPORTANCE_LEVELS, DELIVERY_MODELS, BILLING_MODELS, TOWERS, SDLC_PHASES
)
from services.dashboard_client import dashboard_client, DashboardApiError
from services.data_service import data_manager
from shared.schemas import ProjectCreate, validation_errors
from components.user_selector import user_selector

# Page configuration
st.set_page_config(
    page_title="New Project",
    page_icon="➕",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()

st.title("➕ New Project")
st.caption("Projects are created in the projects API together with their first weekly status.")

today = date.today()
last_monday = today - timedelta(days=today.weekday())

with st.form("project_form"):
    st.markdown("#### Project")
    col1, col2, col3 = st.columns(3)
    with col1:
        project_name = st.text_input("Project Name *")
        project_code_id = st.text_input("Project Code")
        project_manager_name = st.text_input("Project Manager *")
    with col2:
        account = st.text_input("Account *")
        billing_model = st.selectbox("Billing Model", BILLING_MODELS)
        tower = st.selectbox("Tower", TOWERS)
    with col3:
        fte = st.text_input("FTE *", value="1")
        importance = st.selectbox("Importance", IMPORTANCE_LEVELS, index=1)
        wsr_publish = st.selectbox("Publish in WSR", ['Yes', 'No'], index=1)
        is_active = st.checkbox("Active", value=True)

    st.markdown("#### First Weekly Status")
    col1, col2, col3 = st.columns(3)
    with col1:
        reporting_date = st.date_input("Reporting Date (Monday)", value=last_monday)
        rag_status = st.selectbox("RAG Status", RAG_STATUSES)
    with col2:
        delivery_model = st.selectbox("Delivery Model", DELIVERY_MODELS)
        sdlc_phase = st.selectbox("Current SDLC Phase", SDLC_PHASES)
    with col3:
        client_escalation = st.checkbox("Client Escalation")
        escalation_details = st.text_input("Escalation Details")
    key_updates = st.text_area("Key Weekly Updates", height=100)
    plan_next_week = st.text_area("Plan for Next Week", height=80)
    issues = st.text_area("Issues & Challenges", height=80)
    plan_for_green = st.text_area("Plan for Green", height=80)

    submitted = st.form_submit_button("Create Project", type="primary")

if submitted:
    try:
        project = ProjectCreate(
            project_name=project_name,
            project_code_id=project_code_id or None,
            project_manager_name=project_manager_name,
            account=account,
            billing_model=billing_model,
            tower=tower,
            fte=fte,
            wsr_publish=wsr_publish,
            importance=importance,
            is_active=is_active,
            project_statuses=[{
                'reporting_date': reporting_date.isoformat(),
                'project_importance': importance,
                'delivery_model': delivery_model,
                'client_escalation': client_escalation,
                'client_escalation_details': escalation_details or None,
                'rag_status': rag_status,
                'key_weekly_updates': key_updates,
                'plan_for_next_week': plan_next_week,
                'issues_challenges': issues,
                'plan_for_green': plan_for_green,
                'current_sdlc_phase': sdlc_phase,
            }],
        )
    except ValidationError as e:
        st.error("Please fix the following:")
        for error in validation_errors(e):
            st.markdown(f"- `{'.'.join(error['path'])}`: {error['message']}")
    else:
        try:
            dashboard_client.create_project(project.to_api())
        except DashboardApiError as e:
            st.error(f"Failed to create project: {e}")
        else:
            st.success(f"✅ Project '{project.project_name}' created")
            data_manager.refresh()
            st.page_link("pages/1_Projects.py", label="Back to Projects", icon="📋")
