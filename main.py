"""
Portfolio Status Dashboard - Home
AI portfolio assessment, project health trends and weekly reporting overview.
"""

import sys
import os
import logging

# Force the root directory into the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import streamlit as st

from config.constants import APP_TITLE, APP_SUBTITLE
from services.dashboard_client import DashboardApiError
from services.data_service import data_manager, load_assessments, load_projects
from components.user_selector import user_selector
from components.assessment_header import assessment_header
from components.analytics_overview import analytics_overview
from components.feedback import show_error_with_retry, show_no_data

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Page configuration
st.set_page_config(
    page_title="Portfolio Status Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #393f43 0%, #2eb05a 100%);
        color: white;
        padding: 1.5rem 2rem;
        border-radius: 16px;
        margin-bottom: 1.5rem;
        box-shadow: 0 12px 30px rgba(0, 0, 0, 0.15);
    }
    .main-header h1, .main-header p { color: white; margin: 0; }
</style>
""", unsafe_allow_html=True)

data_manager.initialize_session_state()
person = user_selector.render()

st.markdown(f"""
<div class="main-header">
    <h1>{APP_TITLE}</h1>
    <p>{APP_SUBTITLE}</p>
</div>
""", unsafe_allow_html=True)

# ═══════════════════════════════════════════════════════════════════
# SECTION 1: AI assessment
# ═══════════════════════════════════════════════════════════════════
assessment = assessment_header.render(person)

st.markdown("---")

# ═══════════════════════════════════════════════════════════════════
# SECTION 2: Trends
# ═══════════════════════════════════════════════════════════════════
try:
    assessments = load_assessments(person['name'], person['level'])
except DashboardApiError:
    # The header already shows the error and retry button
    assessments = []
analytics_overview.render_trends(assessments, assessment, person['name'])

st.markdown("---")

# ═══════════════════════════════════════════════════════════════════
# SECTION 3: Current project health
# ═══════════════════════════════════════════════════════════════════
try:
    projects = load_projects()
except DashboardApiError as e:
    show_error_with_retry(f"Failed to load projects: {e}", key="home_projects")
else:
    if not projects:
        show_no_data("No projects found.")
    else:
        analytics_overview.render_project_health(projects)
        if st.button("📋 Open Projects", key="open_projects"):
            st.switch_page("pages/1_Projects.py")

st.markdown("---")

# ═══════════════════════════════════════════════════════════════════
# SECTION 4: Weekly reports filed here
# ═══════════════════════════════════════════════════════════════════
analytics_overview.render_weekly_report_trends()
