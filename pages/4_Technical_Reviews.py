import streamlit as st
import sys
import os
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from config.constants import REVIEW_TYPES
from services.dashboard_client import dashboard_client, DashboardApiError
from services.data_service import data_manager, load_projects, load_technical_reviews
from services.formatting_service import formatter
from shared.schemas import TechnicalReviewCreate, validation_errors
from utils.text_utils import split_into_points
from components.user_selector import user_selector
from components.feedback import show_error_with_retry, show_no_data

# Page configuration
st.set_page_config(
    page_title="Technical Reviews",
    page_icon="🛠️",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()

st.title("🛠️ Technical Reviews")

REVIEW_SECTIONS = [
    ('architectureDesignReview', 'Architecture & Design'),
    ('codeQualityStandards', 'Code Quality & Standards'),
    ('devOpsDeploymentReadiness', 'DevOps & Deployment Readiness'),
    ('testingQA', 'Testing & QA'),
    ('riskIdentification', 'Risk Identification'),
    ('complianceStandards', 'Compliance & Standards'),
    ('actionItemsRecommendations', 'Action Items & Recommendations'),
]

try:
    projects = load_projects()
except DashboardApiError as e:
    show_error_with_retry(f"Failed to load projects: {e}", key="review_projects")
    st.stop()

submit_tab, list_tab = st.tabs(["📝 Record Review", "📋 Reviews"])

with submit_tab:
    if not projects:
        show_no_data("No projects available to review.")
    else:
        with st.form("technical_review_form"):
            project_index = st.selectbox(
                "Project",
                options=range(len(projects)),
                format_func=lambda i: f"{projects[i].project_name} (#{projects[i].project_id})",
            )
            col1, col2, col3 = st.columns(3)
            with col1:
                review_date = st.date_input("Review Date", value=date.today())
            with col2:
                review_type = st.selectbox("Review Type", REVIEW_TYPES)
            with col3:
                cycle = st.number_input("Review Cycle", min_value=1, value=1, step=1)

            executive_summary = st.text_area("Executive Summary *", height=100)
            section_values = {}
            for key, label in REVIEW_SECTIONS:
                section_values[key] = st.text_area(label, height=80, key=f"review_{key}")
            sign_col, sqa_col = st.columns(2)
            with sign_col:
                reviewer_sign_off = st.text_input("Reviewer Sign-off")
            with sqa_col:
                sqa_validation = st.text_input("SQA Validation")

            submitted = st.form_submit_button("Save Review", type="primary")

        if submitted:
            payload = {
                'projectId': projects[project_index].project_id,
                'reviewDate': review_date.isoformat(),
                'reviewType': review_type,
                'reviewCycleNumber': int(cycle),
                'executiveSummary': executive_summary,
                'reviewerSignOff': reviewer_sign_off or None,
                'sqaValidation': sqa_validation or None,
                **{key: value or None for key, value in section_values.items()},
            }
            try:
                review = TechnicalReviewCreate.model_validate(payload)
            except ValidationError as e:
                st.error("Please fix the following:")
                for error in validation_errors(e):
                    st.markdown(f"- `{'.'.join(error['path'])}`: {error['message']}")
            else:
                try:
                    created = dashboard_client.create_technical_review(review.to_api())
                except DashboardApiError as e:
                    st.error(f"Failed to save review: {e}")
                else:
                    st.success(f"✅ Technical review #{created.get('id')} saved")
                    data_manager.refresh()

with list_tab:
    try:
        reviews = load_technical_reviews()
    except DashboardApiError as e:
        show_error_with_retry(f"Failed to fetch technical reviews: {e}", key="review_list")
        st.stop()

    if not reviews:
        show_no_data("No technical reviews recorded yet.")

    for item in reviews:
        project = item.get('project') or {}
        conductor = (item.get('conductor') or {}).get('name') or '—'
        title = (f"{project.get('projectName') or '#' + str(item.get('projectId'))} · "
                 f"{item.get('reviewType')} (cycle {item.get('reviewCycleNumber')}) · "
                 f"{formatter.format_long_date(item.get('reviewDate'))}")
        with st.expander(title):
            st.caption(f"Conducted by {conductor}")
            st.markdown(f"**Executive Summary:** {item.get('executiveSummary')}")
            for key, label in REVIEW_SECTIONS:
                points = split_into_points(item.get(key))
                if points:
                    st.markdown(f"**{label}**")
                    st.markdown("\n".join(f"- {point}" for point in points))
