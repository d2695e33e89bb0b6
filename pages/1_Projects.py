import streamlit as st
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.constants import PROJECTS_PAGE_SIZE, RAG_STATUSES, IMPORTANCE_LEVELS, SORT_FIELDS
from core.project_filters import (
    ProjectFilters, filter_projects, sort_projects, paginate, clamp_page, manager_names, find_project,
)
from services.dashboard_client import DashboardApiError
from services.data_service import data_manager, load_projects
from services.formatting_service import formatter
from components.user_selector import user_selector
from components.project_card import project_card
from components.feedback import show_error_with_retry, show_no_data

# Page configuration
st.set_page_config(
    page_title="Projects",
    page_icon="📋",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()

st.title("📋 Projects")

try:
    projects = load_projects()
except DashboardApiError as e:
    show_error_with_retry(f"Failed to load projects: {e}", key="projects")
    st.stop()

header_col, new_col = st.columns([4, 1])
with header_col:
    st.caption(f"{len(projects)} projects from the projects API")
with new_col:
    if st.button("➕ New Project", width="stretch"):
        st.switch_page("pages/6_New_Project.py")

if not projects:
    show_no_data("No projects found.")
    st.stop()

# Jump straight to a project by ID
with st.expander("🔎 Find project by ID"):
    id_col, go_col = st.columns([3, 1])
    with id_col:
        project_id = st.text_input("Project ID", key="find_project_id", label_visibility="collapsed",
                                   placeholder="Project ID")
    with go_col:
        if st.button("Open", key="find_project_btn", width="stretch"):
            found = find_project(projects, project_id)
            if found is None:
                st.warning(f"No project with ID '{project_id}'")
            else:
                data_manager.select_project(found.project_id)
                st.switch_page("pages/2_Project_Details.py")

# Filters
col1, col2, col3, col4, col5 = st.columns([2, 1, 1, 1, 1])
with col1:
    search = st.text_input("Search", placeholder="Name, account or code", key="projects_search")
with col2:
    status = st.selectbox("Status", ['all'] + RAG_STATUSES, key="projects_status")
with col3:
    importance = st.selectbox("Importance", ['all'] + IMPORTANCE_LEVELS, key="projects_importance")
with col4:
    manager = st.selectbox("Manager", ['all'] + manager_names(projects), key="projects_manager")
with col5:
    escalation = st.selectbox(
        "Escalation", ['all', 'escalated', 'not_escalated'],
        format_func=lambda v: {'all': 'All', 'escalated': 'Escalated', 'not_escalated': 'Not escalated'}[v],
        key="projects_escalation",
    )

sort_col, dir_col, view_col = st.columns([1, 1, 2])
with sort_col:
    sort_field = st.selectbox("Sort by", list(SORT_FIELDS), format_func=str.capitalize, key="projects_sort")
with dir_col:
    descending = st.radio("Order", ['Ascending', 'Descending'], horizontal=True, key="projects_order") == 'Descending'
with view_col:
    view = st.radio("View", ['Cards', 'Table'], horizontal=True, key="projects_view")

filters = ProjectFilters(search=search, status=status, importance=importance, manager=manager,
                         escalation=escalation)

# Changing filters or sort returns to the first page
signature = (search, status, importance, manager, escalation, sort_field, descending)
if st.session_state.get('projects_signature') != signature:
    st.session_state.projects_signature = signature
    st.session_state.projects_page = 1

visible = sort_projects(filter_projects(projects, filters), sort_field, descending)

if not visible:
    show_no_data("No projects match the selected filters.")
    st.stop()

# The list can shrink after a refresh while the stored page stays put
st.session_state.projects_page = clamp_page(st.session_state.projects_page, len(visible), PROJECTS_PAGE_SIZE)
page = paginate(visible, st.session_state.projects_page, PROJECTS_PAGE_SIZE)

if view == 'Table':
    st.dataframe(formatter.projects_to_frame(page.items), width='stretch', hide_index=True)
else:
    columns = st.columns(3)
    for i, project in enumerate(page.items):
        with columns[i % 3]:
            project_card.render(project, key_prefix="projects")

# Pagination
prev_col, info_col, next_col = st.columns([1, 2, 1])
with prev_col:
    if st.button("◀ Previous", disabled=not page.has_previous, width="stretch"):
        st.session_state.projects_page = page.page - 1
        st.rerun()
with info_col:
    end = page.start_index + len(page.items)
    st.markdown(
        f"<div style='text-align:center'>Page {page.page} of {page.total_pages} · "
        f"showing {page.start_index + 1}-{end} of {page.total_items}</div>",
        unsafe_allow_html=True,
    )
with next_col:
    if st.button("Next ▶", disabled=not page.has_next, width="stretch"):
        st.session_state.projects_page = page.page + 1
        st.rerun()
