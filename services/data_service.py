"""Data access for the Streamlit pages: cached fetches and session state."""

from __future__ import annotations
import logging
from typing import Dict, Any, List, Optional
import streamlit as st

from models.assessment import Assessment, parse_assessments
from models.project import Project, parse_projects
from services.dashboard_client import dashboard_client
from utils.auth import selectable_people


logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner="Loading projects...")
def load_projects() -> List[Project]:
    return parse_projects(dashboard_client.get_projects())


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner="Loading assessments...")
def load_assessments(person_name: str, level: str) -> List[Assessment]:
    return parse_assessments(dashboard_client.get_assessments(person_name, level))


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_users() -> List[Dict[str, Any]]:
    return dashboard_client.get_users()


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_weekly_reports(project_id: Optional[int] = None) -> List[Dict[str, Any]]:
    return dashboard_client.get_weekly_reports(project_id)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_technical_reviews(project_id: Optional[int] = None) -> List[Dict[str, Any]]:
    return dashboard_client.get_technical_reviews(project_id)


class DataManager:
    """Session state for the dashboard pages."""

    def initialize_session_state(self):
        """Initialize session state variables."""
        if "session_initialized" not in st.session_state:
            st.session_state.selected_person = None
            st.session_state.projects_page = 1
            st.session_state.selected_project_id = None
            st.session_state.session_initialized = True

    def people(self) -> List[Dict[str, Any]]:
        """People for the user selector; the built-in list when the users API is down."""
        try:
            return selectable_people(load_users())
        except Exception as e:
            logger.warning(f"Falling back to built-in users: {e}")
            return selectable_people([])

    def get_selected_person(self) -> Dict[str, Any]:
        person = st.session_state.get('selected_person')
        if person is None:
            person = self.people()[0]
            st.session_state.selected_person = person
        return person

    def set_selected_person(self, person: Dict[str, Any]):
        if person != st.session_state.get('selected_person'):
            logger.info(f"Selected person changed to {person.get('name')} ({person.get('level')})")
            st.session_state.selected_person = person
            st.session_state.projects_page = 1

    def select_project(self, project_id: Any):
        st.session_state.selected_project_id = project_id

    def refresh(self):
        """Drop cached API data so the next render refetches it."""
        st.cache_data.clear()


# Global instance
data_manager = DataManager()
