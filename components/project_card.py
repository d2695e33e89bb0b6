"""Project card for the projects grid."""

import streamlit as st

from core.aggregation import current_status
from models.project import Project
from services.data_service import data_manager
from services.formatting_service import formatter
from utils.text_utils import truncate_text


class ProjectCardComponent:
    """Card showing a project's current status and latest update."""

    def render(self, project: Project, key_prefix: str = "card"):
        latest = current_status(project)

        with st.container(border=True):
            st.markdown(f"#### {project.project_name}")
            st.markdown(
                f"{formatter.rag_badge(latest.rag_status if latest else None)} · "
                f"**{formatter.maybe(project.importance)}**"
            )
            st.caption(
                f"👤 PM: {formatter.maybe(project.project_manager_name)}  \n"
                f"🏢 {formatter.maybe(project.account)} · {formatter.maybe(project.tower)} · "
                f"FTE {formatter.maybe(project.fte)}"
            )

            if latest:
                st.markdown(f"_{formatter.format_long_date(latest.reporting_date)}_")
                st.write(truncate_text(latest.key_weekly_updates, 160) or "No weekly update text.")
                if latest.client_escalation:
                    st.error("⚠️ Client Escalation")
            else:
                st.caption("No status reports yet.")

            if st.button("View Details", key=f"{key_prefix}_{project.project_id}", width="stretch"):
                data_manager.select_project(project.project_id)
                st.switch_page("pages/2_Project_Details.py")


# Global instance
project_card = ProjectCardComponent()
