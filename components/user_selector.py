"""Sidebar selector for whose portfolio the dashboard shows."""

import streamlit as st
from typing import Dict, Any

from services.data_service import data_manager
from utils.auth import role_display_name


class UserSelectorComponent:
    """Component for choosing the assessed person."""

    def render(self) -> Dict[str, Any]:
        """Render the selector in the sidebar and return the selected person."""
        people = data_manager.people()
        current = data_manager.get_selected_person()

        labels = [f"{p['name']} ({role_display_name(p['role'])})" for p in people]
        names = [p['name'] for p in people]
        index = names.index(current['name']) if current['name'] in names else 0

        with st.sidebar:
            st.markdown("### 👤 Viewing portfolio of")
            choice = st.selectbox(
                "Person",
                options=range(len(people)),
                format_func=lambda i: labels[i],
                index=index,
                key="person_selector",
                label_visibility="collapsed",
            )
            selected = people[choice]
            st.caption(f"Assessment level: {selected['level']}")

            if st.button("🔄 Refresh data", key="refresh_data", width="stretch"):
                data_manager.refresh()
                st.rerun()

        data_manager.set_selected_person(selected)
        return selected


# Global instance
user_selector = UserSelectorComponent()
