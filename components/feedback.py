"""Error and empty-state blocks shared by the pages."""

import streamlit as st

from services.data_service import data_manager


def show_error_with_retry(message: str, key: str):
    """Error banner with a Try again button that refetches everything."""
    st.error(f"❌ {message}")
    if st.button("🔄 Try again", key=f"retry_{key}"):
        data_manager.refresh()
        st.rerun()


def show_no_data(message: str):
    st.info(f"ℹ️ {message}")
