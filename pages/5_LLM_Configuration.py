import streamlit as st
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from config.constants import LLM_PROVIDERS
from services.dashboard_client import dashboard_client, DashboardApiError
from services.data_service import data_manager
from services.formatting_service import formatter
from shared.schemas import LlmConfigurationCreate, validation_errors
from components.user_selector import user_selector
from components.feedback import show_error_with_retry, show_no_data

# Page configuration
st.set_page_config(
    page_title="LLM Configuration",
    page_icon="🤖",
    layout="wide",
    initial_sidebar_state="expanded"
)

data_manager.initialize_session_state()
user_selector.render()

st.title("🤖 LLM Configuration")
st.caption("Provider and model used by the portfolio assessment pipeline. Saving replaces the active configuration.")

saved_message = st.session_state.pop('llm_config_saved', None)
if saved_message:
    st.success(f"✅ {saved_message} is now the active configuration")

try:
    active = dashboard_client.get_llm_config()
except DashboardApiError as e:
    if e.status_code == 403:
        st.warning("🔒 Only delivery managers and admins can manage the LLM configuration.")
        st.stop()
    show_error_with_retry(f"Failed to fetch LLM configuration: {e}", key="llm_config")
    st.stop()

st.markdown("### Active Configuration")
if not active:
    show_no_data("No LLM configuration has been saved yet.")
else:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Provider", active.get('provider'))
    col2.metric("Model", active.get('modelName'))
    col3.metric("Temperature", active.get('temperature'))
    col4.metric("Max Tokens", active.get('maxTokens'))
    st.caption(f"Last updated {formatter.format_long_date(active.get('updatedAt'))}")
    if active.get('promptTemplate'):
        with st.expander("Prompt template"):
            st.code(active['promptTemplate'], language=None)

st.markdown("---")
st.markdown("### Update Configuration")

active = active or {}
with st.form("llm_config_form"):
    provider_value = active.get('provider') if active.get('provider') in LLM_PROVIDERS else LLM_PROVIDERS[0]
    col1, col2 = st.columns(2)
    with col1:
        provider = st.selectbox("Provider", LLM_PROVIDERS, index=LLM_PROVIDERS.index(provider_value))
        model_name = st.text_input("Model Name", value=active.get('modelName') or '')
    with col2:
        temperature = st.slider("Temperature", min_value=0.0, max_value=2.0,
                                value=float(active.get('temperature') or 0.2), step=0.1)
        max_tokens = st.number_input("Max Tokens", min_value=1, max_value=200000,
                                     value=int(active.get('maxTokens') or 2000), step=100)
    prompt_template = st.text_area("Prompt Template", value=active.get('promptTemplate') or '', height=200)

    submitted = st.form_submit_button("Save and Activate", type="primary")

if submitted:
    try:
        llm_config = LlmConfigurationCreate(
            provider=provider,
            model_name=model_name,
            temperature=temperature,
            max_tokens=int(max_tokens),
            prompt_template=prompt_template or None,
        )
    except ValidationError as e:
        st.error("Please fix the following:")
        for error in validation_errors(e):
            st.markdown(f"- `{'.'.join(error['path'])}`: {error['message']}")
    else:
        try:
            saved = dashboard_client.save_llm_config(llm_config.to_api())
        except DashboardApiError as e:
            st.error(f"Failed to save configuration: {e}")
        else:
            st.session_state.llm_config_saved = f"{saved.get('provider')}/{saved.get('modelName')}"
            st.rerun()
