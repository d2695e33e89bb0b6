"""AI assessment header: organization RAG verdict, status metrics and strategic projects."""

import logging
import streamlit as st
from typing import Optional, Dict, Any
from pydantic import ValidationError

from config.constants import RAG_COLORS
from core.aggregation import aggregate_assessment_metrics, extract_strategic_group
from core.rag_status import normalize_rag_status, health_score_band
from core.trends import select_assessment
from models.assessment import Assessment
from services.dashboard_client import dashboard_client, DashboardApiError
from services.data_service import load_assessments, data_manager
from services.formatting_service import formatter
from shared.schemas import AssessmentGenerateRequest
from utils.text_utils import clean_bullets
from components.feedback import show_error_with_retry, show_no_data

logger = logging.getLogger(__name__)


class AssessmentHeaderComponent:
    """Component for the top-of-dashboard portfolio assessment."""

    def render(self, person: Dict[str, Any]) -> Optional[Assessment]:
        """Render the header for the selected person and return the assessment shown."""
        st.markdown("## 🤖 AI Portfolio Assessment")

        try:
            assessments = load_assessments(person['name'], person['level'])
        except DashboardApiError as e:
            show_error_with_retry(f"Failed to load assessment: {e}", key="assessment")
            self._render_generate_button(person)
            return None

        assessment = select_assessment(assessments, person['name'])
        if assessment is None:
            show_no_data(f"No assessment available for {person['name']} yet.")
            self._render_generate_button(person)
            return None

        self._render_verdict(assessment)
        self._render_metrics(assessment)
        self._render_findings(assessment)
        self._render_generate_button(person)
        return assessment

    def _render_verdict(self, assessment: Assessment):
        status = normalize_rag_status(assessment.llm_org_rag_status or 'red')
        color = RAG_COLORS[status]
        analysis_date = formatter.format_long_date(assessment.updated_at or assessment.assessment_date)
        description = assessment.llm_org_assessment_description or "No assessment available"

        st.markdown(f"""
        <div style="border-left: 6px solid {color}; padding: 0.75rem 1rem; border-radius: 8px;
                    background: {color}14; margin-bottom: 1rem;">
            <div style="font-size: 1.1em; font-weight: 600;">
                Overall portfolio status: {formatter.rag_badge(status)}
            </div>
            <div style="color: #555; font-size: 0.85em;">Analysis date: {analysis_date}</div>
            <p style="margin-top: 0.5rem;">{description}</p>
        </div>
        """, unsafe_allow_html=True)

    def _render_metrics(self, assessment: Assessment):
        metrics = aggregate_assessment_metrics(assessment)
        percentages = metrics.percentages()
        strategic = extract_strategic_group(assessment.importance_groups)
        score = assessment.overall_health_score

        col1, col2, col3, col4, col5, col6 = st.columns(6)
        with col1:
            st.metric("🟢 Green", metrics.green, f"{formatter.format_percentage(percentages['green'])}",
                      delta_color="off")
        with col2:
            st.metric("🟠 Amber", metrics.amber, f"{formatter.format_percentage(percentages['amber'])}",
                      delta_color="off")
        with col3:
            st.metric("🔴 Red", metrics.red, f"{formatter.format_percentage(percentages['red'])}",
                      delta_color="off")
        with col4:
            st.metric("⚪ Error", metrics.error)
        with col5:
            st.metric("⭐ Strategic", strategic.total)
        with col6:
            band = health_score_band(score)
            st.metric("❤️ Health Score", formatter.format_health_score(score),
                      band.capitalize() if band != 'unknown' else None, delta_color="off")

        if metrics.is_empty:
            show_no_data("No project status counts in this assessment.")
        st.caption(strategic.display_text)
        if assessment.escalation_needed or assessment.escalations_count:
            st.warning(f"⚠️ {assessment.escalations_count} escalation(s) flagged in this assessment")

    def _render_findings(self, assessment: Assessment):
        col1, col2 = st.columns(2)
        with col1:
            st.markdown("#### ⚠️ Key Risks")
            risks = clean_bullets(assessment.key_risks)
            if risks:
                st.markdown("\n".join(f"- {risk}" for risk in risks))
            else:
                st.caption("No key risks reported.")
        with col2:
            st.markdown("#### ✅ Recommended Actions")
            actions = clean_bullets(assessment.recommended_actions)
            if actions:
                st.markdown("\n".join(f"- {action}" for action in actions))
            else:
                st.caption("No recommended actions reported.")

    def _render_generate_button(self, person: Dict[str, Any]):
        if not st.button("✨ Generate Assessment", key="generate_assessment"):
            return

        try:
            request = AssessmentGenerateRequest(
                assessment_level=person["level"],
                assessed_person_name=person["name"],
            )
        except ValidationError as e:
            st.error(f"Cannot generate an assessment for {person['name']}: {e.errors()[0]['msg']}")
            return

        with st.spinner(f"Generating assessment for {person['name']}..."):
            try:
                dashboard_client.generate_assessment(request.to_api())
            except DashboardApiError as e:
                logger.error(f"Assessment generation failed: {e}")
                st.error(f"Failed to generate assessment: {e}")
                return

        st.success("Assessment generated successfully!")
        data_manager.refresh()
        st.rerun()


# Global instance
assessment_header = AssessmentHeaderComponent()
