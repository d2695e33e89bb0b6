"""Formatting service for dashboard display."""

from __future__ import annotations
import math
import pandas as pd
from typing import Any, Dict, Iterable, List, Optional

from config.constants import RAG_ICONS, RAG_COLORS, RAG_UNKNOWN
from core.aggregation import current_status
from core.rag_status import normalize_rag_status, display_rag_status, health_score_band
from models.project import Project
from utils.date_utils import format_date_safe
from utils.text_utils import truncate_text


class FormattingService:
    """Service for formatting project, report and assessment data for display."""

    def __init__(self, date_format: str = "YYYY-MM-DD"):
        self.date_format = date_format

    @property
    def _strftime(self) -> str:
        return '%d-%m-%Y' if self.date_format == 'DD-MM-YYYY' else '%Y-%m-%d'

    def format_date(self, date_input: Any) -> str:
        """Format a date-like value, 'N/A' when missing or unparseable."""
        return format_date_safe(date_input, self._strftime)

    def format_long_date(self, date_input: Any) -> str:
        """e.g. 'Jan 08, 2024' for headers and cards."""
        return format_date_safe(date_input, '%b %d, %Y')

    def format_percentage(self, value: Optional[float], decimals: int = 1) -> str:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return "—"
        return f"{value:.{decimals}f}%"

    def format_health_score(self, score: Optional[float]) -> str:
        if score is None:
            return "N/A"
        return f"{score:g}/10"

    def rag_badge(self, status: Any) -> str:
        """Icon plus title-cased status, e.g. '🟢 Green'."""
        label = display_rag_status(status)
        if label is None:
            return f"{RAG_ICONS[RAG_UNKNOWN]} No status"
        return f"{RAG_ICONS[normalize_rag_status(status)]} {label}"

    def rag_color(self, status: Any) -> str:
        return RAG_COLORS[normalize_rag_status(status)]

    def health_color(self, score: Optional[float]) -> str:
        return RAG_COLORS[health_score_band(score)]

    def maybe(self, val: Any, default: str = "—") -> str:
        """Format value or return default if None/NaN."""
        if val is None:
            return default
        if isinstance(val, float) and math.isnan(val):
            return default
        if isinstance(val, str) and not val.strip():
            return default
        return str(val)

    def projects_to_frame(self, projects: Iterable[Project]) -> pd.DataFrame:
        """Tabular view of projects with their current status, for table display and download."""
        rows: List[Dict[str, Any]] = []
        for project in projects:
            latest = current_status(project)
            rows.append({
                'ID': project.project_id,
                'Project': project.project_name,
                'Account': project.account,
                'Manager': project.project_manager_name,
                'Importance': project.importance,
                'Status': display_rag_status(latest.rag_status) if latest else None,
                'Escalated': bool(latest and latest.client_escalation),
                'Last Update': self.format_date(latest.reporting_date) if latest else "N/A",
            })
        return pd.DataFrame(rows, columns=['ID', 'Project', 'Account', 'Manager', 'Importance',
                                           'Status', 'Escalated', 'Last Update'])

    def reports_to_frame(self, reports: Iterable[Dict[str, Any]]) -> pd.DataFrame:
        """Tabular view of weekly status reports returned by the dashboard server."""
        rows = []
        for report in reports:
            project = report.get('project') or {}
            submitted_by = report.get('submittedBy') or {}
            rows.append({
                'Reporting Date': self.format_date(report.get('reportingDate')),
                'Project': project.get('projectName') or f"#{report.get('projectId')}",
                'Status': self.rag_badge(report.get('ragStatus')),
                'Escalation': 'Yes' if report.get('clientEscalation') else 'No',
                'Key Updates': truncate_text(report.get('keyWeeklyUpdates')),
                'Submitted By': submitted_by.get('name') or '—',
            })
        return pd.DataFrame(rows, columns=['Reporting Date', 'Project', 'Status', 'Escalation',
                                           'Key Updates', 'Submitted By'])


# Global instance
formatter = FormattingService()
