"""Analytics overview: project health trend chart and portfolio breakdown."""

import logging
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
import streamlit as st
from typing import List, Dict, Any, Optional

from config.constants import RAG_COLORS
from core.aggregation import aggregate_project_metrics, priority_projects, current_status
from core.trends import build_trend_series, has_trend_data, trends_to_frame
from models.assessment import Assessment
from models.project import Project
from services.dashboard_client import dashboard_client, DashboardApiError
from services.formatting_service import formatter
from components.feedback import show_error_with_retry, show_no_data

logger = logging.getLogger(__name__)

TREND_LINES = [('green', 'Green'), ('amber', 'Amber'), ('red', 'Red')]


def trend_figure(df: pd.DataFrame, title: str = "Project Health Trends") -> go.Figure:
    """Line chart of green/amber/red counts over time."""
    fig = go.Figure()
    for column, label in TREND_LINES:
        fig.add_trace(go.Scatter(
            x=df['date'],
            y=df[column],
            mode='lines+markers',
            name=label,
            line=dict(color=RAG_COLORS[column], width=3),
            marker=dict(size=8),
            hovertemplate=f"%{{y}} projects<extra>{label}</extra>",
        ))
    y_max = max(10, int(df['total'].max())) if 'total' in df and not df.empty else 10
    fig.update_layout(
        title=title,
        height=400,
        margin=dict(l=20, r=20, t=60, b=20),
        yaxis=dict(title='# Projects', range=[0, y_max]),
        xaxis=dict(title=None, tickformat='%b %d, %Y'),
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='right', x=1),
        hovermode='x unified',
    )
    return fig


class AnalyticsOverviewComponent:
    """Component for the dashboard's charts."""

    def render_trends(self, assessments: List[Assessment], selected: Optional[Assessment],
                      person_name: str):
        """Trend chart for the selected person's assessment."""
        st.markdown("### 📈 Project Health Trends")

        ordered = list(assessments or [])
        if selected is not None:
            ordered = [selected] + [a for a in ordered if a is not selected]

        points = build_trend_series(ordered)
        if not has_trend_data(points):
            show_no_data(f"No project status data available for {person_name}")
            return

        df = trends_to_frame(points)
        st.plotly_chart(trend_figure(df), width='stretch')

        latest = points[-1]
        st.caption(
            f"Tracking RAG status across {latest.total} projects for {person_name}. "
            f"Latest assessment: {formatter.format_long_date(latest.date)}"
        )

    def render_project_health(self, projects: List[Project]):
        """Current status donut and projects needing attention."""
        metrics = aggregate_project_metrics(projects)

        col1, col2 = st.columns([1, 1])
        with col1:
            st.markdown("### 🎯 Current Project Status")
            if metrics.is_empty:
                show_no_data("No projects have a current status yet.")
            else:
                counts = metrics.as_dict()
                df = pd.DataFrame({
                    'Status': [bucket.capitalize() for bucket in counts],
                    'Projects': list(counts.values()),
                })
                df = df[df['Projects'] > 0]
                fig = px.pie(
                    df, names='Status', values='Projects', hole=0.5,
                    color='Status',
                    color_discrete_map={bucket.capitalize(): RAG_COLORS[bucket] for bucket in counts},
                )
                fig.update_layout(height=350, margin=dict(l=20, r=20, t=20, b=20))
                st.plotly_chart(fig, width='stretch')

        with col2:
            st.markdown("### 🚨 Needs Attention")
            flagged = priority_projects(projects)
            if not flagged:
                st.success("No red, escalated or high-importance projects.")
            for project in flagged[:8]:
                latest = current_status(project)
                escalated = " · ⚠️ Client escalation" if latest and latest.client_escalation else ""
                st.markdown(
                    f"**{project.project_name}** — {formatter.rag_badge(latest.rag_status if latest else None)}"
                    f" · {formatter.maybe(project.importance)}{escalated}"
                )

    def render_weekly_report_trends(self):
        """Stats and trend of the weekly reports filed in this dashboard."""
        st.markdown("### 🗓️ Weekly Report Trends")
        try:
            stats = dashboard_client.get_dashboard_stats()
            trend_rows: List[Dict[str, Any]] = dashboard_client.get_dashboard_trends()
        except DashboardApiError as e:
            show_error_with_retry(f"Failed to load weekly report trends: {e}", key="weekly_trends")
            return

        col1, col2, col3, col4, col5 = st.columns(5)
        col1.metric("Reported Projects", stats.get('totalProjects', 0))
        col2.metric("🟢 Green", stats.get('greenProjects', 0))
        col3.metric("🟠 Amber", stats.get('amberProjects', 0))
        col4.metric("🔴 Red", stats.get('redProjects', 0))
        col5.metric("⚠️ Escalations", stats.get('escalations', 0))

        if not trend_rows:
            show_no_data("No weekly reports have been submitted yet.")
            return

        df = pd.DataFrame(trend_rows)
        df['date'] = pd.to_datetime(df['date'])
        df['total'] = df['green'] + df['amber'] + df['red']
        st.plotly_chart(trend_figure(df, title="Weekly Reports by RAG Status"), width='stretch')


# Global instance
analytics_overview = AnalyticsOverviewComponent()
