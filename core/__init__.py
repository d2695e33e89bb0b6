"""
Core modules for the Portfolio Status Dashboard
"""

from .rag_status import (
    normalize_rag_status,
    display_rag_status,
    status_rank,
    importance_rank,
    health_score_band,
)

from .aggregation import (
    PortfolioMetrics,
    StrategicGroup,
    select_current_status,
    current_status,
    status_history,
    aggregate_project_metrics,
    aggregate_status_counts,
    aggregate_assessment_metrics,
    extract_strategic_group,
    priority_projects,
    build_dashboard_stats,
    metrics_from,
)

from .trends import (
    select_assessment,
    build_trend_series,
    has_trend_data,
    build_weekly_trends,
    trends_to_frame,
)

from .project_filters import (
    ProjectFilters,
    Page,
    filter_projects,
    sort_projects,
    paginate,
    clamp_page,
    manager_names,
    find_project,
)

__all__ = [
    # RAG status
    'normalize_rag_status',
    'display_rag_status',
    'status_rank',
    'importance_rank',
    'health_score_band',

    # Aggregation
    'PortfolioMetrics',
    'StrategicGroup',
    'select_current_status',
    'current_status',
    'status_history',
    'aggregate_project_metrics',
    'aggregate_status_counts',
    'aggregate_assessment_metrics',
    'extract_strategic_group',
    'priority_projects',
    'build_dashboard_stats',
    'metrics_from',

    # Trends
    'select_assessment',
    'build_trend_series',
    'has_trend_data',
    'build_weekly_trends',
    'trends_to_frame',

    # Projects list
    'ProjectFilters',
    'Page',
    'filter_projects',
    'sort_projects',
    'paginate',
    'clamp_page',
    'manager_names',
    'find_project',
]
