"""Application constants and configuration."""

import os
from pathlib import Path

# Application constants
APP_TITLE = "Samiksha - Project Portfolio Dashboard 📊"
APP_SUBTITLE = "Project health, weekly status and AI portfolio assessments"

# External API (owns projects, users and assessments)
DEFAULT_EXTERNAL_API_BASE_URL = "http://34.63.198.88:8080"
DEFAULT_EXTERNAL_API_TIMEOUT = 30  # Seconds

# Local dashboard server (used by the Streamlit pages)
DASHBOARD_API_URL = os.getenv("DASHBOARD_API_URL", "http://localhost:8000")
DASHBOARD_API_TIMEOUT = 30

# Projects list
PROJECTS_PAGE_SIZE = 12
TREND_WEEKS = 8

# RAG buckets
RAG_BUCKETS = ('green', 'amber', 'red', 'error')
RAG_UNKNOWN = 'unknown'
RAG_ALIASES = {
    'yellow': 'amber',
}

# Sort priority (lower sorts first); unset values sort last
STATUS_SORT_ORDER = {
    'red': 0,
    'amber': 1,
    'green': 2,
}
IMPORTANCE_SORT_ORDER = {
    'high': 0,
    'medium': 1,
    'low': 2,
}
UNSET_SORT_RANK = 99

SORT_FIELDS = ('name', 'status', 'importance', 'manager')
ESCALATION_FILTERS = ('all', 'escalated', 'not_escalated')

# Form choices
RAG_STATUSES = ['Green', 'Amber', 'Red']
IMPORTANCE_LEVELS = ['Low', 'Medium', 'High', 'Critical']
DELIVERY_MODELS = ['Agile', 'Scrum', 'Kanban', 'Waterfall', 'Hybrid']
BILLING_MODELS = ['Time and Material', 'Fixed Price', 'Hybrid', 'Retainer', 'Fixed Bid']
TOWERS = ['Data & Analytics', 'Cloud', 'Digital', 'Security', 'Infrastructure', 'Tower 1', 'Tower 2']
SDLC_PHASES = ['Requirements', 'Design', 'Development', 'Testing', 'Deployment', 'Support']
REVIEW_TYPES = ['Architecture', 'Code Quality', 'DevOps', 'Security', 'Full Technical Review']
LLM_PROVIDERS = ['gemini', 'openai', 'claude', 'kimi']

# Assessment levels (navbar role -> assessment level)
ASSESSMENT_LEVELS = ('PROJECT_MANAGER', 'DELIVERY_MANAGER', 'ORG_HEAD')
ROLE_TO_ASSESSMENT_LEVEL = {
    'project_manager': 'PROJECT_MANAGER',
    'delivery_manager': 'DELIVERY_MANAGER',
    'org_head': 'ORG_HEAD',
}

# Roles allowed to manage LLM configuration
LLM_CONFIG_ROLES = ('delivery_manager', 'admin')

# Color schemes for RAG indicators
RAG_COLORS = {
    'green': '#22c55e',
    'amber': '#f59e0b',
    'red': '#ef4444',
    'error': '#6b7280',
    'unknown': '#9ca3af'
}

RAG_ICONS = {
    'green': '🟢',
    'amber': '🟠',
    'red': '🔴',
    'error': '⚪',
    'unknown': '⚪'
}

# ============================================================================
# DATABASE SETTINGS
# ============================================================================

# Database file path
# Using DuckDB subdirectory in application root
DATABASE_PATH = Path(__file__).parent.parent / "DuckDB" / "dashboard.duckdb"

# Database configuration
DATABASE_CONFIG = {
    'enable_query_logging': False,  # Set to True for debugging
    'connection_timeout': 30,        # Seconds
}
