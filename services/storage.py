"""Local store for weekly status reports, technical reviews, LLM configuration and users

Rows are returned as camelCase dicts so the server can hand them straight
to the UI, matching the shape of the external projects API.
"""

from typing import Dict, Any, List, Optional
from datetime import date, datetime
import logging

from pydantic.alias_generators import to_camel

from database.db_connection import DatabaseConnection, get_db
from shared.schemas import WeeklyReportCreate, TechnicalReviewCreate, LlmConfigurationCreate

logger = logging.getLogger(__name__)

# Primary keys are exposed as 'id'
_ID_COLUMNS = {'user_id', 'report_id', 'review_id', 'config_id'}
_SPECIAL_KEYS = {'testing_qa': 'testingQA', 'display_name': 'name'}


def _to_api_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a DB row to camelCase keys with JSON-safe values"""
    result = {}
    for column, value in row.items():
        if column in _ID_COLUMNS:
            key = 'id'
        else:
            key = _SPECIAL_KEYS.get(column) or to_camel(column)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        result[key] = value
    return result


class DashboardStorage:
    """DuckDB-backed storage operations used by the dashboard server"""

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self._db = db

    @property
    def db(self) -> DatabaseConnection:
        if self._db is None:
            self._db = get_db()
        return self._db

    # ========================================================================
    # USERS
    # ========================================================================

    def get_users(self) -> List[Dict[str, Any]]:
        rows = self.db.fetch_dicts("SELECT * FROM app_user ORDER BY user_id")
        return [_to_api_row(row) for row in rows]

    def get_user(self, user_id: Optional[int]) -> Optional[Dict[str, Any]]:
        if user_id is None:
            return None
        rows = self.db.fetch_dicts("SELECT * FROM app_user WHERE user_id = ?", (user_id,))
        return _to_api_row(rows[0]) if rows else None

    # ========================================================================
    # WEEKLY STATUS REPORTS
    # ========================================================================

    def get_weekly_status_reports(self, project_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Weekly reports, newest reporting date first

        Args:
            project_id: Only reports for this project when given
        """
        query = "SELECT * FROM weekly_status_report"
        params = None
        if project_id is not None:
            query += " WHERE project_id = ?"
            params = (project_id,)
        query += " ORDER BY reporting_date DESC, report_id DESC"
        return [_to_api_row(row) for row in self.db.fetch_dicts(query, params)]

    def create_weekly_status_report(self, report: WeeklyReportCreate,
                                    submitted_by: Optional[int] = None) -> Dict[str, Any]:
        rows = self.db.fetch_dicts("""
            INSERT INTO weekly_status_report (
                project_id, reporting_date, project_importance, delivery_model,
                rag_status, client_escalation, client_escalation_details,
                key_weekly_updates, weekly_update_column, plan_for_next_week,
                issues_challenges, plan_for_green, current_sdlc_phase,
                sqa_remarks, submitted_by
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING *
        """, (
            report.project_id, report.reporting_date, report.project_importance,
            report.delivery_model, report.rag_status, report.client_escalation,
            report.client_escalation_details, report.key_weekly_updates,
            report.weekly_update_column, report.plan_for_next_week,
            report.issues_challenges, report.plan_for_green,
            report.current_sdlc_phase, report.sqa_remarks, submitted_by,
        ))
        created = _to_api_row(rows[0])
        logger.info(f"Weekly report created: {created['id']} for project {report.project_id}")
        return created

    # ========================================================================
    # TECHNICAL REVIEWS
    # ========================================================================

    def get_technical_reviews(self, project_id: Optional[int] = None) -> List[Dict[str, Any]]:
        query = "SELECT * FROM technical_review"
        params = None
        if project_id is not None:
            query += " WHERE project_id = ?"
            params = (project_id,)
        query += " ORDER BY review_date DESC, review_id DESC"
        return [_to_api_row(row) for row in self.db.fetch_dicts(query, params)]

    def create_technical_review(self, review: TechnicalReviewCreate,
                                conducted_by: Optional[int] = None) -> Dict[str, Any]:
        rows = self.db.fetch_dicts("""
            INSERT INTO technical_review (
                project_id, review_date, review_type, review_cycle_number,
                executive_summary, architecture_design_review, code_quality_standards,
                dev_ops_deployment_readiness, testing_qa, risk_identification,
                compliance_standards, action_items_recommendations,
                reviewer_sign_off, sqa_validation, conducted_by
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING *
        """, (
            review.project_id, review.review_date, review.review_type,
            review.review_cycle_number, review.executive_summary,
            review.architecture_design_review, review.code_quality_standards,
            review.dev_ops_deployment_readiness, review.testing_qa,
            review.risk_identification, review.compliance_standards,
            review.action_items_recommendations, review.reviewer_sign_off,
            review.sqa_validation, conducted_by,
        ))
        created = _to_api_row(rows[0])
        logger.info(f"Technical review created: {created['id']} for project {review.project_id}")
        return created

    # ========================================================================
    # LLM CONFIGURATION
    # ========================================================================

    def get_llm_configurations(self) -> List[Dict[str, Any]]:
        rows = self.db.fetch_dicts("SELECT * FROM llm_configuration ORDER BY config_id")
        return [_to_api_row(row) for row in rows]

    def get_active_llm_configuration(self) -> Optional[Dict[str, Any]]:
        rows = self.db.fetch_dicts("""
            SELECT * FROM llm_configuration
            WHERE is_active = TRUE
            ORDER BY config_id DESC
            LIMIT 1
        """)
        return _to_api_row(rows[0]) if rows else None

    def update_llm_configuration(self, config_id: int, is_active: bool) -> None:
        self.db.execute("""
            UPDATE llm_configuration
            SET is_active = ?, updated_at = now()
            WHERE config_id = ?
        """, (is_active, config_id))

    def create_llm_configuration(self, config: LlmConfigurationCreate,
                                 last_updated_by: Optional[int] = None) -> Dict[str, Any]:
        rows = self.db.fetch_dicts("""
            INSERT INTO llm_configuration (
                provider, model_name, temperature, max_tokens,
                prompt_template, is_active, last_updated_by
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            RETURNING *
        """, (
            config.provider, config.model_name, config.temperature,
            config.max_tokens, config.prompt_template, config.is_active,
            last_updated_by,
        ))
        return _to_api_row(rows[0])

    def replace_active_llm_configuration(self, config: LlmConfigurationCreate,
                                         last_updated_by: Optional[int] = None) -> Dict[str, Any]:
        """Deactivate every existing configuration and store config as the active one"""
        with self.db.transaction():
            for existing in self.get_llm_configurations():
                if existing['isActive']:
                    self.update_llm_configuration(existing['id'], False)
            # The replacement is always the active row, whatever the request said
            active = config.model_copy(update={"is_active": True})
            created = self.create_llm_configuration(active, last_updated_by)
        logger.info(f"LLM configuration {created['id']} is now active ({created['provider']}/{created['modelName']})")
        return created
