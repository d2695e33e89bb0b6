"""
Client used by the Streamlit pages to talk to the dashboard server.
"""

import logging
from typing import Optional, Dict, Any, List

import requests

from config.constants import DASHBOARD_API_URL, DASHBOARD_API_TIMEOUT

logger = logging.getLogger(__name__)


class DashboardApiError(RuntimeError):
    """A dashboard server call failed; message is suitable for display."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class DashboardClient:
    """Calls the dashboard server routes and returns decoded JSON."""

    def __init__(self, base_url: str = DASHBOARD_API_URL, timeout: float = DASHBOARD_API_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise DashboardApiError(f"The dashboard server did not respond within {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"Dashboard server unreachable at {url}: {e}")
            raise DashboardApiError(f"Could not reach the dashboard server: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            message = f"HTTP error! status: {resp.status_code}"
            errors = []
            if isinstance(body, dict):
                message = body.get('message') or message
                if body.get('error'):
                    message = f"{message}: {body['error']}"
                errors = body.get('errors') or []
            logger.error(f"{method} {path} failed: {message}")
            raise DashboardApiError(message, status_code=resp.status_code, errors=errors)

        return body

    # Projects and users
    def get_projects(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/api/projects') or []

    def create_project(self, payload: Dict[str, Any]) -> Any:
        return self._request('POST', '/api/projects', json=payload)

    def get_users(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/api/users') or []

    # Assessments
    def get_assessments(self, assessed_person_name: str, assessment_level: str) -> List[Dict[str, Any]]:
        return self._request(
            'GET', '/api/organizational-assessments/dashboard',
            params={'assessedPersonName': assessed_person_name, 'assessmentLevel': assessment_level},
        ) or []

    def generate_assessment(self, payload: Dict[str, Any]) -> Any:
        return self._request('POST', '/api/organizational-assessments/generate', json=payload)

    # Local store
    def get_weekly_reports(self, project_id: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'projectId': project_id} if project_id is not None else None
        return self._request('GET', '/api/weekly-reports', params=params) or []

    def create_weekly_report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/api/weekly-reports', json=payload)

    def get_technical_reviews(self, project_id: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'projectId': project_id} if project_id is not None else None
        return self._request('GET', '/api/technical-reviews', params=params) or []

    def create_technical_review(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/api/technical-reviews', json=payload)

    def get_llm_config(self) -> Optional[Dict[str, Any]]:
        return self._request('GET', '/api/llm-config')

    def save_llm_config(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/api/llm-config', json=payload)

    def get_dashboard_stats(self) -> Dict[str, Any]:
        return self._request('GET', '/api/dashboard/stats')

    def get_dashboard_trends(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/api/dashboard/trends') or []


# Global instance
dashboard_client = DashboardClient()
