"""
Client for the external projects, users and assessments API.

Every call carries an explicit timeout and is attempted once.
"""

import logging
from typing import Optional, Dict, Any, List, Union

import requests

from config.constants import DEFAULT_EXTERNAL_API_BASE_URL, DEFAULT_EXTERNAL_API_TIMEOUT

logger = logging.getLogger(__name__)

JsonPayload = Union[Dict[str, Any], List[Any]]


class ExternalApiError(RuntimeError):
    """The external API could not be reached or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExternalApiClient:
    """Thin wrapper over the external REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_EXTERNAL_API_BASE_URL,
        assessment_base_url: Optional[str] = None,
        timeout: float = DEFAULT_EXTERNAL_API_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.assessment_base_url = (assessment_base_url or base_url).rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _request(self, method: str, url: str, **kwargs) -> JsonPayload:
        logger.info(f"{method} {url}")
        try:
            resp = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"External API timed out after {self.timeout}s: {url}")
            raise ExternalApiError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"External API unreachable: {url}: {e}")
            raise ExternalApiError(f"Could not reach external API: {type(e).__name__}: {e}") from e

        if not resp.ok:
            text = resp.text or ""
            if text.lstrip().startswith("<!DOCTYPE"):
                message = "Server returned HTML error page"
            else:
                message = self._error_message(resp) or f"External API error: {resp.status_code} {resp.reason}"
            logger.error(f"External API error {resp.status_code} for {url}: {message}")
            raise ExternalApiError(message, status_code=resp.status_code)

        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error(f"Unexpected content type '{content_type}' from {url}")
            raise ExternalApiError("Invalid content type, expected JSON", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalApiError(f"Invalid JSON from external API: {e}", status_code=resp.status_code) from e

        size = len(data) if isinstance(data, (list, dict)) else 1
        logger.info(f"External API returned {size} {'items' if isinstance(data, list) else 'fields'} from {url}")
        return data

    @staticmethod
    def _error_message(resp: requests.Response) -> Optional[str]:
        try:
            body = resp.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("message") or body.get("error")
        return None

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def get_projects(self) -> List[Dict[str, Any]]:
        data = self._request("GET", f"{self.base_url}/api/projects/")
        if not isinstance(data, list):
            raise ExternalApiError("Expected a list of projects")
        return data

    def get_project(self, project_id: Union[int, str]) -> Optional[Dict[str, Any]]:
        """Project from the full list, or None when the id is not present."""
        wanted = str(project_id)
        for project in self.get_projects():
            if str(project.get("projectId")) == wanted:
                return project
        return None

    def create_project(self, payload: Dict[str, Any]) -> JsonPayload:
        return self._request("POST", f"{self.base_url}/api/projects/", json=payload)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_users(self) -> List[Dict[str, Any]]:
        """Users with a preferred name and a role, as {userId, preferredName, role}."""
        data = self._request("GET", f"{self.base_url}/api/users")
        if not isinstance(data, list):
            raise ExternalApiError("Expected a list of users")
        return [
            {"userId": user.get("userId"), "preferredName": user["preferredName"], "role": user["role"]}
            for user in data
            if isinstance(user, dict) and user.get("preferredName") and user.get("role")
        ]

    # ------------------------------------------------------------------
    # Organizational assessments
    # ------------------------------------------------------------------
    def get_assessment_dashboard(self, assessed_person_name: str, assessment_level: str) -> List[Dict[str, Any]]:
        data = self._request(
            "GET",
            f"{self.assessment_base_url}/api/organizational-assessments/dashboard",
            params={"assessedPersonName": assessed_person_name, "assessmentLevel": assessment_level},
        )
        if isinstance(data, dict):
            return [data]
        return data

    def generate_assessment(self, payload: Dict[str, Any]) -> JsonPayload:
        return self._request(
            "POST",
            f"{self.assessment_base_url}/api/organizational-assessments/generate",
            json=payload,
        )
