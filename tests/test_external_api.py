"""
Tests for the external API client (HTTP layer mocked).
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from services.external_api import ExternalApiClient, ExternalApiError


def _response(status_code=200, json_data=None, text="", content_type="application/json; charset=utf-8",
              reason="OK"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    resp.text = text
    resp.headers = {"content-type": content_type}
    if isinstance(json_data, Exception):
        resp.json.side_effect = json_data
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def client():
    return ExternalApiClient(base_url="http://api.test/", assessment_base_url="http://assess.test",
                             timeout=5)


class TestTransport:
    def test_passes_timeout_and_url(self, client):
        with patch("services.external_api.requests.request", return_value=_response(json_data=[])) as mock:
            assert client.get_projects() == []
        mock.assert_called_once_with("GET", "http://api.test/api/projects/", timeout=5)

    def test_html_error_page(self, client):
        resp = _response(status_code=502, text="<!DOCTYPE html><html>Bad Gateway</html>",
                         content_type="text/html", reason="Bad Gateway")
        with patch("services.external_api.requests.request", return_value=resp):
            with pytest.raises(ExternalApiError) as exc_info:
                client.get_projects()
        assert str(exc_info.value) == "Server returned HTML error page"
        assert exc_info.value.status_code == 502

    def test_json_error_message(self, client):
        resp = _response(status_code=400, json_data={"message": "projectName is required"},
                         text='{"message": "projectName is required"}', reason="Bad Request")
        with patch("services.external_api.requests.request", return_value=resp):
            with pytest.raises(ExternalApiError, match="projectName is required"):
                client.create_project({})

    def test_plain_error_falls_back_to_status(self, client):
        resp = _response(status_code=500, json_data=ValueError("no json"), text="boom",
                         content_type="text/plain", reason="Internal Server Error")
        with patch("services.external_api.requests.request", return_value=resp):
            with pytest.raises(ExternalApiError, match="External API error: 500 Internal Server Error"):
                client.get_projects()

    def test_non_json_content_type(self, client):
        resp = _response(text="<html></html>", content_type="text/html")
        with patch("services.external_api.requests.request", return_value=resp):
            with pytest.raises(ExternalApiError, match="Invalid content type, expected JSON"):
                client.get_projects()

    def test_timeout(self, client):
        with patch("services.external_api.requests.request", side_effect=requests.Timeout()):
            with pytest.raises(ExternalApiError, match="timed out after 5s"):
                client.get_projects()

    def test_connection_error(self, client):
        with patch("services.external_api.requests.request",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ExternalApiError, match="Could not reach external API"):
                client.get_users()


class TestProjects:
    def test_get_project_matches_id_as_string(self, client):
        projects = [{"projectId": 1, "projectName": "Apollo"}, {"projectId": "2", "projectName": "Borealis"}]
        with patch("services.external_api.requests.request", return_value=_response(json_data=projects)):
            assert client.get_project(2)["projectName"] == "Borealis"
            assert client.get_project("1")["projectName"] == "Apollo"
            assert client.get_project(3) is None

    def test_non_list_payload_rejected(self, client):
        with patch("services.external_api.requests.request", return_value=_response(json_data={"items": []})):
            with pytest.raises(ExternalApiError):
                client.get_projects()


class TestUsers:
    def test_filters_incomplete_users(self, client):
        users = [
            {"userId": "a", "preferredName": "Ani", "role": "DELIVERY_MANAGER", "email": "ani@x"},
            {"userId": "b", "preferredName": None, "role": "PROJECT_MANAGER"},
            {"userId": "c", "preferredName": "Raja"},
        ]
        with patch("services.external_api.requests.request", return_value=_response(json_data=users)):
            assert client.get_users() == [{"userId": "a", "preferredName": "Ani", "role": "DELIVERY_MANAGER"}]


class TestAssessments:
    def test_dashboard_query_and_single_object(self, client):
        with patch("services.external_api.requests.request",
                   return_value=_response(json_data={"assessmentId": 1})) as mock:
            result = client.get_assessment_dashboard("Ani", "DELIVERY_MANAGER")
        assert result == [{"assessmentId": 1}]
        mock.assert_called_once_with(
            "GET",
            "http://assess.test/api/organizational-assessments/dashboard",
            timeout=5,
            params={"assessedPersonName": "Ani", "assessmentLevel": "DELIVERY_MANAGER"},
        )

    def test_generate_posts_payload(self, client):
        payload = {"assessmentLevel": "ORG_HEAD", "assessedPersonName": "Deepa"}
        with patch("services.external_api.requests.request",
                   return_value=_response(json_data={"status": "queued"})) as mock:
            assert client.generate_assessment(payload) == {"status": "queued"}
        mock.assert_called_once_with(
            "POST",
            "http://assess.test/api/organizational-assessments/generate",
            timeout=5,
            json=payload,
        )
