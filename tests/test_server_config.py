"""
Tests for server configuration loading and validation.
"""

from server.config import ServerConfig


class TestServerConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("EXTERNAL_API_BASE_URL", "https://projects.example.com/")
        monkeypatch.delenv("ASSESSMENT_API_BASE_URL", raising=False)
        monkeypatch.setenv("EXTERNAL_API_TIMEOUT", "12.5")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:8501, https://dash.example.com ,")

        config = ServerConfig.from_env()

        assert config.external_api_base_url == "https://projects.example.com"
        assert config.assessment_api_base_url == "https://projects.example.com"
        assert config.external_api_timeout == 12.5
        assert config.port == 9000
        assert config.cors_origins == ["http://localhost:8501", "https://dash.example.com"]
        assert config.validate() == []

    def test_validate_reports_every_problem(self):
        config = ServerConfig(
            external_api_base_url="ftp://projects",
            assessment_api_base_url="",
            external_api_timeout=0,
            database_path="",
            host="0.0.0.0",
            port=70000,
            cors_origins=[],
        )
        errors = config.validate()
        assert len(errors) == 5
        assert "EXTERNAL_API_BASE_URL must start with http:// or https://" in errors
        assert "ASSESSMENT_API_BASE_URL is required" in errors
