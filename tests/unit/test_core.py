"""
Core Utility Tests
==================
Result conventions, logging setup and settings.
"""

import pytest

from diacv.api.schemas import calc_response
from diacv.config import Settings
from diacv.core.logger import setup_logger
from diacv.core.results import PIPE_ERROR_PREFIX, is_error, returns_error_string


class TestResultConventions:

    def test_decorator_converts_exceptions(self):
        @returns_error_string()
        def divide(a, b):
            return a / b

        assert divide(1, 2) == 0.5
        assert divide(1, 0) == "Error: division by zero"

    def test_decorator_prefix(self):
        @returns_error_string(PIPE_ERROR_PREFIX)
        def fail():
            raise ValueError("boom")

        assert fail() == "#ERROR: boom"

    def test_is_error(self):
        assert is_error("No solution found")
        assert not is_error(1.0)
        assert not is_error([1.0, 2.0])

    def test_calc_response_ok(self):
        response = calc_response("f", [[1.0, 2.0]])
        assert response.ok is True
        assert response.result == [[1.0, 2.0]]
        assert response.error is None

    def test_calc_response_error(self):
        response = calc_response("f", "DATA OUT OF RANGE")
        assert response.ok is False
        assert response.result is None
        assert response.error == "DATA OUT OF RANGE"

    def test_calc_response_not_finite(self):
        response = calc_response("f", float("nan"))
        assert response.ok is False
        assert response.error == "Error: Result is not a finite number"


class TestLoggerSetup:

    def test_file_logging(self, tmp_path):
        log_file = setup_logger(level="DEBUG", console=False, file=True, log_dir=tmp_path)
        try:
            assert log_file == tmp_path / "diacv.log"
        finally:
            setup_logger(level="INFO")

    def test_console_only(self):
        assert setup_logger(level="WARNING", file=False) is None
        setup_logger(level="INFO")


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DIACV_DEFAULT_FLUID", "DIACV_REFERENCE_TEMP_C", "DIACV_INTERSECTION_SAMPLES"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()
        assert settings.default_fluid == "Water"
        assert settings.reference_temp_c == pytest.approx(20.0)
        assert settings.intersection_samples == 500

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DIACV_REFERENCE_TEMP_C", "15")
        monkeypatch.setenv("DIACV_CORS_ORIGINS", "http://a.example, http://b.example")
        monkeypatch.setenv("DIACV_LOG_TO_FILE", "yes")

        settings = Settings()
        assert settings.reference_temp_c == pytest.approx(15.0)
        assert settings.cors_origins == ["http://a.example", "http://b.example"]
        assert settings.log_to_file is True
