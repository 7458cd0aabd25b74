"""
Smoke tests to verify the runtime stack is installed correctly.

These tests confirm that:
1. Python 3.11+ is installed (asyncio.Barrier in the race tests)
2. The service dependencies are importable
3. The project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys

import pytest


class TestPythonVersion:
    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, got "
            f"{sys.version_info.major}.{sys.version_info.minor}"
        )


class TestDependencies:
    @pytest.mark.parametrize(
        "module",
        [
            "fastapi",
            "pydantic",
            "structlog",
            "sqlalchemy.ext.asyncio",
            "asyncpg",
            "prometheus_client",
            "dotenv",
        ],
    )
    def test_importable(self, module: str) -> None:
        __import__(module)

    def test_pydantic_v2(self) -> None:
        import pydantic

        assert pydantic.VERSION.startswith("2")


class TestProject:
    def test_version(self, project_version: str) -> None:
        assert project_version == "0.1.0"

    def test_app_assembles(self) -> None:
        from reunite.api.main import app

        assert app.title == "Reunite Verification API"
