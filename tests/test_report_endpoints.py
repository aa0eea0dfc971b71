try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import date

import httpx
import pytest

from selfreview.core.config import GenerationSettings
from selfreview.core.errors import GenerationError
from selfreview.main import app
from selfreview.services.report_generator import ReportGenerator

pytestmark = pytest.mark.anyio("asyncio")


class BrokenGenerator(ReportGenerator):
    async def generate(self, data, *, job_name: str = "") -> str:
        raise GenerationError("Gemini did not return a response.")


@pytest.fixture()
def generator():
    from selfreview import dependencies

    instance = ReportGenerator(GenerationSettings(simulated_latency_seconds=0))
    app.dependency_overrides.clear()
    app.dependency_overrides[dependencies.get_report_generator] = lambda: instance
    yield instance
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(generator):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as test_client:
        yield test_client


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_parse_csv_upload(client):
    response = await client.post(
        "/api/files/parse",
        files={"file": ("tasks.csv", b"Task,Hours\nWrite docs,2\n", "text/csv")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["file_name"] == "tasks.csv"
    assert body["headers"] == ["Task", "Hours"]
    assert body["summary"]["total_rows"] == 1


async def test_parse_rejects_unsupported_type(client):
    response = await client.post(
        "/api/files/parse", files={"file": ("notes.txt", b"hello", "text/plain")}
    )
    assert response.status_code == 415


async def test_parse_rejects_unreadable_workbook(client):
    response = await client.post(
        "/api/files/parse", files={"file": ("broken.xlsx", b"not a zip", "application/zip")}
    )
    assert response.status_code == 422


async def test_generate_from_daily_records(client):
    response = await client.post(
        "/api/reports/generate",
        json={
            "user_name": "Alex",
            "job_name": "Engineer",
            "daily_records": {
                "2025-01-01": {"date": "2025-01-01", "content": "Planned"},
                "2025-01-02": {"date": "2025-01-02", "content": "Built"},
            },
        },
    )

    assert response.status_code == 200
    report = response.json()
    assert report["id"].startswith("report-")
    assert report["status"] == "draft"
    assert report["source"]["daily_record"] is True
    assert report["content"].startswith("## Self-Assessment Report")
    assert "- Record 1: Built\n- Record 2: Planned" in report["content"]


async def test_generate_from_tracker_data(client, jira_data):
    response = await client.post(
        "/api/reports/generate",
        json={
            "user_name": "Alex",
            "tracker_platform": "jira",
            "tracker_data": jira_data.model_dump(mode="json"),
        },
    )

    assert response.status_code == 200
    assert "### Performance Evaluation" in response.json()["content"]


async def test_generate_without_data_is_rejected(client):
    response = await client.post("/api/reports/generate", json={"user_name": "Alex"})
    assert response.status_code == 400


async def test_generate_requires_user_name(client):
    response = await client.post("/api/reports/generate", json={"user_name": ""})
    assert response.status_code == 422


async def test_generation_failure_is_bad_gateway(client):
    from selfreview import dependencies

    app.dependency_overrides[dependencies.get_report_generator] = lambda: BrokenGenerator(
        GenerationSettings()
    )
    response = await client.post(
        "/api/reports/generate",
        json={
            "user_name": "Alex",
            "daily_records": {"2025-01-01": {"date": "2025-01-01", "content": "Planned"}},
        },
    )
    assert response.status_code == 502


async def test_export_returns_markdown_attachment(client):
    response = await client.post("/api/reports/export", json={"content": "# Report\n"})

    assert response.status_code == 200
    assert response.text == "# Report\n"
    assert response.headers["content-type"].startswith("text/markdown")
    expected = f'attachment; filename="report_{date.today().isoformat()}.md"'
    assert response.headers["content-disposition"] == expected


async def test_cors_preflight_allows_any_origin_by_default(client):
    response = await client.options(
        "/api/jira/myself",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


async def test_cors_preflight_honors_configured_origins():
    from selfreview.core.config import AppSettings
    from selfreview.main import create_app

    restricted = create_app(AppSettings(cors_allowed_origins="http://ui.test, http://admin.test"))
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=restricted), base_url="http://testserver"
    ) as test_client:
        allowed = await test_client.options(
            "/api/createdaily",
            headers={"Origin": "http://ui.test", "Access-Control-Request-Method": "POST"},
        )
        denied = await test_client.options(
            "/api/createdaily",
            headers={"Origin": "http://evil.test", "Access-Control-Request-Method": "POST"},
        )

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "http://ui.test"
    assert denied.status_code == 400
    assert "access-control-allow-origin" not in denied.headers
