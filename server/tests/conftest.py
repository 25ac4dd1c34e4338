# ─────────────────────────────────────────────────────────────────────────────
# Test Fixtures — shared across all tests
# ─────────────────────────────────────────────────────────────────────────────


import pytest
from httpx import ASGITransport, AsyncClient

from quotegate.config import Settings
from quotegate.main import create_app
from quotegate.services.admission import AdmissionController
from quotegate.services.pipeline import RequestOrchestrator

from tests.fakes import FakeClock, FakeProvider


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing — fake credential, console logs."""
    return Settings(
        gemini_api_key="test-key",
        log_json=False,
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def admission(test_settings: Settings) -> AdmissionController:
    return AdmissionController.from_settings(test_settings)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def orchestrator(
    admission: AdmissionController, fake_provider: FakeProvider, test_settings: Settings
) -> RequestOrchestrator:
    return RequestOrchestrator(admission, fake_provider, test_settings)


@pytest.fixture
async def client(
    test_settings: Settings,
    admission: AdmissionController,
    fake_provider: FakeProvider,
    orchestrator: RequestOrchestrator,
):
    """httpx AsyncClient with manually-initialized app state.

    ASGITransport doesn't run the lifespan, so app.state is filled in here.
    """
    app = create_app()
    app.state.settings = test_settings
    app.state.admission = admission
    app.state.provider = fake_provider
    app.state.orchestrator = orchestrator

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
