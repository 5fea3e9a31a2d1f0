from fastapi.testclient import TestClient
from pytest_mock import MockerFixture


class TestHealthcheck:
    def test_healthcheck_success(self, test_client: TestClient) -> None:
        """Test healthcheck endpoint when all services are healthy."""
        response = test_client.get("/healthcheck")
        assert response.status_code == 200
        data = response.json()
        assert data["api"]["status"] == "ok"
        assert data["database"]["status"] == "ok"
        assert data["bus"]["status"] == "ok"
        assert data["bus"]["consumers"] == 1

    def test_healthcheck_database_down(
        self, test_client: TestClient, mocker: MockerFixture
    ) -> None:
        page_store = test_client.app.state.page_store
        mocker.patch.object(page_store, "ping", side_effect=Exception("no database"))

        response = test_client.get("/healthcheck")

        assert response.status_code == 503
        data = response.json()
        assert data["database"] == {"status": "error", "message": "no database"}
