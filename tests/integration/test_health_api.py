import base64

from fastapi.testclient import TestClient

from pdf_processor.config import Settings


def _basic(raw: str) -> dict:
    return {"Authorization": "Basic " + base64.b64encode(raw.encode()).decode()}


class TestHealth:
    def test_ok_with_valid_credentials(self, client: TestClient, basic_headers: dict) -> None:
        response = client.get("/health", headers=basic_headers)

        assert response.status_code == 200
        assert response.json() == {"status": "OK", "message": "PDF processing API is running"}

    def test_missing_header_challenges(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="PDF Processor"'
        assert response.json() == {"error": "Authentication required"}

    def test_bearer_header_is_not_basic(self, client: TestClient, api_headers: dict) -> None:
        response = client.get("/health", headers=api_headers)
        assert response.status_code == 401

    def test_wrong_password(self, client: TestClient) -> None:
        response = client.get("/health", headers=_basic("admin:wrong"))

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}
        assert "www-authenticate" in response.headers

    def test_password_is_not_truncated_at_colon(self, client: TestClient) -> None:
        # configured password is "s3cret:with-colon"
        response = client.get("/health", headers=_basic("admin:s3cret"))
        assert response.status_code == 401

    def test_garbage_base64(self, client: TestClient) -> None:
        response = client.get("/health", headers={"Authorization": "Basic !!!not-base64!!!"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_no_separator(self, client: TestClient) -> None:
        response = client.get("/health", headers=_basic("admin"))
        assert response.status_code == 401

    def test_unconfigured_credentials(self, client: TestClient, settings: Settings, basic_headers: dict) -> None:
        settings.basic_auth_password = ""

        response = client.get("/health", headers=basic_headers)

        assert response.status_code == 500
        assert "Basic auth credentials not set" in response.json()["error"]


class TestTestPage:
    def test_serves_html(self, client: TestClient, basic_headers: dict) -> None:
        response = client.get("/test", headers=basic_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/process-pdf" in response.text

    def test_requires_basic_auth(self, client: TestClient) -> None:
        assert client.get("/test").status_code == 401


class TestUnknownRoutes:
    def test_not_found_is_json(self, client: TestClient) -> None:
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_wrong_method_is_json(self, client: TestClient, api_headers: dict) -> None:
        response = client.get("/process-pdf", headers=api_headers)

        assert response.status_code == 405
        assert "error" in response.json()
