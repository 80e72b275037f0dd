from fastapi.testclient import TestClient

from bridge_pricing.main import app

client = TestClient(app)


def test_health_returns_200():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "default_base_rate_pct" in data
    assert data["policy"]["solver_step"] == 1000.0
    assert data["policy"]["ltv_bucket_bounds"] == [60, 70, 75]


def test_unknown_route_returns_404():
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
