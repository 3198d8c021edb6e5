def test_health(client):
    response = client.get("/api/v1/health/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready_round_trips_database(client):
    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
