import pytest


@pytest.fixture
def api_config(api_config):
    return api_config.model_copy(update={"api_key": "s3cret"})


def test_missing_key_is_rejected(client, transcoder, upload):
    response = client.post("/convert", files=upload)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
    assert transcoder.calls == []


def test_wrong_key_is_rejected(client, upload):
    response = client.post("/info", files=upload, headers={"X-API-Key": "guess"})

    assert response.status_code == 401


def test_non_ascii_key_is_rejected(client, transcoder, upload):
    response = client.post("/info", files=upload, headers={"X-API-Key": "café".encode("latin-1")})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
    assert transcoder.calls == []


def test_matching_key_is_accepted(client, upload):
    response = client.post("/compress/custom", files=upload, headers={"X-API-Key": "s3cret"})

    assert response.status_code == 200


def test_health_is_open(client):
    assert client.get("/health").status_code == 200
