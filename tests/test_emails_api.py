"""
Tests for the subscriber JSON endpoints.

- POST /email/create
- GET  /email/get
- PUT  /email/update
- POST /email/delete
- GET  /email/get_batch

The two GET routes take JSON bodies, so requests are sent with
``client.request(method, path, json=...)``.
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from mailinglist_api.app.core.config import Settings
from mailinglist_api.app.core.errors import StoreError
from mailinglist_api.app.main import create_app


BATCH_ERROR = "page and count fields are required and must be greater than 0"


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def call(client, method, path, body):
    return client.request(method, path, json=body)


# =============================================================================
# Create
# =============================================================================

class TestCreateEmail:

    def test_create_returns_new_record(self, client):
        response = call(client, "POST", "/email/create", {"Email": "a@x.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["Id"] == 1
        assert data["Email"] == "a@x.com"
        assert parse_ts(data["ConfirmedAt"]) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert data["OptOut"] is False

    def test_duplicate_returns_400_with_err(self, client):
        call(client, "POST", "/email/create", {"Email": "a@x.com"})

        response = call(client, "POST", "/email/create", {"Email": "a@x.com"})

        assert response.status_code == 400
        assert "UNIQUE" in response.json()["Err"]

    def test_missing_email_returns_400(self, client):
        response = call(client, "POST", "/email/create", {})
        assert response.status_code == 400
        assert "Email" in response.json()["Err"]

    def test_malformed_json_returns_400(self, client):
        response = client.post(
            "/email/create",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["Err"]

    def test_wrong_type_returns_400(self, client):
        response = call(client, "POST", "/email/create", {"Email": ["a@x.com"]})
        assert response.status_code == 400

    def test_wrong_method_is_rejected_without_body(self, client):
        response = call(client, "GET", "/email/create", {"Email": "a@x.com"})

        assert response.status_code == 405
        assert response.content == b""
        assert call(client, "GET", "/email/get", {"Email": "a@x.com"}).json() is None


# =============================================================================
# Get
# =============================================================================

class TestGetEmail:

    def test_get_existing(self, client):
        call(client, "POST", "/email/create", {"Email": "a@x.com"})

        response = call(client, "GET", "/email/get", {"Email": "a@x.com"})

        assert response.status_code == 200
        assert response.json()["Email"] == "a@x.com"

    def test_get_unknown_returns_null(self, client):
        response = call(client, "GET", "/email/get", {"Email": "nobody@x.com"})

        assert response.status_code == 200
        assert response.json() is None

    def test_post_is_not_allowed(self, client):
        response = call(client, "POST", "/email/get", {"Email": "a@x.com"})
        assert response.status_code == 405
        assert response.content == b""


# =============================================================================
# Update
# =============================================================================

class TestUpdateEmail:

    def test_update_unknown_email_creates_it(self, client):
        response = call(client, "PUT", "/email/update", {
            "Email": "new@x.com",
            "ConfirmedAt": "2024-03-04T05:06:07Z",
            "OptOut": False,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["Email"] == "new@x.com"
        assert parse_ts(data["ConfirmedAt"]) == datetime(2024, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        assert data["OptOut"] is False

    def test_update_existing_replaces_state(self, client):
        created = call(client, "POST", "/email/create", {"Email": "a@x.com"}).json()

        response = call(client, "PUT", "/email/update", {
            "Id": created["Id"],
            "Email": "a@x.com",
            "ConfirmedAt": "2022-01-01T00:00:00+00:00",
            "OptOut": True,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["Id"] == created["Id"]
        assert parse_ts(data["ConfirmedAt"]) == datetime(2022, 1, 1, tzinfo=timezone.utc)
        assert data["OptOut"] is True

    def test_missing_confirmed_at_means_never_confirmed(self, client):
        call(client, "PUT", "/email/update", {"Email": "a@x.com", "ConfirmedAt": "2022-01-01T00:00:00Z"})

        response = call(client, "PUT", "/email/update", {"Email": "a@x.com", "OptOut": False})

        assert response.status_code == 200
        assert parse_ts(response.json()["ConfirmedAt"]) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_invalid_timestamp_returns_400(self, client):
        response = call(client, "PUT", "/email/update", {"Email": "a@x.com", "ConfirmedAt": "yesterday"})

        assert response.status_code == 400
        assert "ConfirmedAt" in response.json()["Err"]
        assert call(client, "GET", "/email/get", {"Email": "a@x.com"}).json() is None

    def test_post_is_not_allowed(self, client):
        response = call(client, "POST", "/email/update", {"Email": "a@x.com"})
        assert response.status_code == 405


# =============================================================================
# Delete
# =============================================================================

class TestDeleteEmail:

    def test_delete_returns_opted_out_record(self, client):
        call(client, "POST", "/email/create", {"Email": "a@x.com"})

        response = call(client, "POST", "/email/delete", {"Email": "a@x.com"})

        assert response.status_code == 200
        assert response.json()["OptOut"] is True

    def test_deleted_record_still_retrievable(self, client):
        call(client, "POST", "/email/create", {"Email": "a@x.com"})
        call(client, "POST", "/email/delete", {"Email": "a@x.com"})

        data = call(client, "GET", "/email/get", {"Email": "a@x.com"}).json()

        assert data["Email"] == "a@x.com"
        assert data["OptOut"] is True

    def test_delete_unknown_returns_null(self, client):
        response = call(client, "POST", "/email/delete", {"Email": "nobody@x.com"})

        assert response.status_code == 200
        assert response.json() is None


# =============================================================================
# Batch listing
# =============================================================================

class TestGetEmailBatch:

    @pytest.fixture
    def five(self, client):
        for i in range(1, 6):
            call(client, "POST", "/email/create", {"Email": f"user{i}@x.com"})
        return client

    def test_pages_in_id_order(self, five):
        first = call(five, "GET", "/email/get_batch", {"Page": 1, "Count": 2})
        second = call(five, "GET", "/email/get_batch", {"Page": 2, "Count": 2})

        assert first.status_code == 200
        assert [e["Id"] for e in first.json()] == [1, 2]
        assert [e["Id"] for e in second.json()] == [3, 4]

    def test_excludes_opted_out(self, five):
        call(five, "POST", "/email/delete", {"Email": "user1@x.com"})

        data = call(five, "GET", "/email/get_batch", {"Page": 1, "Count": 10}).json()

        assert [e["Email"] for e in data] == [f"user{i}@x.com" for i in range(2, 6)]
        assert all(e["OptOut"] is False for e in data)

    @pytest.mark.parametrize("body", [
        {"Page": 0, "Count": 2},
        {"Page": 1, "Count": 0},
        {"Page": 1},
        {"Count": 5},
        {},
    ])
    def test_out_of_range_or_missing_returns_400(self, client, body):
        response = call(client, "GET", "/email/get_batch", body)

        assert response.status_code == 400
        assert response.json() == {"Err": BATCH_ERROR}

    @pytest.mark.parametrize("body", [
        {"Page": 1, "Count": 2**63},
        {"Page": 2**40, "Count": 2**40},
    ])
    def test_window_too_large_returns_400(self, client, body):
        response = call(client, "GET", "/email/get_batch", body)

        assert response.status_code == 400
        assert response.json() == {"Err": "page and count are too large"}

    def test_non_integer_page_returns_400(self, client):
        response = call(client, "GET", "/email/get_batch", {"Page": "first", "Count": 2})
        assert response.status_code == 400
        assert "Page" in response.json()["Err"]


# =============================================================================
# Failures
# =============================================================================

class TestFailures:

    def test_store_error_returns_400(self, client, app, monkeypatch):
        def broken(email):
            raise StoreError("database is locked")

        monkeypatch.setattr(app.state.store, "delete", broken)

        response = call(client, "POST", "/email/delete", {"Email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"Err": "database is locked"}

    def test_unserializable_result_returns_empty_500(self, client, app, monkeypatch):
        monkeypatch.setattr(app.state.store, "get", lambda email: {"unexpected": True})

        response = call(client, "GET", "/email/get", {"Email": "a@x.com"})

        assert response.status_code == 500
        assert response.content == b""

    def test_startup_fails_when_table_cannot_be_created(self, tmp_path):
        app = create_app(Settings(database_url=str(tmp_path / "missing" / "list.db")))
        with pytest.raises(StoreError):
            with TestClient(app):
                pass


# =============================================================================
# End to end
# =============================================================================

def test_create_delete_then_empty_batch(client):
    created = call(client, "POST", "/email/create", {"Email": "a@x.com"})
    assert created.status_code == 200
    assert created.json()["Id"] == 1
    assert created.json()["OptOut"] is False

    deleted = call(client, "POST", "/email/delete", {"Email": "a@x.com"})
    assert deleted.status_code == 200
    assert deleted.json()["OptOut"] is True

    batch = call(client, "GET", "/email/get_batch", {"Page": 1, "Count": 10})
    assert batch.status_code == 200
    assert batch.json() == []
