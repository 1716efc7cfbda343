"""Integration tests for the CSV import endpoint."""

from decimal import Decimal

from models import Snapshot
from tests.fixtures import SAMPLE_RJ_ROWS, SAMPLE_WS_ROWS, raymond_james_csv, wealthsimple_csv


def _upload(client, headers, content, filename="holdings.csv", **data):
    return client.post(
        "/api/imports",
        headers=headers,
        files={"file": (filename, content, "text/csv")},
        data=data,
    )


class TestImportSnapshot:
    """Tests for POST /api/imports."""

    def test_import_detects_source(self, client, auth_headers):
        response = _upload(client, auth_headers, wealthsimple_csv(*SAMPLE_WS_ROWS), snapshot_date="2024-06-28")
        assert response.status_code == 201
        data = response.json()
        assert data["source"] == "wealthsimple"
        assert data["snapshot_date"].startswith("2024-06-28")
        assert data["record_count"] == 2
        assert Decimal(data["metrics"]["total_market_value"]) == Decimal("2103.54")

    def test_import_with_explicit_source(self, client, auth_headers):
        response = _upload(client, auth_headers, raymond_james_csv(*SAMPLE_RJ_ROWS), source="raymond_james")
        assert response.status_code == 201
        assert response.json()["source"] == "raymond_james"

    def test_missing_columns_is_400_with_errors(self, client, auth_headers, db):
        response = _upload(client, auth_headers, b"Symbol,Price\nAAPL,1\n")
        assert response.status_code == 400
        body = response.json()
        assert body["detail"].startswith("Missing required columns")
        assert body["errors"]
        assert db.query(Snapshot).count() == 0

    def test_malformed_row_is_400(self, client, auth_headers, db):
        bad = SAMPLE_WS_ROWS[0].replace("1501.5449", "lots")
        response = _upload(client, auth_headers, wealthsimple_csv(bad))
        assert response.status_code == 400
        assert response.json()["errors"] == ["Row 1: could not parse Market Value"]
        assert db.query(Snapshot).count() == 0

    def test_out_of_range_cell_is_400(self, client, auth_headers, db):
        bad = SAMPLE_RJ_ROWS[0].replace('"1,905.00"', "1e30")
        response = _upload(client, auth_headers, raymond_james_csv(bad, SAMPLE_RJ_ROWS[1]))
        assert response.status_code == 400
        assert response.json()["errors"] == ["Row 1: could not parse Market Value"]
        assert db.query(Snapshot).count() == 0

    def test_empty_file_is_400(self, client, auth_headers):
        response = _upload(client, auth_headers, b"")
        assert response.status_code == 400

    def test_source_mismatch_is_400(self, client, auth_headers):
        response = _upload(client, auth_headers, wealthsimple_csv(*SAMPLE_WS_ROWS), source="raymond_james")
        assert response.status_code == 400

    def test_unknown_source_is_400(self, client, auth_headers):
        response = _upload(client, auth_headers, wealthsimple_csv(*SAMPLE_WS_ROWS), source="questrade")
        assert response.status_code == 400
        assert "Unknown source" in response.json()["detail"]

    def test_bad_snapshot_date_is_400(self, client, auth_headers):
        response = _upload(client, auth_headers, wealthsimple_csv(*SAMPLE_WS_ROWS), snapshot_date="June 28")
        assert response.status_code == 400

    def test_oversized_upload_is_413(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr("api.imports.settings.MAX_UPLOAD_BYTES", 10)
        response = _upload(client, auth_headers, wealthsimple_csv(*SAMPLE_WS_ROWS))
        assert response.status_code == 413

    def test_requires_user(self, client):
        response = _upload(client, {}, wealthsimple_csv(*SAMPLE_WS_ROWS))
        assert response.status_code == 401
