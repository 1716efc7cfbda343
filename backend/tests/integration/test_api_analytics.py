"""Integration tests for analytics API endpoints."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from tests.fixtures import create_external_account, create_snapshot


class TestAnalyticsSummary:
    """Tests for GET /api/analytics."""

    def test_summary(self, client, auth_headers, snapshot):
        response = client.get("/api/analytics", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["snapshot"]["id"] == snapshot.id
        assert data["top_performers"][0]["symbol"] == "AAPL"
        assert data["bottom_performers"][0]["symbol"] == "XBB"
        assert {a["category"] for a in data["allocation"]} == {"Equities", "Fixed Income"}

    def test_summary_without_snapshots_is_404(self, client, auth_headers):
        assert client.get("/api/analytics", headers=auth_headers).status_code == 404

    def test_summary_for_missing_snapshot_is_404(self, client, auth_headers, snapshot):
        response = client.get("/api/analytics?snapshot_id=missing", headers=auth_headers)
        assert response.status_code == 404


class TestGrowth:
    """Tests for GET /api/analytics/growth."""

    def test_combined_series(self, client, auth_headers, db):
        create_snapshot(db, "raymond_james", datetime(2024, 1, 1), Decimal("1000"))
        create_snapshot(db, "raymond_james", datetime(2024, 3, 1), Decimal("1200"))
        create_snapshot(db, "wealthsimple", datetime(2024, 2, 1), Decimal("500"))

        response = client.get("/api/analytics/growth", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert [p["date"] for p in data] == ["2024-01-01", "2024-02-01", "2024-03-01"]
        assert Decimal(data[1]["source_values"]["raymond_james"]) == Decimal("1000")
        assert Decimal(data[1]["total_portfolio_value"]) == Decimal("1500")
        assert Decimal(data[0]["period_change"]) == Decimal("0")

    def test_single_source_series(self, client, auth_headers, db):
        snap = create_snapshot(db, "wealthsimple", datetime(2024, 2, 1), Decimal("500"))
        create_snapshot(db, "raymond_james", datetime(2024, 1, 1), Decimal("1000"))

        response = client.get("/api/analytics/growth?source=wealthsimple", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["snapshot_id"] == snap.id
        assert data[0]["external_is_live"] is True

    def test_sources_filter(self, client, auth_headers, db):
        create_snapshot(db, "raymond_james", datetime(2024, 1, 1), Decimal("1000"))
        create_snapshot(db, "wealthsimple", datetime(2024, 2, 1), Decimal("500"))

        data = client.get("/api/analytics/growth?sources=raymond_james", headers=auth_headers).json()
        assert [p["source_values"] for p in data] == [{"raymond_james": "1000.00"}]

    def test_external_only_series(self, client, auth_headers, db):
        create_external_account(
            db, "Bank", "Savings", "Savings",
            entries=[(Decimal("100"), datetime(2024, 1, 1)), (Decimal("150"), datetime(2024, 1, 5))],
        )
        data = client.get("/api/analytics/growth", headers=auth_headers).json()
        assert [Decimal(p["net_worth"]) for p in data] == [Decimal("100"), Decimal("150")]
        assert Decimal(data[1]["period_change"]) == Decimal("50")

    def test_range_filter(self, client, auth_headers, db):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        create_snapshot(db, "raymond_james", now - timedelta(days=400), Decimal("1000"))
        create_snapshot(db, "raymond_james", now - timedelta(days=10), Decimal("1100"))

        all_points = client.get("/api/analytics/growth?range=ALL", headers=auth_headers).json()
        recent = client.get("/api/analytics/growth?range=3M", headers=auth_headers).json()
        assert len(all_points) == 2
        assert len(recent) == 1

    def test_invalid_range_is_422(self, client, auth_headers):
        assert client.get("/api/analytics/growth?range=2W", headers=auth_headers).status_code == 422

    def test_unknown_source_is_400(self, client, auth_headers):
        response = client.get("/api/analytics/growth?sources=questrade", headers=auth_headers)
        assert response.status_code == 400

    def test_empty(self, client, auth_headers):
        response = client.get("/api/analytics/growth", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []


class TestNetWorth:
    """Tests for GET /api/analytics/net-worth."""

    def test_net_worth(self, client, auth_headers, db, external_account, mortgage_account):
        create_snapshot(db, "raymond_james", datetime(2024, 1, 1), Decimal("1000"))

        response = client.get("/api/analytics/net-worth", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["external_assets"]) == Decimal("1500")
        assert Decimal(data["external_debt"]) == Decimal("2000")
        assert Decimal(data["total_net_worth"]) == Decimal("500")
        assert data["institutions"][0]["institution_name"] == "Big Bank"
