"""
API tests using the FastAPI TestClient.

Every request is served from the sample data root via the `client` fixture,
which overrides the data store and settings dependencies.
"""

import json

import pytest

from pulse.registry import get_all_metrics


pytestmark = pytest.mark.integration


class TestHealth:
    """Root and health endpoints."""

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client) -> None:
        body = client.get("/").json()
        assert body["name"] == "n8n Pulse API"
        assert body["docs"] == "/docs"


class TestMetricsAPI:
    """/metrics endpoints."""

    def test_list_metrics(self, client) -> None:
        body = client.get("/metrics").json()
        assert len(body) == len(get_all_metrics())
        assert body[0]["id"] == "github-stars"
        assert body[0]["sourceLabel"] == "GitHub"

    def test_get_metric_resolves_overrides(self, client) -> None:
        body = client.get("/metrics/templates-views").json()
        assert body["sourceId"] == "templates"
        assert body["file"] == "/data/history/creators-stats.json"

    def test_unknown_metric(self, client) -> None:
        assert client.get("/metrics/nope").status_code == 404
        assert client.get("/metrics/nope/data").status_code == 404
        assert client.get("/metrics/nope/predictions").status_code == 404

    def test_metric_data_keeps_zeros(self, client) -> None:
        body = client.get("/metrics/github-stars/data").json()
        assert body["granularity"] == "monthly"
        assert body["excludeZero"] is True
        assert body["data"][0] == {"date": "2024-01", "value": 0}

    def test_metric_data_granularity_fallback(self, client) -> None:
        body = client.get("/metrics/templates-total/data", params={"granularity": "daily"}).json()
        assert body["granularity"] == "monthly"

    def test_invalid_granularity(self, client) -> None:
        assert client.get("/metrics/github-stars/data", params={"granularity": "hourly"}).status_code == 422

    def test_missing_file_is_not_found(self, client) -> None:
        assert client.get("/metrics/forum-users/data").status_code == 404

    def test_next_milestone_predictions(self, client) -> None:
        body = client.get("/metrics/github-stars/predictions").json()

        assert [f["prediction"]["milestone"] for f in body] == [125000, 150000, 175000]
        assert [f["milestoneLabel"] for f in body] == ["125.0K", "150.0K", "175.0K"]
        assert all(f["metricId"] == "github-stars" for f in body)
        assert body[0]["prediction"]["currentValue"] == 105000

    def test_trailing_zero_month_is_not_the_current_value(self, client, data_root, github_history) -> None:
        github_history["monthly"].append({"date": "2024-08", "stars": 0, "forks": 0})
        (data_root / "data" / "github-history.json").write_text(json.dumps(github_history), encoding='utf-8')

        body = client.get("/metrics/github-stars/predictions").json()

        assert [f["prediction"]["milestone"] for f in body] == [125000, 150000, 175000]
        assert all(f["prediction"]["currentValue"] == 105000 for f in body)

    def test_single_milestone_prediction(self, client) -> None:
        body = client.get("/metrics/github-stars/predictions", params={"milestone": 100000}).json()

        assert len(body) == 1
        prediction = body[0]["prediction"]
        assert prediction["predictedDate"] is None
        assert prediction["confidence"] == "high"
        assert body[0]["predictedDateLabel"] == "Unknown"

    def test_non_positive_milestone_rejected(self, client) -> None:
        assert client.get("/metrics/github-stars/predictions", params={"milestone": 0}).status_code == 422


class TestSeriesAPI:
    """/series endpoint."""

    def test_two_metrics(self, client) -> None:
        body = client.get("/series", params={"m": "github-stars,discord-members", "range": "all"}).json()

        assert [d["metricId"] for d in body["datasets"]] == ["github-stars", "discord-members"]
        assert body["dualAxis"] is True
        assert body["range"] is None
        assert all(p["value"] != 0 for p in body["datasets"][0]["data"])

    def test_change_mode(self, client) -> None:
        body = client.get("/series", params={"m": "github-stars", "range": "all", "dataMode": "change"}).json()
        assert [p["value"] for p in body["datasets"][0]["data"]] == [1000] * 5

    def test_unknown_ids_are_skipped(self, client) -> None:
        body = client.get("/series", params={"m": "nope,github-stars", "range": "all"}).json()
        assert [d["metricId"] for d in body["datasets"]] == ["github-stars"]

    @pytest.mark.parametrize("m", [",", "a,b,c,d,e"])
    def test_bad_metric_lists(self, client, m: str) -> None:
        assert client.get("/series", params={"m": m}).status_code == 400

    def test_missing_metric_param(self, client) -> None:
        assert client.get("/series").status_code == 422


class TestSourcesAPI:
    """/sources and /categorical endpoints."""

    def test_list_sources(self, client) -> None:
        body = client.get("/sources").json()
        github = body[0]
        assert github["id"] == "github"
        assert github["defaultGranularity"] == "monthly"
        assert github["metrics"][0]["id"] == "github-stars"

    def test_unknown_source(self, client) -> None:
        assert client.get("/sources/nope").status_code == 404
        assert client.get("/categorical/nope").status_code == 404

    def test_list_categorical_by_type(self, client) -> None:
        body = client.get("/categorical", params={"type": "ranking"}).json()
        assert [s["id"] for s in body] == ["node-usage", "node-categories", "top-creators", "community-packages"]
        assert all(s["eagerLoad"] is False for s in body)

    def test_distribution(self, client) -> None:
        body = client.get("/categorical/template-complexity/distribution/nodes-per-template").json()
        assert body["stats"] == {"average": 3, "median": 2, "max": 10, "total": 10}

    def test_distribution_wrong_type_or_field(self, client) -> None:
        assert client.get("/categorical/node-usage/distribution/count").status_code == 404
        assert client.get("/categorical/template-complexity/distribution/nope").status_code == 404

    def test_ranking_view_params(self, client) -> None:
        body = client.get(
            "/categorical/node-usage/ranking",
            params={"sort": "percentage", "dir": "asc", "filter": "Core", "limit": 1},
        ).json()
        assert [i["label"] for i in body["items"]] == ["Edit Fields"]
        assert body["groups"] == ["AI", "Communication", "Core"]

    @pytest.mark.parametrize("limit", [0, 101])
    def test_ranking_limit_bounds(self, client, limit: int) -> None:
        assert client.get("/categorical/node-usage/ranking", params={"limit": limit}).status_code == 422

    def test_correlation(self, client) -> None:
        body = client.get(
            "/categorical/creator-reach/correlation",
            params={"x": "templateCount", "y": "totalViews"},
        ).json()
        assert len(body["points"]) == 4
        assert body["pearson"] > 0.9
        assert len(body["trendLine"]) == 2

    def test_correlation_unknown_field(self, client) -> None:
        response = client.get("/categorical/creator-reach/correlation", params={"x": "templateCount", "y": "nope"})
        assert response.status_code == 404

    def test_correlation_requires_both_axes(self, client) -> None:
        assert client.get("/categorical/creator-reach/correlation", params={"x": "templateCount"}).status_code == 422


class TestPlaygroundAPI:
    """/playground endpoints."""

    def test_decode_state(self, client) -> None:
        body = client.get("/playground/state?m=a,b,c,d,e&r=bogus&t=area").json()
        assert body["state"]["metrics"] == ["a", "b", "c", "d"]
        assert body["state"]["range"] == "1y"
        assert body["query"] == "?m=a,b,c,d&t=area"

    def test_decode_empty_state(self, client) -> None:
        body = client.get("/playground/state").json()
        assert body["state"]["mode"] == "timeseries"
        assert body["query"] == ""

    def test_encode_state(self, client) -> None:
        response = client.post(
            "/playground/encode",
            json={"state": {"mode": "ranking", "source": "node-usage", "limit": 10}},
        )
        assert response.status_code == 200
        assert response.json() == {"query": "?mode=ranking&rs=node-usage&rlimit=10"}

    def test_encode_default_state(self, client) -> None:
        assert client.post("/playground/encode", json={"state": {"mode": "timeseries"}}).json() == {"query": ""}

    @pytest.mark.parametrize("state", [
        {"source": "node-usage"},
        {"mode": "ranking", "limit": 500},
        {"mode": "timeseries", "metrics": ["a", "b", "c", "d", "e"]},
    ])
    def test_encode_rejects_invalid_state(self, client, state) -> None:
        assert client.post("/playground/encode", json={"state": state}).status_code == 422

    def test_view_ranking(self, client) -> None:
        body = client.get("/playground/view?mode=ranking&rs=node-usage&rlimit=2").json()
        assert body["state"]["limit"] == 2
        assert [i["label"] for i in body["data"]["items"]] == ["HTTP Request", "Edit Fields"]

    def test_view_correlation_trend_toggle(self, client) -> None:
        base = "/playground/view?mode=correlation&cs=creator-reach&cx=templateCount&cy=totalViews"
        assert client.get(base).json()["data"]["trendLine"] is None
        assert len(client.get(base + "&ctrend=1").json()["data"]["trendLine"]) == 2

    def test_view_distribution(self, client) -> None:
        body = client.get("/playground/view?mode=distribution&ds=package-downloads&df=downloads-weekly").json()
        assert body["data"]["stats"]["total"] == 3

    def test_view_timeseries(self, client) -> None:
        body = client.get("/playground/view?m=github-stars&r=all").json()
        assert body["data"]["datasets"][0]["metricId"] == "github-stars"

    def test_view_without_selection(self, client) -> None:
        body = client.get("/playground/view").json()
        assert body["data"] is None
        assert body["query"] == ""
