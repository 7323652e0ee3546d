import json

from cache_warmer.aggregator import aggregate_results
from cache_warmer.report.json_report import render_json
from cache_warmer.warmer.models import CacheResource, CacheStatus, Classification


def _resource(uri, status=CacheStatus.MISS, code=200, captcha=False):
    r = CacheResource(uri)
    r.apply(Classification(status, code, captcha))
    return r


def _sample():
    failed = CacheResource("http://x/down")
    failed.fail("Connection refused")
    return [
        _resource("http://x/1", CacheStatus.HIT),
        _resource("http://x/2", CacheStatus.MISS, 404),
        _resource("http://x/3", CacheStatus.UNSET, 200, captcha=True),
        _resource("http://x/4", CacheStatus.BYPASS, 200, captcha=True),
        failed,
    ]


def test_aggregate_histograms():
    report = aggregate_results(_sample(), elapsed=1.5)

    assert report.total == 5
    assert report.cache_status == {"HIT": 1, "MISS": 1, "BYPASS": 1, "UNSET": 1, "ERROR": 1}
    assert report.http_status == {200: 3, 404: 1}
    assert list(report.http_status) == [200, 404]
    assert report.errors == 1
    assert report.captcha_uri == "http://x/3"


def test_empty_run():
    report = aggregate_results([], elapsed=0.0)
    assert report.total == 0
    assert set(report.cache_status.values()) == {0}
    assert report.http_status == {}
    assert report.captcha_uri is None
    assert "(none)" in report.text()


def test_text_report():
    text = aggregate_results(_sample(), elapsed=1.5).text()
    assert text.startswith("Done. Warmed up 5 URIs in 1.50 seconds.")
    assert "HIT" in text and "404" in text
    assert "Transport errors: 1" in text
    assert "Captcha found at http://x/3" in text


def test_render_json(tmp_path):
    report = aggregate_results(_sample(), elapsed=0.25)
    out = render_json(report, tmp_path / "nested" / "report.json", include_resources=True)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["total"] == 5
    assert data["http_status"] == {"200": 3, "404": 1}
    assert data["resources"][-1] == {
        "uri": "http://x/down",
        "cache_status": "ERROR",
        "http_status": 0,
        "captcha_found": False,
        "error": "Connection refused",
    }
    assert json.loads(report.json()) == {k: v for k, v in data.items() if k != "resources"}
