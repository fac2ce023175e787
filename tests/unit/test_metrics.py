from spycats.core.telemetry import metrics


def test_metrics_toggle(monkeypatch):
    monkeypatch.delenv("METRICS_ENABLED", raising=False)
    assert metrics.metrics_enabled() is False
    monkeypatch.setenv("METRICS_ENABLED", "true")
    assert metrics.metrics_enabled() is True


def test_custom_counters_are_exposed():
    metrics.get_breed_lookups_total().labels(outcome="unknown").inc()
    metrics.get_business_rule_rejections_total().labels(code="mission_assigned").inc()

    payload = metrics.generate_latest().decode()
    assert 'breed_lookups_total{outcome="unknown"}' in payload
    assert 'business_rule_rejections_total{code="mission_assigned"}' in payload
