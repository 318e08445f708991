import numpy as np
import pytest
from pydantic import ValidationError

from risk_engine.features.engineering import FeatureEngine, is_off_hours
from risk_engine.features.schema import TransactionFeatures


@pytest.mark.parametrize("hour, expected", [
    (0, True), (5, True), (6, False), (14, False), (22, False), (23, True),
])
def test_off_hours_window(hour, expected):
    assert is_off_hours(hour) is expected


def test_missing_velocity_features_are_filled(make_features):
    engine = FeatureEngine(rng=np.random.default_rng(3))

    for _ in range(50):
        original = make_features()
        enriched = engine.enrich(original)

        assert 0 <= enriched.velocity_24h < 10
        assert 0 <= enriched.velocity_1h < 5
        assert enriched.velocity_1h <= enriched.velocity_24h
        assert 0 <= enriched.time_since_last_transaction < 3600
        assert original.velocity_24h is None


def test_same_seed_same_enrichment(make_features):
    first = FeatureEngine(rng=np.random.default_rng(11)).enrich(make_features())
    second = FeatureEngine(rng=np.random.default_rng(11)).enrich(make_features())
    assert first == second


def test_supplied_values_are_kept(make_features):
    engine = FeatureEngine(rng=np.random.default_rng(0))
    features = make_features(velocity_1h=0, velocity_24h=0, time_since_last_transaction=0)

    assert engine.enrich(features) is features


def test_partial_enrichment_keeps_caller_values(make_features):
    engine = FeatureEngine(rng=np.random.default_rng(0))

    enriched = engine.enrich(make_features(velocity_24h=2))

    assert enriched.velocity_24h == 2
    assert enriched.velocity_1h is not None
    assert enriched.time_since_last_transaction is not None


def test_simulation_can_be_disabled(make_features):
    features = make_features()
    assert FeatureEngine(simulate_missing=False).enrich(features) is features


def test_records_are_immutable(make_features):
    features = make_features()
    with pytest.raises(ValidationError):
        features.amount = 5.0


@pytest.mark.parametrize("overrides", [
    {"amount": -1},
    {"transaction_id": "   "},
    {"card_present": None},
    {"velocity_1h": -3},
    {"amount": "15000"},
    {"card_present": "yes"},
    {"velocity_24h": "4"},
])
def test_invalid_records_are_rejected(make_features, overrides):
    with pytest.raises(ValidationError):
        make_features(**overrides)


def test_missing_required_fields_are_rejected():
    with pytest.raises(ValidationError):
        TransactionFeatures(transaction_id="txn_1", merchant_name="Shop", location="Paris", card_present=True)


def test_unknown_fields_are_ignored(make_features):
    features = make_features(channel="mobile", previous_transactions=[{"amount": 10}])
    assert features.history_length == 1
    assert not hasattr(features, "channel")
