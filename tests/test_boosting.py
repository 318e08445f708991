import pytest

from risk_engine.models.boosting import (
    adaptive_boost,
    boost_tree_1,
    boost_tree_2,
    boost_tree_3,
    estimate_true_risk,
    score_boosted,
)


def test_routine_purchase_is_pushed_below_neutral(make_features):
    # 0.5 - 0.01 - 0.005 from the corrective trees, then five -0.005 adaptive rounds
    assert score_boosted(make_features(), 12) == pytest.approx(0.46)


def test_large_amount_is_sharpened_until_it_leaves_the_band(make_features):
    # 0.575 after the trees, +0.01 per round until |score - 0.5| >= 0.1
    features = make_features(amount=9000, card_present=False)
    assert score_boosted(features, 12) == pytest.approx(0.605)


def test_coarse_risk_drives_adaptive_rounds(make_features):
    features = make_features(amount=500, card_present=False, velocity_24h=5)
    assert estimate_true_risk(features) == pytest.approx(0.6)
    assert score_boosted(features, 12) == pytest.approx(0.535)


def test_corrective_trees(make_features):
    assert boost_tree_1(make_features(amount=8001)) == 0.4
    assert boost_tree_1(make_features(velocity_1h=3)) == 0.3
    assert boost_tree_1(make_features()) == -0.1

    assert boost_tree_2(make_features(amount=1500, card_present=False)) == 0.35
    assert boost_tree_2(make_features(amount=3500, user_age=28)) == 0.25
    assert boost_tree_2(make_features()) == -0.05

    assert boost_tree_3(make_features(amount=2500), 3) == 0.3
    assert boost_tree_3(make_features(merchant_category="Adult"), 12) == 0.4
    assert boost_tree_3(make_features(amount=2500), 12) == 0.0


def test_adaptive_boost_is_silent_outside_band(make_features):
    features = make_features(amount=6000)
    assert adaptive_boost(features, 0.75, 0.3) == 0.0
    assert adaptive_boost(features, 0.55, 0.3) == 0.2
    assert adaptive_boost(make_features(), 0.45, 0.0) == -0.1


def test_coarse_risk_sums_signals(make_features):
    features = make_features(amount=6000, card_present=False, velocity_24h=10)
    assert estimate_true_risk(features) == pytest.approx(0.9)
    assert estimate_true_risk(make_features()) == 0.0


def test_score_clamped(make_features):
    extremes = [
        make_features(amount=1e9, card_present=False, velocity_1h=50, velocity_24h=90,
                      user_age=18, merchant_category="Gambling"),
        make_features(amount=0.0),
    ]
    for features in extremes:
        for hour in (0, 12, 23):
            assert 0.0 <= score_boosted(features, hour) <= 1.0
