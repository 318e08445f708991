from datetime import datetime

import pytest

from risk_engine.models.rule_trees import (
    decision_tree_1,
    decision_tree_2,
    decision_tree_3,
    decision_tree_4,
    decision_tree_5,
    score_rules,
    tree_scores,
)

NOON = datetime(2024, 6, 1, 12, 0)
NIGHT = datetime(2024, 6, 1, 2, 30)


def test_large_card_not_present_high_velocity_hits_top_leaf(make_features):
    """amount 10,001 without the card must take the 0.9 leaf, not 0.8 or 0.4"""
    features = make_features(amount=10001, card_present=False, velocity_24h=6)
    assert decision_tree_1(features) == 0.9


@pytest.mark.parametrize("overrides, expected", [
    ({"amount": 15000, "card_present": True, "velocity_24h": 6}, 0.8),
    ({"amount": 15000, "card_present": True}, 0.4),
    ({"amount": 15000, "card_present": True, "location": "foreign ATM - Lagos"}, 0.6),
    ({"amount": 2000, "location": "foreign market"}, 0.6),
    ({"amount": 2000, "location": "Downtown ATM"}, 0.6),
    ({"amount": 2000}, 0.2),
    ({"amount": 1000}, 0.1),
])
def test_tree_1_leaves(make_features, overrides, expected):
    assert decision_tree_1(make_features(**overrides)) == expected


def test_tree_2_uses_injected_hour(make_features):
    features = make_features(amount=6000)
    assert decision_tree_2(features, NIGHT.hour) == 0.85
    assert decision_tree_2(features, NOON.hour) == 0.15

    assert decision_tree_2(make_features(card_present=False), 23) == 0.6
    assert decision_tree_2(make_features(), 5) == 0.3
    assert decision_tree_2(make_features(), 22) == 0.15
    assert decision_tree_2(make_features(merchant_category="Cash Advance"), 10) == 0.7


def test_tree_3_velocity_and_recency(make_features):
    assert decision_tree_3(make_features(velocity_1h=4, amount=2500)) == 0.9
    assert decision_tree_3(make_features(velocity_1h=4)) == 0.6
    assert decision_tree_3(make_features(time_since_last_transaction=30)) == 0.7
    assert decision_tree_3(make_features(time_since_last_transaction=0)) == 0.7
    assert decision_tree_3(make_features(time_since_last_transaction=600)) == 0.2
    assert decision_tree_3(make_features()) == 0.2


def test_tree_4_balance_ratio_and_age(make_features):
    assert decision_tree_4(make_features(amount=900, account_balance=1000)) == 0.8
    assert decision_tree_4(make_features(amount=700, account_balance=1000)) == 0.1
    assert decision_tree_4(make_features(amount=6000, user_age=22)) == 0.6
    assert decision_tree_4(make_features(amount=6000, user_age=40)) == 0.1
    assert decision_tree_4(make_features(amount=6000)) == 0.1


def test_tree_5_device_and_network_defaults(make_features):
    # absent device (0.3) + absent ip (0.4), scaled and capped
    assert decision_tree_5(make_features()) == 1.0
    assert decision_tree_5(make_features(device_id="device_01", customer_ip="10.0.0.1")) == pytest.approx(0.3)
    assert decision_tree_5(make_features(device_id="unknown_x", customer_ip="192.168.1.1")) == pytest.approx(1.0)
    assert decision_tree_5(make_features(device_id="device_01", customer_ip="192.168.1.1")) == pytest.approx(0.6)


def test_score_is_mean_of_trees(make_features):
    features = make_features()
    trees = tree_scores(features, NOON.hour)

    assert len(trees) == 5
    assert score_rules(features, NOON.hour) == pytest.approx(sum(trees) / 5)
    assert score_rules(features, NOON.hour) == pytest.approx(0.31)


@pytest.mark.parametrize("location", ["New York, NY", "foreign ATM - Lagos", "Downtown ATM"])
@pytest.mark.parametrize("velocity_24h", [None, 2, 6])
@pytest.mark.parametrize("card_present", [True, False])
def test_score_non_decreasing_across_amount_thresholds(make_features, location, velocity_24h, card_present):
    amounts = [500, 1000, 1000.01, 5000, 10000, 10000.01, 25000]
    scores = [
        score_rules(
            make_features(amount=a, card_present=card_present, velocity_24h=velocity_24h, location=location),
            NOON.hour,
        )
        for a in amounts
    ]
    assert scores == sorted(scores)


def test_foreign_card_present_purchase_does_not_drop_above_ten_thousand(make_features):
    mid = score_rules(make_features(amount=5000, location="foreign ATM - Lagos"), NOON.hour)
    large = score_rules(make_features(amount=10001, location="foreign ATM - Lagos"), NOON.hour)
    assert large >= mid


def test_score_bounded_and_pure(make_features):
    features = make_features(amount=50000, card_present=False, velocity_1h=9, velocity_24h=20,
                             account_balance=10, user_age=19, merchant_category="Gambling")
    first = score_rules(features, NIGHT.hour)

    assert 0.0 <= first <= 1.0
    assert score_rules(features, NIGHT.hour) == first
