import math

import pytest

from risk_engine.models.sequential import cell_step, prepare_sequence, score_sequence, sigmoid


def test_sequence_layout(make_features):
    features = make_features(amount=0.0, card_present=True, velocity_24h=None)
    assert prepare_sequence(features, 12) == [0.0, 1.0, 0.5, 0.0]

    features = make_features(amount=math.e - 1, card_present=False, velocity_24h=5)
    sequence = prepare_sequence(features, 6)
    assert sequence[0] == pytest.approx(0.1)
    assert sequence[1:] == [0.0, 0.25, 0.5]


def test_zero_input_keeps_state_at_rest():
    hidden, cell = cell_step(0.0, 0.0, 0.0)
    assert hidden == 0.0
    assert cell == 0.0


def test_single_step_matches_gate_equations():
    x = 0.5
    forget = sigmoid(0.5 * x - 0.1)
    input_gate = sigmoid(0.4 * x + 0.1)
    candidate = math.tanh(0.6 * x)
    output = sigmoid(0.3 * x + 0.2)

    hidden, cell = cell_step(x, 0.0, 0.0)

    assert forget > 0  # forget gate multiplies a zero cell on the first step
    assert cell == pytest.approx(candidate * input_gate)
    assert hidden == pytest.approx(math.tanh(candidate * input_gate) * output)


def test_score_in_unit_interval_and_repeatable(make_features):
    for amount in (0.0, 12.5, 950.0, 25000.0, 1e7):
        features = make_features(amount=amount, velocity_24h=50, card_present=False)
        score = score_sequence(features, 23)
        assert 0.0 < score < 1.0
        assert score_sequence(features, 23) == score


def test_higher_velocity_raises_score(make_features):
    quiet = score_sequence(make_features(velocity_24h=0), 14)
    busy = score_sequence(make_features(velocity_24h=9), 14)
    assert busy > quiet
