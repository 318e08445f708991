"""
Gated sequential scorer ("LSTM").

A fixed-parameter simulation of a single recurrent cell run over four derived
scalars. Nothing here is trained; the gate coefficients are constants.
"""
from typing import List, Tuple

import numpy as np

from risk_engine.features.schema import TransactionFeatures

# (input coefficient, hidden coefficient, bias) per gate
FORGET_GATE = (0.5, 0.3, -0.1)
INPUT_GATE = (0.4, 0.2, 0.1)
CANDIDATE = (0.6, 0.4, 0.0)
OUTPUT_GATE = (0.3, 0.5, 0.2)
OUTPUT_SCALE = 2.0


def sigmoid(x: float) -> float:
    return float(1.0 / (1.0 + np.exp(-x)))


def _linear(params: Tuple[float, float, float], x: float, hidden: float) -> float:
    w_x, w_h, bias = params
    return x * w_x + hidden * w_h + bias


def prepare_sequence(features: TransactionFeatures, hour: int) -> List[float]:
    """Convert a transaction into the ordered input sequence"""
    normalized_amount = float(np.log(features.amount + 1) / 10)
    card_present = 1.0 if features.card_present else 0.0
    time_feature = hour / 24
    velocity_feature = (features.velocity_24h or 0) / 10

    return [normalized_amount, card_present, time_feature, velocity_feature]


def cell_step(x: float, hidden: float, cell: float) -> Tuple[float, float]:
    """Advance the recurrent cell by one step, returning (hidden, cell)"""
    forget_gate = sigmoid(_linear(FORGET_GATE, x, hidden))
    input_gate = sigmoid(_linear(INPUT_GATE, x, hidden))
    candidate = float(np.tanh(_linear(CANDIDATE, x, hidden)))
    output_gate = sigmoid(_linear(OUTPUT_GATE, x, hidden))

    cell = cell * forget_gate + candidate * input_gate
    hidden = float(np.tanh(cell)) * output_gate
    return hidden, cell


def score_sequence(features: TransactionFeatures, hour: int) -> float:
    """
    Score a transaction with the gated sequential scorer.

    Args:
        features: Transaction feature record
        hour: Hour of day (0-23) of the evaluation time

    Returns:
        Sigmoid of the scaled final hidden state, in (0, 1)
    """
    hidden, cell = 0.0, 0.0
    for step in prepare_sequence(features, hour):
        hidden, cell = cell_step(step, hidden, cell)

    return sigmoid(hidden * OUTPUT_SCALE)
