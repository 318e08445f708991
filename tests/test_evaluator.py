import pandas as pd

from risk_engine.data.generator import TransactionGenerator, row_to_features
from risk_engine.evaluation.evaluator import ModelEvaluator


def test_generator_is_seeded():
    first = TransactionGenerator(seed=5).generate_dataset(100)
    second = TransactionGenerator(seed=5).generate_dataset(100)

    pd.testing.assert_frame_equal(first, second)
    assert set(first["is_fraud"].unique()) <= {0, 1}
    assert first["transaction_id"].is_unique


def test_every_generated_row_is_a_valid_record():
    df = TransactionGenerator(seed=9).generate_dataset(200)

    for record in df.to_dict("records"):
        features = row_to_features(record)
        assert features.amount >= 5
        assert features.transaction_id == record["transaction_id"]


def test_evaluate_reports_metrics_per_model():
    metrics = ModelEvaluator(generator=TransactionGenerator(seed=42)).evaluate(n_samples=300)

    assert metrics["samples"] == 300
    assert 0.0 <= metrics["fraud_rate"] <= 1.0
    assert metrics["evaluation_hour"] == 14
    assert 0.1 <= metrics["mean_confidence"] <= 1.0

    for name in ("random_forest", "lstm", "xgboost", "ensemble"):
        model = metrics[name]
        for key in ("precision", "recall", "f1_score", "flag_rate"):
            assert 0.0 <= model[key] <= 1.0
        assert model["roc_auc"] is None or 0.0 <= model["roc_auc"] <= 1.0


def test_score_dataset_has_one_row_per_transaction():
    generator = TransactionGenerator(seed=1)
    df = generator.generate_dataset(20)

    scores = ModelEvaluator(generator=generator).score_dataset(df)

    assert len(scores) == 20
    assert list(scores["transaction_id"]) == list(df["transaction_id"])
