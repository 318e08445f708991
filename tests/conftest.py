"""
Shared fixtures for the risk engine tests.
"""
import numpy as np
import pytest
from fastapi.testclient import TestClient

from risk_engine.features.schema import TransactionFeatures
from risk_engine.main import create_app
from risk_engine.service import RiskScoringService
from risk_engine.sinks.storage import ResultStore


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: exercises the HTTP layer and the SQLite store")


@pytest.fixture
def make_features():
    """Factory for feature records with a routine card-present purchase as the baseline"""

    def _make(**overrides) -> TransactionFeatures:
        data = {
            "transaction_id": "txn_000001",
            "amount": 100.0,
            "merchant_name": "Supermarket",
            "location": "New York, NY",
            "card_present": True,
        }
        data.update(overrides)
        return TransactionFeatures(**data)

    return _make


@pytest.fixture
def store(tmp_path):
    result_store = ResultStore(tmp_path / "risk_engine.db")
    result_store.init_db()
    return result_store


@pytest.fixture
def service(store):
    return RiskScoringService(store=store, rng=np.random.default_rng(7))


@pytest.fixture
def client(service):
    app = create_app(service=service)
    with TestClient(app) as test_client:
        yield test_client
