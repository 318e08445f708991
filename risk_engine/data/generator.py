import logging
import random
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from risk_engine.config import Config
from risk_engine.features.schema import TransactionFeatures

logger = logging.getLogger(__name__)


def _clean(value: Any) -> Any:
    """Map pandas missing values to None and numpy scalars to Python ones"""
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def row_to_features(row: Dict[str, Any]) -> TransactionFeatures:
    """Build a feature record from a generated DataFrame row"""
    fields = TransactionFeatures.model_fields
    data = {key: _clean(value) for key, value in row.items() if key in fields}
    return TransactionFeatures(**data)


class TransactionGenerator:
    """Generate synthetic labeled transactions for demos and evaluation"""

    def __init__(self, seed: int = Config.EVALUATION_RANDOM_STATE):
        self.random = random.Random(seed)
        self.np_random = np.random.default_rng(seed)

        self.merchants = {
            'low_risk': [("Supermarket", "Groceries"), ("Starbucks", "Restaurants"),
                         ("Gas Station", "Fuel"), ("Department Store", "Retail")],
            'medium_risk': [("Online Store", "E-commerce"), ("Money Transfer", "Transfers"),
                            ("Airline", "Travel")],
            'high_risk': [("Lucky Casino", "Gambling"), ("QuickCash", "Cash Advance"),
                          ("Late Night Club", "Adult")],
        }

        self.locations = {
            'home': ["New York, NY", "Brooklyn, NY", "Jersey City, NJ"],
            'risky': ["foreign ATM - Lagos", "Unknown", "foreign - Bucharest"],
        }

    def generate_dataset(self, n_samples: int = None) -> pd.DataFrame:
        """Generate labeled transactions as a DataFrame, one row per transaction"""
        if n_samples is None:
            n_samples = Config.EVALUATION_SAMPLES

        logger.info(f"Generating {n_samples} synthetic transactions...")

        user_profiles = self._create_user_profiles()
        transactions = []

        for i in range(n_samples):
            user_id = f"user_{self.random.randint(1, Config.N_USERS)}"
            profile = user_profiles[user_id]

            is_fraud = self.random.random() < profile['fraud_probability']

            if is_fraud:
                transaction = self._generate_fraud_transaction(profile)
            else:
                transaction = self._generate_normal_transaction(profile)

            transaction.update({
                "transaction_id": f"txn_{i + 1:06d}",
                "user_id": user_id,
                "user_age": profile['age'],
                "account_balance": round(profile['balance'], 2),
                "is_fraud": int(is_fraud),
            })
            transactions.append(transaction)

        df = pd.DataFrame(transactions)
        fraud_count = df['is_fraud'].sum()

        logger.info(f"Generated {len(df)} transactions: {fraud_count} frauds ({fraud_count/len(df)*100:.1f}%)")

        return df

    def _create_user_profiles(self) -> dict:
        """Create user profiles with different risk levels"""
        user_profiles = {}

        for user_id in range(1, Config.N_USERS + 1):
            risk_category = self.random.choice(['low_risk', 'medium_risk', 'high_risk'])

            if risk_category == 'low_risk':
                profile = {
                    'avg_amount': self.random.uniform(20, 200),
                    'fraud_probability': Config.FRAUD_RATE_LOW_RISK,
                }
            elif risk_category == 'medium_risk':
                profile = {
                    'avg_amount': self.random.uniform(100, 600),
                    'fraud_probability': Config.FRAUD_RATE_MEDIUM_RISK,
                }
            else:  # high_risk
                profile = {
                    'avg_amount': self.random.uniform(300, 1500),
                    'fraud_probability': Config.FRAUD_RATE_HIGH_RISK,
                }

            profile.update({
                'age': self.random.randint(18, 80),
                'balance': self.random.uniform(500, 25000),
                'home_location': self.random.choice(self.locations['home']),
                'device_id': f"device_{user_id:04d}",
            })
            user_profiles[f"user_{user_id}"] = profile

        return user_profiles

    def _generate_fraud_transaction(self, profile: dict) -> dict:
        """Generate fraudulent transaction patterns"""
        if self.random.random() < 0.7:  # Obvious fraud
            merchant, category = self.random.choice(self.merchants['high_risk'])
            return {
                'amount': round(self.random.uniform(5000, 20000), 2),
                'merchant_name': merchant,
                'merchant_category': category,
                'location': self.random.choice(self.locations['risky']),
                'card_present': False,
                'device_id': self.random.choice([None, f"unknown_{self.random.randint(1, 999)}"]),
                'customer_ip': f"185.{self.random.randint(0, 255)}.{self.random.randint(0, 255)}.7",
                'velocity_1h': self.random.randint(2, 6),
                'velocity_24h': self.random.randint(4, 12),
                'time_since_last_transaction': float(self.random.randint(5, 120)),
            }
        else:  # Subtle fraud
            merchant, category = self.random.choice(self.merchants['medium_risk'] + self.merchants['high_risk'])
            return {
                'amount': round(self.random.uniform(1000, 5000), 2),
                'merchant_name': merchant,
                'merchant_category': category,
                'location': profile['home_location'] if self.random.random() < 0.4 else self.random.choice(self.locations['risky']),
                'card_present': self.random.random() < 0.3,
                'device_id': profile['device_id'],
                'customer_ip': f"172.16.{self.random.randint(0, 255)}.{self.random.randint(1, 254)}",
                'velocity_1h': self.random.randint(1, 4),
                'velocity_24h': self.random.randint(2, 8),
                'time_since_last_transaction': float(self.random.randint(30, 1800)),
            }

    def _generate_normal_transaction(self, profile: dict) -> dict:
        """Generate normal transaction patterns"""
        amount = max(5, self.np_random.normal(profile['avg_amount'], profile['avg_amount'] * 0.3))
        merchant, category = self.random.choice(
            self.merchants['low_risk'] if self.random.random() < 0.8 else self.merchants['medium_risk']
        )

        return {
            'amount': round(float(amount), 2),
            'merchant_name': merchant,
            'merchant_category': category,
            'location': profile['home_location'],
            'card_present': self.random.random() < 0.85,
            'device_id': profile['device_id'],
            'customer_ip': f"10.0.{self.random.randint(0, 255)}.{self.random.randint(1, 254)}",
            'velocity_1h': self.random.randint(0, 2),
            'velocity_24h': self.random.randint(0, 4),
            'time_since_last_transaction': float(self.random.randint(600, 86400)),
        }

    def demo_transactions(self) -> List[Dict[str, Any]]:
        """Fixed transactions ranging from routine to obviously fraudulent"""
        return [
            {
                "transaction_id": "test_normal_001",
                "user_id": "user_123",
                "amount": 45.90,
                "merchant_name": "Starbucks",
                "merchant_category": "Restaurants",
                "location": "New York, NY",
                "card_present": True,
                "device_id": "device_0123",
                "customer_ip": "10.0.0.12",
                "velocity_1h": 0,
                "velocity_24h": 1,
                "time_since_last_transaction": 7200,
                "account_balance": 3200.0,
                "user_age": 41,
            },
            {
                "transaction_id": "test_moderate_002",
                "user_id": "user_123",
                "amount": 1850.00,
                "merchant_name": "Online Store",
                "merchant_category": "E-commerce",
                "location": "New York, NY",
                "card_present": False,
                "device_id": "device_0123",
                "customer_ip": "172.16.4.20",
                "velocity_1h": 1,
                "velocity_24h": 3,
                "time_since_last_transaction": 900,
                "account_balance": 3200.0,
                "user_age": 41,
            },
            {
                "transaction_id": "test_suspicious_003",
                "user_id": "user_456",
                "amount": 6500.00,
                "merchant_name": "Money Transfer",
                "merchant_category": "Transfers",
                "location": "foreign ATM - Lagos",
                "card_present": False,
                "device_id": "unknown_device",
                "customer_ip": "185.44.12.7",
                "velocity_1h": 2,
                "velocity_24h": 5,
                "time_since_last_transaction": 300,
                "account_balance": 7000.0,
                "user_age": 23,
            },
            {
                "transaction_id": "test_fraud_004",
                "user_id": "user_789",
                "amount": 15000.00,
                "merchant_name": "Lucky Casino",
                "merchant_category": "Gambling",
                "location": "Unknown",
                "card_present": False,
                "device_id": "unknown_device",
                "customer_ip": "185.44.12.9",
                "velocity_1h": 5,
                "velocity_24h": 9,
                "time_since_last_transaction": 20,
                "account_balance": 12000.0,
                "user_age": 22,
            },
        ]
