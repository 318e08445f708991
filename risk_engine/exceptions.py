class ScoringError(RuntimeError):
    """Raised when a scorer fails; no partial result is produced"""

    def __init__(self, transaction_id: str, detail: str):
        self.transaction_id = transaction_id
        self.detail = detail
        super().__init__(f"Scoring failed for {transaction_id}: {detail}")
