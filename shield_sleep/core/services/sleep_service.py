# shield_sleep/core/services/sleep_service.py
import logging
from typing import Any, Tuple

from shield_sleep.core.models.data_models import ScoreResult, SleepMetrics
from shield_sleep.core.scoring.shield_score import ShieldScoreCalculator
from shield_sleep.utils.data_validation import validate_metrics

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


class SleepService:
    def __init__(self, calculator=None):
        self.calculator = calculator or ShieldScoreCalculator()

    def score(self, metrics: SleepMetrics) -> ScoreResult:
        """Score validated metrics, logging the request and the outcome"""
        logger.info(f"Received sleep data for scoring: {metrics}")
        try:
            result = self.calculator.calculate_score(metrics)
        except Exception as e:
            logger.exception(f"An unexpected error occurred while calculating sleep score: {e}")
            raise
        logger.info(f"Calculated sleep score response: {result}")
        return result

    def score_payload(self, payload: Any) -> Tuple[int, ScoreResult]:
        """
        Validate a raw payload and score it.

        Returns:
            tuple: (HTTP status code, result). Invalid input yields 400 and an
            engine failure yields 500, both with a failure-shaped result.
        """
        outcome = validate_metrics(payload)
        if not outcome.ok:
            return 400, ScoreResult.failure("; ".join(outcome.errors))

        try:
            return 200, self.score(outcome.metrics)
        except Exception:
            return 500, ScoreResult.failure(INTERNAL_ERROR_MESSAGE)
