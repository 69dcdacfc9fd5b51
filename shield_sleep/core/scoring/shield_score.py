import logging
from typing import List, NamedTuple, Optional

import numpy as np

from shield_sleep.core.models.data_models import ScoreResult, SleepMetrics

logger = logging.getLogger(__name__)

BASE_SCORE = 100


class Finding(NamedTuple):
    """A triggered rule: its deduction and the messages it contributes"""
    deduction: int
    alert: Optional[str]
    suggestion: str


class ShieldScoreCalculator:
    """
    Threshold-rule shield score calculator.

    Every rule group is evaluated against the raw metrics only, so a rule never
    sees the deductions made by an earlier one. Findings are collected in rule
    order, which fixes the order of alerts and suggestions in the result.
    """

    def __init__(self, randomize_borderline_delta: bool = False, seed: Optional[int] = None):
        """
        Args:
            randomize_borderline_delta: Draw the bio-age delta for scores in
                [80, 90) at random instead of deriving it from the score
            seed: Seed for the random draw, making it reproducible per call
        """
        self.randomize_borderline_delta = randomize_borderline_delta
        self.seed = seed

    def calculate_score(self, metrics: SleepMetrics) -> ScoreResult:
        """
        Calculate the shield score, bio-age delta, alerts and suggestions.

        Args:
            metrics: Validated sleep metrics

        Returns:
            ScoreResult: Clamped score with its messages in rule order
        """
        findings: List[Finding] = []
        findings.extend(self._score_duration(metrics))
        findings.extend(self._score_efficiency(metrics))
        findings.extend(self._score_rem(metrics))
        findings.extend(self._score_age(metrics))
        findings.extend(self._score_sex(metrics))

        score = BASE_SCORE - sum(f.deduction for f in findings)
        score = max(0, score)

        for finding in findings:
            logger.debug(f"  Rule triggered (-{finding.deduction}): {finding.alert or finding.suggestion}")
        logger.debug(f"  Final score: {score}")

        return ScoreResult(
            score=score,
            bio_age_delta=bio_age_delta(score, self.randomize_borderline_delta, self.seed),
            alerts=tuple(f.alert for f in findings if f.alert is not None),
            suggestions=tuple(f.suggestion for f in findings),
        )

    def _score_duration(self, metrics):
        """Total sleep hours, with an extra penalty for older adults"""
        hours = metrics.total_sleep_hours
        findings = []

        if hours < 6:
            findings.append(Finding(
                15,
                "Insufficient total sleep hours.",
                "Aim for 7-9 hours of sleep per night for optimal health.",
            ))
            if metrics.age >= 65 and hours < 5:
                findings.append(Finding(
                    10,
                    "Critically low sleep for older adult.",
                    "Sleeping less than 5 hours is a concern at your age. "
                    "Consult a doctor if short sleep persists.",
                ))
        elif hours > 9.5:
            findings.append(Finding(
                5,
                "Excessive total sleep hours.",
                "Regularly sleeping more than 9.5 hours can signal an underlying issue. "
                "Keep a consistent wake time and discuss persistent oversleeping with a doctor.",
            ))

        return findings

    def _score_efficiency(self, metrics):
        """Share of time in bed actually spent asleep"""
        efficiency = metrics.sleep_efficiency_percent

        if efficiency < 75:
            return [Finding(
                20,
                "Very low sleep efficiency.",
                "Only go to bed when sleepy and get up if you cannot fall asleep within 20 minutes. "
                "Consider speaking with a sleep specialist.",
            )]
        if efficiency < 85:
            return [Finding(
                10,
                "Low sleep efficiency.",
                "Improve sleep efficiency by maintaining a consistent sleep schedule "
                "and creating a conducive sleep environment.",
            )]
        return []

    def _score_rem(self, metrics):
        rem = metrics.rem_percent

        if rem < 15:
            return [Finding(
                15,
                "Low REM sleep percentage.",
                "To increase REM sleep, prioritize consistent sleep, reduce alcohol intake "
                "before bed, and manage stress.",
            )]
        if rem > 30:
            return [Finding(
                5,
                "High REM sleep percentage.",
                "Elevated REM can follow sleep deprivation or stress. "
                "Track it over several nights and mention it to a doctor if it persists.",
            )]
        return []

    def _score_age(self, metrics):
        """Age-specific notes; the under-18 note never deducts"""
        if metrics.age < 18:
            return [Finding(
                0,
                "Age out of typical adult range for these sleep guidelines.",
                "Children and teenagers generally need 8-10 hours or more. "
                "Follow age-appropriate sleep recommendations.",
            )]
        if metrics.age >= 65 and metrics.total_sleep_hours > 8:
            return [Finding(
                5,
                "Older adult, potentially excessive sleep.",
                "Adults over 65 usually need 7-8 hours. "
                "Long sleep combined with daytime fatigue is worth discussing with a doctor.",
            )]
        return []

    def _score_sex(self, metrics):
        # Suggestion only, no alert is raised for this rule
        if metrics.is_female and metrics.total_sleep_hours < 7:
            return [Finding(
                0,
                None,
                "Women often need slightly more sleep than men. "
                "Aim for at least 7 hours, especially around hormonal changes.",
            )]
        return []


def bio_age_delta(score: int, randomize_borderline: bool = False, seed: Optional[int] = None) -> str:
    """
    Map a clamped shield score to a signed biological age delta.

    Args:
        score: Shield score (0-100)
        randomize_borderline: Draw the [80, 90) bucket at random
        seed: Seed for the random draw

    Returns:
        str: Delta with an explicit sign and one decimal, e.g. "+2.5"
    """
    if score >= 90:
        delta = -(100 - score) / 10.0
    elif score >= 80:
        if randomize_borderline:
            # Fresh generator per call; Generator instances are not thread-safe
            rng = np.random.default_rng(seed)
            tenths = int(rng.integers(1, 6))
        else:
            tenths = (score - 80) // 2 + 1
        delta = -tenths / 10.0
    elif score >= 60:
        delta = (100 - score) / 10.0
    else:
        delta = (100 - score) / 5.0

    # Adding 0.0 turns -0.0 into 0.0 so a perfect score renders as "+0.0"
    return f"{delta + 0.0:+.1f}"


_default_calculator = ShieldScoreCalculator()


def evaluate(metrics: SleepMetrics) -> ScoreResult:
    """Score metrics with the deterministic default calculator"""
    return _default_calculator.calculate_score(metrics)
