"""
Shield score engine.

Converts validated sleep metrics into a 0-100 shield score, a bio-age delta,
alerts and suggestions.
"""

from shield_sleep.core.scoring.shield_score import ShieldScoreCalculator, bio_age_delta, evaluate

__all__ = ['ShieldScoreCalculator', 'bio_age_delta', 'evaluate']
