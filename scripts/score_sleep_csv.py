#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Score a CSV file of sleep metrics.

Each row needs the columns totalSleepHours, sleepEfficiencyPercent, remPercent,
age and sex. The output CSV repeats the input columns and adds score,
bioAgeDelta, alerts and suggestions. Invalid rows are dropped by default;
with --error-handling warn they are kept with empty result columns.

Usage:
    python scripts/score_sleep_csv.py --input metrics.csv --output scores.csv
"""

import argparse
import logging
import os
import sys

import pandas as pd

# Add the project root to the path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shield_sleep.config.config_manager import ConfigManager
from shield_sleep.core.models.data_models import SleepMetrics
from shield_sleep.core.scoring.shield_score import ShieldScoreCalculator
from shield_sleep.core.services.sleep_service import SleepService
from shield_sleep.utils.data_validation import FileValidator, row_to_record

logger = logging.getLogger(__name__)

MESSAGE_SEPARATOR = " | "
RESULT_COLUMNS = ['score', 'bioAgeDelta', 'alerts', 'suggestions']


def score_dataframe(validation, service):
    """
    Score the rows of a validated metrics CSV.

    Rows are scored from the models parsed during validation. Rows kept
    without a model (error_handling='warn') get empty result columns.

    Returns:
        DataFrame: Rows with the result columns appended
    """
    df = validation.frame
    scored_rows = []
    for i, row in df.iterrows():
        record = row_to_record(row)
        metrics = validation.models.get(i)
        if metrics is None:
            record.update({column: None for column in RESULT_COLUMNS})
        else:
            result = service.score(metrics)
            record.update({
                'score': result.score,
                'bioAgeDelta': result.bio_age_delta,
                'alerts': MESSAGE_SEPARATOR.join(result.alerts),
                'suggestions': MESSAGE_SEPARATOR.join(result.suggestions),
            })
        scored_rows.append(record)

    columns = [c for c in df.columns if c not in RESULT_COLUMNS] + RESULT_COLUMNS
    return pd.DataFrame(scored_rows, columns=columns)


def main(argv=None):
    """Score a metrics CSV and write the results"""
    parser = argparse.ArgumentParser(description='Score a CSV file of sleep metrics')
    parser.add_argument('--input', required=True, help='CSV file with sleep metrics')
    parser.add_argument('--output', required=True, help='Where to write the scored CSV')
    parser.add_argument('--error-handling', choices=['warn', 'raise', 'filter'], default='filter',
                        help='How to treat rows that fail validation')
    parser.add_argument('--config', default=None, help='Path to a YAML config file')
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    config.configure_logging()

    try:
        validation = FileValidator.validate_csv(args.input, SleepMetrics, args.error_handling)
    except Exception as e:
        logger.error(f"Validation of {args.input} failed: {e}")
        return 1
    if validation is None:
        logger.error(f"Could not load metrics from {args.input}")
        return 1

    service = SleepService(ShieldScoreCalculator(
        randomize_borderline_delta=bool(config.get('scoring.randomize_borderline_delta', False)),
        seed=config.get('scoring.seed'),
    ))
    scored = score_dataframe(validation, service)

    output_dir = os.path.dirname(args.output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    scored.to_csv(args.output, index=False)

    total = len(validation.models) + len(validation.errors)
    logger.info(f"Scored {len(validation.models)} of {total} rows, results saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
