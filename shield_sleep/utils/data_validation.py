# shield_sleep/utils/data_validation.py

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from shield_sleep.core.models.data_models import SleepMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a metrics payload"""
    metrics: Optional[SleepMetrics] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.metrics is not None and not self.errors


def format_validation_errors(error: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into "<field>: <message>" strings"""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get('loc', ())) or "body"
        messages.append(f"{location}: {err.get('msg')}")
    return messages


def validate_metrics(payload: Any) -> ValidationOutcome:
    """
    Validate a raw metrics payload once, before scoring.

    Args:
        payload: Mapping with the five metrics fields (wire or attribute names)

    Returns:
        ValidationOutcome: Parsed metrics, or the list of validation errors
    """
    if not isinstance(payload, dict):
        return ValidationOutcome(errors=["body: Input should be a JSON object"])

    try:
        metrics = SleepMetrics.model_validate(payload)
    except ValidationError as e:
        errors = format_validation_errors(e)
        logger.warning(f"Invalid sleep metrics received: {errors}")
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(metrics=metrics)


@dataclass(frozen=True)
class CsvValidation:
    """Rows read from a CSV file and the models parsed from the valid ones"""
    frame: pd.DataFrame
    models: Dict[Any, Any] = field(default_factory=dict)
    errors: Dict[Any, List[str]] = field(default_factory=dict)


class FileValidator:
    """Utility class for validating external data files"""

    @staticmethod
    def validate_csv(file_path, model_class, error_handling='warn'):
        """
        Validate a CSV file against a Pydantic model, parsing every row once

        Args:
            file_path: Path to CSV file
            model_class: Pydantic model class to validate against
            error_handling: 'warn', 'raise', or 'filter'

        Returns:
            CsvValidation whose frame holds only the valid rows (if
            error_handling='filter') or every row (if error_handling='warn'),
            with parsed models keyed by row index. None if the file is unreadable.
        """
        if not os.path.exists(file_path):
            if error_handling == 'raise':
                raise FileNotFoundError(f"File not found: {file_path}")
            logger.error(f"File not found: {file_path}")
            return None

        try:
            # Only empty cells are missing; "NA" or "None" are valid free text
            df = pd.read_csv(file_path, keep_default_na=False, na_values=[""])
        except Exception as e:
            if error_handling == 'raise':
                raise
            logger.error(f"Error reading CSV file: {e}")
            return None

        models = {}
        errors = {}
        for i, row in df.iterrows():
            try:
                models[i] = model_class.model_validate(row_to_record(row))
            except ValidationError as e:
                if error_handling == 'raise':
                    raise
                logger.warning(f"Validation error in row {i}: {e}")
                errors[i] = format_validation_errors(e)

        if error_handling == 'filter':
            df = df.loc[list(models)]

        return CsvValidation(frame=df, models=models, errors=errors)


def row_to_record(row: pd.Series) -> Dict[str, Any]:
    """Convert a CSV row to plain Python values, turning NaN into None"""
    record = {}
    for key, value in row.to_dict().items():
        if pd.isna(value):
            record[key] = None
        elif hasattr(value, "item"):
            record[key] = value.item()
        else:
            record[key] = value
        # A column with a blank cell is read as float; keep whole numbers integral
        if isinstance(record[key], float) and record[key].is_integer():
            record[key] = int(record[key])
    return record
