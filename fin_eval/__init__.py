"""Evaluación Financiera — statement spreadsheet extraction and ratio scoring."""
from .types import *
from .parser import extract, extract_file, extract_rows, read_first_sheet
from .evaluator import (
    INDICATOR_NAMES,
    NO_VALID_DATA_MESSAGE,
    evaluate,
    group_by_category,
    score_summary,
    validate_record,
)
