"""
Packing List Intake Package

Parses packing lists pasted from spreadsheets into typed rows.

Key Components:
- tokenizer: ghost-row filtering, delimiter and header detection
- extractor: per-cell field classification (courier, qty, weight, phone, name)
- parser: resumable batch parse loop (ParseTask)
"""

from .extractor import FieldExtractor
from .models import ParsedItem, ParseResult, ParseWarning, RowFormat, TokenizedRow
from .parser import DEFAULT_BATCH_SIZE, ParseProgress, ParseTask, parse_packing_list
from .tokenizer import TokenizedText, is_ghost_row, split_cells, tokenize

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "FieldExtractor",
    "ParseProgress",
    "ParseResult",
    "ParseTask",
    "ParseWarning",
    "ParsedItem",
    "RowFormat",
    "TokenizedRow",
    "TokenizedText",
    "is_ghost_row",
    "parse_packing_list",
    "split_cells",
    "tokenize",
]
