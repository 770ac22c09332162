"""
Extractors Module - Report text classification and record recovery.
"""

from .primitives import (
    parse_flexible_date,
    parse_amount,
    month_bounds,
    add_months,
    truncate
)

from .line_classifier import (
    is_header_line,
    is_transaction_candidate,
    is_budget_candidate,
    is_goal_block_start,
    contains_money,
    find_money
)

from .sections import (
    Section,
    SectionState
)

from .record_extractors import (
    ExtractionResult,
    extract_transaction,
    extract_budget,
    extract_goal,
    collect_goal_block
)

from .report_parser import (
    ReportParser,
    parse_report_lines
)

__all__ = [
    'parse_flexible_date',
    'parse_amount',
    'month_bounds',
    'add_months',
    'truncate',
    'is_header_line',
    'is_transaction_candidate',
    'is_budget_candidate',
    'is_goal_block_start',
    'contains_money',
    'find_money',
    'Section',
    'SectionState',
    'ExtractionResult',
    'extract_transaction',
    'extract_budget',
    'extract_goal',
    'collect_goal_block',
    'ReportParser',
    'parse_report_lines',
]
