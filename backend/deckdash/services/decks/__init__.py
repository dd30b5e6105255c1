"""Deck domain services: content rows, round building and scoring.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from the quiz mechanics. Only `source` touches the network.
"""

from .records import RawRecord, Topic, PlayableCard, parse_row, parse_rows
from .round_builder import list_topics, build_round, shuffle_choices
from .scoring import (
    ScoreBreakdown,
    PerformanceRating,
    score,
    format_time,
    performance_rating,
    percentage_correct,
    share_text,
)
from .source import SheetSource, StaticSource, ContentLoadError, parse_csv, sheet_url
