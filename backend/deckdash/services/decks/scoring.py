"""Round scoring.

Additive par-time model: 100 points per correct card, plus 10 points per
second finished under par (8s per card), minus 5 points per second over
par. The penalty never exceeds the base points and a round with no
correct answers always scores zero.
"""

import math
from dataclasses import dataclass
from typing import Optional

POINTS_PER_CORRECT = 100
PAR_SECONDS_PER_CARD = 8
BONUS_PER_SECOND = 10
PENALTY_PER_SECOND = 5


@dataclass(frozen=True)
class ScoreBreakdown:
    base_points: int
    time_bonus: int
    total_score: int
    average_time_per_card: float

    def to_dict(self):
        return {
            'base_points': self.base_points,
            'time_bonus': self.time_bonus,
            'total_score': self.total_score,
            'average_time_per_card': self.average_time_per_card,
        }


@dataclass(frozen=True)
class PerformanceRating:
    rating: str
    emoji: str
    color: str

    def to_dict(self):
        return {'rating': self.rating, 'emoji': self.emoji, 'color': self.color}


# (inclusive minimum percentage, rating); first match wins
RATING_TIERS = (
    (100, PerformanceRating('Perfect!', '🏆', 'text-yellow-500')),
    (90, PerformanceRating('Excellent!', '⭐', 'text-green-500')),
    (75, PerformanceRating('Great!', '👍', 'text-blue-500')),
    (60, PerformanceRating('Good!', '👌', 'text-purple-500')),
    (40, PerformanceRating('Keep Trying!', '💪', 'text-orange-500')),
    (0, PerformanceRating('Practice More!', '📚', 'text-red-500')),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_tally(correct_count: int, total_cards: int) -> None:
    if total_cards <= 0:
        raise ValueError('total_cards must be positive')
    if correct_count < 0 or correct_count > total_cards:
        raise ValueError('correct_count must be between 0 and total_cards')


def check_elapsed(time_taken_seconds: float) -> None:
    if not math.isfinite(time_taken_seconds) or time_taken_seconds < 0:
        raise ValueError('time_taken_seconds must be a finite, non-negative number')


def score(correct_count: int, total_cards: int, time_taken_seconds: float) -> ScoreBreakdown:
    _check_tally(correct_count, total_cards)
    check_elapsed(time_taken_seconds)

    if correct_count == 0:
        return ScoreBreakdown(0, 0, 0, 0.0)

    base_points = correct_count * POINTS_PER_CORRECT
    difference = total_cards * PAR_SECONDS_PER_CARD - time_taken_seconds
    if difference > 0:
        time_bonus = round_half_up(difference * BONUS_PER_SECOND)
    else:
        time_bonus = -min(round_half_up(-difference * PENALTY_PER_SECOND), base_points)

    average = round_half_up(time_taken_seconds / total_cards * 10) / 10
    return ScoreBreakdown(
        base_points=base_points,
        time_bonus=time_bonus,
        total_score=max(0, base_points + time_bonus),
        average_time_per_card=average,
    )


def format_time(seconds) -> str:
    """45 -> '45s', 90 -> '1m 30s', 120 -> '2m'."""
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, remaining = divmod(seconds, 60)
    if remaining == 0:
        return f"{minutes}m"
    return f"{minutes}m {remaining}s"


def performance_rating(correct_count: int, total_cards: int) -> PerformanceRating:
    _check_tally(correct_count, total_cards)
    for threshold, rating in RATING_TIERS:
        if correct_count * 100 >= threshold * total_cards:
            return rating
    return RATING_TIERS[-1][1]


def percentage_correct(correct_count: int, total_cards: int) -> int:
    _check_tally(correct_count, total_cards)
    return round_half_up(correct_count / total_cards * 100)


def share_text(total_score: int, topic_name: Optional[str] = None, share_url: Optional[str] = None) -> str:
    text = f"I scored {total_score:,} points on {topic_name or 'Deck Dash'}! Can you beat my score?"
    if share_url:
        text += f"\n\n{share_url}"
    return text
