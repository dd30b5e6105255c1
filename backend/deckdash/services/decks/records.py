from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional, Sequence, Tuple

DIFFICULTIES = ('easy', 'medium', 'hard')
DEFAULT_DIFFICULTY = 'medium'

# topic_id, topic_name, card_id, image_url, correct_answer
MIN_FIELDS = 5
_PLACEHOLDER_IMAGES = {'', 'null', 'undefined'}


@dataclass(frozen=True)
class RawRecord:
    """One validated row of deck content."""
    topic_id: str
    topic_name: str
    card_id: str
    image_url: str
    correct_answer: str
    wrong_answers: Tuple[str, ...] = ()
    difficulty: str = DEFAULT_DIFFICULTY
    created_at: str = ''


@dataclass(frozen=True)
class Topic:
    id: str
    name: str
    card_count: int
    preview_image: Optional[str] = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'cardCount': self.card_count,
            'previewImage': self.preview_image,
        }


@dataclass(frozen=True)
class PlayableCard:
    id: str
    image_url: str
    correct_answer: str
    wrong_answers: Tuple[str, ...] = ()
    difficulty: str = DEFAULT_DIFFICULTY

    def to_dict(self):
        return {
            'id': self.id,
            'imageUrl': self.image_url,
            'correctAnswer': self.correct_answer,
            'wrongAnswers': list(self.wrong_answers),
            'difficulty': self.difficulty,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            image_url=data['imageUrl'],
            correct_answer=data['correctAnswer'],
            wrong_answers=tuple(data.get('wrongAnswers') or ()),
            difficulty=data.get('difficulty') or DEFAULT_DIFFICULTY,
        )


def _field(row: Sequence[str], idx: int) -> str:
    if idx >= len(row) or row[idx] is None:
        return ''
    return str(row[idx]).strip()


def parse_row(row: Sequence[str], now: Optional[datetime] = None) -> Optional[RawRecord]:
    """Turn a raw sheet row into a RawRecord, or None if it cannot be played.

    Rows with fewer than five fields or a missing/placeholder image are
    dropped. Optional trailing columns get their defaults here so nothing
    downstream has to look at the raw row again.
    """
    if row is None or len(row) < MIN_FIELDS:
        return None

    image_url = _field(row, 3)
    if image_url in _PLACEHOLDER_IMAGES:
        return None

    wrong_answers = tuple(a for a in (_field(row, 5), _field(row, 6), _field(row, 7)) if a)

    difficulty = _field(row, 8).lower()
    if difficulty not in DIFFICULTIES:
        difficulty = DEFAULT_DIFFICULTY

    created_at = _field(row, 9)
    if not created_at:
        created_at = (now or datetime.now(timezone.utc)).isoformat()

    return RawRecord(
        topic_id=_field(row, 0),
        topic_name=_field(row, 1),
        card_id=_field(row, 2),
        image_url=image_url,
        correct_answer=_field(row, 4),
        wrong_answers=wrong_answers,
        difficulty=difficulty,
        created_at=created_at,
    )


def parse_rows(rows: Iterable[Sequence[str]]) -> Iterator[RawRecord]:
    """Yield valid records in source order; the first row is the header."""
    it = iter(rows)
    next(it, None)
    now = datetime.now(timezone.utc)
    for row in it:
        record = parse_row(row, now=now)
        if record is not None:
            yield record
