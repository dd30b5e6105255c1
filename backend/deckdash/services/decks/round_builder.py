import random
from collections import OrderedDict
from typing import Iterable, List, Optional, Sequence, Tuple

from .records import PlayableCard, RawRecord, Topic, parse_rows

WRONG_ANSWERS_PER_CARD = 3
DEFAULT_ROUND_SIZE = 30


def list_topics(rows: Iterable[Sequence[str]]) -> List[Topic]:
    """Group valid rows into topics, in first-seen order.

    The display name and preview image come from the first valid card seen
    for a topic; card_count is a snapshot of the rows handed in.
    """
    grouped: "OrderedDict[str, dict]" = OrderedDict()
    for record in parse_rows(rows):
        entry = grouped.get(record.topic_id)
        if entry is None:
            grouped[record.topic_id] = {
                'name': record.topic_name,
                'count': 1,
                'preview': record.image_url,
            }
        else:
            entry['count'] += 1

    return [
        Topic(id=topic_id, name=e['name'], card_count=e['count'], preview_image=e['preview'])
        for topic_id, e in grouped.items()
    ]


def _wrong_answers(record: RawRecord, pool: List[RawRecord], rng: random.Random) -> Tuple[str, ...]:
    # Topics with duplicate correct answers may yield repeated wrong answers.
    others = [r.correct_answer for r in pool if r.card_id != record.card_id]
    return tuple(rng.sample(others, min(WRONG_ANSWERS_PER_CARD, len(others))))


def build_round(
    rows: Iterable[Sequence[str]],
    topic_id: str,
    limit: int = DEFAULT_ROUND_SIZE,
    rng: Optional[random.Random] = None,
) -> List[PlayableCard]:
    """Build a shuffled round of playable cards for one topic.

    The first `limit` valid cards of the topic (source order) are played;
    each gets up to three wrong answers sampled from the other cards'
    correct answers. An unknown topic gives an empty round.
    """
    rng = rng or random.Random()
    in_topic = [r for r in parse_rows(rows) if r.topic_id == topic_id]
    selected = in_topic[:max(0, limit)]

    cards = [
        PlayableCard(
            id=record.card_id,
            image_url=record.image_url,
            correct_answer=record.correct_answer,
            wrong_answers=_wrong_answers(record, in_topic, rng),
            difficulty=record.difficulty,
        )
        for record in selected
    ]
    rng.shuffle(cards)
    return cards


def shuffle_choices(card: PlayableCard, rng: Optional[random.Random] = None) -> List[str]:
    """Correct and wrong answers in a fresh order, for display only."""
    rng = rng or random.Random()
    choices = [card.correct_answer, *card.wrong_answers]
    rng.shuffle(choices)
    return choices
