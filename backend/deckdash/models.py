from deckdash import db
from deckdash.services.decks.records import PlayableCard
from deckdash.services.decks.scoring import ScoreBreakdown
import json
import string
import random
import time

def generate_session_code(length=6):
    """Generate a unique, short session code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not PlaySession.query.filter_by(session_code=code).first():
            return code

class PlaySession(db.Model):
    """One in-progress or just-finished round for a single browser."""
    __tablename__ = 'play_session'
    id = db.Column(db.Integer, primary_key=True)
    session_code = db.Column(db.String(6), unique=True, index=True)
    topic_id = db.Column(db.String(128), nullable=False)
    topic_name = db.Column(db.String(256), nullable=True)
    status = db.Column(db.String(32), default='in_progress')  # in_progress, answered, finished
    cards = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded playable cards, round order
    current_card_index = db.Column(db.Integer, default=0, nullable=False)
    correct_card_ids = db.Column(db.Text, nullable=False, default='[]')
    wrong_card_ids = db.Column(db.Text, nullable=False, default='[]')
    started_at = db.Column(db.Float, nullable=False)
    time_taken = db.Column(db.Float, nullable=True)
    # Score breakdown, written once on finish
    base_points = db.Column(db.Integer, nullable=True)
    time_bonus = db.Column(db.Integer, nullable=True)
    total_score = db.Column(db.Integer, nullable=True)
    average_time_per_card = db.Column(db.Float, nullable=True)

    def __init__(self, **kwargs):
        super(PlaySession, self).__init__(**kwargs)
        if not self.session_code:
            self.session_code = generate_session_code()
        if self.started_at is None:
            self.started_at = time.time()

    @property
    def round_cards(self):
        return [PlayableCard.from_dict(c) for c in json.loads(self.cards or '[]')]

    @round_cards.setter
    def round_cards(self, cards):
        self.cards = json.dumps([c.to_dict() for c in cards])

    @property
    def correct_ids(self):
        return json.loads(self.correct_card_ids or '[]')

    @property
    def wrong_ids(self):
        return json.loads(self.wrong_card_ids or '[]')

    @property
    def total_cards(self):
        return len(json.loads(self.cards or '[]'))

    @property
    def current_card(self):
        cards = self.round_cards
        if self.status != 'in_progress' or self.current_card_index >= len(cards):
            return None
        return cards[self.current_card_index]

    def record_answer(self, card, is_correct):
        if is_correct:
            self.correct_card_ids = json.dumps(self.correct_ids + [card.id])
        else:
            self.wrong_card_ids = json.dumps(self.wrong_ids + [card.id])
        self.current_card_index += 1
        if self.current_card_index >= self.total_cards:
            self.status = 'answered'

    def breakdown(self):
        """The score written at finish, or None while the round is open."""
        if self.total_score is None:
            return None
        return ScoreBreakdown(
            base_points=self.base_points,
            time_bonus=self.time_bonus,
            total_score=self.total_score,
            average_time_per_card=self.average_time_per_card,
        )

    def apply_score(self, breakdown, time_taken):
        self.time_taken = time_taken
        self.base_points = breakdown.base_points
        self.time_bonus = breakdown.time_bonus
        self.total_score = breakdown.total_score
        self.average_time_per_card = breakdown.average_time_per_card
        self.status = 'finished'

    def to_dict(self):
        return {
            'id': self.id,
            'session_code': self.session_code,
            'topic_id': self.topic_id,
            'topic_name': self.topic_name,
            'status': self.status,
            'current_card_index': self.current_card_index,
            'total_cards': self.total_cards,
            'correct_count': len(self.correct_ids),
            'wrong_count': len(self.wrong_ids),
            'started_at': self.started_at,
        }
