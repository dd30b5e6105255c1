from flask import Blueprint, jsonify, request, current_app
from deckdash import get_source, get_rng
from deckdash.services.decks.round_builder import list_topics, build_round
from deckdash.services.decks.scoring import score, format_time, performance_rating, percentage_correct
from deckdash.services.decks.source import ContentLoadError


decks = Blueprint('decks', __name__)


def parse_limit(raw):
    """Round size from a query/body value; None means the configured default."""
    if raw is None or raw == '':
        return int(current_app.config.get('ROUND_SIZE', 30))
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValueError('limit must be a positive integer')
    if limit <= 0:
        raise ValueError('limit must be a positive integer')
    return min(limit, int(current_app.config.get('MAX_ROUND_SIZE', 100)))


def result_payload(correct_count, total_cards, time_taken, breakdown=None):
    """Breakdown plus the display extras shown on the results screen.

    A stored breakdown is reported as is; otherwise the tally is scored.
    """
    if breakdown is None:
        breakdown = score(correct_count, total_cards, time_taken)
    payload = breakdown.to_dict()
    payload.update({
        'correct_count': correct_count,
        'wrong_count': total_cards - correct_count,
        'total_cards': total_cards,
        'time_taken': time_taken,
        'formatted_time': format_time(time_taken),
        'percentage': percentage_correct(correct_count, total_cards),
        'performance': performance_rating(correct_count, total_cards).to_dict(),
    })
    return breakdown, payload


@decks.route('/topics', methods=['GET'])
def get_topics():
    try:
        topics = list_topics(get_source().rows())
    except ContentLoadError as exc:
        current_app.logger.warning(f"[topics] load failed: {exc}")
        return jsonify({'error': 'Failed to load decks'}), 502
    current_app.logger.info(f"[topics] count={len(topics)}")
    return jsonify([t.to_dict() for t in topics])


@decks.route('/topics/<string:topic_id>/cards', methods=['GET'])
def get_round(topic_id):
    try:
        limit = parse_limit(request.args.get('limit'))
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    try:
        cards = build_round(get_source().rows(), topic_id, limit, rng=get_rng())
    except ContentLoadError as exc:
        current_app.logger.warning(f"[round] topic={topic_id} load failed: {exc}")
        return jsonify({'error': 'Failed to load cards'}), 502
    current_app.logger.info(f"[round] topic={topic_id} limit={limit} cards={len(cards)}")
    return jsonify({'topic_id': topic_id, 'cards': [c.to_dict() for c in cards]})


@decks.route('/score', methods=['POST'])
def calculate_score():
    data = request.get_json(silent=True) or {}
    try:
        correct_count = int(data.get('correct_count'))
        total_cards = int(data.get('total_cards'))
        time_taken = float(data.get('time_taken'))
    except (TypeError, ValueError):
        return jsonify({'error': 'correct_count, total_cards and time_taken are required numbers'}), 400
    try:
        _, payload = result_payload(correct_count, total_cards, time_taken)
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify(payload)


@decks.route('/cache/clear', methods=['POST'])
def clear_cache():
    get_source().invalidate()
    current_app.logger.info("[cache-clear] sheet rows dropped")
    return jsonify({'message': 'Cache cleared'})
