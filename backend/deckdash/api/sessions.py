from flask import Blueprint, jsonify, request, current_app
from deckdash import db, socketio, get_source, get_rng
from deckdash.models import PlaySession
from deckdash.api.decks import parse_limit, result_payload
from deckdash.services.decks.round_builder import list_topics, build_round, shuffle_choices
from deckdash.services.decks.scoring import score, share_text
from deckdash.services.decks.source import ContentLoadError
import time


sessions = Blueprint('sessions', __name__)


def _emit_update(session: PlaySession) -> None:
    socketio.emit(
        'session_update',
        {'session_code': session.session_code, 'status': session.status},
        to=f"session:{session.session_code}",
        namespace='/ws',
    )


def _state(session: PlaySession) -> dict:
    payload = session.to_dict()
    card = session.current_card
    if card is not None:
        # Choice order is decided per card shown, never stored
        payload['current_card'] = {
            'id': card.id,
            'imageUrl': card.image_url,
            'difficulty': card.difficulty,
            'choices': shuffle_choices(card, rng=get_rng()),
        }
    else:
        payload['current_card'] = None
    return payload


def _result(session: PlaySession) -> dict:
    cards = {c.id: c for c in session.round_cards}
    total = len(session.correct_ids) + len(session.wrong_ids)
    _, payload = result_payload(len(session.correct_ids), total, session.time_taken, breakdown=session.breakdown())
    payload.update({
        'session_code': session.session_code,
        'topic_id': session.topic_id,
        'topic_name': session.topic_name,
        'correct_cards': [cards[cid].to_dict() for cid in session.correct_ids if cid in cards],
        'wrong_cards': [cards[cid].to_dict() for cid in session.wrong_ids if cid in cards],
        'share_text': share_text(session.total_score, session.topic_name, request.args.get('share_url')),
    })
    return payload


def _get_session(session_code: str) -> PlaySession:
    return PlaySession.query.filter_by(session_code=session_code.upper()).first_or_404()


@sessions.route('', methods=['POST'])
def start_session():
    data = request.get_json(silent=True) or {}
    topic_id = data.get('topic_id')
    if not topic_id:
        return jsonify({'error': 'topic_id is required'}), 400
    try:
        limit = parse_limit(data.get('limit'))
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    try:
        rows = get_source().rows()
    except ContentLoadError as exc:
        current_app.logger.warning(f"[session-start] topic={topic_id} load failed: {exc}")
        return jsonify({'error': 'Failed to load cards'}), 502

    cards = build_round(rows, topic_id, limit, rng=get_rng())
    if not cards:
        return jsonify({'error': 'No cards found for this topic'}), 404
    topic = next((t for t in list_topics(rows) if t.id == topic_id), None)

    session = PlaySession(topic_id=topic_id, topic_name=topic.name if topic else None)
    session.round_cards = cards
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(
        f"[session-start] session={session.session_code} topic={topic_id} cards={len(cards)}"
    )
    return jsonify(_state(session)), 201


@sessions.route('/<string:session_code>', methods=['GET'])
def get_session(session_code):
    return jsonify(_state(_get_session(session_code)))


@sessions.route('/<string:session_code>/answer', methods=['POST'])
def submit_answer(session_code):
    data = request.get_json(silent=True) or {}
    card_id = data.get('card_id')
    answer = data.get('answer')
    if card_id is None or answer is None:
        return jsonify({'error': 'card_id and answer are required'}), 400

    session = _get_session(session_code)
    card = session.current_card
    if card is None:
        return jsonify({'error': 'Round already answered'}), 400
    if str(card_id) != card.id:
        return jsonify({'error': 'Answer is not for the current card'}), 400

    is_correct = answer == card.correct_answer
    session.record_answer(card, is_correct)
    db.session.add(session)
    db.session.commit()
    _emit_update(session)

    payload = _state(session)
    payload['correct'] = is_correct
    payload['correct_answer'] = card.correct_answer
    return jsonify(payload)


@sessions.route('/<string:session_code>/finish', methods=['POST'])
def finish_session(session_code):
    session = _get_session(session_code)
    if session.status == 'finished':
        return jsonify(_result(session))

    answered = len(session.correct_ids) + len(session.wrong_ids)
    if answered == 0:
        return jsonify({'error': 'No cards answered yet'}), 400

    data = request.get_json(silent=True) or {}
    raw_time = data.get('time_taken')
    try:
        # The client's clock is trusted; fall back to server-side elapsed time
        time_taken = float(raw_time) if raw_time is not None else float(int(time.time() - session.started_at))
    except (TypeError, ValueError):
        return jsonify({'error': 'time_taken must be a number'}), 400
    try:
        breakdown = score(len(session.correct_ids), answered, time_taken)
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    session.apply_score(breakdown, time_taken)
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(
        f"[session-finish] session={session.session_code} correct={len(session.correct_ids)}/{answered} "
        f"time={time_taken}s score={breakdown.total_score}"
    )
    _emit_update(session)
    return jsonify(_result(session))


@sessions.route('/<string:session_code>/result', methods=['GET'])
def get_result(session_code):
    session = _get_session(session_code)
    if session.status != 'finished':
        return jsonify({'error': 'Round not finished'}), 400
    return jsonify(_result(session))


@sessions.route('/<string:session_code>', methods=['DELETE'])
def discard_session(session_code):
    session = _get_session(session_code)
    code = session.session_code
    db.session.delete(session)
    db.session.commit()
    socketio.emit('session_ended', {'session_code': code}, to=f"session:{code}", namespace='/ws')
    return jsonify({'message': 'Session discarded'})
