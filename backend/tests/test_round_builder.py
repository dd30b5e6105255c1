import random

from deckdash.services.decks.round_builder import build_round, list_topics, shuffle_choices
from deckdash.services.decks.records import PlayableCard


def test_list_topics_groups_in_first_seen_order(sheet_rows):
    topics = list_topics(sheet_rows)
    assert [t.id for t in topics] == ['birds', 'flags']
    birds, flags = topics
    assert birds.name == 'Garden Birds'
    assert birds.card_count == 5
    assert birds.preview_image == 'https://upload.wikimedia.org/robin.jpg'
    assert flags.card_count == 2
    assert flags.preview_image == 'https://upload.wikimedia.org/fr.png'
    assert all(t.card_count > 0 for t in topics)


def test_list_topics_uses_first_display_name():
    rows = [
        ['header'],
        ['t', 'First', 'c1', 'https://img/1', 'A'],
        ['t', 'Second', 'c2', 'https://img/2', 'B'],
    ]
    (topic,) = list_topics(rows)
    assert topic.name == 'First'
    assert topic.to_dict() == {'id': 't', 'name': 'First', 'cardCount': 2, 'previewImage': 'https://img/1'}


def test_list_topics_header_only():
    assert list_topics([['topic_id', 'topic_name']]) == []


def test_build_round_full_topic_has_three_distinct_wrong_answers(sheet_rows):
    cards = build_round(sheet_rows, 'birds', 30, rng=random.Random(7))
    assert len(cards) == 5
    assert {c.id for c in cards} == {'b1', 'b2', 'b4', 'b5', 'b6'}
    for card in cards:
        assert len(card.wrong_answers) == 3
        assert card.correct_answer not in card.wrong_answers
        assert len(set(card.wrong_answers)) == 3


def test_build_round_never_uses_invalid_rows(sheet_rows):
    cards = build_round(sheet_rows, 'birds', 30, rng=random.Random(1))
    answers = {a for c in cards for a in [c.correct_answer, *c.wrong_answers]}
    assert 'Magpie' not in answers
    assert 'Owl' not in answers


def test_build_round_short_topic_gets_fewer_wrong_answers(sheet_rows):
    cards = build_round(sheet_rows, 'flags', 30, rng=random.Random(3))
    assert len(cards) == 2
    by_id = {c.id: c for c in cards}
    assert by_id['f1'].wrong_answers == ('Germany',)
    assert by_id['f2'].wrong_answers == ('France',)
    assert by_id['f1'].difficulty == 'hard'


def test_build_round_single_card_topic():
    rows = [['h'], ['solo', 'Solo', 'c1', 'https://img/1', 'Only']]
    (card,) = build_round(rows, 'solo', 10, rng=random.Random(0))
    assert card.wrong_answers == ()


def test_build_round_truncates_in_source_order(sheet_rows):
    for seed in range(5):
        cards = build_round(sheet_rows, 'birds', 3, rng=random.Random(seed))
        assert len(cards) == 3
        assert {c.id for c in cards} == {'b1', 'b2', 'b4'}
        # Wrong answers still come from the whole topic
        pool = {'Robin', 'Wren', 'Blackbird', 'Starling', 'Jay'}
        for card in cards:
            assert set(card.wrong_answers) <= pool - {card.correct_answer}


def test_build_round_unknown_or_empty(sheet_rows):
    assert build_round(sheet_rows, 'nope', 30) == []
    assert build_round(sheet_rows, 'Birds', 30) == []
    assert build_round(sheet_rows, 'birds', 0) == []
    assert build_round(sheet_rows, 'birds', -4) == []


def test_build_round_is_reproducible_with_seed(sheet_rows):
    first = build_round(sheet_rows, 'birds', 30, rng=random.Random(42))
    second = build_round(sheet_rows, 'birds', 30, rng=random.Random(42))
    assert first == second


def test_build_round_same_set_across_calls(sheet_rows):
    orders = set()
    for seed in range(20):
        cards = build_round(sheet_rows, 'birds', 30, rng=random.Random(seed))
        assert {c.id for c in cards} == {'b1', 'b2', 'b4', 'b5', 'b6'}
        orders.add(tuple(c.id for c in cards))
    assert len(orders) > 1


def test_duplicate_correct_answers_may_repeat_in_wrong_answers():
    rows = [['h']] + [
        ['dup', 'Dup', f'c{i}', f'https://img/{i}', answer]
        for i, answer in enumerate(['Cat', 'Cat', 'Cat', 'Cat', 'Dog'])
    ]
    cards = build_round(rows, 'dup', 30, rng=random.Random(5))
    dog = next(c for c in cards if c.id == 'c4')
    assert dog.wrong_answers == ('Cat', 'Cat', 'Cat')


def test_shuffle_choices_contains_every_answer():
    card = PlayableCard(id='c', image_url='u', correct_answer='A', wrong_answers=('B', 'C', 'D'))
    choices = shuffle_choices(card, rng=random.Random(9))
    assert sorted(choices) == ['A', 'B', 'C', 'D']
    assert card.wrong_answers == ('B', 'C', 'D')
