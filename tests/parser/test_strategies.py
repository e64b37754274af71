from __future__ import annotations

import json

from sprout_quiz.parser.models import QuizQuestion
from sprout_quiz.parser.strategies import (
    parse_json,
    parse_markdown,
    parse_plain_text,
)


SKY = """\
1. What color is the sky?
A) Red
B) Blue
C) Green
Answer: B
Explanation: Rayleigh scattering.
"""


def test_parse_json_array_preserves_order_and_fields():
    payload = [
        {
            "question": "First?",
            "options": ["a", "b"],
            "correctAnswer": 1,
            "explanation": "because",
        },
        {
            "question": "Second?",
            "options": ["c", "d", "e"],
            "correctAnswer": 2,
            "explanation": None,
        },
    ]
    result = parse_json(json.dumps(payload))
    assert [q.to_dict() for q in result] == payload


def test_parse_json_wrapper_object():
    payload = {
        "questions": [
            {"question": "Q?", "options": ["x", "y"], "correctAnswer": 0}
        ]
    }
    result = parse_json(json.dumps(payload))
    assert result == [QuizQuestion("Q?", ("x", "y"), 0, None)]


def test_parse_json_accepts_code_fence():
    text = '```json\n[{"question": "Q?", "options": ["x", "y"], "correctAnswer": 1}]\n```'
    result = parse_json(text)
    assert result is not None
    assert result[0].correct_answer == 1


def test_parse_json_drops_invalid_entries():
    payload = [
        {"question": "Kept?", "options": ["x", "y"], "correctAnswer": 0},
        {"question": "No options", "correctAnswer": 0},
        {"options": ["x"], "correctAnswer": 0},
        {"question": "Bool index", "options": ["x", "y"], "correctAnswer": True},
        "not an object",
    ]
    result = parse_json(json.dumps(payload))
    assert [q.question for q in result] == ["Kept?"]


def test_parse_json_rejects_malformed_and_unrelated_documents():
    assert parse_json('[{"question": "broken"') is None
    assert parse_json('{"items": []}') is None
    assert parse_json("42") is None
    assert parse_json("[]") is None


def test_parse_markdown_sky_example():
    result = parse_markdown(SKY)
    assert result == [
        QuizQuestion(
            question="What color is the sky?",
            options=("Red", "Blue", "Green"),
            correct_answer=1,
            explanation="Rayleigh scattering.",
        )
    ]


def test_parse_markdown_multiple_questions_and_markers():
    text = """\
1. Capital of France?
A) London
B) Berlin
C) Paris *
D) Madrid

Q2: Closest planet to the Sun
A. Venus
B. Mercury [CORRECT]

Which gas do plants absorb?
a) not an option line
A) Oxygen
B) Carbon dioxide ✓
correct: b
"""
    result = parse_markdown(text)
    assert [q.question for q in result] == [
        "Capital of France?",
        "Q2: Closest planet to the Sun",
        "Which gas do plants absorb?",
    ]
    assert result[0].options == ("London", "Berlin", "Paris", "Madrid")
    assert result[0].correct_answer == 2
    assert result[1].options == ("Venus", "Mercury")
    assert result[1].correct_answer == 1
    assert result[2].options == ("Oxygen", "Carbon dioxide")
    assert result[2].correct_answer == 1


def test_parse_markdown_keeps_inner_marker_characters():
    result = parse_markdown(
        "1. Which equals six?\nA) 2*3\nB) 5\n\n"
        "2. Which is true?\nA) 4 + 4 = 9\nB) [CORRECT] 5 * 3 = 15 ✓\n"
    )
    assert result[0].options == ("2*3", "5")
    assert result[1].options == ("4 + 4 = 9", "5 * 3 = 15")
    assert result[1].correct_answer == 1


def test_parse_markdown_defaults_answer_and_ignores_bad_keys():
    text = "1. Pick one?\nA) x\nB) y\nAnswer: Z\n"
    result = parse_markdown(text)
    assert result[0].correct_answer == 0
    assert result[0].explanation is None


def test_parse_markdown_skips_questions_without_options():
    text = "1. Explain photosynthesis.\n\n2. Pick?\nA) x\nB) y\n"
    result = parse_markdown(text)
    assert [q.question for q in result] == ["Pick?"]


def test_parse_markdown_no_result_without_options():
    assert parse_markdown("Just a sentence.\nAnother line.") is None


def test_parse_plain_text_blocks():
    text = "Largest ocean\nPacific\nAtlantic\nIndian\nArctic\n\nToo short\nOne"
    result = parse_plain_text(text)
    assert result == [
        QuizQuestion(
            "Largest ocean", ("Pacific", "Atlantic", "Indian"), 0, None
        )
    ]


def test_parse_plain_text_no_result_for_short_blocks():
    assert parse_plain_text("one\ntwo\n\nthree") is None
