from app.modules.generation.models import FlashcardItem, QuizItem
from app.modules.generation.parsers import as_records, parse_flashcards, parse_quiz


WELL_FORMED = """Q: What is Earth's only natural satellite?
A) Mars
B) The Moon
C) Phobos
D) Titan
Answer: B
"""


def test_parse_quiz_single_block():
    items = parse_quiz(WELL_FORMED)
    assert items is not None
    assert len(items) == 1
    assert items[0].question == "What is Earth's only natural satellite?"
    assert items[0].choices == ["Mars", "The Moon", "Phobos", "Titan"]
    assert items[0].answer_index == 1


def test_parse_quiz_drops_malformed_blocks_and_keeps_scanning():
    text = (
        "Q: Three choices only?\nA) one\nB) two\nC) three\nAnswer: A\n"
        "Q: Bad letter?\nA) w\nB) x\nC) y\nD) z\nAnswer: E\n"
        "Q: No answer line?\nA) w\nB) x\nC) y\nD) z\n"
        + WELL_FORMED
        + "Q: Last one\nA) 1\nB) 2\nC) 3\nD) 4\nAnswer: D) 4\n"
    )
    items = parse_quiz(text)
    assert [i.question for i in items] == [
        "What is Earth's only natural satellite?",
        "Last one",
    ]
    assert items[1].answer_index == 3


def test_parse_quiz_returns_none_without_questions():
    assert parse_quiz("The model rambled instead of writing a quiz.") is None
    assert parse_quiz("") is None


def test_parse_flashcards_with_header():
    assert parse_flashcards("Flashcard 1:\nFront: X\nBack: Y") == [
        FlashcardItem(question="X", answer="Y")
    ]


def test_parse_flashcards_missing_back_is_blank():
    assert parse_flashcards("Front: X") == [FlashcardItem(question="X", answer="")]


def test_parse_flashcards_multiple_and_empty_front():
    text = "Flashcard 1:\nFront:\nBack: orphan\nFlashcard 2:\nFront: A\nBack: B\nFront: C"
    cards = parse_flashcards(text)
    assert [(c.question, c.answer) for c in cards] == [("A", "B"), ("C", "")]


def test_parse_flashcards_none_when_nothing_matches():
    assert parse_flashcards("Q: not a flashcard\nA) nope") is None


def test_as_records_accepts_alternate_keys():
    records = as_records(
        [{"question": "Q", "options": ["a", "b", "c", "d"], "correct_index": 2}], QuizItem
    )
    assert records == [QuizItem(question="Q", choices=["a", "b", "c", "d"], answer_index=2)]
    assert records[0].model_dump(by_alias=True)["answerIndex"] == 2


def test_as_records_returns_invalid_json_unchanged():
    value = [{"question": "Q", "choices": ["only one"], "answerIndex": 0}]
    assert as_records(value, QuizItem) is value
    assert as_records({"cards": []}, FlashcardItem) == {"cards": []}
