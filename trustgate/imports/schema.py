"""Structural validation of imported exams."""

from typing import Any

from trustgate.imports.archive import decompress_exam
from trustgate.imports.exceptions import SchemaInvalidError
from trustgate.logging.logger import Log

# Only a bounded prefix of questions is inspected; large imports stay cheap.
_SAMPLE_SIZE = 5
_REQUIRED_STRING_FIELDS = ("id", "type", "text", "explanation")


def validate_exam_schema(data: Any) -> bool:
    """Return True if *data* looks like a saved exam."""
    if not isinstance(data, dict):
        return False
    questions = data.get("questions")
    if not isinstance(questions, list):
        return False
    return all(_is_valid_question(q) for q in questions[:_SAMPLE_SIZE])


def _is_valid_question(question: Any) -> bool:
    if not isinstance(question, dict):
        return False
    return all(isinstance(question.get(f), str) for f in _REQUIRED_STRING_FIELDS)


def load_exam(content: str) -> dict[str, Any]:
    """Decode an exam file and validate its structure.

    Raises:
        SchemaInvalidError: on undecodable content or a schema mismatch.
    """
    data = decompress_exam(content)
    if not validate_exam_schema(data):
        raise SchemaInvalidError(
            "Imported exam does not match the expected schema "
            "(a 'questions' list with id, type, text and explanation strings)."
        )
    Log.info(f"Imported exam with {len(data['questions'])} questions")
    return data
