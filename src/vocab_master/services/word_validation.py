"""Caller-side validation for word form data."""

from typing import Any, List, Mapping

from vocab_master.core import LEVELS, ValidationError


def _level_problem(level: Any) -> List[str]:
    if not level:
        return ["Level is required"]
    if level not in LEVELS:
        return [f"Level must be one of {', '.join(LEVELS)}"]
    return []


def validate_word_data(data: Mapping[str, Any]) -> None:
    """Reject word data with missing required fields.

    Every problem is collected so the caller can show them together.

    Raises:
        ValidationError: If english, turkish or level is missing or the
            level is not a CEFR level.
    """
    problems = []
    if not str(data.get("english") or "").strip():
        problems.append("English word is required")
    if not str(data.get("turkish") or "").strip():
        problems.append("Turkish translation is required")
    problems.extend(_level_problem(data.get("level")))
    if problems:
        raise ValidationError("; ".join(problems))


def validate_word_update(partial: Mapping[str, Any]) -> None:
    """Apply the same rules as ``validate_word_data`` to the fields present.

    Raises:
        ValidationError: If a provided english or turkish value is blank or a
            provided level is not a CEFR level.
    """
    problems = []
    for required in ("english", "turkish"):
        if required in partial and not str(partial[required] or "").strip():
            problems.append(f"{required.capitalize()} must not be empty")
    if "level" in partial:
        problems.extend(_level_problem(partial["level"]))
    if problems:
        raise ValidationError("; ".join(problems))
