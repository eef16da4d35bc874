"""Word enrichment abstraction - AI-generated word cards for the add form."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vocab_master.core import DEFAULT_LEVEL, LEVELS, Example
from vocab_master.io.migrations import TURKISH_EXPLANATION_ALIASES

ENRICHMENT_PROMPT_TEMPLATE = """I will give you a single English word: "{word}".
Please reply ONLY with a single JSON object that strictly follows the schema below. Do not include any extra commentary, explanation, or text, only JSON.

Schema:
{{
    "english": string,
    "turkish": string,
    "pronunciation": string|null,
    "partOfSpeech": string|null,
    "level": string|null,
    "synonyms": [string],
    "antonyms": [string],
    "englishExplanation": string|null,
    "turkishExplanation": string|null,
    "notes": string|null,
    "examples": [
        {{"english": string, "turkish": string, "context": string|null}}
    ]
}}

Requirements:
- "level" is the CEFR level (A1..C2) only, no extra information.
- Provide at least 4 examples: one formal, one informal, one academic/business and one everyday usage.
- Keep array items as arrays and strings as strings. Use null for empty optional fields.
- DO NOT output anything except the JSON object (no markdown, no explanation).

Word: {word}"""


def build_enrichment_prompt(english: str) -> str:
    return ENRICHMENT_PROMPT_TEMPLATE.format(word=english.strip())


def _text(value: Any) -> str:
    return str(value).strip() if value else ""


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v and str(v).strip()]


def parse_enrichment_json(raw_text: str) -> Dict[str, Any]:
    """Turn a model reply into add-form data.

    Only the span from the first ``{`` to the last ``}`` is parsed, so
    markdown fences or chatter around the object are tolerated.

    Raises:
        ValueError: If no JSON object is found or it does not parse.
    """
    if not raw_text or not raw_text.strip():
        raise ValueError("Empty response: paste the generated JSON")
    first = raw_text.find("{")
    last = raw_text.rfind("}")
    if first == -1 or last <= first:
        raise ValueError("No JSON object found in response")
    try:
        obj = json.loads(raw_text[first:last + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse JSON: {e}") from e
    if not isinstance(obj, dict):
        raise ValueError("Response JSON is not an object")

    level = _text(obj.get("level")).upper()
    turkish_explanation = next(
        (_text(obj[k]) for k in TURKISH_EXPLANATION_ALIASES if obj.get(k)), ""
    )
    examples = [
        Example.from_raw(e) for e in obj.get("examples") or [] if e
    ] if isinstance(obj.get("examples"), list) else []

    return {
        "english": _text(obj.get("english") or obj.get("English")),
        "turkish": _text(obj.get("turkish") or obj.get("Turkish")),
        "pronunciation": _text(obj.get("pronunciation") or obj.get("pron")),
        "level": level if level in LEVELS else DEFAULT_LEVEL,
        "english_explanation": _text(obj.get("englishExplanation")),
        "turkish_explanation": turkish_explanation,
        "synonyms": _string_list(obj.get("synonyms")),
        "antonyms": _string_list(obj.get("antonyms")),
        "notes": _text(obj.get("notes") or obj.get("note")),
        "examples": examples,
    }


@dataclass
class EnrichmentResult:
    """Result of an enrichment request."""

    data: Optional[Dict[str, Any]]
    model: Optional[str]
    error: Optional[str] = None

    def is_success(self) -> bool:
        """Return True when the call produced usable word data."""
        return self.error is None and self.data is not None


class WordEnrichmentService(ABC):
    """
    Abstract service that fills in a word card from its english headword.

    Implementations (e.g., GeminiWordEnrichmentService) handle API calls.
    """

    @abstractmethod
    def enrich(self, english: str, api_key: str) -> EnrichmentResult:
        """Generate translation, explanations and examples for a word.

        Args:
            english: The english headword.
            api_key: API key for authentication.

        Returns:
            EnrichmentResult with add-form data or an error message.
        """
        pass
