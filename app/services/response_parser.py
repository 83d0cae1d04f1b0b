"""
Parsing of the free-text dinner plan returned by the completion backend.

The prose part of the reply is read with line heuristics and is never
rejected: the first line is the date header, bullet lines are meal
suggestions and the first other plain line is the encouragement. The
trailing JSON object is the only part consumed by code, so it is strict:
a missing block, unparsable JSON and a missing `meals` array are three
distinct failures.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from app.core.errors import InvalidJson, InvalidShape, MissingJsonBlock
from app.models.meal_plan import ParsedMealPlan
from app.services.logger import log_debug

log = logging.getLogger("dinner." + __name__)

BULLET_MARKERS = ("•", "-", "*")
MAX_MEALS = 3
# Rich text properties hold at most 2000 characters
RAW_JSON_MAX_CHARS = 2000

_BULLET_RE = re.compile(r"^[•\-*]\s*")
_TRAILING_CLOSE_RE = re.compile(r"\}\s*\Z")


@dataclass
class JsonBlock:
    text: str
    # another JSON-like object precedes the chosen one
    ambiguous: bool = False


@dataclass
class ParsedResponse:
    date_line: str
    meal1: str
    meal2: str
    meal3: str
    encouragement: str
    raw_json: str
    parsed: ParsedMealPlan
    ambiguous_json: bool = False

    @property
    def meals(self) -> List[str]:
        return [self.meal1, self.meal2, self.meal3]


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def is_bullet(line: str) -> bool:
    return line.startswith(BULLET_MARKERS)


def extract_bullets(lines: List[str]) -> List[str]:
    bullets = [line for line in lines if is_bullet(line)][:MAX_MEALS]
    return [_BULLET_RE.sub("", line, count=1) for line in bullets]


def extract_encouragement(lines: List[str], date_line: str) -> str:
    for line in lines:
        if line == date_line or is_bullet(line):
            continue
        if line.startswith("{") or line.startswith("}"):
            continue
        return line
    return ""


def _match_opening(text: str, close_idx: int) -> int:
    """Walk back from a closing brace to the brace that opens it."""
    depth = 0
    for j in range(close_idx, -1, -1):
        ch = text[j]
        if ch == "}":
            depth += 1
        elif ch == "{":
            depth -= 1
            if depth == 0:
                return j
    # Unbalanced: fall back to the first opening brace
    return text.find("{")


def extract_json_block(text: str) -> Optional[JsonBlock]:
    """
    Return the JSON object that ends the text, or None.

    The block must close at the very end of the text (trailing whitespace
    allowed). The span runs from the final closing brace back to the opening
    brace that decodes up to it; when nothing decodes, braces are matched
    by depth so the caller still gets a span to report as invalid.
    """
    text = text or ""
    m = _TRAILING_CLOSE_RE.search(text)
    if not m:
        return None

    end = m.start() + 1
    first_open = text.find("{", 0, end)
    if first_open == -1:
        return None

    decoder = json.JSONDecoder()
    for start in (i for i in range(first_open, end) if text[i] == "{"):
        try:
            _, stop = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if stop == end:
            ambiguous = start > first_open and "}" in text[first_open:start]
            return JsonBlock(text[start:end], ambiguous=ambiguous)

    return JsonBlock(text[_match_opening(text, end - 1):end])


def parse_meal_plan_json(raw: str) -> ParsedMealPlan:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidJson(
            f"Invalid JSON in AI output (parse failed at line {e.lineno}, column {e.colno})."
        ) from e

    meals = data.get("meals") if isinstance(data, dict) else None
    if not isinstance(meals, list):
        raise InvalidShape()

    return ParsedMealPlan.model_validate(data)


def parse_response(text: str) -> ParsedResponse:
    lines = split_lines(text)
    date_line = lines[0] if lines else ""
    bullets = extract_bullets(lines)
    bullets += [""] * (MAX_MEALS - len(bullets))

    block = extract_json_block(text)
    if block is None:
        raise MissingJsonBlock()
    if block.ambiguous:
        log.warning("AI output holds more than one JSON-like object; using the last one.")

    parsed = parse_meal_plan_json(block.text)

    result = ParsedResponse(
        date_line=date_line,
        meal1=bullets[0],
        meal2=bullets[1],
        meal3=bullets[2],
        encouragement=extract_encouragement(lines, date_line),
        raw_json=block.text[:RAW_JSON_MAX_CHARS],
        parsed=parsed,
        ambiguous_json=block.ambiguous,
    )
    log_debug(
        "response_parsed",
        {"date_line": result.date_line, "meals": result.meals, "meal_ids": parsed.meal_ids()},
    )
    return result
