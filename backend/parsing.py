"""
Natural-language to task pipeline.

    text -> prompt -> provider.generate -> normalize_response -> validate_*

Single-task mode defaults every field and never rejects a parsed value.
Transcript mode is strict: each task must carry name, assignee and dueDate.
The two policies differ on purpose; keep them separate.
"""
import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from errors import MalformedResponseError, MissingFieldError, ShapeError
from models import DEFAULT_PRIORITY, PRIORITIES, ParsedTask, TranscriptTask
from prompts import build_single_task_prompt, build_transcript_prompt, format_instant
from providers import LLMProvider

logger = logging.getLogger(__name__)

# Only a fence at the very start/end is removed; surrounding prose is not
FENCE_OPEN = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
FENCE_CLOSE = re.compile(r"\n?```$")

REQUIRED_TRANSCRIPT_FIELDS = ("name", "assignee", "dueDate")

DEFAULT_NAME = "Unnamed task"
DEFAULT_ASSIGNEE = "Unassigned"
DEFAULT_DUE_DELTA = timedelta(hours=24)


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def normalize_response(raw: Optional[str]) -> Any:
    """Strip markdown code fences from provider text and parse it as JSON."""
    cleaned = strip_code_fences(raw or "")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Provider response is not valid JSON: {e}") from e


def _text(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value).strip()


def normalize_due_date(value: Any, reference: datetime) -> str:
    """
    Return an absolute UTC ISO 8601 instant for a single-task dueDate.

    Missing values default to reference + 24h. Values that are not ISO 8601
    (e.g. "next Friday" left unresolved by the model) also fall back to the
    default. Naive timestamps are read as UTC.
    """
    raw = _text(value)
    if not raw:
        return format_instant(reference + DEFAULT_DUE_DELTA)

    try:
        parsed = datetime.fromisoformat(raw)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Offsets near datetime.min/max overflow when shifted to UTC
        return format_instant(parsed)
    except (ValueError, OverflowError):
        logger.warning("Unparseable dueDate %r, defaulting to reference + 24h", raw)
        return format_instant(reference + DEFAULT_DUE_DELTA)


def normalize_priority(value: Any) -> str:
    return value if value in PRIORITIES else DEFAULT_PRIORITY


def validate_single(value: Any, reference: datetime) -> ParsedTask:
    """Fill defaults for a single parsed task. Never raises."""
    data = value if isinstance(value, dict) else {}
    if not isinstance(value, dict):
        logger.warning("Single-task response is a %s, not an object; using defaults", type(value).__name__)

    return ParsedTask(
        name=_text(data.get("name")) or DEFAULT_NAME,
        assignee=_text(data.get("assignee")) or DEFAULT_ASSIGNEE,
        due_date=normalize_due_date(data.get("dueDate"), reference),
        priority=normalize_priority(data.get("priority")),
        description=_text(data.get("description")),
        status="pending",
    )


def validate_batch(value: Any) -> list[TranscriptTask]:
    """Validate a transcript response: a JSON array of complete tasks."""
    if not isinstance(value, list):
        raise ShapeError(f"Response is not an array (got {type(value).__name__})")

    tasks = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise MissingFieldError(f"Task {index} is not an object")

        missing = [field for field in REQUIRED_TRANSCRIPT_FIELDS if not item.get(field)]
        if missing:
            raise MissingFieldError(f"Task {index} is missing required fields: {', '.join(missing)}")

        tasks.append(TranscriptTask(
            name=str(item["name"]),
            assignee=str(item["assignee"]),
            due_date=str(item["dueDate"]),
            priority=normalize_priority(item.get("priority")),
            status="pending",
        ))
    return tasks


async def parse_one(text: str, provider: LLMProvider, reference: Optional[datetime] = None) -> ParsedTask:
    """Turn one natural-language sentence into a task preview."""
    reference = reference or datetime.now(timezone.utc)
    raw = await provider.generate(build_single_task_prompt(text, reference))
    return validate_single(normalize_response(raw), reference)


async def parse_many(transcript: str, provider: LLMProvider) -> list[TranscriptTask]:
    """Extract every task mentioned in a meeting transcript."""
    raw = await provider.generate(build_transcript_prompt(transcript))
    tasks = validate_batch(normalize_response(raw))
    logger.info("Extracted %d tasks from transcript", len(tasks))
    return tasks
