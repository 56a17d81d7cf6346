from __future__ import annotations
import re
from typing import Any, Callable
from urllib.parse import urlparse
from mentor_admin.errors import MissingContent
from mentor_admin.schemas.submission import CanonicalContent, ContentEntry
from mentor_admin.schemas.task import TASK_TYPES
from mentor_admin.services.task_schema import option_items

NO_TEXT = "No text content"
NO_OPTION = "No option selected"

# key that must be present in `content` for each type (None = any mapping will do)
STRUCTURAL_KEYS: dict[str, str | None] = {
    "TEXT": None,
    "IMAGE": None,
    "VIDEO": "videoUrl",
    "QUIZ": "answers",
    "FORM": "responses",
    "PICK_ONE": "selectedOption",
    "CHECKLIST": "checkedItems",
}

VIDEO_PLATFORMS = {
    "youtube.com": "youtube",
    "youtu.be": "youtube",
    "vimeo.com": "vimeo",
    "tiktok.com": "tiktok",
    "instagram.com": "instagram",
}


def humanize_key(key: str) -> str:
    """'favoriteVerse' -> 'Favorite Verse', 'first_name' -> 'First Name'"""
    spaced = re.sub(r"([A-Z])", r" \1", key).replace("_", " ").strip()
    return " ".join(w[:1].upper() + w[1:] for w in spaced.split())


def detect_platform(url: str) -> str | None:
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    for domain, name in VIDEO_PLATFORMS.items():
        if host == domain or host.endswith("." + domain):
            return name
    return None


def _require_mapping(content: dict, key: str) -> dict:
    value = content[key]
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MissingContent(f"{key} must be an object", details={"key": key, "received": type(value).__name__})
    return value


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value in ([], {})


# ---------- per-type interpreters ----------

def _text(content: dict, options: dict | None) -> list[ContentEntry]:
    text = content.get("text")
    return [ContentEntry(label="Text", value=text if not _blank(text) else NO_TEXT)]


def _image(content: dict, options: dict | None) -> list[ContentEntry]:
    count = content.get("imageCount")
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        count = 0
    entries = [ContentEntry(label="Images", value=count)]
    if not _blank(content.get("description")):
        entries.append(ContentEntry(label="Description", value=content["description"]))
    return entries


def _video(content: dict, options: dict | None) -> list[ContentEntry]:
    url = content.get("videoUrl")
    if url is not None and not isinstance(url, str):
        raise MissingContent("videoUrl must be a string", details={"key": "videoUrl"})
    platform = content.get("platform") or (detect_platform(url) if url else None)
    entries = [ContentEntry(label="Video URL", value=url or None)]
    if platform:
        entries.append(ContentEntry(label="Platform", value=platform))
    return entries


def _quiz(content: dict, options: dict | None) -> list[ContentEntry]:
    answers = _require_mapping(content, "answers")
    entries: list[ContentEntry] = []
    used: set[str] = set()
    # answers may be keyed by question text or by question id
    for question in option_items("QUIZ", options):
        for key in (question.get("text"), question.get("id")):
            if key in answers and key not in used:
                entries.append(ContentEntry(label=question["text"], value=answers[key]))
                used.add(key)
                break
    for key, value in answers.items():
        if key not in used:
            entries.append(ContentEntry(label=str(key), value=value))
    return entries


def _form(content: dict, options: dict | None) -> list[ContentEntry]:
    responses = _require_mapping(content, "responses")
    entries: list[ContentEntry] = []
    used: set[str] = set()
    for field in option_items("FORM", options):
        for key in (field.get("id"), field.get("label")):
            if key in responses and key not in used:
                entries.append(ContentEntry(label=field["label"], value=responses[key]))
                used.add(key)
                break
    for key, value in responses.items():
        if key not in used:
            entries.append(ContentEntry(label=humanize_key(str(key)), value=value))
    return entries


def _pick_one(content: dict, options: dict | None) -> list[ContentEntry]:
    selected = content["selectedOption"]
    value = NO_OPTION
    if not _blank(selected):
        value = selected
        for option in option_items("PICK_ONE", options):
            if selected in (option.get("id"), option.get("title")):
                value = option["title"]
                break
    entries = [ContentEntry(label="Selected option", value=value)]
    if not _blank(content.get("explanation")):
        entries.append(ContentEntry(label="Explanation", value=content["explanation"]))
    return entries


def _checklist(content: dict, options: dict | None) -> list[ContentEntry]:
    checked = content["checkedItems"]
    if checked is None:
        checked = []
    if not isinstance(checked, list):
        raise MissingContent("checkedItems must be a list", details={"key": "checkedItems", "received": type(checked).__name__})
    checked_keys = {str(c) for c in checked}
    items = option_items("CHECKLIST", options)
    if not items:
        return [ContentEntry(label=str(c), value=True) for c in checked]
    entries = []
    for item in items:
        done = item.get("id") in checked_keys or item.get("text") in checked_keys
        entries.append(ContentEntry(label=item["text"], value=done))
    return entries


Interpreter = Callable[[dict, "dict | None"], list[ContentEntry]]

INTERPRETERS: dict[str, Interpreter] = {
    "TEXT": _text,
    "IMAGE": _image,
    "VIDEO": _video,
    "QUIZ": _quiz,
    "FORM": _form,
    "PICK_ONE": _pick_one,
    "CHECKLIST": _checklist,
}


def _is_empty(task_type: str, content: dict) -> bool:
    key = STRUCTURAL_KEYS[task_type]
    if key is not None:
        return _blank(content.get(key))
    if task_type == "TEXT":
        return _blank(content.get("text"))
    return not content.get("imageCount")


def validate_submission_content(task_type: str, content: Any, options: dict | None = None) -> CanonicalContent:
    """
    Check a submission payload against the shape its task type expects and
    return it as ordered (label, value) entries.

    Partial content is accepted (placeholders fill the gaps). Absent content,
    a non-object payload, or a missing structural key raises MissingContent.
    Passing the task's options lets entries be labeled and ordered the way
    the task defines them.
    """
    if task_type not in INTERPRETERS:
        raise MissingContent(f"Unknown task type {task_type!r}", details={"allowed": list(TASK_TYPES)})
    if content is None:
        raise MissingContent(f"{task_type} submission has no content")
    if not isinstance(content, dict):
        raise MissingContent(f"{task_type} content must be an object", details={"received": type(content).__name__})
    key = STRUCTURAL_KEYS[task_type]
    if key is not None and key not in content:
        raise MissingContent(f"{task_type} content needs a {key!r} key", details={"key": key})

    entries = INTERPRETERS[task_type](content, options)
    return CanonicalContent(task_type=task_type, entries=entries, is_empty=_is_empty(task_type, content))
