from __future__ import annotations
import secrets, string, time
from dataclasses import dataclass
from typing import Any
from pydantic import BaseModel, ValidationError
from mentor_admin.errors import SchemaMismatch
from mentor_admin.schemas.task import (
    TASK_TYPES, QuizOptions, FormOptions, PickOneOptions, ChecklistOptions,
)

ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class OptionSchema:
    """How one task type stores its options: document model, item collection key, id prefix."""
    model: type[BaseModel] | None
    collection: str | None = None
    id_prefix: str | None = None


OPTION_SCHEMAS: dict[str, OptionSchema] = {
    "TEXT": OptionSchema(None),
    "IMAGE": OptionSchema(None),
    "VIDEO": OptionSchema(None),
    "QUIZ": OptionSchema(QuizOptions, "questions", "question"),
    "FORM": OptionSchema(FormOptions, "fields", "field"),
    "PICK_ONE": OptionSchema(PickOneOptions, "options", "option"),
    "CHECKLIST": OptionSchema(ChecklistOptions, "items", "item"),
}


def schema_for(task_type: str) -> OptionSchema:
    schema = OPTION_SCHEMAS.get(task_type)
    if schema is None:
        raise SchemaMismatch(f"Unknown task type {task_type!r}", details={"allowed": list(TASK_TYPES)})
    return schema


def _problems(exc: ValidationError) -> list[dict]:
    out = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"]
        if err["type"] == "extra_forbidden":
            msg = "not defined for this task type"
        out.append({"loc": loc, "msg": msg})
    return out


def normalize_options(task_type: str, raw: Any) -> dict | None:
    """
    Validate `raw` against the options schema of `task_type` and return it in
    canonical form: bare-string items become objects, alias keys are folded
    into the canonical ones, defaults are filled in. Ids are left as supplied.

    Raises SchemaMismatch on any structural problem.
    """
    schema = schema_for(task_type)
    if schema.model is None:
        if raw in (None, {}):
            return None
        raise SchemaMismatch(f"{task_type} tasks take no options", details={"received": sorted(raw) if isinstance(raw, dict) else type(raw).__name__})

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SchemaMismatch(f"{task_type} options must be an object", details={"received": type(raw).__name__})

    try:
        doc = schema.model.model_validate(raw)
    except ValidationError as exc:
        raise SchemaMismatch(f"Invalid options for {task_type} task", details=_problems(exc)) from exc

    options = doc.model_dump(by_alias=True, exclude_none=True)

    seen: set[str] = set()
    dupes: list[str] = []
    for item in options[schema.collection]:
        item_id = item.get("id")
        if item_id is None:
            continue
        if item_id in seen:
            dupes.append(item_id)
        seen.add(item_id)
    if dupes:
        raise SchemaMismatch(f"Duplicate ids in {schema.collection}", details={"ids": dupes})
    return options


def generate_item_id(prefix: str, index: int, now_ms: int | None = None) -> str:
    """`{prefix}-{epoch millis}-{9 random chars}-{index}`"""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{now_ms}-{suffix}-{index}"


def assign_item_ids(task_type: str, options: dict | None, now_ms: int | None = None) -> dict | None:
    """
    Give every nested item without an id a fresh one. Items that already carry
    an id keep it, so running this again over its own output changes nothing.
    Returns a new document; the input is not modified.
    """
    schema = schema_for(task_type)
    if options is None or schema.collection is None:
        return options

    items = [dict(item) for item in options.get(schema.collection) or []]
    taken = {item["id"] for item in items if item.get("id")}
    for index, item in enumerate(items):
        if item.get("id"):
            continue
        new_id = generate_item_id(schema.id_prefix, index, now_ms)
        while new_id in taken:
            new_id = generate_item_id(schema.id_prefix, index, now_ms)
        item["id"] = new_id
        taken.add(new_id)
    return {**options, schema.collection: items}


def register_task_options(task_type: str, raw: Any) -> dict | None:
    """Normalize then assign ids. This is what gets persisted on Task.options."""
    return assign_item_ids(task_type, normalize_options(task_type, raw))


def option_items(task_type: str, options: dict | None) -> list[dict]:
    """The nested items of a stored options document (empty for content-free types)."""
    schema = OPTION_SCHEMAS.get(task_type)
    if not options or schema is None or schema.collection is None:
        return []
    return list(options.get(schema.collection) or [])
