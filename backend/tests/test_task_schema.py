from __future__ import annotations
import re
import pytest
from mentor_admin.errors import SchemaMismatch
from mentor_admin.schemas.task import TASK_TYPES
from mentor_admin.services.task_schema import (
    OPTION_SCHEMAS, normalize_options, assign_item_ids, register_task_options, generate_item_id, option_items,
)

ID_RE = re.compile(r"^(question|field|option|item)-\d+-[a-z0-9]{9}-\d+$")

SAMPLE_OPTIONS = {
    "QUIZ": {"questions": [
        {"question": "Who built the ark?", "options": ["Noah", "Moses"], "correctAnswer": 0},
        {"text": "Favorite verse?", "type": "text"},
    ]},
    "FORM": {"fields": [{"name": "First name"}, {"label": "Age", "type": "number", "required": True}]},
    "PICK_ONE": {"options": ["Serve", {"name": "Give", "description": None}], "instructions": "Pick one"},
    "CHECKLIST": {"items": ["Pray", "Read"], "minRequired": 1},
}


def test_dispatch_table_covers_every_type():
    assert set(OPTION_SCHEMAS) == set(TASK_TYPES)


@pytest.mark.parametrize("task_type", ["TEXT", "IMAGE", "VIDEO"])
def test_content_free_types_store_no_options(task_type):
    assert register_task_options(task_type, None) is None
    assert register_task_options(task_type, {}) is None


@pytest.mark.parametrize("task_type", ["TEXT", "IMAGE", "VIDEO"])
def test_content_free_types_reject_options(task_type):
    with pytest.raises(SchemaMismatch):
        register_task_options(task_type, {"items": ["x"]})


@pytest.mark.parametrize("task_type", sorted(SAMPLE_OPTIONS))
def test_every_item_gets_exactly_one_id_and_second_pass_is_noop(task_type):
    once = register_task_options(task_type, SAMPLE_OPTIONS[task_type])
    items = option_items(task_type, once)
    ids = [i["id"] for i in items]
    assert len(ids) == len(set(ids)) == len(SAMPLE_OPTIONS[task_type][OPTION_SCHEMAS[task_type].collection])
    assert all(ID_RE.match(i) for i in ids)

    twice = register_task_options(task_type, once)
    assert twice == once


def test_checklist_bare_strings_keep_order_and_text():
    opts = register_task_options("CHECKLIST", {"items": ["Pray", "Read"]})
    assert [i["text"] for i in opts["items"]] == ["Pray", "Read"]
    assert opts["items"][0]["id"].startswith("item-") and opts["items"][0]["id"].endswith("-0")
    assert opts["items"][1]["id"].endswith("-1")
    assert opts["items"][0]["required"] is False


def test_aliases_fold_into_canonical_keys():
    quiz = normalize_options("QUIZ", SAMPLE_OPTIONS["QUIZ"])
    assert quiz["questions"][0]["text"] == "Who built the ark?"
    assert "question" not in quiz["questions"][0]
    assert quiz["questions"][0]["type"] == "multiple_choice"
    assert quiz["questions"][1]["type"] == "text"

    form = normalize_options("FORM", SAMPLE_OPTIONS["FORM"])
    assert form["fields"][0] == {"label": "First name", "type": "text", "required": False}

    pick = normalize_options("PICK_ONE", SAMPLE_OPTIONS["PICK_ONE"])
    assert [o["title"] for o in pick["options"]] == ["Serve", "Give"]
    assert pick["options"][1]["description"] == ""


def test_supplied_ids_survive_and_only_missing_ones_are_filled():
    opts = register_task_options("CHECKLIST", {"items": [{"id": "keep-me", "text": "Pray"}, "Read"]})
    assert opts["items"][0]["id"] == "keep-me"
    assert opts["items"][1]["id"] != "keep-me"


def test_assign_item_ids_does_not_mutate_input():
    raw = {"items": [{"text": "Pray"}]}
    out = assign_item_ids("CHECKLIST", raw)
    assert "id" not in raw["items"][0]
    assert out["items"][0]["id"]


def test_generate_item_id_shape():
    assert re.match(r"^field-1700000000000-[a-z0-9]{9}-3$", generate_item_id("field", 3, now_ms=1700000000000))


def test_unknown_keys_for_type_are_rejected():
    with pytest.raises(SchemaMismatch) as exc:
        normalize_options("CHECKLIST", {"questions": []})
    assert any("not defined" in p["msg"] for p in exc.value.details)


@pytest.mark.parametrize("task_type,raw", [
    ("CHECKLIST", {"items": ["Pray"], "minRequired": 2}),
    ("CHECKLIST", {"items": ["  "]}),
    ("QUIZ", {"questions": [{"text": "Q", "options": ["a", "b"], "correctAnswer": 2}]}),
    ("QUIZ", {"questions": [{"text": "Q", "type": "multiple_choice"}]}),
    ("FORM", {"fields": [{"label": "Age", "type": "date"}]}),
    ("PICK_ONE", {"options": [{"description": "no title"}]}),
    ("PICK_ONE", ["not", "an", "object"]),
])
def test_structural_problems_raise_schema_mismatch(task_type, raw):
    with pytest.raises(SchemaMismatch):
        register_task_options(task_type, raw)


def test_duplicate_ids_rejected():
    with pytest.raises(SchemaMismatch) as exc:
        normalize_options("PICK_ONE", {"options": [{"id": "a", "title": "One"}, {"id": "a", "title": "Two"}]})
    assert exc.value.details == {"ids": ["a"]}


def test_unknown_task_type():
    with pytest.raises(SchemaMismatch):
        normalize_options("ESSAY", None)
