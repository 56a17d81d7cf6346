from __future__ import annotations
import pytest
from mentor_admin.errors import MissingContent
from mentor_admin.schemas.task import TASK_TYPES
from mentor_admin.services.content import INTERPRETERS, STRUCTURAL_KEYS, validate_submission_content, humanize_key, detect_platform
from mentor_admin.services.task_schema import register_task_options


def _pairs(canonical):
    return [(e.label, e.value) for e in canonical.entries]


def test_text_placeholder_when_blank():
    out = validate_submission_content("TEXT", {"text": "  "})
    assert _pairs(out) == [("Text", "No text content")]
    assert out.is_empty


def test_text_value():
    out = validate_submission_content("TEXT", {"text": "I prayed today"})
    assert _pairs(out) == [("Text", "I prayed today")]
    assert not out.is_empty


def test_image_reports_count_and_description():
    out = validate_submission_content("IMAGE", {"imageCount": 2, "description": "Sunrise"})
    assert _pairs(out) == [("Images", 2), ("Description", "Sunrise")]


@pytest.mark.parametrize("task_type", ["VIDEO", "QUIZ", "FORM", "PICK_ONE", "CHECKLIST"])
def test_missing_structural_key(task_type):
    with pytest.raises(MissingContent):
        validate_submission_content(task_type, {"somethingElse": 1})


@pytest.mark.parametrize("content", [None, "just text", ["a"]])
def test_absent_or_non_object_content(content):
    with pytest.raises(MissingContent):
        validate_submission_content("TEXT", content)


def test_wrong_kind_of_structural_value():
    with pytest.raises(MissingContent) as exc:
        validate_submission_content("QUIZ", {"answers": ["a", "b"]})
    assert exc.value.details["key"] == "answers"
    with pytest.raises(MissingContent):
        validate_submission_content("CHECKLIST", {"checkedItems": "Pray"})


def test_pick_one_null_selection_is_valid_and_empty():
    out = validate_submission_content("PICK_ONE", {"selectedOption": None})
    assert _pairs(out) == [("Selected option", "No option selected")]
    assert out.is_empty


def test_pick_one_resolves_option_id_to_title():
    opts = register_task_options("PICK_ONE", {"options": ["Serve", "Give"]})
    chosen = opts["options"][1]["id"]
    out = validate_submission_content("PICK_ONE", {"selectedOption": chosen, "explanation": "Because"}, opts)
    assert _pairs(out) == [("Selected option", "Give"), ("Explanation", "Because")]


def test_quiz_follows_question_order_and_relabels_ids():
    opts = register_task_options("QUIZ", {"questions": [
        {"text": "First?", "options": ["a", "b"]},
        {"text": "Second?", "type": "text"},
    ]})
    second_id = opts["questions"][1]["id"]
    out = validate_submission_content("QUIZ", {"answers": {second_id: "free text", "First?": 1}}, opts)
    assert _pairs(out) == [("First?", 1), ("Second?", "free text")]


def test_quiz_without_options_keeps_payload_order():
    out = validate_submission_content("QUIZ", {"answers": {"B?": 2, "A?": 1}})
    assert _pairs(out) == [("B?", 2), ("A?", 1)]


def test_form_humanizes_unknown_keys():
    out = validate_submission_content("FORM", {"responses": {"favoriteVerse": "John 3:16", "first_name": "Ana"}})
    assert _pairs(out) == [("Favorite Verse", "John 3:16"), ("First Name", "Ana")]


def test_form_uses_field_labels():
    opts = register_task_options("FORM", {"fields": [{"label": "Age", "type": "number"}]})
    field_id = opts["fields"][0]["id"]
    out = validate_submission_content("FORM", {"responses": {field_id: 15}}, opts)
    assert _pairs(out) == [("Age", 15)]


def test_checklist_partial_completion_with_options():
    opts = register_task_options("CHECKLIST", {"items": ["Pray", "Read"]})
    out = validate_submission_content("CHECKLIST", {"checkedItems": ["Pray"]}, opts)
    assert _pairs(out) == [("Pray", True), ("Read", False)]
    assert not out.is_empty


def test_checklist_accepts_item_ids():
    opts = register_task_options("CHECKLIST", {"items": ["Pray", "Read"]})
    out = validate_submission_content("CHECKLIST", {"checkedItems": [opts["items"][1]["id"]]}, opts)
    assert _pairs(out) == [("Pray", False), ("Read", True)]


def test_checklist_without_options_lists_checked():
    out = validate_submission_content("CHECKLIST", {"checkedItems": []})
    assert out.entries == [] and out.is_empty


def test_video_infers_platform():
    out = validate_submission_content("VIDEO", {"videoUrl": "https://youtu.be/abc"})
    assert _pairs(out) == [("Video URL", "https://youtu.be/abc"), ("Platform", "youtube")]


def test_video_explicit_platform_wins():
    out = validate_submission_content("VIDEO", {"videoUrl": "https://example.com/v.mp4", "platform": "church-site"})
    assert ("Platform", "church-site") in _pairs(out)


@pytest.mark.parametrize("url,platform", [
    ("https://www.youtube.com/watch?v=1", "youtube"),
    ("https://m.youtube.com/watch?v=1", "youtube"),
    ("https://vimeo.com/1", "vimeo"),
    ("https://www.tiktok.com/@x/video/1", "tiktok"),
    ("https://instagram.com/reel/1", "instagram"),
    ("https://example.com/v", None),
    ("not a url", None),
])
def test_detect_platform(url, platform):
    assert detect_platform(url) == platform


def test_humanize_key():
    assert humanize_key("favoriteVerse") == "Favorite Verse"
    assert humanize_key("age") == "Age"


def test_interpreter_table_covers_every_type():
    assert set(INTERPRETERS) == set(TASK_TYPES)
    assert set(STRUCTURAL_KEYS) == set(TASK_TYPES)
