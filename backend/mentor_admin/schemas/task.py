from __future__ import annotations
from datetime import datetime
from typing import Any, ClassVar, Literal, get_args
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from mentor_admin.config import settings
from mentor_admin.schemas.base import CamelModel

TaskType = Literal["TEXT", "IMAGE", "VIDEO", "QUIZ", "FORM", "PICK_ONE", "CHECKLIST"]
TASK_TYPES: tuple[str, ...] = get_args(TaskType)

QuestionType = Literal["multiple_choice", "text"]
FieldType = Literal["text", "textarea", "number", "select"]


def _first_text(data: dict, *keys: str) -> str | None:
    """Pop every alias key and return the first non-blank string among them."""
    found = None
    for key in keys:
        value = data.pop(key, None)
        if found is None and isinstance(value, str) and value.strip():
            found = value
    return found


# ---------- nested option items ----------

class OptionItem(BaseModel):
    """
    Base for nested items inside task options.

    Items keep unknown attributes (editors attach their own flags) and accept
    a bare string in place of the object; the string becomes the item's text.
    `id` stays empty until services.task_schema.assign_item_ids runs.
    """
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    text_field: ClassVar[str] = "text"
    text_aliases: ClassVar[tuple[str, ...]] = ()

    id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _canonical_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {cls.text_field: data}
        if isinstance(data, dict):
            data = dict(data)
            data[cls.text_field] = _first_text(data, cls.text_field, *cls.text_aliases) or ""
            if data.get("id") == "":
                data["id"] = None
        return data

    @model_validator(mode="after")
    def _text_present(self):
        if not getattr(self, self.text_field).strip():
            raise ValueError(f"{self.text_field} must not be empty")
        return self


class QuizQuestion(OptionItem):
    text_aliases: ClassVar[tuple[str, ...]] = ("question",)

    text: str = ""
    type: QuestionType | None = None
    options: list[str] = Field(default_factory=list)
    correct_answer: int | None = None

    @model_validator(mode="after")
    def _answer_rules(self):
        if self.type is None:
            self.type = "multiple_choice" if self.options else "text"
        if self.type == "multiple_choice":
            if not self.options:
                raise ValueError("multiple_choice questions need answer options")
            if any(not o.strip() for o in self.options):
                raise ValueError("answer options must not be blank")
        if self.correct_answer is not None and not (0 <= self.correct_answer < len(self.options)):
            raise ValueError(f"correctAnswer {self.correct_answer} is outside the {len(self.options)} answer options")
        return self


class FormField(OptionItem):
    text_field: ClassVar[str] = "label"
    text_aliases: ClassVar[tuple[str, ...]] = ("name",)

    label: str = ""
    type: FieldType = "text"
    required: bool = False
    options: list[str] | None = None  # choices for "select"


class PickOneOption(OptionItem):
    text_field: ClassVar[str] = "title"
    text_aliases: ClassVar[tuple[str, ...]] = ("text", "name", "label")

    title: str = ""
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def _no_null_description(cls, v):
        return "" if v is None else v


class ChecklistItem(OptionItem):
    text_aliases: ClassVar[tuple[str, ...]] = ("title", "name")

    text: str = ""
    required: bool = False


# ---------- per-type options documents ----------

class _OptionsDoc(BaseModel):
    # unknown top-level keys (e.g. `questions` on a checklist) are a schema mismatch
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class QuizOptions(_OptionsDoc):
    questions: list[QuizQuestion] = Field(default_factory=list)


class FormOptions(_OptionsDoc):
    form_fields: list[FormField] = Field(default_factory=list, alias="fields")


class PickOneOptions(_OptionsDoc):
    options: list[PickOneOption] = Field(default_factory=list)
    instructions: str | None = None


class ChecklistOptions(_OptionsDoc):
    items: list[ChecklistItem] = Field(default_factory=list)
    min_required: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _min_required_fits(self):
        if self.min_required is not None and self.min_required > len(self.items):
            raise ValueError(f"minRequired {self.min_required} exceeds the {len(self.items)} checklist items")
        return self


# ---------- API payloads ----------

class TaskCreate(CamelModel):
    challenge_id: UUID
    tab_name: str = Field(min_length=1, max_length=64)
    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
    task_type: TaskType
    options: Any = None
    is_required: bool = False
    completion_rule: str = "Complete this task"
    max_score: int = Field(default=settings.default_max_score, ge=0)
    due_date: datetime | None = None


class TaskUpdate(CamelModel):
    tab_name: str | None = Field(default=None, min_length=1, max_length=64)
    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = None
    task_type: TaskType | None = None
    options: Any = None
    is_required: bool | None = None
    completion_rule: str | None = None
    max_score: int | None = Field(default=None, ge=0)
    due_date: datetime | None = None


class TaskPublic(CamelModel):
    id: UUID
    challenge_id: UUID
    tab_name: str
    title: str
    description: str | None = None
    task_type: TaskType
    options: dict | None = None
    is_required: bool
    completion_rule: str
    max_score: int
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TaskSummary(CamelModel):
    id: UUID
    challenge_id: UUID
    tab_name: str
    title: str
    task_type: TaskType
    max_score: int
    is_required: bool


class OptionsCheck(CamelModel):
    task_type: TaskType
    options: Any = None


class OptionsCheckResult(CamelModel):
    task_type: TaskType
    options: dict | None = None
