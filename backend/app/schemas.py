from __future__ import annotations

from typing import List, Optional

from typing_extensions import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils import normalize_color_selection, parse_report_date


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class TaskRecordSchema(CamelModel):
    id: str
    date: str = ""
    day: str = ""
    project_name: str = ""
    project_type: str = ""
    assigned_by: str = ""
    employee_name: str = ""
    employee_id: str = ""
    team_name: str = ""
    start_time: str = ""
    end_time: str = ""
    working_hours: str = "0.00"
    remarks: str = ""
    is_running: bool = False


class PlanningEntrySchema(CamelModel):
    id: str
    label: str = "Next Working Day Task"
    description: str = ""


class UserCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    employee_id: str = Field(min_length=1, max_length=100)
    team_name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    default_to: str = ""
    default_cc: str = ""
    saved_colors: List[str] = Field(default_factory=list)
    theme: Literal["light", "dark"] = "light"

    @field_validator("name", "employee_id", "team_name", "email", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value.lower()

    @field_validator("saved_colors")
    @classmethod
    def _dedupe_colors(cls, value: List[str]) -> List[str]:
        return normalize_color_selection(value)


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return value.strip().lower()


class UserUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    employee_id: Optional[str] = Field(default=None, min_length=1)
    team_name: Optional[str] = Field(default=None, min_length=1)
    default_to: Optional[str] = None
    default_cc: Optional[str] = None
    saved_colors: Optional[List[str]] = None
    theme: Optional[Literal["light", "dark"]] = None

    @field_validator("saved_colors")
    @classmethod
    def _dedupe_colors(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return normalize_color_selection(value)


class UserResponse(CamelModel):
    id: str
    name: str
    employee_id: str
    team_name: str
    email: str
    default_to: str = ""
    default_cc: str = ""
    saved_colors: List[str] = Field(default_factory=list)
    theme: str = "light"


class ReportPayload(CamelModel):
    id: Optional[str] = None
    user_id: str = Field(min_length=1)
    date: str
    day: Optional[str] = None
    tasks: List[TaskRecordSchema] = Field(default_factory=list)
    planning_tasks: List[PlanningEntrySchema] = Field(default_factory=list)
    pre_text: str = ""
    post_text: str = ""
    theme_color: Optional[str] = None
    is_plain_theme: bool = False
    created_at: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_is_new(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return parse_report_date(value).isoformat()


class ReportResponse(CamelModel):
    id: str
    user_id: str
    date: str
    day: str
    tasks: List[TaskRecordSchema] = Field(default_factory=list)
    planning_tasks: List[PlanningEntrySchema] = Field(default_factory=list)
    pre_text: str = ""
    post_text: str = ""
    theme_color: str
    is_plain_theme: bool = False
    created_at: int


class DeleteResponse(BaseModel):
    success: bool = True
