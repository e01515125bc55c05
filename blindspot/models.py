from datetime import date
from typing import Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from blindspot.interaction import IDLE, MatrixState, Phase

Category = Literal[
    "User Behavior",
    "Market Dynamics",
    "Technical Feasibility",
    "Business Model",
    "Operations",
]

CATEGORIES: tuple[str, ...] = get_args(Category)

Mode = Literal["ai", "manual"]


class _Wire(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Experiment(_Wire):
    name: str
    method: str
    cost: str
    # Some replies say "time" instead of "timeframe".
    timeframe: str = Field(
        validation_alias=AliasChoices("timeframe", "time"),
        serialization_alias="timeframe",
    )


class Assumption(_Wire):
    id: str
    text: str
    is_hidden_blind_spot: bool
    risk: int = Field(ge=1, le=10)
    testability: int = Field(ge=1, le=10)
    category: Category
    experiment: Experiment

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("risk", "testability", mode="before")
    @classmethod
    def _score_not_bool(cls, value):
        # Lax int parsing would read true/false as 1/0.
        if isinstance(value, bool):
            raise ValueError("must be an integer score, not a boolean")
        return value

    @field_validator("id", "text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class AnalysisResult(_Wire):
    first_principles_insight: str
    assumptions: list[Assumption]


class AnalyzeResponse(AnalysisResult):
    rubric_warnings: list[str] = []


class AnalyzeRequest(_Wire):
    mode: Mode
    product_context: str | None = None
    manual_assumptions: list[str] | None = None


class ExportRequest(_Wire):
    result: AnalysisResult
    user_input: str = ""
    generated: date | None = None
    # Matrix view state for the SVG export.
    phase: Phase = Phase.IDLE
    item_id: str | None = None

    @model_validator(mode="after")
    def _item_for_phase(self):
        if self.phase != Phase.IDLE and not self.item_id:
            raise ValueError(f"itemId is required when phase is {self.phase.value!r}")
        return self

    @property
    def state(self) -> MatrixState:
        if self.phase == Phase.IDLE:
            return IDLE
        return MatrixState(self.phase, self.item_id)


class ErrorResponse(BaseModel):
    error: str
    details: str = ""
