"""Trace model: the steps of one submission, its output and the submitted source."""

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from exceptions import TraceIndexError


class Step(BaseModel):
    """One snapshot of execution: the line that ran and the locals at that point."""

    model_config = ConfigDict(frozen=True)

    line_no: int = Field(ge=1)
    locals: dict[str, str] = Field(default_factory=dict)

    @field_validator("locals", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        # the execution service already sends repr() strings, but be lenient
        if isinstance(value, dict):
            return {str(k): v if isinstance(v, str) else str(v) for k, v in value.items()}
        return value

    def to_payload(self) -> dict:
        return {"line_no": self.line_no, "locals": dict(self.locals)}


@dataclass(frozen=True)
class Trace:
    steps: tuple[Step, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def length(self) -> int:
        return len(self.steps)

    def at(self, index: int) -> Step:
        # no negative indexing: callers clamp first
        if not 0 <= index < len(self.steps):
            raise TraceIndexError(index, len(self.steps))
        return self.steps[index]

    @property
    def last_index(self) -> int:
        return max(len(self.steps) - 1, 0)


EMPTY_TRACE = Trace()


def split_source(source_text: str) -> tuple[str, ...]:
    if not source_text:
        return ()
    return tuple(source_text.split("\n"))


@dataclass(frozen=True)
class TraceModel:
    """What the viewer shows for one submission.

    ``source_lines`` is captured when the code is submitted, so editing the
    input afterwards does not shift the highlighted lines.
    """

    trace: Trace = EMPTY_TRACE
    output: str = ""
    source_lines: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "TraceModel":
        return cls()

    @classmethod
    def from_outcome(cls, outcome, source_text: str) -> "TraceModel":
        return cls(
            trace=outcome.visible_trace(),
            output=outcome.visible_output(),
            source_lines=split_source(source_text),
        )

    @property
    def source_text(self) -> str:
        return "\n".join(self.source_lines)

    def length(self) -> int:
        return len(self.trace)

    def at(self, index: int) -> Step:
        return self.trace.at(index)

    def line_in_source(self, step: Step) -> bool:
        return 1 <= step.line_no <= len(self.source_lines)

    def highlighted(self, line_number: int, step: Optional[Step]) -> bool:
        """True if the 1-based ``line_number`` is the line ``step`` executed."""
        if step is None or not self.line_in_source(step):
            return False
        return step.line_no == line_number
