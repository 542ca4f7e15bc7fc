"""Tagged results of recovering alternatives from raw model output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from ai_edit.models.edit import Alternative


@dataclass(frozen=True)
class Success:
    alternatives: list[Alternative]

    kind: ClassVar[str] = "success"
    ok: ClassVar[bool] = True

    def to_payload(self) -> dict:
        return {"alternatives": [alt.model_dump() for alt in self.alternatives]}


@dataclass(frozen=True)
class ParseFailure:
    """No JSON object could be read; carries the untouched model text."""

    raw_text: str

    kind: ClassVar[str] = "parse_failed"
    ok: ClassVar[bool] = False

    def to_payload(self) -> dict:
        return {"error": self.kind, "raw": self.raw_text}


@dataclass(frozen=True)
class SchemaFailure:
    """JSON parsed, but ``alternatives`` was missing or not a list."""

    parsed_value: Any

    kind: ClassVar[str] = "bad_schema"
    ok: ClassVar[bool] = False

    def to_payload(self) -> dict:
        return {"error": self.kind}


@dataclass(frozen=True)
class EmptyResult:
    kind: ClassVar[str] = "empty_alternatives"
    ok: ClassVar[bool] = False

    def to_payload(self) -> dict:
        return {"error": self.kind}


RecoveryOutcome = Union[Success, ParseFailure, SchemaFailure, EmptyResult]
