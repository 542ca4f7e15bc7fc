"""Data models for the selection edit pipeline."""

from ai_edit.models.edit import (
    Action,
    ActionTemplate,
    Alternative,
    EditRequest,
    VoiceChip,
    VoiceProfile,
)
from ai_edit.models.outcome import (
    EmptyResult,
    ParseFailure,
    RecoveryOutcome,
    SchemaFailure,
    Success,
)

__all__ = [
    "Action",
    "ActionTemplate",
    "Alternative",
    "EditRequest",
    "EmptyResult",
    "ParseFailure",
    "RecoveryOutcome",
    "SchemaFailure",
    "Success",
    "VoiceChip",
    "VoiceProfile",
]
