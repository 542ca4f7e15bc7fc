"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 30
    max_tokens: int = 2000
    max_retries: int = 1  # total attempts made by the caller; 1 = no retry

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600 seconds, got {self.timeout}")
        if not 1 <= self.max_tokens <= 64000:
            raise ValueError(f"llm.max_tokens must be between 1 and 64000, got {self.max_tokens}")
        if not 1 <= self.max_retries <= 5:
            raise ValueError(f"llm.max_retries must be between 1 and 5, got {self.max_retries}")


@dataclass(frozen=True)
class EditConfig:
    context_window: int = 800
    creative_temperature: float = 0.3
    corrective_temperature: float = 0.2

    def __post_init__(self) -> None:
        if not 0 <= self.context_window <= 20000:
            raise ValueError(f"edit.context_window must be between 0 and 20000, got {self.context_window}")
        for name in ("creative_temperature", "corrective_temperature"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"edit.{name} must be between 0 and 1, got {value}")
        if self.creative_temperature <= self.corrective_temperature:
            raise ValueError(
                "edit.creative_temperature must be higher than edit.corrective_temperature"
            )


@dataclass(frozen=True)
class UsageConfig:
    enabled: bool = True
    db_path: str = "~/.ai-edit/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    edit: EditConfig = field(default_factory=EditConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        edit=EditConfig(**raw.get("edit", {})),
        usage=UsageConfig(**raw.get("usage", {})),
    )
