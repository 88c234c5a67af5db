"""Configuration loaded from the environment."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".wheredunno" / "wheredunno.db"


@dataclass
class AssistantConfig:
    """Configuration for the AI assistant."""

    model: str = "llama-3.1-70b-versatile"
    temperature: float = 0.7
    top_p: float = 0.95
    max_tokens: int = 1000
    history_limit: int = 10
    analysis_limit: int = 20
    ready_cooldown: float = 30.0  # seconds the model shows as not ready after an error
    display_name: str = "AI Assistant"


@dataclass
class WhereaboutsConfig:
    """Configuration for whereabouts tracking."""

    delay_seconds: float = 10.0
    tick_interval: float = 1.0
    lookup_window: int = 10
    process_all_due: bool = True
    assistant_name: str = "tung tung tung sahur"


@dataclass
class RoomConfig:
    """Configuration for a chat room and its services."""

    db_path: Path = DEFAULT_DB_PATH
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    whereabouts: WhereaboutsConfig = field(default_factory=WhereaboutsConfig)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def config_from_env() -> RoomConfig:
    """Load configuration from environment variables."""
    assistant = AssistantConfig(
        model=os.getenv("GROQ_MODEL", "llama-3.1-70b-versatile"),
    )

    whereabouts = WhereaboutsConfig(
        delay_seconds=float(os.getenv("WHEREABOUTS_DELAY", "10")),
        tick_interval=float(os.getenv("WHEREABOUTS_TICK", "1")),
        lookup_window=int(os.getenv("WHEREABOUTS_WINDOW", "10")),
        process_all_due=_env_bool("WHEREABOUTS_PROCESS_ALL_DUE", True),
    )

    db_path = os.getenv("WHEREDUNNO_DB")
    return RoomConfig(
        db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
        assistant=assistant,
        whereabouts=whereabouts,
    )
