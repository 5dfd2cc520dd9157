"""Settings configuration models.

Global settings for persistence, flow loading and logging.
"""

from typing import Literal

from pydantic import BaseModel, Field

PersistenceBackend = Literal["memory", "sqlite", "none"]


class PersistenceConfig(BaseModel):
    """Persistence configuration."""

    backend: PersistenceBackend = Field(
        default="memory", description="Backend type: memory, sqlite, none"
    )
    path: str = Field(default="flowpath.db", description="Database file for the sqlite backend")


class Settings(BaseModel):
    """Runtime settings for flowpath."""

    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    flows_dir: str | None = Field(
        default=None, description="Directory of <flow_id>.yaml / .json flow files"
    )
    flow_cache_ttl: float = Field(
        default=5.0, ge=0, description="Seconds a loaded flow graph is reused before reloading"
    )
    flow_cache_size: int = Field(default=256, ge=1, description="Maximum cached flow graphs")
    log_level: str = Field(default="INFO", description="Log level for the flowpath logger")
    log_file: str | None = Field(
        default=None, description="Optional rotating JSON log file (python-json-logger)"
    )
