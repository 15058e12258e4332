from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .settings import Settings, get_settings


class StoreOptions(BaseModel):
    """
    Construction options for a Store.

      dir            explicit directory, overrides the platform default
      defaults       initial values, merged under anything already on disk
      app_name       folder name under the platform data root
      debounce       coalesce rapid writes (False: every write is synchronous)
      sync_threshold seconds since the last sync after which a write goes straight to disk
      write_delay    seconds a deferred write waits before firing
      indent         JSON indentation, None for compact output
    """

    model_config = ConfigDict(extra="forbid")

    dir: Path | None = None
    defaults: dict[str, Any] = Field(default_factory=dict)
    app_name: str | None = None
    debounce: bool = True
    sync_threshold: float = Field(default=0.25, ge=0)
    write_delay: float = Field(default=0.275, ge=0)
    indent: int | None = Field(default=2, ge=0)

    @field_validator("dir", mode="before")
    @classmethod
    def _blank_dir_means_default(cls, value: Any) -> Any:
        # "" would otherwise become Path("."), the current directory.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def build(
        cls,
        options: "StoreOptions | Mapping[str, Any] | None" = None,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> "StoreOptions":
        """Merge environment settings, an options object/mapping and keyword overrides (last wins)."""
        base = settings or get_settings()
        data: dict[str, Any] = {
            "app_name": base.app_name,
            "debounce": base.debounce,
            "sync_threshold": base.sync_threshold,
            "write_delay": base.write_delay,
            "indent": base.indent,
        }
        if isinstance(options, StoreOptions):
            data.update(options.model_dump(exclude_unset=True))
        elif options is not None:
            data.update(options)
        data.update(overrides)
        return cls.model_validate(data)
