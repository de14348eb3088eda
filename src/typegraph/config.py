"""
Engine configuration loading.

Example typegraph.yaml:

    sort_errors: true
    mask_internal_errors: true
    masked_error_message: Internal server error
    concurrent_fields: true
    log_field_errors: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class EngineConfig:
    """Execution settings shared by every query run with it."""
    # Order errors by location, then path
    sort_errors: bool = True
    # Replace messages of unexpected (non-FieldError) exceptions
    mask_internal_errors: bool = False
    masked_error_message: str = "Internal server error"
    # Run sibling fields concurrently during async execution
    concurrent_fields: bool = True
    log_field_errors: bool = True

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "EngineConfig":
        """Create config from dictionary."""
        data = data or {}
        return cls(
            sort_errors=bool(data.get("sort_errors", True)),
            mask_internal_errors=bool(data.get("mask_internal_errors", False)),
            masked_error_message=str(data.get("masked_error_message", "Internal server error")),
            concurrent_fields=bool(data.get("concurrent_fields", True)),
            log_field_errors=bool(data.get("log_field_errors", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        return {
            "sort_errors": self.sort_errors,
            "mask_internal_errors": self.mask_internal_errors,
            "masked_error_message": self.masked_error_message,
            "concurrent_fields": self.concurrent_fields,
            "log_field_errors": self.log_field_errors,
        }

    def save(self, path: Path | str = "typegraph.yaml") -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_config(path: Path | str = "typegraph.yaml") -> Optional[EngineConfig]:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        return None

    data = yaml.safe_load(path.read_text())
    return EngineConfig.from_dict(data)
