from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from focustree.core.sort_policy import SortOrder, normalize_sort_order

SCHEMA_VERSION = 2


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    schemaVersion: int = SCHEMA_VERSION
    focusPaths: list[str] = Field(default_factory=list)
    sortOrder: str = SortOrder.MANUAL.value
    useTrash: bool = True
    workspaceRoot: str = ""

    @field_validator("focusPaths", mode="before")
    @classmethod
    def _coerce_paths(cls, value: object) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        paths: list[str] = []
        for item in value:
            if isinstance(item, str) and item and item not in paths:
                paths.append(item)
        return paths

    @field_validator("sortOrder", mode="before")
    @classmethod
    def _coerce_sort_order(cls, value: object) -> str:
        return normalize_sort_order(value).value
