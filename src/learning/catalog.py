"""
Module catalog: the static list of quiz subjects and their question counts.

The catalog is an immutable value built once at startup and passed to the
tracker, the statistics and the recommendations.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

DEFAULT_EMOJI = "📚"


@dataclass(frozen=True)
class ModuleDefinition:
    module_id: str
    name: str
    total_questions: int
    emoji: str = DEFAULT_EMOJI

    def __post_init__(self) -> None:
        if not self.module_id:
            raise ValueError("module_id must be a non-empty string")
        if self.total_questions <= 0:
            raise ValueError(f"Module {self.module_id} must have at least one question")


class ModuleCatalog:
    """Read-only, ordered mapping of module id -> ModuleDefinition."""

    def __init__(self, modules: list[ModuleDefinition]):
        by_id: dict[str, ModuleDefinition] = {}
        for module in modules:
            if module.module_id in by_id:
                raise ValueError(f"Module {module.module_id} defined twice")
            by_id[module.module_id] = module
        self._modules: Mapping[str, ModuleDefinition] = MappingProxyType(by_id)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __iter__(self) -> Iterator[ModuleDefinition]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    def get(self, module_id: str) -> ModuleDefinition | None:
        return self._modules.get(module_id)

    def module_ids(self) -> list[str]:
        return list(self._modules.keys())

    @classmethod
    def from_dict(cls, raw: Mapping[str, Mapping]) -> "ModuleCatalog":
        """
        Build a catalog from {"math": {"name": ..., "totalQuestions": 10, "emoji": ...}}.
        Accepts camelCase or snake_case question counts.
        """
        modules = []
        for module_id, entry in raw.items():
            total = entry.get("totalQuestions", entry.get("total_questions"))
            if not isinstance(total, int):
                raise ValueError(f"Module {module_id} is missing an integer totalQuestions")
            modules.append(
                ModuleDefinition(
                    module_id=module_id,
                    name=str(entry.get("name") or module_id),
                    total_questions=total,
                    emoji=str(entry.get("emoji") or DEFAULT_EMOJI),
                )
            )
        return cls(modules)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "ModuleCatalog":
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


DEFAULT_CATALOG = ModuleCatalog(
    [
        ModuleDefinition("math", "Mathématiques", 10, "🔢"),
        ModuleDefinition("physics", "Physique", 10, "⚛️"),
        ModuleDefinition("chemistry", "Chimie", 10, "🧪"),
        ModuleDefinition("biology", "Biologie", 10, "🧬"),
        ModuleDefinition("french", "Français", 10, "📚"),
        ModuleDefinition("english", "Anglais", 10, "🇬🇧"),
        ModuleDefinition("history", "Histoire", 10, "🏛️"),
        ModuleDefinition("geography", "Géographie", 10, "🌍"),
    ]
)
