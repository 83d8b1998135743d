"""Intent/specialist catalog backed by YAML.

Reads a file shaped like `config/catalog.example.yaml`. Entries may carry an
`org_id`; entries without one are shared by every org.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from support_router.exceptions import ConfigurationError
from support_router.models.domain import Intent, Specialist


class YAMLCatalogProvider:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._intents: list[tuple[str | None, Intent]] = []
        self._specialists: list[tuple[str | None, Specialist]] = []
        self._load()

    def _load(self) -> None:
        try:
            data = yaml.safe_load(self.path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load catalog {self.path}: {e}") from e

        for item in data.get("intents", []) or []:
            self._intents.append(
                (
                    item.get("org_id"),
                    Intent(
                        id=str(item["id"]),
                        name=item.get("name", item["id"]),
                        description=item.get("description", ""),
                        specialist_id=item.get("specialist_id"),
                    ),
                )
            )
        for item in data.get("specialists", []) or []:
            if not item.get("active", True):
                continue
            self._specialists.append(
                (
                    item.get("org_id"),
                    Specialist(
                        id=str(item["id"]),
                        name=item.get("name", item["id"]),
                        description=item.get("description", ""),
                        persona_notes=item.get("persona_notes", ""),
                        required_fields=tuple(item.get("required_fields", []) or []),
                        knowledge_notes=item.get("knowledge_notes", ""),
                        escalation_rules=item.get("escalation_rules", ""),
                    ),
                )
            )

    async def intents(self, org_id: str | None = None) -> list[Intent]:
        return [i for org, i in self._intents if org is None or org == org_id]

    async def specialists(self, org_id: str | None = None) -> list[Specialist]:
        return [s for org, s in self._specialists if org is None or org == org_id]
