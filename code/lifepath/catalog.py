import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .schemas import PathNotFoundError, PathTemplate

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parent / "path_templates.json"


class PathCatalog:
    """Read-only set of path templates keyed by id."""

    def __init__(self, templates: Iterable[PathTemplate]):
        self._templates: Dict[str, PathTemplate] = {}
        for template in templates:
            if template.id in self._templates:
                logger.warning("duplicate path template id %s; keeping the first", template.id)
                continue
            self._templates[template.id] = template

    @classmethod
    def from_json(cls, path: Union[str, Path, None] = None) -> "PathCatalog":
        source = Path(path) if path else BUNDLED_CATALOG
        with source.open("r", encoding="utf-8") as handle:
            rows = json.load(handle)
        catalog = cls(PathTemplate.from_dict(row) for row in rows)
        logger.info("loaded %d path templates from %s", len(catalog), source)
        return catalog

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, path_id: str) -> bool:
        return path_id in self._templates

    def all(self) -> List[PathTemplate]:
        return list(self._templates.values())

    def find(self, path_id: str) -> Optional[PathTemplate]:
        return self._templates.get(path_id)

    def get(self, path_id: str) -> PathTemplate:
        template = self._templates.get(path_id)
        if template is None:
            raise PathNotFoundError(path_id)
        return template

    def resolve(self, path_ids: Iterable[str]) -> List[PathTemplate]:
        found: List[PathTemplate] = []
        for path_id in path_ids:
            template = self._templates.get(path_id)
            if template is None:
                logger.warning("path template not found for id %s", path_id)
                continue
            found.append(template)
        return found
