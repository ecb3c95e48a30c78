"""
Grant storage backends.

The service only needs ``get``, ``put`` and ``list``; any object with those
methods can be injected.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from .models import AccessGrant

logger = logging.getLogger(__name__)


class GrantStore(Protocol):
    def get(self, grant_id: str) -> Optional[AccessGrant]:
        ...

    def put(self, grant: AccessGrant) -> None:
        ...

    def list(self) -> List[AccessGrant]:
        ...


class InMemoryGrantStore:
    """Dict-backed store. Grants are kept in insertion order."""

    def __init__(self, grants: Optional[List[AccessGrant]] = None):
        self._grants: Dict[str, AccessGrant] = {}
        for grant in grants or []:
            self.put(grant)

    def get(self, grant_id: str) -> Optional[AccessGrant]:
        return self._grants.get(grant_id)

    def put(self, grant: AccessGrant) -> None:
        self._grants[grant.id] = grant

    def list(self) -> List[AccessGrant]:
        return list(self._grants.values())

    def __len__(self):
        return len(self._grants)


class JsonFileGrantStore(InMemoryGrantStore):
    """
    Store that mirrors every write to a JSON file.

    The whole file is rewritten on each ``put``; the on-disk format is the
    camelCase record produced by ``AccessGrant.to_dict``.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__()
        for grant in self._load():
            self._grants[grant.id] = grant

    def put(self, grant: AccessGrant) -> None:
        super().put(grant)
        self._save()

    def _load(self) -> List[AccessGrant]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        grants = [AccessGrant.from_dict(item) for item in raw]
        logger.debug("Loaded %d grants from %s", len(grants), self.path)
        return grants

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [grant.to_dict() for grant in self.list()]
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp.replace(self.path)
