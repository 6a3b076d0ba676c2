"""Per-chef persistence of the values the browser keeps in local storage."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.errors import StorageKeyError
from ..core.pacing import PacingTracker
from ..models.recipe import Recipe

log = logging.getLogger(__name__)

KEYS = (
    "chefName",
    "currentRecipe",
    "userIngredients",
    "rawRecipe",
    "cookingMode",
    "userVelocityProfile",
)


class ChefStore:
    """Manages one JSON document per chef."""

    def __init__(self, directory: str):
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)
        log.debug(f"Chef store directory: {self.directory}")

    def _path(self, chef: str) -> Path:
        # Names are case-folded and non [A-Za-z0-9_-] characters become "-",
        # so "Sam" and "sam" share one document, as do "s.am" and "s-am".
        safe_name = "".join(c if c.isalnum() or c in "-_" else "-" for c in chef.lower()) or "default"
        return self.directory / f"{safe_name}.json"

    def load(self, chef: str) -> Dict[str, Any]:
        path = self._path(chef)
        if not path.exists():
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            log.error(f"Corrupt chef file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            log.error(f"Chef file {path} does not hold an object")
            return {}
        return {k: v for k, v in data.items() if k in KEYS}

    def _write(self, chef: str, data: Dict[str, Any]) -> None:
        path = self._path(chef)
        tmp = path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp.replace(path)

    def get(self, chef: str, key: str) -> Any:
        if key not in KEYS:
            raise StorageKeyError(f"Unknown key: {key}")
        return self.load(chef).get(key)

    def set(self, chef: str, key: str, value: Any) -> None:
        self.update(chef, {key: value})

    def update(self, chef: str, values: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(values) - set(KEYS)
        if unknown:
            raise StorageKeyError(f"Unknown keys: {', '.join(sorted(unknown))}")
        data = self.load(chef)
        data.update(values)
        self._write(chef, data)
        return data

    def delete(self, chef: str, key: str) -> None:
        if key not in KEYS:
            raise StorageKeyError(f"Unknown key: {key}")
        data = self.load(chef)
        if data.pop(key, None) is not None:
            self._write(chef, data)

    def load_recipe(self, chef: str) -> Optional[Recipe]:
        raw = self.get(chef, "currentRecipe")
        return Recipe.model_validate(raw) if raw else None

    def save_recipe(self, chef: str, recipe: Recipe) -> None:
        self.set(chef, "currentRecipe", recipe.model_dump(mode="json", by_alias=True))

    def load_pacing(self, chef: str) -> PacingTracker:
        return PacingTracker.from_profile(self.get(chef, "userVelocityProfile"))

    def save_pacing(self, chef: str, pacing: PacingTracker) -> None:
        self.set(chef, "userVelocityProfile", pacing.to_profile())
