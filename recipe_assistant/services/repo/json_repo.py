from __future__ import annotations

import io
import json
import os
import re
import tempfile
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterator, List

from recipe_assistant.config import Settings
from recipe_assistant.core.models import Pantry, Recipe, SavedRecipe
from recipe_assistant.services.exceptions import StorageError

# Cross-platform file lock (fcntl for *nix; msvcrt for Windows)
@contextmanager
def _locked(path: str) -> Iterator[io.FileIO]:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    f = open(path, "a+b")  # create if missing
    try:
        try:
            import fcntl  # type: ignore
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            locker = ("fcntl", None)
        except ImportError:
            try:
                import msvcrt  # type: ignore
                msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)
                locker = ("msvcrt", 1)
            except Exception as e:
                raise StorageError(f"Could not lock file {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not lock file {path}: {e}") from e
        try:
            yield f
        finally:
            if locker[0] == "fcntl":
                import fcntl  # type: ignore
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            else:
                import msvcrt  # type: ignore
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, locker[1])
    finally:
        f.close()


def _atomic_write(path: str, data: bytes) -> None:
    d = os.path.dirname(path) or "."
    os.makedirs(d, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=d)
    try:
        with os.fdopen(fd, "wb") as w:
            w.write(data)
            w.flush()
            os.fsync(w.fileno())
        os.replace(tmp, path)
    except OSError as e:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise StorageError(f"Atomic write failed for {path}: {e}") from e


def _dumps(obj: Any) -> bytes:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


class JSONUserStore:
    """Per-user JSON documents under <data_dir>/users/<user_id>/<name>.json."""

    def __init__(self, settings: Settings):
        self.root = Path(settings.data_dir) / "users"

    def path(self, user_id: str, name: str) -> str:
        return str(self.root / user_id / f"{name}.json")

    def read(self, user_id: str, name: str, default: Any = None) -> Any:
        path = self.path(user_id, name)
        if not os.path.exists(path):
            return default
        try:
            with open(path, "rb") as f:
                raw = f.read()
            return json.loads(raw.decode("utf-8")) if raw else default
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, user_id: str, name: str, obj: Any) -> None:
        _atomic_write(self.path(user_id, name), _dumps(obj))

    @contextmanager
    def lock(self, user_id: str, name: str) -> Iterator[None]:
        # lock a sidecar file; the document itself is swapped by os.replace
        with _locked(self.path(user_id, name) + ".lock"):
            yield


class JSONPantryRepo:
    DOC = "pantry"

    def __init__(self, settings: Settings):
        self.store = JSONUserStore(settings)

    def load(self, user_id: str) -> Pantry:
        obj = self.store.read(user_id, self.DOC, default={})
        try:
            return Pantry.model_validate(obj or {})
        except ValueError as e:
            raise StorageError(f"Corrupt pantry document for {user_id}: {e}") from e

    def save(self, user_id: str, pantry: Pantry) -> None:
        self.store.write(user_id, self.DOC, pantry.model_dump(mode="json", by_alias=True))

    def update(self, user_id: str, fn: Callable[[Pantry], Pantry]) -> Pantry:
        """Locked read-modify-write so concurrent updates for one user do not lose items."""
        with self.store.lock(user_id, self.DOC):
            updated = fn(self.load(user_id))
            self.save(user_id, updated)
        return updated


_SLUG = re.compile(r"[^a-z0-9]+")


def make_recipe_id(name: str, now_ms: int | None = None) -> str:
    """Slugified name plus creation time in ms; only same name in the same ms collides."""
    slug = _SLUG.sub("-", name.lower()).strip("-") or "recipe"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{slug}-{now_ms}"


class JSONSavedRecipeRepo:
    DOC = "saved_recipes"

    def __init__(self, settings: Settings):
        self.store = JSONUserStore(settings)

    def _load_all(self, user_id: str) -> List[SavedRecipe]:
        rows = self.store.read(user_id, self.DOC, default=[]) or []
        try:
            return [SavedRecipe.model_validate(r) for r in rows]
        except ValueError as e:
            raise StorageError(f"Corrupt saved recipes document for {user_id}: {e}") from e

    def _save_all(self, user_id: str, recipes: List[SavedRecipe]) -> None:
        self.store.write(user_id, self.DOC, [r.model_dump(mode="json", by_alias=True) for r in recipes])

    def list(self, user_id: str) -> List[SavedRecipe]:
        """Newest first."""
        return sorted(self._load_all(user_id), key=lambda r: r.saved_at, reverse=True)

    def add(self, user_id: str, recipe: Recipe) -> SavedRecipe:
        now = datetime.now(timezone.utc)
        saved = SavedRecipe(
            **recipe.model_dump(exclude={"recipe_id", "saved_at"}),
            recipe_id=make_recipe_id(recipe.name, int(now.timestamp() * 1000)),
            saved_at=now,
        )
        with self.store.lock(user_id, self.DOC):
            recipes = self._load_all(user_id)
            recipes.append(saved)
            self._save_all(user_id, recipes)
        return saved

    def remove(self, user_id: str, recipe_id: str) -> bool:
        with self.store.lock(user_id, self.DOC):
            recipes = self._load_all(user_id)
            kept = [r for r in recipes if r.recipe_id != recipe_id]
            if len(kept) == len(recipes):
                return False
            self._save_all(user_id, kept)
        return True

    def remove_by_name(self, user_id: str, name: str) -> int:
        key = name.strip().lower()
        with self.store.lock(user_id, self.DOC):
            recipes = self._load_all(user_id)
            kept = [r for r in recipes if r.name.strip().lower() != key]
            removed = len(recipes) - len(kept)
            if removed:
                self._save_all(user_id, kept)
        return removed
