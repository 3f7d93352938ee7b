"""Registry mapping component names to parsed definitions."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterator

from mdcomponents.core.logging import Logger, get_logger

from .definition import parse_definition
from .errors import ComponentNotFoundError
from .models import ComponentDefinition

__all__ = ["COMPONENT_SUFFIX", "ComponentRegistry"]

COMPONENT_SUFFIX = ".md"


def _is_component_file(path: Path) -> bool:
    return path.suffix.lower() == COMPONENT_SUFFIX and path.is_file()


def _scan(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if _is_component_file(p))


class ComponentRegistry:
    """Hold the ``name -> definition`` map loaded from a components folder.

    Later registrations under the same name replace earlier ones. The
    registry also remembers the definition parsed from every file so that
    changed, deleted or renamed files can be reconciled by :meth:`refresh`.
    When the file behind a name goes away, another file that still defines
    that name takes over, the last in sorted path order.

    Example:
        >>> registry = ComponentRegistry()
        >>> _ = registry.register(ComponentDefinition(name="x", template="<p></p>"))
        >>> "x" in registry, registry.names()
        (True, ['x'])
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        logger: Logger | None = None,
    ) -> None:
        self._root = root
        self._lock = threading.Lock()
        self._definitions: dict[str, ComponentDefinition] = {}
        self._by_path: dict[Path, ComponentDefinition] = {}
        self._mtimes: dict[Path, float] = {}
        self._logger = logger or get_logger(__name__, component="registry")

    @property
    def root(self) -> Path | None:
        """Folder scanned by :meth:`load_directory` and :meth:`refresh`."""

        return self._root

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._definitions

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self.definitions())

    def get(self, name: str) -> ComponentDefinition | None:
        with self._lock:
            return self._definitions.get(name)

    def names(self) -> list[str]:
        """Return registered names in sorted order."""

        with self._lock:
            return sorted(self._definitions)

    def definitions(self) -> list[ComponentDefinition]:
        """Return a snapshot of registered definitions sorted by name."""

        with self._lock:
            return [self._definitions[name] for name in sorted(self._definitions)]

    def require(self, name: str) -> ComponentDefinition:
        """Return the definition for ``name``.

        Raises:
            ComponentNotFoundError: If ``name`` is not registered.
        """

        with self._lock:
            definition = self._definitions.get(name)
            if definition is None:
                raise ComponentNotFoundError(name, self._definitions)
            return definition

    def register(
        self,
        definition: ComponentDefinition,
        *,
        path: Path | None = None,
    ) -> ComponentDefinition:
        """Store ``definition``, replacing any prior one with the same name."""

        if not definition.is_invocable:
            self._logger.warning(
                "component-not-invocable",
                name=definition.name,
                source=definition.source_path,
            )
        with self._lock:
            if path is not None:
                self._forget_path_locked(path)
                self._by_path[path] = definition
            replaced = definition.name in self._definitions
            self._definitions[definition.name] = definition
        self._logger.debug(
            "component-registered",
            name=definition.name,
            replaced=replaced,
        )
        return definition

    def unregister(self, name: str) -> bool:
        """Remove ``name``; return whether it was registered."""

        with self._lock:
            removed = self._definitions.pop(name, None) is not None
            for path in [p for p, d in self._by_path.items() if d.name == name]:
                del self._by_path[path]
                self._mtimes.pop(path, None)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._definitions.clear()
            self._by_path.clear()
            self._mtimes.clear()

    def load_file(self, path: Path) -> ComponentDefinition | None:
        """Parse and register the component defined at ``path``.

        Read failures and documents that do not define a component are
        logged and skipped. A file that previously defined a component but no
        longer parses drops that component.
        """

        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
            mtime = path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.warning(
                "component-read-failed",
                path=str(path),
                error=str(exc),
            )
            return None

        definition = parse_definition(content, str(path))
        if definition is None:
            with self._lock:
                self._forget_path_locked(path)
                self._mtimes[path] = mtime
            self._logger.info("component-skipped", path=str(path))
            return None

        self.register(definition, path=path)
        with self._lock:
            self._mtimes[path] = mtime
        self._logger.info(
            "component-loaded",
            name=definition.name,
            path=str(path),
        )
        return definition

    def load_directory(self, root: Path | None = None) -> int:
        """Clear the registry and load every ``*.md`` file below ``root``.

        Returns the number of components registered. A missing folder leaves
        the registry empty.
        """

        if root is not None:
            self._root = Path(root)
        self.clear()
        folder = self._root
        if folder is None or not folder.is_dir():
            self._logger.info(
                "components-folder-missing",
                path=str(folder) if folder else None,
            )
            return 0
        for path in _scan(folder):
            self.load_file(path)
        count = len(self)
        self._logger.info(
            "components-loaded",
            count=count,
            path=str(folder),
        )
        return count

    def remove_path(self, path: Path) -> str | None:
        """Forget the component loaded from ``path``; return its name.

        If another known file defines the same name, it takes over.
        """

        with self._lock:
            name = self._forget_path_locked(Path(path))
            self._mtimes.pop(Path(path), None)
        if name is not None:
            self._logger.info("component-removed", name=name, path=str(path))
        return name

    def rename(self, old_path: Path, new_path: Path) -> ComponentDefinition | None:
        """Reconcile a moved file: drop the old entry and load the new one."""

        self.remove_path(old_path)
        new_path = Path(new_path)
        if new_path.suffix.lower() != COMPONENT_SUFFIX:
            return None
        return self.load_file(new_path)

    def refresh(self) -> bool:
        """Reload changed files, load new ones and forget deleted ones.

        Returns whether anything was reloaded or removed.
        """

        folder = self._root
        if folder is None or not folder.is_dir():
            with self._lock:
                known = list(self._mtimes)
            for path in known:
                self.remove_path(path)
            return bool(known)

        current: dict[Path, float] = {}
        for path in _scan(folder):
            try:
                current[path] = path.stat().st_mtime
            except OSError:
                continue
        with self._lock:
            known = dict(self._mtimes)

        changed = False
        for path in known.keys() - current.keys():
            self.remove_path(path)
            changed = True
        for path, mtime in sorted(current.items()):
            if known.get(path) != mtime:
                self.load_file(path)
                changed = True
        if changed:
            self._logger.debug("components-refreshed", count=len(self))
        return changed

    def _forget_path_locked(self, path: Path) -> str | None:
        previous = self._by_path.pop(path, None)
        if previous is None:
            return None
        name = previous.name
        current = self._definitions.get(name)
        if current is None or current.source_path != str(path):
            return name
        claimants = sorted(p for p, d in self._by_path.items() if d.name == name)
        if claimants:
            self._definitions[name] = self._by_path[claimants[-1]]
        else:
            del self._definitions[name]
        return name
