"""Scene providers: the only I/O seam of the graph builder."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from choicegraph.errors import SceneLoadError


@runtime_checkable
class SceneProvider(Protocol):
    def list_scenes(self) -> list[str]: ...

    def load_scene(self, name: str) -> str: ...

    def has_scene(self, name: str) -> bool: ...


@runtime_checkable
class AsyncSceneProvider(Protocol):
    async def list_scenes(self) -> list[str]: ...

    async def load_scene(self, name: str) -> str: ...

    async def has_scene(self, name: str) -> bool: ...


class InMemorySceneProvider:
    """Scenes held in a mapping of scene name to source text."""

    def __init__(self, scenes: Mapping[str, str] | None = None) -> None:
        self._scenes: dict[str, str] = dict(scenes or {})

    def add_scene(self, name: str, text: str) -> None:
        self._scenes[name] = text

    def list_scenes(self) -> list[str]:
        return list(self._scenes)

    def load_scene(self, name: str) -> str:
        try:
            return self._scenes[name]
        except KeyError:
            raise SceneLoadError(f"Scene {name!r} does not exist") from None

    def has_scene(self, name: str) -> bool:
        return name in self._scenes


class DirectorySceneProvider:
    """Scenes stored as `<root>/<scene><extension>` files (UTF-8, optional BOM)."""

    def __init__(self, root: str | Path, *, extension: str = ".txt") -> None:
        self._root = Path(root)
        self._extension = extension if extension.startswith(".") else f".{extension}"

    @property
    def root(self) -> Path:
        return self._root

    def scene_path(self, name: str) -> Path:
        return self._root / f"{name}{self._extension}"

    def list_scenes(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(path.stem for path in self._root.glob(f"*{self._extension}") if path.is_file())

    def load_scene(self, name: str) -> str:
        path = self.scene_path(name)
        if not path.is_file():
            raise SceneLoadError(f"Scene {name!r} does not exist at {path}")
        try:
            decoded = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise SceneLoadError(f"Failed to load scene {name!r}: {error}") from error
        return decoded[1:] if decoded.startswith("\ufeff") else decoded

    def has_scene(self, name: str) -> bool:
        return self.scene_path(name).is_file()
