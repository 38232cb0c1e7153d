"""
Filesystem layers for example commands.

A layer is anything with open(path) returning a binary file object.
Layers raise FileNotFoundError when a path is absent and another OSError
for any other failure.
"""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Read-only file access by slash-separated relative path."""

    def open(self, path: str) -> BinaryIO:
        ...


class OverlayLayerError(OSError):
    """A layer of an OverlayFS failed with something other than not-found."""

    def __init__(self, index: int, path: str, cause: OSError):
        super().__init__(f"OverlayFS[{index}].open {path}: {cause}")
        self.index = index
        self.path = path
        self.__cause__ = cause


@dataclass
class MemoryFS:
    """In-memory files keyed by path."""
    files: dict[str, bytes] = field(default_factory=dict)

    def open(self, path: str) -> BinaryIO:
        try:
            data = self.files[path]
        except KeyError:
            raise FileNotFoundError(f"open {path}: file does not exist") from None
        return io.BytesIO(data)

    def write(self, path: str, data: bytes) -> None:
        self.files[path] = bytes(data)

    def paths(self) -> list[str]:
        return sorted(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __len__(self) -> int:
        return len(self.files)


class DiskFS:
    """Files under a root directory on disk."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Map path onto the root, refusing anything outside of it."""
        resolved = (self.root / path).resolve()
        root = self.root.resolve()
        if resolved != root and root not in resolved.parents:
            raise PermissionError(
                f"attempted access outside of {self.root}: open {path}"
            )
        return resolved

    def open(self, path: str) -> BinaryIO:
        return self.resolve(path).open("rb")

    def stat(self, path: str) -> os.stat_result:
        return self.resolve(path).stat()

    def __repr__(self) -> str:
        return f"DiskFS({str(self.root)!r})"


class OverlayFS:
    """
    An ordered stack of layers; the first layer holding a path wins.

    Not-found errors fall through to the next layer. Any other error
    stops the lookup and is reported with the index of its layer.
    """

    def __init__(self, layers: list[FileSystem] | None = None):
        self.layers: list[FileSystem] = list(layers or [])

    def open(self, path: str) -> BinaryIO:
        for i, layer in enumerate(self.layers):
            try:
                return layer.open(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                raise OverlayLayerError(i, path, e) from e
        raise FileNotFoundError(f"OverlayFS.open {path}: file does not exist")

    def paths(self) -> list[str]:
        """Paths listed by any layer that can enumerate its files."""
        found: set[str] = set()
        for layer in self.layers:
            if hasattr(layer, "paths"):
                found.update(layer.paths())
        return sorted(found)

    def __repr__(self) -> str:
        return f"OverlayFS({self.layers!r})"
