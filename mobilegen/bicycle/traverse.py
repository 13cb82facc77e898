"""Walk a template tree and plan the filesystem actions that reproduce it."""

from __future__ import annotations

import enum
import os
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TEMPLATE_EXT: str | None = "hbs"

TransformPath = Callable[[Path], Path]


class ActionKind(enum.Enum):
    CREATE_DIRECTORY = "create_directory"
    COPY_FILE = "copy_file"
    WRITE_TEMPLATE = "write_template"


@dataclass(frozen=True)
class Action:
    """One step in generating a file tree."""

    kind: ActionKind
    dest: Path
    src: Path | None = None

    @property
    def is_create_directory(self) -> bool:
        return self.kind is ActionKind.CREATE_DIRECTORY

    @property
    def is_copy_file(self) -> bool:
        return self.kind is ActionKind.COPY_FILE

    @property
    def is_write_template(self) -> bool:
        return self.kind is ActionKind.WRITE_TEMPLATE


class TraversalError(Exception):
    """Raised when a template tree cannot be traversed."""

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(message)


def no_transform(path: str | os.PathLike[str]) -> Path:
    """Leave a path unchanged."""
    return Path(path)


def _file_action(
    src: Path, dest_dir: Path, transform_path: TransformPath, template_ext: str | None
) -> Action:
    if template_ext is not None and src.suffix == f".{template_ext}":
        return Action(ActionKind.WRITE_TEMPLATE, transform_path(dest_dir / src.stem), src)
    return Action(ActionKind.COPY_FILE, transform_path(dest_dir / src.name), src)


def _transform_error(path: Path, cause: Exception) -> TraversalError:
    return TraversalError(f"Failed to transform path at {str(path)!r}: {cause}", path)


def _traverse_dir(src, dest, transform_path, template_ext, actions: deque) -> None:
    if src.is_file():
        try:
            actions.append(_file_action(src, dest, transform_path, template_ext))
        except Exception as err:
            raise _transform_error(dest, err) from err
        return
    try:
        actions.appendleft(Action(ActionKind.CREATE_DIRECTORY, transform_path(dest)))
    except Exception as err:
        raise _transform_error(dest, err) from err
    try:
        entries = sorted(src.iterdir())
    except OSError as err:
        raise TraversalError(
            f"Failed to read directory at {str(src)!r}: {err}", src
        ) from err
    for path in entries:
        if path.is_dir():
            _traverse_dir(path, dest / path.name, transform_path, template_ext, actions)
        else:
            try:
                actions.append(_file_action(path, dest, transform_path, template_ext))
            except Exception as err:
                raise _transform_error(path, err) from err


def traverse(
    src: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    transform_path: TransformPath = no_transform,
    template_ext: str | None = DEFAULT_TEMPLATE_EXT,
) -> deque[Action]:
    """Plan how to reproduce the tree at `src` under `dest`.

    Directories become create actions (placed first), files ending in
    `template_ext` become template writes and other files become copies.
    """
    actions: deque[Action] = deque()
    _traverse_dir(Path(src), Path(dest), transform_path, template_ext, actions)
    return actions