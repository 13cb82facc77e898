"""Template rendering over whole directory trees."""

from __future__ import annotations

import copy
import dataclasses
import enum
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path, PurePath
from typing import Any

from mobilegen.bicycle.engine import EscapeFn, RenderingError, parse_template
from mobilegen.bicycle.traverse import (
    DEFAULT_TEMPLATE_EXT,
    Action,
    ActionKind,
    TraversalError,
    traverse,
)

log = logging.getLogger(__name__)


def _to_json(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, enum.Enum):
        return _to_json(value.value)
    if isinstance(value, Mapping):
        return {str(k): _to_json(v) for k, v in value.items()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _to_json(dataclasses.asdict(value))
    if hasattr(value, "to_dict"):
        return _to_json(value.to_dict())
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [_to_json(v) for v in value]
    return str(value)


class JsonMap(dict):
    """Template variable names and their JSON values."""

    def insert(self, name: str, value: Any) -> None:
        self[name] = _to_json(value)


class ProcessingError(Exception):
    """Raised when an action cannot be carried out."""

    def __init__(self, message: str, src: Path | None = None, dest: Path | None = None):
        self.src = src
        self.dest = dest
        super().__init__(message)


InsertData = Callable[[JsonMap], None]


def _no_data(_: JsonMap) -> None:
    pass


class Bicycle:
    """A strict template renderer that can also generate file trees."""

    def __init__(
        self,
        escape_fn: EscapeFn | Callable[[str], str] = EscapeFn.NONE,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
        base_data: Mapping[str, Any] | None = None,
    ):
        self.escape_fn = escape_fn
        self.helpers = dict(helpers or {})
        self.base_data = JsonMap()
        for name, value in (base_data or {}).items():
            self.base_data.insert(name, value)

    def render(self, template: str, insert_data: InsertData = _no_data) -> str:
        """Render template text with the base data plus what `insert_data` adds."""
        data = JsonMap(copy.deepcopy(dict(self.base_data)))
        insert_data(data)
        try:
            return parse_template(template).render(
                dict(data), escape=self.escape_fn, helpers=self.helpers, strict=True
            )
        except RenderingError as err:
            raise RenderingError(f"Failed to render template: {err}") from err

    def process_action(self, action: Action, insert_data: InsertData = _no_data) -> None:
        log.info("%r", action)
        if action.kind is ActionKind.CREATE_DIRECTORY:
            try:
                action.dest.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                raise ProcessingError(
                    f"Failed to create directory at {str(action.dest)!r}: {err}",
                    dest=action.dest,
                ) from err
            return
        src, dest = action.src, action.dest
        if action.kind is ActionKind.COPY_FILE:
            try:
                dest.write_bytes(src.read_bytes())
            except OSError as err:
                raise ProcessingError(
                    f"Failed to copy file {str(src)!r} to {str(dest)!r}: {err}", src, dest
                ) from err
            return
        try:
            template = src.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise ProcessingError(
                f"Failed to read template at {str(src)!r}: {err}", src
            ) from err
        try:
            rendered = self.render(template, insert_data)
        except RenderingError as err:
            raise ProcessingError(
                f"Failed to render template at {str(src)!r}: {err}", src
            ) from err
        try:
            dest.write_text(rendered, encoding="utf-8")
        except OSError as err:
            raise ProcessingError(
                f"Failed to write template from {str(src)!r} to {str(dest)!r}: {err}",
                src,
                dest,
            ) from err

    def process_actions(
        self, actions: Iterable[Action], insert_data: InsertData = _no_data
    ) -> None:
        for action in actions:
            self.process_action(action, insert_data)

    def process(
        self,
        src: str | os.PathLike[str],
        dest: str | os.PathLike[str],
        insert_data: InsertData = _no_data,
    ) -> None:
        """Reproduce the tree at `src` under `dest`, rendering `.hbs` templates."""
        self.filter_and_process(src, dest, insert_data, lambda _: True)

    def filter_and_process(
        self,
        src: str | os.PathLike[str],
        dest: str | os.PathLike[str],
        insert_data: InsertData,
        predicate: Callable[[Action], bool],
    ) -> None:
        """Like `process`, skipping actions for which `predicate` is false."""
        src = Path(src)
        try:
            actions = traverse(
                src,
                dest,
                lambda path: self.transform_path(path, insert_data),
                DEFAULT_TEMPLATE_EXT,
            )
        except TraversalError as err:
            raise ProcessingError(
                f"Failed to traverse templates at {str(src)!r}: {err}", src
            ) from err
        self.process_actions((a for a in actions if predicate(a)), insert_data)

    def transform_path(
        self, path: str | os.PathLike[str], insert_data: InsertData = _no_data
    ) -> Path:
        """Render the path itself as a template if it contains a variable."""
        path = Path(path)
        joined = "/".join(path.parts)
        if joined.startswith("//"):
            joined = joined[1:]
        if "{{" not in joined:
            return path
        return Path(self.render(joined, insert_data))