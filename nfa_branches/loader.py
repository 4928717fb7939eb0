from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Mapping, Union

import toml

from .models import GrammarDefinition


class GrammarLoadError(Exception):
    def __init__(self, message: str, path: Union[str, Path]) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)


def _decode(text: str, path: Path) -> Mapping[str, Any]:
    if path.suffix.lower() == ".toml":
        return toml.loads(text)
    return json.loads(text)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _check_shape(data: Any, p: Path) -> None:
    if not isinstance(data, Mapping):
        raise GrammarLoadError("top level must be an object/table", p)
    # Absent fields are left for build_automaton to report; present ones must have the right type.
    for key in ("states", "alphabet", "accept"):
        if data.get(key) is not None and not _is_str_list(data[key]):
            raise GrammarLoadError(f"'{key}' must be a list of strings", p)
    if data.get("start") is not None and not isinstance(data["start"], str):
        raise GrammarLoadError("'start' must be a string", p)
    transition = data.get("transition") or {}
    if not isinstance(transition, Mapping) or not all(_is_str_list(v) for v in transition.values()):
        raise GrammarLoadError("'transition' must map \"state,symbol\" to a list of states", p)


def load_grammar(path: Union[str, Path]) -> GrammarDefinition:
    """
    Read a grammar file. JSON unless the file ends in .toml.
    Reading, decoding and field types are checked here; build_automaton validates the content.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as ex:
        raise GrammarLoadError(f"file is not valid UTF-8 ({ex.reason})", p) from ex
    except OSError as ex:
        raise GrammarLoadError(f"cannot read file ({ex.strerror or ex})", p) from ex

    try:
        data = _decode(text, p)
    except (json.JSONDecodeError, toml.TomlDecodeError) as ex:
        raise GrammarLoadError(f"cannot parse grammar: {ex}", p) from ex

    _check_shape(data, p)
    return GrammarDefinition.from_mapping(data)
