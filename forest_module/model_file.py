# /combine_models/forest_module/model_file.py
"""
Text format of a serialized forest model.

A model file is a fixed 5-line header followed by the tree body:

    committee: 2 (RandomForest)
    trees: 100
    features: 54
    maxdepth: 20
    fpnfactor: 1
    <tree records ...>

Only the header is decoded here. The body is opaque bytes that are only
counted and streamed.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from itertools import islice
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

HEADER_SIZE = 5
TREES_FIELD = "trees"

# Fields written by the forest learner besides `trees`. Inputs that
# disagree on these were not trained with the same settings.
SHAPE_FIELDS = ("committee", "features", "maxdepth")

PathLike = Union[str, Path]

HEADER_ENCODING = "utf-8"


class ModelFileError(Exception):
    """Input model file is unreadable or structurally broken."""

    def __init__(self, message: str, path: Optional[PathLike] = None):
        super().__init__(message)
        self.path = path


def _split_field(line: str) -> Optional[tuple]:
    name, sep, value = line.partition(":")
    if not sep:
        return None
    name = name.strip()
    if not name or " " in name:
        return None
    return name, value.strip()


def _terminate(line):
    newline = b"\n" if isinstance(line, bytes) else "\n"
    return line if line.endswith(newline) else line + newline


@dataclass
class ModelHeader:
    """The first HEADER_SIZE lines of a model file, kept verbatim."""
    lines: List[str]
    fields: Dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.fields = {}
        for line in self.lines:
            parsed = _split_field(line)
            # first occurrence wins, same as the line that with_trees rewrites
            if parsed and parsed[0] not in self.fields:
                self.fields[parsed[0]] = parsed[1]

    @classmethod
    def parse(cls, text: str) -> "ModelHeader":
        return cls(text.splitlines(keepends=True))

    @property
    def trees(self) -> Optional[int]:
        raw = self.fields.get(TREES_FIELD)
        if raw is None:
            return None
        try:
            return int(raw.split()[0])
        except (ValueError, IndexError):
            return None

    def has_trees(self) -> bool:
        return TREES_FIELD in self.fields

    def with_trees(self, count: int) -> "ModelHeader":
        """Return a copy whose first `trees:` line declares `count`; other lines untouched."""
        lines = list(self.lines)
        for idx, line in enumerate(lines):
            parsed = _split_field(line)
            if parsed and parsed[0] == TREES_FIELD:
                lines[idx] = f"{TREES_FIELD}: {count}\n"
                break
        else:
            raise KeyError(TREES_FIELD)
        return replace(self, lines=lines)

    def shape(self) -> Dict[str, Optional[str]]:
        return {name: self.fields.get(name) for name in SHAPE_FIELDS}

    def render(self) -> str:
        return "".join(_terminate(line) for line in self.lines)

    def render_bytes(self) -> bytes:
        """Header as written to the combined file; undecodable bytes round-trip unchanged."""
        return self.render().encode(HEADER_ENCODING, "surrogateescape")


@dataclass
class ModelFileInfo:
    path: Path
    total_lines: int
    header: ModelHeader

    @property
    def body_lines(self) -> int:
        return self.total_lines - HEADER_SIZE


def _open(path: PathLike):
    try:
        return open(path, "rb")
    except OSError as e:
        raise ModelFileError(f"could not read input file: {path} ({e.strerror or e})", path) from e


def count_lines(path: PathLike) -> int:
    """Number of lines in `path`; an unterminated last line counts as one."""
    with _open(path) as fh:
        return sum(1 for _ in fh)


def read_header(path: PathLike) -> ModelHeader:
    with _open(path) as fh:
        raw = list(islice(fh, HEADER_SIZE))
    if len(raw) < HEADER_SIZE:
        raise ModelFileError(f"corrupt input file: {path} (header has {len(raw)} of {HEADER_SIZE} lines)", path)
    return ModelHeader([line.decode(HEADER_ENCODING, "surrogateescape") for line in raw])


def inspect_model(path: PathLike) -> ModelFileInfo:
    """Read the header and count all lines of one model file."""
    header = read_header(path)
    return ModelFileInfo(path=Path(path), total_lines=count_lines(path), header=header)


def iter_body(path: PathLike) -> Iterator[bytes]:
    """Yield the body lines (line HEADER_SIZE+1 onward), each newline-terminated."""
    with _open(path) as fh:
        for line in islice(fh, HEADER_SIZE, None):
            yield _terminate(line)
