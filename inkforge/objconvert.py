"""Convert Wavefront OBJ meshes into the binary ``.3mdl`` format.

The output starts with three little-endian ``u32`` values: the data type
(1 for indexed, 0 for flat), the index count and the vertex count.  An
indexed model follows with ``u16`` indices and then its vertices; a flat
model follows with its vertices only.  A vertex is eight 32-bit floats:
position, texture coordinate and normal.
"""

from __future__ import annotations

import struct
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "Vertex",
    "ModelError",
    "is_near",
    "read_obj",
    "find_similar_vertex",
    "index_vertices",
    "encode_model",
    "convert",
    "main",
]

_TOLERANCE = 0.01
_HEADER = struct.Struct("<III")
_VERTEX = struct.Struct("<8f")
_F32 = struct.Struct("<f")


class ModelError(Exception):
    """Raised when a model cannot be read or converted."""


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def is_near(a: float, b: float) -> bool:
    """Whether two components are close enough to be treated as equal."""
    return abs(a - b) < _TOLERANCE


@dataclass(frozen=True)
class Vertex:
    """A mesh vertex: position, texture coordinate and normal."""

    position: tuple[float, float, float]
    uv: tuple[float, float]
    normal: tuple[float, float, float]

    def is_similar(self, other: Vertex) -> bool:
        """Whether every component of ``other`` is near this vertex's."""
        return all(
            is_near(a, b)
            for mine, theirs in (
                (self.position, other.position),
                (self.uv, other.uv),
                (self.normal, other.normal),
            )
            for a, b in zip(mine, theirs)
        )

    def encode(self) -> bytes:
        """Pack as eight little-endian 32-bit floats."""
        return _VERTEX.pack(*self.position, *self.uv, *self.normal)


def _numbers(args: Sequence[str], count: int, defaults: Sequence[float], lineno: int):
    values = list(args[:count])
    if len(values) + len(defaults) < count:
        raise ModelError(f"line {lineno}: expected {count} numbers")
    try:
        parsed = [_f32(float(v)) for v in values]
    except ValueError as exc:
        raise ModelError(f"line {lineno}: bad number") from exc
    parsed.extend(defaults[len(parsed) - count :] if len(parsed) < count else [])
    return tuple(parsed[:count])


def _resolve(token: str, count: int, kind: str, lineno: int) -> int:
    try:
        index = int(token)
    except ValueError as exc:
        raise ModelError(f"line {lineno}: bad {kind} index {token!r}") from exc
    resolved = index - 1 if index > 0 else count + index
    if index == 0 or not 0 <= resolved < count:
        raise ModelError(f"line {lineno}: {kind} index {index} out of range")
    return resolved


@dataclass
class _Face:
    tokens: list[str]
    counts: tuple[int, int, int]
    lineno: int


def read_obj(lines: Iterable[str]) -> list[Vertex]:
    """Read the first shape of an OBJ mesh as a flat list of triangle vertices."""
    positions: list[tuple] = []
    uvs: list[tuple] = []
    normals: list[tuple] = []
    shapes: list[list[_Face]] = [[]]
    for lineno, line in enumerate(lines, start=1):
        fields = line.split("#", 1)[0].split()
        if not fields:
            continue
        keyword, args = fields[0], fields[1:]
        if keyword == "v":
            positions.append(_numbers(args, 3, (), lineno))
        elif keyword == "vt":
            uvs.append(_numbers(args, 2, (0.0,), lineno))
        elif keyword == "vn":
            normals.append(_numbers(args, 3, (), lineno))
        elif keyword in ("o", "g"):
            if shapes[-1]:
                shapes.append([])
        elif keyword == "f":
            counts = (len(positions), len(uvs), len(normals))
            shapes[-1].append(_Face(args, counts, lineno))

    faces = next((shape for shape in shapes if shape), None)
    if faces is None:
        raise ModelError("Couldn't parse model")
    if any(len(face.tokens) != 3 for face in faces):
        raise ModelError("Model is not triangulated")

    flat = []
    for face in faces:
        n_pos, n_uv, n_norm = face.counts
        for token in face.tokens:
            parts = token.split("/")
            if len(parts) < 3 or not parts[1] or not parts[2]:
                raise ModelError(
                    f"line {face.lineno}: face vertex {token!r} needs a texture coordinate and a normal"
                )
            flat.append(
                Vertex(
                    positions[_resolve(parts[0], n_pos, "vertex", face.lineno)],
                    uvs[_resolve(parts[1], n_uv, "texture coordinate", face.lineno)],
                    normals[_resolve(parts[2], n_norm, "normal", face.lineno)],
                )
            )
    return flat


def find_similar_vertex(vertex: Vertex, vertices: Sequence[Vertex]) -> int | None:
    """Index of the first vertex similar to ``vertex``, or None."""
    return next((i for i, known in enumerate(vertices) if known.is_similar(vertex)), None)


def index_vertices(flat: Iterable[Vertex]) -> tuple[list[int], list[Vertex]]:
    """Merge similar vertices, returning indices and the unique vertices."""
    indices: list[int] = []
    vertices: list[Vertex] = []
    for vertex in flat:
        found = find_similar_vertex(vertex, vertices)
        if found is None:
            vertices.append(vertex)
            found = len(vertices) - 1
        indices.append(found & 0xFFFF)
    return indices, vertices


def _encode(flat, indices, vertices, filename) -> tuple[bytes, bool]:
    if len(vertices) < len(flat) and "level" not in str(filename):
        parts = [_HEADER.pack(1, len(indices), len(vertices))]
        parts.append(struct.pack(f"<{len(indices)}H", *indices))
        parts.extend(v.encode() for v in vertices)
        return b"".join(parts), True
    parts = [_HEADER.pack(0, 0, len(flat))]
    parts.extend(v.encode() for v in flat)
    return b"".join(parts), False


def encode_model(flat: Sequence[Vertex], filename: str | Path) -> bytes:
    """Encode vertices, indexed when that saves space and the name lacks "level"."""
    flat = list(flat)
    indices, vertices = index_vertices(flat)
    return _encode(flat, indices, vertices, filename)[0]


def convert(source: str | Path, destination: str | Path) -> tuple[int, int, bool]:
    """Convert an OBJ file to a model file.

    Returns the flat vertex count, the unique vertex count and whether the
    indexed form was written.
    """
    try:
        with open(source, encoding="utf-8", errors="replace") as stream:
            flat = read_obj(stream)
    except OSError as exc:
        raise ModelError("Couldn't parse model") from exc
    indices, vertices = index_vertices(flat)
    data, indexed = _encode(flat, indices, vertices, destination)
    Path(destination).write_bytes(data)
    return len(flat), len(vertices), indexed


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry: ``objconvert INPUT OUTPUT``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("no")
        return 1
    try:
        flat_count, indexed_count, indexed = convert(args[0], args[1])
    except ModelError as exc:
        print(exc)
        return 1
    except OSError:
        print("can't open outfile!")
        return 1
    print(f"unflattened: {flat_count}")
    print(f"indexed: {indexed_count}")
    print("saving indexed" if indexed else "saving flat")
    return 0


if __name__ == "__main__":
    sys.exit(main())