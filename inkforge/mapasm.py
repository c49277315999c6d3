"""Assemble textual map descriptions into the binary ``.3map`` format.

The text format has one entity per line:

``sp <model> p <x> <y> <z> r <x> <y> <z> s <x> <y> <z>``
    a static prop, with rotation in degrees;
``lvgeo <model>``
    level geometry.

Any other line is ignored.

The binary layout (little endian) is a ``u32`` model count, then one
24-byte record per model (``u32`` entity count, ``u32`` byte length of the
model's entities, 16-byte NUL padded name), then every model's entities in
the same order.  Models are ordered by name.
"""

from __future__ import annotations

import struct
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "EntityType",
    "StaticPropData",
    "MapEntity",
    "MapError",
    "radians",
    "parse_map",
    "encode_map",
    "assemble_map",
    "main",
]

_PI = 3.14159
_NAME_SIZE = 16
_TYPE_TOKEN_MAX = 7
_HEADER = struct.Struct("<I")
_MODEL = struct.Struct(f"<II{_NAME_SIZE}s")
_ENTITY = struct.Struct("<HxxI")
_PROP = struct.Struct("<9f")
_F32 = struct.Struct("<f")


class MapError(Exception):
    """Raised when a map cannot be read, parsed or written."""


class EntityType(IntEnum):
    """Kind of entity stored in a map file."""

    STATIC_PROP = 0
    PHYSICS_PROP = 1
    LEVEL_GEOMETRY = 2
    PLAYER = 1000
    BOMB = 1001


def _f32(value: float) -> float:
    """Round a number to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def radians(degrees: float) -> float:
    """Convert degrees to radians with single-precision arithmetic."""
    return _f32(_f32(_f32(_PI) * _f32(degrees)) / 180.0)


Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class StaticPropData:
    """Placement of a static prop; ``rotation`` is in radians."""

    position: Vec3
    rotation: Vec3
    scale: Vec3

    def encode(self) -> bytes:
        """Pack as nine little-endian 32-bit floats."""
        return _PROP.pack(*self.position, *self.rotation, *self.scale)


@dataclass(frozen=True)
class MapEntity:
    """One entity record: its type and opaque attribute bytes."""

    type: EntityType
    attribs: bytes = b""

    def encode(self) -> bytes:
        """Pack the entity header followed by its attributes."""
        return _ENTITY.pack(int(self.type), len(self.attribs)) + self.attribs


def _floats(fields: Sequence[str], lineno: int) -> Vec3:
    try:
        x, y, z = (float(field) for field in fields)
    except ValueError as exc:
        raise MapError(f"line {lineno}: bad number in {' '.join(fields)!r}") from exc
    return (x, y, z)


def _parse_static_prop(line: str, lineno: int) -> tuple[str, MapEntity]:
    fields = line.split()
    if len(fields) < 14 or (fields[2], fields[6], fields[10]) != ("p", "r", "s"):
        raise MapError(f"line {lineno}: malformed static prop")
    if len(fields[0]) > _TYPE_TOKEN_MAX:
        raise MapError(f"line {lineno}: entity keyword too long")
    name = fields[1]
    if len(name) > _NAME_SIZE - 1:
        raise MapError(f"line {lineno}: model name {name!r} too long")
    position = tuple(_f32(v) for v in _floats(fields[3:6], lineno))
    rotation = tuple(radians(v) for v in _floats(fields[7:10], lineno))
    scale = tuple(_f32(v) for v in _floats(fields[11:14], lineno))
    data = StaticPropData(position, rotation, scale)  # type: ignore[arg-type]
    return name, MapEntity(EntityType.STATIC_PROP, data.encode())


def _parse_level_geometry(line: str, lineno: int) -> tuple[str, MapEntity]:
    fields = line.split()
    if len(fields) < 2:
        raise MapError(f"line {lineno}: level geometry needs a model name")
    return fields[1][: _NAME_SIZE - 1], MapEntity(EntityType.LEVEL_GEOMETRY)


def parse_map(lines: Iterable[str]) -> dict[str, list[MapEntity]]:
    """Parse map text into entities grouped by model name."""
    models: dict[str, list[MapEntity]] = {}
    for lineno, line in enumerate(lines, start=1):
        if line.startswith("sp"):
            name, entity = _parse_static_prop(line, lineno)
        elif line.startswith("lvgeo"):
            name, entity = _parse_level_geometry(line, lineno)
        else:
            continue
        models.setdefault(name, []).append(entity)
    return models


def _name_bytes(name: str) -> bytes:
    return name.encode("utf-8", "surrogateescape")


def encode_map(models: Mapping[str, Iterable[MapEntity]]) -> bytes:
    """Serialise grouped entities into the binary map format."""
    ordered = sorted(models, key=_name_bytes)
    encoded = {name: [entity.encode() for entity in models[name]] for name in ordered}
    parts = [_HEADER.pack(len(ordered))]
    for name in ordered:
        records = encoded[name]
        raw_name = _name_bytes(name)[: _NAME_SIZE - 1]
        parts.append(_MODEL.pack(len(records), sum(map(len, records)), raw_name))
    for name in ordered:
        parts.extend(encoded[name])
    return b"".join(parts)


def assemble_map(source: str | Path, destination: str | Path) -> None:
    """Read a map text file and write its binary form."""
    try:
        with open(source, encoding="utf-8", errors="surrogateescape") as stream:
            models = parse_map(stream)
    except OSError as exc:
        raise MapError("Couldn't open input file") from exc
    data = encode_map(models)
    try:
        Path(destination).write_bytes(data)
    except OSError as exc:
        raise MapError("Couldn't open output file") from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry: ``mapasm INPUT OUTPUT``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("no")
        return 1
    try:
        assemble_map(args[0], args[1])
    except MapError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())