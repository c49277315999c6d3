# inkforge

Build-time asset tools and small runtime helpers for a handheld
squid-ink shooter.

- **`inkforge-mapasm`** (`inkforge.mapasm`) turns a plain-text map
  description into the binary `.3map` format.
- **`inkforge-objconvert`** (`inkforge.objconvert`) turns a triangulated
  Wavefront OBJ model into the binary `.3mdl` format. Where it saves
  space, it merges similar vertices into an indexed vertex buffer.
- `inkforge.gyro` filters gyroscope drift and integrates angular rates
  into pitch and roll.
- `inkforge.netstatus` interprets connection-status reports and builds
  and checks the beacon application data.

The package uses only the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Assembling maps

A map source file has one entity per line:

```
sp crate p 1.0 0.0 -2.5 r 0 90 0 s 1 1 1
sp barrel p 4.0 0.0 3.0 r 0 0 0 s 0.5 0.5 0.5
lvgeo level_arena
```

- A line starting with `sp` is a static prop:
  `sp <model> p X Y Z r RX RY RZ s SX SY SZ`. Rotations are given in
  degrees and stored in radians. All values are stored as 32-bit floats.
  A malformed prop line raises `MapError`. So does a prop model name
  longer than 15 characters, or a first word longer than 7 characters.
- A line starting with `lvgeo` marks a model as level geometry, with no
  attributes. Its model name is cut to 15 characters.
- Any other line is ignored.

Entities are grouped by model. Models are written in sorted name order.
The output begins with a `u32` model count. Next comes one 24-byte record
per model: entity count, byte length of its entities, and a 16-byte
NUL-padded name. The entities follow. Each entity is a `u16` type, two
padding bytes, a `u32` attribute length and the attribute bytes. All
values are little endian.

```
inkforge-mapasm arena.map arena.3map
```

With fewer than two arguments the command prints `no` and exits with
status 1. If a file cannot be opened, it prints the error and exits with
status 1.

From Python:

```python
from inkforge.mapasm import parse_map, encode_map, assemble_map

with open("arena.map") as f:
    models = parse_map(f)        # {model name: [MapEntity, ...]}
blob = encode_map(models)

assemble_map("arena.map", "arena.3map")
```

`EntityType` lists the entity kinds: `STATIC_PROP`, `PHYSICS_PROP`,
`LEVEL_GEOMETRY`, `PLAYER` and `BOMB`. `StaticPropData.encode()` and
`MapEntity.encode()` give the binary form of a single record.
`radians(degrees)` converts angles with single-precision arithmetic.

## Converting models

The input must be triangulated. Every face vertex must name a position, a
texture coordinate and a normal (`v/vt/vn`). Negative indices count back
from the end. Comments after `#` are skipped. Only the first object or
group that has faces is converted.

```
inkforge-objconvert crate.obj crate.3mdl
```

The command prints the flat vertex count (`unflattened: N`) and the count
after merging (`indexed: N`). It then prints `saving indexed` or
`saving flat`. Vertices count as similar when every position, UV and
normal component differs by less than 0.01.

The output starts with three little-endian `u32` values: the data type,
the index count and the vertex count.

- An indexed model (type 1) follows with `u16` indices, then the unique
  vertices.
- A flat model (type 0) has an index count of 0 and is followed by every
  vertex.

A vertex is eight 32-bit floats: position, UV and normal. The indexed
form is written only when merging reduces the vertex count and the
destination path does not contain `level`.

From Python:

```python
from inkforge.objconvert import read_obj, index_vertices, encode_model, convert

with open("crate.obj") as f:
    flat = read_obj(f)                   # list of Vertex
indices, vertices = index_vertices(flat)
blob = encode_model(flat, "crate.3mdl")

flat_count, unique_count, indexed = convert("crate.obj", "crate.3mdl")
```

`find_similar_vertex(vertex, vertices)` returns the index of the first
similar vertex, or `None`. Malformed or untriangulated models raise
`ModelError`.

## Gyro tracking

`GyroTracker` turns raw gyroscope rates into pitch (around X) and roll
(around Y). It uses a precision divisor, 10.0 by default, and a
sample interval of 0.01 s.

- A reading whose rounded-up value lies within `DRIFT_CORRECTION` (12) of
  the previous reading's is ignored as drift.
- `update(x, y)` feeds one sample.
- `position(x, y)` feeds a sample and returns pitch and roll, both rounded
  up.
- `set_home()` resets both angles to zero.

## Network status

- `ConnectionTracker().parse_status(status, total_nodes)` returns a
  `ConnectionEvent`:
  - status 3 is `HOST_TERMINATED`;
  - status 9 is `JOINED_NETWORK`;
  - status 6 is `NETWORK_CREATED` for the first report. After that it is
    `CLIENT_CONNECTED` or `CLIENT_DISCONNECTED` as the node count rises
    or falls;
  - anything else is `UNKNOWN`.

  The tracker remembers the node count between reports.
- `build_app_data(name)` builds the 0x14-byte beacon application data: a
  four-byte magic, then the name, NUL padded. The name must be shorter
  than 16 bytes and free of NUL, otherwise `AppDataError` is raised.
- `parse_app_data(data)` checks the size and the magic, and returns the
  name. It raises `AppDataError` if the data does not match.

## What it does not do

`inkforge.gyro` and `inkforge.netstatus` do not read sensors or use any
radio. Hosting, scanning for, joining and sending packets on a local
network are outside this package. So is reading the gyroscope itself. The
caller supplies the status reports and angular rates. There is no game
or viewer that loads the `.3map` and `.3mdl` files.