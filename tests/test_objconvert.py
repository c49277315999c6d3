import struct

import pytest

from inkforge.objconvert import (
    ModelError,
    Vertex,
    convert,
    encode_model,
    find_similar_vertex,
    index_vertices,
    is_near,
    main,
    read_obj,
)

SQUARE = """\
o square
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 1
f 1/1/1 2/2/1 3/3/1
f 1/1/1 3/3/1 4/4/1
"""

TRIANGLE = """\
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vn 0 0 1
f 1/1/1 2/1/1 3/1/1
"""


def test_is_near():
    assert is_near(1.0, 1.005)
    assert not is_near(1.0, 1.02)


def test_vertex_similarity():
    a = Vertex((0.0, 0.0, 0.0), (0.0, 0.0), (0.0, 0.0, 1.0))
    b = Vertex((0.005, 0.0, 0.0), (0.0, 0.005), (0.0, 0.0, 1.0))
    c = Vertex((0.5, 0.0, 0.0), (0.0, 0.0), (0.0, 0.0, 1.0))
    assert a.is_similar(b)
    assert not a.is_similar(c)


def test_vertex_encode():
    v = Vertex((1.0, 2.0, 3.0), (0.5, 0.25), (0.0, 1.0, 0.0))
    assert struct.unpack("<8f", v.encode()) == (1.0, 2.0, 3.0, 0.5, 0.25, 0.0, 1.0, 0.0)


def test_read_obj_triangle():
    flat = read_obj(TRIANGLE.splitlines())
    assert [v.position for v in flat] == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    assert all(v.normal == (0.0, 0.0, 1.0) for v in flat)


def test_read_obj_negative_indices():
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nvt 0 0\nvn 0 0 1\nf -3/-1/-1 -2/-1/-1 -1/-1/-1\n"
    assert read_obj(text.splitlines()) == read_obj(TRIANGLE.splitlines())


def test_read_obj_uses_first_shape_only():
    text = TRIANGLE + "o other\nf 3/1/1 2/1/1 1/1/1\n"
    assert read_obj(text.splitlines()) == read_obj(TRIANGLE.splitlines())


def test_read_obj_rejects_quads():
    text = SQUARE.replace("f 1/1/1 2/2/1 3/3/1\nf 1/1/1 3/3/1 4/4/1\n", "f 1/1/1 2/2/1 3/3/1 4/4/1\n")
    with pytest.raises(ModelError, match="not triangulated"):
        read_obj(text.splitlines())


@pytest.mark.parametrize(
    "text",
    ["", "v 0 0 0\n", "v 0 0 0\nvt 0 0\nvn 0 0 1\nf 1 1 1\n", "v 0 0 0\nvt 0 0\nvn 0 0 1\nf 1/1/1 2/1/1 1/1/1\n"],
)
def test_read_obj_errors(text):
    with pytest.raises(ModelError):
        read_obj(text.splitlines())


def test_find_similar_vertex():
    flat = read_obj(SQUARE.splitlines())
    assert find_similar_vertex(flat[3], flat[:3]) == 0
    assert find_similar_vertex(flat[5], flat[:3]) is None


def test_index_vertices_merges_shared_corners():
    flat = read_obj(SQUARE.splitlines())
    indices, vertices = index_vertices(flat)
    assert len(vertices) == 4
    assert indices == [0, 1, 2, 0, 2, 3]
    for i, vertex in zip(indices, flat):
        assert vertices[i].is_similar(vertex)


def test_encode_model_indexed():
    flat = read_obj(SQUARE.splitlines())
    indices, vertices = index_vertices(flat)
    data = encode_model(flat, "square.3mdl")
    assert struct.unpack_from("<III", data) == (1, len(indices), len(vertices))
    body = data[12:]
    assert list(struct.unpack_from(f"<{len(indices)}H", body)) == indices
    assert body[2 * len(indices) :] == b"".join(v.encode() for v in vertices)


def test_encode_model_flat_for_level_names():
    flat = read_obj(SQUARE.splitlines())
    data = encode_model(flat, "maps/level1.3mdl")
    assert struct.unpack_from("<III", data) == (0, 0, len(flat))
    assert data[12:] == b"".join(v.encode() for v in flat)


def test_encode_model_flat_when_nothing_shared():
    flat = read_obj(TRIANGLE.splitlines())
    data = encode_model(flat, "tri.3mdl")
    assert struct.unpack_from("<III", data) == (0, 0, 3)


def test_convert_round_trip(tmp_path):
    src = tmp_path / "square.obj"
    dst = tmp_path / "square.3mdl"
    src.write_text(SQUARE)
    assert convert(src, dst) == (6, 4, True)
    assert dst.read_bytes() == encode_model(read_obj(SQUARE.splitlines()), dst)


def test_convert_missing_input(tmp_path):
    with pytest.raises(ModelError):
        convert(tmp_path / "missing.obj", tmp_path / "out.3mdl")


def test_main_reports_progress(tmp_path, capsys):
    src = tmp_path / "square.obj"
    src.write_text(SQUARE)
    assert main([str(src), str(tmp_path / "square.3mdl")]) == 0
    out = capsys.readouterr().out
    assert out == "unflattened: 6\nindexed: 4\nsaving indexed\n"


def test_main_requires_two_arguments(capsys):
    assert main([]) != 0
    assert capsys.readouterr().out == "no\n"