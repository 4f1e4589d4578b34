import pytest

from forest_module.model_file import (
    HEADER_SIZE,
    ModelFileError,
    ModelHeader,
    count_lines,
    inspect_model,
    iter_body,
    read_header,
)

HEADER = "committee: 2 (RandomForest)\ntrees: 3\nfeatures: 54\nmaxdepth: 20\nfpnfactor: 1\n"


def test_header_fields_parsed():
    header = ModelHeader.parse(HEADER)
    assert header.trees == 3
    assert header.fields["committee"] == "2 (RandomForest)"
    assert header.fields["fpnfactor"] == "1"
    assert header.shape() == {"committee": "2 (RandomForest)", "features": "54", "maxdepth": "20"}


def test_with_trees_only_touches_trees_line():
    header = ModelHeader.parse(HEADER)
    rewritten = header.with_trees(42)

    assert rewritten.trees == 42
    assert header.trees == 3
    for old, new in zip(header.lines, rewritten.lines):
        if old.startswith("trees:"):
            assert new == "trees: 42\n"
        else:
            assert new == old


def test_with_trees_rewrites_first_match_only():
    header = ModelHeader.parse("a: 1\ntrees: 1\ntrees: 9\nb: 2\nc: 3\n")
    assert header.with_trees(7).render() == "a: 1\ntrees: 7\ntrees: 9\nb: 2\nc: 3\n"


def test_with_trees_without_field():
    header = ModelHeader.parse("a: 1\nb: 2\nc: 3\nd: 4\ne: 5\n")
    assert not header.has_trees()
    assert header.trees is None
    with pytest.raises(KeyError):
        header.with_trees(1)


def test_unparseable_trees_value():
    header = ModelHeader.parse("trees: many\n")
    assert header.has_trees()
    assert header.trees is None


def test_count_lines_with_unterminated_tail(tmp_path):
    path = tmp_path / "m.model"
    path.write_text(HEADER + "t1\nt2", encoding="utf-8")
    assert count_lines(path) == HEADER_SIZE + 2
    assert list(iter_body(path)) == [b"t1\n", b"t2\n"]


def test_inspect_model(write_model):
    info = inspect_model(write_model("a.model", body=["x", "y", "z"]))
    assert info.total_lines == 8
    assert info.body_lines == 3
    assert info.header.trees == 3


def test_header_only_file_has_empty_body(write_model):
    path = write_model("empty.model", body=[])
    assert inspect_model(path).body_lines == 0
    assert list(iter_body(path)) == []


def test_short_file_rejected(tmp_path):
    path = tmp_path / "short.model"
    path.write_text("committee: 2 (RandomForest)\ntrees: 1\n", encoding="utf-8")
    with pytest.raises(ModelFileError, match="corrupt input file") as excinfo:
        read_header(path)
    assert excinfo.value.path == path


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ModelFileError, match="could not read input file"):
        count_lines(tmp_path / "nope.model")


def test_non_utf8_bytes_accepted(tmp_path):
    path = tmp_path / "bin.model"
    path.write_bytes(HEADER.encode() + b"caf\xe9\n\xff\xfe\x00\x01\n")

    info = inspect_model(path)

    assert info.body_lines == 2
    assert list(iter_body(path)) == [b"caf\xe9\n", b"\xff\xfe\x00\x01\n"]


def test_render_bytes_round_trips_undecodable_header(tmp_path):
    path = tmp_path / "m.model"
    raw = b"committee: 2 (\xe9)\ntrees: 3\nfeatures: 54\nmaxdepth: 20\nfpnfactor: 1\n"
    path.write_bytes(raw)
    assert read_header(path).render_bytes() == raw
