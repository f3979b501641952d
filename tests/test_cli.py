"""
Tests for the bookgraph command-line interface.
"""

import json

import pytest

from bookgraph.cli import build_parser, load_entities, main
from bookgraph.core.errors import InvalidEntityError


@pytest.fixture
def books_file(tmp_path, clustered_records):
    path = tmp_path / "books.json"
    path.write_text(json.dumps(clustered_records), encoding="utf-8")
    return path


class TestLoadEntities:
    def test_list_of_records(self, books_file):
        entities = load_entities(books_file)
        assert [e.id for e in entities] == ["a", "b", "c", "d", "e"]

    def test_books_object(self, tmp_path, clustered_records):
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"books": clustered_records}), encoding="utf-8")
        assert len(load_entities(path)) == 5

    def test_rejects_other_shapes(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")
        with pytest.raises(InvalidEntityError):
            load_entities(path)


class TestBuildCommand:
    def test_prints_graph(self, books_file, capsys):
        assert main(["build", "--input", str(books_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["anchor_id"] == "a"
        assert len(data["nodes"]) == 5
        assert sum(1 for e in data["edges"] if e["repair"]) == 1

    def test_writes_output_file(self, books_file, tmp_path):
        output = tmp_path / "graph.json"
        assert main(["build", "-i", str(books_file), "-a", "b", "-o", str(output)]) == 0
        assert json.loads(output.read_text(encoding="utf-8"))["anchor_id"] == "b"

    def test_missing_file(self, tmp_path):
        assert main(["build", "--input", str(tmp_path / "missing.json")]) == 1

    def test_invalid_scores(self, tmp_path, book_record):
        path = tmp_path / "books.json"
        path.write_text(json.dumps([book_record("x", (2, 0, 0, 0, 0))]), encoding="utf-8")
        assert main(["build", "--input", str(path)]) == 1

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        assert main(["build", "--input", str(path)]) == 1


class TestExplainCommand:
    def test_explains_pair(self, books_file, capsys):
        assert main(["explain", "--input", str(books_file), "a", "b"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Book a <-> Book b"
        assert out[1].startswith("Similarity: 0.9901")
        assert out[2].endswith("thematic match.") or out[2].startswith("These works share")

    def test_unknown_id(self, books_file):
        assert main(["explain", "--input", str(books_file), "a", "zzz"]) == 1

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        assert main(["explain", "--input", str(path), "a", "b"]) == 1


class TestCategoriesCommand:
    def test_default_threshold(self, capsys):
        assert main(["categories"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["nodes"]) == 12
        assert all(link["weight"] > 0.4 for link in data["links"])

    def test_custom_threshold(self, capsys):
        assert main(["categories", "--threshold", "0.8"]) == 0
        weights = sorted(link["weight"] for link in json.loads(capsys.readouterr().out)["links"])
        assert weights == [0.85]


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_serve_options(self):
        args = build_parser().parse_args(["serve", "--port", "9000", "--reload"])
        assert args.port == 9000
        assert args.reload is True
