"""Tests for dictionary and byte serialization of BiomTable."""

import json
import logging

import numpy as np
import pytest

from biomtable import BiomTable, load_bytes, to_bytes


@pytest.fixture
def table():
    return BiomTable(
        id="table-1",
        type="Function table",
        date="2016-05-12T09:12:34.567Z",
        matrix_type="dense",
        matrix_element_type="int",
        shape=(2, 2),
        rows=[{"id": "K00001", "metadata": {"pathway": ["Glycolysis"]}}, {"id": "K00002"}],
        columns=[{"id": "S1"}, {"id": "S2"}],
        data=[[1, 0], [0, 7]],
        comment="generated for tests",
    )


class TestToDict:
    def test_enums_become_text(self, table):
        wire = table.to_dict()

        assert type(wire["type"]) is str
        assert type(wire["matrix_type"]) is str
        assert type(wire["matrix_element_type"]) is str
        assert wire["shape"] == [2, 2]

    def test_numpy_payload_becomes_lists(self):
        table = BiomTable(
            matrix_type="dense",
            shape=np.zeros((2, 2)).shape,
            data=np.array([[1, 2], [3, 4]]),
        )
        wire = table.to_dict()

        assert wire["data"] == [[1, 2], [3, 4]]
        assert type(wire["data"][0][0]) is int

    def test_round_trip(self, table):
        assert BiomTable.from_dict(table.to_dict()) == table

    def test_from_dict_applies_defaults(self):
        table = BiomTable.from_dict({"id": "partial", "shape": [1, 1]})

        assert table.id == "partial"
        assert table.type == "OTU table"
        assert table.matrix_type == "sparse"
        assert table.date

    def test_from_dict_accepts_json_floats_in_shape(self):
        table = BiomTable.from_dict(json.loads('{"shape": [2.0, 3]}'))

        assert table.shape == [2.0, 3]
        assert table.matrix.shape == (2, 3)
        assert type(table.matrix.shape[0]) is int

    def test_from_dict_ignores_unknown_keys(self, caplog):
        with caplog.at_level(logging.WARNING, logger="biomtable.core.table"):
            table = BiomTable.from_dict({"id": "t", "extra": 1})

        assert table.id == "t"
        assert "extra" in caplog.text


class TestBytes:
    def test_table_round_trip(self, table):
        restored = BiomTable.from_bytes(table.to_bytes())

        assert restored == table
        assert restored.rows[0]["metadata"] == {"pathway": ["Glycolysis"]}

    def test_compression_level(self, table):
        fast = table.to_bytes(level=1)
        small = table.to_bytes(level=19)

        assert BiomTable.from_bytes(fast) == BiomTable.from_bytes(small)

    def test_mapping_round_trip_with_numpy_values(self):
        data = {"shape": np.array([2, 3]), "nnz": np.int64(4), "name": "t"}
        result = load_bytes(to_bytes(data))

        assert result == {"shape": [2, 3], "nnz": 4, "name": "t"}

    def test_load_bytes_rejects_non_mapping(self):
        with pytest.raises(TypeError, match="serialized mapping"):
            load_bytes(to_bytes([1, 2, 3]))  # pyright: ignore[reportArgumentType]


class TestCopy:
    def test_copy_is_deep(self, table):
        copied = table.copy()

        assert copied == table
        assert copied is not table
        copied.rows[0]["id"] = "changed"
        assert table.rows[0]["id"] == "K00001"

    def test_copy_keeps_date(self, table):
        assert table.copy().date == table.date

    def test_tables_with_different_fields_differ(self, table):
        other = table.copy()
        other.comment = None

        assert other != table
        assert table != "table-1"
