"""Tests for the matrix accessors and the consistency check of BiomTable."""

import numpy as np
import pytest

from biomtable import BiomTable, DenseMatrix, MatrixType, SparseMatrix
from biomtable.exceptions import ConsistencyError, FieldTypeError, MatrixStructureError


@pytest.fixture
def sparse_table():
    return BiomTable(
        id="sparse",
        shape=(2, 3),
        rows=[{"id": "OTU_1", "metadata": None}, {"id": "OTU_2", "metadata": None}],
        columns=[
            {"id": "S1", "metadata": None},
            {"id": "S2", "metadata": None},
            {"id": "S3", "metadata": None},
        ],
        data=[[0, 1, 5.0], [1, 2, 3.0]],
    )


class TestMatrixAccess:
    def test_matrix_follows_matrix_type(self, sparse_table):
        matrix = sparse_table.matrix

        assert isinstance(matrix, SparseMatrix)
        assert matrix.get(0, 1) == 5.0
        assert matrix.get(0, 0) == 0

    def test_to_array_uses_element_type(self, sparse_table):
        array = sparse_table.to_array()

        assert array.dtype == np.float64
        np.testing.assert_array_equal(array, [[0.0, 5.0, 0.0], [0.0, 0.0, 3.0]])

        sparse_table.matrix_element_type = "int"
        sparse_table.data = [[0, 1, 5], [1, 2, 3]]
        assert sparse_table.to_array().dtype == np.int64

    def test_matrix_of_malformed_data_raises(self, sparse_table):
        sparse_table.data = [[0, 7, 1.0]]

        with pytest.raises(MatrixStructureError):
            _ = sparse_table.matrix

    def test_set_matrix_keeps_tag_and_payload_together(self, sparse_table):
        sparse_table.set_matrix(DenseMatrix((1, 2), [[1.0, 2.0]]))

        assert sparse_table.matrix_type == "dense"
        assert sparse_table.shape == (1, 2)
        assert sparse_table.data == [[1.0, 2.0]]

    def test_set_matrix_rejects_raw_data(self, sparse_table):
        with pytest.raises(FieldTypeError):
            sparse_table.set_matrix([[1.0, 2.0]])  # pyright: ignore[reportArgumentType]
        assert sparse_table.matrix_type == "sparse"

    def test_from_matrix(self):
        table = BiomTable.from_matrix(
            DenseMatrix.from_array(np.eye(2)),
            id="identity",
            type="Gene table",
        )

        assert table.id == "identity"
        assert table.type == "Gene table"
        assert table.matrix_type is MatrixType.DENSE
        assert table.data == [[1.0, 0.0], [0.0, 1.0]]

    def test_convert_to_dense_and_back(self, sparse_table):
        sparse_table.convert("dense")

        assert sparse_table.matrix_type == "dense"
        assert sparse_table.data == [[0.0, 5.0, 0.0], [0.0, 0.0, 3.0]]

        sparse_table.convert(MatrixType.SPARSE)
        assert sparse_table.matrix_type == "sparse"
        assert sparse_table.data == [[0, 1, 5.0], [1, 2, 3.0]]

    def test_convert_to_current_type_is_a_no_op(self, sparse_table):
        data = sparse_table.data
        sparse_table.convert("sparse")

        assert sparse_table.data is data

    def test_convert_unicode_table_fills_empty_strings(self):
        table = BiomTable(
            shape=(1, 2),
            matrix_element_type="unicode",
            data=[[0, 1, "k__Bacteria"]],
        )
        table.convert("dense")

        assert table.data == [["", "k__Bacteria"]]


class TestConsistency:
    def test_consistent_table(self, sparse_table):
        assert sparse_table.is_consistent()
        assert sparse_table.consistency_errors() == []
        sparse_table.check_consistency()

    def test_default_table_is_consistent(self):
        assert BiomTable().is_consistent()

    def test_float_array_payload_is_consistent(self):
        table = BiomTable(
            shape=(1, 2),
            rows=[{"id": "OTU_1"}],
            columns=[{"id": "S1"}, {"id": "S2"}],
            data=np.array([[0, 1, 5.0]]),
        )

        assert table.is_consistent()
        assert table.matrix.entries == ((0, 1, 5.0),)
        assert type(table.matrix.entries[0][0]) is int
        assert table.matrix.get(0, 1) == 5.0

    def test_row_count_mismatch(self, sparse_table):
        sparse_table.rows = sparse_table.rows[:1]

        errors = sparse_table.consistency_errors()
        assert errors == ["rows has 1 entries, but shape requires 2"]

    def test_column_count_mismatch(self, sparse_table):
        sparse_table.columns = []

        with pytest.raises(ConsistencyError, match="columns has 0 entries"):
            sparse_table.check_consistency()

    def test_dense_payload_mismatch(self):
        table = BiomTable(
            matrix_type="dense",
            shape=(1, 2),
            rows=[{"id": "OTU_1"}],
            columns=[{"id": "S1"}, {"id": "S2"}],
            data=[[1, 2, 3]],
        )

        assert not table.is_consistent()
        with pytest.raises(ConsistencyError, match="Dense row 0 has 3 values"):
            table.check_consistency()

    def test_sparse_indices_out_of_bounds(self, sparse_table):
        sparse_table.shape = (2, 2)
        sparse_table.columns = sparse_table.columns[:2]

        errors = sparse_table.consistency_errors()
        assert len(errors) == 1
        assert "out of bounds" in errors[0]

    def test_all_errors_are_reported(self):
        table = BiomTable(shape=(3, 3), data=[[0, 0]])

        assert len(table.consistency_errors()) == 3
