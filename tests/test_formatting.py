import numpy as np
import pytest

from slamkit.formatting import MatrixFormat, format_matrix, format_vector, linspaced

M = np.arange(1.0, 10.0).reshape(3, 3)


def test_default_format():
    assert format_matrix(M) == "1 2 3\n4 5 6\n7 8 9"


def test_clean_format():
    fmt = MatrixFormat(precision=4, coeff_separator=", ", row_prefix="[", row_suffix="]")
    assert fmt.format(M) == "[1, 2, 3]\n[4, 5, 6]\n[7, 8, 9]"


def test_alignment_pads_left():
    assert format_matrix([[1, -10]]) == "  1 -10"


def test_aligned_cells_share_width():
    text = format_matrix([[0.5, -123.25], [7.0, 1e-3]])
    cells = [cell for line in text.split("\n") for cell in [line[: len(line) // 2], line]]
    lines = text.split("\n")
    assert len({len(line) for line in lines}) == 1
    assert len(cells) == 4


def test_unaligned_matches_plain_values():
    fmt = MatrixFormat(align_columns=False)
    text = fmt.format([[1.5, -20.0, 3.0]])
    assert [float(t) for t in text.split(" ")] == [1.5, -20.0, 3.0]


def test_precision_limits_significant_digits():
    text = MatrixFormat(precision=4).format([[np.pi]])
    digits = text.replace(".", "").lstrip("0")
    assert len(digits) == 4
    assert abs(float(text) - np.pi) < 1e-3


def test_vector_is_one_row():
    assert format_vector([1.0, 2.0, 3.0]) == format_matrix([[1.0, 2.0, 3.0]])
    assert "\n" not in format_vector(np.ones(5))


def test_one_dimensional_matrix_is_column():
    assert format_matrix([1.0, 2.0]) == format_matrix([[1.0], [2.0]])


def test_integer_dtype_prints_integers():
    value = 100000000
    assert format_matrix(np.array([[value]])) == str(value)


def test_bad_shapes():
    with pytest.raises(ValueError):
        format_matrix(np.zeros((2, 2, 2)))
    with pytest.raises(ValueError):
        format_vector(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        MatrixFormat(fill="ab")


def test_linspaced_and_elementwise_product():
    a = linspaced(5, 0, 4)
    b = linspaced(5, 1, 5)
    assert np.array_equal(a, np.arange(5.0))
    assert np.array_equal(a * b, np.arange(5.0) * np.arange(1.0, 6.0))


def test_linspaced_edge_cases():
    assert np.array_equal(linspaced(1, 0, 4), [4.0])
    assert linspaced(0, 0, 4).size == 0
    with pytest.raises(ValueError):
        linspaced(-1, 0, 1)