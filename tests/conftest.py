"""Shared datasets for the TAN tests."""
import pytest

from tan import Dataset


@pytest.fixture
def toy_dataset():
    """Two binary attributes, the class copies A."""
    return Dataset(["A", "B"],
                   [[0, 0], [0, 1], [1, 0], [1, 1]],
                   [0, 0, 1, 1],
                   class_name="C")


@pytest.fixture
def chain_dataset():
    """X1 copies X0 and X2 copies the class."""
    x0 = [0, 0, 0, 0, 1, 1, 1, 1]
    x2 = [0, 1, 0, 1, 0, 1, 0, 1]
    rows = [[a, a, b] for a, b in zip(x0, x2)]
    return Dataset(["X0", "X1", "X2"], rows, x2)


@pytest.fixture
def write_csv(tmp_path):
    """Write lines to a CSV file under tmp_path and return its path."""
    def _write(name, lines):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def dataset_lines():
    """Render a dataset as CSV lines, header first."""
    def _lines(dataset):
        lines = [",".join(dataset.attribute_names() + [dataset.class_name])]
        for inst in dataset:
            lines.append(",".join(str(v) for v in inst.values + (inst.class_value,)))
        return lines
    return _lines
