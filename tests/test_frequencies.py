from itertools import product

from tan import Dataset, FrequencyEstimator


def test_counts(toy_dataset):
    est = FrequencyEstimator(toy_dataset)
    a, b = toy_dataset.attributes

    assert est.count_total() == 4
    assert est.count_class(0) == 2
    assert est.count_class(5) == 0
    assert est.count_attribute_class(a, 1, 1) == 2
    assert est.count_attribute_class(a, 1, 0) == 0
    assert est.count_pair_class(b, a, 1, 1, 1) == 1
    assert est.count_pair_class(b, a, 0, 1, 1) == 0


def test_ignored_attributes_degrade_to_smaller_counts(toy_dataset):
    est = FrequencyEstimator(toy_dataset)
    a, b = toy_dataset.attributes

    assert est.count_attribute_class(None, 0, 1) == est.count_class(1)
    # no i: i_prime = j given c
    assert est.count_pair_class(None, a, 1, 0, 1) == est.count_attribute_class(a, 1, 1)
    # no i_prime: i = k given c
    assert est.count_pair_class(b, None, None, 0, 0) == est.count_attribute_class(b, 0, 0)
    assert est.count_pair_class(None, None, None, None, 0) == 2


def test_contingency_agrees_with_pair_counts(chain_dataset):
    est = FrequencyEstimator(chain_dataset)
    x0, x1, x2 = chain_dataset.attributes
    table = est.contingency(x2, x0)

    assert table.shape == (2, 2, 2)
    assert table.sum() == len(chain_dataset)
    for c, j, k in product(range(2), range(2), range(2)):
        assert table[c, j, k] == est.count_pair_class(x2, x0, j, k, c)


def test_empty_dataset_counts_are_zero():
    est = FrequencyEstimator(Dataset(["A", "B"], [], []))
    a, b = est.dataset.attributes
    assert est.count_total() == 0
    assert est.count_class(0) == 0
    assert est.count_pair_class(a, b, 0, 0, 0) == 0
    assert est.contingency(a, b).sum() == 0
