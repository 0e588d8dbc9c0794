import math
from itertools import product

import numpy as np
import pytest

from tan import (CapacityExceededError, Dataset, Instance, NotTrainedError, TANClassifier,
                 TANModel, load_dataset_from_csv)


class TestToyScenario:
    """Four instances, two binary attributes, the class follows A."""

    def test_class_priors(self, toy_dataset):
        model = TANClassifier().fit(toy_dataset).model
        assert isinstance(model, TANModel)
        assert model.estimator.count_class(0) == model.estimator.count_class(1) == 2
        assert model.class_ofe(0) == pytest.approx(0.5)
        assert model.class_ofe(1) == pytest.approx(0.5)

    def test_tree_connects_a_and_b(self, toy_dataset):
        clf = TANClassifier().fit(toy_dataset)
        a, b = toy_dataset.attributes
        assert clf.model.tree.edges() == [(a, b)]
        assert clf.describe() == "root: A\n  A → B"
        assert str(clf) == clf.describe()

    def test_classify(self, toy_dataset):
        clf = TANClassifier().train(toy_dataset)
        assert clf.classify(Instance((1, 1))) == 1
        assert clf.classify(Instance((0, 0))) == 0
        assert clf.classify([1, 0]) == 1

    def test_joint_probability(self, toy_dataset):
        model = TANClassifier().fit(toy_dataset).model
        inst = Instance((1, 1))
        assert model.joint_probability(inst, 0) == pytest.approx(1 / 24)
        assert model.joint_probability(inst, 1) == pytest.approx(5 / 24)
        assert model.log_joint_probability(inst, 1) == pytest.approx(math.log(5 / 24))
        assert model.class_probabilities(inst) == pytest.approx([1 / 6, 5 / 6])


def test_ofe_root_uses_class_only(toy_dataset):
    model = TANClassifier().fit(toy_dataset).model
    a, b = toy_dataset.attributes
    # (N_ikc + 0.5) / (N_c + 2 * 0.5)
    assert model.ofe(a, None, None, 1, 1) == pytest.approx(2.5 / 3)
    assert model.ofe(b, a, 1, 1, 0) == pytest.approx(0.5)


def test_estimates_are_strictly_between_zero_and_one(chain_dataset):
    model = TANClassifier().fit(chain_dataset).model
    d = chain_dataset
    s = d.max_class_value() + 1
    for c in range(s):
        assert 0 < model.class_ofe(c) < 1
    for i, parent in product(d.attributes, [None] + d.attributes):
        if parent == i:
            continue
        q = 1 if parent is None else d.max_attribute_value(parent) + 1
        for j, k, c in product(range(q), range(d.max_attribute_value(i) + 1), range(s)):
            assert 0 < model.ofe(i, parent, j, k, c) < 1


def test_missing_class_keeps_positive_probability():
    d = Dataset(["A"], [[0], [1], [0]], [0, 2, 0])
    clf = TANClassifier().fit(d)
    model = clf.model

    assert model.n_classes == 3
    assert model.class_ofe(1) == pytest.approx(0.5 / 4.5)
    assert model.joint_probability(Instance((1,)), 1) > 0
    probs = clf.predict_proba(d)
    assert probs.shape == (3, 3)
    assert np.all(probs > 0)
    assert probs.sum(axis=1) == pytest.approx([1.0, 1.0, 1.0])


def test_ties_go_to_first_class():
    for classes in ([1, 0], [0, 1]):
        d = Dataset(["A"], [[0], [0]], classes)
        assert TANClassifier().fit(d).classify((0,)) == 0


def test_classify_dataset_keeps_order(chain_dataset):
    clf = TANClassifier().fit(chain_dataset)
    labels = clf.classify(chain_dataset)
    assert labels == list(chain_dataset.classes)
    assert clf.evaluate(chain_dataset) == 1.0

    subset = Dataset(chain_dataset.attributes, chain_dataset.values[::-1][:3],
                     chain_dataset.classes[::-1][:3])
    assert clf.classify(subset) == [1, 0, 1]
    assert clf.classify(Dataset(chain_dataset.attributes, [], [])) == []


def test_retraining_is_idempotent(chain_dataset):
    clf = TANClassifier()
    first_tree = clf.fit(chain_dataset).model.tree
    first_labels = clf.classify(chain_dataset)
    first_model = clf.model

    clf.fit(chain_dataset)
    assert clf.model is not first_model
    assert clf.model.tree == first_tree
    assert clf.classify(chain_dataset) == first_labels


def test_retraining_replaces_model(toy_dataset, chain_dataset):
    clf = TANClassifier().fit(toy_dataset)
    clf.fit(chain_dataset)
    assert clf.model.dataset is chain_dataset
    assert set(clf.model.tree.attributes) == set(chain_dataset.attributes)


def test_untrained_classifier():
    clf = TANClassifier()
    assert str(clf) == "TANClassifier (untrained)"
    with pytest.raises(NotTrainedError):
        clf.classify(Instance((0, 0)))
    with pytest.raises(NotTrainedError):
        clf.describe()


def test_invalid_training_and_inputs(toy_dataset, chain_dataset):
    with pytest.raises(ValueError):
        TANClassifier(alpha=0)
    with pytest.raises(ValueError):
        TANClassifier().fit(Dataset(["A", "B"], [], []))
    with pytest.raises(CapacityExceededError):
        TANClassifier(capacity=2).fit(chain_dataset)

    clf = TANClassifier().fit(toy_dataset)
    with pytest.raises(ValueError):
        clf.classify(chain_dataset)
    with pytest.raises(ValueError):
        clf.classify((0, 1, 1))


def test_verbose_training_prints_tree(toy_dataset, capsys):
    TANClassifier(verbose=True).fit(toy_dataset)
    out = capsys.readouterr().out
    assert "log_likelihood_weight" in out
    assert "A → B" in out


def test_network_export(toy_dataset, tmp_path):
    clf = TANClassifier().fit(toy_dataset)
    bn = clf.model.to_network()

    assert set(bn.vars) == {"C", "A", "B"}
    assert bn.edges() == {("C", "A"), ("C", "B"), ("A", "B")}
    for var in bn.vars.values():
        for row in var.cpt.rows.values():
            assert sum(row.values()) == pytest.approx(1.0)

    assignment = {"A": "1", "B": "1", "C": "1"}
    assert bn.log_joint(assignment) == pytest.approx(
        clf.model.log_joint_probability(Instance((1, 1)), 1))

    out = tmp_path / "tan.bif"
    clf.write_bif(out)
    text = out.read_text()
    assert text.startswith("network unknown {}")
    assert "variable A {" in text
    assert "probability ( C ) {" in text
    assert "probability ( B | C, A ) {" in text


def test_duplicate_attribute_names_train_and_classify(write_csv):
    d = load_dataset_from_csv(write_csv("dup.csv", ["A,A,C", "0,0,0", "0,1,0", "1,0,1", "1,1,1"]))
    clf = TANClassifier().fit(d)
    assert clf.classify((1, 1)) == 1
    assert clf.classify((0, 0)) == 0
    with pytest.raises(ValueError):
        clf.model.to_network()


def test_predict_proba_agrees_with_classify(chain_dataset, toy_dataset):
    for d in (chain_dataset, toy_dataset):
        clf = TANClassifier().fit(d)
        probs = clf.predict_proba(d)
        assert list(np.argmax(probs, axis=1)) == clf.classify(d)
