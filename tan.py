#!/usr/bin/env python3
"""
Tree-Augmented Naive Bayes (TAN) classification over discrete data.

Features:
- Integer-coded datasets read from CSV
- Pluggable pairwise weight functions (log-likelihood, mutual information)
- Maximum spanning tree over the attributes, rooted into a directed tree
- Lidstone-smoothed frequency estimates, maximum joint likelihood classification
- BIF export of the learned network
"""

from __future__ import annotations
import math, re
from collections import defaultdict
from itertools import product
from pathlib import Path
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np
import pandas as pd


N_PRIME = 0.5  # default pseudo-count added to every frequency


# ─────────────────────────── Errors ───────────────────────────────
class DatasetUnavailableError(Exception):
    """The dataset file could not be read or contains malformed fields."""


class CapacityExceededError(Exception):
    """More attributes were added than the dependency graph can hold."""


class NotTrainedError(Exception):
    """The classifier was used before being trained."""


# ─────────────────────────── Utilities ────────────────────────────
def _logsumexp(values):
    """Stable log ∑ exp(values)."""
    m = max(values)
    return m + math.log(sum(math.exp(v - m) for v in values))


def _parse_code(val) -> int:
    """Parse a zero-based category code, rejecting anything but a plain non-negative integer."""
    s = str(val).strip()
    if not re.fullmatch(r"\d+", s):
        raise ValueError(f"not a non-negative integer code: {val!r}")
    return int(s)


# ─────────────────────────── Dataset ──────────────────────────────
class Attribute(NamedTuple):
    """A discrete feature, identified by its name and its column position."""

    name: str
    position: int

    def __str__(self):
        return self.name


class Instance(NamedTuple):
    """One row: a code for every attribute plus the class label (None when unlabeled)."""

    values: Tuple[int, ...]
    class_value: Optional[int] = None

    def value(self, attribute: Optional[Attribute]) -> Optional[int]:
        # the ignored (None) attribute has no value
        if attribute is None:
            return None
        return self.values[attribute.position]


class Dataset:
    """
    Ordered instances over a shared list of attributes.

    Values are kept as an ``(n, len(attributes))`` integer matrix and the
    labels as a length-``n`` vector. The cardinality of an attribute is
    implicit: its maximum observed code plus one.
    """

    def __init__(self,
                 attributes: Sequence[Union[Attribute, str]],
                 values,
                 classes,
                 class_name: str = "class"):
        self.attributes: List[Attribute] = [
            a if isinstance(a, Attribute) else Attribute(str(a), i)
            for i, a in enumerate(attributes)
        ]
        if any(a.position != i for i, a in enumerate(self.attributes)):
            raise ValueError("attribute positions must match their order")
        self.class_name = class_name

        classes = np.asarray(classes, dtype=np.int64).reshape(-1)
        values = np.asarray(values, dtype=np.int64)
        if values.size == 0:
            values = values.reshape(len(classes), len(self.attributes))
        if values.ndim != 2 or values.shape != (len(classes), len(self.attributes)):
            raise ValueError(
                f"expected a value for each of the {len(self.attributes)} attributes "
                f"in each of the {len(classes)} instances, got shape {values.shape}")
        if (values < 0).any() or (classes < 0).any():
            raise ValueError("attribute and class codes must be non-negative")

        self.values = values
        self.classes = classes

    @classmethod
    def from_frame(cls, df: pd.DataFrame, class_column: Optional[str] = None) -> "Dataset":
        """Build a dataset from an integer-coded frame; the last column is the class unless named."""
        names = [str(c) for c in df.columns]
        if class_column is None:
            class_pos = len(names) - 1
        else:
            matches = [p for p, c in enumerate(df.columns) if c == class_column]
            if len(matches) != 1:
                raise ValueError(f"class column {class_column!r} must appear exactly once")
            class_pos = matches[0]
        att_pos = [p for p in range(len(names)) if p != class_pos]
        return cls([names[p] for p in att_pos],
                   df.iloc[:, att_pos].to_numpy(dtype=np.int64),
                   df.iloc[:, class_pos].to_numpy(dtype=np.int64),
                   class_name=names[class_pos])

    def __len__(self):
        return len(self.classes)

    @property
    def number_of_instances(self) -> int:
        return len(self)

    def __iter__(self) -> Iterator[Instance]:
        for row, c in zip(self.values, self.classes):
            yield Instance(tuple(int(v) for v in row), int(c))

    def __getitem__(self, idx: int) -> Instance:
        return Instance(tuple(int(v) for v in self.values[idx]), int(self.classes[idx]))

    def __repr__(self):
        return f"Dataset({len(self.attributes)} attributes, {len(self)} instances)"

    def attribute_names(self) -> List[str]:
        return [a.name for a in self.attributes]

    def attribute(self, name: str) -> Attribute:
        for a in self.attributes:
            if a.name == name:
                return a
        raise ValueError(f"unknown attribute {name!r}")

    def column(self, attribute: Attribute) -> np.ndarray:
        return self.values[:, attribute.position]

    def max_attribute_value(self, attribute: Attribute) -> int:
        """Largest code observed for *attribute*, -1 on an empty dataset."""
        if len(self) == 0:
            return -1
        return int(self.column(attribute).max())

    def max_class_value(self) -> int:
        """Largest class label observed, -1 on an empty dataset."""
        if len(self) == 0:
            return -1
        return int(self.classes.max())


def load_dataset_from_csv(csv_path: Union[str, Path]) -> Dataset:
    """
    Read a comma separated file whose header names the attributes followed
    by the class column, and whose rows hold non-negative integer codes.

    Any I/O failure or malformed field raises DatasetUnavailableError;
    nothing is returned for a partially readable file.
    """
    # the header is read as a plain row so that the parser holds every row to its field count
    try:
        raw = pd.read_csv(csv_path, header=None, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as exc:  # EmptyDataError and ParserError are ValueErrors
        raise DatasetUnavailableError(f"cannot read {csv_path}: {exc}") from exc

    # names need not be unique, columns are told apart by position
    header = [str(h).strip() for h in raw.iloc[0]]
    df = raw.iloc[1:].reset_index(drop=True)

    try:
        df = df.map(_parse_code)
        return Dataset(header[:-1],
                       df.iloc[:, :-1].to_numpy(dtype=np.int64),
                       df.iloc[:, -1].to_numpy(dtype=np.int64),
                       class_name=header[-1])
    except ValueError as exc:
        raise DatasetUnavailableError(f"malformed field in {csv_path}: {exc}") from exc


# ─────────────────────── Frequency estimation ─────────────────────
class FrequencyEstimator:
    """
    Counting queries over a training set.

    Every query scans the whole dataset. A ``None`` attribute is ignored,
    which lets one counting routine serve the root of the tree (no parent)
    and every other attribute alike.
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self._values = dataset.values
        self._classes = dataset.classes

    def count_total(self) -> int:
        return len(self.dataset)

    def count_class(self, c: int) -> int:
        """N_c: instances whose class is c."""
        return int(np.count_nonzero(self._classes == c))

    def count_attribute_class(self, i: Optional[Attribute], k, c: int) -> int:
        """N_ikc: instances where i = k and the class is c."""
        if i is None:
            return self.count_class(c)
        mask = (self._values[:, i.position] == k) & (self._classes == c)
        return int(np.count_nonzero(mask))

    def count_pair_class(self,
                         i: Optional[Attribute],
                         i_prime: Optional[Attribute],
                         j, k, c: int) -> int:
        """N_ijkc: instances where i = k, i_prime = j and the class is c."""
        if i is None and i_prime is None:
            return self.count_class(c)
        if i is None:
            return self.count_attribute_class(i_prime, j, c)
        if i_prime is None:
            return self.count_attribute_class(i, k, c)
        mask = ((self._values[:, i.position] == k)
                & (self._values[:, i_prime.position] == j)
                & (self._classes == c))
        return int(np.count_nonzero(mask))

    def contingency(self, i: Attribute, i_prime: Attribute) -> np.ndarray:
        """
        All N_ijkc of a pair in one pass, as an array indexed ``[c, j, k]``
        where j ranges over the codes of *i_prime* and k over those of *i*.
        """
        s = self.dataset.max_class_value() + 1
        q = self.dataset.max_attribute_value(i_prime) + 1
        r = self.dataset.max_attribute_value(i) + 1
        table = np.zeros((s, q, r), dtype=np.int64)
        np.add.at(table, (self._classes,
                          self._values[:, i_prime.position],
                          self._values[:, i.position]), 1)
        return table


# ─────────────────────────── Weight functions ─────────────────────
WeightFunction = Callable[[FrequencyEstimator, Attribute, Attribute], float]


def _ordered(i: Attribute, i_prime: Attribute) -> Tuple[Attribute, Attribute]:
    # pairs are always scored in declaration order so that w(i, j) == w(j, i) exactly
    return (i, i_prime) if i.position <= i_prime.position else (i_prime, i)


def log_likelihood_weight(estimator: FrequencyEstimator, i: Attribute, i_prime: Attribute) -> float:
    """
    Log-likelihood score, the conditional mutual information of i and
    i_prime given the class::

        Σ_c Σ_j Σ_k  Nijkc/N · log2(Nijkc·Nc / (Nikc·Nijc))

    Terms with a zero joint count are skipped.
    """
    i, i_prime = _ordered(i, i_prime)
    n = estimator.count_total()
    if n == 0:
        return 0.0

    table = estimator.contingency(i, i_prime).astype(float)
    n_c = np.broadcast_to(table.sum(axis=(1, 2))[:, None, None], table.shape)
    n_ijc = np.broadcast_to(table.sum(axis=2)[:, :, None], table.shape)
    n_ikc = np.broadcast_to(table.sum(axis=1)[:, None, :], table.shape)

    seen = table > 0
    n_ijkc = table[seen]
    ratio = n_ijkc * n_c[seen] / (n_ikc[seen] * n_ijc[seen])
    return float(np.sum(n_ijkc / n * np.log2(ratio)))


def mutual_information_weight(estimator: FrequencyEstimator, i: Attribute, i_prime: Attribute) -> float:
    """Class-agnostic mutual information of i and i_prime (Chow-Liu score), in bits."""
    i, i_prime = _ordered(i, i_prime)
    n = estimator.count_total()
    if n == 0:
        return 0.0

    joint = estimator.contingency(i, i_prime).sum(axis=0).astype(float)  # [j, k]
    n_j = np.broadcast_to(joint.sum(axis=1)[:, None], joint.shape)
    n_k = np.broadcast_to(joint.sum(axis=0)[None, :], joint.shape)

    seen = joint > 0
    n_jk = joint[seen]
    return float(np.sum(n_jk / n * np.log2(n_jk * n / (n_j[seen] * n_k[seen]))))


WEIGHT_FUNCTIONS: Dict[str, WeightFunction] = {
    "ll": log_likelihood_weight,
    "mi": mutual_information_weight,
}


def _resolve_weight(weight: Union[str, WeightFunction]) -> WeightFunction:
    if callable(weight):
        return weight
    try:
        return WEIGHT_FUNCTIONS[weight]
    except KeyError:
        raise ValueError(f"unknown weight function {weight!r}, "
                         f"expected one of {sorted(WEIGHT_FUNCTIONS)} or a callable") from None


# ─────────────────────────── Tree structure ───────────────────────
class DirectedTree:
    """A spanning tree over attributes, oriented away from its root."""

    def __init__(self, root: Attribute, parents: Dict[Attribute, Optional[Attribute]]):
        if parents.get(root, "missing") is not None:
            raise ValueError(f"root {root.name} must be present without a parent")
        self.root = root
        self._parents = dict(parents)

    @classmethod
    def from_spanning_tree(cls, tree: nx.Graph, root: Attribute) -> "DirectedTree":
        """Orient every edge of an undirected tree away from *root*."""
        parents: Dict[Attribute, Optional[Attribute]] = {root: None}
        for parent, child in nx.bfs_edges(tree, root):
            parents[child] = parent
        if len(parents) != tree.number_of_nodes():
            raise ValueError("spanning tree is not connected")
        return cls(root, parents)

    @property
    def attributes(self) -> List[Attribute]:
        """Attributes in breadth-first order from the root."""
        return list(self._parents)

    def parent(self, attribute: Attribute) -> Optional[Attribute]:
        return self._parents[attribute]

    def children(self, attribute: Attribute) -> List[Attribute]:
        return [c for c, p in self._parents.items() if p == attribute]

    def edges(self) -> List[Tuple[Attribute, Attribute]]:
        """(parent, child) pairs in breadth-first order."""
        return [(p, c) for c, p in self._parents.items() if p is not None]

    def depth(self, attribute: Attribute) -> int:
        d = 0
        while self._parents[attribute] is not None:
            attribute = self._parents[attribute]
            d += 1
        return d

    def __contains__(self, attribute):
        return attribute in self._parents

    def __len__(self):
        return len(self._parents)

    def __eq__(self, other):
        if not isinstance(other, DirectedTree):
            return NotImplemented
        return self.root == other.root and self._parents == other._parents

    def __str__(self):
        lines = [f"root: {self.root.name}"]
        lines += [f"  {p.name} → {c.name}" for p, c in self.edges()]
        return "\n".join(lines)

    def get_stats(self):
        """Get statistics about the tree structure"""
        out_degree = defaultdict(int)
        for parent, _ in self.edges():
            out_degree[parent] += 1
        n_nodes = len(self)

        return {
            "n_nodes": n_nodes,
            "n_edges": n_nodes - 1,
            "depth": max(self.depth(a) for a in self._parents),
            "max_out_degree": max(out_degree.values()) if out_degree else 0,
            "avg_out_degree": (n_nodes - 1) / n_nodes if n_nodes > 0 else 0,
            "leaves": sum(1 for a in self._parents if out_degree[a] == 0),
        }


def build_dependency_graph(attributes: Sequence[Attribute],
                           weight: WeightFunction,
                           estimator: FrequencyEstimator,
                           capacity: Optional[int] = None) -> nx.Graph:
    """
    Complete undirected graph over *attributes* weighted by *weight*.

    The graph holds at most *capacity* vertices (default: one per attribute).
    Each unordered pair is scored once; the undirected edge carries the
    weight for both directions.
    """
    capacity = len(attributes) if capacity is None else capacity
    g = nx.Graph()
    for a in attributes:
        if a in g:
            continue
        if g.number_of_nodes() >= capacity:
            raise CapacityExceededError(
                f"cannot add attribute {a.name}: graph capacity of {capacity} vertices reached")
        g.add_node(a)

    for x in range(len(attributes)):
        for y in range(x + 1, len(attributes)):
            a, b = attributes[x], attributes[y]
            if a == b:
                continue
            g.add_edge(a, b, weight=weight(estimator, a, b))
    return g


def learn_structure(dataset: Dataset,
                    estimator: FrequencyEstimator,
                    weight: WeightFunction,
                    root: Union[Attribute, str, None] = None,
                    algorithm: str = "prim",
                    capacity: Optional[int] = None) -> DirectedTree:
    """
    Maximum-weight spanning tree over the attributes of *dataset*, rooted
    at *root* (the first declared attribute by default).
    """
    atts = dataset.attributes
    if not atts:
        raise ValueError("dataset declares no attributes")

    g = build_dependency_graph(atts, weight, estimator, capacity)
    spanning = nx.maximum_spanning_tree(g, weight="weight", algorithm=algorithm)

    if root is None:
        root = atts[0]
    elif isinstance(root, str):
        root = dataset.attribute(root)
    if root not in spanning:
        raise ValueError(f"root {root} is not an attribute of the dataset")
    return DirectedTree.from_spanning_tree(spanning, root)


# ─────────────────────────── BIF export ───────────────────────────
# A class for representing the CPT of a variable
class CPT:
    """Conditional‑probability table P(head | parents)."""

    def __init__(self, head: "Variable", parents: List["Variable"]):
        self.head = head
        self.parents = parents
        # Dict[Tuple[parent values], Dict[value, prob]]
        self.rows: Dict[Tuple[str, ...], Dict[str, float]] = {}

    # String representation of the CPT according to the BIF format
    def __str__(self):
        head, parents = self.head.name, self.parents
        if not parents:
            probs = ", ".join(map(str, self.rows[()].values()))
            return f"probability ( {head} ) {{\n  table {probs};\n}}\n"

        def _row_str(key, row):
            par_vals = ", ".join(key)
            probs = ", ".join(map(str, row.values()))
            return f"  ( {par_vals} ) {probs};"

        body = "\n".join(_row_str(k, r) for k, r in self.rows.items())
        par_names = ", ".join(p.name for p in parents)
        return f"probability ( {head} | {par_names} ) {{\n{body}\n}}\n"


class Variable:
    """A node of the exported network."""

    def __init__(self, name: str, values: List[str]):
        self.name = name
        self.values = values
        self.cpt: CPT | None = None

    def __str__(self):
        dom = ", ".join(self.values)
        k = len(self.values)
        return f"variable {self.name} {{\n  type discrete [ {k} ] {{ {dom} }};\n}}\n"


class BayesianNetwork:
    """Variables with their CPTs, as produced by TANModel.to_network()."""

    def __init__(self):
        self.vars: Dict[str, Variable] = {}

    def write_bif(self, path: Path):
        with open(path, "w") as f:
            f.write("network unknown {}\n\n")
            for v in self.vars.values():
                f.write(str(v))
            for v in self.vars.values():
                f.write(str(v.cpt))

    def log_joint(self, assignment: Dict[str, str]) -> float:
        """log P(assignment) or −inf if a CPT entry is missing/0."""
        ll = 0.0
        for v in self.vars.values():
            key = tuple(str(assignment[p.name]) for p in v.cpt.parents)
            try:
                p = v.cpt.rows[key][str(assignment[v.name])]
            except KeyError:
                return float("-inf")
            if p == 0:
                return float("-inf")
            ll += math.log(p)
        return ll

    def edges(self):
        return {(p.name, v.name)
                for v in self.vars.values()
                for p in v.cpt.parents}


# ─────────────────────────── The TAN model ────────────────────────
class TANModel(NamedTuple):
    """
    A trained classifier: the training set, its counts and the learned
    tree. Built once by TANClassifier.fit() and never modified.
    """

    dataset: Dataset
    estimator: FrequencyEstimator
    tree: DirectedTree
    alpha: float = N_PRIME

    @property
    def n_classes(self) -> int:
        return self.dataset.max_class_value() + 1

    def ofe(self, i: Attribute, i_parent: Optional[Attribute], j, k, c: int) -> float:
        """
        Observed frequency estimate theta_ijkc of i = k given i_parent = j and
        class c. With no parent this is the estimate of i = k given c alone.
        """
        r_i = self.dataset.max_attribute_value(i) + 1
        return ((self.estimator.count_pair_class(i, i_parent, j, k, c) + self.alpha)
                / (self.estimator.count_attribute_class(i_parent, j, c) + r_i * self.alpha))

    def class_ofe(self, c: int) -> float:
        """Smoothed class prior theta_c."""
        s = self.n_classes
        return ((self.estimator.count_class(c) + self.alpha)
                / (self.estimator.count_total() + s * self.alpha))

    def joint_probability(self, instance: Instance, c: int) -> float:
        """Unnormalised P(instance, c), factorised along the tree."""
        joint_prob = self.class_ofe(c)
        for a in self.dataset.attributes:
            a_parent = self.tree.parent(a)
            joint_prob *= self.ofe(a, a_parent, instance.value(a_parent), instance.value(a), c)
        return joint_prob

    def log_joint_probability(self, instance: Instance, c: int) -> float:
        ll = math.log(self.class_ofe(c))
        for a in self.dataset.attributes:
            a_parent = self.tree.parent(a)
            ll += math.log(self.ofe(a, a_parent, instance.value(a_parent), instance.value(a), c))
        return ll

    def class_probabilities(self, instance: Instance) -> np.ndarray:
        """Posterior P(c | instance) for every class, normalised with log-sum-exp."""
        logs = [self.log_joint_probability(instance, c) for c in range(self.n_classes)]
        norm = _logsumexp(logs)
        return np.array([math.exp(v - norm) for v in logs])

    def to_network(self) -> BayesianNetwork:
        """
        The TAN as a Bayesian network: the class is a parent of every
        attribute and each non-root attribute also depends on its tree parent.
        """
        names = self.dataset.attribute_names() + [self.dataset.class_name]
        if len(set(names)) != len(names):
            raise ValueError(f"BIF variables need unique names, got {names}")
        bn = BayesianNetwork()
        class_var = Variable(self.dataset.class_name,
                             [str(c) for c in range(self.n_classes)])
        class_var.cpt = CPT(class_var, [])
        class_var.cpt.rows[()] = {str(c): self.class_ofe(c) for c in range(self.n_classes)}
        bn.vars[class_var.name] = class_var

        for a in self.dataset.attributes:
            bn.vars[a.name] = Variable(
                a.name, [str(k) for k in range(self.dataset.max_attribute_value(a) + 1)])

        for a in self.dataset.attributes:
            var = bn.vars[a.name]
            a_parent = self.tree.parent(a)
            if a_parent is None:
                cpt = CPT(var, [class_var])
                for c in range(self.n_classes):
                    cpt.rows[(str(c),)] = {
                        v: self.ofe(a, None, None, int(v), c) for v in var.values
                    }
            else:
                par_var = bn.vars[a_parent.name]
                cpt = CPT(var, [class_var, par_var])
                for c, j in product(range(self.n_classes), par_var.values):
                    cpt.rows[(str(c), j)] = {
                        v: self.ofe(a, a_parent, int(j), int(v), c) for v in var.values
                    }
            var.cpt = cpt
        return bn


# ─────────────────────────── The classifier ───────────────────────
class TANClassifier:
    """
    Tree-Augmented Naive Bayes classifier.

    weight     -- name in WEIGHT_FUNCTIONS or a callable (estimator, i, i_prime) -> float
    alpha      -- pseudo-count of the Lidstone smoothing
    root       -- attribute (or its name) rooting the tree; first attribute by default
    algorithm  -- networkx spanning tree algorithm ("prim", "kruskal" or "boruvka")
    capacity   -- maximum number of attributes the dependency graph accepts
    """

    def __init__(self,
                 weight: Union[str, WeightFunction] = "ll",
                 alpha: float = N_PRIME,
                 root: Union[Attribute, str, None] = None,
                 algorithm: str = "prim",
                 capacity: Optional[int] = None,
                 verbose: bool = False):
        if alpha <= 0:
            raise ValueError(f"alpha must be positive, got {alpha}")
        self.weight = _resolve_weight(weight)
        self.alpha = alpha
        self.root = root
        self.algorithm = algorithm
        self.capacity = capacity
        self.verbose = verbose
        self.model: Optional[TANModel] = None

    # --------------- Training ---------------
    def fit(self, dataset: Dataset) -> "TANClassifier":
        """Learn the tree and counts from *dataset*, replacing any previous model."""
        if not dataset.attributes:
            raise ValueError("dataset declares no attributes")
        if len(dataset) == 0:
            raise ValueError("cannot train on an empty dataset: attributes have no observed values")

        if self.verbose:
            weight_name = getattr(self.weight, "__name__", self.weight)
            print(f"Learning TAN over {len(dataset.attributes)} attributes "
                  f"from {len(dataset)} instances (weight={weight_name}, alpha={self.alpha})")

        estimator = FrequencyEstimator(dataset)
        tree = learn_structure(dataset, estimator, self.weight,
                               root=self.root, algorithm=self.algorithm, capacity=self.capacity)
        self.model = TANModel(dataset, estimator, tree, self.alpha)

        if self.verbose:
            print(tree)
        return self

    train = fit

    def _trained(self) -> TANModel:
        if self.model is None:
            raise NotTrainedError("classifier has not been trained, call fit() first")
        return self.model

    def _check_compatible(self, dataset: Dataset):
        expected = self._trained().dataset.attribute_names()
        if dataset.attribute_names() != expected:
            raise ValueError(f"dataset attributes {dataset.attribute_names()} "
                             f"do not match the training attributes {expected}")

    def _as_instance(self, instance) -> Instance:
        if not isinstance(instance, Instance):
            instance = Instance(tuple(int(v) for v in instance))
        n_atts = len(self._trained().dataset.attributes)
        if len(instance.values) != n_atts:
            raise ValueError(f"instance has {len(instance.values)} values, expected {n_atts}")
        return instance

    # --------------- Inference ---------------
    def classify(self, data):
        """
        Most likely class of an instance (or of a plain sequence of codes);
        given a Dataset, the list of labels of its instances in order.

        Classes are ranked by the plain product of estimates. With a few
        hundred attributes every product underflows to 0.0 and class 0 is
        returned; predict_proba() works in log space and stays usable there.
        """
        model = self._trained()
        if isinstance(data, Dataset):
            self._check_compatible(data)
            return [self._classify_instance(model, inst) for inst in data]
        return self._classify_instance(model, self._as_instance(data))

    @staticmethod
    def _classify_instance(model: TANModel, instance: Instance) -> int:
        # strict comparison keeps the lowest class index on ties
        class_max = 0
        maximum_prob = float("-inf")
        for c in range(model.n_classes):
            prob = model.joint_probability(instance, c)
            if prob > maximum_prob:
                maximum_prob = prob
                class_max = c
        return class_max

    def predict_proba(self, data) -> np.ndarray:
        """Class posteriors, one row per instance."""
        model = self._trained()
        if isinstance(data, Dataset):
            self._check_compatible(data)
            if len(data) == 0:
                return np.empty((0, model.n_classes))
            return np.vstack([model.class_probabilities(inst) for inst in data])
        return model.class_probabilities(self._as_instance(data))

    def evaluate(self, dataset: Dataset) -> float:
        """Accuracy of the classifier on a labeled dataset."""
        predictions = np.asarray(self.classify(dataset), dtype=np.int64)
        total = len(dataset)
        correct = int(np.count_nonzero(predictions == dataset.classes))
        return correct / total if total else 1.0

    # --------------- Output ---------------
    def describe(self) -> str:
        return str(self._trained().tree)

    def write_bif(self, path: Union[str, Path]):
        self._trained().to_network().write_bif(Path(path))

    def __str__(self):
        if self.model is None:
            return "TANClassifier (untrained)"
        return self.describe()
