#!/usr/bin/env python3
"""
TAN classification experiments with streamlined result tracking.

Features:
- Several weight functions and smoothing strengths evaluated on a test set
- Best network exported as BIF
- Per-run results appended to a single CSV file
"""

from __future__ import annotations
import os, sys, time
from pathlib import Path

import pandas as pd

from tan import (CapacityExceededError, DatasetUnavailableError, TANClassifier,
                 load_dataset_from_csv)


# TEST DIFFERENT HYPERPARAMETER COMBINATIONS FOR THE REPORT
HYPERPARAMS = [
    {"weight": "ll", "alpha": 0.5},
    {"weight": "mi", "alpha": 0.5},
    {"weight": "ll", "alpha": 0.1},
    {"weight": "ll", "alpha": 1.0},
]


# ─────────────────────────── Experiment Tracking ────────────────────────────
def save_experiment_results(results, results_dir: str = "results"):
    """Save experiment results to a single CSV file with only essential information"""
    os.makedirs(results_dir, exist_ok=True)
    csv_path = os.path.join(results_dir, "experiment_results.csv")

    if os.path.exists(csv_path):
        df_existing = pd.read_csv(csv_path)
        df = pd.concat([df_existing, pd.DataFrame(results)], ignore_index=True)
    else:
        df = pd.DataFrame(results)

    df.to_csv(csv_path, index=False)
    print(f"Experiment results saved to {csv_path}")


def main():
    """Evaluate every hyperparameter set, keep the most accurate classifier"""
    if len(sys.argv) != 4:
        print("usage: main.py train.csv test.csv out.bif")
        sys.exit(1)

    train_csv, test_csv, out_bif = sys.argv[1:4]

    print("=" * 80)
    print("TREE-AUGMENTED NAIVE BAYES CLASSIFICATION")
    print("=" * 80)

    dataset_name = Path(train_csv).parent.name
    print(f"Processing dataset: {dataset_name}")

    try:
        train = load_dataset_from_csv(train_csv)
        test = load_dataset_from_csv(test_csv)
    except DatasetUnavailableError as e:
        print("Dataset unavailable:", e)
        sys.exit(1)

    result = {
        "dataset": dataset_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "n_attributes": len(train.attributes),
        "n_train": len(train),
        "n_test": len(test),
    }

    start_time_total = time.time()
    best_acc = -1
    best_clf = None

    for config_idx, config in enumerate(HYPERPARAMS):
        start_time = time.time()
        print(f"\nTrying hyperparameter set {config_idx+1}/{len(HYPERPARAMS)}: {config}")

        try:
            clf = TANClassifier(**config).fit(train)
            acc = clf.evaluate(test)
        except (ValueError, CapacityExceededError) as e:
            print(f"Error with config {config_idx+1}: {e}")
            continue

        elapsed_time = time.time() - start_time
        print(f"[config {config_idx+1}] accuracy = {acc:.3f} (time: {elapsed_time:.2f}s)")
        result[f"config_{config_idx+1}_accuracy"] = acc
        result[f"config_{config_idx+1}_depth"] = clf.model.tree.get_stats()["depth"]

        if acc > best_acc:
            best_acc = acc
            best_clf = clf
            print(f"New best accuracy: {acc:.3f}")

    if best_clf is not None:
        best_clf.write_bif(Path(out_bif))
        print(f"\nBest network saved to {out_bif} (accuracy: {best_acc:.3f})")

        print("\nBest tree structure:")
        print(best_clf.describe())

        best_stats = best_clf.model.tree.get_stats()
        result["best_accuracy"] = best_acc
        result["best_weight"] = getattr(best_clf.weight, "__name__", str(best_clf.weight))
        result["best_alpha"] = best_clf.alpha
        result["best_depth"] = best_stats["depth"]
        result["best_max_out_degree"] = best_stats["max_out_degree"]

    result["execution_time"] = time.time() - start_time_total
    save_experiment_results([result])

    print(f"\nTotal execution time: {time.time() - start_time_total:.2f} seconds")

    return best_clf


if __name__ == "__main__":
    main()
