# step2.py
import sys
from pathlib import Path

import pandas as pd

from tan import DatasetUnavailableError, TANClassifier, load_dataset_from_csv

def main():
    if len(sys.argv) != 4:
        print("usage: step2.py train.csv test.csv out_predictions.csv")
        sys.exit(1)

    train_csv, test_csv, out_csv = sys.argv[1:4]
    try:
        train = load_dataset_from_csv(train_csv)
        test = load_dataset_from_csv(test_csv)
    except DatasetUnavailableError as e:
        print("Dataset unavailable:", e)
        sys.exit(1)

    clf = TANClassifier().fit(train)
    predictions = clf.classify(test)
    pd.DataFrame({test.class_name: predictions}).to_csv(Path(out_csv), index=False)
    print(f"accuracy = {clf.evaluate(test):.3f}")
    print("Predictions written →", out_csv)

if __name__ == "__main__":
    main()

# python3 step2.py datasets/sprinkler/train.csv datasets/sprinkler/test.csv datasets/sprinkler/predictions.csv
