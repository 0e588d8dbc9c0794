# step1.py
import sys
from tan import DatasetUnavailableError, TANClassifier, load_dataset_from_csv

def main():
    if len(sys.argv) not in (2, 3):
        print("usage: step1.py train.csv [ll|mi]")
        sys.exit(1)

    weight = sys.argv[2] if len(sys.argv) == 3 else "ll"
    try:
        train = load_dataset_from_csv(sys.argv[1])
    except DatasetUnavailableError as e:
        print("Dataset unavailable:", e)
        sys.exit(1)

    clf = TANClassifier(weight=weight).fit(train)
    print("Learned tree:")
    print(clf.describe())

    # statistics of the learned tree
    for key, value in clf.model.tree.get_stats().items():
        print(f"  {key}: {value}")

if __name__ == "__main__":
    main()


# python3 step1.py datasets/sprinkler/train.csv
# python3 step1.py datasets/sprinkler/train.csv mi
