# step3.py
import sys
from pathlib import Path
from tan import DatasetUnavailableError, TANClassifier, load_dataset_from_csv

def main():
    if len(sys.argv) != 3:
        print("usage: step3.py train.csv out_learned.bif")
        sys.exit(1)

    train_csv, out_bif = sys.argv[1:3]
    try:
        train = load_dataset_from_csv(train_csv)
    except DatasetUnavailableError as e:
        print("Dataset unavailable:", e)
        sys.exit(1)

    clf = TANClassifier().fit(train)
    bn = clf.model.to_network()
    bn.write_bif(Path(out_bif))
    print(f"Structure + parameters learned → {out_bif} ({len(bn.edges())} edges)")

if __name__ == "__main__":
    main()

# python3 step3.py datasets/sprinkler/train.csv datasets/sprinkler/out.bif
