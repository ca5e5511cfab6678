import argparse
import logging
import os

import numpy as np

from tinymlp.datasets import (
    ADDER_SHAPE,
    XOR_SHAPE,
    binary_adder_dataset,
    load_csv,
    split_dataset,
    xor_dataset,
)
from tinymlp.experiment import (
    ADDER_CONFIGS,
    SPLIT_RATIOS,
    XOR_CONFIGS,
    architecture_label,
    best_configurations,
    format_results,
    run_experiment,
)

logger = logging.getLogger("train_model")

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

DATASETS = {
    "xor": ("XOR", xor_dataset, XOR_SHAPE, XOR_CONFIGS, "xor_dataset.csv"),
    "adder": ("Binary Adder", binary_adder_dataset, ADDER_SHAPE, ADDER_CONFIGS,
              "binary_adder_dataset.csv"),
}


def pick(options, choice, what):
    """1-based menu pick; out-of-range choices fall back to the first entry."""
    if choice is None or not 1 <= choice <= len(options):
        if choice is not None:
            logger.warning("Invalid %s choice %s, using the first one", what, choice)
        return options[0]
    return options[choice - 1]


def list_presets():
    for key, (name, _, _, configs, _) in DATASETS.items():
        print(f"\nAvailable {name} configurations (--dataset {key}):")
        for i, c in enumerate(configs, start=1):
            print(f"{i}. {c.description} ({architecture_label(c.architecture)}, "
                  f"LR={c.learning_rate}, Epochs={c.epochs})")
    print("\nAvailable split ratios:")
    for i, ratio in enumerate(SPLIT_RATIOS, start=1):
        print(f"{i}. {ratio} (Train: {ratio * 100:.0f}%, Test: {(1 - ratio) * 100:.0f}%)")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Train a sigmoid MLP on a truth-table dataset")
    parser.add_argument("--dataset", choices=sorted(DATASETS), default="xor")
    parser.add_argument("--config", type=int, default=1, help="1-based preset index")
    parser.add_argument("--split", type=int, default=1, help="1-based split ratio index")
    parser.add_argument("--csv", nargs="?", const="", default=None,
                        help="load the dataset from CSV (bundled copy if no path is given)")
    parser.add_argument("--seed", type=int, default=None, help="seed for weight initialisation")
    parser.add_argument("--split-seed", type=int, default=42)
    parser.add_argument("--verbose", action="store_true", help="log losses every 100 epochs")
    parser.add_argument("--list", action="store_true", help="show the presets and exit")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.list:
        list_presets()
        return []

    name, builder, (input_dim, output_dim), configs, csv_name = DATASETS[args.dataset]
    if args.csv is not None:
        path = args.csv or os.path.join(DATA_DIR, csv_name)
        dataset = load_csv(path, input_dim, output_dim, name=name)
    else:
        dataset = builder()
    logger.info("%s dataset: %d samples, %d inputs, %d outputs",
                dataset.name, len(dataset.samples), dataset.input_dim, dataset.output_dim)

    config = pick(configs, args.config, "configuration")
    split_ratio = pick(SPLIT_RATIOS, args.split, "split ratio")
    logger.info("Running %s with config '%s' (%s), split %.2f", name, config.description,
                architecture_label(config.architecture), split_ratio)

    train_set, test_set = split_dataset(dataset, split_ratio, seed=args.split_seed)
    rng = np.random.default_rng(args.seed)

    def report(progress):
        logger.info("Epoch %d - Train Loss: %.6f, Val Loss: %.6f",
                    progress.epoch, progress.train_loss, progress.val_loss)

    result = run_experiment(train_set, test_set, config, split_ratio, rng=rng,
                            on_progress=report if args.verbose else None)
    results = [result]

    print(format_results(results, name.upper()))
    best_acc, best_loss = best_configurations(results)
    print(f"\nBest Test Accuracy: {best_acc.test_accuracy:.3f} ({best_acc.config.description})")
    print(f"Best Test Loss: {best_loss.test_loss:.4f} ({best_loss.config.description})")
    return results


if __name__ == "__main__":
    main()
