import logging
from collections import namedtuple

from tinymlp.datasets import to_matrices
from tinymlp.network import Network

logger = logging.getLogger(__name__)

HyperparameterConfig = namedtuple(
    "HyperparameterConfig", ["architecture", "learning_rate", "epochs", "description"]
)
ExperimentResult = namedtuple(
    "ExperimentResult",
    ["config", "train_loss", "test_loss", "train_accuracy", "test_accuracy", "split_ratio"],
)

XOR_CONFIGS = [
    HyperparameterConfig((2, 4, 1), 0.5, 1000, "Small Hidden"),
    HyperparameterConfig((2, 8, 1), 0.5, 1000, "Medium Hidden"),
    HyperparameterConfig((2, 16, 1), 0.3, 1000, "Large Hidden"),
    HyperparameterConfig((2, 4, 4, 1), 0.3, 1500, "Two Hidden Small"),
    HyperparameterConfig((2, 8, 4, 1), 0.2, 1500, "Two Hidden Medium"),
    HyperparameterConfig((2, 8, 1), 0.1, 1000, "Low LR"),
    HyperparameterConfig((2, 8, 1), 0.3, 1000, "Medium LR"),
    HyperparameterConfig((2, 8, 1), 0.7, 1000, "High LR"),
    HyperparameterConfig((2, 8, 1), 0.5, 500, "Short Training"),
    HyperparameterConfig((2, 8, 1), 0.5, 2000, "Long Training"),
]

ADDER_CONFIGS = [
    HyperparameterConfig((5, 8, 3), 0.3, 1000, "Small Hidden"),
    HyperparameterConfig((5, 16, 3), 0.3, 1000, "Medium Hidden"),
    HyperparameterConfig((5, 32, 3), 0.2, 1000, "Large Hidden"),
    HyperparameterConfig((5, 10, 8, 3), 0.2, 1500, "Two Hidden Small"),
    HyperparameterConfig((5, 16, 8, 3), 0.15, 1500, "Two Hidden Medium"),
    HyperparameterConfig((5, 20, 10, 3), 0.1, 2000, "Two Hidden Large"),
    HyperparameterConfig((5, 16, 3), 0.1, 1000, "Low LR"),
    HyperparameterConfig((5, 16, 3), 0.5, 1000, "High LR"),
    HyperparameterConfig((5, 16, 3), 0.3, 500, "Short Training"),
    HyperparameterConfig((5, 16, 3), 0.3, 2000, "Long Training"),
]

SPLIT_RATIOS = [0.5, 0.7, 0.8]

TABLE_WIDTH = 120


def architecture_label(architecture):
    return "-".join(str(n) for n in architecture)


def run_experiment(train_set, test_set, config, split_ratio, rng=None, on_progress=None):
    """Train a fresh network on ``train_set`` and score it on both splits."""
    train_inputs, train_targets = to_matrices(train_set)
    test_inputs, test_targets = to_matrices(test_set)

    network = Network(config.architecture, config.learning_rate, rng=rng)
    network.train_with_validation(
        train_inputs, train_targets, test_inputs, test_targets,
        config.epochs,
        verbose=on_progress is not None,
        on_progress=on_progress,
    )

    result = ExperimentResult(
        config=config,
        train_loss=network.evaluate(train_inputs, train_targets),
        test_loss=network.evaluate(test_inputs, test_targets),
        train_accuracy=network.calculate_accuracy(train_inputs, train_targets),
        test_accuracy=network.calculate_accuracy(test_inputs, test_targets),
        split_ratio=split_ratio,
    )
    logger.debug("Finished %s: %s", config.description, result)
    return result


def format_results(results, dataset_name):
    lines = [
        "=" * TABLE_WIDTH,
        f"EXPERIMENT RESULTS FOR {dataset_name} DATASET",
        "=" * TABLE_WIDTH,
        f"{'Architecture':<25}{'LR':<10}{'Epochs':<8}{'Split':<8}{'Train Loss':<12}"
        f"{'Test Loss':<12}{'Train Acc':<12}{'Test Acc':<12}{'Description':<15}",
        "-" * TABLE_WIDTH,
    ]
    for r in results:
        c = r.config
        lines.append(
            f"{architecture_label(c.architecture):<25}{c.learning_rate:<10.3f}{c.epochs:<8}"
            f"{r.split_ratio:<8.2f}{r.train_loss:<12.4f}{r.test_loss:<12.4f}"
            f"{r.train_accuracy:<12.3f}{r.test_accuracy:<12.3f}{c.description:<15}"
        )
    lines.append("-" * TABLE_WIDTH)
    return "\n".join(lines)


def best_configurations(results):
    """Return (best test accuracy result, lowest test loss result)."""
    if not results:
        raise ValueError("No results to compare")
    best_accuracy = max(results, key=lambda r: r.test_accuracy)
    best_loss = min(results, key=lambda r: r.test_loss)
    return best_accuracy, best_loss
