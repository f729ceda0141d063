import argparse
import logging
import os
import time
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .compare_models import (
    DEFAULT_INPUT,
    ensure_dir,
    load_dataset,
    prepare_features,
    resolve_config,
    scale_split,
)
from .config import DEFAULT_CONFIG_PATH, GradientDescentConfig
from .linear_model import LinearModel

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_DIR = "results/figures"
LEARNING_RATES = [0.001, 0.01, 0.1]


def _mark_convergence(model: LinearModel, color) -> None:
    if model.converged_:
        plt.axvline(model.n_iter_, color=color, linestyle=":", linewidth=1)


def plot_loss_curves(models: Dict[float, LinearModel], out_path: str, title: str) -> None:
    """Loss per learning rate; a dotted line marks where a run stopped early."""
    plt.figure(figsize=(8, 5))
    for lr, model in models.items():
        (line,) = plt.plot(model.loss_history, label=f"lr={lr}")
        _mark_convergence(model, line.get_color())
    plt.xlabel("Iteration")
    plt.ylabel("MSE")
    plt.yscale("log")
    plt.title(title)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close()


def plot_grad_curves(models: Dict[float, LinearModel], tolerance: float, out_path: str, title: str) -> None:
    plt.figure(figsize=(8, 5))
    for lr, model in models.items():
        plt.plot(model.grad_history, label=f"lr={lr}")
    plt.axhline(tolerance, color="black", linestyle="--", linewidth=1, label="tolerance")
    plt.xlabel("Iteration")
    plt.ylabel("Max |dL/dy_hat|")
    plt.yscale("log")
    plt.title(title)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close()


def plot_coef_evolution(model: LinearModel, feature_names: List[str], out_path: str, title: str, max_features: int) -> None:
    # coef_history[k] holds the coefficients after update k + 1; prepend the zero start.
    if not model.coef_history:
        return
    start = np.zeros_like(model.coef_history[0])
    coef_matrix = np.vstack([start] + model.coef_history)
    n_features = min(max_features, coef_matrix.shape[1])
    plt.figure(figsize=(9, 5))
    for idx in range(n_features):
        (line,) = plt.plot(coef_matrix[:, idx], label=feature_names[idx])
        plt.scatter([coef_matrix.shape[0] - 1], [coef_matrix[-1, idx]], color=line.get_color(), s=15)
    _mark_convergence(model, "grey")
    plt.xlabel("Update")
    plt.ylabel("Coefficient Value")
    plt.title(title)
    plt.legend(ncol=2, fontsize=8)
    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close()


def sweep_learning_rates(
    X,
    y,
    base_config: GradientDescentConfig,
    learning_rates: List[float],
) -> Dict[float, LinearModel]:
    """Fit one model per learning rate, everything else taken from ``base_config``."""
    models: Dict[float, LinearModel] = {}
    for lr in learning_rates:
        config = base_config.override(learning_rate=lr)
        start = time.perf_counter()
        model = LinearModel(config=config).fit(X, y)
        elapsed = time.perf_counter() - start
        logger.info(
            "lr=%s: %d iterations, converged=%s, final loss %.6g (%.3fs)",
            lr,
            model.n_iter_,
            model.converged_,
            model.loss_history[-1],
            elapsed,
        )
        models[lr] = model
    return models


def summarize(models: Dict[float, LinearModel]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "learning_rate": lr,
                "n_iter": model.n_iter_,
                "converged": model.converged_,
                "final_loss": model.loss_history[-1],
                "final_gradient": model.grad_history[-1],
            }
            for lr, model in models.items()
        ]
    )


def run_linear_analysis(
    df: pd.DataFrame,
    target: str,
    results_dir: str,
    config: GradientDescentConfig,
    coef_max: int = 8,
    scale: bool = False,
    learning_rates: Optional[List[float]] = None,
) -> pd.DataFrame:
    X, y = prepare_features(df, target)
    X_train, X_test, y_train, _y_test = train_test_split(
        X, y, test_size=0.2, random_state=42
    )
    if scale:
        X_train, _X_test = scale_split(X_train, X_test)

    ensure_dir(results_dir)
    models = sweep_learning_rates(X_train, y_train, config, learning_rates or LEARNING_RATES)

    plot_loss_curves(
        models,
        os.path.join(results_dir, "linear_loss_curves.png"),
        "Linear Loss Curves",
    )
    plot_grad_curves(
        models,
        config.tolerance,
        os.path.join(results_dir, "linear_gradients.png"),
        "Linear Gradient Magnitudes",
    )

    reference_lr = config.learning_rate if config.learning_rate in models else next(iter(models))
    plot_coef_evolution(
        models[reference_lr],
        list(X_train.columns),
        os.path.join(results_dir, "linear_coef_evolution.png"),
        f"Linear Coefficient Evolution (lr={reference_lr})",
        coef_max,
    )

    summary = summarize(models)
    summary.to_csv(os.path.join(results_dir, "convergence_summary.csv"), index=False)
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convergence analysis for gradient descent.")
    parser.add_argument("--input", default=DEFAULT_INPUT, help="CSV input.")
    parser.add_argument("--target", required=True, help="Target column.")
    parser.add_argument(
        "--results-dir",
        default=DEFAULT_RESULTS_DIR,
        help="Directory to save figures.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="JSON config path.")
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Number of gradient descent iterations.",
    )
    parser.add_argument(
        "--coef-max",
        type=int,
        default=8,
        help="Max number of coefficient curves to plot.",
    )
    parser.add_argument("--scale", action="store_true", help="Min-max scale the features.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    config = resolve_config(args.config, max_iterations=args.max_iterations)
    df = load_dataset(args.input)
    run_linear_analysis(df, args.target, args.results_dir, config, args.coef_max, args.scale)
    print(f"Saved: {args.results_dir}")


if __name__ == "__main__":
    main()
