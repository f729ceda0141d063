import argparse
import logging
import os
from datetime import datetime
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score
from sklearn.model_selection import train_test_split

from .config import DEFAULT_CONFIG_PATH, GradientDescentConfig, load_config
from .linear_model import LinearModel
from .loss_functions import mean_squared_error
from .preprocessing import MinMaxScaler

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "data/processed/dataset.csv"
DEFAULT_RESULTS_DIR = "results"


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def timestamped_dir(results_dir: str, mode: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = os.path.join(results_dir, mode, timestamp)
    ensure_dir(out_dir)
    return out_dir


def load_dataset(path: str) -> pd.DataFrame:
    return pd.read_csv(path)


def prepare_features(df: pd.DataFrame, target: str) -> tuple[pd.DataFrame, pd.Series]:
    if target not in df.columns:
        raise ValueError(f"Target column '{target}' not found in input.")
    y = df[target]
    X = df.drop(columns=[target])
    X = X.select_dtypes(include=[np.number])
    return X, y


def resolve_config(
    config_path: Optional[str],
    max_iterations: Optional[int] = None,
    learning_rate: Optional[float] = None,
    tolerance: Optional[float] = None,
) -> GradientDescentConfig:
    """Config file values (when the file exists) overridden by explicit flags."""
    if config_path and os.path.exists(config_path):
        config = load_config(config_path)
    else:
        if config_path and config_path != DEFAULT_CONFIG_PATH:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = GradientDescentConfig()
    return config.override(
        max_iterations=max_iterations,
        learning_rate=learning_rate,
        tolerance=tolerance,
    )


def scale_split(X_train: pd.DataFrame, X_test: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Min-max scale both splits with ranges taken from the training split."""
    scaler = MinMaxScaler().fit(X_train)
    X_train = pd.DataFrame(scaler.transform(X_train), columns=X_train.columns, index=X_train.index)
    X_test = pd.DataFrame(scaler.transform(X_test), columns=X_test.columns, index=X_test.index)
    return X_train, X_test


def compare_linear(X_train, X_test, y_train, y_test, config: GradientDescentConfig):
    custom = LinearModel(config=config).fit(X_train, y_train)
    # No intercept on either side so the coefficients are comparable.
    sk_model = LinearRegression(fit_intercept=False).fit(X_train, y_train)

    custom_pred = custom.predict(X_test)
    sk_pred = sk_model.predict(X_test)

    metrics = pd.DataFrame(
        [
            {
                "model": "custom",
                "mse": mean_squared_error(custom_pred, y_test),
                "r2": r2_score(y_test, custom_pred),
                "n_iter": custom.n_iter_,
                "converged": custom.converged_,
            },
            {
                "model": "sklearn",
                "mse": mean_squared_error(sk_pred, y_test),
                "r2": r2_score(y_test, sk_pred),
                "n_iter": None,
                "converged": None,
            },
        ]
    )

    coef = pd.DataFrame(
        {
            "feature": X_train.columns,
            "custom_coef": custom.coefficients,
            "sklearn_coef": sk_model.coef_,
        }
    )

    return custom, sk_model, custom_pred, sk_pred, metrics, coef


def plot_linear(y_test, custom_pred, sk_pred, out_dir: str) -> None:
    """Both models' predictions against the truth, with the y = x line for reference."""
    y_true = np.asarray(y_test, dtype=float)
    low = min(y_true.min(), np.min(custom_pred), np.min(sk_pred))
    high = max(y_true.max(), np.max(custom_pred), np.max(sk_pred))

    plt.figure(figsize=(6, 6))
    plt.plot([low, high], [low, high], color="black", linestyle="--", linewidth=1)
    plt.scatter(y_true, custom_pred, s=12, alpha=0.7, label="gradient descent")
    plt.scatter(y_true, sk_pred, s=12, alpha=0.7, marker="x", label="least squares")
    plt.xlabel("True")
    plt.ylabel("Predicted")
    plt.title("Test Predictions")
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "linear_predictions.png"), dpi=150)
    plt.close()


def plot_loss(custom_model: LinearModel, out_dir: str) -> None:
    if not custom_model.loss_history:
        return
    plt.figure(figsize=(6, 4))
    plt.plot(custom_model.loss_history)
    plt.xlabel("Iteration")
    plt.ylabel("MSE")
    plt.title("Training Loss")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "linear_loss.png"), dpi=150)
    plt.close()


def run_comparison(
    df: pd.DataFrame,
    target: str,
    results_dir: str,
    config: GradientDescentConfig,
    scale: bool = False,
    test_size: float = 0.2,
    seed: int = 42,
) -> str:
    X, y = prepare_features(df, target)
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=test_size, random_state=seed
    )
    if scale:
        X_train, X_test = scale_split(X_train, X_test)

    out_dir = timestamped_dir(results_dir, "compare")
    custom, _sk_model, custom_pred, sk_pred, metrics, coef = compare_linear(
        X_train, X_test, y_train, y_test, config
    )

    metrics.to_csv(os.path.join(out_dir, "metrics.csv"), index=False)
    coef.to_csv(os.path.join(out_dir, "coefficients.csv"), index=False)

    preds = pd.DataFrame(
        {
            "y_true": y_test.values,
            "custom_pred": custom_pred,
            "sklearn_pred": sk_pred,
        }
    )
    preds.to_csv(os.path.join(out_dir, "predictions.csv"), index=False)

    plot_linear(y_test, custom_pred, sk_pred, out_dir)
    plot_loss(custom, out_dir)
    logger.info("Comparison results written to %s", out_dir)
    return out_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare gradient descent vs least squares.")
    parser.add_argument("--input", default=DEFAULT_INPUT, help="CSV input.")
    parser.add_argument("--target", required=True, help="Target column.")
    parser.add_argument(
        "--results-dir",
        default=DEFAULT_RESULTS_DIR,
        help="Directory to save outputs.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="JSON config path.")
    parser.add_argument("--scale", action="store_true", help="Min-max scale the features.")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    df = load_dataset(args.input)
    config = resolve_config(args.config)
    out_dir = run_comparison(df, args.target, args.results_dir, config, scale=args.scale)
    print(f"Saved: {out_dir}")


if __name__ == "__main__":
    main()
