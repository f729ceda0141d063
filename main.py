import argparse
import logging
import os
from typing import Optional

import pandas as pd
from sklearn.metrics import r2_score

from clear_ml.compare_models import (
    DEFAULT_INPUT,
    DEFAULT_RESULTS_DIR,
    load_dataset,
    prepare_features,
    resolve_config,
    run_comparison,
    timestamped_dir,
)
from clear_ml.config import DEFAULT_CONFIG_PATH, GradientDescentConfig
from clear_ml.convergence_analysis import run_linear_analysis
from clear_ml.linear_model import LinearModel
from clear_ml.preprocessing import MinMaxScaler

logger = logging.getLogger("clear_ml")


def train_model(
    df: pd.DataFrame,
    target: str,
    results_dir: str,
    config: GradientDescentConfig,
    scale: bool,
) -> str:
    X, y = prepare_features(df, target)
    if scale:
        X = pd.DataFrame(MinMaxScaler().fit_transform(X), columns=X.columns, index=X.index)

    model = LinearModel(config=config).fit(X, y)
    pred = model.predict(X)

    out_dir = timestamped_dir(results_dir, "train")
    metrics = {
        "mse": model.score(X, y),
        "r2": r2_score(y, pred),
        "n_iter": model.n_iter_,
        "converged": model.converged_,
        **config.to_dict(),
    }
    pd.DataFrame([metrics]).to_csv(os.path.join(out_dir, "metrics.csv"), index=False)
    pd.DataFrame(
        {"feature": X.columns, "coefficient": model.coefficients}
    ).to_csv(os.path.join(out_dir, "coefficients.csv"), index=False)
    pd.DataFrame(
        {"loss": model.loss_history, "gradient": model.grad_history}
    ).to_csv(os.path.join(out_dir, "history.csv"), index=False)
    return out_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train and inspect a gradient descent linear model.")
    parser.add_argument(
        "--mode",
        choices=["train", "compare", "convergence"],
        default="train",
        help="Pipeline mode.",
    )
    parser.add_argument("--input", default=DEFAULT_INPUT, help="CSV input file path.")
    parser.add_argument("--target", required=True, help="Target column.")
    parser.add_argument(
        "--results-dir",
        default=DEFAULT_RESULTS_DIR,
        help="Directory to save outputs.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="JSON file with max_iterations, learning_rate and tolerance.",
    )
    parser.add_argument("--max-iterations", type=int, default=None, help="Override max_iterations.")
    parser.add_argument("--learning-rate", type=float, default=None, help="Override learning_rate.")
    parser.add_argument("--tolerance", type=float, default=None, help="Override tolerance.")
    parser.add_argument(
        "--scale",
        action="store_true",
        help="Min-max scale the features before fitting.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not os.path.exists(args.input):
        raise FileNotFoundError(f"Input file not found: {args.input}")

    config = resolve_config(
        args.config,
        max_iterations=args.max_iterations,
        learning_rate=args.learning_rate,
        tolerance=args.tolerance,
    )
    logger.info("Using %s", config)
    df = load_dataset(args.input)

    if args.mode == "train":
        out_dir = train_model(df, args.target, args.results_dir, config, args.scale)
    elif args.mode == "compare":
        out_dir = run_comparison(df, args.target, args.results_dir, config, scale=args.scale)
    else:
        out_dir = os.path.join(args.results_dir, "figures")
        run_linear_analysis(df, args.target, out_dir, config, scale=args.scale)

    print(f"Saved: {out_dir}")


if __name__ == "__main__":
    main()
