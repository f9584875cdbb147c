"""Command line entry point for training and inspecting logic-gate networks."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List

from neuralnet import (
    Network,
    NeuralNetError,
    TrainingConfig,
    TrainingController,
    get_example,
    list_examples,
)
from neuralnet.reporting import JsonlSink, PlotAdapter
from neuralnet.training.checkpoint import CheckpointMetadata, load_checkpoint, save_checkpoint

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Honour ``LOG_LEVEL`` and fall back to INFO when ``--verbose`` is given."""

    default = "INFO" if verbose else "WARNING"
    level_name = os.getenv("LOG_LEVEL", default).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _format_result(payload: dict) -> str:
    return json.dumps(payload, sort_keys=True)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise ValueError(
                f"PyYAML is required to load {path}; install neuralnet[yaml]"
            ) from exc
        try:
            override = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
        override = {} if override is None else override
    else:
        override = json.loads(text)
    if not isinstance(override, dict):
        raise ValueError(
            f"Config override {path} must be a mapping, got {type(override).__name__}"
        )
    return override


def _parse_input(raw: str) -> List[float]:
    try:
        return [float(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise ValueError(f"Invalid input {raw!r}: expected comma-separated numbers") from exc


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="neuralnet", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List available training examples")

    train = sub.add_parser("train", help="Train a network on an example")
    train.add_argument("-e", "--example", required=True, help="Example to train on")
    train.add_argument("-n", "--epochs", type=int, help="Number of training epochs")
    train.add_argument("-l", "--learning-rate", type=float, help="Learning rate")
    train.add_argument("-o", "--output", type=Path, help="Checkpoint path for the trained model")
    train.add_argument(
        "--checkpoint-interval",
        type=int,
        help="Also write the checkpoint every N epochs (requires --output)",
    )
    train.add_argument("--seed", type=int, help="Seed for weight initialisation")
    train.add_argument("--metrics", type=Path, help="Write per-epoch loss as JSONL")
    train.add_argument("--plot-dir", type=Path, help="Write a loss curve to DIR/loss.png")
    train.add_argument("--config", type=Path, help="Optional JSON/YAML training config override")
    train.add_argument("-v", "--verbose", action="store_true", help="Log training progress")

    resume = sub.add_parser("resume", help="Continue training from a checkpoint")
    resume.add_argument("-c", "--checkpoint", type=Path, required=True, help="Checkpoint to resume")
    resume.add_argument("-n", "--epochs", type=int, required=True, help="Additional epochs")
    resume.add_argument("-o", "--output", type=Path, help="Where to save (defaults to --checkpoint)")
    resume.add_argument("-v", "--verbose", action="store_true", help="Log training progress")

    evaluate = sub.add_parser("eval", help="Evaluate a trained model")
    evaluate.add_argument("-m", "--model", type=Path, required=True, help="Checkpoint path")
    evaluate.add_argument("-i", "--input", help="Comma-separated input values")

    info = sub.add_parser("info", help="Show checkpoint metadata and architecture")
    info.add_argument("-m", "--model", type=Path, required=True, help="Checkpoint path")

    return parser.parse_args(argv)


def cmd_list() -> None:
    print("Available Examples:")
    for name in list_examples():
        print(f"  {name} - {get_example(name).description}")


def cmd_train(args: argparse.Namespace) -> None:
    example = get_example(args.example)
    epochs = args.epochs if args.epochs is not None else example.recommended_epochs
    learning_rate = (
        args.learning_rate if args.learning_rate is not None else example.recommended_lr
    )

    settings = {
        "epochs": epochs,
        "checkpoint_interval": args.checkpoint_interval,
        "checkpoint_path": args.output if args.checkpoint_interval else None,
        "verbose": args.verbose,
        "example_name": example.name,
    }
    if args.config:
        settings.update(_load_override(args.config))
    config = TrainingConfig.from_mapping(settings)

    network = Network.new(example.recommended_arch, learning_rate=learning_rate, seed=args.seed)
    logger.info(
        "Training %s network %s for %d epochs (lr=%s)",
        example.name,
        network.layers,
        config.epochs,
        learning_rate,
    )

    controller = TrainingController(network, config)
    if args.metrics:
        controller.add_callback(JsonlSink(args.metrics, example=example.name))
    plots = (
        PlotAdapter(args.plot_dir, enable_plots=True, title=f"{example.name} training loss")
        if args.plot_dir
        else None
    )
    if plots is not None:
        controller.add_callback(plots)

    result = controller.train(example.input_lists(), example.target_lists())
    payload = {
        "example": example.name,
        "architecture": network.layers,
        "epochs": result.epochs,
        "learning_rate": learning_rate,
        "final_loss": result.final_loss,
    }
    if plots is not None:
        plot_path = plots.close()
        if plot_path is not None:
            payload["plot"] = str(plot_path)
    if args.output:
        metadata = CheckpointMetadata.create(
            example=example.name,
            epoch=config.epochs,
            total_epochs=config.epochs,
            learning_rate=learning_rate,
        )
        payload["checkpoint"] = str(
            save_checkpoint(controller.into_network(), args.output, metadata)
        )
    print(_format_result(payload))


def cmd_resume(args: argparse.Namespace) -> None:
    network, previous = load_checkpoint(args.checkpoint)
    example = get_example(previous.example)
    config = TrainingConfig(
        epochs=args.epochs, verbose=args.verbose, example_name=previous.example
    )
    controller = TrainingController(network, config)
    result = controller.train(example.input_lists(), example.target_lists())

    network = controller.into_network()
    epoch = previous.epoch + result.epochs
    metadata = CheckpointMetadata.create(
        example=previous.example,
        epoch=epoch,
        total_epochs=max(previous.total_epochs, epoch),
        learning_rate=network.learning_rate,
    )
    output = args.output or args.checkpoint
    save_checkpoint(network, output, metadata)
    print(
        _format_result(
            {
                "example": previous.example,
                "epoch": epoch,
                "final_loss": result.final_loss,
                "checkpoint": str(output),
            }
        )
    )


def cmd_eval(args: argparse.Namespace) -> None:
    network, metadata = load_checkpoint(args.model)
    print(f"Model: {metadata.example} {network.layers} (epoch {metadata.epoch})")
    if args.input is not None:
        samples = [_parse_input(args.input)]
    else:
        samples = get_example(metadata.example).input_lists()
    for sample in samples:
        output = network.feed_forward(sample)
        values = ", ".join(f"{value:.6f}" for value in output.data)
        print(f"Input: {sample} -> Output: [{values}]")


def cmd_info(args: argparse.Namespace) -> None:
    network, metadata = load_checkpoint(args.model)
    description = network.describe()
    payload = {
        "metadata": metadata.to_dict(),
        "architecture": description.layer_dims,
        "activation": description.activation,
        "weights": [list(shape) for shape in description.weight_shapes],
        "biases": [list(shape) for shape in description.bias_shapes],
        "parameters": description.parameter_count,
    }
    print(json.dumps(payload, sort_keys=True, indent=2))


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command == "list":
            cmd_list()
        elif args.command == "train":
            cmd_train(args)
        elif args.command == "resume":
            cmd_resume(args)
        elif args.command == "eval":
            cmd_eval(args)
        elif args.command == "info":
            cmd_info(args)
    except (NeuralNetError, KeyError, ValueError, OSError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"error: {message}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
