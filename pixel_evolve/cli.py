"""
CLI interface for pixel-evolve.
Provides commands for running an evolution and managing configuration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from evolution import (
    EvolutionConfig,
    EvolutionEngine,
    PixelEvolveError,
    Population,
    PopulationConfig,
)
from imaging import PillowImageWriter, load_target
from monitoring import ProgressMonitor
from pixel_evolve import __version__
from pixel_evolve.config import Config, get_config
from pixel_evolve.logging_config import LOG_LEVELS, configure_logging, get_logger

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pixel-evolve",
        description="Evolve images toward a target with a genetic algorithm",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", type=Path, default=None, help="Configuration file path"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Evolve a population toward an image")
    run_parser.add_argument("target", type=Path, help="Target image path")
    run_parser.add_argument(
        "--parents", "-k", type=int, default=None, help="Parent pool size K"
    )
    run_parser.add_argument(
        "--generations", "-g", type=int, default=None, help="Number of generations"
    )
    run_parser.add_argument(
        "--mutation-rate", "-m", type=float, default=None, help="Per-pixel mutation rate"
    )
    run_parser.add_argument(
        "--acceptance",
        choices=["best", "mean_top_k"],
        default=None,
        help="Statistic compared when deciding to keep offspring",
    )
    run_parser.add_argument(
        "--output-dir", "-o", type=Path, default=None, help="Snapshot directory"
    )
    run_parser.add_argument(
        "--snapshot-interval",
        type=int,
        default=None,
        help="Generations between snapshots (0 disables)",
    )
    run_parser.add_argument(
        "--report-interval",
        type=int,
        default=None,
        help="Generations between progress lines (0 disables)",
    )
    run_parser.add_argument(
        "--format",
        dest="image_format",
        choices=["bmp", "png", "tiff"],
        default=None,
        help="Snapshot image format",
    )
    run_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    run_parser.add_argument(
        "--workers", type=int, default=None, help="Worker pool size"
    )
    run_parser.add_argument(
        "--history", type=Path, default=None, help="Export progress history (.json/.csv)"
    )
    run_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level",
    )
    run_parser.add_argument(
        "--log-json", action="store_true", help="Emit JSON log lines"
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Show or create configuration")
    config_parser.add_argument(
        "--init",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write the default configuration to PATH",
    )

    return parser


def cmd_run(args: argparse.Namespace, config: Config) -> int:
    """Run an evolution toward the target image."""
    log_settings = config.logging
    events = get_logger("pixel_evolve.run")

    try:
        configure_logging(
            level=args.log_level or log_settings.level,
            json_output=args.log_json or log_settings.json_output,
            log_file=Path(log_settings.log_file) if log_settings.log_file else None,
            use_colors=log_settings.use_colors,
        )
        params = config.to_run_parameters(
            parent_pool_size=args.parents,
            generations=args.generations,
            mutation_rate=args.mutation_rate,
            acceptance_policy=args.acceptance,
            max_workers=args.workers,
            seed=args.seed,
            snapshot_interval=args.snapshot_interval,
            report_interval=args.report_interval,
            output_dir=args.output_dir,
            image_format=args.image_format,
        )
        target = load_target(args.target)

        population = Population(
            target,
            PopulationConfig(
                parent_pool_size=params.parent_pool_size,
                mutation_rate=params.mutation_rate,
                acceptance_policy=params.acceptance_policy,
                max_workers=params.max_workers,
                seed=params.seed,
            ),
        )
        monitor = ProgressMonitor()
        engine = EvolutionEngine(
            population,
            EvolutionConfig(
                max_generations=params.generations,
                report_interval=params.report_interval,
                snapshot_interval=params.snapshot_interval,
                output_dir=params.output_dir,
                image_format=params.image_format.value,
            ),
            reporter=monitor,
            writer=PillowImageWriter(),
        )
        try:
            result = engine.run()
        finally:
            population.close()
    except PixelEvolveError as e:
        logger.error(str(e))
        return 1

    events.evolution_complete(
        result.generations, result.best_fitness, int(result.duration_seconds * 1000)
    )
    if result.snapshots:
        events.snapshot_written(
            result.snapshots[-1], str(result.best_genome.id), result.best_fitness
        )

    history_path = args.history or config.reporting.history_file
    if history_path:
        try:
            monitor.history.export(history_path)
        except OSError as e:
            logger.error(f"Failed to export history to {history_path}: {e}")
            return 1

    return 0


def cmd_config(args: argparse.Namespace, config: Config) -> int:
    """Show or create configuration."""
    if args.init:
        if args.init.exists():
            print(f"Configuration already exists at {args.init}")
            return 1
        Config().save(args.init)
        print(f"Wrote default configuration to {args.init}")
        return 0

    print(json.dumps(config.to_dict(), indent=2))
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = get_config(args.config)
    except PixelEvolveError as e:
        logger.error(str(e))
        return 1

    commands = {
        "run": cmd_run,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
