"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from polytiles.config import load_configuration, settings
from polytiles.engine import TilingConfig, TilingPipeline

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="polytiles",
        description="Cut a polygon shapefile into a quadtree of GeoJSON tiles",
    )
    ap.add_argument("--config", default=settings.polytiles_config, help="Tiling jobs YAML")
    ap.add_argument("--workers", type=int, default=settings.workers, help="Threads per pool")
    ap.add_argument("--log-level", default=settings.polytiles_log_level)
    ap.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    conf = load_configuration(args.config)
    logger.info("Loaded %d tiling jobs from %s", len(conf.tiles), args.config)

    pipeline = TilingPipeline(
        config=TilingConfig(),
        workers=args.workers,
        progress=settings.polytiles_progress and not args.no_progress,
    )
    report = pipeline.run(conf.tiles)

    for name, error in report.errors.items():
        logger.error("%s: %s", name, error)
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
