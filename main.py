#!/usr/bin/env python3
"""
Loot Rate Viewer - Main Entry Point

Interactive console tool that shows the drop rates of dungeon loot tables,
tier by tier.
"""

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from logging_config import get_logger, set_console_level

log = get_logger(__name__)

from datasources import http
from datasources.asset_url import AssetUrls
from datasources.fetcher import DefinitionFetcher
from datasources.listing import DirectoryLister, directory_entries, files_with_suffix
from engine.config import ConfigManager, ConfigError
from services.names import NameResolver
from services.pipeline_cache import PipelineCache
from services.rates import RateComputer
from services.tiers import discover_tiers
from utils.paths import init_app_paths
from utils.tablefmt import render_tier, format_elapsed


def build_pipeline(config: ConfigManager) -> PipelineCache:
    """Wire fetcher, lister, resolver and computer into a pipeline."""
    http.configure(
        retries=config.get('http.retries'),
        user_agent=config.get('http.user_agent'),
    )
    urls = AssetUrls.from_config(config.get_source_config())
    fetcher = DefinitionFetcher(urls, timeout=config.get_timeout())
    resolver = NameResolver.from_config(fetcher, config.get_labels())
    computer = RateComputer(resolver, fetcher, max_workers=config.get_workers('names', 8))
    return PipelineCache(
        DirectoryLister(fetcher),
        computer,
        urls,
        table_filter=files_with_suffix(config.get('source.table_suffix', ".ron")),
        file_workers=config.get_workers('files', 4),
        listing_workers=config.get_workers('listings', 8),
    )


def run_session(pipeline: PipelineCache, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """Prompt for tier keys until the input stream ends."""
    prompt = ", ".join(pipeline.keys())
    while True:
        stdout.write(f"\n{prompt}: ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            log.info("Input closed, ending session")
            return
        choice = line.strip()
        start = time.perf_counter()
        tier, rates = pipeline.query(choice)
        if rates:
            stdout.write(render_tier(rates) + "\n")
        elapsed = time.perf_counter() - start
        log.info("Query %r (%s): %d files in %.2fs", choice, tier.name if tier else "-", len(rates), elapsed)
        stdout.write(format_elapsed(elapsed) + "\n")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Loot Rate Viewer - dungeon loot drop rates")
    parser.add_argument("--config", "-c", help="Path to a YAML configuration file")
    parser.add_argument("--debug", action="store_true", help="Show debug logging on the console")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)
    try:
        init_app_paths()
        config_manager = ConfigManager(args.config)
        config_manager.load_config()
    except ConfigError as e:
        log.error("Failed to start application: %s", e)
        return 1

    set_console_level("DEBUG" if args.debug else config_manager.get('logging.level', "WARNING"))
    for problem in config_manager.validate_config():
        log.warning("Config: %s", problem)

    pipeline = build_pipeline(config_manager)
    tiers = discover_tiers(
        pipeline.lister,
        pipeline.urls,
        directory_entries(config_manager.get('source.tier_selector')),
        prefix=config_manager.get('tiers.key_prefix', "T"),
    )
    pipeline.start_prefetch(tiers)
    log.info("Starting Loot Rate Viewer with %d tiers", len(tiers))

    try:
        run_session(pipeline)
    except KeyboardInterrupt:
        log.info("Interrupted")
    finally:
        pipeline.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
