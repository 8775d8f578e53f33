#!/usr/bin/env python3
"""
Render {% picture %} tags across a site and generate the resized images they need.

Requires: Python 3.8+, Pillow, PyYAML
"""

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from .config import MARKUP_MODES, load_config, site_from_config
from .errors import ConfigurationError
from .pages import collect_pages, process_pages


def setup_logging(verbosity: int = 0) -> None:
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(verbosity, 2)]
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate responsive image variants for {% picture %} tags.")
    parser.add_argument("--root", default=".", help="Site root containing the config and pages")
    parser.add_argument("--config", default="_config.yml", help="Site config, relative to --root (.yml, .yaml or .json)")
    parser.add_argument("--dest", default=None, help="Override the destination directory from the config")
    parser.add_argument("--markup", choices=MARKUP_MODES, default=None, help="Override picture: markup from the config")
    parser.add_argument("--threads", type=int, default=os.cpu_count() or 4, help="Pages rendered in parallel")
    parser.add_argument("--dry-run", action="store_true", help="Validate tags and presets only; write nothing")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for progress, -vv for debug")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    root = Path(args.root).resolve()
    config_path = root / args.config
    try:
        raw = load_config(config_path)
        site = site_from_config(raw, root)
    except (FileNotFoundError, ValueError, ConfigurationError) as e:
        print(f"{e}", file=sys.stderr)
        return 1

    if args.dest:
        site = dataclasses.replace(site, destination=Path(args.dest).resolve())
    if args.markup:
        site = dataclasses.replace(site, picture=dataclasses.replace(site.picture, markup=args.markup))

    pages = collect_pages(site)
    print(f"Found {len(pages)} page(s) in {site.source}")
    print(f"Images: {site.image_source_root} -> {site.output_root}, markup={site.picture.markup}")
    print(f"Threads={args.threads}, dry-run={'on' if args.dry_run else 'off'}")

    report = process_pages(site, pages, dry_run=args.dry_run, threads=args.threads)
    for status in sorted(report.statuses):
        print(status)
    print(f"keep_files: {', '.join(report.keep_files)}")

    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
