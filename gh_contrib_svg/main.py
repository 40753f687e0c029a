#!/usr/bin/env python3
"""
Main driver script for the contributors SVG generator.

This script provides the command-line interface and coordinates all modules
to rank the contributors of a repository, or of every public repository of
an owner, and render them as an SVG avatar grid.

Usage (example):
    python -m gh_contrib_svg.main https://github.com/octocat/Hello-World --token GITHUB_TOKEN
    python -m gh_contrib_svg.main --owner octocat --exclude Spoon-Knife --count 10
"""

import argparse
import logging
import os
import re
import sys
import time
from pathlib import Path
from typing import List, Optional

from .aggregator import aggregate_repositories, resolve_repositories
from .fetcher import GitHubFetcher
from .generator import ContributorsSvgGenerator, save_svg
from .models import Ranking
from .persistence import check_new_contributors, save_seen

logger = logging.getLogger("gh-contrib-svg")

GITHUB_URL_RE = re.compile(r"https://github\.com/([\w.-]+)/([\w.-]+?)(?:\.git)?(?:/|$)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-contrib-svg",
        description="Render the contributors of a GitHub repository or owner as an SVG.",
    )
    parser.add_argument("url", nargs="?", help="GitHub repository URL, e.g. https://github.com/owner/repo")
    parser.add_argument("--token", "-t", default=os.environ.get("GITHUB_TOKEN"),
                        help="Personal GitHub token (default: $GITHUB_TOKEN)")
    parser.add_argument("--owner", "-o", help="Repository owner (user or organization)")
    parser.add_argument("--repo", "-r", help="Repository name; all public repos of the owner when omitted")
    parser.add_argument("--exclude", "-e", help="Repository name to skip")
    parser.add_argument("--size", "-s", type=int, default=120, help="Single avatar block size (pixel)")
    parser.add_argument("--width", "-w", type=int, default=1000, help="Output image width (pixel)")
    parser.add_argument("--count", "-c", type=int, default=8, help="Avatar count in one line")
    parser.add_argument("--output-dir", default=".", help="Directory for the SVG and the seen-contributors file")
    parser.add_argument("--workers", type=int, default=1, help="Repositories collected in parallel")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments; a repository URL overrides --owner and --repo."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.url:
        match = GITHUB_URL_RE.match(args.url)
        if not match:
            parser.error("Invalid GitHub Repo URL")
        args.owner, args.repo = match.group(1), match.group(2)

    if not args.token:
        parser.error("Personal GitHub token is required (--token or GITHUB_TOKEN)")
    if not args.owner:
        parser.error("GitHub repo owner is required (--owner or a repository URL)")
    for option in ("size", "width", "count", "workers"):
        if getattr(args, option) <= 0:
            parser.error(f"--{option} must be a positive integer")
    return args


def run_identifier(args: argparse.Namespace) -> str:
    return f"contributor_{args.repo}" if args.repo else f"contributor_{args.owner}"


def run(args: argparse.Namespace, fetcher: Optional[GitHubFetcher] = None) -> Ranking:
    """
    Collect, rank, render and persist the contributors described by ``args``.

    Returns:
        The contributor ranking
    """
    identifier = run_identifier(args)
    output_dir = Path(args.output_dir)
    if fetcher is None:
        fetcher = GitHubFetcher(token=args.token)

    start = time.perf_counter()
    repos = resolve_repositories(fetcher, args.owner, args.repo)
    aggregator = aggregate_repositories(fetcher, repos, exclude=args.exclude, workers=args.workers)

    ranking = aggregator.ranking()
    identities = [login for login, _ in ranking]
    check_new_contributors(identities, identifier, output_dir)

    generator = ContributorsSvgGenerator(img_width=args.width, block_size=args.size, line_count=args.count)
    save_svg(generator.generate_svg(ranking), identifier, output_dir)
    save_seen(identities, identifier, output_dir)

    logger.info("Time cost: %ds", round(time.perf_counter() - start))
    return ranking


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the contributors SVG generator.

    Parses command line arguments and runs the whole pipeline, exiting with
    status 1 on any fatal error.
    """
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        ranking = run(args)
        print(f"Contributors SVG generated: {Path(args.output_dir) / (run_identifier(args) + '.svg')}")
        print(f"  Contributors: {len(ranking)}")
    except KeyboardInterrupt:
        logger.info("Contributors SVG generation interrupted by user")
        print("\nOperation cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error("Contributors SVG generation failed: %s", e)
        print(f"Error: Contributors SVG generation failed - {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
