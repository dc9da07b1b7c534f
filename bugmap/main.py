"""bugmap entry point.

Collects closed pull requests of the configured repository that reference
known bugs (or no bug at all), and writes filename -> pull request titles
as JSON. Usage: bugmap [--config config.yaml] [--bugs bugs.yaml] [--output out.json].
"""

import argparse
import logging
import sys
from pathlib import Path

from bugmap.adapters import GitHubAdapter, GitPlatformError
from bugmap.config import BugListError, ConfigError, load_bug_ids, load_config
from bugmap.document import DocumentWriteError, write_document
from bugmap.logging import BugmapLogging
from bugmap.scan import run_scan

LOG = logging.getLogger("bugmap")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bugmap",
        description="Map files to the titles of bug-fix pull requests that touched them",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file (optional; env and .env are read too)",
    )
    parser.add_argument("--bugs", "-b", type=Path, default=None, help="Bug id allow-list (overrides scan.bugs_file)")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Output JSON file (overrides scan.output)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config and bug list, then exit",
    )
    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, scan, write the document."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as e:
        logging.basicConfig(level=logging.ERROR)
        LOG.error("%s", e)
        return 1
    BugmapLogging(config.logging).setup()

    bugs_file = args.bugs or config.scan.bugs_file
    output = args.output or config.scan.output
    try:
        known_ids = load_bug_ids(bugs_file)
    except (OSError, BugListError) as e:
        LOG.error("Cannot load bug ids from %s: %s", bugs_file, e)
        return 1

    if not config.github.owner or not config.github.repo:
        LOG.error("GITHUB_OWNER and GITHUB_REPO must be set")
        return 1

    try:
        token = config.github_token_resolved
    except ConfigError as e:
        LOG.error("%s", e)
        return 1

    if args.check:
        print("Config OK:", config.github.repository, f"{len(known_ids)} bug ids")
        return 0

    adapter = GitHubAdapter(token=token, api_url=config.github.api_url)

    LOG.info("Running scan...")
    try:
        if token:
            LOG.info("Hello %s!", adapter.get_authenticated_login())
        else:
            LOG.warning("No GitHub token configured; using anonymous access")
        report = run_scan(adapter, config, known_ids)
    except KeyboardInterrupt:
        return 0
    except GitPlatformError as e:
        LOG.exception("Fatal error: %s", e)
        return 1

    try:
        write_document(output, report.document)
    except DocumentWriteError as e:
        LOG.error("%s", e)
        return 1

    LOG.info(
        "Fetched %s files from %s pull requests (stopped: %s)",
        len(report.files),
        len(report.pulls),
        report.stop_reason.value if report.stop_reason else "n/a",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
