"""PR Gatekeeper entry point.

Runs inside a GitHub Actions job on pull_request events: reads the action
inputs and the event payload, validates the PR template and updates
labels, comments, assignees, reviewers and milestone.

Usage: gatekeeper [run] [--config gatekeeper.yaml] [--event event.json] [--check]

Exit codes: 0 success, 1 validation failed or unexpected error, 2 bad
config or event payload.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from gatekeeper.adapters import GitHubAdapter, GitPlatformAdapter
from gatekeeper.config import AppConfig, load_config
from gatekeeper.event import EventPayloadError, context_from_payload, load_event
from gatekeeper.logging import GatekeeperLogging, report_failure
from gatekeeper.models import PullRequestContext, ReconcileReport
from gatekeeper.reconciler import Reconciler

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (run)."""
    argv = argv if argv is not None else sys.argv[1:]
    rest = list(argv)
    if rest and rest[0] == "run":
        rest = rest[1:]

    parser = argparse.ArgumentParser(
        prog="gatekeeper",
        description="PR Gatekeeper - validate the PR template and sync labels, reviewers and milestone",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("gatekeeper.yaml"),
        help="Path to YAML config file (optional; inputs default to INPUT_* env)",
    )
    parser.add_argument(
        "--event",
        "-e",
        type=Path,
        default=None,
        help="Path to event payload JSON (default: GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, print the resolved policy, then exit",
    )
    return parser.parse_args(rest)


def run(
    config: AppConfig,
    context: PullRequestContext,
    adapter: GitPlatformAdapter | None = None,
) -> ReconcileReport:
    """Reconcile one pull request and return the report."""
    log = logging.getLogger("gatekeeper.run")
    policy = config.inputs.to_policy(context.author.login)
    log.debug("Policy: %s", policy.model_dump())
    log.debug("Pull Request #%s draft=%s author=%s", context.number, context.draft, context.author.login)

    if adapter is None:
        adapter = GitHubAdapter(
            repo=config.github.repository,
            token=config.token_resolved(),
            api_url=config.github.api_url,
            graphql_url=config.github.graphql_url,
        )
    return Reconciler(adapter, policy).reconcile(context)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config and event, reconcile, map the outcome to an exit code."""
    args = parse_args(argv)
    log = logging.getLogger("gatekeeper")

    try:
        config = load_config(args.config)
    except (ValidationError, OSError, ValueError, yaml.YAMLError) as e:
        logging.basicConfig(level=logging.INFO)
        log.error("Invalid configuration: %s", e)
        report_failure(f"Invalid configuration: {e}")
        return EXIT_USAGE

    GatekeeperLogging(config.logging, debug=os.environ.get("RUNNER_DEBUG") == "1").setup()

    if args.check:
        print("Config OK:", config.github.repository or "<no repository>")
        print(config.inputs.to_policy().model_dump_json(indent=2))
        return EXIT_OK

    event_path = args.event or (Path(config.github.event_path) if config.github.event_path else None)
    try:
        if event_path is None:
            raise EventPayloadError("No event payload: pass --event or set GITHUB_EVENT_PATH")
        context = context_from_payload(load_event(event_path))
        if "/" not in config.github.repository:
            raise EventPayloadError("GITHUB_REPOSITORY must be set to owner/repo")
    except EventPayloadError as e:
        log.error("%s", e)
        report_failure(str(e))
        return EXIT_USAGE

    try:
        report = run(config, context)
    except Exception as e:
        log.exception("Fatal error: %s", e)
        report_failure(str(e))
        return EXIT_FAILED

    for error in report.errors:
        log.warning("Not applied: %s %s (%s)", error.action, error.target, error.detail)
    for message in report.failures:
        log.error("%s", message)
        report_failure(message)
    log.info(
        "PR #%s: %s mutation(s) applied, %s failed",
        context.number,
        len(report.applied),
        len(report.errors),
    )
    return EXIT_FAILED if report.failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
