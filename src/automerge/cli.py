"""Evaluate one new-package registration pull request and report the decision.

Usage:
    python -m src.automerge.cli --pr 1234 --registry-snapshot snapshot.json
    python -m src.automerge.cli --pr 1234 --registry-snapshot snapshot.json --env-file .env --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys

from .config import load_config
from .errors import ConfigError, ExternalCallExhausted, GuidelinesNotMet, MalformedTitle, PreconditionFailed
from .orchestrator import NewPackageOrchestrator
from .registry import InMemoryRegistry
from .retry import retry
from .review import GitHubReviewSurface
from .submission import Submission

logger = logging.getLogger("automerge.cli")

EXIT_APPROVED = 0
EXIT_GUIDELINES_NOT_MET = 1
EXIT_PRECONDITION_FAILED = 2
EXIT_EXTERNAL_CALL_EXHAUSTED = 3
EXIT_BAD_INPUT = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Registry new-package auto-merge decision")
    parser.add_argument("--pr", type=int, required=True, help="Pull request number")
    parser.add_argument("--registry-snapshot", required=True, help="Path to the registry snapshot JSON")
    parser.add_argument("--env-file", default=None, help="Optional .env file with AUTOMERGE_* settings")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.env_file)
        registry = InMemoryRegistry.from_json(args.registry_snapshot)
    except (ConfigError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_BAD_INPUT

    with GitHubReviewSurface(
        config.registry,
        config.github_token,
        whoami=config.whoami,
        api_url=config.api_url,
    ) as review:
        try:
            payload = retry(lambda: review.get_pull_request(args.pr), policy=config.retry_policy, label="fetch pull request")
            files = retry(lambda: review.changed_files(args.pr), policy=config.retry_policy, label="fetch changed files")
            submission = Submission.from_pull_request(payload, files)
            NewPackageOrchestrator(
                review,
                registry,
                config.auth,
                retry_policy=config.retry_policy,
                suggest_onepointzero=config.suggest_onepointzero,
            ).evaluate(submission)
        except MalformedTitle as exc:
            logger.error("%s", exc)
            return EXIT_BAD_INPUT
        except PreconditionFailed as exc:
            logger.error("%s", exc.message)
            return EXIT_PRECONDITION_FAILED
        except GuidelinesNotMet as exc:
            logger.error("%s", exc)
            return EXIT_GUIDELINES_NOT_MET
        except ExternalCallExhausted as exc:
            logger.error("%s", exc)
            return EXIT_EXTERNAL_CALL_EXHAUSTED

    logger.info("submission #%d approved", args.pr)
    return EXIT_APPROVED


if __name__ == "__main__":
    sys.exit(main())
