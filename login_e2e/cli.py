#!/usr/bin/env python3
"""
Login / password reset E2E suite runner

Usage:
    login-e2e                              # all scenarios
    login-e2e --suite reset                # only the reset dialog suite
    login-e2e --only login_valid_credentials --headed
    login-e2e --tag smoke                  # only scenarios tagged "smoke"
    login-e2e --workers 4                  # parallel, one browser per scenario
    login-e2e --list
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from login_e2e.core.fixture_loader import load_fixture
from login_e2e.core.logging_config import setup_logging
from login_e2e.core.scenario_loader import load_scenarios
from login_e2e.core.settings import Settings
from login_e2e.core.types import SUITES, Scenario
from login_e2e.flows.runner import run_suite

logger = logging.getLogger(__name__)

EXIT_DEFINITION_ERROR = 2
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def positive_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {v}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {v}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="login-e2e",
        description="Run the login / password reset browser scenarios",
    )
    parser.add_argument("--scenarios", help="scenario YAML (default: $E2E_SCENARIOS)")
    parser.add_argument("--fixture", help="test data JSON (default: $E2E_TEST_DATA)")
    parser.add_argument("--suite", choices=SUITES, help="run only one suite")
    parser.add_argument("--only", action="append", metavar="ID", help="run only this scenario id (repeatable)")
    parser.add_argument("--tag", action="append", help="run only scenarios with this tag (repeatable)")
    parser.add_argument("--workers", type=positive_int, help="parallel scenarios (default: $E2E_WORKERS)")
    parser.add_argument("--headed", action="store_true", help="show the browser")
    parser.add_argument("--list", action="store_true", help="list scenarios and exit")
    parser.add_argument("--log-level", default="INFO", type=str.upper, choices=LOG_LEVELS)
    parser.add_argument("--log-file", help="also write logs to this file")
    return parser


def select_scenarios(
    scenarios: List[Scenario],
    suite: Optional[str],
    only: Optional[List[str]],
    tags: Optional[List[str]] = None,
) -> List[Scenario]:
    out = [sc for sc in scenarios if suite is None or sc.suite == suite]
    if tags:
        out = [sc for sc in out if set(tags) & set(sc.tags)]
    if only:
        known = {sc.id for sc in scenarios}
        unknown = [i for i in only if i not in known]
        if unknown:
            raise ValueError(f"Unknown scenario id(s): {', '.join(unknown)}")
        out = [sc for sc in out if sc.id in only]
    return out


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    settings = Settings.from_env().with_overrides(
        scenarios_path=Path(args.scenarios) if args.scenarios else None,
        test_data_path=Path(args.fixture) if args.fixture else None,
        workers=args.workers,
        headless=False if args.headed else None,
    )

    try:
        scenarios = select_scenarios(load_scenarios(settings.scenarios_path), args.suite, args.only, args.tag)
        if args.list:
            for sc in scenarios:
                print(f"{sc.id:40} [{sc.suite}] {sc.name}")
            return 0
        fixture = load_fixture(settings.test_data_path)
        summary = run_suite(scenarios, fixture, settings)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_DEFINITION_ERROR

    print(summary.format())
    return summary.exit_code


if __name__ == "__main__":
    sys.exit(main())
