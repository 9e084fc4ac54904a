from __future__ import annotations

import logging
import os
import sys
from datetime import timedelta
from typing import List, Mapping, Optional

from jira_aging.adapters.console.report import write_report
from jira_aging.adapters.jira.client import JiraClient
from jira_aging.application.commands import DEFAULT_BOARD_ID, DEFAULT_REPORT_STATUSES, BuildReportCommand
from jira_aging.application.services import AgingReportService
from jira_aging.infrastructure.cache.file import FileResponseCache

REQUIRED_ENV_VARS = [
    "JIRA_USERNAME",
    "JIRA_PASSWORD",
]

DEFAULT_JIRA_URL = "https://ultidev"

logger = logging.getLogger(__name__)


def _missing_env(vars_to_check: List[str], environ: Mapping[str, str]) -> List[str]:
    return [name for name in vars_to_check if not environ.get(name)]


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def parse_board_id(argv: List[str], default: int) -> int:
    if argv:
        try:
            return int(argv[0])
        except ValueError:
            logger.warning(f"Ignoring non-numeric board id {argv[0]!r}; using {default}")
    return default


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"Invalid {name}: {raw!r} is not an integer") from None


def log_level(environ: Mapping[str, str]) -> int:
    name = (environ.get("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise SystemExit(f"Invalid LOG_LEVEL: {name!r}")
    return level


def build_command(argv: List[str], environ: Mapping[str, str]) -> BuildReportCommand:
    default_board = _int_setting(environ, "JIRA_BOARD_ID", DEFAULT_BOARD_ID)
    statuses = [s.strip() for s in environ.get("JIRA_REPORT_STATUSES", "").split(",") if s.strip()]
    return BuildReportCommand(
        board_id=parse_board_id(argv, default_board),
        statuses=statuses or list(DEFAULT_REPORT_STATUSES),
    )


def build_client(environ: Mapping[str, str]) -> JiraClient:
    cache = FileResponseCache(
        directory=environ.get("JIRA_CACHE_DIR") or ".",
        max_age=timedelta(minutes=_int_setting(environ, "JIRA_CACHE_MAX_AGE_MINUTES", 60)),
    )
    return JiraClient(
        base_url=environ.get("JIRA_URL") or DEFAULT_JIRA_URL,
        username=environ["JIRA_USERNAME"],
        password=environ["JIRA_PASSWORD"],
        cache=cache,
        verify=_flag(environ.get("JIRA_VERIFY_TLS")),
    )


def main(argv: Optional[List[str]] = None) -> None:
    """
    Print how long each in-flight issue of a Jira board has been in its status.

    Usage: jira-aging [BOARD_ID]

    Required environment variables:
    - JIRA_USERNAME
    - JIRA_PASSWORD

    Optional:
    - JIRA_URL                    (default: https://ultidev)
    - JIRA_BOARD_ID               (default: 2924, overridden by BOARD_ID)
    - JIRA_CACHE_DIR              (default: current directory)
    - JIRA_CACHE_MAX_AGE_MINUTES  (default: 60)
    - JIRA_VERIFY_TLS             (default: off)
    - JIRA_REPORT_STATUSES        (comma-separated, default: the in-progress columns)
    - LOG_LEVEL                   (default: INFO)
    """

    environ = os.environ
    args = sys.argv[1:] if argv is None else argv

    missing = _missing_env(REQUIRED_ENV_VARS, environ)
    if missing:
        joined = ", ".join(missing)
        raise SystemExit(f"Missing required environment variables: {joined}")

    logging.basicConfig(
        level=log_level(environ),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    command = build_command(args, environ)
    logger.info("Building aging report for board %s", command.board_id)

    try:
        with build_client(environ) as client:
            report = AgingReportService(issue_port=client).build_report(command)
    except (ConnectionError, ValueError) as e:
        logger.error("Could not build aging report: %s", e)
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(0)

    write_report(report, sys.stdout)


if __name__ == "__main__":
    main()
