from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of the
configuration hierarchy (defaults, persisted state, command-line
overrides), the synchronization run and rendering of its report.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from workspace_mirror.core.bootstrap import run_sync
from workspace_mirror.core.validator import validate_config
from workspace_mirror.domain.config import (
    get_default_config,
    load_app_state,
    load_config,
    save_config,
)
from workspace_mirror.domain.settings import Settings
from workspace_mirror.domain.sync_models import SyncReport
from workspace_mirror.infra.logging import LoggingConfig, configure_logging, get_logger
from workspace_mirror.interface.cli import args as cli_args
from workspace_mirror.interface.cli.indicator import ConsoleIndicator
from workspace_mirror.utils.i18n import apply_locale, i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_WORKSPACE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    apply_locale(load_app_state()["app_settings"].get("locale"))

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(level="DEBUG" if args.debug else "INFO", console=True))
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(clean_conf)
        logger.info(i18n.t("cli.status.saved"))

    settings = Settings.from_config(clean_conf)
    indicator = ConsoleIndicator(quiet=bool(args.json_output))

    try:
        report = run_sync(
            settings,
            clean_conf.get("workspace_path"),
            indicator,
            scan_only=bool(args.scan_only),
        )
    except KeyboardInterrupt:
        indicator.close()
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        indicator.close()
        msg = i18n.t("cli.errors.fatal", error=str(e))
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE
    indicator.close()

    if args.json_output:
        print(json.dumps(asdict(report), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(report)

    if report.status == "no_workspace":
        print(
            "ERROR: " + i18n.t("cli.errors.no_workspace", path=report.workspace_root),
            file=sys.stderr,
        )
        return EXIT_NO_WORKSPACE
    return EXIT_OK if report.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None overrides for known keys into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    out = dict(base)
    for k in get_default_config():
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(report: SyncReport) -> None:
    """Print the run report as aligned label/value lines."""
    print(i18n.t("cli.status.report_title"))
    print(f"Status: {report.status}")
    if report.workspace_root:
        print(f"Workspace: {report.workspace_root}")

    rows = [
        ("Files indexed", report.files_indexed),
        ("Directories indexed", report.directories_indexed),
        ("Requests sent", report.requests_sent),
        ("Accepted", report.accepted),
        ("Unsupported by server", report.unsupported),
        ("Failed", report.failed),
        ("Skipped (type)", report.skipped),
        ("Scan errors", report.scan_errors),
    ]
    for label, value in rows:
        if value:
            print(f"  {label}: {value}")


if __name__ == "__main__":
    sys.exit(main())
