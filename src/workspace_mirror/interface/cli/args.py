from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

from workspace_mirror.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the workspace-mirror CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="workspace-mirror",
        description=i18n.t("app.description"),
    )

    # --- Workspace & Endpoint ---
    p.add_argument(
        "-w", "--workspace",
        dest="workspace_path",
        default=None,
        help=i18n.t("cli.args.workspace"),
    )
    p.add_argument(
        "-e", "--endpoint",
        dest="upload_endpoint",
        default=None,
        help=i18n.t("cli.args.endpoint"),
    )
    p.add_argument(
        "--timeout",
        dest="request_timeout",
        type=float,
        default=None,
        help=i18n.t("cli.args.timeout"),
    )

    # --- Exclusion Policy ---
    p.add_argument(
        "--exclude-folders",
        dest="excluded_folder_names",
        default=None,
        help=i18n.t("cli.args.exclude_folders"),
    )
    p.add_argument(
        "--exclude-ext",
        dest="excluded_file_extensions",
        default=None,
        help=i18n.t("cli.args.exclude_ext"),
    )
    p.add_argument(
        "--supported-ext",
        dest="supported_file_extensions",
        default=None,
        help=i18n.t("cli.args.supported_ext"),
    )

    # --- Execution Modes ---
    switch = p.add_mutually_exclusive_group()
    switch.add_argument("--disable", action="store_true", help=i18n.t("cli.args.disable"))
    switch.add_argument("--enable", action="store_true", help=i18n.t("cli.args.enable"))
    p.add_argument("--scan-only", action="store_true", help=i18n.t("cli.args.scan_only"))

    # --- Output & Diagnostics ---
    p.add_argument("--json", dest="json_output", action="store_true", help=i18n.t("cli.args.json"))
    p.add_argument("--use-defaults", action="store_true", help=i18n.t("cli.args.use_defaults"))
    p.add_argument("--dump-config", action="store_true", help=i18n.t("cli.args.dump_config"))
    p.add_argument("--save-config", action="store_true", help=i18n.t("cli.args.save_config"))
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))

    return p

# -----------------------------------------------------------------------------
# ARGUMENT TRANSLATION
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Map parsed arguments to configuration keys.

    Unset options map to None so the merge step keeps the base value.

    Args:
        args: Parsed argparse namespace.

    Returns:
        Dict[str, Any]: Configuration overrides.
    """
    return {
        "workspace_path": args.workspace_path,
        "upload_endpoint": args.upload_endpoint,
        "request_timeout": args.request_timeout,
        "excluded_folder_names": _split_csv(args.excluded_folder_names),
        "excluded_file_extensions": _split_csv(args.excluded_file_extensions),
        "supported_file_extensions": _split_csv(args.supported_file_extensions),
        "enabled": _feature_switch(args),
    }


def _feature_switch(args: argparse.Namespace) -> Optional[bool]:
    if args.disable:
        return False
    if args.enable:
        return True
    return None


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [x.strip() for x in value.split(",") if x.strip()]
