"""
CLI subcommand implementations for audition-match administration.

Subcommands::

    audition-match affiliations add EMAIL GROUP [--admin]
    audition-match affiliations list
    audition-match delay show
    audition-match delay set --baseline MS --range MS
    audition-match compers list
    audition-match feed [--group G]
    audition-match reset [--yes]
    audition-match serve [--host H] [--port P]
"""

import argparse
import logging
import sys
from pathlib import Path

from audition_platform.errors import MatchError
from audition_platform.models import Comper
from audition_platform.persistence import ComperStore, connect
from audition_platform.runtime.config import get_db_path, get_groups
from audition_platform.services import (
    add_affiliation,
    clear_decisions,
    format_update,
    get_delay_config,
    list_affiliations,
    list_update_feed,
    set_delay_config,
)


# ---------------------------------------------------------------------------
# Subcommand: affiliations
# ---------------------------------------------------------------------------

def cmd_affiliations(args):
    """Manage representative/group affiliations."""
    db_path = Path(args.db)

    if args.affiliations_action == 'add':
        try:
            affiliation = add_affiliation(db_path, args.email, args.group, args.admin)
        except MatchError as e:
            print(f"Error: {e.message}")
            sys.exit(1)
        suffix = " (admin)" if affiliation.is_admin else ""
        print(f"✓ {affiliation.email} now decides for {affiliation.group}{suffix}")

    elif args.affiliations_action == 'list':
        affiliations = list_affiliations(db_path)
        if not affiliations:
            print("No affiliations.")
            return
        for a in affiliations:
            flag = "  [admin]" if a.is_admin else ""
            print(f"  {a.group:<12} {a.email}{flag}")


# ---------------------------------------------------------------------------
# Subcommand: delay
# ---------------------------------------------------------------------------

def cmd_delay(args):
    """Show or set the announcement delay window."""
    db_path = Path(args.db)

    if args.delay_action == 'show':
        config = get_delay_config(db_path)
        if config is None:
            print("Delay not configured.")
            return
        print(f"Baseline: {config.baseline:g}ms")
        print(f"Range:    {config.range:g}ms")

    elif args.delay_action == 'set':
        try:
            config = set_delay_config(db_path, args.baseline, args.range)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"✓ Delay set: {config.baseline:g}ms + up to {config.range:g}ms")


# ---------------------------------------------------------------------------
# Subcommand: compers
# ---------------------------------------------------------------------------

def _print_comper(comper: Comper):
    resolution = comper.resolution()
    decisions = ", ".join(
        f"{group}={status}"
        for group, status in zip(comper.ranked_groups, comper.statuses)
    )
    print(f"  #{comper.id} {comper.preferred_name} <{comper.email}>")
    print(f"      {decisions}")
    outcome = resolution.group_for(comper.ranked_groups) or "-"
    print(f"      resolution: {resolution.state} ({outcome}), announcement: {comper.announcement}")


def cmd_compers(args):
    """List compers with their decisions and match state."""
    with connect(Path(args.db)) as conn:
        compers = [Comper.from_dict(c) for c in ComperStore.list_all(conn)]
    if not compers:
        print("No compers.")
        return
    for comper in compers:
        _print_comper(comper)


# ---------------------------------------------------------------------------
# Subcommand: feed
# ---------------------------------------------------------------------------

def cmd_feed(args):
    """Print the update feed, newest first."""
    entries = list_update_feed(Path(args.db), args.group)
    if not entries:
        print("No updates yet.")
        return
    for entry in entries:
        print(f"  [{entry.created_at}] {format_update(entry)}")


# ---------------------------------------------------------------------------
# Subcommand: reset
# ---------------------------------------------------------------------------

def cmd_reset(args):
    """Clear every decision and match, and purge the feed."""
    if not args.yes:
        try:
            confirm = input("Reset all decisions and updates? This cannot be undone. (y/N): ")
        except (EOFError, KeyboardInterrupt):
            return
        if confirm.strip().lower() not in ('y', 'yes'):
            print("Cancelled.")
            return
    result = clear_decisions(Path(args.db))
    print(f"✓ Reset {result['compers_reset']} comper(s), "
          f"deleted {result['updates_deleted']} update(s).")


# ---------------------------------------------------------------------------
# Subcommand: serve
# ---------------------------------------------------------------------------

def cmd_serve(args):
    import uvicorn

    uvicorn.run("web.app:app", host=args.host, port=args.port)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="audition-match",
        description="Administer a one-round audition matching process",
    )
    parser.add_argument(
        "--db", default=str(get_db_path()),
        help="Path to the auditions database (default: $AUDITIONS_DB_PATH or ./auditions.db)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable info logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- affiliations ---
    p_aff = subparsers.add_parser("affiliations", help="Manage group affiliations")
    sp_aff = p_aff.add_subparsers(dest="affiliations_action", required=True)

    sp_add = sp_aff.add_parser("add", help="Affiliate a representative with a group")
    sp_add.add_argument("email")
    sp_add.add_argument("group", choices=list(get_groups()))
    sp_add.add_argument("--admin", action="store_true", help="Grant admin rights")

    sp_aff.add_parser("list", help="List affiliations")

    # --- delay ---
    p_delay = subparsers.add_parser("delay", help="Manage the announcement delay")
    sp_delay = p_delay.add_subparsers(dest="delay_action", required=True)

    sp_delay.add_parser("show", help="Show the delay window")
    sp_set = sp_delay.add_parser("set", help="Set the delay window")
    sp_set.add_argument("--baseline", type=float, required=True, help="Minimum delay (ms)")
    sp_set.add_argument("--range", type=float, required=True, help="Random extra delay (ms)")

    # --- compers ---
    p_compers = subparsers.add_parser("compers", help="Inspect compers")
    sp_compers = p_compers.add_subparsers(dest="compers_action", required=True)
    sp_compers.add_parser("list", help="List compers and their match state")

    # --- feed ---
    p_feed = subparsers.add_parser("feed", help="Show the update feed")
    p_feed.add_argument("--group", help="Only entries for compers who ranked this group")

    # --- reset ---
    p_reset = subparsers.add_parser("reset", help="Clear all decisions and updates")
    p_reset.add_argument("--yes", action="store_true", help="Skip confirmation")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the web API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv=None):
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == 'affiliations':
        cmd_affiliations(args)
    elif args.command == 'delay':
        cmd_delay(args)
    elif args.command == 'compers':
        cmd_compers(args)
    elif args.command == 'feed':
        cmd_feed(args)
    elif args.command == 'reset':
        cmd_reset(args)
    elif args.command == 'serve':
        cmd_serve(args)
