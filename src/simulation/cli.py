"""CLI for running an elevator schedule and writing passenger/elevator reports."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .errors import LiftLogicError
from .loader import load_building_config, load_schedule
from .log import LoggerSink, configure_logging
from .reports import write_reports
from .simulation import ElevatorSystem


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("elevators", type=Path, help="Building file: 'floors elevators' then one max load per elevator")
    parser.add_argument("passengers", type=Path, help="Schedule file of 'id weight floor hh:mm target' records")
    parser.add_argument("passengers_output", type=Path, help="Where to write the per-passenger report")
    parser.add_argument("elevators_output", type=Path, help="Where to write the per-elevator report")
    parser.add_argument("--log-file", type=Path, help="Optional runtime log file")
    parser.add_argument("--quiet", action="store_true", help="Only print errors to the console")
    return parser


def run(args: argparse.Namespace) -> ElevatorSystem:
    log = LoggerSink(configure_logging(str(args.log_file) if args.log_file else None, args.quiet))
    try:
        config = load_building_config(args.elevators, log)
        passengers = load_schedule(args.passengers, config, log)
        system = ElevatorSystem.from_config(config, passengers, log=log)
        system.run()
        write_reports(system, args.passengers_output, args.elevators_output)
    except LiftLogicError as exc:
        log.error(str(exc))
        raise
    except OSError as exc:
        log.error(f"Failed to write reports: {exc}")
        raise
    return system


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as exc:
        # --help exits cleanly; a usage error counts as a configuration error.
        return 0 if exc.code == 0 else 1
    try:
        system = run(args)
    except (LiftLogicError, OSError):
        return 1

    delivered = len(system.delivered())
    if not args.quiet:
        print(f"Ticks: {system.current_time}")
        print(f"Passengers delivered: {delivered}/{len(system.passengers)}")
        print(f"Saved reports to {args.passengers_output} and {args.elevators_output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
