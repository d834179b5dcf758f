"""
schedsim.py


Tick-driven simulation of a single CPU and a single IO device under four
scheduling disciplines:
- shortest-job-first (sjf, non-preemptive)
- shortest-remaining-time-first (srtf, preemptive)
- round-robin (rr)
- variable-round-robin (vrr, IO-bound processes resume their quantum)


Usage:
python schedsim.py [DISCIPLINE ...] [-w procs.proc] [-q QUANTUM] [-c sysconfig.txt]


Each workload line reads name;arrival;cpu_burst;io_burst_duration;io_burst_rate.
Every selected discipline is simulated independently on the same workload;
with no discipline given, shortest-job-first is used.
"""


import argparse
import sys
from typing import List, Optional, Sequence

from schedcore.device import DEFAULT_TIME_QUANTUM, run_disciplines
from schedcore.errors import ConfigurationError
from schedcore.scheduler import Discipline
from schedio.parser import DEFAULT_DELIMITER, SysConfig, parse_sysconfig, parse_workload
from schedio.report import print_report


DEFAULT_WORKLOAD = 'procs.proc'


def discipline_arg(token: str) -> Discipline:
    try:
        return Discipline.from_token(token)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='schedsim (tick-driven CPU/IO scheduling simulator)')
    parser.add_argument('disciplines', nargs='*', type=discipline_arg, metavar='DISCIPLINE',
                        help='sjf, srtf, rr, vrr or their long names (default: shortest-job-first)')
    parser.add_argument('-w', '--workload', default=DEFAULT_WORKLOAD, help='Path to the workload file')
    parser.add_argument('-c', '--sysconfig', help='Path to a sysconfig file (timequantum, delimiter)')
    parser.add_argument('-q', '--quantum', type=int, help=f'Time quantum in ticks (default {DEFAULT_TIME_QUANTUM})')
    parser.add_argument('-d', '--delimiter', help=f"Workload field delimiter (default '{DEFAULT_DELIMITER}')")
    parser.add_argument('--no-trace', action='store_true', help='Print only the per-run report, not the tick trace')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print engine scheduling decisions')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    # disciplines may appear before, between or after the options
    args = build_parser().parse_intermixed_args(argv)
    disciplines: List[Discipline] = args.disciplines or [Discipline.SJF]

    try:
        sysconfig = parse_sysconfig(args.sysconfig) if args.sysconfig else SysConfig()
        quantum = args.quantum if args.quantum is not None else (sysconfig.time_quantum or DEFAULT_TIME_QUANTUM)
        if args.delimiter is not None:
            delimiter = args.delimiter
        else:
            delimiter = sysconfig.delimiter or DEFAULT_DELIMITER
        workload = parse_workload(args.workload, delimiter=delimiter)
        results = run_disciplines(workload, disciplines, time_quantum=quantum, verbose=args.verbose)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for i, result in enumerate(results):
        if i:
            print()
        print_report(result, show_trace=not args.no_trace)
    return 0


# ------------------------------- CLI ---------------------------------
if __name__ == '__main__':
    sys.exit(main())
