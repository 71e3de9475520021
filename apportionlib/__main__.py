"""A commandline tool to apportion the seats of a municipal council.

Reads a vote count snapshot in the JSON format of :mod:`apportionlib.io.count`
and shows the seats per list with the residual seat assignment steps and the
candidates elected on each list.
"""

import argparse
import io
import json
import logging
import sys
from typing import List, Optional

import apportionlib.io.count
import apportionlib.persist
from apportionlib.candidate import ElectionCount
from apportionlib.evaluate.core import ApportionmentError
from apportionlib.evaluate.nomination import (
    CandidateNomination, CandidateNominationResult,
)
from apportionlib.evaluate.residual import (
    AbsoluteMajorityReassignment, HighestAverageAssignment,
    LargestRemainderAssignment, ListExhaustionRemoval,
    UniqueHighestAverageAssignment,
)
from apportionlib.evaluate.seat_assignment import SeatAssignmentResult
from apportionlib.fraction import DisplayFraction
from apportionlib.io.core import ParseError
from apportionlib.system import Apportionment

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the vote count from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the vote count from standard input',
)
argparser.add_argument(
    '-n', '--n-seats',
    type=int,
    help=(
        'apportion this many seats (overrides the number given in the vote'
        ' count file)'
    ),
)
argparser.add_argument(
    '-p', '--preference-percentage',
    type=int,
    default=25,
    help=(
        'percentage of the quota a candidate needs in personal votes to be'
        ' elected by preference'
    ),
)
argparser.add_argument(
    '-j', '--json',
    action='store_true',
    dest='as_json',
    help='print the complete result as JSON',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all evaluator log messages and other info',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any evaluator log messages or other info',
)

STEP_DESCRIPTIONS = {
    LargestRemainderAssignment: 'largest remainder',
    UniqueHighestAverageAssignment: 'unique highest average',
    HighestAverageAssignment: 'highest average',
    AbsoluteMajorityReassignment: 'absolute majority reassignment',
    ListExhaustionRemoval: 'list exhaustion removal',
}


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         n_seats: Optional[int] = None,
         preference_percentage: int = 25,
         as_json: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> int:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    try:
        count = apportionlib.io.count.load(input_file)
    except ParseError as e:
        print(f'Invalid vote count: {e}', file=sys.stderr)
        return 1
    try:
        nomination = CandidateNomination(preference_percentage)
    except ValueError as e:
        print(f'Invalid preference percentage: {e}', file=sys.stderr)
        return 1
    if n_seats is not None:
        count = ElectionCount(
            number_of_seats=n_seats,
            list_votes=count.list_votes,
            total_votes=count.total_votes,
        )
    evaluator = Apportionment(candidate_nomination=nomination)
    try:
        result = evaluator.evaluate(count)
    except ApportionmentError as e:
        print(f'Apportionment failed: {e}', file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f'Invalid vote count: {e}', file=sys.stderr)
        return 1
    if as_json:
        print(json.dumps(apportionlib.persist.to_dict(result), indent=2))
    else:
        show_seat_assignment(result.seat_assignment)
        print()
        show_candidate_nomination(result.candidate_nomination)
    return 0


def show_seat_assignment(result: SeatAssignmentResult) -> None:
    """Show the seats per list and how the residual seats were assigned."""
    print(f'Apportioning {result.seats} seats')
    print(f'Quota: {DisplayFraction(result.quota)}')
    print(f'Full seats: {result.full_seats},'
          f' residual seats: {result.residual_seats}')
    print()
    print('Seats per list:')
    left_col = [f'List {standing.list_number}'
                for standing in result.final_standing]
    n_just_chars = len(max(left_col, key=len)) if left_col else 0
    for left, standing in zip(left_col, result.final_standing):
        print(
            left.ljust(n_just_chars), ' ',
            f'{standing.total_seats}'
            f' ({standing.full_seats} full, {standing.residual_seats} residual)'
        )
    if result.steps:
        print()
        print('Residual seat steps:')
        for step in result.steps:
            print(' ' * 4 + describe_step(step))


def describe_step(step) -> str:
    change = step.change
    description = STEP_DESCRIPTIONS[type(change)]
    if isinstance(change, AbsoluteMajorityReassignment):
        return (f'{description}: seat of list {change.list_retracted_seat}'
                f' goes to list {change.list_assigned_seat}')
    elif isinstance(change, ListExhaustionRemoval):
        kind = 'full' if change.full_seat else 'residual'
        return (f'{description}: {kind} seat of list'
                f' {change.list_retracted_seat} removed')
    elif isinstance(change, LargestRemainderAssignment):
        value = f'remainder {DisplayFraction(change.remainder_votes)}'
    else:
        value = f'average {DisplayFraction(change.votes_per_seat)}'
    return (f'{step.residual_seat_number}. {description}:'
            f' list {change.selected_list_number} ({value})')


def show_candidate_nomination(result: CandidateNominationResult) -> None:
    """Show the candidates elected on each list."""
    threshold = result.preference_threshold
    print(f'Preference threshold: {DisplayFraction(threshold.number_of_votes)}'
          f' votes ({threshold.percentage}% of quota)')
    for nomination in result.per_list:
        print()
        print(f'List {nomination.list_number}: {nomination.list_seats} seats')
        if nomination.preferential_candidates:
            print(' ' * 4 + 'by preference: ' + ', '.join(
                str(cand.candidate_number)
                for cand in nomination.preferential_candidates
            ))
        if nomination.remainder_candidates:
            print(' ' * 4 + 'by ranking: ' + ', '.join(
                str(cand.candidate_number)
                for cand in nomination.remainder_candidates
            ))


def cli(argv: Optional[List[str]] = None) -> int:
    args = argparser.parse_args(argv)
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
        return 2
    return main(**vars(args))


if __name__ == '__main__':
    sys.exit(cli())
