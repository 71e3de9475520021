'''Assignment of residual seats that remain after the full seats.

Full seats leave some seats unassigned; these residual seats are assigned
one by one. Councils with at least
:data:`~apportionlib.evaluate.core.LARGE_COUNCIL_THRESHOLD` seats use the
highest averages method throughout. Smaller councils first give one seat per
list by largest remainder to the lists whose votes reach three quarters of
the quota, then one seat per list by highest average (*unique* highest
averages) and only then any list may get more seats by highest average.

Every seat assigned is recorded as a :class:`SeatChangeStep` holding the
standings before the assignment, so that the whole procedure can be reported.
'''

from __future__ import annotations

import dataclasses
import logging
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from apportionlib.candidate import ListNumber
from apportionlib.evaluate.core import (
    LARGE_COUNCIL_THRESHOLD, REMAINDER_THRESHOLD,
    AllListsExhausted, DrawingOfLotsNotImplemented, list_numbers,
)
from apportionlib.fraction import integer_part
from apportionlib.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ListStanding:
    '''The seats of a single list at some point of the seat assignment.

    :param list_number: The list this standing belongs to.
    :param votes_cast: Votes cast for the list.
    :param remainder_votes: Votes left after subtracting the quota for every
        full seat (computed once, after the full seats are assigned).
    :param meets_remainder_threshold: Whether the list may take part in the
        largest remainder assignment.
    :param next_votes_per_seat: The average number of votes per seat the list
        would have if it got one more seat.
    :param full_seats: Full seats held by the list.
    :param residual_seats: Residual seats held by the list.
    '''
    list_number: ListNumber
    votes_cast: int
    remainder_votes: Fraction
    meets_remainder_threshold: bool
    next_votes_per_seat: Fraction
    full_seats: int
    residual_seats: int = 0

    @classmethod
    def initial(cls,
                list_number: ListNumber,
                votes_cast: int,
                quota: Fraction,
                remainder_threshold: Fraction = REMAINDER_THRESHOLD,
                ) -> ListStanding:
        '''Compute the standing of a list after the full seats are assigned.'''
        full_seats = integer_part(votes_cast / quota) if votes_cast > 0 else 0
        logger.debug('list %s has %d full seats with %d votes',
                     list_number, full_seats, votes_cast)
        return cls(
            list_number=list_number,
            votes_cast=votes_cast,
            remainder_votes=votes_cast - full_seats * quota,
            meets_remainder_threshold=votes_cast >= quota * remainder_threshold,
            next_votes_per_seat=Fraction(votes_cast, full_seats + 1),
            full_seats=full_seats,
        )

    @property
    def total_seats(self) -> int:
        return self.full_seats + self.residual_seats

    def with_seats(self, full_seats: int, residual_seats: int) -> ListStanding:
        '''Return the standing with a changed number of seats.'''
        return dataclasses.replace(
            self,
            full_seats=full_seats,
            residual_seats=residual_seats,
            next_votes_per_seat=Fraction(
                self.votes_cast, full_seats + residual_seats + 1
            ),
        )

    def add_residual_seat(self) -> ListStanding:
        return self.with_seats(self.full_seats, self.residual_seats + 1)


@dataclasses.dataclass(frozen=True)
class _AverageAssignment:
    selected_list_number: ListNumber
    list_options: Tuple[ListNumber, ...]
    list_assigned: Tuple[ListNumber, ...]
    list_exhausted: Tuple[ListNumber, ...]
    votes_per_seat: Fraction

    @property
    def list_number_assigned(self) -> ListNumber:
        return self.selected_list_number


@simple_serialization
@dataclasses.dataclass(frozen=True)
class HighestAverageAssignment(_AverageAssignment):
    '''A residual seat assigned by highest average.

    :param selected_list_number: The list that got the seat.
    :param list_options: All lists sharing the highest average.
    :param list_assigned: Lists with this average that got a seat in this and
        the directly preceding steps.
    :param list_exhausted: Lists left out because they ran out of candidates.
    :param votes_per_seat: The highest average.
    '''


@simple_serialization
@dataclasses.dataclass(frozen=True)
class UniqueHighestAverageAssignment(_AverageAssignment):
    '''A residual seat assigned by highest average to a list that got no
    seat by highest average yet (councils below the large council threshold).
    '''


@simple_serialization
@dataclasses.dataclass(frozen=True)
class LargestRemainderAssignment:
    '''A residual seat assigned by largest remainder.

    :param selected_list_number: The list that got the seat.
    :param list_options: All lists sharing the largest remainder.
    :param list_assigned: Lists with this remainder that got a seat in this
        and the directly preceding steps.
    :param remainder_votes: The largest remainder.
    '''
    selected_list_number: ListNumber
    list_options: Tuple[ListNumber, ...]
    list_assigned: Tuple[ListNumber, ...]
    remainder_votes: Fraction

    @property
    def list_number_assigned(self) -> ListNumber:
        return self.selected_list_number


@simple_serialization
@dataclasses.dataclass(frozen=True)
class AbsoluteMajorityReassignment:
    '''The last residual seat moved to a list with an absolute majority of
    votes but no absolute majority of seats (Kieswet article P 9).
    '''
    list_retracted_seat: ListNumber
    list_assigned_seat: ListNumber

    @property
    def list_number_assigned(self) -> ListNumber:
        return self.list_assigned_seat

    @property
    def list_number_retracted(self) -> ListNumber:
        return self.list_retracted_seat


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ListExhaustionRemoval:
    '''A seat taken from a list with more seats than candidates, to be
    assigned to another list (Kieswet article P 10).

    :param list_retracted_seat: The exhausted list.
    :param full_seat: Whether the seat taken was a full seat.
    '''
    list_retracted_seat: ListNumber
    full_seat: bool

    @property
    def list_number_retracted(self) -> ListNumber:
        return self.list_retracted_seat


AssignmentChange = Union[
    HighestAverageAssignment,
    UniqueHighestAverageAssignment,
    LargestRemainderAssignment,
]
SeatChange = Union[
    AssignmentChange,
    AbsoluteMajorityReassignment,
    ListExhaustionRemoval,
]


@simple_serialization
@dataclasses.dataclass(frozen=True)
class SeatChangeStep:
    '''A single change to the seat assignment and the standings it acted on.

    :param residual_seat_number: Order of the residual seat assigned, or None
        for reassignments and removals.
    :param change: What changed.
    :param standings: For assignments, the standings before the seat was
        assigned; for reassignments and removals, the standings after.
    '''
    residual_seat_number: Optional[int]
    change: SeatChange
    standings: Tuple[ListStanding, ...]


def assign_residual_seats(standings: Sequence[ListStanding],
                          n_seats: int,
                          total_residual_seats: int,
                          residual_seat_number: int = 0,
                          previous_steps: Sequence[SeatChangeStep] = (),
                          candidate_counts: Optional[Dict[int, int]] = None,
                          large_council_threshold: int = LARGE_COUNCIL_THRESHOLD,
                          ) -> Tuple[List[SeatChangeStep], List[ListStanding]]:
    '''Assign residual seats one by one.

    :param standings: Standings of all lists before the assignment.
    :param n_seats: Total number of seats in the council; determines the
        assignment method.
    :param total_residual_seats: Number the last residual seat assigned will
        have.
    :param residual_seat_number: Number of residual seats assigned so far.
    :param previous_steps: Steps recorded so far; they determine which lists
        still qualify for the one-seat-per-list methods.
    :param candidate_counts: Number of candidates per list number. If given,
        lists holding as many seats as they have candidates are skipped.
    :param large_council_threshold: Minimum number of seats for assigning
        by highest averages only.
    :returns: All steps (including the previous ones) and the new standings.
    :raises DrawingOfLotsNotImplemented: If more lists are tied for the best
        value than there are seats left to assign.
    :raises AllListsExhausted: If no list can take another seat.
    '''
    steps = list(previous_steps)
    current = list(standings)
    while residual_seat_number < total_residual_seats:
        seats_left = total_residual_seats - residual_seat_number
        residual_seat_number += 1
        exhausted = (
            exhausted_list_numbers(current, candidate_counts)
            if candidate_counts is not None else []
        )
        if n_seats >= large_council_threshold:
            logger.debug('assigning residual seat by highest averages')
            change = _assign_by_highest_average(
                current, seats_left, steps, exhausted, unique=False
            )
        else:
            change = _assign_by_largest_remainder(
                current, seats_left, steps, exhausted
            )
        steps.append(SeatChangeStep(
            residual_seat_number=residual_seat_number,
            change=change,
            standings=tuple(current),
        ))
        logger.info('residual seat %d assigned to list %s',
                    residual_seat_number, change.list_number_assigned)
        current = [
            s.add_residual_seat()
            if s.list_number == change.list_number_assigned else s
            for s in current
        ]
    return steps, current


def exhausted_list_numbers(standings: Sequence[ListStanding],
                           candidate_counts: Dict[int, int],
                           ) -> List[ListNumber]:
    '''Return the lists that have no candidates left for another seat.'''
    return [
        s.list_number for s in standings
        if candidate_counts[s.list_number] <= s.total_seats
    ]


def _assign_by_highest_average(standings: Sequence[ListStanding],
                               seats_left: int,
                               previous_steps: Sequence[SeatChangeStep],
                               exhausted: Sequence[ListNumber],
                               unique: bool,
                               ) -> AssignmentChange:
    qualifying = [s for s in standings if s.list_number not in exhausted]
    if not qualifying:
        logger.info('seat cannot be (re)assigned, all lists are exhausted')
        raise AllListsExhausted()
    selected_lists = _best_lists(
        qualifying, seats_left, lambda s: s.next_votes_per_seat, 'votes per seat'
    )
    selected = selected_lists[0]
    change_type = (
        UniqueHighestAverageAssignment if unique else HighestAverageAssignment
    )
    return change_type(
        selected_list_number=selected.list_number,
        list_options=tuple(list_numbers(selected_lists)),
        list_assigned=_list_assigned(selected, previous_steps, change_type),
        list_exhausted=tuple(exhausted),
        votes_per_seat=selected.next_votes_per_seat,
    )


def _assign_by_largest_remainder(standings: Sequence[ListStanding],
                                 seats_left: int,
                                 previous_steps: Sequence[SeatChangeStep],
                                 exhausted: Sequence[ListNumber],
                                 ) -> AssignmentChange:
    qualifying_remainder = [
        s for s in standings
        if s.meets_remainder_threshold
        and s.list_number not in exhausted
        and _qualifies_for_extra_seat(s.list_number, previous_steps, False)
    ]
    if qualifying_remainder:
        logger.debug('assigning residual seat by largest remainders')
        selected_lists = _best_lists(
            qualifying_remainder, seats_left,
            lambda s: s.remainder_votes, 'remainder votes'
        )
        selected = selected_lists[0]
        return LargestRemainderAssignment(
            selected_list_number=selected.list_number,
            list_options=tuple(list_numbers(selected_lists)),
            list_assigned=_list_assigned(
                selected, previous_steps, LargestRemainderAssignment
            ),
            remainder_votes=selected.remainder_votes,
        )
    # every list that qualified got its largest remainder seat, now every list
    # gets at most one seat by highest average before any gets a second one
    qualifying_unique = [
        s for s in standings
        if s.list_number not in exhausted
        and _qualifies_for_extra_seat(s.list_number, previous_steps, True)
    ]
    if qualifying_unique:
        logger.debug('assigning residual seat by unique highest averages')
        return _assign_by_highest_average(
            qualifying_unique, seats_left, previous_steps, exhausted,
            unique=True
        )
    logger.debug('assigning residual seat by highest averages')
    return _assign_by_highest_average(
        standings, seats_left, previous_steps, exhausted, unique=False
    )


def _best_lists(standings: Sequence[ListStanding],
                seats_left: int,
                value: Callable[[ListStanding], Fraction],
                value_name: str,
                ) -> List[ListStanding]:
    '''Return the lists sharing the largest value, in input order.'''
    best_value = max(value(s) for s in standings)
    best = [s for s in standings if value(s) == best_value]
    logger.debug('found %s %s as the maximum for lists %s',
                 best_value, value_name, list_numbers(best))
    if len(best) > seats_left:
        logger.info('drawing of lots is required for lists %s,'
                    ' only %d seat(s) available',
                    list_numbers(best), seats_left)
        raise DrawingOfLotsNotImplemented(list_numbers(best), seats_left)
    return best


def _list_assigned(selected: ListStanding,
                   previous_steps: Sequence[SeatChangeStep],
                   change_type: type,
                   ) -> Tuple[ListNumber, ...]:
    '''Return the lists with the selected value that got a seat in a row.

    When the preceding step assigned a seat of the same kind to a list tied
    with the selected one, the selected list continues that group.
    '''
    assigned: List[ListNumber] = []
    if previous_steps:
        prev_change = previous_steps[-1].change
        if (type(prev_change) is change_type
                and selected.list_number in prev_change.list_options):
            assigned.extend(prev_change.list_assigned)
    assigned.append(selected.list_number)
    return tuple(assigned)


def _count_assignments(previous_steps: Sequence[SeatChangeStep],
                       list_number: ListNumber,
                       change_type: type,
                       ) -> int:
    return sum(
        1 for step in previous_steps
        if type(step.change) is change_type
        and step.change.list_number_assigned == list_number
    )


def _qualifies_for_extra_seat(list_number: ListNumber,
                              previous_steps: Sequence[SeatChangeStep],
                              unique: bool,
                              ) -> bool:
    '''Check whether a list may get a one-seat-per-list residual seat.

    A list that lost its residual seat to an absolute majority may get one
    more.
    '''
    n_remainder = _count_assignments(
        previous_steps, list_number, LargestRemainderAssignment
    )
    has_retracted_seat = any(
        isinstance(step.change, AbsoluteMajorityReassignment)
        and step.change.list_number_retracted == list_number
        for step in previous_steps
    )
    if not unique:
        return n_remainder == 0 or (has_retracted_seat and n_remainder == 1)
    n_unique = _count_assignments(
        previous_steps, list_number, UniqueHighestAverageAssignment
    )
    return n_unique == 0 or (
        has_retracted_seat and n_unique == 1 and n_remainder <= 1
    )
