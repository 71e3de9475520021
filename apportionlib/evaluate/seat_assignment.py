'''Assignment of council seats to candidate lists (Kieswet articles P 5 - P 10).

Seats are assigned in the following stages:

1.  The electoral quota is the number of valid votes divided by the number of
    seats (P 5).
2.  Each list gets one full seat for every whole quota of its votes (P 6).
3.  The seats that remain are assigned as residual seats, see
    :mod:`apportionlib.evaluate.residual` (P 7 and P 8).
4.  A list with an absolute majority of the votes but without an absolute
    majority of the seats gets the last residual seat (P 9).
5.  Lists with more seats than candidates lose the excess seats, which are
    assigned again among the other lists (P 10).

All of the arithmetic is exact, and a tie that would need a drawing of lots is
reported as an error instead of being broken arbitrarily.
'''

from __future__ import annotations

import dataclasses
import logging
from fractions import Fraction
from typing import Any, Dict, List, Optional, Sequence, Tuple

from apportionlib.candidate import ListNumber, check_input
from apportionlib.evaluate.core import (
    LARGE_COUNCIL_THRESHOLD, REMAINDER_THRESHOLD,
    DrawingOfLotsNotImplemented, ZeroVotesCast,
)
from apportionlib.evaluate.residual import (
    AbsoluteMajorityReassignment, ListExhaustionRemoval, ListStanding,
    SeatChangeStep, assign_residual_seats,
)
from apportionlib.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ListSeatAssignment:
    '''The final seats of a single list.'''
    list_number: ListNumber
    votes_cast: int
    remainder_votes: Fraction
    meets_remainder_threshold: bool
    full_seats: int
    residual_seats: int
    total_seats: int

    @classmethod
    def from_standing(cls, standing: ListStanding) -> ListSeatAssignment:
        return cls(
            list_number=standing.list_number,
            votes_cast=standing.votes_cast,
            remainder_votes=standing.remainder_votes,
            meets_remainder_threshold=standing.meets_remainder_threshold,
            full_seats=standing.full_seats,
            residual_seats=standing.residual_seats,
            total_seats=standing.total_seats,
        )


@simple_serialization
@dataclasses.dataclass(frozen=True)
class SeatAssignmentResult:
    '''The outcome of the seat assignment with all its intermediate steps.

    :param seats: Number of seats in the council.
    :param full_seats: Number of full seats in the final assignment.
    :param residual_seats: Number of residual seats in the final assignment.
    :param quota: The electoral quota.
    :param steps: Every residual seat assignment, reassignment and removal,
        in the order they happened.
    :param final_standing: Final seats per list, in input order.
    '''
    seats: int
    full_seats: int
    residual_seats: int
    quota: Fraction
    steps: Tuple[SeatChangeStep, ...]
    final_standing: Tuple[ListSeatAssignment, ...]

    def __post_init__(self):
        object.__setattr__(self, 'steps', tuple(self.steps))
        object.__setattr__(self, 'final_standing', tuple(self.final_standing))

    @property
    def seats_per_list(self) -> Dict[ListNumber, int]:
        '''Total seats per list number, in input order.'''
        return {
            standing.list_number: standing.total_seats
            for standing in self.final_standing
        }


@simple_serialization
class SeatAssignment:
    '''Assign the seats of a municipal council to candidate lists.

    :param large_council_threshold: Minimum number of seats for which the
        residual seats are assigned by highest averages only.
    :param remainder_threshold: Share of the quota a list needs in votes to
        take part in the assignment by largest remainders.
    '''
    def __init__(self,
                 large_council_threshold: int = LARGE_COUNCIL_THRESHOLD,
                 remainder_threshold: Fraction = REMAINDER_THRESHOLD,
                 ):
        self.large_council_threshold = large_council_threshold
        self.remainder_threshold = remainder_threshold

    def evaluate(self,
                 number_of_seats: int,
                 total_votes: int,
                 list_votes: Sequence[Any],
                 ) -> SeatAssignmentResult:
        '''Assign the seats.

        :param number_of_seats: Number of seats in the council.
        :param total_votes: Total number of valid votes.
        :param list_votes: Votes per list, each providing ``number``,
            ``total_votes`` and ``candidate_votes``.
        :raises ZeroVotesCast: If no votes were cast.
        :raises DrawingOfLotsNotImplemented: If lists are tied for a seat.
        :raises AllListsExhausted: If the seats cannot be filled because the
            lists have too few candidates.
        '''
        list_votes = list(list_votes)
        check_input(number_of_seats, total_votes, list_votes)
        logger.info('assigning %d seats', number_of_seats)
        if total_votes == 0:
            logger.info('no votes on candidates cast')
            raise ZeroVotesCast()
        quota = Fraction(total_votes, number_of_seats)
        logger.info('quota: %s', quota)
        standings = [
            ListStanding.initial(
                lv.number, lv.total_votes, quota, self.remainder_threshold
            )
            for lv in list_votes
        ]
        n_residual = number_of_seats - sum(s.full_seats for s in standings)
        steps: List[SeatChangeStep] = []
        if n_residual > 0:
            steps, standings = assign_residual_seats(
                standings, number_of_seats, n_residual,
                large_council_threshold=self.large_council_threshold,
            )
        else:
            logger.info('all seats have been assigned without residual seats')
        if steps:
            standings, reassignment = self._reassign_for_absolute_majority(
                number_of_seats, total_votes, list_votes,
                steps[-1].change.list_assigned, standings,
            )
            if reassignment is not None:
                steps.append(SeatChangeStep(
                    residual_seat_number=None,
                    change=reassignment,
                    standings=tuple(standings),
                ))
        steps, standings = self._reassign_for_exhausted_lists(
            standings, number_of_seats, list_votes, n_residual, steps
        )
        final_full_seats = sum(s.full_seats for s in standings)
        return SeatAssignmentResult(
            seats=number_of_seats,
            full_seats=final_full_seats,
            residual_seats=number_of_seats - final_full_seats,
            quota=quota,
            steps=steps,
            final_standing=[
                ListSeatAssignment.from_standing(s) for s in standings
            ],
        )

    def _reassign_for_absolute_majority(self,
                                        number_of_seats: int,
                                        total_votes: int,
                                        list_votes: Sequence[Any],
                                        last_assigned: Sequence[ListNumber],
                                        standings: List[ListStanding],
                                        ) -> Tuple[
                                            List[ListStanding],
                                            Optional[AbsoluteMajorityReassignment]
                                        ]:
        '''Give the last residual seat to a list with a majority of votes.

        The seat is retracted from the list that got it; if that seat went
        to one of several tied lists, it is unclear which one should lose it.
        '''
        majority_list = next((
            lv for lv in list_votes if 2 * lv.total_votes > total_votes
        ), None)
        if majority_list is None:
            return standings, None
        majority_standing = next(
            s for s in standings if s.list_number == majority_list.number
        )
        if 2 * majority_standing.total_seats > number_of_seats:
            return standings, None
        if len(last_assigned) > 1:
            logger.info('drawing of lots is required for lists %s to pick'
                        ' a list which the residual seat gets retracted from',
                        list(last_assigned))
            raise DrawingOfLotsNotImplemented(last_assigned, 1)
        retracted_from = last_assigned[0]
        new_standings = []
        for s in standings:
            if s.list_number == retracted_from:
                s = s.with_seats(s.full_seats, s.residual_seats - 1)
            if s.list_number == majority_list.number:
                s = s.add_residual_seat()
            new_standings.append(s)
        logger.info('seat first assigned to list %s has been reassigned to'
                    ' list %s in accordance with article P 9 Kieswet',
                    retracted_from, majority_list.number)
        return new_standings, AbsoluteMajorityReassignment(
            list_retracted_seat=retracted_from,
            list_assigned_seat=majority_list.number,
        )

    def _reassign_for_exhausted_lists(self,
                                      standings: List[ListStanding],
                                      number_of_seats: int,
                                      list_votes: Sequence[Any],
                                      n_residual: int,
                                      steps: List[SeatChangeStep],
                                      ) -> Tuple[
                                          List[SeatChangeStep],
                                          List[ListStanding]
                                      ]:
        '''Move the seats a list has no candidates for to other lists.'''
        candidate_counts = {
            lv.number: len(lv.candidate_votes) for lv in list_votes
        }
        excess = {
            s.list_number: s.total_seats - candidate_counts[s.list_number]
            for s in standings
            if s.total_seats > candidate_counts[s.list_number]
        }
        if not excess:
            return steps, standings
        steps = list(steps)
        current = list(standings)
        for list_number, n_excess in excess.items():
            for _ in range(n_excess):
                i = next(
                    i for i, s in enumerate(current)
                    if s.list_number == list_number
                )
                standing = current[i]
                full_seat = standing.residual_seats == 0
                if full_seat:
                    current[i] = standing.with_seats(
                        standing.full_seats - 1, standing.residual_seats
                    )
                else:
                    current[i] = standing.with_seats(
                        standing.full_seats, standing.residual_seats - 1
                    )
                logger.info('seat first assigned to list %s has been removed'
                            ' and will be assigned to another list in'
                            ' accordance with article P 10 Kieswet',
                            list_number)
                steps.append(SeatChangeStep(
                    residual_seat_number=None,
                    change=ListExhaustionRemoval(
                        list_retracted_seat=list_number,
                        full_seat=full_seat,
                    ),
                    standings=tuple(current),
                ))
        return assign_residual_seats(
            current,
            number_of_seats,
            n_residual + sum(excess.values()),
            residual_seat_number=n_residual,
            previous_steps=steps,
            candidate_counts=candidate_counts,
            large_council_threshold=self.large_council_threshold,
        )


def compute_seat_assignment(number_of_seats: int,
                            total_votes: int,
                            list_votes: Sequence[Any],
                            ) -> SeatAssignmentResult:
    '''Assign seats with the statutory parameters.

    A shortcut for ``SeatAssignment().evaluate(...)``.
    '''
    return SeatAssignment().evaluate(number_of_seats, total_votes, list_votes)
