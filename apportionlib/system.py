'''The complete apportionment of an election: seats first, then candidates.'''

import dataclasses
import logging
from typing import Any, Optional

from apportionlib.evaluate.nomination import (
    CandidateNomination, CandidateNominationResult,
)
from apportionlib.evaluate.seat_assignment import (
    SeatAssignment, SeatAssignmentResult,
)
from apportionlib.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ApportionmentResult:
    seat_assignment: SeatAssignmentResult
    candidate_nomination: CandidateNominationResult


@simple_serialization
class Apportionment:
    '''Apportion the seats of a council and nominate the candidates.

    Both stages run on the same vote count snapshot. The computation is pure
    and holds no state between calls; callers inside an event loop should run
    it in a worker thread.

    :param seat_assignment: The seat assignment evaluator. Statutory one
        by default.
    :param candidate_nomination: The candidate nomination evaluator. Statutory
        one by default.
    '''
    def __init__(self,
                 seat_assignment: Optional[SeatAssignment] = None,
                 candidate_nomination: Optional[CandidateNomination] = None,
                 ):
        if seat_assignment is None:
            seat_assignment = SeatAssignment()
        if candidate_nomination is None:
            candidate_nomination = CandidateNomination()
        self.seat_assignment = seat_assignment
        self.candidate_nomination = candidate_nomination

    def evaluate(self, data: Any) -> ApportionmentResult:
        '''Apportion the seats for the given vote count.

        :param data: The vote count, providing ``number_of_seats``,
            ``total_votes`` and ``list_votes``.
        :raises ApportionmentError: A subclass of it if the apportionment
            cannot be completed; no partial result is returned.
        '''
        list_votes = list(data.list_votes)
        seats = self.seat_assignment.evaluate(
            data.number_of_seats, data.total_votes, list_votes
        )
        logger.info('seats per list: %s', seats.seats_per_list)
        candidates = self.candidate_nomination.evaluate(
            list_votes, seats.quota, seats.seats_per_list
        )
        return ApportionmentResult(
            seat_assignment=seats,
            candidate_nomination=candidates,
        )


def apportion(data: Any) -> ApportionmentResult:
    '''Apportion the seats with the statutory procedure.'''
    return Apportionment().evaluate(data)
