'''Nomination of the candidates who take the seats of their list.

Candidates whose personal votes reach the preference threshold (a quarter of
the quota by default) are elected first, in order of their votes, regardless
of their position on the list. The remaining seats of the list go to the other
candidates in ballot order. The updated ranking puts the candidates elected
by preference in front of everyone else, who stay in ballot order.
'''

import dataclasses
import logging
from fractions import Fraction
from typing import Any, Dict, List, Sequence, Tuple

from apportionlib.candidate import Candidate, CandidateNumber, ListNumber
from apportionlib.evaluate.core import (
    PREFERENCE_THRESHOLD_PERCENTAGE, AllListsExhausted,
)
from apportionlib.fraction import exact
from apportionlib.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class PreferenceThreshold:
    '''The personal votes a candidate needs to be elected by preference.

    :param percentage: Percentage of the quota.
    :param number_of_votes: The threshold in votes, exact.
    '''
    percentage: int
    number_of_votes: Fraction


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ListCandidateNomination:
    '''The candidates elected on a single list.

    :param list_number: The list.
    :param list_seats: Seats the list got in the seat assignment.
    :param preferential_candidates: Candidates elected by preference, by votes
        descending.
    :param remainder_candidates: Candidates elected in ballot order.
    :param updated_ranking: All candidate numbers of the list, the ones elected
        by preference first.
    '''
    list_number: ListNumber
    list_seats: int
    preferential_candidates: Tuple[Candidate, ...]
    remainder_candidates: Tuple[Candidate, ...]
    updated_ranking: Tuple[CandidateNumber, ...]

    def __post_init__(self):
        for name in (
            'preferential_candidates', 'remainder_candidates', 'updated_ranking'
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def elected(self) -> Tuple[Candidate, ...]:
        return self.preferential_candidates + self.remainder_candidates


@simple_serialization
@dataclasses.dataclass(frozen=True)
class CandidateNominationResult:
    preference_threshold: PreferenceThreshold
    chosen_candidates: Tuple[Candidate, ...]
    per_list: Tuple[ListCandidateNomination, ...]

    def __post_init__(self):
        object.__setattr__(
            self, 'chosen_candidates', tuple(self.chosen_candidates)
        )
        object.__setattr__(self, 'per_list', tuple(self.per_list))


@simple_serialization
class CandidateNomination:
    '''Nominate the elected candidates of each list.

    :param preference_percentage: Percentage of the quota a candidate needs
        in personal votes to be elected by preference.
    '''
    def __init__(self,
                 preference_percentage: int = PREFERENCE_THRESHOLD_PERCENTAGE,
                 ):
        if isinstance(preference_percentage, bool) or not isinstance(
            preference_percentage, int
        ) or preference_percentage <= 0:
            raise ValueError(
                f'invalid preference percentage: {preference_percentage!r}'
            )
        self.preference_percentage = preference_percentage

    def evaluate(self,
                 list_votes: Sequence[Any],
                 quota: Fraction,
                 seats_per_list: Dict[int, int],
                 ) -> CandidateNominationResult:
        '''Select the candidates filling the seats of each list.

        :param list_votes: Votes per list, each providing ``number`` and
            ``candidate_votes`` in ballot order.
        :param quota: The electoral quota of the seat assignment.
        :param seats_per_list: Seats per list number. Lists not present get
            no seats.
        :raises AllListsExhausted: If a list has fewer candidates than seats.
        :raises ValueError: If seats are given for a list number that has no
            votes.
        '''
        list_votes = list(list_votes)
        known = {lv.number for lv in list_votes}
        for list_number, n_seats in seats_per_list.items():
            if n_seats > 0 and list_number not in known:
                raise ValueError(
                    f'{n_seats} seats given for unknown list {list_number}'
                )
        threshold = PreferenceThreshold(
            percentage=self.preference_percentage,
            number_of_votes=exact(quota) * self.preference_percentage / 100,
        )
        logger.info('preference threshold: %s votes (%d%% of quota)',
                    threshold.number_of_votes, threshold.percentage)
        per_list = [
            self._nominate_list(
                lv, seats_per_list.get(lv.number, 0),
                threshold.number_of_votes
            )
            for lv in list_votes
        ]
        chosen: List[Candidate] = []
        for nomination in per_list:
            chosen.extend(nomination.elected)
        return CandidateNominationResult(
            preference_threshold=threshold,
            chosen_candidates=chosen,
            per_list=per_list,
        )

    def _nominate_list(self,
                       list_votes: Any,
                       n_seats: int,
                       threshold: Fraction,
                       ) -> ListCandidateNomination:
        list_number = list_votes.number
        ballot_order = sorted(list_votes.candidate_votes, key=lambda c: c.number)
        if len(ballot_order) < n_seats:
            logger.info('list %s has %d seats but only %d candidates',
                        list_number, n_seats, len(ballot_order))
            raise AllListsExhausted(list_number)
        preferential = sorted(
            (cand for cand in ballot_order if cand.votes >= threshold),
            key=lambda c: (-c.votes, c.number),
        )[:n_seats]
        preferential_numbers = [cand.number for cand in preferential]
        others = [
            cand.number for cand in ballot_order
            if cand.number not in preferential_numbers
        ]
        remainder_numbers = others[:n_seats - len(preferential_numbers)]
        logger.debug('list %s: elected by preference %s, by ranking %s',
                     list_number, preferential_numbers, remainder_numbers)
        return ListCandidateNomination(
            list_number=list_number,
            list_seats=n_seats,
            preferential_candidates=[
                Candidate(list_number, num) for num in preferential_numbers
            ],
            remainder_candidates=[
                Candidate(list_number, num) for num in remainder_numbers
            ],
            updated_ranking=preferential_numbers + others,
        )


def compute_candidate_nomination(list_votes: Sequence[Any],
                                 quota: Fraction,
                                 seats_per_list: Dict[int, int],
                                 ) -> CandidateNominationResult:
    '''Nominate candidates with the statutory preference threshold.'''
    return CandidateNomination().evaluate(list_votes, quota, seats_per_list)
