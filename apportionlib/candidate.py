'''Candidate lists, vote counts and the input capability of the engine.

The apportionment engine does not need its own copy of the vote counts. It
reads them through a narrow set of attributes (the *input capability*):

-   an election (:class:`ApportionmentInput`) exposes ``number_of_seats``,
    ``total_votes`` and ``list_votes``,
-   each list (:class:`ListVotesSource`) exposes ``number``, ``total_votes``
    and ``candidate_votes``,
-   each candidate (:class:`CandidateVotesSource`) exposes ``number`` and
    ``votes``.

Any object with these attributes qualifies - the abstract classes below
recognize such classes without them having to inherit from anything, so
a caller's persisted model can be passed in directly. The dataclasses
:class:`ListVotes`, :class:`CandidateVotes` and :class:`ElectionCount` are
ready-made implementations for callers without a model of their own.
'''

from __future__ import annotations

import abc
import dataclasses
from typing import Any, Iterable, List, NewType, Optional, Sequence, Tuple

from apportionlib.fraction import exact
from apportionlib.persist import simple_serialization


ListNumber = NewType('ListNumber', int)
CandidateNumber = NewType('CandidateNumber', int)


class _StructuralSource(metaclass=abc.ABCMeta):
    '''Recognize any class providing all the attributes in ``ATTRIBUTES``.'''

    ATTRIBUTES: Tuple[str, ...] = ()

    @classmethod
    def __subclasshook__(cls, subcl):
        if cls.ATTRIBUTES and all(
            any(attr in vars(klass) for klass in subcl.__mro__)
            or attr in getattr(subcl, '__dataclass_fields__', {})
            for attr in cls.ATTRIBUTES
        ):
            return True
        return NotImplemented


class CandidateVotesSource(_StructuralSource):
    '''Personal votes of one candidate: ``number`` and ``votes``.'''
    ATTRIBUTES = ('number', 'votes')


class ListVotesSource(_StructuralSource):
    '''Votes of one list: ``number``, ``total_votes``, ``candidate_votes``.

    The candidates are given in ballot order.
    '''
    ATTRIBUTES = ('number', 'total_votes', 'candidate_votes')


class ApportionmentInput(_StructuralSource):
    '''A vote count snapshot of an election ready for apportionment.

    Exposes ``number_of_seats``, ``total_votes`` and ``list_votes``.
    '''
    ATTRIBUTES = ('number_of_seats', 'total_votes', 'list_votes')


@simple_serialization
@dataclasses.dataclass(frozen=True)
class CandidateVotes:
    '''Personal (preference) votes cast for a single candidate.

    :param number: Position of the candidate on the list; defines the ballot
        order regardless of the votes.
    :param votes: Number of personal votes.
    '''
    number: CandidateNumber
    votes: int

    @property
    def candidate_number(self) -> CandidateNumber:
        return self.number


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ListVotes:
    '''Votes cast for a candidate list.

    :param number: List number.
    :param total_votes: Votes for the list in total. It is taken as given and
        not checked against the sum of candidate votes.
    :param candidate_votes: Personal votes of the candidates, in ballot order.
    '''
    number: ListNumber
    total_votes: int
    candidate_votes: Tuple[CandidateVotes, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'candidate_votes', tuple(self.candidate_votes))

    @property
    def list_number(self) -> ListNumber:
        return self.number

    @property
    def candidates(self) -> Tuple[CandidateVotes, ...]:
        return self.candidate_votes

    @classmethod
    def from_candidate_votes(cls,
                             number: int,
                             votes: Iterable[int],
                             ) -> ListVotes:
        '''Create a list from candidate votes given in ballot order.

        Candidates are numbered from 1 and the list total is their sum.
        '''
        candidates = tuple(
            CandidateVotes(CandidateNumber(i), n_votes)
            for i, n_votes in enumerate(votes, start=1)
        )
        return cls(
            ListNumber(number),
            sum(cand.votes for cand in candidates),
            candidates,
        )


@simple_serialization
@dataclasses.dataclass(frozen=True)
class Candidate:
    '''A reference to a candidate on a given list.'''
    list_number: ListNumber
    candidate_number: CandidateNumber


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ElectionCount:
    '''A complete vote count of an election, usable as apportionment input.

    :param number_of_seats: Number of seats in the council.
    :param list_votes: Votes per list.
    :param total_votes: Total number of valid votes. Computed as the sum of
        the list totals if not given.
    '''
    number_of_seats: int
    list_votes: Tuple[ListVotes, ...]
    total_votes: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'list_votes', tuple(self.list_votes))
        if self.total_votes is None:
            object.__setattr__(
                self,
                'total_votes',
                sum(lv.total_votes for lv in self.list_votes)
            )


def check_input(number_of_seats: int,
                total_votes: int,
                list_votes: Sequence[Any],
                ) -> None:
    '''Check the shape of the vote counts read through the input capability.

    These are programming errors on the side of the caller, so they raise
    ordinary exceptions rather than an apportionment error.

    :raises TypeError: If any count is not an integer or a list or candidate
        lacks a required attribute.
    :raises ValueError: If the number of seats is not positive, a count is
        negative, list or candidate numbers repeat, or the list votes
        add up to more than the total votes.
    '''
    exact(number_of_seats)
    exact(total_votes)
    if number_of_seats <= 0:
        raise ValueError(f'number of seats must be positive: {number_of_seats}')
    if total_votes < 0:
        raise ValueError(f'total votes must not be negative: {total_votes}')
    seen_lists: List[int] = []
    for lv in list_votes:
        if not isinstance(lv, ListVotesSource):
            _require_attributes(lv, ListVotesSource.ATTRIBUTES)
        if lv.number in seen_lists:
            raise ValueError(f'duplicate list number: {lv.number}')
        seen_lists.append(lv.number)
        exact(lv.total_votes)
        if lv.total_votes < 0:
            raise ValueError(f'negative votes for list {lv.number}')
        seen_candidates: List[int] = []
        for cand in lv.candidate_votes:
            if not isinstance(cand, CandidateVotesSource):
                _require_attributes(cand, CandidateVotesSource.ATTRIBUTES)
            if cand.number in seen_candidates:
                raise ValueError(
                    f'duplicate candidate number {cand.number}'
                    f' on list {lv.number}'
                )
            seen_candidates.append(cand.number)
            exact(cand.votes)
            if cand.votes < 0:
                raise ValueError(
                    f'negative votes for candidate {cand.number}'
                    f' on list {lv.number}'
                )
    list_total = sum(lv.total_votes for lv in list_votes)
    if list_total > total_votes:
        raise ValueError(
            f'list votes add up to {list_total}, more than the'
            f' {total_votes} votes cast'
        )


def _require_attributes(obj: Any, attributes: Tuple[str, ...]) -> None:
    missing = [attr for attr in attributes if not hasattr(obj, attr)]
    if missing:
        raise TypeError(
            f'{obj!r} does not provide ' + ', '.join(missing)
        )
