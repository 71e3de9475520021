import sys
import os
import itertools
import random
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import apportionlib.system
from apportionlib.candidate import Candidate, ElectionCount, ListVotes
from apportionlib.evaluate.core import (
    ApportionmentError, DrawingOfLotsNotImplemented, ZeroVotesCast,
)
from apportionlib.evaluate.nomination import CandidateNomination
from apportionlib.evaluate.residual import (
    AbsoluteMajorityReassignment, ListExhaustionRemoval,
)


class CountingSnapshot:
    '''A caller's own vote count model, read through its attributes.'''
    def __init__(self, number_of_seats, list_votes):
        self.number_of_seats = number_of_seats
        self.list_votes = list_votes
        self.total_votes = sum(lv.total_votes for lv in list_votes)


def random_counts(n_counts, seed=42):
    rng = random.Random(seed)
    for _ in range(n_counts):
        n_seats = rng.randint(3, 45)
        list_votes = [
            ListVotes.from_candidate_votes(
                number, [rng.randint(0, 500) for _ in range(n_seats + 2)]
            )
            for number in range(1, rng.randint(2, 9))
        ]
        yield ElectionCount(n_seats, list_votes)


def apportion_or_none(count):
    try:
        return apportionlib.system.apportion(count)
    except ApportionmentError:
        return None


def has_reassignment(result):
    return any(
        isinstance(
            step.change, (AbsoluteMajorityReassignment, ListExhaustionRemoval)
        )
        for step in result.seat_assignment.steps
    )


def with_extra_vote(count, list_number):
    list_votes = []
    for lv in count.list_votes:
        votes = [cand.votes for cand in lv.candidate_votes]
        if lv.number == list_number:
            votes[0] += 1
        list_votes.append(ListVotes.from_candidate_votes(lv.number, votes))
    return ElectionCount(count.number_of_seats, list_votes)


def test_small_council_scenario():
    count = ElectionCount(
        number_of_seats=15,
        list_votes=[
            ListVotes.from_candidate_votes(1, [2571] + [0] * 6),
            ListVotes.from_candidate_votes(2, [977, 0, 0, 0]),
            ListVotes.from_candidate_votes(3, [567, 0]),
            ListVotes.from_candidate_votes(4, [536, 0]),
            ListVotes.from_candidate_votes(5, [453, 0]),
        ],
    )
    result = apportionlib.system.apportion(count)
    assert result.seat_assignment.seats_per_list == {1: 7, 2: 3, 3: 2, 4: 2, 5: 1}
    nominations = result.candidate_nomination.per_list
    assert [n.list_seats for n in nominations] == [7, 3, 2, 2, 1]
    assert result.candidate_nomination.chosen_candidates[0] == Candidate(1, 1)
    assert len(result.candidate_nomination.chosen_candidates) == 15


def test_foreign_model():
    count = CountingSnapshot(
        3, [ListVotes.from_candidate_votes(1, [40, 20]),
            ListVotes.from_candidate_votes(2, [30, 10])]
    )
    result = apportionlib.system.Apportionment().evaluate(count)
    assert result.seat_assignment.quota == Fraction(100, 3)
    assert sum(result.seat_assignment.seats_per_list.values()) == 3


def test_custom_nomination():
    count = ElectionCount(
        2, [ListVotes.from_candidate_votes(1, [10, 30, 60])]
    )
    evaluator = apportionlib.system.Apportionment(
        candidate_nomination=CandidateNomination(preference_percentage=70)
    )
    result = evaluator.evaluate(count)
    nomination = result.candidate_nomination.per_list[0]
    assert [c.candidate_number for c in nomination.preferential_candidates] == [3]
    assert [c.candidate_number for c in nomination.remainder_candidates] == [1]


def test_tie_scenario():
    count = ElectionCount(10, [
        ListVotes.from_candidate_votes(1, [550] + [0] * 9),
        ListVotes.from_candidate_votes(2, [300] + [0] * 9),
        ListVotes.from_candidate_votes(3, [150] + [0] * 9),
    ])
    with pytest.raises(DrawingOfLotsNotImplemented):
        apportionlib.system.apportion(count)


def test_zero_votes():
    count = ElectionCount(5, [ListVotes.from_candidate_votes(1, [0, 0])])
    with pytest.raises(ZeroVotesCast):
        apportionlib.system.apportion(count)


@pytest.mark.parametrize('count', list(random_counts(60)))
def test_properties(count):
    result = apportion_or_none(count)
    if result is None:
        return
    seats = result.seat_assignment
    # every seat is apportioned
    assert sum(seats.seats_per_list.values()) == count.number_of_seats
    assert seats.full_seats + seats.residual_seats == count.number_of_seats
    assert seats.quota * seats.full_seats <= count.total_votes
    for lv, standing in zip(count.list_votes, seats.final_standing):
        # no list falls below its whole quotas without losing candidates
        assert standing.total_seats <= len(lv.candidate_votes)
        if standing.total_seats < len(lv.candidate_votes):
            assert standing.full_seats == lv.total_votes // seats.quota
    threshold = result.candidate_nomination.preference_threshold.number_of_votes
    for lv, nomination in zip(
        count.list_votes, result.candidate_nomination.per_list
    ):
        assert len(nomination.elected) == nomination.list_seats
        votes = {cand.number: cand.votes for cand in lv.candidate_votes}
        for cand in nomination.preferential_candidates:
            assert votes[cand.candidate_number] >= threshold
        assert sorted(nomination.updated_ranking) == sorted(votes)
    assert len(result.candidate_nomination.chosen_candidates) == (
        count.number_of_seats
    )


def test_deterministic():
    for count in itertools.islice(random_counts(10, seed=7), 10):
        assert apportion_or_none(count) == apportion_or_none(count)


@pytest.mark.parametrize('count', list(random_counts(30, seed=11)))
def test_more_votes_never_cost_seats(count):
    result = apportion_or_none(count)
    if result is None or has_reassignment(result):
        return
    for lv in count.list_votes:
        bumped = apportion_or_none(with_extra_vote(count, lv.number))
        if bumped is None or has_reassignment(bumped):
            continue
        assert (
            bumped.seat_assignment.seats_per_list[lv.number]
            >= result.seat_assignment.seats_per_list[lv.number]
        )
