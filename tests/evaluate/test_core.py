import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import apportionlib.evaluate
import apportionlib.evaluate.core
from apportionlib.candidate import ListVotes
from apportionlib.evaluate.residual import ListStanding


@pytest.mark.parametrize('error', [
    apportionlib.evaluate.core.ZeroVotesCast(),
    apportionlib.evaluate.core.AllListsExhausted(),
    apportionlib.evaluate.core.AllListsExhausted(3),
    apportionlib.evaluate.core.DrawingOfLotsNotImplemented([1, 2], 1),
    apportionlib.evaluate.core.ApportionmentNotAvailableUntilDataEntryFinalised(),
])
def test_errors_are_apportionment_errors(error):
    assert isinstance(error, apportionlib.evaluate.ApportionmentError)
    assert str(error)


def test_exhausted_list_message():
    error = apportionlib.evaluate.core.AllListsExhausted(3)
    assert error.list_number == 3
    assert 'list 3' in str(error)


def test_drawing_of_lots_candidates():
    error = apportionlib.evaluate.core.DrawingOfLotsNotImplemented(
        [4, 7], 1, what='candidates'
    )
    assert error.tied == [4, 7]
    assert 'candidates [4, 7]' in str(error)


def test_list_numbers():
    standing = ListStanding(2, 10, 0, False, 5, 1)
    assert apportionlib.evaluate.core.list_numbers(
        [ListVotes(1, 5), standing]
    ) == [1, 2]
