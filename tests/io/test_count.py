import sys
import os
import io

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import apportionlib.io.core
import apportionlib.io.count
from apportionlib.candidate import CandidateVotes, ElectionCount, ListVotes

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def test_load_file():
    with open(os.path.join(DATA_DIR, 'gr2022.json'), encoding='utf8') as infile:
        count = apportionlib.io.count.load(infile)
    assert count.number_of_seats == 15
    assert count.total_votes == 5104
    assert [lv.number for lv in count.list_votes] == [1, 2, 3, 4, 5]
    assert count.list_votes[2].candidate_votes == (
        CandidateVotes(1, 500), CandidateVotes(2, 67)
    )
    assert count.list_votes[4].total_votes == 453
    assert len(count.list_votes[0].candidate_votes) == 7


def test_roundtrip():
    count = ElectionCount(7, [
        ListVotes.from_candidate_votes(1, [10, 5]),
        ListVotes.from_candidate_votes(2, [3]),
    ])
    assert apportionlib.io.count.loads(apportionlib.io.count.dumps(count)) == count


def test_load_stream():
    text = '{"number_of_seats": 3, "total_votes": 20, "lists": [{"number": 1, "votes": [9]}]}'
    count = apportionlib.io.count.load(io.StringIO(text))
    assert count.total_votes == 20
    assert count.list_votes[0].total_votes == 9


@pytest.mark.parametrize('text', [
    '',
    '[1, 2]',
    '{"number_of_seats": 3}',
    '{"number_of_seats": 3, "lists": {}}',
    '{"lists": []}',
    '{"number_of_seats": 3.5, "lists": []}',
    '{"number_of_seats": true, "lists": []}',
    '{"number_of_seats": 3, "lists": [{"votes": [1]}]}',
    '{"number_of_seats": 3, "lists": [{"number": 1}]}',
    '{"number_of_seats": 3, "lists": [{"number": 1, "votes": [-1]}]}',
    '{"number_of_seats": 3, "lists": [{"number": 1, "votes": 5}]}',
    '{"number_of_seats": 3, "lists": [{"number": 1, "candidates": [{"number": 1}]}]}',
    '{"number_of_seats": 3, "lists": [{"number": 1, "candidates": [5]}]}',
    '{"number_of_seats": 3, "lists": [5]}',
])
def test_invalid(text):
    with pytest.raises(apportionlib.io.core.ParseError):
        apportionlib.io.count.loads(text)
