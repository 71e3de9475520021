"""Vote count snapshots stored as JSON documents.

The document looks like this::

    {
        "number_of_seats": 15,
        "total_votes": 1000,
        "lists": [
            {"number": 1, "candidates": [
                {"number": 1, "votes": 400},
                {"number": 2, "votes": 150}
            ]},
            {"number": 2, "votes": [300, 100, 50]}
        ]
    }

A list gives either its ``candidates`` with their numbers, or just the
``votes`` of the candidates in ballot order, numbered from 1. The
``total_votes`` of a list and of the whole count default to the sums of the
candidate and list votes.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import apportionlib.io.core
from apportionlib.candidate import (
    CandidateNumber, CandidateVotes, ElectionCount, ListNumber, ListVotes,
)


class CountParseError(apportionlib.io.core.ParseError):
    pass


def _load(text: str) -> ElectionCount:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise CountParseError(f'invalid JSON: {e}') from e
    if not isinstance(document, dict):
        raise CountParseError('vote count document must be an object')
    lists = document.get('lists')
    if not isinstance(lists, list):
        raise CountParseError('vote count document must have a lists array')
    return ElectionCount(
        number_of_seats=_get_count(document, 'number_of_seats', 'document'),
        list_votes=[_load_list(list_def) for list_def in lists],
        total_votes=(
            _get_count(document, 'total_votes', 'document')
            if document.get('total_votes') is not None else None
        ),
    )


def _load_list(list_def: Any) -> ListVotes:
    if not isinstance(list_def, dict):
        raise CountParseError(f'list must be an object: {list_def!r}')
    number = _get_count(list_def, 'number', 'list')
    where = f'list {number}'
    if 'candidates' in list_def:
        if not isinstance(list_def['candidates'], list):
            raise CountParseError(f'candidates of {where} must be an array')
        candidates = [
            _load_candidate(cand_def, where)
            for cand_def in list_def['candidates']
        ]
    elif 'votes' in list_def:
        votes = list_def['votes']
        if not isinstance(votes, list) or not all(
            _is_count(n_votes) for n_votes in votes
        ):
            raise CountParseError(
                f'votes of {where} must be an array of non-negative integers'
            )
        candidates = [
            CandidateVotes(CandidateNumber(i), n_votes)
            for i, n_votes in enumerate(votes, start=1)
        ]
    else:
        raise CountParseError(f'{where} has neither candidates nor votes')
    if list_def.get('total_votes') is not None:
        total_votes = _get_count(list_def, 'total_votes', where)
    else:
        total_votes = sum(cand.votes for cand in candidates)
    return ListVotes(ListNumber(number), total_votes, candidates)


def _load_candidate(cand_def: Any, where: str) -> CandidateVotes:
    if not isinstance(cand_def, dict):
        raise CountParseError(f'candidate of {where} must be an object')
    number = _get_count(cand_def, 'number', f'candidate of {where}')
    return CandidateVotes(
        CandidateNumber(number),
        _get_count(cand_def, 'votes', f'candidate {number} of {where}'),
    )


def _get_count(obj: Dict[str, Any], key: str, where: str) -> int:
    if key not in obj:
        raise CountParseError(f'{key} missing in {where}')
    value = obj[key]
    if not _is_count(value):
        raise CountParseError(
            f'{key} in {where} must be a non-negative integer, got {value!r}'
        )
    return value


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def dumps(count: ElectionCount) -> str:
    """Write a vote count to a JSON document readable by :func:`loads`."""
    return json.dumps({
        'number_of_seats': count.number_of_seats,
        'total_votes': count.total_votes,
        'lists': [
            {
                'number': lv.number,
                'total_votes': lv.total_votes,
                'candidates': [
                    {'number': cand.number, 'votes': cand.votes}
                    for cand in lv.candidate_votes
                ],
            }
            for lv in count.list_votes
        ],
    }, indent=2)


load, loads = apportionlib.io.core.loaders(_load)
