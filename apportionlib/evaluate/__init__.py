'''Evaluate the apportionment of a municipal council election.

The seat assignment divides the seats among the candidate lists; the candidate
nomination then fills the seats of every list with its candidates. Both
evaluators are plain objects with an ``evaluate()`` method, taking vote counts
through their attributes and returning immutable results that record every
step taken.

Situations where the law cannot be applied mechanically (an exact tie that
calls for a drawing of lots, a list without candidates left) are reported by
raising a subclass of :class:`core.ApportionmentError`; no evaluator resolves
them arbitrarily.
'''

from apportionlib.evaluate.core import *    # noqa
from apportionlib.evaluate.seat_assignment import (    # noqa: F401
    SeatAssignment, SeatAssignmentResult, compute_seat_assignment,
)
from apportionlib.evaluate.nomination import (    # noqa: F401
    CandidateNomination, CandidateNominationResult,
    compute_candidate_nomination,
)
