'''Errors and statutory constants shared by the apportionment evaluators.'''

from fractions import Fraction
from typing import Any, Iterable, List, Optional


LARGE_COUNCIL_THRESHOLD = 19
'''Councils with at least this many seats assign residual seats by highest
averages; smaller ones by largest remainders first.'''

PREFERENCE_THRESHOLD_PERCENTAGE = 25
'''Percentage of the quota a candidate needs in personal votes to be elected
regardless of their position on the list.'''

REMAINDER_THRESHOLD = Fraction(3, 4)
'''Share of the quota a list needs in votes to take part in the assignment
of residual seats by largest remainders.'''


class ApportionmentError(Exception):
    '''Seats or candidates cannot be apportioned for the given vote count.

    Every subclass is a distinct, legally meaningful situation that the
    caller has to report as such.
    '''
    pass


class ZeroVotesCast(ApportionmentError):
    '''No votes were cast, so there is no quota to divide by.'''
    def __init__(self):
        super().__init__('no votes cast, apportionment is undefined')


class AllListsExhausted(ApportionmentError):
    '''A seat cannot be awarded because no eligible list has candidates left.

    :param list_number: The list that ran out of candidates, if known.
    '''
    def __init__(self, list_number: Optional[int] = None):
        self.list_number = list_number
        message = 'seat cannot be assigned, all lists are exhausted'
        if list_number is not None:
            message = (
                f'seats of list {list_number} cannot be filled,'
                ' the list has too few candidates'
            )
        super().__init__(message)


class DrawingOfLotsNotImplemented(ApportionmentError):
    '''Lists or candidates are exactly tied and lots would have to be drawn.

    The law prescribes a manual drawing of lots between them, which is not
    something to be decided by this library.

    :param tied: Numbers of the tied lists or candidates.
    :param n_seats: Number of seats available to the tied contestants.
    :param what: What is tied, for the message. The seat assignment only
        reports tied lists; callers that order candidates themselves pass
        'candidates'.
    '''
    def __init__(self,
                 tied: Iterable[int],
                 n_seats: int,
                 what: str = 'lists',
                 ):
        self.tied = list(tied)
        self.n_seats = n_seats
        super().__init__(
            f'drawing of lots is required for {what} {self.tied},'
            f' only {n_seats} seat(s) available'
        )


class ApportionmentNotAvailableUntilDataEntryFinalised(ApportionmentError):
    '''The vote count is not final yet.

    Never raised by the evaluators themselves; callers gating apportionment
    on the state of their data entry raise it.
    '''
    def __init__(self):
        super().__init__(
            'apportionment is not available until data entry is finalised'
        )


def list_numbers(items: Iterable[Any]) -> List[int]:
    '''Return the list numbers of standings or list votes.'''
    return [
        item.list_number if hasattr(item, 'list_number') else item.number
        for item in items
    ]
