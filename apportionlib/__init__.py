"""Apportionlib - seat apportionment for Dutch municipal council elections.

Apportionlib turns the final vote count of a municipal council election into
the seats each candidate list gets and the candidates who take them, following
chapter P of the Kieswet (Dutch Elections Act).

The work is done in two stages:

-   The seat assignment (:mod:`evaluate.seat_assignment`) divides the seats
    among the lists by the electoral quota, assigns the residual seats and
    applies the absolute majority and list exhaustion corrections.
-   The candidate nomination (:mod:`evaluate.nomination`) selects the
    candidates for the seats of each list, those with enough personal votes
    first.

The :class:`Apportionment` object from the :mod:`system` module runs both
stages on a vote count snapshot. Results are immutable and can be turned into
JSON-ready dictionaries by the :mod:`persist` module.
"""
