"""Ordering bounded context: cart composition, eligibility and checkout.

Holds the value objects that describe a butcher-counter order (cart lines,
ceilings, placed orders, accounts) and the client-side engine that decides
whether a cart may be submitted to the remote order service.
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
