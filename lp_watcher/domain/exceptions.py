from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class PoolNotFoundError(DomainError):
    """No pool is configured under the requested name or address."""


class EventInputError(DomainError):
    """Event payload does not fit the pool it was emitted by."""


class ValuationError(DomainError):
    """Event could not be valued; its notification must be dropped."""


class InvalidPrecisionError(ValuationError):
    """Raw amount or display precision outside the supported range."""


class PriceLookupDomainError(ValuationError):
    """USD prices could not be obtained for the event tokens."""


class PriceUnauthorizedDomainError(PriceLookupDomainError):
    """Price service rejected the credentials or quota."""


class PriceFetchExhaustedError(PriceLookupDomainError):
    """Price service kept failing until the attempt budget ran out."""


class MissingPriceQuoteError(PriceLookupDomainError):
    """Price service answered without a quote for a requested token."""
