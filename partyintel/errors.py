from __future__ import annotations


class PartyIntelError(Exception):
    """Base class for errors raised by partyintel."""


class UpstreamUnavailable(PartyIntelError):
    """The validator registry could not be fetched or decoded."""


class MissingQuery(PartyIntelError):
    """A lookup was requested without a search string."""


class InvalidPartyId(PartyIntelError, ValueError):
    """A party identifier could not be parsed."""
