from __future__ import annotations

from typing import List, Optional, Sequence, Union

from partyintel.core.models import ValidatorRecord
from partyintel.core.party import PartyId, display_name
from partyintel.errors import InvalidPartyId, MissingQuery
from partyintel.lookup.explorers import DEFAULT_EXPLORERS, Explorer, explorer_links
from partyintel.lookup.schemas import (
    NotFound,
    PartyDetail,
    SearchResult,
    SearchResults,
    SiblingValidator,
    SiblingValidators,
    SourceStatus,
    SponsorDetails,
    SponsoredValidator,
    ValidatorDetails,
)
from partyintel.registry.cache import ValidatorCache
from partyintel.upstream.client import CantonNodesClient, ParticipantLookup

MAX_SEARCH_RESULTS = 50
MAX_SPONSORED_LISTED = 20
MAX_SIBLINGS_LISTED = 10

Resolution = Union[PartyDetail, SearchResults, NotFound]


class ResolutionEngine:
    """Resolve a free-form query into a party view, a match list, or not-found.

    Order of precedence:
    1. exact validator id, then exact sponsor id (case-sensitive)
    2. case-insensitive substring of either id; a single hit is promoted to
       an exact match of that record's validator
    3. participant-id lookup with the raw query as a party id
    """

    def __init__(
        self,
        cache: ValidatorCache,
        client: CantonNodesClient,
        *,
        explorers: Sequence[Explorer] = DEFAULT_EXPLORERS,
    ) -> None:
        self.cache = cache
        self.client = client
        self.explorers = explorers

    def resolve(self, query: str) -> Resolution:
        if not query or not query.strip():
            raise MissingQuery("Party ID or search query is required")

        # UpstreamUnavailable from the cache propagates: no partial answers.
        records = self.cache.get_snapshot().records

        anchor = _first(r for r in records if r.validator_party_id == query)
        if anchor is not None:
            return self._party_view(anchor.validator_party_id, records)

        if any(r.sponsor_party_id == query for r in records):
            return self._party_view(query, records)

        needle = query.lower()
        matches = [
            r
            for r in records
            if needle in r.validator_party_id.lower() or needle in r.sponsor_party_id.lower()
        ]

        if len(matches) == 1:
            return self._party_view(matches[0].validator_party_id, records)
        if len(matches) > 1:
            return _search_results(query, matches)

        return self._participant_fallback(query)

    def _participant_fallback(self, query: str) -> Union[PartyDetail, NotFound]:
        try:
            party = PartyId.parse(query)
        except InvalidPartyId:
            return NotFound(query=query)

        lookup = self.client.lookup_participant_id(query)
        if lookup.status != "success":
            return NotFound(query=query)

        return PartyDetail(
            party_id=query,
            namespace=party.namespace,
            fingerprint=party.fingerprint,
            is_dso=party.is_dso,
            participant_id=lookup.participant_id,
            explorers=explorer_links(query, self.explorers),
            sources=[self._source_status(lookup)],
        )

    def _party_view(self, party_id: str, records: Sequence[ValidatorRecord]) -> PartyDetail:
        party = PartyId.parse(party_id, strict=False)
        anchor = _first(r for r in records if r.validator_party_id == party_id)

        validator_details: Optional[ValidatorDetails] = None
        siblings: Optional[SiblingValidators] = None
        if anchor is not None:
            validator_details = ValidatorDetails(
                sponsor=anchor.sponsor_party_id,
                sponsor_name=display_name(anchor.sponsor_party_id),
                last_active_at=anchor.last_active_at,
                metadata=anchor.metadata,
                faucet_state=anchor.faucet_state,
                contract_id=anchor.contract_id,
                created_at=anchor.created_at,
            )
            siblings = _siblings(anchor, records)

        sponsored = [r for r in records if r.sponsor_party_id == party_id]
        sponsor_details: Optional[SponsorDetails] = None
        if sponsored:
            sponsor_details = SponsorDetails(
                validator_count=len(sponsored),
                validators=[
                    SponsoredValidator(
                        validator_id=r.validator_party_id,
                        validator_display_name=display_name(r.validator_party_id),
                        last_active_at=r.last_active_at,
                        version=r.version,
                    )
                    for r in sponsored[:MAX_SPONSORED_LISTED]
                ],
            )

        lookup = self.client.lookup_participant_id(party_id)

        return PartyDetail(
            party_id=party_id,
            namespace=party.namespace,
            fingerprint=party.fingerprint,
            is_dso=party.is_dso,
            participant_id=lookup.participant_id,
            is_validator=anchor is not None,
            validator_details=validator_details,
            is_sponsor=sponsor_details is not None,
            sponsor_details=sponsor_details,
            sibling_validators=siblings,
            explorers=explorer_links(party_id, self.explorers),
            sources=[self._source_status(lookup)],
        )

    def _source_status(self, lookup: ParticipantLookup) -> SourceStatus:
        return SourceStatus(name="CantonNodes", status=lookup.status, url=self.client.api_url)


def _first(it):
    return next(iter(it), None)


def _siblings(anchor: ValidatorRecord, records: Sequence[ValidatorRecord]) -> SiblingValidators:
    others = [
        r
        for r in records
        if r.sponsor_party_id == anchor.sponsor_party_id and r.validator_party_id != anchor.validator_party_id
    ]
    return SiblingValidators(
        count=len(others),
        validators=[
            SiblingValidator(
                validator_id=r.validator_party_id,
                validator_display_name=display_name(r.validator_party_id),
            )
            for r in others[:MAX_SIBLINGS_LISTED]
        ],
    )


def _search_results(query: str, matches: List[ValidatorRecord]) -> SearchResults:
    return SearchResults(
        query=query,
        count=len(matches),
        truncated=len(matches) > MAX_SEARCH_RESULTS,
        results=[
            SearchResult(
                validator_id=r.validator_party_id,
                validator_display_name=display_name(r.validator_party_id),
                sponsor_id=r.sponsor_party_id,
                sponsor_display_name=display_name(r.sponsor_party_id),
                last_active_at=r.last_active_at,
                version=r.version,
            )
            for r in matches[:MAX_SEARCH_RESULTS]
        ],
    )
