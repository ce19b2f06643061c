"""
Canton party identifiers.

A party id is `<namespace>::<fingerprint>`, e.g.
`DSO::1220b1431ef217342db44d516bb9befde802be7d8899637d290895fa58880f19accc`.
Anything without exactly one separator is kept whole as the fingerprint under
the `unknown` namespace.
"""

from __future__ import annotations

from dataclasses import dataclass

from partyintel.errors import InvalidPartyId

SEPARATOR = "::"
UNKNOWN_NAMESPACE = "unknown"
DSO_NAMESPACE = "DSO"


def display_name(raw: str) -> str:
    """Human-facing name of a party: the part before the first separator."""
    return raw.split(SEPARATOR, 1)[0]


@dataclass(frozen=True)
class PartyId:
    raw: str
    namespace: str
    fingerprint: str

    @classmethod
    def parse(cls, raw: str, *, strict: bool = True) -> "PartyId":
        """Split `raw` into namespace and fingerprint.

        With `strict`, blank input and an empty side around the separator raise
        InvalidPartyId. Otherwise such ids fall back to the `unknown` namespace.
        """
        value = (raw or "").strip()
        if not value:
            if strict:
                raise InvalidPartyId("party id is empty")
            return cls(raw=value, namespace=UNKNOWN_NAMESPACE, fingerprint=value)

        parts = value.split(SEPARATOR)
        if len(parts) != 2:
            return cls(raw=value, namespace=UNKNOWN_NAMESPACE, fingerprint=value)

        namespace, fingerprint = parts
        if not namespace or not fingerprint:
            if strict:
                raise InvalidPartyId(f"malformed party id: {value!r}")
            return cls(raw=value, namespace=UNKNOWN_NAMESPACE, fingerprint=value)
        return cls(raw=value, namespace=namespace, fingerprint=fingerprint)

    @property
    def is_dso(self) -> bool:
        return self.namespace == DSO_NAMESPACE

    @property
    def display_name(self) -> str:
        return display_name(self.raw)

    def __str__(self) -> str:
        return self.raw
