"""
Domain models — immutable value objects for certificate lookups.

CertificateDetails is what the parser extracts from a DER certificate.
CertificateRecord binds those details to the URL that was probed and, once
stored, to the identity assigned by the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any


class ExpiryBand(Enum):
    """How close a certificate is to its not-after date, as shown on the dashboard."""

    EXPIRED = "EXPIRED"
    EXPIRING_IN_TWO_WEEKS = "EXPIRING_IN_TWO_WEEKS"
    EXPIRING_IN_SIX_WEEKS = "EXPIRING_IN_SIX_WEEKS"
    GOOD = "GOOD"


def expiry_band(valid_to: datetime, now: datetime) -> ExpiryBand:
    """
    Classify the time left until `valid_to`.

    Whole days remaining are counted by flooring, so 13 days and 23 hours
    still falls in the two-week band.
    """
    if valid_to < now:
        return ExpiryBand.EXPIRED
    days_left = (valid_to - now) // timedelta(days=1)
    if days_left < 14:
        return ExpiryBand.EXPIRING_IN_TWO_WEEKS
    if days_left < 42:
        return ExpiryBand.EXPIRING_IN_SIX_WEEKS
    return ExpiryBand.GOOD


@dataclass(frozen=True, slots=True)
class CertificateDetails:
    """Identity and validity fields decoded from a single X.509 certificate."""

    subject: str
    issuer: str
    valid_from: datetime
    valid_to: datetime


@dataclass(frozen=True, slots=True)
class CertificateRecord:
    """
    The leaf certificate observed at a URL.

    A record is transient while `id` is None (info-only lookups) and
    persisted once the repository has assigned an id. Subject and issuer
    are RFC 4514 distinguished names kept as opaque strings.
    """

    url: str
    subject: str
    issuer: str
    valid_from: datetime
    valid_to: datetime
    id: int | None = None

    @classmethod
    def from_details(cls, url: str, details: CertificateDetails) -> CertificateRecord:
        return cls(
            url=url,
            subject=details.subject,
            issuer=details.issuer,
            valid_from=details.valid_from,
            valid_to=details.valid_to,
        )

    def with_id(self, record_id: int) -> CertificateRecord:
        return replace(self, id=record_id)

    def to_dict(self, now: datetime | None = None) -> dict[str, Any]:
        """
        JSON-ready representation used by the REST API.

        expiryBand is evaluated at `now` (the current UTC time by default).
        """
        band = expiry_band(self.valid_to, now or datetime.now(UTC))
        return {
            "id": self.id,
            "url": self.url,
            "subject": self.subject,
            "issuer": self.issuer,
            "validFrom": self.valid_from.isoformat(),
            "validTo": self.valid_to.isoformat(),
            "expiryBand": band.value,
        }
