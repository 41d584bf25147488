"""Domain model for verified bearer token claims."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified token (Value Object).

    Attributes:
        subject_id: User id the token was issued for.
        subject_email: Email of that user at issue time.
        issued_at: Issue timestamp (UTC).
        expires_at: Absolute expiry timestamp (UTC).
    """
    subject_id: int
    subject_email: str
    issued_at: datetime
    expires_at: datetime
