"""Claim input data models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from ..utils.errors import InvalidInputError

DateLike = Union[str, date, datetime, None]
Amount = Union[int, float, Decimal]


@dataclass(frozen=True)
class DocumentRef:
    """
    Reference to a document submitted with a claim.

    Attributes:
        id: Document identifier
        type: Document type (e.g., "police_report", "invoice", "photo")
        locator: Where the content lives (local path or s3://bucket/key)
    """
    id: str
    type: str
    locator: str


@dataclass(frozen=True)
class UserHistory:
    """
    Claim history of the claimant.

    Attributes:
        total_claims: Number of claims ever filed
        recent_claims: Number of claims filed recently
        rejected_claims: Number of previously rejected claims
        average_claim_amount: Average amount of past claims
    """
    total_claims: int = 0
    recent_claims: int = 0
    rejected_claims: int = 0
    average_claim_amount: float = 0.0


@dataclass(frozen=True)
class ClaimContext:
    """
    Everything the engine needs to assess one claim.

    Attributes:
        claim_id: Unique identifier for the claim
        claim_type: Claim category (e.g., "motor", "property")
        amount: Claimed amount, non-negative
        date_of_loss: When the loss occurred (ISO-8601 string, date or datetime)
        description: Free-text narrative of the loss
        location: Where the loss occurred
        documents: Documents submitted with the claim
        history: Claimant's claim history
    """
    claim_id: str
    claim_type: str
    amount: Amount
    date_of_loss: DateLike
    description: str
    location: str = ""
    documents: Tuple[DocumentRef, ...] = ()
    history: UserHistory = field(default_factory=UserHistory)

    def metadata(self) -> Dict[str, Any]:
        """Claim attributes passed alongside the description to the text analyzer."""
        return {
            "claim_type": self.claim_type,
            "amount": self.amount,
            "date_of_loss": _date_text(self.date_of_loss),
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClaimContext":
        """
        Build a ClaimContext from the camelCase request payload.

        Expected keys: claimId, claimType, amountClaimed, dateOfLoss,
        description, location, documents[{id, type, url}],
        userHistory{totalClaims, recentClaims, rejectedClaims, averageClaimAmount}.

        Raises:
            InvalidInputError: If a field has the wrong shape
        """
        if not isinstance(data, dict):
            raise InvalidInputError.for_field("claim", "expected a JSON object")

        documents = []
        for index, doc in enumerate(data.get("documents") or []):
            if not isinstance(doc, dict):
                raise InvalidInputError.for_field(f"documents[{index}]", "expected an object")
            documents.append(DocumentRef(
                id=str(doc.get("id", f"doc-{index + 1}")),
                type=str(doc.get("type", "unknown")),
                locator=str(doc.get("url") or doc.get("locator") or ""),
            ))

        hist = data.get("userHistory") or {}
        if not isinstance(hist, dict):
            raise InvalidInputError.for_field("userHistory", "expected an object")
        try:
            history = UserHistory(
                total_claims=int(hist.get("totalClaims", 0)),
                recent_claims=int(hist.get("recentClaims", 0)),
                rejected_claims=int(hist.get("rejectedClaims", 0)),
                average_claim_amount=float(hist.get("averageClaimAmount", 0.0)),
            )
        except (TypeError, ValueError) as e:
            raise InvalidInputError.for_field("userHistory", str(e))

        amount = data.get("amountClaimed")
        if isinstance(amount, bool) or not isinstance(amount, (int, float, str, Decimal)):
            raise InvalidInputError.for_field("amountClaimed", "expected a number")
        if isinstance(amount, str):
            try:
                amount = float(amount)
            except ValueError:
                raise InvalidInputError.for_field("amountClaimed", f"not a number: {amount!r}")

        return cls(
            claim_id=str(data.get("claimId") or ""),
            claim_type=str(data.get("claimType") or ""),
            amount=amount,
            date_of_loss=data.get("dateOfLoss"),
            description=data.get("description"),
            location=str(data.get("location") or ""),
            documents=tuple(documents),
            history=history,
        )


def _date_text(value: DateLike) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return "" if value is None else str(value)
