"""
Product entity - an item registered on the ledger.

Products are created only from a settled registration and never change
afterwards.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from thalexa.core.exceptions import ValidationError
from thalexa.domain.entities.coercion import as_bool


@dataclass(frozen=True)
class ProductDraft:
    """
    User input for a product registration.

    Only name and description are required.
    """

    name: str
    description: str
    manufacturer: str = ""
    sku: str = ""
    production_date: str = ""
    price: Any = 0
    metadata: str = ""

    def validate(self) -> ProductDraft:
        """
        Check the draft and return a normalized copy.

        Raises:
            ValidationError: If a required field is blank or a value is malformed
        """
        name = (self.name or "").strip()
        description = (self.description or "").strip()
        if not name:
            raise ValidationError("name", "is required")
        if not description:
            raise ValidationError("description", "is required")

        price = parse_amount("price", self.price, allow_zero=True)

        production_date = (self.production_date or "").strip()
        if production_date:
            try:
                production_date = date_parser.isoparse(production_date).date().isoformat()
            except (ValueError, OverflowError):
                raise ValidationError("production_date", "must be an ISO date (YYYY-MM-DD)")

        return ProductDraft(
            name=name,
            description=description,
            manufacturer=(self.manufacturer or "").strip(),
            sku=(self.sku or "").strip(),
            production_date=production_date,
            price=price,
            metadata=self.metadata or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "manufacturer": self.manufacturer,
            "sku": self.sku,
            "production_date": self.production_date,
            "price": str(self.price),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProductDraft:
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            manufacturer=data.get("manufacturer", ""),
            sku=data.get("sku", ""),
            production_date=data.get("production_date", ""),
            price=data.get("price", 0),
            metadata=data.get("metadata", ""),
        )


@dataclass(frozen=True)
class Product:
    """
    Represents a product registered on the ledger.

    Attributes:
        id: Unique product id ("prod_" + 9 hex chars)
        owner_address: Wallet address that registered the product
        ledger_ref: Object reference returned by the ledger
        verified: Whether the ledger confirmed the registration
        verify_url: Public verification link encoded into the QR code
    """

    id: str
    name: str
    description: str
    owner_address: str
    ledger_ref: str
    manufacturer: str = ""
    sku: str = ""
    production_date: str = ""
    price: Decimal = Decimal("0")
    metadata: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    verified: bool = True
    verify_url: str = ""

    @classmethod
    def from_draft(
        cls,
        product_id: str,
        draft: ProductDraft,
        owner_address: str,
        ledger_ref: str,
        verify_url: str = "",
        created_at: Optional[datetime] = None,
    ) -> Product:
        return cls(
            id=product_id,
            name=draft.name,
            description=draft.description,
            manufacturer=draft.manufacturer,
            sku=draft.sku,
            production_date=draft.production_date,
            price=Decimal(str(draft.price)),
            metadata=draft.metadata,
            owner_address=owner_address,
            ledger_ref=ledger_ref,
            created_at=created_at or datetime.now(timezone.utc),
            verified=True,
            verify_url=verify_url,
        )

    def qr_payload(self) -> str:
        """JSON payload encoded into the product's QR code."""
        return json.dumps(
            {
                "productId": self.id,
                "contractAddress": self.ledger_ref,
                "verifyUrl": self.verify_url,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "manufacturer": self.manufacturer,
            "sku": self.sku,
            "production_date": self.production_date,
            "price": str(self.price),
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
            "owner_address": self.owner_address,
            "ledger_ref": self.ledger_ref,
            "verified": self.verified,
            "verify_url": self.verify_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Product:
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = date_parser.isoparse(created_at)
        elif created_at is None:
            created_at = datetime.now(timezone.utc)
        else:
            raise TypeError(f"created_at must be an ISO string, got {type(created_at).__name__}")

        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            manufacturer=str(data.get("manufacturer") or ""),
            sku=str(data.get("sku") or ""),
            production_date=str(data.get("production_date") or ""),
            price=Decimal(str(data.get("price") or "0")),
            metadata=str(data.get("metadata") or ""),
            created_at=created_at,
            owner_address=str(data.get("owner_address") or ""),
            ledger_ref=str(data.get("ledger_ref") or ""),
            verified=as_bool(data.get("verified"), default=True),
            verify_url=str(data.get("verify_url") or ""),
        )

    def __str__(self) -> str:
        return f"Product({self.id}, {self.name})"


def parse_amount(field_name: str, value: Any, allow_zero: bool = False) -> Decimal:
    """
    Parse a user supplied amount into a Decimal.

    Args:
        field_name: Field reported in the validation error
        value: Raw value (str, int, float or Decimal)
        allow_zero: Accept 0 (prices) or require > 0 (payments)

    Raises:
        ValidationError: If the value is not a finite number in range
    """
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    try:
        amount = Decimal(str(value).strip()) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        raise ValidationError(field_name, "must be a number")
    if not amount.is_finite():
        raise ValidationError(field_name, "must be a finite number")
    if allow_zero and amount < 0:
        raise ValidationError(field_name, "must not be negative")
    if not allow_zero and amount <= 0:
        raise ValidationError(field_name, "must be greater than zero")
    return amount
