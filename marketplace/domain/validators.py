import re
from typing import List

from marketplace.domain.schemas import OrderDraft, QuoteRequestDraft

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")
MIN_CONTACT_LENGTH = 2
MIN_ADDRESS_LENGTH = 10


def validate_phone(phone: str) -> bool:
    """Permissive phone check: optional '+', then 10+ digits, spaces, hyphens or parentheses."""
    if not phone:
        return False
    return bool(PHONE_PATTERN.match(phone.strip()))


def validate_order_details(details: OrderDraft) -> List[str]:
    """
    Returns one message per invalid field, in form order:
    contact person, phone, delivery address. Empty list means valid.
    """
    errors = []

    contact = (details.contact_person or "").strip()
    if not contact:
        errors.append("Contact person is required")
    elif len(contact) < MIN_CONTACT_LENGTH:
        errors.append("Contact person must be at least 2 characters")

    phone = (details.phone or "").strip()
    if not phone:
        errors.append("Phone number is required")
    elif not validate_phone(phone):
        errors.append("Please enter a valid phone number")

    address = (details.delivery_address or "").strip()
    if not address:
        errors.append("Delivery address is required")
    elif len(address) < MIN_ADDRESS_LENGTH:
        errors.append("Please provide a complete delivery address")

    return errors


def validate_quote_request(request: QuoteRequestDraft) -> List[str]:
    errors = []
    if not (request.contact_person or "").strip():
        errors.append("Contact person is required")
    if not (request.phone or "").strip():
        errors.append("Phone number is required")
    if not (request.delivery_address or "").strip():
        errors.append("Delivery address is required")
    if request.quantity < 1:
        errors.append("Quantity must be at least 1")
    return errors
