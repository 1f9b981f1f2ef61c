"""
Text normalization for comparing extracted fields with directory records.
"""

from typing import Optional

from ..models.invoice import ExtractedInvoiceData


def normalize(text: Optional[str]) -> str:
    """Lower-case and trim; None becomes the empty string"""
    if not text:
        return ""
    return text.strip().lower()


def loosely_matches(a: Optional[str], b: Optional[str]) -> bool:
    """
    Case-insensitive substring match in either direction.

    Empty values never match anything, so a missing field cannot earn points.
    """
    a, b = normalize(a), normalize(b)
    if not a or not b:
        return False
    return a in b or b in a


def contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive one-way substring check (needle in haystack)"""
    haystack, needle = normalize(haystack), normalize(needle)
    if not haystack or not needle:
        return False
    return needle in haystack


class NormalizedExtraction:
    """Comparison-ready view of the text fields of one extraction"""

    def __init__(self, extracted: ExtractedInvoiceData):
        self.beneficiary = normalize(extracted.beneficiary)
        # Venue preferred, address as fallback
        self.location = normalize(extracted.venue) or normalize(extracted.address)
        self.date = extracted.date
