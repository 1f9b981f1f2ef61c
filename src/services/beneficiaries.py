"""
Resolution of an extracted beneficiary name against the known directory.
"""

from typing import Optional, Sequence

from loguru import logger

from ..models.directory import NEW_BENEFICIARY_ID, Beneficiary, BeneficiaryType
from .normalization import normalize

DEFAULT_BENEFICIARY_TYPE: BeneficiaryType = "company"


class BeneficiaryResolver:
    """
    Matches an extracted name to a known person or company.

    Precedence, case-insensitive, first hit in list order within each tier:
    1. exact name equality
    2. known name contained in the extracted name ("ACME" in "ACME Pty Ltd")
    3. extracted name contained in the known name

    Unmatched names come back as a ``"new"`` placeholder. The placeholder is
    never persisted here; the caller creates the record at save time so the
    user can still edit or cancel.
    """

    def __init__(self, default_type: BeneficiaryType = DEFAULT_BENEFICIARY_TYPE):
        self.default_type = default_type

    def find(self, extracted_name: str, known: Sequence[Beneficiary]) -> Optional[Beneficiary]:
        name = normalize(extracted_name)
        if not name:
            return None

        candidates = [(b, normalize(b.name)) for b in known]
        candidates = [(b, known_name) for b, known_name in candidates if known_name]

        tiers = (
            lambda known_name: known_name == name,
            lambda known_name: known_name in name,
            lambda known_name: name in known_name,
        )
        for tier in tiers:
            for beneficiary, known_name in candidates:
                if tier(known_name):
                    return beneficiary
        return None

    def resolve(
        self,
        extracted_name: str,
        known: Sequence[Beneficiary],
        beneficiary_type: Optional[str] = None,
    ) -> Beneficiary:
        """
        Resolve a name to a known beneficiary or a new placeholder.

        Args:
            extracted_name: Beneficiary name read off the document
            known: Directory of people and companies
            beneficiary_type: Type reported by the analysis service, if any

        Returns:
            The matching Beneficiary, or one with id "new"
        """
        match = self.find(extracted_name, known)
        if match is not None:
            logger.info("Beneficiary resolved", beneficiary_id=match.id, beneficiary_type=match.type)
            return match

        # Unrecognized or missing types fall back to the default
        resolved_type = beneficiary_type if beneficiary_type in ("person", "company") else self.default_type
        logger.info(
            "Beneficiary not found in directory, staging new placeholder",
            beneficiary_type=resolved_type,
            reported_type=beneficiary_type
        )
        return Beneficiary(id=NEW_BENEFICIARY_ID, name=extracted_name.strip(), type=resolved_type)
