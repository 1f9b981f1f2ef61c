"""
Project matching for extracted invoices.

Scores every in-flight project against the beneficiary, venue and date read
off an invoice and picks the single best candidate. Points and date windows
are empirically chosen constants kept stable for behavioral compatibility;
they can be overridden through settings for experiments.
"""

from datetime import date, timedelta
from typing import Dict, Optional, Sequence

from loguru import logger
from pydantic import BaseModel

from ..models.directory import ProjectCandidate
from ..models.invoice import ExtractedInvoiceData
from .date_labels import parse_date_label
from .normalization import NormalizedExtraction, contains, loosely_matches


class ScoringConfig(BaseModel):
    """Weights and date windows for candidate scoring (loaded from environment)"""
    strong_beneficiary_points: int = 10
    weak_beneficiary_points: int = 5
    beneficiary_in_name_points: int = 3
    venue_points: int = 8
    explicit_date_points: int = 5
    label_date_points: int = 10
    buffer_days_before: int = 7
    buffer_days_after: int = 60


class CandidateScore(BaseModel):
    """Score of one candidate with the rules that fired"""
    project_id: str
    score: int
    rules: Dict[str, bool]


class ProjectMatch(BaseModel):
    """Outcome of matching one extraction against the project list"""
    project: Optional[ProjectCandidate] = None
    score: int = 0
    scores: list[CandidateScore] = []


def _within_buffered(day: date, start: date, end: date, before: timedelta, after: timedelta) -> bool:
    """True when day falls in [start - before, end + after]; a window past the calendar never matches"""
    try:
        return start - before <= day <= end + after
    except OverflowError:
        return False


class CandidateScorer:
    """
    Scores one project candidate against one extraction.

    Rules accumulate independently, except that the weak (client person)
    beneficiary rule only fires when the strong (client company) rule did not.

    | Rule                          | Points |
    |-------------------------------|--------|
    | beneficiary ~ client company  | 10     |
    | beneficiary ~ client person   | 5      |
    | beneficiary in project name   | 3      |
    | venue/address ~ project venue | 8      |
    | date in project date window   | 5      |
    | date in name-coded window     | 10     |
    """

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()

    def evaluate(self, extracted: ExtractedInvoiceData, candidate: ProjectCandidate) -> CandidateScore:
        cfg = self.config
        fields = NormalizedExtraction(extracted)
        rules = {}
        score = 0

        strong = loosely_matches(fields.beneficiary, candidate.client_company_name)
        rules["strong_beneficiary"] = strong
        if strong:
            score += cfg.strong_beneficiary_points

        weak = not strong and loosely_matches(fields.beneficiary, candidate.client_name)
        rules["weak_beneficiary"] = weak
        if weak:
            score += cfg.weak_beneficiary_points

        in_name = contains(candidate.name, fields.beneficiary)
        rules["beneficiary_in_name"] = in_name
        if in_name:
            score += cfg.beneficiary_in_name_points

        venue = loosely_matches(fields.location, candidate.venue)
        rules["venue"] = venue
        if venue:
            score += cfg.venue_points

        explicit_date = False
        label_date = False
        if fields.date is not None:
            before = timedelta(days=cfg.buffer_days_before)
            after = timedelta(days=cfg.buffer_days_after)

            if candidate.start_date is not None:
                window_end = candidate.due_date or candidate.start_date
                explicit_date = _within_buffered(fields.date, candidate.start_date, window_end, before, after)

            interval = parse_date_label(candidate.name)
            if interval is not None:
                label_date = _within_buffered(fields.date, interval.start, interval.end, before, after)

        rules["explicit_date"] = explicit_date
        if explicit_date:
            score += cfg.explicit_date_points

        rules["label_date"] = label_date
        if label_date:
            score += cfg.label_date_points

        return CandidateScore(project_id=candidate.id, score=score, rules=rules)

    def score(self, extracted: ExtractedInvoiceData, candidate: ProjectCandidate) -> int:
        return self.evaluate(extracted, candidate).score


class ProjectMatcher:
    """
    Picks the best-scoring project for an extraction.

    Ties go to the candidate that appears first in the input; a best score of
    zero means no match.
    """

    def __init__(self, scorer: CandidateScorer = None):
        self.scorer = scorer or CandidateScorer()

    def match(self, extracted: ExtractedInvoiceData, candidates: Sequence[ProjectCandidate]) -> ProjectMatch:
        best: Optional[ProjectCandidate] = None
        best_score = 0
        scores = []

        for candidate in candidates:
            result = self.scorer.evaluate(extracted, candidate)
            scores.append(result)
            logger.debug(
                "Project candidate scored",
                project_id=candidate.id,
                score=result.score,
                rules=result.rules
            )
            # Strictly greater keeps the earliest candidate on ties
            if result.score > best_score:
                best, best_score = candidate, result.score

        if best is None:
            logger.info("No project matched extracted invoice", candidates=len(candidates))
        else:
            logger.info("Project matched", project_id=best.id, project_name=best.name, score=best_score)

        return ProjectMatch(project=best, score=best_score, scores=scores)

    def best_match(
        self, extracted: ExtractedInvoiceData, candidates: Sequence[ProjectCandidate]
    ) -> Optional[ProjectCandidate]:
        return self.match(extracted, candidates).project


def create_project_matcher(**overrides) -> ProjectMatcher:
    """
    Factory function to create a project matcher with optional overrides.

    Uses environment variables as defaults, can be overridden per call
    (e.g. ``create_project_matcher(venue_points=12)``).
    """
    from ..core.config import settings

    values = {
        "strong_beneficiary_points": settings.match_strong_beneficiary_points,
        "weak_beneficiary_points": settings.match_weak_beneficiary_points,
        "beneficiary_in_name_points": settings.match_beneficiary_in_name_points,
        "venue_points": settings.match_venue_points,
        "explicit_date_points": settings.match_explicit_date_points,
        "label_date_points": settings.match_label_date_points,
        "buffer_days_before": settings.match_buffer_days_before,
        "buffer_days_after": settings.match_buffer_days_after,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    return ProjectMatcher(CandidateScorer(ScoringConfig(**values)))
