from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel

from schedule_engine.schemas.schedule import AcademicYear, Term

logger = logging.getLogger(__name__)


class AcademicWindow(BaseModel):
    """Calendar dates the schedule may be shown for; open ends mean unbounded."""

    model_config = {"frozen": True}

    opens_on: date | None = None
    cutoff: date | None = None

    def excludes(self, day: date) -> bool:
        if self.cutoff is not None and day > self.cutoff:
            return True
        if self.opens_on is not None and day < self.opens_on:
            return True
        return False


UNBOUNDED = AcademicWindow()


class TermCutoffPolicy:
    """Derives the last displayable date of an academic year from its terms.

    The final term is found by label first ("Trimestre 3"), because terms get
    renamed and re-dated during the year; the latest end date is only the
    fallback when no label carries the marker.
    """

    def __init__(self, final_term_marker: str = "3") -> None:
        self.final_term_marker = final_term_marker
        self._marker_pattern = re.compile(rf"(?<!\d){re.escape(final_term_marker)}(?!\d)")

    def is_final_term(self, term: Term) -> bool:
        return bool(self._marker_pattern.search(term.label))

    def final_term(self, terms: Iterable[Term]) -> Term | None:
        terms = list(terms)
        if not terms:
            return None
        labelled = [term for term in terms if self.is_final_term(term)]
        pool = labelled or terms
        if not labelled:
            logger.debug("No term labelled %r; falling back to the latest end date", self.final_term_marker)
        return max(pool, key=lambda term: (term.end, term.id))

    def cutoff_for(self, terms: Iterable[Term]) -> date | None:
        final = self.final_term(terms)
        return final.end if final is not None else None

    def window_for(
        self,
        terms: Iterable[Term],
        academic_year: AcademicYear | None = None,
    ) -> AcademicWindow:
        terms = list(terms)
        if academic_year is not None and not terms:
            terms = list(academic_year.terms)
        return AcademicWindow(
            opens_on=academic_year.start if academic_year is not None else None,
            cutoff=self.cutoff_for(terms),
        )


def cutoff_for(terms: Iterable[Term], final_term_marker: str = "3") -> date | None:
    return TermCutoffPolicy(final_term_marker).cutoff_for(terms)
