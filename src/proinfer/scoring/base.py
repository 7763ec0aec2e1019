"""Protein scoring strategies."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

import numpy as np

from proinfer.logging import get_logger
from proinfer.report import ReportPeptide, ReportProtein
from proinfer.scores import PSM_FDR_SCORE, ScoreModel, get_score_model

logger = get_logger(__file__)


class PSMForScoring(str, Enum):
    """Which PSM sets of a peptide contribute to the protein score."""

    best = "best"
    all = "all"


class Scoring:
    """Base class of protein scorings.

    Subclasses implement :meth:`combine`, turning the collected PSM scores of
    a protein into one value.
    """

    name = "Base scoring"
    short_name = "base"

    def __init__(
        self,
        score_short: str = PSM_FDR_SCORE,
        psms_for_scoring: PSMForScoring | str = PSMForScoring.best,
    ) -> None:
        self.score_short = score_short
        self.psms_for_scoring = PSMForScoring(psms_for_scoring)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(score_short={self.score_short!r}, "
            f"psms_for_scoring={self.psms_for_scoring.value!r})"
        )

    @property
    def score_model(self) -> ScoreModel:
        return get_score_model(self.score_short)

    @property
    def higher_score_better(self) -> bool:
        """Orientation of the protein score, used for sorting proteins."""

        return self.score_model.higher_score_better

    def peptide_scores(self, peptide: ReportPeptide) -> list[float]:
        if self.psms_for_scoring is PSMForScoring.best:
            if self.score_short in peptide.scores:
                values = [peptide.scores[self.score_short]]
            else:
                values = [peptide.get_best_score(self.score_short)]
        else:
            values = [psm_set.get_score(self.score_short) for psm_set in peptide.psm_sets]
        return [float(v) for v in values if v is not None and not np.isnan(v)]

    def collect_scores(self, peptides: Iterable[ReportPeptide]) -> np.ndarray:
        values: list[float] = []
        for peptide in peptides:
            values.extend(self.peptide_scores(peptide))
        return np.asarray(values, dtype=float)

    def combine(self, scores: np.ndarray) -> float:
        raise NotImplementedError

    def calculate_protein_score(self, protein: ReportProtein) -> float:
        """Score of ``protein``; NaN when none of its peptides carries the score."""

        scores = self.collect_scores(protein.peptides)
        if scores.size == 0:
            logger.debug("No %s scores for protein %s", self.score_short, protein.id)
            return float("nan")
        return float(self.combine(scores))


class AdditiveScoring(Scoring):
    """Sum of the PSM scores.

    Meant for search engine scores where higher is better, e.g.
    ``mascot_score``. A sum of lower-is-better scores such as
    ``psm_fdr_score`` grows with the number of peptides, so proteins with more
    evidence sort worse; a warning is logged for that pairing.
    """

    name = "Additive Scoring"
    short_name = "additive"

    def __init__(
        self,
        score_short: str = PSM_FDR_SCORE,
        psms_for_scoring: PSMForScoring | str = PSMForScoring.best,
    ) -> None:
        super().__init__(score_short, psms_for_scoring)
        if not self.higher_score_better:
            logger.warning(
                "Additive scoring of %s, a lower-is-better score: proteins with more peptides score worse",
                self.score_short,
            )

    def combine(self, scores: np.ndarray) -> float:
        return scores.sum()


class MultiplicativeScoring(Scoring):
    name = "Multiplicative Scoring"
    short_name = "multiplicative"

    def combine(self, scores: np.ndarray) -> float:
        return scores.prod()


class GeometricMeanScoring(Scoring):
    """Geometric mean of the PSM scores.

    Only defined for positive scores; a protein with a non-positive score
    gets NaN.
    """

    name = "Geometric Mean Scoring"
    short_name = "geometric_mean"

    def combine(self, scores: np.ndarray) -> float:
        if (scores <= 0).any():
            return float("nan")
        return float(np.exp(np.log(scores).mean()))


SCORINGS: dict[str, type[Scoring]] = {
    cls.short_name: cls for cls in (AdditiveScoring, MultiplicativeScoring, GeometricMeanScoring)
}


def scoring_from_settings(method: str, **settings) -> Scoring:
    """Instantiate the scoring registered under ``method``.

    Raises
    ------
    ValueError
        If no scoring is known for ``method``.
    """

    try:
        cls = SCORINGS[method]
    except KeyError:
        raise ValueError(
            f"unknown scoring '{method}', choose one of {', '.join(sorted(SCORINGS))}"
        ) from None
    return cls(**settings)
