"""Score models: which scores exist and whether higher values are better."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreModel:
    short_name: str
    name: str
    higher_score_better: bool = True

    def is_better(self, value: float | None, other: float | None) -> bool:
        """Whether ``value`` is strictly better than ``other``. NaN/None never wins."""

        if value is None or math.isnan(value):
            return False
        if other is None or math.isnan(other):
            return True
        if self.higher_score_better:
            return value > other
        return value < other


PSM_FDR_SCORE = "psm_fdr_score"
PSM_Q_VALUE = "psm_q_value"
PSM_COMBINED_FDR_SCORE = "psm_combined_fdr_score"

_KNOWN_SCORES = {
    model.short_name: model
    for model in (
        ScoreModel(PSM_FDR_SCORE, "PSM Level FDRScore", False),
        ScoreModel(PSM_Q_VALUE, "PSM Level q-value", False),
        ScoreModel(PSM_COMBINED_FDR_SCORE, "PSM Level Combined FDR Score", False),
        ScoreModel("mascot_score", "Mascot Score", True),
        ScoreModel("mascot_expect", "Mascot Expect", False),
        ScoreModel("xtandem_expect", "X!Tandem Expect", False),
        ScoreModel("xtandem_hyperscore", "X!Tandem Hyperscore", True),
        ScoreModel("msgf_specevalue", "MS-GF:SpecEValue", False),
        ScoreModel("comet_xcorr", "Comet XCorr", True),
        ScoreModel("percolator_q_value", "Percolator q-value", False),
        ScoreModel("percolator_pep", "Percolator PEP", False),
    )
}


def get_score_model(short_name: str) -> ScoreModel:
    """Return the model for ``short_name``; unknown scores count higher as better."""

    model = _KNOWN_SCORES.get(short_name)
    if model is None:
        model = ScoreModel(short_name, short_name, True)
    return model


def known_score_models() -> list[ScoreModel]:
    return list(_KNOWN_SCORES.values())
