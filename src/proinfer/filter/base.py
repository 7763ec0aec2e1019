"""Filter objects applicable to PSMs, peptides and proteins."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Callable

from proinfer.errors import InvalidValueError
from proinfer.report import ReportPeptide, ReportProtein, ReportPSM, ReportPSMSet

from .comparator import FilterComparator
from .types import FilterType

MASS_TOLERANCE = 0.001


class FilterLevel(str, Enum):
    psm = "psm"
    peptide = "peptide"
    protein = "protein"


_LEVEL_CLASSES = {
    FilterLevel.psm: (ReportPSM, ReportPSMSet),
    FilterLevel.peptide: (ReportPeptide,),
    FilterLevel.protein: (ReportProtein,),
}


def item_level(item: Any) -> FilterLevel | None:
    for level, classes in _LEVEL_CLASSES.items():
        if isinstance(item, classes):
            return level
    return None


def psms_in_file(item: ReportPSM | ReportPSMSet, file_id: int = 0) -> list[ReportPSM]:
    """PSMs of a PSM-level item from input file ``file_id``; all of them for 0."""

    psms = item.psms if isinstance(item, ReportPSMSet) else [item]
    if not file_id:
        return list(psms)
    return [psm for psm in psms if psm.spectrum.file.id == file_id]


def parse_rank(value) -> int:
    """Return ``value`` as a rank.

    Raises
    ------
    InvalidValueError
        If ``value`` is not a finite integral number.
    """

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidValueError("please enter an integer value") from None
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidValueError("please enter an integer value")
    return int(number)


def _compare_number(objective, comparator: FilterComparator, value: float) -> bool:
    if isinstance(objective, bool) or objective is None:
        return False
    objective = float(objective)
    if math.isnan(objective):
        return False
    if comparator is FilterComparator.less:
        return objective < value
    if comparator is FilterComparator.less_equal:
        return objective <= value
    if comparator is FilterComparator.equal:
        return objective == value
    if comparator is FilterComparator.not_equal:
        return objective != value
    if comparator is FilterComparator.greater_equal:
        return objective >= value
    if comparator is FilterComparator.greater:
        return objective > value
    return False


def _compare_literal(objective, comparator: FilterComparator, value: str) -> bool:
    if objective is None:
        return False
    objective = str(objective)
    if comparator is FilterComparator.equal:
        return objective == value
    if comparator is FilterComparator.not_equal:
        return objective != value
    if comparator is FilterComparator.contains:
        return value in objective
    if comparator is FilterComparator.regex:
        return re.fullmatch(value, objective) is not None
    return False


def _compare_list(objective, comparator: FilterComparator, value: str) -> bool:
    entries = [str(entry) for entry in (objective or ())]
    if comparator is FilterComparator.contains:
        return value in entries
    if comparator is FilterComparator.contains_only:
        return bool(entries) and all(entry == value for entry in entries)
    if comparator is FilterComparator.regex:
        return any(re.fullmatch(value, entry) for entry in entries)
    if comparator is FilterComparator.regex_only:
        return bool(entries) and all(re.fullmatch(value, entry) for entry in entries)
    return False


def _compare_modifications(objective, comparator: FilterComparator, value) -> bool:
    mods = tuple(objective or ())
    if comparator is FilterComparator.has_any_modification:
        return len(mods) > 0
    if comparator is FilterComparator.has_no_modification:
        return len(mods) == 0
    if comparator is FilterComparator.has_description:
        return any(mod.description == value for mod in mods)
    if comparator is FilterComparator.has_mass:
        return any(abs(mod.mass - value) <= MASS_TOLERANCE for mod in mods)
    if comparator is FilterComparator.has_residue:
        return any(mod.residue == value for mod in mods)
    return False


def compare(filter_type: FilterType, objective, comparator: FilterComparator, value) -> bool:
    if filter_type is FilterType.numerical:
        return _compare_number(objective, comparator, value)
    if filter_type is FilterType.bool:
        if objective is None:
            return False
        if comparator is FilterComparator.equal:
            return bool(objective) == value
        return bool(objective) != value
    if filter_type is FilterType.literal:
        return _compare_literal(objective, comparator, value)
    if filter_type is FilterType.literal_list:
        return _compare_list(objective, comparator, value)
    return _compare_modifications(objective, comparator, value)


class Filter:
    """A typed predicate over report items of one level.

    An item whose objective value cannot be determined (e.g. a missing score)
    never satisfies the filter, negated or not.
    """

    level: FilterLevel
    filter_type: FilterType

    def __init__(self, short_name: str, comparator: FilterComparator, value, negate: bool = False) -> None:
        self.short_name = short_name
        self.comparator = comparator
        self.value = value
        self.negate = negate

    def __repr__(self) -> str:
        neg = "not " if self.negate else ""
        return f"{type(self).__name__}({self.short_name} {neg}{self.comparator.token} {self.value!r})"

    def supports(self, item: Any) -> bool:
        return item_level(item) is self.level

    def get_objective(self, item: Any, file_id: int = 0):
        raise NotImplementedError

    def satisfies(self, item: Any, file_id: int = 0) -> bool:
        objective = self.get_objective(item, file_id)
        if objective is None and self.filter_type is not FilterType.literal_list:
            return False
        result = compare(self.filter_type, objective, self.comparator, self.value)
        return result != self.negate


class SimpleFilter(Filter):
    """Filter on one attribute of an item, as described by a registered filter."""

    def __init__(
        self,
        short_name: str,
        level: FilterLevel,
        filter_type: FilterType,
        extractor: Callable[[Any, int], Any],
        comparator: FilterComparator,
        value,
        negate: bool = False,
    ) -> None:
        super().__init__(short_name, comparator, value, negate)
        self.level = level
        self.filter_type = filter_type
        self._extractor = extractor

    def get_objective(self, item: Any, file_id: int = 0):
        return self._extractor(item, file_id)


class ScoreFilterFamily(str, Enum):
    """Parametric filter families; the score short name follows the prefix."""

    psm_score = "psmscore_"
    peptide_score = "pepscore_"
    psm_top = "psmtop_"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def level(self) -> FilterLevel:
        if self is ScoreFilterFamily.peptide_score:
            return FilterLevel.peptide
        return FilterLevel.psm

    @classmethod
    def match(cls, short_name: str) -> "ScoreFilterFamily | None":
        for family in cls:
            if short_name.startswith(family.prefix):
                return family
        return None


class ScoreFilter(Filter):
    """Filter on an arbitrary score, or on the rank a PSM has for that score."""

    filter_type = FilterType.numerical

    def __init__(
        self,
        family: ScoreFilterFamily,
        score_short: str,
        comparator: FilterComparator,
        value: float,
        negate: bool = False,
    ) -> None:
        if family is ScoreFilterFamily.psm_top:
            value = parse_rank(value)
        super().__init__(family.prefix + score_short, comparator, value, negate)
        self.family = family
        self.score_short = score_short
        self.level = family.level

    def get_objective(self, item: Any, file_id: int = 0):
        if file_id and self.level is FilterLevel.psm:
            scoped = psms_in_file(item, file_id)
            if not scoped:
                return None
            if isinstance(item, ReportPSMSet) and len(scoped) < len(item.psms):
                subset = ReportPSMSet(item.key, scoped)
                subset.copy_fdr_data(item)
                item = subset
        if self.family is ScoreFilterFamily.psm_top:
            return item.get_identification_rank(self.score_short)
        return item.get_score(self.score_short)
