"""Inference settings persisted as JSON."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from proinfer.filter import FilterParseResult, parse_filter_expressions
from proinfer.intermediate import IdentificationKeySettings
from proinfer.logging import get_logger
from proinfer.scores import PSM_FDR_SCORE
from proinfer.scoring import SCORINGS, Scoring, scoring_from_settings

from proinfer.paths import resolve_config_file

logger = get_logger(__file__)


class ScoringSettings(BaseModel):
    method: str = "multiplicative"
    score_short: str = PSM_FDR_SCORE
    psms_for_scoring: Literal["best", "all"] = "best"

    @field_validator("method")
    @classmethod
    def _known_method(cls, value: str) -> str:
        if value not in SCORINGS:
            raise ValueError(f"unknown scoring '{value}', choose one of {', '.join(sorted(SCORINGS))}")
        return value

    def build(self) -> Scoring:
        return scoring_from_settings(
            self.method,
            score_short=self.score_short,
            psms_for_scoring=self.psms_for_scoring,
        )


class InferenceSettings(BaseModel):
    """Everything needed to configure one inference run.

    ``filters`` holds filter definitions in their textual form, e.g.
    ``"psm_fdr_filter <= 0.01"``. They are parsed by :meth:`build_filters`.
    """

    allowed_threads: int = 0
    consider_modifications: bool = False
    key_settings: IdentificationKeySettings = Field(default_factory=IdentificationKeySettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    filters: list[str] = Field(default_factory=list)

    def build_filters(self) -> FilterParseResult:
        result = parse_filter_expressions(self.filters)
        for text, message in result.errors.items():
            logger.warning("Ignoring filter '%s': %s", text, message)
        return result


def settings_path(path: Optional[os.PathLike[str] | str] = None) -> Path:
    return resolve_config_file(path, "PROINFER_CONFIG", "inference.json")


def load_settings(path: Optional[os.PathLike[str] | str] = None) -> InferenceSettings:
    """Read settings from ``path`` (or the default location).

    A missing file yields the default settings.

    Raises
    ------
    ValueError
        If the file is not valid JSON or does not describe valid settings.
    """

    resolved = settings_path(path)
    try:
        text = resolved.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No settings at %s, using defaults", resolved)
        return InferenceSettings()

    try:
        return InferenceSettings.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"invalid settings file {resolved}: {exc}") from exc


def save_settings(
    settings: InferenceSettings,
    path: Optional[os.PathLike[str] | str] = None,
) -> Path:
    resolved = settings_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    with resolved.open("w", encoding="utf-8") as handle:
        json.dump(settings.model_dump(mode="json"), handle, indent=2, sort_keys=True)
        handle.write("\n")
    return resolved
