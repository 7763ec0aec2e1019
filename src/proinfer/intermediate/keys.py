"""Identification keys and peptide string ids.

A PSM's identification key is a fingerprint over a configurable subset of its
fields. Two PSMs sharing a key (for instance the same spectrum identified by
two search engines) are merged into one PSM set.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from .models import Modification, PeptideSpectrumMatch

KEY_FIELDS = (
    "file",
    "charge",
    "mz",
    "rt",
    "source_id",
    "spectrum_title",
    "sequence",
    "modifications",
)


class IdentificationKeySettings(BaseModel):
    """Which PSM fields take part in the identification key."""

    file: bool = False
    charge: bool = True
    mz: bool = True
    rt: bool = True
    source_id: bool = True
    spectrum_title: bool = True
    sequence: bool = True
    modifications: bool = True

    def enabled(self) -> tuple[str, ...]:
        return tuple(name for name in KEY_FIELDS if getattr(self, name))


def _coerce_settings(settings) -> IdentificationKeySettings:
    if settings is None:
        return IdentificationKeySettings()
    if isinstance(settings, IdentificationKeySettings):
        return settings
    return IdentificationKeySettings.model_validate(dict(settings))


def modification_string(modifications: Iterable[Modification]) -> str:
    parts = []
    for mod in sorted(modifications, key=lambda m: (m.position, m.mass)):
        parts.append(f"[{mod.position};{mod.mass:.4f};{mod.residue or ''}]")
    return "".join(parts)


def _field_value(psm: PeptideSpectrumMatch, name: str) -> str:
    if name == "file":
        return str(psm.file.id)
    if name == "charge":
        return "NA" if psm.charge is None else str(psm.charge)
    if name == "mz":
        return f"{psm.mass_to_charge:.4f}"
    if name == "rt":
        return "NA" if psm.retention_time is None else f"{psm.retention_time:.2f}"
    if name == "source_id":
        return psm.source_id or "NA"
    if name == "spectrum_title":
        return psm.spectrum_title or "NA"
    if name == "sequence":
        return psm.sequence
    if name == "modifications":
        return modification_string(psm.modifications)
    raise ValueError(f"unknown identification key field: {name}")


def identification_key(psm: PeptideSpectrumMatch, settings=None) -> str:
    """Return the identification key of ``psm`` under ``settings``.

    ``settings`` may be an :class:`IdentificationKeySettings`, a mapping of
    field name to bool, or ``None`` for the defaults.
    """

    fields = _coerce_settings(settings).enabled()
    return ":".join(_field_value(psm, name) for name in fields)


def peptide_string_id(
    sequence: str,
    modifications: Iterable[Modification] = (),
    consider_modifications: bool = False,
) -> str:
    """String id of a report peptide, with or without its modifications."""

    if not consider_modifications:
        return sequence
    mods = sorted(modifications, key=lambda m: (m.position, m.mass))
    return sequence + "".join(f"({mod.position};{mod.mass:.4f})" for mod in mods)
