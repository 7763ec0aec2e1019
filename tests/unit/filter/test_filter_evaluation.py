from proinfer.filter import (
    FilterLevel,
    apply_filters,
    item_level,
    parse_filter_expression,
    satisfies_filter_list,
)
from proinfer.intermediate import Modification
from proinfer.report import ReportPeptide, ReportProtein, ReportPSM, ReportPSMSet


def _report_psm(add_psm, registry, sequence="PEPTIDEA", **kwargs):
    scores = kwargs.pop("scores", {})
    ranks = kwargs.pop("ranks", {})
    psm = add_psm(sequence, **kwargs)
    accessions = sorted(registry.connections.accessions_of_peptide(sequence), key=lambda a: a.id)
    return ReportPSM(psm, accessions, scores=scores, identification_ranks=ranks)


def test_item_levels():
    assert item_level(ReportPeptide("A", "A", None)) is FilterLevel.peptide
    assert item_level(ReportProtein(1)) is FilterLevel.protein
    assert item_level(ReportPSMSet("k")) is FilterLevel.psm
    assert item_level(object()) is None


def test_filters_of_other_levels_are_skipped(add_psm, registry):
    report_psm = _report_psm(add_psm, registry, charge=3)
    filters = [
        parse_filter_expression("charge_filter >= 2"),
        parse_filter_expression("nr_peptides_per_protein_filter >= 5"),
        parse_filter_expression("peptide_unique_filter == true"),
    ]

    assert satisfies_filter_list(report_psm, 0, filters)
    assert satisfies_filter_list(report_psm, 0, [])
    assert satisfies_filter_list(report_psm, 0, None)


def test_filter_list_is_a_conjunction(add_psm, registry):
    report_psm = _report_psm(add_psm, registry, charge=3)

    assert not satisfies_filter_list(
        report_psm,
        0,
        [parse_filter_expression("charge_filter >= 2"), parse_filter_expression("charge_filter < 3")],
    )


def test_missing_score_never_satisfies(add_psm, registry):
    report_psm = _report_psm(add_psm, registry, scores={"mascot_score": 20.0})

    assert parse_filter_expression("psmscore_mascot_score > 10").satisfies(report_psm)
    assert not parse_filter_expression("psmscore_comet_xcorr > 1").satisfies(report_psm)
    assert not parse_filter_expression("!psmscore_comet_xcorr > 1").satisfies(report_psm)


def test_psm_top_filter_uses_identification_rank(add_psm, registry):
    report_psm = _report_psm(add_psm, registry, ranks={"mascot_score": 2})

    assert parse_filter_expression("psmtop_mascot_score <= 2").satisfies(report_psm)
    assert not parse_filter_expression("psmtop_mascot_score <= 1").satisfies(report_psm)


def test_literal_and_list_filters(add_psm, registry):
    report_psm = _report_psm(add_psm, registry, accessions=("sp|P1", "sp|P2"))

    assert parse_filter_expression("psm_sequence_filter regex PEP.*A").satisfies(report_psm)
    assert parse_filter_expression("psm_sequence_filter contains TIDE").satisfies(report_psm)
    assert parse_filter_expression("psm_accessions_filter contains sp|P2").satisfies(report_psm)
    assert parse_filter_expression("psm_accessions_filter regex_only sp\\|P\\d").satisfies(report_psm)
    assert not parse_filter_expression("psm_accessions_filter contains_only sp|P1").satisfies(report_psm)
    assert parse_filter_expression("psm_nr_accessions_filter == 2").satisfies(report_psm)


def test_modification_filters(add_psm, registry):
    oxidation = Modification(1, 15.99491, "M", "Oxidation")
    modified = _report_psm(add_psm, registry, "MPEPTIDE", modifications=(oxidation,))
    plain = _report_psm(add_psm, registry, "PEPTIDEA")

    any_mod = parse_filter_expression("psm_modifications_filter has_any_modification x")
    mass = parse_filter_expression("psm_modifications_filter has_mass 15.9954")
    residue = parse_filter_expression("psm_modifications_filter has_residue M")
    description = parse_filter_expression("psm_modifications_filter has_description Oxidation")

    assert apply_filters([modified, plain], [any_mod]) == [modified]
    assert mass.satisfies(modified)
    assert residue.satisfies(modified)
    assert description.satisfies(modified)
    assert not residue.satisfies(plain)


def test_bool_filters(add_psm, registry):
    report_psm = _report_psm(add_psm, registry)
    report_psm.is_decoy = True

    assert parse_filter_expression("psm_decoy_filter == true").satisfies(report_psm)
    assert not parse_filter_expression("psm_decoy_filter == false").satisfies(report_psm)
    assert parse_filter_expression("psm_unique_filter == yes").satisfies(report_psm)


def test_protein_filters():
    protein = ReportProtein(1)
    protein.score = 0.5

    assert parse_filter_expression("protein_score_filter < 1").satisfies(protein)
    assert not parse_filter_expression("nr_peptides_per_protein_filter >= 1").satisfies(protein)
    assert apply_filters(None, []) == []


def test_file_scope_narrows_file_and_score_filters(add_psm, registry):
    first = _report_psm(add_psm, registry, scores={"mascot_score": 40.0}, ranks={"mascot_score": 1})
    second = _report_psm(
        add_psm, registry, file_name="run2", scores={"mascot_score": 10.0}, ranks={"mascot_score": 3}
    )
    psm_set = ReportPSMSet("key", [first, second])
    peptide = ReportPeptide("PEPTIDEA", "PEPTIDEA", None)
    peptide.add_psm_set(psm_set)
    run1, run2 = first.spectrum.file.id, second.spectrum.file.id

    psm_files = parse_filter_expression("psm_file_list_filter contains_only run2")
    peptide_files = parse_filter_expression("peptide_file_list_filter contains_only run1")
    score = parse_filter_expression("psmscore_mascot_score >= 20")
    top = parse_filter_expression("psmtop_mascot_score <= 1")

    assert not psm_files.satisfies(psm_set, 0)
    assert psm_files.satisfies(psm_set, run2)
    assert not peptide_files.satisfies(peptide, 0)
    assert peptide_files.satisfies(peptide, run1)

    assert satisfies_filter_list(psm_set, 0, [score, top])
    assert satisfies_filter_list(psm_set, run1, [score, top])
    assert not satisfies_filter_list(psm_set, run2, [score])
    assert not satisfies_filter_list(psm_set, run2, [top])
    assert not satisfies_filter_list(first, run2, [score])
    assert psm_set.get_best_score("mascot_score") == 40.0
