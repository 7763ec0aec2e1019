import pytest

from proinfer.errors import (
    FilterError,
    InvalidValueError,
    MalformedExpressionError,
    MissingComparatorError,
    UnknownFilterError,
)
from proinfer.filter import (
    FilterComparator,
    FilterType,
    ScoreFilter,
    ScoreFilterFamily,
    available_comparators,
    build_filter,
    filter_to_string,
    get_filter_type,
    parse_filter_expression,
    parse_filter_expressions,
    registered_filters,
    satisfies_filter_list,
)
from proinfer.intermediate import Modification
from proinfer.report import ReportPeptide, ReportProtein, ReportPSM, ReportPSMSet


@pytest.mark.parametrize(
    "short_name, expected",
    [
        ("charge_filter", FilterType.numerical),
        ("psm_decoy_filter", FilterType.bool),
        ("peptide_sequence_filter", FilterType.literal),
        ("protein_accessions_filter", FilterType.literal_list),
        ("psm_modifications_filter", FilterType.modification),
        ("psmscore_mascot_score", FilterType.numerical),
        ("pepscore_myengine", FilterType.numerical),
        ("psmtop_mascot_score", FilterType.numerical),
        ("pepscore_", None),
        ("no_such_filter", None),
        (None, None),
    ],
)
def test_get_filter_type(short_name, expected):
    assert get_filter_type(short_name) is expected


def test_available_comparators_follow_the_type():
    assert available_comparators("psm_decoy_filter") == [FilterComparator.equal, FilterComparator.not_equal]
    assert available_comparators("no_such_filter") == []


def test_score_filter_carries_its_score_name():
    built = build_filter("pepscore_myengine", "<=", "0.01")

    assert isinstance(built, ScoreFilter)
    assert built.family is ScoreFilterFamily.peptide_score
    assert built.score_short == "myengine"
    assert built.value == 0.01


def test_build_filter_requires_a_comparator():
    with pytest.raises(MissingComparatorError, match="please select a comparator"):
        build_filter("charge_filter", None, "2")


def test_build_filter_rejects_unknown_names():
    with pytest.raises(UnknownFilterError):
        build_filter("no_such_filter", "==", "2")
    with pytest.raises(UnknownFilterError):
        build_filter("psmscore_", "<", "2")


def test_build_filter_rejects_comparator_of_other_type():
    with pytest.raises(MissingComparatorError, match="regex"):
        build_filter("charge_filter", "regex", "2")


@pytest.mark.parametrize(
    "short_name, comparator, value",
    [
        ("charge_filter", ">=", "two"),
        ("psm_decoy_filter", "==", "maybe"),
        ("peptide_sequence_filter", "regex", "PEP[TIDE"),
        ("psm_modifications_filter", "has_mass", "heavy"),
    ],
)
def test_build_filter_rejects_invalid_values(short_name, comparator, value):
    with pytest.raises(InvalidValueError):
        build_filter(short_name, comparator, value)


def test_filter_errors_share_a_base():
    for error in (UnknownFilterError, MissingComparatorError, InvalidValueError, MalformedExpressionError):
        assert issubclass(error, FilterError)


@pytest.mark.parametrize(
    "text",
    [
        "!charge_filter >= 2",
        "not charge_filter >= 2",
        "charge_filter not >= 2",
        "charge_filter !>= 2",
    ],
)
def test_negation_forms(text):
    parsed = parse_filter_expression(text)

    assert parsed.negate
    assert parsed.short_name == "charge_filter"
    assert parsed.comparator is FilterComparator.greater_equal
    assert parsed.value == 2.0


def test_not_equal_token_is_no_negation():
    parsed = parse_filter_expression("charge_filter != 2")

    assert not parsed.negate
    assert parsed.comparator is FilterComparator.not_equal


def test_literal_value_keeps_spaces():
    parsed = parse_filter_expression("psm_source_id_filter contains scan 12")

    assert parsed.value == "scan 12"


@pytest.mark.parametrize("text", ["", "charge_filter", "charge_filter >=", "!charge_filter not >="])
def test_too_few_parameters(text):
    with pytest.raises(MalformedExpressionError, match="too few parameters"):
        parse_filter_expression(text)


@pytest.mark.parametrize(
    "text",
    [
        "charge_filter >= 2",
        "psm_decoy_filter not == true",
        "pepscore_myengine <= 0.01",
        "protein_accessions_filter regex_only sp\\|.*",
    ],
)
def test_rendered_filters_parse_back(text):
    parsed = parse_filter_expression(text)
    again = parse_filter_expression(filter_to_string(parsed))

    assert again.short_name == parsed.short_name
    assert again.comparator is parsed.comparator
    assert again.value == parsed.value
    assert again.negate == parsed.negate


def test_parse_filter_expressions_collects_every_error():
    result = parse_filter_expressions(
        ["charge_filter >= 2", "no_such_filter == 1", "charge_filter", "psm_decoy_filter == nope"]
    )

    assert not result.ok
    assert [f.short_name for f in result.filters] == ["charge_filter"]
    assert set(result.errors) == {"no_such_filter == 1", "charge_filter", "psm_decoy_filter == nope"}


@pytest.mark.parametrize("value", ["1.5", "0.9", "inf", "-inf"])
def test_rank_filters_need_integer_values(value):
    with pytest.raises(InvalidValueError, match="please enter an integer value"):
        parse_filter_expression(f"psmtop_mascot_score < {value}")


def test_rank_filter_keeps_integral_values():
    built = build_filter("psmtop_mascot_score", "<", "2.0")

    assert built.value == 2
    assert isinstance(built.value, int)


def test_rank_filter_direct_construction_checks_the_value():
    with pytest.raises(InvalidValueError):
        ScoreFilter(ScoreFilterFamily.psm_top, "mascot_score", FilterComparator.less, 1.5)


def test_invalid_rank_value_is_reported_with_the_batch():
    result = parse_filter_expressions(["psmtop_mascot_score <= inf", "charge_filter >= 2"])

    assert [f.short_name for f in result.filters] == ["charge_filter"]
    assert result.errors == {"psmtop_mascot_score <= inf": "please enter an integer value"}


def test_other_score_filters_accept_fractions():
    assert build_filter("psmscore_mascot_score", "<", "1.5").value == 1.5


def test_peptide_score_filter_on_report_peptide():
    peptide = ReportPeptide("PEPTIDEA", "PEPTIDEA", None)
    peptide.scores["myengine"] = 0.02

    assert not parse_filter_expression("pepscore_myengine <= 0.01").satisfies(peptide)
    assert parse_filter_expression("!pepscore_myengine <= 0.01").satisfies(peptide)


_SAMPLE_VALUES = {
    FilterType.numerical: (">=", "2"),
    FilterType.bool: ("==", "true"),
    FilterType.literal: ("contains", "PEP"),
    FilterType.literal_list: ("contains", "P1"),
    FilterType.modification: ("has_residue", "M"),
}

_ROUND_TRIP_CASES = [
    (registered.short_name, *_SAMPLE_VALUES[registered.filter_type]) for registered in registered_filters()
] + [
    ("psmscore_mascot_score", ">=", "20"),
    ("pepscore_mascot_score", "<", "20"),
    ("psmtop_mascot_score", "<=", "1"),
]


@pytest.fixture
def sample_items(add_psm, registry):
    oxidation = Modification(1, 15.99491, "M", "Oxidation")
    first = add_psm("MPEPTIDE", accessions=("P1", "P2"), charge=3, modifications=(oxidation,))
    second = add_psm("PEPTIDEA", accessions=("P1",), file_name="run2", charge=1)
    p1, p2 = registry.find_accession("P1"), registry.find_accession("P2")

    top = ReportPSM(first, [p1, p2], scores={"mascot_score": 42.0}, identification_ranks={"mascot_score": 1})
    top.fdr = 0.01
    decoy = ReportPSM(
        second, [p1], scores={"mascot_score": 12.0}, identification_ranks={"mascot_score": 2}, is_decoy=True
    )
    top_set = ReportPSMSet("top", [top])
    decoy_set = ReportPSMSet("decoy", [decoy])

    modified = ReportPeptide("MPEPTIDE", "MPEPTIDE", registry.find_peptide("MPEPTIDE"))
    modified.add_psm_set(top_set)
    modified.scores["mascot_score"] = 42.0
    plain = ReportPeptide("PEPTIDEA", "PEPTIDEA", registry.find_peptide("PEPTIDEA"))
    plain.add_psm_set(decoy_set)

    protein = ReportProtein(1)
    protein.add_accession(p1)
    protein.add_accession(p2)
    protein.add_peptide(modified)
    protein.add_peptide(plain)
    protein.score = 3.0
    protein.add_to_subsets(ReportProtein(2))

    return [top, decoy, top_set, decoy_set, modified, plain, protein, ReportProtein(3)]


@pytest.mark.parametrize("negate", [False, True])
@pytest.mark.parametrize("short_name, token, value", _ROUND_TRIP_CASES)
def test_parsed_filters_match_built_filters(sample_items, short_name, token, value, negate):
    built = build_filter(short_name, token, value, negate)
    parsed = parse_filter_expression(f"{'!' if negate else ''}{short_name} {token} {value}")
    rendered = parse_filter_expression(filter_to_string(built))

    expected = [satisfies_filter_list(item, 0, [built]) for item in sample_items]

    assert [satisfies_filter_list(item, 0, [parsed]) for item in sample_items] == expected
    assert [satisfies_filter_list(item, 0, [rendered]) for item in sample_items] == expected


def test_sample_items_tell_filters_apart(sample_items):
    outcomes = {
        short_name: tuple(
            satisfies_filter_list(item, 0, [build_filter(short_name, token, value)]) for item in sample_items
        )
        for short_name, token, value in _ROUND_TRIP_CASES
    }

    assert outcomes["charge_filter"] == (True, False, True, False, True, True, True, True)
    assert outcomes["psm_decoy_filter"] == (False, True, False, True, True, True, True, True)
    assert outcomes["psmtop_mascot_score"] == (True, False, True, False, True, True, True, True)
    assert outcomes["nr_peptides_per_protein_filter"] == (True, True, True, True, True, True, True, False)
