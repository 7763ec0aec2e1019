import json

import pytest

from proinfer.errors import UnknownEntityError
from proinfer.io import load_inference_input
from proinfer.io.groups import GroupEntry, PSMSetEntry, build_group_graph, build_report_psm_sets
from proinfer.intermediate import IdentificationKeySettings


def test_build_group_graph(add_psm, registry):
    add_psm("AAA", accessions=("P1", "P2"))
    add_psm("CCC", accessions=("P1",))
    entries = [
        GroupEntry(id=1, tree_id=1, peptides=["CCC"], accessions=["P1"], children=[2]),
        GroupEntry(id=2, tree_id=1, peptides=["AAA"], accessions=["P2"]),
    ]

    graph = build_group_graph(entries, registry)

    assert graph[1].children == {2}
    assert [p.sequence for p in graph.all_peptides(1).values()] == ["CCC", "AAA"]


def test_build_group_graph_unknown_peptide(registry):
    with pytest.raises(UnknownEntityError, match="unknown peptide"):
        build_group_graph([GroupEntry(id=1, peptides=["XYZ"])], registry)


def test_psms_with_one_key_share_a_set(add_psm, registry):
    first = add_psm("AAA", file_name="run1", mass_to_charge=400.0, source_id="index=1")
    second = add_psm("AAA", file_name="run2", mass_to_charge=400.0, source_id="index=1")
    settings = IdentificationKeySettings(rt=False, spectrum_title=False)

    sets = build_report_psm_sets(
        registry,
        set_entries=[PSMSetEntry(psms=[first.id, second.id], fdr_score=0.01, is_fdr_good=True)],
        key_settings=settings,
    )

    assert len(sets) == 1
    (psm_set,) = sets.values()
    assert psm_set.psm_ids == {first.id, second.id}
    assert psm_set.fdr_score == 0.01
    assert psm_set.is_fdr_good


def test_load_inference_input(tmp_path, add_psm, registry):
    psm = add_psm("AAA", accessions=("P1", "P2"))
    path = tmp_path / "input.json"
    path.write_text(
        json.dumps(
            {
                "groups": [{"id": 1, "peptides": ["AAA"], "accessions": ["P1", "P2"]}],
                "same_sets": {"1": [1]},
                "subsets": {},
                "psms": {str(psm.id): {"scores": {"mascot_score": 42.0}, "is_decoy": True}},
                "psm_sets": [{"psms": [psm.id], "fdr_score": 0.02}],
            }
        )
    )

    data = load_inference_input(path, registry)

    assert list(data.group_graph) == [1]
    assert data.same_sets == {1: {1}}
    assert data.sub_groups == {}
    (psm_set,) = data.report_psm_sets.values()
    assert psm_set.fdr_score == 0.02
    assert psm_set.is_decoy
    assert psm_set.get_best_score("mascot_score") == 42.0
    assert [a.accession for a in psm_set.accessions] == ["P1", "P2"]


def test_load_inference_input_rejects_bad_documents(tmp_path, registry):
    path = tmp_path / "input.json"
    path.write_text(json.dumps({"groups": [{"peptides": []}]}))

    with pytest.raises(ValueError, match="invalid inference input"):
        load_inference_input(path, registry)
