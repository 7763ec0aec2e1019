import pytest

from proinfer.errors import DuplicateIdentityError, RegistrySealedError, UnknownEntityError
from proinfer.intermediate import IdentityRegistry


def test_register_accession_is_idempotent(registry):
    first = registry.register_accession("P1", "MPEPTIDEA")
    second = registry.register_accession("P1", "OTHER")

    assert first is second
    assert first.id == 1
    assert registry.nr_accessions == 1
    assert registry.find_accession("P1") is first
    assert registry.get_accession(1) is first


def test_register_peptide_is_idempotent(registry):
    first = registry.register_peptide("PEPTIDEA")
    second = registry.register_peptide("PEPTIDEA")

    assert first is second
    assert registry.nr_peptides == 1
    assert registry.find_peptide("PEPTIDEA").id == first.id


def test_ids_are_dense_per_kind(registry):
    accs = [registry.register_accession(name) for name in ("P1", "P2", "P3")]
    peps = [registry.register_peptide(seq) for seq in ("AAA", "CCC")]

    assert [acc.id for acc in accs] == [1, 2, 3]
    assert [pep.id for pep in peps] == [1, 2]
    assert list(registry.accession_ids()) == [1, 2, 3]


def test_commit_psm_attaches_to_peptide(add_psm, registry):
    psm = add_psm("PEPTIDEA")

    peptide = registry.find_peptide("PEPTIDEA")
    assert peptide.spectra == [psm]
    assert registry.get_psm(psm.id) is psm
    assert registry.nr_psms == 1


def test_commit_psm_twice_raises_and_keeps_registry(add_psm, registry):
    psm = add_psm("PEPTIDEA")

    with pytest.raises(DuplicateIdentityError):
        registry.commit_psm(psm)

    assert registry.nr_psms == 1
    assert registry.find_peptide("PEPTIDEA").spectra == [psm]


def test_commit_psm_requires_registered_peptide(registry):
    input_file = registry.register_input_file("run1")
    psm = registry.create_psm(2, 500.0, 0.0, None, "UNKNOWN", 0, "index=1", None, input_file)

    with pytest.raises(UnknownEntityError):
        registry.commit_psm(psm)
    assert registry.nr_psms == 0


def test_commit_psm_requires_registered_file(registry):
    registry.register_peptide("PEPTIDEA")
    other = IdentityRegistry().register_input_file("foreign")
    psm = registry.create_psm(2, 500.0, 0.0, None, "PEPTIDEA", 0, "index=1", None, other)

    with pytest.raises(UnknownEntityError):
        registry.commit_psm(psm)


def test_created_psm_ids_never_collide(registry):
    input_file = registry.register_input_file("run1")
    registry.register_peptide("PEPTIDEA")
    first = registry.create_psm(2, 500.0, 0.0, None, "PEPTIDEA", 0, "a", None, input_file)
    second = registry.create_psm(2, 501.0, 0.0, None, "PEPTIDEA", 0, "b", None, input_file)

    registry.commit_psm(second)
    registry.commit_psm(first)

    assert first.id != second.id
    assert sorted(registry.psm_ids()) == [first.id, second.id]


def test_sealed_registry_rejects_new_records(add_psm, registry):
    add_psm("PEPTIDEA", accessions=("P1",))
    registry.seal()

    assert registry.sealed
    with pytest.raises(RegistrySealedError):
        registry.register_accession("P2")
    with pytest.raises(RegistrySealedError):
        registry.register_peptide("NEWPEPTIDE")
    with pytest.raises(RegistrySealedError):
        registry.connections.link(1, 1)

    # lookups of existing records still work
    assert registry.register_accession("P1").id == 1
