from proinfer.intermediate import IdentificationKeySettings, Modification, identification_key, peptide_string_id


def test_default_key_merges_files(add_psm):
    first = add_psm("PEPTIDEA", file_name="run1", mass_to_charge=512.25, source_id="index=7")
    second = add_psm("PEPTIDEA", file_name="run2", mass_to_charge=512.25, source_id="index=7")
    # retention times differ in the fixture, so ignore them here
    settings = IdentificationKeySettings(rt=False, spectrum_title=False)

    assert identification_key(first, settings) == identification_key(second, settings)
    assert identification_key(first, settings) == "2:512.2500:index=7:PEPTIDEA:"


def test_file_setting_separates_files(add_psm):
    first = add_psm("PEPTIDEA", file_name="run1", mass_to_charge=512.25, source_id="index=7")
    second = add_psm("PEPTIDEA", file_name="run2", mass_to_charge=512.25, source_id="index=7")
    settings = {"file": True, "rt": False, "spectrum_title": False}

    assert identification_key(first, settings) != identification_key(second, settings)


def test_key_is_deterministic_and_renders_modifications(add_psm):
    mods = (Modification(3, 15.99491, "M", "Oxidation"), Modification(0, 42.010565, None, "Acetyl"))
    psm = add_psm("PEMTIDE", modifications=mods, mass_to_charge=400.0)

    key = psm.get_identification_key(None)

    assert key == psm.get_identification_key(IdentificationKeySettings())
    assert key.endswith("PEMTIDE:[0;42.0106;][3;15.9949;M]")
    assert ":400.0000:" in key


def test_peptide_string_id():
    mods = [Modification(5, 79.96633, "S"), Modification(2, 15.99491, "M")]

    assert peptide_string_id("AMDESK", mods) == "AMDESK"
    assert peptide_string_id("AMDESK", mods, True) == "AMDESK(2;15.9949)(5;79.9663)"
    assert peptide_string_id("AMDESK", (), True) == "AMDESK"
