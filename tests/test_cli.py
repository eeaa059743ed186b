import builtins

import pytest

from cli import PeptideCalculatorCLI


@pytest.fixture
def run_cli(db_url, monkeypatch):
    def run(*answers):
        replies = iter(answers)
        monkeypatch.setattr(builtins, "input", lambda prompt="": next(replies))
        cli = PeptideCalculatorCLI(db_url)
        try:
            cli.run()
        finally:
            cli.close()
        return cli
    return run


def test_show_default_calculation(run_cli, capsys):
    run_cli("1", "0")
    out = capsys.readouterr().out
    assert "Draw to: 50.0 units (0.5 ml)" in out
    assert "Full doses: 4" in out


def test_toggle_unit(run_cli, capsys):
    cli = run_cli("4", "0")
    assert cli.state.dose_unit == "mcg"
    assert cli.state.desired_dose == 2500
    assert "Target dose: 2500.0 mcg" in capsys.readouterr().out


def test_preset_with_typical_dose(run_cli):
    # BPC-157 is the fourth preset; pick its "Standard dose"
    cli = run_cli("3", "4", "2", "0")
    assert cli.state.selected_peptide_id == "bpc157"
    assert (cli.state.desired_dose, cli.state.dose_unit) == (500, "mcg")


def test_enter_values_persists_last_state(run_cli, db_url):
    run_cli("2", "20", "1", "", "0")
    cli = PeptideCalculatorCLI(db_url)
    try:
        assert cli.state.mg_in_vial == 20
        assert cli.state.water_ml == 1
    finally:
        cli.close()


def test_bad_number_is_reported(run_cli, capsys):
    cli = run_cli("2", "ten", "0")
    assert cli.state.mg_in_vial == 10
    assert "Error" in capsys.readouterr().out


def test_save_and_load_configuration(run_cli, capsys):
    cli = run_cli("6", "", "2", "5", "", "", "8", "1", "0")
    out = capsys.readouterr().out
    assert "Configuration saved!" in out
    assert "Tirzepatide - 10mg/2mL" in out
    assert cli.state.mg_in_vial == 10


def test_delete_configuration(run_cli, store):
    run_cli("6", "Mine", "9", "1", "y", "0")
    assert store.get_all_configs() == []
