import json

from irrf_api import main as cli


def test_calc_json_output(capsys):
    code = cli.main(
        ["calc", "--income", "5000", "--contribution", "750", "--dependents", "2", "--json"]
    )
    out = capsys.readouterr().out
    assert code == 0
    payload = json.loads(out)
    assert payload["valor_irrf"] == 195.44
    assert payload["valor_irrf_apos_pl_1087_25"] == 0.0
    assert "memoria_calculo" not in payload


def test_calc_json_with_trace(capsys):
    code = cli.main(["calc", "--income", "8000", "--json", "--trace"])
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert len(payload["memoria_calculo"]["etapas"]) == 9
    assert "mensagem" in payload


def test_calc_table_output(capsys):
    code = cli.main(["calc", "--income", "2000", "--no-color"])
    out = capsys.readouterr().out
    assert code == 0
    assert "607,20" in out
    assert "1.392,80" in out


def test_invalid_dependents_exit_code(capsys):
    code = cli.main(["calc", "--income", "5000", "--dependents", "2.5", "--no-color"])
    assert code == cli.EXIT_INVALID_INPUT
    assert "quantidade_dependentes" in capsys.readouterr().out


def test_missing_income(capsys):
    assert cli.main(["calc", "--no-color"]) == cli.EXIT_INVALID_INPUT


def test_table_command(capsys):
    assert cli.main(["table", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "Faixa 5" in out
    assert "27,5%" in out
