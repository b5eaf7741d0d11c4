from decimal import Decimal as D

from irrf_api.core.brackets import (
    IRRF_TABLE_052025,
    IrrfBracket,
    describe_table,
    format_brl,
    select_bracket,
)


def test_limits_strictly_increasing_with_open_top():
    limits = [b.upper for b in IRRF_TABLE_052025]
    assert limits[-1] is None
    bounded = limits[:-1]
    assert all(lo < hi for lo, hi in zip(bounded, bounded[1:]))


def test_bracket_edges_are_inclusive():
    assert select_bracket(D("2428.80")).rate == D("0.0")
    assert select_bracket(D("2428.81")).rate == D("7.5")
    assert select_bracket(D("2826.65")).rate == D("7.5")
    assert select_bracket(D("3751.05")).rate == D("15.0")
    assert select_bracket(D("4664.68")).rate == D("22.5")
    assert select_bracket(D("4664.69")).rate == D("27.5")


def test_top_bracket_catches_large_bases():
    top = select_bracket(D("1000000000.00"))
    assert top is IRRF_TABLE_052025[-1]
    assert top.deduction == D("908.73")


def test_fallback_to_last_bracket_without_open_top():
    table = (
        IrrfBracket(D("100.00"), D("0"), D("0")),
        IrrfBracket(D("200.00"), D("10"), D("10")),
    )
    assert select_bracket(D("250.00"), table) is table[-1]


def test_format_brl_uses_brazilian_separators():
    assert format_brl(D("2428.8")) == "2.428,80"
    assert format_brl(D("908.73")) == "908,73"
    assert format_brl(D("1234567.891")) == "1.234.567,89"


def test_describe_table_matches_display_labels():
    rows = describe_table()
    assert [row["faixa"] for row in rows] == [f"Faixa {i}" for i in range(1, 6)]
    assert rows[0]["base"] == "Até R$ 2.428,80"
    assert rows[1]["base"] == "De R$ 2.428,81 até R$ 2.826,65"
    assert rows[3]["base"] == "De R$ 3.751,06 até R$ 4.664,68"
    assert rows[4]["base"] == "Acima de R$ 4.664,68"
    assert rows[4]["limite"] is None
    assert [row["aliquota"] for row in rows] == [0.0, 7.5, 15.0, 22.5, 27.5]
    assert [row["deducao"] for row in rows] == [0.0, 182.16, 394.16, 675.49, 908.73]
