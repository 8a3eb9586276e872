# tests/test_writer.py
import pandas as pd

from vpass_converter.normalize import OUTPUT_COLUMNS
from vpass_converter.writer import render_csv, write_csv


def _frame(rows):
    df = pd.DataFrame([(d, i, a, "", "") for d, i, a in rows], columns=OUTPUT_COLUMNS)
    df["Amount"] = df["Amount"].astype("int64")
    return df


def test_write_csv(tmp_path):
    df = _frame([
        ("2022/7/4", "ＡＭＡＺＯＮ．ＣＯ．ＪＰ", 3844),
        ("2022/7/13", "東京都水道局", 8459),
        ("2022/7/16", "セブン－イレブン／ｉＤ", 98),
        ("2022/7/19", "メルカリ", 2700),
    ])
    out = write_csv(df, tmp_path / "out.csv")
    assert out.read_bytes().decode("utf-8") == (
        "Date,Item,Amount,Purpose,Method\n"
        "2022/7/4,ＡＭＡＺＯＮ．ＣＯ．ＪＰ,3844,,\n"
        "2022/7/13,東京都水道局,8459,,\n"
        "2022/7/16,セブン－イレブン／ｉＤ,98,,\n"
        "2022/7/19,メルカリ,2700,,\n"
    )


def test_render_quotes_item_with_comma():
    text = render_csv(_frame([("2022/08/05", 'A, "B"', 10)]))
    assert text.splitlines()[1] == '2022/08/05,"A, ""B""",10,,'


def test_render_amount_reparses():
    amounts = [0, 7, 1000, 999_999_999]
    text = render_csv(_frame([("2022/08/05", "x", n) for n in amounts]))
    written = [int(line.split(",")[2]) for line in text.splitlines()[1:]]
    assert written == amounts


def test_render_header_only():
    assert render_csv(_frame([])) == "Date,Item,Amount,Purpose,Method\n"
