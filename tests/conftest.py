# tests/conftest.py
import logging

import pytest

from vpass_converter import logging_setup

# Vpass からダウンロードした形のサンプル（Shift-JIS で書き出して使う）
FIXED_CSV = (
    "大村　幸佑　様,0000-0000-0000-0***,ＶＩＳＡ\n"
    "2022/08/05,ヨドバシカメラ　通信販売,4853,１,１,4853,\n"
    "2022/08/15,ＡＭＡＺＯＮ．ＣＯ．ＪＰ,3400,１,１,3400,\n"
    "大村　幸佑　様,0000-0000-0000-0***,ＡｐｐｌｅＰａｙ／ｉＤ\n"
    "2022/08/18,ファミリーマート／ｉＤ,340,１,１,340,ﾌｱﾐﾘ-ﾏ-ﾄ/ID\n"
    ",,,,,123456\n"
    ",,,,,123456,\n"
)

NON_FIXED_CSV = (
    "2022/7/4,ＡＭＡＺＯＮ．ＣＯ．ＪＰ,ご家族,1回払い,,'22/08,3844,3844,,,,,\n"
    "2022/7/13,東京都水道局,ご家族,1回払い,,'22/08,8459,8459,,,,,\n"
    "2022/7/16,セブン－イレブン／ｉＤ,ご家族,1回払い,,'22/08,98,98,,,,,\n"
    "2022/7/19,メルカリ,ご家族,1回払い,,'22/08,2700,2700,,,,,\n"
)


@pytest.fixture
def write_sjis(tmp_path):
    """テキストを Shift-JIS (cp932) で tmp_path に書き出す"""

    def _write(text, name="meisai.csv"):
        path = tmp_path / name
        path.write_bytes(text.encode("cp932"))
        return path

    return _write


@pytest.fixture
def fixed_csv():
    return FIXED_CSV


@pytest.fixture
def non_fixed_csv():
    return NON_FIXED_CSV


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    """CLI テストごとに configure_logging をやり直せるようにする

    CliRunner の stderr は呼び出しごとに差し替わるので、前のテストの
    ハンドラが残っていると閉じたストリームへ書き込んでしまう。
    """
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    pkg_logger = logging.getLogger("vpass_converter")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.setLevel(logging.NOTSET)
