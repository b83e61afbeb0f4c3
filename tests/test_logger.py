# tests/test_logger.py
from nextword_predictor.utils.logger_utils import Log


def _lines(tmp_path):
    return (tmp_path / "nextword.log").read_text(encoding="utf-8").splitlines()


def test_levels_and_metric_lines(tmp_path):
    Log.info("hello")
    Log.metric("service.predict_latency", 0.12, "s")
    lines = _lines(tmp_path)
    assert lines[0].endswith("INFO    | hello")
    assert lines[1].endswith("DEBUG   | service.predict_latency: 0.12s")


def test_min_level_filters_lower_levels(tmp_path):
    Log.configure(min_level="WARNING")
    try:
        Log.debug("quiet")
        Log.error("loud")
    finally:
        Log.configure(min_level="DEBUG")
    lines = _lines(tmp_path)
    assert len(lines) == 1 and "loud" in lines[0]


def test_time_block_records_elapsed(tmp_path):
    with Log.time_block("normalize") as t:
        pass
    assert t.elapsed >= 0.0
    assert "normalize done:" in _lines(tmp_path)[-1]


def test_echo_prints_plain_line_without_color(tmp_path, capsys):
    Log.configure(echo=True, use_color=False)
    try:
        Log.warning("visible")
    finally:
        Log.configure(echo=False, use_color=True)
    assert capsys.readouterr().out.strip().endswith("WARNING | visible")
