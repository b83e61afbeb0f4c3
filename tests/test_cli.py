# tests/test_cli.py - one-shot predict command and the interactive loop
import io
import json
import random

from rich.console import Console

from nextword_predictor.cli import CLI, main
from nextword_predictor.core.controller import SelectionController
from nextword_predictor.core.protocols import Status
from nextword_predictor.core.service import build_service
from nextword_predictor.utils.config_manager import Config


def _scripted(lines):
    it = iter(lines)

    def ask(*args, **kwargs):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return ask


def _cli(initial, lines):
    cfg = Config(env={})
    cfg.data["fallback_delay"] = 0.0
    service = build_service(cfg, rng=random.Random(0), offline=True)
    controller = SelectionController(service, initial_text=initial)
    out = io.StringIO()
    cli = CLI(controller, cfg, console=Console(file=out, width=100), ask=_scripted(lines))
    return cli, out


def test_predict_prints_json(capsys):
    code = main(["--offline", "--seed", "3", "predict", "walk along the"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert [p["word"] for p in payload["predictions"]] == ["quick", "brown", "lazy", "red", "blue"]
    assert payload["predictions"][0]["probability"] == 0.8


def test_predict_without_text_is_an_error(capsys):
    code = main(["--offline", "predict", "   "])
    assert code == 2
    assert json.loads(capsys.readouterr().out) == {"error": "Text is required"}


def test_loop_picks_prediction_by_number():
    cli, out = _cli("salt and", ["1", "/text", "/quit"])
    cli.run()

    assert not cli.running
    state = cli.controller.state
    assert state.text == "salt and the"
    assert state.status is Status.READY
    assert "salt and the" in out.getvalue()
    assert "Top 5 predictions" in out.getvalue()


def test_loop_custom_word_and_new_text():
    cli, _ = _cli("salt and", ["+pepper", "walk along the"])
    cli.run()
    state = cli.controller.state
    assert state.text == "walk along the"
    assert state.predictions.words()[0] == "quick"


def test_out_of_range_number_is_reported():
    cli, out = _cli("salt and", ["9"])
    cli.run()
    assert "No prediction #9" in out.getvalue()
    assert cli.controller.state.text == "salt and"


def test_reset_and_unknown_command():
    cli, out = _cli("salt and", ["1", "/reset", "/bogus"])
    cli.run()
    assert cli.controller.state.text == "salt and"
    assert "Unknown command" in out.getvalue()


def test_config_command_rejects_unknown_key():
    cli, out = _cli("salt and", ["/config nope 1", "/config top_k 7"])
    cli.run()
    text = out.getvalue()
    assert "nope" in text
    assert cli.cfg["top_k"] == 7


def test_malformed_config_file_exits_with_one_line_error(tmp_path, capsys):
    path = tmp_path / "cfg.json"
    path.write_text("{not json", encoding="utf8")
    code = main(["--config", str(path), "--offline", "predict", "walk along the"])
    err = capsys.readouterr().err
    assert code == 2
    assert err.startswith("nextword: invalid configuration:")
    assert len(err.strip().splitlines()) == 1


def test_unknown_mode_in_env_exits_cleanly(monkeypatch, capsys):
    monkeypatch.setenv("NEXTWORD_MODE", "telepathy")
    code = main(["--offline", "predict", "walk along the"])
    assert code == 2
    assert "mode must be one of" in capsys.readouterr().err


def test_mixed_case_mode_in_env_is_accepted(monkeypatch, capsys):
    monkeypatch.setenv("NEXTWORD_MODE", "Chat")
    assert main(["--offline", "predict", "walk along the"]) == 0
    assert json.loads(capsys.readouterr().out)["predictions"][0]["word"] == "quick"
