# tests/test_config/test_settings.py
import json
import os
from pathlib import Path
import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict
from replkit.config.settings import App, EXIT_COMMANDS, HISTORY_FILE, HISTORY_LENGTH
from replkit.models.dataModel import InterruptBehavior


def setup_function():
    for k in list(os.environ):
        if k.upper().startswith("RPL_"):
            del os.environ[k]


def teardown_function():
    for k in list(os.environ):
        if k.upper().startswith("RPL_"):
            del os.environ[k]


def test_app_default_settings():
    app = App()
    assert app.beQuiet is True
    assert app.debug_mode is False
    assert app.prompt == "> "
    assert app.history_file == HISTORY_FILE
    assert app.historyLength == HISTORY_LENGTH == 1000
    assert app.commandMarker == "/"
    assert app.ctrlCBehavior == InterruptBehavior.CLEAR_PROMPT
    assert app.doubleCtrlCTimeout == 0.5
    assert app.allowNested is False
    assert app.nestedPromptFormat == "({level}) {prompt}"
    assert EXIT_COMMANDS == ("exit", "quit", "q")


def test_app_env_override():
    os.environ["RPL_PROMPT"] = "demo> "
    os.environ["RPL_ALLOWNESTED"] = "true"
    os.environ["rpl_ctrlcbehavior"] = "show_help"
    os.environ["RPL_DOUBLECTRLCTIMEOUT"] = "1.5"
    app = App()
    assert app.prompt == "demo> "
    assert app.allowNested is True
    assert app.ctrlCBehavior == InterruptBehavior.SHOW_HELP
    assert app.doubleCtrlCTimeout == 1.5


def test_app_invalid_values():
    os.environ["RPL_DOUBLECTRLCTIMEOUT"] = "0"
    with pytest.raises(ValidationError):
        App()
    del os.environ["RPL_DOUBLECTRLCTIMEOUT"]
    with pytest.raises(ValidationError):
        App(ctrlCBehavior="explode")
    with pytest.raises(ValidationError):
        App(historyLength=-1)


def test_app_json_config_file(tmp_path: Path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"prompt": "file> ", "historyLength": 50}))

    class FileApp(App):
        model_config = SettingsConfigDict(json_file=config_file)

    app = FileApp()
    assert app.prompt == "file> "
    assert app.historyLength == 50

    os.environ["RPL_PROMPT"] = "env> "
    assert FileApp().prompt == "env> "

