# tests/core/test_config_manager.py
import json
import logging

import pytest

from domstate.app import main

from domstate.core.managers.config_manager import ConfigManager
from domstate.core.utils.path_utils import PathUtils
from domstate.predicates.state import is_required

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "accessibility": {
        "min_name_length": 5
    },
    "required": {
        "excluded_input_types": ["color", "hidden", "range", "submit", "image", "reset"],
        "roles": ["combobox", "gridcell", "radiogroup", "spinbutton", "tree"]
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Een fixture die een geïsoleerde testomgeving opzet voor de ConfigManager:
    - Plaatst een nep 'settings.json' bestand in een tijdelijke map.
    - Monkeypatched PathUtils om naar dit bestand te wijzen.
    - Herlaadt na de test de echte configuratie, zodat andere tests er geen last van hebben.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    # De singleton is al geladen, dus forceer herladen vanuit ons nep-bestand
    manager = ConfigManager()
    manager.reset()

    yield manager

    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton():
    """Test of elke instantie dezelfde manager oplevert."""
    assert ConfigManager() is ConfigManager()


def test_config_manager_load(config_env):
    """Test of de manager de configuratie correct laadt."""
    config = config_env.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["accessibility"]["min_name_length"] == 5


def test_config_manager_get_nested(config_env):
    """Test het ophalen van geneste waarden."""
    assert config_env.get_nested("accessibility.min_name_length") == 5
    assert config_env.get_nested("non.existent.key", "default") == "default"
    # Een pad dóór een niet-dict waarde levert ook de default op
    assert config_env.get_nested("debug.level.deeper", "default") == "default"


def test_config_manager_set_nested(config_env):
    """Test het aanpassen van waarden in het geheugen."""
    config_env.set_nested("debug.level", "INFO")
    assert config_env.get_nested("debug.level") == "INFO"

    # Test het toevoegen van een nieuwe sleutel
    config_env.set_nested("new_feature.enabled", "True")
    assert config_env.get_nested("new_feature.enabled")

    # Test type-casting: de originele waarde is een int, dus de string '7' wordt een int.
    config_env.set_nested("accessibility.min_name_length", "7")
    assert config_env.get_nested("accessibility.min_name_length") == 7
    assert isinstance(config_env.get_nested("accessibility.min_name_length"), int)


def test_config_manager_set_nested_keeps_lists(config_env):
    """Lijsten worden niet gecast maar ongewijzigd opgeslagen."""
    config_env.set_nested("required.roles", ["textbox"])
    assert config_env.get_nested("required.roles") == ["textbox"]


def test_config_manager_reset(config_env):
    """Test of de reset-functie de configuratie herlaadt vanaf schijf."""
    config_env.set_nested("debug.level", "DEBUG")
    assert config_env.get_nested("debug.level") == "DEBUG"

    config_env.reset()

    assert config_env.get_nested("debug.level") == "WARNING"


def test_config_manager_missing_file_falls_back(tmp_path, monkeypatch):
    """Een ontbrekend settings.json levert een lege configuratie; defaults nemen het over."""
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "missing.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
        assert manager.get_nested("accessibility.min_name_length", 3) == 3
    finally:
        monkeypatch.undo()
        manager.reset()


def test_config_manager_invalid_json_falls_back(tmp_path, monkeypatch):
    """Een kapot settings.json wordt gelogd en genegeerd."""
    broken = tmp_path / "settings.json"
    broken.write_text("{ not json")
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: broken)
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
    finally:
        monkeypatch.undo()
        manager.reset()


def test_required_roles_come_from_config(config_env, parse):
    """De rollen voor is_required worden uit de configuratie gelezen."""
    doc = parse('<div id="box" role="textbox" aria-required="true"></div>')
    box = doc.find(id="box")
    assert not is_required(box)

    config_env.set_nested("required.roles", ["textbox"])
    assert is_required(box)


def test_bundled_settings_file_exists():
    """Het meegeleverde settings.json staat naast het package."""
    settings = PathUtils.get_settings_file()
    assert settings.is_file()
    assert json.loads(settings.read_text())["parser"]["features"] == "html.parser"


def test_cli_applies_logging_levels_from_config(config_env, capsys):
    """Test of 'domstate' de module-niveaus en gedempte loggers uit de configuratie toepast."""
    config_env.set_nested("debug.module_levels", {"domtree.styles": "DEBUG"})
    config_env.set_nested("debug.silenced_loggers", {"soupsieve": "ERROR"})
    try:
        assert main(["list"]) == 0
        assert logging.getLogger("domtree.styles").level == logging.DEBUG
        assert logging.getLogger("soupsieve").level == logging.ERROR
    finally:
        logging.getLogger("domtree.styles").setLevel(logging.NOTSET)
        logging.getLogger("soupsieve").setLevel(logging.NOTSET)
    capsys.readouterr()
