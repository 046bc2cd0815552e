import pytest
from pathlib import Path

from engine.config import ConfigManager, ConfigError


def test_defaults_and_roundtrip(tmp_path):
    cfg_path = tmp_path / 'config.yaml'
    cm = ConfigManager(config_path=str(cfg_path))
    cfg = cm.load_config()
    assert cfg['labels']['unknown'] == 'unknown'
    assert cfg['http']['timeout_seconds'] is None
    cfg['workers']['files'] = 2
    cfg['logging']['level'] = 'DEBUG'
    cm.save_config(cfg)
    cm2 = ConfigManager(config_path=str(cfg_path))
    loaded = cm2.load_config()
    assert loaded['workers']['files'] == 2
    assert loaded['logging']['level'] == 'DEBUG'
    assert cm2.validate_config() == []


def test_partial_file_merges_defaults(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text("labels:\n  bundle: pack\nhttp:\n  timeout_seconds: 5\n")
    cm = ConfigManager(config_path=str(cfg_path))
    cm.load_config()
    assert cm.get('labels.bundle') == 'pack'
    assert cm.get('labels.none') == 'none'
    assert cm.get_timeout() == 5.0
    assert cm.get('missing.key', 3) == 3


def test_load_missing_returns_defaults(tmp_path):
    cfg_path = tmp_path / 'missing.yaml'
    cm = ConfigManager(config_path=str(cfg_path))
    assert cm.load_config() == cm.get_default_config()


def test_corrupt_yaml_raises(tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text('[')
    cm = ConfigManager(config_path=str(cfg_path))
    with pytest.raises(ConfigError):
        cm.load_config()


def test_permission_error(monkeypatch, tmp_path):
    cfg_path = tmp_path / 'cfg.yaml'
    cfg_path.write_text('x')
    cm = ConfigManager(config_path=str(cfg_path))

    def bad_open(*a, **k):
        raise PermissionError("nope")

    monkeypatch.setattr(Path, 'open', lambda self, *a, **k: bad_open())
    with pytest.raises(ConfigError):
        cm.load_config()


def test_validate_reports_bad_values(tmp_path):
    cm = ConfigManager(config_path=str(tmp_path / 'none.yaml'))
    cm.set('workers.names', 0)
    cm.set('source.raw_url', 'ftp://nope')
    errors = cm.validate_config()
    assert "workers.names must be a positive integer" in errors
    assert "source.raw_url must be an http(s) URL" in errors


def test_logging_defaults_keep_console_quiet(tmp_path):
    cm = ConfigManager(config_path=str(tmp_path / 'none.yaml'))
    cfg = cm.load_config()
    assert cfg['logging'] == {'level': 'WARNING'}


def test_console_level_follows_config(monkeypatch):
    import logging
    import logging_config

    handler = logging.StreamHandler()
    handler.set_name("console")
    handler.setLevel(logging.WARNING)
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        logging_config.set_console_level("debug")
        assert handler.level == logging.DEBUG
        logging_config.set_console_level("not-a-level")
        assert handler.level == logging.WARNING
    finally:
        root.removeHandler(handler)
