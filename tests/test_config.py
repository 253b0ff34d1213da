"""Tests for Config, Session and logging setup."""

import json
import logging
import logging.config
import pathlib
import sys

import pytest
import ndbuffer as nb
from ndbuffer import Config, Session
from ndbuffer import log
from ndbuffer.log import NDBufferJSONFormatter, setup_logging


def test_config_is_singleton():
    """Config() always returns the same instance."""
    assert Config() is Config()


def test_config_defaults(default_config):
    """Defaults are lenient shapes, no bounds checks, float64."""
    assert default_config.strict_shapes is False
    assert default_config.check_bounds is False
    assert default_config.default_dtype is nb.float64


def test_set_default_dtype_rejects_non_dtype():
    """Only DType members are accepted as the default dtype."""
    with pytest.raises(TypeError):
        Config().set_default_dtype("float64")


def test_session_sets_and_restores_flags():
    """Session applies every override and restores them on exit."""
    cfg = Config()

    with Session(strict_shapes=True, check_bounds=True, default_dtype=nb.int8) as c:
        assert c is cfg
        assert c.strict_shapes is True
        assert c.check_bounds is True
        assert c.default_dtype is nb.int8

    # Session should restore prior values
    assert cfg.strict_shapes is False
    assert cfg.check_bounds is False
    assert cfg.default_dtype is nb.float64


def test_session_can_override_subset_and_restore():
    """Session leaves unspecified settings alone."""
    cfg = Config()
    cfg.set_check_bounds(True)

    with Session(strict_shapes=True) as c:
        assert c.strict_shapes is True
        # unspecified flags remain unchanged
        assert c.check_bounds is True

    assert cfg.strict_shapes is False
    assert cfg.check_bounds is True


def test_nested_sessions_restore_state():
    """Nested sessions unwind in order."""
    cfg = Config()

    with Session(strict_shapes=True) as s1:
        with Session(check_bounds=True, strict_shapes=False) as s2:
            assert s2.check_bounds is True
            assert s2.strict_shapes is False
        assert s1.strict_shapes is True
        assert s1.check_bounds is False

    assert cfg.strict_shapes is False


def test_session_restores_on_error():
    """Settings are restored when the block raises."""
    cfg = Config()
    with pytest.raises(RuntimeError):
        with Session(strict_shapes=True):
            raise RuntimeError("boom")
    assert cfg.strict_shapes is False


class TestLogging:
    """Tests for logging setup and the JSON formatter."""

    def test_json_formatter(self):
        """Records become JSON with the mapped keys."""
        formatter = NDBufferJSONFormatter(fmt_keys={"level": "levelname", "logger": "name"})
        record = logging.LogRecord(
            "ndbuffer.core", logging.WARNING, __file__, 10, "resized %d", (3,), None
        )
        message = json.loads(formatter.format(record))

        assert message["level"] == "WARNING"
        assert message["logger"] == "ndbuffer.core"
        assert message["message"] == "resized 3"
        assert "timestamp" in message

    def test_json_formatter_exception(self):
        """Exception text is included under exc_info."""
        formatter = NDBufferJSONFormatter()
        try:
            raise ValueError("bad shape")
        except ValueError:
            record = logging.LogRecord(
                "ndbuffer", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        message = json.loads(formatter.format(record))
        assert "bad shape" in message["exc_info"]

    def test_setup_logging_packaged_default(self, monkeypatch, tmp_path):
        """Without a user file the packaged config is loaded."""
        captured = {}
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

        setup_logging()

        assert captured["version"] == 1
        assert "ndbuffer" in captured["loggers"]

    def test_setup_logging_user_file(self, monkeypatch, tmp_path):
        """A logging_config.json in the working directory wins."""
        captured = {}
        (tmp_path / "logging_config.json").write_text(json.dumps({"version": 1, "user": True}))
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

        setup_logging()

        assert captured["user"] is True

    def test_setup_logging_explicit_file(self, monkeypatch, tmp_path):
        """An explicit path is loaded as given."""
        captured = {}
        config_file = tmp_path / "custom.json"
        config_file.write_text(json.dumps({"version": 1, "custom": True}))
        monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

        setup_logging(config_file)

        assert captured["custom"] is True

    def test_packaged_config_is_fully_wired(self):
        """Every packaged formatter and handler is in use."""
        config_path = pathlib.Path(log.__file__).parent / "logging_config.json"
        config = json.loads(config_path.read_text())

        used_formatters = {h["formatter"] for h in config["handlers"].values()}
        used_handlers = {h for lg in config["loggers"].values() for h in lg["handlers"]}
        assert set(config["formatters"]) == used_formatters
        assert set(config["handlers"]) == used_handlers

    def test_json_formatter_from_user_config(self, monkeypatch, tmp_path):
        """A user config can attach the JSON formatter to its own handler."""
        captured = {}
        user_config = {
            "version": 1,
            "formatters": {
                "json": {"()": "ndbuffer.log.NDBufferJSONFormatter", "fmt_keys": {"level": "levelname"}},
            },
            "handlers": {
                "stderr": {"class": "logging.StreamHandler", "formatter": "json"},
            },
        }
        (tmp_path / "logging_config.json").write_text(json.dumps(user_config))
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

        setup_logging()

        assert captured["formatters"]["json"]["()"] == "ndbuffer.log.NDBufferJSONFormatter"
        assert captured["handlers"]["stderr"]["formatter"] == "json"
