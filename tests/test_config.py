"""Tests for the configuration module."""

import logging

import pytest
from logchain.config import (
    Config,
    _parse_bool,
    _parse_categories,
    build_writer,
    load_config,
    load_yaml_config,
)
from logchain import manager
from logchain.levels import LogLevel
from logchain.record import LogRecord

ENV_KEYS = ("LOG_MIN_LEVEL", "LOG_FORMAT", "LOG_CONSOLE", "LOG_FILE",
            "LOG_SYSTEM", "LOG_CATEGORIES", "LOG_DEFAULT_CATEGORY")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _record(level=LogLevel.INFO, category=None, message="m"):
    return LogRecord(message, level, category, "/x/y.py", 5)


class TestParseBool:
    def test_true_values(self):
        for val in ("true", "True", "TRUE", "1", "yes", " true ", True):
            assert _parse_bool(val) is True, f"Expected True for {val!r}"

    def test_false_values(self):
        for val in ("false", "0", "no", "", "anything", False):
            assert _parse_bool(val) is False, f"Expected False for {val!r}"


class TestParseCategories:
    def test_comma_string(self):
        assert _parse_categories("CORE, NET,,UI ") == ("CORE", "NET", "UI")

    def test_list(self):
        assert _parse_categories(["CORE", "NET"]) == ("CORE", "NET")

    def test_none(self):
        assert _parse_categories(None) == ()


class TestConfigDefaults:
    def test_default_values(self):
        cfg = Config()
        assert cfg.min_level == "TRACE"
        assert cfg.format == "medium"
        assert cfg.console_enabled is True
        assert cfg.file_path == ""
        assert cfg.system_enabled is False
        assert cfg.categories == ()
        assert cfg.default_category is None

    def test_frozen(self):
        cfg = Config()
        with pytest.raises(AttributeError):
            cfg.format = "full"

    def test_load_without_env(self):
        assert load_config() == Config()


class TestLoadConfig:
    def test_env_var_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_MIN_LEVEL", "warning")
        monkeypatch.setenv("LOG_FORMAT", "Full")
        monkeypatch.setenv("LOG_CONSOLE", "false")
        monkeypatch.setenv("LOG_FILE", "/var/log/app.log")
        monkeypatch.setenv("LOG_SYSTEM", "yes")
        monkeypatch.setenv("LOG_CATEGORIES", "CORE,NET")
        monkeypatch.setenv("LOG_DEFAULT_CATEGORY", "CORE")
        cfg = load_config()
        assert cfg == Config(
            min_level="WARNING",
            format="full",
            console_enabled=False,
            file_path="/var/log/app.log",
            system_enabled=True,
            categories=("CORE", "NET"),
            default_category="CORE",
        )

    def test_yaml_values(self):
        cfg = load_config({"min_level": "error", "format": "simple",
                           "categories": ["UI"], "console": False})
        assert cfg.min_level == "ERROR"
        assert cfg.format == "simple"
        assert cfg.categories == ("UI",)
        assert cfg.console_enabled is False

    def test_env_wins_over_yaml(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "none")
        cfg = load_config({"format": "full"})
        assert cfg.format == "none"

    def test_unknown_level(self, monkeypatch):
        monkeypatch.setenv("LOG_MIN_LEVEL", "CRITICAL")
        with pytest.raises(ValueError):
            load_config()

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            load_config({"format": "json"})


class TestLoadYaml:
    def test_no_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_yaml_config(str(tmp_path / "nope.yml")) == {}
        assert "is missing; keeping built-in pipeline" in caplog.text

    def test_reports_source_file(self, tmp_path, caplog):
        path = tmp_path / "logging.yml"
        path.write_text("format: simple\n", encoding="utf-8")
        with caplog.at_level(logging.INFO, logger="logchain.config"):
            load_yaml_config(str(path))
        assert f"Read logging pipeline settings from {path}" in caplog.text

    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "logging.yml"
        path.write_text("min_level: INFO\ncategories:\n  - CORE\n", encoding="utf-8")
        data = load_yaml_config(str(path))
        assert data == {"min_level": "INFO", "categories": ["CORE"]}
        assert load_config(data).categories == ("CORE",)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_yaml_config(str(path)) == {}


class TestBuildWriter:
    def test_console_simple(self):
        lines = []
        writer = build_writer(Config(format="simple"), print_func=lines.append)
        writer.log(_record(category="CORE", message="hello"))
        assert lines == ["INFO: [CORE] hello"]

    def test_medium_uses_clock(self, clock):
        lines = []
        writer = build_writer(Config(), clock=clock, print_func=lines.append)
        writer.log(_record(message="hello"))
        assert lines == ["9:05:03 07.01.2024 INFO: hello"]

    def test_full(self, clock):
        lines = []
        writer = build_writer(Config(format="full"), clock=clock, print_func=lines.append)
        writer.log(_record(message="hello"))
        assert lines == ["9:05:03 07.01.2024 INFO: [y.py:5] hello"]

    def test_none_keeps_message(self):
        lines = []
        writer = build_writer(Config(format="none"), print_func=lines.append)
        writer.log(_record(message="raw"))
        assert lines == ["raw"]

    def test_level_filter(self):
        lines = []
        writer = build_writer(Config(format="none", min_level="WARNING"),
                              print_func=lines.append)
        writer.log(_record(level=LogLevel.INFO, message="dropped"))
        writer.log(_record(level=LogLevel.ERROR, message="kept"))
        assert lines == ["kept"]

    def test_category_filter(self):
        lines = []
        writer = build_writer(Config(format="none", categories=("CORE",)),
                              print_func=lines.append)
        writer.log(_record(category="CORE", message="kept"))
        writer.log(_record(category="UI", message="dropped"))
        writer.log(_record(category=None, message="dropped"))
        assert lines == ["kept"]

    def test_file_sink(self, tmp_path):
        path = tmp_path / "app.log"
        writer = build_writer(Config(format="simple", console_enabled=False,
                                     file_path=str(path)))
        writer.log(_record(message="to file"))
        assert path.read_bytes() == b"INFO: to file\n\r"

    def test_system_sink(self, caplog):
        writer = build_writer(Config(format="simple", console_enabled=False,
                                     system_enabled=True))
        with caplog.at_level(logging.INFO, logger="logchain"):
            writer.log(_record(message="to system"))
        assert "INFO: to system" in caplog.text

    def test_no_sinks_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            writer = build_writer(Config(console_enabled=False))
        writer.log(_record())
        assert "No sinks enabled" in caplog.text


class TestConfigure:
    def test_installs_manager(self):
        lines = []
        installed = manager.configure(
            Config(format="simple", default_category="CORE"),
            print_func=lines.append,
        )
        assert manager.get_manager() is installed
        manager.info("configured")
        assert lines == ["INFO: [CORE] configured"]

    def test_timestamps_and_elapsed_share_the_clock(self, clock):
        lines = []
        installed = manager.configure(
            Config(format="medium", default_category="CORE"),
            clock=clock,
            print_func=lines.append,
        )
        assert installed.clock is clock
        assert installed.category == "CORE"

        with manager.timed("work"):
            clock.advance(seconds=2)

        assert lines == [
            "9:05:03 07.01.2024 TRACE: [CORE] Enter work",
            "9:05:05 07.01.2024 TRACE: [CORE] Elapsed 2.0: work",
        ]
