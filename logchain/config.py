"""Configuration — frozen dataclass from env vars over an optional YAML file."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from logchain.clock import Clock
from logchain.formatters import FORMATTERS, full_formatter, medium_formatter
from logchain.levels import LogLevel
from logchain.sinks import ConsoleWriter, FileWriter, SystemWriter
from logchain.writers import by_categories, by_level, FanOutWriter, FilterWriter, FormatWriter

logger = logging.getLogger(__name__)

FORMAT_NAMES = ("simple", "medium", "full", "none")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_categories(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return tuple(c.strip() for c in items if c.strip())


@dataclass(frozen=True)
class Config:
    min_level: str = "TRACE"
    format: str = "medium"
    console_enabled: bool = True
    file_path: str = ""
    system_enabled: bool = False
    categories: tuple[str, ...] = field(default_factory=tuple)
    default_category: Optional[str] = None


def load_yaml_config(path: Optional[str]) -> dict:
    """Read pipeline settings (min_level, format, sinks, categories) from YAML.

    The result feeds ``load_config``; a blank path or a missing file gives an
    empty mapping so the built-in defaults and env vars apply.
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as stream:
            settings = yaml.safe_load(stream) or {}
    except FileNotFoundError:
        logger.warning("Logging settings file %s is missing; keeping built-in pipeline", path)
        return {}
    logger.info("Read logging pipeline settings from %s", path)
    return settings


def load_config(yaml_data: Optional[dict] = None) -> Config:
    """Build Config; env vars win over YAML values, which win over defaults."""
    data = yaml_data or {}

    def setting(env_key, yaml_key, default):
        if env_key in os.environ:
            return os.environ[env_key]
        return data.get(yaml_key, default)

    config = Config(
        min_level=str(setting("LOG_MIN_LEVEL", "min_level", Config.min_level)).strip().upper(),
        format=str(setting("LOG_FORMAT", "format", Config.format)).strip().lower(),
        console_enabled=_parse_bool(setting("LOG_CONSOLE", "console", True)),
        file_path=str(setting("LOG_FILE", "file", Config.file_path) or ""),
        system_enabled=_parse_bool(setting("LOG_SYSTEM", "system", False)),
        categories=_parse_categories(setting("LOG_CATEGORIES", "categories", None)),
        default_category=setting("LOG_DEFAULT_CATEGORY", "default_category", None) or None,
    )
    validate(config)
    return config


def validate(config: Config) -> None:
    LogLevel.parse(config.min_level)
    if config.format not in FORMAT_NAMES:
        raise ValueError(f"Unknown log format: {config.format!r}")


def build_writer(config: Config, clock: Optional[Clock] = None, print_func=None):
    """Compose a writer chain: format -> level filter -> category filter -> sinks."""
    validate(config)

    sinks = []
    if config.console_enabled:
        sinks.append(ConsoleWriter(print_func))
    if config.file_path:
        sinks.append(FileWriter(config.file_path, diagnostics=ConsoleWriter(print_func)))
    if config.system_enabled:
        sinks.append(SystemWriter())
    if not sinks:
        logger.warning("No sinks enabled; log records will be discarded")

    writer = FanOutWriter(*sinks)
    if config.categories:
        writer = FilterWriter(by_categories(*config.categories), writer)
    writer = FilterWriter(by_level(LogLevel.parse(config.min_level)), writer)

    if config.format == "none":
        return writer
    if config.format == "medium":
        formatter = medium_formatter(clock)
    elif config.format == "full":
        formatter = full_formatter(clock)
    else:
        formatter = FORMATTERS[config.format]
    return FormatWriter(formatter, writer)
