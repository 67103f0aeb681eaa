"""Configuration loading from YAML file, environment variables, and CLI args."""

import logging
import os
from dataclasses import dataclass, fields, replace

import yaml

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    log_path: str = "/var/log/mail.log"
    output_dir: str = "./parsed_logs"
    results_filename: str = "email_results.log"
    errors_filename: str = "email_errors.log"
    snapshot_filename: str = "status_counts.json"
    poll_interval: float = 1.0
    history_size: int = 500
    environment: str = "development"
    clear_console: bool = True
    use_polling: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def results_path(self) -> str:
        return os.path.join(self.output_dir, self.results_filename)

    @property
    def errors_path(self) -> str:
        return os.path.join(self.output_dir, self.errors_filename)

    @property
    def snapshot_path(self) -> str:
        return os.path.join(self.output_dir, self.snapshot_filename)


# Environment variable -> (field name, converter)
_ENV_VARS = {
    "MAIL_LOG_PATH": ("log_path", str),
    "PARSED_LOGS_DIR": ("output_dir", str),
    "RESULTS_FILENAME": ("results_filename", str),
    "ERRORS_FILENAME": ("errors_filename", str),
    "SNAPSHOT_FILENAME": ("snapshot_filename", str),
    "POLL_INTERVAL": ("poll_interval", float),
    "HISTORY_SIZE": ("history_size", int),
    "APP_ENV": ("environment", str),
    "CLEAR_CONSOLE": ("clear_console", _parse_bool),
    "USE_POLLING_OBSERVER": ("use_polling", _parse_bool),
}

_CONVERTERS = {name: conv for name, conv in _ENV_VARS.values()}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def load_config(cli_args=None, yaml_data: dict | None = None) -> Config:
    """Build Config from defaults, YAML data, env vars, then CLI args (highest wins)."""
    values: dict = {}
    known = {f.name for f in fields(Config)}

    for key, raw in (yaml_data or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        values[key] = _CONVERTERS[key](raw)

    for env_name, (key, conv) in _ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is not None:
            values[key] = conv(raw)

    config = replace(Config(), **values)

    if cli_args is None:
        return config

    overrides = {}
    if getattr(cli_args, "log_file", None):
        overrides["log_path"] = cli_args.log_file
    if getattr(cli_args, "output_dir", None):
        overrides["output_dir"] = cli_args.output_dir
    if getattr(cli_args, "interval", None) is not None:
        overrides["poll_interval"] = float(cli_args.interval)
    if getattr(cli_args, "no_clear", False):
        overrides["clear_console"] = False
    return replace(config, **overrides)
