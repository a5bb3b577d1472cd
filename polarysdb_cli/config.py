"""
Startup configuration.

Each setting is taken from the command line first, then the environment,
then the built-in default.
"""
import argparse
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from . import __version__
from .backend import DEFAULT_BACKEND
from .logger import Level, LoggerConfig

ENV_LOG_FILE = "POLARYSDB_LOG_FILE"
ENV_LOG_LEVEL = "POLARYSDB_LOG_LEVEL"
ENV_BACKEND = "POLARYSDB_BACKEND"

LEVEL_CHOICES = ["info", "warn", "error", "fatal"]


@dataclass(frozen=True)
class Settings:
    log: LoggerConfig = field(default_factory=LoggerConfig)
    backend: str = DEFAULT_BACKEND
    banner: bool = True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polarysdb-cli",
        description="Interactive shell for PolarysDB encrypted databases")
    parser.add_argument("--log-file",
                        help=f"Append log records to this file (or set {ENV_LOG_FILE})")
    parser.add_argument("--log-level", choices=LEVEL_CHOICES,
                        help=f"Minimum level to log (or set {ENV_LOG_LEVEL}). Default: info")
    parser.add_argument("--no-console", action="store_true",
                        help="Do not log to the terminal")
    parser.add_argument("--backend",
                        help=f"Database library module (or set {ENV_BACKEND}). Default: {DEFAULT_BACKEND}")
    parser.add_argument("--no-banner", action="store_true", help="Skip the startup banner")
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
    return parser


def load_settings(argv: Optional[Sequence[str]] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    parser = build_parser()
    args = parser.parse_args(argv)
    env = os.environ if environ is None else environ

    level_name = args.log_level or env.get(ENV_LOG_LEVEL) or "info"
    try:
        level = Level.parse(level_name)
    except ValueError as e:
        parser.error(str(e))

    log_file = args.log_file or env.get(ENV_LOG_FILE) or None
    log = LoggerConfig(
        file_path=log_file,
        min_level=level,
        to_console=not args.no_console,
        to_file=log_file is not None,
    )
    return Settings(
        log=log,
        backend=args.backend or env.get(ENV_BACKEND) or DEFAULT_BACKEND,
        banner=not args.no_banner,
    )
