"""Combines config options from the environment and an optional settings file"""

# PiaWG
# Copyright (C) 2022  Joby Matwick
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or any later version.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <http://www.gnu.org/licenses/>.

import logging
from typing import Mapping
import yaml
from dataclasses import dataclass, fields

from . import errors

FALSY_STRINGS = ["false", "f", "no", "0", ""]
CONFIG_FILE_ENV = "PIAWG_CONFIG"
ENV_PREFIX = "PIAWG_"
# Names kept compatible with the shell tool this replaces
ENV_NAMES = {"username": "PIA_USER", "password": "PIA_PASS", "debug": "DEBUG"}
CREDENTIALS = ("username", "password")

logger = logging.getLogger(__name__)


def isTruthy(value: str) -> bool:
    return value.strip().lower() not in FALSY_STRINGS


def envName(parameter: str) -> str:
    """Environment variable a config parameter is read from.

    Args:
        parameter (str): Config field name

    Returns:
        str: Environment variable name
    """
    return ENV_NAMES.get(parameter, f"{ENV_PREFIX}{parameter.upper()}")


@dataclass
class Config:
    """Application config dataclass

    Raises:
        ConfigError: required credential was not provided
    """

    username: str = None
    password: str = None
    debug: bool = False
    log_level: str = "info"
    ca_cert: str = "ca/ca.rsa.4096.crt"
    config_dir: str = "configs"

    def __init__(self, environ: Mapping[str, str]):
        """Generate a config object from the process environment. A YAML
        settings file named by PIAWG_CONFIG is loaded first so the environment
        can override it.

        Args:
            environ (Mapping[str, str]): Environment variables (os.environ)
        """
        if environ.get(CONFIG_FILE_ENV):
            self.load_file(environ[CONFIG_FILE_ENV])
        self.load_env(environ)

        for parameter in CREDENTIALS:
            if not getattr(self, parameter):
                raise errors.ConfigError(
                    f"Required config parameter {parameter} was never specified "
                    f"(set {envName(parameter)})"
                )

    def load_file(self, config_filename: str) -> None:
        """Update config parameters with values from a settings yaml file.
        Credentials are never taken from a file.

        Args:
            config_filename (str): Path of settings file to load
        """
        try:
            with open(config_filename, "r") as config_file:
                config = yaml.safe_load(config_file) or {}
        except (OSError, yaml.YAMLError) as e:
            raise errors.ConfigError(f"Failed to load {config_filename} ({e})")

        for parameter in fields(Config):
            if parameter.name not in config:
                continue
            if parameter.name in CREDENTIALS:
                logger.warning(
                    f"Ignoring '{parameter.name}' in {config_filename}, "
                    f"use {envName(parameter.name)} instead"
                )
                continue
            value = config[parameter.name]
            if parameter.type == bool and isinstance(value, str):
                value = isTruthy(value)
            setattr(self, parameter.name, value)

    def load_env(self, environ: Mapping[str, str]) -> None:
        """Update config parameters with values from environment variables"""
        for parameter in fields(Config):
            name = envName(parameter.name)
            if name in environ:
                value = environ[name]
                if parameter.type == bool:
                    value = isTruthy(value)
                setattr(self, parameter.name, value)
