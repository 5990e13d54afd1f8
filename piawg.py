#!/usr/bin/env python3

"""Python application for generating Private Internet Access Wireguard config
files."""

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
import os
import sys
from typing import Mapping

from PiaWG import config, errors, provision

logger = logging.getLogger("PiaWG")


def main(environ: Mapping[str, str] = None) -> int:
    """Main application entry point

    Args:
        environ (Mapping[str, str], optional): Environment to read settings
            from. Defaults to os.environ.

    Returns:
        int: 0 on success, 1 otherwise
    """
    environ = os.environ if environ is None else environ

    try:
        conf = config.Config(environ)
    except errors.ProvisionError as e:
        setup_logging(None)
        logger.error(str(e))
        return 1
    setup_logging(conf)

    try:
        path = provision.generate(conf)
    except errors.ProvisionError as e:
        logger.error(str(e))
        return 1

    logger.info(f"WireGuard config generated: {path}")
    return 0


def setup_logging(conf: config.Config) -> int:
    """Set the log level from the loaded config. The debug flag forces debug
    output, an unknown log_level falls back to info.

    Args:
        conf (config.Config): App configuration, None if it failed to load

    Returns:
        int: Log level that was applied
    """
    level = logging.INFO
    invalid = None
    if conf is not None and conf.debug:
        level = logging.DEBUG
    elif conf is not None:
        name = str(conf.log_level).strip().upper()
        if isinstance(logging.getLevelName(name), int):
            level = logging.getLevelName(name)
        else:
            invalid = conf.log_level

    logging.basicConfig(level=level, stream=sys.stdout)
    if invalid is not None:
        logger.warning(f"Unknown log_level '{invalid}', using info")
    return level


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
