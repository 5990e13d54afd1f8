"""Functions check for runtime requirements"""

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
import shutil
from typing import Iterable

from . import errors

logger = logging.getLogger(__name__)


def check_all(tools: Iterable[str]) -> None:
    """Check that every tool is present and raise on the first one that isn't.

    Args:
        tools (Iterable[str]): Executable names that must be on PATH

    Raises:
        PrerequisiteError: A tool could not be found
    """
    for tool in tools:
        if not _check_tool(tool):
            raise errors.PrerequisiteError(
                f"'{tool}' is required. Please install it."
            )
    logger.debug("all requirements met")


def _check_tool(tool: str) -> bool:
    """Check to see that an executable can be resolved on PATH.

    Returns:
        bool: Tool present
    """
    path = shutil.which(tool)
    if path:
        logger.debug(f"'{tool}' is present at {path}")
    else:
        logger.error(f"'{tool}' isn't present")
    return path is not None
