"""Interactive region selection"""

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
import re
from typing import Callable

from . import errors, vpn_data

SEPARATOR = " - "
PROMPT = "Enter the number of the region you want to use: "

logger = logging.getLogger(__name__)


def region_lines(regions: list[vpn_data.Region]) -> list[str]:
    """Build "id - name" lines sorted by name. Equal names keep catalog order.

    Args:
        regions (list[vpn_data.Region]): Regions in catalog order

    Returns:
        list[str]: Sorted menu lines
    """
    lines = [f"{region.id}{SEPARATOR}{region.name}" for region in regions]
    return sorted(lines, key=lambda line: line.partition(SEPARATOR)[2])


def choose(lines: list[str], input_fn: Callable[[str], str] = input) -> tuple[str, str]:
    """Print the numbered menu and read one choice from the user.

    Args:
        lines (list[str]): Menu lines from region_lines
        input_fn (Callable[[str], str], optional): Reads the answer. Defaults to input.

    Raises:
        SelectionError: Answer is not a number of a listed line

    Returns:
        tuple[str, str]: Region id and name
    """
    print("Available regions (sorted alphabetically):")
    for i, line in enumerate(lines):
        print(f"{i}) {line}")

    try:
        choice = input_fn(PROMPT).strip()
    except EOFError:
        choice = ""
    if not re.fullmatch(r"[0-9]+", choice) or int(choice) >= len(lines):
        raise errors.SelectionError(f"Invalid selection '{choice}'.")

    region_id, _, name = lines[int(choice)].partition(SEPARATOR)
    return region_id, name.strip()


def select_region(
    regions: list[vpn_data.Region], input_fn: Callable[[str], str] = input
) -> vpn_data.Region:
    """Let the user pick a region from the menu.

    Raises:
        SelectionError: Invalid choice

    Returns:
        vpn_data.Region: First region in the catalog with the chosen id
    """
    region_id, name = choose(region_lines(regions), input_fn)
    logger.info(f"Selected region: {name} ({region_id})")
    return next(region for region in regions if region.id == region_id)
