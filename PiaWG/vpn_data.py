#!/usr/bin/env python3

"""Classes to store VPN-related data"""

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

from dataclasses import dataclass, field
import ipaddress
import json
import logging

from . import errors

RAW_PREVIEW_CHARS = 200

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Host:
    """Host object including a hostname and IP.
    """

    hostname: str
    ip: str

    def __post_init__(self):
        ipaddress.ip_address(self.ip)


@dataclass(frozen=True)
class Region:
    """Region object including the id, name and list of Wireguard server hosts.
    """

    id: str
    name: str
    servers: list[Host] = field(default_factory=list)

    def wireguardServer(self) -> Host:
        """First Wireguard server of the region.

        Raises:
            ProtocolError: Region has no Wireguard server

        Returns:
            Host: Server to register with
        """
        if not self.servers:
            raise errors.ProtocolError(
                f"No WireGuard server available for '{self.id}'."
            )
        return self.servers[0]


@dataclass(frozen=True)
class ServerList:
    """Server list as downloaded. Only the first line is JSON, anything after it
    is PIA's detached signature, which is kept but not verified.
    """

    regions: str
    signature: str = ""


@dataclass(frozen=True)
class KeyPair:
    prikey: str
    pubkey: str


@dataclass
class Connection:
    """Connection object including everything needed to create a Wireguard
    config file.
    """

    endpoint: Host
    port: int = None
    ip: str = None
    server_key: str = None
    dns: list[str] = None


def parseRegions(raw: str) -> list[Region]:
    """Parse the JSON line of the server list into regions, in catalog order.

    Servers missing an ip or cn, or with an invalid ip, are left out of the
    region's server list.

    Args:
        raw (str): First line of the server list

    Raises:
        ProtocolError: Not JSON or not shaped like a server list

    Returns:
        list[Region]: All regions, including those without Wireguard servers
    """
    try:
        items = json.loads(raw)["regions"]
        regions = [
            Region(item["id"], item["name"], _wireguardHosts(item))
            for item in items
        ]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise errors.ProtocolError(
            f"Malformed server list ({e}): {raw[:RAW_PREVIEW_CHARS]}"
        )
    logger.debug(f"Parsed {len(regions)} regions")
    return regions


def _wireguardHosts(item: dict) -> list[Host]:
    hosts = []
    for server in (item.get("servers") or {}).get("wg") or []:
        if not server.get("ip") or not server.get("cn"):
            logger.info(f"Skipping {item['id']} server missing an ip or cn: {server}")
            continue
        try:
            hosts.append(Host(server["cn"], server["ip"]))
        except ValueError:
            logger.info(f"Skipping {item['id']} server with invalid ip '{server['ip']}'")
    return hosts
