#!/usr/bin/env python3

"""Functions to interface with Wireguard"""

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
import subprocess
import tempfile
from typing import Protocol

from . import errors, vpn_data

CONFIG_DIR = "configs"
CONFIG_TEMPLATE = "pia-{region}.conf"

logger = logging.getLogger(__name__)


class KeyGenerator(Protocol):
    """Anything that can produce a Wireguard keypair. `tools` lists the
    executables it needs on PATH."""

    tools: tuple[str, ...]

    def createKeypair(self) -> vpn_data.KeyPair:
        ...


class WgKeyGenerator:
    """Generates keys with the `wg` utility."""

    tools = ("wg",)

    def createKeypair(self) -> vpn_data.KeyPair:
        """Generate a Wireguard keypair. The private key only touches disk in a
        temporary file that is removed whether or not deriving the pubkey works.

        Raises:
            PrerequisiteError: wg failed to generate the keys

        Returns:
            vpn_data.KeyPair: New keypair
        """
        fd, key_path = tempfile.mkstemp(prefix="wg_", suffix=".key")
        try:
            with os.fdopen(fd, "wb") as key_file:
                subprocess.run(["wg", "genkey"], stdout=key_file, check=True)
            with open(key_path, "rb") as key_file:
                prikey = key_file.read().strip()
            pubkey = subprocess.check_output(["wg", "pubkey"], input=prikey).strip()
        except (subprocess.CalledProcessError, OSError) as e:
            logger.error("Failed to generate keys with wg. Is wireguard installed?")
            raise errors.PrerequisiteError(f"Failed to generate keys with wg ({e})")
        finally:
            os.remove(key_path)

        logger.info("Generated a new keypair")
        return vpn_data.KeyPair(prikey.decode("utf-8"), pubkey.decode("utf-8"))


def renderConfig(connection_info: vpn_data.Connection, prikey: str) -> str:
    """Render the text of a Wireguard config file.

    Args:
        connection_info (vpn_data.Connection): Connection info to create config using.
        prikey (str): Hosts Wireguard private key

    Returns:
        str: Config file contents
    """
    return (
        f"[Interface]\n"
        f"PrivateKey = {prikey}\n"
        f"Address = {connection_info.ip}/32\n"
        f"DNS = {', '.join(connection_info.dns)}\n"
        f"\n"
        f"[Peer]\n"
        f"PublicKey = {connection_info.server_key}\n"
        f"Endpoint = {connection_info.endpoint.ip}:{connection_info.port}\n"
        f"AllowedIPs = 0.0.0.0/0, ::/0\n"
        f"PersistentKeepalive = 25\n"
    )


def createConfig(
    connection_info: vpn_data.Connection,
    prikey: str,
    region_id: str,
    config_dir: str = CONFIG_DIR,
) -> str:
    """Create a Wireguard configuration file for a region, replacing any
    previous one.

    Args:
        connection_info (vpn_data.Connection): Connection info to create config using.
        prikey (str): Hosts Wireguard private key
        region_id (str): Region the connection belongs to
        config_dir (str, optional): Output directory. Defaults to CONFIG_DIR.

    Raises:
        FilesystemError: Config could not be written

    Returns:
        str: Path of the written config
    """
    path = os.path.join(config_dir, CONFIG_TEMPLATE.format(region=region_id))
    config = renderConfig(connection_info, prikey)

    try:
        os.makedirs(config_dir, exist_ok=True)
        with open(path, "w") as wg_conf:
            wg_conf.write(config)
    except OSError as e:
        raise errors.FilesystemError(f"Failed to write {path} ({e})")
    logger.debug(f"Wrote wireguard config to {path}")
    return path
