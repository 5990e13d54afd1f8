#!/usr/bin/env python3

"""Runs every step needed to produce a Wireguard config for one region"""

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
from typing import Callable

from . import cli, config, pia_api, requirements, vpn_data, wireguard

logger = logging.getLogger(__name__)


def generate(
    conf: config.Config,
    keygen: wireguard.KeyGenerator = None,
    input_fn: Callable[[str], str] = input,
    api: pia_api.PiaApi = None,
) -> str:
    """Generate a config file. Each step either returns what the next one
    needs or raises a ProvisionError, which ends the run.

    Args:
        conf (config.Config): App configuration
        keygen (wireguard.KeyGenerator, optional): Defaults to WgKeyGenerator.
        input_fn (Callable[[str], str], optional): Reads the region choice.
            Defaults to input.
        api (pia_api.PiaApi, optional): Defaults to one built from conf.

    Returns:
        str: Path of the written config
    """
    keygen = keygen or wireguard.WgKeyGenerator()
    api = api or pia_api.PiaApi(
        conf.username, conf.password, conf.ca_cert, debug=conf.debug
    )

    requirements.check_all(keygen.tools)
    api.fetchCert()
    token = api.token()
    server_list = api.serverList()

    region = cli.select_region(vpn_data.parseRegions(server_list.regions), input_fn)
    server = region.wireguardServer()
    if conf.debug:
        logger.debug(f"SERVER_IP={server.ip}")
        logger.debug(f"SERVER_HOSTNAME={server.hostname}")
    logger.info(f"Found server: {server.ip} ({server.hostname})")

    # Registered pubkey and written prikey must come from this one pair
    keypair = keygen.createKeypair()
    if conf.debug:
        logger.debug(f"PRIVATE_KEY={keypair.prikey}")
        logger.debug(f"PUBLIC_KEY={keypair.pubkey}")

    conn_info = api.addKey(server, token, keypair.pubkey)
    return wireguard.createConfig(conn_info, keypair.prikey, region.id, conf.config_dir)
