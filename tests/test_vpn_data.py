#!/usr/bin/env python3

"""Tests for VPN data classes"""

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

import json
import pytest

import PiaWG.vpn_data as vpn_data
from PiaWG import errors

SAMPLE_REGIONS = {
    "regions": [
        {
            "id": "b",
            "name": "Beta",
            "servers": {"wg": [{"ip": "2.2.2.2", "cn": "beta401"}]},
        },
        {
            "id": "a",
            "name": "Alpha",
            "servers": {
                "wg": [
                    {"ip": "1.1.1.1", "cn": "alpha401"},
                    {"ip": "1.1.1.2", "cn": "alpha402"},
                ]
            },
        },
        {"id": "ovpn", "name": "OpenVPN Only", "servers": {"ovpntcp": []}},
    ]
}


def test_hostValidIp():
    host = vpn_data.Host("hostname", "1.2.3.4")
    assert host.hostname == "hostname"
    assert host.ip == "1.2.3.4"


def test_hostInvalidIp():
    with pytest.raises(ValueError):
        vpn_data.Host("hostname", "bad.ip")


def test_parseKeepsCatalogOrder():
    regions = vpn_data.parseRegions(json.dumps(SAMPLE_REGIONS))
    assert [r.id for r in regions] == ["b", "a", "ovpn"]
    assert regions[1].servers == [
        vpn_data.Host("alpha401", "1.1.1.1"),
        vpn_data.Host("alpha402", "1.1.1.2"),
    ]


def test_parseRegionWithoutWireguard():
    regions = vpn_data.parseRegions(json.dumps(SAMPLE_REGIONS))
    assert regions[2].servers == []


@pytest.mark.parametrize(
    "server",
    [{"ip": "", "cn": "host"}, {"cn": "host"}, {"ip": "1.1.1.1", "cn": ""}, {"ip": "x", "cn": "h"}],
)
def test_parseSkipsUnusableServers(server: dict):
    raw = {"regions": [{"id": "r", "name": "R", "servers": {"wg": [server]}}]}
    assert vpn_data.parseRegions(json.dumps(raw))[0].servers == []


@pytest.mark.parametrize(
    "raw", ["not json", "{}", '{"regions": [{"name": "no id"}]}', '{"regions": 5}']
)
def test_parseMalformed(raw: str):
    with pytest.raises(errors.ProtocolError):
        vpn_data.parseRegions(raw)


def test_wireguardServerFirst():
    region = vpn_data.parseRegions(json.dumps(SAMPLE_REGIONS))[1]
    assert region.wireguardServer() == vpn_data.Host("alpha401", "1.1.1.1")


def test_wireguardServerMissing():
    region = vpn_data.Region("ovpn", "OpenVPN Only")
    with pytest.raises(errors.ProtocolError) as e:
        region.wireguardServer()
    assert "ovpn" in str(e.value)


def test_skippedServerLogged(caplog):
    caplog.set_level("INFO")
    raw = {
        "regions": [
            {
                "id": "r",
                "name": "R",
                "servers": {
                    "wg": [{"ip": "bad.ip", "cn": "first"}, {"ip": "1.1.1.1", "cn": "second"}]
                },
            }
        ]
    }
    region = vpn_data.parseRegions(json.dumps(raw))[0]
    assert region.wireguardServer() == vpn_data.Host("second", "1.1.1.1")
    assert "bad.ip" in caplog.text
