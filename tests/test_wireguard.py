#!/usr/bin/env python3

"""Tests for the Wireguard interface"""

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

import os
import pytest
from pytest_mock import MockFixture as MockPytest
import subprocess

from PiaWG import errors, vpn_data, wireguard


class StaticKeyGenerator:
    """Key generator returning fixed key material, needing no tools."""

    tools = ()

    def __init__(self, prikey: str = "biglongprivatekey=", pubkey: str = "biglongpublickey="):
        self.pair = vpn_data.KeyPair(prikey, pubkey)
        self.calls = 0

    def createKeypair(self) -> vpn_data.KeyPair:
        self.calls += 1
        return self.pair


TEST_CONN_INFO = vpn_data.Connection(
    vpn_data.Host("host0", "9.8.7.6"), 1337, "10.0.0.5", "SK", ["8.8.8.8", "8.8.4.4"]
)

TEST_CONFIG = """[Interface]
PrivateKey = biglongprivatekey=
Address = 10.0.0.5/32
DNS = 8.8.8.8, 8.8.4.4

[Peer]
PublicKey = SK
Endpoint = 9.8.7.6:1337
AllowedIPs = 0.0.0.0/0, ::/0
PersistentKeepalive = 25
"""


def fake_genkey(cmd, stdout, check):
    stdout.write(b"biglongprivatekey=\n")
    return subprocess.CompletedProcess(cmd, 0)


def test_generateKeypair(mocker: MockPytest):
    run = mocker.patch("subprocess.run", side_effect=fake_genkey)
    check_output = mocker.patch(
        "subprocess.check_output", return_value=b"biglongpublickey=\n"
    )

    pair = wireguard.WgKeyGenerator().createKeypair()
    assert pair == vpn_data.KeyPair("biglongprivatekey=", "biglongpublickey=")
    assert run.call_args.args[0] == ["wg", "genkey"]
    assert check_output.call_args_list == [
        mocker.call(["wg", "pubkey"], input=b"biglongprivatekey="),
    ]


def test_keyFileRemoved(mocker: MockPytest):
    mocker.patch("subprocess.run", side_effect=fake_genkey)
    mocker.patch("subprocess.check_output", return_value=b"biglongpublickey=")
    remove = mocker.spy(os, "remove")

    wireguard.WgKeyGenerator().createKeypair()
    key_path = remove.call_args.args[0]
    assert not os.path.exists(key_path)


def test_keyFileRemovedOnError(mocker: MockPytest, caplog):
    mocker.patch("subprocess.run", side_effect=fake_genkey)
    mocker.patch(
        "subprocess.check_output", side_effect=subprocess.CalledProcessError(1, "")
    )
    remove = mocker.spy(os, "remove")

    with pytest.raises(errors.PrerequisiteError):
        wireguard.WgKeyGenerator().createKeypair()
    assert remove.call_count == 1
    assert not os.path.exists(remove.call_args.args[0])
    assert "failed" in caplog.text.lower()


def test_keygenMissingWg(mocker: MockPytest):
    mocker.patch("subprocess.run", side_effect=FileNotFoundError("wg"))
    with pytest.raises(errors.PrerequisiteError):
        wireguard.WgKeyGenerator().createKeypair()


def test_wgToolRequired():
    assert "wg" in wireguard.WgKeyGenerator.tools


def test_renderConfig():
    assert wireguard.renderConfig(TEST_CONN_INFO, "biglongprivatekey=") == TEST_CONFIG


def test_configCreation(tmp_path):
    config_dir = str(tmp_path / "configs")
    path = wireguard.createConfig(TEST_CONN_INFO, "biglongprivatekey=", "us_east", config_dir)

    assert path == os.path.join(config_dir, "pia-us_east.conf")
    with open(path, "r") as f:
        assert f.read() == TEST_CONFIG


def test_configOverwritten(tmp_path):
    config_dir = str(tmp_path)
    wireguard.createConfig(TEST_CONN_INFO, "firstkey=", "reg", config_dir)
    second = vpn_data.Connection(
        vpn_data.Host("host1", "5.5.5.5"), 51820, "10.0.0.9", "SK2", ["1.1.1.1"]
    )
    path = wireguard.createConfig(second, "secondkey=", "reg", config_dir)

    with open(path, "r") as f:
        config = f.read()
    assert config == wireguard.renderConfig(second, "secondkey=")
    assert "firstkey" not in config
    assert os.listdir(config_dir) == ["pia-reg.conf"]


def test_configDirUnwritable(tmp_path):
    blocker = tmp_path / "configs"
    blocker.write_text("not a directory")
    with pytest.raises(errors.FilesystemError):
        wireguard.createConfig(TEST_CONN_INFO, "biglongprivatekey=", "reg", str(blocker))
