#!/usr/bin/env python3

"""Functions to interface with Private Internet Access's APIs"""

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
import requests
import requests_toolbelt.adapters.host_header_ssl as host_adapter

from . import errors, vpn_data

logger = logging.getLogger(__name__)


class PiaApi:
    """Class to interface with PIA's APIs."""

    TOKEN_ADDRESS = "https://www.privateinternetaccess.com/api/client/v2/token"
    REGION_ADDRESS = "https://serverlist.piaservers.net/vpninfo/servers/v6"
    SSL_CERT_ADDRESS = "https://raw.githubusercontent.com/pia-foss/manual-connections/master/ca.rsa.4096.crt"
    WIREGUARD_PORT = 1337
    DEBUG_LOG = "addkey_verbose.log"

    def __init__(
        self,
        username: str,
        password: str,
        ca_cert: str = "ca/ca.rsa.4096.crt",
        debug: bool = False,
    ):
        """Store credentials and settings.

        Args:
            username (str): PIA username
            password (str): PIA password
            ca_cert (str, optional): Where PIA's certificate is kept.
                Defaults to "ca/ca.rsa.4096.crt".
            debug (bool, optional): Log tokens, keys and raw responses.
                Defaults to False.
        """
        self.username = username
        self.password = password
        self.ca_cert = ca_cert
        self.debug = debug

    def fetchCert(self) -> str:
        """Download PIA's SSL certificate unless it is already present.

        Raises:
            TransportError: Download failed
            ProtocolError: Download returned no certificate
            FilesystemError: Certificate could not be saved

        Returns:
            str: Certificate path
        """
        if os.path.exists(self.ca_cert):
            logger.info(f"CA certificate already exists at {self.ca_cert}")
            return self.ca_cert

        logger.info("Downloading CA certificate")
        try:
            resp = requests.get(self.SSL_CERT_ADDRESS)
        except requests.RequestException as e:
            raise errors.TransportError(f"Failed to download CA certificate ({e})")
        if resp.status_code != 200 or not resp.content:
            raise errors.ProtocolError(
                f"Failed to download CA certificate ({resp.status_code})"
            )

        try:
            os.makedirs(os.path.dirname(self.ca_cert) or ".", exist_ok=True)
            with open(self.ca_cert, "wb") as cert_file:
                cert_file.write(resp.content)
        except OSError as e:
            raise errors.FilesystemError(f"Failed to save CA certificate ({e})")
        logger.info(f"Saved CA certificate to {self.ca_cert}")
        return self.ca_cert

    def token(self) -> str:
        """Exchange the username and password for a PIA auth token.

        Raises:
            TransportError: Request could not be made
            ProtocolError: Response was not JSON
            AuthenticationError: PIA did not issue a token

        Returns:
            str: PIA auth token
        """
        logger.info(f"Authenticating with PIA as {self.username}")
        try:
            resp = requests.post(
                self.TOKEN_ADDRESS,
                data={"username": self.username, "password": self.password},
            )
        except requests.RequestException as e:
            raise errors.TransportError(f"Failed to reach PIA ({e})")

        self._debug("TOKEN_RESPONSE", resp.text)
        try:
            token = resp.json().get("token")
        except (ValueError, AttributeError):
            raise errors.ProtocolError(f"Unexpected token response: {resp.text}")
        self._debug("TOKEN", token)

        if not token or token == "null":
            raise errors.AuthenticationError(
                "Failed to authenticate. Check your credentials."
            )
        logger.info("Successfully got a token")
        return token

    def serverList(self) -> vpn_data.ServerList:
        """Download the PIA server list.

        Raises:
            TransportError: Request could not be made
            ProtocolError: Server list is missing

        Returns:
            vpn_data.ServerList: JSON line and signature of the list
        """
        logger.info("Fetching server list")
        try:
            resp = requests.get(self.REGION_ADDRESS)
        except requests.RequestException as e:
            raise errors.TransportError(f"Failed to fetch server list ({e})")
        if resp.status_code != 200:
            raise errors.ProtocolError(
                f"Failed to fetch server list ({resp.status_code})"
            )

        regions, _, signature = resp.text.partition("\n")
        regions = regions.strip()
        self._debug("SERVER_LIST length", len(regions))
        if not regions:
            raise errors.ProtocolError("Failed to fetch server list (empty)")

        logger.info("Successfully got server list")
        return vpn_data.ServerList(regions, signature.strip())

    def addKey(
        self, server: vpn_data.Host, token: str, pubkey: str
    ) -> vpn_data.Connection:
        """Register a Wireguard public key on a PIA server.

        Args:
            server (vpn_data.Host): Server to register on. The request goes to
                its IP and the certificate must match its hostname.
            token (str): PIA auth token
            pubkey (str): Wireguard pubkey to register

        Raises:
            TransportError: Request could not be made
            ProtocolError: Registration was refused

        Returns:
            vpn_data.Connection: Connection info required to configure Wireguard
        """
        logger.info(f"Registering with PIA WireGuard API on {server.hostname}")
        try:
            resp = self._sslGet(
                server, self.WIREGUARD_PORT, "addKey", {"pt": token, "pubkey": pubkey}
            )
        except requests.RequestException as e:
            message = f"Failed to reach {server.hostname} ({server.ip}): {e}"
            if self.debug:
                self._writeDebugLog(server, e)
                message += f". Check {self.DEBUG_LOG}."
            raise errors.TransportError(message)

        self._debug("WG_RESPONSE", resp.text)
        try:
            body = resp.json()
            status = body.get("status")
        except (ValueError, AttributeError):
            status = None
        self._debug("STATUS", status)
        if status != "OK":
            raise errors.ProtocolError(
                f"Failed to connect to WireGuard API. Response: {resp.text}"
            )

        try:
            connection = vpn_data.Connection(
                endpoint=server,
                port=int(body["server_port"]),
                ip=body["peer_ip"],
                server_key=body["server_key"],
                dns=body["dns_servers"],
            )
            _checkConnection(connection)
        except (KeyError, TypeError, ValueError):
            raise errors.ProtocolError(
                f"Incomplete WireGuard API response: {resp.text}"
            )
        for name in ("server_key", "port", "dns", "ip"):
            self._debug(name.upper(), getattr(connection, name))

        logger.info(f"Registered on {server.hostname}")
        return connection

    def _sslGet(
        self, server: vpn_data.Host, port: int, path: str, params: dict[str, str]
    ) -> requests.Response:
        """Make an HTTPS GET request to a server's IP, checking its certificate
        against PIA's CA certificate and the server's hostname.

        Args:
            server (vpn_data.Host): Server to send the request to
            port (int): Port of service to send request to
            path (str): Path to send request to
            params (dict[str, str]): URL params to include in request

        Returns:
            requests.Response: Request response
        """
        sess = requests.Session()
        sess.mount("https://", host_adapter.HostHeaderSSLAdapter())

        url = f"https://{server.ip}:{port}/{path}"
        headers = {"Host": server.hostname}
        return sess.get(url, verify=self.ca_cert, params=params, headers=headers)

    def _writeDebugLog(self, server: vpn_data.Host, error: Exception) -> None:
        with open(self.DEBUG_LOG, "w") as log_file:
            log_file.write(f"host: {server.hostname}\n")
            log_file.write(f"ip: {server.ip}\n")
            log_file.write(f"ca_cert: {self.ca_cert}\n")
            log_file.write(f"error: {type(error).__name__}: {error}\n")
        logger.debug(f"See {self.DEBUG_LOG} for detailed output")

    def _debug(self, name: str, value) -> None:
        if self.debug:
            logger.debug(f"{name}={value}")


def _checkConnection(connection: vpn_data.Connection) -> None:
    """Raise ValueError unless the registration fields can go into a config."""
    for value in (connection.ip, connection.server_key):
        if not isinstance(value, str) or not value:
            raise ValueError("peer_ip and server_key must be non-empty strings")
    if not isinstance(connection.dns, list) or not all(
        isinstance(dns, str) and dns for dns in connection.dns
    ):
        raise ValueError("dns_servers must be a list of strings")
