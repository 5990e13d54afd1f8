"""Exceptions raised while provisioning a config. Every one of them is fatal."""

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


class ProvisionError(RuntimeError):
    pass


class PrerequisiteError(ProvisionError):
    """A required external tool is missing or not working."""


class ConfigError(ProvisionError):
    """A required setting was never provided."""


class TransportError(ProvisionError):
    """A network call could not complete."""


class ProtocolError(ProvisionError):
    """A call completed but the response was not what the API promises."""


class AuthenticationError(ProtocolError):
    pass


class SelectionError(ProvisionError):
    """The region choice typed by the user is not usable."""


class FilesystemError(ProvisionError):
    """A file could not be read or written."""
