# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import dataclasses
from typing import Optional

from azarmstorage._utils import AZARMSTORAGE_CREDENTIAL_TYPE


DEFAULT_MANAGEMENT_ENDPOINT = "https://management.azure.com"
DEFAULT_DISKS_API_VERSION = "2023-04-02"


@dataclasses.dataclass(frozen=True)
class TransportConfig:
    """Network settings shared by every request a client sends.

    :param proxy: Proxy URL used for both ``http`` and ``https`` requests.
    :param ssl_version: Name of the minimum TLS version to negotiate, e.g.
        ``"TLSv1_2"``. Must be a member name of :class:`ssl.TLSVersion`. When
        ``None`` the interpreter default is used.
    :param ssl_verify: Whether server certificates are verified.
    :param connection_timeout: Seconds to wait when establishing a connection.
    :param read_timeout: Seconds to wait between bytes read from a connection.
    """

    proxy: Optional[str] = None
    ssl_version: Optional[str] = None
    ssl_verify: bool = True
    connection_timeout: float = 20
    read_timeout: float = 60


@dataclasses.dataclass(frozen=True)
class ArmConfiguration:
    """Settings for talking to the Azure Resource Manager API.

    :param subscription_id: Subscription that owns the resources.
    :param resource_group: Resource group used when an operation is not given one.
    :param credential: Credential used to authorize management requests. When
        ``None``, :class:`azure.identity.DefaultAzureCredential` is used.
    :param endpoint: Base URL of the management API.
    :param api_version: API version sent with disk requests.
    :param transport: Network settings for all requests.
    """

    subscription_id: str
    resource_group: Optional[str] = None
    credential: AZARMSTORAGE_CREDENTIAL_TYPE = None
    endpoint: str = DEFAULT_MANAGEMENT_ENDPOINT
    api_version: str = DEFAULT_DISKS_API_VERSION
    transport: TransportConfig = dataclasses.field(default_factory=TransportConfig)

    @property
    def credential_scope(self) -> str:
        return f"{self.endpoint.rstrip('/')}/.default"
