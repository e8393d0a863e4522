# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import logging
import ssl
from typing import Any, Dict, List, Mapping, Optional

import requests
import requests.adapters
import urllib3.util
import urllib3.util.ssl_
from azure.core import PipelineClient
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    map_error,
)
from azure.core.pipeline.policies import (
    BearerTokenCredentialPolicy,
    HeadersPolicy,
    HttpLoggingPolicy,
    UserAgentPolicy,
)
from azure.core.pipeline.transport import HttpTransport, RequestsTransport
from azure.core.rest import HttpRequest, HttpResponse
from azure.storage.blob._shared.base_client import TransportWrapper

from azarmstorage._utils import SDK_CREDENTIAL_TYPE
from azarmstorage._version import __version__
from azarmstorage.config import TransportConfig
from azarmstorage.exceptions import InvalidArgumentError


_LOGGER = logging.getLogger(__name__)

_MANAGEMENT_ERROR_MAP = {
    401: ClientAuthenticationError,
    404: ResourceNotFoundError,
    409: ResourceExistsError,
}


class ArmHttpClient:
    """Sends management and signed URL requests over one shared transport.

    Management requests are authorized with a bearer token for the configured
    credential and non-2xx responses are raised as
    :class:`azure.core.exceptions.HttpResponseError`. Signed URL requests are
    self-authorizing, so they go through a separate pipeline that never attaches
    the credential and returns responses without interpreting their status.
    """

    def __init__(
        self,
        credential: SDK_CREDENTIAL_TYPE,
        credential_scope: str,
        transport_config: Optional[TransportConfig] = None,
        *,
        transport: Optional[HttpTransport] = None,
    ):
        if transport_config is None:
            transport_config = TransportConfig()
        self._transport_config = transport_config
        if transport is None:
            transport = _create_requests_transport(transport_config)
        self._management_client = PipelineClient(
            base_url="",
            policies=self._get_management_policies(credential, credential_scope),
            transport=transport,
        )
        # The signed URL pipeline borrows the transport so only the management
        # client ever opens or closes it.
        self._signed_url_client = PipelineClient(
            base_url="",
            policies=self._get_signed_url_policies(),
            transport=TransportWrapper(transport),
        )

    def post(self, url: str, json_body: Any) -> HttpResponse:
        request = HttpRequest("POST", url, json=json_body)
        return self._send_management_request(request)

    def get(self, url: str) -> HttpResponse:
        request = HttpRequest("GET", url)
        return self._send_management_request(request)

    def get_signed(
        self, url: str, headers: Optional[Mapping[str, str]] = None
    ) -> HttpResponse:
        request = HttpRequest("GET", url, headers=dict(headers or {}))
        return self._signed_url_client.send_request(
            request, **self._get_request_options()
        )

    def close(self) -> None:
        self._management_client.close()

    def __enter__(self) -> "ArmHttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _send_management_request(self, request: HttpRequest) -> HttpResponse:
        response = self._management_client.send_request(
            request, **self._get_request_options()
        )
        if not 200 <= response.status_code < 300:
            map_error(
                status_code=response.status_code,
                response=response,
                error_map=_MANAGEMENT_ERROR_MAP,
            )
            raise HttpResponseError(response=response)
        return response

    def _get_request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "connection_verify": self._transport_config.ssl_verify,
        }
        if self._transport_config.proxy is not None:
            options["proxies"] = {
                "http": self._transport_config.proxy,
                "https": self._transport_config.proxy,
            }
        return options

    def _get_management_policies(
        self, credential: SDK_CREDENTIAL_TYPE, credential_scope: str
    ) -> List[Any]:
        return [
            HeadersPolicy(base_headers={"Accept": "application/json"}),
            self._get_user_agent_policy(),
            BearerTokenCredentialPolicy(credential, credential_scope),
            HttpLoggingPolicy(),
        ]

    def _get_signed_url_policies(self) -> List[Any]:
        return [
            self._get_user_agent_policy(),
            HttpLoggingPolicy(),
        ]

    def _get_user_agent_policy(self) -> UserAgentPolicy:
        return UserAgentPolicy(sdk_moniker=f"azarmstorage/{__version__}")


class _MinimumTlsVersionAdapter(requests.adapters.HTTPAdapter):
    def __init__(self, ssl_context: ssl.SSLContext, **kwargs):
        # HTTPAdapter.__init__ calls init_poolmanager, so the context must exist first.
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().proxy_manager_for(*args, **kwargs)


def _create_requests_transport(transport_config: TransportConfig) -> RequestsTransport:
    return RequestsTransport(
        session=_create_session(transport_config.ssl_version),
        session_owner=True,
        connection_timeout=transport_config.connection_timeout,
        read_timeout=transport_config.read_timeout,
        connection_verify=transport_config.ssl_verify,
    )


def _create_session(ssl_version: Optional[str]) -> requests.Session:
    session = requests.Session()
    adapter = _create_adapter(ssl_version)
    for protocol in ("http://", "https://"):
        session.mount(protocol, adapter)
    return session


def _create_adapter(ssl_version: Optional[str]) -> requests.adapters.HTTPAdapter:
    # Retries are left to callers. Matches the adapter RequestsTransport mounts itself.
    disable_retries = urllib3.util.Retry(
        total=False, redirect=False, raise_on_status=False
    )
    if ssl_version is None:
        return requests.adapters.HTTPAdapter(max_retries=disable_retries)
    _LOGGER.debug("Using minimum TLS version %s for requests.", ssl_version)
    return _MinimumTlsVersionAdapter(
        _create_ssl_context(ssl_version), max_retries=disable_retries
    )


def _create_ssl_context(ssl_version: str) -> ssl.SSLContext:
    try:
        minimum_version = ssl.TLSVersion[ssl_version]
    except KeyError:
        raise InvalidArgumentError(
            f"Unsupported ssl_version: {ssl_version}. Supported versions: "
            f"{[version.name for version in ssl.TLSVersion]}"
        ) from None
    return urllib3.util.ssl_.create_urllib3_context(
        ssl_minimum_version=minimum_version
    )
