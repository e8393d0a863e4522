# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------

import collections.abc
import dataclasses
import json
import logging
import random
import time
from typing import Any, Mapping, Optional, Sequence

import azure.core.exceptions
from azure.core.rest import HttpResponse
from azure.storage.blob._shared.response_handlers import process_storage_error

from azarmstorage import _utils
from azarmstorage._http import ArmHttpClient
from azarmstorage._range import RangeSpec
from azarmstorage._resource import ResourceUrlBuilder
from azarmstorage.exceptions import OperationNotFoundError, SignedUrlNotFoundError


_LOGGER = logging.getLogger(__name__)

DEFAULT_ACCESS_DURATION = 3600


@dataclasses.dataclass(frozen=True)
class AccessGrantRequest:
    duration_in_seconds: int = DEFAULT_ACCESS_DURATION
    # Disk access grants used for reading must always request "read" access.
    access: str = dataclasses.field(default="read", init=False)

    def to_json(self) -> dict:
        return {"access": self.access, "durationInSeconds": self.duration_in_seconds}


@dataclasses.dataclass(frozen=True)
class AsyncOperationHandle:
    poll_url: str


@dataclasses.dataclass(frozen=True)
class SignedAccessResult:
    sas_url: str


@dataclasses.dataclass(frozen=True)
class RawBlobResponse:
    """Raw bytes of a blob along with the headers of the response that returned them.

    :ivar headers: Blob metadata as returned in the response headers. Lookups are
        case-insensitive.
    :ivar body: The blob data exactly as returned by the service.
    """

    headers: Mapping[str, str]
    body: bytes


class AccessGrantRequester:
    _BEGIN_GET_ACCESS_ACTION = "beginGetAccess"
    # Ordered by preference.
    _OPERATION_URL_HEADERS = ("azure-asyncoperation", "location")

    def __init__(self, http_client: ArmHttpClient, url_builder: ResourceUrlBuilder):
        self._http_client = http_client
        self._url_builder = url_builder

    def request_access(
        self,
        resource_name: str,
        resource_group: str,
        duration_in_seconds: int = DEFAULT_ACCESS_DURATION,
    ) -> AsyncOperationHandle:
        grant_request = AccessGrantRequest(duration_in_seconds)
        url = self._url_builder.build(
            resource_group, resource_name, self._BEGIN_GET_ACCESS_ACTION
        )
        _LOGGER.debug(
            "Requesting %s access to %s/%s for %s seconds.",
            grant_request.access,
            resource_name,
            resource_group,
            grant_request.duration_in_seconds,
        )
        response = self._http_client.post(url, grant_request.to_json())
        poll_url = get_first_header(response.headers, self._OPERATION_URL_HEADERS)
        if not poll_url:
            raise OperationNotFoundError(
                response.status_code,
                f"Unable to find an operations URL for {resource_name}/{resource_group}",
                response.text(),
            )
        return AsyncOperationHandle(poll_url)


class OperationPoller:
    """Retrieves the SAS URL produced by an access grant operation.

    By default the operation is fetched exactly once. When ``max_attempts`` is
    greater than one, the fetch is repeated only while the operation reports
    that it is still in progress, sleeping with exponential backoff and full
    jitter between attempts.
    """

    _SAS_URL_PATH = ("properties", "output", "accessSas")
    _IN_PROGRESS_STATUS = "inprogress"
    _ACCEPTED_STATUS_CODE = 202
    _MAX_BACKOFF_TIME = 20

    def __init__(self, http_client: ArmHttpClient, max_attempts: int = 1):
        if max_attempts < 1:
            raise ValueError("max_attempts must be greater than or equal to 1")
        self._http_client = http_client
        self._max_attempts = max_attempts

    def fetch_signed_url(
        self, poll_url: str, resource_name: str, resource_group: str
    ) -> SignedAccessResult:
        attempt = 0
        while True:
            response = self._http_client.get(poll_url)
            document = _load_json(response)
            sas_url = dig(document, *self._SAS_URL_PATH)
            if isinstance(sas_url, str) and sas_url:
                _LOGGER.debug(
                    "Found SAS URL %s for %s/%s.",
                    _utils.strip_query(sas_url),
                    resource_name,
                    resource_group,
                )
                return SignedAccessResult(sas_url)
            attempt += 1
            if not (
                self._attempts_remaining(attempt)
                and self._is_in_progress(response, document)
            ):
                raise SignedUrlNotFoundError(
                    response.status_code,
                    f"Unable to find an SAS URL for {resource_name}/{resource_group}",
                    response.text(),
                )
            backoff_time = self._get_backoff_time(attempt - 1)
            _LOGGER.debug(
                "Sleeping %s seconds and polling operation again for %s/%s (attempts remaining: %s).",
                backoff_time,
                resource_name,
                resource_group,
                self._attempts_remaining(attempt),
            )
            time.sleep(backoff_time)

    def _attempts_remaining(self, attempt_number: int) -> int:
        return max(self._max_attempts - attempt_number, 0)

    def _get_backoff_time(self, attempt_number: int) -> float:
        return min(random.uniform(0, 2**attempt_number), self._MAX_BACKOFF_TIME)

    def _is_in_progress(self, response: HttpResponse, document: Any) -> bool:
        if response.status_code == self._ACCEPTED_STATUS_CODE:
            return True
        status = dig(document, "status")
        return isinstance(status, str) and status.lower() == self._IN_PROGRESS_STATUS


class RangedBlobFetcher:
    _RANGE_HEADER = "x-ms-range"

    def __init__(self, http_client: ArmHttpClient):
        self._http_client = http_client

    def fetch_raw(self, sas_url: str, range_spec: RangeSpec) -> RawBlobResponse:
        headers = {}
        if not range_spec.is_entire_object:
            headers[self._RANGE_HEADER] = range_spec.header_value
        _LOGGER.debug(
            "Fetching %s from %s.",
            range_spec.header_value or "entire blob",
            _utils.strip_query(sas_url),
        )
        response = self._http_client.get_signed(sas_url, headers=headers)
        try:
            response.raise_for_status()
        except azure.core.exceptions.HttpResponseError as e:
            # Maps the storage service's x-ms-error-code onto the matching azure-core
            # exception class and populates error_code on the raised exception.
            process_storage_error(e)
        return RawBlobResponse(headers=response.headers, body=response.content)


def get_first_header(
    headers: Mapping[str, str], names: Sequence[str]
) -> Optional[str]:
    lowered_headers = {name.lower(): value for name, value in headers.items()}
    for name in names:
        value = lowered_headers.get(name.lower())
        if value:
            return value
    return None


def dig(document: Any, *keys: str) -> Any:
    node = document
    for key in keys:
        if not isinstance(node, collections.abc.Mapping):
            return None
        node = _get_ignoring_case(node, key)
    return node


def _get_ignoring_case(mapping: Mapping[str, Any], key: str) -> Any:
    # Falls back to a case-insensitive match, e.g. "accessSas" finds "accessSAS".
    if key in mapping:
        return mapping[key]
    lowered_key = key.lower()
    for candidate, value in mapping.items():
        if isinstance(candidate, str) and candidate.lower() == lowered_key:
            return value
    return None


def _load_json(response: HttpResponse) -> Any:
    text = response.text()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        _LOGGER.debug("Operation response body is not valid JSON.", exc_info=True)
        return None
