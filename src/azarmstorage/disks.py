# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
from typing import Optional

from azarmstorage import _client
from azarmstorage import _range
from azarmstorage import _resource
from azarmstorage import _utils
from azarmstorage._http import ArmHttpClient
from azarmstorage.config import ArmConfiguration


_LOGGER = logging.getLogger(__name__)


class DiskService:
    """Operations on the managed disks of a subscription.

    :param configuration: Subscription, credential and network settings.

    Example::

        from azarmstorage.config import ArmConfiguration
        from azarmstorage.disks import DiskService

        configuration = ArmConfiguration("<subscription-id>", resource_group="my-group")
        with DiskService(configuration) as disks:
            data = disks.get_blob_raw("my-disk", byte_range=(0, 1023))

        print(data.headers)
        with open("disk.vhd", "ab") as f:
            f.write(data.body)
    """

    _PROVIDER = "Microsoft.Compute"
    _SERVICE_NAME = "disks"

    def __init__(
        self,
        configuration: ArmConfiguration,
        *,
        max_poll_attempts: int = 1,
        **_internal_only_kwargs,
    ):
        self._configuration = configuration
        self._http_client = self._get_http_client(
            configuration, _internal_only_kwargs.get("http_client")
        )
        url_builder = _resource.ResourceUrlBuilder(
            configuration, self._PROVIDER, self._SERVICE_NAME
        )
        self._access_grant_requester = _client.AccessGrantRequester(
            self._http_client, url_builder
        )
        self._operation_poller = _client.OperationPoller(
            self._http_client, max_attempts=max_poll_attempts
        )
        self._ranged_blob_fetcher = _client.RangedBlobFetcher(self._http_client)

    def get_blob_raw(
        self,
        disk_name: str,
        resource_group: Optional[str] = None,
        *,
        byte_range: Optional[_range.BYTE_RANGE_TYPE] = None,
        start_byte: Optional[int] = None,
        end_byte: Optional[int] = None,
        length: Optional[int] = None,
        entire_image: bool = False,
        duration: Optional[int] = None,
    ) -> _client.RawBlobResponse:
        """Get the raw bytes of a managed disk.

        Access to the disk is granted through a temporary SAS URL that is
        requested and then used to read the bytes. A byte range must be given
        with ``byte_range``, ``start_byte`` and ``end_byte``, or ``start_byte``
        and ``length``. Reading the entire disk requires explicitly passing
        ``entire_image=True``, which results in a long running request that
        returns a large number of bytes.

        :param disk_name: Name of the managed disk.
        :param resource_group: Resource group of the disk. Defaults to the
            ``resource_group`` of the configuration.
        :param byte_range: Inclusive range of bytes as a ``(start, end)`` pair,
            or a :class:`range` whose first and last members bound the bytes,
            e.g. ``range(0, 1024)`` for the first 1024 bytes.
        :param start_byte: First byte to read. Use with ``end_byte`` or ``length``.
        :param end_byte: Last byte to read, inclusive. Use with ``start_byte``.
        :param length: Number of bytes to read starting at ``start_byte``.
        :param entire_image: Read the entire disk when no range is given.
        :param duration: Seconds that the SAS URL remains valid. Defaults to one hour.
        :raises ~azarmstorage.exceptions.MissingResourceGroupError: No resource
            group was given or configured.
        :raises ~azarmstorage.exceptions.InvalidArgumentError: Neither a byte range
            nor ``entire_image`` was given.
        :raises ~azarmstorage.exceptions.OperationNotFoundError: The access grant
            response had no operation URL.
        :raises ~azarmstorage.exceptions.SignedUrlNotFoundError: The operation
            result had no SAS URL.
        :returns: The response headers (blob metadata) and body (blob bytes).
        """
        if resource_group is None:
            resource_group = self._configuration.resource_group
        _resource.validate_resource_group(resource_group)
        range_spec = _range.resolve_byte_range(
            byte_range=byte_range,
            start_byte=start_byte,
            end_byte=end_byte,
            length=length,
            entire_image=entire_image,
        )
        if duration is None:
            duration = _client.DEFAULT_ACCESS_DURATION

        operation = self._access_grant_requester.request_access(
            disk_name, resource_group, duration
        )
        _LOGGER.debug("Polling access grant operation for %s/%s.", disk_name, resource_group)
        signed_access = self._operation_poller.fetch_signed_url(
            operation.poll_url, disk_name, resource_group
        )
        return self._ranged_blob_fetcher.fetch_raw(signed_access.sas_url, range_spec)

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "DiskService":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _get_http_client(
        self,
        configuration: ArmConfiguration,
        http_client: Optional[ArmHttpClient] = None,
    ) -> ArmHttpClient:
        if http_client is None:
            http_client = ArmHttpClient(
                _utils.to_sdk_credential(configuration.credential),
                configuration.credential_scope,
                configuration.transport,
            )
        return http_client
