# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
from typing import Optional
import urllib.parse

from azarmstorage.config import ArmConfiguration
from azarmstorage.exceptions import MissingResourceGroupError


def validate_resource_group(resource_group: Optional[str]) -> None:
    if not resource_group:
        raise MissingResourceGroupError()


class ResourceUrlBuilder:
    """Builds management URLs for resources of one provider and service type."""

    _URL_FORMAT = (
        "{endpoint}/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        "/providers/{provider}/{service_name}/{resource_name}"
    )

    def __init__(
        self, configuration: ArmConfiguration, provider: str, service_name: str
    ):
        self._configuration = configuration
        self._provider = provider
        self._service_name = service_name

    def build(
        self, resource_group: str, resource_name: str, action: Optional[str] = None
    ) -> str:
        url = self._URL_FORMAT.format(
            endpoint=self._configuration.endpoint.rstrip("/"),
            subscription_id=_quote(self._configuration.subscription_id),
            resource_group=_quote(resource_group),
            provider=self._provider,
            service_name=self._service_name,
            resource_name=_quote(resource_name),
        )
        if action is not None:
            url += f"/{action}"
        query = urllib.parse.urlencode({"api-version": self._configuration.api_version})
        return f"{url}?{query}"


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")
