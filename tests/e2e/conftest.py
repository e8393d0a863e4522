# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import os
import pytest

from azure.identity import DefaultAzureCredential

from azarmstorage.config import ArmConfiguration
from azarmstorage.disks import DiskService


def _get_required_env(name):
    value = os.environ.get(name)
    if value is None:
        pytest.skip(f'"{name}" environment variable must be set to run end to end tests.')
    return value


@pytest.fixture(scope="package")
def subscription_id():
    return _get_required_env("AZARMSTORAGE_SUBSCRIPTION_ID")


@pytest.fixture(scope="package")
def resource_group():
    return _get_required_env("AZARMSTORAGE_RESOURCE_GROUP")


@pytest.fixture(scope="package")
def disk_name():
    return _get_required_env("AZARMSTORAGE_DISK_NAME")


@pytest.fixture(scope="package")
def disk_service(subscription_id, resource_group):
    configuration = ArmConfiguration(
        subscription_id,
        resource_group=resource_group,
        credential=DefaultAzureCredential(),
    )
    with DiskService(configuration, max_poll_attempts=10) as disk_service:
        yield disk_service
