# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
from typing import Optional
import urllib.parse

from azure.identity import DefaultAzureCredential
from azure.core.credentials import TokenCredential


SDK_CREDENTIAL_TYPE = TokenCredential
AZARMSTORAGE_CREDENTIAL_TYPE = Optional[TokenCredential]


def to_sdk_credential(credential: AZARMSTORAGE_CREDENTIAL_TYPE) -> SDK_CREDENTIAL_TYPE:
    if credential is None:
        return DefaultAzureCredential()
    if isinstance(credential, TokenCredential):
        return credential
    raise TypeError(f"Unsupported credential: {type(credential)}")


def strip_query(url: str) -> str:
    # SAS tokens live in the query string and must never reach log output.
    parsed_url = urllib.parse.urlparse(url)
    return urllib.parse.urlunparse(parsed_url._replace(query="", fragment=""))
