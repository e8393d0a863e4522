# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
from typing import Optional


class AzArmStorageError(Exception):
    """Base class for exceptions raised by azarmstorage."""

    pass


class MissingResourceGroupError(AzArmStorageError, ValueError):
    """Raised when an operation requires a resource group and none was provided.

    The resource group may be passed directly to the operation or set as the
    default ``resource_group`` on the :class:`~azarmstorage.config.ArmConfiguration`.
    """

    def __init__(self):
        super().__init__("A resource group must be specified.")


class InvalidArgumentError(AzArmStorageError, ValueError):
    """Raised when arguments to an operation cannot be used as given."""

    pass


class NotFoundError(AzArmStorageError):
    """Raised when an expected value is missing from a service response.

    The status code and raw body of the response that lacked the value are
    retained so that callers can tell an expected absence apart from a
    malformed response.
    """

    _MSG_FORMAT = "{message} (status code: {status_code})"

    def __init__(
        self, status_code: Optional[int], message: str, body: Optional[str] = None
    ):
        super().__init__(
            self._MSG_FORMAT.format(message=message, status_code=status_code)
        )
        self.status_code = status_code
        self.message = message
        self.body = body


class OperationNotFoundError(NotFoundError):
    """Raised when an access grant response carries no asynchronous operation URL."""

    pass


class SignedUrlNotFoundError(NotFoundError):
    """Raised when an asynchronous operation result carries no SAS URL."""

    pass
