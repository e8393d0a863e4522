import pytest


@pytest.fixture
def subscription_id():
    return "00000000-0000-0000-0000-000000000000"


@pytest.fixture
def resource_group():
    return "myresourcegroup"


@pytest.fixture
def disk_name():
    return "mydisk"


@pytest.fixture
def poll_url():
    return "https://management.azure.com/subscriptions/sub/providers/Microsoft.Compute/locations/westus/DiskOperations/123?api-version=2023-04-02"


@pytest.fixture
def sas_url():
    return "https://md-abc123.blob.core.windows.net/xyz/abcd?sv=2018-03-28&sr=b&si=123&sig=signature"


@pytest.fixture
def blob_content():
    return b"blob content"


@pytest.fixture
def blob_length(blob_content):
    return len(blob_content)
