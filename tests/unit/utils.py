import json

import azure.core.exceptions
from azure.core.pipeline.transport import HttpTransport
from azure.core.utils import CaseInsensitiveDict


OPERATION_IN_PROGRESS_BODY = {"status": "InProgress"}


def sas_operation_body(sas_url, access_sas_key="accessSas"):
    return {
        "startTime": "2024-10-28T20:22:30.0000000+00:00",
        "endTime": "2024-10-28T20:22:31.0000000+00:00",
        "status": "Succeeded",
        "properties": {"output": {access_sas_key: sas_url}},
        "name": "00000000-0000-0000-0000-000000000123",
    }


def storage_error_body(code, message):
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f"<Error><Code>{code}</Code><Message>{message}</Message></Error>"
    ).encode("utf-8")


class FakeHttpResponse:
    def __init__(
        self,
        status_code=200,
        headers=None,
        content=b"",
        reason="OK",
        content_type=None,
        request=None,
    ):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.content = content
        self.reason = reason
        self.request = request
        if content_type is None:
            content_type = self.headers.get("Content-Type")
        self.content_type = content_type

    @classmethod
    def from_json(cls, body, status_code=200, headers=None):
        headers = {"Content-Type": "application/json", **(headers or {})}
        return cls(
            status_code=status_code,
            headers=headers,
            content=json.dumps(body).encode("utf-8"),
        )

    def text(self, encoding=None):
        return self.content.decode(encoding or "utf-8")

    def json(self):
        return json.loads(self.text())

    def read(self):
        return self.content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise azure.core.exceptions.HttpResponseError(response=self)


class RecordingTransport(HttpTransport):
    """Transport that returns canned responses and records what was sent."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.requests = []
        self.send_kwargs = []
        self.closed = False

    def send(self, request, **kwargs):
        self.requests.append(request)
        self.send_kwargs.append(kwargs)
        response = self._responses.pop(0)
        response.request = request
        return response

    def open(self):
        pass

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
