import pytest

from pulsarkit.lookup_service import (
    LookupFailedError,
    LookupRequest,
    LookupResponse,
    LookupResult,
    LookupService,
    LookupType,
)

SERVICE_URL = "pulsar://example:6650"


class MockedRPCClient:
    def __init__(self, expected_requests, responses, expected_url=""):
        self.request_id = 0
        self.expected_requests = list(expected_requests)
        self.responses = list(responses)
        self.expected_url = expected_url
        self.targets = []

    def new_request_id(self):
        self.request_id += 1
        return self.request_id

    def request_to_any_broker(self, request_id, request):
        assert request == self.expected_requests.pop(0)
        return self.responses.pop(0)

    def request(self, logical_addr, physical_addr, request_id, request):
        assert request == self.expected_requests.pop(0)
        self.targets.append((logical_addr, physical_addr))
        return self.responses.pop(0)


def _first_request():
    return LookupRequest(request_id=1, topic="my-topic", authoritative=False)


def test_lookup_success():
    rpc = MockedRPCClient(
        [_first_request()],
        [
            LookupResponse(
                request_id=1,
                response=LookupType.CONNECT,
                authoritative=True,
                broker_service_url="pulsar://broker-1:6650",
            )
        ],
    )
    lr = LookupService(rpc, SERVICE_URL).lookup("my-topic")
    assert lr == LookupResult("pulsar://broker-1:6650", "pulsar://broker-1:6650")


def test_lookup_with_proxy():
    rpc = MockedRPCClient(
        [_first_request()],
        [
            LookupResponse(
                request_id=1,
                response=LookupType.CONNECT,
                authoritative=True,
                broker_service_url="pulsar://broker-1:6650",
                proxy_through_service_url=True,
            )
        ],
    )
    lr = LookupService(rpc, SERVICE_URL).lookup("my-topic")
    assert lr.logical_addr == "pulsar://broker-1:6650"
    assert lr.physical_addr == "pulsar://example:6650"


def test_lookup_with_redirect():
    rpc = MockedRPCClient(
        [
            _first_request(),
            LookupRequest(request_id=2, topic="my-topic", authoritative=True),
        ],
        [
            LookupResponse(
                request_id=1,
                response=LookupType.REDIRECT,
                authoritative=True,
                broker_service_url="pulsar://broker-2:6650",
            ),
            LookupResponse(
                request_id=2,
                response=LookupType.CONNECT,
                authoritative=True,
                broker_service_url="pulsar://broker-1:6650",
            ),
        ],
    )
    lr = LookupService(rpc, SERVICE_URL).lookup("my-topic")
    assert rpc.targets == [("pulsar://broker-2:6650", "pulsar://broker-2:6650")]
    assert lr == LookupResult("pulsar://broker-1:6650", "pulsar://broker-1:6650")


def test_lookup_with_invalid_url_response():
    rpc = MockedRPCClient(
        [_first_request()],
        [
            LookupResponse(
                request_id=1,
                response=LookupType.CONNECT,
                authoritative=True,
                broker_service_url="foo.html",
                proxy_through_service_url=False,
            )
        ],
    )
    with pytest.raises(ValueError):
        LookupService(rpc, SERVICE_URL).lookup("my-topic")


def test_lookup_with_lookup_failure():
    rpc = MockedRPCClient(
        [_first_request()],
        [
            LookupResponse(
                request_id=1,
                response=LookupType.FAILED,
                authoritative=True,
                error="ServiceNotReady",
            )
        ],
    )
    with pytest.raises(LookupFailedError, match="ServiceNotReady"):
        LookupService(rpc, SERVICE_URL).lookup("my-topic")


class _AlwaysRedirect:
    def __init__(self):
        self.ids = 0
        self.redirected_requests = 0

    def new_request_id(self):
        self.ids += 1
        return self.ids

    def _redirect(self, request_id):
        return LookupResponse(
            request_id=request_id,
            response=LookupType.REDIRECT,
            broker_service_url="pulsar://broker-2:6650",
        )

    def request_to_any_broker(self, request_id, request):
        return self._redirect(request_id)

    def request(self, logical_addr, physical_addr, request_id, request):
        self.redirected_requests += 1
        return self._redirect(request_id)


def test_lookup_exceeds_max_redirects():
    rpc = _AlwaysRedirect()
    with pytest.raises(LookupFailedError, match="exceeded max number of redirection"):
        LookupService(rpc, SERVICE_URL).lookup("my-topic")
    assert rpc.redirected_requests == 20


class _FailingRPC:
    def new_request_id(self):
        return 1

    def request_to_any_broker(self, request_id, request):
        raise ConnectionError("connection error")

    def request(self, logical_addr, physical_addr, request_id, request):
        raise ConnectionError("connection error")


def test_lookup_propagates_rpc_errors():
    with pytest.raises(ConnectionError, match="connection error"):
        LookupService(_FailingRPC(), SERVICE_URL).lookup("my-topic")