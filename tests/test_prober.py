import httpx

from src.fertify_client.prober import ConnectivityProber, ProbeStatus, classify_latency
from src.fertify_client.registry import DISEASE, FERTILIZER, EndpointConfig, EndpointRegistry


def make_prober(http_client, timeout=10.0):
    registry = EndpointRegistry(
        EndpointConfig(
            primary_base="http://172.20.10.4",
            service_ports={FERTILIZER: 5001, DISEASE: 5002},
            service_paths={FERTILIZER: "/api/predict_fertilizer", DISEASE: "/api/predict_disease_base64"},
        )
    )
    return ConnectivityProber(registry, http_client, timeout=timeout)


def test_any_http_status_counts_as_reachable(network, http_client):
    network.route("172.20.10.4:5001", httpx.Response(404, json={"detail": "Not Found"}))

    result = make_prober(http_client).probe(None, FERTILIZER)

    assert result.reachable is True
    assert result.status == ProbeStatus.REACHABLE
    assert result.http_status == 404
    assert result.error_kind is None
    assert result.latency_classification in ("fast", "slow")
    assert result.url == "http://172.20.10.4:5001/"


def test_probe_hits_service_root_with_accept_header(network, http_client):
    network.route("localhost:5002", httpx.Response(200, text="Disease service running"))

    result = make_prober(http_client).probe("http://localhost", DISEASE)

    assert result.reachable
    request = network.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/"
    assert request.headers["accept"] == "application/json"


def test_probe_uses_bounded_timeout(network, http_client):
    network.route("172.20.10.4:5002", httpx.Response(200))

    make_prober(http_client, timeout=10.0).probe(None, DISEASE)

    timeout = network.requests[0].extensions["timeout"]
    assert timeout["connect"] == 10.0
    assert timeout["read"] == 10.0


def test_connection_refused_is_unreachable(network, http_client):
    network.route("172.20.10.4:5001", httpx.ConnectError)

    result = make_prober(http_client).probe(None, FERTILIZER)

    assert result.reachable is False
    assert result.status == ProbeStatus.UNREACHABLE
    assert result.error_kind == "network"
    assert result.http_status is None
    assert "ConnectError" in result.error


def test_timeout_is_reported_as_timeout(network, http_client):
    network.route("172.20.10.4:5001", httpx.ReadTimeout)

    result = make_prober(http_client).probe(None, FERTILIZER)

    assert result.reachable is False
    assert result.status == ProbeStatus.TIMEOUT
    assert result.error_kind == "network"


def test_probe_does_not_retry(network, http_client):
    make_prober(http_client).probe(None, DISEASE)
    assert network.contacted == ["172.20.10.4:5002"]


def test_classify_latency():
    assert classify_latency(120.0) == "fast"
    assert classify_latency(2500.0) == "slow"
