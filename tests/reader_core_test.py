import httpx
from pytest import fixture, mark, raises

from range_reader import MetadataError, RangeReader, open_reader

from .data import EXAMPLE_FILE_LENGTH, EXAMPLE_PAYLOAD, EXAMPLE_PREFETCH, EXAMPLE_URL
from .share import RangeServer, make_client


@fixture
def server():
    return RangeServer()


@fixture
def client(server):
    c = make_client(server)
    yield c
    c.close()


@fixture
def reader(client):
    "A RangeReader over the example file, without a prefetch buffer."
    return RangeReader(url=EXAMPLE_URL, client=client)


@fixture
def prefetched_reader(client):
    "A RangeReader over the example file with its first 100 bytes prefetched."
    return RangeReader(url=EXAMPLE_URL, prefetch=EXAMPLE_PREFETCH, client=client)


def test_reader(reader):
    assert isinstance(reader, RangeReader)


def test_open_reader(client):
    r = open_reader(EXAMPLE_URL, prefetch=EXAMPLE_PREFETCH, client=client)
    assert isinstance(r, RangeReader)
    assert len(r.prefetched) == EXAMPLE_PREFETCH


def test_total_bytes(reader):
    assert reader.total_bytes == EXAMPLE_FILE_LENGTH


def test_init_sends_only_head(server, reader):
    assert [r.method for r in server.requests] == ["HEAD"]


def test_initial_position(reader):
    assert reader.tell() == 0


def test_no_prefetch_is_empty(reader):
    assert reader.prefetched == b""


def test_prefetch_requests(server, prefetched_reader):
    assert [r.method for r in server.requests] == ["HEAD", "GET"]
    assert server.range_requests == ["bytes=0-99"]


def test_prefetch_bytes(prefetched_reader):
    assert prefetched_reader.prefetched == EXAMPLE_PAYLOAD[:EXAMPLE_PREFETCH]
    assert prefetched_reader.tell() == 0


def test_prefetch_longer_than_file(client):
    r = RangeReader(url=EXAMPLE_URL, prefetch=5000, client=client)
    assert r.prefetched == EXAMPLE_PAYLOAD


def test_prefetch_failure_is_logged(server, client, caplog):
    server.get_status = 500
    r = RangeReader(url=EXAMPLE_URL, prefetch=EXAMPLE_PREFETCH, client=client)
    assert r.prefetched == b""
    assert "Error prefetching head" in caplog.text


def test_prefetch_transport_failure_is_logged(server, client, caplog):
    server.fail_on.add("GET")
    r = RangeReader(url=EXAMPLE_URL, prefetch=EXAMPLE_PREFETCH, client=client)
    assert r.prefetched == b""
    assert "ConnectError" in caplog.text


def test_prefetch_of_empty_file(caplog):
    server = RangeServer(payload=b"")
    with make_client(server) as c:
        r = RangeReader(url=EXAMPLE_URL, prefetch=EXAMPLE_PREFETCH, client=c)
    assert r.total_bytes == 0
    assert r.prefetched == b""
    assert server.range_requests == []


def test_negative_prefetch(client):
    with raises(ValueError, match="must not be negative"):
        RangeReader(url=EXAMPLE_URL, prefetch=-1, client=client)


@mark.parametrize("error_msg", [".*missing 'content-length' header.*"])
def test_head_without_length(server, client, error_msg):
    server.head_headers = {}
    with raises(MetadataError, match=error_msg) as exc_info:
        RangeReader(url=EXAMPLE_URL, client=client)
    assert isinstance(exc_info.value.__cause__, KeyError)


@mark.parametrize("length", ["abc", "1.5", "", "1_000", " 12", "+5", "-1"])
def test_head_unparsable_length(server, client, length):
    server.head_headers = {"content-length": length}
    with raises(MetadataError) as exc_info:
        RangeReader(url=EXAMPLE_URL, client=client)
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_head_negative_length(server, client):
    server.head_headers = {"content-length": "-1"}
    with raises(MetadataError, match="Invalid content-length '-1'"):
        RangeReader(url=EXAMPLE_URL, client=client)


@mark.parametrize("status", [403, 404, 500])
def test_head_bad_status(server, client, status):
    server.head_status = status
    with raises(MetadataError, match=f"status {status}"):
        RangeReader(url=EXAMPLE_URL, client=client)


def test_head_transport_failure(server, client):
    server.fail_on.add("HEAD")
    with raises(MetadataError) as exc_info:
        RangeReader(url=EXAMPLE_URL, client=client)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_async_client_rejected():
    with raises(TypeError, match="is async"):
        RangeReader(url=EXAMPLE_URL, client=httpx.AsyncClient())


def test_non_client_rejected():
    with raises(TypeError, match="is not a HTTPX client"):
        RangeReader(url=EXAMPLE_URL, client=object())


def test_reader_repr(reader):
    assert f"{reader!r}" == "RangeReader ⠶ 0/1000 @ 'example.bin' from example.com"


def test_reader_name(reader):
    assert reader.name == "example.bin"


def test_reader_domain(reader):
    assert reader.domain == "example.com"


def test_file_like_flags(reader):
    assert reader.readable()
    assert reader.seekable()
    assert not reader.writable()


def test_context_manager_closes(reader):
    with reader as r:
        assert r.closed is False
    assert reader.closed is True


@mark.parametrize(
    "call",
    [
        lambda r: r.read(1),
        lambda r: r.read_at(0, 1),
        lambda r: r.seek(0),
    ],
)
def test_closed_reader_refuses_io(reader, call):
    reader.close()
    with raises(ValueError, match="closed reader"):
        call(reader)


def test_close_leaves_client_open(client, reader):
    reader.close()
    assert client.is_closed is False


def test_head_through_redirect(server, client):
    server.redirect_host = "cdn.example.com"
    r = RangeReader(url=EXAMPLE_URL, client=client)
    assert r.total_bytes == EXAMPLE_FILE_LENGTH
    assert [(req.method, req.url.host) for req in server.requests] == [
        ("HEAD", "example.com"),
        ("HEAD", "cdn.example.com"),
    ]
