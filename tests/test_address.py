"""Tests for roost.address — address formatting, parsing, and sync."""

import pytest

from roost.address import AddressSync, MemoryTransport
from roost.routing.patterns import PatternRouter
from roost.routing.route import PageDescriptor, RouteRequest
from roost.routing.table import RouteTable
from roost.stack.entry import StackEntry


def _sync(transport: MemoryTransport | None = None, prefix: str = "") -> AddressSync:
    table = RouteTable(reserved=("/",))
    table.register("/first", lambda: "F1")
    table.register("/second", lambda: "F2")
    patterns = PatternRouter()
    patterns.add("/user/{id:int}", lambda id: f"user {id}")
    patterns.compile()
    return AddressSync(
        transport or MemoryTransport(),
        table=table,
        patterns=patterns,
        prefix=prefix,
    )


def _entry(name: str | None, arguments: object = None) -> StackEntry:
    return StackEntry(PageDescriptor(name, "content", arguments))


class TestMemoryTransport:
    def test_read_write(self) -> None:
        transport = MemoryTransport("/start")
        assert transport.read() == "/start"
        transport.write("/next")
        assert transport.read() == "/next"
        assert transport.writes == ["/next"]


class TestFormat:
    def test_plain_name(self) -> None:
        assert _sync().format_address(PageDescriptor("/second", "F2")) == "/second"

    def test_string_argument_becomes_segment(self) -> None:
        desc = PageDescriptor("/parameterpage", "FB", "Hello")
        assert _sync().format_address(desc) == "/parameterpage/Hello"

    def test_string_argument_is_quoted(self) -> None:
        desc = PageDescriptor("/search", "page", "owls & hawks/2")
        assert _sync().format_address(desc) == "/search/owls%20%26%20hawks%2F2"

    def test_mapping_argument_becomes_query(self) -> None:
        desc = PageDescriptor("/search", "page", {"q": "owl", "page": 2})
        assert _sync().format_address(desc) == "/search?q=owl&page=2"

    def test_other_arguments_not_reflected(self) -> None:
        assert _sync().format_address(PageDescriptor("/second", "F2", 42)) == "/second"

    def test_anonymous_has_no_address(self) -> None:
        assert _sync().format_address(PageDescriptor.anonymous("dialog")) is None

    def test_prefix(self) -> None:
        assert _sync(prefix="#").format_request("/second") == "#/second"


class TestParse:
    def test_exact_table_name(self) -> None:
        assert _sync().parse("/second") == RouteRequest("/second")

    def test_home(self) -> None:
        assert _sync().parse("/") == RouteRequest("/")
        assert _sync().parse("") == RouteRequest("/")

    def test_trailing_segment_argument(self) -> None:
        assert _sync().parse("/parameterpage/Hello") == RouteRequest("/parameterpage", "Hello")

    def test_trailing_segment_unquoted(self) -> None:
        request = _sync().parse("/search/owls%20%26%20hawks%2F2")
        assert request == RouteRequest("/search", "owls & hawks/2")

    def test_pattern_name_kept_whole(self) -> None:
        assert _sync().parse("/user/42") == RouteRequest("/user/42")

    def test_single_unknown_segment(self) -> None:
        assert _sync().parse("/nowhere") == RouteRequest("/nowhere")

    def test_double_slash_is_not_a_host(self) -> None:
        assert _sync().parse("//first") == RouteRequest("/first")
        assert _sync().parse("//nowhere") == RouteRequest("/nowhere")

    def test_repeated_slashes_collapsed(self) -> None:
        assert _sync().parse("/parameterpage//Hello") == RouteRequest("/parameterpage", "Hello")

    def test_fragment_ignored(self) -> None:
        assert _sync().parse("/second#top") == RouteRequest("/second")

    def test_query_becomes_mapping(self) -> None:
        assert _sync().parse("/search?q=owl&page=2") == RouteRequest(
            "/search", {"q": "owl", "page": "2"}
        )

    def test_prefix_stripped(self) -> None:
        assert _sync(prefix="#").parse("#/parameterpage/Hello") == RouteRequest(
            "/parameterpage", "Hello"
        )


class TestStackChanged:
    def test_writes_top_address(self) -> None:
        transport = MemoryTransport()
        sync = _sync(transport)

        assert sync.on_stack_changed(_entry("/second")) == "/second"
        assert transport.address == "/second"
        assert sync.current == "/second"

    def test_anonymous_keeps_previous_address(self) -> None:
        transport = MemoryTransport()
        sync = _sync(transport)
        sync.on_stack_changed(_entry("/second"))

        assert sync.on_stack_changed(_entry(None)) is None
        assert transport.address == "/second"
        assert transport.writes == ["/second"]

    def test_same_address_not_rewritten(self) -> None:
        transport = MemoryTransport()
        sync = _sync(transport)
        sync.on_stack_changed(_entry("/second"))
        sync.on_stack_changed(_entry("/second"))
        assert transport.writes == ["/second"]


class TestInbound:
    @pytest.mark.parametrize(
        "address",
        ["/parameterpage/Hello", "/second", "/user/7", "/search?q=owl", "/"],
    )
    def test_round_trip(self, address: str) -> None:
        transport = MemoryTransport()
        sync = _sync(transport)

        request = sync.on_inbound_address(address)
        top = _entry(request.name, request.arguments)

        assert sync.format_address(top.descriptor) == address
        # The resulting stack change must not be written back
        assert sync.on_stack_changed(top) is None
        assert transport.writes == []

    def test_idempotent(self) -> None:
        sync = _sync()
        first = sync.on_inbound_address("/parameterpage/Hello")
        second = sync.on_inbound_address("/parameterpage/Hello")
        assert first == second == RouteRequest("/parameterpage", "Hello")

    def test_read_inbound_uses_transport(self) -> None:
        sync = _sync(MemoryTransport("/second"))
        assert sync.read_inbound() == RouteRequest("/second")
        assert sync.current == "/second"
