"""Tests for the path codec."""

import base64

import pytest
from bs4 import BeautifulSoup, Tag

from segmerge.engine.paths import (
    ChildIndex,
    PathStep,
    child_addresses,
    decode_id,
    element_address,
    encode_id,
    format_path,
    id_to_path,
    parse_path,
    resolve,
)
from segmerge.engine.tree import parse_document
from segmerge.errors import InvalidPathError

DOCUMENT = (
    "<html><head><title>T</title></head><body>"
    "<div><h2>Title</h2><p>First</p><span>x</span><p>Second</p></div>"
    "<ul><li>One</li><li>Two</li><li>Three</li></ul>"
    "<div><p>Other</p></div>"
    "</body></html>"
)


@pytest.fixture
def soup() -> BeautifulSoup:
    return parse_document(DOCUMENT)


class TestElementAddress:
    def test_address_is_absolute(self, soup: BeautifulSoup) -> None:
        h2 = soup.find("h2")
        assert element_address(h2) == (
            PathStep("html", 0),
            PathStep("body", 0),
            PathStep("div", 0),
            PathStep("h2", 0),
        )

    def test_ordinal_counts_same_tag_only(self, soup: BeautifulSoup) -> None:
        second_p = soup.find_all("p")[1]
        assert format_path(element_address(second_p)) == "html[0].body[0].div[0].p[1]"

    def test_same_tag_siblings_differ_in_last_step(self, soup: BeautifulSoup) -> None:
        first, second = soup.find_all("li")[:2]
        a = element_address(first)
        b = element_address(second)
        assert a[:-1] == b[:-1]
        assert (a[-1].index, b[-1].index) == (0, 1)

    def test_swapping_text_keeps_addresses(self) -> None:
        before = parse_document("<ul><li>One</li><li>Two</li></ul>")
        after = parse_document("<ul><li>Two</li><li>One</li></ul>")
        assert [element_address(li) for li in before.find_all("li")] == [
            element_address(li) for li in after.find_all("li")
        ]

    def test_stable_under_unrelated_sibling_insertion(self) -> None:
        before = parse_document("<div><p>A</p><p>B</p></div>")
        after = parse_document("<div><h3>New</h3><p>A</p><img src='x.png'><p>B</p></div>")
        assert element_address(before.find_all("p")[1]) == element_address(
            after.find_all("p")[1]
        )

    def test_text_node_not_addressable(self, soup: BeautifulSoup) -> None:
        text = soup.find("h2").string
        with pytest.raises(InvalidPathError):
            element_address(text)

    def test_document_not_addressable(self, soup: BeautifulSoup) -> None:
        with pytest.raises(InvalidPathError):
            element_address(soup)


class TestResolve:
    def test_round_trip_for_every_element(self, soup: BeautifulSoup) -> None:
        for element in soup.find_all(True):
            assert resolve(soup, element_address(element)) is element

    def test_out_of_range_ordinal(self, soup: BeautifulSoup) -> None:
        address = parse_path("html[0].body[0].ul[0].li[5]")
        assert resolve(soup, address) is None

    def test_missing_tag(self, soup: BeautifulSoup) -> None:
        assert resolve(soup, parse_path("html[0].body[0].table[0]")) is None

    def test_empty_address(self, soup: BeautifulSoup) -> None:
        assert resolve(soup, ()) is None

    def test_resolves_in_equivalent_tree(self, soup: BeautifulSoup) -> None:
        address = element_address(soup.find_all("li")[2])
        fresh = parse_document(DOCUMENT)
        target = resolve(fresh, address)
        assert isinstance(target, Tag)
        assert target.get_text() == "Three"


class TestPathStrings:
    def test_format_and_parse(self) -> None:
        address = (PathStep("html", 0), PathStep("body", 0), PathStep("p", 3))
        assert format_path(address) == "html[0].body[0].p[3]"
        assert parse_path("html[0].body[0].p[3]") == address

    def test_bare_step_means_ordinal_zero(self) -> None:
        assert parse_path("html.body.p[2]") == (
            PathStep("html", 0),
            PathStep("body", 0),
            PathStep("p", 2),
        )

    def test_tag_with_separator_round_trips(self) -> None:
        address = (PathStep("html", 0), PathStep("x.y", 1))
        assert parse_path(format_path(address)) == address

    @pytest.mark.parametrize("path", ["", "html[0].", "p[x]", "p[-1]", "p[0"])
    def test_malformed_paths(self, path: str) -> None:
        with pytest.raises(InvalidPathError):
            parse_path(path)


class TestSegmentIds:
    def test_id_is_base64_of_path(self) -> None:
        address = parse_path("html[0].body[0].p[0]")
        segment_id = encode_id(address)
        assert base64.b64decode(segment_id).decode("utf-8") == "html[0].body[0].p[0]"
        assert decode_id(segment_id) == address
        assert id_to_path(segment_id) == "html[0].body[0].p[0]"

    def test_decodes_legacy_ids(self) -> None:
        legacy = base64.b64encode(b"html.body.div[0].p[1]").decode("ascii")
        assert format_path(decode_id(legacy)) == "html[0].body[0].div[0].p[1]"

    @pytest.mark.parametrize("segment_id", ["!!!", "not base64", "//79"])
    def test_undecodable_ids(self, segment_id: str) -> None:
        with pytest.raises(InvalidPathError):
            decode_id(segment_id)

    def test_invalid_path_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_id(base64.b64encode(b"p[x]").decode("ascii"))


class TestChildAddresses:
    def test_matches_element_address(self, soup: BeautifulSoup) -> None:
        body = soup.body
        addressed = child_addresses(body, element_address(body))
        assert [address for _, address in addressed] == [
            element_address(child) for child in body.find_all(recursive=False)
        ]

    def test_ordinals_per_tag(self, soup: BeautifulSoup) -> None:
        div = soup.div
        addressed = child_addresses(div, element_address(div))
        assert [address[-1] for _, address in addressed] == [
            PathStep("h2", 0),
            PathStep("p", 0),
            PathStep("span", 0),
            PathStep("p", 1),
        ]

    def test_shared_index_resolves_every_element(self, soup: BeautifulSoup) -> None:
        index: ChildIndex = {}
        for element in soup.find_all(True):
            assert resolve(soup, element_address(element), index) is element
        assert index
