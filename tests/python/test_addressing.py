import pytest
from bs4 import BeautifulSoup, Tag

from foxvox.document import PathStep, StructuralPath, address_of, resolve, resolve_text
from foxvox.exceptions import InvalidPathError

PAGE = (
    "<html><body>"
    "<div><p>first</p></div>"
    "<div><p>second</p><span>gap</span><p>third</p><p>fourth</p></div>"
    "</body></html>"
)


def test_address_omits_index_when_first_of_its_tag() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    first_p = soup.find("p")

    assert str(address_of(first_p)) == "/html/body/div/p"


def test_address_counts_only_same_tag_preceding_siblings() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    fourth = soup.find(string="fourth").parent

    assert str(address_of(fourth)) == "/html/body/div[2]/p[3]"


def test_round_trip_for_every_element() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    for tag in soup.find_all(True):
        assert resolve(address_of(tag), soup) is tag


def test_round_trip_through_serialized_form() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    third = soup.find(string="third").parent

    text = str(address_of(third))

    assert StructuralPath.parse(text) == address_of(third)
    assert resolve_text(text, soup) is third


def test_resolve_from_inner_node_uses_document_root() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    second = soup.find(string="second").parent

    assert resolve(address_of(second), soup.find("span")) is second


def test_resolve_miss_returns_none() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    assert resolve(StructuralPath.parse("/html/body/div[3]/p"), soup) is None
    assert resolve_text("/html/body/div[2]/p[9]", soup) is None


def test_resolve_after_structural_edit_may_shift() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    path = address_of(soup.find(string="fourth").parent)

    soup.find(string="second").parent.decompose()
    found = resolve(path, soup)

    assert found is None


def test_resolve_on_detached_tree() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    body = soup.body.extract()
    span = body.find("span")

    assert isinstance(body, Tag)
    assert resolve(StructuralPath.parse("/body/div[2]/span"), body) is span
    assert resolve(StructuralPath.parse("/html/body"), body) is None


def test_empty_path_never_resolves() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    assert StructuralPath.parse("") == StructuralPath()
    assert str(StructuralPath()) == ""
    assert resolve(StructuralPath(), soup) is None


@pytest.mark.parametrize("text", ["html/body", "/html//p", "/html/body/p[0]", "/html/p[x]"])
def test_parse_rejects_malformed_paths(text: str) -> None:
    with pytest.raises(InvalidPathError):
        StructuralPath.parse(text)


def test_resolve_text_swallows_malformed_path() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    assert resolve_text("not-a-path", soup) is None


def test_is_prefix_of_is_strict() -> None:
    parent = StructuralPath((PathStep("html"), PathStep("body")))
    child = StructuralPath.parse("/html/body/div[2]")

    assert parent.is_prefix_of(child)
    assert not child.is_prefix_of(parent)
    assert not parent.is_prefix_of(parent)
