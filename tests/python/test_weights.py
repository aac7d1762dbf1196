from bs4 import BeautifulSoup

from foxvox.document import DocumentSnapshot, NodeWeight, WeightCalculator


def _snapshot(markup: str) -> DocumentSnapshot:
    soup = BeautifulSoup(markup, "html.parser")
    return DocumentSnapshot.from_root(soup.find())


def test_text_node_counts_only_content() -> None:
    snapshot = _snapshot("<p>hello world</p>")
    calculator = WeightCalculator(snapshot)

    text_index = snapshot.node(snapshot.root).children[0]

    assert calculator.weight(text_index) == NodeWeight(html_weight=0, content_weight=11)


def test_comment_node_counts_only_markup() -> None:
    snapshot = _snapshot("<div><!--note--></div>")
    calculator = WeightCalculator(snapshot)

    comment_index = snapshot.node(snapshot.root).children[0]

    assert snapshot.node(comment_index).kind == "comment"
    assert calculator.weight(comment_index) == NodeWeight(html_weight=4, content_weight=0)


def test_element_adds_own_tag_overhead_to_children() -> None:
    snapshot = _snapshot('<div class="x"><p>abc</p>de</div>')
    calculator = WeightCalculator(snapshot)

    weight = calculator.weight(snapshot.root)

    # <div class="x"></div> = 21, <p></p> = 7
    assert weight == NodeWeight(html_weight=28, content_weight=5)


def test_weight_is_memoized_per_index() -> None:
    snapshot = _snapshot("<section><p>one</p><p>two</p></section>")
    calculator = WeightCalculator(snapshot)

    first = calculator.weight(snapshot.root)
    second = calculator.weight(snapshot.root)

    assert first is second


def test_nested_tree_accumulates_overhead_per_level() -> None:
    depth = 200
    markup = "<div>" * depth + "x" + "</div>" * depth
    snapshot = _snapshot(markup)

    weight = WeightCalculator(snapshot).weight(snapshot.root)

    assert weight.content_weight == 1
    assert weight.html_weight == depth * len("<div></div>")


def test_own_tag_overhead_matches_outer_minus_inner_markup() -> None:
    markup = (
        '<article id="a" data-note="x &amp; y"><h1 class="t big">Title</h1>'
        '<p>one<br/>two <img src="a.png" alt="&lt;pic&gt;"/></p>'
        "<ul><li>i</li><li><em>ii</em></li></ul><!--c--></article>"
    )
    snapshot = _snapshot(markup)
    calculator = WeightCalculator(snapshot)

    elements = [index for index in range(len(snapshot)) if snapshot.node(index).kind == "element"]
    assert len(elements) == 9

    for index in elements:
        tag = snapshot.element(index)
        children_html = sum(calculator.weight(child).html_weight for child in snapshot.node(index).children)
        own = calculator.weight(index).html_weight - children_html

        assert own == len(tag.decode()) - len(tag.decode_contents()), tag.name
