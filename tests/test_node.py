import pytest

from filequery.match_context import Entry, EntryType, Highlight, IndexType, MatchContext
from filequery.node import (
    Comparison,
    ExtensionNode,
    MatchEverythingNode,
    Operator,
    OperatorNode,
    RegexNode,
    SizeNode,
    TextNode,
    create_node,
    create_regex_node,
    wildcard_to_regex,
)
from filequery.tokens import QueryFlag


def ctx(name, parent="/home/user", type=EntryType.FILE, size=0):
    return MatchContext(Entry(name=name, parent=parent, type=type, size=size))


def test_wildcard_to_regex_star_and_dot():
    assert wildcard_to_regex("*.txt") == r"^.*\.txt$"


def test_wildcard_to_regex_question_mark():
    assert wildcard_to_regex("a?b") == "^a.b$"


def test_wildcard_node_matches_whole_name():
    node = create_node("*.txt", QueryFlag.NONE)
    assert isinstance(node, RegexNode)
    assert node.search(ctx("notes.txt"))
    assert not node.search(ctx("notes.txt.bak"))


def test_plain_term_is_case_insensitive_by_default():
    node = create_node("READ", QueryFlag.NONE)
    assert isinstance(node, TextNode)
    assert node.search(ctx("readme.md"))
    assert not node.search(ctx("notes.md"))


def test_match_case_flag():
    node = create_node("READ", QueryFlag.MATCH_CASE)
    assert not node.search(ctx("readme.md"))
    assert node.search(ctx("READme.md"))


def test_auto_match_case_with_upper_letter():
    node = create_node("Read", QueryFlag.AUTO_MATCH_CASE)
    assert QueryFlag.MATCH_CASE in node.flags
    assert not node.search(ctx("readme"))
    assert node.search(ctx("Readme"))


def test_auto_match_case_without_upper_letter():
    node = create_node("read", QueryFlag.AUTO_MATCH_CASE)
    assert QueryFlag.MATCH_CASE not in node.flags
    assert node.search(ctx("README"))


def test_exact_match():
    node = create_node("readme", QueryFlag.EXACT_MATCH)
    assert node.search(ctx("README"))
    assert not node.search(ctx("readme.md"))


def test_auto_search_in_path_with_separator():
    node = create_node("user/read", QueryFlag.AUTO_SEARCH_IN_PATH)
    assert QueryFlag.SEARCH_IN_PATH in node.flags
    assert node.search(ctx("readme", parent="/home/user"))
    assert not node.search(ctx("readme", parent="/home/other"))


def test_auto_search_in_path_without_separator_searches_name():
    node = create_node("home", QueryFlag.AUTO_SEARCH_IN_PATH)
    assert not node.search(ctx("readme", parent="/home/user"))


def test_invalid_regex_gives_none():
    assert create_node("(", QueryFlag.REGEX) is None
    assert create_regex_node("[a", QueryFlag.NONE) is None


def test_regex_case_handling():
    assert create_regex_node("^abc", QueryFlag.NONE).search(ctx("ABCdef"))
    assert not create_regex_node("^abc", QueryFlag.MATCH_CASE).search(ctx("ABCdef"))


def test_unicode_term_folds_case():
    node = create_node("äpf", QueryFlag.NONE)
    context = ctx("ÄPFEL.txt")
    assert node.search(context)
    assert not node.highlight(context)
    assert context.highlights(IndexType.NAME) == []


def test_name_highlight_covers_match():
    node = create_node("me", QueryFlag.NONE)
    context = ctx("readme.md")
    assert node.highlight(context)
    [span] = context.highlights(IndexType.NAME)
    assert context.name[span.start:span.end] == "me"


def test_highlight_fails_without_match():
    node = create_node("zzz", QueryFlag.NONE)
    context = ctx("readme.md")
    assert not node.highlight(context)
    assert context.highlights(IndexType.NAME) == []


def test_path_highlight_spanning_parent_and_name():
    node = create_node("user/fi", QueryFlag.SEARCH_IN_PATH)
    context = ctx("file.txt", parent="/home/user")
    assert node.highlight(context)
    [path_span] = context.highlights(IndexType.PATH)
    [name_span] = context.highlights(IndexType.NAME)
    assert path_span.end is None
    assert context.path[path_span.start:].startswith("user/")
    assert context.name[name_span.start:name_span.end] == "fi"


def test_path_highlight_only_in_name():
    node = create_node("ile", QueryFlag.SEARCH_IN_PATH)
    context = ctx("file.txt", parent="/home/user")
    assert node.highlight(context)
    assert context.highlights(IndexType.PATH) == []
    [span] = context.highlights(IndexType.NAME)
    assert context.name[span.start:span.end] == "ile"


def test_path_highlight_only_in_parent():
    node = create_node("home", QueryFlag.SEARCH_IN_PATH)
    context = ctx("file.txt", parent="/home/user")
    assert node.highlight(context)
    assert context.highlights(IndexType.NAME) == []
    [span] = context.highlights(IndexType.PATH)
    assert context.path[span.start:span.end] == "home"


def test_exact_highlight_marks_whole_name():
    node = create_node("readme", QueryFlag.EXACT_MATCH)
    context = ctx("readme")
    assert node.highlight(context)
    assert context.highlights(IndexType.NAME) == [Highlight()]


def test_regex_highlight_with_groups():
    node = create_regex_node("(f)(i)", QueryFlag.NONE)
    context = ctx("file")
    assert node.highlight(context)
    [span] = context.highlights(IndexType.NAME)
    assert context.name[span.start:span.end] == "fi"


@pytest.mark.parametrize(
    "comparison, size, expected",
    [
        (Comparison.EQUAL, 100, True),
        (Comparison.EQUAL, 101, False),
        (Comparison.GREATER, 99, True),
        (Comparison.GREATER, 100, False),
        (Comparison.GREATER_EQ, 100, True),
        (Comparison.SMALLER, 101, True),
        (Comparison.SMALLER, 100, False),
        (Comparison.SMALLER_EQ, 100, True),
    ],
)
def test_size_comparisons(comparison, size, expected):
    node = SizeNode(size, size, comparison)
    assert node.search(ctx("a", size=100)) is expected


def test_size_range():
    node = SizeNode(10, 20, Comparison.RANGE)
    assert node.search(ctx("a", size=10))
    assert node.search(ctx("a", size=20))
    assert not node.search(ctx("a", size=21))


def test_size_highlight():
    context = ctx("a", size=5)
    assert SizeNode(5).highlight(context)
    assert context.highlights(IndexType.SIZE) == [Highlight()]
    assert not SizeNode(6).highlight(ctx("a", size=5))


def test_size_without_entry():
    assert not SizeNode(0).search(MatchContext(None))


def test_extension_case_handling():
    assert ExtensionNode(["PDF", "txt"]).search(ctx("report.pdf"))
    assert not ExtensionNode(["PDF"], QueryFlag.MATCH_CASE).search(ctx("report.pdf"))
    assert not ExtensionNode(["pdf"]).search(ctx("pdf", type=EntryType.FOLDER))


def test_extension_empty_matches_files_without_extension():
    node = ExtensionNode([""])
    assert node.search(ctx("Makefile"))
    assert not node.search(ctx("main.c"))


def test_extension_highlight():
    context = ctx("report.pdf")
    assert ExtensionNode(["pdf"]).highlight(context)
    [span] = context.highlights(IndexType.NAME)
    assert span.end is None
    assert context.name[span.start:] == "pdf"
    assert context.highlights(IndexType.EXTENSION) == [Highlight()]


def test_match_everything():
    node = MatchEverythingNode()
    assert node.search(ctx("anything"))
    assert not node.highlight(ctx("anything"))


def test_operator_node_is_not_searched_directly():
    node = OperatorNode(Operator.AND)
    assert node.operator is Operator.AND
    with pytest.raises(TypeError):
        node.search(ctx("a"))