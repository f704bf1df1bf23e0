"""Unit tests for link_graph.reference_rewriter module."""

import pytest

from wikigraph.link_graph.errors import InvalidRewriteError, ProtectedPageError
from wikigraph.link_graph.models import MarkupContent, RewriteMode, TreeContent
from wikigraph.link_graph.reference_rewriter import ReferenceRewriter
from tests.fixtures.sample_pages import (
    doc,
    make_page,
    page_link_node,
    paragraph,
    text_node,
)


def _apply(pages, plan):
    """Apply a rewrite plan to a snapshot the way a store would."""
    updates = {entry.page_id: entry.updated_content for entry in plan}
    for page in pages:
        if page.id in updates:
            page.content = updates[page.id]
    return pages


class TestRename:
    """Test cases for rename rewrites on markup content."""

    def setup_method(self):
        self.rewriter = ReferenceRewriter()

    def test_rename_rewrites_every_occurrence(self):
        """All `[old]` tokens in a page become `[new]`."""
        pages = [make_page("a", "a", "see [old] and [old] again"), make_page("o", "old")]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert len(plan) == 1
        assert plan[0].page_id == "a"
        assert plan[0].updated_content == MarkupContent("see [new] and [new] again")

    def test_rename_round_trip(self):
        """Renaming old -> new -> old restores the original content."""
        pages = [make_page("a", "a", "see [old] here")]

        _apply(pages, self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new"))
        _apply(pages, self.rewriter.plan_rewrite("new", RewriteMode.RENAME, pages, new_slug="old"))

        assert pages[0].content == MarkupContent("see [old] here")

    def test_unrelated_pages_are_not_in_plan(self):
        """Pages not linking to the slug get no entry."""
        pages = [make_page("a", "a", "see [other]"), make_page("b", "b", "no links")]

        assert self.rewriter.plan_rewrite("old", "rename", pages, new_slug="new") == []

    def test_plan_keeps_snapshot_order(self):
        """Entries follow the order of the snapshot."""
        pages = [make_page("2", "z", "[old]"), make_page("1", "y", "[old]")]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert [entry.page_id for entry in plan] == ["2", "1"]

    def test_longer_slug_with_same_prefix_is_untouched(self):
        """`[old-page]` is not a token for slug `old`."""
        pages = [make_page("a", "a", "[old-page] and [old]")]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert plan[0].updated_content.text == "[old-page] and [new]"

    def test_mode_accepts_string_value(self):
        """The mode may be given as its string value."""
        pages = [make_page("a", "a", "[old]")]

        plan = self.rewriter.plan_rewrite("old", "rename", pages, new_slug="new")

        assert plan[0].updated_content.text == "[new]"

    def test_new_slug_with_backslash_is_literal(self):
        """Replacement text is not interpreted as a regex template."""
        pages = [make_page("a", "a", "[old]")]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug=r"new\1")

        assert plan[0].updated_content.text == r"[new\1]"


class TestDelete:
    """Test cases for delete rewrites on markup content."""

    def setup_method(self):
        self.rewriter = ReferenceRewriter()

    def test_delete_degrades_link_to_text(self):
        """`[to-delete]` becomes `to delete`."""
        pages = [make_page("a", "a", "see [to-delete] here"), make_page("d", "to-delete")]

        plan = self.rewriter.plan_rewrite("to-delete", RewriteMode.DELETE, pages)

        assert len(plan) == 1
        assert plan[0].updated_content.text == "see to delete here"

    def test_delete_plan_is_idempotent(self):
        """Planning again after applying finds nothing left to rewrite."""
        pages = [make_page("a", "a", "see [to-delete] here")]

        _apply(pages, self.rewriter.plan_rewrite("to-delete", RewriteMode.DELETE, pages))
        second = self.rewriter.plan_rewrite("to-delete", RewriteMode.DELETE, pages)

        assert second == []
        assert pages[0].content.text == "see to delete here"

    def test_delete_ignores_new_slug(self):
        """A new slug passed with delete is ignored."""
        pages = [make_page("a", "a", "[x-y]")]

        plan = self.rewriter.plan_rewrite("x-y", RewriteMode.DELETE, pages, new_slug="z")

        assert plan[0].updated_content.text == "x y"

    def test_bulk_delete(self):
        """Several deleted slugs are rewritten in one entry per page."""
        pages = [
            make_page("a", "a", "[one-x] and [two-y] and [keep]"),
            make_page("1", "one-x", "[two-y]"),
            make_page("2", "two-y", "[one-x]"),
        ]

        plan = ReferenceRewriter().plan_bulk_delete(["one-x", "two-y"], pages)

        assert [entry.page_id for entry in plan] == ["a"]
        assert plan[0].updated_content.text == "one x and two y and [keep]"


class TestRegexSafety:
    """Test cases for slugs containing regex metacharacters."""

    def test_metacharacters_match_literally(self):
        """`a.b+c` matches only the literal token."""
        pages = [
            make_page("1", "p1", "literal [a.b+c] here"),
            make_page("2", "p2", "near misses [aXb+c] [abbc] [a.bbc] a.b+c"),
        ]

        plan = ReferenceRewriter().plan_rewrite("a.b+c", RewriteMode.RENAME, pages, new_slug="d")

        assert [entry.page_id for entry in plan] == ["1"]
        assert plan[0].updated_content.text == "literal [d] here"

    def test_parentheses_and_dollar_in_slug(self):
        """Group syntax in a slug is not a regex group."""
        pages = [make_page("1", "p1", "[x(1)$] and [x1]")]

        plan = ReferenceRewriter().plan_rewrite("x(1)$", RewriteMode.DELETE, pages)

        assert plan[0].updated_content.text == "x(1)$ and [x1]"


class TestSelfReference:
    """Test cases for pages linking to themselves."""

    def test_affected_page_is_excluded_on_delete(self):
        """A page deleted while linking to itself is not in the plan."""
        pages = [make_page("s", "self", "I am [self]"), make_page("o", "other", "[self]")]

        plan = ReferenceRewriter().plan_rewrite("self", RewriteMode.DELETE, pages)

        assert [entry.page_id for entry in plan] == ["o"]

    def test_affected_page_is_excluded_on_rename(self):
        """The renamed page keeps its own content, under either slug."""
        pages = [make_page("s", "old", "I am [old]"), make_page("o", "other", "[old]")]

        plan = ReferenceRewriter().plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert [entry.page_id for entry in plan] == ["o"]

    def test_already_renamed_page_is_excluded(self):
        """If the caller renamed the page first it is still left out."""
        pages = [make_page("s", "new", "I am [old]"), make_page("o", "other", "[old]")]

        plan = ReferenceRewriter().plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert [entry.page_id for entry in plan] == ["o"]


class TestTreeContent:
    """Test cases for rewrites on document-tree content."""

    def setup_method(self):
        self.rewriter = ReferenceRewriter()

    def test_rename_retargets_page_link_nodes(self):
        """pageLink nodes get the new slug; the result is still a tree."""
        original = doc(paragraph(text_node("see "), page_link_node("old")))
        pages = [make_page("a", "a", original)]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        updated = plan[0].updated_content
        assert isinstance(updated, TreeContent)
        assert updated.root.to_dict() == doc(paragraph(text_node("see "), page_link_node("new")))

    def test_delete_turns_page_link_into_text(self):
        """A deleted pageLink node becomes a text node."""
        pages = [make_page("a", "a", doc(paragraph(page_link_node("to-delete"))))]

        plan = self.rewriter.plan_rewrite("to-delete", RewriteMode.DELETE, pages)

        assert plan[0].updated_content.root.to_dict() == doc(paragraph(text_node("to delete")))

    def test_bracket_tokens_in_text_nodes_are_rewritten(self):
        """Legacy `[slug]` tokens in text nodes are rewritten too."""
        pages = [make_page("a", "a", doc(paragraph(text_node("old [old] token"))))]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="new")

        assert plan[0].updated_content.root.get_text_content() == "old [new] token"

    def test_snapshot_is_not_mutated(self):
        """The input page keeps its original tree."""
        page = make_page("a", "a", doc(paragraph(page_link_node("old"))))

        self.rewriter.plan_rewrite("old", RewriteMode.RENAME, [page], new_slug="new")

        assert page.content.root.to_dict() == doc(paragraph(page_link_node("old")))

    def test_unchanged_tree_is_not_in_plan(self):
        """A tree without the slug produces no entry."""
        pages = [make_page("a", "a", doc(paragraph(page_link_node("other"))))]

        assert self.rewriter.plan_rewrite("old", RewriteMode.DELETE, pages) == []


class TestRewriteContent:
    """Test cases for single-content rewrites."""

    def test_returns_same_object_when_unchanged(self):
        """Unchanged content is returned as is, with changed=False."""
        content = MarkupContent("nothing here")

        result, changed = ReferenceRewriter().rewrite_content(content, "x", RewriteMode.DELETE)

        assert result is content
        assert changed is False

    def test_returns_rewritten_content(self):
        """Changed content is a new object, with changed=True."""
        result, changed = ReferenceRewriter().rewrite_content(
            MarkupContent("[x]"), "x", RewriteMode.RENAME, new_slug="y"
        )

        assert result == MarkupContent("[y]")
        assert changed is True


class TestClosingBracketSlugs:
    """Test cases for slugs containing `]`, which only tree links can carry."""

    def setup_method(self):
        self.rewriter = ReferenceRewriter()

    def test_delete_tree_link_with_closing_bracket(self):
        """A pageLink node for `a]b-c` degrades to text."""
        pages = [make_page("a", "a", doc(paragraph(page_link_node("a]b-c"))))]

        plan = self.rewriter.plan_rewrite("a]b-c", RewriteMode.DELETE, pages)

        assert plan[0].updated_content.root.to_dict() == doc(paragraph(text_node("a]b c")))

    def test_markup_text_is_left_alone(self):
        """`[a]b]` in markup is a link to `a`, not to `a]b`."""
        pages = [make_page("a", "a", "see [a]b] here")]

        assert self.rewriter.plan_rewrite("a]b", RewriteMode.DELETE, pages) == []

    def test_rename_tree_link_to_closing_bracket_slug(self):
        """Tree links can be renamed to a slug containing `]`."""
        pages = [make_page("a", "a", doc(paragraph(page_link_node("old"))))]

        plan = self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="b]c")

        assert plan[0].updated_content.root.to_dict() == doc(paragraph(page_link_node("b]c")))

    def test_rename_markup_token_to_closing_bracket_slug(self):
        """A markup token cannot carry a slug containing `]`."""
        pages = [make_page("a", "a", "see [old]")]

        with pytest.raises(InvalidRewriteError):
            self.rewriter.plan_rewrite("old", RewriteMode.RENAME, pages, new_slug="b]c")


class TestProtectedPages:
    """Test cases for protected slugs."""

    def test_default_protected_page_cannot_be_deleted(self):
        """hello, archive and admin are protected by default."""
        pages = [make_page("h", "hello"), make_page("a", "a", "[hello]")]

        with pytest.raises(ProtectedPageError) as exc_info:
            ReferenceRewriter().plan_rewrite("hello", RewriteMode.DELETE, pages)

        assert exc_info.value.slug == "hello"

    def test_protected_page_cannot_be_renamed(self):
        """Renaming a protected page is refused."""
        rewriter = ReferenceRewriter(protected_slugs=["home"])

        with pytest.raises(ProtectedPageError):
            rewriter.plan_rewrite("home", RewriteMode.RENAME, [], new_slug="start")

    def test_custom_protected_slugs_replace_defaults(self):
        """With a custom list, default slugs are ordinary pages."""
        pages = [make_page("a", "a", "[hello]")]

        plan = ReferenceRewriter(protected_slugs=["home"]).plan_rewrite(
            "hello", RewriteMode.DELETE, pages
        )

        assert plan[0].updated_content.text == "hello"

    def test_bulk_delete_refuses_protected_slug(self):
        """One protected slug fails the whole bulk delete."""
        with pytest.raises(ProtectedPageError):
            ReferenceRewriter().plan_bulk_delete(["x", "archive"], [])

    def test_protected_error_is_an_invalid_rewrite(self):
        """Callers catching InvalidRewriteError also catch protected pages."""
        assert issubclass(ProtectedPageError, InvalidRewriteError)


class TestValidation:
    """Test cases for malformed rewrite requests."""

    def setup_method(self):
        self.rewriter = ReferenceRewriter()

    def test_rename_without_new_slug(self):
        """Rename needs a new slug."""
        with pytest.raises(InvalidRewriteError) as exc_info:
            self.rewriter.plan_rewrite("old", RewriteMode.RENAME, [])

        assert exc_info.value.slug == "old"

    def test_rename_to_same_slug(self):
        """Renaming to the same slug is rejected."""
        with pytest.raises(InvalidRewriteError):
            self.rewriter.plan_rewrite("old", RewriteMode.RENAME, [], new_slug="old")

    def test_empty_slug(self):
        """An empty slug is rejected."""
        with pytest.raises(InvalidRewriteError):
            self.rewriter.plan_rewrite("", RewriteMode.DELETE, [])

    def test_unknown_mode(self):
        """Modes other than rename and delete are rejected."""
        with pytest.raises(InvalidRewriteError) as exc_info:
            self.rewriter.plan_rewrite("a", "archive", [])

        assert "unknown mode" in str(exc_info.value)
