"""Unit tests for link_graph.stub_pages module."""

from wikigraph.link_graph.models import PageInsert
from wikigraph.link_graph.stub_pages import STUB_BODY, plan_stub_pages, stub_page_for
from tests.fixtures.sample_pages import make_page


class TestStubPageFor:
    """Test cases for stub_page_for."""

    def test_title_from_slug(self):
        """my-new-page becomes My New Page."""
        assert stub_page_for("my-new-page").title == "My New Page"

    def test_content_has_heading_and_notice(self):
        """Stub content is a heading plus the broken-link notice."""
        request = stub_page_for("my-new-page")

        assert request == PageInsert(
            slug="my-new-page",
            title="My New Page",
            content=f"<h1>My New Page</h1>\n<p>{STUB_BODY}</p>",
        )


class TestPlanStubPages:
    """Test cases for plan_stub_pages."""

    def test_one_insert_per_unresolved_slug(self):
        """Each missing target gets exactly one insert, in first-seen order."""
        pages = [
            make_page("1", "a", "[b] [missing-one] [missing-two]"),
            make_page("2", "b", "[missing-one] [a]"),
        ]

        inserts = plan_stub_pages(pages)

        assert [request.slug for request in inserts] == ["missing-one", "missing-two"]

    def test_no_broken_links(self):
        """A fully linked snapshot needs no stubs."""
        pages = [make_page("1", "a", "[b]"), make_page("2", "b", "[a]")]

        assert plan_stub_pages(pages) == []

    def test_planning_after_inserting_is_empty(self):
        """Once the stub pages exist nothing is planned again."""
        pages = [make_page("1", "a", "[new-page]")]

        inserts = plan_stub_pages(pages)
        pages += [
            make_page(f"s{i}", r.slug, r.content, title=r.title)
            for i, r in enumerate(inserts)
        ]

        assert plan_stub_pages(pages) == []
