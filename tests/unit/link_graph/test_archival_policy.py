"""Unit tests for link_graph.archival_policy module."""

from dataclasses import replace

from wikigraph.link_graph.archival_policy import ArchivalPolicy
from wikigraph.link_graph.models import ArchivalDecision, ArchiveUpdate
from wikigraph.link_graph.reference_graph import ReferenceGraph
from tests.fixtures.sample_pages import HELLO_ARCHIVE_LONELY, make_page


def _apply(pages, decision):
    """Apply a decision to a snapshot the way a store would."""
    result = []
    for page in pages:
        if page.id in decision.to_archive:
            page = replace(page, is_archived=True)
        elif page.id in decision.to_unarchive:
            page = replace(page, is_archived=False)
        result.append(page)
    return result


class TestComputeArchivalSet:
    """Test cases for ArchivalPolicy.compute_archival_set."""

    def test_concrete_case(self):
        """Only the unlinked regular page is archived."""
        pages = [
            make_page("h", "hello", "[archive]"),
            make_page("ar", "archive", ""),
            make_page("l", "lonely", ""),
        ]

        decision = ArchivalPolicy().compute_archival_set(pages)

        assert decision.to_archive == frozenset({"l"})
        assert decision.to_unarchive == frozenset()

    def test_protected_pages_never_archived(self):
        """Protected pages stay out of to_archive even with no links."""
        decision = ArchivalPolicy().compute_archival_set(HELLO_ARCHIVE_LONELY)

        assert "p-hello" not in decision.to_archive
        assert "p-archive" not in decision.to_archive
        assert decision.to_archive == frozenset({"p-lonely"})

    def test_archived_page_linked_again_is_unarchived(self):
        """An archived page with a link from a regular page comes back."""
        pages = [
            make_page("a", "a", "[b]"),
            make_page("b", "b", "", is_archived=True),
        ]

        decision = ArchivalPolicy().compute_archival_set(pages)

        assert decision.to_unarchive == frozenset({"b"})

    def test_already_archived_orphan_is_left_alone(self):
        """An archived orphan is in neither set."""
        pages = [make_page("x", "x", "", is_archived=True)]

        decision = ArchivalPolicy().compute_archival_set(pages)

        assert decision.is_empty

    def test_archived_protected_page_is_unarchived(self):
        """Protected pages are never orphans, so an archived one is restored."""
        pages = [make_page("h", "hello", "", is_archived=True)]

        decision = ArchivalPolicy().compute_archival_set(pages)

        assert decision.to_unarchive == frozenset({"h"})

    def test_custom_protected_slugs(self):
        """Protected slugs come from the caller."""
        pages = [make_page("h", "hello", ""), make_page("k", "keep", "")]

        decision = ArchivalPolicy(protected_slugs=["keep"]).compute_archival_set(pages)

        assert decision.to_archive == frozenset({"h"})

    def test_idempotent_after_applying_decision(self):
        """A second run over the updated snapshot changes nothing."""
        pages = [
            make_page("a", "a", "[b]"),
            make_page("b", "b", "", is_archived=True),
            make_page("c", "c", ""),
            make_page("h", "hello", "[c]"),
        ]
        policy = ArchivalPolicy()

        first = policy.compute_archival_set(pages)
        second = policy.compute_archival_set(_apply(pages, first))

        assert not first.is_empty
        assert second.is_empty

    def test_decide_uses_prebuilt_graph(self):
        """decide works on a graph the caller already has."""
        graph = ReferenceGraph.build([make_page("l", "lonely", "")])

        assert ArchivalPolicy().decide(graph).to_archive == frozenset({"l"})


class TestArchivalDecision:
    """Test cases for the ArchivalDecision model."""

    def test_updates_are_sorted_archives_first(self):
        """updates() lists archives by id, then unarchives by id."""
        decision = ArchivalDecision(
            to_archive=frozenset({"b", "a"}),
            to_unarchive=frozenset({"c"}),
        )

        assert decision.updates() == [
            ArchiveUpdate("a", True),
            ArchiveUpdate("b", True),
            ArchiveUpdate("c", False),
        ]

    def test_empty_decision(self):
        """A default decision is empty."""
        assert ArchivalDecision().is_empty
        assert ArchivalDecision().updates() == []
