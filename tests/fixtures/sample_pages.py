"""Sample page snapshots for testing.

Markup pages use inline `[slug]` tokens; tree pages use the document
form with pageLink and mention nodes.
"""

from wikigraph.link_graph.models import Page


def make_page(page_id, slug, content="", title=None, is_archived=False):
    """Build a Page with a title derived from the slug unless given."""
    return Page(
        id=page_id,
        slug=slug,
        title=title if title is not None else slug.replace("-", " ").title(),
        content=content,
        is_archived=is_archived,
    )


def paragraph(*inline):
    return {"type": "paragraph", "content": list(inline)}


def text_node(text, marks=None):
    node = {"type": "text", "text": text}
    if marks:
        node["marks"] = marks
    return node


def page_link_node(slug):
    return {"type": "pageLink", "attrs": {"slug": slug}}


def mention_node(username):
    return {"type": "mention", "attrs": {"username": username}}


def doc(*blocks):
    return {"type": "doc", "content": list(blocks)}


# lonely is the only unprotected page with no links to or from other pages
HELLO_ARCHIVE_LONELY = [
    make_page("p-hello", "hello", "Welcome! See [getting-started]."),
    make_page("p-archive", "archive", ""),
    make_page("p-lonely", "lonely", "Nobody links here."),
    make_page("p-start", "getting-started", "Back to [hello]. Next: [guide]."),
    make_page("p-guide", "guide", "Start with [getting-started]."),
]

# Tree-content page linking to a markup page
TREE_DOC_LINKING_TO_GUIDE = doc(
    paragraph(
        text_node("Read the "),
        page_link_node("guide"),
        text_node(" and ping "),
        mention_node("alice"),
    ),
)

SAMPLE_SNAPSHOT_YAML = """
pages:
  - id: "p-1"
    slug: hello
    title: Hello
    content: "Welcome! See [getting-started]."
    is_archived: false
  - id: "p-2"
    slug: getting-started
    title: Getting Started
    content:
      type: doc
      content:
        - type: paragraph
          content:
            - type: text
              text: "Back to "
            - type: pageLink
              attrs:
                slug: hello
  - id: "p-3"
    slug: lonely
    title: Lonely
    content: "Nobody links here."
"""
