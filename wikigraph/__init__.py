"""Wiki-link graph maintenance.

Extracts `[slug]` page links from page content, keeps them valid when
pages are renamed or deleted, and archives pages that nothing links to.
"""

__version__ = "0.1.0"
