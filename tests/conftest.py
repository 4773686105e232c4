# tests/conftest.py
import pytest

from domtree.builder import DocumentBuilder


@pytest.fixture
def builder():
    """Een DocumentBuilder met de standaard html.parser."""
    return DocumentBuilder("html.parser")


@pytest.fixture
def parse(builder):
    """Een fixture die ruwe HTML omzet naar een volledig document (html/head/body)."""
    return builder.parse_doc
