"""Shared test fixtures for yamltools."""

from __future__ import annotations

import pytest

from yamltools.parser.block import BlockParser
from yamltools.parser.linter import YAMLLinter
from yamltools.parser.loader import ReferenceLoader
from yamltools.serializer import YAMLSerializer
from yamltools.service.document_service import DocumentService


@pytest.fixture
def parser() -> BlockParser:
    return BlockParser()


@pytest.fixture
def loader() -> ReferenceLoader:
    return ReferenceLoader()


@pytest.fixture
def linter() -> YAMLLinter:
    return YAMLLinter()


@pytest.fixture
def serializer() -> YAMLSerializer:
    return YAMLSerializer()


@pytest.fixture
def service() -> DocumentService:
    return DocumentService()


SAMPLE_YAML = """\
# Sample YAML document
name: John Doe
age: 30
email: john@example.com
active: true
address:
  street: 123 Main St
  city: New York
  zipcode: "10001"
hobbies:
  - reading
  - swimming
  - coding
"""

SAMPLE_WITH_ISSUES = """\
name: test
version: 1.0
enabled: yes
release: 2024-01-15
"""
