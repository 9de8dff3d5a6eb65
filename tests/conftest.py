"""
Shared fixtures for tostringgen tests.
"""

import textwrap

import pytest

from tostringgen.host.java.source_file import JavaSourceFile

CARET = "<caret>"


def parse_java(source: str) -> JavaSourceFile:
    """Parse dedented Java source; a '<caret>' marker sets the caret offset."""
    text = textwrap.dedent(source).lstrip("\n")
    caret = text.find(CARET)
    if caret >= 0:
        text = text.replace(CARET, "", 1)
        return JavaSourceFile.parse(text, caret_offset=caret)
    return JavaSourceFile.parse(text)


@pytest.fixture
def java():
    """Return the Java parsing helper."""
    return parse_java


@pytest.fixture
def person_source():
    return parse_java(
        """
        public class Person {
            private String name;
            private int age;
        }
        """
    )
