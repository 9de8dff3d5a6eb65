"""
Unit tests for the tree-sitter Java host.
"""

import pytest

from tostringgen.host.base import HostEditError
from tostringgen.host.java.resolver import parse_type

SAMPLE = """
package com.example;

import java.util.*;
import java.io.File;

/**
 * A sample class.
 */
public class Sample extends Base implements Comparable<Sample>, java.io.Serializable {
    // counter
    private static final int MAX = 10;
    private String label = "héllo";
    private int[] values, other[];

    /** Returns the label. */
    @Deprecated
    public String getLabel() {
        return label;
    }

    public static void main(String... args) {
    }

    static class Inner {
        List<String> items;
    }
}
"""


@pytest.fixture
def sample(java):
    return java(SAMPLE)


class TestParsing:
    """Tests for building the element tree."""

    def test_text_round_trips(self, sample):
        assert sample.text == SAMPLE.lstrip("\n")

    def test_classes_include_nested(self, sample):
        names = [c.qualified_name for c in sample.classes]
        assert names == ["com.example.Sample", "com.example.Sample.Inner"]

    def test_find_class(self, sample):
        assert sample.find_class("Inner").name == "Inner"
        assert sample.find_class("com.example.Sample").name == "Sample"
        assert sample.find_class("Missing") is None

    def test_class_at_returns_innermost(self, sample):
        offset = sample.text.index("List<String>")
        assert sample.class_at(offset).name == "Inner"
        assert sample.class_at(sample.text.index("MAX")).name == "Sample"

    def test_class_javadoc_attached(self, sample):
        clazz = sample.find_class("Sample")
        assert clazz.doc_comment.startswith("/**\n * A sample class.")

    def test_fields_per_declarator(self, sample):
        clazz = sample.find_class("Sample")
        fields = {f.name: f for f in clazz.fields}
        assert list(fields) == ["MAX", "label", "values", "other"]
        assert fields["MAX"].modifiers == frozenset({"private", "static", "final"})
        assert fields["values"].type.presentable_text == "int[]"
        assert fields["other"].type.presentable_text == "int[][]"
        assert fields["other"].type.array_dimensions == 2

    def test_methods(self, sample):
        clazz = sample.find_class("Sample")
        methods = clazz.methods
        assert [m.name for m in methods] == ["getLabel", "main"]

        getter = methods[0]
        assert getter.doc_comment == "/** Returns the label. */"
        assert getter.annotation_names == ("Deprecated",)
        assert getter.is_deprecated
        assert getter.return_type.canonical_text == "java.lang.String"

        main = methods[1]
        assert [p.canonical_text for p in main.parameter_types] == ["java.lang.String[]"]
        assert main.return_type.canonical_text == "void"

    def test_supertypes(self, sample):
        clazz = sample.find_class("Sample")
        assert clazz.superclass.presentable_text == "Base"
        assert [i.presentable_text for i in clazz.interfaces] == [
            "Comparable<Sample>",
            "java.io.Serializable",
        ]


class TestTypeResolution:
    """Tests for resolving declared types."""

    def test_parse_type(self):
        parsed = parse_type("Map<String, List<Integer>>[]")
        assert parsed.base == "Map"
        assert parsed.arguments == ("String", "List<Integer>")
        assert parsed.dimensions == 1

    def test_wildcard_and_java_lang(self, sample):
        inner = sample.find_class("Inner")
        items = inner.fields[0].type
        assert items.canonical_text == "java.util.List<java.lang.String>"
        assert items.is_resolved
        assert items.is_assignable_to("java.util.Collection")
        assert not items.is_assignable_to("java.util.Map")

    def test_unknown_type_is_unresolved(self, java):
        source = java(
            """
            class A {
                Mystery thing;
            }
            """
        )
        field = source.classes[0].fields[0]
        assert field.type.canonical_text == "Mystery"
        assert not field.type.is_resolved
        assert not field.type.is_assignable_to("java.lang.Object")

    def test_declared_exception_hierarchy(self, java):
        source = java(
            """
            class AppError extends IllegalStateException {}
            class DeepError extends AppError {}
            """
        )
        deep = source.find_class("DeepError")
        assert "java.lang.Throwable" in deep.supertype_names()
        assert "AppError" in deep.supertype_names()

    def test_nested_enum_type(self, java):
        source = java(
            """
            class Car {
                Color color;
                enum Color { RED, BLUE }
            }
            """
        )
        color = source.find_class("Car").fields[0].type
        assert color.canonical_text == "Car.Color"
        assert color.is_enum()

    def test_single_import(self, java):
        source = java(
            """
            import org.slf4j.Logger;
            class A {
                Logger log;
            }
            """
        )
        assert source.classes[0].fields[0].type.canonical_text == "org.slf4j.Logger"


class TestCaret:
    """Tests for caret and element lookup."""

    def test_find_element_at(self, java):
        source = java(
            """
            class A {
                int <caret>count;
            }
            """
        )
        element = source.find_element_at(source.caret_offset)
        assert element.text == "count"
        assert element.parent.kind == "variable_declarator"

    def test_find_element_out_of_range(self, person_source):
        assert person_source.find_element_at(-1) is None
        assert person_source.find_element_at(len(person_source.text)) is None

    def test_move_caret(self, person_source):
        field = person_source.classes[0].fields[1]
        person_source.move_caret_to(field.element)
        assert person_source.text[person_source.caret_offset:].startswith("private int age;")


class TestEditing:
    """Tests for the structural edit primitives."""

    def test_insert_before_rbrace(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text(
            'public String toString() {\n    return "x";\n}'
        )
        person_source.insert_before(clazz, clazz.rbrace, method)

        assert person_source.text == (
            "public class Person {\n"
            "    private String name;\n"
            "    private int age;\n"
            "\n"
            "    public String toString() {\n"
            '        return "x";\n'
            "    }\n"
            "}\n"
        )
        assert [m.name for m in clazz.methods] == ["toString"]

    def test_insert_after_lbrace(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("void a() {\n}")
        person_source.insert_after(clazz, clazz.lbrace, method)

        assert person_source.text.startswith(
            "public class Person {\n"
            "    void a() {\n"
            "    }\n"
            "\n"
            "    private String name;\n"
        )

    def test_insert_into_empty_class(self, java):
        source = java("class Empty {}\n")
        clazz = source.classes[0]
        method = source.create_method_from_text("void a() {\n}")
        source.insert_before(clazz, clazz.rbrace, method)
        assert source.text == "class Empty {\n    void a() {\n    }\n}\n"

    def test_insert_into_enum_adds_declarations(self, java):
        source = java(
            """
            enum Level {
                LOW, HIGH
            }
            """
        )
        clazz = source.classes[0]
        method = source.create_method_from_text("void a() {\n}")
        source.insert_before(clazz, clazz.rbrace, method)
        assert source.text == "enum Level {\n    LOW, HIGH;\n\n    void a() {\n    }\n}\n"
        assert [m.name for m in clazz.methods] == ["a"]

    def test_cannot_insert_after_rbrace(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("void a() {}")
        with pytest.raises(HostEditError):
            person_source.insert_after(clazz, clazz.rbrace, method)

    def test_cannot_insert_outside_braces(self, person_source):
        before = person_source.text
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("void a() {}")
        with pytest.raises(HostEditError):
            person_source.insert_before(clazz, clazz.lbrace, method)
        with pytest.raises(HostEditError):
            person_source.insert_after(clazz, clazz.rbrace, method)
        assert person_source.text == before
        assert clazz.methods == []

    def test_foreign_anchor_rejected(self, java):
        source = java(
            """
            class A {
                int x;
                class B {
                    int y;
                }
            }
            """
        )
        outer = source.find_class("A")
        inner_field = source.find_class("B").fields[0]
        method = source.create_method_from_text("void a() {}")
        with pytest.raises(HostEditError):
            source.insert_after(outer, inner_field.element, method)

    def test_invalid_method_text(self, person_source):
        with pytest.raises(HostEditError):
            person_source.create_method_from_text("public String toString( {")

    def test_replace_keeps_position(self, java):
        source = java(
            """
            class A {
                void first() {}

                void target() {
                    old();
                }

                void last() {}
            }
            """
        )
        clazz = source.classes[0]
        old = clazz.methods[1]
        new = source.create_method_from_text("void target() {\n    fresh();\n}")
        source.replace(clazz, old, new)

        assert [m.name for m in clazz.methods] == ["first", "target", "last"]
        assert "    void target() {\n        fresh();\n    }\n" in source.text
        assert "old()" not in source.text

    def test_remove(self, java):
        source = java(
            """
            class A {
                int x;

                void gone() {}

                int y;
            }
            """
        )
        clazz = source.classes[0]
        source.remove(clazz, clazz.methods[0])
        assert source.text == "class A {\n    int x;\n\n    int y;\n}\n"

    def test_set_doc_comment_adds_and_replaces(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("void a() {\n}")
        person_source.insert_before(clazz, clazz.rbrace, method)

        person_source.set_doc_comment(method, "/**\n * First.\n */")
        assert "\n    /**\n     * First.\n     */\n    void a() {" in person_source.text

        person_source.set_doc_comment(method, "/** Second. */")
        assert "\n    /** Second. */\n    void a() {" in person_source.text
        assert "First" not in person_source.text
        assert method.doc_comment == "/** Second. */"

    def test_annotations_keep_order_and_replace(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("public void a() {\n}")
        person_source.insert_before(clazz, clazz.rbrace, method)

        person_source.add_or_replace_annotation(method, "@Override")
        person_source.add_or_replace_annotation(method, '@SuppressWarnings("x")', after="Override")
        person_source.add_or_replace_annotation(method, '@SuppressWarnings("y")')

        assert method.annotation_names == ("Override", "SuppressWarnings")
        assert '    @Override\n    @SuppressWarnings("y")\n    public void a() {' in person_source.text

    def test_annotation_without_modifiers(self, person_source):
        clazz = person_source.classes[0]
        method = person_source.create_method_from_text("void a() {\n}")
        person_source.insert_before(clazz, clazz.rbrace, method)
        person_source.add_or_replace_annotation(method, "@Override")
        assert "    @Override\n    void a() {" in person_source.text


class TestImportsAndTransactions:
    """Tests for import handling and rollback."""

    def test_add_import_after_existing(self, java):
        source = java(
            """
            package p;

            import java.io.File;

            class A {}
            """
        )
        assert not source.has_import("java.util.*")
        source.add_import("java.util.*")
        assert source.has_import("java.util.*")
        assert source.text.startswith("package p;\n\nimport java.io.File;\nimport java.util.*;\n\nclass A {}")

    def test_add_import_after_package(self, java):
        source = java(
            """
            package p;

            class A {}
            """
        )
        source.add_import("java.util.*")
        assert source.text == "package p;\n\nimport java.util.*;\n\nclass A {}\n"

    def test_optimize_imports_drops_duplicates(self, java):
        source = java(
            """
            import java.util.List;
            import java.util.List;

            class A {}
            """
        )
        source.optimize_imports()
        assert source.text == "import java.util.List;\n\nclass A {}\n"

    def test_transaction_rolls_back(self, person_source):
        before = person_source.text
        clazz = person_source.classes[0]
        with pytest.raises(RuntimeError):
            with person_source.transaction():
                method = person_source.create_method_from_text("void a() {}")
                person_source.insert_before(clazz, clazz.rbrace, method)
                person_source.add_import("java.util.*")
                raise RuntimeError("boom")
        assert person_source.text == before

    def test_write(self, person_source, tmp_path):
        path = person_source.write(tmp_path / "Person.java")
        assert path.read_text() == person_source.text
