"""
Unit tests for member classification and filtering.

Tests for:
- Type descriptors and category tags
- Getter detection
- Class facts
- Filter rules
"""

import pytest

from tostringgen.config.models import FilterConfig
from tostringgen.generator.classifier import (
    build_class_facts,
    classify_field,
    classify_method,
    getter_field_name,
)
from tostringgen.generator.facts import MemberCategory, MemberKind
from tostringgen.generator.filtering import available_members

SAMPLE = """
package com.example;

import java.util.*;

public class Sample {
    public static final int MAX_VALUE = 1;
    static final int maxValue = 2;
    private List<String> names;
    private Map<String, Integer> counts;
    private int[] scores;
    private String[] tags;
    private Date created;
    private Boolean active;
    private long total;
    private Color color;
    private Unknown mystery;
    private String title;
    private transient int cache;
    private org.slf4j.Logger log;

    enum Color { RED, GREEN }

    public String getName() {
        return null;
    }

    public boolean isEmpty() {
        return true;
    }

    public void getNothing() {
    }

    public Boolean hasValue() {
        return null;
    }

    public String isNotBoolean() {
        return null;
    }

    public String getTitle() {
        return title;
    }

    public String getLabel(int index) {
        return null;
    }

    public static String getShared() {
        return null;
    }
}
"""


@pytest.fixture
def sample(java):
    return java(SAMPLE).find_class("Sample")


@pytest.fixture
def owner(sample):
    return build_class_facts(sample)


@pytest.fixture
def fields(sample, owner):
    return {f.name: classify_field(f, owner) for f in sample.fields}


@pytest.fixture
def methods(sample, owner):
    return {m.name: classify_method(m, owner) for m in sample.methods}


# =============================================================================
# Field Classification Tests
# =============================================================================


class TestFieldClassification:
    """Test category tags of declared fields."""

    def test_constants(self, fields):
        assert fields["MAX_VALUE"].is_constant
        assert fields["MAX_VALUE"].is_static
        assert fields["MAX_VALUE"].is_final
        assert fields["MAX_VALUE"].visibility == "public"
        assert not fields["maxValue"].is_constant
        assert fields["maxValue"].visibility == "package"

    def test_list(self, fields):
        names = fields["names"]
        assert names.kind == MemberKind.FIELD
        assert names.accessor == "names"
        assert names.is_list and names.is_collection and names.is_object
        assert not names.is_set and not names.is_map
        assert names.category == MemberCategory.LIST
        assert names.type.canonical_text == "java.util.List<java.lang.String>"
        assert names.type.is_generic_single_parameter
        assert names.type.qualified_name == "java.lang.String"
        assert names.type.name == "String"

    def test_map(self, fields):
        counts = fields["counts"]
        assert counts.is_map
        assert not counts.is_collection
        assert counts.category == MemberCategory.MAP
        assert not counts.type.is_generic_single_parameter
        assert counts.type.name == "Map"

    def test_primitive_array(self, fields):
        scores = fields["scores"]
        assert scores.is_primitive and scores.is_array and scores.is_primitive_array
        assert not scores.is_object_array
        assert not scores.is_numeric
        assert scores.category == MemberCategory.PRIMITIVE_ARRAY
        assert scores.type.qualified_name == "java.lang.Integer"

    def test_string_array(self, fields):
        tags = fields["tags"]
        assert tags.is_string_array and tags.is_object_array
        assert not tags.is_string
        assert tags.category == MemberCategory.STRING_ARRAY
        assert tags.type.canonical_text == "java.lang.String[]"
        assert tags.type.qualified_name == "java.lang.String"

    def test_date_boolean_numeric(self, fields):
        assert fields["created"].is_date
        assert fields["created"].category == MemberCategory.DATE

        active = fields["active"]
        assert active.is_boolean and not active.is_primitive and active.is_object
        assert active.category == MemberCategory.BOOLEAN

        total = fields["total"]
        assert total.is_primitive and total.is_numeric
        assert not total.is_object
        assert total.category == MemberCategory.NUMERIC
        assert total.type.qualified_name == "java.lang.Long"

    def test_string(self, fields):
        assert fields["title"].is_string
        assert fields["title"].category == MemberCategory.STRING

    def test_enum_field(self, fields):
        color = fields["color"]
        assert color.is_enum
        assert color.is_object
        assert color.category is None

    def test_unresolved_type_is_plain_value(self, fields):
        mystery = fields["mystery"]
        assert not mystery.type.is_resolved
        assert not mystery.is_object
        assert not mystery.is_string and not mystery.is_collection
        assert mystery.category is None

    def test_flags(self, fields):
        assert fields["cache"].is_transient
        assert not fields["total"].is_transient


# =============================================================================
# Method Classification Tests
# =============================================================================


class TestMethodClassification:
    """Test getter detection on declared methods."""

    def test_getter_prefixes(self):
        assert getter_field_name("getName", False) == "name"
        assert getter_field_name("isEmpty", True) == "empty"
        assert getter_field_name("hasNext", True) == "next"
        assert getter_field_name("isEmpty", False) is None
        assert getter_field_name("getter", False) is None
        assert getter_field_name("get", False) is None

    def test_plain_getter(self, methods):
        name = methods["getName"]
        assert name.kind == MemberKind.METHOD
        assert name.is_getter
        assert name.name == "name"
        assert name.field_name == "name"
        assert name.method_name == "getName"
        assert name.accessor == "getName()"
        assert name.is_string

    def test_boolean_getters(self, methods):
        assert methods["isEmpty"].is_getter
        assert methods["isEmpty"].field_name == "empty"
        assert methods["hasValue"].is_getter
        assert methods["hasValue"].field_name == "value"

    def test_non_getters(self, methods):
        nothing = methods["getNothing"]
        assert not nothing.is_getter
        assert nothing.is_void_return
        assert nothing.type is None
        assert nothing.type_name == "void"
        assert nothing.name == "getNothing"

        not_boolean = methods["isNotBoolean"]
        assert not not_boolean.is_getter
        assert not_boolean.name == "isNotBoolean"


# =============================================================================
# Class Facts Tests
# =============================================================================


class TestClassFacts:
    """Test facts about the target class."""

    def test_plain_class(self, owner):
        assert owner.name == "Sample"
        assert owner.qualified_name == "com.example.Sample"
        assert not owner.has_super
        assert owner.super_name is None
        assert not owner.is_exception
        assert not owner.is_enum
        assert not owner.is_abstract

    def test_superclass_and_interfaces(self, java):
        clazz = java(
            """
            public class Error1 extends RuntimeException implements Comparable<Error1>, java.io.Serializable {
                private int code;
            }
            """
        ).classes[0]
        facts = build_class_facts(clazz)
        assert facts.has_super
        assert facts.super_name == "RuntimeException"
        assert facts.super_qualified_name == "java.lang.RuntimeException"
        assert facts.is_extends("RuntimeException")
        assert facts.is_exception
        assert facts.implement_names == ("Comparable", "Serializable")
        assert facts.is_implements("java.io.Serializable")
        assert not facts.is_implements("Cloneable")

    def test_extends_object_has_no_super(self, java):
        clazz = java("class A extends Object {}\n").classes[0]
        assert not build_class_facts(clazz).has_super

    def test_abstract_interface_enum(self, java):
        source = java(
            """
            abstract class Shape {}
            interface Named {}
            enum Level { LOW }
            """
        )
        assert build_class_facts(source.find_class("Shape")).is_abstract
        assert build_class_facts(source.find_class("Named")).is_abstract
        assert build_class_facts(source.find_class("Level")).is_enum

    def test_deprecated_class(self, java):
        clazz = java(
            """
            /**
             * @deprecated use something else
             */
            class Old {}
            """
        ).classes[0]
        assert build_class_facts(clazz).is_deprecated


# =============================================================================
# Filter Tests
# =============================================================================


class TestFiltering:
    """Test which members are handed to templates."""

    def test_default_filter(self, sample, owner):
        available = available_members(sample, owner, FilterConfig())
        assert [f.name for f in available.fields] == [
            "names",
            "counts",
            "scores",
            "tags",
            "created",
            "active",
            "total",
            "color",
            "mystery",
            "title",
        ]
        assert available.methods == ()

    def test_getters_included(self, sample, owner):
        config = FilterConfig(include_getters=True)
        available = available_members(sample, owner, config)
        # getTitle duplicates a listed field; getLabel takes a parameter; getShared is static
        assert [m.method_name for m in available.methods] == ["getName", "isEmpty", "hasValue"]
        assert [m.name for m in available.members][-3:] == ["name", "empty", "value"]

    def test_getter_for_excluded_field_is_kept(self, sample, owner):
        config = FilterConfig(include_getters=True, exclude_name_regex="title")
        available = available_members(sample, owner, config)
        assert "getTitle" in [m.method_name for m in available.methods]

    def test_logger_kept_when_allowed(self, sample, owner):
        config = FilterConfig(exclude_loggers=False)
        names = [f.name for f in available_members(sample, owner, config).fields]
        assert "log" in names

    def test_exclusions(self, sample, owner):
        config = FilterConfig(
            exclude_modifiers={"transient"},
            exclude_enum_fields=True,
            exclude_name_regex="c.*",
            exclude_type_regex="java\\.util\\..*",
        )
        names = [f.name for f in available_members(sample, owner, config).fields]
        # constants stay out, static non-constants come back
        assert names == ["maxValue", "scores", "tags", "active", "total", "mystery", "title"]

    def test_getter_regexes(self, sample, owner):
        config = FilterConfig(
            include_getters=True,
            exclude_method_name_regex="is.*",
            exclude_return_type_regex="java\\.lang\\.Boolean",
        )
        available = available_members(sample, owner, config)
        assert [m.method_name for m in available.methods] == ["getName"]

    def test_sorting(self, sample, owner):
        config = FilterConfig(sort_members=True, exclude_name_regex="[a-m].*")
        names = [f.name for f in available_members(sample, owner, config).fields]
        assert names == ["names", "scores", "tags", "title", "total"]

        config = FilterConfig(sort_members=True, sort_descending=True, exclude_name_regex="[a-m].*")
        names = [f.name for f in available_members(sample, owner, config).fields]
        assert names == ["total", "title", "tags", "scores", "names"]

    def test_empty(self, java):
        clazz = java(
            """
            class Constants {
                public static final int A = 1;
                static int counter;
            }
            """
        ).classes[0]
        available = available_members(clazz, build_class_facts(clazz), FilterConfig())
        assert available.is_empty()
