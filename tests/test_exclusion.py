"""Tests for apidoc.exclusion."""

from __future__ import annotations

import logging

import pytest

from apidoc.exclusion import (
    ALL_FIELDS,
    ExclusionPolicy,
    ExclusionSpec,
    format_exclusion_map,
    parse_exclusion_map,
)


def test_parse_exclusion_map_reads_fields_and_wildcards() -> None:
    specs = parse_exclusion_map("com.shop.User:createTime, updateTime;com.shop.Audit:*;Empty:")

    assert specs["com.shop.User"] == ExclusionSpec(fields=frozenset({"createTime", "updateTime"}))
    assert specs["com.shop.Audit"].exclude_all
    assert specs["Empty"].exclude_all


def test_parse_exclusion_map_skips_malformed_entries(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("apidoc"), "propagate", True)
    caplog.set_level(logging.DEBUG, logger="apidoc")

    specs = parse_exclusion_map("noColonHere;:field;com.shop.User:id;;")

    assert list(specs) == ["com.shop.User"]
    assert "Skipping malformed exclusion entry" in caplog.text


def test_format_round_trips_parsed_map() -> None:
    text = "com.shop.Audit:*;com.shop.User:createTime,updateTime"

    assert format_exclusion_map(parse_exclusion_map(text)) == text


def test_policy_without_entry_excludes_nothing() -> None:
    policy = ExclusionPolicy()

    assert not policy
    assert policy.is_field_excluded("com.shop.User", "id") is False
    assert policy.excluded_fields_for("com.shop.User") is None


def test_policy_all_excludes_every_field() -> None:
    policy = ExclusionPolicy.from_config(fields="com.shop.Audit:*")

    assert policy.is_field_excluded("com.shop.Audit", "anything")
    assert policy.excluded_fields_for("com.shop.Audit") == ALL_FIELDS


def test_policy_union_with_forwarded_fields() -> None:
    policy = ExclusionPolicy.from_config(fields={"com.shop.Base": ["id"]})

    assert policy.is_field_excluded("com.shop.Base", "id")
    assert policy.is_field_excluded("com.shop.Base", "createTime", forwarded={"createTime"})
    assert policy.is_field_excluded("com.shop.Other", "createTime", forwarded=["createTime"])
    assert not policy.is_field_excluded("com.shop.Base", "name")


def test_forward_accumulates_exclusions_along_the_chain() -> None:
    policy = ExclusionPolicy.from_config(fields="User:createTime;Admin:*")

    assert policy.forward("com.shop.User") == frozenset({"createTime"})
    assert policy.forward("com.shop.User", {"tags"}) == frozenset({"createTime", "tags"})
    assert policy.forward("com.shop.Role", ["tags"]) == frozenset({"tags"})
    assert policy.forward("com.shop.Admin", ["tags"]) == frozenset({"tags"})


@pytest.mark.parametrize(
    ("entry", "class_name"),
    [
        ("com.shop.User", "com.shop.User"),
        ("User", "com.shop.User"),
        ("shop.User", "com.shop.User"),
        ("com.shop.User", "User"),
    ],
)
def test_policy_matches_simple_and_qualified_names(entry: str, class_name: str) -> None:
    policy = ExclusionPolicy({entry: ["id"]})

    assert policy.is_class_excluded(class_name)
    assert policy.excluded_fields_for(class_name) == frozenset({"id"})


def test_policy_does_not_match_partial_simple_names() -> None:
    policy = ExclusionPolicy({"User": ["id"]})

    assert not policy.is_class_excluded("com.shop.SuperUser")


def test_classes_list_excludes_whole_class() -> None:
    policy = ExclusionPolicy.from_config(classes=["com.shop.Audit"], fields="com.shop.User:id")

    assert policy.excluded_fields_for("com.shop.Audit") == ALL_FIELDS
    assert policy.excluded_fields_for("com.shop.User") == frozenset({"id"})


def test_functional_updates_leave_original_untouched() -> None:
    policy = ExclusionPolicy({"com.shop.User": ["id"]})

    updated = policy.with_fields("com.shop.Order", ["total"])
    wildcard = policy.with_fields("com.shop.Order", None)
    removed = updated.without("com.shop.User")

    assert policy.excluded_fields_for("com.shop.Order") is None
    assert updated.excluded_fields_for("com.shop.Order") == frozenset({"total"})
    assert wildcard.excluded_fields_for("com.shop.Order") == ALL_FIELDS
    assert removed.excluded_fields_for("com.shop.User") is None
    assert removed.to_string() == "com.shop.Order:total"


def test_policy_specs_are_read_only() -> None:
    policy = ExclusionPolicy({"com.shop.User": ["id"]})

    with pytest.raises(TypeError):
        policy.specs["com.shop.Order"] = ExclusionSpec.everything()  # type: ignore[index]
