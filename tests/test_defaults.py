from dataclasses import dataclass
from typing import Annotated

import attrs
import pytest

from plugopt import (
    ConversionError,
    Option,
    RequiredOptionMissingError,
    UnresolvedParserError,
    apply_defaults,
)


class Settings:
    count: Annotated[int, Option("count", default="3")] = None
    name: Annotated[str, Option("name")] = None
    levels: Annotated[list[int], Option("level", default="7")] = None
    enabled: Annotated[bool, Option("enabled")] = False


class Mandatory:
    path: Annotated[str, Option("path", required=True)] = None
    verbose: Annotated[bool, Option("verbose")] = False


def test_default_applied_when_omitted(parse):
    settings, consumed = parse(Settings, [])
    assert consumed == 0
    assert settings.count == 3
    assert settings.name is None


class Flags:
    fast: Annotated[bool, Option("fast", default="true")] = False
    count: Annotated[int, Option("count", default="3")] = 0


def test_default_applied_over_falsy_class_value(parse):
    omitted, _ = parse(Flags, [])
    supplied, _ = parse(Flags, ["-fast=true", "-count=3"])
    assert (omitted.fast, omitted.count) == (supplied.fast, supplied.count) == (True, 3)


def test_default_not_applied_over_supplied_class_value(parse):
    flags, consumed = parse(Flags, ["-fast=false", "-count=0"])
    assert consumed == 2
    assert flags.fast is False
    assert flags.count == 0


def test_default_applied_over_falsy_dataclass_value(parse):
    @dataclass
    class Holder:
        fast: Annotated[bool, Option("fast", default="true")] = False

    holder, _ = parse(Holder, [])
    assert holder.fast is True


def test_default_applied_over_falsy_attrs_value(parse):
    @attrs.define
    class Holder:
        count: Annotated[int, Option("count", default="3")] = 0

    holder, _ = parse(Holder, [])
    assert holder.count == 3


def test_apply_defaults_idempotent_over_falsy_class_value(binder):
    flags = Flags()
    apply_defaults(flags, binder.registry)
    apply_defaults(flags, binder.registry)
    assert (flags.fast, flags.count) == (True, 3)


def test_required_unset_bool_raises(parse):
    class Holder:
        confirm: Annotated[bool, Option("confirm", required=True)] = False

    with pytest.raises(RequiredOptionMissingError):
        parse(Holder, [])
    holder, _ = parse(Holder, ["-confirm=false"])
    assert holder.confirm is False


def test_default_not_applied_when_supplied(parse):
    settings, _ = parse(Settings, ["-count=10"])
    assert settings.count == 10


def test_default_collection_holds_single_element(parse):
    settings, _ = parse(Settings, [])
    assert settings.levels == [7]


def test_default_collection_not_applied_when_supplied(parse):
    settings, _ = parse(Settings, ["-level=1", "-level=2"])
    assert settings.levels == [1, 2]


def test_default_collection_applied_to_empty_collection(binder):
    settings = Settings()
    settings.levels = []
    apply_defaults(settings, binder.registry)
    assert settings.levels == [7]


def test_default_collection_name_parser(binder):
    class Holder:
        int_list: Annotated[list[int], Option("int-list", default="1,2")] = None

    binder.register_parser("int-list", lambda name, text: [int(x) for x in text.split(",")])
    holder, _ = binder.parse(Holder, [])
    assert holder.int_list == [1, 2]


def test_apply_defaults_idempotent(binder):
    settings = Settings()
    apply_defaults(settings, binder.registry)
    levels = settings.levels
    apply_defaults(settings, binder.registry)
    assert settings.count == 3
    assert settings.levels is levels
    assert settings.levels == [7]


def test_apply_defaults_preserves_present_values(binder):
    settings = Settings()
    settings.count = 0
    settings.enabled = True
    apply_defaults(settings, binder.registry)
    assert settings.count == 0
    assert settings.enabled is True


def test_required_present(parse):
    mandatory, consumed = parse(Mandatory, ["-path=out", "-verbose"])
    assert consumed == 2
    assert mandatory.path == "out"


def test_required_missing(parse):
    with pytest.raises(RequiredOptionMissingError) as e:
        parse(Mandatory, ["-verbose"])
    assert e.value.option.name == "path"
    assert e.value.owner is Mandatory
    assert str(e.value) == 'Required option "-path" not provided for "Mandatory".'


def test_required_with_default_uses_default(parse):
    class Holder:
        value: Annotated[int, Option("value", required=True, default="1")] = None

    with pytest.warns(UserWarning):
        holder, _ = parse(Holder, [])
    assert holder.value == 1


def test_default_conversion_error(parse):
    class Holder:
        count: Annotated[int, Option("count", default="many")] = None

    with pytest.raises(ConversionError) as e:
        parse(Holder, [])
    assert e.value.text == "many"
    assert e.value.target_type is int


def test_default_unresolved_parser(parse):
    class Unknown:
        pass

    class Holder:
        value: Annotated[Unknown, Option("value", default="x")] = None

    with pytest.raises(UnresolvedParserError) as e:
        parse(Holder, [])
    assert e.value.target_type is Unknown


def test_default_composite_is_completed(binder):
    class Item:
        x: Annotated[int, Option("x")] = None
        label: Annotated[str, Option("label", default="none")] = None

    class Holder:
        item: Annotated[Item, Option("item", default="5")] = None

    def parse_item(option_name, text):
        item = Item()
        item.x = int(text)
        return item

    binder.register_parser(Item, parse_item)
    holder, _ = binder.parse(Holder, [])
    assert holder.item.x == 5
    assert holder.item.label == "none"


def test_default_composite_required_checked(binder):
    class Item:
        x: Annotated[int, Option("x", required=True)] = None

    class Holder:
        item: Annotated[Item, Option("item", default="ignored")] = None

    binder.register_parser(Item, lambda name, text: Item())
    with pytest.raises(RequiredOptionMissingError) as e:
        binder.parse(Holder, [])
    assert e.value.owner is Item


def test_defaults_applied_to_nested_objects(parse):
    class Leaf:
        size: Annotated[int, Option("size", default="4")] = None
        name: Annotated[str, Option("name")] = None

    class Tree:
        leaves: Annotated[list[Leaf], Option("leaf")] = None

    tree, _ = parse(Tree, ["-leaf", "-name=a", "-leaf", "-size=1"])
    assert [leaf.size for leaf in tree.leaves] == [4, 1]
