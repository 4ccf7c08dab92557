import re
from typing import Annotated

import pytest

from plugopt import MissingValueError, Option, RequiredOptionMissingError, UnresolvedParserError


class Item:
    x: Annotated[int, Option("x")] = None
    label: Annotated[str, Option("label", default="none")] = None


class Inner:
    depth: Annotated[int, Option("depth", required=True)] = None
    unit: Annotated[str, Option("unit")] = None


class Middle:
    inner: Annotated[Inner, Option("inner")] = None
    name: Annotated[str, Option("name")] = None


class Root:
    items: Annotated[list[Item], Option("item")] = None
    middle: Annotated[Middle, Option("middle")] = None
    flag: Annotated[bool, Option("flag")] = False


def test_bind_composite(parse):
    root, consumed = parse(Root, ["-middle", "-name=m"])
    assert consumed == 2
    assert isinstance(root.middle, Middle)
    assert root.middle.name == "m"
    assert root.middle.inner is None


def test_bind_composite_repetition(parse):
    root, consumed = parse(Root, ["-item", "-x=1", "-item", "-x=2"])
    assert consumed == 4
    assert [item.x for item in root.items] == [1, 2]


def test_bind_composite_repetition_elements_validated_independently(parse):
    root, _ = parse(Root, ["-item", "-x=1", "-label=first", "-item", "-x=2"])
    assert [item.label for item in root.items] == ["first", "none"]
    assert root.items[0] is not root.items[1]


def test_bind_composite_repetition_ends_at_parent_option(parse):
    root, consumed = parse(Root, ["-item", "-x=1", "-flag", "-item", "-x=2"])
    assert consumed == 3
    assert [item.x for item in root.items] == [1]
    assert root.flag is True


def test_bind_deeply_nested(parse):
    root, consumed = parse(Root, ["-middle", "-inner", "-depth=3", "-name=n", "-flag"])
    assert consumed == 5
    assert root.middle.inner.depth == 3
    assert root.middle.name == "n"
    assert root.flag is True


def test_bind_nested_scope_returns_to_parent(parse):
    """A token unknown to the nested object is offered to the enclosing scope."""
    root, consumed = parse(Root, ["-middle", "-name=m", "-item", "-x=5"])
    assert consumed == 4
    assert root.middle.name == "m"
    assert root.items[0].x == 5


def test_bind_nested_required_checked_at_construction(parse):
    with pytest.raises(RequiredOptionMissingError) as e:
        parse(Root, ["-middle", "-inner", "-unit=m", "-name=n"])
    assert e.value.owner is Inner
    assert str(e.value) == 'Required option "-depth" not provided for "Inner".'


def test_bind_composite_without_options(parse):
    with pytest.raises(MissingValueError) as e:
        parse(Root, ["-middle"])
    assert e.value.option.name == "middle"
    assert e.value.owner is Root


def test_bind_composite_followed_by_unknown(parse):
    with pytest.raises(MissingValueError):
        parse(Root, ["-middle", "schema.xsd"])


def test_bind_composite_collection_empty_repetition(parse):
    with pytest.raises(MissingValueError):
        parse(Root, ["-item", "-x=1", "-item"])


def test_bind_composite_delimiter_without_parser(parse):
    with pytest.raises(UnresolvedParserError):
        parse(Root, ["-middle=abc"])


def test_bind_composite_delimiter_with_parser(binder):
    class Holder:
        middle: Annotated[Middle, Option("middle")] = None

    def parse_middle(option_name, text):
        middle = Middle()
        middle.name = text
        return middle

    binder.register_parser(Middle, parse_middle)
    holder, consumed = binder.parse(Holder, ["-middle=abc"])
    assert consumed == 1
    assert holder.middle.name == "abc"


def test_bind_composite_same_option_names_in_different_scopes(parse):
    class Leaf:
        name: Annotated[str, Option("name")] = None

    class Branch:
        leaf: Annotated[Leaf, Option("leaf")] = None
        name: Annotated[str, Option("name")] = None

    branch, consumed = parse(Branch, ["-leaf", "-name=inner", "-name=outer"])
    assert consumed == 3
    assert branch.leaf.name == "inner"
    assert branch.name == "outer"


def test_bind_composite_collection_with_scalar_collection(parse):
    class Annotation:
        annotations: Annotated[list[str], Option("annotation", required=True)] = None
        regex: Annotated[re.Pattern, Option("regex")] = None

    class Holder:
        annotation_list: Annotated[list[Annotation], Option("annotation-list")] = None
        enabled: Annotated[bool, Option("enabled")] = False

    tokens = [
        "-annotation-list",
        "-annotation=@XmlElement",
        "-annotation=@XmlTransient",
        "-regex=.*",
        "-annotation-list",
        "-annotation=@XmlRootElement",
        "-enabled",
    ]
    holder, consumed = parse(Holder, tokens)
    assert consumed == len(tokens)
    first, second = holder.annotation_list
    assert first.annotations == ["@XmlElement", "@XmlTransient"]
    assert first.regex.pattern == ".*"
    assert second.annotations == ["@XmlRootElement"]
    assert second.regex is None
    assert holder.enabled is True
