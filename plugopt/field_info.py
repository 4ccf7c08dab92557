import inspect
import warnings
from collections.abc import Callable
from contextlib import suppress
from functools import lru_cache
from typing import Any, get_args, get_type_hints

import attrs
from attrs import field

from plugopt.annotations import get_hint_name, resolve, resolve_annotated, resolve_optional
from plugopt.collection import UnsupportedCollection, collection_factory, is_collection_hint, is_mapping_hint
from plugopt.exceptions import InvalidDescriptorError, UnsupportedCollectionKindError
from plugopt.option import Option, find_option
from plugopt.utils import default_name_transform, frozen, is_builtin


def strip_hint(hint: Any) -> Any:
    """Remove ``Annotated`` and ``Optional`` wrappers; ``NewType`` aliases are kept."""
    previous = None
    while hint != previous:
        previous = hint
        hint = resolve_annotated(resolve_optional(hint))
    return hint


@frozen
class OptionField:
    """A bindable attribute discovered on a class."""

    attribute: str
    """Python attribute name the value is bound to."""

    option: Option

    owner: type
    """Class that declares the attribute."""

    hint: Any
    """Declared value type with ``Annotated``/``Optional`` removed."""

    element_type: Any = None
    """Element type for collection attributes, :obj:`None` otherwise."""

    composite: bool = False
    """The value (or element) type declares options of its own."""

    _collection_factory: Callable[[], tuple[Any, Callable[[Any], None]]] | None = field(
        default=None, alias="collection_factory", eq=False
    )

    @property
    def flag(self) -> str:
        return self.option.flag

    @property
    def is_collection(self) -> bool:
        return self._collection_factory is not None

    @property
    def is_bool(self) -> bool:
        return not self.is_collection and resolve(self.hint) is bool

    @property
    def value_type(self) -> Any:
        """Type of a single parsed value: the element type for collections."""
        return self.element_type if self.is_collection else self.hint

    def new_collection(self) -> tuple[Any, Callable[[Any], None]]:
        assert self._collection_factory is not None
        return self._collection_factory()

    def get(self, obj: Any) -> Any:
        return getattr(obj, self.attribute, None)

    def set(self, obj: Any, value: Any) -> None:
        try:
            setattr(obj, self.attribute, value)
        except AttributeError:
            # Circumvent frozen attrs classes and dataclasses.
            object.__setattr__(obj, self.attribute, value)

    def is_empty(self, obj: Any) -> bool:
        """Whether the slot on ``obj`` holds no user-supplied value.

        That is :obj:`None`, an empty collection, or the very object declared as the
        class-level value (e.g. ``enabled: ... = False``).
        """
        value = self.get(obj)
        if value is None or (self.is_collection and not value):
            return True
        return value is declared_value(self.owner, self.attribute)


def declared_value(cls: type, attribute: str) -> Any:
    """Class-level value of ``attribute``; :obj:`attrs.NOTHING` if there is none."""
    if attrs.has(cls):
        attribute_ = attrs.fields_dict(cls).get(attribute)
        if attribute_ is None or isinstance(attribute_.default, attrs.Factory):
            return attrs.NOTHING
        return attribute_.default
    return getattr(cls, attribute, attrs.NOTHING)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        raise InvalidDescriptorError(msg=f'Unable to resolve type hints of "{cls.__qualname__}": {e}', owner=cls) from e


def declares_options(hint: Any) -> bool:
    """Whether instances of ``hint`` are bindable objects (their class declares :class:`.Option` attributes)."""
    if not inspect.isclass(hint) or is_builtin(hint):
        return False
    try:
        hints = get_type_hints(hint, include_extras=True)
    except (NameError, TypeError):
        # Third-party value types may carry unresolvable hints; they are never bindable.
        return False
    return any(find_option(annotation) is not None for annotation in hints.values())


def _element_type(owner: type, attribute: str, option: Option, hint: Any) -> Any:
    args = get_args(hint)
    if not args:
        return object
    element_type = strip_hint(args[0])
    if is_collection_hint(element_type) or is_mapping_hint(element_type):
        raise InvalidDescriptorError(
            msg=f'Nested collections are not supported; "{owner.__qualname__}.{attribute}" is {get_hint_name(hint)}.',
            option=option,
            owner=owner,
        )
    return element_type


def _build_field(owner: type, attribute: str, option: Option, annotation: Any) -> OptionField:
    if not option.name:
        option = attrs.evolve(option, name=default_name_transform(attribute))
    if not option.name or not option.delimiter:
        raise InvalidDescriptorError(
            msg=f'Option on "{owner.__qualname__}.{attribute}" must have a non-empty name and delimiter.',
            option=option,
            owner=owner,
        )
    if option.required and option.default:
        warnings.warn(
            UserWarning(
                f'Option "{option.flag}" of "{owner.__qualname__}" is required and declares a default; '
                "the default is used when the option is omitted."
            ),
            stacklevel=2,
        )

    hint = strip_hint(annotation)
    if is_mapping_hint(hint):
        raise InvalidDescriptorError(
            msg=f'Map-like type {get_hint_name(hint)} of "{owner.__qualname__}.{attribute}" is not a valid option target.',
            option=option,
            owner=owner,
        )

    if not is_collection_hint(hint):
        return OptionField(attribute, option, owner, hint, composite=declares_options(resolve(hint)))

    try:
        factory = collection_factory(hint)
    except UnsupportedCollection as e:
        raise UnsupportedCollectionKindError(option=option, owner=owner, target_type=hint) from e
    element_type = _element_type(owner, attribute, option, hint)
    return OptionField(
        attribute,
        option,
        owner,
        hint,
        element_type=element_type,
        composite=declares_options(resolve(element_type)),
        collection_factory=factory,
    )


@lru_cache(maxsize=256)
def get_option_fields(cls: type) -> tuple[OptionField, ...]:
    """Discover the bindable attributes of ``cls``, in declaration order.

    Attributes of base classes come first, followed by the attributes each subclass
    adds, mirroring :func:`typing.get_type_hints`.
    """
    if not inspect.isclass(cls) or is_builtin(cls):
        return ()
    out = []
    for attribute, annotation in _type_hints(cls).items():
        option = find_option(annotation)
        if option is None:
            continue
        out.append(_build_field(cls, attribute, option, annotation))
    return tuple(out)


@lru_cache(maxsize=256)
def get_factory(cls: type) -> Callable[[], Any]:
    """Zero-argument constructor for a bindable class.

    Raises
    ------
    InvalidDescriptorError
        If ``cls`` can't be constructed without arguments.
    """
    if getattr(cls, "__abstractmethods__", None):
        raise InvalidDescriptorError(msg=f'Cannot instantiate abstract class "{cls.__qualname__}".', owner=cls)
    with suppress(TypeError, ValueError):
        signature = inspect.signature(cls)
        for iparam in signature.parameters.values():
            if iparam.default is iparam.empty and iparam.kind not in (iparam.VAR_POSITIONAL, iparam.VAR_KEYWORD):
                raise InvalidDescriptorError(
                    msg=f'Class "{cls.__qualname__}" does not have a zero-argument constructor '
                    f'(parameter "{iparam.name}" has no default).',
                    owner=cls,
                )
    return cls


def get_field_descriptions(cls: type) -> dict[str, str]:
    """Attribute descriptions from the class docstring, keyed by attribute name."""
    from docstring_parser import parse_from_object

    try:
        return {
            dparam.arg_name: dparam.description
            for dparam in parse_from_object(cls).params
            if dparam.description
        }
    except (TypeError, OSError):
        # Type hints like ``dict[str, str]`` and classes without retrievable source trigger this.
        return {}
