"""Unit tests for signature and identifier introspection helpers."""

import collections
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Protocol, Union

from wirebox.application.introspection import (
    class_dependency,
    first_parameter_class,
    injectable_parameters,
    invoke_leading,
    is_factory,
    is_instantiable,
    locate,
    normalize,
    positional_capacity,
    resolve_hints,
)


class Logger:
    pass


class Repository(ABC):
    @abstractmethod
    def get(self): ...


class Reader(Protocol):
    def read(self) -> str: ...


class Level(Enum):
    DEBUG = "debug"
    INFO = "info"


class TestNormalize:
    def test_strips_leading_separators(self):
        assert normalize(".app.Mailer") == "app.Mailer"
        assert normalize("..app.Mailer") == "app.Mailer"

    def test_leaves_other_identifiers(self):
        assert normalize("app.Mailer") == "app.Mailer"
        assert normalize(Logger) is Logger
        assert normalize(None) is None


class TestIsFactory:
    def test_functions_are_factories(self):
        assert is_factory(lambda c: None)
        assert is_factory(print)

    def test_classes_and_strings_are_not(self):
        assert not is_factory(Logger)
        assert not is_factory("app.Logger")
        assert not is_factory(None)


class TestLocate:
    def test_locates_class_by_dotted_path(self):
        assert locate("collections.OrderedDict") is collections.OrderedDict

    def test_locates_nested_attribute(self):
        assert locate("collections.abc.Mapping") is collections.abc.Mapping

    def test_unknown_module(self):
        assert locate("no_such_package.Thing") is None

    def test_unknown_attribute(self):
        assert locate("collections.NoSuchThing") is None

    def test_bare_name(self):
        assert locate("Logger") is None


class TestIsInstantiable:
    def test_concrete_class(self):
        assert is_instantiable(Logger)

    def test_abstract_class(self):
        assert not is_instantiable(Repository)

    def test_protocol(self):
        assert not is_instantiable(Reader)

    def test_non_class(self):
        assert not is_instantiable("Logger")
        assert not is_instantiable(Logger())

    def test_enum(self):
        assert not is_instantiable(Level)


class TestClassDependency:
    def test_user_class(self):
        assert class_dependency(Logger) is Logger

    def test_builtins_are_primitives(self):
        for annotation in (int, str, float, bool, list, dict, bytes):
            assert class_dependency(annotation) is None

    def test_optional_is_unwrapped(self):
        assert class_dependency(Optional[Logger]) is Logger

    def test_union_of_classes_is_primitive(self):
        assert class_dependency(Union[Logger, Repository]) is None

    def test_unresolved_string_annotation(self):
        assert class_dependency("Logger") is None

    def test_enums_are_primitives(self):
        assert class_dependency(Level) is None
        assert class_dependency(Optional[Level]) is None

    def test_missing_annotation(self):
        import inspect

        assert class_dependency(inspect.Parameter.empty) is None


class TestInjectableParameters:
    def test_unevaluable_hints_keep_raw_annotations(self):
        def handler(logger: "NotDefinedAnywhere"):
            pass

        assert resolve_hints(handler) == {}
        assert injectable_parameters(handler)[0].annotation == "NotDefinedAnywhere"

    def test_skips_self_and_variadics(self):
        class Service:
            def __init__(self, logger: Logger, *args, retries: int = 3, **kwargs):
                pass

        names = [parameter.name for parameter in injectable_parameters(Service.__init__)]
        assert names == ["logger", "retries"]

    def test_uses_evaluated_hints(self):
        def handler(logger: "Logger"):
            pass

        (parameter,) = injectable_parameters(handler)
        assert parameter.annotation is Logger


class TestInvokeLeading:
    def test_truncates_to_capacity(self):
        assert invoke_leading(lambda c: c, "container", {"x": 1}) == "container"
        assert invoke_leading(lambda: "none", "container") == "none"

    def test_passes_all_when_variadic(self):
        assert invoke_leading(lambda *args: args, 1, 2) == (1, 2)

    def test_passes_all_when_capacity_allows(self):
        assert invoke_leading(lambda c, params: (c, params), "c", {}) == ("c", {})

    def test_capacity(self):
        assert positional_capacity(lambda a, b, *, c=1: None) == 2
        assert positional_capacity(lambda *a: None) is None


class TestFirstParameterClass:
    def test_hinted(self):
        def callback(logger: Logger, container):
            pass

        assert first_parameter_class(callback) is Logger

    def test_unhinted(self):
        assert first_parameter_class(lambda obj, c: None) is None

    def test_builtin_hint(self):
        def callback(value: str):
            pass

        assert first_parameter_class(callback) is None

    def test_no_parameters(self):
        assert first_parameter_class(lambda: None) is None
