"""Tests for parameter descriptors derived from handler signatures."""

from __future__ import annotations

import pytest

from jsonrpc_dispatch.context import RpcContext
from jsonrpc_dispatch.introspection import (
    explicit_signature,
    inspect_handler,
    inspect_method,
)
from jsonrpc_dispatch.protocols import ParameterSpec


class Service:
    def method(self, a, b=1):
        return a + b

    def with_context(self, ctx: RpcContext, value):
        return value

    @staticmethod
    def static(x):
        return x

    @classmethod
    def factory(cls, name, *, flag=False):
        return name

    label = "not callable"


@pytest.mark.unit
class TestInspectHandler:
    """Test inspect_handler()."""

    def test_required_and_default_parameters(self):
        def handler(a, b, c=3):
            pass

        signature = inspect_handler(handler)

        assert signature.parameters == (
            ParameterSpec("a"),
            ParameterSpec("b"),
            ParameterSpec("c", has_default=True, default=3),
        )
        assert signature.accepts_context is False
        assert signature.variadic is False

    def test_none_default_is_a_default(self):
        def handler(a=None):
            pass

        (param,) = inspect_handler(handler).parameters

        assert param.has_default is True
        assert param.default is None

    def test_keyword_only_parameters(self):
        def handler(a, *, b):
            pass

        signature = inspect_handler(handler)

        assert signature.parameters[1] == ParameterSpec("b", keyword_only=True)

    def test_var_positional_marks_variadic(self):
        def handler(a, *rest, **options):
            pass

        signature = inspect_handler(handler)

        assert [p.name for p in signature.parameters] == ["a"]
        assert signature.variadic is True

    def test_context_parameter_is_excluded(self):
        def handler(ctx: RpcContext, value):
            pass

        signature = inspect_handler(handler)

        assert signature.accepts_context is True
        assert [p.name for p in signature.parameters] == ["value"]

    def test_context_must_be_first(self):
        def handler(value, ctx: RpcContext):
            pass

        assert inspect_handler(handler).accepts_context is False

    def test_bound_method_excludes_self(self):
        signature = inspect_handler(Service().method)

        assert [p.name for p in signature.parameters] == ["a", "b"]


@pytest.mark.unit
class TestInspectMethod:
    """Test inspect_method() on classes and instances."""

    def test_instance_method_on_class_skips_self(self):
        signature = inspect_method(Service, "method")

        assert [p.name for p in signature.parameters] == ["a", "b"]

    def test_context_method_on_class(self):
        signature = inspect_method(Service, "with_context")

        assert signature.accepts_context is True
        assert [p.name for p in signature.parameters] == ["value"]

    def test_staticmethod_on_class(self):
        assert [p.name for p in inspect_method(Service, "static").parameters] == ["x"]

    def test_classmethod_on_class(self):
        signature = inspect_method(Service, "factory")

        assert [p.name for p in signature.parameters] == ["name", "flag"]

    def test_method_on_instance(self):
        assert [p.name for p in inspect_method(Service(), "method").parameters] == ["a", "b"]

    def test_missing_method(self):
        with pytest.raises(AttributeError):
            inspect_method(Service, "missing")

    def test_non_callable_attribute(self):
        with pytest.raises(AttributeError):
            inspect_method(Service, "label")


@pytest.mark.unit
def test_explicit_signature_accepts_names_and_specs():
    signature = explicit_signature(["a", ParameterSpec("b", has_default=True, default=0)])

    assert signature.parameters == (
        ParameterSpec("a"),
        ParameterSpec("b", has_default=True, default=0),
    )
    assert signature.accepts_context is False
