"""Tests for argument binding."""

from __future__ import annotations

import pytest

from jsonrpc_dispatch.binder import ArgumentSet, bind_arguments
from jsonrpc_dispatch.exceptions import ArityError, InvalidArguments, MissingArgument
from jsonrpc_dispatch.protocols import ParameterSpec

START_END = [ParameterSpec("start"), ParameterSpec("end")]
WITH_DEFAULT = [ParameterSpec("a"), ParameterSpec("b", has_default=True, default=2)]


@pytest.mark.unit
class TestArity:
    """Arity checks against required and maximum counts."""

    def test_too_few(self):
        with pytest.raises(ArityError, match="Wrong number of arguments"):
            bind_arguments([1], START_END, 2, 2)

    def test_too_many(self):
        with pytest.raises(ArityError, match="Too many arguments"):
            bind_arguments([1, 2, 3], START_END, 2, 2)

    @pytest.mark.parametrize("params", [[1], [1, 2]])
    def test_boundaries_succeed(self, params):
        result = bind_arguments(params, WITH_DEFAULT, 1, 2)

        assert result.args == tuple(params)

    def test_extra_named_keys_count_towards_max(self):
        with pytest.raises(ArityError):
            bind_arguments({"start": 1, "end": 2, "step": 3}, START_END, 2, 2)

    def test_unbounded_max(self):
        result = bind_arguments([1, 2, 3, 4], [ParameterSpec("a")], 1, None)

        assert result.args == (1, 2, 3, 4)

    def test_arity_errors_are_invalid_arguments(self):
        with pytest.raises(InvalidArguments):
            bind_arguments([], START_END, 2, 2)


@pytest.mark.unit
class TestPositional:
    """Positional params are passed through in order."""

    def test_list_params(self):
        assert bind_arguments([3, 5], START_END, 2, 2) == ArgumentSet(args=(3, 5))

    def test_index_keyed_mapping_is_positional(self):
        result = bind_arguments({"0": 3, "1": 5}, START_END, 2, 2)

        assert result.args == (3, 5)

    def test_none_is_no_arguments(self):
        assert bind_arguments(None, [], 0, 0) == ArgumentSet()

    def test_values_beyond_keyword_only_boundary(self):
        params = [ParameterSpec("a"), ParameterSpec("b", keyword_only=True)]

        with pytest.raises(ArityError, match="Too many arguments"):
            bind_arguments([1, 2], params, 2, 2)

    def test_required_keyword_only_needs_a_name(self):
        params = [
            ParameterSpec("a"),
            ParameterSpec("b", has_default=True, default=0),
            ParameterSpec("c", keyword_only=True),
        ]

        with pytest.raises(MissingArgument) as exc_info:
            bind_arguments([1, 2], params, 2, 3)

        assert exc_info.value.name == "c"

    def test_optional_keyword_only_is_left_to_default(self):
        params = [ParameterSpec("a"), ParameterSpec("b", has_default=True, keyword_only=True)]

        assert bind_arguments([1], params, 1, 2) == ArgumentSet(args=(1,))


@pytest.mark.unit
class TestNamed:
    """Named params are matched by parameter name."""

    def test_key_order_does_not_matter(self):
        result = bind_arguments({"end": 10, "start": 1}, START_END, 2, 2)

        assert result.args == (1, 10)

    def test_default_fills_missing_name(self):
        result = bind_arguments({"a": 5}, WITH_DEFAULT, 1, 2)

        assert result.args == (5, 2)

    def test_missing_argument(self):
        with pytest.raises(MissingArgument) as exc_info:
            bind_arguments({"start": 1, "stop": 10}, START_END, 2, 2)

        assert exc_info.value.name == "end"
        assert exc_info.value.data == "Missing argument: end"

    def test_unknown_names_are_ignored(self):
        params = [ParameterSpec("a"), ParameterSpec("b", has_default=True, default=0)]

        result = bind_arguments({"a": 1, "zzz": 2}, params, 1, 2)

        assert result.args == (1, 0)

    def test_null_falls_back_to_default(self):
        result = bind_arguments({"a": 1, "b": None}, WITH_DEFAULT, 1, 2)

        assert result.args == (1, 2)

    def test_null_for_required_parameter_is_missing(self):
        with pytest.raises(MissingArgument) as exc_info:
            bind_arguments({"a": None, "b": 3}, WITH_DEFAULT, 1, 2)

        assert exc_info.value.name == "a"

    def test_non_sequential_index_keys_are_names(self):
        params = [ParameterSpec("0"), ParameterSpec("2")]

        result = bind_arguments({"0": "x", "2": "y"}, params, 2, 2)

        assert result.args == ("x", "y")

    def test_keyword_only_goes_to_kwargs(self):
        params = [ParameterSpec("a"), ParameterSpec("flag", keyword_only=True)]

        result = bind_arguments({"flag": True, "a": 1}, params, 2, 2)

        assert result == ArgumentSet(args=(1,), kwargs={"flag": True})

    def test_empty_params_use_defaults(self):
        result = bind_arguments({}, [ParameterSpec("a", has_default=True, default=9)], 0, 1)

        assert result.args == (9,)
