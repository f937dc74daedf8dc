"""
Test exposure marking and the per-owner function registry
"""
import inspect
import types
from typing import Any, Optional

from callwire.calls import ExposedFunction, FunctionRegistry, exposed
from callwire.calls.exposure import exposed_name

from targets import CalculatorService, StaticProcessor


def test_exposed_marks_with_own_or_given_name():
    @exposed
    def add(a, b):
        return a + b

    @exposed("add")
    def add_text(a, b):
        return a + b

    def plain():
        pass

    assert exposed_name(add) == "add"
    assert exposed_name(add_text) == "add"
    assert exposed_name(plain) is None
    assert add(1, 2) == 3


def test_instance_registry_groups_overloads():
    registry = FunctionRegistry.for_target(CalculatorService())
    overloads = registry.candidates("add")
    assert [f.attribute for f in overloads] == ["add", "add_text"]
    assert "multiply" not in registry
    assert registry.candidates("multiply") == ()
    assert set(registry.names()) == {"hello", "add", "divide", "divide_safely", "throw_error", "shift", "total"}


def test_parameters_skip_self_and_are_one_based():
    add_text = FunctionRegistry.for_target(CalculatorService()).candidates("add")[1]
    assert [(p.name, p.position, p.annotation, p.default) for p in add_text.parameters] == [
        ("a", 1, str, "1"),
        ("b", 2, str, "2"),
    ]
    assert add_text.return_type is str
    assert add_text.parameter_for("2").name == "b"
    assert add_text.parameter_for("b").name == "b"
    assert add_text.parameter_for("0") is None
    assert add_text.parameter_for("c") is None


def test_nullable_return_type_is_kept():
    function = FunctionRegistry.for_target(CalculatorService()).candidates("divide_safely")[0]
    assert function.return_type == Optional[int]


def test_registry_is_built_once_per_owner():
    assert FunctionRegistry.for_target(CalculatorService()) is FunctionRegistry.for_target(CalculatorService())


def test_class_target_exposes_static_and_class_methods_only():
    registry = FunctionRegistry.for_target(StaticProcessor)
    assert set(registry.names()) == {"add", "name"}
    add = registry.candidates("add")[0]
    assert [p.name for p in add.parameters] == ["a", "b"]
    assert add.callable_for(StaticProcessor)(3, 5) == 8
    name = registry.candidates("name")[0]
    assert name.parameters == ()
    assert name.callable_for(StaticProcessor)() == "StaticProcessor"


def test_instances_see_instance_methods_too():
    registry = FunctionRegistry.for_instances_of(StaticProcessor)
    assert set(registry.names()) == {"add", "name", "instance_only"}


def test_subclass_inherits_exposed_members():
    class ScientificCalculator(CalculatorService):
        @exposed
        def power(self, base: int, exponent: int) -> int:
            return base ** exponent

    registry = FunctionRegistry.for_target(ScientificCalculator())
    assert "power" in registry
    assert len(registry.candidates("add")) == 2


def test_module_target():
    module = types.ModuleType("calc_module")

    @exposed
    def negate(value: int) -> int:
        return -value

    def helper():
        pass

    module.negate = negate
    module.helper = helper
    registry = FunctionRegistry.for_target(module)
    assert registry.names() == ["negate"]
    assert registry.candidates("negate")[0].callable_for(module)(4) == -4


def test_explicit_registration():
    def double(value: int) -> int:
        return value * 2

    def shout(text):
        return text.upper()

    registry = FunctionRegistry.from_callables(double, ("loud", shout))
    assert registry.names() == ["double", "loud"]
    loud = registry.candidates("loud")[0]
    assert loud.parameters[0].annotation is Any
    assert loud.callable_for(None) is shout
    assert len(registry) == 2


def test_var_parameters_are_not_bindable():
    def collect(first: int, *rest: int, **options: str) -> int:
        return first

    function = ExposedFunction.from_callable(collect)
    assert [p.name for p in function.parameters] == ["first"]
    assert function.signature == inspect.signature(collect)


def test_describe():
    add = FunctionRegistry.for_target(CalculatorService()).candidates("add")[0]
    assert add.describe() == "add(a: int, b: int) -> int"
