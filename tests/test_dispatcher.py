"""
Test the dispatcher: request in, Result Envelope out
"""
import json

import pytest

from callwire import ServerConfig
from callwire.calls import (
    Dispatcher,
    ErrorKind,
    ExecutedFunctionThrowError,
    Failure,
    IncorrectFunctionArgsError,
    IncorrectFunctionNameError,
    NoMatchingFunctionFoundError,
    Success,
    exposed,
)
from callwire.rpc import LocalTransport

from targets import GreeterService, StaticProcessor


@pytest.fixture
def dispatcher(calculator_service):
    return Dispatcher(calculator_service)


class TestProcessRequest:
    def test_add_by_name(self, dispatcher, make_request):
        assert dispatcher.process_request(make_request("add", {"a": "3", "b": "5"})) == Success("8")

    def test_add_by_position(self, dispatcher, make_request):
        assert dispatcher.process_request(make_request("add", {"1": "3", "2": "5"})) == Success("8")

    def test_string_overload(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("add", {"a": '"3"', "b": '"5"'}))
        assert result == Success('"35"')

    def test_no_args(self, dispatcher, make_request):
        assert dispatcher.process_request(make_request("hello")) == Success('"Hello, World!"')

    def test_defaults_for_missing_arguments(self, defaults_service, make_request):
        result = Dispatcher(defaults_service).process_request(make_request("add", {"b": "10"}))
        assert result == Success("11")

    def test_none_return_value(self, dispatcher, make_request):
        assert dispatcher.process_request(make_request("divide_safely", {"a": "1", "b": "0"})) == Success(None)

    def test_structured_return_value(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("shift", {"point": '{"x": 1, "y": 1}', "dy": "2"}))
        assert json.loads(result.value) == {"x": 1, "y": 3}

    def test_raising_function(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("divide", {"a": "10", "b": "0"}))
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.EXECUTED_FUNCTION_THROW
        assert result.message.startswith("ZeroDivisionError")

    def test_throw_error(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("throw_error"))
        assert result == Failure(ErrorKind.EXECUTED_FUNCTION_THROW, "RuntimeError: Error occurred")

    def test_extra_argument(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("divide", {"a": "10", "b": "2", "c": "1"}))
        assert result.kind is ErrorKind.NO_MATCHING_FUNCTION_FOUND

    def test_unexposed_function(self, dispatcher, make_request):
        result = dispatcher.process_request(make_request("multiply", {"a": "3", "b": "5"}))
        assert result.kind is ErrorKind.NO_MATCHING_FUNCTION_FOUND

    @pytest.mark.parametrize("request_data", [
        {"functionArgs": {}},
        {"functionName": 5, "functionArgs": {}},
        {"functionName": None, "functionArgs": {}},
        ["add"],
        "add",
    ])
    def test_incorrect_function_name(self, dispatcher, request_data):
        assert dispatcher.process_request(request_data).kind is ErrorKind.INCORRECT_FUNCTION_NAME

    @pytest.mark.parametrize("function_args", [None, [], "a=1", 3])
    def test_incorrect_function_args(self, dispatcher, function_args):
        request_data = {"functionName": "add", "functionArgs": function_args}
        assert dispatcher.process_request(request_data).kind is ErrorKind.INCORRECT_FUNCTION_ARGS

    def test_missing_function_args(self, dispatcher):
        result = dispatcher.process_request({"functionName": "hello"})
        assert result.kind is ErrorKind.INCORRECT_FUNCTION_ARGS

    def test_name_checked_before_args(self, dispatcher):
        assert dispatcher.process_request({}).kind is ErrorKind.INCORRECT_FUNCTION_NAME

    def test_unencodable_return_value(self, make_request):
        class Opaque:
            @exposed
            def make(self):
                return object()

        result = Dispatcher(Opaque()).process_request(make_request("make"))
        assert result.kind is ErrorKind.EXECUTED_FUNCTION_THROW


class TestCallUnsafely:
    def test_returns_raw_value(self, dispatcher, make_request):
        assert dispatcher.call_unsafely(make_request("add", {"a": "3", "b": "5"})) == 8

    def test_keeps_original_exception_as_cause(self, dispatcher, make_request):
        with pytest.raises(ExecutedFunctionThrowError) as exc_info:
            dispatcher.call_unsafely(make_request("divide", {"a": "1", "b": "0"}))
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    @pytest.mark.parametrize("request_data,error", [
        ({"functionArgs": {}}, IncorrectFunctionNameError),
        ({"functionName": "add"}, IncorrectFunctionArgsError),
        ({"functionName": "nope", "functionArgs": {}}, NoMatchingFunctionFoundError),
    ])
    def test_raises_error_family(self, dispatcher, request_data, error):
        with pytest.raises(error):
            dispatcher.call_unsafely(request_data)


class TestTargets:
    def test_class_target_serves_static_and_class_methods(self, make_request):
        dispatcher = Dispatcher(StaticProcessor)
        assert dispatcher.process_request(make_request("add", {"1": "2", "2": "3"})) == Success("5")
        assert dispatcher.process_request(make_request("name")) == Success('"StaticProcessor"')
        assert dispatcher.process_request(make_request("instance_only")).kind is ErrorKind.NO_MATCHING_FUNCTION_FOUND

    def test_instance_target_serves_static_methods_too(self, make_request):
        dispatcher = Dispatcher(StaticProcessor())
        assert dispatcher.process_request(make_request("add", {"a": "2", "b": "3"})) == Success("5")
        assert dispatcher.process_request(make_request("instance_only")) == Success('"instance"')

    def test_sync_dispatch_runs_coroutine_functions(self, make_request):
        dispatcher = Dispatcher(GreeterService(ServerConfig()))
        assert dispatcher.process_request(make_request("greet", {"name": '"Ada"'})) == Success('"Hello, Ada!"')

    async def test_async_dispatch(self, make_request):
        dispatcher = Dispatcher(GreeterService(ServerConfig(path="/calls")))
        assert await dispatcher.process_request_async(make_request("greet", {"1": '"Ada"'})) == Success('"Hello, Ada!"')
        assert await dispatcher.process_request_async(make_request("endpoint")) == Success('"/calls"')

    async def test_async_dispatch_failure(self, dispatcher, make_request):
        result = await dispatcher.process_request_async(make_request("throw_error"))
        assert result.kind is ErrorKind.EXECUTED_FUNCTION_THROW

    async def test_sync_dispatch_inside_running_loop(self, make_request):
        dispatcher = Dispatcher(GreeterService(ServerConfig()))
        assert dispatcher.process_request(make_request("greet", {"name": '"Ada"'})) == Success('"Hello, Ada!"')

    async def test_sync_dispatch_inside_running_loop_reports_body_errors(self, make_request):
        class Failing:
            @exposed
            async def fail(self) -> None:
                raise ValueError("bad input")

        result = Dispatcher(Failing()).process_request(make_request("fail"))
        assert result == Failure(ErrorKind.EXECUTED_FUNCTION_THROW, "ValueError: bad input")

    async def test_local_transport_from_async_code(self):
        transport = LocalTransport(GreeterService(ServerConfig()))
        payload = json.dumps({"functionName": "greet", "functionArgs": {"1": '"Ada"'}}).encode()
        assert json.loads(transport.post(payload)) == {"success": True, "value": '"Hello, Ada!"'}


class TestHandle:
    def test_bytes_in_bytes_out(self, dispatcher):
        payload = json.dumps({"functionName": "add", "functionArgs": {"a": "3", "b": "5"}}).encode()
        assert json.loads(dispatcher.handle(payload)) == {"success": True, "value": "8"}

    def test_failure_wire_form(self, dispatcher):
        payload = json.dumps({"functionName": "multiply", "functionArgs": {}}).encode()
        body = json.loads(dispatcher.handle(payload))
        assert body["success"] is False
        assert body["error"]["kind"] == "NoMatchingFunctionFound"

    @pytest.mark.parametrize("payload", [b"", b"not json", b"{"])
    def test_unreadable_body(self, dispatcher, payload):
        body = json.loads(dispatcher.handle(payload))
        assert body["error"]["kind"] == "IncorrectFunctionName"

    async def test_handle_async(self, dispatcher):
        payload = json.dumps({"functionName": "hello", "functionArgs": {}}).encode()
        assert json.loads(await dispatcher.handle_async(payload)) == {"success": True, "value": '"Hello, World!"'}
