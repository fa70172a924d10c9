"""Tests for warble.container: service resolution."""

import threading
from collections import OrderedDict

import pytest

from warble.config import DispatchConfig
from warble.container import Container, default_container
from warble.context import request_var
from warble.errors import ConfigurationError
from warble.http.request import Request
from warble.http.response import Response


class Counter:
    def __init__(self) -> None:
        self.calls = 0


class TestContainer:
    def test_factory_called_every_get(self) -> None:
        container = Container()
        container.provide("counter", Counter)

        first = container.get("counter")
        second = container.get("counter")

        assert isinstance(first, Counter)
        assert first is not second

    def test_instance_is_shared(self) -> None:
        container = Container()
        shared = Counter()
        container.instance("counter", shared)

        assert container.get("counter") is shared
        assert container.get("counter") is shared

    def test_provide_replaces_instance(self) -> None:
        container = Container()
        container.instance("svc", "old")
        container.provide("svc", lambda: "new")

        assert container.get("svc") == "new"

    def test_instance_replaces_provider(self) -> None:
        container = Container()
        container.provide("svc", lambda: "factory")
        container.instance("svc", "instance")

        assert container.get("svc") == "instance"

    def test_has(self) -> None:
        container = Container()
        container.provide("svc", object)

        assert container.has("svc")
        assert not container.has("other")

    def test_import_path_dotted(self) -> None:
        result = Container().get("collections.OrderedDict")
        assert isinstance(result, OrderedDict)

    def test_import_path_colon(self) -> None:
        result = Container().get("warble.http.response:Response")
        assert isinstance(result, Response)

    def test_unknown_module(self) -> None:
        with pytest.raises(ConfigurationError, match="no_such_module"):
            Container().get("no_such_module.Thing")

    def test_unknown_attribute(self) -> None:
        with pytest.raises(ConfigurationError, match="collections.Nope"):
            Container().get("collections.Nope")

    def test_bare_name_is_not_an_import_path(self) -> None:
        with pytest.raises(ConfigurationError, match="SomeClass"):
            Container().get("SomeClass")

    def test_non_callable_target(self) -> None:
        with pytest.raises(ConfigurationError, match="non-callable"):
            Container().get("warble.__version__")

    def test_concurrent_resolution(self) -> None:
        container = Container()
        container.provide("counter", Counter)
        results: list[Counter] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(50):
                value = container.get("counter")
                with lock:
                    results.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 400
        assert all(isinstance(r, Counter) for r in results)
        assert len({id(r) for r in results}) == 400


class TestDefaultContainer:
    def test_response_service_is_fresh(self) -> None:
        container = default_container()
        first = container.get("warble.http.Response")

        assert isinstance(first, Response)
        assert first.body == ""

    def test_request_service_outside_request(self) -> None:
        request = default_container().get("warble.http.Request")
        assert isinstance(request, Request)
        assert request.path == "/"

    def test_request_service_reads_context(self) -> None:
        current = Request(method="POST", path="/submit")
        token = request_var.set(current)
        try:
            assert default_container().get("warble.http.Request") is current
        finally:
            request_var.reset(token)

    def test_custom_service_ids(self) -> None:
        config = DispatchConfig(request_service="request", response_service="response")
        container = default_container(config)

        assert isinstance(container.get("request"), Request)
        assert isinstance(container.get("response"), Response)
