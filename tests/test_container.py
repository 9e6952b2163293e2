import pytest

from gitlab_dashboard.container import Container
from gitlab_dashboard.exceptions import ConfigurationError, ResolutionError


class Service:
    def __init__(self, *deps):
        self.deps = deps


def test_singleton_resolves_same_instance():
    container = Container()
    container.register("Service", Service, singleton=True)

    assert container.resolve("Service") is container.resolve("Service")


def test_singleton_factory_runs_once():
    calls = []

    def factory():
        calls.append(1)
        return object()

    container = Container()
    container.register("Thing", factory, singleton=True)
    container.resolve("Thing")
    container.resolve("Thing")

    assert len(calls) == 1


def test_transient_resolves_distinct_instances_with_dependencies():
    container = Container()
    container.register("Settings", lambda: {"base": "x"}, singleton=True)
    container.register("Client", Service, dependencies=["Settings"])
    container.register("Controller", Service, dependencies=["Client", "Settings"])

    first = container.resolve("Controller")
    second = container.resolve("Controller")

    assert first is not second
    assert first.deps[0] is not second.deps[0]
    # Shared singleton dependency, passed in declaration order
    assert first.deps[1] is second.deps[1]
    assert first.deps[0].deps[0] is first.deps[1]


def test_dependencies_resolved_left_to_right():
    order = []

    def make(name):
        def factory(*deps):
            order.append(name)
            return name

        return factory

    container = Container()
    container.register("A", make("A"))
    container.register("B", make("B"))
    container.register("C", make("C"), dependencies=["A", "B"])

    container.resolve("C")

    assert order == ["A", "B", "C"]


def test_resolve_unregistered_name_fails():
    container = Container()
    with pytest.raises(ResolutionError):
        container.resolve("Missing")


def test_resolve_missing_dependency_fails():
    container = Container()
    container.register("Controller", Service, dependencies=["Missing"])

    with pytest.raises(ResolutionError, match="Missing"):
        container.resolve("Controller")


def test_cycle_is_detected():
    container = Container()
    container.register("A", Service, dependencies=["B"])
    container.register("B", Service, dependencies=["A"])

    with pytest.raises(ResolutionError, match="cycle"):
        container.resolve("A")


def test_self_dependency_is_a_cycle():
    container = Container()
    container.register("A", Service, dependencies=["A"], singleton=True)

    with pytest.raises(ResolutionError):
        container.resolve("A")


def test_failed_resolve_does_not_poison_later_resolves():
    container = Container()
    container.register("A", Service, dependencies=["B"])
    container.register("B", Service, dependencies=["A"])
    container.register("C", Service)

    with pytest.raises(ResolutionError):
        container.resolve("A")

    assert isinstance(container.resolve("C"), Service)


def test_diamond_dependencies_are_not_a_cycle():
    container = Container()
    container.register("Base", Service)
    container.register("Left", Service, dependencies=["Base"])
    container.register("Right", Service, dependencies=["Base"])
    container.register("Top", Service, dependencies=["Left", "Right"])

    assert len(container.resolve("Top").deps) == 2


def test_duplicate_registration_fails():
    container = Container()
    container.register("Service", Service)

    with pytest.raises(ConfigurationError):
        container.register("Service", Service)


def test_non_callable_factory_fails():
    container = Container()

    with pytest.raises(ConfigurationError):
        container.register("Service", "not callable")


def test_frozen_container_rejects_registration():
    container = Container()
    container.register("Service", Service)
    container.freeze()

    assert container.frozen
    assert "Service" in container
    with pytest.raises(ConfigurationError):
        container.register("Other", Service)


def test_instances_lists_built_singletons_only():
    container = Container()
    container.register("Single", Service, singleton=True)
    container.register("Transient", Service)
    container.resolve("Transient")

    assert list(container.instances()) == []

    single = container.resolve("Single")
    assert list(container.instances()) == [("Single", single)]
