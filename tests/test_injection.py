import functools

import pytest

from services import BadAnnotation, Broken, Clock, Recorder, SmtpMailer
from wireable import Container, DependencyResolutionError, InvalidArgumentError


@pytest.fixture
def container() -> Container:
    container = Container()
    container.set_parameters({"bar": "bar"})
    return container


def test_inject_static_method(container):
    result = container.inject_static_method(Recorder, "record_static", {"di": "%DI"})
    assert result == {"di": container, "foo": None, "bar": None}

    result = container.inject_static_method(Recorder, "record_static", {"di": "%DI", "foo": "foo"})
    assert result == {"di": container, "foo": "foo", "bar": None}

    result = container.inject_static_method(
        Recorder, "record_static", {"di": "%DI", "foo": "foo", "bar": ":bar"}
    )
    assert result == {"di": container, "foo": "foo", "bar": "bar"}


def test_inject_static_method_by_class_name(container):
    result = container.inject_static_method("services.Recorder", "record_static", {"foo": "foo"})

    assert result == {"di": container, "foo": "foo", "bar": None}


def test_inject_class_method(container):
    recorder = container.inject_static_method(Recorder, "build", {})

    assert isinstance(recorder, Recorder)
    assert recorder.di is container


def test_inject_static_method_requires_existing_method(container):
    with pytest.raises(InvalidArgumentError, match="has no method 'nope'"):
        container.inject_static_method(Recorder, "nope", {})


def test_inject_constructor(container):
    recorder = container.inject_constructor(Recorder, {"di": "%DI"})

    assert recorder.di is container


def test_inject_constructor_resolves_by_type(container):
    assert container.inject_constructor(Recorder).di is container


def test_inject_constructor_without_init_ignores_args(container):
    assert isinstance(container.inject_constructor(Clock, {"unused": "%DI"}), Clock)


def test_inject_constructor_by_class_name(container):
    mailer = container.inject_constructor("services.SmtpMailer", {"host": "mail.example.com"})

    assert isinstance(mailer, SmtpMailer)
    assert mailer.host == "mail.example.com"


def test_inject_constructor_of_unknown_class_name(container):
    with pytest.raises(DependencyResolutionError, match='"services.Nope"'):
        container.inject_constructor("services.Nope", {})


def test_inject_constructor_rejects_non_classes(container):
    with pytest.raises(InvalidArgumentError, match="is not a class"):
        container.inject_constructor(SmtpMailer(), {})


def test_unresolvable_annotation_names_the_missing_type(container):
    with pytest.raises(DependencyResolutionError) as exc_info:
        container.inject_constructor(Broken, {})
    assert exc_info.value.type_name == "DoesNotExist"


def test_unresolvable_annotation_is_ignored_when_argument_supplied(container):
    assert container.inject_constructor(Broken, {"missing": "%DI"}).missing is container


def test_unresolvable_dotted_annotation_names_the_missing_type(container):
    with pytest.raises(DependencyResolutionError) as exc_info:
        container.inject_constructor(BadAnnotation, {})
    assert exc_info.value.type_name == "os.Nope"
    assert container.inject_constructor(BadAnnotation, {"thing": 1}).thing == 1


def test_inject_method(container):
    recorder = Recorder(container)

    assert container.inject_method(recorder, "record", {"di": "%DI"})["di"] is container


def test_inject_method_requires_instance(container):
    with pytest.raises(InvalidArgumentError, match="is not an object instance"):
        container.inject_method(Recorder, "record", {})
    with pytest.raises(InvalidArgumentError):
        container.inject_method(None, "record", {})
    with pytest.raises(InvalidArgumentError):
        container.inject_method(functools, "partial", {})


def test_inject_method_requires_existing_method(container):
    with pytest.raises(InvalidArgumentError):
        container.inject_method(Recorder(container), "di", {})


def test_inject_function(container):
    def target(di: Container):
        return di

    assert container.inject_function(target, {"di": "%DI"}) is container
    assert container.inject_function(lambda di: di, {"di": "%DI"}) is container


def test_inject_function_by_name(container):
    assert container.inject_function("services.make_greeting", {"name": ":bar"}) == "Hello bar!"


def test_inject_function_with_partial(container):
    greet = functools.partial(lambda greeting, name: f"{greeting} {name}", "Hi")

    assert container.inject_function(greet, {"name": ":bar"}) == "Hi bar"


def test_inject_function_with_builtin(container):
    assert container.inject_function(len, {"obj": [1, 2, 3]}) == 3


@pytest.mark.parametrize("target", [42, "services.nope", "services.Recorder", Recorder, SmtpMailer()])
def test_inject_function_rejects_non_functions(container, target):
    with pytest.raises(InvalidArgumentError):
        container.inject_function(target, {})
