import functools
import inspect
import logging
import os  # noqa: F401
from typing import Annotated, Callable

import pytest

from services import BadAnnotation, Broken, Mailer, SmtpMailer
from wireable.domain import Parameter
from wireable.errors import InvalidArgumentError
from wireable.signatures import parameters_of


def test_parameters_are_described_in_order():
    def service(untyped, mailer: Mailer, host: Annotated[str, "smtp_host"], retries=3, *args, **kwargs):
        pass

    assert parameters_of(service) == [
        Parameter("untyped"),
        Parameter("mailer", declared_type=Mailer),
        Parameter("host", declared_type=str, qualifier="smtp_host"),
        Parameter("retries", has_default=True),
        Parameter("args", inspect.Parameter.VAR_POSITIONAL),
        Parameter("kwargs", inspect.Parameter.VAR_KEYWORD),
    ]


def test_non_string_annotated_metadata_is_not_a_qualifier():
    def service(mailer: Annotated[Mailer, 42]):
        pass

    assert parameters_of(service) == [Parameter("mailer", declared_type=Mailer)]


def test_self_can_be_skipped():
    assert [p.name for p in parameters_of(SmtpMailer.__init__, skip_first=True)] == ["host", "port"]


def test_bound_methods_and_partials():
    def service(greeting: str, name: str):
        pass

    assert [p.name for p in parameters_of(SmtpMailer().send)] == ["to", "body"]
    assert parameters_of(functools.partial(service, "Hi")) == [Parameter("name", declared_type=str)]


def test_unresolvable_annotation_is_recorded():
    assert parameters_of(Broken.__init__, skip_first=True) == [
        Parameter("missing", unresolved_type="DoesNotExist")
    ]


def test_other_annotations_survive_an_unresolvable_one():
    def service(mailer: "Mailer", other: "Nowhere", plain: Callable):  # noqa: F821
        pass

    assert parameters_of(service) == [
        Parameter("mailer", declared_type=Mailer),
        Parameter("other", unresolved_type="Nowhere"),
        Parameter("plain", declared_type=Callable),
    ]


def test_uninspectable_target_is_rejected():
    with pytest.raises(InvalidArgumentError, match="Cannot inspect parameters"):
        parameters_of(42)


def test_unresolvable_dotted_annotation_is_recorded():
    def service(mailer: "Mailer", thing: "os.Nope"):  # noqa: F821
        pass

    assert parameters_of(BadAnnotation.__init__, skip_first=True) == [
        Parameter("thing", unresolved_type="os.Nope")
    ]
    assert parameters_of(service) == [
        Parameter("mailer", declared_type=Mailer),
        Parameter("thing", unresolved_type="os.Nope"),
    ]


def test_unevaluable_annotations_are_dropped_and_logged(monkeypatch, caplog):
    def refuse(*args, **kwargs):
        raise TypeError("not a module, class, method, or function")

    def service(mailer: Mailer):
        pass

    monkeypatch.setattr("wireable.signatures.get_type_hints", refuse)
    with caplog.at_level(logging.DEBUG, logger="wireable.signatures"):
        assert parameters_of(service) == [Parameter("mailer")]

    assert "carries no evaluable annotations" in caplog.text
