"""
Tests for the completion-kind filters.
"""
import pytest

from hackcomplete.context.kind_filter import (
    GLOBAL_COMPLETION_KINDS,
    describe_class_kind,
    should_complete_class,
    should_complete_fun,
)
from hackcomplete.context.types import ClassKind, CompletionKind


@pytest.mark.parametrize(
    "completion_kind,class_kind,expected",
    [
        (CompletionKind.IDENTIFIER, ClassKind.NORMAL, True),
        (CompletionKind.IDENTIFIER, ClassKind.ABSTRACT, True),
        (CompletionKind.IDENTIFIER, ClassKind.INTERFACE, False),
        (CompletionKind.IDENTIFIER, ClassKind.TRAIT, False),
        (CompletionKind.IDENTIFIER, ClassKind.ENUM, False),
        (CompletionKind.NEW_INSTANCE, ClassKind.NORMAL, True),
        (CompletionKind.NEW_INSTANCE, ClassKind.ABSTRACT, False),
        (CompletionKind.NEW_INSTANCE, ClassKind.INTERFACE, False),
        (CompletionKind.CLASS_MEMBER, ClassKind.NORMAL, False),
        (CompletionKind.LOCAL_VARIABLE, ClassKind.NORMAL, False),
        (None, ClassKind.NORMAL, False),
    ],
)
def test_should_complete_class(completion_kind, class_kind, expected):
    assert should_complete_class(completion_kind, class_kind) is expected


@pytest.mark.parametrize("class_kind", list(ClassKind))
def test_type_hints_accept_every_class_kind(class_kind):
    assert should_complete_class(CompletionKind.TYPE_HINT, class_kind)


def test_functions_only_for_identifiers():
    assert should_complete_fun(CompletionKind.IDENTIFIER)
    assert not should_complete_fun(CompletionKind.NEW_INSTANCE)
    assert not should_complete_fun(CompletionKind.TYPE_HINT)
    assert not should_complete_fun(None)


def test_describe_class_kind():
    assert describe_class_kind(ClassKind.ABSTRACT) == "abstract class"
    assert describe_class_kind(ClassKind.NORMAL) == "class"
    assert describe_class_kind(ClassKind.INTERFACE) == "interface"
    assert describe_class_kind(ClassKind.TRAIT) == "trait"
    assert describe_class_kind(ClassKind.ENUM) == "enum"


def test_global_completion_kinds():
    assert GLOBAL_COMPLETION_KINDS == {
        CompletionKind.IDENTIFIER,
        CompletionKind.NEW_INSTANCE,
        CompletionKind.TYPE_HINT,
    }
