from hackcomplete.context.types import ClassKind, CompletionKind


# Class kinds that may be offered for each completion kind.
# TYPE_HINT accepts every kind.
COMPLETABLE_CLASS_KINDS: dict[CompletionKind, frozenset[ClassKind]] = {
    CompletionKind.IDENTIFIER: frozenset({ClassKind.NORMAL, ClassKind.ABSTRACT}),
    CompletionKind.NEW_INSTANCE: frozenset({ClassKind.NORMAL}),
    CompletionKind.TYPE_HINT: frozenset(ClassKind),
}

CLASS_KIND_DESCRIPTIONS: dict[ClassKind, str] = {
    ClassKind.ABSTRACT: "abstract class",
    ClassKind.NORMAL: "class",
    ClassKind.INTERFACE: "interface",
    ClassKind.TRAIT: "trait",
    ClassKind.ENUM: "enum",
}

# Completion kinds resolved against the symbol index after the pipeline run
GLOBAL_COMPLETION_KINDS = frozenset(COMPLETABLE_CLASS_KINDS)


def should_complete_class(
    completion_kind: CompletionKind | None, class_kind: ClassKind
) -> bool:
    if completion_kind is None:
        return False
    return class_kind in COMPLETABLE_CLASS_KINDS.get(completion_kind, frozenset())


def should_complete_fun(completion_kind: CompletionKind | None) -> bool:
    return completion_kind == CompletionKind.IDENTIFIER


def describe_class_kind(class_kind: ClassKind) -> str:
    return CLASS_KIND_DESCRIPTIONS[class_kind]
