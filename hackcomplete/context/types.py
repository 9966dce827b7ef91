from enum import Enum


class CompletionKind(Enum):
    """What the token under the cursor is being completed as."""

    IDENTIFIER = "identifier"        # function/global/class reference
    NEW_INSTANCE = "new"             # class name after `new`
    TYPE_HINT = "type"               # type annotation position
    CLASS_MEMBER = "class_member"    # C::x or $c->x
    LOCAL_VARIABLE = "local"         # $x


class ClassKind(Enum):
    """Kind of a class-like declaration."""

    ABSTRACT = "abstract"
    NORMAL = "normal"
    INTERFACE = "interface"
    TRAIT = "trait"
    ENUM = "enum"


class TypePhase(Enum):
    """Whether a captured type still needs localizing."""

    DECL = "decl"
    LOCL = "locl"
