"""
Type shapes shared with the typechecker.

These mirror what the host typechecker hands to the completion hooks:
positions, reasons, types, function signatures and class descriptors.
The completion engine only inspects them; it never infers or checks types.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Union

from hackcomplete.context.types import ClassKind, TypePhase
from hackcomplete.utils.names import strip_all_ns


@dataclass(frozen=True)
class Pos:
    """
    A span on a single line.

    `start` is the 0-based column of the first character, `end` the
    0-based column one past the last character.
    """

    filename: str
    line: int
    start: int
    end: int

    def length(self) -> int:
        return self.end - self.start

    def info(self) -> tuple[int, int, int]:
        """Return (line, 1-based start column, inclusive end column)."""
        return self.line, self.start + 1, self.end

    def to_absolute(self, root: Path | None = None) -> Pos:
        if not self.filename or root is None:
            return self
        path = Path(self.filename)
        if path.is_absolute():
            return self
        return replace(self, filename=str(root / path))

    def to_json(self) -> dict:
        line, char_start, char_end = self.info()
        return {
            "filename": self.filename,
            "line": line,
            "char_start": char_start,
            "char_end": char_end,
        }


NO_POS = Pos("", 0, 0, 0)


@dataclass(frozen=True)
class Reason:
    """Why a type was given; carries the witness position if there is one."""

    pos: Pos | None = None

    def is_none(self) -> bool:
        return self.pos is None

    def to_pos(self) -> Pos:
        return self.pos if self.pos is not None else NO_POS


NO_REASON = Reason()


@dataclass(frozen=True)
class PositionedName:
    pos: Pos
    name: str


# ===== Types =====


@dataclass(frozen=True)
class Ty:
    reason: Reason


@dataclass(frozen=True)
class AnyTy(Ty):
    pass


@dataclass(frozen=True)
class PrimTy(Ty):
    name: str


@dataclass(frozen=True)
class ApplyTy(Ty):
    name: str
    args: tuple[Ty, ...] = ()


@dataclass(frozen=True)
class GenericTy(Ty):
    name: str


@dataclass(frozen=True)
class FunTy(Ty):
    fun: FunType


class ArityKind(Enum):
    STANDARD = "standard"
    VARIADIC = "variadic"   # named variadic parameter: ...$rest
    ELLIPSIS = "ellipsis"   # bare trailing `...`


@dataclass(frozen=True)
class FunParam:
    name: str | None
    ty: Ty


@dataclass(frozen=True)
class FunArity:
    kind: ArityKind
    min: int = 0
    variadic: FunParam | None = None


@dataclass(frozen=True)
class FunType:
    pos: Pos
    params: tuple[FunParam, ...]
    ret: Ty
    arity: FunArity


def make_ft(pos: Pos, params: list[FunParam], ret: Ty) -> FunType:
    """Build a function type with standard arity taking exactly `params`."""
    return FunType(
        pos=pos,
        params=tuple(params),
        ret=ret,
        arity=FunArity(ArityKind.STANDARD, min=len(params)),
    )


# ===== Classes =====


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(frozen=True)
class ClassElt:
    ty: Ty
    visibility: Visibility = Visibility.PUBLIC
    origin: str = ""


@dataclass(frozen=True)
class ClassConst:
    ty: Ty


@dataclass
class ClassInfo:
    """Class descriptor as produced by the typechecker's decl heap."""

    name: str
    pos: Pos
    kind: ClassKind = ClassKind.NORMAL
    construct: ClassElt | None = None
    methods: dict[str, ClassElt] = field(default_factory=dict)
    props: dict[str, ClassElt] = field(default_factory=dict)
    smethods: dict[str, ClassElt] = field(default_factory=dict)
    sprops: dict[str, ClassElt] = field(default_factory=dict)
    consts: dict[str, ClassConst] = field(default_factory=dict)


class ClassRefKind(Enum):
    NAMED = "named"     # Foo::, new Foo
    SELF = "self"
    STATIC = "static"
    PARENT = "parent"
    EXPR = "expr"       # $obj->


@dataclass(frozen=True)
class ClassRef:
    """The receiver of a member access or the class of a `new`."""

    kind: ClassRefKind
    name: PositionedName | None = None


# ===== Phases =====


@dataclass(frozen=True)
class DeclTy:
    """A type as declared, before the enclosing generic context is applied."""

    ty: Ty

    @property
    def phase(self) -> TypePhase:
        return TypePhase.DECL


@dataclass(frozen=True)
class LoclTy:
    """A type already localized against a typing environment."""

    ty: Ty

    @property
    def phase(self) -> TypePhase:
        return TypePhase.LOCL


PhaseTy = Union[DeclTy, LoclTy]


# ===== Printing =====


def render_type(ty: Ty) -> str:
    """Render a type for display with namespace qualifiers stripped."""
    if isinstance(ty, AnyTy):
        return "_"
    if isinstance(ty, PrimTy):
        return ty.name
    if isinstance(ty, GenericTy):
        return ty.name
    if isinstance(ty, ApplyTy):
        name = strip_all_ns(ty.name)
        if ty.args:
            return f"{name}<{', '.join(render_type(a) for a in ty.args)}>"
        return name
    if isinstance(ty, FunTy):
        return _render_fun(ty.fun)
    raise TypeError(f"Cannot render {type(ty).__name__}")


def _render_fun(fun: FunType) -> str:
    params = [render_type(p.ty) for p in fun.params]
    if fun.arity.kind == ArityKind.VARIADIC and fun.arity.variadic:
        params.append(f"{render_type(fun.arity.variadic.ty)}...")
    elif fun.arity.kind == ArityKind.ELLIPSIS:
        params.append("...")
    return f"(function({', '.join(params)}): {render_type(fun.ret)})"
