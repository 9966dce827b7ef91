"""
Typechecker collaborator interfaces.

The completion engine consumes a typing environment and a declaration
provider as opaque services. Host pipelines implement these on top of
their own typechecker.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hackcomplete.typechecker.types import (
    ClassInfo,
    ClassRef,
    DeclTy,
    FunType,
    PhaseTy,
    Ty,
    Visibility,
    render_type,
)


class TypingEnvironment(ABC):
    """Typing environment captured at a hook invocation."""

    @abstractmethod
    def get_local(self, ident: int) -> Ty:
        """Current type of the local variable with identifier `ident`."""
        pass

    @abstractmethod
    def get_self(self) -> Ty:
        """Type of the enclosing class (reason is trivial outside classes)."""
        pass

    @abstractmethod
    def is_static(self) -> bool:
        """Whether the environment is inside a static method."""
        pass

    @abstractmethod
    def localize(self, ty: Ty) -> Ty:
        """Substitute the enclosing generic context into a declared type."""
        pass

    @abstractmethod
    def is_sub_type(self, ty: Ty, super_ty: Ty) -> bool:
        pass

    @abstractmethod
    def is_visible(
        self, visibility: Visibility, cid: ClassRef, class_info: ClassInfo
    ) -> bool:
        """Whether a member with `visibility` is accessible through `cid`."""
        pass

    def print_type(self, ty: Ty) -> str:
        """Render a localized type with namespaces stripped."""
        return render_type(ty)


class DeclProvider(ABC):
    """Access to declarations known to the typechecker."""

    @abstractmethod
    def get_class(self, name: str) -> ClassInfo | None:
        pass

    @abstractmethod
    def get_fun(self, name: str) -> FunType | None:
        pass

    @abstractmethod
    def empty_env(self) -> TypingEnvironment:
        """A fresh environment for sessions that never captured one."""
        pass


def localize_phase(env: TypingEnvironment, phase_ty: PhaseTy) -> Ty:
    """Turn a captured type into a localized one; localized types pass through."""
    if isinstance(phase_ty, DeclTy):
        return env.localize(phase_ty.ty)
    return phase_ty.ty
