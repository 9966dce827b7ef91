from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from hackcomplete.typechecker.types import ClassElt, ClassInfo, ClassRef, Ty

if TYPE_CHECKING:
    from hackcomplete.typechecker.environment import TypingEnvironment


def visible_elt_types(
    env: TypingEnvironment,
    class_info: ClassInfo,
    cid: ClassRef,
    elts: Mapping[str, ClassElt],
) -> dict[str, Ty]:
    """Declared types of the elements of `elts` accessible through `cid`."""
    return {
        name: elt.ty
        for name, elt in elts.items()
        if env.is_visible(elt.visibility, cid, class_info)
    }


def member_types(
    env: TypingEnvironment,
    class_info: ClassInfo,
    cid: ClassRef,
    is_static: bool,
) -> dict[str, Ty]:
    """
    Members offered after `C::` (static) or `$c->` (instance).

    Static access lists static methods, static properties and constants;
    constants carry no visibility and are always listed. When a method and
    a property share a name, the method wins.

    Args:
        env: Environment at the access site
        class_info: Descriptor of the receiver's class
        cid: Receiver expression, used for the visibility check
        is_static: True for `::` access

    Returns:
        Member name -> declared type
    """
    if is_static:
        elts = {**class_info.sprops, **class_info.smethods}
        types = visible_elt_types(env, class_info, cid, elts)
        for name, const in class_info.consts.items():
            types[name] = const.ty
        return types

    elts = {**class_info.props, **class_info.methods}
    return visible_elt_types(env, class_info, cid, elts)
