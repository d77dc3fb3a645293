"""Decompose a declared type into the class types it mentions.

Each class type is paired with a flag telling whether it is held as one of
many (array element or type argument) or as a single value::

    Order            -> {Order: False}
    List<Order>      -> {List<Order>: False, Order: True}
    Order[]          -> {Order: True}
    Map<K, List<V>>  -> {Map<K, List<V>>: False, K: True, List<V>: True, V: True}
"""

from __future__ import annotations

from typeweave.java.tree import ArrayType, ClassType, TypeRef, WildcardType


def analyze(type_ref: TypeRef) -> dict[ClassType, bool]:
    result: dict[ClassType, bool] = {}
    if isinstance(type_ref, ArrayType):
        element = type_ref.innermost
        if isinstance(element, ClassType):
            result[element] = True
            if element.is_generic:
                _collect(element, result)
    elif isinstance(type_ref, ClassType):
        if type_ref.is_generic:
            result[type_ref] = False
            for argument in type_ref.arguments:
                _collect(_denoted(argument), result)
        else:
            result[type_ref] = False
    return result


def _collect(type_ref: TypeRef | None, result: dict[ClassType, bool]) -> None:
    if not isinstance(type_ref, ClassType):
        return
    result[type_ref] = True
    for argument in type_ref.arguments or ():
        _collect(_denoted(argument), result)


def _denoted(argument: TypeRef) -> TypeRef | None:
    """The class type a type argument stands for, if any."""
    if isinstance(argument, WildcardType):
        if argument.bound is None:
            return None
        argument = argument.bound
    if isinstance(argument, ArrayType):
        return argument.innermost
    return argument
