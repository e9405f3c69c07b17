"""Wrapper model over reflected Python elements."""

from py_reference.reflect.capabilities import HasParent, HasSignature, Writable
from py_reference.reflect.class_wrapper import (
    ClassWrapper,
    EnumWrapper,
    InterfaceWrapper,
    TraitWrapper,
    class_kind,
    wrap_class,
)
from py_reference.reflect.elements import (
    ClassConstantWrapper,
    ClassElementWrapper,
    EnumCaseWrapper,
    MethodWrapper,
    PropertyWrapper,
)
from py_reference.reflect.function_wrapper import FunctionWrapper
from py_reference.reflect.namespace import NamespaceWrapper
from py_reference.reflect.parameter import ParameterWrapper
from py_reference.reflect.wrapper import ReflectionWrapper

__all__ = [
    "ClassConstantWrapper",
    "ClassElementWrapper",
    "ClassWrapper",
    "EnumCaseWrapper",
    "EnumWrapper",
    "FunctionWrapper",
    "HasParent",
    "HasSignature",
    "InterfaceWrapper",
    "MethodWrapper",
    "NamespaceWrapper",
    "ParameterWrapper",
    "PropertyWrapper",
    "ReflectionWrapper",
    "TraitWrapper",
    "Writable",
    "class_kind",
    "wrap_class",
]
