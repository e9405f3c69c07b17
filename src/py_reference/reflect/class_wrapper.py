"""Class wrappers and inheritance-aware member resolution."""

from __future__ import annotations

import abc
import enum
import functools
import inspect
import logging
import re
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any

from py_reference.exceptions import UnsupportedOperationError
from py_reference.reflect.capabilities import HasSignature, Writable
from py_reference.reflect.elements import (
    NO_VALUE,
    ClassConstantWrapper,
    ClassElementWrapper,
    EnumCaseWrapper,
    MethodWrapper,
    PropertyWrapper,
)
from py_reference.reflect.structure import unwrap_callable
from py_reference.reflect.wrapper import ReflectionWrapper
from py_reference.util import (
    CONSTANT_NAME_PATTERN,
    PRIVATE,
    PROTECTED,
    PUBLIC,
    demangle,
    is_dunder,
    is_stdlib_module,
    is_sunder,
    qualified_name,
)

if TYPE_CHECKING:
    from py_reference.code_index import CodeIndex
    from py_reference.reflect.namespace import NamespaceWrapper

logger = logging.getLogger(__name__)

CLASS = "class"
INTERFACE = "interface"
TRAIT = "trait"
ENUM = "enum"

# Bookkeeping attributes set by typing/abc machinery on user classes
IGNORED_ATTRIBUTES = frozenset(
    {
        "_is_protocol",
        "_is_runtime_protocol",
        "_abc_impl",
        "_ignore_",
        "_order_",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
    }
)
# Bases that carry no documentation value in the heritage header
SILENT_BASES = (object, abc.ABC, typing.Generic, typing.Protocol)

# Regex: ClassVar[...] annotation, qualified or not
CLASS_VAR_PATTERN = re.compile(r"^(?:typing\.)?ClassVar\b")


def class_kind(cls: type) -> str:
    """Classify a class as ``class``, ``interface``, ``trait`` or ``enum``."""
    if issubclass(cls, enum.Enum):
        return ENUM
    if _is_interface(cls):
        return INTERFACE
    if cls.__name__.endswith("Mixin"):
        return TRAIT
    return CLASS


def _is_interface(cls: type) -> bool:
    if cls.__dict__.get("_is_protocol", False):
        return True
    if not inspect.isabstract(cls):
        return False
    local_methods = [
        raw
        for raw in vars(cls).values()
        if isinstance(raw, (staticmethod, classmethod)) or inspect.isfunction(raw)
    ]
    return bool(local_methods) and all(
        getattr(raw, "__isabstractmethod__", False) for raw in local_methods
    )


def _own_annotations(cls: type) -> dict[str, Any]:
    try:
        return dict(inspect.get_annotations(cls))
    except NameError as e:
        logger.debug("Unresolvable annotations on %s: %s", qualified_name(cls), e)
        return {}


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return bool(CLASS_VAR_PATTERN.match(annotation))
    return typing.get_origin(annotation) is typing.ClassVar or annotation is typing.ClassVar


@dataclass
class _Members:
    methods: dict[str, MethodWrapper] = field(default_factory=dict)
    properties: dict[str, PropertyWrapper] = field(default_factory=dict)
    constants: dict[str, ClassConstantWrapper] = field(default_factory=dict)


class ClassWrapper(Writable, HasSignature, ReflectionWrapper):
    """Class of the indexed namespace.

    Members are resolved along the MRO (first definition wins) and built
    lazily on first access. Stdlib classes in the MRO (``object``, ``Enum``,
    ``Protocol`` ...) contribute no members.

    Attributes:
        TYPE: Kind discriminator (``class``, ``interface``, ``trait``, ``enum``).
    """

    TYPE = CLASS
    KIND = "class"
    TYPE_LABELS = {CLASS: "Class", INTERFACE: "Interface", TRAIT: "Trait", ENUM: "Enum"}

    def __init__(self, reflection: type, code_index: CodeIndex | None = None):
        super().__init__(reflection, qualified_name(reflection), code_index)

    @property
    def short_name(self) -> str:
        return self.reflection.__name__

    @property
    def module_name(self) -> str:
        return self.reflection.__module__

    @property
    def type_label(self) -> str:
        return self.TYPE_LABELS[self.TYPE]

    @property
    def declaring_namespace(self) -> NamespaceWrapper | None:
        return self.code_index.namespaces.get(self.module_name)

    @cached_property
    def will_be_in_public_api(self) -> bool:
        return self.code_index.api_definition.is_part_of_public_api(self)

    # -------------------------------------------------------------------------
    # Flags
    # -------------------------------------------------------------------------

    def is_user_defined(self) -> bool:
        if is_stdlib_module(self.module_name):
            return False
        try:
            return inspect.getsourcefile(self.reflection) is not None
        except TypeError:
            return False

    def is_abstract(self) -> bool:
        return inspect.isabstract(self.reflection)

    def is_final(self) -> bool:
        # typing.final sets __final__ on the decorated class only
        return bool(self.reflection.__dict__.get("__final__", False))

    def get_modifier_names(self) -> list[str]:
        if self.TYPE != CLASS:
            return []
        modifiers = []
        if self.is_abstract():
            modifiers.append("abstract")
        if self.is_final():
            modifiers.append("final")
        return modifiers

    # -------------------------------------------------------------------------
    # Heritage
    # -------------------------------------------------------------------------

    def _heritage_bases(self) -> list[type]:
        return [base for base in self.reflection.__bases__ if base not in SILENT_BASES]

    @property
    def parent_names(self) -> list[str]:
        """Qualified names of the extended classes, in declaration order."""
        if self.TYPE == INTERFACE:
            return [qualified_name(b) for b in self._heritage_bases()]
        return [
            qualified_name(b) for b in self._heritage_bases() if class_kind(b) != INTERFACE
        ]

    @property
    def interface_names(self) -> list[str]:
        if self.TYPE == INTERFACE:
            return []
        return [
            qualified_name(b) for b in self._heritage_bases() if class_kind(b) == INTERFACE
        ]

    def get_parent_wrappers(self) -> list[ClassWrapper]:
        """Extended classes that are part of the index."""
        parents = (self.code_index.get_class_wrapper(name) for name in self.parent_names)
        return [parent for parent in parents if parent is not None]

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    @cached_property
    def _members(self) -> _Members:
        members = _Members()
        seen: set[str] = set()
        for klass in self.reflection.__mro__:
            if klass is object or is_stdlib_module(klass.__module__):
                continue
            self._collect_from(klass, members, seen)
        return members

    def _skipped_names(self) -> set[str]:
        return set()

    def _collect_from(self, klass: type, members: _Members, seen: set[str]) -> None:
        annotations = _own_annotations(klass)
        own = vars(klass)
        raw_names = list(annotations)
        raw_names += [n for n in own if n not in annotations]
        raw_names += [
            n
            for n in getattr(klass, "__static_attributes__", ())
            if n not in own and n not in annotations
        ]
        skipped = self._skipped_names()

        for raw_name in raw_names:
            name = demangle(raw_name, klass)
            if name in seen or raw_name in skipped or raw_name in IGNORED_ATTRIBUTES:
                continue
            raw = own.get(raw_name, NO_VALUE)
            annotation = annotations.get(raw_name)

            if isinstance(raw, (staticmethod, classmethod)) or inspect.isroutine(raw):
                function = unwrap_callable(raw)
                if is_sunder(name) or is_stdlib_module(getattr(function, "__module__", "x")):
                    continue
                seen.add(name)
                members.methods[name] = MethodWrapper(raw, name, self, klass)
            elif isinstance(raw, (property, functools.cached_property)):
                seen.add(name)
                members.properties[name] = PropertyWrapper(raw, name, self, klass)
            elif is_dunder(name) or is_sunder(name) or inspect.isclass(raw):
                continue
            elif raw is not NO_VALUE and CONSTANT_NAME_PATTERN.match(name):
                seen.add(name)
                members.constants[name] = ClassConstantWrapper(
                    raw, name, self, klass, annotation=annotation
                )
            else:
                seen.add(name)
                if inspect.ismemberdescriptor(raw):
                    raw = NO_VALUE
                if raw_name in annotations:
                    static = _is_class_var(annotation)
                else:
                    static = raw is not NO_VALUE
                members.properties[name] = PropertyWrapper(
                    raw, name, self, klass, annotation=annotation, static=static
                )

    @property
    def methods(self) -> dict[str, MethodWrapper]:
        return self._members.methods

    @property
    def properties(self) -> dict[str, PropertyWrapper]:
        return self._members.properties

    @property
    def constants(self) -> dict[str, ClassConstantWrapper]:
        return self._members.constants

    def get_element_by_name(self, name: str) -> ClassElementWrapper | None:
        """Member lookup: methods first, then properties, then constants.

        Private names are accepted mangled (``_Cls__x``) or as written (``__x``).
        """
        name = demangle(name, self.reflection)
        for members in (self.methods, self.properties, self.constants):
            if name in members:
                return members[name]
        return None

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter_reflection(
        self,
        members: Mapping[str, ClassElementWrapper],
        public: bool = True,
        protected: bool = True,
        private: bool = True,
        static: bool = True,
        non_static: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, ClassElementWrapper]:
        """Members matching every switch, sorted case-insensitively by name.

        Each flag is an inclusion switch: ``private=False`` drops every
        private member. Methods not implemented in Python are always dropped.
        """
        visibility = {PUBLIC: public, PROTECTED: protected, PRIVATE: private}
        kept = []
        for member in members.values():
            if isinstance(member, MethodWrapper) and not member.is_user_defined():
                continue
            if not visibility[member.visibility]:
                continue
            if not (static if member.is_static() else non_static):
                continue
            if not (local if member.is_local_to(self) else non_local):
                continue
            kept.append(member)
        return {m.name: m for m in sorted(kept, key=lambda m: m.name.lower())}

    def filter_api_reflection(
        self, members: Mapping[str, ClassElementWrapper]
    ) -> dict[str, ClassElementWrapper]:
        if not self.will_be_in_public_api:
            return {}
        return {name: m for name, m in members.items() if m.will_be_in_public_api}

    def get_all_user_defined_methods(
        self,
        public: bool = True,
        protected: bool = True,
        private: bool = True,
        static: bool = True,
        non_static: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, MethodWrapper]:
        return self.filter_reflection(
            self.methods, public, protected, private, static, non_static, local, non_local
        )

    def get_all_properties(
        self,
        public: bool = True,
        protected: bool = True,
        private: bool = True,
        static: bool = True,
        non_static: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, PropertyWrapper]:
        return self.filter_reflection(
            self.properties, public, protected, private, static, non_static, local, non_local
        )

    def get_all_constants(
        self,
        public: bool = True,
        protected: bool = True,
        private: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, ClassConstantWrapper]:
        return self.filter_reflection(
            self.constants, public, protected, private, True, True, local, non_local
        )

    def get_all_api_methods(
        self,
        static: bool = True,
        non_static: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, MethodWrapper]:
        return self.filter_api_reflection(
            self.get_all_user_defined_methods(
                protected=False,
                private=False,
                static=static,
                non_static=non_static,
                local=local,
                non_local=non_local,
            )
        )

    def get_all_api_properties(
        self,
        static: bool = True,
        non_static: bool = True,
        local: bool = True,
        non_local: bool = True,
    ) -> dict[str, PropertyWrapper]:
        return self.filter_api_reflection(
            self.get_all_properties(
                protected=False,
                private=False,
                static=static,
                non_static=non_static,
                local=local,
                non_local=non_local,
            )
        )

    def get_all_api_constants(
        self, local: bool = True, non_local: bool = True
    ) -> dict[str, ClassConstantWrapper]:
        return self.filter_api_reflection(
            self.get_all_constants(
                protected=False, private=False, local=local, non_local=non_local
            )
        )

    # -------------------------------------------------------------------------
    # Signature
    # -------------------------------------------------------------------------

    def _signature_header(self) -> str:
        head = " ".join([*self.get_modifier_names(), self.TYPE, self.name])
        if self.parent_names:
            head += " extends " + ", ".join(self.parent_names)
        if self.interface_names:
            head += " implements " + ", ".join(self.interface_names)
        return head

    def _signature_sections(self, only_api: bool) -> list[tuple[str, Mapping[str, Any]]]:
        if only_api:
            constants = self.get_all_api_constants
            properties = self.get_all_api_properties
            methods = self.get_all_api_methods
        else:
            constants = self.get_all_constants
            properties = self.get_all_properties
            methods = self.get_all_user_defined_methods

        return [
            ("Constants", constants(non_local=False)),
            ("Inherited Constants", constants(local=False)),
            ("Static Properties", properties(non_static=False, non_local=False)),
            ("Static Inherited Properties", properties(non_static=False, local=False)),
            ("Properties", properties(static=False, non_local=False)),
            ("Inherited Properties", properties(static=False, local=False)),
            ("Static Methods", methods(non_static=False)),
            ("Methods", methods(static=False, non_local=False)),
            ("Inherited Methods", methods(static=False, local=False)),
        ]

    def _member_signature(self, member: ClassElementWrapper) -> str:
        # Inherited constants and properties are prefixed with their declaring class
        if isinstance(member, MethodWrapper):
            return member.get_signature()
        return member.get_signature(with_class_name=not member.is_local_to(self))

    def get_signature(self, only_api: bool = False) -> str:
        """Declaration-style outline of the class.

        Args:
            only_api: Keep only members that are part of the public API.

        Returns:
            Header line, then one ``;``-terminated line per member, grouped in
            titled sections. Empty sections are left out.
        """
        lines = [self._signature_header(), "{"]
        for title, members in self._signature_sections(only_api):
            if not members:
                continue
            if len(lines) > 2:
                lines.append("")
            lines.append(f"    # {title}")
            lines.extend(f"    {self._member_signature(member)};" for member in members.values())
        lines.append("}")
        return "\n".join(lines) + "\n"

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------

    def get_page_directory(self) -> str:
        return "/ref/" + self.name.replace(".", "/")

    def get_page_path(self) -> str:
        return f"{self.get_page_directory()}/{self.TYPE}_{self.short_name}.md"


class InterfaceWrapper(ClassWrapper):
    """Protocol or fully abstract class."""

    TYPE = INTERFACE


class TraitWrapper(ClassWrapper):
    """Mixin class."""

    TYPE = TRAIT


class EnumWrapper(ClassWrapper):
    """Enum; its members are exposed as cases."""

    TYPE = ENUM

    def _skipped_names(self) -> set[str]:
        return set(self.reflection.__members__)

    @cached_property
    def cases(self) -> dict[str, EnumCaseWrapper]:
        return {
            name: EnumCaseWrapper(member, name, self, self.reflection)
            for name, member in self.reflection.__members__.items()
        }

    def is_backed(self) -> bool:
        return getattr(self.reflection, "_member_type_", object) is not object

    def get_backed_type(self) -> str:
        if not self.is_backed():
            raise UnsupportedOperationError("get_backed_type", f"non-backed {type(self).__name__}")
        return qualified_name(self.reflection._member_type_)

    @property
    def parent_names(self) -> list[str]:
        return [
            qualified_name(b)
            for b in self._heritage_bases()
            if not is_stdlib_module(b.__module__)
        ]

    @property
    def interface_names(self) -> list[str]:
        return []

    def get_element_by_name(self, name: str) -> ClassElementWrapper | None:
        return self.cases.get(name) or super().get_element_by_name(name)

    def _signature_header(self) -> str:
        head = super()._signature_header()
        if self.is_backed():
            head = head.replace(
                f"{self.TYPE} {self.name}", f"{self.TYPE} {self.name}: {self.get_backed_type()}", 1
            )
        return head

    def get_signature(self, only_api: bool = False) -> str:
        signature = super().get_signature(only_api)
        if not self.cases:
            return signature
        head, _, rest = signature.partition("{\n")
        cases = "".join(f"    case {case.get_signature()};\n" for case in self.cases.values())
        separator = "\n" if rest.strip() != "}" else ""
        return f"{head}{{\n    # Cases\n{cases}{separator}{rest}"


CLASS_WRAPPERS: dict[str, type[ClassWrapper]] = {
    CLASS: ClassWrapper,
    INTERFACE: InterfaceWrapper,
    TRAIT: TraitWrapper,
    ENUM: EnumWrapper,
}


def wrap_class(cls: type, code_index: CodeIndex | None = None) -> ClassWrapper:
    """Build the wrapper variant matching the kind of ``cls``."""
    return CLASS_WRAPPERS[class_kind(cls)](cls, code_index)
