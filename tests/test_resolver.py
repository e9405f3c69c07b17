"""Tests for resolver module."""

from __future__ import annotations

import pytest

from py_reference.code_index import CodeIndex
from py_reference.diagnostics import ErrorCollector, ErrorLevel
from py_reference.reflect import ClassWrapper, MethodWrapper
from py_reference.resolver import ReferenceResolver, split_type_expression


@pytest.fixture
def loader(code_index: CodeIndex) -> ClassWrapper:
    return code_index.get_class_wrapper("acme_fixtures.references.Loader")


def _warnings(collector: ErrorCollector) -> list[str]:
    return [e.message for e in collector.get_errors(ErrorLevel.WARNING)]


class TestThrows:
    """Test @throws resolution."""

    def test_external_exception_no_warning(
        self, resolver: ReferenceResolver, loader: ClassWrapper, error_collector: ErrorCollector
    ):
        resolved = resolver.resolve_throws(loader.methods["load"])

        assert len(resolved) == 1
        assert resolved[0].destination is None
        assert resolved[0].is_external
        assert not resolved[0].is_dangling
        assert _warnings(error_collector) == []

    def test_dangling_exception_one_warning(
        self, resolver: ReferenceResolver, loader: ClassWrapper, error_collector: ErrorCollector
    ):
        resolved = resolver.resolve_throws(loader.methods["fetch"])

        assert len(resolved) == 1
        assert resolved[0].destination is None
        assert resolved[0].is_dangling
        warnings = error_collector.get_errors(ErrorLevel.WARNING)
        assert len(warnings) == 1
        assert "MissingError" in warnings[0].message
        assert warnings[0].element_name == "fetch"
        assert warnings[0].context == "Element: fetch"

    def test_raises_section(
        self, resolver: ReferenceResolver, loader: ClassWrapper, code_index: CodeIndex
    ):
        resolved = resolver.resolve_throws(loader.methods["check"])

        assert [r.reference for r in resolved] == ["AcmeError", "ValueError"]
        assert resolved[0].destination is code_index.get_class_wrapper("acme_fixtures.errors.AcmeError")
        assert resolved[0].description == "On invalid state."
        assert resolved[1].is_external


class TestSee:
    """Test @see resolution."""

    def test_member_reference_and_self_excluded(
        self, resolver: ReferenceResolver, loader: ClassWrapper, code_index: CodeIndex
    ):
        resolved = resolver.resolve_see_tags(loader.methods["load"])

        assert len(resolved) == 1
        assert resolved[0].destination is code_index.get_element("acme_fixtures.models.Child.own")

    def test_url(self, resolver: ReferenceResolver, loader: ClassWrapper):
        resolved = resolver.resolve_see_tags(loader)

        assert len(resolved) == 1
        assert resolved[0].is_url
        assert resolved[0].destination == "https://example.com/loader"

    def test_class_relative_member(self, resolver: ReferenceResolver, code_index: CodeIndex):
        child = code_index.get_class_wrapper("acme_fixtures.models.Child")
        base = code_index.get_class_wrapper("acme_fixtures.base.Base")

        resolved = resolver.resolve_see_tags(child.methods["own"])

        assert [r.destination for r in resolved] == [base.methods["inherited"]]

    def test_function_context(self, resolver: ReferenceResolver, code_index: CodeIndex, loader):
        function = code_index.get_function_wrapper("acme_fixtures.references.build_loader")

        resolved = resolver.resolve_see_tags(function)

        assert resolved[0].destination is loader

    def test_dangling_references_warn_once_each(
        self, resolver: ReferenceResolver, loader: ClassWrapper, error_collector: ErrorCollector
    ):
        resolved = resolver.resolve_see_tags(loader.methods["stale"])

        assert all(r.is_dangling for r in resolved)
        assert len(_warnings(error_collector)) == 2

    def test_builtin_is_external(self, resolver: ReferenceResolver, loader: ClassWrapper):
        resolved = resolver.resolve_reference(loader, "ValueError")

        assert resolved.destination is None
        assert resolved.is_external

    @pytest.mark.parametrize(
        "reference", ["smtplib.SMTPException", "somevendor.client.HTTPError"]
    )
    def test_dotted_reference_to_unloaded_module_is_external(
        self,
        resolver: ReferenceResolver,
        loader: ClassWrapper,
        error_collector: ErrorCollector,
        reference: str,
    ):
        resolved = resolver.resolve_reference(loader.methods["load"], reference)

        assert resolved.destination is None
        assert resolved.is_external
        assert not resolved.is_dangling
        assert _warnings(error_collector) == []

    def test_unknown_single_name_stays_dangling(
        self, resolver: ReferenceResolver, loader: ClassWrapper, error_collector: ErrorCollector
    ):
        resolved = resolver.resolve_reference(loader.methods["load"], "Vanished")

        assert resolved.is_dangling
        assert _warnings(error_collector) == [
            "Failed to resolve reference 'Vanished' (acme_fixtures.references.Vanished)"
        ]


class TestInheritedContext:
    """Inherited members resolve names where their docstring was written."""

    def test_unknown_name_qualified_with_declaring_module(
        self, resolver: ReferenceResolver, code_index: CodeIndex, error_collector: ErrorCollector
    ):
        inherited = code_index.get_element("acme_fixtures.models.Account.inherited")

        resolved = resolver.resolve_reference(inherited, "Unknown")

        assert resolved.is_dangling
        assert _warnings(error_collector) == [
            "Failed to resolve reference 'Unknown' (acme_fixtures.base.Unknown)"
        ]

    def test_declaring_module_then_attached_module(
        self, resolver: ReferenceResolver, code_index: CodeIndex
    ):
        inherited = code_index.get_element("acme_fixtures.models.Child.inherited")
        base = code_index.get_class_wrapper("acme_fixtures.base.Base")

        assert resolver.resolve_reference(inherited, "Base").destination is base
        assert resolver.resolve_type(inherited, "Child").destination is code_index.get_class_wrapper(
            "acme_fixtures.models.Child"
        )


class TestManualTags:
    """Test @book / @manual resolution."""

    def test_constants_resolved_in_tag_order(self, resolver: ReferenceResolver, code_index: CodeIndex):
        factory = code_index.get_class_wrapper("acme_fixtures.models.Factory")

        assert factory.get_resolved_manual_tags(resolver) == [
            "https://docs.example.com/guide",
            "https://docs.example.com/factories",
        ]

    def test_no_tags(self, resolver: ReferenceResolver, code_index: CodeIndex):
        base = code_index.get_class_wrapper("acme_fixtures.base.Base")

        assert base.get_resolved_manual_tags(resolver) is None

    def test_invalid_tag_warns(
        self, resolver: ReferenceResolver, code_index: CodeIndex, error_collector: ErrorCollector
    ):
        make = code_index.get_element("acme_fixtures.models.Factory.make")

        assert make.get_resolved_manual_tags(resolver) is None
        warnings = error_collector.get_errors(ErrorLevel.WARNING)
        assert len(warnings) == 1
        assert warnings[0].message.startswith("Invalid @manual or @book tag: ")
        assert "Nowhere" in warnings[0].message
        assert warnings[0].context == "Element: make"


class TestMarkdown:
    """Test Markdown rendering of references and types."""

    def test_render_link(self, resolver: ReferenceResolver, loader: ClassWrapper):
        load = loader.methods["load"]
        resolved = resolver.resolve_see_tags(load)[0]

        assert resolver.render(resolved, load.get_url_linker()) == (
            "[`Child.own()`](../../models/Child/method_own.md)"
        )

    def test_render_unresolved(self, resolver: ReferenceResolver, loader: ClassWrapper):
        load = loader.methods["load"]
        resolved = resolver.resolve_throws(load)[0]

        assert resolver.render(resolved, load.get_url_linker()) == "`json.JSONDecodeError`"

    def test_union_type(self, resolver: ReferenceResolver, loader: ClassWrapper):
        load = loader.methods["load"]

        markdown = resolver.type_to_markdown(load, load.get_return_type(), load.get_url_linker())

        assert markdown == "[`Child`](../../models/Child/class_Child.md) | `None`"

    def test_type_checking_import(self, resolver: ReferenceResolver, loader: ClassWrapper):
        fetch = loader.methods["fetch"]

        markdown = resolver.type_to_markdown(fetch, "Base", fetch.get_url_linker())

        assert markdown == "[`Base`](../../base/Base/class_Base.md)"

    def test_generic_type(self, resolver: ReferenceResolver, code_index: CodeIndex):
        own = code_index.get_element("acme_fixtures.models.Child.own")

        markdown = resolver.type_to_markdown(own, "list[Child | None]", own.get_url_linker())

        assert markdown == "`list`\\[[`Child`](class_Child.md) | `None`\\]"

    def test_constant_links_to_class_page(self, resolver: ReferenceResolver, code_index: CodeIndex):
        limit = code_index.get_class_wrapper("acme_fixtures.base.Base").constants["LIMIT"]
        linker = code_index.get_class_wrapper("acme_fixtures.models.Child").get_url_linker()

        assert resolver.link(limit, linker) == "[`Base.LIMIT`](../../base/Base/class_Base.md)"

    def test_method_link_text(self, code_index: CodeIndex):
        own = code_index.get_element("acme_fixtures.models.Child.own")

        assert isinstance(own, MethodWrapper)
        assert ReferenceResolver.link_text(own) == "Child.own()"


class TestSplitTypeExpression:
    """Test split_type_expression."""

    def test_top_level_only(self):
        parts, separators = split_type_expression("A | B[C | D] & E")

        assert parts == ["A ", " B[C | D] ", " E"]
        assert separators == ["|", "&"]

    def test_single(self):
        assert split_type_expression("int") == (["int"], [])
