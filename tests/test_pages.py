"""Tests for formatters and page inputs."""

from __future__ import annotations

from py_reference.code_index import CodeIndex
from py_reference.diagnostics import ErrorCollector, ErrorLevel
from py_reference.formatters import ClassFormatter, PublicApiClassFormatter
from py_reference.pages import (
    ApiSummaryInput,
    ApiSummaryPage,
    ClassPageInput,
    FunctionPageInput,
    MethodPageInput,
    NamespacePageInput,
    PropertyPageInput,
)
from py_reference.resolver import ReferenceResolver


class TestClassFormatter:
    """Test ClassFormatter."""

    def test_api_index(self, code_index: CodeIndex, resolver: ReferenceResolver):
        account = code_index.get_class_wrapper("acme_fixtures.models.Account")
        formatter = PublicApiClassFormatter(account, resolver)

        assert list(formatter.index) == ["constants", "static_properties", "properties", "methods"]
        assert list(formatter.constants) == ["LIMIT"]
        assert list(formatter.static_properties) == ["currency"]
        assert list(formatter.properties) == ["balance", "owner"]
        assert list(formatter.methods) == ["inherited", "overridden", "to_json"]

    def test_entries(self, code_index: CodeIndex, resolver: ReferenceResolver):
        account = code_index.get_class_wrapper("acme_fixtures.models.Account")
        formatter = PublicApiClassFormatter(account, resolver)

        balance = formatter.properties["balance"]
        assert balance.type == "`float`"
        assert balance.summary == "Current balance."
        assert balance.link == "property_balance.md"
        inherited = formatter.methods["inherited"]
        assert inherited.return_type == "`int`"
        assert inherited.link == "../../base/Base/method_inherited.md"
        assert formatter.constants["LIMIT"].link is None
        assert formatter.constants["LIMIT"].default_value == "10"

    def test_plain_types_without_resolver(self, code_index: CodeIndex):
        account = code_index.get_class_wrapper("acme_fixtures.models.Account")
        formatter = ClassFormatter(account)

        assert formatter.properties["balance"].type == "float"
        assert "_token" in formatter.properties
        assert "__init__" in formatter.methods


class TestPageInputs:
    """Test page inputs."""

    def test_class_page(self, code_index: CodeIndex, resolver: ReferenceResolver):
        loader = code_index.get_class_wrapper("acme_fixtures.references.Loader")
        page = ClassPageInput(loader, resolver, "https://github.com/acme/repo/blob/main")

        assert page.template == "class"
        assert page.page_path == "/ref/acme_fixtures/references/Loader/class_Loader.md"
        assert page.class_type == "Class"
        assert page.see_also == ["[https://example.com/loader](https://example.com/loader)"]
        assert page.parents == ["`json.decoder.JSONDecoder`"]
        assert page.breadcrumb.endswith(" . **Loader**")
        assert page.signature.startswith("class acme_fixtures.references.Loader extends")
        assert page.source_link.startswith(
            "https://github.com/acme/repo/blob/main/acme_fixtures/references.py#L"
        )

    def test_no_source_link_without_base(self, code_index: CodeIndex, resolver: ReferenceResolver):
        loader = code_index.get_class_wrapper("acme_fixtures.references.Loader")

        assert ClassPageInput(loader, resolver).source_link is None

    def test_method_page(self, code_index: CodeIndex, resolver: ReferenceResolver):
        fetch = code_index.get_element("acme_fixtures.references.Loader.fetch")
        page = MethodPageInput(fetch, resolver)

        assert page.page_path == "/ref/acme_fixtures/references/Loader/method_fetch.md"
        assert page.signature == "def Loader.fetch(key: str) -> Base"
        assert page.return_type == "[`Base`](../../base/Base/class_Base.md)"
        assert page.throws == ["`MissingError`: when the key is unknown."]
        assert page.parameters == [
            {
                "name": "key",
                "signature": "key: str",
                "type": "`str`",
                "default_value": None,
                "description": "",
            }
        ]

    def test_see_also_with_description(self, code_index: CodeIndex, resolver: ReferenceResolver):
        load = code_index.get_element("acme_fixtures.references.Loader.load")
        page = MethodPageInput(load, resolver)

        assert page.see_also == ["[`Child.own()`](../../models/Child/method_own.md)"]
        assert page.throws == ["`json.JSONDecodeError`: when the payload is invalid."]

    def test_function_page(self, code_index: CodeIndex, resolver: ReferenceResolver):
        build_loader = code_index.get_function_wrapper("acme_fixtures.references.build_loader")
        page = FunctionPageInput(build_loader, resolver)

        assert page.template == "function"
        assert page.return_type == "[`Loader`](Loader/class_Loader.md)"
        assert page.parameters[0]["default_value"] == "False"
        assert page.signature == "def acme_fixtures.references.build_loader(strict: bool = False) -> Loader"

    def test_property_page(self, code_index: CodeIndex, resolver: ReferenceResolver):
        currency = code_index.get_element("acme_fixtures.models.Account.currency")
        page = PropertyPageInput(currency, resolver)

        assert page.page_path == "/ref/acme_fixtures/models/Account/static_property_currency.md"
        assert page.signature == "static Account.currency: str = 'EUR'"
        assert page.type == "`str`"
        assert page.default_value == "'EUR'"

    def test_namespace_page(self, code_index: CodeIndex):
        page = NamespacePageInput(code_index.namespaces["acme_fixtures.models"])

        grouped = {kind: [c.short_name for c in classes] for kind, classes in page.classes_by_kind.items()}
        assert grouped == {
            "Class": ["Account", "Child", "RoundTrip", "Square"],
            "Enum": ["Status"],
            "Interface": ["Drawable"],
            "Trait": ["SerializerMixin"],
        }
        assert page.functions == []
        assert page.breadcrumb == "[acme_fixtures](../readme.md) . **models**"

    def test_api_summary(self, code_index: CodeIndex):
        page = ApiSummaryInput(code_index)

        assert page.page_path == "/readme.md"
        assert page.page_directory == "/"
        assert len(page.namespaces) == len(code_index.namespaces)
        assert page.url_linker.to(code_index.namespaces["acme_fixtures.models"]) == (
            "ref/acme_fixtures/models/readme.md"
        )

    def test_custom_summary_path(self):
        page = ApiSummaryPage("docs/api.md")

        assert page.get_page_path() == "/docs/api.md"
        assert page.get_page_directory() == "/docs"

    def test_rendering_collects_dangling_warning(
        self, code_index: CodeIndex, resolver: ReferenceResolver, error_collector: ErrorCollector
    ):
        fetch = code_index.get_element("acme_fixtures.references.Loader.fetch")
        page = MethodPageInput(fetch, resolver)

        page.throws
        page.throws

        assert error_collector.get_error_count(ErrorLevel.WARNING) == 1

    def test_manual_links(self, code_index: CodeIndex, resolver: ReferenceResolver):
        factory = code_index.get_class_wrapper("acme_fixtures.models.Factory")

        assert ClassPageInput(factory, resolver).manual_links == [
            "https://docs.example.com/guide",
            "https://docs.example.com/factories",
        ]

    def test_invalid_manual_link_dropped_with_warning(
        self, code_index: CodeIndex, resolver: ReferenceResolver, error_collector: ErrorCollector
    ):
        make = code_index.get_element("acme_fixtures.models.Factory.make")
        page = MethodPageInput(make, resolver)

        assert page.manual_links == []
        assert page.manual_links == []
        assert error_collector.get_error_count(ErrorLevel.WARNING) == 1
        assert page.return_type == "`int`"
