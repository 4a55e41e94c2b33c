"""Tests for type resolvers."""

import json
import textwrap

import pytest
from json_butler.butler import JSONButler
from json_butler.resolvers import ImportTypeResolver, SourceFileTypeResolver
from json_butler.types import TypeResolutionError

TRACKER_SOURCE = textwrap.dedent('''
    import dataclasses


    @dataclasses.dataclass
    class Entity:
        id: int = 0


    @dataclasses.dataclass
    class Ticket(Entity):
        title: str = ""

        @dataclasses.dataclass
        class Comment:
            body: str = ""
''')


@pytest.fixture
def tracker_source(temp_dir):
    path = temp_dir / "tracker.py"
    path.write_text(TRACKER_SOURCE, encoding="utf-8")
    return path


class TestImportTypeResolver:
    """Tests for ImportTypeResolver class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = ImportTypeResolver()

    def test_resolve_dotted_name(self):
        """Test the longest importable prefix is the module."""
        handle = self.resolver.resolve_type("json.decoder.JSONDecoder")

        assert handle.type is json.JSONDecoder
        assert handle.is_built
        assert handle.qualified_name == "json.decoder.JSONDecoder"

    def test_resolve_colon_name(self):
        """Test explicit module and attribute separation."""
        assert self.resolver.resolve_type(" json:JSONDecoder ").type is json.JSONDecoder

    def test_resolve_package_type(self, temp_dir, monkeypatch):
        """Test types from an importable package."""
        package = temp_dir / "butler_fixture_inventory"
        package.mkdir()
        (package / "__init__.py").write_text("", encoding="utf-8")
        (package / "models.py").write_text(TRACKER_SOURCE, encoding="utf-8")
        monkeypatch.syspath_prepend(str(temp_dir))

        handle = self.resolver.resolve_type("butler_fixture_inventory.models.Ticket.Comment")

        assert handle.type.__qualname__ == "Ticket.Comment"
        assert handle.is_built

    def test_not_a_class(self):
        """Test functions are rejected."""
        with pytest.raises(TypeResolutionError) as exc_info:
            self.resolver.resolve_type("json.dumps")
        assert "is not a class" in str(exc_info.value)

    def test_unknown_module(self):
        """Test names without an importable module are rejected."""
        with pytest.raises(TypeResolutionError):
            self.resolver.resolve_type("no_such_butler_module.Thing")

    def test_unknown_attribute(self):
        """Test missing attributes are rejected."""
        with pytest.raises(TypeResolutionError) as exc_info:
            self.resolver.resolve_type("json:NoSuchType")
        assert exc_info.value.qualified_name == "json:NoSuchType"

    def test_unqualified_and_empty_names(self):
        """Test names without a module part are rejected."""
        for name in ("Thing", "", "   "):
            with pytest.raises(TypeResolutionError):
                self.resolver.resolve_type(name)


class TestSourceFileTypeResolver:
    """Tests for SourceFileTypeResolver class."""

    def test_resolve_unbuilt_type(self, tracker_source):
        """Test types loaded from a file are marked as unbuilt."""
        handle = SourceFileTypeResolver(str(tracker_source)).resolve_type("app.tracker.Ticket")

        assert handle.type.__name__ == "Ticket"
        assert not handle.is_built
        assert handle.source_path == str(tracker_source)

    def test_nested_type(self, tracker_source):
        """Test nested classes resolve by dotted suffix."""
        handle = SourceFileTypeResolver(str(tracker_source)).resolve_type("Ticket.Comment")
        assert handle.type.__qualname__ == "Ticket.Comment"

    def test_unbuilt_type_serializes_own_members(self, tracker_source):
        """Test inherited members are hidden for unbuilt types."""
        handle = SourceFileTypeResolver(str(tracker_source)).resolve_type("Ticket")
        result = JSONButler().serialize_type(handle)

        assert json.loads(result.json_string) == {"title": ""}

    def test_missing_type(self, tracker_source):
        """Test unknown names are rejected."""
        with pytest.raises(TypeResolutionError):
            SourceFileTypeResolver(str(tracker_source)).resolve_type("Invoice")

    def test_missing_file(self, temp_dir):
        """Test a missing source file is rejected."""
        with pytest.raises(TypeResolutionError) as exc_info:
            SourceFileTypeResolver(str(temp_dir / "absent.py")).resolve_type("Ticket")
        assert "not found" in str(exc_info.value)

    def test_broken_source(self, temp_dir):
        """Test sources that fail to execute are rejected."""
        path = temp_dir / "broken.py"
        path.write_text("class Ticket(MissingBase):\n    pass\n", encoding="utf-8")

        with pytest.raises(TypeResolutionError) as exc_info:
            SourceFileTypeResolver(str(path)).resolve_type("Ticket")
        assert "Loading" in str(exc_info.value)


ACCOUNT_SOURCE = textwrap.dedent('''
    from __future__ import annotations

    import dataclasses
    from typing import TYPE_CHECKING, Optional

    if TYPE_CHECKING:
        from billing.owners import Owner


    @dataclasses.dataclass
    class Address:
        street: str = ""


    @dataclasses.dataclass
    class Account:
        count: int = 0
        address: Optional[Address] = None
        owner: Optional[Owner] = None
''')


class TestUnbuiltAnnotations:
    """Tests for reflecting unbuilt sources with partly resolvable annotations."""

    def test_only_unresolvable_members_are_untyped(self, temp_dir):
        """Test resolvable members keep their types next to an unknown name."""
        path = temp_dir / "accounts.py"
        path.write_text(ACCOUNT_SOURCE, encoding="utf-8")
        handle = SourceFileTypeResolver(str(path)).resolve_type("billing.accounts.Account")

        members = {m.name: m for m in JSONButler().reflect_members(handle)}
        result = JSONButler().serialize_type(handle)

        assert members["count"].type_ref is int
        assert members["address"].type_ref.__name__ == "Address"
        assert json.loads(result.json_string) == {"count": 0, "address": {"street": ""}, "owner": None}


class TestResolverIsolation:
    """Tests for failures and module naming across resolvers."""

    def test_import_failure_becomes_resolution_error(self, temp_dir, monkeypatch):
        """Test arbitrary errors raised while importing are reported as resolution errors."""
        package = temp_dir / "butler_fixture_broken"
        package.mkdir()
        (package / "__init__.py").write_text("", encoding="utf-8")
        (package / "mod.py").write_text("raise RuntimeError('boom at import')\n", encoding="utf-8")
        monkeypatch.syspath_prepend(str(temp_dir))

        with pytest.raises(TypeResolutionError) as exc_info:
            ImportTypeResolver().resolve_type("butler_fixture_broken.mod.Thing")

        assert "boom at import" in str(exc_info.value)

    def test_same_stem_files_do_not_collide(self, temp_dir):
        """Test files sharing a name get their own modules."""
        first = temp_dir / "one" / "models.py"
        second = temp_dir / "two" / "models.py"
        for path, field_name in ((first, "alpha"), (second, "beta")):
            path.parent.mkdir()
            path.write_text(f"class Model:\n    {field_name}: int\n", encoding="utf-8")

        first_handle = SourceFileTypeResolver(str(first)).resolve_type("Model")
        second_handle = SourceFileTypeResolver(str(second)).resolve_type("Model")

        assert first_handle.type.__module__ != second_handle.type.__module__
        assert json.loads(JSONButler().serialize_type(first_handle).json_string) == {"alpha": 0}
        assert json.loads(JSONButler().serialize_type(second_handle).json_string) == {"beta": 0}
