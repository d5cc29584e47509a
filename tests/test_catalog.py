"""Tests for the type catalog and its artifact calculator."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from bindgraph import CatalogCalculator, CatalogError, ConverterSet, Direction, Key, Request, TypeCatalog, build_graph, load_catalog
from bindgraph._catalog import FieldSpec, TypeEntry, UnsupportedKind, converter_name, type_hash, unique_name


def _build(types: dict, *seeds: Request, **settings: object):
    catalog = TypeCatalog.model_validate({"settings": settings, "types": types})
    return build_graph(seeds, CatalogCalculator(catalog))


class TestNaming:
    def test_identifier(self) -> None:
        assert unique_name("Point") == "Point"

    def test_pointer_and_slice(self) -> None:
        assert unique_name("*Point") == "ptr_Point"
        assert unique_name("**Point") == "ptr_ptr_Point"
        assert unique_name("[]*Point") == "slice_ptr_Point"

    def test_other_descriptions_are_hashed(self) -> None:
        name = unique_name("func(int) string")
        assert name == f"func_int_string_{type_hash('func(int) string')}"
        assert name != unique_name("func(int) (string)")

    def test_hash_is_stable(self) -> None:
        assert type_hash("geo.Point") == type_hash("geo.Point")
        assert len(type_hash("geo.Point")) == 16

    @pytest.mark.parametrize(
        ("identifier", "derived"),
        [
            ("ptr_Point", "*Point"),
            ("slice_int", "[]int"),
            ("slice_ptr_Point", "[]*Point"),
        ],
    )
    def test_identifiers_never_take_derived_names(self, identifier: str, derived: str) -> None:
        assert unique_name(derived) == identifier
        assert unique_name(identifier) != identifier
        assert unique_name(identifier).startswith(f"{identifier}_")

    def test_identifier_shaped_like_hashed_name(self) -> None:
        hashed = unique_name("func(int) string")
        assert unique_name(hashed) != hashed

    def test_converter_name(self) -> None:
        assert converter_name("Point", Direction.TO_DYNAMIC) == "conv_Point_toDynamic"
        assert converter_name("*Point", Direction.FROM_DYNAMIC) == "conv_ptr_Point_fromDynamic"


class TestModels:
    def test_field_shorthand(self) -> None:
        entry = TypeEntry.model_validate({"fields": ["int", {"type": "*Point", "optional": True}]})
        assert entry.members == (
            FieldSpec(type_name="int"),
            FieldSpec(type_name="*Point", optional=True),
        )

    def test_directions(self) -> None:
        entry = TypeEntry.model_validate({"directions": ["from"]})
        assert entry.directions == frozenset({Direction.FROM_DYNAMIC})
        assert TypeEntry().directions == frozenset(Direction)

    def test_field_direction(self) -> None:
        field = FieldSpec.model_validate({"type": "int", "direction": "opposite"})
        assert field.target_direction(Direction.TO_DYNAMIC) is Direction.FROM_DYNAMIC
        assert FieldSpec(type_name="int").target_direction(Direction.TO_DYNAMIC) is Direction.TO_DYNAMIC

    def test_unsupported_and_error_are_exclusive(self) -> None:
        with pytest.raises(ValidationError, match="mutually exclusive"):
            TypeEntry.model_validate({"unsupported": "internal", "error": "x"})

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeEntry.model_validate({"feilds": []})

    def test_seed_direction(self) -> None:
        catalog = TypeCatalog.model_validate({"seeds": [{"type": "A", "direction": "from", "label": "x"}]})
        [seed] = catalog.seeds
        assert seed.direction is Direction.FROM_DYNAMIC
        assert seed.label == "x"

    def test_settings_defaults(self) -> None:
        catalog = TypeCatalog()
        assert catalog.settings.base_package is None
        assert "string" in catalog.settings.primitives

    def test_unsupported_reasons(self) -> None:
        assert UnsupportedKind("internal").reason == "use of internal package"
        assert UnsupportedKind.CGO.reason == "use of CGo"


class TestCatalogCalculator:
    def test_struct_with_self_pointer(self) -> None:
        graph = _build(
            {"Point": {"fields": ["int", "int", "*Point"]}, "*Point": {"fields": ["Point"]}},
            Request.of("Point"),
        )
        assert graph.errors == {}
        assert sorted(graph.nodes) == [Key("*Point"), Key("Point"), Key("int")]
        assert graph.nodes[Key("Point")].dep_keys == (Key("int"), Key("int"), Key("*Point"))
        code = graph.nodes[Key("Point")].code
        assert "func conv_Point_toDynamic(v any) any {" in code
        assert "conv_int_toDynamic, conv_int_toDynamic, conv_ptr_Point_toDynamic" in code

    def test_pointer_and_same_named_identifier_get_distinct_converters(self) -> None:
        graph = _build(
            {"*Point": {"fields": ["int"]}, "ptr_Point": {"fields": ["string"]}},
            Request.of("*Point"),
            Request.of("ptr_Point"),
        )
        assert graph.errors == {}
        pointer = graph.nodes[Key("*Point")].code
        identifier = graph.nodes[Key("ptr_Point")].code
        assert "func conv_ptr_Point_toDynamic(v any) any {" in pointer
        assert "func conv_ptr_Point_toDynamic(v any) any {" not in identifier

    def test_primitive_leaf(self) -> None:
        graph = _build({}, Request.of("string", Direction.FROM_DYNAMIC))
        node = graph.nodes[Key("string", Direction.FROM_DYNAMIC)]
        assert node.deps == ()
        assert "conv_string_fromDynamic" in node.code
        assert "convertBasic[string]" in node.code

    def test_custom_primitives(self) -> None:
        graph = _build({}, Request.of("decimal"), primitives=["decimal"])
        assert Key("decimal") in graph

    def test_unknown_type(self) -> None:
        graph = _build({}, Request.of("chan int"))
        assert graph.errors[Key("chan int")].reason == "no known converter template for type chan int"

    def test_unsupported_type(self) -> None:
        graph = _build({"T": {"unsupported": "generic"}}, Request.of("T"))
        assert graph.errors[Key("T")].reason == "use of generic declaration"

    def test_custom_error(self) -> None:
        graph = _build({"T": {"error": "uses a cgo handle"}}, Request.of("T"))
        assert graph.errors[Key("T")].reason == "uses a cgo handle"

    def test_restricted_direction(self) -> None:
        graph = _build({"T": {"directions": ["to"]}}, Request.of("T"), Request.of("T", Direction.FROM_DYNAMIC))
        assert Key("T") in graph
        assert graph.errors[Key("T", Direction.FROM_DYNAMIC)].reason == "no template to convert T FromDynamic"

    def test_function_parameters_convert_the_other_way(self) -> None:
        graph = _build(
            {"func(int) string": {"fields": [{"type": "int", "direction": "opposite"}, "string"]}},
            Request.of("func(int) string"),
        )
        assert sorted(graph.nodes) == [
            Key("func(int) string"),
            Key("string"),
            Key("int", Direction.FROM_DYNAMIC),
        ]

    def test_optional_field_falls_back(self) -> None:
        graph = _build(
            {
                "Config": {"fields": ["string", {"type": "Secret", "optional": True, "fallback": "skip"}]},
                "Secret": {"unsupported": "internal"},
            },
            Request.of("Config"),
        )
        node = graph.nodes[Key("Config")]
        assert node.dep_keys == (Key("string"),)
        assert "[]any{conv_string_toDynamic, skip}" in node.code
        # The probe still reports why the field was dropped
        assert Key("Secret") in graph.errors

    def test_optional_field_kept_when_convertible(self) -> None:
        graph = _build(
            {"List": {"fields": [{"type": "*List", "optional": True}]}, "*List": {"fields": ["List"]}},
            Request.of("List"),
        )
        assert graph.errors == {}
        assert graph.nodes[Key("List")].dep_keys == (Key("*List"),)

    def test_imports_become_resources(self) -> None:
        graph = _build({"geo.Point": {"fields": ["float64"], "imports": ["example.com/geo"]}}, Request.of("geo.Point"))
        assert graph.nodes[Key("geo.Point")].resources == ("example.com/geo",)

    def test_custom_code_template(self) -> None:
        graph = _build(
            {"Point": {"fields": ["int"], "code": "$name: $type $direction -> $deps [$fields] $unknown"}},
            Request.of("Point", Direction.FROM_DYNAMIC),
        )
        assert graph.nodes[Key("Point", Direction.FROM_DYNAMIC)].code == (
            "conv_Point_fromDynamic: Point FromDynamic -> conv_int_fromDynamic [conv_int_fromDynamic] $unknown"
        )


class TestLoadCatalog:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.toml"
        path.write_text(
            """
[settings]
base-package = "main"

[[seeds]]
type = "Point"
label = "NewPoint"

[types.Point]
fields = ["int", { type = "*Point", optional = true }]
imports = ["example.com/geo"]
""",
        )
        catalog = load_catalog(path)
        assert catalog.settings.base_package == "main"
        assert catalog.seeds[0].type_name == "Point"
        assert catalog.types["Point"].imports == ("example.com/geo",)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            load_catalog(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.toml"
        path.write_text("[types\n")
        with pytest.raises(CatalogError, match="Invalid TOML"):
            load_catalog(path)

    def test_invalid_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.toml"
        path.write_text('[types.Point]\nunsupported = "sideways"\n')
        with pytest.raises(CatalogError, match="Invalid catalog"):
            load_catalog(path)

    def test_example_catalog(self) -> None:
        path = Path(__file__).parent.parent / "examples" / "geometry.toml"
        converters = ConverterSet.from_catalog(load_catalog(path))
        graph = converters.build()

        assert graph.contains("*geo.Shape", Direction.TO_DYNAMIC)
        assert graph.contains("geo.Point", Direction.FROM_DYNAMIC)
        assert not graph.contains("geo.Cache", Direction.TO_DYNAMIC)
        assert [key.description for key, _ in graph.sorted_errors()] == ["geo.handle"]
        assert "nil" in graph.nodes[Key("geo.Shape")].code
