from pathlib import Path
from typing import Dict, List

import pytest

from jsglobals import THIS_NAME, parse, parse_with_globals

CASES = Path(__file__).parent / "cases"


def _globals_for(relative_name: str):
    source = (CASES / relative_name).read_text(encoding="utf-8")
    return parse_with_globals(source, source_name=relative_name)


def _lines(result) -> Dict[str, List[int]]:
    return {
        group.name: [position.line for position in group.positions]
        for group in result.globals
    }


TEST_CASES = [
    (
        "hoisting.js",
        {"blockOnly": [9], "hoisted": [11], "ready": [2]},
    ),
    (
        "nested_declarations.js",
        {
            "Scoped": [18],
            "Shape": [23],
            "Unit": [24],
            "blockFn": [25],
            "inner": [22],
            "middle": [21],
        },
    ),
    (
        "destructuring.js",
        {"b": [3], "fallback": [6], "second": [7], "x": [1]},
    ),
    (
        "receivers.js",
        {"arguments": [5], THIS_NAME: [1, 5]},
    ),
    (
        "module_imports.js",
        {"base": [7], "process": [1]},
    ),
]


@pytest.mark.parametrize("relative_name, expected", TEST_CASES)
def test_globals_for_cases(relative_name: str, expected: Dict[str, List[int]]):
    result = _globals_for(relative_name)
    assert result.parsing_error is None
    assert result.names == sorted(expected)
    assert _lines(result) == expected


def test_parameter_shadows_global_only_inside_function():
    result = parse_with_globals("function f(value) { return value; }\nvalue;")
    group = result.get("value")
    assert group is not None
    assert [position.line for position in group.positions] == [2]


def test_catch_parameter_is_local_to_catch_block():
    result = parse_with_globals("try { risky(); } catch (err) { err; }\nerr;")
    assert result.names == ["err", "risky"]
    assert [position.line for position in result.get("err").positions] == [2]


def test_block_binding_reaches_nested_blocks_and_functions():
    result = parse_with_globals("{ let k = 1; { k; } (() => k)(); }\nk;")
    assert result.names == ["k"]
    assert [position.line for position in result.get("k").positions] == [2]


def test_long_operator_chain_is_walked_without_recursion():
    terms = 5000
    result = parse_with_globals("var s = " + " + ".join(["part"] * terms) + ";")
    assert result.names == ["part"]
    columns = [position.column for position in result.get("part").positions]
    assert len(columns) == terms
    assert columns == sorted(columns)


def test_undefined_is_never_global():
    result = parse_with_globals("undefined;\nfunction f() { return undefined; }")
    assert result.globals == []


def test_named_function_expression_and_default_values():
    result = parse_with_globals(
        "const fact = function self(n = seed) { return self(n); };\nself;"
    )
    assert result.names == ["seed", "self"]
    assert [position.line for position in result.get("self").positions] == [2]


def test_property_keys_and_labels_are_not_references():
    source = "\n".join(
        [
            "obj.prop;",
            "({ key: value });",
            "obj[computedKey];",
            "outer: for (;;) { break outer; }",
            "class K { method() {} static [dynamic]() {} }",
        ]
    )
    result = parse_with_globals(source)
    assert result.names == ["computedKey", "dynamic", "obj", "value"]
    assert [position.line for position in result.get("obj").positions] == [1, 3]


def test_groups_are_sorted_and_keep_source_order():
    result = parse_with_globals("zeta();\nalpha();\nzeta(alpha);")
    assert result.names == ["alpha", "zeta"]
    assert [(p.line, p.column) for p in result.get("alpha").positions] == [(2, 0), (3, 5)]
    assert [(p.line, p.column) for p in result.get("zeta").positions] == [(1, 0), (3, 0)]


def test_reference_keeps_full_ancestor_chain():
    result = parse_with_globals("foo();")
    (reference,) = result.get("foo").references
    assert [ancestor["type"] for ancestor in reference.ancestors] == [
        "Program",
        "ExpressionStatement",
        "CallExpression",
    ]
    assert reference.ancestors[0] is result.ast
    assert reference.node["type"] == "Identifier"


def test_this_references_are_grouped_under_reserved_name():
    result = parse_with_globals("this.a = 1;\nconst f = () => this;")
    group = result.get(THIS_NAME)
    assert group is not None
    assert all(reference.is_this for reference in group.references)
    assert [node["type"] for node in group.nodes] == ["ThisExpression", "ThisExpression"]


def test_repeated_analysis_of_same_ast_is_identical():
    ast = parse((CASES / "nested_declarations.js").read_text(encoding="utf-8")).ast
    first = parse_with_globals(ast)
    second = parse_with_globals(ast)

    assert first.ast is ast and second.ast is ast
    assert first.names == second.names
    for left, right in zip(first.globals, second.globals):
        assert [id(node) for node in left.nodes] == [id(node) for node in right.nodes]


@pytest.mark.parametrize("value", [42, None, {"type": "Script", "body": []}, ["Program"]])
def test_rejects_values_that_are_not_source_or_program(value):
    with pytest.raises(TypeError):
        parse_with_globals(value)


def test_module_source_type_allows_top_level_imports():
    from jsglobals import ParseOptions

    result = parse_with_globals(
        'import x from "x";\nexport default x + missing;',
        ParseOptions(source_type="module"),
    )
    assert result.names == ["missing"]
