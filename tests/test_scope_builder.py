from pathlib import Path

import pytest

from jsglobals import parse
from scoping import AnalysisInvariantError, binding_table, build_scopes, declare_pattern

CASES = Path(__file__).parent / "cases"


def _built_ast(name: str):
    source = (CASES / name).read_text(encoding="utf-8")
    return build_scopes(parse(source, source_name=name).ast)


def _function_named(body, name: str):
    for statement in body:
        if statement.get("type") == "FunctionDeclaration" and statement["id"]["name"] == name:
            return statement
    raise AssertionError(f"Function {name} not found")


def test_var_hoists_to_function_and_let_stays_in_block():
    program = _built_ast("hoisting.js")
    outer = _function_named(program["body"], "outer")

    assert binding_table(program) == {"outer"}
    assert binding_table(outer) == {"outer", "hoisted"}

    if_block = outer["body"]["body"][0]["consequent"]
    assert binding_table(if_block) == {"blockOnly"}
    assert binding_table(outer["body"]) is None


def test_nested_declarations_attach_to_containing_scope():
    program = _built_ast("nested_declarations.js")
    outer = _function_named(program["body"], "outer")
    middle = _function_named(outer["body"]["body"], "middle")
    inner = _function_named(middle["body"]["body"], "inner")

    assert binding_table(program) == {"outer"}
    assert binding_table(outer) == {"outer", "middle", "blockFn"}
    assert binding_table(middle) == {"middle", "inner"}
    assert binding_table(inner) == {"inner"}

    outer_body = outer["body"]
    assert binding_table(outer_body) == {"Shape"}

    shape = outer_body["body"][1]
    assert shape["type"] == "ClassDeclaration"
    assert binding_table(shape) == {"Shape"}

    method = shape["body"]["body"][0]["value"]
    assert binding_table(method["body"]) == {"Unit"}

    nested_block = outer_body["body"][2]
    assert binding_table(nested_block) == {"Scoped"}


def test_destructuring_declares_only_pattern_targets():
    program = _built_ast("destructuring.js")
    assert {"a", "c", "d", "pick"} == binding_table(program)

    pick = _function_named(program["body"], "pick")
    assert binding_table(pick) == {"pick", "first", "third", "fourth", "others"}


def test_imports_are_program_scoped_even_when_nested():
    program = _built_ast("module_imports.js")
    assert {"fs", "joinPath", "resolve", "util", "load"} <= binding_table(program)

    conditional_block = program["body"][0]["consequent"]
    assert binding_table(conditional_block) is None


def test_catch_parameter_belongs_to_catch_clause():
    source = "try { risky(); } catch ({ code, detail: [first] }) { code; }"
    program = build_scopes(parse(source).ast)
    handler = program["body"][0]["handler"]
    assert binding_table(handler) == {"code", "first"}
    assert binding_table(program) is None


def test_catch_without_parameter_declares_nothing():
    program = {
        "type": "Program",
        "body": [
            {
                "type": "TryStatement",
                "block": {"type": "BlockStatement", "body": []},
                "handler": {
                    "type": "CatchClause",
                    "body": {"type": "BlockStatement", "body": []},
                },
            }
        ],
    }
    build_scopes(program)
    assert binding_table(program["body"][0]["handler"]) == set()


def test_named_class_expression_binds_its_own_name_only_inside():
    program = build_scopes(parse("const K = class Named {};").ast)
    class_node = program["body"][0]["declarations"][0]["init"]
    assert binding_table(program) == {"K"}
    assert binding_table(class_node) == {"Named"}


def test_rebuild_starts_from_fresh_tables():
    program = build_scopes(parse("var kept = 1;").ast)
    binding_table(program).add("ghost")

    build_scopes(program)
    assert binding_table(program) == {"kept"}


def test_declaration_without_enclosing_scope_is_fatal():
    orphan = {"type": "VariableDeclaration", "kind": "var", "declarations": []}
    with pytest.raises(AnalysisInvariantError):
        build_scopes(orphan)


@pytest.mark.parametrize(
    "pattern",
    [
        {"type": "MemberExpression", "object": {"type": "Identifier", "name": "a"}},
        {"type": "Literal", "value": 1},
    ],
)
def test_unrecognized_pattern_is_fatal(pattern):
    with pytest.raises(AnalysisInvariantError, match="Unrecognized pattern type"):
        declare_pattern(pattern, set())


def test_sparse_array_pattern_skips_holes():
    names = set()
    declare_pattern(
        {
            "type": "ArrayPattern",
            "elements": [
                None,
                {"type": "Identifier", "name": "second"},
                {
                    "type": "AssignmentPattern",
                    "left": {"type": "Identifier", "name": "third"},
                    "right": {"type": "Identifier", "name": "fallback"},
                },
            ],
        },
        names,
    )
    assert names == {"second", "third"}
