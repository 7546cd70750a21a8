# ============================================================================
# FOREIGN KEY RESOLVER TESTS
# ============================================================================
# STATUS: Tests - REFERENCES clauses and reference chains
# PURPOSE: Verify action codes, composite rejection and chain walking
# CREATED: 13 OCT 2026
# ============================================================================
"""
Foreign Key Resolver Tests

Run with:
    pytest tests/test_fk_resolver.py -v
"""

import pytest

from core.contracts import FkAction
from core.errors import CyclicReferenceError, StructuralError, UnsupportedConstructError
from core.schema.fk_resolver import follow_reference, parse_fk_action, read_fk, resolve_fk
from core.schema.model_builder import build_model

from pg_ast import column, create_table, document, primary_key, references, type_name


def _fk_body(**kwargs):
    return references(**kwargs)["Constraint"]


def _int():
    return type_name("int4", catalog=True)


# ============================================================================
# READING CONSTRAINTS
# ============================================================================

class TestReadFk:

    @pytest.mark.parametrize("code,action", [
        ("a", FkAction.NO_ACTION),
        ("r", FkAction.RESTRICT),
        ("c", FkAction.CASCADE),
        ("n", FkAction.SET_NULL),
        ("d", FkAction.SET_DEFAULT),
        (None, FkAction.NO_ACTION),
    ])
    def test_action_codes(self, code, action):
        assert parse_fk_action(code) == action

    def test_unknown_action_code(self):
        with pytest.raises(StructuralError):
            parse_fk_action("x")

    def test_column_reference(self):
        fk = resolve_fk(_fk_body(table="customers", target_column="id", on_delete="c"))
        assert fk.target_table == "customers"
        assert fk.target_column == "id"
        assert fk.on_delete == FkAction.CASCADE
        assert fk.on_update == FkAction.NO_ACTION
        assert fk.path == "#/properties/customers/properties/id"

    def test_table_only_reference_is_draft(self):
        draft = read_fk(_fk_body(table="customers"))
        assert draft.target_column is None
        assert draft.resolve("cid").target_column == "cid"

    def test_resolve_requires_column(self):
        with pytest.raises(StructuralError):
            resolve_fk(_fk_body(table="customers"))

    def test_composite_rejected(self):
        with pytest.raises(UnsupportedConstructError):
            read_fk(_fk_body(table="t", fk_columns=["a", "b"], target_columns=["x", "y"]))

    def test_missing_table(self):
        with pytest.raises(StructuralError):
            read_fk({"contype": "CONSTR_FOREIGN"})


# ============================================================================
# CHAINS
# ============================================================================

class TestFollowReference:
    """Chains end at the first column without a foreign key."""

    def test_chain_of_two(self):
        model = build_model(document(
            create_table("a", column("id", _int(), primary_key())),
            create_table("b", column("id", _int(), primary_key(), references("a", "id"))),
            create_table("c", column("b_id", _int(), references("b", "id"))),
        ))
        found = follow_reference(model, "c", "b_id")
        assert found is not None
        assert found.name == "id"
        assert found.foreign_key is None

    def test_self_reference_terminates(self):
        model = build_model(document(create_table(
            "node",
            column("id", _int(), primary_key()),
            column("parent_id", _int(), references("node", "id")),
        )))
        assert follow_reference(model, "node", "parent_id").name == "id"

    def test_missing_target(self):
        model = build_model(document(create_table("t", column("x", _int(), references("ghost", "id")))))
        assert follow_reference(model, "t", "x") is None

    def test_cycle(self):
        model = build_model(document(
            create_table("a", column("x", _int(), references("b", "y"))),
            create_table("b", column("y", _int(), references("a", "x"))),
        ))
        with pytest.raises(CyclicReferenceError) as exc_info:
            follow_reference(model, "a", "x")
        assert exc_info.value.chain == ["a.x", "b.y", "a.x"]
