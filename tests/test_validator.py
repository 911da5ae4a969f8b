"""Tests for the workflow validator.

Covers the structural, configuration and hygiene rules:
- Empty graphs and start-node inference
- Action and branch configuration checks
- Disconnected nodes, cycles and dangling edges
"""
import pytest

from workflow_graph.graph.validator import (
    CIRCULAR_DEPENDENCY_MESSAGE,
    WorkflowValidator,
    validate_workflow,
)
from workflow_graph.models.graph import BranchData
from workflow_graph.models.validation import Severity

from tests.builders import action_node, branch_node, condition, definition, edge


class TestWorkflowValidator:
    """Test suite for WorkflowValidator."""

    @pytest.fixture
    def validator(self):
        return WorkflowValidator()

    # =========================================================================
    # Empty graph
    # =========================================================================

    def test_empty_graph_is_valid_by_default(self, validator):
        result = validator.validate([], [])

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_empty_graph_is_an_error_when_not_allowed(self, validator):
        result = validator.validate([], [], allow_empty=False)

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert "Workflow is empty" in result.errors[0].message

    # =========================================================================
    # Start nodes
    # =========================================================================

    def test_linear_graph_has_no_start_diagnostics(self, validator):
        nodes = [action_node("1"), action_node("2")]

        result = validator.validate(nodes, [edge("1", "2")])

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_two_node_cycle(self, validator):
        nodes = [action_node("1"), action_node("2")]

        result = validator.validate(nodes, [edge("1", "2"), edge("2", "1")])

        assert result.is_valid is False
        circular = [e for e in result.errors if "Circular dependency" in e.message]
        assert len(circular) == 1
        assert any("No starting node" in e.message for e in result.errors)

    def test_multiple_start_nodes_warn(self, validator):
        nodes = [action_node("1"), action_node("2"), action_node("3")]

        result = validator.validate(nodes, [edge("1", "3"), edge("2", "3")])

        assert result.is_valid is True
        assert any("Multiple starting nodes found (2)" in w.message for w in result.warnings)

    def test_second_start_node_is_reported_disconnected(self, validator):
        nodes = [action_node("1"), action_node("2"), action_node("3")]

        result = validator.validate(nodes, [edge("1", "3"), edge("2", "3")])

        disconnected = [w for w in result.warnings if "disconnected" in w.message]
        assert [w.node_id for w in disconnected] == ["2"]

    def test_fan_out_has_no_disconnected_warnings(self, validator):
        nodes = [action_node("1"), action_node("2"), action_node("3")]

        result = validator.validate(nodes, [edge("1", "2"), edge("1", "3")])

        assert not any("disconnected" in w.message for w in result.warnings)

    def test_end_nodes_are_not_flagged(self, validator):
        nodes = [action_node("1"), action_node("2")]

        result = validator.validate(nodes, [edge("1", "2")])

        assert not any(w.node_id == "2" for w in result.warnings)

    # =========================================================================
    # Action nodes
    # =========================================================================

    def test_action_without_action_selected(self, validator):
        result = validator.validate([action_node("1", action_id=None)], [])

        assert result.is_valid is False
        assert result.errors[0].node_id == "1"
        assert result.errors[0].severity == Severity.ERROR
        assert "no action selected" in result.errors[0].message

    def test_missing_required_fields_lists_labels(self, validator):
        schema = definition(
            ("field1", "Field 1", True),
            ("field2", "Field 2", True),
            ("field3", "Field 3", True),
            ("notes", "Notes", False),
        )
        node = action_node("1", definition=schema, config={"field1": "value"})

        result = validator.validate([node], [])

        assert result.is_valid is False
        assert len(result.errors) == 1
        message = result.errors[0].message
        assert "missing required fields: Field 2, Field 3" in message
        assert "field2" not in message
        assert "Notes" not in message

    def test_required_field_with_empty_value_counts_as_configured(self, validator):
        schema = definition(("a", "Field A", True), ("b", "Field B", True))

        missing_b = validator.validate([action_node("1", definition=schema, config={"a": 1})], [])
        with_b = validator.validate(
            [action_node("1", definition=schema, config={"a": 1, "b": ""})], []
        )

        assert any("Field B" in e.message for e in missing_b.errors)
        assert with_b.is_valid is True

    def test_action_without_definition_skips_field_check(self, validator):
        result = validator.validate([action_node("1", definition=None)], [])

        assert result.is_valid is True

    # =========================================================================
    # Branch nodes
    # =========================================================================

    def test_branch_without_conditions_and_unconnected(self, validator):
        node = branch_node("1", [
            BranchData(name="Yes", conditions=[]),
            BranchData(name="No", conditions=[condition()]),
        ])

        result = validator.validate([node], [])

        assert result.is_valid is True
        assert len(result.warnings) == 2
        assert "1 path(s) without conditions" in result.warnings[0].message
        assert "unconnected paths" in result.warnings[1].message

    def test_branch_with_one_edge_short_warns(self, validator):
        node = branch_node("b", [
            BranchData(name="A", conditions=[condition()]),
            BranchData(name="B", conditions=[condition()]),
            BranchData(name="C", conditions=[condition()]),
        ])
        nodes = [node, action_node("x"), action_node("y"), action_node("z")]
        edges = [edge("b", "x", "branch-0"), edge("b", "y", "branch-1")]

        result = validator.validate(nodes, edges)

        assert any("unconnected paths" in w.message for w in result.warnings)

    def test_branch_with_unlisted_operator_is_validated(self, validator):
        node = branch_node("b", [
            BranchData(name="A", conditions=[condition("status", "in", ["open"])]),
            BranchData(name="B", conditions=[condition()]),
        ])
        nodes = [node, action_node("x"), action_node("y")]
        edges = [edge("b", "x", "branch-0"), edge("b", "y", "branch-1")]

        result = validator.validate(nodes, edges)

        assert result.is_valid is True
        assert result.warnings == []

    def test_branch_with_all_edges_does_not_warn(self, validator):
        node = branch_node("b", [
            BranchData(name="A", conditions=[condition()]),
            BranchData(name="B", conditions=[condition()]),
        ])
        nodes = [node, action_node("x"), action_node("y")]
        edges = [edge("b", "x", "branch-0"), edge("b", "y", "branch-1")]

        result = validator.validate(nodes, edges)

        assert result.warnings == []

    # =========================================================================
    # Cycles and malformed edges
    # =========================================================================

    def test_cycle_behind_start_node(self, validator):
        nodes = [action_node("1"), action_node("2"), action_node("3")]
        edges = [edge("1", "2"), edge("2", "3"), edge("3", "2")]

        result = validator.validate(nodes, edges)

        assert [e.message for e in result.errors] == [CIRCULAR_DEPENDENCY_MESSAGE]

    def test_self_loop_is_a_cycle(self, validator):
        nodes = [action_node("1"), action_node("2")]

        result = validator.validate(nodes, [edge("1", "2"), edge("2", "2")])

        assert any("Circular dependency" in e.message for e in result.errors)

    def test_only_first_cycle_is_reported(self, validator):
        nodes = [action_node(str(i)) for i in range(1, 6)]
        edges = [
            edge("1", "2"), edge("2", "1"),
            edge("3", "4"), edge("4", "3"),
            edge("5", "3"),
        ]

        result = validator.validate(nodes, edges)

        circular = [e for e in result.errors if "Circular" in e.message]
        assert len(circular) == 1

    def test_diamond_is_not_a_cycle(self, validator):
        nodes = [action_node(n) for n in "abcd"]
        edges = [edge("a", "b"), edge("a", "c"), edge("b", "d"), edge("c", "d")]

        result = validator.validate(nodes, edges)

        assert result.is_valid is True

    def test_long_chain_does_not_exhaust_the_stack(self, validator):
        nodes = [action_node(str(i)) for i in range(3000)]
        edges = [edge(str(i), str(i + 1)) for i in range(2999)]

        result = validator.validate(nodes, edges)

        assert result.is_valid is True

    def test_dangling_edge_is_ignored_with_warning(self, validator):
        nodes = [action_node("1"), action_node("2")]
        edges = [edge("1", "2"), edge("2", "ghost"), edge("phantom", "1")]

        result = validator.validate(nodes, edges)

        assert result.is_valid is True
        dangling = [w for w in result.warnings if "missing node" in w.message]
        assert [w.node_id for w in dangling] == ["2", "1"]


def test_validate_workflow_function_matches_class():
    nodes = [action_node("1"), action_node("2", action_id=None)]
    edges = [edge("1", "2")]

    assert validate_workflow(nodes, edges) == WorkflowValidator().validate(nodes, edges)


def test_allow_empty_is_keyword_only():
    with pytest.raises(TypeError):
        validate_workflow([], [], False)
    with pytest.raises(TypeError):
        WorkflowValidator().validate([], [], False)


def test_validation_result_wire_format():
    result = validate_workflow([action_node("1", action_id=None)], [])

    dumped = result.model_dump(mode="json", by_alias=True)

    assert dumped["isValid"] is False
    assert dumped["errors"][0] == {
        "nodeId": "1",
        "type": "error",
        "message": 'Action node "Action Step 1" has no action selected.',
    }
