"""Tests for the gradient tape."""

import logging

import numpy as np
import pytest

from manifold_ad import AutoDiffError, ForeignVariableError, GradientTape, config
from manifold_ad.ad import Variable, ops
from manifold_ad.ad.core.engine import reverse_sweep

from ad_functions import scenario


class TestRecording:
    """Leaves, nodes and handles."""

    def test_create_variable_appends_leaf(self, tape):
        x = tape.create_variable(1.5)
        assert isinstance(x, Variable)
        assert x.index == 0 and x.value == 1.5
        assert tape.node_count == 1
        assert tape.variable_count == 1

    def test_create_variables_one_leaf_per_coordinate(self, tape):
        xs = tape.create_variables([1.0, 2.0, 3.0])
        assert [x.index for x in xs] == [0, 1, 2]
        assert tape.leaves == (0, 1, 2)

    def test_operation_records_node_with_earlier_operands(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        z = x * y
        assert z.index == 2
        node = tape.nodes[2]
        assert node.op_tag == "mul"
        assert node.parents == (0, 1)
        assert node.partials == (3.0, 2.0)
        assert all(p < z.index for p in node.parents)

    def test_constant_operand_records_unary_node(self, tape):
        x = tape.create_variable(2.0)
        z = 3.0 * x + 1
        assert z.value == 7.0
        assert tape.nodes[z.index].parents == (1,)
        assert tape.node_count == 3

    def test_values_are_float64(self, tape):
        x = tape.create_variable(2)
        assert isinstance(x.value, np.float64)
        assert isinstance((x / 4).value, np.float64)

    def test_variable_rejects_non_numbers(self):
        with pytest.raises(TypeError):
            Variable("a")

    def test_numpy_scalar_on_the_left(self, tape):
        x = tape.create_variable(2.0)
        z = np.float64(3.0) * x
        assert isinstance(z, Variable)
        assert z.value == 6.0

    def test_ordering_uses_values(self, tape):
        x, y = tape.create_variables([1.0, 2.0])
        assert x < y and y > x and x <= 1.0 and y >= 2.0

    def test_equality_is_per_recorded_quantity(self, tape):
        x, y = tape.create_variables([1.0, 1.0])
        assert x == tape_handle(tape, 0)
        assert x != y


def tape_handle(tape, index):
    return Variable(tape.nodes[index].value, index, tape, tape.generation)


class TestReverseAccumulate:
    """Gradients from the reverse sweep."""

    def test_scenario_gradient(self, tape):
        xs = tape.create_variables([2.0, 0.0])
        f = scenario(xs)
        assert f.value == 0.0
        np.testing.assert_allclose(tape.reverse_accumulate(), [0.0, 5.0])

    def test_gradient_in_leaf_creation_order(self, tape):
        a = tape.create_variable(2.0)
        b = tape.create_variable(5.0)
        a * a * b
        np.testing.assert_allclose(tape.reverse_accumulate(), [20.0, 4.0])

    def test_seed_scales_gradient(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        x * y
        np.testing.assert_allclose(tape.reverse_accumulate(seed=2.0), [6.0, 4.0])

    def test_empty_tape_gives_empty_gradient(self, tape):
        g = tape.reverse_accumulate()
        assert g.shape == (0,)

    def test_leaf_output_gives_unit_vector(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        np.testing.assert_allclose(tape.reverse_accumulate(y), [0.0, 1.0])

    def test_untracked_output_raises(self, tape):
        x = tape.create_variable(2.0)
        with tape.suspend_tracking():
            z = x * x
        with pytest.raises(AutoDiffError):
            tape.reverse_accumulate(z)

    def test_output_must_be_variable(self, tape):
        tape.create_variable(1.0)
        with pytest.raises(TypeError):
            tape.reverse_accumulate(1.0)

    def test_accumulation_does_not_mutate_tape(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        ops.exp(x * y)
        before = tape.nodes
        tape.reverse_accumulate()
        assert tape.nodes == before

    def test_constant_partials(self, tape):
        x = tape.create_variable(2.0)
        cases = [
            (lambda v: 2 - v, -1.0),
            (lambda v: 2 / v, -0.5),
            (lambda v: v ** 3, 12.0),
            (lambda v: 2 ** v, np.log(2.0) * 4.0),
            (lambda v: v % 3, 1.0),
            (lambda v: 7.0 % v, -3.0),
            (lambda v: -v, -1.0),
        ]
        for f, expected in cases:
            out = f(x)
            g = tape.reverse_accumulate(out)
            assert g[0] == pytest.approx(expected)

    def test_power_of_two_variables(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        z = x ** y
        assert z.value == 8.0
        np.testing.assert_allclose(tape.reverse_accumulate(z), [12.0, 8.0 * np.log(2.0)])

    def test_power_with_non_positive_base_has_zero_exponent_partial(self, tape):
        x, y = tape.create_variables([-2.0, 2.0])
        z = x ** y
        assert z.value == 4.0
        np.testing.assert_allclose(tape.reverse_accumulate(z), [-4.0, 0.0])

    def test_reverse_sweep_on_node_log(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        z = x * y + x
        adjoints = reverse_sweep(tape.nodes, z.index)
        assert adjoints[0] == pytest.approx(4.0)
        assert adjoints[1] == pytest.approx(2.0)
        assert len(adjoints) == z.index + 1


class TestAccumulatePolicy:
    """Repeated accumulation is idempotent and segments are independent."""

    def test_accumulate_twice_is_idempotent(self, tape):
        xs = tape.create_variables([0.3, 1.7])
        ops.sin(xs[0]) * ops.exp(xs[1])
        g1 = tape.reverse_accumulate()
        g2 = tape.reverse_accumulate()
        np.testing.assert_array_equal(g1, g2)

    def test_two_recordings_on_one_tape(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        f1 = x * y
        f2 = x + y * y
        np.testing.assert_allclose(tape.reverse_accumulate(), [1.0, 6.0])
        np.testing.assert_allclose(tape.reverse_accumulate(f1), [3.0, 2.0])
        np.testing.assert_allclose(tape.reverse_accumulate(f2), [1.0, 6.0])

    def test_two_functions_with_their_own_leaves(self, tape):
        a = tape.create_variable(2.0)
        f1 = a * a
        b = tape.create_variable(5.0)
        f2 = ops.ln(b)
        np.testing.assert_allclose(tape.reverse_accumulate(f1), [4.0, 0.0])
        np.testing.assert_allclose(tape.reverse_accumulate(f2), [0.0, 0.2])


class TestTracking:
    """Suspending and resuming recording."""

    def test_suspended_region_records_nothing(self, tape):
        x, y = tape.create_variables([2.0, 0.5])
        before = tape.node_count
        with tape.suspend_tracking():
            assert not tape.is_tracking
            z = x * y + ops.sin(x) - ops.exp(y) / x
            w = z ** 2
        assert tape.node_count == before
        assert tape.is_tracking
        expected = 2.0 * 0.5 + np.sin(2.0) - np.exp(0.5) / 2.0
        assert z.value == pytest.approx(expected)
        assert w.value == pytest.approx(expected ** 2)
        assert not z.is_tracked

    def test_tracking_restored_after_exception(self, tape):
        x = tape.create_variable(2.0)
        before = tape.node_count
        with pytest.raises(ValueError):
            with tape.suspend_tracking():
                x * x
                raise ValueError("boom")
        assert tape.is_tracking
        assert tape.node_count == before

    def test_nested_suspension_restores_outer_state(self, tape):
        with tape.suspend_tracking():
            with tape.suspend_tracking():
                pass
            assert not tape.is_tracking
        assert tape.is_tracking

    def test_flag_can_be_toggled(self, tape):
        x = tape.create_variable(2.0)
        tape.is_tracking = False
        y = x + 1.0
        tape.is_tracking = True
        assert y.index == -1
        assert tape.node_count == 1

    def test_tape_created_without_tracking(self):
        tape = GradientTape(is_tracking=False)
        x = tape.create_variable(1.0)
        assert (x + x).index == -1
        assert tape.node_count == 1

    def test_untracked_value_is_a_constant(self, tape):
        x, y = tape.create_variables([2.0, 3.0])
        with tape.suspend_tracking():
            c = x * 3.0
        out = c * y
        np.testing.assert_allclose(tape.reverse_accumulate(out), [0.0, 6.0])


class TestValidation:
    """Foreign and stale Variables fail fast."""

    def test_variable_from_other_tape(self, tape):
        x = tape.create_variable(1.0)
        other = GradientTape()
        a = other.create_variable(2.0)
        with pytest.raises(ForeignVariableError):
            x + a

    def test_accumulate_with_foreign_output(self, tape):
        tape.create_variable(1.0)
        other = GradientTape()
        a = other.create_variable(2.0)
        with pytest.raises(ForeignVariableError):
            tape.reverse_accumulate(a)

    def test_reset_invalidates_variables(self, tape):
        x = tape.create_variable(1.0)
        tape.reset()
        assert tape.node_count == 0
        assert tape.generation == 1
        with pytest.raises(ForeignVariableError):
            x * 2.0

    def test_reset_tape_records_again(self, tape):
        tape.create_variable(1.0)
        tape.reset()
        x = tape.create_variable(4.0)
        ops.sqrt(x)
        np.testing.assert_allclose(tape.reverse_accumulate(), [0.25])

    def test_validation_can_be_switched_off(self, tape):
        config.validate_variables = False
        x = tape.create_variable(1.0)
        other = GradientTape()
        other.check_variable(x)

    def test_free_standing_variable_is_a_constant(self, tape):
        x = tape.create_variable(2.0)
        out = x * Variable(5.0)
        np.testing.assert_allclose(tape.reverse_accumulate(out), [5.0])


class TestLogNodes:
    """Node dumps through the logging module."""

    def test_log_nodes(self, tape, caplog):
        x, y = tape.create_variables([1.0, 2.0])
        x * y
        with caplog.at_level(logging.INFO, logger="manifold_ad.ad.core.tape"):
            tape.log_nodes()
        assert caplog.text.count("Root Node") == 2
        assert "[mul]" in caplog.text

    def test_log_nodes_limit(self, tape, caplog):
        x = tape.create_variable(1.0)
        for _ in range(5):
            x = x + 1.0
        with caplog.at_level(logging.INFO, logger="manifold_ad.ad.core.tape"):
            tape.log_nodes(limit=2)
        assert "4 more nodes not shown" in caplog.text

    def test_log_nodes_custom_logger(self, tape, caplog):
        tape.create_variable(1.0)
        log = logging.getLogger("custom.tape.dump")
        with caplog.at_level(logging.INFO, logger="custom.tape.dump"):
            tape.log_nodes(log)
        assert any(r.name == "custom.tape.dump" for r in caplog.records)
