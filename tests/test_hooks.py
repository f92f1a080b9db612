"""Tests for use_state_with_deps() and use_reducer_with_deps() inside components."""

from depstate import Component, DispatchAdapter, use_reducer_with_deps, use_state_with_deps


class TestUseStateWithDeps:
    def test_reset_scenario(self):
        seen = []

        def view(a):
            value, set_value = use_state_with_deps(0, [a])
            seen.append(value)
            return set_value

        comp = Component(view)
        set_value = comp.render(1)
        set_value(lambda x: x + 1)
        assert seen == [0, 1]

        comp.render(1)
        assert seen == [0, 1, 1]

        comp.render(2)
        assert seen == [0, 1, 1, 0]

    def test_setter_identity_is_stable(self):
        comp = Component(lambda a: use_state_with_deps(0, [a])[1])
        first = comp.render(1)
        assert comp.render(1) is first
        assert comp.render(2) is first

    def test_initializer_receives_previous_on_reset(self):
        calls = []

        def init(previous=None):
            calls.append(previous)
            return [] if previous is None else previous + ["reset"]

        def view(key):
            value, _ = use_state_with_deps(init, [key])
            return value

        comp = Component(view)
        comp.render("x")
        comp.render("x")
        assert comp.render("y") == ["reset"]
        assert calls == [None, []]

    def test_reset_does_not_trigger_extra_pass(self):
        comp = Component(lambda a: use_state_with_deps(lambda: a * 10, [a])[0])
        assert comp.render(1) == 10
        assert comp.render(2) == 20
        assert comp.pass_count == 2

    def test_equal_set_does_not_rerun(self):
        def view():
            return use_state_with_deps("idle", [])[1]

        comp = Component(view)
        set_value = comp.render()
        set_value("idle")
        set_value(lambda current: current)
        assert comp.pass_count == 1

    def test_deferred_strategy_shows_one_stale_pass(self):
        seen = []

        def view(a):
            value, _ = use_state_with_deps(lambda: f"fresh-{a}", [a], strategy="deferred")
            seen.append(value)

        comp = Component(view)
        comp.render(1)
        comp.render(2)
        assert seen == ["fresh-1", "fresh-1", "fresh-2"]
        assert comp.pass_count == 3

    def test_independent_cells_in_one_component(self):
        def view(a, b):
            first, set_first = use_state_with_deps("a0", [a])
            second, set_second = use_state_with_deps("b0", [b])
            return first, second, set_first, set_second

        comp = Component(view)
        _, _, set_first, set_second = comp.render(1, 1)
        set_first("a1")
        set_second("b1")
        assert comp.output[:2] == ("a1", "b1")
        comp.render(2, 1)
        assert comp.output[:2] == ("a0", "b1")


class TestUseReducerWithDeps:
    def test_dispatch_scenario(self):
        seen = []

        def view():
            total, dispatch = use_reducer_with_deps(lambda s, delta: s + delta, 0, [])
            seen.append(total)
            return dispatch

        dispatch = Component(view).render()
        dispatch(5)
        dispatch(-2)
        assert seen == [0, 5, 3]

    def test_dispatch_identity_is_stable(self):
        comp = Component(lambda: use_reducer_with_deps(lambda s: s, 0, [])[1])
        first = comp.render()
        assert isinstance(first, DispatchAdapter)
        assert comp.render() is first

    def test_reducer_is_pinned_to_first_pass(self):
        def add(state, delta):
            return state + delta

        def sub(state, delta):
            return state - delta

        def view(reducer):
            return use_reducer_with_deps(reducer, 0, [])

        comp = Component(view)
        _, dispatch = comp.render(add)
        _, later = comp.render(sub)
        assert later is dispatch
        assert dispatch.reducer is add

        dispatch(5)
        assert comp.output[0] == 5

    def test_deps_change_resets_state(self):
        def view(player):
            return use_reducer_with_deps(lambda s, d: s + d, 100, [player])

        comp = Component(view)
        _, dispatch = comp.render("ann")
        dispatch(5)
        assert comp.output[0] == 105
        assert comp.render("bob")[0] == 100

    def test_unchanged_result_is_noop(self):
        def view():
            return use_reducer_with_deps(lambda s, *args: s, "same", [])

        comp = Component(view)
        _, dispatch = comp.render()
        dispatch("anything")
        assert comp.pass_count == 1

    def test_multiple_action_arguments(self):
        def reducer(state, op, amount):
            return state * amount if op == "mul" else state + amount

        comp = Component(lambda: use_reducer_with_deps(reducer, 2, []))
        _, dispatch = comp.render()
        dispatch("mul", 5)
        dispatch("add", 1)
        assert comp.output[0] == 11

    def test_dispatch_after_dispose_is_ignored(self):
        comp = Component(lambda: use_reducer_with_deps(lambda s, d: s + d, 0, []))
        _, dispatch = comp.render()
        comp.dispose()
        dispatch(1)
        assert comp.disposed
