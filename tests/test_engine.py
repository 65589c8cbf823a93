"""Tests for FlowEngine - skip/prompt decisions, hooks and ordering."""

from pathlib import Path

import pytest

from wizardflow.engine.builder import FlowBuilder
from wizardflow.engine.context import WizardContext
from wizardflow.engine.engine import FlowEngine
from wizardflow.engine.runner import MockPromptRunner, PromptRunner
from wizardflow.engine.schema import ResultMode, TextStep


@pytest.fixture
def mock_runner():
    """Create a mock runner for testing."""
    return MockPromptRunner()


def input_calls(runner):
    return [c for c in runner.calls if c[0] == 'get_input']


class InterruptingRunner(PromptRunner):
    """Runner whose prompts are interrupted by the user."""

    def display(self, message):
        pass

    def get_input(self, prompt, default=None):
        raise KeyboardInterrupt


class TestAcceptMode:

    def test_accepted_text_is_stored_without_prompting(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name').result_value('demo').result_mode(ResultMode.ACCEPT).and_()
            .build()
        )

        result = flow.run()

        assert result.context.as_dict() == {'name': 'demo'}
        assert mock_runner.calls == []

    def test_accepted_step_never_runs_hooks(self, mock_runner):
        fired = []
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name')
                .result_value('demo')
                .result_mode(ResultMode.ACCEPT)
                .pre_hook(lambda state: fired.append('pre'))
                .post_hook(lambda state: fired.append('post'))
                .and_()
            .build()
        )

        flow.run()

        assert fired == []

    def test_empty_text_falls_back_to_prompt(self, mock_runner):
        mock_runner.input_queue = ['typed']
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name').name('Name').result_value('').result_mode(ResultMode.ACCEPT).and_()
            .build()
        )

        result = flow.run()

        assert mock_runner.prompts == ['Name']
        assert result.context.get('name') == 'typed'

    def test_missing_value_falls_back_to_prompt(self, mock_runner):
        mock_runner.input_queue = ['typed']
        flow = FlowBuilder(mock_runner).with_text('name').result_mode('accept').and_().build()

        result = flow.run()

        assert len(input_calls(mock_runner)) == 1
        assert result.context.get('name') == 'typed'

    def test_accepted_path_is_stored_as_path(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_path('dir').result_value('/tmp/project').result_mode('accept').and_()
            .build()
        )

        result = flow.run()

        assert result.context.get('dir') == Path('/tmp/project')
        assert mock_runner.calls == []

    def test_accepted_path_matches_prompted_path(self, mock_runner):
        """A path resolves to the same value whether accepted or typed in."""
        accepted = (
            FlowBuilder(mock_runner)
            .with_path('dir').result_value(' ~/proj ').result_mode('accept').and_()
            .build()
        )
        prompted = FlowBuilder().with_path('dir').and_().build()

        from_accept = accepted.run().context.get('dir')
        from_prompt = prompted.run(MockPromptRunner(['~/proj'])).context.get('dir')

        assert from_accept == from_prompt == Path('~/proj').expanduser()
        assert mock_runner.calls == []

    def test_accepted_single_choice_is_stored(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_single_choice('color')
                .select_item('Red', 'red')
                .result_value('blue')
                .result_mode('accept')
                .and_()
            .build()
        )

        result = flow.run()

        assert result.context.get('color') == 'blue'
        assert mock_runner.calls == []

    def test_accepted_multi_choice_is_stored(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_multi_choice('tags')
                .select_items([('A', 'a'), ('B', 'b')])
                .result_values(['b'])
                .result_mode('accept')
                .and_()
            .build()
        )

        result = flow.run()

        assert result.context.get('tags') == ['b']
        assert mock_runner.calls == []

    def test_empty_multi_choice_falls_back_to_prompt(self, mock_runner):
        mock_runner.input_queue = ['1,2']
        flow = (
            FlowBuilder(mock_runner)
            .with_multi_choice('tags')
                .name('Tags')
                .select_items([('A', 'a', True), ('B', 'b', True)])
                .result_values([])
                .result_mode(ResultMode.ACCEPT)
                .and_()
            .build()
        )

        result = flow.run()

        assert mock_runner.prompts == ['Tags']
        assert result.context.get('tags') == ['a', 'b']


class TestVerifyMode:

    def test_verify_prompts_with_seeded_default(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name')
                .name('Name')
                .default_value('fallback')
                .result_value('demo')
                .result_mode(ResultMode.VERIFY)
                .and_()
            .build()
        )

        result = flow.run()

        assert input_calls(mock_runner) == [('get_input', 'Name', 'demo')]
        assert result.context.get('name') == 'demo'

    def test_seed_runs_before_caller_pre_hooks(self, mock_runner):
        seen = []
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name')
                .result_value('demo')
                .result_mode('verify')
                .pre_hook(lambda state: seen.append(state.default_value))
                .and_()
            .build()
        )

        flow.run()

        assert seen == ['demo']

    def test_user_can_replace_seeded_value(self, mock_runner):
        mock_runner.input_queue = ['other']
        flow = FlowBuilder(mock_runner).with_text('name').result_value('demo').result_mode('verify').and_().build()

        result = flow.run()

        assert result.context.get('name') == 'other'

    def test_verify_single_choice_preselects_value(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_single_choice('color')
                .name('Color')
                .select_items({'Red': 'red', 'Blue': 'blue'})
                .result_value('blue')
                .result_mode('verify')
                .and_()
            .build()
        )

        result = flow.run()

        assert input_calls(mock_runner) == [('get_input', 'Color', '2')]
        assert result.context.get('color') == 'blue'

    def test_verify_multi_choice_preselects_values(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_multi_choice('tags')
                .name('Tags')
                .select_items([('A', 'a'), ('B', 'b'), ('C', 'c')])
                .result_values(['c', 'a'])
                .result_mode('verify')
                .and_()
            .build()
        )

        result = flow.run()

        assert input_calls(mock_runner) == [('get_input', 'Tags', '1,3')]
        assert result.context.get('tags') == ['a', 'c']

    def test_verify_without_value_has_no_seed(self, mock_runner):
        flow = FlowBuilder(mock_runner).with_text('name').name('Name').result_mode('verify').and_().build()

        flow.run()

        assert input_calls(mock_runner) == [('get_input', 'Name', None)]


class TestStoreResult:

    def test_store_false_never_writes(self, mock_runner):
        mock_runner.input_queue = ['typed']
        flow = FlowBuilder(mock_runner).with_text('name').store_result(False).and_().build()

        result = flow.run()

        assert 'name' not in result.context

    def test_store_false_with_accepted_value_still_prompts(self, mock_runner):
        """Skipping requires store_result; without it the prompt runs."""
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name')
                .result_value('demo')
                .result_mode(ResultMode.ACCEPT)
                .store_result(False)
                .and_()
            .build()
        )

        result = flow.run()

        assert len(input_calls(mock_runner)) == 1
        assert 'name' not in result.context

    def test_store_false_multi_choice(self, mock_runner):
        mock_runner.input_queue = ['1']
        flow = (
            FlowBuilder(mock_runner)
            .with_multi_choice('tags').select_item('A', 'a').store_result(False).and_()
            .build()
        )

        result = flow.run()

        assert len(result.context) == 0

    def test_single_choice_without_selection_stores_nothing(self, mock_runner):
        flow = FlowBuilder(mock_runner).with_single_choice('color').select_item('Red', 'red').and_().build()

        result = flow.run()

        assert 'color' not in result.context

    def test_caller_post_hook_runs_after_store(self, mock_runner):
        mock_runner.input_queue = ['typed']
        seen = []
        flow = (
            FlowBuilder(mock_runner)
            .with_text('name')
                .post_hook(lambda state: seen.append(state.get('name')))
                .and_()
            .build()
        )

        flow.run()

        assert seen == ['typed']


class TestOrdering:

    def test_accepted_steps_resolve_in_registration_order(self, mock_runner):
        flow = (
            FlowBuilder(mock_runner)
            .with_path('p1').result_value('/one').result_mode('accept').and_()
            .with_text('t1').result_value('two').result_mode('accept').and_()
            .with_path('p2').result_value('/three').result_mode('accept').and_()
            .build()
        )

        result = flow.run()

        assert list(result.context) == ['p1', 't1', 'p2']
        assert result.context.get('p1') == Path('/one')
        assert result.context.get('t1') == 'two'
        assert result.context.get('p2') == Path('/three')

    def test_hooks_fire_in_registration_order(self, mock_runner):
        mock_runner.input_queue = ['/one', 'two', '/three']
        order = []

        def record(state):
            order.append(state.name)

        flow = (
            FlowBuilder(mock_runner)
            .with_path('p1').name('p1').pre_hook(record).and_()
            .with_text('t1').name('t1').pre_hook(record).and_()
            .with_path('p2').name('p2').pre_hook(record).and_()
            .build()
        )

        result = flow.run()

        assert order == ['p1', 't1', 'p2']
        assert mock_runner.prompts == ['p1', 't1', 'p2']
        assert result.context.get('p2') == Path('/three')

    def test_later_step_reads_earlier_answer(self, mock_runner):
        def derive_default(state):
            state.default_value = state.get('name').upper()

        flow = (
            FlowBuilder(mock_runner)
            .with_text('name').result_value('demo').result_mode('accept').and_()
            .with_text('title').name('Title').pre_hook(derive_default).and_()
            .build()
        )

        result = flow.run()

        assert input_calls(mock_runner) == [('get_input', 'Title', 'DEMO')]
        assert result.context.get('title') == 'DEMO'


class TestRuns:

    def test_flow_can_run_twice_independently(self):
        flow = FlowBuilder().with_text('name').and_().build()

        first = flow.run(MockPromptRunner(['one']))
        second = flow.run(MockPromptRunner(['two']))

        assert first.context.get('name') == 'one'
        assert second.context.get('name') == 'two'
        assert first.context is not second.context

    def test_rebuilt_specs_do_not_share_values(self, mock_runner):
        def build(value):
            return (
                FlowBuilder(mock_runner)
                .with_text('name').result_value(value).result_mode('accept').and_()
                .build()
            )

        first = build('one').run()
        second = build('two').run()

        assert first.context.as_dict() == {'name': 'one'}
        assert second.context.as_dict() == {'name': 'two'}

    def test_interrupt_aborts_the_run(self):
        flow = (
            FlowBuilder(InterruptingRunner())
            .with_text('done').result_value('yes').result_mode('accept').and_()
            .with_text('pending').and_()
            .with_text('never').result_value('x').result_mode('accept').and_()
            .build()
        )

        with pytest.raises(KeyboardInterrupt):
            flow.run()

    def test_execute_step_returns_context_for_next_step(self, mock_runner):
        engine = FlowEngine(mock_runner)
        context = WizardContext({'existing': 1})
        step = TextStep(id='name', result_value='demo', result_mode=ResultMode.ACCEPT)

        returned = engine.execute_step(step, context)

        assert returned is context
        assert returned.as_dict() == {'existing': 1, 'name': 'demo'}
