"""Tests for model-generated group feedback."""

from conftest import FakeGenaiClient
from feedback import FALLBACK_MESSAGE, NO_RESPONSE_MESSAGE, build_prompt, generate_feedback, make_client
from models import Criterion, Evaluation, Group

GROUP = Group(id='G1', event_id='E1', name='Team Alpha')
CRITERIA = [
    Criterion(id='c1', event_id='E1', name='Pitch', description='Speaking and time management', weight=1),
    Criterion(id='c2', event_id='E1', name='Design', description=None, weight=1),
]


def make_evaluation(eval_id, scores):
    return Evaluation(id=eval_id, event_id='E1', group_id='G1', evaluator_name=eval_id,
                      scores=scores, individual_scores={}, timestamp=0)


EVALUATIONS = [make_evaluation('a', {'c1': 8, 'c2': 5}), make_evaluation('b', {'c1': 6})]


def test_prompt_lists_criterion_averages():
    prompt = build_prompt(GROUP, CRITERIA, EVALUATIONS)

    assert 'The project being evaluated is: "Team Alpha".' in prompt
    assert 'Pitch (Speaking and time management): 7.0/10' in prompt
    # A missing score counts as 0 in the criterion average
    assert 'Design (): 2.5/10' in prompt


def test_no_api_key_means_no_client():
    assert make_client(None) is None
    assert make_client('') is None
    assert generate_feedback(None, 'gemini-2.5-flash', GROUP, CRITERIA, EVALUATIONS) == FALLBACK_MESSAGE


def test_model_answer_is_returned():
    client = FakeGenaiClient(text='Good work.\n')

    assert generate_feedback(client, 'some-model', GROUP, CRITERIA, EVALUATIONS) == 'Good work.'
    assert client.calls[0]['model'] == 'some-model'


def test_empty_answer():
    client = FakeGenaiClient(text=None)
    assert generate_feedback(client, 'some-model', GROUP, CRITERIA, EVALUATIONS) == NO_RESPONSE_MESSAGE


def test_model_error_falls_back():
    client = FakeGenaiClient(error=ConnectionError('unreachable'))
    assert generate_feedback(client, 'some-model', GROUP, CRITERIA, EVALUATIONS) == FALLBACK_MESSAGE
