# feedback.py
# Short written feedback for a group, generated by a Gemini model from its criterion averages

import logging

from google import genai

from scoring import criterion_average

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = 'Could not generate feedback right now.'
NO_RESPONSE_MESSAGE = 'No response from the model.'

PROMPT_TEMPLATE = """\
Act as an experienced teacher grading Integrated Projects.
The project being evaluated is: "{group_name}".

These are the average scores per criterion:
{breakdown}

Write short constructive feedback (at most 3 sentences).
Highlight the strongest point and suggest one practical improvement for the weakest one.
Be direct and encouraging.
"""


def make_client(api_key):
    """Gemini client, or None when no API key is configured."""
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


def build_prompt(group, criteria, evaluations):
    lines = [
        f'{c.name} ({c.description or ""}): {criterion_average(c.id, evaluations):.1f}/10'
        for c in criteria
    ]
    return PROMPT_TEMPLATE.format(group_name=group.name, breakdown='\n'.join(lines))


def generate_feedback(client, model, group, criteria, evaluations):
    """
    Asks the model for feedback on one group. ``evaluations`` must be the
    group's own evaluations. Returns the fallback message when there is no
    client or the call fails; the caller never sees the error.
    """
    if client is None:
        logger.info('No Gemini API key configured, returning fallback feedback')
        return FALLBACK_MESSAGE
    prompt = build_prompt(group, criteria, evaluations)
    try:
        response = client.models.generate_content(model=model, contents=prompt)
    except Exception:
        logger.exception('Feedback generation failed for group %s', group.id)
        return FALLBACK_MESSAGE
    return (getattr(response, 'text', None) or '').strip() or NO_RESPONSE_MESSAGE
