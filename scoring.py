# scoring.py
# Score aggregation for the results dashboard

from collections import defaultdict


def _mean(values):
    return sum(values) / len(values) if values else 0


def evaluation_mean(evaluation):
    """Mean of the scores the evaluator actually gave. Unscored criteria are skipped."""
    values = [v for v in (evaluation.scores or {}).values() if v is not None]
    return _mean(values)


def group_evaluations(group_id, event_id, evaluations):
    return [e for e in evaluations if e.group_id == group_id and e.event_id == event_id]


def group_score_value(group_id, event_id, evaluations):
    group_evals = group_evaluations(group_id, event_id, evaluations)
    if not group_evals:
        return 0.0
    # Average of averages: each evaluator carries the same weight
    return sum(evaluation_mean(e) for e in group_evals) / len(group_evals)


def group_score(group_id, event_id, evaluations):
    """
    Composite score of a group, formatted with one decimal ("0.0" when the
    group has no evaluations in this event).
    """
    return f'{group_score_value(group_id, event_id, evaluations):.1f}'


def criterion_average(criterion_id, evaluations):
    """
    Mean score of one criterion. Unlike group_score, an evaluation without
    a score for this criterion counts as 0.
    """
    if not evaluations:
        return 0.0
    return sum((e.scores or {}).get(criterion_id) or 0 for e in evaluations) / len(evaluations)


def member_average(member_id, evaluations, zero_when_empty=False):
    """
    Mean individual score of a member over the evaluations that scored them.
    Returns None when nobody scored the member, or 0.0 with zero_when_empty.
    """
    values = [
        (e.individual_scores or {})[member_id]
        for e in evaluations
        if (e.individual_scores or {}).get(member_id) is not None
    ]
    if not values:
        return 0.0 if zero_when_empty else None
    return _mean(values)


def rank_groups(groups, evaluations, event_id):
    """Groups ordered by score, best first. Ties keep their original order."""
    return sorted(groups, key=lambda g: float(group_score(g.id, event_id, evaluations)), reverse=True)


def event_results(event, groups, criteria, evaluations, zero_when_empty=False):
    """Ranking table of one event, as shown on the admin dashboard."""
    by_group = defaultdict(list)
    for e in evaluations:
        if e.event_id == event.id:
            by_group[e.group_id].append(e)

    results = []
    for place, group in enumerate(rank_groups(groups, evaluations, event.id), start=1):
        group_evals = by_group.get(group.id, [])
        comments = [
            {'evaluatorName': e.evaluator_name, 'comment': e.group_comment.strip(), 'timestamp': e.timestamp}
            for e in group_evals
            if e.group_comment and e.group_comment.strip()
        ]
        results.append({
            'place': place,
            'group': group.to_dict(),
            'score': group_score(group.id, event.id, evaluations),
            'evaluationCount': len(group_evals),
            'criteria': [
                {'criterionId': c.id, 'name': c.name, 'average': round(criterion_average(c.id, group_evals), 1)}
                for c in criteria
            ],
            'members': [
                {'memberId': m.id, 'name': m.name, 'average': _round_optional(member_average(m.id, group_evals, zero_when_empty))}
                for m in group.members
            ],
            'comments': comments,
        })
    return results


def _round_optional(value):
    return None if value is None else round(value, 1)
