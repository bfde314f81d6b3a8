# seed_data.py
# Fills the local store with a demo event. Run: python seed_data.py

from datetime import date, timedelta

import logic
from extensions import get_engine, get_store


def seed(today=None):
    """Replaces all local data with one open event, three groups and a few evaluations."""
    today = today or date.today()
    store = get_store()
    engine = get_engine()

    # --- 1. Clean up ---
    store.clear_all()

    # --- 2. Create data ---
    event = logic.create_event(
        store, engine,
        name='Integrated Projects Showcase',
        date=today.isoformat(),
        response_deadline=(today + timedelta(days=7)).isoformat(),
        icon='Rocket',
        description='Final presentations of the semester projects.',
    )

    teams = {
        'Team Alpha': ['Ana', 'Bruno', 'Carla'],
        'Team Beta': ['Diego', 'Elisa'],
        'Team Gamma': ['Fabio', 'Gabi', 'Hugo'],
    }
    groups = []
    for team_name, members in teams.items():
        group = logic.add_group(store, engine, event.id, team_name, icon='Users')
        for member_name in members:
            logic.add_member(store, engine, group.id, member_name)
        groups.append(group)

    criteria = store.criteria(event.id)
    sample_scores = {'Judge One': [8, 7, 9, 6], 'Judge Two': [6, 9, 7, 8]}
    for group in groups:
        for evaluator, values in sample_scores.items():
            logic.submit_evaluation(
                store, engine, event.id, group.id, evaluator,
                scores={c.id: v for c, v in zip(criteria, values)},
                individual_scores={m.id: values[0] for m in group.members},
                group_comment=f'Solid work by {group.name}.',
            )
    return event


if __name__ == '__main__':
    from app import create_app

    app = create_app()
    with app.app_context():
        print('Seeding demo data...')
        demo = seed()
        get_engine().drain(timeout=30)
        print(f'Done: event "{demo.name}" ({demo.id}).')
