import pytest


def test_own_profile_includes_email_and_stats(client, register):
    user, headers = register(name='Alice', email='alice@example.com')

    profile = client.get('/users/profile', headers=headers).get_json()
    assert profile['id'] == user['id']
    assert profile['email'] == 'alice@example.com'
    assert profile['swaps_completed'] == 0
    assert profile['average_rating'] is None
    assert 'password_hash' not in profile


def test_public_profile_hides_email(client, register):
    user, _ = register()
    _, viewer = register()

    profile = client.get(f"/users/{user['id']}", headers=viewer).get_json()
    assert 'email' not in profile
    assert 'google_id' not in profile
    assert client.get('/users/9999', headers=viewer).status_code == 404


def test_update_profile(client, register):
    _, headers = register()

    response = client.put('/users/profile', headers=headers, json={
        'name': 'Renamed', 'bio': 'Teaches chess', 'photo': 'https://img.example.com/me.png',
    })
    assert response.status_code == 200
    profile = client.get('/users/profile', headers=headers).get_json()
    assert profile['name'] == 'Renamed'
    assert profile['bio'] == 'Teaches chess'
    assert profile['photo'] == 'https://img.example.com/me.png'


@pytest.mark.parametrize('body', [
    {},
    {'name': 'X'},
    {'bio': 'x' * 501},
    {'location': 'x' * 101},
    {'photo': 'not a url'},
])
def test_update_profile_validation(client, register, body):
    _, headers = register()
    assert client.put('/users/profile', headers=headers, json=body).status_code == 400


def test_derived_stats_average_over_reviews(client, register, create_skill):
    provider, provider_headers = register(name='Pat')
    reviewers = [register(), register()]
    guitar = create_skill(provider_headers, title='Guitar')

    for (reviewer, headers), rating in zip(reviewers, [5, 4]):
        offered = create_skill(headers, title='Cooking', category='Food')
        swap_id = client.post('/swaps', headers=headers, json={
            'provider_id': provider['id'], 'offered_skill_id': offered['id'], 'wanted_skill_id': guitar['id'],
        }).get_json()['swapId']
        client.put(f'/swaps/{swap_id}/status', headers=provider_headers, json={'status': 'accepted'})
        client.put(f'/swaps/{swap_id}/status', headers=headers, json={'status': 'completed'})
        client.post('/reviews', headers=headers, json={
            'swap_request_id': swap_id, 'reviewee_id': provider['id'], 'rating': rating,
        })

    profile = client.get('/users/profile', headers=provider_headers).get_json()
    assert profile['swaps_completed'] == 2
    assert profile['average_rating'] == 4.5

    reviewer_profile = client.get(f"/users/{reviewers[0][0]['id']}", headers=provider_headers).get_json()
    assert reviewer_profile['swaps_completed'] == 1
    assert reviewer_profile['average_rating'] is None


def test_availability_is_replaced_and_ordered(client, register):
    user, headers = register()
    _, viewer = register()

    response = client.put('/users/availability', headers=headers, json={'slots': [
        {'day_of_week': 5, 'start_time': '10:00', 'end_time': '12:00'},
        {'day_of_week': 1, 'start_time': '18:30', 'end_time': '20:00'},
        {'day_of_week': 1, 'start_time': '08:00', 'end_time': '09:00'},
    ]})
    assert response.status_code == 200

    slots = client.get(f"/users/{user['id']}/availability", headers=viewer).get_json()
    assert [(s['day_of_week'], s['start_time']) for s in slots] == [(1, '08:00'), (1, '18:30'), (5, '10:00')]

    client.put('/users/availability', headers=headers, json={'slots': []})
    assert client.get(f"/users/{user['id']}/availability", headers=viewer).get_json() == []


@pytest.mark.parametrize('slot', [
    {'day_of_week': 7, 'start_time': '10:00', 'end_time': '11:00'},
    {'day_of_week': 2, 'start_time': '11:00', 'end_time': '10:00'},
    {'day_of_week': 2, 'start_time': '9:00', 'end_time': '10:00'},
    {'day_of_week': 2, 'start_time': '24:00', 'end_time': '24:30'},
])
def test_availability_validation(client, register, slot):
    _, headers = register()
    assert client.put('/users/availability', headers=headers, json={'slots': [slot]}).status_code == 400


def test_availability_of_unknown_user(client, register):
    _, headers = register()
    assert client.get('/users/9999/availability', headers=headers).status_code == 404
