from terranav.extensions import db
from terranav.models import User
from terranav.services.identity_service import (
    issue_identity_token,
    verify_identity_token,
)


def _token(app, **claims):
    with app.app_context():
        return issue_identity_token(claims)


def test_callback_upserts_user_and_starts_session(app, client):
    token = _token(
        app,
        sub='ext-1',
        email='ada@example.com',
        firstName='Ada',
        lastName='Lovelace',
    )

    resp = client.post('/api/auth/callback', json={'token': token})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['id'] == 'ext-1'
    assert data['firstName'] == 'Ada'
    assert data['isAdmin'] is False

    # Session cookie now identifies the user
    resp = client.get('/api/auth/user')
    assert resp.status_code == 200
    assert resp.get_json()['email'] == 'ada@example.com'

    # A second login refreshes the stored profile
    token = _token(app, sub='ext-1', email='ada@example.com',
                   firstName='Augusta')
    client.post('/api/auth/callback', json={'token': token})
    with app.app_context():
        assert User.query.count() == 1
        assert db.session.get(User, 'ext-1').first_name == 'Augusta'


def test_callback_rejects_bad_token(client):
    resp = client.post('/api/auth/callback', json={'token': 'garbage'})
    assert resp.status_code == 401
    assert resp.get_json() == {'message': 'Unauthorized'}


def test_callback_requires_token_field(client):
    resp = client.post('/api/auth/callback', json={})
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'token'


def test_token_signed_with_other_secret_is_rejected(app, client, make_user):
    make_user('u1')
    with app.app_context():
        app.config['IDENTITY_TOKEN_SECRET'] = 'another-secret'
        forged = issue_identity_token({'sub': 'u1'})
        app.config['IDENTITY_TOKEN_SECRET'] = 'test-identity-secret'
        assert verify_identity_token(forged) is None

    resp = client.get(
        '/api/auth/user', headers={'Authorization': f'Bearer {forged}'})
    assert resp.status_code == 401


def test_issue_token_requires_subject(app):
    with app.app_context():
        try:
            issue_identity_token({'email': 'x@example.com'})
        except ValueError:
            pass
        else:
            raise AssertionError('expected ValueError')


def test_bearer_token_for_unknown_user_is_unauthorized(app, client):
    token = _token(app, sub='ghost')
    resp = client.get(
        '/api/auth/user', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401


def test_update_profile(client, make_user):
    headers = make_user('u1')
    resp = client.put('/api/auth/profile', json={
        'firstName': 'Grace',
        'phone': '555-0100',
        'isAdmin': True,
    }, headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['firstName'] == 'Grace'
    assert data['phone'] == '555-0100'
    assert data['isAdmin'] is False


def test_public_paths_do_not_need_login(client):
    assert client.get('/api/health').get_json() == {'status': 'ok'}
    assert client.get('/api/categories').status_code == 200
    assert client.get('/api/forum/posts').status_code == 200
    assert client.get('/api/users/nobody/rating').status_code == 200


def test_private_paths_need_login(client):
    for path in ('/api/messages', '/api/conversations', '/api/cart',
                 '/api/wishlist', '/api/admin/stats', '/api/reports'):
        resp = client.get(path)
        assert resp.status_code == 401, path


def test_logout(client, app):
    token = _token(app, sub='ext-2', email='bob@example.com')
    client.post('/api/auth/callback', json={'token': token})

    assert client.post('/api/auth/logout').status_code == 200
    assert client.get('/api/auth/user').status_code == 401
