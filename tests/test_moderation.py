from terranav.models import AuditLog


def test_report_is_always_pending_and_filed_by_caller(
        client, make_user, make_category, make_listing):
    reporter = make_user('u1')
    make_user('u2')
    listing_id = make_listing('u2', make_category())

    resp = client.post('/api/reports', json={
        'listingId': listing_id,
        'reportedUserId': 'u2',
        'reason': 'Scam',
        'description': 'Asked for a wire transfer',
        'status': 'resolved',
        'reporterId': 'u2',
    }, headers=reporter)
    assert resp.status_code == 201
    report = resp.get_json()
    assert report['status'] == 'pending'
    assert report['reporterId'] == 'u1'
    assert report['reportedUserId'] == 'u2'


def test_report_needs_reason(client, make_user):
    headers = make_user('u1')
    resp = client.post('/api/reports', json={'reason': ''}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'reason'


def test_report_for_unknown_listing(client, make_user):
    headers = make_user('u1')
    resp = client.post('/api/reports', json={
        'reason': 'Spam', 'listingId': 42}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'listingId'


def test_admin_reviews_reports(app, client, make_user):
    user = make_user('u1')
    admin = make_user('admin', is_admin=True)

    report_id = client.post('/api/reports', json={
        'reason': 'Spam'}, headers=user).get_json()['id']

    assert client.get('/api/reports', headers=user).status_code == 403
    assert client.put(
        f'/api/reports/{report_id}',
        json={'status': 'resolved'},
        headers=user).status_code == 403

    pending = client.get(
        '/api/reports?status=pending', headers=admin).get_json()
    assert [r['id'] for r in pending] == [report_id]

    resp = client.put(
        f'/api/reports/{report_id}',
        json={'status': 'resolved'},
        headers=admin)
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'resolved'

    assert client.get(
        '/api/reports?status=pending', headers=admin).get_json() == []

    with app.app_context():
        audit = AuditLog.query.filter_by(
            action='REPORT_STATUS_UPDATE').one()
        assert audit.actor_id == 'admin'
        assert audit.target_id == str(report_id)
        assert audit.get_payload() == {'from': 'pending', 'to': 'resolved'}


def test_update_missing_report_is_404(client, make_user):
    admin = make_user('admin', is_admin=True)
    resp = client.put(
        '/api/reports/999', json={'status': 'resolved'}, headers=admin)
    assert resp.status_code == 404


def test_admin_stats(client, make_user, make_category, make_listing):
    user = make_user('u1')
    admin = make_user('admin', is_admin=True)
    category_id = make_category()
    make_listing('u1', category_id)
    make_listing('u1', category_id, status='suspended')
    client.post('/api/reports', json={'reason': 'a'}, headers=user)
    report_id = client.post(
        '/api/reports', json={'reason': 'b'}, headers=user).get_json()['id']
    client.put(
        f'/api/reports/{report_id}',
        json={'status': 'dismissed'},
        headers=admin)

    assert client.get('/api/admin/stats', headers=user).status_code == 403

    stats = client.get('/api/admin/stats', headers=admin).get_json()
    assert stats == {
        'usersCount': 2,
        'listingsCount': 2,
        'reportsCount': 2,
        'pendingReportsCount': 1,
    }


def test_category_admin_only_and_unique_slug(client, make_user):
    user = make_user('u1')
    admin = make_user('admin', is_admin=True)
    payload = {'name': 'Legal Aid', 'slug': 'legal-aid'}

    assert client.post(
        '/api/categories', json=payload, headers=user).status_code == 403

    resp = client.post('/api/categories', json=payload, headers=admin)
    assert resp.status_code == 201
    assert resp.get_json()['icon'] == 'scale'

    resp = client.post('/api/categories', json=payload, headers=admin)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'slug'

    resp = client.get('/api/categories/legal-aid')
    assert resp.get_json()['name'] == 'Legal Aid'
    assert client.get('/api/categories/unknown').status_code == 404


def test_seed_endpoints(client, make_user):
    user = make_user('u1')
    admin = make_user('admin', is_admin=True)

    assert client.post(
        '/api/seed/marketplace', headers=user).status_code == 403

    resp = client.post('/api/seed/marketplace', headers=admin)
    assert resp.status_code == 200
    assert resp.get_json()['listingsCount'] > 0

    categories = client.get('/api/categories').get_json()
    assert 'housing' in {c['slug'] for c in categories}

    listings = client.get('/api/listings').get_json()
    assert len(listings) == resp.get_json()['listingsCount']
    assert all(item['userId'] == 'admin' for item in listings)

    resp = client.post('/api/seed/forum-posts', headers=admin)
    assert resp.status_code == 200
    posts = client.get('/api/forum/posts').get_json()
    assert len(posts) == resp.get_json()['postsCount']
