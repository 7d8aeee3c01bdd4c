def test_comment_thread_on_listing(
        client, make_user, make_category, make_listing):
    alice = make_user('alice')
    bob = make_user('bob')
    listing_id = make_listing('alice', make_category())

    resp = client.post('/api/comments', json={
        'listingId': listing_id, 'content': 'Is delivery possible?'},
        headers=bob)
    assert resp.status_code == 201
    top = resp.get_json()
    assert top['user']['id'] == 'bob'

    resp = client.post('/api/comments', json={
        'listingId': listing_id,
        'parentId': top['id'],
        'content': 'Yes, within the city',
    }, headers=alice)
    assert resp.status_code == 201

    thread = client.get(f'/api/comments?listingId={listing_id}').get_json()
    assert [c['content'] for c in thread] == [
        'Is delivery possible?', 'Yes, within the city']

    roots = client.get(
        f'/api/comments?listingId={listing_id}&parentId=null').get_json()
    assert [c['id'] for c in roots] == [top['id']]

    replies = client.get(f"/api/comments?parentId={top['id']}").get_json()
    assert [c['userId'] for c in replies] == ['alice']


def test_comment_needs_a_target(client, make_user):
    headers = make_user('alice')
    resp = client.post(
        '/api/comments', json={'content': 'orphan'}, headers=headers)
    assert resp.status_code == 400


def test_reply_must_share_parent_thread(
        client, make_user, make_category, make_listing):
    headers = make_user('alice')
    category_id = make_category()
    first = make_listing('alice', category_id)
    second = make_listing('alice', category_id)

    parent_id = client.post('/api/comments', json={
        'listingId': first, 'content': 'hello'}, headers=headers
    ).get_json()['id']

    resp = client.post('/api/comments', json={
        'listingId': second, 'parentId': parent_id, 'content': 'stray'},
        headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'parentId'


def test_edit_and_delete_comment(
        client, make_user, make_category, make_listing):
    alice = make_user('alice')
    bob = make_user('bob')
    listing_id = make_listing('alice', make_category())

    comment_id = client.post('/api/comments', json={
        'listingId': listing_id, 'content': 'first'}, headers=alice
    ).get_json()['id']

    assert client.put(
        f'/api/comments/{comment_id}',
        json={'content': 'hijack'},
        headers=bob).status_code == 403

    resp = client.put(
        f'/api/comments/{comment_id}',
        json={'content': 'edited'},
        headers=alice)
    assert resp.status_code == 200
    assert resp.get_json()['isEdited'] is True

    assert client.delete(
        f'/api/comments/{comment_id}', headers=bob).status_code == 403
    assert client.delete(
        f'/api/comments/{comment_id}', headers=alice).status_code == 200
    assert client.get(
        f'/api/comments?listingId={listing_id}').get_json() == []


def test_forum_posts(client, make_user, make_category):
    alice = make_user('alice')
    bob = make_user('bob')
    admin = make_user('admin', is_admin=True)
    category_id = make_category('Food')

    resp = client.post('/api/forum/posts', json={
        'title': 'Best <i>pantries</i>?',
        'content': 'Share your tips',
        'categoryId': category_id,
        'productRating': 4,
    }, headers=alice)
    assert resp.status_code == 201
    post = resp.get_json()
    assert post['title'] == 'Best &lt;i&gt;pantries&lt;/i&gt;?'
    assert post['category']['name'] == 'Food'

    second = client.post('/api/forum/posts', json={
        'title': 'Later post', 'content': 'More'}, headers=bob).get_json()

    # Only admins pin or lock
    assert client.put(
        f"/api/forum/posts/{post['id']}",
        json={'isPinned': True},
        headers=alice).status_code == 403
    resp = client.put(
        f"/api/forum/posts/{post['id']}",
        json={'isPinned': True, 'isLocked': True},
        headers=admin)
    assert resp.status_code == 200

    listing = client.get('/api/forum/posts').get_json()
    assert [p['id'] for p in listing] == [post['id'], second['id']]

    for expected in (1, 2):
        viewed = client.get(f"/api/forum/posts/{post['id']}").get_json()
        assert viewed['viewCount'] == expected

    # Locked posts take no new comments from members
    resp = client.post('/api/comments', json={
        'forumPostId': post['id'], 'content': 'late'}, headers=bob)
    assert resp.status_code == 403

    assert client.delete(
        f"/api/forum/posts/{post['id']}", headers=bob).status_code == 403
    assert client.delete(
        f"/api/forum/posts/{post['id']}", headers=alice).status_code == 200
    assert client.get(
        f"/api/forum/posts/{post['id']}").status_code == 404


def test_forum_post_rating_range(client, make_user):
    headers = make_user('alice')
    resp = client.post('/api/forum/posts', json={
        'title': 'Review', 'content': 'ok', 'productRating': 9},
        headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'productRating'
