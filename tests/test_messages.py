def test_send_and_list_messages(
        client, make_user, make_category, make_listing):
    alice = make_user('alice')
    bob = make_user('bob')
    listing_id = make_listing('bob', make_category(), title='Bike')

    resp = client.post('/api/messages', json={
        'receiverId': 'bob',
        'listingId': listing_id,
        'content': 'Is the <b>bike</b> still available?<script>x()</script>',
    }, headers=alice)
    assert resp.status_code == 201
    sent = resp.get_json()
    assert sent['senderId'] == 'alice'
    assert sent['isRead'] is False
    assert sent['listing'] == {'id': listing_id, 'title': 'Bike'}
    assert '<script>' not in sent['content']

    # General messages without a listing are accepted
    resp = client.post('/api/messages', json={
        'receiverId': 'alice',
        'content': 'Yes it is',
    }, headers=bob)
    assert resp.status_code == 201
    assert resp.get_json()['listing'] is None

    inbox = client.get('/api/messages', headers=bob).get_json()
    assert [m['content'] for m in inbox] == [
        'Yes it is',
        'Is the <b>bike</b> still available?',
    ]

    by_listing = client.get(
        f'/api/messages?listingId={listing_id}', headers=alice).get_json()
    assert len(by_listing) == 1

    conversations = client.get('/api/conversations', headers=alice)
    assert len(conversations.get_json()) == 2


def test_messages_are_private(client, make_user):
    alice = make_user('alice')
    make_user('bob')
    carol = make_user('carol')

    client.post('/api/messages', json={
        'receiverId': 'bob', 'content': 'hi'}, headers=alice)
    assert client.get('/api/messages', headers=carol).get_json() == []


def test_message_validation(client, make_user):
    alice = make_user('alice')

    resp = client.post('/api/messages', json={
        'receiverId': 'nobody', 'content': 'hi'}, headers=alice)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'receiverId'

    resp = client.post('/api/messages', json={
        'receiverId': 'alice', 'content': 'x' * 1001}, headers=alice)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'content'


def test_only_receiver_marks_message_read(client, make_user):
    alice = make_user('alice')
    bob = make_user('bob')

    message_id = client.post('/api/messages', json={
        'receiverId': 'bob', 'content': 'hi'}, headers=alice
    ).get_json()['id']

    resp = client.put(f'/api/messages/{message_id}/read', headers=alice)
    assert resp.status_code == 403

    resp = client.put(f'/api/messages/{message_id}/read', headers=bob)
    assert resp.status_code == 200

    inbox = client.get('/api/messages', headers=bob).get_json()
    assert inbox[0]['isRead'] is True

    resp = client.put('/api/messages/999/read', headers=bob)
    assert resp.status_code == 404
