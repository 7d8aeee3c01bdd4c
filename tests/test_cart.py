def test_cart_merges_quantities(
        client, make_user, make_category, make_listing):
    make_user('seller')
    buyer = make_user('buyer')
    listing_id = make_listing('seller', make_category(), price=10)

    resp = client.post(
        '/api/cart', json={'listingId': listing_id}, headers=buyer)
    assert resp.status_code == 201
    resp = client.post(
        '/api/cart', json={'listingId': listing_id, 'quantity': 2},
        headers=buyer)
    item = resp.get_json()
    assert item['quantity'] == 3
    assert item['listing']['user']['id'] == 'seller'
    assert item['listing']['priceDisplay'] == '$10.00'

    assert client.get(
        '/api/cart/count', headers=buyer).get_json() == {'count': 3}
    assert len(client.get('/api/cart', headers=buyer).get_json()) == 1


def test_cart_items_are_scoped_to_owner(
        client, make_user, make_category, make_listing):
    make_user('seller')
    buyer = make_user('buyer')
    other = make_user('other')
    listing_id = make_listing('seller', make_category())

    item_id = client.post(
        '/api/cart', json={'listingId': listing_id}, headers=buyer
    ).get_json()['id']

    assert client.patch(
        f'/api/cart/{item_id}',
        json={'quantity': 5},
        headers=other).status_code == 404
    assert client.delete(
        f'/api/cart/{item_id}', headers=other).status_code == 404

    resp = client.patch(
        f'/api/cart/{item_id}', json={'quantity': 5}, headers=buyer)
    assert resp.get_json()['quantity'] == 5

    resp = client.patch(
        f'/api/cart/{item_id}', json={'quantity': 0}, headers=buyer)
    assert resp.status_code == 400

    assert client.delete(
        f'/api/cart/{item_id}', headers=buyer).status_code == 200
    assert client.get('/api/cart', headers=buyer).get_json() == []


def test_wishlist_toggle(client, make_user, make_category, make_listing):
    make_user('seller')
    buyer = make_user('buyer')
    listing_id = make_listing('seller', make_category())

    resp = client.post(
        '/api/wishlist/toggle', json={'listingId': listing_id},
        headers=buyer)
    assert resp.get_json()['added'] is True
    assert client.get(
        '/api/wishlist', headers=buyer).get_json() == [listing_id]

    resp = client.post(
        '/api/wishlist/toggle', json={'listingId': listing_id},
        headers=buyer)
    assert resp.get_json()['added'] is False
    assert client.get('/api/wishlist', headers=buyer).get_json() == []


def test_cart_rejects_unknown_listing(client, make_user):
    buyer = make_user('buyer')
    resp = client.post('/api/cart', json={'listingId': 99}, headers=buyer)
    assert resp.status_code == 400


def test_cart_rejects_out_of_range_values(
        client, make_user, make_category, make_listing):
    make_user('seller')
    buyer = make_user('buyer')
    listing_id = make_listing('seller', make_category())

    resp = client.post(
        '/api/cart', json={'listingId': 2 ** 63}, headers=buyer)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'listingId'

    resp = client.post('/api/cart', json={
        'listingId': listing_id, 'quantity': 2 ** 63 - 1}, headers=buyer)
    assert resp.status_code == 201
    resp = client.post(
        '/api/cart', json={'listingId': listing_id}, headers=buyer)
    assert resp.status_code == 400
    assert resp.get_json()['errors'] == [
        {'field': 'quantity', 'message': 'Quantity too large'}]

    assert client.patch(
        f'/api/cart/{2 ** 63}', json={'quantity': 1},
        headers=buyer).status_code == 404
    assert client.post(
        '/api/wishlist/toggle', json={'listingId': 2 ** 63},
        headers=buyer).status_code == 400
