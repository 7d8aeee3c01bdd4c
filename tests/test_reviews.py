import pytest

from terranav.services.rating_service import points_for_average


@pytest.mark.parametrize('average, points', [
    (5, 785),
    (4, 628),
    (4.5, 707),   # 706.5 rounds half up
    (1, 157),
    (0, 0),
])
def test_points_for_average(average, points):
    assert points_for_average(average) == points


def test_reviews_recalculate_seller_rating(
        client, make_user, make_category, make_listing):
    make_user('seller')
    buyer1 = make_user('buyer1')
    buyer2 = make_user('buyer2')
    listing_id = make_listing('seller', make_category())

    resp = client.post('/api/reviews', json={
        'listingId': listing_id,
        'rating': 5,
        'comment': 'Great',
    }, headers=buyer1)
    assert resp.status_code == 201
    review = resp.get_json()
    # Listing reviews rate the seller by default
    assert review['reviewedUserId'] == 'seller'
    assert review['reviewerId'] == 'buyer1'

    client.post('/api/reviews', json={
        'reviewedUserId': 'seller',
        'rating': 4,
    }, headers=buyer2)

    rating = client.get('/api/users/seller/rating').get_json()
    assert rating == {
        'totalPoints': 707,
        'totalReviews': 2,
        'averageRating': 4.5,
    }

    resp = client.put(
        f"/api/reviews/{review['id']}", json={'rating': 3}, headers=buyer1)
    assert resp.status_code == 200
    rating = client.get('/api/users/seller/rating').get_json()
    assert rating['averageRating'] == 3.5
    assert rating['totalPoints'] == 550

    resp = client.delete(f"/api/reviews/{review['id']}", headers=buyer1)
    assert resp.status_code == 200
    rating = client.get('/api/users/seller/rating').get_json()
    assert rating == {
        'totalPoints': 628,
        'totalReviews': 1,
        'averageRating': 4.0,
    }

    reviews = client.get('/api/reviews?reviewedUserId=seller').get_json()
    assert [r['rating'] for r in reviews] == [4]


def test_rating_of_unrated_user_is_zero(client):
    assert client.get('/api/users/new-user/rating').get_json() == {
        'totalPoints': 0,
        'totalReviews': 0,
        'averageRating': 0,
    }


def test_review_rating_must_be_one_to_five(client, make_user):
    make_user('seller')
    headers = make_user('buyer')
    for rating in (0, 6):
        resp = client.post('/api/reviews', json={
            'reviewedUserId': 'seller', 'rating': rating}, headers=headers)
        assert resp.status_code == 400
        assert resp.get_json()['errors'][0]['field'] == 'rating'


def test_cannot_review_yourself(client, make_user):
    headers = make_user('seller')
    resp = client.post('/api/reviews', json={
        'reviewedUserId': 'seller', 'rating': 5}, headers=headers)
    assert resp.status_code == 400


def test_only_reviewer_or_admin_edits_review(client, make_user):
    make_user('seller')
    buyer = make_user('buyer')
    other = make_user('other')
    admin = make_user('admin', is_admin=True)

    review_id = client.post('/api/reviews', json={
        'reviewedUserId': 'seller', 'rating': 2}, headers=buyer
    ).get_json()['id']

    assert client.put(
        f'/api/reviews/{review_id}',
        json={'rating': 5},
        headers=other).status_code == 403
    assert client.delete(
        f'/api/reviews/{review_id}', headers=other).status_code == 403
    assert client.delete(
        f'/api/reviews/{review_id}', headers=admin).status_code == 200
    assert client.delete(
        f'/api/reviews/{review_id}', headers=admin).status_code == 404
