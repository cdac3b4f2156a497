from conftest import property_payload


def test_create_property_assigns_display_id_and_owner(client, alice):
    resp = client.post('/api/properties', json=property_payload(amenities=['gym', 'pool']), headers=alice['headers'])

    assert resp.status_code == 201
    body = resp.get_json()
    assert body['id'] == 'PROP1000'
    assert body['createdBy'] == alice['id']
    assert body['amenities'] == 'gym|pool'
    assert body['rating'] == 3.0
    assert body['isVerified'] is False
    assert body['colorTheme'] == '#6ab45e'
    assert body['availableFrom'] == '2025-01-01'


def test_display_ids_strictly_increase(client, alice, bob, create_property):
    first = create_property(alice)
    second = create_property(bob)
    client.delete(f"/api/properties/{second['_id']}", headers=bob['headers'])
    third = create_property(alice)

    numbers = [int(p['id'].replace('PROP', '')) for p in (first, second, third)]
    assert numbers == [1000, 1001, 1002]


def test_create_requires_authentication(client):
    resp = client.post('/api/properties', json=property_payload())
    assert resp.status_code == 401


def test_create_validation_errors(client, alice):
    payload = property_payload(price='cheap', furnished='Partly', rating=7)
    del payload['title']

    resp = client.post('/api/properties', json=payload, headers=alice['headers'])

    assert resp.status_code == 400
    fields = {e['field'] for e in resp.get_json()['errors']}
    assert fields == {'title', 'price', 'furnished', 'rating'}


def test_list_is_paginated_newest_first(client, alice, create_property):
    for n in range(5):
        create_property(alice, title=f'Listing {n}')

    body = client.get('/api/properties?page=2&limit=2').get_json()

    assert body['page'] == 2
    assert body['pages'] == 3
    assert body['total'] == 5
    assert [p['title'] for p in body['items']] == ['Listing 2', 'Listing 1']


def test_list_defaults_on_bad_pagination_values(client, alice, create_property):
    create_property(alice)
    body = client.get('/api/properties?page=zero&limit=lots').get_json()

    assert body['page'] == 1
    assert body['pages'] == 1
    assert len(body['items']) == 1


def test_list_filters_by_price_range(client, alice, create_property):
    for price in (50, 100, 150, 200, 250):
        create_property(alice, price=price)

    body = client.get('/api/properties?minPrice=100&maxPrice=200').get_json()

    assert body['total'] == 3
    assert all(100 <= p['price'] <= 200 for p in body['items'])
    assert client.get('/api/properties').get_json()['total'] == 5


def test_list_rejects_non_numeric_filters(client):
    resp = client.get('/api/properties?minPrice=abc')

    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'minPrice'


def test_search(client, alice, create_property):
    create_property(alice, title='Lake view cottage', city='Udaipur')
    create_property(alice, title='City loft')

    body = client.get('/api/properties/search?query=udai').get_json()
    assert [p['title'] for p in body['items']] == ['Lake view cottage']


def test_search_requires_query(client):
    resp = client.get('/api/properties/search')

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Search query is required'


def test_get_property_by_id(client, alice, create_property):
    created = create_property(alice)

    resp = client.get(f"/api/properties/{created['_id']}")
    assert resp.status_code == 200
    assert resp.get_json()['id'] == created['id']

    assert client.get('/api/properties/12345').status_code == 404


def test_owner_can_update(client, alice, create_property):
    created = create_property(alice)

    resp = client.put(
        f"/api/properties/{created['_id']}",
        json={'price': 180, 'tags': ['quiet', 'corner'], 'createdBy': 999, 'id': 'PROP1'},
        headers=alice['headers'],
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['price'] == 180
    assert body['tags'] == 'quiet|corner'
    assert body['createdBy'] == alice['id']
    assert body['id'] == created['id']
    assert body['title'] == created['title']


def test_update_validates_present_fields(client, alice, create_property):
    created = create_property(alice)

    resp = client.put(f"/api/properties/{created['_id']}", json={'bedrooms': 'two'}, headers=alice['headers'])
    assert resp.status_code == 400


def test_non_owner_cannot_update(client, alice, bob, create_property):
    created = create_property(alice, price=150)

    resp = client.put(f"/api/properties/{created['_id']}", json={'price': 1}, headers=bob['headers'])

    assert resp.status_code == 403
    assert client.get(f"/api/properties/{created['_id']}").get_json()['price'] == 150


def test_non_owner_cannot_delete(client, alice, bob, create_property):
    created = create_property(alice)

    resp = client.delete(f"/api/properties/{created['_id']}", headers=bob['headers'])

    assert resp.status_code == 403
    assert client.get(f"/api/properties/{created['_id']}").status_code == 200


def test_owner_delete_makes_property_unfetchable(client, alice, create_property):
    created = create_property(alice)
    url = f"/api/properties/{created['_id']}"
    client.get(url)

    resp = client.delete(url, headers=alice['headers'])

    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Property removed'
    assert client.get(url).status_code == 404


def test_delete_missing_property(client, alice):
    assert client.delete('/api/properties/777', headers=alice['headers']).status_code == 404


def test_delete_cascades_to_favorites_and_recommendations(app, client, alice, bob, create_property):
    from marketplace.models import Favorite, Recommendation

    created = create_property(alice)
    client.post('/api/favorites', json={'propertyId': created['_id']}, headers=bob['headers'])
    client.post(
        '/api/recommendations',
        json={'recipientEmail': alice['email'], 'propertyId': created['_id']},
        headers=bob['headers'],
    )

    client.delete(f"/api/properties/{created['_id']}", headers=alice['headers'])

    with app.app_context():
        assert Favorite.query.count() == 0
        assert Recommendation.query.count() == 0
    assert client.get('/api/favorites', headers=bob['headers']).get_json()['total'] == 0


def test_oversized_numbers_in_payload_are_rejected(client, alice):
    resp = client.post(
        '/api/properties',
        json=property_payload(bedrooms=10 ** 20, price=10 ** 400),
        headers=alice['headers'],
    )

    assert resp.status_code == 400
    assert {e['field'] for e in resp.get_json()['errors']} == {'bedrooms', 'price'}


def test_oversized_filter_value_is_rejected(client):
    resp = client.get('/api/properties?minBedrooms=99999999999999999999')

    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'minBedrooms'


def test_oversized_property_id_is_not_found(client, alice):
    url = '/api/properties/99999999999999999999'

    assert client.get(url).status_code == 404
    assert client.put(url, json={'price': 1}, headers=alice['headers']).status_code == 404
    assert client.delete(url, headers=alice['headers']).status_code == 404


def test_page_far_past_the_end_is_empty(client, alice, create_property):
    create_property(alice)

    resp = client.get('/api/properties?page=99999999999999999999&limit=100')

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['items'] == []
    assert body['total'] == 1
