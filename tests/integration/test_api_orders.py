"""
Integration tests for the orders and procurements HTTP endpoints.
"""


class TestPlaceOrderEndpoint:
    """Tests for POST /api/orders."""

    def test_create_order(self, client, customer, variant):
        """Test placing a fully covered order."""
        customer_id, variant_id = customer.id, variant.id

        response = client.post('/api/orders', json={
            'customerId': customer_id,
            'deliveryFee': 1500,
            'items': [{'variantId': variant_id, 'quantity': 3}],
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['orderNumber'] == 'TK-000001'
        assert data['paymentStatus'] == 'NOT_PAID'
        assert data['packingStatus'] == 'NOT_READY'
        assert data['customer']['id'] == customer_id
        assert data['items'][0]['quantity'] == '3'
        assert data['items'][0]['isPreorder'] is False
        assert data['items'][0]['unitPrice'] == 10000
        assert data['procurements'] == []
        assert data['totals'] == {'subtotal': 30000, 'deliveryFee': 1500, 'discount': 0, 'total': 31500}

    def test_create_order_with_shortfall(self, client, customer, variant):
        """Test placing an order beyond stock returns a procurement."""
        customer_id, variant_id = customer.id, variant.id

        response = client.post('/api/orders', json={
            'customerId': customer_id,
            'items': [{'productVariantId': variant_id, 'quantity': '7'}],
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['items'][0]['isPreorder'] is True
        assert data['procurements'][0]['neededQty'] == '2'
        assert data['procurements'][0]['status'] == 'TO_BUY'

    def test_validation_error(self, client, customer):
        """Test field errors are listed in the response."""
        response = client.post('/api/orders', json={'customerId': customer.id, 'items': []})

        assert response.status_code == 400
        data = response.get_json()
        assert data['status'] == 'error'
        assert data['errors'][0]['field'] == 'items'

    def test_body_must_be_json(self, client):
        """Test a form-encoded body is rejected."""
        response = client.post('/api/orders', data='customerId=1')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Request body must be a JSON object'

    def test_unknown_variant(self, client, customer, variant):
        """Test an unknown variant fails the whole order."""
        customer_id, variant_id = customer.id, variant.id

        response = client.post('/api/orders', json={
            'customerId': customer_id,
            'items': [{'variantId': variant_id, 'quantity': 1}, {'variantId': 9999, 'quantity': 1}],
        })

        assert response.status_code == 400
        data = response.get_json()
        assert data['field'] == 'variant'
        assert data['id'] == 9999

        # Nothing was persisted
        assert client.get('/api/orders').get_json() == []
        assert client.get(f'/api/variants/{variant_id}').get_json()['stockOnHand'] == '5'


class TestOrderEndpoints:
    """Tests for reading and updating orders."""

    def _place(self, client, customer_id, variant_id, quantity=1):
        response = client.post('/api/orders', json={
            'customerId': customer_id,
            'items': [{'variantId': variant_id, 'quantity': quantity}],
        })
        assert response.status_code == 201
        return response.get_json()

    def test_get_order(self, client, customer, variant):
        """Test fetching an order."""
        order = self._place(client, customer.id, variant.id)

        response = client.get(f"/api/orders/{order['id']}")
        assert response.status_code == 200
        assert response.get_json()['orderNumber'] == order['orderNumber']

    def test_get_unknown_order(self, client):
        """Test a missing order returns a JSON 404."""
        response = client.get('/api/orders/9999')
        assert response.status_code == 404
        assert response.get_json()['status'] == 'error'

    def test_list_orders_with_filters(self, client, customer, variant):
        """Test filtering orders by payment and packing status."""
        customer_id, variant_id = customer.id, variant.id
        first = self._place(client, customer_id, variant_id)
        self._place(client, customer_id, variant_id)
        client.put(f"/api/orders/{first['id']}", json={'paymentStatus': 'PAID'})

        assert len(client.get('/api/orders').get_json()) == 2
        paid = client.get('/api/orders?status=PAID').get_json()
        assert [o['id'] for o in paid] == [first['id']]
        assert len(client.get('/api/orders?packingStatus=NOT_READY').get_json()) == 2

    def test_list_orders_invalid_filter(self, client):
        """Test an unknown status filter is rejected."""
        response = client.get('/api/orders?status=SHIPPED')
        assert response.status_code == 400

    def test_update_order(self, client, customer, variant):
        """Test updating statuses and notes."""
        order = self._place(client, customer.id, variant.id)

        response = client.put(f"/api/orders/{order['id']}", json={
            'paymentStatus': 'DOWN_PAYMENT',
            'packingStatus': 'PACKING',
            'notes': 'Call before delivery',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['paymentStatus'] == 'DOWN_PAYMENT'
        assert data['packingStatus'] == 'PACKING'
        assert data['notes'] == 'Call before delivery'
        assert data['paymentType'] == 'MANUAL_TRANSFER'

    def test_update_order_clears_notes(self, client, customer, variant):
        """Test an explicit null clears the order notes."""
        order = self._place(client, customer.id, variant.id)
        client.put(f"/api/orders/{order['id']}", json={'notes': 'x'})

        response = client.put(f"/api/orders/{order['id']}", json={'notes': None})

        assert response.status_code == 200
        assert response.get_json()['notes'] is None
        assert client.get(f"/api/orders/{order['id']}").get_json()['notes'] is None

    def test_update_order_invalid_status(self, client, customer, variant):
        """Test an unknown payment status is rejected."""
        order = self._place(client, customer.id, variant.id)
        response = client.put(f"/api/orders/{order['id']}", json={'paymentStatus': 'REFUNDED'})
        assert response.status_code == 400


class TestProcurementEndpoints:
    """Tests for /api/procurements."""

    def test_list_and_arrive(self, client, customer, variant):
        """Test listing procurements and marking one arrived."""
        customer_id, variant_id = customer.id, variant.id
        client.post('/api/orders', json={
            'customerId': customer_id,
            'items': [{'variantId': variant_id, 'quantity': 8}],
        })

        listing = client.get('/api/procurements?status=TO_BUY').get_json()
        assert len(listing) == 1
        assert listing[0]['neededQty'] == '3'
        assert listing[0]['order']['orderNumber'] == 'TK-000001'
        procurement_id = listing[0]['id']

        response = client.put(f'/api/procurements/{procurement_id}', json={'status': 'ARRIVED'})
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ARRIVED'
        assert response.get_json()['arrivedAt'] is not None
        assert client.get(f'/api/variants/{variant_id}').get_json()['stockOnHand'] == '3'

        response = client.put(f'/api/procurements/{procurement_id}', json={'status': 'TO_BUY'})
        assert response.status_code == 409
        assert client.get(f'/api/variants/{variant_id}').get_json()['stockOnHand'] == '3'

    def test_invalid_status_filter(self, client):
        """Test an unknown procurement status filter is rejected."""
        assert client.get('/api/procurements?status=LOST').status_code == 400

    def test_unknown_procurement(self, client):
        """Test updating a missing procurement returns 404."""
        response = client.put('/api/procurements/9999', json={'status': 'ORDERED'})
        assert response.status_code == 404


def test_metrics_endpoint(client):
    """Test the Prometheus endpoint exposes order counters."""
    response = client.get('/metrics')
    assert response.status_code == 200
    assert b'orders_placed_total' in response.data


def test_unknown_route_is_json(client):
    """Test unknown routes return a JSON 404."""
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['status'] == 'error'
