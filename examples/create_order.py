"""
Example: Order Lifecycle

Creates an order in the sandbox, reads it back and captures it.
Reads YANDEX_PAY_API_KEY from the environment.
"""

import uuid

from yandex_pay import ApiException, Environment, YandexPay


def main():
    print("=== Yandex Pay Order Example ===\n")

    with YandexPay(environment=Environment.SANDBOX) as pay:
        print(f"✅ Client initialized ({pay.config.base_url})")

        order_id = f"order-{uuid.uuid4().hex[:12]}"
        params = {
            "orderId": order_id,
            "currencyCode": "RUB",
            "cart": {
                "items": [
                    {
                        "productId": "p1",
                        "title": "Test product",
                        "quantity": {"count": "1"},
                        "total": "100.00",
                    }
                ],
                "total": {"amount": "100.00"},
            },
            "redirectUrls": {"onSuccess": "https://example.com/success"},
        }

        try:
            created = pay.orders.create(params)
        except ApiException as e:
            print(f"❌ Order creation failed: {e}")
            return

        print(f"✅ Order created: {order_id}")
        print(f"   Payment URL: {created.get('data', {}).get('paymentUrl')}")

        order = pay.orders.get(order_id)
        print(f"   Status: {order.get('data', {}).get('order', {}).get('paymentStatus')}")

        # Capture only succeeds once the buyer has paid
        result = pay.orders.capture(order_id, {"externalOperationId": uuid.uuid4().hex})
        print(f"   Capture response: {result.get('status')}")


if __name__ == "__main__":
    main()
