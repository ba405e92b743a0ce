"""
Example: Webhook Receiver

Minimal stdlib HTTP server that accepts Yandex Pay notifications.
Answers 200 only when the notification parsed and verified, so the
provider retries delivery of anything that failed.

Run:
    YANDEX_PAY_API_KEY=... YANDEX_PAY_WEBHOOK_SECRET=... YANDEX_PAY_ENVIRONMENT=sandbox \
        python examples/webhook_receiver.py

Legacy callbacks are rejected with 400 unless the webhook secret is set.
"""

from http.server import BaseHTTPRequestHandler, HTTPServer

from yandex_pay import WebhookError, YandexPay, ValidationError, configure_logging

pay = YandexPay()
logger = configure_logging("DEBUG")


class WebhookHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)

        try:
            notification = pay.webhooks.handle(body, dict(self.headers))
        except (WebhookError, ValidationError) as e:
            logger.warning(f"Rejected webhook: {e}")
            self.send_response(400)
            self.end_headers()
            return

        if notification.is_success:
            logger.info(f"Order {notification.order_id} paid ({notification.status})")
        elif notification.is_failed:
            logger.info(f"Order {notification.order_id} failed: {notification.reason}")
        else:
            logger.info(f"Order {notification.order_id} pending ({notification.status})")

        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(b'{"status": "success"}')


if __name__ == "__main__":
    print("Listening on :8080")
    HTTPServer(("", 8080), WebhookHandler).serve_forever()
