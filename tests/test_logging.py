import json
import logging

from storefront.utils.logging import JSONFormatter
from storefront.utils.settings import SERVICE_NAME


def _request_records(caplog):
    return [r for r in caplog.records if r.name == SERVICE_NAME and hasattr(r, "headers")]


def test_request_log_masks_credentials(client, customer, auth_headers, caplog):
    caplog.set_level(logging.INFO, logger=SERVICE_NAME)

    client.get("/cart", headers={**auth_headers(customer), "X-Request-ID": "req-1"})

    record = _request_records(caplog)[-1]
    assert record.request_id == "req-1"
    assert record.status_code == 200
    assert record.headers["authorization"] == "***"
    assert record.headers["x-request-id"] == "req-1"


def test_formatter_emits_extra_fields():
    record = logging.LogRecord("storefront", logging.INFO, __file__, 1, "Order created", None, None)
    record.order_id = 5
    record.headers = {"authorization": "***"}

    out = json.loads(JSONFormatter("storefront").format(record))
    assert out["message"] == "Order created"
    assert out["service"] == "storefront"
    assert out["order_id"] == 5
    assert out["headers"] == {"authorization": "***"}
