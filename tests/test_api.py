"""End-to-end checks through the FastAPI application."""
from __future__ import annotations

import datetime as dt

from ledgerdesk.services import ecb_rates
from ledgerdesk.utils import id_generator


def test_health_endpoints(client):
    assert client.get("/live").json() == {"status": "alive"}
    assert client.get("/healthz").json() == {"status": "ok"}


def test_fx_rejects_missing_or_unknown_currency(client):
    resp = client.get("/api/fx", params={"from": "USD"})
    assert resp.status_code == 400

    resp = client.get("/api/fx", params={"from": "USD", "to": "NGN"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "FX300"


def test_fx_same_currency(client):
    body = client.get("/api/fx", params={"from": "gbp", "to": "GBP"}).json()
    assert body["rate"] == 1.0
    assert body["date"] == dt.date.today().isoformat()


def test_fx_accepts_base_target_aliases(client, monkeypatch):
    monkeypatch.setattr(ecb_rates, "get_rate", lambda base, target: ecb_rates.EcbRate(rate=0.9, date="2025-01-10"))
    body = client.get("/api/fx", params={"base": "USD", "target": "EUR"}).json()
    assert body == {"rate": 0.9, "date": "2025-01-10"}


def test_fx_upstream_down_is_502(client):
    # outbound HTTP is refused by the autouse fixture
    resp = client.get("/api/fx", params={"from": "USD", "to": "EUR"})
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "FX301"


def test_fx_convert_reports_fallback(client):
    body = client.get("/api/fx/convert", params={"amount": 10, "from": "USD", "to": "EUR"}).json()
    assert body["source"] == "fallback"
    assert body["converted"] == 10.0


def test_product_sku_endpoint(client):
    body = client.get("/api/ids/product_sku").json()
    assert body["sku"].startswith("PR-") and len(body["sku"]) == 8


def test_product_sku_endpoint_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(id_generator, "generate_code", lambda length=5, prefix="": "PR-AAAAA")
    monkeypatch.setattr(id_generator, "_column_has", lambda db, column, value: True)

    resp = client.get("/api/ids/product_sku")
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "PRD102"


def test_settings_roundtrip(client):
    assert client.get("/settings").json()["base_currency"] == "USD"
    resp = client.put("/settings", json={"base_currency": "EUR", "default_tax_percentage": "5"})
    assert resp.status_code == 200
    assert client.get("/settings").json()["base_currency"] == "EUR"
    assert client.put("/settings", json={"base_currency": "XXX"}).status_code == 422


def test_quote_to_invoice_flow(client):
    client.put("/settings", json={"base_currency": "USD"})
    customer = client.post("/customers", json={"company_contact_name": "Wayne Enterprises"}).json()
    product = client.post("/products", json={"name": "Cape", "unit": "pc", "base_price": "80"})
    assert product.status_code == 201
    sku = product.json()["sku"]
    product_id = product.json()["id"]

    quote = client.post(
        "/quotes",
        json={
            "public_customer_id": customer["public_customer_id"],
            "currency_code": "USD",
            "items": [{"description": "Cape", "quantity": "2", "unit_price": "80", "product_id": product_id}],
        },
    ).json()
    assert client.post(f"/quotes/{quote['id']}/convert").status_code == 409

    client.patch(f"/quotes/{quote['id']}/status", json={"status": "Accepted"})
    invoice = client.post(f"/quotes/{quote['id']}/convert")
    assert invoice.status_code == 201
    invoice_id = invoice.json()["id"]
    assert invoice.json()["source_quote_id"] == quote["id"]

    assert client.patch(f"/invoices/{invoice_id}/status", json={"status": "Paid"}).status_code == 200
    assert client.patch(f"/invoices/{invoice_id}/status", json={"status": "Lost"}).status_code == 422

    kpis = client.get("/dashboard/kpis").json()
    assert kpis["top_product"]["sku"] == sku

    revenue = client.get("/dashboard/revenue").json()
    assert len(revenue) == 6
    assert revenue[-1]["revenue"] == 160

    assert client.delete(f"/invoices/{invoice_id}").status_code == 204
    assert client.get(f"/invoices/{invoice_id}").status_code == 404


def test_product_requires_base_currency(client):
    resp = client.post("/products", json={"name": "Thing", "unit": "box", "base_price": "1"})
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "SET400"


def test_invoice_edit_endpoint(client):
    customer = client.post("/customers", json={"company_contact_name": "Stark Industries"}).json()
    invoice = client.post(
        "/invoices",
        json={
            "public_customer_id": customer["public_customer_id"],
            "currency_code": "USD",
            "tax_percentage": "0",
            "items": [{"description": "Repulsor", "quantity": "1", "unit_price": "50"}],
        },
    ).json()

    resp = client.put(
        f"/invoices/{invoice['id']}",
        json={
            "tax_percentage": "10",
            "items": [
                {"description": "Repulsor", "quantity": "2", "unit_price": "50"},
                {"description": "Shipping", "quantity": "1", "unit_price": "20"},
            ],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["subtotal_amount"] == "120.00"
    assert body["tax_amount"] == "12.00"
    assert body["total_amount"] == "132.00"
    assert len(body["items"]) == 2

    assert client.put(f"/invoices/{invoice['id']}", json={"items": []}).status_code == 422
    client.delete(f"/invoices/{invoice['id']}")
    missing = client.put(f"/invoices/{invoice['id']}", json={"notes": "x"})
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "DOC200"


def test_converted_quote_edit_is_409(client):
    customer = client.post("/customers", json={"company_contact_name": "Oscorp"}).json()
    quote = client.post(
        "/quotes",
        json={
            "public_customer_id": customer["public_customer_id"],
            "currency_code": "USD",
            "items": [{"description": "Glider", "quantity": "1", "unit_price": "900"}],
        },
    ).json()
    edited = client.put(f"/quotes/{quote['id']}", json={"discount_percentage": "50"})
    assert edited.status_code == 200
    assert edited.json()["total_amount"] == "450.00"

    client.patch(f"/quotes/{quote['id']}/status", json={"status": "Accepted"})
    client.post(f"/quotes/{quote['id']}/convert")
    locked = client.put(f"/quotes/{quote['id']}", json={"notes": "late change"})
    assert locked.status_code == 409
    assert locked.json()["error"]["code"] == "DOC204"


def test_issuing_entities_and_payment_sources(client):
    entity = client.post("/settings/entities", json={"entity_name": "Globex Corp", "is_primary": True})
    assert entity.status_code == 201
    entity_id = entity.json()["id"]

    source = client.post(
        "/settings/payment-sources",
        json={"name": "Globex USD", "currency_code": "USD", "issuing_entity_id": entity_id, "is_primary_for_entity": True},
    )
    assert source.status_code == 201
    source_id = source.json()["id"]

    listed = client.get("/settings/payment-sources", params={"issuing_entity_id": entity_id}).json()
    assert [s["id"] for s in listed] == [source_id]

    renamed = client.put(f"/settings/entities/{entity_id}", json={"entity_name": "Globex Corporation"})
    assert renamed.json()["entity_name"] == "Globex Corporation"
    assert renamed.json()["is_primary"] is True

    blocked = client.delete(f"/settings/entities/{entity_id}")
    assert blocked.status_code == 409
    assert blocked.json()["error"]["code"] == "SET403"

    assert client.delete(f"/settings/payment-sources/{source_id}").status_code == 204
    assert client.delete(f"/settings/entities/{entity_id}").status_code == 204
    assert client.get(f"/settings/entities/{entity_id}").status_code == 404
    assert client.get("/settings/payment-sources/999").json()["error"]["code"] == "SET402"
