"""Integration tests for Invoicing API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

from config import ApplicationConfig

BASE = f"{ApplicationConfig.API_PREFIX}/invoicing"

LUNCH = {
    "item_name": "Almuerzo ejecutivo",
    "quantity": "3",
    "unit_price": "10000",
    "tax_rate": "19",
    "discount_rate": "10",
}
DRINK = {"item_name": "Limonada", "quantity": "1", "unit_price": "5000"}


async def create_draft(client: AsyncClient, items):
    response = await client.post(
        f"{BASE}/invoices",
        json={
            "tenant_id": "company_abc",
            "branch_id": "branch_main",
            "issue_date": "2024-01-15",
            "due_date": "2024-02-14",
            "items": items,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestInvoicesAPIIntegration:
    """Integration test suite for Invoicing API endpoints"""

    @pytest.mark.asyncio
    async def test_preview_totals(self, client: AsyncClient):
        response = await client.post(f"{BASE}/invoices/preview", json={"items": [LUNCH, DRINK]})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["totals"]["subtotal"]) == Decimal("35000.00")
        assert Decimal(data["totals"]["total_discount"]) == Decimal("3000.00")
        assert Decimal(data["totals"]["total_tax"]) == Decimal("5130.00")
        assert Decimal(data["totals"]["total"]) == Decimal("37130.00")
        assert Decimal(data["lines"][0]["taxable_amount"]) == Decimal("27000.00")

    @pytest.mark.asyncio
    async def test_preview_rejects_out_of_range_rate(self, client: AsyncClient):
        response = await client.post(
            f"{BASE}/invoices/preview",
            json={"items": [dict(LUNCH, tax_rate="101")]},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_preview_largest_allowed_values(self, client: AsyncClient):
        largest = {
            "item_name": "Lote mayorista",
            "quantity": "999999999999999.999",
            "unit_price": "9999999999999999.99",
        }

        response = await client.post(f"{BASE}/invoices/preview", json={"items": [largest]})

        assert response.status_code == 200, response.text
        assert Decimal(response.json()["totals"]["total"]) == Decimal(
            "9999999999999999980000000000000.00"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"quantity": "1000000000000000"},
            {"unit_price": "10000000000000000"},
            {"quantity": "1e20", "unit_price": "1e10"},
        ],
    )
    async def test_preview_rejects_values_past_digit_bound(self, client: AsyncClient, overrides):
        response = await client.post(
            f"{BASE}/invoices/preview",
            json={"items": [dict(LUNCH, **overrides)]},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_and_get_invoice(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH, DRINK])

        assert created["invoice_number"] == "FE-202401-00001"
        assert created["status"] == "draft"
        assert created["formatted_total"] == "$37.130"

        response = await client.get(f"{BASE}/invoices/{created['invoice_id']}")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total"]) == Decimal("37130.00")
        assert data["totals_match_snapshot"] is True
        assert [line["item_name"] for line in data["line_items"]] == ["Almuerzo ejecutivo", "Limonada"]

    @pytest.mark.asyncio
    async def test_get_unknown_invoice_returns_404(self, client: AsyncClient):
        response = await client.get(f"{BASE}/invoices/999")

        assert response.status_code == 404
        data = response.json()
        assert data["error"]["code"] == "INVOICE_NOT_FOUND"
        assert isinstance(data["error"]["message"], str)

    @pytest.mark.asyncio
    async def test_create_rejects_due_date_before_issue_date(self, client: AsyncClient):
        response = await client.post(
            f"{BASE}/invoices",
            json={
                "tenant_id": "company_abc",
                "branch_id": "branch_main",
                "issue_date": "2024-01-15",
                "due_date": "2024-01-01",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_item_editing_endpoints(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH])
        invoice_id = created["invoice_id"]

        added = await client.post(f"{BASE}/invoices/{invoice_id}/items", json=DRINK)
        assert added.status_code == 201
        lunch_id, drink_id = [line["id"] for line in added.json()["line_items"]]
        assert Decimal(added.json()["total"]) == Decimal("37130.00")

        patched = await client.patch(
            f"{BASE}/invoices/{invoice_id}/items/{lunch_id}", json={"quantity": "1"}
        )
        assert patched.status_code == 200
        assert Decimal(patched.json()["total"]) == Decimal("15710.00")

        reordered = await client.put(
            f"{BASE}/invoices/{invoice_id}/items/order", json={"item_ids": [drink_id, lunch_id]}
        )
        assert reordered.status_code == 200
        assert [line["id"] for line in reordered.json()["line_items"]] == [drink_id, lunch_id]

        bad_order = await client.put(
            f"{BASE}/invoices/{invoice_id}/items/order", json={"item_ids": [drink_id]}
        )
        assert bad_order.status_code == 400
        assert bad_order.json()["error"]["code"] == "INVALID_ITEM_ORDER"

        removed = await client.delete(f"{BASE}/invoices/{invoice_id}/items/{drink_id}")
        assert removed.status_code == 200
        assert Decimal(removed.json()["total"]) == Decimal("10710.00")

        missing = await client.delete(f"{BASE}/invoices/{invoice_id}/items/{drink_id}")
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "INVOICE_ITEM_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_status_flow_and_frozen_items(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH])
        invoice_id = created["invoice_id"]

        issued = await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "issued"})
        assert issued.status_code == 200
        assert issued.json()["status"] == "issued"

        frozen = await client.post(f"{BASE}/invoices/{invoice_id}/items", json=DRINK)
        assert frozen.status_code == 409
        assert frozen.json()["error"]["code"] == "INVOICE_FROZEN"

        back_to_draft = await client.post(
            f"{BASE}/invoices/{invoice_id}/status", json={"status": "draft"}
        )
        assert back_to_draft.status_code == 409
        assert back_to_draft.json()["error"]["code"] == "INVALID_TRANSITION"

        paid = await client.post(
            f"{BASE}/invoices/{invoice_id}/status",
            json={"status": "paid", "payment_reference": "DATAFONO-88213"},
        )
        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"
        assert paid.json()["payment_reference"] == "DATAFONO-88213"

        detail = await client.get(f"{BASE}/invoices/{invoice_id}")
        assert Decimal(detail.json()["total"]) == Decimal("32130.00")

    @pytest.mark.asyncio
    async def test_unknown_status_value_returns_422(self, client: AsyncClient):
        created = await create_draft(client, [])

        response = await client.post(
            f"{BASE}/invoices/{created['invoice_id']}/status", json={"status": "archived"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_invoices(self, client: AsyncClient):
        first = await create_draft(client, [LUNCH])
        second = await create_draft(client, [DRINK])
        await client.post(f"{BASE}/invoices/{first['invoice_id']}/status", json={"status": "cancelled"})

        all_invoices = await client.get(f"{BASE}/invoices", params={"tenant_id": "company_abc"})
        drafts = await client.get(
            f"{BASE}/invoices", params={"tenant_id": "company_abc", "status": "draft"}
        )

        assert all_invoices.status_code == 200
        assert {i["invoice_id"] for i in all_invoices.json()["invoices"]} == {
            first["invoice_id"], second["invoice_id"]
        }
        assert [i["invoice_id"] for i in drafts.json()["invoices"]] == [second["invoice_id"]]

    @pytest.mark.asyncio
    async def test_list_requires_tenant(self, client: AsyncClient):
        response = await client.get(f"{BASE}/invoices")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_summary_report(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH])
        invoice_id = created["invoice_id"]
        await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "issued"})
        await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "paid"})

        response = await client.get(
            f"{BASE}/reports/summary",
            params={"tenant_id": "company_abc", "months": 2, "as_of": "2024-02-10"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["period_start"] == "2024-01-01"
        assert data["period_end"] == "2024-02-29"
        assert data["total_invoices"] == 1
        assert Decimal(data["total_paid"]) == Decimal("32130.00")
        assert data["status_counts"] == {"paid": 1}
        assert [m["month"] for m in data["monthly"]] == ["2024-01", "2024-02"]

    @pytest.mark.asyncio
    async def test_update_and_delete_draft(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH])
        invoice_id = created["invoice_id"]

        patched = await client.patch(
            f"{BASE}/invoices/{invoice_id}",
            json={"customer_id": "cust_0042", "notes": "Mesa 4", "currency": "cop"},
        )
        assert patched.status_code == 200, patched.text
        assert patched.json()["customer_id"] == "cust_0042"
        assert patched.json()["notes"] == "Mesa 4"
        assert patched.json()["currency"] == "COP"
        assert patched.json()["invoice_number"] == created["invoice_number"]
        assert Decimal(patched.json()["total"]) == Decimal("32130.00")

        deleted = await client.delete(f"{BASE}/invoices/{invoice_id}")
        assert deleted.status_code == 200
        assert deleted.json() == {
            "invoice_id": invoice_id,
            "invoice_number": created["invoice_number"],
            "deleted_items": 1,
        }

        gone = await client.get(f"{BASE}/invoices/{invoice_id}")
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_update_and_delete_rejected_once_issued(self, client: AsyncClient):
        created = await create_draft(client, [LUNCH])
        invoice_id = created["invoice_id"]
        await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "issued"})

        patched = await client.patch(f"{BASE}/invoices/{invoice_id}", json={"notes": "Mesa 4"})
        deleted = await client.delete(f"{BASE}/invoices/{invoice_id}")

        assert patched.status_code == 409
        assert patched.json()["error"]["code"] == "INVOICE_FROZEN"
        assert deleted.status_code == 409
        assert deleted.json()["error"]["code"] == "INVOICE_FROZEN"
        assert (await client.get(f"{BASE}/invoices/{invoice_id}")).status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"issue_date": None}, {"currency": None}])
    async def test_update_rejects_clearing_required_fields(self, client: AsyncClient, body):
        created = await create_draft(client, [])

        response = await client.patch(f"{BASE}/invoices/{created['invoice_id']}", json=body)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_rejects_due_date_before_issue_date(self, client: AsyncClient):
        created = await create_draft(client, [])

        response = await client.patch(
            f"{BASE}/invoices/{created['invoice_id']}", json={"due_date": "2024-01-01"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DUE_DATE"

    @pytest.mark.asyncio
    async def test_manual_overdue_requires_past_due_date(self, client: AsyncClient):
        response = await client.post(
            f"{BASE}/invoices",
            json={
                "tenant_id": "company_abc",
                "branch_id": "branch_main",
                "issue_date": "2999-01-15",
                "due_date": "2999-02-14",
                "items": [LUNCH],
            },
        )
        invoice_id = response.json()["invoice_id"]
        await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "issued"})

        overdue = await client.post(f"{BASE}/invoices/{invoice_id}/status", json={"status": "overdue"})

        assert overdue.status_code == 409
        assert overdue.json()["error"]["code"] == "INVOICE_NOT_PAST_DUE"
