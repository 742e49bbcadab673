"""
API tests for stock transactions.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from inventory_service.app.crud import transactions_crud
from inventory_service.app.models.inventory import Inventory
from inventory_service.app.models.transactions import InventoryTransaction
from shared.core.config import settings


def _create_sku(api, code, category="General", name=None):
    response = api.post("/skus", json={"sku_code": code, "product_name": name or f"Product {code}",
                                       "category": category})
    assert response.status_code == 201, response.text
    return response.json()


def _move(api, sku_id, kind, quantity, unit_cost=0.0, role="admin", **extra):
    payload = dict(sku_id=sku_id, transaction_type=kind, quantity=quantity, unit_cost=unit_cost)
    payload.update(extra)
    return api.post("/transactions", role=role, json=payload)


def _broken_store(*args, **kwargs):
    raise SQLAlchemyError("inventory write failed")


class TestCreateTransaction:
    def test_response_carries_totals_and_creator(self, api, users):
        sku = _create_sku(api, "T-1")
        response = _move(api, sku["id"], "in", 4, 2.5, reference_number="PO-77", notes="first batch")
        assert response.status_code == 201
        body = response.json()
        assert body["total_cost"] == pytest.approx(10.0)
        assert body["transaction_type"] == "in"
        assert body["sku_code"] == "T-1"
        assert body["created_by"] == str(users["admin"].id)
        assert body["created_by_name"] == "Admin Person"

    @pytest.mark.parametrize("overrides", [
        {"quantity": 0},
        {"quantity": -3},
        {"unit_cost": -1},
        {"transaction_type": "transfer"},
    ])
    def test_invalid_payload_rejected(self, api, db, overrides):
        sku = _create_sku(api, "T-2")
        payload = dict(sku_id=sku["id"], transaction_type="in", quantity=1, unit_cost=1.0)
        payload.update(overrides)
        response = api.post("/transactions", json=payload)
        assert response.status_code == 400
        assert db.query(func.count(InventoryTransaction.id)).scalar() == 0

    def test_unknown_sku_not_found(self, api):
        assert _move(api, str(uuid.uuid4()), "in", 1, 1).status_code == 404

    def test_reason_in_change_log(self, api):
        sku = _create_sku(api, "T-3")
        _move(api, sku["id"], "in", 10, 1.0)
        _move(api, sku["id"], "out", 3, notes="damaged")

        logs = api.get("/change-logs", params={"entity_type": "transaction"}).json()["logs"]
        assert [log["reason"] for log in logs] == ["OUT transaction - 3 units: damaged", "IN transaction - 10 units"]

    def test_viewer_cannot_record(self, api):
        sku = _create_sku(api, "T-4")
        assert _move(api, sku["id"], "in", 1, 1, role="viewer").status_code == 403

    def test_user_role_can_record(self, api):
        sku = _create_sku(api, "T-5")
        assert _move(api, sku["id"], "in", 1, 1, role="user").status_code == 201


class TestInventoryWriteFailure:
    def test_strict_mode_rolls_back_both_writes(self, api, db, monkeypatch):
        sku = _create_sku(api, "F-1")
        monkeypatch.setattr(transactions_crud, "store_position", _broken_store)

        response = _move(api, sku["id"], "in", 5, 1.0)
        assert response.status_code == 500
        assert response.json()["error"] == "failed to record transaction"
        assert db.query(func.count(InventoryTransaction.id)).scalar() == 0
        assert db.query(func.count(Inventory.id)).scalar() == 0

    def test_lenient_mode_keeps_transaction(self, api, db, monkeypatch):
        sku = _create_sku(api, "F-2")
        monkeypatch.setattr(settings, "STRICT_INVENTORY_WRITES", False)
        monkeypatch.setattr(transactions_crud, "store_position", _broken_store)

        response = _move(api, sku["id"], "in", 5, 1.0)
        assert response.status_code == 201
        assert db.query(func.count(InventoryTransaction.id)).scalar() == 1
        assert db.query(func.count(Inventory.id)).scalar() == 0

    def test_lenient_mode_updates_inventory_when_healthy(self, api, monkeypatch):
        sku = _create_sku(api, "F-3")
        monkeypatch.setattr(settings, "STRICT_INVENTORY_WRITES", False)
        _move(api, sku["id"], "in", 5, 2.0)
        _move(api, sku["id"], "out", 2)

        body = api.get(f"/inventory/sku/{sku['id']}").json()
        assert body["quantity"] == 3
        assert body["weighted_cost"] == pytest.approx(2.0)


class TestListTransactions:
    def test_filters(self, api):
        bolt = _create_sku(api, "BOLT", category="Fasteners", name="Hex bolt")
        glue = _create_sku(api, "GLUE", category="Adhesives", name="Wood glue")
        _move(api, bolt["id"], "in", 10, 1.0, reference_number="PO-1")
        _move(api, bolt["id"], "out", 2, notes="site delivery")
        _move(api, glue["id"], "in", 5, 3.0, reference_number="PO-2")

        def refs(**params):
            rows = api.get("/transactions", params=params).json()["transactions"]
            return [(row["sku_code"], row["transaction_type"], row["quantity"]) for row in rows]

        assert refs() == [("GLUE", "in", 5), ("BOLT", "out", 2), ("BOLT", "in", 10)]
        assert refs(transaction_type="out") == [("BOLT", "out", 2)]
        assert refs(sku_id=glue["id"]) == [("GLUE", "in", 5)]
        assert refs(category="Fasteners") == [("BOLT", "out", 2), ("BOLT", "in", 10)]
        assert refs(search="po-2") == [("GLUE", "in", 5)]
        assert refs(search="delivery") == [("BOLT", "out", 2)]
        assert refs(search="hex") == [("BOLT", "out", 2), ("BOLT", "in", 10)]

    def test_end_date_is_inclusive(self, api):
        sku = _create_sku(api, "D-1")
        _move(api, sku["id"], "in", 1, 1.0)
        today = datetime.now(timezone.utc).date()

        assert api.get("/transactions", params={"start_date": today.isoformat(),
                                                "end_date": today.isoformat()}).json()["total"] == 1
        yesterday = (today - timedelta(days=1)).isoformat()
        assert api.get("/transactions", params={"end_date": yesterday}).json()["total"] == 0

    def test_invalid_type_filter_rejected(self, api):
        assert api.get("/transactions", params={"transaction_type": "sideways"}).status_code == 400


class TestTransactionSummary:
    def test_grouped_by_type(self, api):
        sku = _create_sku(api, "S-1", category="Fasteners")
        other = _create_sku(api, "S-2", category="Adhesives")
        _move(api, sku["id"], "in", 10, 2.0)
        _move(api, sku["id"], "in", 5, 4.0)
        _move(api, sku["id"], "out", 3)
        _move(api, other["id"], "in", 1, 100.0)

        summary = api.get("/transactions/summary").json()["summary"]
        assert summary == [
            {"transaction_type": "in", "count": 3, "total_quantity": 16, "total_value": pytest.approx(140.0)},
            {"transaction_type": "out", "count": 1, "total_quantity": 3, "total_value": pytest.approx(0.0)},
        ]

        fasteners = api.get("/transactions/summary", params={"category": "Fasteners"}).json()["summary"]
        assert fasteners[0]["total_value"] == pytest.approx(40.0)

        only_other = api.get("/transactions/summary", params={"sku_id": other["id"]}).json()["summary"]
        assert [row["transaction_type"] for row in only_other] == ["in"]

    def test_empty_summary(self, api):
        assert api.get("/transactions/summary").json() == {"summary": []}
