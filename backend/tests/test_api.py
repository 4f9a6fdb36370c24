"""
HTTP endpoints, exercised through the FastAPI test client.
"""
import json
from io import BytesIO

import pandas as pd

from conftest import product_data
from makhzan.services.data_export import XLSX_MEDIA_TYPE
from makhzan.services.errors import PersistenceError

API = "/api"


def create(client, **overrides):
    response = client.post(f"{API}/products", json=product_data(**overrides))
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/").json()["status"] == "healthy"


class TestProductEndpoints:
    def test_create_and_get(self, client):
        product = create(client)
        response = client.get(f"{API}/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "قلم حبر"

    def test_create_invalid(self, client):
        response = client.post(f"{API}/products", json={"name": "", "code": "X", "quantity": 1, "price": 1})
        assert response.status_code == 422
        assert "اسم المنتج مطلوب" in response.json()["detail"]["errors"]
        assert client.get(f"{API}/notifications/count").json()["unread_count"] == 0

    def test_list_filter_and_sort(self, client):
        create(client, name="b", code="X1", category="food")
        create(client, name="A", code="X2", category="food")
        create(client, name="c", code="Y1", category="tools")

        response = client.get(f"{API}/products", params={"search": "x", "sort_by": "name"})
        assert [p["name"] for p in response.json()] == ["A", "b"]

        response = client.get(f"{API}/products", params={"category": "tools"})
        assert [p["code"] for p in response.json()] == ["Y1"]

    def test_list_unknown_sort_field(self, client):
        response = client.get(f"{API}/products", params={"sort_by": "colour"})
        assert response.status_code == 400

    def test_update(self, client):
        product = create(client)
        response = client.put(f"{API}/products/{product['id']}", json={"quantity": 2})
        assert response.status_code == 200
        assert response.json()["quantity"] == 2
        assert response.json()["created_at"] == product["created_at"]

    def test_update_unknown(self, client):
        response = client.put(f"{API}/products/missing", json={"quantity": 2})
        assert response.status_code == 404

    def test_delete_twice(self, client):
        product = create(client)
        first = client.delete(f"{API}/products/{product['id']}")
        second = client.delete(f"{API}/products/{product['id']}")
        assert first.json()["deleted"] is True
        assert second.status_code == 200
        assert second.json()["deleted"] is False

    def test_stock_update(self, client):
        product = create(client, quantity=5)
        response = client.post(
            f"{API}/products/{product['id']}/stock", json={"quantity": 20, "reason": "restock"}
        )
        assert response.json()["quantity"] == 20

        [latest] = client.get(f"{API}/notifications", params={"limit": 1}).json()
        assert "(+15)" in latest["message"]

    def test_stock_update_unknown(self, client):
        response = client.post(f"{API}/products/missing/stock", json={"quantity": 1})
        assert response.status_code == 404

    def test_stats_and_by_code(self, client):
        create(client, code="DUP", quantity=2, min_quantity=5, price="10")
        create(client, code="DUP", quantity=10, min_quantity=5, price="1")

        stats = client.get(f"{API}/products/stats").json()
        assert stats["total_products"] == 2
        assert float(stats["total_value"]) == 30.0
        assert stats["low_stock_count"] == 1

        assert len(client.get(f"{API}/products/by-code/DUP").json()) == 2


class TestNotificationEndpoints:
    def test_read_and_clear(self, client):
        create(client)
        create(client, code="P2")
        notifications = client.get(f"{API}/notifications").json()
        assert len(notifications) == 2

        response = client.post(f"{API}/notifications/{notifications[0]['id']}/read")
        assert response.json()["read"] is True
        assert client.get(f"{API}/notifications/count").json()["unread_count"] == 1

        assert client.post(f"{API}/notifications/read-all").json()["updated"] == 1

        client.delete(f"{API}/notifications/{notifications[0]['id']}")
        assert len(client.get(f"{API}/notifications").json()) == 1

        client.delete(f"{API}/notifications")
        assert client.get(f"{API}/notifications").json() == []

    def test_mark_unknown(self, client):
        assert client.post(f"{API}/notifications/missing/read").status_code == 404

    def test_post_notification(self, client):
        response = client.post(f"{API}/notifications", json={"title": "نسخة احتياطية", "type": "info"})
        assert response.status_code == 201
        assert response.json()["read"] is False


class TestAlertEndpoints:
    def test_check(self, client):
        create(client, quantity=0)
        response = client.post(f"{API}/alerts/check").json()
        assert response["count"] == 1
        assert response["alerts"][0]["type"] == "error"

        summary = client.get(f"{API}/alerts/summary").json()
        assert summary == {"critical": 1, "low_stock": 0, "expiring_soon": 0}

    def test_check_without_alerts(self, client):
        create(client, quantity=50)
        response = client.post(f"{API}/alerts/check").json()
        assert response["count"] == 0
        assert response["message"].startswith("جميع المنتجات")


class TestSettingsEndpoints:
    def test_replace_and_reset(self, client):
        response = client.put(f"{API}/settings", json={"currency": "USD", "theme": "dark"})
        assert response.json()["currency"] == "USD"
        assert response.json()["language"] == "ar"

        assert client.post(f"{API}/settings/reset").json()["currency"] == "SAR"

    def test_invalid_theme(self, client):
        assert client.put(f"{API}/settings", json={"theme": "neon"}).status_code == 422

    def test_colors_and_language(self, client):
        colors = client.patch(f"{API}/settings/colors", json={"colors": {"primary": "#000000"}}).json()["colors"]
        assert colors["primary"] == "#000000"
        assert "secondary" in colors

        assert client.put(f"{API}/settings/language", json={"language": "en"}).json() == {"language": "en"}
        assert client.get(f"{API}/settings/language").json() == {"language": "en"}

    def test_export_then_import(self, client):
        client.put(f"{API}/settings", json={"currency": "OMR"})
        exported = client.get(f"{API}/settings/export")
        assert "attachment" in exported.headers["content-disposition"]

        client.post(f"{API}/settings/reset")
        settings = json.loads(exported.content)
        settings["theme"] = "neon"
        imported = client.post(f"{API}/settings/import", json=settings).json()
        assert imported["currency"] == "OMR"
        assert imported["theme"] == "light"


class TestReportEndpoints:
    def test_reports(self, client):
        create(client, code="A", quantity=0, category="food")
        create(client, code="B", quantity=10, category="tools")

        assert client.get(f"{API}/reports/summary").json()["out_of_stock_count"] == 1
        assert len(client.get(f"{API}/reports/categories").json()) == 2
        assert [p["code"] for p in client.get(f"{API}/reports/low-stock").json()] == ["A"]

    def test_csv_export(self, client):
        create(client)
        response = client.get(f"{API}/reports/export/low-stock")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert client.get(f"{API}/reports/export/unknown").status_code == 404

    def test_xlsx_export(self, client):
        create(client, category="food")
        response = client.get(f"{API}/reports/export/categories", params={"format": "xlsx"})
        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert ".xlsx" in response.headers["content-disposition"]

        sheet = pd.read_excel(BytesIO(response.content), sheet_name=0, dtype=str)
        assert list(sheet.iloc[:, 0]) == ["مواد غذائية"]

    def test_unknown_format(self, client):
        assert client.get(f"{API}/reports/export/inventory", params={"format": "pdf"}).status_code == 422


class TestAdminEndpoints:
    def test_csv_upload(self, client):
        content = "name,code,quantity,price\nشاي,TEA,10,12\n,BAD,1,1\n".encode("utf-8-sig")
        response = client.post(
            f"{API}/admin/import/csv", files={"file": ("products.csv", content, "text/csv")}
        )
        result = response.json()
        assert result["imported"] == 1
        assert result["total_rows"] == 2
        assert len(result["errors"]) == 1

    def test_upload_rejects_other_files(self, client):
        response = client.post(
            f"{API}/admin/import/csv", files={"file": ("products.xlsx", b"PK", "application/octet-stream")}
        )
        assert response.status_code == 400

    def test_json_import_and_export(self, client):
        response = client.post(f"{API}/admin/import/json", json={"data": [product_data()]})
        assert response.json()["imported"] == 1

        exported = client.get(f"{API}/admin/export/json")
        snapshot = json.loads(exported.content)
        assert snapshot["products"][0]["code"] == "PEN001"

        csv_export = client.get(f"{API}/admin/export/csv")
        assert csv_export.content.decode("utf-8").startswith("\ufeff")

    def test_json_export_can_be_imported_back(self, client):
        product = create(client, code="TEA", category="food")
        snapshot = json.loads(client.get(f"{API}/admin/export/json").content)
        client.delete(f"{API}/products/{product['id']}")

        response = client.post(f"{API}/admin/import/json", json=snapshot)
        assert response.status_code == 200
        assert response.json()["imported"] == 1
        [product] = client.get(f"{API}/products").json()
        assert product["code"] == "TEA"
        assert product["category"] == "food"

    def test_json_import_without_products(self, client):
        response = client.post(f"{API}/admin/import/json", json={"items": []})
        assert response.status_code == 422

    def test_xlsx_export_and_upload(self, client):
        product = create(client, code="TEA", quantity=7, price="12.25")
        exported = client.get(f"{API}/admin/export/xlsx")
        assert exported.status_code == 200
        assert exported.headers["content-type"] == XLSX_MEDIA_TYPE
        assert pd.ExcelFile(BytesIO(exported.content)).sheet_names == ["\u0627\u0644\u0645\u0646\u062a\u062c\u0627\u062a", "\u0627\u0644\u0625\u062d\u0635\u0627\u0626\u064a\u0627\u062a"]

        client.delete(f"{API}/products/{product['id']}")
        response = client.post(
            f"{API}/admin/import/xlsx",
            files={"file": ("inventory.xlsx", exported.content, XLSX_MEDIA_TYPE)}
        )
        assert response.json()["imported"] == 1
        [product] = client.get(f"{API}/products").json()
        assert product["code"] == "TEA"
        assert product["quantity"] == 7

    def test_xlsx_upload_rejects_csv(self, client):
        response = client.post(
            f"{API}/admin/import/xlsx", files={"file": ("products.csv", b"name,code\n", "text/csv")}
        )
        assert response.status_code == 400

    def test_templates(self, client):
        assert "name,code" in client.get(f"{API}/admin/import/template/csv").json()["template"]
        assert len(client.get(f"{API}/admin/import/template/json").json()["template"]) == 2

    def test_backup(self, client):
        filename = client.post(f"{API}/admin/backup").json()["filename"]
        backups = client.get(f"{API}/admin/backups").json()["backups"]
        assert [b["filename"] for b in backups] == [filename]

    def test_scheduler_status(self, client):
        status = client.get(f"{API}/admin/scheduler/status").json()
        assert status["running"] is False
        assert status["jobs"] == []


class TestPersistenceWarning:
    def test_header_after_failed_save(self, client, services):
        assert "x-persistence-warning" not in client.get(f"{API}/products").headers

        services.store.last_persistence_error = PersistenceError("disk full")
        response = client.get(f"{API}/products")
        assert response.headers["x-persistence-warning"] == "state-not-saved"
