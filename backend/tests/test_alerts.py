"""
Alert evaluation: stock levels, expiry window and the notification side effect.
"""
from datetime import date, datetime, timezone

from conftest import START, product_data
from makhzan.services.alerts import AlertKind, evaluate_products


def kinds(conditions):
    return [c.kind for c in conditions]


class TestEvaluateProducts:
    def test_zero_stock_is_critical_only(self, store):
        store.add_product(product_data(quantity=0, min_quantity=5))
        assert kinds(evaluate_products(store.products, START)) == [AlertKind.CRITICAL_STOCK]

    def test_below_minimum_is_low_stock(self, store):
        store.add_product(product_data(quantity=3, min_quantity=5))
        assert kinds(evaluate_products(store.products, START)) == [AlertKind.LOW_STOCK]

    def test_at_minimum_is_low_stock(self, store):
        store.add_product(product_data(quantity=5, min_quantity=5))
        assert kinds(evaluate_products(store.products, START)) == [AlertKind.LOW_STOCK]

    def test_expiring_in_three_days(self, store):
        store.add_product(product_data(quantity=10, min_quantity=5, expiry_date="2025-06-04"))
        [condition] = evaluate_products(store.products, START)
        assert condition.kind == AlertKind.EXPIRING_SOON
        # 2.5 days to midnight UTC of the expiry date, rounded up
        assert condition.days_until_expiry == 3

    def test_expiry_window_boundaries(self, store):
        now = datetime(2025, 6, 2, tzinfo=timezone.utc)
        store.add_product(product_data(code="EDGE", expiry_date=date(2025, 6, 9)))
        store.add_product(product_data(code="LATE", expiry_date=date(2025, 6, 10)))
        store.add_product(product_data(code="PAST", expiry_date=date(2025, 6, 2)))
        conditions = evaluate_products(store.products, now)
        assert [(c.kind, c.days_until_expiry) for c in conditions] == [(AlertKind.EXPIRING_SOON, 7)]

    def test_stock_and_expiry_are_independent(self, store):
        store.add_product(product_data(quantity=0, expiry_date="2025-06-03"))
        assert kinds(evaluate_products(store.products, START)) == [
            AlertKind.CRITICAL_STOCK, AlertKind.EXPIRING_SOON
        ]

    def test_healthy_product_has_no_alerts(self, store):
        store.add_product(product_data(quantity=50, min_quantity=5, expiry_date="2026-01-01"))
        assert evaluate_products(store.products, START) == []


class TestAlertEvaluator:
    def test_records_are_returned_and_logged(self, store, evaluator, notifications):
        store.add_product(product_data(quantity=0, min_quantity=5))
        notifications.clear_all_notifications()

        records = evaluator.run_alert_check()
        assert len(records) == 1
        assert records[0].type == "error"
        assert records[0].require_interaction is True
        assert notifications.list_notifications() == records

    def test_repeated_checks_find_same_conditions(self, store, evaluator, notifications):
        """Two checks detect the same conditions and both are logged"""
        store.add_product(product_data(code="A", quantity=3, min_quantity=5))
        store.add_product(product_data(code="B", quantity=10, expiry_date="2025-06-05"))
        notifications.clear_all_notifications()

        first = evaluator.evaluate()
        evaluator.run_alert_check()
        second = evaluator.evaluate()
        evaluator.run_alert_check()

        assert first == second
        assert len(notifications) == 4

    def test_check_alerts_returns_nothing(self, store, evaluator, notifications):
        store.add_product(product_data(quantity=1, min_quantity=2))
        before = len(notifications)
        assert evaluator.check_alerts() is None
        assert len(notifications) == before + 1

    def test_preference_toggles(self, store, evaluator):
        store.add_product(product_data(quantity=0, expiry_date="2025-06-03"))
        store.update_settings({"notifications": {"low_stock": False}})
        assert kinds(evaluator.evaluate()) == [AlertKind.EXPIRING_SOON]
        store.update_settings({"notifications": {"low_stock": True, "expiry": False}})
        assert kinds(evaluator.evaluate()) == [AlertKind.CRITICAL_STOCK]

    def test_evaluator_does_not_modify_products(self, store, evaluator):
        store.add_product(product_data(quantity=0))
        before = store.products
        evaluator.run_alert_check()
        assert store.products == before

    def test_summary(self, store, evaluator, notifications):
        store.add_product(product_data(code="A", quantity=0))
        store.add_product(product_data(code="B", quantity=2, min_quantity=5))
        store.add_product(product_data(code="C", quantity=40, expiry_date="2025-06-06"))
        before = len(notifications)

        summary = evaluator.alert_summary()
        assert (summary.critical, summary.low_stock, summary.expiring_soon) == (1, 1, 1)
        assert len(notifications) == before
