"""
Inventory notification messages (Arabic UI).

Each builder returns a NotificationCreate ready for NotificationLog.add_notification.
"""
from makhzan.schemas.notification import NotificationCreate


def product_added(product_name: str) -> NotificationCreate:
    return NotificationCreate(
        title="تم إضافة منتج جديد",
        message=f"تم إضافة {product_name} بنجاح إلى المخزون",
        type="success",
    )


def product_updated(product_name: str) -> NotificationCreate:
    return NotificationCreate(
        title="تم تحديث المنتج",
        message=f"تم تحديث بيانات {product_name} بنجاح",
        type="info",
    )


def product_deleted(product_name: str) -> NotificationCreate:
    # Deletions are lower urgency: no sound
    return NotificationCreate(
        title="تم حذف المنتج",
        message=f"تم حذف {product_name} من المخزون",
        type="warning",
        play_sound=False,
    )


def stock_updated(product_name: str, old_quantity: int, new_quantity: int, reason: str = "") -> NotificationCreate:
    difference = new_quantity - old_quantity
    action = "إضافة" if difference > 0 else "سحب"
    sign = "+" if difference > 0 else ""
    message = f"{product_name}: {old_quantity} → {new_quantity} ({sign}{difference})"
    if reason:
        message = f"{message} - {reason}"
    return NotificationCreate(
        title=f"{action} مخزون",
        message=message,
        type="info",
    )


def low_stock(product_name: str, quantity: int, min_quantity: int) -> NotificationCreate:
    return NotificationCreate(
        title="تنبيه مخزون منخفض",
        message=f"{product_name} - الكمية الحالية: {quantity} (الحد الأدنى: {min_quantity})",
        type="warning",
        require_interaction=True,
    )


def critical_stock(product_name: str, quantity: int) -> NotificationCreate:
    return NotificationCreate(
        title="تحذير: مخزون حرج",
        message=f"{product_name} - الكمية المتبقية: {quantity} فقط!",
        type="error",
        require_interaction=True,
    )


def expiring_product(product_name: str, days_until_expiry: int) -> NotificationCreate:
    return NotificationCreate(
        title="تنبيه انتهاء صلاحية",
        message=f"{product_name} - ينتهي خلال {days_until_expiry} يوم",
        type="warning",
        require_interaction=True,
    )


def alert_check_summary(alert_count: int) -> str:
    if alert_count == 0:
        return "جميع المنتجات في حالة جيدة ✅"
    return f"تم العثور على {alert_count} تنبيه"


def import_summary(imported: int, failed: int) -> NotificationCreate:
    message = f"تم استيراد {imported} منتج بنجاح"
    if failed:
        message = f"{message} ({failed} خطأ)"
    return NotificationCreate(
        title="تم الاستيراد",
        message=message,
        type="success" if imported > 0 else "error",
    )
