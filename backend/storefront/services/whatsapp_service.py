# Overview: WhatsApp deep link carrying the order summary (checkout hand-off).

from __future__ import annotations

from urllib.parse import quote

from flask import current_app, has_app_context

from ..formatting import format_price

DEFAULT_WHATSAPP_NUMBER = "573001234567"

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_order_message(order: dict) -> str:
    """
    Plain-text order summary using WhatsApp *bold* markup.

    Optional lines (email, notes) are omitted entirely when empty.
    """
    lines = [
        f"*Nuevo Pedido #{order['order_number']}*",
        "",
        "*DATOS DEL CLIENTE*",
        f"• Nombre: {order['customer_name']}",
        f"• Teléfono: {order['customer_phone']}",
    ]
    if order.get("customer_email"):
        lines.append(f"• Email: {order['customer_email']}")

    lines += [
        "",
        "*DIRECCIÓN DE ENVÍO*",
        f"• Departamento: {order['customer_department']}",
        f"• Ciudad: {order['customer_city']}",
        f"• Dirección: {order['customer_address']}",
        "",
        "*PRODUCTOS:*",
    ]
    for index, item in enumerate(order.get("items") or [], start=1):
        line_total = item["price"] * item["quantity"]
        lines.append(f"{index}. {item['name']} x{item['quantity']} - {format_price(line_total)}")

    lines += ["", f"*TOTAL: {format_price(order['total'])}*"]

    if order.get("notes"):
        lines += ["", f"Notas: {order['notes']}"]

    return "\n".join(lines).strip()


def generate_whatsapp_link(order: dict, phone: str | None = None) -> str:
    if phone is None:
        phone = (
            current_app.config.get("WHATSAPP_NUMBER") if has_app_context() else None
        ) or DEFAULT_WHATSAPP_NUMBER
    message = build_order_message(order)
    return f"https://wa.me/{phone}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"
