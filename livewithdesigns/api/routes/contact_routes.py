from flask import Blueprint, request, jsonify, current_app
from flask_login import current_user

from livewithdesigns.extensions import db
from livewithdesigns.models import ContactMessage, ContactResponse
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.email import send_email
from livewithdesigns.api.utils.filters import get_payload, to_bool, int_value
from livewithdesigns.api.utils.pagination import page_args, paginate

api_contact = Blueprint("api_contact", __name__, url_prefix="/api/contact")


def contact_dict(m: ContactMessage) -> dict:
    return {
        "id": m.id,
        "name": m.name,
        "email": m.email,
        "phone": m.phone,
        "subject": m.subject,
        "message": m.message,
        "serviceType": m.service_type,
        "city": m.city,
        "whatsappUpdates": m.whatsapp_updates,
        "project": m.project_id,
        "status": m.status,
        "responses": [
            {
                "id": r.id,
                "date": iso(r.date),
                "message": r.message,
                "respondedBy": r.responded_by,
            }
            for r in m.responses
        ],
        "createdAt": iso(m.created_at),
        "updatedAt": iso(m.updated_at),
    }


def _not_found():
    return jsonify({"message": "Message not found"}), 404


@api_contact.post("/")
def submit_message():
    data = get_payload()
    m = ContactMessage(
        name=data.get("name"),
        email=data.get("email"),
        phone=data.get("phone"),
        subject=data.get("subject"),
        message=data.get("message"),
        service_type=data.get("serviceType"),
        city=data.get("city"),
        whatsapp_updates=to_bool(data.get("whatsappUpdates")),
        project_id=int_value(data.get("project")),
    )
    db.session.add(m)
    db.session.commit()
    current_app.logger.info("[CONTACT] new message id=%s from %s", m.id, m.email)
    return jsonify({"success": True, "data": contact_dict(m)}), 201


@api_contact.get("/")
@admin_required
def list_messages():
    page, limit = page_args(10)
    q = ContactMessage.query
    if request.args.get("status"):
        q = q.filter(ContactMessage.status == request.args.get("status"))
    q = q.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())

    items, pagination = paginate(q, page, limit, "Messages")
    return jsonify({
        "success": True,
        "data": [contact_dict(m) for m in items],
        "pagination": pagination,
    }), 200


@api_contact.get("/<int:message_id>")
@admin_required
def get_message(message_id: int):
    m = db.session.get(ContactMessage, message_id)
    if not m:
        return _not_found()
    return jsonify({"success": True, "data": contact_dict(m)}), 200


@api_contact.put("/<int:message_id>")
@admin_required
def update_message(message_id: int):
    m = db.session.get(ContactMessage, message_id)
    if not m:
        return _not_found()
    data = get_payload()
    if data.get("status"):
        m.status = data.get("status")
    db.session.commit()
    return jsonify({"success": True, "data": contact_dict(m)}), 200


@api_contact.delete("/<int:message_id>")
@admin_required
def delete_message(message_id: int):
    m = db.session.get(ContactMessage, message_id)
    if not m:
        return _not_found()
    db.session.delete(m)
    db.session.commit()
    return jsonify({"message": "Message removed"}), 200


@api_contact.post("/<int:message_id>/respond")
@admin_required
def respond_to_message(message_id: int):
    m = db.session.get(ContactMessage, message_id)
    if not m:
        return _not_found()

    data = get_payload()
    m.responses.append(ContactResponse(message=data.get("message"), responded_by=current_user.name))
    m.status = "replied"
    db.session.commit()

    try:
        send_email(
            subject=f"Re: {m.subject}",
            recipients=[m.email],
            body=f"Dear {m.name},\n\n{m.responses[-1].message}\n\nLive With Designs",
            reply_to=current_user.email,
        )
    except Exception:
        current_app.logger.exception("Reply e-mail for contact message %s failed", m.id)

    return jsonify({"success": True, "data": contact_dict(m)}), 200
