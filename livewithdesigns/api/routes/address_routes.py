from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from livewithdesigns.extensions import db
from livewithdesigns.models import Address
from livewithdesigns.models.base import iso
from livewithdesigns.api.utils.filters import get_payload, to_bool

api_addresses = Blueprint("api_addresses", __name__, url_prefix="/api/addresses")

FIELDS = {
    "type": "type",
    "label": "label",
    "fullName": "full_name",
    "phone": "phone",
    "alternatePhone": "alternate_phone",
    "street": "street",
    "landmark": "landmark",
    "city": "city",
    "state": "state",
    "pincode": "pincode",
    "country": "country",
}


def _address_dict(a: Address) -> dict:
    d = {key: getattr(a, attr) for key, attr in FIELDS.items()}
    d.update({
        "id": a.id,
        "user": a.user_id,
        "isDefault": a.is_default,
        "isActive": a.is_active,
        "createdAt": iso(a.created_at),
        "updatedAt": iso(a.updated_at),
    })
    return d


def _own_address(address_id: int, active_only: bool = False) -> Address | None:
    q = Address.query.filter_by(id=address_id, user_id=current_user.id)
    if active_only:
        q = q.filter_by(is_active=True)
    return q.first()


def _not_found():
    return jsonify({"success": False, "message": "Address not found"}), 404


@api_addresses.get("/")
@login_required
def list_addresses():
    items = (
        Address.query.filter_by(user_id=current_user.id, is_active=True)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
        .all()
    )
    return jsonify({
        "success": True,
        "count": len(items),
        "data": [_address_dict(a) for a in items],
    }), 200


@api_addresses.get("/<int:address_id>")
@login_required
def get_address(address_id: int):
    a = _own_address(address_id)
    if not a:
        return _not_found()
    return jsonify({"success": True, "data": _address_dict(a)}), 200


@api_addresses.post("/")
@login_required
def create_address():
    data = get_payload()
    # every field goes through the constructor so required-field validators run
    kwargs = {attr: data.get(key) for key, attr in FIELDS.items()}
    has_addresses = Address.query.filter_by(user_id=current_user.id, is_active=True).count() > 0

    a = Address(user_id=current_user.id, **kwargs)
    a.is_default = True if not has_addresses else to_bool(data.get("isDefault"))
    db.session.add(a)
    db.session.commit()
    return jsonify({
        "success": True,
        "message": "Address added successfully",
        "data": _address_dict(a),
    }), 201


@api_addresses.put("/<int:address_id>")
@login_required
def update_address(address_id: int):
    a = _own_address(address_id)
    if not a:
        return _not_found()

    data = get_payload()
    for key, attr in FIELDS.items():
        if key in data:
            setattr(a, attr, data.get(key))
    if "isDefault" in data:
        a.is_default = to_bool(data.get("isDefault"))
    db.session.commit()
    return jsonify({
        "success": True,
        "message": "Address updated successfully",
        "data": _address_dict(a),
    }), 200


@api_addresses.delete("/<int:address_id>")
@login_required
def delete_address(address_id: int):
    a = _own_address(address_id)
    if not a:
        return _not_found()

    was_default = a.is_default
    a.is_active = False
    a.is_default = False
    db.session.flush()

    if was_default:
        nxt = (
            Address.query.filter_by(user_id=current_user.id, is_active=True)
            .order_by(Address.created_at.desc(), Address.id.desc())
            .first()
        )
        if nxt:
            nxt.is_default = True
    db.session.commit()
    return jsonify({"success": True, "message": "Address deleted successfully"}), 200


@api_addresses.put("/<int:address_id>/default")
@login_required
def set_default_address(address_id: int):
    a = _own_address(address_id, active_only=True)
    if not a:
        return _not_found()
    a.is_default = True
    db.session.commit()
    return jsonify({
        "success": True,
        "message": "Default address updated",
        "data": _address_dict(a),
    }), 200
