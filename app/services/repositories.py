"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from firebase_admin import firestore
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Guest
from app.services.firebase_client import get_firestore_client


GUEST_COLUMNS = (
    "id",
    "number",
    "name",
    "relation_cs",
    "relation_en",
    "about_cs",
    "about_en",
    "photo_path",
    "audio_official_cs_path",
    "audio_official_en_path",
    "audio_funny_cs_path",
    "audio_funny_en_path",
    "updated_at",
)


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def row_to_dict(guest: Guest) -> Dict[str, Any]:
    return {column: getattr(guest, column) for column in GUEST_COLUMNS}


@firestore.transactional
def _next_guest_id(transaction, counter_ref) -> int:
    snapshot = counter_ref.get(transaction=transaction)
    current = (snapshot.to_dict() or {}).get("value", 0) if snapshot.exists else 0
    transaction.set(counter_ref, {"value": current + 1})
    return current + 1


class GuestRepo:
    @staticmethod
    def list_sql(db: Session) -> List[Dict[str, Any]]:
        guests = db.query(Guest).order_by(Guest.number, Guest.id).all()
        return [row_to_dict(g) for g in guests]

    @staticmethod
    def get_sql(db: Session, guest_id: int) -> Guest | None:
        return db.query(Guest).filter(Guest.id == guest_id).first()

    @staticmethod
    def insert_sql(db: Session, fields: Dict[str, Any]) -> int:
        guest = Guest(**fields, updated_at=datetime.utcnow())
        db.add(guest)
        db.commit()
        db.refresh(guest)
        return guest.id

    @staticmethod
    def update_sql(db: Session, guest_id: int, fields: Dict[str, Any]) -> bool:
        """Apply column values to an existing row; False if the row does not exist"""
        guest = GuestRepo.get_sql(db, guest_id)
        if not guest:
            return False
        for column, value in fields.items():
            setattr(guest, column, value)
        guest.updated_at = datetime.utcnow()
        db.commit()
        return True

    # Firestore guest docs under collection guests/{id}; ids come from meta/guest_counter
    @staticmethod
    def list_fs() -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection("guests").order_by("number").get()
        results: List[Dict[str, Any]] = []
        for d in docs:
            item = {column: None for column in GUEST_COLUMNS}
            item.update(d.to_dict())
            item["id"] = int(d.id)
            results.append(item)
        return results

    @staticmethod
    def insert_fs(fields: Dict[str, Any]) -> int:
        fs = get_firestore_client()
        counter_ref = fs.collection("meta").document("guest_counter")
        guest_id = _next_guest_id(fs.transaction(), counter_ref)
        fs.collection("guests").document(str(guest_id)).set({
            **fields,
            "updated_at": datetime.utcnow().isoformat()
        })
        return guest_id

    @staticmethod
    def update_fs(guest_id: int, fields: Dict[str, Any]) -> bool:
        fs = get_firestore_client()
        ref = fs.collection("guests").document(str(guest_id))
        if not ref.get().exists:
            return False
        ref.set({
            **fields,
            "updated_at": datetime.utcnow().isoformat()
        }, merge=True)
        return True
