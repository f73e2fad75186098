"""
Tests for the guest read model and the admin upsert/upload pipeline
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.core.errors import BackendError, ValidationError
from app.models import Guest
from app.services.guest_service import GuestService, MediaFile
from app.services.media import mime_extension, public_url, is_media_url, PHOTO_SLOT, MEDIA_SLOTS
from app.services.storage import LocalStorage, StorageBackend, StorageError

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_guest_service.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

STORAGE_BASE = "http://media.test"

class UnreachableStorage(StorageBackend):
    """Object store whose uploads always fail"""

    def upload(self, bucket, key, data, content_type=None):
        raise StorageError(f"[storage {bucket}] connection refused")

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def storage(tmp_path):
    """Local object store in a temporary directory"""
    store = LocalStorage(tmp_path / "media", STORAGE_BASE)
    store.ensure_buckets()
    return store

def make_form(**overrides):
    form = {
        "number": "7",
        "name": "Babička Jana",
        "relation_cs": "Babička nevěsty",
        "relation_en": "Bride's grandmother",
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}

def submit(db, storage, form, files=None):
    files = files or {}
    submission = GuestService.validate_submission(form, files)
    return GuestService.save_guest(db, storage, submission, files)

def test_insert_then_update_same_row(db_session, storage):
    """A submission without id inserts; resubmitting with the id updates in place"""
    guest_id = submit(db_session, storage, make_form())
    assert db_session.query(Guest).count() == 1

    again = submit(db_session, storage, make_form(id=str(guest_id), name="Babička Jana Nová"))
    assert again == guest_id
    assert db_session.query(Guest).count() == 1

    db_session.expire_all()
    guest = db_session.query(Guest).filter(Guest.id == guest_id).first()
    assert guest.name == "Babička Jana Nová"
    assert guest.updated_at is not None

def test_missing_relation_en_rejected_without_writes(db_session, storage):
    """Missing required fields are reported by name and nothing is written"""
    with pytest.raises(ValidationError) as exc_info:
        submit(db_session, storage, make_form(relation_en=None))

    assert exc_info.value.missing == ["relation_en"]
    assert exc_info.value.got["name"] == "Babička Jana"
    assert exc_info.value.got["relation_en"] is None
    assert db_session.query(Guest).count() == 0

def test_number_must_be_non_zero_integer(db_session, storage):
    """Zero or non-numeric numbers count as missing"""
    for value in ("0", "abc", ""):
        with pytest.raises(ValidationError) as exc_info:
            GuestService.validate_submission(make_form(number=value), {})
        assert "number" in exc_info.value.missing

def test_number_outside_int64_is_missing(db_session, storage):
    """A number that does not fit a 64-bit column is reported as missing before any write"""
    with pytest.raises(ValidationError) as exc_info:
        submit(db_session, storage, make_form(number="99999999999999999999"))

    assert exc_info.value.missing == ["number"]
    assert db_session.query(Guest).count() == 0

def test_integral_decimal_number_accepted(db_session, storage):
    """'3.0' is the number 3, '3.5' is not a guest number"""
    submission = GuestService.validate_submission(make_form(number="3.0"), {})
    assert submission.number == 3

    with pytest.raises(ValidationError) as exc_info:
        GuestService.validate_submission(make_form(number="3.5"), {})
    assert "number" in exc_info.value.missing

def test_zero_id_inserts_new_guest(db_session, storage):
    """An id of 0 creates a guest like a blank id does"""
    first = submit(db_session, storage, make_form())
    second = submit(db_session, storage, make_form(id="0", name="Děda Josef"))

    assert second != first
    assert second != 0
    assert db_session.query(Guest).count() == 2

def test_empty_about_stored_as_null(db_session, storage):
    """Blank biography halves are stored as null"""
    guest_id = submit(db_session, storage, make_form(about_cs="Ahoj!", about_en="  "))
    guest = db_session.query(Guest).filter(Guest.id == guest_id).first()
    assert guest.about_cs == "Ahoj!"
    assert guest.about_en is None

def test_upload_only_funny_en_leaves_other_slots(db_session, storage):
    """Only slots present in the submission are uploaded and patched"""
    files = {
        "photo": MediaFile(b"\x89PNG...", "image/png"),
        "audio_official_cs": MediaFile(b"ID3cs", "audio/mpeg"),
        "audio_official_en": MediaFile(b"ID3en", "audio/mpeg"),
        "audio_funny_cs": MediaFile(b"ID3funny", "audio/mpeg"),
    }
    guest_id = submit(db_session, storage, make_form(), files)

    submit(db_session, storage, make_form(id=str(guest_id)), {
        "audio_funny_en": MediaFile(b"RIFFwav", "audio/wav"),
    })

    db_session.expire_all()
    guest = db_session.query(Guest).filter(Guest.id == guest_id).first()
    assert guest.audio_funny_en_path == f"{guest_id}_en.wav"
    assert guest.audio_funny_cs_path == f"{guest_id}_cs.mp3"
    assert guest.photo_path == f"{guest_id}.png"
    assert guest.audio_official_cs_path == f"{guest_id}_cs.mp3"
    assert guest.audio_official_en_path == f"{guest_id}_en.mp3"
    assert (storage.root / "audio-funny" / f"{guest_id}_en.wav").read_bytes() == b"RIFFwav"

def test_empty_file_part_is_ignored(db_session, storage):
    """A zero-byte file part does not touch its slot"""
    guest_id = submit(db_session, storage, make_form(), {"photo": MediaFile(b"", "image/jpeg")})
    guest = db_session.query(Guest).filter(Guest.id == guest_id).first()
    assert guest.photo_path is None

def test_reupload_overwrites_same_key(db_session, storage):
    """Uploading a slot again replaces the object at the same key"""
    guest_id = submit(db_session, storage, make_form(), {"photo": MediaFile(b"old", "image/jpeg")})
    submit(db_session, storage, make_form(id=str(guest_id)), {"photo": MediaFile(b"new", "image/jpeg")})

    assert (storage.root / "photos" / f"{guest_id}.jpg").read_bytes() == b"new"

def test_upload_failure_keeps_text_write(db_session):
    """An unreachable object store fails at the upload step after the row is written"""
    with pytest.raises(BackendError) as exc_info:
        submit(db_session, UnreachableStorage(STORAGE_BASE), make_form(), {
            "audio_official_cs": MediaFile(b"ID3", "audio/mpeg"),
        })

    assert exc_info.value.step == "upload"
    assert "connection refused" in exc_info.value.message

    guest = db_session.query(Guest).first()
    assert guest is not None
    assert guest.relation_en == "Bride's grandmother"
    assert guest.audio_official_cs_path is None

def test_update_unknown_guest_fails_at_update_step(db_session, storage):
    """Updating an id that does not exist is an update failure"""
    with pytest.raises(BackendError) as exc_info:
        submit(db_session, storage, make_form(id="999"))

    assert exc_info.value.step == "update"
    assert db_session.query(Guest).count() == 0

def test_oversized_file_rejected(db_session, storage, monkeypatch):
    """Files over the upload limit are rejected before any write"""
    from app.core.config import settings
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)

    with pytest.raises(ValidationError):
        submit(db_session, storage, make_form(), {"photo": MediaFile(b"12345", "image/jpeg")})
    assert db_session.query(Guest).count() == 0

def test_list_guests_ordered_with_urls(db_session, storage):
    """Guests come back ordered by number with public URLs for stored media"""
    db_session.add_all([
        Guest(number=2, name="Petr", relation_cs="Bratr", relation_en="Brother",
              audio_official_cs_path="2_cs.mp3"),
        Guest(number=1, name="Eva", relation_cs="Sestra", relation_en="Sister",
              photo_path="folder/1 a.jpg"),
    ])
    db_session.commit()

    guests = GuestService.list_guests(db_session, storage)

    assert [g.name for g in guests] == ["Eva", "Petr"]
    eva, petr = guests
    assert eva.photo_url == f"{STORAGE_BASE}/photos/folder%2F1%20a.jpg"
    assert eva.audio_official.cs is None and eva.audio_official.en is None
    assert eva.about.cs is None
    assert petr.audio_official.cs == f"{STORAGE_BASE}/audio-official/2_cs.mp3"
    assert petr.audio_official.en is None

    body = petr.model_dump(by_alias=True)
    assert set(body) == {"id", "number", "name", "relation", "about", "photoUrl", "audioOfficial", "audioFunny"}

def test_media_urls_lists_every_stored_object(db_session, storage):
    """The manifest contains one URL per stored media column"""
    db_session.add(Guest(number=1, name="Eva", relation_cs="Sestra", relation_en="Sister",
                         photo_path="1.jpg", audio_funny_en_path="1_en.mp3"))
    db_session.commit()

    assert GuestService.media_urls(db_session, storage) == [
        f"{STORAGE_BASE}/photos/1.jpg",
        f"{STORAGE_BASE}/audio-funny/1_en.mp3",
    ]

def test_mime_extension():
    """Extensions follow the declared MIME type with a per-kind fallback"""
    assert mime_extension("image/png", "jpg") == "png"
    assert mime_extension("image/webp", "jpg") == "webp"
    assert mime_extension("image/jpeg", "jpg") == "jpg"
    assert mime_extension("audio/mpeg", "mp3") == "mp3"
    assert mime_extension("audio/x-wav", "mp3") == "wav"
    assert mime_extension("application/octet-stream", "mp3") == "mp3"
    assert mime_extension(None, "jpg") == "jpg"

def test_storage_keys():
    """Photo keys use the guest id, audio keys add the language"""
    assert PHOTO_SLOT.storage_key(12, "image/webp") == "12.webp"
    funny_en = next(s for s in MEDIA_SLOTS if s.field == "audio_funny_en")
    assert funny_en.bucket == "audio-funny"
    assert funny_en.storage_key(12, None) == "12_en.mp3"

def test_public_url_helpers():
    """Public URLs are null without a key and recognised as media otherwise"""
    assert public_url(STORAGE_BASE, "photos", None) is None
    url = public_url(STORAGE_BASE + "/", "audio-official", "3_cs.mp3")
    assert url == f"{STORAGE_BASE}/audio-official/3_cs.mp3"
    assert is_media_url(url, STORAGE_BASE)
    assert not is_media_url(f"{STORAGE_BASE}/index.html", STORAGE_BASE)
    assert not is_media_url("http://elsewhere.test/photos/1.jpg", STORAGE_BASE)
