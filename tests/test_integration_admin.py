"""
Admin dashboard: access control, car inventory, booking status changes
and photo uploads (Storage calls patched out).
"""

import uuid

import pytest

from conftest import API, car_payload


def _create_booking(client, headers, car_id):
    r = client.post(
        f"{API}/bookings",
        json={"car_id": str(car_id), "start_date": "2024-06-01", "end_date": "2024-06-04"},
        headers=headers,
    )
    assert r.status_code == 201
    return r.json()


# -------- Access control --------


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/admin/cars"),
        ("get", "/admin/bookings"),
        ("post", "/admin/cars"),
    ],
)
def test_non_admin_is_turned_away(client, add_car, user_headers, method, path):
    add_car()
    r = client.request(method.upper(), f"{API}{path}", headers=user_headers, json=car_payload())
    assert r.status_code == 403
    assert r.json() == {"detail": "Access denied: Admin only"}


def test_anonymous_is_asked_to_sign_in(client):
    assert client.get(f"{API}/admin/cars").status_code == 401


def test_admin_probe(client, user_headers, admin_headers):
    assert client.get(f"{API}/users/me/admin", headers=user_headers).json() == {"is_admin": False}
    assert client.get(f"{API}/users/me/admin", headers=admin_headers).json() == {"is_admin": True}


# -------- Cars --------


def test_admin_adds_car_as_available(client, admin_headers):
    r = client.post(f"{API}/admin/cars", json=car_payload(), headers=admin_headers)
    assert r.status_code == 201
    car = r.json()
    assert car["status"] == "available"
    assert car["features"] == ["Autopilot", "Heated seats"]

    catalog = client.get(f"{API}/cars").json()
    assert [c["id"] for c in catalog] == [car["id"]]


def test_add_car_validates_type_and_price(client, admin_headers):
    bad_type = client.post(f"{API}/admin/cars", json=car_payload(type="tank"), headers=admin_headers)
    bad_price = client.post(f"{API}/admin/cars", json=car_payload(price_per_day=0), headers=admin_headers)
    assert bad_type.status_code == 422
    assert bad_price.status_code == 422


def test_admin_lists_cars_of_every_status(client, add_car, admin_headers):
    add_car(status="available")
    add_car(status="maintenance")
    rows = client.get(f"{API}/admin/cars", headers=admin_headers).json()
    assert {c["status"] for c in rows} == {"available", "maintenance"}


def test_deleted_car_leaves_admin_list_and_catalog(client, add_car, admin_headers, user_headers):
    keep = add_car(name="Keep")
    gone = add_car(name="Gone")
    _create_booking(client, user_headers, gone.id)

    r = client.delete(f"{API}/admin/cars/{gone.id}", headers=admin_headers)
    assert r.status_code == 204

    admin_ids = [c["id"] for c in client.get(f"{API}/admin/cars", headers=admin_headers).json()]
    catalog_ids = [c["id"] for c in client.get(f"{API}/cars").json()]
    assert admin_ids == [str(keep.id)]
    assert catalog_ids == [str(keep.id)]
    assert client.get(f"{API}/bookings/me", headers=user_headers).json() == []


def test_delete_missing_car_is_404(client, admin_headers):
    assert client.delete(f"{API}/admin/cars/{uuid.uuid4()}", headers=admin_headers).status_code == 404


def test_delete_removes_stored_photo(client, add_car, admin_headers, monkeypatch):
    from app.services import car_service

    removed = []
    monkeypatch.setattr(car_service, "delete_public_url", lambda url: removed.append(url) or True)

    car = add_car(image_url="https://proj.supabase.co/storage/v1/object/public/car-images/cars/x/a.jpg")
    client.delete(f"{API}/admin/cars/{car.id}", headers=admin_headers)
    assert removed == [car.image_url]


def test_upload_car_image(client, add_car, admin_headers, monkeypatch):
    from app.services import car_service

    uploads = []

    def fake_upload(path, file_bytes, content_type):
        uploads.append((path, content_type))
        return f"https://proj.supabase.co/storage/v1/object/public/car-images/{path}"

    monkeypatch.setattr(car_service, "upload_to_storage", fake_upload)
    monkeypatch.setattr(car_service, "delete_public_url", lambda url: True)

    car = add_car()
    r = client.post(
        f"{API}/admin/cars/{car.id}/image",
        files={"file": ("car.png", b"\x89PNG fake", "image/png")},
        headers=admin_headers,
    )
    assert r.status_code == 200
    path, content_type = uploads[0]
    assert path.startswith(f"cars/{car.id}/") and path.endswith(".png")
    assert content_type == "image/png"
    assert r.json()["image_url"].endswith(path)


def test_upload_rejects_unsupported_type(client, add_car, admin_headers):
    car = add_car()
    r = client.post(
        f"{API}/admin/cars/{car.id}/image",
        files={"file": ("car.gif", b"GIF89a", "image/gif")},
        headers=admin_headers,
    )
    assert r.status_code == 400


# -------- Bookings --------


def test_admin_sees_all_bookings_with_customer(client, add_car, admin_headers, user_headers):
    car = add_car(name="Wrangler", brand="Jeep", model="Wrangler")
    _create_booking(client, user_headers, car.id)

    rows = client.get(f"{API}/admin/bookings", headers=admin_headers).json()
    assert len(rows) == 1
    assert rows[0]["customer_name"] == "Alice Driver"
    assert rows[0]["car"]["name"] == "Wrangler"
    assert rows[0]["total_price"] == 150


def test_status_follows_the_lifecycle(client, add_car, admin_headers, user_headers):
    booking = _create_booking(client, user_headers, add_car().id)
    url = f"{API}/admin/bookings/{booking['id']}/status"

    for new_status in ("confirmed", "active", "completed"):
        r = client.patch(url, json={"status": new_status}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["status"] == new_status

    mine = client.get(f"{API}/bookings/me", headers=user_headers).json()
    assert mine[0]["status"] == "completed"


def test_any_transition_is_accepted_by_default(client, add_car, admin_headers, user_headers):
    booking = _create_booking(client, user_headers, add_car().id)
    url = f"{API}/admin/bookings/{booking['id']}/status"

    client.patch(url, json={"status": "completed"}, headers=admin_headers)
    r = client.patch(url, json={"status": "pending"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "pending"


def test_enforced_lifecycle_rejects_invalid_transition(client, add_car, admin_headers, user_headers, monkeypatch):
    from app.routers import admin as admin_router

    monkeypatch.setattr(admin_router.booking_service, "enforce_transitions", True)
    booking = _create_booking(client, user_headers, add_car().id)
    url = f"{API}/admin/bookings/{booking['id']}/status"

    r = client.patch(url, json={"status": "completed"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid status transition: pending -> completed"

    assert client.patch(url, json={"status": "cancelled"}, headers=admin_headers).status_code == 200
    assert client.patch(url, json={"status": "confirmed"}, headers=admin_headers).status_code == 400


def test_unknown_status_value_is_422(client, add_car, admin_headers, user_headers):
    booking = _create_booking(client, user_headers, add_car().id)
    r = client.patch(
        f"{API}/admin/bookings/{booking['id']}/status",
        json={"status": "shipped"},
        headers=admin_headers,
    )
    assert r.status_code == 422


def test_status_update_missing_booking_is_404(client, admin_headers):
    r = client.patch(
        f"{API}/admin/bookings/{uuid.uuid4()}/status",
        json={"status": "confirmed"},
        headers=admin_headers,
    )
    assert r.status_code == 404


# -------- Photo replacement ordering --------

OLD_PHOTO = "https://proj.supabase.co/storage/v1/object/public/car-images/cars/x/old.jpg"


def _patch_storage(monkeypatch, removed):
    from app.services import car_service

    monkeypatch.setattr(
        car_service,
        "upload_to_storage",
        lambda path, file_bytes, content_type: f"https://proj.supabase.co/storage/v1/object/public/car-images/{path}",
    )
    monkeypatch.setattr(car_service, "delete_public_url", lambda url: removed.append(url) or True)


def test_replacing_photo_removes_old_one_after_save(client, add_car, admin_headers, monkeypatch):
    removed = []
    _patch_storage(monkeypatch, removed)

    car = add_car(image_url=OLD_PHOTO)
    r = client.post(
        f"{API}/admin/cars/{car.id}/image",
        files={"file": ("car.jpg", b"jpeg bytes", "image/jpeg")},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["image_url"] != OLD_PHOTO
    assert removed == [OLD_PHOTO]


def test_failed_save_keeps_old_photo_and_drops_new_upload(db, add_car, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from app.models.car import Car
    from app.repositories.booking_repo import BookingRepository
    from app.repositories.car_repo import CarRepository
    from app.services.car_service import CarService

    removed = []
    _patch_storage(monkeypatch, removed)

    repo = CarRepository()
    service = CarService(repo, BookingRepository())
    car = add_car(image_url=OLD_PHOTO)

    def failing_update(session, car):
        raise OperationalError("UPDATE", {}, Exception("connection lost"))

    monkeypatch.setattr(repo, "update", failing_update)

    with pytest.raises(OperationalError):
        service.set_image(db, car.id, "image/png", b"png bytes")

    assert len(removed) == 1
    assert removed[0] != OLD_PHOTO
    assert removed[0].endswith(".png")

    db.expire_all()
    assert db.get(Car, car.id).image_url == OLD_PHOTO
