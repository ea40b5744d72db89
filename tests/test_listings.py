import pytest
from sqlalchemy import select, func

from stayhub.models.audit_log import AuditLog
from stayhub.models.listing_photo import ListingPhoto


STEP1 = {
    "category": "apartment",
    "placeType": "entire_place",
    "country": "Cyprus",
    "streetAddress": "12 Harbour Road",
    "city": "Kyrenia",
    "state": "Girne",
    "postalCode": "99300",
    "guests": 4,
    "bedrooms": 2,
    "beds": 3,
    "homePrecise": True,
    "bedroomLock": False,
    "privateBathroom": 1,
    "dedicatedBathroom": 0,
    "sharedBathroom": 0,
    "bathroomUsage": "my_family",
}

STEP2 = {
    "favorites": ["wifi", "kitchen"],
    "amenities": ["patio"],
    "safetyItems": ["smoke_alarm", "first_aid"],
    "title": "Bright flat by the harbour",
    "highlights": ["central", "stylish"],
    "description": "Two bedrooms, five minutes from the old harbour.",
}

STEP3 = {
    "bookingSetting": "instant_book",
    "weekdayPrice": 100,
    "weekendPrice": 120,
    "weekdayAfterTaxPrice": 115,
    "weekendAfterTaxPrice": 138,
}

STEP4 = {
    "safetyDetails": ["security_camera"],
    "hostCountry": "Cyprus",
    "hostStreetAddress": "3 Castle Street",
    "hostCity": "Kyrenia",
    "hostState": "Girne",
    "hostingAsBusiness": False,
}


def _photos(n: int, prefix: str = "p") -> list[dict]:
    return [{"publicId": f"listings/{prefix}{i}", "secureUrl": f"https://cdn.test/{prefix}{i}.jpg"} for i in range(n)]


async def _draft(client, headers) -> str:
    r = await client.post("/v1/listings/draft", headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def _photo_count(db_session, listing_id: str) -> int:
    stmt = select(func.count()).select_from(ListingPhoto).where(ListingPhoto.listing_id == listing_id)
    return (await db_session.execute(stmt)).scalar_one()


@pytest.mark.asyncio
async def test_full_wizard_then_publish(client, db_session, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.post(f"/v1/listings/{listing_id}/step-1", json=STEP1, headers=headers)
    assert r.status_code == 201, r.text
    assert r.json()["step1Completed"] is True

    r = await client.post(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(2)}, headers=headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert [p["order"] for p in body["photos"]] == [0, 1]
    assert body["highlights"] == ["central", "stylish"]

    r = await client.post(f"/v1/listings/{listing_id}/step-3", json=STEP3, headers=headers)
    assert r.status_code == 201, r.text

    r = await client.post(f"/v1/listings/{listing_id}/publish", headers=headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "published"
    assert body["weekendChargePercentage"] == 20
    assert body["step4Completed"] is False
    assert body["hostId"] == seed_users["host"]["user_id"]

    actions = (await db_session.execute(select(AuditLog.action))).scalars().all()
    assert "listing.created" in actions
    assert "listing.published" in actions


@pytest.mark.asyncio
async def test_create_listing_with_step1(client, seed_users):
    r = await client.post("/v1/listings", json=STEP1, headers=seed_users["host"]["headers"])
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "draft"
    assert body["step1Completed"] is True
    assert body["step2Completed"] is False
    assert body["guests"] == 4
    assert body["privateBathroom"] == 1


@pytest.mark.asyncio
async def test_negative_weekday_price_is_rejected(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.patch(f"/v1/listings/{listing_id}/step-3", json={**STEP3, "weekdayPrice": -10}, headers=headers)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "validation_error"
    assert "weekdayPrice must be 0 or greater" in body["message"]
    assert body["details"] == [{"field": "weekdayPrice", "message": "weekdayPrice must be 0 or greater"}]


@pytest.mark.asyncio
async def test_step3_without_after_tax_prices_is_rejected(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    partial = {k: v for k, v in STEP3.items() if not k.endswith("AfterTaxPrice")}
    r = await client.post(f"/v1/listings/{listing_id}/step-3", json=partial, headers=headers)
    assert r.status_code == 422
    fields = {d["field"] for d in r.json()["details"]}
    assert fields == {"weekdayAfterTaxPrice", "weekendAfterTaxPrice"}

    r = await client.get(f"/v1/listings/{listing_id}", headers=headers)
    assert r.json()["step3Completed"] is False


@pytest.mark.asyncio
async def test_repeated_highlight_does_not_count_twice(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.post(
        f"/v1/listings/{listing_id}/step-2",
        json={**STEP2, "highlights": ["central", "central"]},
        headers=headers,
    )
    assert r.status_code == 422
    assert r.json()["message"] == "At least 2 highlights are required"

    r = await client.get(f"/v1/listings/{listing_id}", headers=headers)
    assert r.json()["step2Completed"] is False


@pytest.mark.asyncio
async def test_validation_reports_every_field(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    bad = {**STEP1, "guests": 0, "bedrooms": -1, "placeType": "castle"}
    r = await client.patch(f"/v1/listings/{listing_id}/step-1", json=bad, headers=headers)
    assert r.status_code == 422
    fields = {d["field"] for d in r.json()["details"]}
    assert fields == {"guests", "bedrooms", "placeType"}
    assert "placeType must be one of: entire_place, room, shared_room" in r.json()["message"]


@pytest.mark.asyncio
async def test_six_photos_fail_before_any_write(client, db_session, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(6)}, headers=headers)
    assert r.status_code == 422
    assert r.json()["message"] == "Maximum 5 photos allowed"

    assert await _photo_count(db_session, listing_id) == 0
    r = await client.get(f"/v1/listings/{listing_id}", headers=headers)
    assert r.json()["step2Completed"] is False


@pytest.mark.asyncio
async def test_second_photo_set_replaces_the_first(client, db_session, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(3, "a")}, headers=headers)
    assert r.status_code == 200, r.text
    r = await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(2, "b")}, headers=headers)
    assert r.status_code == 200, r.text

    photos = r.json()["photos"]
    assert [(p["publicId"], p["order"]) for p in photos] == [("listings/b0", 0), ("listings/b1", 1)]
    assert await _photo_count(db_session, listing_id) == 2


@pytest.mark.asyncio
async def test_step2_without_photos_keeps_existing(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(2)}, headers=headers)
    r = await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "title": "Renamed"}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "Renamed"
    assert len(r.json()["photos"]) == 2


@pytest.mark.asyncio
async def test_complete_mode_twice_fails_update_mode_twice_succeeds(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.post(f"/v1/listings/{listing_id}/step-2", json=STEP2, headers=headers)
    assert r.status_code == 201, r.text
    r = await client.post(f"/v1/listings/{listing_id}/step-2", json=STEP2, headers=headers)
    assert r.status_code == 400
    assert r.json()["code"] == "business_rule"
    assert r.json()["message"] == "Step 2 already completed. Use PATCH to update."

    for _ in range(2):
        r = await client.patch(f"/v1/listings/{listing_id}/step-2", json=STEP2, headers=headers)
        assert r.status_code == 200, r.text


@pytest.mark.asyncio
async def test_publish_with_missing_steps(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)
    await client.post(f"/v1/listings/{listing_id}/step-1", json=STEP1, headers=headers)

    r = await client.post(f"/v1/listings/{listing_id}/publish", headers=headers)
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == "business_rule"
    assert body["details"] == ["Step 2 (Amenities & Media)", "Step 3 (Booking & Pricing)"]


@pytest.mark.asyncio
async def test_owned_discounts_in_step4_are_replaced(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    discounts = [
        {"name": "Weekly", "description": "7+ nights", "discountPercentage": 10},
        {"name": "Monthly", "discountPercentage": 25, "isActive": False},
    ]
    r = await client.post(f"/v1/listings/{listing_id}/step-4", json={**STEP4, "discounts": discounts}, headers=headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["step4Completed"] is True
    assert [(d["name"], d["isActive"]) for d in body["discounts"]] == [("Weekly", True), ("Monthly", False)]

    r = await client.patch(
        f"/v1/listings/{listing_id}/step-4",
        json={**STEP4, "discounts": [{"name": "Early bird", "discountPercentage": 5}]},
        headers=headers,
    )
    assert r.status_code == 200, r.text
    assert [d["name"] for d in r.json()["discounts"]] == ["Early bird"]


@pytest.mark.asyncio
async def test_step4_discount_percentage_bounds(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.patch(
        f"/v1/listings/{listing_id}/step-4",
        json={**STEP4, "discounts": [{"name": "Too much", "discountPercentage": 150}]},
        headers=headers,
    )
    assert r.status_code == 422
    assert r.json()["details"][0]["message"] == "discountPercentage cannot exceed 100"
    assert r.json()["details"][0]["field"] == "discounts.0.discountPercentage"


@pytest.mark.asyncio
async def test_visibility_rules(client, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)

    r = await client.get(f"/v1/listings/{listing_id}", headers=seed_users["other_host"]["headers"])
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"

    r = await client.get(f"/v1/listings/{listing_id}", headers=seed_users["user"]["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "Listing not found"

    r = await client.get(f"/v1/listings/{listing_id}", headers=seed_users["admin"]["headers"])
    assert r.status_code == 200

    r = await client.get(f"/v1/admin/listings/{listing_id}", headers=seed_users["admin"]["headers"])
    assert r.status_code == 200

    r = await client.patch(f"/v1/listings/{listing_id}/step-1", json=STEP1, headers=seed_users["other_host"]["headers"])
    assert r.status_code == 403

    r = await client.get("/v1/listings/does-not-exist", headers=headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_role_and_key_checks(client, seed_users):
    r = await client.post("/v1/listings/draft")
    assert r.status_code == 401
    assert r.json()["detail"] == "Missing X-API-Key"

    r = await client.post("/v1/listings/draft", headers={"X-API-Key": "sh_nope_nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid API key"

    r = await client.post("/v1/listings/draft", headers=seed_users["user"]["headers"])
    assert r.status_code == 403
    assert r.json()["detail"] == "Host role required"

    r = await client.get("/v1/admin/listings", headers=seed_users["host"]["headers"])
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_lists_are_scoped(client, seed_users):
    host = seed_users["host"]["headers"]
    other = seed_users["other_host"]["headers"]
    mine = await _draft(client, host)
    theirs = await _draft(client, other)

    r = await client.get("/v1/listings", headers=host)
    assert [l["id"] for l in r.json()] == [mine]

    r = await client.get("/v1/admin/listings", headers=seed_users["admin"]["headers"])
    assert {l["id"] for l in r.json()} == {mine, theirs}


@pytest.mark.asyncio
async def test_public_listings_and_unpublish(client, seed_users):
    headers = seed_users["host"]["headers"]
    r = await client.post("/v1/listings", json=STEP1, headers=headers)
    listing_id = r.json()["id"]
    await client.post(f"/v1/listings/{listing_id}/step-2", json=STEP2, headers=headers)
    await client.post(f"/v1/listings/{listing_id}/step-3", json={**STEP3, "weekendPrice": 80}, headers=headers)

    r = await client.get(f"/v1/public/listings/{listing_id}")
    assert r.status_code == 404

    r = await client.post(f"/v1/listings/{listing_id}/publish", headers=headers)
    assert r.json()["weekendChargePercentage"] == -20

    r = await client.get("/v1/public/listings")
    assert [l["id"] for l in r.json()] == [listing_id]
    r = await client.get(f"/v1/listings/{listing_id}", headers=seed_users["user"]["headers"])
    assert r.status_code == 200

    r = await client.post(f"/v1/listings/{listing_id}/unpublish", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "draft"
    assert body["step3Completed"] is True

    r = await client.get(f"/v1/public/listings/{listing_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_listing_and_children(client, db_session, seed_users):
    headers = seed_users["host"]["headers"]
    listing_id = await _draft(client, headers)
    await client.patch(f"/v1/listings/{listing_id}/step-2", json={**STEP2, "photos": _photos(2)}, headers=headers)

    r = await client.delete(f"/v1/listings/{listing_id}", headers=seed_users["other_host"]["headers"])
    assert r.status_code == 403

    r = await client.delete(f"/v1/listings/{listing_id}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"status": "deleted", "listing_id": listing_id}

    assert await _photo_count(db_session, listing_id) == 0
    r = await client.get(f"/v1/listings/{listing_id}", headers=headers)
    assert r.status_code == 404
