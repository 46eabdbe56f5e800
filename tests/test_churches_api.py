import pytest

from churchfinder.services import church_search


pytestmark = pytest.mark.api

NEW_CHURCH = {
    "name": "Holy Trinity Orthodox Church",
    "denomination": "Eastern Orthodox",
    "address": "4453 Tennyson St",
    "city": "Denver",
    "state": "CO",
    "zip_code": "80212",
    "latitude": 39.7778,
    "longitude": -105.0434,
    "phone": "303-555-0100",
    "website": "https://example.org",
    "founded_year": 1950,
    "average_attendance": 120,
    "service_times": {"Sun": ["9:30 AM"], "saturday": ["6:00 PM", " 6:00 PM "]},
    "languages": ["English", "Greek", "english"],
}


class TestListChurches:
    def test_lists_by_name(self, client, make_church):
        make_church(name="Zion Lutheran")
        make_church(name="Agape Fellowship")

        response = client.get("/api/churches")
        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["name"] for c in data["churches"]] == ["Agape Fellowship", "Zion Lutheran"]
        assert data["total"] == 2
        assert data["churches"][0]["distance_miles"] is None

    def test_location_search_adds_distance(self, client, make_church):
        near = make_church(name="Near", latitude=39.74, longitude=-104.99)
        make_church(name="Far", latitude=40.5853, longitude=-105.0844)

        response = client.get("/api/churches", params={"lat": 39.7392, "lng": -104.9903, "radius": 10})
        data = response.json()["data"]
        assert [c["id"] for c in data["churches"]] == [near]
        assert data["churches"][0]["distance_miles"] < 1

    def test_lat_without_lng_is_rejected(self, client):
        response = client.get("/api/churches", params={"lat": 39.7})
        assert response.status_code == 422

    def test_out_of_range_coordinates_are_rejected(self, client):
        response = client.get("/api/churches", params={"lat": 95, "lng": 0})
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation Error"

    def test_filters(self, client, make_church):
        match = make_church(denomination="Catholic", state="CO", city="Denver", languages=["Spanish"],
                            service_times={"saturday": ["5:00 PM"]})
        make_church(denomination="Catholic", state="CO", city="Denver")
        make_church(denomination="Methodist", state="CO", city="Denver", languages=["Spanish"])

        response = client.get("/api/churches", params={
            "denomination": "catholic", "state": "co", "city": "denver",
            "language": "Spanish", "day": "saturday",
        })
        assert [c["id"] for c in response.json()["data"]["churches"]] == [match]

    def test_invalid_day_is_rejected(self, client):
        response = client.get("/api/churches", params={"day": "someday"})
        assert response.status_code == 422

    def test_page_size_is_capped(self, client):
        response = client.get("/api/churches", params={"page_size": 101})
        assert response.status_code == 422


class TestNearby:
    def test_requires_coordinates(self, client):
        assert client.get("/api/churches/nearby").status_code == 422

    def test_default_radius_is_ten_miles(self, client, make_church):
        inside = make_church(latitude=39.80, longitude=-104.99)   # about 4 miles
        make_church(latitude=40.0150, longitude=-105.2705)         # about 24 miles

        response = client.get("/api/churches/nearby", params={"lat": 39.7392, "lng": -104.9903})
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["data"]["churches"]] == [inside]

    def test_larger_radius(self, client, make_church):
        make_church(latitude=39.80, longitude=-104.99)
        make_church(latitude=40.0150, longitude=-105.2705)

        response = client.get("/api/churches/nearby", params={"lat": 39.7392, "lng": -104.9903, "radius": 30})
        assert response.json()["data"]["total"] == 2


class TestSearch:
    def test_text_search(self, client, make_church):
        target = make_church(name="Mountain View Bible Church", city="Golden")
        make_church(name="Valley Bible Church", city="Denver")

        response = client.get("/api/churches/search", params={"q": "bible golden"})
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["data"]["churches"]] == [target]

    def test_blank_query_is_rejected(self, client):
        assert client.get("/api/churches/search", params={"q": "   "}).status_code == 422
        assert client.get("/api/churches/search").status_code == 422


class TestGetChurch:
    def test_returns_full_record(self, client, make_church):
        church_id = make_church(
            name="St. Paul",
            service_times={"sunday": ["8:00 AM", "10:00 AM"], "friday": ["12:00 PM"]},
            languages=["Spanish", "English"],
        )

        response = client.get(f"/api/churches/{church_id}")
        assert response.status_code == 200
        church = response.json()["data"]
        assert church["id"] == church_id
        assert church["name"] == "St. Paul"
        assert church["service_times"] == {"sunday": ["8:00 AM", "10:00 AM"], "friday": ["12:00 PM"]}
        assert church["languages"] == ["English", "Spanish"]
        assert church["verified"] is False

    def test_not_found(self, client):
        response = client.get("/api/churches/9999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Church with ID 9999 not found"


class TestManageChurches:
    def test_admin_creates_church(self, client, admin_headers):
        response = client.post("/api/churches", json=NEW_CHURCH, headers=admin_headers)
        assert response.status_code == 201
        church = response.json()["data"]
        assert church["service_times"] == {"sunday": ["9:30 AM"], "saturday": ["6:00 PM"]}
        assert church["languages"] == ["English", "Greek"]

        fetched = client.get(f"/api/churches/{church['id']}").json()["data"]
        assert fetched["name"] == NEW_CHURCH["name"]

    def test_anonymous_cannot_create(self, client):
        assert client.post("/api/churches", json=NEW_CHURCH).status_code == 401

    def test_regular_user_cannot_create(self, client, user_headers):
        response = client.post("/api/churches", json=NEW_CHURCH, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Not enough permissions"

    @pytest.mark.parametrize("field,value", [
        ("latitude", 91),
        ("longitude", -181),
        ("founded_year", 3000),
        ("average_attendance", -1),
        ("name", ""),
    ])
    def test_invalid_fields_are_rejected(self, client, admin_headers, field, value):
        payload = dict(NEW_CHURCH, **{field: value})
        assert client.post("/api/churches", json=payload, headers=admin_headers).status_code == 422

    def test_missing_coordinates_are_rejected(self, client, admin_headers):
        payload = {key: value for key, value in NEW_CHURCH.items() if key != "latitude"}
        assert client.post("/api/churches", json=payload, headers=admin_headers).status_code == 422

    def test_invalid_service_day_is_rejected(self, client, admin_headers):
        payload = dict(NEW_CHURCH, service_times={"funday": ["9:00 AM"]})
        assert client.post("/api/churches", json=payload, headers=admin_headers).status_code == 422

    def test_partial_update(self, client, admin_headers, make_church):
        church_id = make_church(name="Old Name", service_times={"sunday": ["9:00 AM"]}, languages=["English"])

        response = client.put(
            f"/api/churches/{church_id}",
            json={"name": "New Name", "verified": True},
            headers=admin_headers,
        )
        assert response.status_code == 200
        church = response.json()["data"]
        assert church["name"] == "New Name"
        assert church["verified"] is True
        assert church["service_times"] == {"sunday": ["9:00 AM"]}
        assert church["languages"] == ["English"]

    def test_update_replaces_schedule_and_languages(self, client, admin_headers, make_church):
        church_id = make_church(service_times={"sunday": ["9:00 AM"]}, languages=["English"])

        response = client.put(
            f"/api/churches/{church_id}",
            json={"service_times": {"sunday": ["9:00 AM", "11:00 AM"]}, "languages": ["Korean"]},
            headers=admin_headers,
        )
        church = response.json()["data"]
        assert church["service_times"] == {"sunday": ["9:00 AM", "11:00 AM"]}
        assert church["languages"] == ["Korean"]

    def test_update_with_no_fields(self, client, admin_headers, make_church):
        church_id = make_church()
        response = client.put(f"/api/churches/{church_id}", json={}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "No fields to update"

    def test_update_clears_optional_fields_sent_as_null(self, client, admin_headers, make_church):
        church_id = make_church(description="Old text", phone="303-555-0100", founded_year=1950)

        response = client.put(
            f"/api/churches/{church_id}",
            json={"description": None, "founded_year": None},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] != "No fields to update"

        church = client.get(f"/api/churches/{church_id}").json()["data"]
        assert church["description"] is None
        assert church["founded_year"] is None
        assert church["phone"] == "303-555-0100"

    def test_null_schedule_and_languages_clear_them(self, client, admin_headers, make_church):
        church_id = make_church(service_times={"sunday": ["9:00 AM"]}, languages=["English"])

        response = client.put(
            f"/api/churches/{church_id}",
            json={"service_times": None, "languages": None},
            headers=admin_headers,
        )
        church = response.json()["data"]
        assert church["service_times"] == {}
        assert church["languages"] == []

    @pytest.mark.parametrize("field", ["name", "denomination", "latitude", "longitude", "country", "verified"])
    def test_required_fields_cannot_be_nulled(self, client, admin_headers, make_church, field):
        church_id = make_church()
        response = client.put(f"/api/churches/{church_id}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_missing_church(self, client, admin_headers):
        response = client.put("/api/churches/9999", json={"name": "X"}, headers=admin_headers)
        assert response.status_code == 404

    def test_update_requires_admin(self, client, user_headers, make_church):
        church_id = make_church()
        response = client.put(f"/api/churches/{church_id}", json={"name": "X"}, headers=user_headers)
        assert response.status_code == 403


class TestClaims:
    def test_user_claims_church(self, client, user_headers, make_church):
        church_id = make_church()
        response = client.post(
            f"/api/churches/{church_id}/claim",
            json={"message": "I am the pastor here"},
            headers=user_headers,
        )
        assert response.status_code == 201
        claim = response.json()["data"]
        assert claim["church_id"] == church_id
        assert claim["status"] == "pending"

    def test_second_pending_claim_conflicts(self, client, user_headers, make_church):
        church_id = make_church()
        assert client.post(f"/api/churches/{church_id}/claim", headers=user_headers).status_code == 201
        assert client.post(f"/api/churches/{church_id}/claim", headers=user_headers).status_code == 409

    def test_claim_unknown_church(self, client, user_headers):
        assert client.post("/api/churches/9999/claim", headers=user_headers).status_code == 404

    def test_claim_requires_login(self, client, make_church):
        church_id = make_church()
        assert client.post(f"/api/churches/{church_id}/claim").status_code == 401


class TestImportUpload:
    CSV = (
        "name,denomination,city,state,latitude,longitude,languages,service_times\n"
        "Cornerstone Church,Evangelical,Denver,CO,39.75,-104.99,English and Spanish,\"Sunday 9:00 AM, 11:00 AM\"\n"
        "Bad Coordinates,Baptist,Denver,CO,139.75,-104.99,,\n"
    )

    def test_admin_uploads_csv(self, client, admin_headers):
        response = client.post(
            "/api/churches/import",
            files={"file": ("churches.csv", self.CSV.encode(), "text/csv")},
            headers=admin_headers,
        )
        assert response.status_code == 201
        result = response.json()["data"]
        assert result["total"] == 2
        assert result["success"] == 1
        assert result["failed"] == 1

        listed = client.get("/api/churches/search", params={"q": "cornerstone"}).json()["data"]["churches"]
        assert listed[0]["languages"] == ["English", "Spanish"]
        assert listed[0]["service_times"] == {"sunday": ["9:00 AM", "11:00 AM"]}

    def test_rejects_non_csv(self, client, admin_headers):
        response = client.post(
            "/api/churches/import",
            files={"file": ("churches.xlsx", b"whatever", "application/octet-stream")},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_rejects_missing_columns(self, client, admin_headers):
        response = client.post(
            "/api/churches/import",
            files={"file": ("churches.csv", b"name,city\nA,B\n", "text/csv")},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert "denomination" in response.json()["detail"]

    def test_requires_admin(self, client, user_headers):
        response = client.post(
            "/api/churches/import",
            files={"file": ("churches.csv", self.CSV.encode(), "text/csv")},
            headers=user_headers,
        )
        assert response.status_code == 403


class TestUnexpectedErrors:
    def test_nearby_failure_is_reported(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("index unavailable")

        monkeypatch.setattr(church_search, "paginate_by_distance", broken)
        response = client.get("/api/churches/nearby", params={"lat": 39.7, "lng": -104.9})
        assert response.status_code == 500
        assert response.json()["detail"] == "Error finding nearby churches: index unavailable"

    def test_search_failure_is_reported(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("index unavailable")

        monkeypatch.setattr(church_search, "paginate", broken)
        response = client.get("/api/churches/search", params={"q": "grace"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Error searching churches: index unavailable"
