# Overview: Pytest coverage for seller intake routes.

from io import BytesIO

from storefront.models import SellerInfo, UsedProduct


def _form(**overrides):
    data = {
        "title": "Espresso Machine",
        "description": "Single boiler, descaled last month.",
        "category": "appliances",
        "condition": "Excellent",
        "brand": "Gaggia",
        "askingPrice": "129.99",
        "seller.name": "Riley Chen",
        "seller.email": "Riley@Example.com",
        "seller.phone": "+1 555 0199",
    }
    data.update(overrides)
    return data


def _image(name="photo.png", mimetype="image/png"):
    return (BytesIO(b"\x89PNG fake image bytes"), name, mimetype)


def _stored_files(upload_dir):
    folder = upload_dir / "used-products"
    return sorted(p.name for p in folder.iterdir()) if folder.exists() else []


class TestMultipartSubmission:

    def test_creates_pending_submission_with_local_images(self, client, db_session, upload_dir):
        data = _form()
        data["images"] = [_image("front.png"), _image("back.jpg", "image/jpeg")]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 201
        body = response.get_json()
        assert body["message"] == "Product listing submitted successfully"
        product = body["product"]
        assert product["status"] == "pending"
        assert product["asking_price_cents"] == 12999
        assert product["request_quote"] is False
        assert product["seller"]["email"] == "riley@example.com"
        assert len(product["images"]) == 2
        assert all(ref.startswith("uploads/used-products/") for ref in product["images"])
        assert len(_stored_files(upload_dir)) == 2

    def test_quote_request_ignores_price(self, client, db_session):
        data = _form(requestQuote="true", askingPrice="")
        data["images"] = [_image()]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 201
        product = response.get_json()["product"]
        assert product["request_quote"] is True
        assert product["asking_price_cents"] is None

    def test_status_cannot_be_chosen_by_seller(self, client, db_session):
        data = _form(status="approved")
        data["images"] = [_image()]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 201
        assert response.get_json()["product"]["status"] == "pending"

    def test_images_are_required(self, client, db_session):
        response = client.post("/api/sell", data=_form(), content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json()["error"] == "At least one image is required"
        assert UsedProduct.query.count() == 0

    def test_too_many_images(self, client, db_session, upload_dir):
        data = _form()
        data["images"] = [_image(f"p{i}.png") for i in range(6)]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 400
        assert _stored_files(upload_dir) == []

    def test_non_image_upload_is_rejected(self, client, db_session, upload_dir):
        data = _form()
        data["images"] = [_image("ok.png"), _image("notes.txt", "text/plain")]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 400
        assert _stored_files(upload_dir) == []

    def test_invalid_fields_remove_saved_uploads(self, client, db_session, upload_dir):
        data = _form(condition="Broken")
        data["images"] = [_image()]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 400
        assert "condition must be one of" in response.get_json()["error"]
        assert _stored_files(upload_dir) == []
        assert UsedProduct.query.count() == 0

    def test_missing_price_without_quote(self, client, db_session, upload_dir):
        data = _form(askingPrice="")
        data["images"] = [_image()]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json()["error"] == "askingPrice is required"

    def test_invalid_email(self, client, db_session):
        data = _form(**{"seller.email": "not-an-email"})
        data["images"] = [_image()]

        response = client.post("/api/sell", data=data, content_type="multipart/form-data")

        assert response.status_code == 400


class TestJsonSubmission:

    def _payload(self, **overrides):
        payload = {
            "title": "Road Bike",
            "description": "56cm aluminium frame.",
            "category": "sports",
            "condition": "Fair",
            "askingPrice": 250,
            "seller": {"name": "Morgan Lee", "email": "morgan@example.com", "phone": "555-0142"},
            "images": ["https://res.cloudinary.com/demo/image/upload/bike.jpg"],
        }
        payload.update(overrides)
        return payload

    def test_external_urls_are_stored_as_is(self, client, db_session):
        response = client.post("/api/sell", json=self._payload())

        assert response.status_code == 201
        product = response.get_json()["product"]
        assert product["images"] == ["https://res.cloudinary.com/demo/image/upload/bike.jpg"]
        assert product["asking_price_cents"] == 25000
        assert product["brand"] is None
        assert product["seller"]["name"] == "Morgan Lee"

    def test_relative_reference_is_rejected(self, client, db_session):
        response = client.post("/api/sell", json=self._payload(images=["uploads/used-products/x.png"]))

        assert response.status_code == 400

    def test_own_upload_url_is_rejected(self, client, db_session, upload_dir):
        """A catalog image served from /uploads cannot be claimed by another submission."""
        data = _form()
        data["images"] = [_image()]
        first = client.post("/api/sell", data=data, content_type="multipart/form-data").get_json()["product"]
        approved = client.patch(f"/api/used-products/{first['id']}/approve").get_json()
        catalog_image = approved["newProduct"]["image_urls"][0]

        response = client.post("/api/sell", json=self._payload(images=[catalog_image]))

        assert response.status_code == 400
        assert "this server's uploads" in response.get_json()["error"]
        assert UsedProduct.query.count() == 1
        assert len(_stored_files(upload_dir)) == 1

    def test_missing_seller(self, client, db_session):
        payload = self._payload()
        del payload["seller"]

        response = client.post("/api/sell", json=payload)

        assert response.status_code == 400
        assert response.get_json()["error"].startswith("Missing required fields")


class TestSellerViews:

    def test_health_route(self, client):
        assert client.get("/api/sell/test").get_json() == {"message": "Sell route is working!"}

    def test_my_submissions_is_case_insensitive(self, client, make_submission):
        mine = make_submission()
        make_submission(seller=SellerInfo("Casey Park", "someone@else.com", "555-0150"))

        response = client.get("/api/sell/my-submissions/JORDAN@example.com")

        data = response.get_json()
        assert response.status_code == 200
        assert [i["id"] for i in data["items"]] == [mine.id]
