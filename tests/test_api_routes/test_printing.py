"""
Tests for 3D-printing quote and request routes.
"""
import os

from storefront import uploads

STL = ("bracket.stl", b"solid bracket\nendsolid bracket\n", "model/stl")
OPTIONS = {"material": "PLA", "quality": "standard", "infill_density": "20", "color": "white"}


class TestQuoteRoute:
    def test_quote(self, client, settings):
        response = client.post("/api/printing/quote", data=OPTIONS, files={"file": STL})

        assert response.status_code == 200
        quote = response.json()
        assert quote["material_cost"] == "6.25"
        assert quote["labor_cost"] == "8.00"
        assert quote["processing_fee"] == "5.00"
        assert quote["total"] == "19.25"
        assert quote["print_time"] == "4h 32m"
        assert quote["weight"] == "125g"
        assert quote["delivery_time"] == "3-5 days"
        assert quote["selected_material"] == "PLA"
        assert quote["file_info"]["original_name"] == "bracket.stl"
        assert os.listdir(settings.uploads_dir) == []

    def test_quote_without_file(self, client):
        response = client.post("/api/printing/quote", data=OPTIONS)

        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"

    def test_quote_bad_material(self, client):
        response = client.post("/api/printing/quote", data=dict(OPTIONS, material="Wood"), files={"file": STL})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "material"

    def test_quote_wrong_file_type(self, client):
        response = client.post(
            "/api/printing/quote", data=OPTIONS, files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400


class TestPrintingRequestRoutes:
    def test_submit_request(self, client, settings):
        response = client.post("/api/printing", data=OPTIONS, files={"file": STL})

        assert response.status_code == 201
        request = response.json()
        assert request["status"] == "pending"
        assert request["estimated_cost"] == "19.25"
        assert request["estimated_time"] == "4h 32m"
        assert request["file"]["original_name"] == "bracket.stl"
        assert os.listdir(settings.uploads_dir) == [request["file"]["filename"]]

    def test_oversized_file_rejected_with_413(self, client, settings, monkeypatch):
        """Test that a file over the size ceiling is refused and not kept."""
        monkeypatch.setattr(uploads, "MAX_MODEL_BYTES", 16)

        response = client.post(
            "/api/printing", data=OPTIONS, files={"file": ("big.stl", b"x" * 17, "model/stl")}
        )

        assert response.status_code == 413
        assert os.listdir(settings.uploads_dir) == []
        assert client.get("/api/printing").json() == []

    def test_list_get_and_status(self, client):
        request = client.post("/api/printing", data=OPTIONS, files={"file": STL}).json()

        assert [r["id"] for r in client.get("/api/printing").json()] == [request["id"]]
        assert client.get(f"/api/printing/{request['id']}").status_code == 200

        updated = client.put(f"/api/printing/{request['id']}/status", json={"status": "completed"})
        assert updated.json()["status"] == "completed"
        assert client.get("/api/printing/missing").status_code == 404
