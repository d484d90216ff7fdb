"""Integration tests for the public catalog API."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.catalog.models import School, SupplyPack

pytestmark = pytest.mark.integration


class TestSchools:
    def test_lists_active_schools_only(self, api_client, school):
        School.objects.create(
            name="Closed Academy", address="1 Gone Road", phone="0", is_active=False
        )

        response = api_client.get("/api/v1/schools/")

        assert response.status_code == 200
        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Lincoln Elementary"]

    def test_retrieve(self, api_client, school):
        response = api_client.get(f"/api/v1/schools/{school.id}/")

        assert response.status_code == 200
        assert response.json()["principal"] == "Maria Torres"

    def test_retrieve_unknown(self, api_client):
        response = api_client.get(f"/api/v1/schools/{uuid4()}/")
        assert response.status_code == 404

    def test_packs_for_school_filtered_by_grade(self, api_client, school, pack):
        SupplyPack.objects.create(
            school=school,
            grade="Kindergarten",
            name="Pack - Kindergarten - Lincoln Elementary",
            price="12.00",
        )

        response = api_client.get(
            f"/api/v1/schools/{school.id}/packs/", {"grade": "3rd Grade"}
        )

        assert response.status_code == 200
        data = response.json()
        assert [row["grade"] for row in data] == ["3rd Grade"]
        assert data[0]["school_name"] == "Lincoln Elementary"
        assert data[0]["items"][0]["id"] == "3g1"


class TestPacks:
    def test_retrieve_pack(self, api_client, pack):
        response = api_client.get(f"/api/v1/packs/{pack.id}/")

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == "42.94"
        assert len(body["items"]) == 2

    def test_retrieve_unknown_pack(self, api_client):
        response = api_client.get(f"/api/v1/packs/{uuid4()}/")
        assert response.status_code == 404


class TestElectronics:
    def test_list_and_filter(self, api_client, electronic, sold_out_electronic):
        response = api_client.get("/api/v1/electronics/", {"in_stock": "true"})

        assert response.status_code == 200
        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Chromebook 11"]

    def test_search(self, api_client, electronic, sold_out_electronic):
        response = api_client.get("/api/v1/electronics/", {"search": "sandisk"})

        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Memoria USB 64GB"]

    def test_retrieve(self, api_client, electronic):
        response = api_client.get(f"/api/v1/electronics/{electronic.id}/")

        assert response.status_code == 200
        assert response.json()["original_price"] == "279.00"
