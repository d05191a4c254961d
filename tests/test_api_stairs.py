"""
Stair pricing endpoints against the seeded default catalog.

Tests:
1-3.  /stairs/price: full stair, landing tread, explicit tax from the job
4-7.  Error mapping: mismatch 422, NaN height 422, unknown material 404, no rule 422
8-11. Price rule maintenance: filtered listing, create wins, soft delete, bad ranges
12-13. Bulk tread endpoint
14-15. Catalog reads and seeding
"""

import json


def _stair(tread_count=14, **overrides):
    body = {
        "floor_to_floor": 108,
        "num_risers": 14,
        "treads": [{"riser_number": i, "type": "box", "stair_width": 36} for i in range(1, tread_count + 1)],
        "tax_rate": 0.06,
    }
    body.update(overrides)
    return body


def test_price_full_stair(client, seeded):
    response = client.post("/api/stairs/price", json=_stair())
    assert response.status_code == 200
    data = response.json()
    assert data["subtotal"] == "1064.00"
    assert data["tax_amount"] == "63.84"
    assert data["total"] == "1127.84"
    assert data["configuration"]["riser_height_display"] == "7 23/32"
    assert "items" not in data


def test_price_with_landing_tread(client, seeded):
    data = client.post("/api/stairs/price", json=_stair(tread_count=13)).json()
    assert data["configuration"]["has_landing_tread"] is True
    assert data["breakdown"]["landing_tread"]["width"] == 3.5


def test_tax_rate_taken_from_job(client, seeded):
    job = client.post("/api/jobs/", json={"title": "Smith stair", "tax_rate": 0.1}).json()
    body = _stair(job_id=job["id"])
    del body["tax_rate"]
    data = client.post("/api/stairs/price", json=body).json()
    assert data["tax_amount"] == "106.40"
    assert data["configuration"]["tax_rate"] == 0.1


def test_mismatch_is_422(client, seeded):
    response = client.post("/api/stairs/price", json=_stair(tread_count=10))
    assert response.status_code == 422
    assert "Tread/riser mismatch" in response.json()["detail"]


def test_non_finite_height_is_422(client, seeded):
    body = json.dumps(_stair(floor_to_floor=float("nan")))
    response = client.post("/api/stairs/price", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 422


def test_unknown_material_is_404(client, seeded):
    response = client.post("/api/stairs/price", json=_stair(riser_material_id=77))
    assert response.status_code == 404


def test_no_rule_is_422_with_component(client, seeded):
    body = _stair(treads=[{"riser_number": i, "stair_width": 80} for i in range(1, 15)])
    response = client.post("/api/stairs/price", json=body)
    assert response.status_code == 422
    assert "tread 1 (box)" in response.json()["detail"]


def test_price_rules_filtered_by_dimensions_best_first(client, seeded):
    rules = client.get("/api/stairs/price-rules", params={"board_type_id": 1, "length": 48}).json()
    # Both box tread bands include 48"; the narrower 48-72 band comes first
    assert [r["length_min"] for r in rules] == [48.0, 0.0]

    all_box = client.get("/api/stairs/price-rules", params={"board_type_id": 1}).json()
    assert len(all_box) == 2


def test_material_specific_rule_takes_over(client, seeded):
    response = client.post("/api/stairs/price-rules", json={
        "board_type_id": 1, "material_id": 21, "length_max": 48, "width_max": 14,
        "begin_date": "2024-06-01", "unit_cost": 50.0, "base_width": 11.5,
    })
    assert response.status_code == 201
    data = client.post("/api/stairs/price", json=_stair(tread_material_id=21)).json()
    assert data["breakdown"]["treads"][0]["unit_price"] == 62.5   # 50 × 1.25


def test_soft_deleted_rule_no_longer_resolves(client, seeded):
    rules = client.get("/api/stairs/price-rules", params={"board_type_id": 1, "length": 36}).json()
    assert len(rules) == 1
    assert client.delete(f"/api/stairs/price-rules/{rules[0]['id']}").status_code == 200

    response = client.post("/api/stairs/price", json=_stair())
    assert response.status_code == 422
    assert "No applicable price rule" in response.json()["detail"]


def test_rule_with_inverted_band_rejected(client, seeded):
    response = client.post("/api/stairs/price-rules", json={
        "board_type_id": 5, "length_min": 48, "length_max": 36,
        "begin_date": "2024-01-01", "unit_cost": 18.0,
    })
    assert response.status_code == 422


def test_bulk_treads_generated(client):
    response = client.post("/api/stairs/treads/bulk", json={
        "num_risers": 5,
        "bulk": {"box_tread_count": 3, "box_tread_width": 36,
                 "open_tread_count": 1, "open_tread_width": 36},
    })
    assert response.status_code == 200
    data = response.json()
    assert [t["type"] for t in data["treads"]] == ["box", "box", "box", "open_left"]
    assert data["has_landing_tread"] is True


def test_bulk_update_respects_locked(client):
    response = client.post("/api/stairs/treads/bulk", json={
        "num_risers": 3,
        "treads": [{"riser_number": i, "stair_width": 36} for i in (1, 2, 3)],
        "update": {"stair_width": 40},
        "locked_riser_numbers": [3],
    })
    assert [t["stair_width"] for t in response.json()["treads"]] == [40, 40, 36]


def test_catalog_reads(client, seeded):
    assert len(client.get("/api/stairs/board-types").json()) == 7
    assert len(client.get("/api/stairs/materials").json()) == 7
    parts = client.get("/api/stairs/special-parts", params={"material_id": 21}).json()
    assert {p["material_id"] for p in parts} == {21}


def test_seed_is_idempotent(client, seeded):
    response = client.get("/api/stairs/seed")
    assert response.json() == {"ok": True, "seeded": 0}
