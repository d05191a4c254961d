"""
Jobs, job totals and saved stair configurations.

Tests:
1-3.  Job creation computes line totals; totals endpoint splits taxable items
4-5.  Sections and items added after creation
6-9.  Stair configuration save / read / replace / delete, with its job line item
10.   Saving an unpriceable stair stores nothing
11.   Job numbers stay unique after a delete
12.   Special-part labor lands on a non-taxable job line
13-15. Configuration job resolved from the request or section; conflicts rejected
"""


def _job_body(**overrides):
    body = {
        "title": "Main stair",
        "customer_name": "Jordan Builders",
        "tax_rate": 0.06,
        "sections": [{
            "name": "Stair parts",
            "items": [
                {"description": "Treads", "quantity": 4, "unit_price": 25, "is_taxable": True},
                {"description": "Delivery", "quantity": 1, "unit_price": 50, "is_taxable": False},
            ],
        }],
    }
    body.update(overrides)
    return body


def _stair(tread_count=14):
    return {
        "floor_to_floor": 108,
        "num_risers": 14,
        "treads": [{"riser_number": i, "stair_width": 36} for i in range(1, tread_count + 1)],
    }


def test_create_job(client):
    response = client.post("/api/jobs/", json=_job_body())
    assert response.status_code == 201
    job = response.json()
    assert job["job_number"].startswith("MW-")
    assert job["status"] == "quote"
    items = job["sections"][0]["items"]
    assert [i["line_total"] for i in items] == [100.0, 50.0]


def test_job_totals(client):
    job = client.post("/api/jobs/", json=_job_body()).json()
    data = client.get(f"/api/jobs/{job['id']}/totals").json()
    assert data["totals"] == {
        "taxable_total": 100.0,
        "non_taxable_total": 50.0,
        "tax_amount": 6.0,
        "grand_total": 156.0,
    }
    assert data["tax_rate_formatted"] == "6.00%"


def test_job_totals_use_state_when_no_rate(client):
    job = client.post("/api/jobs/", json=_job_body(tax_rate=None, state_code="pa")).json()
    assert job["state_code"] == "PA"
    data = client.get(f"/api/jobs/{job['id']}/totals").json()
    assert data["tax_rate"] == 0.06
    # query param overrides
    data = client.get(f"/api/jobs/{job['id']}/totals", params={"tax_rate": 0}).json()
    assert data["totals"]["grand_total"] == 150.0


def test_add_section_and_item(client):
    job = client.post("/api/jobs/", json=_job_body(sections=[])).json()
    section = client.post(f"/api/jobs/{job['id']}/sections", json={"name": "Labor", "is_labor_section": True})
    assert section.status_code == 201
    item = client.post(
        f"/api/jobs/{job['id']}/sections/{section.json()['id']}/items",
        json={"description": "Install", "quantity": 6, "unit_price": 65, "is_taxable": False},
    )
    assert item.json()["line_total"] == 390.0
    assert client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]["grand_total"] == 390.0


def test_missing_job_is_404(client):
    assert client.get("/api/jobs/999").status_code == 404
    assert client.get("/api/jobs/999/totals").status_code == 404


def test_save_stair_configuration_adds_job_line(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    section_id = job["sections"][0]["id"]
    response = client.post("/api/stair-configurations/", json={
        "job_id": job["id"], "config_name": "Front stair", "section_id": section_id, "request": _stair(),
    })
    assert response.status_code == 201
    config = response.json()
    assert config["subtotal"] == 1064.0
    assert config["tax_rate"] == 0.06          # from the job
    assert config["total_amount"] == 1127.84
    assert len([i for i in config["items"] if i["item_type"] == "tread"]) == 14

    totals = client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]
    assert totals["taxable_total"] == 1064.0

    listed = client.get(f"/api/jobs/{job['id']}/stair-configurations").json()
    assert [c["id"] for c in listed] == [config["id"]]


def test_replace_stair_configuration(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    section_id = job["sections"][0]["id"]
    config = client.post("/api/stair-configurations/", json={
        "job_id": job["id"], "section_id": section_id, "request": _stair(),
    }).json()

    body = {"job_id": job["id"], "request": dict(_stair(13), full_mitre=True)}
    response = client.put(f"/api/stair-configurations/{config['id']}", json=body)
    assert response.status_code == 200
    replaced = response.json()
    assert replaced["has_landing_tread"] is True
    assert replaced["full_mitre"] is True
    # 13 treads + landing, each 45 + 25 mitre; risers and stringers unchanged
    assert replaced["subtotal"] == 1414.0
    assert len([i for i in replaced["items"] if i["item_type"] == "landing_tread"]) == 1

    # the job line follows the new price
    totals = client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]
    assert totals["taxable_total"] == 1414.0


def test_delete_stair_configuration(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    config = client.post("/api/stair-configurations/", json={
        "job_id": job["id"], "section_id": job["sections"][0]["id"], "request": _stair(),
    }).json()
    assert client.delete(f"/api/stair-configurations/{config['id']}").status_code == 200
    assert client.get(f"/api/stair-configurations/{config['id']}").status_code == 404
    assert client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]["grand_total"] == 0.0


def test_unpriceable_configuration_not_saved(client, seeded):
    response = client.post("/api/stair-configurations/", json={"request": _stair(tread_count=5)})
    assert response.status_code == 422
    assert client.get("/api/stair-configurations/1").status_code == 404


def test_job_number_not_reused_after_delete(client):
    first = client.post("/api/jobs/", json=_job_body()).json()
    second = client.post("/api/jobs/", json=_job_body()).json()
    assert client.delete(f"/api/jobs/{first['id']}").status_code == 200

    response = client.post("/api/jobs/", json=_job_body())
    assert response.status_code == 201
    third = response.json()
    assert third["job_number"] != second["job_number"]
    assert third["job_number"].endswith("-0003")


def test_special_part_labor_not_taxed_on_job(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    request = dict(_stair(), special_parts=[{"part_id": 3}])
    config = client.post("/api/stair-configurations/", json={
        "job_id": job["id"], "section_id": job["sections"][0]["id"], "request": request,
    }).json()
    assert config["labor_total"] > 0

    totals = client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]
    assert totals["taxable_total"] == config["subtotal"]
    assert totals["non_taxable_total"] == config["labor_total"]
    assert totals["tax_amount"] == config["tax_amount"]
    assert totals["grand_total"] == config["total_amount"]

    # replacing keeps the parts/labor split on the job
    response = client.put(f"/api/stair-configurations/{config['id']}", json={
        "job_id": job["id"], "request": _stair(),
    })
    assert response.status_code == 200
    totals = client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]
    assert totals["taxable_total"] == 1064.0
    assert totals["non_taxable_total"] == 0.0


def test_configuration_job_taken_from_request(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[], tax_rate=0.1)).json()
    config = client.post("/api/stair-configurations/", json={
        "request": dict(_stair(), job_id=job["id"]),
    }).json()
    assert config["job_id"] == job["id"]
    assert config["tax_rate"] == 0.1
    listed = client.get(f"/api/jobs/{job['id']}/stair-configurations").json()
    assert [c["id"] for c in listed] == [config["id"]]


def test_configuration_job_taken_from_section(client, seeded):
    job = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    config = client.post("/api/stair-configurations/", json={
        "section_id": job["sections"][0]["id"], "request": _stair(),
    }).json()
    assert config["job_id"] == job["id"]
    assert config["tax_rate"] == 0.06
    assert client.get(f"/api/jobs/{job['id']}/totals").json()["totals"]["taxable_total"] == 1064.0


def test_conflicting_job_ids_rejected(client, seeded):
    first = client.post("/api/jobs/", json=_job_body(sections=[])).json()
    second = client.post("/api/jobs/", json=_job_body(sections=[{"name": "Stairs"}])).json()
    response = client.post("/api/stair-configurations/", json={
        "job_id": first["id"], "request": dict(_stair(), job_id=second["id"]),
    })
    assert response.status_code == 422
    response = client.post("/api/stair-configurations/", json={
        "job_id": first["id"], "section_id": second["sections"][0]["id"], "request": _stair(),
    })
    assert response.status_code == 404
