""" Test cases for shelf-related API endpoints """
import io

import pandas as pd


def test_add_shelf(client):
    """ Test adding a shelf """
    response = client.post(
        "/api/v1/shelves", json={"name": "B2", "location": "First floor"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "B2"
    assert data["location"] == "First floor"


def test_search_shelves_by_location(client, shelf):
    """ Test searching shelves by location """
    client.post("/api/v1/shelves", json={"name": "B2", "location": "First floor"})
    response = client.get("/api/v1/shelves", params={"search_query": "ground"})
    assert [item["name"] for item in response.json()["data"]] == ["A1"]


def test_export_shelves(client, shelf):
    """ Test the shelf list download """
    client.post("/api/v1/shelves", json={"name": "B2"})

    response = client.get("/api/v1/shelves/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="shelflist.csv"' in response.headers["content-disposition"]

    frame = pd.read_csv(io.BytesIO(response.content), dtype=str, keep_default_na=False)
    assert list(frame.columns) == ["id", "name", "location"]
    assert frame["name"].tolist() == ["A1", "B2"]
    assert frame["location"].tolist() == ["Ground floor", ""]


def test_export_shelves_xlsx(client, shelf):
    """ Test the shelf list download as a spreadsheet """
    response = client.get("/api/v1/shelves/export", params={"format": "xlsx"})
    assert response.status_code == 200
    assert 'filename="shelflist.xlsx"' in response.headers["content-disposition"]

    frame = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
    assert frame["name"].tolist() == ["A1"]


def test_export_shelves_unknown_format(client):
    """ Test that only csv and xlsx can be requested """
    response = client.get("/api/v1/shelves/export", params={"format": "pdf"})
    assert response.status_code == 422
