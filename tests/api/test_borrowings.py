""" Test cases for borrowing-related API endpoints """


def test_add_borrowing(client, member, book):
    """ Test lending a book """
    response = client.post("/api/v1/borrowings", json={
        "user_id": member.id,
        "book_id": book.id,
        "date_borrowed": "2024-03-01",
        "due_date": "2024-03-15",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["name"] == "Ged Sparrowhawk"
    assert data["book"]["title"] == "A Wizard of Earthsea"
    assert data["due_date"] == "2024-03-15"


def test_add_borrowing_invalid_references(client):
    """ Test that user and book must exist """
    response = client.post("/api/v1/borrowings", json={
        "user_id": 1,
        "book_id": 1,
        "date_borrowed": "2024-03-01",
        "due_date": "2024-03-15",
    })
    assert response.status_code == 422
    fields = [error["field"] for error in response.json()["detail"]]
    assert fields == ["user_id", "book_id"]


def test_add_borrowing_invalid_date(client, member, book):
    """ Test that dates are validated """
    response = client.post("/api/v1/borrowings", json={
        "user_id": member.id,
        "book_id": book.id,
        "date_borrowed": "yesterday",
        "due_date": "2024-03-15",
    })
    assert response.status_code == 422
    assert response.json()["detail"][0]["field"] == "date_borrowed"


def test_search_borrowings(client, member, book):
    """ Test searching borrowings by member name and book title """
    client.post("/api/v1/borrowings", json={
        "user_id": member.id,
        "book_id": book.id,
        "date_borrowed": "2024-03-01",
        "due_date": "2024-03-15",
    })
    for term in ("sparrowhawk", "earthsea"):
        body = client.get("/api/v1/borrowings", params={"search_query": term}).json()
        assert body["total_items"] == 1
    body = client.get("/api/v1/borrowings", params={"search_query": "tombs"}).json()
    assert body["total_items"] == 0


def test_delete_book_on_loan(client, member, book):
    """ Test that a borrowed book cannot be deleted """
    client.post("/api/v1/borrowings", json={
        "user_id": member.id,
        "book_id": book.id,
        "date_borrowed": "2024-03-01",
        "due_date": "2024-03-15",
    })
    response = client.delete(f"/api/v1/books/{book.id}")
    assert response.status_code == 422
    assert client.get(f"/api/v1/books/{book.id}").status_code == 200
