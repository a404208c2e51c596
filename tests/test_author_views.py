from datetime import date


def test_list_sorted_by_family_name(client, make, captured_templates):
    make.author("Isaac", "Asimov")
    make.author("Ben", "Bova")
    make.author("Patrick", "Rothfuss")

    response = client.get("/catalog/authors")
    assert response.status_code == 200
    _, context = captured_templates[0]
    assert [a.name for a in context["author_list"]] == ["Asimov, Isaac", "Bova, Ben", "Rothfuss, Patrick"]


def test_detail_shows_books(client, make, captured_templates):
    author_id = make.author(date_of_birth=date(1973, 6, 6))
    genre_id = make.genre()
    make.book(author_id, genre_id)

    response = client.get(f"/catalog/author/{author_id}")
    assert response.status_code == 200
    _, context = captured_templates[0]
    assert context["author"].name == "Rothfuss, Patrick"
    assert len(context["author_books"]) == 1
    assert b"Jun 6, 1973 - " in response.data


def test_detail_missing_is_not_found(client):
    response = client.get("/catalog/author/12")
    assert response.status_code == 404
    assert b"Author not found" in response.data


def test_create_with_dates(client, query):
    response = client.post("/catalog/author/create", data={
        "first_name": " Isaac ",
        "family_name": "Asimov",
        "date_of_birth": "1920-01-02",
        "date_of_death": "1992-04-06",
    })
    assert response.status_code == 302

    author = query(lambda r: r.authors.find_one(family_name="Asimov"))
    assert author is not None
    assert response.headers["Location"] == f"/catalog/author/{author.id}"
    assert author.first_name == "Isaac"
    assert author.lifespan == "Jan 2, 1920 - Apr 6, 1992"


def test_create_collects_every_error(client, query, captured_templates):
    response = client.post("/catalog/author/create", data={
        "first_name": "",
        "family_name": "O Brien",
        "date_of_birth": "notadate",
    })
    assert response.status_code == 200
    _, context = captured_templates[0]
    assert context["errors"] == [
        {"param": "first_name", "msg": "First name must be specified."},
        {"param": "family_name", "msg": "Family name has non-alphanumeric characters."},
        {"param": "date_of_birth", "msg": "Invalid date of birth"},
    ]
    assert context["author"].family_name == "O Brien"
    assert query(lambda r: r.authors.count()) == 0


def test_create_rejects_death_before_birth(client, captured_templates):
    client.post("/catalog/author/create", data={
        "first_name": "Jim",
        "family_name": "Jones",
        "date_of_birth": "1990-01-01",
        "date_of_death": "1980-01-01",
    })
    _, context = captured_templates[0]
    assert context["errors"] == [
        {"param": "date_of_death", "msg": "Date of death must not be before date of birth."},
    ]


def test_update_round_trip(client, make, query):
    author_id = make.author("Ben", "Bova")

    response = client.post(f"/catalog/author/{author_id}/update", data={
        "first_name": "Benjamin",
        "family_name": "Bova",
        "date_of_birth": "1932-11-08",
        "date_of_death": "",
    })
    assert response.status_code == 302
    assert response.headers["Location"] == f"/catalog/author/{author_id}"

    author = query(lambda r: r.authors.find_by_id(author_id))
    assert author.name == "Bova, Benjamin"
    assert author.date_of_birth == date(1932, 11, 8)
    assert author.date_of_death is None


def test_update_get_missing_is_not_found(client):
    assert client.get("/catalog/author/3/update").status_code == 404


def test_delete_blocked_by_books(client, make, query, captured_templates):
    author_id = make.author()
    make.book(author_id, make.genre())

    response = client.post(f"/catalog/author/{author_id}/delete", data={"id": str(author_id)})
    assert response.status_code == 200
    _, context = captured_templates[0]
    assert len(context["author_books"]) == 1
    assert query(lambda r: r.authors.count()) == 1


def test_delete_author_without_books(client, make, query):
    author_id = make.author()

    assert client.get(f"/catalog/author/{author_id}/delete").status_code == 200
    response = client.post(f"/catalog/author/{author_id}/delete", data={"id": str(author_id)})
    assert response.status_code == 302
    assert response.headers["Location"] == "/catalog/authors"
    assert query(lambda r: r.authors.count()) == 0


def test_delete_get_missing_redirects(client):
    response = client.get("/catalog/author/5/delete")
    assert response.status_code == 302
    assert response.headers["Location"] == "/catalog/authors"
