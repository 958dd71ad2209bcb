import math

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql

from app.db.enums import Role
from app.db.models.user import User
from app.db.repositories import ratings as ratings_repo
from app.db.repositories import users as users_repo
from conftest import DEFAULT_PASSWORD


def new_user_payload(**overrides):
    payload = {
        "name": "Administered Account Holder",
        "email": "created@shopmail.com",
        "password": DEFAULT_PASSWORD,
        "address": "12 Station Road",
    }
    payload.update(overrides)
    return payload


def test_admin_routes_require_authentication(client):
    response = client.get("/api/admin/dashboard")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("role", [Role.USER, Role.STORE_OWNER])
def test_admin_routes_reject_other_roles(client, make_user, auth_headers, role):
    headers = auth_headers(make_user(role=role))

    assert client.get("/api/admin/dashboard", headers=headers).status_code == 403
    assert client.get("/api/admin/users", headers=headers).status_code == 403
    assert client.post("/api/admin/stores", json={}, headers=headers).status_code == 403


def test_dashboard_counts(client, db_session, admin, make_user, make_store, auth_headers):
    user = make_user()
    owner = make_user(role=Role.STORE_OWNER)
    first, second = make_store(owner=owner), make_store()
    ratings_repo.submit_rating(db_session, user.id, first.id, 4)
    ratings_repo.submit_rating(db_session, user.id, second.id, 2)
    ratings_repo.submit_rating(db_session, user.id, first.id, 5)

    response = client.get("/api/admin/dashboard", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == {"totalUsers": 3, "totalStores": 2, "totalRatings": 2}


@pytest.mark.parametrize("role", ["admin", "user", "store_owner"])
def test_create_user_with_role(client, admin, auth_headers, role):
    response = client.post("/api/admin/users", json=new_user_payload(role=role), headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["role"] == role
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]


def test_create_user_defaults_to_user_role(client, admin, auth_headers):
    response = client.post("/api/admin/users", json=new_user_payload(), headers=auth_headers(admin))

    assert response.json()["user"]["role"] == "user"


def test_create_user_duplicate_email(client, admin, make_user, auth_headers):
    make_user(email="taken@shopmail.com")

    response = client.post(
        "/api/admin/users",
        json=new_user_payload(email="Taken@ShopMail.com"),
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {"message": "User already exists with this email"}


def test_create_user_weak_password_stores_nothing(client, db_session, admin, auth_headers):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(password="password"),
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "password"
    count = db_session.execute(select(func.count()).select_from(User)).scalar_one()
    assert count == 1


def test_create_user_unknown_role(client, admin, auth_headers):
    response = client.post("/api/admin/users", json=new_user_payload(role="superuser"), headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "role"


def test_list_users_filters(client, admin, make_user, auth_headers):
    make_user(name="Margaret Hamilton Engineering", address="Boston")
    make_user(name="Grace Hopper Of The Navy Yard", role=Role.STORE_OWNER, address="Arlington")
    make_user(name="Katherine Johnson At Langley", address="Hampton")
    headers = auth_headers(admin)

    by_name = client.get("/api/admin/users", params={"name": "hopper"}, headers=headers).json()
    by_role = client.get("/api/admin/users", params={"role": "store_owner"}, headers=headers).json()
    by_address = client.get("/api/admin/users", params={"address": "ton"}, headers=headers).json()
    by_email = client.get("/api/admin/users", params={"email": "admin@"}, headers=headers).json()

    assert [user["name"] for user in by_name["users"]] == ["Grace Hopper Of The Navy Yard"]
    assert [user["role"] for user in by_role["users"]] == ["store_owner"]
    assert sorted(user["address"] for user in by_address["users"]) == ["Arlington", "Boston", "Hampton"]
    assert [user["email"] for user in by_email["users"]] == ["admin@shopmail.com"]
    assert by_name["pagination"]["total"] == 1


def test_list_users_rejects_unknown_role_filter(client, admin, auth_headers):
    response = client.get("/api/admin/users", params={"role": "superuser"}, headers=auth_headers(admin))

    assert response.status_code == 400


def test_list_users_sorting(client, admin, make_user, auth_headers):
    make_user(email="zed@shopmail.com")
    make_user(email="amy@shopmail.com")
    headers = auth_headers(admin)

    descending = client.get(
        "/api/admin/users",
        params={"sortBy": "email", "sortOrder": "desc"},
        headers=headers,
    ).json()
    fallback = client.get(
        "/api/admin/users",
        params={"sortBy": "password_hash", "sortOrder": "sideways"},
        headers=headers,
    ).json()

    assert [user["email"] for user in descending["users"]] == [
        "zed@shopmail.com",
        "amy@shopmail.com",
        "admin@shopmail.com",
    ]
    names = [user["name"] for user in fallback["users"]]
    assert names == sorted(names)


def test_list_users_pagination_covers_every_row(client, admin, make_user, auth_headers):
    for _ in range(6):
        make_user()
    headers = auth_headers(admin)

    seen = []
    page = 1
    while True:
        body = client.get("/api/admin/users", params={"page": page, "limit": 3}, headers=headers).json()
        if not body["users"]:
            break
        seen.extend(user["id"] for user in body["users"])
        page += 1

    assert body["pagination"]["total"] == 7
    assert body["pagination"]["pages"] == math.ceil(7 / 3)
    assert len(seen) == len(set(seen)) == 7


def test_user_detail_for_regular_user(client, admin, make_user, auth_headers):
    user = make_user()

    response = client.get(f"/api/admin/users/{user.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    detail = response.json()["user"]
    assert detail["email"] == user.email
    assert "store" not in detail
    assert "stores" not in detail


def test_user_detail_for_store_owner(client, db_session, admin, make_user, make_store, auth_headers):
    owner = make_user(role=Role.STORE_OWNER)
    store = make_store(name="Owner's Only Store", owner=owner)
    ratings_repo.submit_rating(db_session, make_user().id, store.id, 3)

    detail = client.get(f"/api/admin/users/{owner.id}", headers=auth_headers(admin)).json()["user"]

    assert detail["role"] == "store_owner"
    assert detail["store"]["name"] == "Owner's Only Store"
    assert detail["store"]["average_rating"] == 3.0
    assert detail["store"]["total_ratings"] == 1
    assert [item["id"] for item in detail["stores"]] == [store.id]


def test_user_detail_for_store_owner_without_store(client, admin, make_user, auth_headers):
    owner = make_user(role=Role.STORE_OWNER)

    detail = client.get(f"/api/admin/users/{owner.id}", headers=auth_headers(admin)).json()["user"]

    assert detail["store"] is None
    assert detail["stores"] == []


def test_user_detail_not_found(client, admin, auth_headers):
    response = client.get("/api/admin/users/9999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_create_store_without_owner(client, admin, auth_headers):
    response = client.post(
        "/api/admin/stores",
        json={"name": "  Corner Bakery  ", "email": "Bakery@ShopMail.com", "address": "3 High Street"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Store created successfully"
    assert body["store"]["name"] == "Corner Bakery"
    assert body["store"]["email"] == "bakery@shopmail.com"
    assert body["store"]["owner_id"] is None


def test_create_store_blank_owner_is_none(client, admin, auth_headers):
    response = client.post(
        "/api/admin/stores",
        json={"name": "Flower Stall", "email": "flowers@shopmail.com", "address": "Market", "owner_id": ""},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["store"]["owner_id"] is None


def test_create_store_with_owner(client, admin, make_user, auth_headers):
    owner = make_user(role=Role.STORE_OWNER)

    response = client.post(
        "/api/admin/stores",
        json={"name": "Hardware Hub", "email": "hub@shopmail.com", "address": "Dock Road", "owner_id": owner.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["store"]["owner_id"] == owner.id


def test_create_store_owner_must_be_store_owner(client, admin, make_user, auth_headers):
    plain_user = make_user()

    response = client.post(
        "/api/admin/stores",
        json={"name": "Hardware Hub", "email": "hub@shopmail.com", "address": "Dock Road", "owner_id": plain_user.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Owner must have store_owner role"


def test_create_store_unknown_owner(client, admin, auth_headers):
    response = client.post(
        "/api/admin/stores",
        json={"name": "Hardware Hub", "email": "hub@shopmail.com", "address": "Dock Road", "owner_id": 4242},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Owner not found"


def test_create_store_duplicate_email(client, admin, make_store, auth_headers):
    make_store(email="taken@shopmail.com")

    response = client.post(
        "/api/admin/stores",
        json={"name": "Copycat", "email": "taken@shopmail.com", "address": "Elsewhere"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {"message": "Store already exists with this email"}


def test_create_store_requires_fields(client, admin, auth_headers):
    response = client.post(
        "/api/admin/stores",
        json={"name": "   ", "email": "not-an-email", "address": "x" * 401},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"name", "email", "address"}


def test_admin_store_listing(client, admin, make_user, make_store, auth_headers):
    owner = make_user(role=Role.STORE_OWNER)
    owned = make_store(name="Owned Store", email="owned@shopmail.com", owner=owner)
    make_store(name="Free Store", email="free@othermail.com")

    body = client.get(
        "/api/admin/stores",
        params={"email": "shopmail"},
        headers=auth_headers(admin),
    ).json()

    assert [store["id"] for store in body["stores"]] == [owned.id]
    assert body["stores"][0]["owner_id"] == owner.id
    assert body["stores"][0]["average_rating"] == 0
    assert "user_rating" not in body["stores"][0]
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}


def test_users_cannot_be_modified_or_deleted(client, admin, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(admin)

    assert client.put(f"/api/admin/users/{user.id}", json={}, headers=headers).status_code == 405
    assert client.delete(f"/api/admin/users/{user.id}", headers=headers).status_code == 405


def test_list_users_sorts_role_by_name(client, admin, make_user, auth_headers):
    make_user(role=Role.USER)
    make_user(role=Role.STORE_OWNER)

    body = client.get("/api/admin/users", params={"sortBy": "role"}, headers=auth_headers(admin)).json()

    assert [user["role"] for user in body["users"]] == ["admin", "store_owner", "user"]


def test_role_sort_compares_text_on_postgres():
    compiled = str(users_repo.USER_SORT_COLUMNS["role"].compile(dialect=postgresql.dialect()))

    assert compiled.startswith("CAST(users.role AS VARCHAR")


def test_user_detail_rejects_oversized_id(client, admin, auth_headers):
    response = client.get("/api/admin/users/99999999999999999999", headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "user_id"


def test_create_store_rejects_oversized_owner_id(client, admin, auth_headers):
    response = client.post(
        "/api/admin/stores",
        json={"name": "Hardware Hub", "email": "hub@shopmail.com", "address": "Dock Road", "owner_id": 99999999999999999999},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "owner_id"
