from sqlalchemy import select

from storefront.core.auth import Actor
from storefront.db.models import Product
from storefront.services.catalog_service import catalog_service

from conftest import auth_headers


def product_names(response):
    assert response.status_code == 200
    return {product["name"] for product in response.json()}


class TestProductVisibility:
    def test_company_sees_only_granted_categories(
        self, client, make_category, make_product, make_company
    ):
        tools = make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        make_product(tools, "Hammer")
        make_product(paint, "Brush")
        acme = make_company("acme", [tools])

        assert product_names(client.get("/api/v1/products", headers=auth_headers(acme))) == {
            "Hammer"
        }

    def test_assignment_narrows_within_category(
        self, client, make_category, make_product, make_company
    ):
        tools = make_category()
        acme = make_company("acme", [tools])
        globex = make_company("globex", [tools])
        make_product(tools, "Hammer")
        make_product(tools, "Acme Drill", assigned_to=acme)
        make_product(tools, "Globex Saw", assigned_to=globex)

        assert product_names(client.get("/api/v1/products", headers=auth_headers(acme))) == {
            "Hammer",
            "Acme Drill",
        }
        assert product_names(client.get("/api/v1/products", headers=auth_headers(globex))) == {
            "Hammer",
            "Globex Saw",
        }

    def test_assignment_does_not_expand_outside_categories(
        self, client, make_category, make_product, make_company
    ):
        tools = make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        acme = make_company("acme", [tools])
        make_product(paint, "Acme Paint", assigned_to=acme)

        headers = auth_headers(acme)
        assert product_names(client.get("/api/v1/products", headers=headers)) == set()

    def test_admin_sees_everything(
        self, client, admin_headers, make_category, make_product, make_company
    ):
        tools = make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        acme = make_company("acme", [tools])
        make_product(tools, "Hammer")
        make_product(paint, "Acme Paint", assigned_to=acme)

        response = client.get("/api/v1/products", headers=admin_headers)
        assert product_names(response) == {"Hammer", "Acme Paint"}
        assigned = [p for p in response.json() if p["name"] == "Acme Paint"][0]
        assert assigned["assigned_to"]["username"] == "acme"

    def test_visible_set_never_leaves_granted_categories(
        self, db, make_category, make_product, make_company
    ):
        categories = [make_category(f"Cat {i}", "📌") for i in range(4)]
        companies = [
            make_company("c0", categories[:1]),
            make_company("c1", categories[1:3]),
            make_company("c2", categories[2:]),
        ]
        for index, category in enumerate(categories):
            make_product(category, f"Open {index}")
            for company in companies:
                make_product(category, f"{company.username} {index}", assigned_to=company)

        for company in companies:
            actor = Actor.from_user(company)
            granted = set(company.category_ids)
            for product in catalog_service.list_products(db, actor):
                assert product.category_id in granted
                assert product.assigned_to_id in (None, company.id)

    def test_get_product_outside_scope_is_not_found(
        self, client, make_category, make_product, make_company
    ):
        tools = make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        brush = make_product(paint, "Brush")
        acme = make_company("acme", [tools])

        response = client.get(f"/api/v1/products/{brush.id}", headers=auth_headers(acme))
        assert response.status_code == 404

    def test_filter_and_search(self, client, make_category, make_product, make_company):
        tools = make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        make_product(tools, "Claw Hammer")
        make_product(tools, "Screwdriver")
        make_product(paint, "Brush")
        acme = make_company("acme", [tools, paint])
        headers = auth_headers(acme)

        by_category = client.get(
            "/api/v1/products", params={"category_id": paint.id}, headers=headers
        )
        assert product_names(by_category) == {"Brush"}
        by_name = client.get("/api/v1/products", params={"q": "hammer"}, headers=headers)
        assert product_names(by_name) == {"Claw Hammer"}


class TestCategories:
    def test_company_lists_only_granted_categories(
        self, client, make_category, make_product, make_company
    ):
        tools = make_category("Tools", "✅")
        make_category("Paint", "🎨")
        make_product(tools, "Hammer")
        make_product(tools, "Saw")
        acme = make_company("acme", [tools])

        response = client.get("/api/v1/categories", headers=auth_headers(acme))
        assert response.status_code == 200
        assert response.json() == [
            {
                "id": tools.id,
                "name": "Tools",
                "emoji": "✅",
                "description": None,
                "products_count": 2,
            }
        ]

    def test_create_category(self, client, admin_headers):
        response = client.post(
            "/api/v1/categories",
            json={"name": "  Tools ", "emoji": "✅", "description": "Hand tools"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["name"] == "Tools"
        assert response.json()["products_count"] == 0

    def test_duplicate_category_name_is_conflict(self, client, admin_headers, make_category):
        make_category("Tools", "✅")
        response = client.post(
            "/api/v1/categories", json={"name": "Tools", "emoji": "🔧"}, headers=admin_headers
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_rename_to_existing_name_is_conflict(self, client, admin_headers, make_category):
        make_category("Tools", "✅")
        paint = make_category("Paint", "🎨")
        response = client.put(
            f"/api/v1/categories/{paint.id}", json={"name": "Tools"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_update_category(self, client, admin_headers, make_category, make_product):
        tools = make_category("Tools", "✅")
        make_product(tools, "Hammer")
        response = client.put(
            f"/api/v1/categories/{tools.id}",
            json={"emoji": "🔧", "description": "Hand tools"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["emoji"] == "🔧"
        assert data["description"] == "Hand tools"
        assert data["products_count"] == 1

    def test_delete_category_removes_its_products(
        self, client, db, admin_headers, make_category, make_product
    ):
        tools = make_category()
        make_product(tools, "Hammer")

        response = client.delete(f"/api/v1/categories/{tools.id}", headers=admin_headers)
        assert response.status_code == 200
        assert db.scalars(select(Product)).all() == []

    def test_company_cannot_create_category(self, client, make_category, make_company):
        acme = make_company("acme", [make_category()])
        response = client.post(
            "/api/v1/categories",
            json={"name": "Paint", "emoji": "🎨"},
            headers=auth_headers(acme),
        )
        assert response.status_code == 403


class TestProductAdmin:
    def test_create_product(self, client, admin_headers, make_category, make_company):
        tools = make_category()
        acme = make_company("acme", [tools])
        response = client.post(
            "/api/v1/products",
            json={
                "name": "Hammer",
                "description": "Steel hammer",
                "price": "9.99",
                "category_id": tools.id,
                "assigned_to_id": acme.id,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["price"] == "9.99"
        assert data["category"]["name"] == "Tools"
        assert data["assigned_to"]["id"] == acme.id

    def test_negative_price_is_rejected(self, client, admin_headers, make_category):
        tools = make_category()
        response = client.post(
            "/api/v1/products",
            json={
                "name": "Hammer",
                "description": "Steel hammer",
                "price": "-1",
                "category_id": tools.id,
            },
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_unknown_category_is_not_found(self, client, admin_headers):
        response = client.post(
            "/api/v1/products",
            json={"name": "Hammer", "description": "x", "price": "1.00", "category_id": 999},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_assign_to_admin_is_rejected(self, client, admin, admin_headers, make_category):
        tools = make_category()
        response = client.post(
            "/api/v1/products",
            json={
                "name": "Hammer",
                "description": "x",
                "price": "1.00",
                "category_id": tools.id,
                "assigned_to_id": admin.id,
            },
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_update_and_unassign(
        self, client, admin_headers, make_category, make_product, make_company
    ):
        tools = make_category()
        acme = make_company("acme", [tools])
        hammer = make_product(tools, "Hammer", assigned_to=acme)

        response = client.put(
            f"/api/v1/products/{hammer.id}",
            json={"price": "12.50", "assigned_to_id": None},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price"] == "12.50"
        assert data["assigned_to"] is None
        assert data["name"] == "Hammer"

    def test_delete_product(self, client, admin_headers, make_category, make_product):
        hammer = make_product(make_category())
        assert client.delete(f"/api/v1/products/{hammer.id}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/v1/products/{hammer.id}", headers=admin_headers).status_code == 404
