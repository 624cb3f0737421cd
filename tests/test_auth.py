from datetime import timedelta

from storefront.core.auth import AuthService, auth_service

from conftest import auth_headers


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = AuthService.get_password_hash("admin123")
        assert hashed != "admin123"
        assert AuthService.verify_password("admin123", hashed)
        assert not AuthService.verify_password("wrong", hashed)

    def test_token_roundtrip(self):
        token = AuthService.create_access_token({"sub": "42", "role": "USER"})
        payload = AuthService.verify_token(token)
        assert payload["sub"] == "42"
        assert payload["role"] == "USER"

    def test_expired_token_is_rejected(self):
        token = AuthService.create_access_token(
            {"sub": "1"}, expires_delta=timedelta(minutes=-1)
        )
        assert AuthService.verify_token(token) is None


class TestLogin:
    def test_login_returns_token(self, client, admin):
        response = client.post(
            "/api/v1/auth/login", json={"username": "admin", "password": "admin123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "ADMIN"

        me = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["username"] == "admin"

    def test_login_wrong_password(self, client, admin):
        response = client.post(
            "/api/v1/auth/login", json={"username": "admin", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"


class TestAccessControl:
    def test_missing_token_is_unauthenticated(self, client):
        response = client.get("/api/v1/products")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_invalid_token_is_unauthenticated(self, client):
        response = client.get(
            "/api/v1/products", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    def test_token_of_deleted_user_is_unauthenticated(self, client, db, make_category, make_company):
        user = make_company("ghost", [make_category()])
        headers = auth_headers(user)
        db.delete(user)
        db.commit()

        assert client.get("/api/v1/products", headers=headers).status_code == 401

    def test_company_cannot_use_admin_endpoints(self, client, make_category, make_company):
        user = make_company("acme", [make_category()])
        response = client.get("/api/v1/users", headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"


class TestChangePassword:
    def test_change_password(self, client, db, make_category, make_company):
        user = make_company("acme", [make_category()], password="secret")
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "secret", "new_password": "better-secret"},
            headers=auth_headers(user),
        )
        assert response.status_code == 200

        db.expire_all()
        assert auth_service.authenticate(db, "acme", "better-secret").id == user.id

    def test_wrong_current_password(self, client, make_category, make_company):
        user = make_company("acme", [make_category()], password="secret")
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "nope", "new_password": "better-secret"},
            headers=auth_headers(user),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Current password is incorrect"

    def test_new_password_too_short(self, client, make_category, make_company):
        user = make_company("acme", [make_category()], password="secret")
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "secret", "new_password": "abc"},
            headers=auth_headers(user),
        )
        assert response.status_code == 400
