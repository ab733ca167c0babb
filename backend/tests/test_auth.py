"""Tests for teacher and student authentication."""
from datetime import timedelta

import pytest
from fastapi import HTTPException, status

from canvasclassroom.auth import AuthService, StudentRegister, TeacherCreate
from conftest import TEST_PASSWORD


def login(client, email, password, path="/auth/login"):
    return client.post(
        path,
        data={"username": email, "password": password},
        headers={"content-type": "application/x-www-form-urlencoded"}
    )


def test_register_teacher(client):
    """Test teacher registration."""
    response = client.post(
        "/auth/register",
        json={
            "email": "new@example.com",
            "password": "NewPass123!",
            "full_name": "New Teacher",
        }
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert "id" in data
    assert data["email"] == "new@example.com"
    assert "hashed_password" not in data

    # Duplicate email
    response = client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "AnotherPass123!"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_register_rejects_weak_password(client):
    response = client.post(
        "/auth/register",
        json={"email": "weak@example.com", "password": "password"}
    )
    assert response.status_code == 422


def test_login(client, teacher):
    """Test login and token generation."""
    response = login(client, teacher.email, TEST_PASSWORD)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"

    response = login(client, teacher.email, "wrongpassword")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_protected_endpoint(client, teacher):
    """Test access to protected endpoints."""
    access_token = login(client, teacher.email, TEST_PASSWORD).json()["access_token"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == teacher.email

    response = client.get("/auth/me", headers={"Authorization": "Bearer invalid_token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_inactive_teacher_is_rejected(client, db_session, teacher, auth_headers):
    teacher.is_active = False
    db_session.commit()

    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_class_routes_require_token(client):
    response = client.get("/classes")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestStudentAccounts:
    def test_register_creates_student_record(self, client, db_session):
        response = client.post(
            "/auth/student/register",
            json={"email": "kid@example.com", "password": "KidPass123!", "full_name": "Kid Coder"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert "hashed_password" not in response.json()

        student_id = response.json()["student_id"]
        token = login(client, "kid@example.com", "KidPass123!", "/auth/student/login").json()["access_token"]
        me = client.get("/auth/student/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["student_id"] == student_id

    def test_duplicate_email(self, db_session):
        service = AuthService(db_session)
        data = StudentRegister(email="twin@example.com", password="TwinPass123!", full_name="Twin")
        service.register_student(data)
        with pytest.raises(HTTPException) as exc_info:
            service.register_student(data)
        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST

    def test_wrong_password(self, client, student_headers, students):
        response = login(client, students[0].email, "wrongpassword", "/auth/student/login")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_tokens_do_not_cross_roles(self, client, auth_headers, student_headers, classroom):
        assert client.get("/auth/student/me", headers=auth_headers).status_code == status.HTTP_401_UNAUTHORIZED
        assert client.get("/auth/me", headers=student_headers[0]).status_code == status.HTTP_401_UNAUTHORIZED
        assert client.get("/classes", headers=student_headers[0]).status_code == status.HTTP_401_UNAUTHORIZED
        lessons_url = f"/student/classes/{classroom.id}/lessons"
        assert client.get(lessons_url, headers=auth_headers).status_code == status.HTTP_401_UNAUTHORIZED

    def test_student_routes_require_token(self, client, classroom):
        response = client.get(f"/student/classes/{classroom.id}/lessons")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAuthService:
    def test_register_hashes_password(self, db_session):
        teacher = AuthService(db_session).register_teacher(
            TeacherCreate(email="hash@example.com", password="HashPass123!")
        )
        assert teacher.hashed_password != "HashPass123!"
        assert teacher.verify_password("HashPass123!")
        assert not teacher.verify_password("wrong")

    def test_authenticate_records_last_login(self, db_session, teacher):
        authenticated = AuthService(db_session).authenticate_teacher(teacher.email, TEST_PASSWORD)
        assert authenticated.id == teacher.id
        assert authenticated.last_login is not None

    def test_verify_token_round_trip(self, db_session, teacher):
        service = AuthService(db_session)
        token_data = service.verify_token(service.token_for(teacher))
        assert token_data.email == teacher.email
        assert token_data.teacher_id == teacher.id

    def test_expired_token_is_rejected(self, db_session, teacher):
        service = AuthService(db_session)
        token = service.create_access_token(
            {"sub": teacher.email, "teacher_id": teacher.id},
            expires_delta=timedelta(minutes=-1),
        )
        with pytest.raises(HTTPException) as exc_info:
            service.verify_token(token)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_student_token_round_trip(self, db_session):
        service = AuthService(db_session)
        account = service.register_student(
            StudentRegister(email="round@example.com", password="RoundPass123!", full_name="Round Trip")
        )
        token_data = service.verify_token(service.student_token_for(account), role="student")
        assert token_data.student_id == account.student_id
        assert token_data.teacher_id is None
