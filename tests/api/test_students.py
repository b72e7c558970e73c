"""Student administration endpoints."""

from httpx import AsyncClient

from portal.domain.enums import Role


async def test_admin_provisions_and_lists_students(
    client: AsyncClient, admin, make_course
) -> None:
    _, headers = admin
    course = await make_course("Physics")

    created = await client.post(
        "/api/students",
        json={"email": "Student1@DDU.ac.in", "name": "Meera", "courseIds": [course.id]},
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["email"] == "student1@ddu.ac.in"
    assert body["role"] == "student"
    assert body["displayName"] == "Meera"
    assert body["courseIds"] == [course.id]

    listing = await client.get("/api/students", headers=headers)
    assert [s["id"] for s in listing.json()] == [body["id"]]


async def test_faculty_cannot_manage_students(client: AsyncClient, make_user, make_course) -> None:
    course = await make_course("Physics")
    _, headers = await make_user(Role.FACULTY, "prof.it@ddu.ac.in", [course.id])
    response = await client.get("/api/students", headers=headers)
    assert response.status_code == 403


async def test_duplicate_student_email_returns_409(client: AsyncClient, admin) -> None:
    _, headers = admin
    payload = {"email": "student1@ddu.ac.in"}
    assert (await client.post("/api/students", json=payload, headers=headers)).status_code == 201
    response = await client.post("/api/students", json=payload, headers=headers)
    assert response.status_code == 409


async def test_student_email_must_be_institutional(client: AsyncClient, admin) -> None:
    _, headers = admin
    response = await client.post(
        "/api/students", json={"email": "someone@gmail.com"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_unknown_course_on_student_returns_400(client: AsyncClient, admin) -> None:
    _, headers = admin
    response = await client.post(
        "/api/students",
        json={"email": "student1@ddu.ac.in", "courseIds": ["missing"]},
        headers=headers,
    )
    assert response.status_code == 400


async def test_update_and_delete_student(client: AsyncClient, admin, make_user) -> None:
    _, headers = admin
    student, _ = await make_user(Role.STUDENT, "student1@ddu.ac.in")

    updated = await client.put(
        f"/api/students/{student.id}",
        json={"name": "Kiran", "email": "student2@ddu.ac.in"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["displayName"] == "Kiran"
    assert updated.json()["email"] == "student2@ddu.ac.in"

    deleted = await client.delete(f"/api/students/{student.id}", headers=headers)
    assert deleted.status_code == 204
    missing = await client.delete(f"/api/students/{student.id}", headers=headers)
    assert missing.status_code == 404


async def test_student_endpoints_reject_faculty_ids(
    client: AsyncClient, admin, make_user, make_course
) -> None:
    _, headers = admin
    course = await make_course("Physics")
    faculty, _ = await make_user(Role.FACULTY, "prof.it@ddu.ac.in", [course.id])
    response = await client.delete(f"/api/students/{faculty.id}", headers=headers)
    assert response.status_code == 400
