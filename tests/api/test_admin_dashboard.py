"""Admin dashboard endpoint."""

from httpx import AsyncClient

from portal.domain.enums import Role


async def test_admin_dashboard_aggregates(
    client: AsyncClient, admin, make_user, make_course
) -> None:
    _, headers = admin
    networks = await make_course("Networks")
    security = await make_course("Security")
    await make_course("Unused")
    _, faculty_headers = await make_user(
        Role.FACULTY, "prof.ce@ddu.ac.in", [networks.id, security.id]
    )
    await make_user(Role.FACULTY, "prof.it@ddu.ac.in", [networks.id])
    await make_user(Role.STUDENT, "student1@ddu.ac.in")
    await client.post(
        "/api/faculty/papers",
        json={
            "courseId": networks.id,
            "name": "2023 end-sem",
            "description": "Full paper",
            "fileUrl": "http://test/files/uploads/p.pdf",
            "year": 2023,
        },
        headers=faculty_headers,
    )

    response = await client.get("/api/admin/dashboard", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["stats"] == {
        "totalStudents": 1,
        "totalFaculty": 2,
        "totalCourses": 3,
        "totalMaterials": 0,
        "totalPapers": 1,
    }
    assert len(body["recentFaculty"]) == 2
    assert [p["name"] for p in body["recentPapers"]] == ["2023 end-sem"]
    distribution = {d["name"]: d["facultyCount"] for d in body["courseDistribution"]}
    assert distribution == {"Networks": 2, "Security": 1, "Unused": 0}


async def test_admin_dashboard_is_admin_only(
    client: AsyncClient, make_user, make_course
) -> None:
    course = await make_course("Networks")
    _, headers = await make_user(Role.FACULTY, "prof.ce@ddu.ac.in", [course.id])
    response = await client.get("/api/admin/dashboard", headers=headers)
    assert response.status_code == 403
