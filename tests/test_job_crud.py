"""
Tests for app.crud.job, including filtering and the technology rewrite.
"""

import pytest

from app.core.exceptions import InvalidInputError, NotFoundError
from app.crud import job as job_crud


class TestCreate:

    def test_create_then_get(self, db_session, seed):
        """Test creating a job and reading it back"""
        job = job_crud.create(db_session, {
            "title": "new",
            "salary": 10000,
            "equity": 0.1,
            "companyHandle": "c1",
        })

        assert job == {
            "id": job["id"],
            "title": "new",
            "salary": 10000,
            "equity": 0.1,
            "companyHandle": "c1",
        }
        assert job_crud.get(db_session, job["id"]) == {**job, "technology": []}

    def test_create_with_technology(self, db_session, seed):
        """Test creating a job with linked technologies"""
        job = job_crud.create(db_session, {
            "title": "new",
            "salary": None,
            "equity": None,
            "companyHandle": "c2",
            "technology": ["react", "python"],
        })

        assert job["technology"] == ["react", "python"]
        assert job_crud.get(db_session, job["id"])["technology"] == ["python", "react"]

    @pytest.mark.parametrize("equity", [0, 1.0])
    def test_equity_bounds_accepted(self, db_session, seed, equity):
        """Test equity at the edges of its range"""
        job = job_crud.create(db_session, {"title": "eq", "salary": 1, "equity": equity, "companyHandle": "c1"})

        assert job["equity"] == equity

    def test_equity_above_one_rejected(self, db_session, seed):
        """Test equity above 1.0"""
        with pytest.raises(InvalidInputError):
            job_crud.create(db_session, {"title": "eq", "salary": 1, "equity": 1.5, "companyHandle": "c1"})

    def test_unknown_company(self, db_session, seed):
        """Test creating a job for a company that doesn't exist"""
        with pytest.raises(NotFoundError, match="nope"):
            job_crud.create(db_session, {"title": "x", "salary": 1, "equity": 0, "companyHandle": "nope"})

    def test_unknown_technology_leaves_nothing_behind(self, db_session, seed):
        """Test that a bad technology list rolls back the new job"""
        with pytest.raises(NotFoundError):
            job_crud.create(db_session, {
                "title": "ghost",
                "salary": 1,
                "equity": 0,
                "companyHandle": "c1",
                "technology": ["cobol"],
            })

        assert job_crud.find_all(db_session, {"title": "ghost"}) == []


class TestFindAll:

    def test_no_filter_ordered_by_title(self, db_session, seed):
        """Test listing all jobs ordered by title"""
        jobs = job_crud.find_all(db_session)

        assert [j["title"] for j in jobs] == ["j1", "j2", "j3", "j4"]
        assert jobs[0] == {
            "id": seed["j1"],
            "title": "j1",
            "salary": 20000,
            "equity": 0,
            "companyHandle": "c1",
        }

    def test_title_filter(self, db_session, seed):
        """Test case-insensitive title matching"""
        jobs = job_crud.find_all(db_session, {"title": "J1"})

        assert [j["title"] for j in jobs] == ["j1"]

    def test_min_salary_filter(self, db_session, seed):
        """Test filtering by minimum salary"""
        jobs = job_crud.find_all(db_session, {"minSalary": 50000})

        assert [j["title"] for j in jobs] == ["j3", "j4"]

    def test_equity_filter(self, db_session, seed):
        """Test filtering to jobs with equity"""
        jobs = job_crud.find_all(db_session, {"hasEquity": True})

        assert [j["title"] for j in jobs] == ["j2", "j4"]

    def test_min_salary_and_equity(self, db_session, seed):
        """Test combining salary and equity filters"""
        jobs = job_crud.find_all(db_session, {"minSalary": 50000, "hasEquity": True})

        assert [j["title"] for j in jobs] == ["j4"]

    def test_technology_filter(self, db_session, seed):
        """Test filtering by any of several technologies"""
        jobs = job_crud.find_all(db_session, {"technology": ["react", "perl"]})

        assert [j["title"] for j in jobs] == ["j1", "j3"]

    def test_technology_filter_single_name(self, db_session, seed):
        """Test filtering by one technology given as a string"""
        jobs = job_crud.find_all(db_session, {"technology": "perl"})

        assert [j["title"] for j in jobs] == ["j3"]

    def test_none_found(self, db_session, seed):
        """Test a filter that matches nothing"""
        assert job_crud.find_all(db_session, {"title": "nope"}) == []

    def test_disallowed_key(self, db_session, seed):
        """Test filtering on an unsupported key"""
        with pytest.raises(InvalidInputError, match="companyHandle"):
            job_crud.find_all(db_session, {"companyHandle": "c1"})


class TestGet:

    def test_get(self, db_session, seed):
        """Test retrieving a job with its technologies"""
        job = job_crud.get(db_session, seed["j1"])

        assert job["title"] == "j1"
        assert job["companyHandle"] == "c1"
        assert job["technology"] == ["javascript", "python", "react"]

    def test_not_found(self, db_session, seed):
        """Test retrieving a job that doesn't exist"""
        with pytest.raises(NotFoundError):
            job_crud.get(db_session, 0)


class TestUpdate:

    def test_update_fields(self, db_session, seed):
        """Test updating job fields"""
        job = job_crud.update(db_session, seed["j1"], {"title": "New", "salary": 1, "equity": 0.5})

        assert job["title"] == "New"
        assert job["salary"] == 1
        assert job["equity"] == 0.5
        assert job["technology"] == ["javascript", "python", "react"]

    def test_null_fields(self, db_session, seed):
        """Test clearing salary and equity"""
        job = job_crud.update(db_session, seed["j2"], {"salary": None, "equity": None})

        assert job["salary"] is None
        assert job["equity"] is None

    def test_replace_technology(self, db_session, seed):
        """Test replacing the technology list only"""
        job = job_crud.update(db_session, seed["j1"], {"technology": ["perl"]})

        assert job["technology"] == ["perl"]
        assert job["title"] == "j1"
        assert job_crud.get(db_session, seed["j1"])["technology"] == ["perl"]

    def test_replace_technology_is_idempotent(self, db_session, seed):
        """Test that repeating a rewrite changes nothing"""
        job_crud.update(db_session, seed["j4"], {"technology": ["python", "react"]})
        job = job_crud.update(db_session, seed["j4"], {"technology": ["python", "react"]})

        assert set(job["technology"]) == {"python", "react"}
        assert job_crud.get(db_session, seed["j4"])["technology"] == ["python", "react"]

    def test_clear_technology(self, db_session, seed):
        """Test clearing the technology list"""
        job = job_crud.update(db_session, seed["j1"], {"technology": []})

        assert job["technology"] == []

    def test_failed_rewrite_keeps_old_links(self, db_session, seed):
        """Test that a failed rewrite keeps the job unchanged"""
        with pytest.raises(NotFoundError):
            job_crud.update(db_session, seed["j1"], {"title": "changed", "technology": ["python", "cobol"]})

        job = job_crud.get(db_session, seed["j1"])
        assert job["title"] == "j1"
        assert job["technology"] == ["javascript", "python", "react"]

    def test_unknown_technologies_named(self, db_session, seed):
        """Test that the error lists only unknown technologies"""
        with pytest.raises(NotFoundError) as excinfo:
            job_crud.update(db_session, seed["j4"], {"technology": ["cobol", "python", "fortran", "react"]})

        assert str(excinfo.value) == "No such technology: cobol, fortran"

    def test_company_not_updatable(self, db_session, seed):
        """Test that the company is not updatable"""
        with pytest.raises(InvalidInputError):
            job_crud.update(db_session, seed["j1"], {"companyHandle": "c2"})

    @pytest.mark.parametrize("bad_id", [0, -1, "1", 1.5])
    def test_bad_id(self, db_session, seed, bad_id):
        """Test update with ids that are not positive integers"""
        with pytest.raises(InvalidInputError):
            job_crud.update(db_session, bad_id, {"title": "x"})

    def test_no_data(self, db_session, seed):
        """Test update with no fields"""
        with pytest.raises(InvalidInputError):
            job_crud.update(db_session, seed["j1"], {})

    def test_not_found(self, db_session, seed):
        """Test updating a job that doesn't exist"""
        with pytest.raises(NotFoundError):
            job_crud.update(db_session, 99999, {"title": "x"})

    def test_not_found_technology_only(self, db_session, seed):
        """Test a technology-only update of a missing job"""
        with pytest.raises(NotFoundError):
            job_crud.update(db_session, 99999, {"technology": ["python"]})


class TestRemove:

    def test_remove(self, db_session, seed):
        """Test removing a job"""
        job_crud.remove(db_session, seed["j1"])

        with pytest.raises(NotFoundError):
            job_crud.get(db_session, seed["j1"])

    def test_not_found(self, db_session, seed):
        """Test removing a job that doesn't exist"""
        with pytest.raises(NotFoundError):
            job_crud.remove(db_session, 99999)

    def test_id_must_be_integer(self, db_session, seed):
        """Test removing with a non-integer id"""
        with pytest.raises(InvalidInputError):
            job_crud.remove(db_session, "abc")
