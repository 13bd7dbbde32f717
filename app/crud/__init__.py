"""
CRUD operations (Create, Read, Update, Delete) for the Jobly entities.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. Each module takes the request's Session as its
first argument and returns plain dicts shaped like the API responses.
"""

from app.crud import company, job, technology, technology_links, user

__all__ = ["company", "job", "technology", "technology_links", "user"]
