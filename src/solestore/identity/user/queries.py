"""Read-side lookups over User records."""

from protean.utils.globals import current_domain

from solestore.identity.user.user import Role, User, normalise_email
from solestore.shared.pagination import fetch_all, paginate, sort_records

_SORTABLE_FIELDS = ("username", "email", "created_at", "updated_at")


def _users():
    return current_domain.repository_for(User)._dao.query


def find_by_email(email):
    """The user registered under `email`, or None."""
    found = _users().filter(email=normalise_email(email)).all()
    return found.items[0] if found.items else None


def _taken(field, value, exclude_id):
    matches = _users().filter(**{field: value}).all().items
    return any(str(user.id) != str(exclude_id) for user in matches)


def email_taken(email, exclude_id=None):
    return _taken("email", normalise_email(email), exclude_id)


def username_taken(username, exclude_id=None):
    return _taken("username", username.strip(), exclude_id)


def get_user(user_id):
    return current_domain.repository_for(User).get(user_id)


def list_users(role=None, search=None, sort_by="created_at", sort_order="desc", page=1, page_size=20):
    """Admin listing: optional role filter and a case-insensitive search over username and email."""
    queryset = _users()
    if role in [r.value for r in Role]:
        queryset = queryset.filter(role=role)
    users = fetch_all(queryset)

    if search:
        needle = search.lower()
        users = [u for u in users if needle in u.username.lower() or needle in u.email.lower()]

    attribute = sort_by if sort_by in _SORTABLE_FIELDS else "created_at"
    users = sort_records(users, attribute, descending=sort_order != "asc")
    return paginate(users, page, page_size)
