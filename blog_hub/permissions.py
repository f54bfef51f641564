"""
Ownership checks consulted before any blog or comment mutation.

A missing entity is NotFound; an existing entity owned by someone else
is Forbidden. Callers rely on the two being distinct.
"""
from .exceptions import Forbidden, NotFound, Unauthorized


def require_actor(user):
    """Return user if it is an authenticated actor, else raise Unauthorized."""
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthorized()
    return user


def is_owner(entity, user):
    return entity.user_id == user.pk


def ensure_owner(entity, user, action="modify"):
    if not is_owner(entity, user):
        label = entity._meta.verbose_name
        raise Forbidden(f"Not authorized to {action} this {label}")


def get_or_not_found(queryset, pk):
    """Fetch the row with this pk from queryset or raise NotFound."""
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        label = queryset.model._meta.verbose_name.capitalize()
        raise NotFound(f"{label} not found")


def get_owned_or_error(queryset, pk, user, action="modify"):
    """
    Fetch an entity the actor owns.

    Raises Unauthorized without an actor, NotFound when the entity does
    not exist and Forbidden when the actor is not its owner.
    """
    require_actor(user)
    entity = get_or_not_found(queryset, pk)
    ensure_owner(entity, user, action=action)
    return entity
